from schema_bridge.services.sql_references import extract_references
from schema_bridge.services.sql_schema_check import check_against_schema


def test_known_tables_and_columns_pass(sample_snapshot) -> None:
    sql = "SELECT orders.id, amount FROM orders"

    result = check_against_schema(extract_references(sql), sample_snapshot)

    assert result.errors == []
    assert result.warnings == []


def test_table_matches_on_logical_name_case_insensitively(sample_snapshot) -> None:
    result = check_against_schema(extract_references("SELECT * FROM products"), sample_snapshot)

    assert result.errors == []


def test_unknown_table_is_an_error(sample_snapshot) -> None:
    result = check_against_schema(
        extract_references("SELECT x FROM unknown_tbl"), sample_snapshot
    )

    assert result.errors == ["table 'unknown_tbl' not found in schema"]
    assert result.warnings == [
        "column 'x' not found in schema or table context unclear"
    ]


def test_column_in_wrong_table_is_only_a_warning(sample_snapshot) -> None:
    result = check_against_schema(
        extract_references("SELECT orders.name FROM orders"), sample_snapshot
    )

    assert result.errors == []
    assert result.warnings == [
        "column 'orders.name' not found in schema or table context unclear"
    ]


def test_alias_qualified_column_is_reported_as_unresolved(sample_snapshot) -> None:
    result = check_against_schema(extract_references("SELECT o.id FROM orders o"), sample_snapshot)

    assert result.errors == []
    assert result.warnings == ["column 'o.id' not found in schema or table context unclear"]
