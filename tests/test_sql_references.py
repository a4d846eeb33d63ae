from schema_bridge.services.sql_references import (
    ColumnReference,
    extract_column_references,
    extract_join_types,
    extract_references,
    extract_tables,
)


def test_extract_tables_dedupes_case_insensitively_in_textual_order() -> None:
    sql = """
    SELECT *
    FROM orders o
    JOIN Customers c ON o.customer_id = c.id
    join ORDERS x ON x.id = o.id
    """

    assert extract_tables(sql) == ["orders", "Customers"]


def test_extract_tables_skips_derived_tables() -> None:
    sql = "SELECT t.id FROM (SELECT id FROM orders) t"

    assert extract_tables(sql) == ["orders"]


def test_extract_column_references_qualified_and_projection() -> None:
    sql = "SELECT o.id, name AS n, COUNT(*) total FROM orders o"

    assert extract_column_references(sql) == [
        ColumnReference(table="o", column="id"),
        ColumnReference(table="", column="name"),
    ]


def test_extract_column_references_skips_star_projection() -> None:
    assert extract_column_references("SELECT * FROM orders") == []


def test_extract_column_references_splits_on_top_level_commas_only() -> None:
    sql = "SELECT IIF(amount > 1, total, 0) flag, id FROM orders"

    assert extract_column_references(sql) == [ColumnReference(table="", column="id")]


def test_extract_column_references_keeps_duplicates() -> None:
    sql = "SELECT a.id FROM a JOIN b ON a.id=b.a_id"

    assert extract_column_references(sql) == [
        ColumnReference(table="a", column="id"),
        ColumnReference(table="a", column="id"),
        ColumnReference(table="b", column="a_id"),
    ]


def test_extract_join_types_normalizes_and_dedupes() -> None:
    sql = """
    SELECT * FROM a
    left   outer join b ON a.x = b.x
    INNER JOIN c ON c.y = a.y
    LEFT OUTER JOIN d ON d.z = a.z
    cross join e
    """

    assert extract_join_types(sql) == ["LEFT OUTER JOIN", "INNER JOIN", "CROSS JOIN"]


def test_plain_join_has_no_join_type() -> None:
    assert extract_join_types("SELECT * FROM a JOIN b ON a.id = b.id") == []


def test_extract_references_reads_inside_string_literals() -> None:
    # lexical scan only: keywords inside literals are picked up as well
    references = extract_references("SELECT id FROM orders WHERE note = 'shipped from depot'")

    assert references.tables == ["orders", "depot"]
    assert references.columns == [ColumnReference(table="", column="id")]
    assert references.join_types == []
