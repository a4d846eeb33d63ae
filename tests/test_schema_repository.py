import json

import pytest

from schema_bridge.services.schema_models import Column, SchemaSnapshot
from schema_bridge.services.schema_repository import (
    MAX_COLUMN_RESULTS,
    InMemorySchemaRepository,
    SchemaSearchError,
    SchemaSnapshotError,
    find_columns,
    find_relations,
    find_tables,
    list_tables,
    load_snapshot_file,
)


def test_find_tables_contains_and_exact(sample_snapshot) -> None:
    contains = find_tables(sample_snapshot, physical_name="ORD")
    exact = find_tables(sample_snapshot, physical_name="ord", exact_match=True)

    assert [table.physical_name for table in contains] == ["orders"]
    assert exact == []


def test_find_tables_combines_criteria(sample_snapshot) -> None:
    tables = find_tables(sample_snapshot, logical_name="products", schema_name="dbo")

    assert [table.physical_name for table in tables] == ["M_PRODUCTS"]
    assert find_tables(sample_snapshot, logical_name="orders", schema_name="dbo") == []


def test_find_tables_requires_a_criterion(sample_snapshot) -> None:
    with pytest.raises(SchemaSearchError):
        find_tables(sample_snapshot, logical_name="  ")


def test_find_columns_by_table(sample_snapshot) -> None:
    columns = find_columns(sample_snapshot, table_name="orders", exact_match=True)

    assert [column.physical_name for column in columns] == ["id", "customer_id", "amount"]


def test_find_columns_by_logical_name(sample_snapshot) -> None:
    columns = find_columns(sample_snapshot, logical_name="customer id")

    assert {(column.table_physical_name, column.physical_name) for column in columns} == {
        ("orders", "customer_id"),
        ("customers", "id"),
    }


def test_find_columns_rejects_oversized_results() -> None:
    snapshot = SchemaSnapshot.build(
        columns=[
            Column("wide", f"c{index}", f"Column {index}", "int")
            for index in range(MAX_COLUMN_RESULTS + 1)
        ]
    )

    with pytest.raises(SchemaSearchError, match="Too many results"):
        find_columns(snapshot, table_name="wide")


def test_find_relations_matches_either_end(sample_snapshot) -> None:
    assert len(find_relations(sample_snapshot, "customers", exact_match=True)) == 1
    assert len(find_relations(sample_snapshot, "order")) == 1
    assert find_relations(sample_snapshot, "products") == []

    with pytest.raises(SchemaSearchError):
        find_relations(sample_snapshot, "")


def test_list_tables(sample_snapshot) -> None:
    assert [table.physical_name for table in list_tables(sample_snapshot)] == [
        "orders",
        "customers",
        "M_PRODUCTS",
    ]


def test_repository_replace_swaps_snapshot(sample_snapshot) -> None:
    repository = InMemorySchemaRepository()
    assert repository.get_all_tables() == ()

    repository.replace(sample_snapshot)

    assert repository.snapshot is sample_snapshot
    assert SchemaSnapshot.from_repository(repository) == sample_snapshot


def test_load_snapshot_file(tmp_path) -> None:
    path = tmp_path / "schema.json"
    path.write_text(
        json.dumps(
            {
                "tables": [{"physical_name": "orders", "logical_name": "Orders"}],
                "columns": [
                    {
                        "table_physical_name": "orders",
                        "physical_name": "id",
                        "logical_name": "Order ID",
                        "data_type": "int",
                    }
                ],
                "relations": [],
            }
        ),
        encoding="utf-8",
    )

    snapshot = load_snapshot_file(path)

    assert [table.physical_name for table in snapshot.tables] == ["orders"]
    assert snapshot.columns[0].logical_name == "Order ID"
    assert snapshot.relations == ()


def test_load_snapshot_file_missing_returns_empty(tmp_path) -> None:
    assert load_snapshot_file(tmp_path / "absent.json") == SchemaSnapshot()


def test_load_snapshot_file_rejects_bad_documents(tmp_path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    unknown_key = tmp_path / "unknown.json"
    unknown_key.write_text(json.dumps({"tables": [{"name": "orders"}]}), encoding="utf-8")

    with pytest.raises(SchemaSnapshotError):
        load_snapshot_file(broken)
    with pytest.raises(SchemaSnapshotError):
        load_snapshot_file(unknown_key)
