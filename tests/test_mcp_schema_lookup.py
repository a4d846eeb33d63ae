import json

from fastapi.testclient import TestClient

from schema_bridge.main import app


def test_list_tables(client: TestClient) -> None:
    response = client.get("/mcp/schema/tables")

    assert response.status_code == 200
    names = [table["physical_name"] for table in response.json()["tables"]]
    assert names == ["orders", "customers", "M_PRODUCTS"]


def test_search_tables(client: TestClient) -> None:
    response = client.post("/mcp/schema/tables/search", json={"logical_name": "cust"})

    assert response.status_code == 200
    assert [table["physical_name"] for table in response.json()["tables"]] == ["customers"]


def test_search_tables_requires_criteria(client: TestClient) -> None:
    response = client.post("/mcp/schema/tables/search", json={"exact_match": True})

    assert response.status_code == 422


def test_search_columns(client: TestClient) -> None:
    response = client.post(
        "/mcp/schema/columns/search",
        json={"table_name": "ORDERS", "exact_match": True},
    )

    assert response.status_code == 200
    columns = response.json()["columns"]
    assert [column["physical_name"] for column in columns] == ["id", "customer_id", "amount"]
    assert columns[0]["data_type"] == "int"


def test_search_relations(client: TestClient) -> None:
    response = client.post("/mcp/schema/relations/search", json={"table_name": "customers"})

    assert response.status_code == 200
    assert response.json()["relations"] == [
        {
            "source_table": "orders",
            "source_column": "customer_id",
            "target_table": "customers",
            "target_column": "id",
        }
    ]


def test_replace_snapshot_is_used_by_validation(client: TestClient) -> None:
    response = client.put(
        "/mcp/schema/snapshot",
        json={
            "tables": [{"physical_name": "invoices", "logical_name": "Invoices"}],
            "columns": [],
            "relations": [],
        },
    )

    assert response.status_code == 200
    assert response.json() == {"tables": 1, "columns": 0, "relations": 0}

    validated = client.post("/mcp/sql/validate", json={"query": "SELECT * FROM orders"})
    assert validated.json()["schemaErrors"] == ["table 'orders' not found in schema"]


def test_snapshot_loaded_from_configured_file(tmp_path, monkeypatch) -> None:
    path = tmp_path / "schema.json"
    path.write_text(
        json.dumps({"tables": [{"physical_name": "ledger", "logical_name": "Ledger"}]}),
        encoding="utf-8",
    )
    monkeypatch.setenv("SCHEMA_SNAPSHOT_PATH", str(path))

    response = TestClient(app).get("/mcp/schema/tables")

    assert [table["physical_name"] for table in response.json()["tables"]] == ["ledger"]
