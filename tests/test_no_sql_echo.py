from fastapi.testclient import TestClient

SENTINEL = "SQL_SENTINEL__FROM_DBO"


def test_no_sql_echo_validate(client: TestClient) -> None:
    response = client.post(
        "/mcp/sql/validate",
        json={
            "query": f"SELECT * FROM orders WHERE note = '{SENTINEL}'",
            "checkPerformance": True,
        },
    )

    assert response.status_code == 200
    assert SENTINEL not in response.text


def test_no_sql_echo_in_logs(client: TestClient, caplog) -> None:
    caplog.set_level("DEBUG")

    client.post(
        "/mcp/sql/validate",
        json={"query": f"SELECT id FROM orders WHERE note = '{SENTINEL}'"},
    )

    assert caplog.records
    assert SENTINEL not in caplog.text
