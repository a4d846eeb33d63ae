# [파일 설명]
# - 목적: 테스트 공통 경로 설정과 스키마 스냅샷 픽스처를 제공한다.
# - 제공 기능: 샘플 스냅샷, 저장소 초기화, TestClient 픽스처를 포함한다.
# - 입력/출력: 고정된 테이블/컬럼/관계 레코드를 사용한다.
# - 주의 사항: 전역 저장소와 설정 캐시는 테스트마다 초기화한다.
# - 연관 모듈: schema_bridge.main, schema_bridge.shared, schema_bridge.config와 연동된다.
from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))
from fastapi.testclient import TestClient

from schema_bridge.config import get_settings
from schema_bridge.main import app
from schema_bridge.services.schema_models import Column, Relation, SchemaSnapshot, Table
from schema_bridge.shared import get_schema_repository, reset_schema_repository


def build_sample_snapshot() -> SchemaSnapshot:
    return SchemaSnapshot.build(
        tables=[
            Table(physical_name="orders", logical_name="Orders", primary_key="id"),
            Table(physical_name="customers", logical_name="Customers", primary_key="id"),
            Table(
                physical_name="M_PRODUCTS",
                logical_name="Products",
                database_name="sales",
                schema_name="dbo",
            ),
        ],
        columns=[
            Column("orders", "id", "Order ID", "int"),
            Column("orders", "customer_id", "Customer ID", "int"),
            Column("orders", "amount", "Amount", "decimal"),
            Column("customers", "id", "Customer ID", "int"),
            Column("customers", "name", "Customer Name", "varchar"),
            Column("M_PRODUCTS", "PRODUCT_NAME", "Product Name", "varchar"),
        ],
        relations=[
            Relation("orders", "customer_id", "customers", "id"),
        ],
    )


@pytest.fixture(autouse=True)
def _reset_shared_state(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("SCHEMA_SNAPSHOT_PATH", raising=False)
    monkeypatch.delenv("SQL_DIALECT", raising=False)
    monkeypatch.delenv("MCP_SUPPORTED_PROTOCOL_VERSIONS", raising=False)
    monkeypatch.delenv("MCP_ALLOWED_ORIGINS", raising=False)
    get_settings.cache_clear()
    reset_schema_repository()
    yield
    get_settings.cache_clear()
    reset_schema_repository()


@pytest.fixture
def sample_snapshot() -> SchemaSnapshot:
    return build_sample_snapshot()


@pytest.fixture
def client(sample_snapshot: SchemaSnapshot) -> TestClient:
    get_schema_repository().replace(sample_snapshot)
    return TestClient(app)
