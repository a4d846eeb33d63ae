# [파일 설명]
# - 목적: 스키마 스냅샷을 보관하고 테이블/컬럼/관계 조회 기능을 제공한다.
# - 제공 기능: 메모리 저장소, JSON 스냅샷 로더, 이름 기반 검색 함수를 포함한다.
# - 입력/출력: 검색 조건을 받아 매칭된 레코드 리스트를 반환한다.
# - 주의 사항: 조회는 스냅샷을 변경하지 않으며 교체는 참조 단위로만 수행한다.
# - 연관 모듈: schema_bridge.api.mcp 라우터와 MCP 도구 디스패처에서 호출된다.
from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any, TypeVar

from schema_bridge.services.schema_models import Column, Relation, SchemaSnapshot, Table

logger = logging.getLogger(__name__)

MAX_COLUMN_RESULTS = 1000

T = TypeVar("T")


class SchemaSearchError(ValueError):
    """Raised when a schema lookup request cannot be served."""


class SchemaSnapshotError(ValueError):
    """Raised when a snapshot document is malformed."""


class InMemorySchemaRepository:
    def __init__(self, snapshot: SchemaSnapshot | None = None) -> None:
        self._snapshot = snapshot or SchemaSnapshot()

    @property
    def snapshot(self) -> SchemaSnapshot:
        return self._snapshot

    def replace(self, snapshot: SchemaSnapshot) -> None:
        logger.info(
            "replace_snapshot: tables=%s columns=%s relations=%s",
            len(snapshot.tables),
            len(snapshot.columns),
            len(snapshot.relations),
        )
        self._snapshot = snapshot

    def get_all_tables(self) -> tuple[Table, ...]:
        return self._snapshot.tables

    def get_all_columns(self) -> tuple[Column, ...]:
        return self._snapshot.columns

    def get_all_relations(self) -> tuple[Relation, ...]:
        return self._snapshot.relations


# [함수 설명]
# - 목적: JSON 문서에서 스키마 스냅샷을 생성한다.
# - 입력: path (tables/columns/relations 키를 가진 JSON 파일)
# - 출력: SchemaSnapshot
# - 에러 처리: 파일이 없으면 빈 스냅샷, 형식 오류는 SchemaSnapshotError로 보고한다.
def load_snapshot_file(path: str | Path) -> SchemaSnapshot:
    snapshot_path = Path(path)
    if not snapshot_path.is_file():
        logger.warning("load_snapshot_file: file not found path=%s", snapshot_path)
        return SchemaSnapshot()

    try:
        document = json.loads(snapshot_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise SchemaSnapshotError(f"Failed to read schema snapshot: {exc}") from exc

    snapshot = snapshot_from_document(document)
    logger.info(
        "load_snapshot_file: tables=%s columns=%s relations=%s",
        len(snapshot.tables),
        len(snapshot.columns),
        len(snapshot.relations),
    )
    return snapshot


def snapshot_from_document(document: Any) -> SchemaSnapshot:
    if not isinstance(document, dict):
        raise SchemaSnapshotError("Schema snapshot must be a JSON object.")
    try:
        return SchemaSnapshot.build(
            tables=[Table(**item) for item in document.get("tables", [])],
            columns=[Column(**item) for item in document.get("columns", [])],
            relations=[Relation(**item) for item in document.get("relations", [])],
        )
    except TypeError as exc:
        raise SchemaSnapshotError(f"Invalid schema record: {exc}") from exc


# [함수 설명]
# - 목적: 논리명/물리명/DB명/스키마명으로 테이블을 검색한다.
# - 입력: 검색 조건과 exact_match 여부
# - 출력: 조건을 모두 만족하는 Table 리스트
# - 에러 처리: 조건이 하나도 없으면 SchemaSearchError를 발생시킨다.
def find_tables(
    snapshot: SchemaSnapshot,
    logical_name: str | None = None,
    physical_name: str | None = None,
    database_name: str | None = None,
    schema_name: str | None = None,
    exact_match: bool = False,
) -> list[Table]:
    if not any(_present(value) for value in (logical_name, physical_name, database_name, schema_name)):
        raise SchemaSearchError(
            "At least one of the following must be provided: "
            "logical_name, physical_name, database_name, or schema_name."
        )
    logger.debug(
        "find_tables: logical=%s physical=%s database=%s schema=%s exact=%s",
        logical_name,
        physical_name,
        database_name,
        schema_name,
        exact_match,
    )

    return _filter(
        snapshot.tables,
        [
            (lambda t: t.logical_name, logical_name),
            (lambda t: t.physical_name, physical_name),
            (lambda t: t.database_name, database_name),
            (lambda t: t.schema_name, schema_name),
        ],
        exact_match,
    )


def find_columns(
    snapshot: SchemaSnapshot,
    logical_name: str | None = None,
    physical_name: str | None = None,
    table_name: str | None = None,
    exact_match: bool = False,
) -> list[Column]:
    if not any(_present(value) for value in (logical_name, physical_name, table_name)):
        raise SchemaSearchError(
            "At least one of the following must be provided: "
            "logical_name, physical_name, or table_name."
        )

    results = _filter(
        snapshot.columns,
        [
            (lambda c: c.logical_name, logical_name),
            (lambda c: c.physical_name, physical_name),
            (lambda c: c.table_physical_name, table_name),
        ],
        exact_match,
    )
    if len(results) > MAX_COLUMN_RESULTS:
        logger.warning(
            "find_columns: too many results count=%s max=%s", len(results), MAX_COLUMN_RESULTS
        )
        raise SchemaSearchError(
            f"Too many results found ({len(results)} items). "
            f"Maximum allowed is {MAX_COLUMN_RESULTS} items. "
            "Please specify a table name to narrow down the search or set exact_match=true."
        )
    return results


def find_relations(
    snapshot: SchemaSnapshot, table_name: str, exact_match: bool = False
) -> list[Relation]:
    if not _present(table_name):
        raise SchemaSearchError("The table_name must be provided.")

    return [
        relation
        for relation in snapshot.relations
        if _text_matches(relation.source_table, table_name, exact_match)
        or _text_matches(relation.target_table, table_name, exact_match)
    ]


def list_tables(snapshot: SchemaSnapshot) -> list[Table]:
    return list(snapshot.tables)


def _filter(
    records: Iterable[T],
    criteria: list[tuple[Callable[[T], str | None], str | None]],
    exact_match: bool,
) -> list[T]:
    active = [(getter, value) for getter, value in criteria if _present(value)]
    return [
        record
        for record in records
        if all(_text_matches(getter(record), value, exact_match) for getter, value in active)
    ]


def _text_matches(candidate: str | None, value: str, exact_match: bool) -> bool:
    if candidate is None:
        return False
    if exact_match:
        return candidate.lower() == value.lower()
    return value.lower() in candidate.lower()


def _present(value: str | None) -> bool:
    return bool(value and value.strip())
