from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from schema_bridge.services.safe_sql import summarize_sql

logger = logging.getLogger(__name__)

IDENTIFIER = r"[A-Za-z_][A-Za-z0-9_]*"

TABLE_PATTERN = re.compile(rf"\b(?:FROM|JOIN)\s+({IDENTIFIER})", re.IGNORECASE)
QUALIFIED_COLUMN_PATTERN = re.compile(rf"\b({IDENTIFIER})\.({IDENTIFIER})\b")
PROJECTION_PATTERN = re.compile(r"\bSELECT\s+(.*?)\s+FROM\b", re.IGNORECASE | re.DOTALL)
PLAIN_IDENTIFIER_PATTERN = re.compile(rf"^{IDENTIFIER}$")
JOIN_TYPE_PATTERN = re.compile(
    r"\b(?:INNER|LEFT(?:\s+OUTER)?|RIGHT(?:\s+OUTER)?|FULL(?:\s+OUTER)?|CROSS)\s+JOIN\b",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ColumnReference:
    table: str
    column: str


@dataclass(frozen=True)
class ExtractedReferences:
    tables: list[str] = field(default_factory=list)
    columns: list[ColumnReference] = field(default_factory=list)
    join_types: list[str] = field(default_factory=list)


# [함수 설명]
# - 목적: SQL 원문에서 참조 테이블/컬럼/조인 유형을 어휘 수준으로 추출한다.
# - 입력: sql: str
# - 출력: ExtractedReferences
# - 주의 사항: 문자열 리터럴과 주석은 별도로 처리하지 않으므로 오탐이 발생할 수 있다.
# - 결정론: 모든 목록은 원문 등장 순서를 유지한다.
def extract_references(sql: str) -> ExtractedReferences:
    summary = summarize_sql(sql)
    logger.info(
        "extract_references: sql_len=%s sql_hash=%s", summary["len"], summary["sha256_8"]
    )
    return ExtractedReferences(
        tables=extract_tables(sql),
        columns=extract_column_references(sql),
        join_types=extract_join_types(sql),
    )


def extract_tables(sql: str) -> list[str]:
    return _ordered_unique_casefold(match.group(1) for match in TABLE_PATTERN.finditer(sql))


def extract_column_references(sql: str) -> list[ColumnReference]:
    columns = [
        ColumnReference(table=match.group(1), column=match.group(2))
        for match in QUALIFIED_COLUMN_PATTERN.finditer(sql)
    ]

    projection = PROJECTION_PATTERN.search(sql)
    if projection is None or projection.group(1).strip() == "*":
        return columns

    for item in _split_top_level(projection.group(1)):
        tokens = item.split()
        if not tokens:
            continue
        # first token only; anything after whitespace is an alias
        name = tokens[0]
        if PLAIN_IDENTIFIER_PATTERN.match(name):
            columns.append(ColumnReference(table="", column=name))
    return columns


def extract_join_types(sql: str) -> list[str]:
    return _ordered_unique_casefold(
        " ".join(match.group(0).upper().split()) for match in JOIN_TYPE_PATTERN.finditer(sql)
    )


def _split_top_level(text: str) -> list[str]:
    items: list[str] = []
    depth = 0
    start = 0
    for index, char in enumerate(text):
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(depth - 1, 0)
        elif char == "," and depth == 0:
            items.append(text[start:index])
            start = index + 1
    items.append(text[start:])
    return items


def _ordered_unique_casefold(values) -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for value in values:
        key = value.lower()
        if key in seen:
            continue
        seen.add(key)
        ordered.append(value)
    return ordered
