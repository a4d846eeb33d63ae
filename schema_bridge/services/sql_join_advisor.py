# [파일 설명]
# - 목적: 조인 조건 누락을 감지하고 알려진 관계 기반의 조인 조건을 제안한다.
# - 제공 기능: ON 누락 경고, 테이블 쌍별 표준 조인 조건 제안을 제공한다.
# - 입력/출력: SQL 원문, 추출된 테이블 목록, 스냅샷 관계를 받아 경고 문자열 목록을 반환한다.
# - 주의 사항: 문자열 포함 여부만 비교하므로 별칭/피연산자 순서가 다르면 제안이 남는다.
# - 연관 모듈: sql_validation 집계기에서 호출된다.
from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from itertools import combinations

import networkx as nx

from schema_bridge.services.schema_models import Relation
from schema_bridge.services.sql_references import IDENTIFIER

logger = logging.getLogger(__name__)

JOIN_TARGET_PATTERN = re.compile(
    rf"\bJOIN\s+{IDENTIFIER}(?:\s+AS\s+{IDENTIFIER})?",
    re.IGNORECASE,
)
ON_FOLLOWS_PATTERN = re.compile(r"\s+ON\b", re.IGNORECASE)
EQUALS_SPACING_PATTERN = re.compile(r"\s*=\s*")

MISSING_ON_WARNING = (
    "JOIN detected without proper ON condition - this may result in a cartesian product"
)


def advise_joins(sql: str, tables: Sequence[str], relations: Sequence[Relation]) -> list[str]:
    warnings: list[str] = []

    if has_join_without_on(sql):
        warnings.append(MISSING_ON_WARNING)

    for condition in suggest_join_conditions(sql, tables, relations):
        warnings.append(f"Consider using proper JOIN condition: {condition}")

    logger.info("advise_joins: tables=%s warnings=%s", len(tables), len(warnings))
    return warnings


def has_join_without_on(sql: str) -> bool:
    for match in JOIN_TARGET_PATTERN.finditer(sql):
        if not ON_FOLLOWS_PATTERN.match(sql, match.end()):
            return True
    return False


# [함수 설명]
# - 목적: 참조 테이블 쌍마다 스냅샷 관계로부터 표준 조인 조건을 찾아 누락된 것만 반환한다.
# - 입력: sql, 참조 테이블 목록, 관계 목록
# - 출력: "src.col = tgt.col" 형식의 조건 리스트 (테이블 쌍 순서 유지)
# - 결정론: 같은 테이블 쌍에 관계가 여러 개면 먼저 등록된 관계만 사용한다.
def suggest_join_conditions(
    sql: str, tables: Sequence[str], relations: Sequence[Relation]
) -> list[str]:
    distinct = _distinct_casefold(tables)
    if len(distinct) < 2 or not relations:
        return []

    graph = _relation_graph(relations)
    haystack = _normalize_condition(sql)
    suggestions: list[str] = []

    for left, right in combinations(distinct, 2):
        left_key, right_key = left.lower(), right.lower()
        if not graph.has_edge(left_key, right_key):
            continue
        condition = graph.edges[left_key, right_key]["relation"].join_condition()
        if _normalize_condition(condition) not in haystack:
            suggestions.append(condition)
    return suggestions


def _relation_graph(relations: Sequence[Relation]) -> nx.Graph:
    graph = nx.Graph()
    for relation in relations:
        source = relation.source_table.lower()
        target = relation.target_table.lower()
        if graph.has_edge(source, target):
            continue
        graph.add_edge(source, target, relation=relation)
    return graph


def _normalize_condition(text: str) -> str:
    return EQUALS_SPACING_PATTERN.sub("=", text).lower()


def _distinct_casefold(values: Sequence[str]) -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for value in values:
        if value.lower() not in seen:
            seen.add(value.lower())
            ordered.append(value)
    return ordered
