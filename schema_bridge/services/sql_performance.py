# [파일 설명]
# - 목적: SQL 원문에서 성능 저하 가능 패턴을 휴리스틱으로 탐지한다.
# - 제공 기능: 개별 패턴 검사, 복잡도 등급 및 지표(complexityScore, subqueryCount) 계산을 제공한다.
# - 입력/출력: 원문 SQL을 받아 PerformanceAnalysis를 반환한다.
# - 주의 사항: 결과는 권고 사항일 뿐이며 유효성 판정에는 영향을 주지 않는다.
# - 연관 모듈: sql_complexity의 점수 계산을 재사용한다.
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from schema_bridge.services.safe_sql import summarize_sql
from schema_bridge.services.sql_complexity import (
    complexity_level,
    complexity_score,
    count_subqueries,
)

logger = logging.getLogger(__name__)

SELECT_STAR_PATTERN = re.compile(r"\bSELECT\s+\*", re.IGNORECASE)
FROM_TABLE_PATTERN = re.compile(r"\bFROM\s+\w+", re.IGNORECASE)
WHERE_PATTERN = re.compile(r"\bWHERE\b", re.IGNORECASE)
ORDER_BY_PATTERN = re.compile(r"\bORDER\s+BY\b", re.IGNORECASE)
ROW_LIMIT_PATTERN = re.compile(r"\b(?:LIMIT|TOP)\b", re.IGNORECASE)
LEADING_WILDCARD_LIKE_PATTERN = re.compile(r"\bLIKE\s+['\"]%", re.IGNORECASE)

MAX_SUBQUERIES = 2


@dataclass
class PerformanceAnalysis:
    issues: list[str] = field(default_factory=list)
    complexity_level: str = "Low"
    metrics: dict[str, int] = field(default_factory=dict)


def analyze_performance(sql: str) -> PerformanceAnalysis:
    summary = summarize_sql(sql)
    issues: list[str] = []

    if SELECT_STAR_PATTERN.search(sql):
        issues.append(
            "Consider specifying column names instead of SELECT * for better performance"
        )

    if FROM_TABLE_PATTERN.search(sql) and not WHERE_PATTERN.search(sql):
        issues.append("Query without WHERE clause may cause full table scan")

    if ORDER_BY_PATTERN.search(sql) and not ROW_LIMIT_PATTERN.search(sql):
        issues.append("ORDER BY without LIMIT may cause performance issues on large datasets")

    subquery_count = count_subqueries(sql)
    if subquery_count > MAX_SUBQUERIES:
        issues.append(
            f"Query contains {subquery_count} subqueries - "
            "consider using JOINs for better performance"
        )

    if LEADING_WILDCARD_LIKE_PATTERN.search(sql):
        issues.append("LIKE patterns starting with % cannot use indexes efficiently")

    score = complexity_score(sql)
    logger.info(
        "analyze_performance: sql_len=%s sql_hash=%s issues=%s complexity=%s",
        summary["len"],
        summary["sha256_8"],
        len(issues),
        score,
    )
    return PerformanceAnalysis(
        issues=issues,
        complexity_level=complexity_level(score),
        metrics={"complexityScore": score, "subqueryCount": subquery_count},
    )
