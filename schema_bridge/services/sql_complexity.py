# [파일 설명]
# - 목적: SQL 구조 복잡도를 결정론적 정수 점수로 계산한다.
# - 제공 기능: 점수 계산과 점수-등급(Low/Medium/High/Very High) 매핑을 제공한다.
# - 입력/출력: 원문 SQL을 받아 정수 점수 또는 등급 문자열을 반환한다.
# - 주의 사항: 실행 계획을 참조하지 않는 순수 어휘 기반 휴리스틱이다.
# - 연관 모듈: sql_performance, sql_validation에서 재사용된다.
from __future__ import annotations

import re

JOIN_PATTERN = re.compile(r"\bJOIN\b", re.IGNORECASE)
SUBQUERY_PATTERN = re.compile(r"\(\s*SELECT\b", re.IGNORECASE)
AGGREGATE_PATTERN = re.compile(r"\b(?:COUNT|SUM|AVG|MAX|MIN|GROUP_CONCAT)\s*\(", re.IGNORECASE)
CASE_WHEN_PATTERN = re.compile(r"\bCASE\s+WHEN\b", re.IGNORECASE)
UNION_PATTERN = re.compile(r"\bUNION\b", re.IGNORECASE)
WINDOW_PATTERN = re.compile(r"\bOVER\s*\(", re.IGNORECASE)

# (pattern, points per occurrence)
SCORE_WEIGHTS = (
    (JOIN_PATTERN, 1),
    (SUBQUERY_PATTERN, 2),
    (AGGREGATE_PATTERN, 1),
    (CASE_WHEN_PATTERN, 1),
    (UNION_PATTERN, 1),
    (WINDOW_PATTERN, 2),
)

LEVEL_THRESHOLDS = (
    (3, "Low"),
    (7, "Medium"),
    (12, "High"),
)
HIGHEST_LEVEL = "Very High"


def complexity_score(sql: str) -> int:
    score = 1
    for pattern, points in SCORE_WEIGHTS:
        score += len(pattern.findall(sql)) * points
    return score


def complexity_level(score: int) -> str:
    for upper_bound, label in LEVEL_THRESHOLDS:
        if score <= upper_bound:
            return label
    return HIGHEST_LEVEL


def count_subqueries(sql: str) -> int:
    return len(SUBQUERY_PATTERN.findall(sql))
