# [파일 설명]
# - 목적: 구문 검증, 참조 추출, 스키마 교차 검증, 조인 권고, 성능 분석을 하나의 보고서로 집계한다.
# - 제공 기능: validate_sql 진입점과 ValidationReport/QueryAnalysis 결과 타입을 제공한다.
# - 입력/출력: SQL 원문, 스키마 저장소(또는 스냅샷), 옵션 플래그를 받아 보고서를 반환한다.
# - 주의 사항: 어떤 내부 예외도 호출자에게 전파하지 않으며 최악의 경우 단일 구문 오류로 기록한다.
# - 연관 모듈: schema_bridge.api.mcp 라우터와 MCP 도구 디스패처에서 호출된다.
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from schema_bridge.config import get_settings
from schema_bridge.services.safe_sql import summarize_sql
from schema_bridge.services.schema_models import SchemaRepository, SchemaSnapshot
from schema_bridge.services.sql_complexity import (
    complexity_level,
    complexity_score,
    count_subqueries,
)
from schema_bridge.services.sql_join_advisor import advise_joins
from schema_bridge.services.sql_performance import analyze_performance
from schema_bridge.services.sql_references import ColumnReference, extract_references
from schema_bridge.services.sql_schema_check import check_against_schema
from schema_bridge.services.sql_syntax import SqlglotParser, SqlParser, validate_syntax

logger = logging.getLogger(__name__)

QUERY_TYPES = ("SELECT", "INSERT", "UPDATE", "DELETE", "CREATE", "ALTER", "DROP")
UNKNOWN_QUERY_TYPE = "Unknown"

LEADING_KEYWORD_PATTERN = re.compile(r"^\s*([A-Za-z]+)")
WHERE_PATTERN = re.compile(r"\bWHERE\b", re.IGNORECASE)
ORDER_BY_PATTERN = re.compile(r"\bORDER\s+BY\b", re.IGNORECASE)
GROUP_BY_PATTERN = re.compile(r"\bGROUP\s+BY\b", re.IGNORECASE)
HAVING_PATTERN = re.compile(r"\bHAVING\b", re.IGNORECASE)


@dataclass(frozen=True)
class QueryAnalysis:
    tables_referenced: list[str]
    columns_referenced: list[ColumnReference]
    join_types: list[str]
    has_where_clause: bool
    has_order_by: bool
    has_group_by: bool
    has_having: bool
    has_subqueries: bool
    query_type: str
    estimated_complexity: str


@dataclass
class ValidationReport:
    is_valid: bool = False
    syntax_errors: list[str] = field(default_factory=list)
    schema_errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    performance_issues: list[str] | None = None
    analysis: QueryAnalysis | None = None
    summary: str = ""


# [함수 설명]
# - 목적: SQL 문장을 스키마 스냅샷 기준으로 검증하고 구조화된 보고서를 생성한다.
# - 입력: sql, schema(저장소 프로토콜 구현체), include_analysis, check_performance, parser
# - 출력: ValidationReport (is_valid == 구문 오류 0건 and 스키마 오류 0건)
# - 에러 처리: 내부 예외는 "Validation error: ..." 한 건의 구문 오류로 변환한다.
# - 결정론: 동일한 (sql, 스냅샷) 입력에 대해 항상 동일한 보고서를 반환한다.
# - 보안: 원문 SQL은 로그에 길이/해시로만 남긴다.
def validate_sql(
    sql: str,
    schema: SchemaRepository,
    include_analysis: bool = True,
    check_performance: bool = False,
    parser: SqlParser | None = None,
) -> ValidationReport:
    try:
        summary = summarize_sql(sql)
        logger.info(
            "validate_sql: sql_len=%s sql_hash=%s include_analysis=%s check_performance=%s",
            summary["len"],
            summary["sha256_8"],
            include_analysis,
            check_performance,
        )
        report = _run_pipeline(
            sql,
            schema,
            include_analysis,
            check_performance,
            parser or SqlglotParser(get_settings().sql_dialect),
        )
    except Exception as exc:  # noqa: BLE001 - every failure must land in the report
        logger.exception(
            "validate_sql: internal failure sql_len=%s error=%s",
            len(sql),
            type(exc).__name__,
        )
        report = ValidationReport(is_valid=False, syntax_errors=[f"Validation error: {exc}"])
        report.summary = build_summary(report)
    return report


def _run_pipeline(
    sql: str,
    schema: SchemaRepository,
    include_analysis: bool,
    check_performance: bool,
    parser: SqlParser,
) -> ValidationReport:
    snapshot = SchemaSnapshot.from_repository(schema)
    report = ValidationReport()

    report.syntax_errors = validate_syntax(sql, parser)

    references = extract_references(sql)
    schema_check = check_against_schema(references, snapshot)
    report.schema_errors = schema_check.errors
    report.warnings = schema_check.warnings + advise_joins(
        sql, references.tables, snapshot.relations
    )

    if check_performance:
        report.performance_issues = analyze_performance(sql).issues

    if include_analysis:
        report.analysis = QueryAnalysis(
            tables_referenced=references.tables,
            columns_referenced=references.columns,
            join_types=references.join_types,
            has_where_clause=bool(WHERE_PATTERN.search(sql)),
            has_order_by=bool(ORDER_BY_PATTERN.search(sql)),
            has_group_by=bool(GROUP_BY_PATTERN.search(sql)),
            has_having=bool(HAVING_PATTERN.search(sql)),
            has_subqueries=count_subqueries(sql) > 0,
            query_type=determine_query_type(sql),
            estimated_complexity=complexity_level(complexity_score(sql)),
        )

    report.is_valid = not report.syntax_errors and not report.schema_errors
    report.summary = build_summary(report)
    return report


def determine_query_type(sql: str) -> str:
    match = LEADING_KEYWORD_PATTERN.match(sql)
    if match is None:
        return UNKNOWN_QUERY_TYPE
    keyword = match.group(1).upper()
    return keyword if keyword in QUERY_TYPES else UNKNOWN_QUERY_TYPE


def build_summary(report: ValidationReport) -> str:
    verdict = "SQL query is valid" if report.is_valid else "SQL query has issues"
    counts = [
        f"{len(report.syntax_errors)} syntax error(s)",
        f"{len(report.schema_errors)} schema error(s)",
        f"{len(report.warnings)} warning(s)",
    ]
    if report.performance_issues is not None:
        counts.append(f"{len(report.performance_issues)} performance issue(s)")

    summary = f"{verdict}: {', '.join(counts)}"
    if report.analysis is not None:
        summary += f". Query complexity: {report.analysis.estimated_complexity}"
    return summary
