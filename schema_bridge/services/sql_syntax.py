# [파일 설명]
# - 목적: 외부 SQL 파서(sqlglot)에 구문 검증을 위임한다.
# - 제공 기능: 파서 어댑터(SqlglotParser)와 오류 문자열 변환(validate_syntax)을 제공한다.
# - 입력/출력: SQL 원문을 받아 "Line L, Column C: 메시지" 형식의 오류 목록을 반환한다.
# - 주의 사항: 파서에서 발생한 예외는 단일 오류 항목으로 변환하며 전파하지 않는다.
# - 연관 모듈: sql_validation 집계기에서 호출된다.
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from sqlglot import parse
from sqlglot.errors import ErrorLevel, ParseError, TokenError

from schema_bridge.services.safe_sql import summarize_sql

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParseIssue:
    line: int
    column: int
    message: str


class SqlParser(Protocol):
    def parse(self, sql: str) -> list[ParseIssue]: ...


class SqlglotParser:
    """Grammar-level parser backed by sqlglot for a single dialect."""

    def __init__(self, dialect: str = "tsql") -> None:
        self.dialect = dialect

    def parse(self, sql: str) -> list[ParseIssue]:
        if not sql.strip():
            return [ParseIssue(line=1, column=1, message="Empty SQL statement")]

        try:
            parse(sql, read=self.dialect, error_level=ErrorLevel.RAISE)
        except ParseError as exc:
            issues = [
                ParseIssue(
                    line=int(error.get("line") or 1),
                    column=int(error.get("col") or 1),
                    message=str(error.get("description") or "Invalid syntax"),
                )
                for error in exc.errors
            ]
            return issues or [ParseIssue(line=1, column=1, message=str(exc))]
        except TokenError as exc:
            return [ParseIssue(line=1, column=1, message=str(exc))]
        return []


# [함수 설명]
# - 목적: 파서 결과를 사용자에게 노출할 구문 오류 문자열 목록으로 변환한다.
# - 입력: sql: str, parser: SqlParser
# - 출력: 구문 오류 문자열 리스트 (오류가 없으면 빈 리스트)
# - 에러 처리: 파서 예외는 "Parse error: ..." 한 건으로 기록한다.
def validate_syntax(sql: str, parser: SqlParser) -> list[str]:
    summary = summarize_sql(sql)
    try:
        issues = parser.parse(sql)
    except Exception as exc:  # noqa: BLE001 - parser failures are reported, not raised
        logger.warning(
            "validate_syntax: parser failure sql_len=%s sql_hash=%s error=%s",
            summary["len"],
            summary["sha256_8"],
            type(exc).__name__,
        )
        return [f"Parse error: {exc}"]

    logger.info(
        "validate_syntax: sql_len=%s sql_hash=%s issues=%s",
        summary["len"],
        summary["sha256_8"],
        len(issues),
    )
    return [f"Line {issue.line}, Column {issue.column}: {issue.message}" for issue in issues]
