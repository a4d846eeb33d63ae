# [파일 설명]
# - 목적: 환경 변수 기반 서버 설정을 한 곳에서 로드한다.
# - 제공 기능: 스키마 스냅샷 경로, SQL 방언, 로그 레벨, MCP 프로토콜 버전 목록을 제공한다.
# - 입력/출력: os.environ을 읽어 불변 Settings 객체를 반환한다.
# - 주의 사항: 설정은 최초 호출 시 캐시되며 테스트에서는 cache_clear로 초기화한다.
# - 연관 모듈: app 진입점(schema_bridge.main)과 MCP 라우터에서 사용된다.
from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from functools import lru_cache

DEFAULT_SQL_DIALECT = "tsql"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_SUPPORTED_PROTOCOL_VERSIONS = ("2025-03-26", "2025-11-25")


@dataclass(frozen=True)
class Settings:
    schema_snapshot_path: str | None
    sql_dialect: str
    log_level: str
    supported_protocol_versions: frozenset[str]
    allowed_origins: frozenset[str] = frozenset()
    host: str = "127.0.0.1"
    port: int = 8000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    snapshot_path = os.getenv("SCHEMA_SNAPSHOT_PATH", "").strip() or None
    return Settings(
        schema_snapshot_path=snapshot_path,
        sql_dialect=os.getenv("SQL_DIALECT", "").strip() or DEFAULT_SQL_DIALECT,
        log_level=os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper() or DEFAULT_LOG_LEVEL,
        supported_protocol_versions=_load_supported_protocol_versions(),
        allowed_origins=_load_csv("MCP_ALLOWED_ORIGINS"),
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
    )


# [함수 설명]
# - 목적: MCP_SUPPORTED_PROTOCOL_VERSIONS 환경 변수를 해석한다.
# - 입력: 콤마 구분 문자열
# - 출력: 지원 버전 집합
# - 에러 처리: 빈 값은 기본 버전 목록으로 대체한다.
def _load_supported_protocol_versions() -> frozenset[str]:
    env_value = os.getenv("MCP_SUPPORTED_PROTOCOL_VERSIONS", "").strip()
    if not env_value:
        return frozenset(DEFAULT_SUPPORTED_PROTOCOL_VERSIONS)
    return frozenset(item.strip() for item in env_value.split(",") if item.strip())


# [함수 설명]
# - 목적: MCP_ALLOWED_ORIGINS 처럼 콤마로 구분된 환경 변수를 집합으로 읽는다.
# - 출력: 빈 값이면 빈 집합 (Origin 제한 없음)
def _load_csv(name: str) -> frozenset[str]:
    env_value = os.getenv(name, "")
    return frozenset(item.strip() for item in env_value.split(",") if item.strip())


def configure_logging(log_level: str) -> None:
    # stdout is reserved for protocol traffic when running over stdio bridges
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
