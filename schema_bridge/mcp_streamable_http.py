# [파일 설명]
# - 목적: Streamable HTTP MCP(JSON-RPC) 엔드포인트를 제공한다.
# - 제공 기능: initialize/tools/list/tools/call/ping 처리 및 프로토콜 버전 검증을 수행한다.
# - 입력/출력: JSON-RPC 요청을 받아 표준 응답 또는 202/405를 반환한다.
# - 주의 사항: 알림 메시지는 202로 응답하며, 도구 실행 실패는 isError로 표시한다.
# - 연관 모듈: schema_bridge.api.mcp 라우트 함수를 도구 구현으로 재사용한다.
from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from fastapi import HTTPException, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from schema_bridge.api.mcp import (
    FindColumnRequest,
    FindRelationsRequest,
    FindTableRequest,
    ValidateSqlRequest,
    schema_find_columns,
    schema_find_relations,
    schema_find_tables,
    schema_list_tables,
    sql_validate,
)
from schema_bridge.config import get_settings

logger = logging.getLogger(__name__)

DEFAULT_PROTOCOL_VERSION = "2025-03-26"
SERVER_PROTOCOL_VERSION = "2025-11-25"

_TEXT = {"type": "string"}
_EXACT_MATCH = {
    "type": "boolean",
    "description": "Exact (case-insensitive) match instead of contains.",
    "default": False,
}

TOOL_DEFINITIONS: list[dict[str, Any]] = [
    {
        "name": "sql.validate",
        "description": (
            "Validate a SQL statement against the current schema: syntax, unknown tables, "
            "unresolved columns, join conditions and optional performance advisories."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "SQL statement to validate."},
                "includeAnalysis": {"type": "boolean", "default": True},
                "checkPerformance": {"type": "boolean", "default": False},
            },
            "required": ["query"],
        },
    },
    {
        "name": "schema.list_tables",
        "description": "List all tables of the current schema.",
        "inputSchema": {"type": "object", "properties": {}},
    },
    {
        "name": "schema.find_table",
        "description": "Search tables by logical, physical, database or schema name.",
        "inputSchema": {
            "type": "object",
            "properties": {
                "logical_name": _TEXT,
                "physical_name": _TEXT,
                "database_name": _TEXT,
                "schema_name": _TEXT,
                "exact_match": _EXACT_MATCH,
            },
        },
    },
    {
        "name": "schema.find_column",
        "description": (
            "Search columns by logical or physical name, optionally within one table. "
            "Set exact_match when the result is too large."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "logical_name": _TEXT,
                "physical_name": _TEXT,
                "table_name": _TEXT,
                "exact_match": _EXACT_MATCH,
            },
        },
    },
    {
        "name": "schema.find_relations",
        "description": "Find relations and join conditions involving a table.",
        "inputSchema": {
            "type": "object",
            "properties": {"table_name": _TEXT, "exact_match": _EXACT_MATCH},
            "required": ["table_name"],
        },
    },
]


def _call_validate(arguments: dict[str, Any]) -> tuple[str, BaseModel]:
    result = sql_validate(ValidateSqlRequest(**arguments))
    return result.summary, result


def _call_list_tables(_: dict[str, Any]) -> tuple[str, BaseModel]:
    result = schema_list_tables()
    return f"Found {len(result.tables)} table(s).", result


def _call_find_table(arguments: dict[str, Any]) -> tuple[str, BaseModel]:
    result = schema_find_tables(FindTableRequest(**arguments))
    return f"Found {len(result.tables)} table(s).", result


def _call_find_column(arguments: dict[str, Any]) -> tuple[str, BaseModel]:
    result = schema_find_columns(FindColumnRequest(**arguments))
    return f"Found {len(result.columns)} column(s).", result


def _call_find_relations(arguments: dict[str, Any]) -> tuple[str, BaseModel]:
    result = schema_find_relations(FindRelationsRequest(**arguments))
    return f"Found {len(result.relations)} relation(s).", result


TOOL_HANDLERS: dict[str, Callable[[dict[str, Any]], tuple[str, BaseModel]]] = {
    "sql.validate": _call_validate,
    "schema.list_tables": _call_list_tables,
    "schema.find_table": _call_find_table,
    "schema.find_column": _call_find_column,
    "schema.find_relations": _call_find_relations,
}


def _origin_allowed(origin: str | None) -> bool:
    allowed = get_settings().allowed_origins
    return origin is None or not allowed or origin in allowed


# [함수 설명]
# - 목적: MCP-Protocol-Version 헤더를 검증한다.
# - 입력: 요청 헤더
# - 출력: 협상된 프로토콜 버전 문자열
# - 에러 처리: 지원하지 않는 버전은 400으로 응답한다.
def _resolve_protocol_version(headers: Any) -> str:
    header_value = headers.get("MCP-Protocol-Version")
    if header_value:
        if header_value not in get_settings().supported_protocol_versions:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Unsupported MCP-Protocol-Version",
            )
        return header_value
    return DEFAULT_PROTOCOL_VERSION


def _jsonrpc_response(
    request_id: Any, *, result: Any | None = None, error: Any | None = None
) -> JSONResponse:
    payload: dict[str, Any] = {"jsonrpc": "2.0", "id": request_id}
    if error is not None:
        payload["error"] = error
    else:
        payload["result"] = result
    return JSONResponse(status_code=status.HTTP_200_OK, content=payload)


def _handle_initialize(_: dict[str, Any]) -> dict[str, Any]:
    return {
        "protocolVersion": SERVER_PROTOCOL_VERSION,
        "capabilities": {"tools": {"listChanged": False}},
        "serverInfo": {
            "name": "sql-schema-bridge",
            "version": "0.1.0",
            "description": "Schema metadata lookup and SQL validation MCP server",
        },
        "instructions": (
            "Use schema.* tools to explore tables, columns and relations, "
            "then sql.validate to check a statement before running it."
        ),
    }


def _handle_tools_list() -> dict[str, Any]:
    return {"tools": TOOL_DEFINITIONS}


def _build_tool_result(
    summary: str,
    structured_content: dict[str, Any] | None,
    *,
    is_error: bool = False,
) -> dict[str, Any]:
    return {
        "content": [{"type": "text", "text": summary}],
        "structuredContent": structured_content or {},
        "isError": is_error,
    }


# [함수 설명]
# - 목적: tools/call 요청을 해당 도구 핸들러로 전달한다.
# - 입력: params 딕셔너리 (name, arguments)
# - 출력: CallToolResult 딕셔너리
# - 에러 처리: 입력 오류/예외는 isError로 반환한다.
def _handle_tools_call(params: dict[str, Any]) -> dict[str, Any]:
    name = params.get("name")
    arguments = params.get("arguments", {})
    if not name:
        return _build_tool_result("Tool name is required.", None, is_error=True)
    handler = TOOL_HANDLERS.get(name)
    if handler is None:
        return _build_tool_result(f"Unknown tool: {name}.", None, is_error=True)
    if not isinstance(arguments, dict):
        return _build_tool_result("Tool arguments must be an object.", None, is_error=True)
    try:
        summary, result = handler(arguments)
    except HTTPException as exc:
        return _build_tool_result(f"Tool execution failed: {exc.detail}", None, is_error=True)
    except Exception as exc:  # noqa: BLE001 - tool errors returned via isError
        logger.warning("tools/call failed: tool=%s error=%s", name, type(exc).__name__)
        return _build_tool_result(f"Tool execution failed: {exc}.", None, is_error=True)
    return _build_tool_result(summary, result.model_dump(by_alias=True), is_error=False)


async def mcp_post(request: Request) -> Response:
    origin = request.headers.get("origin")
    if not _origin_allowed(origin):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Origin not allowed")
    _resolve_protocol_version(request.headers)

    try:
        payload = await request.json()
    except Exception as exc:  # noqa: BLE001 - request validation
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid JSON payload",
        ) from exc

    if not isinstance(payload, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid JSON-RPC payload",
        )

    method = payload.get("method")
    if method == "notifications/initialized":
        return Response(status_code=status.HTTP_202_ACCEPTED)

    request_id = payload.get("id")
    if method is None or request_id is None:
        return Response(status_code=status.HTTP_202_ACCEPTED)

    params = payload.get("params") or {}
    if not isinstance(params, dict):
        return _jsonrpc_response(
            request_id,
            error={"code": -32602, "message": "Invalid params"},
        )

    if method == "initialize":
        return _jsonrpc_response(request_id, result=_handle_initialize(params))
    if method == "tools/list":
        return _jsonrpc_response(request_id, result=_handle_tools_list())
    if method == "tools/call":
        return _jsonrpc_response(request_id, result=_handle_tools_call(params))
    if method == "ping":
        return _jsonrpc_response(request_id, result={})

    return _jsonrpc_response(
        request_id,
        error={"code": -32601, "message": f"Method not found: {method}"},
    )


def mcp_get() -> Response:
    return Response(status_code=status.HTTP_405_METHOD_NOT_ALLOWED)
