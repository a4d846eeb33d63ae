# [파일 설명]
# - 목적: FastAPI 애플리케이션을 생성하고 라우터를 조립한다.
# - 제공 기능: /health 엔드포인트, REST 라우터(/mcp/*), Streamable HTTP MCP(/mcp) 등록과 서버 실행 진입점을 제공한다.
# - 입력/출력: HTTP 요청에 대해 상태 정보 및 각 라우터 응답을 반환한다.
# - 주의 사항: 로깅 설정은 run() 진입점에서만 수행한다.
# - 연관 모듈: schema_bridge.api.mcp, schema_bridge.mcp_streamable_http와 연동된다.
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, Response

from schema_bridge.api.mcp import router as mcp_router
from schema_bridge.config import configure_logging, get_settings
from schema_bridge.mcp_streamable_http import mcp_get, mcp_post

logger = logging.getLogger(__name__)

app = FastAPI(title="SQL Schema Bridge")


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(mcp_router, prefix="/mcp")


@app.post("/mcp")
async def mcp_post_route(request: Request) -> Response:
    return await mcp_post(request)


@app.get("/mcp")
def mcp_get_route() -> Response:
    return mcp_get()


def run() -> None:
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Starting SQL Schema Bridge (dialect=%s)", settings.sql_dialect)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
