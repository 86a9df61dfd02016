#!/usr/bin/env python3
"""
Auto Task MCP Server - MCP tools サブセット (JSON-RPC over HTTP)
Port: 3002
"""

import json
import logging
from datetime import datetime
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import SERVER_CONFIG, CORS_CONFIG, LOG_CONFIG
from dispatcher import MCPDispatcher, create_error_response
from models import INVALID_REQUEST, INTERNAL_ERROR, PARSE_ERROR
from tools import register_default_tools
from tools_manager import ToolsManager

# ログ設定
logging.basicConfig(level=LOG_CONFIG["level"], format=LOG_CONFIG["format"])
logger = logging.getLogger(__name__)

app = FastAPI(
    title=SERVER_CONFIG["title"],
    version=SERVER_CONFIG["version"]
)

# ツール管理インスタンス
tools_manager = register_default_tools(ToolsManager())
dispatcher = MCPDispatcher(tools_manager)

# CORS設定（OPTIONS プリフライトもここで応答）
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_CONFIG["allow_origins"],
    allow_credentials=CORS_CONFIG["allow_credentials"],
    allow_methods=CORS_CONFIG["allow_methods"],
    allow_headers=CORS_CONFIG["allow_headers"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info(f"{request.method} {request.url.path}")
    return await call_next(request)


@app.get("/")
async def root():
    return {
        "service": SERVER_CONFIG["title"],
        "version": SERVER_CONFIG["version"],
        "status": "running",
        "timestamp": datetime.now().isoformat()
    }


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "server": dispatcher.server_info["name"],
        "version": dispatcher.server_info["version"],
        "timestamp": datetime.now().isoformat()
    }


@app.get("/info")
async def server_info():
    return {
        "serverInfo": dispatcher.server_info,
        "protocolVersion": dispatcher.protocol_version,
        "capabilities": dispatcher.capabilities,
        "tools": tools_manager.get_tools_summary()
    }


def _body_too_large(limit: int) -> JSONResponse:
    logger.error(f"[MCP_ENDPOINT] Request body exceeds {limit} bytes")
    return JSONResponse(
        status_code=413,
        content=create_error_response(None, INVALID_REQUEST, "Request body too large", {"limit": limit})
    )


async def handle_mcp_request(request: Request) -> JSONResponse:
    limit = SERVER_CONFIG["max_body_bytes"]

    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > limit:
        return _body_too_large(limit)

    # Content-Length が無い（chunked）場合も読み込み量で打ち切る
    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            return _body_too_large(limit)
    body = bytes(body)

    logger.info(f"[MCP_ENDPOINT] Received MCP request: {request.method} {request.url} ({len(body)} bytes)")

    if not body.strip():
        return JSONResponse(
            status_code=400,
            content=create_error_response(None, INVALID_REQUEST, "Empty request body")
        )

    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error(f"[MCP_ENDPOINT] Undecodable request body: {e}")
        return JSONResponse(
            status_code=400,
            content=create_error_response(None, PARSE_ERROR, "Parse error", {"message": str(e)})
        )

    if payload is None:
        return JSONResponse(
            status_code=400,
            content=create_error_response(None, INVALID_REQUEST, "Empty request body")
        )

    return JSONResponse(content=await dispatcher.handle_payload(payload))


@app.post("/")
async def mcp_root_endpoint(request: Request):
    """MCPプロトコルエンドポイント"""
    try:
        return await handle_mcp_request(request)
    except Exception as e:
        logger.exception(f"[MCP_ENDPOINT] MCP request error: {e}")
        return JSONResponse(
            status_code=500,
            content=create_error_response(None, INTERNAL_ERROR, "Internal error", {"message": str(e)})
        )


@app.post("/mcp")
async def mcp_endpoint(request: Request):
    """互換性エンドポイント"""
    return await mcp_root_endpoint(request)


def run():
    import uvicorn

    host = SERVER_CONFIG["host"]
    port = SERVER_CONFIG["port"]
    logger.info(f"Auto Task MCP Server running on http://{host}:{port}")
    logger.info(f"Server: {dispatcher.server_info['name']} v{dispatcher.server_info['version']}")
    logger.info(f"Tools: {', '.join(tools_manager.get_tool_names())}")
    logger.info(f"Health: http://{host}:{port}/health")
    logger.info(f"Info: http://{host}:{port}/info")
    logger.info(f"MCP: http://{host}:{port}/mcp")
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run()
