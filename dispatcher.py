# Auto Task MCP - JSON-RPC Method Dispatcher

import asyncio
import json
import logging
import time
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel

from config import SERVER_CONFIG, CAPABILITIES
from errors import InvocationError
from models import (
    JSONRPC_VERSION,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    INTERNAL_ERROR,
    JSONRPCError,
    MCPResponse,
    MCPErrorResponse,
)
from tools_manager import ToolsManager

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


def create_error_response(
    request_id: Any,
    code: int,
    message: str,
    data: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """JSON-RPC エラーレスポンス生成（id が無ければ合成する）"""
    response_id = request_id if request_id is not None else f"err_{_now_ms()}"
    return MCPErrorResponse(
        id=response_id,
        error=JSONRPCError(code=code, message=message, data=data)
    ).to_dict()


class MCPDispatcher:
    """MCP メソッドのルーティングとレスポンス整形"""

    def __init__(
        self,
        tools_manager: ToolsManager,
        server_info: Optional[Dict[str, str]] = None,
        protocol_version: Optional[str] = None,
        capabilities: Optional[Dict[str, Any]] = None
    ):
        self.tools_manager = tools_manager
        self.server_info = server_info or {
            "name": SERVER_CONFIG["name"],
            "version": SERVER_CONFIG["version"]
        }
        self.protocol_version = protocol_version or SERVER_CONFIG["protocol_version"]
        self.capabilities = capabilities if capabilities is not None else CAPABILITIES

        self.method_handlers = {
            "initialize": self.handle_initialize,
            "tools/list": self.handle_tools_list,
            "tools/call": self.handle_tools_call,
        }

    async def handle_payload(self, payload: Any) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
        """単一リクエストとバッチリクエストの振り分け"""
        if payload is None or payload == "":
            logger.error("[MCP_ENDPOINT] Empty request body")
            return create_error_response(None, INVALID_REQUEST, "Empty request body")

        if isinstance(payload, list):
            responses = await asyncio.gather(
                *(self.process_single_request(request) for request in payload)
            )
            logger.info(f"[MCP_ENDPOINT] Sending batch response: {len(responses)} items")
            return list(responses)

        response = await self.process_single_request(payload)
        logger.info(f"[MCP_ENDPOINT] Sending single response: {response}")
        return response

    async def process_single_request(self, request: Any) -> Dict[str, Any]:
        if not isinstance(request, dict):
            return create_error_response("unknown", INVALID_REQUEST, "Invalid Request")

        raw_id = request.get("id")

        if request.get("jsonrpc") != JSONRPC_VERSION:
            return create_error_response(
                raw_id if raw_id is not None else "unknown", INVALID_REQUEST, "Invalid Request"
            )

        method = request.get("method")
        if not method:
            return create_error_response(
                raw_id if raw_id is not None else "unknown", INVALID_REQUEST, "Missing method"
            )

        request_id = raw_id if raw_id is not None else f"req_{_now_ms()}"

        handler = self.method_handlers.get(method) if isinstance(method, str) else None
        if handler is None:
            return create_error_response(request_id, METHOD_NOT_FOUND, "Method not found")

        params = request.get("params")
        if params is None:
            params = {}

        try:
            result = await handler(params)
        except Exception as e:
            logger.exception(f"[MCP_ENDPOINT] Error processing method {method}: {e}")
            error_id = raw_id if raw_id is not None else f"err_{_now_ms()}"
            return create_error_response(error_id, INTERNAL_ERROR, "Internal error", {"message": str(e)})

        return MCPResponse(id=request_id, result=result).to_dict()

    async def handle_initialize(self, params: Dict[str, Any]) -> Dict[str, Any]:
        logger.info(
            "[initialize] Received initialize request: %s",
            json.dumps(params, indent=2, ensure_ascii=False, default=str)
        )

        response = {
            "protocolVersion": self.protocol_version,
            "capabilities": self.capabilities,
            "serverInfo": self.server_info,
            "instructions": (
                f"MCP Server: {self.server_info['name']}. "
                f"Available tools: {', '.join(self.tools_manager.get_tool_names())}"
            )
        }

        logger.info(
            "[initialize] Sending initialize response: %s",
            json.dumps(response, indent=2, ensure_ascii=False)
        )
        return response

    async def handle_tools_list(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {"tools": self.tools_manager.list_tools()}

    async def handle_tools_call(self, params: Dict[str, Any]) -> Dict[str, Any]:
        tool_name = params.get("name") if isinstance(params, dict) else None
        arguments = params.get("arguments") if isinstance(params, dict) else None
        if arguments is None:
            arguments = {}

        if not tool_name:
            raise InvocationError("Tool name is required")

        if not self.tools_manager.is_valid_tool(tool_name):
            raise InvocationError(f"Tool '{tool_name}' not found")

        tool_function = self.tools_manager.get_tool_function(tool_name)
        if tool_function is None:
            raise InvocationError(f"Tool '{tool_name}' is not implemented")

        logger.info(f"[tools/call] Calling {tool_name} with arguments: {arguments}")
        tool_response = await tool_function(arguments)

        if isinstance(tool_response, BaseModel):
            return tool_response.model_dump()
        return tool_response
