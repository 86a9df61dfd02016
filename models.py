# Auto Task MCP Data Models

from pydantic import BaseModel, Field
from typing import Dict, Any, List, Optional

JSONRPC_VERSION = "2.0"

# JSON-RPC エラーコード
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603
PARSE_ERROR = -32700


class ToolDescription(BaseModel):
    name: str
    description: str
    inputSchema: Dict[str, Any]


class TextContent(BaseModel):
    type: str = "text"
    text: str


class ToolResult(BaseModel):
    content: List[TextContent]
    isError: bool = False
    metadata: Dict[str, Any] = Field(default_factory=dict)


class JSONRPCError(BaseModel):
    code: int
    message: str
    data: Optional[Dict[str, Any]] = None


class MCPResponse(BaseModel):
    jsonrpc: str = JSONRPC_VERSION
    id: Any
    result: Any

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()


class MCPErrorResponse(BaseModel):
    jsonrpc: str = JSONRPC_VERSION
    id: Any
    error: JSONRPCError

    def to_dict(self) -> Dict[str, Any]:
        """data が無い場合は error から省略する"""
        return {
            "jsonrpc": self.jsonrpc,
            "id": self.id,
            "error": self.error.model_dump(exclude_none=True)
        }
