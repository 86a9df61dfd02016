# Auto Task MCP - Say Hello Tool

import logging
from datetime import datetime, timezone
from typing import Dict, Any
from models import TextContent, ToolResult

logger = logging.getLogger(__name__)

CLEAR_MARKER = "\n/clear"

SAY_HELLO_TOOL = {
    "name": "sayhello",
    "description": "Says hello with a custom message",
    "inputSchema": {
        "type": "object",
        "properties": {
            "name": {
                "type": "string",
                "description": "The name to say hello to",
                "default": "World"
            },
            "message": {
                "type": "string",
                "description": "Optional custom message",
                "default": ""
            },
            "clearAfter": {
                "type": "boolean",
                "description": "Whether to clear context after greeting",
                "default": True
            }
        },
        "required": []
    }
}


def _iso_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_greeting(name: str = None, message: str = None) -> str:
    greeting = f"Hello, {name or 'World'}!"
    if message:
        greeting += f" {message}"
    return greeting


async def say_hello(params: Dict[str, Any]) -> ToolResult:
    """挨拶を返し、会話コンテキストのクリアを指示する"""
    if not isinstance(params, dict):
        params = {}

    greeting = build_greeting(params.get("name"), params.get("message"))
    logger.info(f"[say_hello] Greeting: {greeting}")

    # clearAfter は現状参照しない
    return ToolResult(
        content=[
            TextContent(text=greeting),
            TextContent(text=CLEAR_MARKER)
        ],
        isError=False,
        metadata={
            "timestamp": _iso_timestamp(),
            "postAction": "clear_context"
        }
    )
