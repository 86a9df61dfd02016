import logging
import threading
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from errors import ToolValidationError
from models import ToolDescription, ToolResult

logger = logging.getLogger(__name__)

ToolFunction = Callable[[Dict[str, Any]], Awaitable[Union[ToolResult, Dict[str, Any]]]]

REQUIRED_TOOL_FIELDS = ("name", "description", "inputSchema")


def _missing_fields(tool: Dict[str, Any]) -> List[str]:
    missing = [field for field in ("name", "description") if not tool.get(field)]
    # 空の inputSchema ({}) は有効
    if tool.get("inputSchema") is None:
        missing.append("inputSchema")
    return missing


class ToolsManager:
    """ツール定義と実行関数の一元管理クラス"""

    def __init__(self):
        # (descriptor, executor) の登録順リスト
        self._entries: List[tuple] = []
        self._lock = threading.Lock()

    def add_or_replace(
        self,
        tool: Union[ToolDescription, Dict[str, Any]],
        executor: Optional[ToolFunction] = None
    ) -> None:
        """同名ツールを削除してから末尾に追加（executor 省略時は既存の実行関数を引き継ぐ）"""
        if isinstance(tool, ToolDescription):
            tool = tool.model_dump()
        if not isinstance(tool, dict):
            raise ToolValidationError(REQUIRED_TOOL_FIELDS)

        missing = _missing_fields(tool)
        if missing:
            raise ToolValidationError(missing)

        descriptor = dict(tool)
        name = descriptor["name"]

        with self._lock:
            if executor is None:
                executor = next(
                    (entry[1] for entry in self._entries if entry[0]["name"] == name), None
                )
            self._entries = [entry for entry in self._entries if entry[0]["name"] != name]
            self._entries.append((descriptor, executor))

        logger.info(f"[ToolsManager] Added tool: {name}")

    def list_tools(self) -> List[Dict[str, Any]]:
        """tools/list用のツール一覧（完全な定義のコピー）"""
        return [dict(descriptor) for descriptor, _ in self._entries]

    def get_tools_summary(self) -> List[Dict[str, Any]]:
        """/info用の概要（名前と説明のみ）"""
        return [
            {
                "name": descriptor["name"],
                "description": descriptor["description"]
            }
            for descriptor, _ in self._entries
        ]

    def get_tool(self, tool_name: str) -> Optional[Dict[str, Any]]:
        for descriptor, _ in self._entries:
            if descriptor["name"] == tool_name:
                return dict(descriptor)
        return None

    def get_tool_function(self, tool_name: str) -> Optional[ToolFunction]:
        """ツール名から実行関数を取得（未実装ならNone）"""
        for descriptor, executor in self._entries:
            if descriptor["name"] == tool_name:
                return executor
        return None

    def is_valid_tool(self, tool_name: str) -> bool:
        """ツール名の有効性チェック"""
        return self.get_tool(tool_name) is not None

    def get_tool_names(self) -> List[str]:
        """全ツール名のリスト"""
        return [descriptor["name"] for descriptor, _ in self._entries]
