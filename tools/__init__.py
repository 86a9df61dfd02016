# Auto Task MCP - Built-in Tools

from tools.say_hello import SAY_HELLO_TOOL, say_hello


def register_default_tools(tools_manager):
    """組み込みツールを登録"""
    tools_manager.add_or_replace(SAY_HELLO_TOOL, say_hello)
    return tools_manager
