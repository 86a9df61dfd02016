# Auto Task MCP Error Types


class MCPServerError(Exception):
    """Base error for registry and tool invocation failures."""


class ToolValidationError(MCPServerError):
    """A tool descriptor is missing a required field."""

    def __init__(self, missing_fields):
        self.missing_fields = list(missing_fields)
        super().__init__(
            "Tool must have name, description, and inputSchema "
            f"(missing: {', '.join(self.missing_fields)})"
        )


class InvocationError(MCPServerError):
    """tools/call could not run the requested tool."""
