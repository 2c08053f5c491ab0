# mcp_client/errors.py
# Error taxonomy for the chat client.
#
#   ConfigurationError  - bad or missing settings, fatal at startup
#   TransportError      - the tool server could not be reached, fatal at startup
#   GatewayError        - the chat endpoint failed, reported per query
#   ToolExecutionError  - one tool call failed, fed back to the model

from typing import Optional


class MCPClientError(RuntimeError):
    """Base class for client errors; keeps the underlying exception as __cause__."""

    def __init__(self, message: str, original_exc: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.original_exc = original_exc
        if original_exc is not None:
            self.__cause__ = original_exc


class ConfigurationError(MCPClientError):
    pass


class TransportError(MCPClientError):
    pass


class GatewayError(MCPClientError):
    pass


class ToolExecutionError(MCPClientError):
    pass
