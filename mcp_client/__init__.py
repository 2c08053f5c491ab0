"""Chat client bridging an OpenAI-compatible model with an MCP tool server."""

from .errors import ConfigurationError, GatewayError, MCPClientError, ToolExecutionError, TransportError
from .gateway import ChatGateway
from .orchestrator import process_query
from .session import Session, connect_to_server
from .tools import adapt, execute
from .types import AssistantReply, Message, Role, ToolCallRequest, ToolCallResult

__version__ = "1.0.0"

__all__ = [
    "AssistantReply",
    "ChatGateway",
    "ConfigurationError",
    "GatewayError",
    "MCPClientError",
    "Message",
    "Role",
    "Session",
    "ToolCallRequest",
    "ToolCallResult",
    "ToolExecutionError",
    "TransportError",
    "adapt",
    "connect_to_server",
    "execute",
    "process_query",
]
