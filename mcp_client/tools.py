# mcp_client/tools.py
# Tool registry adapter and tool executor.
#
# adapt()   - MCP tool descriptors -> OpenAI "function" tools
# execute() - one call_tool round-trip over the session, never raises

import json
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Sequence

import mcp.types as types

from .errors import ToolExecutionError
from .types import ToolCallRequest, ToolCallResult

if TYPE_CHECKING:
    from .session import Session

logger = logging.getLogger(__name__)

CallableTool = Dict[str, Any]


def adapt(descriptors: Sequence[types.Tool]) -> List[CallableTool]:
    """Convert advertised MCP tools into the chat API's tool format.

    Order is preserved and duplicates are kept; the input schema is passed
    through untouched.
    """
    return [
        {
            "type": "function",
            "function": {
                "name": tool.name,
                "description": tool.description or "",
                "parameters": tool.inputSchema,
            },
        }
        for tool in descriptors
    ]


def _content_text(content: Sequence[Any]) -> str:
    parts = []
    for block in content:
        if isinstance(block, types.TextContent):
            parts.append(block.text)
        elif hasattr(block, "model_dump"):
            parts.append(json.dumps(block.model_dump(mode="json"), ensure_ascii=False))
        else:
            parts.append(str(block))
    return "\n".join(parts)


def _check_reply(name: str, reply: Any) -> List[Any]:
    if not isinstance(reply, types.CallToolResult):
        raise ToolExecutionError(f"Malformed reply from tool {name}: {type(reply).__name__}")
    if reply.isError:
        raise ToolExecutionError(_content_text(reply.content) or f"Tool {name} reported an error")
    return list(reply.content)


async def execute(session: "Session", request: ToolCallRequest) -> ToolCallResult:
    """Run one tool call on the session's server.

    Transport errors, malformed replies and server-side tool errors all come
    back as a failed ToolCallResult so the model can see them.
    """
    try:
        reply = await session.mcp.call_tool(request.name, request.arguments)
        content = _check_reply(request.name, reply)
    except ToolExecutionError as exc:
        logger.warning("Tool %s failed: %s", request.name, exc)
        return ToolCallResult.failure(request.name, str(exc))
    except Exception as exc:
        logger.warning("Tool %s raised %s: %s", request.name, type(exc).__name__, exc)
        return ToolCallResult.failure(request.name, f"{type(exc).__name__}: {exc}")

    logger.debug("Tool result for %s: %s", request.name, content)
    return ToolCallResult(name=request.name, success=True, content=content)


def render_result(result: ToolCallResult) -> str:
    """Text fed back to the model for one tool result."""
    if not result.success:
        return f"Tool {result.name} failed: {result.reason}"
    return _content_text(result.content)


def trace_line(request: ToolCallRequest) -> str:
    args = json.dumps(request.arguments, ensure_ascii=False, separators=(",", ":"))
    return f"[Calling tool {request.name} with args {args}]"
