# mcp_client/types.py
# Conversation data model for one query.

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    TOOL_RESULT = "tool-result"


@dataclass(frozen=True)
class ToolCallRequest:
    """A tool invocation proposed by the model.

    Arguments are passed to the tool server as-is; the server validates them
    against the tool's input schema.
    """

    id: str
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ToolCallResult:
    name: str
    success: bool
    content: List[Any] = field(default_factory=list)
    reason: Optional[str] = None

    @classmethod
    def failure(cls, name: str, reason: str) -> "ToolCallResult":
        return cls(name=name, success=False, reason=reason)


@dataclass(frozen=True)
class Message:
    role: Role
    content: Optional[str] = None
    tool_calls: Tuple[ToolCallRequest, ...] = ()
    tool_call_id: Optional[str] = None

    @classmethod
    def user(cls, text: str) -> "Message":
        return cls(role=Role.USER, content=text)

    @classmethod
    def assistant(cls, text: Optional[str], tool_calls: List[ToolCallRequest]) -> "Message":
        return cls(role=Role.ASSISTANT, content=text, tool_calls=tuple(tool_calls))

    @classmethod
    def tool_result(cls, call_id: str, text: str) -> "Message":
        return cls(role=Role.TOOL_RESULT, content=text, tool_call_id=call_id)


@dataclass(frozen=True)
class AssistantReply:
    text: Optional[str] = None
    tool_calls: List[ToolCallRequest] = field(default_factory=list)
