"""Shared fixtures for the client tests."""

from __future__ import annotations

from contextlib import AsyncExitStack
from unittest.mock import AsyncMock, MagicMock

import pytest
from mcp import types

from mcp_client.session import Session
from mcp_client.tools import adapt
from mcp_client.types import AssistantReply


class ScriptedGateway:
    """Stands in for ChatGateway: replays canned replies and snapshots every call."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    async def complete(self, transcript, tools=None):
        # copy: the loop keeps appending to the same list
        self.calls.append({"transcript": list(transcript), "tools": tools})
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply


@pytest.fixture
def weather_tool():
    return types.Tool(
        name="get-weather",
        description="Get weather forecast for a city",
        inputSchema={
            "type": "object",
            "properties": {"city": {"type": "string"}, "days": {"type": "integer", "minimum": 1, "maximum": 7}},
            "required": ["city"],
        },
    )


@pytest.fixture
def mock_session(weather_tool):
    """A Session whose MCP client is mocked; call_tool returns a text result by default."""
    mcp_client = MagicMock()
    mcp_client.call_tool = AsyncMock(
        return_value=types.CallToolResult(content=[types.TextContent(type="text", text="tool output")])
    )
    descriptors = [weather_tool]
    return Session(mcp=mcp_client, descriptors=descriptors, tools=adapt(descriptors), stack=AsyncExitStack())


@pytest.fixture
def scripted_gateway():
    def _make(*replies):
        return ScriptedGateway(replies)

    return _make


@pytest.fixture
def reply():
    def _make(text=None, tool_calls=()):
        return AssistantReply(text=text, tool_calls=list(tool_calls))

    return _make
