# mcp_client/gateway.py
# Chat completion gateway over any OpenAI-compatible endpoint (DeepSeek by default).

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

import openai
from openai import AsyncOpenAI

from .config import Settings
from .errors import GatewayError
from .tools import CallableTool
from .types import AssistantReply, Message, Role, ToolCallRequest

logger = logging.getLogger(__name__)


def _describe(exc: openai.OpenAIError) -> str:
    if isinstance(exc, openai.RateLimitError):
        prefix = "Rate limit exceeded"
    elif isinstance(exc, openai.AuthenticationError):
        prefix = "Authentication failed"
    elif isinstance(exc, openai.APIConnectionError):
        prefix = "Connection problem - unable to reach the chat endpoint"
    elif isinstance(exc, openai.APIStatusError):
        prefix = f"API error ({exc.status_code})"
    else:
        prefix = type(exc).__name__
    return f"{prefix}: {exc}"


def _tool_call_param(call: ToolCallRequest) -> Dict[str, Any]:
    return {
        "id": call.id,
        "type": "function",
        "function": {
            "name": call.name,
            "arguments": json.dumps(call.arguments, ensure_ascii=False),
        },
    }


def render_messages(transcript: Sequence[Message]) -> List[Dict[str, Any]]:
    """Render the transcript as chat-completions messages.

    An assistant message only lists the tool calls that already have a result
    further down the transcript, so a follow-up sent after the first of
    several calls is still a well-formed conversation.
    """
    answered = {m.tool_call_id for m in transcript if m.role is Role.TOOL_RESULT}
    messages: List[Dict[str, Any]] = []
    for message in transcript:
        if message.role is Role.USER:
            messages.append({"role": "user", "content": message.content or ""})
        elif message.role is Role.ASSISTANT:
            calls = [c for c in message.tool_calls if c.id in answered]
            if not calls and not message.content:
                continue
            rendered: Dict[str, Any] = {"role": "assistant", "content": message.content}
            if calls:
                rendered["tool_calls"] = [_tool_call_param(c) for c in calls]
            messages.append(rendered)
        else:
            messages.append(
                {"role": "tool", "tool_call_id": message.tool_call_id, "content": message.content or ""}
            )
    return messages


def _parse_tool_call(tool_call: Any) -> Optional[ToolCallRequest]:
    function = getattr(tool_call, "function", None)
    if function is None:
        logger.warning("Skipping unsupported %s tool call %s", getattr(tool_call, "type", "unknown"), tool_call.id)
        return None
    try:
        arguments = json.loads(function.arguments or "{}")
    except json.JSONDecodeError as exc:
        raise GatewayError(f"Model sent malformed arguments for {function.name}: {exc}", exc)
    if not isinstance(arguments, dict):
        raise GatewayError(f"Model sent non-object arguments for {function.name}")
    return ToolCallRequest(id=tool_call.id, name=function.name, arguments=arguments)


class ChatGateway:
    """Send a transcript to the chat model and return its first choice.

    No retries: provider errors surface once, as GatewayError.
    """

    def __init__(self, client: AsyncOpenAI, *, model: str, max_tokens: int) -> None:
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    @classmethod
    def from_settings(cls, settings: Settings) -> "ChatGateway":
        client = AsyncOpenAI(api_key=settings.api_key, base_url=settings.base_url, max_retries=0)
        return cls(client, model=settings.model, max_tokens=settings.max_tokens)

    async def complete(
        self,
        transcript: Sequence[Message],
        tools: Optional[Sequence[CallableTool]] = None,
    ) -> AssistantReply:
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": render_messages(transcript),
        }
        if tools:
            kwargs["tools"] = list(tools)

        try:
            response = await self.client.chat.completions.create(**kwargs)
        except openai.OpenAIError as exc:
            logger.warning("Chat completion failed: %s", exc)
            raise GatewayError(_describe(exc), exc)

        if not response.choices:
            raise GatewayError("Chat endpoint returned no choices")
        message = response.choices[0].message
        logger.info("AI response: %s", message)

        calls = [_parse_tool_call(tc) for tc in (message.tool_calls or [])]
        return AssistantReply(text=message.content, tool_calls=[c for c in calls if c is not None])

    async def aclose(self) -> None:
        await self.client.close()
