# mcp_client/orchestrator.py
# Turns one user query into zero or more tool calls and a final answer.
#
#   STARTED -> AWAITING_MODEL -> IDLE ---------------------------------------> DONE
#                             \-> HAS_TOOL_CALLS -> EXECUTING_TOOLS -> AWAITING_FOLLOW_UP
#                                                        ^                    |
#                                                        \---- next call -----/
#
# Every tool call gets its own follow-up completion before the next call runs.

import logging
from enum import Enum
from typing import TYPE_CHECKING, List

from .tools import execute, render_result, trace_line
from .types import Message

if TYPE_CHECKING:
    from .gateway import ChatGateway
    from .session import Session

logger = logging.getLogger(__name__)


class State(str, Enum):
    STARTED = "started"
    AWAITING_MODEL = "awaiting-model"
    IDLE = "idle"
    HAS_TOOL_CALLS = "has-tool-calls"
    EXECUTING_TOOLS = "executing-tools"
    AWAITING_FOLLOW_UP = "awaiting-follow-up"
    DONE = "done"


def _enter(state: State) -> None:
    logger.debug("query state: %s", state.value)


async def process_query(query: str, *, session: "Session", gateway: "ChatGateway") -> str:
    """Answer one query, running any tool calls the model asks for.

    The transcript is local to this call. GatewayError (and anything else the
    gateway raises) propagates to the caller; tool failures do not.
    """
    _enter(State.STARTED)
    logger.info("Processing query: %s", query)
    logger.info("Available tools: %s", session.tool_names)
    transcript: List[Message] = [Message.user(query)]
    output: List[str] = []

    _enter(State.AWAITING_MODEL)
    reply = await gateway.complete(transcript, session.tools)
    if reply.text:
        output.append(reply.text)

    if not reply.tool_calls:
        _enter(State.IDLE)
    else:
        _enter(State.HAS_TOOL_CALLS)
        logger.info("Tool calls detected: %d", len(reply.tool_calls))
        transcript.append(Message.assistant(reply.text, reply.tool_calls))

        for request in reply.tool_calls:
            _enter(State.EXECUTING_TOOLS)
            logger.info("Calling tool: %s with args: %s", request.name, request.arguments)
            result = await execute(session, request)
            output.append(trace_line(request))
            transcript.append(Message.tool_result(request.id, render_result(result)))

            _enter(State.AWAITING_FOLLOW_UP)
            follow_up = await gateway.complete(transcript)
            if follow_up.tool_calls:
                logger.warning("Ignoring %d tool calls in follow-up reply", len(follow_up.tool_calls))
            if follow_up.text:
                output.append(follow_up.text)

    _enter(State.DONE)
    answer = "\n".join(output)
    logger.info("Final result: %s", answer)
    return answer
