# mcp_client/session.py
# Connection to one MCP tool server over stdio.

import logging
import os
import sys
from contextlib import AsyncExitStack
from dataclasses import dataclass
from typing import List, Optional, Sequence

import mcp.types as types
from mcp import ClientSession
from mcp.client.stdio import StdioServerParameters, stdio_client

from .errors import ConfigurationError, TransportError
from .tools import CallableTool, adapt

logger = logging.getLogger(__name__)

FILESYSTEM_SERVER_MODULE = "mcp_client.servers.filesystem"


@dataclass
class Session:
    """The connected tool server and its tool registry.

    Built once at startup and closed at exit; queries only read from it.
    """

    mcp: ClientSession
    descriptors: List[types.Tool]
    tools: List[CallableTool]
    stack: AsyncExitStack

    @property
    def tool_names(self) -> List[str]:
        return [t.name for t in self.descriptors]

    async def aclose(self) -> None:
        await self.stack.aclose()


async def load_session(mcp: ClientSession, stack: Optional[AsyncExitStack] = None) -> Session:
    """Fetch the tool list from an initialized client session."""
    descriptors = list((await mcp.list_tools()).tools)
    return Session(mcp=mcp, descriptors=descriptors, tools=adapt(descriptors), stack=stack or AsyncExitStack())


async def connect_to_server(params: StdioServerParameters) -> Session:
    """Spawn the server, run the MCP handshake and load its tools.

    Anything that goes wrong tears down what was opened and raises TransportError.
    """
    stack = AsyncExitStack()
    try:
        reader, writer = await stack.enter_async_context(stdio_client(params))
        mcp: ClientSession = await stack.enter_async_context(ClientSession(reader, writer))
        await mcp.initialize()
        session = await load_session(mcp, stack)
    except Exception as exc:
        await stack.aclose()
        raise TransportError(f"Failed to connect to MCP server: {exc}", exc)

    logger.info("Connected to %s %s with tools: %s", params.command, params.args, session.tool_names)
    return session


def server_parameters_for_script(script_path: str, weather_api_key: str = "") -> StdioServerParameters:
    """Launch parameters for a server script, picked by file extension."""
    if script_path.endswith(".py"):
        command = sys.executable
    elif script_path.endswith(".js"):
        command = "node"
    else:
        raise ConfigurationError("Server script must be a .js or .py file")
    return StdioServerParameters(
        command=command,
        args=[script_path],
        env={"XINGZHI_API_KEY": weather_api_key},
    )


def filesystem_server_parameters(
    directories: Sequence[str], default_dir: Optional[str] = None
) -> StdioServerParameters:
    """Launch parameters for the bundled filesystem server.

    With no directories the server is rooted at ``default_dir`` or the
    current working directory.
    """
    roots = list(directories) or [default_dir or os.getcwd()]
    logger.info("FileSystem server will use directories: %s", ", ".join(roots))
    return StdioServerParameters(
        command=sys.executable,
        args=["-m", FILESYSTEM_SERVER_MODULE, *roots],
        env=dict(os.environ),
    )
