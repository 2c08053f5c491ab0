# mcp_client/client.py
# Chat client that lets a hosted model call tools on a locally spawned MCP server.
#
# Usage:
#   mcp-client mcp_client/servers/weather.py   (or: python -m mcp_client mcp_client/servers/weather.py)
#   mcp-fs-client [DIR ...]
# Then type questions, or "quit" to exit.

import asyncio
import logging
import sys
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional, Sequence

from mcp.client.stdio import StdioServerParameters
from rich.console import Console

from .config import Settings
from .errors import ConfigurationError, TransportError
from .gateway import ChatGateway
from .orchestrator import process_query
from .session import Session, connect_to_server, filesystem_server_parameters, server_parameters_for_script

logger = logging.getLogger(__name__)

BUSY_MESSAGE = "Processing your query..."

FILESYSTEM_HINT = "Type your file operations or 'quit' to exit."

FILESYSTEM_EXAMPLES = [
    "List the contents of the current directory",
    "Read the README.md file",
    "Create a test file and write some content to it",
    "Search for files whose name contains test",
]


@contextmanager
def busy(console: Console, message: str = BUSY_MESSAGE) -> Iterator[None]:
    """Spinner shown while a query runs; stopped on exit from the block, error or not."""
    with console.status(message, spinner="dots"):
        yield


def _say(console: Console, text: str, style: Optional[str] = None) -> None:
    # model output may contain [brackets]; never treat it as rich markup
    console.print(text, style=style, markup=False, highlight=False)


async def chat_loop(
    session: Session,
    gateway: ChatGateway,
    *,
    console: Console,
    read_line: Callable[[str], str] = input,
    title: str = "MCP Client",
    hint: str = "Type your queries or 'quit' to exit.",
    examples: Sequence[str] = (),
) -> None:
    """Read queries until "quit" (any case), EOF or Ctrl-C."""
    _say(console, f"\n{title} Started!")
    _say(console, hint)
    if examples:
        _say(console, "Examples:")
        for example in examples:
            _say(console, f"  - {example}")

    while True:
        try:
            query = read_line("\nQuery: ").strip()
        except (EOFError, KeyboardInterrupt):
            break
        if not query:
            continue
        if query.lower() == "quit":
            break

        try:
            with busy(console):
                answer = await process_query(query, session=session, gateway=gateway)
        except Exception as e:
            logger.debug("Query failed", exc_info=True)
            _say(console, f"\nError: {e}", style="red")
            continue
        _say(console, "\n" + answer)


async def run(
    build_params: Callable[[Settings], StdioServerParameters],
    *,
    console: Optional[Console] = None,
    title: str = "MCP Client",
    hint: str = "Type your queries or 'quit' to exit.",
    examples: Sequence[str] = (),
) -> int:
    console = console or Console()
    try:
        settings = Settings.from_env()
        params = build_params(settings)
    except ConfigurationError as e:
        _say(console, f"Configuration error: {e}", style="red")
        return 1

    logging.basicConfig(
        level=settings.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    gateway = ChatGateway.from_settings(settings)
    try:
        session = await connect_to_server(params)
    except TransportError as e:
        await gateway.aclose()
        _say(console, str(e), style="red")
        return 1

    _say(console, f"Connected to server with tools: {session.tool_names}")
    try:
        await chat_loop(session, gateway, console=console, title=title, hint=hint, examples=examples)
    finally:
        await gateway.aclose()
        await session.aclose()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print("Usage: mcp-client path/to/server_script.py")
        return 1
    script = args[0]
    return asyncio.run(run(lambda s: server_parameters_for_script(script, s.weather_api_key)))


def fs_main(argv: Optional[List[str]] = None) -> int:
    directories = sys.argv[1:] if argv is None else argv
    return asyncio.run(
        run(
            lambda s: filesystem_server_parameters(directories, s.filesystem_dir),
            title="FileSystem MCP Client",
            hint=FILESYSTEM_HINT,
            examples=FILESYSTEM_EXAMPLES,
        )
    )


if __name__ == "__main__":
    sys.exit(main())
