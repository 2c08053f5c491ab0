"""Tests for the interactive driver and entry points."""

from __future__ import annotations

import io
import sys
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from rich.console import Console

from mcp_client import client
from mcp_client.client import busy, chat_loop, fs_main, main, run
from mcp_client.config import Settings
from mcp_client.errors import ConfigurationError, GatewayError, TransportError


def scripted_input(*lines):
    it = iter(lines)

    def read_line(prompt):
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    return read_line


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=200)


def output(console):
    return console.file.getvalue()


class TestChatLoop:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("sentinel", ["quit", "QUIT", "Quit", "  quit  "])
    async def test_sentinel_ends_loop_without_gateway(self, mock_session, console, sentinel):
        gateway = MagicMock()
        gateway.complete = AsyncMock()
        read_line = MagicMock(side_effect=scripted_input(sentinel, "never read"))

        await chat_loop(mock_session, gateway, console=console, read_line=read_line)

        gateway.complete.assert_not_awaited()
        assert read_line.call_count == 1

    @pytest.mark.asyncio
    async def test_prints_answer(self, mock_session, scripted_gateway, reply, console):
        gateway = scripted_gateway(reply("[bracketed] answer"))

        await chat_loop(mock_session, gateway, console=console, read_line=scripted_input("hello", "quit"))

        assert "[bracketed] answer" in output(console)
        assert "MCP Client Started!" in output(console)

    @pytest.mark.asyncio
    async def test_blank_lines_skipped(self, mock_session, scripted_gateway, console):
        gateway = scripted_gateway()

        await chat_loop(mock_session, gateway, console=console, read_line=scripted_input("", "   ", "quit"))

        assert gateway.calls == []

    @pytest.mark.asyncio
    async def test_eof_ends_loop(self, mock_session, scripted_gateway, console):
        gateway = scripted_gateway()

        await chat_loop(mock_session, gateway, console=console, read_line=scripted_input())

        assert gateway.calls == []

    @pytest.mark.asyncio
    async def test_error_reported_and_loop_continues(self, mock_session, scripted_gateway, reply, console):
        gateway = scripted_gateway(GatewayError("Rate limit exceeded: try later"), reply("second works"))

        await chat_loop(mock_session, gateway, console=console, read_line=scripted_input("one", "two", "quit"))

        text = output(console)
        assert "Error: Rate limit exceeded: try later" in text
        assert "second works" in text
        assert len(gateway.calls) == 2

    @pytest.mark.asyncio
    async def test_examples_printed(self, mock_session, scripted_gateway, console):
        await chat_loop(
            mock_session,
            scripted_gateway(),
            console=console,
            read_line=scripted_input("quit"),
            title="FileSystem MCP Client",
            examples=["Read the README.md file"],
        )

        text = output(console)
        assert "FileSystem MCP Client Started!" in text
        assert "  - Read the README.md file" in text

    @pytest.mark.asyncio
    async def test_custom_hint(self, mock_session, scripted_gateway, console):
        await chat_loop(
            mock_session,
            scripted_gateway(),
            console=console,
            read_line=scripted_input("quit"),
            hint=client.FILESYSTEM_HINT,
        )

        text = output(console)
        assert "Type your file operations or 'quit' to exit." in text
        assert "Type your queries" not in text


class TestBusy:
    def test_status_stopped_on_success(self):
        console = MagicMock()

        with busy(console):
            pass

        console.status.assert_called_once_with(client.BUSY_MESSAGE, spinner="dots")
        console.status.return_value.__exit__.assert_called_once()

    def test_status_stopped_on_error(self):
        console = MagicMock()
        console.status.return_value.__exit__.return_value = False

        with pytest.raises(RuntimeError):
            with busy(console):
                raise RuntimeError("boom")

        console.status.return_value.__exit__.assert_called_once()


class TestRun:
    @pytest.mark.asyncio
    async def test_configuration_error_exits_1(self, console):
        with patch.object(client.Settings, "from_env", side_effect=ConfigurationError("OPENAI_API_KEY is not set")):
            code = await run(MagicMock(), console=console)

        assert code == 1
        assert "OPENAI_API_KEY is not set" in output(console)

    @pytest.mark.asyncio
    async def test_bad_server_script_exits_1(self, console):
        with patch.object(client.Settings, "from_env", return_value=Settings(api_key="k")):
            code = await run(lambda s: client.server_parameters_for_script("server.rb"), console=console)

        assert code == 1
        assert "must be a .js or .py file" in output(console)

    @pytest.mark.asyncio
    async def test_transport_error_exits_1(self, console):
        with patch.object(client.Settings, "from_env", return_value=Settings(api_key="k")), patch.object(
            client, "connect_to_server", AsyncMock(side_effect=TransportError("Failed to connect to MCP server: gone"))
        ):
            code = await run(MagicMock(), console=console)

        assert code == 1
        assert "Failed to connect to MCP server" in output(console)

    @pytest.mark.asyncio
    async def test_session_closed_after_loop(self, mock_session, console):
        mock_session.stack = MagicMock()
        mock_session.stack.aclose = AsyncMock()
        gateway = MagicMock()
        gateway.aclose = AsyncMock()
        with patch.object(client.Settings, "from_env", return_value=Settings(api_key="k")), patch.object(
            client, "connect_to_server", AsyncMock(return_value=mock_session)
        ), patch.object(client.ChatGateway, "from_settings", return_value=gateway), patch.object(
            client, "chat_loop", AsyncMock()
        ):
            code = await run(MagicMock(), console=console)

        assert code == 0
        assert "Connected to server with tools: ['get-weather']" in output(console)
        gateway.aclose.assert_awaited_once()
        mock_session.stack.aclose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_gateway_built_before_server_spawned(self, console):
        connect = AsyncMock()
        with patch.object(client.Settings, "from_env", return_value=Settings(api_key="k")), patch.object(
            client.ChatGateway, "from_settings", side_effect=RuntimeError("bad client options")
        ), patch.object(client, "connect_to_server", connect):
            with pytest.raises(RuntimeError, match="bad client options"):
                await run(MagicMock(), console=console)

        connect.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_gateway_closed_when_connect_fails(self, console):
        gateway = MagicMock()
        gateway.aclose = AsyncMock()
        with patch.object(client.Settings, "from_env", return_value=Settings(api_key="k")), patch.object(
            client.ChatGateway, "from_settings", return_value=gateway
        ), patch.object(client, "connect_to_server", AsyncMock(side_effect=TransportError("gone"))):
            assert await run(MagicMock(), console=console) == 1

        gateway.aclose.assert_awaited_once()


class TestEntryPoints:
    def test_main_without_script_prints_usage(self, capsys):
        assert main([]) == 1
        assert "Usage" in capsys.readouterr().out

    def test_main_builds_script_parameters(self):
        fake_run = AsyncMock(return_value=0)
        with patch.object(client, "run", fake_run):
            assert main(["mcp_client/servers/weather.py"]) == 0

        build_params = fake_run.call_args.args[0]
        params = build_params(Settings(api_key="k", weather_api_key="wk"))
        assert params.command == sys.executable
        assert params.args == ["mcp_client/servers/weather.py"]
        assert params.env == {"XINGZHI_API_KEY": "wk"}

    def test_fs_main_uses_default_directory(self, tmp_path):
        fake_run = AsyncMock(return_value=0)
        with patch.object(client, "run", fake_run):
            assert fs_main([]) == 0

        build_params = fake_run.call_args.args[0]
        params = build_params(Settings(api_key="k", filesystem_dir=str(tmp_path)))
        assert params.args == ["-m", "mcp_client.servers.filesystem", str(tmp_path)]
        assert fake_run.call_args.kwargs["title"] == "FileSystem MCP Client"
        assert fake_run.call_args.kwargs["hint"] == client.FILESYSTEM_HINT
