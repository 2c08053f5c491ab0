# mcp_client/config.py
# Settings read from the environment (and a local .env file, if present).

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigurationError

DEFAULT_BASE_URL = "https://api.deepseek.com/"
DEFAULT_MODEL = "deepseek-chat"
DEFAULT_MAX_TOKENS = 1000


@dataclass(frozen=True)
class Settings:
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS
    log_level: int = logging.WARNING
    weather_api_key: str = ""
    filesystem_dir: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``environ`` (defaults to ``os.environ`` after loading .env).

        Raises ConfigurationError when the chat API key is missing or a value
        cannot be parsed.
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        api_key = environ.get("OPENAI_API_KEY")
        if not api_key:
            raise ConfigurationError("OPENAI_API_KEY is not set")

        raw_tokens = environ.get("MCP_CLIENT_MAX_TOKENS", str(DEFAULT_MAX_TOKENS))
        try:
            max_tokens = int(raw_tokens)
        except ValueError as exc:
            raise ConfigurationError(f"MCP_CLIENT_MAX_TOKENS must be an integer, got {raw_tokens!r}", exc)
        if max_tokens < 1:
            raise ConfigurationError(f"MCP_CLIENT_MAX_TOKENS must be positive, got {max_tokens}")

        level_name = environ.get("MCP_CLIENT_LOG_LEVEL", "WARNING").upper()
        log_level = logging.getLevelName(level_name)
        if not isinstance(log_level, int):
            raise ConfigurationError(f"Unknown log level: {level_name}")

        return cls(
            api_key=api_key,
            base_url=environ.get("OPENAI_BASE_URL") or DEFAULT_BASE_URL,
            model=environ.get("MCP_CLIENT_MODEL") or DEFAULT_MODEL,
            max_tokens=max_tokens,
            log_level=log_level,
            weather_api_key=environ.get("XINGZHI_API_KEY", ""),
            filesystem_dir=environ.get("MCP_FILESYSTEM_DIR") or None,
        )
