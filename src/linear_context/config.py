"""Environment-driven configuration for the Linear MCP server.

Values come from process environment variables, optionally seeded from a
``.env`` file via python-dotenv.  ``LINEAR_API_KEY`` is the only required
setting; its absence is a fatal startup condition.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

DEFAULT_API_URL = "https://api.linear.app/graphql"
DEFAULT_LOG_LEVEL = "INFO"

_FALSE_VALUES = {"false", "0", "no", "off", ""}


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in _FALSE_VALUES


@dataclass(frozen=True)
class LinearConfig:
    """Linear API configuration.

    Immutable once built; the server holds a single instance for its lifetime.
    """

    api_key: str
    api_url: str = DEFAULT_API_URL
    search_case_sensitive: bool = False
    log_dir: Path | None = None
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> LinearConfig:
        """Create configuration from environment variables.

        Args:
            env_file: Explicit ``.env`` path. When omitted, a ``.env`` in the
                working directory is loaded if present. Variables already set
                in the environment are never overridden.

        Raises:
            ConfigError: If ``LINEAR_API_KEY`` is unset or blank.
        """
        if env_file is not None:
            load_dotenv(env_file)
        else:
            load_dotenv(find_dotenv(usecwd=True))

        api_key = os.getenv("LINEAR_API_KEY", "").strip()
        if not api_key:
            msg = "LINEAR_API_KEY environment variable is not set"
            raise ConfigError(msg)

        log_dir_raw = os.getenv("LINEAR_CONTEXT_LOG_DIR", "").strip()
        log_level = os.getenv("LINEAR_CONTEXT_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper() or DEFAULT_LOG_LEVEL

        return cls(
            api_key=api_key,
            api_url=os.getenv("LINEAR_API_URL", "").strip() or DEFAULT_API_URL,
            search_case_sensitive=_env_flag("LINEAR_SEARCH_CASE_SENSITIVE"),
            log_dir=Path(log_dir_raw) if log_dir_raw else None,
            log_level=log_level,
        )

    @property
    def authorization_header(self) -> str:
        """Value for the ``Authorization`` header.

        Linear personal API keys are sent bare; OAuth access tokens use the
        ``Bearer`` scheme.
        """
        if self.api_key.startswith("lin_api_") or self.api_key.lower().startswith("bearer "):
            return self.api_key
        return f"Bearer {self.api_key}"
