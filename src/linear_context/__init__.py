"""linear-context: Linear issue tracking exposed as MCP tools and resources."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("linear-context")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

from linear_context.client import LinearClient, LinearError
from linear_context.config import ConfigError, LinearConfig

__all__ = ["ConfigError", "LinearClient", "LinearConfig", "LinearError", "__version__"]
