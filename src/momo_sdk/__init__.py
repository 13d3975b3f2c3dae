"""Python client for the Momo memory, document and search service."""

from .client import MomoClient, MomoClientConfig
from .errors import ConfigError, ErrorCode, MomoError, RequestAborted
from .options import RequestOptions
from .plugin_config import (
    ConfigLoadMeta,
    OpenClawPluginConfig,
    OpenCodePluginConfig,
    PiPluginConfig,
    PluginConfigResult,
    load_openclaw_plugin_config,
    load_opencode_plugin_config,
    load_pi_plugin_config,
    load_plugin_config,
    parse_inline_config,
    parse_openclaw_inline_config,
    parse_opencode_inline_config,
    parse_pi_inline_config,
)
from .raw import RawClient

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "ConfigLoadMeta",
    "ErrorCode",
    "MomoClient",
    "MomoClientConfig",
    "MomoError",
    "OpenClawPluginConfig",
    "OpenCodePluginConfig",
    "PiPluginConfig",
    "PluginConfigResult",
    "RawClient",
    "RequestAborted",
    "RequestOptions",
    "load_openclaw_plugin_config",
    "load_opencode_plugin_config",
    "load_pi_plugin_config",
    "load_plugin_config",
    "parse_inline_config",
    "parse_openclaw_inline_config",
    "parse_opencode_inline_config",
    "parse_pi_inline_config",
]
