"""Layered configuration for the Momo plugin integrations.

Each plugin (``openclaw``, ``opencode``, ``pi``) reads the same two JSONC files:

* ``<cwd>/.momo.jsonc`` (project scope)
* ``<global dir>/momo.jsonc`` (global scope, one directory per plugin)

Both files hold one object per plugin name. For every field the effective
value is taken from, in order: the plugin's environment variable
(``<PREFIX><FIELD_NAME>``), the project file, the global file, the built-in
default. Values are coerced leniently: anything that does not fit falls back
to the default. The only hard failure is a ``${VAR}`` placeholder naming an
unset variable.

Plugins are described declaratively by a :class:`PluginSchema`; a single
engine (:func:`resolve_fields`) resolves any of them.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Generic, Literal, TypeVar, Union

from . import jsonc
from .errors import ConfigError
from .instrumentation import logger
from .providers import HostInfo, LocalFileProvider, process_env

if TYPE_CHECKING:
    from .providers import FileProvider

PluginName = Literal["openclaw", "opencode", "pi"]
FieldKind = Literal["string", "optional_string", "boolean", "bounded_int", "choice"]

DEFAULT_BASE_URL = "http://localhost:3000"
PROJECT_CONFIG_NAME = ".momo.jsonc"
GLOBAL_CONFIG_NAME = "momo.jsonc"

TRUE_VALUES: tuple[str, ...] = ("true", "1", "yes")
FALSE_VALUES: tuple[str, ...] = ("false", "0", "no")

_ENV_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")
_NON_IDENTIFIER = re.compile(r"[^A-Za-z0-9_]+")
_UNDERSCORES = re.compile(r"_+")
_MISSING = object()

C = TypeVar("C")


# --- coercions ------------------------------------------------------------


def interpolate_env(value: str, env: Mapping[str, str]) -> str:
    """Replace ``${VAR}`` placeholders; an unset or empty variable raises ``ConfigError``."""

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        resolved = env.get(name)
        if not resolved:
            raise ConfigError(name)
        return resolved

    return _ENV_PLACEHOLDER.sub(_replace, value)


def to_boolean(
    value: Any,
    fallback: bool,
    true_values: tuple[str, ...] = TRUE_VALUES,
    false_values: tuple[str, ...] = FALSE_VALUES,
) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.lower()
        if lowered in true_values:
            return True
        if lowered in false_values:
            return False
    return fallback


def to_bounded_int(value: Any, fallback: int, minimum: int, maximum: int) -> int:
    """Round ``value`` half up and clamp it into ``[minimum, maximum]``."""

    if isinstance(value, bool):
        return fallback
    if isinstance(value, int):
        # Clamped as-is; arbitrarily large ints do not fit in a float.
        return max(minimum, min(maximum, value))
    if isinstance(value, float):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return fallback
    else:
        return fallback
    if not math.isfinite(number):
        return fallback
    rounded = math.floor(number + 0.5)
    return max(minimum, min(maximum, rounded))


def sanitize_identifier(value: str) -> str:
    """``"My Tag!!"`` -> ``"My_Tag"``."""

    collapsed = _UNDERSCORES.sub("_", _NON_IDENTIFIER.sub("_", value))
    return collapsed.strip("_")


# --- schemas --------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """One recognized configuration key.

    ``default`` is either a value or a callable taking :class:`HostInfo`,
    for defaults derived from the machine (e.g. the host name).
    """

    name: str
    key: str
    kind: FieldKind
    default: Any = None
    bounds: tuple[int, int] | None = None
    choices: tuple[str, ...] = ()
    sanitize: bool = False

    def env_key(self, prefix: str) -> str:
        return f"{prefix}{self.name.upper()}"

    def default_value(self, host: HostInfo) -> Any:
        if callable(self.default):
            return self.default(host)
        return self.default


@dataclass(frozen=True, slots=True)
class PluginSchema:
    name: PluginName
    env_prefix: str
    global_dir: tuple[str, ...]
    fields: tuple[FieldSpec, ...]
    config_cls: type

    def global_config_dir(self, host: HostInfo) -> Path:
        return host.home().joinpath(*self.global_dir)


@dataclass(slots=True)
class OpenClawPluginConfig:
    base_url: str
    api_key: str | None
    container_tag: str
    per_agent_memory: bool
    auto_recall: bool
    auto_capture: bool
    max_recall_results: int
    profile_frequency: int
    capture_mode: Literal["all", "everything"]
    debug: bool


@dataclass(slots=True)
class OpenCodePluginConfig:
    base_url: str
    api_key: str | None
    container_tag_user: str | None
    container_tag_project: str | None


@dataclass(slots=True)
class PiPluginConfig:
    base_url: str
    api_key: str | None
    container_tag: str
    auto_recall: bool
    auto_capture: bool
    max_recall_results: int
    profile_frequency: int
    debug: bool


ResolvedPluginConfig = Union[OpenClawPluginConfig, OpenCodePluginConfig, PiPluginConfig]


def _hostname_tag(prefix: str) -> Callable[[HostInfo], str]:
    def _default(host: HostInfo) -> str:
        return f"{prefix}_{host.hostname()}"

    return _default


_CONNECTION_FIELDS = (
    FieldSpec("base_url", "baseUrl", "string", DEFAULT_BASE_URL),
    FieldSpec("api_key", "apiKey", "optional_string"),
)

_MEMORY_FIELDS = (
    FieldSpec("auto_recall", "autoRecall", "boolean", True),
    FieldSpec("auto_capture", "autoCapture", "boolean", True),
    FieldSpec("max_recall_results", "maxRecallResults", "bounded_int", 10, bounds=(1, 20)),
    FieldSpec("profile_frequency", "profileFrequency", "bounded_int", 50, bounds=(1, 500)),
)

OPENCLAW_SCHEMA = PluginSchema(
    name="openclaw",
    env_prefix="MOMO_OPENCLAW_",
    global_dir=(".openclaw",),
    fields=(
        *_CONNECTION_FIELDS,
        FieldSpec("container_tag", "containerTag", "string", _hostname_tag("oclw"), sanitize=True),
        FieldSpec("per_agent_memory", "perAgentMemory", "boolean", False),
        *_MEMORY_FIELDS,
        FieldSpec("capture_mode", "captureMode", "choice", "all", choices=("all", "everything")),
        FieldSpec("debug", "debug", "boolean", False),
    ),
    config_cls=OpenClawPluginConfig,
)

OPENCODE_SCHEMA = PluginSchema(
    name="opencode",
    env_prefix="MOMO_OPENCODE_",
    global_dir=(".config", "opencode"),
    fields=(
        *_CONNECTION_FIELDS,
        FieldSpec("container_tag_user", "containerTagUser", "optional_string"),
        FieldSpec("container_tag_project", "containerTagProject", "optional_string"),
    ),
    config_cls=OpenCodePluginConfig,
)

PI_SCHEMA = PluginSchema(
    name="pi",
    env_prefix="MOMO_PI_",
    global_dir=(".pi",),
    fields=(
        *_CONNECTION_FIELDS,
        FieldSpec("container_tag", "containerTag", "string", _hostname_tag("pi"), sanitize=True),
        *_MEMORY_FIELDS,
        FieldSpec("debug", "debug", "boolean", False),
    ),
    config_cls=PiPluginConfig,
)

SCHEMAS: dict[str, PluginSchema] = {
    schema.name: schema for schema in (OPENCLAW_SCHEMA, OPENCODE_SCHEMA, PI_SCHEMA)
}


def get_schema(plugin: str) -> PluginSchema:
    try:
        return SCHEMAS[plugin]
    except KeyError:
        raise ValueError(f"unknown plugin {plugin!r}; expected one of {sorted(SCHEMAS)}") from None


# --- field engine ---------------------------------------------------------


def _coerce(field_spec: FieldSpec, value: Any, default: Any, env: Mapping[str, str]) -> Any:
    if field_spec.kind in ("string", "optional_string"):
        result = interpolate_env(value, env) if isinstance(value, str) else default
        if field_spec.sanitize and isinstance(result, str):
            result = sanitize_identifier(result)
        return result
    if field_spec.kind == "boolean":
        return to_boolean(value, default)
    if field_spec.kind == "bounded_int":
        minimum, maximum = field_spec.bounds or (-math.inf, math.inf)
        return to_bounded_int(value, default, minimum, maximum)
    if field_spec.kind == "choice":
        return value if isinstance(value, str) and value in field_spec.choices else default
    raise ValueError(f"unsupported field kind {field_spec.kind!r}")


def resolve_fields(
    schema: PluginSchema,
    values: Mapping[str, Any],
    *,
    env: Mapping[str, str],
    host: HostInfo,
    env_prefix: str | None = None,
) -> dict[str, Any]:
    """Resolve every field of ``schema`` from env, ``values`` and defaults."""

    prefix = env_prefix or schema.env_prefix
    resolved: dict[str, Any] = {}
    for field_spec in schema.fields:
        env_value = env.get(field_spec.env_key(prefix))
        if env_value is not None:
            source = env_value
        else:
            source = values.get(field_spec.key, _MISSING)
        resolved[field_spec.name] = _coerce(field_spec, source, field_spec.default_value(host), env)
    return resolved


# --- file loading ---------------------------------------------------------


@dataclass(slots=True)
class ConfigLoadMeta:
    """Where a configuration came from. Files are only set when found on disk."""

    cwd: Path
    project_file: Path | None = None
    global_file: Path | None = None


@dataclass
class PluginConfigResult(Generic[C]):
    config: C
    meta: ConfigLoadMeta


def config_paths(
    schema: PluginSchema,
    cwd: Path,
    host: HostInfo,
    global_config_dir: Path | None = None,
) -> tuple[Path, Path]:
    """Return the (project, global) candidate file paths for a plugin."""

    global_dir = Path(global_config_dir) if global_config_dir else schema.global_config_dir(host)
    return cwd / PROJECT_CONFIG_NAME, global_dir / GLOBAL_CONFIG_NAME


def read_jsonc_file(path: Path, files: FileProvider) -> dict[str, Any] | None:
    """Parse ``path``; a missing, unreadable or malformed file yields ``None``."""

    try:
        if not files.exists(path):
            return None
        data = jsonc.loads(files.read_text(path))
    except (OSError, ValueError) as exc:
        logger.debug("plugin_config.file_unreadable", path=str(path), error=str(exc))
        return None
    if not isinstance(data, dict):
        logger.debug("plugin_config.file_not_object", path=str(path))
        return None
    return data


def merge_configs(*configs: Any) -> dict[str, Any]:
    """Overlay mappings left to right, skipping non-mappings.

    An explicit ``null`` overlays like any other value; the field coercion
    then falls back to the default.
    """

    merged: dict[str, Any] = {}
    for config in configs:
        if isinstance(config, dict):
            merged.update(config)
    return merged


def load_plugin_config(
    plugin: PluginName,
    *,
    cwd: str | Path | None = None,
    global_config_dir: str | Path | None = None,
    env_prefix: str | None = None,
    env: Mapping[str, str] | None = None,
    files: FileProvider | None = None,
    host: HostInfo | None = None,
) -> PluginConfigResult[Any]:
    """Resolve a plugin's configuration from files, environment and defaults.

    Re-reads everything on each call; nothing is cached.
    """

    schema = get_schema(plugin)
    host = host or HostInfo()
    files = files or LocalFileProvider()
    env = process_env() if env is None else env
    cwd_path = Path(cwd) if cwd is not None else host.cwd()
    global_dir = Path(global_config_dir) if global_config_dir is not None else None

    project_path, global_path = config_paths(schema, cwd_path, host, global_dir)
    project_config = read_jsonc_file(project_path, files) or {}
    global_config = read_jsonc_file(global_path, files) or {}
    merged = merge_configs(global_config.get(plugin), project_config.get(plugin))

    values = resolve_fields(schema, merged, env=env, host=host, env_prefix=env_prefix)
    meta = ConfigLoadMeta(
        cwd=cwd_path,
        project_file=project_path if files.exists(project_path) else None,
        global_file=global_path if files.exists(global_path) else None,
    )
    logger.debug(
        "plugin_config.loaded",
        plugin=plugin,
        cwd=str(cwd_path),
        project_file=str(meta.project_file) if meta.project_file else None,
        global_file=str(meta.global_file) if meta.global_file else None,
    )
    return PluginConfigResult(config=schema.config_cls(**values), meta=meta)


def load_openclaw_plugin_config(**options: Any) -> PluginConfigResult[OpenClawPluginConfig]:
    return load_plugin_config("openclaw", **options)


def load_opencode_plugin_config(**options: Any) -> PluginConfigResult[OpenCodePluginConfig]:
    return load_plugin_config("opencode", **options)


def load_pi_plugin_config(**options: Any) -> PluginConfigResult[PiPluginConfig]:
    return load_plugin_config("pi", **options)


# --- inline configs -------------------------------------------------------


def parse_inline_config(
    plugin: PluginName,
    inline_config: Mapping[str, Any] | None,
    *,
    env: Mapping[str, str] | None = None,
    host: HostInfo | None = None,
    env_prefix: str | None = None,
) -> Any:
    """Resolve a config object the host application already has in memory.

    Same field rules as :func:`load_plugin_config`; no files are read.
    """

    schema = get_schema(plugin)
    values = resolve_fields(
        schema,
        inline_config if isinstance(inline_config, Mapping) else {},
        env=process_env() if env is None else env,
        host=host or HostInfo(),
        env_prefix=env_prefix,
    )
    return schema.config_cls(**values)


def parse_openclaw_inline_config(
    inline_config: Mapping[str, Any] | None, **options: Any
) -> OpenClawPluginConfig:
    return parse_inline_config("openclaw", inline_config, **options)


def parse_opencode_inline_config(
    inline_config: Mapping[str, Any] | None, **options: Any
) -> OpenCodePluginConfig:
    return parse_inline_config("opencode", inline_config, **options)


def parse_pi_inline_config(inline_config: Mapping[str, Any] | None, **options: Any) -> PiPluginConfig:
    return parse_inline_config("pi", inline_config, **options)
