from __future__ import annotations

from pathlib import Path

import pytest

from momo_sdk import ConfigError, MomoClient
from momo_sdk.plugin_config import (
    OpenClawPluginConfig,
    OpenCodePluginConfig,
    PiPluginConfig,
    get_schema,
    interpolate_env,
    load_openclaw_plugin_config,
    load_opencode_plugin_config,
    load_pi_plugin_config,
    load_plugin_config,
    merge_configs,
    parse_openclaw_inline_config,
    parse_opencode_inline_config,
    parse_pi_inline_config,
    sanitize_identifier,
    to_boolean,
    to_bounded_int,
)
from momo_sdk.providers import HostInfo, MemoryFileProvider


@pytest.fixture
def home(tmp_path: Path) -> Path:
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def project(tmp_path: Path) -> Path:
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def host(home: Path, project: Path) -> HostInfo:
    return HostInfo(home=lambda: home, hostname=lambda: "build-box.local", cwd=lambda: project)


def write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


# Coercions
def test_bounded_int_clamps():
    assert to_bounded_int("999", 10, 1, 20) == 20
    assert to_bounded_int("-5", 10, 1, 20) == 1
    assert to_bounded_int(7, 10, 1, 20) == 7


def test_bounded_int_rounds_half_up():
    assert to_bounded_int(2.5, 10, 1, 20) == 3
    assert to_bounded_int("4.4", 10, 1, 20) == 4


def test_bounded_int_falls_back_on_garbage():
    assert to_bounded_int("lots", 10, 1, 20) == 10
    assert to_bounded_int(None, 10, 1, 20) == 10
    assert to_bounded_int(True, 10, 1, 20) == 10
    assert to_bounded_int(float("nan"), 10, 1, 20) == 10


def test_boolean_tokens():
    assert to_boolean("YES", False) is True
    assert to_boolean("0", True) is False
    assert to_boolean(False, True) is False
    assert to_boolean("maybe", True) is True
    assert to_boolean(1, False) is False


def test_sanitize_identifier():
    assert sanitize_identifier("My Tag!!") == "My_Tag"
    assert sanitize_identifier("__a--b__c__") == "a_b_c"
    assert sanitize_identifier("oclw_build-box.local") == "oclw_build_box_local"


def test_interpolate_env():
    assert interpolate_env("Bearer ${TOKEN}", {"TOKEN": "abc"}) == "Bearer abc"
    assert interpolate_env("plain", {}) == "plain"


def test_interpolate_env_missing_variable():
    with pytest.raises(ConfigError) as excinfo:
        interpolate_env("${MISSING_KEY}", {})
    assert excinfo.value.variable == "MISSING_KEY"
    assert "MISSING_KEY" in str(excinfo.value)


def test_interpolate_env_empty_variable_counts_as_unset():
    with pytest.raises(ConfigError):
        interpolate_env("${EMPTY}", {"EMPTY": ""})


def test_merge_configs_project_wins_and_nulls_overlay():
    merged = merge_configs({"a": 1, "b": 2, "c": 3}, {"b": 4, "c": None}, None, "junk")
    assert merged == {"a": 1, "b": 4, "c": None}


def test_bounded_int_huge_integer_is_clamped():
    assert to_bounded_int(10**400, 10, 1, 20) == 20
    assert to_bounded_int(-(10**400), 10, 1, 20) == 1
    assert to_bounded_int("1" + "0" * 400, 10, 1, 20) == 10


def test_unknown_plugin():
    with pytest.raises(ValueError):
        get_schema("emacs")


# Precedence
def test_base_url_precedence(home: Path, project: Path, host: HostInfo):
    write(project / ".momo.jsonc", '{"pi": {"baseUrl": "http://project"}}')
    write(home / ".pi" / "momo.jsonc", '{"pi": {"baseUrl": "http://global"}}')
    env = {"MOMO_PI_BASE_URL": "http://env"}

    assert load_pi_plugin_config(env=env, host=host).config.base_url == "http://env"
    assert load_pi_plugin_config(env={}, host=host).config.base_url == "http://project"

    (project / ".momo.jsonc").unlink()
    assert load_pi_plugin_config(env={}, host=host).config.base_url == "http://global"

    (home / ".pi" / "momo.jsonc").unlink()
    assert load_pi_plugin_config(env={}, host=host).config.base_url == "http://localhost:3000"


def test_project_and_global_keys_merge(home: Path, project: Path, host: HostInfo):
    write(project / ".momo.jsonc", '{"openclaw": {"debug": true}}')
    write(home / ".openclaw" / "momo.jsonc", '{"openclaw": {"maxRecallResults": 5, "debug": false}}')

    config = load_openclaw_plugin_config(env={}, host=host).config
    assert config.debug is True
    assert config.max_recall_results == 5


def test_defaults(host: HostInfo):
    result = load_plugin_config("openclaw", env={}, host=host)
    assert result.config == OpenClawPluginConfig(
        base_url="http://localhost:3000",
        api_key=None,
        container_tag="oclw_build_box_local",
        per_agent_memory=False,
        auto_recall=True,
        auto_capture=True,
        max_recall_results=10,
        profile_frequency=50,
        capture_mode="all",
        debug=False,
    )
    assert result.meta.project_file is None
    assert result.meta.global_file is None


def test_pi_env_overrides_every_kind(host: HostInfo):
    env = {
        "MOMO_PI_API_KEY": "secret",
        "MOMO_PI_CONTAINER_TAG": "My Tag!!",
        "MOMO_PI_AUTO_RECALL": "no",
        "MOMO_PI_MAX_RECALL_RESULTS": "999",
        "MOMO_PI_PROFILE_FREQUENCY": "-5",
        "MOMO_PI_DEBUG": "TRUE",
    }
    config = load_pi_plugin_config(env=env, host=host).config
    assert config == PiPluginConfig(
        base_url="http://localhost:3000",
        api_key="secret",
        container_tag="My_Tag",
        auto_recall=False,
        auto_capture=True,
        max_recall_results=20,
        profile_frequency=1,
        debug=True,
    )


def test_env_prefix_override(host: HostInfo):
    env = {"CUSTOM_BASE_URL": "http://custom", "MOMO_PI_BASE_URL": "http://ignored"}
    config = load_pi_plugin_config(env=env, host=host, env_prefix="CUSTOM_").config
    assert config.base_url == "http://custom"


def test_capture_mode_choice(project: Path, host: HostInfo):
    write(project / ".momo.jsonc", '{"openclaw": {"captureMode": "everything"}}')
    assert load_openclaw_plugin_config(env={}, host=host).config.capture_mode == "everything"

    write(project / ".momo.jsonc", '{"openclaw": {"captureMode": "EVERYTHING"}}')
    assert load_openclaw_plugin_config(env={}, host=host).config.capture_mode == "all"


def test_opencode_global_dir(home: Path, host: HostInfo):
    write(
        home / ".config" / "opencode" / "momo.jsonc",
        """{
          // opencode settings
          "opencode": {
            "apiKey": "${MOMO_TOKEN}",
            "containerTagUser": "me",
          },
        }""",
    )
    result = load_opencode_plugin_config(env={"MOMO_TOKEN": "tok"}, host=host)
    assert result.config == OpenCodePluginConfig(
        base_url="http://localhost:3000",
        api_key="tok",
        container_tag_user="me",
        container_tag_project=None,
    )
    assert result.meta.global_file == home / ".config" / "opencode" / "momo.jsonc"


def test_global_config_dir_override(tmp_path: Path, host: HostInfo):
    custom = tmp_path / "custom"
    write(custom / "momo.jsonc", '{"pi": {"debug": "yes"}}')
    result = load_pi_plugin_config(env={}, host=host, global_config_dir=custom)
    assert result.config.debug is True
    assert result.meta.global_file == custom / "momo.jsonc"


def test_meta_records_cwd_and_found_files(project: Path, host: HostInfo):
    write(project / ".momo.jsonc", "{}")
    result = load_pi_plugin_config(env={}, host=host)
    assert result.meta.cwd == project
    assert result.meta.project_file == project / ".momo.jsonc"
    assert result.meta.global_file is None


def test_explicit_cwd(tmp_path: Path, host: HostInfo):
    other = tmp_path / "other"
    write(other / ".momo.jsonc", '{"pi": {"maxRecallResults": 3}}')
    result = load_pi_plugin_config(env={}, host=host, cwd=other)
    assert result.config.max_recall_results == 3
    assert result.meta.cwd == other


def test_malformed_file_is_treated_as_absent(home: Path, project: Path, host: HostInfo):
    write(project / ".momo.jsonc", '{"pi": {"baseUrl": ')
    write(home / ".pi" / "momo.jsonc", '{"pi": {"baseUrl": "http://global"}}')
    assert load_pi_plugin_config(env={}, host=host).config.base_url == "http://global"


def test_non_object_sections_are_ignored(project: Path, host: HostInfo):
    write(project / ".momo.jsonc", '{"pi": ["not", "an", "object"]}')
    assert load_pi_plugin_config(env={}, host=host).config.base_url == "http://localhost:3000"


def test_missing_interpolation_variable_is_fatal(project: Path, host: HostInfo):
    write(project / ".momo.jsonc", '{"pi": {"apiKey": "${MOMO_SECRET}"}}')
    with pytest.raises(ConfigError) as excinfo:
        load_pi_plugin_config(env={}, host=host)
    assert excinfo.value.variable == "MOMO_SECRET"


def test_non_string_file_value_falls_back(project: Path, host: HostInfo):
    write(project / ".momo.jsonc", '{"pi": {"baseUrl": 42, "maxRecallResults": "many"}}')
    config = load_pi_plugin_config(env={}, host=host).config
    assert config.base_url == "http://localhost:3000"
    assert config.max_recall_results == 10


def test_memory_file_provider(host: HostInfo):
    files = MemoryFileProvider({Path("/work/.momo.jsonc"): '{"pi": {"containerTag": "team a"}}'})
    result = load_pi_plugin_config(env={}, host=host, cwd="/work", files=files)
    assert result.config.container_tag == "team_a"
    assert result.meta.project_file == Path("/work/.momo.jsonc")


def test_reads_process_environment_by_default(monkeypatch, host: HostInfo):
    monkeypatch.setenv("MOMO_PI_BASE_URL", "http://from-process")
    assert load_pi_plugin_config(host=host).config.base_url == "http://from-process"


# Inline configs
def test_inline_config_skips_files(project: Path, host: HostInfo):
    write(project / ".momo.jsonc", '{"openclaw": {"debug": true}}')
    config = parse_openclaw_inline_config({"maxRecallResults": 12}, env={}, host=host)
    assert config.max_recall_results == 12
    assert config.debug is False


def test_inline_config_none(host: HostInfo):
    config = parse_opencode_inline_config(None, env={}, host=host)
    assert config.base_url == "http://localhost:3000"
    assert config.container_tag_user is None


def test_inline_config_still_honours_env(host: HostInfo):
    config = parse_pi_inline_config({"baseUrl": "http://inline"}, env={"MOMO_PI_BASE_URL": "http://env"}, host=host)
    assert config.base_url == "http://env"


def test_client_from_plugin_config(host: HostInfo):
    config = parse_pi_inline_config(
        {"baseUrl": "http://momo:3100", "apiKey": "k", "containerTag": "pi tag"}, env={}, host=host
    )
    client = MomoClient.from_plugin_config(config)
    assert client.config.base_url == "http://momo:3100"
    assert client.config.api_key == "k"
    assert client.config.default_container_tag == "pi_tag"


def test_project_null_overlays_global_value(home: Path, project: Path, host: HostInfo):
    write(project / ".momo.jsonc", '{"pi": {"baseUrl": null, "debug": null}}')
    write(home / ".pi" / "momo.jsonc", '{"pi": {"baseUrl": "http://global", "debug": true}}')
    config = load_pi_plugin_config(env={}, host=host).config
    assert config.base_url == "http://localhost:3000"
    assert config.debug is False


def test_huge_file_integer_does_not_fail_loading(project: Path, host: HostInfo):
    write(project / ".momo.jsonc", '{"pi": {"maxRecallResults": 1' + "0" * 400 + "}}")
    assert load_pi_plugin_config(env={}, host=host).config.max_recall_results == 20
