"""Unit tests for startup option resolution."""

from pathlib import Path

import pytest

from config import DEFAULT_PORT, ConfigError, ServerOptions, port_from_argv, resolve_config


def test_cli_flag_sets_port_when_option_absent() -> None:
    config = resolve_config({}, argv=["-p8080"])

    assert config.port == 8080


def test_explicit_port_option_beats_cli_flag() -> None:
    config = resolve_config({"port": 9999}, argv=["-p8080"])

    assert config.port == 9999


def test_default_port_without_option_or_flag() -> None:
    config = resolve_config(None, argv=[])

    assert config.port == DEFAULT_PORT == 5000


def test_first_matching_flag_wins() -> None:
    assert port_from_argv(["--verbose", "-p3000", "-p4000"]) == 3000


def test_malformed_port_flags_are_ignored() -> None:
    for argv in (["-p80"], ["-p123456"], ["-port8080"], ["-P8080"], ["-p80a0"], ["-p99999"]):
        assert resolve_config({}, argv=argv).port == DEFAULT_PORT


def test_cors_and_ls_default_on_when_absent() -> None:
    config = resolve_config({}, argv=[])

    assert config.cors_enabled is True
    assert config.dir_listing_enabled is True


def test_explicit_false_turns_cors_and_ls_off() -> None:
    config = resolve_config({"cors": False, "ls": 0}, argv=[])

    assert config.cors_enabled is False
    assert config.dir_listing_enabled is False


def test_server_options_dataclass_keeps_none_as_absent() -> None:
    config = resolve_config(ServerOptions(cors=None, ls=False), argv=[])

    assert config.cors_enabled is True
    assert config.dir_listing_enabled is False


def test_headers_are_kept_in_order(tmp_path: Path) -> None:
    config = resolve_config(
        {"headers": ["X-One: 1", "X-Two: 2"], "root": tmp_path},
        argv=[],
    )

    assert config.extra_headers == ("X-One: 1", "X-Two: 2")
    assert config.root == tmp_path.resolve()


def test_root_defaults_to_working_directory() -> None:
    config = resolve_config({}, argv=[])

    assert config.root == Path.cwd().resolve()


def test_config_is_immutable() -> None:
    config = resolve_config({}, argv=[])

    with pytest.raises(AttributeError):
        config.port = 1  # type: ignore[misc]


def test_out_of_range_port_option_raises() -> None:
    with pytest.raises(ConfigError, match="Port out of range"):
        resolve_config({"port": 70000}, argv=[])


def test_unknown_options_are_ignored() -> None:
    config = resolve_config({"port": 8080, "verbose": True, "prot": 1}, argv=[])

    assert config.port == 8080
    assert config.cors_enabled is True
