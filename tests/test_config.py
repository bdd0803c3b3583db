"""Tests for configuration loading."""

from pathlib import Path

import pytest

from ancestry.config import (
    AncestryConfig,
    _apply_env_overrides,
    get_config,
    load_config,
    reset_config,
    save_default_config,
)
from ancestry.foundation.errors import ConfigError, ErrorCode


def write_config(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


class TestLoadConfig:
    def test_defaults(self) -> None:
        config = load_config()

        assert config == AncestryConfig()
        assert config.server.url == "127.0.0.1:9090"
        assert config.explore.default_target == "0-0-0-2400000000000000"
        assert config.explore.max_depth == 3
        assert config.debug is False

    def test_project_file(self) -> None:
        write_config(
            Path(".ancestry/config.yaml"),
            "server:\n  url: build-host:9090\nexplore:\n  max_depth: 5\n",
        )

        config = load_config()

        assert config.server.url == "build-host:9090"
        assert config.server.timeout == 30.0
        assert config.explore.max_depth == 5

    def test_explicit_path_wins(self, tmp_path: Path) -> None:
        write_config(Path(".ancestry/config.yaml"), "debug: true\n")
        explicit = write_config(tmp_path / "other.yaml", "server:\n  timeout: 2.5\n")

        config = load_config(explicit)

        assert config.server.timeout == 2.5
        assert config.debug is False

    def test_user_file(self, tmp_path: Path) -> None:
        write_config(tmp_path / "home" / ".ancestry" / "config.yaml", "debug: true\n")

        assert load_config().debug is True

    def test_empty_file(self) -> None:
        write_config(Path(".ancestry/config.yaml"), "")

        assert load_config() == AncestryConfig()

    @pytest.mark.parametrize(
        "content",
        [
            "server: [unclosed\n",
            "- just\n- a list\n",
            "server:\n  port: 9090\n",
        ],
    )
    def test_invalid_file(self, content: str) -> None:
        write_config(Path(".ancestry/config.yaml"), content)

        with pytest.raises(ConfigError) as exc_info:
            load_config()
        assert exc_info.value.code is ErrorCode.CONFIG_INVALID


class TestEnvOverrides:
    def test_overrides_file(self, monkeypatch: pytest.MonkeyPatch) -> None:
        write_config(Path(".ancestry/config.yaml"), "server:\n  url: from-file:1\n")
        monkeypatch.setenv("ANCESTRY_SERVER_URL", "from-env:2")
        monkeypatch.setenv("ANCESTRY_EXPLORE_MAX_DEPTH", "6")
        monkeypatch.setenv("ANCESTRY_DEBUG", "yes")

        config = load_config()

        assert config.server.url == "from-env:2"
        assert config.explore.max_depth == 6
        assert config.debug is True

    def test_coercion(self) -> None:
        result = _apply_env_overrides(
            {},
            {
                "ANCESTRY_SERVER_TIMEOUT": "2.5",
                "ANCESTRY_SERVER_CONNECT_TIMEOUT": "3",
                "ANCESTRY_EXPLORE_DEFAULT_TARGET": "10",
                "ANCESTRY_SERVER_NOPE": "x",
                "OTHER_VAR": "1",
            },
        )

        assert result == {
            "server": {"timeout": 2.5, "connect_timeout": 3},
            "explore": {"default_target": "10"},
        }


class TestGlobalConfig:
    def test_cached_until_reset(self) -> None:
        first = get_config()
        assert get_config() is first

        reset_config()

        assert get_config() is not first

    def test_save_default_config(self) -> None:
        path = save_default_config()

        assert path == Path(".ancestry/config.yaml")
        assert "default_target" in path.read_text()
        assert load_config(path) == AncestryConfig()
