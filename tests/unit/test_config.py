"""Tests for environment-driven configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from linear_context.config import DEFAULT_API_URL, ConfigError, LinearConfig


class TestFromEnv:
    def test_missing_key_raises(self) -> None:
        with pytest.raises(ConfigError, match="LINEAR_API_KEY"):
            LinearConfig.from_env()

    def test_blank_key_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LINEAR_API_KEY", "   ")
        with pytest.raises(ConfigError):
            LinearConfig.from_env()

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LINEAR_API_KEY", "lin_api_abc")
        config = LinearConfig.from_env()
        assert config.api_key == "lin_api_abc"
        assert config.api_url == DEFAULT_API_URL
        assert config.search_case_sensitive is False
        assert config.log_dir is None
        assert config.log_level == "INFO"

    def test_overrides(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("LINEAR_API_KEY", "lin_api_abc")
        monkeypatch.setenv("LINEAR_API_URL", "http://localhost:9999/graphql")
        monkeypatch.setenv("LINEAR_SEARCH_CASE_SENSITIVE", "true")
        monkeypatch.setenv("LINEAR_CONTEXT_LOG_DIR", str(tmp_path))
        monkeypatch.setenv("LINEAR_CONTEXT_LOG_LEVEL", "debug")
        config = LinearConfig.from_env()
        assert config.api_url == "http://localhost:9999/graphql"
        assert config.search_case_sensitive is True
        assert config.log_dir == tmp_path
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize("raw", ["false", "0", "no", "off", ""])
    def test_case_sensitive_false_values(self, monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
        monkeypatch.setenv("LINEAR_API_KEY", "k")
        monkeypatch.setenv("LINEAR_SEARCH_CASE_SENSITIVE", raw)
        assert LinearConfig.from_env().search_case_sensitive is False

    def test_env_file(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        env_file = tmp_path / "custom.env"
        env_file.write_text("LINEAR_API_KEY=lin_api_from_file\n")
        config = LinearConfig.from_env(env_file)
        assert config.api_key == "lin_api_from_file"

    def test_dotenv_in_cwd(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        (tmp_path / ".env").write_text("LINEAR_API_KEY=lin_api_cwd\n")
        monkeypatch.chdir(tmp_path)
        assert LinearConfig.from_env().api_key == "lin_api_cwd"

    def test_environment_wins_over_env_file(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("LINEAR_API_KEY", "lin_api_env")
        env_file = tmp_path / "custom.env"
        env_file.write_text("LINEAR_API_KEY=lin_api_from_file\n")
        assert LinearConfig.from_env(env_file).api_key == "lin_api_env"


class TestAuthorizationHeader:
    def test_personal_key(self) -> None:
        assert LinearConfig(api_key="lin_api_x").authorization_header == "lin_api_x"

    def test_oauth_token(self) -> None:
        assert LinearConfig(api_key="tok").authorization_header == "Bearer tok"

    def test_already_bearer(self) -> None:
        assert LinearConfig(api_key="Bearer tok").authorization_header == "Bearer tok"
