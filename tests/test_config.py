"""Tests for configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from tome.config import DEFAULT_API_URL, AppConfig, load_config

_ENV_VARS = (
    "TOME_API_URL",
    "TOME_STORAGE_URL",
    "TOME_AUTH_TOKEN",
    "TOME_REQUEST_TIMEOUT",
    "TOME_WORDS_PER_PAGE",
    "TOME_LARGE_BOOK_PAGES",
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.chdir(tmp_path)


class TestAppConfig:
    def test_defaults(self, tmp_path: Path):
        config = AppConfig(data_dir=tmp_path / "data", config_dir=tmp_path / "config")
        assert config.api_base_url == DEFAULT_API_URL
        assert config.words_per_page == 300
        assert config.large_book_pages == 50
        assert config.slider_debounce == 0.3
        assert config.dock_hide_delay == 3.0
        assert config.reading_tick == 60.0
        assert config.log_path == tmp_path / "data" / "tome.log"

    def test_dirs_created(self, tmp_path: Path):
        data = tmp_path / "data"
        conf = tmp_path / "config"
        AppConfig(data_dir=data, config_dir=conf)
        assert data.exists()
        assert conf.exists()

    def test_non_positive_words_per_page_uses_default(self, tmp_path: Path):
        config = AppConfig(
            data_dir=tmp_path / "d", config_dir=tmp_path / "c", words_per_page=0
        )
        assert config.words_per_page == 300

    def test_is_authenticated(self, tmp_path: Path):
        config = AppConfig(data_dir=tmp_path / "d", config_dir=tmp_path / "c")
        assert config.is_authenticated is False
        config.auth_token = "abc"
        assert config.is_authenticated is True


class TestLoadConfig:
    def test_load_from_env_file(self, tmp_path: Path):
        env_file = tmp_path / "custom.env"
        env_file.write_text(
            "TOME_API_URL=https://tome.example/api/\n"
            "TOME_AUTH_TOKEN=secret\n"
            "TOME_WORDS_PER_PAGE=250\n"
            "TOME_LARGE_BOOK_PAGES=80\n"
        )
        config = load_config(env_path=env_file)
        assert config.api_base_url == "https://tome.example/api"
        assert config.auth_token == "secret"
        assert config.words_per_page == 250
        assert config.large_book_pages == 80

    def test_defaults_when_env_empty(self, tmp_path: Path):
        env_file = tmp_path / "empty.env"
        env_file.write_text("")
        config = load_config(env_path=env_file)
        assert config.api_base_url == DEFAULT_API_URL
        assert config.auth_token == ""
        assert config.words_per_page == 300

    def test_non_positive_words_per_page_falls_back(self, tmp_path: Path):
        env_file = tmp_path / "zero.env"
        env_file.write_text("TOME_WORDS_PER_PAGE=0\nTOME_LARGE_BOOK_PAGES=-5\n")
        config = load_config(env_path=env_file)
        assert config.words_per_page == 300
        assert config.large_book_pages == 50

    def test_invalid_number_falls_back(self, tmp_path: Path):
        env_file = tmp_path / "bad.env"
        env_file.write_text("TOME_WORDS_PER_PAGE=lots\nTOME_REQUEST_TIMEOUT=soon\n")
        config = load_config(env_path=env_file)
        assert config.words_per_page == 300
        assert config.request_timeout == 30.0
