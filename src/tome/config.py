"""Configuration management via .env file."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_API_URL = "http://localhost:5000/api"
DEFAULT_STORAGE_URL = "https://storage.googleapis.com/book_text_data/books"
DEFAULT_WORDS_PER_PAGE = 300
WORDS_PER_PAGE_OPTIONS = (200, 250, 300, 350, 400)


def _xdg_data_home() -> Path:
    return Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))


def _xdg_config_home() -> Path:
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def _int_env(name: str, default: int, minimum: Optional[int] = None) -> int:
    raw = os.getenv(name, "")
    try:
        value = int(raw) if raw else default
    except ValueError:
        return default
    if minimum is not None and value < minimum:
        return default
    return value


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "")
    try:
        return float(raw) if raw else default
    except ValueError:
        return default


@dataclass
class AppConfig:
    # Paths
    data_dir: Path = field(default_factory=lambda: _xdg_data_home() / "tome")
    config_dir: Path = field(default_factory=lambda: _xdg_config_home() / "tome")

    # Backend
    api_base_url: str = DEFAULT_API_URL
    storage_base_url: str = DEFAULT_STORAGE_URL
    auth_token: str = ""
    request_timeout: float = 30.0

    # Pagination
    words_per_page: int = DEFAULT_WORDS_PER_PAGE
    large_book_pages: int = 50  # local books above this re-delegate to the server

    # Timers (seconds)
    slider_debounce: float = 0.3
    dock_hide_delay: float = 3.0
    reading_tick: float = 60.0

    # Reading defaults
    default_line_spacing: int = 1  # 0=compact, 1=normal, 2=wide, 3=extra-wide

    log_path: Path = field(init=False)
    export_dir: Path = field(init=False)

    def __post_init__(self) -> None:
        self.log_path = self.data_dir / "tome.log"
        self.export_dir = self.data_dir / "exports"
        if self.words_per_page < 1:
            self.words_per_page = DEFAULT_WORDS_PER_PAGE
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.config_dir.mkdir(parents=True, exist_ok=True)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.auth_token)


def load_config(env_path: Optional[Path] = None) -> AppConfig:
    """Load config from .env file. Searches CWD then config dir."""
    search_paths = [
        env_path,
        Path.cwd() / ".env",
        _xdg_config_home() / "tome" / ".env",
        Path.home() / ".env",
    ]
    for p in search_paths:
        if p and p.exists():
            load_dotenv(p)
            break

    defaults = AppConfig()
    return AppConfig(
        api_base_url=os.getenv("TOME_API_URL", defaults.api_base_url).rstrip("/"),
        storage_base_url=os.getenv(
            "TOME_STORAGE_URL", defaults.storage_base_url
        ).rstrip("/"),
        auth_token=os.getenv("TOME_AUTH_TOKEN", ""),
        request_timeout=_float_env("TOME_REQUEST_TIMEOUT", defaults.request_timeout),
        words_per_page=_int_env(
            "TOME_WORDS_PER_PAGE", defaults.words_per_page, minimum=1
        ),
        large_book_pages=_int_env(
            "TOME_LARGE_BOOK_PAGES", defaults.large_book_pages, minimum=0
        ),
    )
