"""Configuration management for chatdrive."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# getUpdates returns at most 100 updates per call.
MAX_PAGE_SIZE: int = 100


def get_env(key: str, default: str | None = None) -> str | None:
    """Get environment variable with optional default."""
    return os.getenv(key, default)


def get_env_int(key: str, default: int) -> int:
    """Get environment variable as integer."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def get_env_float(key: str, default: float) -> float:
    """Get environment variable as float."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


LOG_LEVEL = get_env("LOG_LEVEL", "INFO")


def setup_logging(level: str | None = None) -> None:
    """Configure root logging for applications embedding chatdrive."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, (level or LOG_LEVEL or "INFO").upper(), logging.INFO),
    )
    # httpx logs every request at INFO, including the bot token in the URL.
    logging.getLogger("httpx").setLevel(logging.WARNING)


@dataclass(slots=True, frozen=True)
class StoreSettings:
    """
    Tunables for the store and its transport.

    page_size_limit is capped by the Bot API (getUpdates returns at most 100).
    """

    page_size_limit: int = MAX_PAGE_SIZE
    connect_timeout_sec: float = 10.0
    read_timeout_sec: float = 30.0
    upload_timeout_sec: float = 300.0
    upload_chunk_size: int = 64 * 1024

    def __post_init__(self) -> None:
        if not 1 <= self.page_size_limit <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size_limit must be within 1..{MAX_PAGE_SIZE}")
        for name in ("connect_timeout_sec", "read_timeout_sec", "upload_timeout_sec"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if self.upload_chunk_size <= 0:
            raise ValueError("upload_chunk_size must be positive")

    @classmethod
    def from_env(cls) -> StoreSettings:
        """Build settings from CHATDRIVE_* variables, keeping defaults for invalid values."""
        defaults = cls()
        page_size = get_env_int("CHATDRIVE_PAGE_SIZE", defaults.page_size_limit)
        return cls(
            page_size_limit=max(1, min(MAX_PAGE_SIZE, page_size)),
            connect_timeout_sec=_positive(
                get_env_float("CHATDRIVE_CONNECT_TIMEOUT", defaults.connect_timeout_sec),
                defaults.connect_timeout_sec,
            ),
            read_timeout_sec=_positive(
                get_env_float("CHATDRIVE_READ_TIMEOUT", defaults.read_timeout_sec),
                defaults.read_timeout_sec,
            ),
            upload_timeout_sec=_positive(
                get_env_float("CHATDRIVE_UPLOAD_TIMEOUT", defaults.upload_timeout_sec),
                defaults.upload_timeout_sec,
            ),
            upload_chunk_size=_positive(
                get_env_int("CHATDRIVE_UPLOAD_CHUNK_SIZE", defaults.upload_chunk_size),
                defaults.upload_chunk_size,
            ),
        )


def _positive(value, default):
    return value if value > 0 else default
