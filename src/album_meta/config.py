# src/album_meta/config.py

"""Shared configuration and environment setup."""

from __future__ import annotations

from dataclasses import dataclass
from os import getenv

from dotenv import load_dotenv

load_dotenv(override=True)

VERSION = "0.1.0"

DEFAULT_USER_AGENT = f"album-meta/{VERSION}"
DEFAULT_TIMEOUT = 10.0
DEFAULT_OUTPUT_DIR = "."


@dataclass(frozen=True, slots=True)
class Settings:
    """Runtime settings read from the environment (and `.env`)."""

    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = DEFAULT_TIMEOUT
    output_dir: str = DEFAULT_OUTPUT_DIR


def get_settings() -> Settings:
    """Return settings built from ALBUM_META_* env vars.

    Unset variables fall back to the module defaults. A malformed
    ALBUM_META_TIMEOUT raises ValueError.
    """
    raw_timeout = getenv("ALBUM_META_TIMEOUT")
    timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
    if timeout <= 0:
        msg = "ALBUM_META_TIMEOUT must be positive."
        raise ValueError(msg)

    return Settings(
        user_agent=getenv("ALBUM_META_USER_AGENT") or DEFAULT_USER_AGENT,
        timeout=timeout,
        output_dir=getenv("ALBUM_META_OUTPUT_DIR") or DEFAULT_OUTPUT_DIR,
    )
