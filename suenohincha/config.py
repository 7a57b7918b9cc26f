"""Environment-driven settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .db.utils import resolve_sqlite_url

# Project root directory (repo root)
ROOT_DIR = Path(__file__).resolve().parents[1]


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable '{name}' must be an integer") from exc


@dataclass(frozen=True)
class Settings:
    """Runtime configuration.

    Attributes
    ----------
    supabase_url : Optional[str]
        Base URL of the backend project, e.g. ``https://xyz.supabase.co``.
    supabase_anon_key : Optional[str]
        Public API key sent as ``apikey`` and bearer token.
    db_url : str
        SQLAlchemy URL of the local store used by :class:`SqlGateway`.
    gateway_timeout : int
        Seconds before a backend request is abandoned.
    serial_min_lookup_length : int
        Shorter normalized serials are not looked up.
    """

    supabase_url: Optional[str]
    supabase_anon_key: Optional[str]
    db_url: str
    gateway_timeout: int = 30
    serial_min_lookup_length: int = 3

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            supabase_url=os.getenv("SUPABASE_URL") or None,
            supabase_anon_key=os.getenv("SUPABASE_ANON_KEY") or None,
            db_url=resolve_sqlite_url(os.getenv("DB_URL", "sqlite:///./dev.db"), ROOT_DIR),
            gateway_timeout=_int_env("GATEWAY_TIMEOUT", 30),
            serial_min_lookup_length=_int_env("SERIAL_MIN_LOOKUP_LENGTH", 3),
        )


__all__ = ["ROOT_DIR", "Settings"]
