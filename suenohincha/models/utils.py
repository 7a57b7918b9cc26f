"""Utility helpers for the models package."""

from __future__ import annotations

import secrets
import string
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

BASE36_ALPHABET = string.digits + string.ascii_uppercase


def coupon_prefix(year: Optional[int] = None) -> str:
    """Return the campaign coupon prefix, e.g. ``"BOL-2026"``."""
    return f"BOL-{year or datetime.now(timezone.utc).year}"


def _code_taken(session: Session, code: str) -> bool:
    from .coupon import IssuedCoupon

    # pending coupons are not visible to SELECT until flushed
    if any(isinstance(obj, IssuedCoupon) and obj.code == code for obj in session.new):
        return True
    return session.scalar(select(IssuedCoupon.id).where(IssuedCoupon.code == code)) is not None


def generate_unique_coupon_code(
    prefix: str,
    session: Optional[Session] = None,
    length: int = 5,
    max_attempts: int = 32,
) -> str:
    """Return ``"<prefix>-<suffix>"`` with a random base36 suffix.

    With a session the helper retries while the candidate is already stored
    (or pending) in ``IssuedCoupon.code``; without one the first candidate is
    returned.

    Raises
    ------
    RuntimeError
        If no free code was found within ``max_attempts``.
    """

    for _ in range(max_attempts):
        suffix = "".join(secrets.choice(BASE36_ALPHABET) for _ in range(length))
        candidate = f"{prefix}-{suffix}"
        if session is None or not _code_taken(session, candidate):
            return candidate

    raise RuntimeError("Unable to generate a unique coupon code after multiple attempts")
