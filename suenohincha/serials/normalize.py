"""Normalization and format checks for TV serial numbers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

_WHITESPACE = re.compile(r"\s+")
_INVALID_CHARS = re.compile(r"[^A-Z0-9]")

SERIAL_EXAMPLE = "2540415M00039"
"""Serial format shown in the registration forms."""

SERIAL_EXAMPLE_WITH_DASH = "2540415M-00039"
"""How the serial appears on some labels."""

MODEL_EXAMPLE = "65Q7500G"
"""A model code, shown so users do not confuse it with the serial."""


def normalize_serial(raw: str, *, strip_dashes: bool = True) -> str:
    """Return the canonical form of a user-entered serial.

    Every whitespace run and (by default) every dash is removed and the result
    is upper-cased, so ``" 2540415m - 00039 "`` becomes ``"2540415M00039"``.
    The function is idempotent.

    Parameters
    ----------
    raw : str
        Text typed by the user.
    strip_dashes : bool, default: True
        ``False`` keeps dashes in place.
    """

    if raw is None:
        raise TypeError("serial must not be None")
    if not isinstance(raw, str):
        raise TypeError("serial must be a string")
    value = _WHITESPACE.sub("", raw)
    if strip_dashes:
        value = value.replace("-", "")
    return value.upper()


def detect_dash_in_serial(raw: str) -> bool:
    """Whether the user typed dashes, so the form can explain they are ignored."""
    return "-" in raw


@dataclass(frozen=True)
class FormatCheck:
    is_valid: bool
    error: Optional[str] = None


def validate_serial_format(
    serial: str,
    *,
    min_length: Optional[int] = None,
    max_length: Optional[int] = None,
) -> FormatCheck:
    """Check that a serial only contains A-Z and 0-9.

    The value is normalized first. An empty serial is not valid but carries no
    error message. Length bounds are only enforced when given.
    """

    normalized = normalize_serial(serial)
    if not normalized:
        return FormatCheck(is_valid=False)

    if min_length is not None and len(normalized) < min_length:
        return FormatCheck(
            is_valid=False,
            error="El serial parece muy corto. Verifica que lo hayas ingresado completo.",
        )
    if max_length is not None and len(normalized) > max_length:
        return FormatCheck(
            is_valid=False,
            error="El serial parece muy largo. Verifica que no hayas incluido información extra.",
        )

    invalid = _INVALID_CHARS.findall(normalized)
    if invalid:
        chars = ", ".join(dict.fromkeys(invalid))
        return FormatCheck(
            is_valid=False,
            error=(
                f"El serial contiene caracteres no válidos: {chars}. "
                "Solo puede contener letras (A-Z) y números (0-9)."
            ),
        )

    return FormatCheck(is_valid=True)


__all__ = [
    "FormatCheck",
    "MODEL_EXAMPLE",
    "SERIAL_EXAMPLE",
    "SERIAL_EXAMPLE_WITH_DASH",
    "detect_dash_in_serial",
    "normalize_serial",
    "validate_serial_format",
]
