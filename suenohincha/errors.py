"""Exception hierarchy for serial registration and draws."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

if TYPE_CHECKING:
    from .types import Role, Winner


class PromoError(Exception):
    """Base class for every error raised by this package."""


class NotFoundError(PromoError):
    """The serial does not exist in the campaign."""

    def __init__(self, serial_number: str) -> None:
        super().__init__(f"Serial '{serial_number}' not found")
        self.serial_number = serial_number


class IneligibleError(PromoError):
    """The serial exists but cannot be registered.

    ``reason`` is one of ``"blocked"``, ``"already_registered"`` or ``"legacy"``.
    """

    def __init__(
        self,
        serial_number: str,
        reason: str,
        *,
        role: Optional["Role"] = None,
    ) -> None:
        super().__init__(f"Serial '{serial_number}' is not eligible: {reason}")
        self.serial_number = serial_number
        self.reason = reason
        self.role = role


class InvalidFormatError(PromoError):
    """The serial contains characters that are not A-Z or 0-9."""


class GatewayError(PromoError):
    """The backend answered with an error."""


class TransientLookupError(GatewayError):
    """Network failure or timeout talking to the backend; safe to retry."""

    retryable = True


class PoolExhaustedError(PromoError):
    """Fewer eligible coupons than requested finalists.

    Stored on the draw session rather than raised: the partial winners list
    is still valid.
    """

    def __init__(self, selected: int, requested: int) -> None:
        super().__init__(
            f"Coupon pool exhausted after {selected} of {requested} winners"
        )
        self.selected = selected
        self.requested = requested


class PersistenceError(PromoError):
    """Saving draw results failed; ``winners`` is kept for a retry."""

    def __init__(self, message: str, winners: Sequence["Winner"]) -> None:
        super().__init__(message)
        self.winners = list(winners)


__all__ = [
    "GatewayError",
    "IneligibleError",
    "InvalidFormatError",
    "NotFoundError",
    "PersistenceError",
    "PoolExhaustedError",
    "PromoError",
    "TransientLookupError",
]
