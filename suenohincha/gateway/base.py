"""Abstract boundary to the backend that owns campaign data."""

from __future__ import annotations

import abc
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..types import (
    BuyerRegistrationResult,
    Coupon,
    PurchaseIdentity,
    SellerRegistrationResult,
    SerialRecord,
)


class BackendGateway(abc.ABC):
    """Everything the validator, the tombola and the workflows need remotely.

    Implementations raise :class:`~suenohincha.errors.TransientLookupError`
    for network failures and :class:`~suenohincha.errors.GatewayError` for
    any other backend error.
    """

    @abc.abstractmethod
    def lookup_serial(self, serial_number: str) -> Optional[SerialRecord]:
        """Exact-match lookup of a normalized serial; never mutates state."""

    @abc.abstractmethod
    def register_buyer_serial(
        self,
        serial_number: str,
        buyer: PurchaseIdentity,
        purchase_date: date,
    ) -> BuyerRegistrationResult:
        """Register a purchase and issue the buyer's coupons."""

    @abc.abstractmethod
    def register_seller_serial(
        self,
        seller_id: str,
        serial_number: str,
        client_name: str,
        sale_date: date,
        *,
        client_phone: Optional[str] = None,
        invoice_number: Optional[str] = None,
    ) -> SellerRegistrationResult:
        """Register a sale and accrue the seller's points."""

    @abc.abstractmethod
    def fetch_active_buyer_coupons(self) -> list[Coupon]:
        """All ``ACTIVE`` coupons owned by buyers."""

    @abc.abstractmethod
    def fetch_purchase_identity(self, purchase_id: str) -> Optional[PurchaseIdentity]:
        """Buyer details of a purchase, or ``None`` if it does not exist."""

    @abc.abstractmethod
    def persist_draw_result(
        self,
        name: str,
        preselected_count: int,
        finalists_count: int,
        executed_at: datetime,
        results: dict[str, Any],
    ) -> Optional[str]:
        """Store a completed draw; returns the new draw id when available."""

    @abc.abstractmethod
    def mark_coupons_used(self, codes: Sequence[str]) -> None:
        """Flip the given coupons to ``USED``."""


__all__ = ["BackendGateway"]
