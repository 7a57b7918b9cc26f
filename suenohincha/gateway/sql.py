"""Backend gateway over the local SQLAlchemy store.

Used for development, seeding and integration tests. The registration
procedures here are a simplified local stand-in for the remote ones: they
enforce the same eligibility rules and issue coupons or points, but do not
run document validation or notifications.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import GatewayError
from ..models import ClientPurchase, Draw, IssuedCoupon, Seller, SellerSale, TvSerial
from ..models.utils import coupon_prefix, generate_unique_coupon_code
from ..serials.validator import classify_serial
from ..types import (
    BuyerRegistrationResult,
    Coupon,
    OwnerType,
    PurchaseIdentity,
    RegistrationStatus,
    Role,
    SellerRegistrationResult,
    SerialRecord,
)
from .base import BackendGateway

logger = logging.getLogger(__name__)


def _to_int_id(value: str) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class SqlGateway(BackendGateway):
    """Gateway bound to a SQLAlchemy session.

    The gateway only flushes; committing is left to the caller's
    ``Session.begin()`` block.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _find_serial(
        self, serial_number: str
    ) -> tuple[Optional[TvSerial], Optional[SerialRecord]]:
        try:
            serial = TvSerial.get_by_serial_number(self._session, serial_number)
            return serial, serial.to_record() if serial is not None else None
        except (SQLAlchemyError, ValueError) as exc:
            logger.error(f"Serial lookup failed for {serial_number}: {exc}")
            raise GatewayError(f"Serial lookup failed: {exc}") from exc

    def lookup_serial(self, serial_number: str) -> Optional[SerialRecord]:
        return self._find_serial(serial_number)[1]

    def register_buyer_serial(
        self,
        serial_number: str,
        buyer: PurchaseIdentity,
        purchase_date: date,
    ) -> BuyerRegistrationResult:
        serial, record = self._find_serial(serial_number)
        classification = classify_serial(serial_number, record, Role.BUYER)
        if serial is None or not classification.allows_submit:
            return BuyerRegistrationResult(success=False, error=classification.message)

        product = serial.product
        coupon_count = max(product.ticket_multiplier, 1) if product is not None else 1

        try:
            purchase = ClientPurchase(
                serial_id=serial.id,
                serial_number=serial.serial_number,
                product_id=serial.product_id,
                full_name=buyer.full_name,
                dni=buyer.dni,
                email=buyer.email,
                phone=buyer.phone,
                city=buyer.city,
                purchase_date=purchase_date,
                coupons_generated=coupon_count,
            )
            self._session.add(purchase)
            self._session.flush()

            prefix = coupon_prefix(purchase_date.year)
            codes: list[str] = []
            for _ in range(coupon_count):
                code = generate_unique_coupon_code(prefix, self._session)
                self._session.add(
                    IssuedCoupon(
                        code=code,
                        owner_type=OwnerType.BUYER.value,
                        buyer_purchase_id=purchase.id,
                        serial_id=serial.id,
                    )
                )
                codes.append(code)

            serial.buyer_status = RegistrationStatus.REGISTERED.value
            self._session.flush()
        except SQLAlchemyError as exc:
            logger.error(f"Buyer registration failed for serial {serial_number}: {exc}")
            raise GatewayError(f"Buyer registration failed: {exc}") from exc

        logger.info(f"Registered buyer purchase {purchase.id} with {len(codes)} coupons")
        return BuyerRegistrationResult(success=True, coupons=codes)

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
        seller_pk = _to_int_id(seller_id)
        try:
            seller = self._session.get(Seller, seller_pk) if seller_pk is not None else None
        except SQLAlchemyError as exc:
            raise GatewayError(f"Seller lookup failed: {exc}") from exc
        if seller is None or not seller.is_active:
            return SellerRegistrationResult(success=False, error="Vendedor no encontrado o inactivo")

        serial, record = self._find_serial(serial_number)
        classification = classify_serial(serial_number, record, Role.SELLER)
        if serial is None or not classification.allows_submit:
            return SellerRegistrationResult(success=False, error=classification.message)

        points = classification.unit_value or 0
        try:
            sale = SellerSale(
                seller_id=seller.id,
                serial_id=serial.id,
                serial_number=serial.serial_number,
                client_name=client_name,
                client_phone=client_phone or None,
                invoice_number=invoice_number or None,
                sale_date=sale_date,
                points_earned=points,
            )
            self._session.add(sale)
            serial.seller_status = RegistrationStatus.REGISTERED.value
            seller.total_points = (seller.total_points or 0) + points
            seller.total_sales = (seller.total_sales or 0) + 1
            self._session.flush()
        except SQLAlchemyError as exc:
            logger.error(f"Seller registration failed for serial {serial_number}: {exc}")
            raise GatewayError(f"Seller registration failed: {exc}") from exc

        logger.info(f"Registered sale {sale.id} for seller {seller.id}: +{points} points")
        return SellerRegistrationResult(success=True, points=points, sale_id=str(sale.id))

    def fetch_active_buyer_coupons(self) -> list[Coupon]:
        try:
            rows = IssuedCoupon.get_active_for_buyers(self._session)
            return [row.to_coupon() for row in rows]
        except (SQLAlchemyError, ValueError) as exc:
            raise GatewayError(f"Coupon fetch failed: {exc}") from exc

    def fetch_purchase_identity(self, purchase_id: str) -> Optional[PurchaseIdentity]:
        pk = _to_int_id(purchase_id)
        if pk is None:
            return None
        try:
            purchase = self._session.get(ClientPurchase, pk)
        except SQLAlchemyError as exc:
            raise GatewayError(f"Purchase lookup failed: {exc}") from exc
        return purchase.identity() if purchase is not None else None

    def persist_draw_result(
        self,
        name: str,
        preselected_count: int,
        finalists_count: int,
        executed_at: datetime,
        results: dict[str, Any],
    ) -> Optional[str]:
        try:
            draw = Draw(
                name=name,
                preselected_count=preselected_count,
                finalists_count=finalists_count,
                executed_at=executed_at,
                results=results,
            )
            self._session.add(draw)
            self._session.flush()
        except SQLAlchemyError as exc:
            raise GatewayError(f"Saving draw failed: {exc}") from exc
        return str(draw.id)

    def mark_coupons_used(self, codes: Sequence[str]) -> None:
        try:
            changed = IssuedCoupon.mark_used(self._session, codes)
            self._session.flush()
        except SQLAlchemyError as exc:
            raise GatewayError(f"Marking coupons used failed: {exc}") from exc
        logger.debug(f"Marked {changed} coupons as used")


__all__ = ["SqlGateway"]
