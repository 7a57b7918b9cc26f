import logging
import random
from datetime import date, datetime, timezone
from typing import Optional, Sequence

from .errors import GatewayError, PersistenceError
from .gateway.base import BackendGateway
from .serials.validator import SerialValidator
from .tombola.engine import DrawTombola
from .tombola.export import build_draw_results
from .types import (
    BuyerRegistrationResult,
    PurchaseIdentity,
    Role,
    SellerRegistrationResult,
    Winner,
)

logger = logging.getLogger(__name__)


def register_buyer_purchase(
    gateway: BackendGateway,
    raw_serial: str,
    identity: PurchaseIdentity,
    purchase_date: Optional[date] = None,
) -> BuyerRegistrationResult:
    """Validate a buyer's serial and register the purchase.

    The workflow performs two steps:

    1. Classify the serial for the buyer role. Anything but a valid
       classification stops here by raising the matching error.
    2. Call the backend registration procedure with the normalized serial.

    Parameters
    ----------
    gateway : BackendGateway
        Backend used for the lookup and the registration.
    raw_serial : str
        Serial as typed by the buyer; it is normalized before use.
    identity : PurchaseIdentity
        Buyer details stored with the purchase.
    purchase_date : Optional[date]
        Defaults to today (UTC).

    Returns
    -------
    BuyerRegistrationResult
        A result with ``success=False`` is returned, not raised, so the
        form can show the backend's message and keep its fields.

    Raises
    ------
    NotFoundError, IneligibleError, InvalidFormatError, TransientLookupError
        If the serial does not classify as valid.
    """

    classification = SerialValidator(gateway, Role.BUYER).check(raw_serial)
    classification.raise_for_status()

    serial = classification.serial_number or ""
    result = gateway.register_buyer_serial(
        serial,
        identity,
        purchase_date or datetime.now(timezone.utc).date(),
    )
    if result.success:
        logger.info(f"Buyer registration accepted with {result.coupon_count} coupons")
    else:
        logger.warning(f"Buyer registration rejected: {result.error}")
    return result


def register_seller_sale(
    gateway: BackendGateway,
    seller_id: str,
    raw_serial: str,
    client_name: str,
    *,
    client_phone: Optional[str] = None,
    invoice_number: Optional[str] = None,
    sale_date: Optional[date] = None,
) -> SellerRegistrationResult:
    """Validate a seller's serial and register the sale.

    Same contract as :func:`register_buyer_purchase`, but the serial is
    classified for the seller role (legacy-campaign serials are refused)
    and the backend awards points instead of coupons.
    """

    if not client_name or not client_name.strip():
        raise ValueError("client_name is required")

    classification = SerialValidator(gateway, Role.SELLER).check(raw_serial)
    classification.raise_for_status()

    result = gateway.register_seller_serial(
        seller_id,
        classification.serial_number or "",
        client_name.strip(),
        sale_date or datetime.now(timezone.utc).date(),
        client_phone=client_phone,
        invoice_number=invoice_number,
    )
    if result.success:
        logger.info(f"Seller {seller_id} sale accepted: +{result.points} points")
    else:
        logger.warning(f"Seller {seller_id} sale rejected: {result.error}")
    return result


def open_draw(
    gateway: BackendGateway,
    finalists_count: int,
    *,
    rng: Optional[random.Random] = None,
) -> DrawTombola:
    """Fetch the active buyer coupons once and start a tombola over them.

    The returned engine keeps the gateway as its pool loader so that
    :meth:`DrawTombola.reset` always refetches a fresh pool. If the pool is
    empty, or the backend cannot deliver it, the engine is returned
    unstarted with its notice set.
    """

    tombola = DrawTombola(
        gateway.fetch_purchase_identity,
        rng=rng,
        pool_loader=gateway.fetch_active_buyer_coupons,
    )
    tombola.load_and_start(finalists_count)
    return tombola


def save_draw_results(
    gateway: BackendGateway,
    name: str,
    *,
    preselected_count: int,
    finalists_count: int,
    winners: Sequence[Winner],
    total_coupons: Optional[int] = None,
    executed_at: Optional[datetime] = None,
) -> Optional[str]:
    """Persist a finished draw and mark its winning coupons as used.

    Parameters
    ----------
    gateway : BackendGateway
        Backend receiving the draw.
    name : str
        Operator-given draw name.
    preselected_count, finalists_count : int
        Counts configured for the draw.
    winners : Sequence[Winner]
        Winners in selection order.
    total_coupons : Optional[int]
        Size of the pool the draw ran against, stored with the results.
    executed_at : Optional[datetime]
        Defaults to now (UTC).

    Returns
    -------
    Optional[str]
        Identifier of the stored draw when the backend returns one.

    Raises
    ------
    ValueError
        If ``name`` is blank or ``winners`` is empty.
    PersistenceError
        If either backend call fails. The exception keeps ``winners`` so
        the operator can retry without re-drawing.
    """

    if not name or not name.strip():
        raise ValueError("Draw name is required")
    if not winners:
        raise ValueError("Cannot save a draw without winners")

    executed = executed_at or datetime.now(timezone.utc)
    results = build_draw_results(winners, total_coupons=total_coupons, executed_at=executed)

    try:
        draw_id = gateway.persist_draw_result(
            name.strip(), preselected_count, finalists_count, executed, results
        )
    except GatewayError as exc:
        logger.error(f"Saving draw '{name}' failed: {exc}")
        raise PersistenceError(f"Error al guardar el sorteo: {exc}", winners) from exc

    try:
        gateway.mark_coupons_used([w.code for w in winners])
    except GatewayError as exc:
        logger.error(f"Draw '{name}' saved but marking coupons used failed: {exc}")
        raise PersistenceError(
            f"Sorteo guardado, pero no se pudieron marcar los cupones: {exc}", winners
        ) from exc

    logger.info(f"Draw '{name}' saved with {len(winners)} winners")
    return draw_id


__all__ = [
    "open_draw",
    "register_buyer_purchase",
    "register_seller_sale",
    "save_draw_results",
]
