"""Export helpers for draw results."""

from __future__ import annotations

import csv
import io
import re
from datetime import datetime
from typing import Optional, Sequence

from ..db.utils import dt_iso
from ..types import NOT_AVAILABLE, Winner
from .selection import QuickDrawResult

_NON_DIGITS = re.compile(r"\D")

WINNER_CSV_HEADER = ["Posición", "Código", "Nombre", "CI", "Ciudad", "Email", "Teléfono"]
DRAW_CSV_HEADER = ["Tipo", "Código", "Categoría"]


def mask_phone(phone: Optional[str]) -> str:
    """Show only the last four digits of a phone number."""

    if not phone or phone == NOT_AVAILABLE:
        return NOT_AVAILABLE
    digits = _NON_DIGITS.sub("", phone)
    if len(digits) < 4:
        return phone
    return "****" + digits[-4:]


def winners_to_csv(winners: Sequence[Winner], *, mask: bool = False) -> str:
    """Render winners as CSV in selection order (position 1 first)."""

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(WINNER_CSV_HEADER)
    for position, winner in enumerate(winners, start=1):
        writer.writerow(
            [
                position,
                winner.code,
                winner.full_name,
                winner.dni,
                winner.city,
                winner.email,
                mask_phone(winner.phone) if mask else winner.phone,
            ]
        )
    return buffer.getvalue()


def export_draw_csv(result: QuickDrawResult) -> str:
    """Finalists first, then the preselected coupons that did not make it."""

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(DRAW_CSV_HEADER)
    finalist_codes = set()
    for coupon in result.finalists:
        finalist_codes.add(coupon.code)
        writer.writerow(["Finalista", coupon.code, coupon.owner_type.value])
    for coupon in result.preselected:
        if coupon.code not in finalist_codes:
            writer.writerow(["Preseleccionado", coupon.code, coupon.owner_type.value])
    return buffer.getvalue()


def draw_csv_filename(name: str, executed_at: datetime) -> str:
    return f"sorteo-{name}-{executed_at.date().isoformat()}.csv"


def build_draw_results(
    winners: Sequence[Winner],
    *,
    total_coupons: Optional[int] = None,
    executed_at: Optional[datetime] = None,
) -> dict:
    """JSON payload stored in the ``results`` column of a draw."""

    payload: dict = {
        "winners": [
            {"position": position, **winner.to_json()}
            for position, winner in enumerate(winners, start=1)
        ],
        "finalists": [{"code": w.code, "owner_type": "BUYER"} for w in winners],
    }
    if total_coupons is not None:
        payload["total_coupons"] = total_coupons
    if executed_at is not None:
        payload["executed_at"] = dt_iso(executed_at)
    return payload


__all__ = [
    "DRAW_CSV_HEADER",
    "WINNER_CSV_HEADER",
    "build_draw_results",
    "draw_csv_filename",
    "export_draw_csv",
    "mask_phone",
    "winners_to_csv",
]
