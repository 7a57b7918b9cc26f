"""Random selection over a coupon pool, independent of any animation."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..types import Coupon


def remaining_pool(pool: Sequence[Coupon], drawn_codes: Iterable[str]) -> list[Coupon]:
    """Return the coupons of ``pool`` whose code has not been drawn yet."""

    drawn = set(drawn_codes)
    return [coupon for coupon in pool if coupon.code not in drawn]


def pick_winner(
    pool: Sequence[Coupon],
    drawn_codes: Iterable[str],
    rng: Optional[random.Random] = None,
) -> Optional[Coupon]:
    """Pick one coupon uniformly at random among those not drawn yet.

    Returns ``None`` when every coupon has already been drawn.
    """

    candidates = remaining_pool(pool, drawn_codes)
    if not candidates:
        return None
    return (rng or random).choice(candidates)


@dataclass(frozen=True)
class QuickDrawResult:
    """One-shot draw: a shortlist and the finalists taken from its head."""

    total_coupons: int
    preselected: list[Coupon]
    finalists: list[Coupon]

    def to_json(self) -> dict:
        return {
            "total_coupons": self.total_coupons,
            "preselected": [
                {"code": c.code, "owner_type": c.owner_type.value} for c in self.preselected
            ],
            "finalists": [
                {"code": c.code, "owner_type": c.owner_type.value} for c in self.finalists
            ],
        }


def quick_draw(
    pool: Sequence[Coupon],
    preselected_count: int,
    finalists_count: int,
    rng: Optional[random.Random] = None,
) -> QuickDrawResult:
    """Shuffle ``pool`` and cut the preselected and finalist lists.

    Both counts are capped by the pool size and finalists are additionally
    capped by the number of preselected coupons.

    Raises
    ------
    ValueError
        If the pool is empty or a count is not positive.
    """

    if preselected_count < 1 or finalists_count < 1:
        raise ValueError("preselected_count and finalists_count must be positive")
    if not pool:
        raise ValueError("No hay cupones activos para el sorteo")

    shuffled = list(pool)
    (rng or random).shuffle(shuffled)
    preselected = shuffled[: min(preselected_count, len(shuffled))]
    finalists = preselected[: min(finalists_count, len(preselected))]
    return QuickDrawResult(
        total_coupons=len(pool),
        preselected=preselected,
        finalists=finalists,
    )


__all__ = ["QuickDrawResult", "pick_winner", "quick_draw", "remaining_pool"]
