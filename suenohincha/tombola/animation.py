"""Frames for the slot-machine spin shown while a winner is drawn.

Purely cosmetic: the frames never influence who wins. A UI plays them in
order, waiting ``delay_ms`` after each, then shows :func:`reveal_frame`.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

WINDOW_SIZE = 5
CENTER_INDEX = 2
PLACEHOLDER_CODE = "BOL-2026-XXXXX"

FAST_INTERVAL_MS = 80
FAST_PHASE_MS = 2000
SLOW_SPINS = 10
SLOW_BASE_MS = 200
SLOW_STEP_MS = 30
REVEAL_DELAY_MS = 500


@dataclass(frozen=True)
class SpinFrame:
    codes: tuple[str, ...]
    delay_ms: int
    final: bool = False

    @property
    def highlighted(self) -> str:
        return self.codes[CENTER_INDEX]


def _random_code(codes: Sequence[str], rng: random.Random) -> str:
    if not codes:
        return PLACEHOLDER_CODE
    return rng.choice(codes)


def initial_window(codes: Sequence[str], rng: Optional[random.Random] = None) -> tuple[str, ...]:
    """Codes displayed before the first spin."""
    rng = rng or random.Random()
    return tuple(_random_code(codes, rng) for _ in range(WINDOW_SIZE))


def spin_frames(
    codes: Sequence[str],
    rng: Optional[random.Random] = None,
    *,
    start: Optional[Sequence[str]] = None,
) -> Iterator[SpinFrame]:
    """Yield the rolling window: a fast phase, then a decelerating one.

    Each frame drops the top code and appends a random one at the bottom.
    """

    rng = rng or random.Random()
    window = list(start) if start else list(initial_window(codes, rng))

    elapsed = 0
    while elapsed < FAST_PHASE_MS:
        window = window[1:] + [_random_code(codes, rng)]
        yield SpinFrame(tuple(window), FAST_INTERVAL_MS)
        elapsed += FAST_INTERVAL_MS

    for slow_spin in range(SLOW_SPINS):
        window = window[1:] + [_random_code(codes, rng)]
        yield SpinFrame(tuple(window), SLOW_BASE_MS + slow_spin * SLOW_STEP_MS)


def reveal_frame(
    codes: Sequence[str],
    winner_code: str,
    rng: Optional[random.Random] = None,
) -> SpinFrame:
    """Final window with the winning code in the highlighted row."""

    rng = rng or random.Random()
    window = [_random_code(codes, rng) for _ in range(WINDOW_SIZE)]
    window[CENTER_INDEX] = winner_code
    return SpinFrame(tuple(window), REVEAL_DELAY_MS, final=True)


__all__ = [
    "CENTER_INDEX",
    "PLACEHOLDER_CODE",
    "SpinFrame",
    "WINDOW_SIZE",
    "initial_window",
    "reveal_frame",
    "spin_frames",
]
