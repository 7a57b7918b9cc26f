"""Tombola state machine: sequential draw without replacement."""

from __future__ import annotations

import enum
import logging
import random
from typing import Callable, Iterator, Optional, Sequence

from ..errors import GatewayError, PoolExhaustedError
from ..types import (
    Coupon,
    OwnerType,
    PurchaseIdentity,
    UNAVAILABLE_NAME,
    Winner,
)
from .animation import SpinFrame, reveal_frame, spin_frames
from .selection import pick_winner, remaining_pool

logger = logging.getLogger(__name__)

IdentityLookup = Callable[[str], Optional[PurchaseIdentity]]
PoolLoader = Callable[[], Sequence[Coupon]]


class DrawState(str, enum.Enum):
    IDLE = "idle"
    SPINNING = "spinning"
    REVEALING = "revealing"
    COMPLETE = "complete"


class DrawNotice(str, enum.Enum):
    """Operator-facing reason why a request did nothing."""

    NOT_STARTED = "not_started"
    NO_ELIGIBLE_COUPONS = "no_eligible_coupons"
    POOL_UNAVAILABLE = "pool_unavailable"
    POOL_EXHAUSTED = "pool_exhausted"
    ALREADY_COMPLETE = "already_complete"

    @property
    def message(self) -> str:
        return _NOTICE_MESSAGES[self]


_NOTICE_MESSAGES = {
    DrawNotice.NOT_STARTED: "El sorteo no ha comenzado",
    DrawNotice.NO_ELIGIBLE_COUPONS: "No hay cupones activos para el sorteo",
    DrawNotice.POOL_UNAVAILABLE: "Error al cargar cupones",
    DrawNotice.POOL_EXHAUSTED: "No quedan cupones disponibles",
    DrawNotice.ALREADY_COMPLETE: "Ya se seleccionaron todos los ganadores",
}


class DrawTombola:
    """Draw ``finalists_count`` winners one spin at a time.

    States cycle ``IDLE -> SPINNING -> REVEALING -> IDLE`` until enough winners
    are drawn or the pool runs out, then settle in ``COMPLETE``. Nothing here
    raises on an operational problem: refusals are reported through
    :attr:`notice` and running out of coupons through :attr:`error`, so the
    winners collected so far are never lost.

    Parameters
    ----------
    identity_lookup : Optional[IdentityLookup], default: None
        Resolves a coupon's linked purchase id to buyer details. Without it
        every winner gets the placeholder identity.
    rng : Optional[random.Random], default: None
        Source of randomness; inject a seeded instance for reproducible draws.
    pool_loader : Optional[PoolLoader], default: None
        Fetches a fresh coupon pool; required by :meth:`reset`.
    display_rng : Optional[random.Random], default: None
        Randomness for the cosmetic spin and reveal frames only. Kept apart
        from ``rng`` so playing frames never changes which coupon wins.
    """

    def __init__(
        self,
        identity_lookup: Optional[IdentityLookup] = None,
        *,
        rng: Optional[random.Random] = None,
        pool_loader: Optional[PoolLoader] = None,
        display_rng: Optional[random.Random] = None,
    ) -> None:
        self._identity_lookup = identity_lookup
        self._rng = rng or random.Random()
        self._display_rng = display_rng or random.Random()
        self._pool_loader = pool_loader

        self._session_id = 0
        self._pool: tuple[Coupon, ...] = ()
        self._finalists_count = 0
        self._winners: list[Winner] = []
        self._current_winner: Optional[Winner] = None
        self._state = DrawState.IDLE
        self._started = False
        self._notice: Optional[DrawNotice] = None
        self._error: Optional[PoolExhaustedError] = None

    # -------- read-only state --------
    @property
    def state(self) -> DrawState:
        return self._state

    @property
    def session_id(self) -> int:
        return self._session_id

    @property
    def finalists_count(self) -> int:
        return self._finalists_count

    @property
    def pool_size(self) -> int:
        return len(self._pool)

    @property
    def remaining(self) -> int:
        return len(remaining_pool(self._pool, self._drawn_codes()))

    @property
    def current_winner(self) -> Optional[Winner]:
        return self._current_winner

    @property
    def notice(self) -> Optional[DrawNotice]:
        return self._notice

    @property
    def error(self) -> Optional[PoolExhaustedError]:
        """Set when the pool ran out before ``finalists_count`` winners."""
        return self._error

    @property
    def started(self) -> bool:
        return self._started

    def winners(self) -> list[Winner]:
        """Winners in the order they were drawn."""
        return list(self._winners)

    def is_complete(self) -> bool:
        if self._state is DrawState.COMPLETE:
            return True
        if not self._started:
            return False
        return len(self._winners) >= self._finalists_count or self.remaining == 0

    # -------- transitions --------
    def start_draw(self, pool: Sequence[Coupon], finalists_count: int) -> bool:
        """Begin a new session over ``pool``, discarding any previous winners.

        Returns ``False`` (with :attr:`notice` set) when the pool holds no
        eligible coupons; no spin is possible in that case.

        Raises
        ------
        ValueError
            If ``finalists_count`` is smaller than one.
        """

        if finalists_count < 1:
            raise ValueError("finalists_count must be at least 1")

        self._session_id += 1
        self._pool = self._eligible(pool)
        self._finalists_count = finalists_count
        self._winners = []
        self._current_winner = None
        self._notice = None
        self._error = None
        self._state = DrawState.IDLE

        if not self._pool:
            self._started = False
            self._notice = DrawNotice.NO_ELIGIBLE_COUPONS
            logger.warning("Draw refused: zero eligible coupons")
            return False

        self._started = True
        if finalists_count > len(self._pool):
            logger.warning(
                f"Requested {finalists_count} winners but only {len(self._pool)} coupons are eligible"
            )
        logger.info(
            f"Draw session {self._session_id} started with {len(self._pool)} coupons "
            f"for {finalists_count} winners"
        )
        return True

    def begin_spin(self) -> bool:
        """Move to ``SPINNING`` if another winner can be drawn."""

        if not self._started:
            if self._notice is None:
                self._notice = DrawNotice.NOT_STARTED
            return False
        if self._state is DrawState.SPINNING:
            return True
        if self._state is DrawState.REVEALING:
            self.dismiss_reveal()
        if self._state is DrawState.COMPLETE:
            if self._error is None:
                self._notice = DrawNotice.ALREADY_COMPLETE
            return False

        self._notice = None
        self._state = DrawState.SPINNING
        return True

    def finish_spin(self) -> Optional[Winner]:
        """Select the winner for the running spin and move to ``REVEALING``."""

        if self._state is not DrawState.SPINNING:
            return None

        session_id = self._session_id
        coupon = pick_winner(self._pool, self._drawn_codes(), self._rng)
        if coupon is None:
            self._mark_exhausted()
            return None

        winner = self._resolve_winner(coupon)
        if session_id != self._session_id:
            # The session was reset while the identity was loading.
            logger.debug(f"Dropping winner {coupon.code} from superseded session {session_id}")
            return None

        self._winners.append(winner)
        self._current_winner = winner
        self._state = DrawState.REVEALING
        logger.info(
            f"Winner {len(self._winners)}/{self._finalists_count}: coupon {winner.code}"
        )
        if len(self._winners) < self._finalists_count and self.remaining == 0:
            self._error = PoolExhaustedError(len(self._winners), self._finalists_count)
            self._notice = DrawNotice.POOL_EXHAUSTED
        return winner

    def spin_next(self) -> Optional[Winner]:
        """Draw the next winner, or return ``None`` and set :attr:`notice`."""

        if not self.begin_spin():
            return None
        return self.finish_spin()

    def dismiss_reveal(self) -> DrawState:
        """Close the reveal: back to ``IDLE`` or on to ``COMPLETE``."""

        if self._state is not DrawState.REVEALING:
            return self._state
        if len(self._winners) >= self._finalists_count:
            self._state = DrawState.COMPLETE
        elif self.remaining == 0:
            self._mark_exhausted()
        else:
            self._state = DrawState.IDLE
        return self._state

    def load_and_start(self, finalists_count: int) -> bool:
        """Fetch a fresh pool through ``pool_loader`` and start a draw on it.

        If fetching fails the session is left stopped with :attr:`notice`
        set to ``POOL_UNAVAILABLE`` and ``False`` is returned.

        Raises
        ------
        ValueError
            If ``finalists_count`` is below 1.
        RuntimeError
            If the engine was built without a ``pool_loader``.
        """

        if finalists_count < 1:
            raise ValueError("finalists_count must be at least 1")
        if self._pool_loader is None:
            raise RuntimeError("load_and_start() requires a pool_loader")

        try:
            pool = self._pool_loader()
        except GatewayError as exc:
            logger.error(f"Could not load the coupon pool: {exc}")
            self._session_id += 1
            self._pool = ()
            self._finalists_count = finalists_count
            self._winners = []
            self._current_winner = None
            self._started = False
            self._error = None
            self._state = DrawState.IDLE
            self._notice = DrawNotice.POOL_UNAVAILABLE
            return False
        return self.start_draw(pool, finalists_count)

    def reset(self) -> bool:
        """Discard all winners and restart against a freshly fetched pool.

        The previous pool is never reused. Fetch failures are handled as in
        :meth:`load_and_start`.

        Raises
        ------
        RuntimeError
            If the engine was built without a ``pool_loader``.
        """

        if self._pool_loader is None:
            raise RuntimeError("reset() requires a pool_loader")
        return self.load_and_start(self._finalists_count or 1)

    # -------- presentation --------
    def spin_frames(self) -> Iterator[SpinFrame]:
        """Cosmetic frames to play while ``SPINNING``."""
        return spin_frames([c.code for c in self._pool], self._display_rng)

    def reveal_frame(self) -> Optional[SpinFrame]:
        if self._current_winner is None:
            return None
        codes = [c.code for c in self._pool]
        return reveal_frame(codes, self._current_winner.code, self._display_rng)

    # -------- helpers --------
    def _drawn_codes(self) -> list[str]:
        return [w.code for w in self._winners]

    def _mark_exhausted(self) -> None:
        self._state = DrawState.COMPLETE
        self._notice = DrawNotice.POOL_EXHAUSTED
        if len(self._winners) < self._finalists_count:
            self._error = PoolExhaustedError(len(self._winners), self._finalists_count)
        logger.warning(
            f"Coupon pool exhausted with {len(self._winners)} of {self._finalists_count} winners"
        )

    @staticmethod
    def _eligible(pool: Sequence[Coupon]) -> tuple[Coupon, ...]:
        eligible: dict[str, Coupon] = {}
        dropped = 0
        for coupon in pool:
            if coupon.owner_type is not OwnerType.BUYER:
                dropped += 1
                continue
            eligible.setdefault(coupon.code, coupon)
        if dropped:
            logger.warning(f"Ignored {dropped} seller coupons in the draw pool")
        return tuple(eligible.values())

    def _resolve_winner(self, coupon: Coupon) -> Winner:
        if coupon.linked_purchase_id is None or self._identity_lookup is None:
            return Winner.placeholder(coupon.code)
        try:
            identity = self._identity_lookup(coupon.linked_purchase_id)
        except GatewayError as exc:
            logger.warning(f"Could not load winner detail for coupon {coupon.code}: {exc}")
            return Winner.placeholder(coupon.code, full_name=UNAVAILABLE_NAME)
        if identity is None:
            return Winner.placeholder(coupon.code)
        return Winner.from_identity(coupon.code, identity)


__all__ = ["DrawNotice", "DrawState", "DrawTombola", "IdentityLookup", "PoolLoader"]
