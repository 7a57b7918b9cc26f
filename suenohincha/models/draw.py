"""Persisted draw sessions."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import JSON, DateTime, Integer, String, select
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from ..db.utils import dt_iso
from .base import Base

if TYPE_CHECKING:
    from .coupon import IssuedCoupon


class Draw(Base):
    """A completed draw with its winners in selection order."""

    __tablename__ = "draws"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    """Primary key."""

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    """Operator-given label, e.g. ``"Sorteo Junio 2026"``."""

    preselected_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    """Size of the shortlist requested by the operator."""

    finalists_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    """Number of winners requested by the operator."""

    executed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    """When the draw ran."""

    results: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    """Winners and counts as built by :func:`~suenohincha.tombola.export.build_draw_results`."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    coupons: Mapped[list["IssuedCoupon"]] = relationship(back_populates="draw")
    """Coupons marked used by this draw."""

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return "<Draw(id={id}, name={name}, finalists_count={count}, executed_at={at})>".format(
            id=self.id,
            name=self.name,
            count=self.finalists_count,
            at=dt_iso(self.executed_at),
        )

    @classmethod
    def latest(cls, session: Session) -> list["Draw"]:
        """All draws, most recent first."""

        stmt = select(cls).order_by(cls.created_at.desc(), cls.id.desc())
        return list(session.scalars(stmt))
