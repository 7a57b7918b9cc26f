from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional, Sequence

from sqlalchemy import DateTime, ForeignKey, Integer, String, select, update
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from ..db.utils import dt_iso
from ..types import Coupon, CouponStatus, OwnerType
from .base import Base

if TYPE_CHECKING:
    from .draw import Draw
    from .purchase import ClientPurchase
    from .serial import TvSerial


class IssuedCoupon(Base):
    """A sweepstakes coupon issued for an approved buyer purchase."""

    __tablename__ = "coupons"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    owner_type: Mapped[str] = mapped_column(
        String(10), nullable=False, default=OwnerType.BUYER.value
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=CouponStatus.ACTIVE.value, index=True
    )
    buyer_purchase_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("client_purchases.id", ondelete="SET NULL"), nullable=True
    )
    serial_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("tv_serials.id", ondelete="SET NULL"), nullable=True
    )
    draw_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("draws.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    purchase: Mapped[Optional["ClientPurchase"]] = relationship(back_populates="coupons")
    serial: Mapped[Optional["TvSerial"]] = relationship()
    draw: Mapped[Optional["Draw"]] = relationship(back_populates="coupons")

    def __repr__(self) -> str:
        return (
            "<IssuedCoupon("
            f"id={self.id}, code='{self.code}', owner_type={self.owner_type}, "
            f"status={self.status}, created_at={dt_iso(self.created_at)}"
            ")>"
        )

    @classmethod
    def get_by_code(cls, session: Session, code: str) -> Optional["IssuedCoupon"]:
        """Retrieve a coupon by its unique code."""

        return session.scalar(select(cls).where(cls.code == code))

    @classmethod
    def get_active_for_buyers(cls, session: Session) -> list["IssuedCoupon"]:
        """Coupons eligible for a draw: active and owned by buyers."""

        stmt = (
            select(cls)
            .where(
                cls.status == CouponStatus.ACTIVE.value,
                cls.owner_type == OwnerType.BUYER.value,
            )
            .order_by(cls.id)
        )
        return list(session.scalars(stmt))

    @classmethod
    def mark_used(
        cls,
        session: Session,
        codes: Sequence[str],
        *,
        draw_id: Optional[int] = None,
    ) -> int:
        """Flip ``codes`` to ``USED`` and return how many rows changed."""

        if not codes:
            return 0
        values: dict = {"status": CouponStatus.USED.value}
        if draw_id is not None:
            values["draw_id"] = draw_id
        result = session.execute(
            update(cls).where(cls.code.in_(list(codes))).values(**values)
        )
        return result.rowcount or 0

    def to_coupon(self) -> Coupon:
        return Coupon(
            code=self.code,
            owner_type=OwnerType(self.owner_type),
            id=str(self.id) if self.id is not None else None,
            linked_purchase_id=(
                str(self.buyer_purchase_id) if self.buyer_purchase_id is not None else None
            ),
            status=CouponStatus(self.status),
        )
