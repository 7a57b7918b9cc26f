from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..types import PurchaseIdentity
from .base import Base

if TYPE_CHECKING:
    from .coupon import IssuedCoupon
    from .product import Product
    from .serial import TvSerial


class ClientPurchase(Base):
    """A buyer's registered TV purchase."""

    __tablename__ = "client_purchases"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    serial_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("tv_serials.id", ondelete="SET NULL"), nullable=True, index=True
    )
    serial_number: Mapped[str] = mapped_column(String(64), nullable=False)
    product_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("products.id", ondelete="SET NULL"), nullable=True
    )
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    dni: Mapped[str] = mapped_column(String(30), nullable=False)
    email: Mapped[str] = mapped_column(String(200), nullable=False)
    phone: Mapped[str] = mapped_column(String(30), nullable=False)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    purchase_date: Mapped[date] = mapped_column(Date, nullable=False)
    coupons_generated: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    admin_status: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    serial: Mapped[Optional["TvSerial"]] = relationship()
    product: Mapped[Optional["Product"]] = relationship()
    coupons: Mapped[list["IssuedCoupon"]] = relationship(back_populates="purchase")

    def __repr__(self) -> str:
        return (
            f"<ClientPurchase(id={self.id}, serial_number='{self.serial_number}', "
            f"coupons_generated={self.coupons_generated})>"
        )

    def identity(self) -> PurchaseIdentity:
        return PurchaseIdentity(
            full_name=self.full_name,
            dni=self.dni,
            city=self.city,
            email=self.email,
            phone=self.phone,
        )
