from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, String, select
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .serial import TvSerial


class Seller(Base):
    """A store salesperson accruing points for registered sales."""

    __tablename__ = "sellers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    store_name: Mapped[str] = mapped_column(String(200), nullable=False)
    store_city: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    total_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_sales: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    sales: Mapped[list["SellerSale"]] = relationship(
        back_populates="seller", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return (
            f"<Seller(id={self.id}, store_name='{self.store_name}', "
            f"total_points={self.total_points}, total_sales={self.total_sales})>"
        )

    @classmethod
    def ranking(cls, session: Session) -> list["Seller"]:
        """Active sellers ordered by points (highest first)."""

        stmt = (
            select(cls)
            .where(cls.is_active.is_(True))
            .order_by(cls.total_points.desc(), cls.id.asc())
        )
        return list(session.scalars(stmt))


class SellerSale(Base):
    """A sale registered by a seller against a serial."""

    __tablename__ = "seller_sales"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    seller_id: Mapped[int] = mapped_column(
        ForeignKey("sellers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    serial_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("tv_serials.id", ondelete="SET NULL"), nullable=True
    )
    serial_number: Mapped[str] = mapped_column(String(64), nullable=False)
    client_name: Mapped[str] = mapped_column(String(200), nullable=False)
    client_phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    invoice_number: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    sale_date: Mapped[date] = mapped_column(Date, nullable=False)
    points_earned: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    seller: Mapped["Seller"] = relationship(back_populates="sales")
    serial: Mapped[Optional["TvSerial"]] = relationship()

    def __repr__(self) -> str:
        return (
            f"<SellerSale(id={self.id}, seller_id={self.seller_id}, "
            f"serial_number='{self.serial_number}', points_earned={self.points_earned})>"
        )
