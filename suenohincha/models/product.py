from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, Integer, String, Text, select
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from ..types import DEFAULT_SELLER_POINTS, ProductInfo
from .base import Base

if TYPE_CHECKING:
    from .serial import TvSerial


class Product(Base):
    """A TV model taking part in the campaign."""

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    model_name: Mapped[str] = mapped_column(String(100), nullable=False)
    model_key: Mapped[Optional[str]] = mapped_column(String(50), unique=True, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tier: Mapped[str] = mapped_column(String(20), nullable=False, default="T1")
    screen_size: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    points_value: Mapped[int] = mapped_column(
        Integer, nullable=False, default=DEFAULT_SELLER_POINTS
    )
    """Points a seller earns per registered sale."""

    ticket_multiplier: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    """Coupons a buyer receives per registered purchase."""

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    serials: Mapped[list["TvSerial"]] = relationship(back_populates="product")

    def __repr__(self) -> str:
        return (
            f"<Product(id={self.id}, model_name='{self.model_name}', tier='{self.tier}', "
            f"points_value={self.points_value}, ticket_multiplier={self.ticket_multiplier})>"
        )

    @classmethod
    def get_by_model_key(cls, session: Session, model_key: str) -> Optional["Product"]:
        return session.scalar(select(cls).where(cls.model_key == model_key))

    @classmethod
    def get_active(cls, session: Session) -> list["Product"]:
        """Active products ordered by model name."""

        stmt = select(cls).where(cls.is_active.is_(True)).order_by(cls.model_name)
        return list(session.scalars(stmt))

    def to_info(self) -> ProductInfo:
        return ProductInfo(
            model_name=self.model_name,
            ticket_multiplier=self.ticket_multiplier or 1,
            points_value=self.points_value or DEFAULT_SELLER_POINTS,
        )
