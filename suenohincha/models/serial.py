from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, select
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship, validates

from ..serials.normalize import normalize_serial
from ..types import (
    CampaignType,
    RegistrationStatus,
    SerialRecord,
    SerialStatus,
)
from .base import Base

if TYPE_CHECKING:
    from .product import Product


class TvSerial(Base):
    """A manufacturer serial printed on one TV unit.

    Rows are created by admins (one by one or bulk import) and only ever
    mutated by the registration procedures; they are never deleted.
    """

    __tablename__ = "tv_serials"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    serial_number: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    product_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("products.id", ondelete="SET NULL"), nullable=True, index=True
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=SerialStatus.AVAILABLE.value
    )
    buyer_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=RegistrationStatus.NOT_REGISTERED.value
    )
    seller_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=RegistrationStatus.NOT_REGISTERED.value
    )
    campaign_type: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    product: Mapped[Optional["Product"]] = relationship(back_populates="serials")

    @validates("serial_number")
    def _normalize_serial_number(self, _key: str, value: str) -> str:
        normalized = normalize_serial(value)
        if not normalized:
            raise ValueError("serial_number must not be empty")
        return normalized

    def __repr__(self) -> str:
        return (
            f"<TvSerial(id={self.id}, serial_number='{self.serial_number}', "
            f"status={self.status}, buyer_status={self.buyer_status}, "
            f"seller_status={self.seller_status})>"
        )

    @classmethod
    def get_by_serial_number(
        cls, session: Session, serial_number: str
    ) -> Optional["TvSerial"]:
        """Exact match on the stored (normalized) serial."""

        return session.scalar(select(cls).where(cls.serial_number == serial_number))

    def to_record(self) -> SerialRecord:
        return SerialRecord(
            serial_number=self.serial_number,
            status=SerialStatus(self.status),
            buyer_status=RegistrationStatus(self.buyer_status),
            seller_status=RegistrationStatus(self.seller_status),
            campaign_type=CampaignType(self.campaign_type) if self.campaign_type else None,
            product=self.product.to_info() if self.product is not None else None,
            id=str(self.id) if self.id is not None else None,
        )
