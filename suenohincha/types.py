"""Value objects shared by the serial validator, the tombola and the gateways."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional


class SerialStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    BLOCKED = "BLOCKED"


class RegistrationStatus(str, enum.Enum):
    NOT_REGISTERED = "NOT_REGISTERED"
    REGISTERED = "REGISTERED"


class CampaignType(str, enum.Enum):
    STANDARD = "STANDARD"
    LEGACY = "LEGACY"


class OwnerType(str, enum.Enum):
    BUYER = "BUYER"
    SELLER = "SELLER"


class CouponStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    USED = "USED"
    EXPIRED = "EXPIRED"
    CANCELLED = "CANCELLED"


class Role(str, enum.Enum):
    """Who is registering a serial."""

    BUYER = "BUYER"
    SELLER = "SELLER"


DEFAULT_SELLER_POINTS = 10
"""Points shown for a serial whose product has no ``points_value``."""


@dataclass(frozen=True)
class ProductInfo:
    """Product fields joined onto a serial lookup."""

    model_name: str
    ticket_multiplier: int = 1
    points_value: int = DEFAULT_SELLER_POINTS

    def unit_value(self, role: Role) -> int:
        """Coupons per purchase for buyers, points per sale for sellers."""
        if role is Role.SELLER:
            return self.points_value
        return self.ticket_multiplier


@dataclass(frozen=True)
class SerialRecord:
    """Read-only snapshot of a ``tv_serials`` row.

    Attributes
    ----------
    serial_number : str
        Normalized serial as stored remotely.
    status : SerialStatus
        ``BLOCKED`` serials can never be registered.
    buyer_status, seller_status : RegistrationStatus
        Per-role registration flags flipped by the remote procedures.
    campaign_type : Optional[CampaignType]
        ``LEGACY`` serials belong to a previous campaign.
    product : Optional[ProductInfo]
        Joined product, ``None`` when the serial has no product assigned.
    """

    serial_number: str
    status: SerialStatus = SerialStatus.AVAILABLE
    buyer_status: RegistrationStatus = RegistrationStatus.NOT_REGISTERED
    seller_status: RegistrationStatus = RegistrationStatus.NOT_REGISTERED
    campaign_type: Optional[CampaignType] = None
    product: Optional[ProductInfo] = None
    id: Optional[str] = None

    def is_eligible_for(self, role: Role) -> bool:
        if self.status is not SerialStatus.AVAILABLE:
            return False
        if role is Role.BUYER:
            return self.buyer_status is RegistrationStatus.NOT_REGISTERED
        return (
            self.campaign_type is not CampaignType.LEGACY
            and self.seller_status is RegistrationStatus.NOT_REGISTERED
        )

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "SerialRecord":
        """Build a record from a ``tv_serials`` row with an embedded ``products`` join."""

        product_row = row.get("products") or row.get("product")
        product = None
        if product_row:
            product = ProductInfo(
                model_name=product_row.get("model_name") or "Desconocido",
                ticket_multiplier=int(product_row.get("ticket_multiplier") or 1),
                points_value=int(product_row.get("points_value") or DEFAULT_SELLER_POINTS),
            )
        campaign = row.get("campaign_type")
        return cls(
            serial_number=row["serial_number"],
            status=SerialStatus(row.get("status") or SerialStatus.AVAILABLE.value),
            buyer_status=RegistrationStatus(
                row.get("buyer_status") or RegistrationStatus.NOT_REGISTERED.value
            ),
            seller_status=RegistrationStatus(
                row.get("seller_status") or RegistrationStatus.NOT_REGISTERED.value
            ),
            campaign_type=CampaignType(campaign) if campaign else None,
            product=product,
            id=str(row["id"]) if row.get("id") is not None else None,
        )


@dataclass(frozen=True)
class Coupon:
    """A sweepstakes entry; only ``BUYER`` coupons take part in draws."""

    code: str
    owner_type: OwnerType = OwnerType.BUYER
    id: Optional[str] = None
    linked_purchase_id: Optional[str] = None
    status: CouponStatus = CouponStatus.ACTIVE

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Coupon":
        purchase_id = row.get("buyer_purchase_id")
        return cls(
            code=row["code"],
            owner_type=OwnerType(row.get("owner_type") or OwnerType.BUYER.value),
            id=str(row["id"]) if row.get("id") is not None else None,
            linked_purchase_id=str(purchase_id) if purchase_id is not None else None,
            status=CouponStatus(row.get("status") or CouponStatus.ACTIVE.value),
        )


@dataclass(frozen=True)
class PurchaseIdentity:
    """Buyer details stored with a registered purchase."""

    full_name: str
    dni: str
    city: Optional[str] = None
    email: str = ""
    phone: str = ""

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "PurchaseIdentity":
        return cls(
            full_name=row.get("full_name") or "",
            dni=row.get("dni") or "",
            city=row.get("city"),
            email=row.get("email") or "",
            phone=row.get("phone") or "",
        )


PLACEHOLDER_NAME = "Participante"
UNAVAILABLE_NAME = "No se pudo cargar el ganador"
NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class Winner:
    """A drawn coupon joined with the identity of its buyer."""

    code: str
    full_name: str
    dni: str
    city: str
    email: str
    phone: str
    department: str = "No especificado"

    @classmethod
    def from_identity(cls, code: str, identity: PurchaseIdentity) -> "Winner":
        return cls(
            code=code,
            full_name=identity.full_name,
            dni=identity.dni,
            city=identity.city or "No especificada",
            email=identity.email,
            phone=identity.phone,
            department=identity.city or "No especificado",
        )

    @classmethod
    def placeholder(cls, code: str, *, full_name: str = PLACEHOLDER_NAME) -> "Winner":
        """Winner shown when the coupon has no purchase (or it could not be loaded)."""
        return cls(
            code=code,
            full_name=full_name,
            dni=NOT_AVAILABLE,
            city=NOT_AVAILABLE,
            email=NOT_AVAILABLE,
            phone=NOT_AVAILABLE,
        )

    def to_json(self) -> dict[str, str]:
        return {
            "code": self.code,
            "full_name": self.full_name,
            "dni": self.dni,
            "city": self.city,
            "department": self.department,
            "email": self.email,
            "phone": self.phone,
        }


@dataclass(frozen=True)
class BuyerRegistrationResult:
    """Outcome of ``rpc_register_buyer_serial``."""

    success: bool
    error: Optional[str] = None
    coupons: list[str] = field(default_factory=list)

    @property
    def coupon_count(self) -> int:
        return len(self.coupons)

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> "BuyerRegistrationResult":
        if not isinstance(payload, Mapping):
            return cls(success=False, error="Respuesta inesperada del servidor")
        return cls(
            success=bool(payload.get("success")),
            error=payload.get("error"),
            coupons=list(payload.get("coupons") or []),
        )


@dataclass(frozen=True)
class SellerRegistrationResult:
    """Outcome of ``rpc_register_seller_serial``."""

    success: bool
    error: Optional[str] = None
    points: Optional[int] = None
    sale_id: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> "SellerRegistrationResult":
        if not isinstance(payload, Mapping):
            return cls(success=False, error="Respuesta inesperada del servidor")
        points = payload.get("points")
        sale_id = payload.get("sale_id")
        return cls(
            success=bool(payload.get("success")),
            error=payload.get("error"),
            points=int(points) if points is not None else None,
            sale_id=str(sale_id) if sale_id is not None else None,
        )


__all__ = [
    "BuyerRegistrationResult",
    "CampaignType",
    "Coupon",
    "CouponStatus",
    "DEFAULT_SELLER_POINTS",
    "NOT_AVAILABLE",
    "OwnerType",
    "PLACEHOLDER_NAME",
    "ProductInfo",
    "PurchaseIdentity",
    "RegistrationStatus",
    "Role",
    "SellerRegistrationResult",
    "SerialRecord",
    "SerialStatus",
    "UNAVAILABLE_NAME",
    "Winner",
]
