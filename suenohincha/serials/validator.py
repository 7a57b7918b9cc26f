"""Classify a serial against remote state before allowing registration."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..errors import (
    GatewayError,
    IneligibleError,
    InvalidFormatError,
    NotFoundError,
    TransientLookupError,
)
from ..types import (
    CampaignType,
    ProductInfo,
    RegistrationStatus,
    Role,
    SerialRecord,
    SerialStatus,
)
from .normalize import normalize_serial, validate_serial_format

if TYPE_CHECKING:
    from ..gateway.base import BackendGateway

logger = logging.getLogger(__name__)


class ClassificationKind(str, enum.Enum):
    IDLE = "idle"
    CHECKING = "checking"
    INVALID_FORMAT = "invalid_format"
    NOT_FOUND = "not_found"
    BLOCKED = "blocked"
    ALREADY_REGISTERED = "already_registered"
    LEGACY = "legacy"
    VALID = "valid"
    LOOKUP_FAILED = "lookup_failed"


@dataclass(frozen=True)
class Classification:
    """Status of a serial as shown next to the registration input.

    Only :attr:`ClassificationKind.VALID` enables the submit button.

    Attributes
    ----------
    kind : ClassificationKind
        Which outcome was reached.
    message : str
        Spanish text for the form.
    serial_number : Optional[str]
        Normalized serial the classification refers to.
    role : Optional[Role]
        Role whose registration was checked (set for ``ALREADY_REGISTERED``
        and ``VALID``).
    product_name, unit_value : Optional
        Product model and coupons (buyer) or points (seller) for ``VALID``.
    retryable : bool
        ``True`` when a failed lookup can simply be repeated.
    """

    kind: ClassificationKind
    message: str = ""
    serial_number: Optional[str] = None
    role: Optional[Role] = None
    product_name: Optional[str] = None
    unit_value: Optional[int] = None
    retryable: bool = False

    @property
    def allows_submit(self) -> bool:
        return self.kind is ClassificationKind.VALID

    @classmethod
    def idle(cls, serial_number: Optional[str] = None) -> "Classification":
        return cls(ClassificationKind.IDLE, serial_number=serial_number)

    @classmethod
    def checking(cls, serial_number: str) -> "Classification":
        return cls(
            ClassificationKind.CHECKING,
            "Verificando serial...",
            serial_number=serial_number,
        )

    @classmethod
    def invalid_format(cls, serial_number: str, message: str) -> "Classification":
        return cls(ClassificationKind.INVALID_FORMAT, message, serial_number=serial_number)

    @classmethod
    def not_found(cls, serial_number: str) -> "Classification":
        return cls(
            ClassificationKind.NOT_FOUND,
            "Serial no encontrado en la base de datos",
            serial_number=serial_number,
        )

    @classmethod
    def blocked(cls, serial_number: str) -> "Classification":
        return cls(
            ClassificationKind.BLOCKED,
            "Este serial está bloqueado",
            serial_number=serial_number,
        )

    @classmethod
    def already_registered(cls, serial_number: str, role: Role) -> "Classification":
        who = "un vendedor" if role is Role.SELLER else "un comprador"
        return cls(
            ClassificationKind.ALREADY_REGISTERED,
            f"Este serial ya fue registrado por {who}",
            serial_number=serial_number,
            role=role,
        )

    @classmethod
    def legacy(cls, serial_number: str) -> "Classification":
        return cls(
            ClassificationKind.LEGACY,
            "Este serial pertenece a una campaña anterior y no suma puntos",
            serial_number=serial_number,
        )

    @classmethod
    def valid(
        cls,
        serial_number: str,
        role: Role,
        product_name: str,
        unit_value: int,
    ) -> "Classification":
        return cls(
            ClassificationKind.VALID,
            f"¡Serial válido! Producto: {product_name}",
            serial_number=serial_number,
            role=role,
            product_name=product_name,
            unit_value=unit_value,
        )

    @classmethod
    def lookup_failed(cls, serial_number: str, *, retryable: bool = True) -> "Classification":
        return cls(
            ClassificationKind.LOOKUP_FAILED,
            "Error al validar el serial. Intenta nuevamente.",
            serial_number=serial_number,
            retryable=retryable,
        )

    def raise_for_status(self) -> None:
        """Raise the matching :mod:`suenohincha.errors` exception unless valid."""

        serial = self.serial_number or ""
        kind = self.kind
        if kind is ClassificationKind.VALID:
            return
        if kind is ClassificationKind.NOT_FOUND:
            raise NotFoundError(serial)
        if kind in (
            ClassificationKind.BLOCKED,
            ClassificationKind.ALREADY_REGISTERED,
            ClassificationKind.LEGACY,
        ):
            raise IneligibleError(serial, kind.value, role=self.role)
        if kind is ClassificationKind.LOOKUP_FAILED:
            raise TransientLookupError(self.message)
        if kind is ClassificationKind.CHECKING:
            raise ValueError("serial classification is still pending")
        raise InvalidFormatError(self.message or f"Serial '{serial}' is incomplete")


def classify_serial(
    serial_number: str,
    record: Optional[SerialRecord],
    role: Role,
) -> Classification:
    """Apply the eligibility policy to a looked-up serial.

    Checks run in a fixed order and the first failing one wins: existence,
    block status, the role's own registration flag, then (sellers only) the
    campaign type.
    """

    if record is None:
        return Classification.not_found(serial_number)
    if record.status is SerialStatus.BLOCKED:
        return Classification.blocked(serial_number)

    registration = record.seller_status if role is Role.SELLER else record.buyer_status
    if registration is RegistrationStatus.REGISTERED:
        return Classification.already_registered(serial_number, role)

    if role is Role.SELLER and record.campaign_type is CampaignType.LEGACY:
        return Classification.legacy(serial_number)

    product = record.product or ProductInfo(model_name="Desconocido")
    return Classification.valid(serial_number, role, product.model_name, product.unit_value(role))


@dataclass(frozen=True)
class SerialCheck:
    """Ticket for one validation request.

    ``early`` is set when the outcome was decided without a lookup (empty,
    too short or badly formatted input).
    """

    request_id: int
    raw: str
    serial_number: str
    early: Optional[Classification] = None


class SerialValidator:
    """Stateful validator behind one serial input field.

    Every :meth:`begin` call supersedes the previous request. A result whose
    request id is no longer current is returned to the caller but never
    becomes :attr:`current`, so a slow early lookup cannot overwrite the
    answer for what the user typed last.
    """

    def __init__(
        self,
        gateway: "BackendGateway",
        role: Role,
        *,
        min_lookup_length: int = 3,
        strip_dashes: bool = True,
    ) -> None:
        self._gateway = gateway
        self.role = role
        self.min_lookup_length = min_lookup_length
        self.strip_dashes = strip_dashes
        self._request_id = 0
        self._current = Classification.idle()

    @property
    def current(self) -> Classification:
        return self._current

    @property
    def request_id(self) -> int:
        return self._request_id

    def is_current(self, check: SerialCheck) -> bool:
        return check.request_id == self._request_id

    def begin(self, raw: str) -> SerialCheck:
        """Start validating ``raw``; the field shows ``checking`` until resolved."""

        self._request_id += 1
        serial = normalize_serial(raw, strip_dashes=self.strip_dashes)

        early: Optional[Classification] = None
        if len(serial) < max(self.min_lookup_length, 1):
            early = Classification.idle(serial or None)
        else:
            fmt = validate_serial_format(serial)
            if not fmt.is_valid:
                early = Classification.invalid_format(serial, fmt.error or "Serial inválido")

        check = SerialCheck(
            request_id=self._request_id,
            raw=raw,
            serial_number=serial,
            early=early,
        )
        self._current = early or Classification.checking(serial)
        return check

    def resolve(self, check: SerialCheck) -> Classification:
        """Perform the lookup for ``check`` and apply it if still current."""

        if check.early is not None:
            result = check.early
        else:
            result = self._lookup(check.serial_number)

        if self.is_current(check):
            self._current = result
        else:
            logger.debug(
                f"Discarding stale serial result for request {check.request_id} "
                f"(current is {self._request_id})"
            )
        return result

    def check(self, raw: str) -> Classification:
        """Validate ``raw`` synchronously and return the current classification."""
        return self.resolve(self.begin(raw))

    def reset(self) -> None:
        """Clear the field (e.g. after a successful registration)."""
        self._request_id += 1
        self._current = Classification.idle()

    def _lookup(self, serial: str) -> Classification:
        try:
            record = self._gateway.lookup_serial(serial)
        except TransientLookupError as exc:
            logger.warning(f"Serial lookup timed out or failed to connect: {exc}")
            return Classification.lookup_failed(serial, retryable=True)
        except GatewayError as exc:
            logger.error(f"Serial lookup failed: {exc}")
            return Classification.lookup_failed(serial, retryable=False)
        return classify_serial(serial, record, self.role)


__all__ = [
    "Classification",
    "ClassificationKind",
    "SerialCheck",
    "SerialValidator",
    "classify_serial",
]
