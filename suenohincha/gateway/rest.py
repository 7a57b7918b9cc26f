import logging
from datetime import date, datetime
from typing import Any, Callable, Mapping, Optional, Sequence, TypeVar
from urllib.parse import urljoin

import requests

from ..config import Settings
from ..db.utils import dt_iso
from ..errors import GatewayError, TransientLookupError
from ..types import (
    BuyerRegistrationResult,
    Coupon,
    PurchaseIdentity,
    SellerRegistrationResult,
    SerialRecord,
)
from .base import BackendGateway

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TRANSIENT_STATUS = {408, 429, 502, 503, 504}

SERIAL_SELECT = (
    "id,serial_number,status,buyer_status,seller_status,campaign_type,"
    "products(model_name,points_value,ticket_multiplier)"
)
COUPON_SELECT = "id,code,owner_type,buyer_purchase_id,status"
IDENTITY_SELECT = "full_name,dni,city,email,phone"


def _quote(value: str) -> str:
    return '"' + value.replace('"', '\\"') + '"'


class RestGateway(BackendGateway):
    """Backend gateway speaking the PostgREST dialect over HTTPS.

    Tables are read through ``/rest/v1/<table>`` with ``column=eq.value``
    filters and stored procedures are called through ``/rest/v1/rpc/<name>``.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        settings = Settings.from_env()
        url = base_url or settings.supabase_url
        if not url:
            raise ValueError("Environment variable 'SUPABASE_URL' is not set")

        self.base_url = url.rstrip("/")
        self.api_key = api_key or settings.supabase_anon_key or ""
        self.timeout = timeout if timeout is not None else settings.gateway_timeout
        self.session = session or requests.Session()

    # -------- headers --------
    @property
    def headers(self) -> Mapping[str, str]:
        return {
            "Accept": "application/json",
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
        }

    # -------- core request --------
    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict] = None,
        json: Optional[Any] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        url = urljoin(self.base_url + "/", path.lstrip("/"))
        # Never log params or bodies: they carry serials and personal data.
        logger.debug(f"{method.upper()} {path}")
        try:
            r = self.session.request(
                method=method.upper(),
                url=url,
                headers={**self.headers, **(headers or {})},
                params=params,
                json=json,
                timeout=self.timeout,
            )
            r.raise_for_status()
        except (requests.Timeout, requests.ConnectionError) as exc:
            logger.warning(f"Backend unreachable on {method.upper()} {path}: {exc}")
            raise TransientLookupError(f"Backend unreachable: {exc}") from exc
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            logger.error(f"Backend error {status} on {method.upper()} {path}")
            if status in _TRANSIENT_STATUS:
                raise TransientLookupError(f"Backend busy ({status})") from exc
            raise GatewayError(f"Backend request failed ({status})") from exc
        except requests.RequestException as exc:
            logger.error(f"Backend request failed on {method.upper()} {path}: {exc}")
            raise GatewayError(f"Backend request failed: {exc}") from exc

        if not r.content:
            return None
        try:
            return r.json()
        except ValueError as exc:
            logger.error(f"Backend returned a non-JSON body on {method.upper()} {path}")
            raise GatewayError("Backend returned a malformed response") from exc

    def _select(self, table: str, select: str, **filters: str) -> list[dict]:
        params = {"select": select, **filters}
        rows = self._request("GET", f"/rest/v1/{table}", params=params)
        if rows is None:
            return []
        if not isinstance(rows, list):
            raise GatewayError(f"Expected a list of {table} rows")
        return rows

    @staticmethod
    def _parse_rows(table: str, rows: list, parse: Callable[[Any], T]) -> list[T]:
        try:
            return [parse(row) for row in rows]
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.error(f"Malformed {table} row: {exc}")
            raise GatewayError(f"Malformed {table} row: {exc}") from exc

    def _rpc(self, name: str, args: dict) -> Any:
        return self._request("POST", f"/rest/v1/rpc/{name}", json=args)

    # -------- gateway operations --------
    def lookup_serial(self, serial_number: str) -> Optional[SerialRecord]:
        rows = self._select("tv_serials", SERIAL_SELECT, serial_number=f"eq.{serial_number}")
        if not rows:
            return None
        return self._parse_rows("tv_serials", rows[:1], SerialRecord.from_row)[0]

    def register_buyer_serial(
        self,
        serial_number: str,
        buyer: PurchaseIdentity,
        purchase_date: date,
    ) -> BuyerRegistrationResult:
        payload = self._rpc(
            "rpc_register_buyer_serial",
            {
                "p_serial_number": serial_number,
                "p_full_name": buyer.full_name,
                "p_dni": buyer.dni,
                "p_email": buyer.email,
                "p_phone": buyer.phone,
                "p_city": buyer.city,
                "p_purchase_date": purchase_date.isoformat(),
                "p_user_id": None,
            },
        )
        return self._parse_rows(
            "rpc_register_buyer_serial", [payload], BuyerRegistrationResult.from_payload
        )[0]

    def register_seller_serial(
        self,
        seller_id: str,
        serial_number: str,
        client_name: str,
        sale_date: date,
        *,
        client_phone: Optional[str] = None,
        invoice_number: Optional[str] = None,
    ) -> SellerRegistrationResult:
        payload = self._rpc(
            "rpc_register_seller_serial",
            {
                "p_seller_id": seller_id,
                "p_serial_number": serial_number,
                "p_client_name": client_name,
                "p_client_phone": client_phone or None,
                "p_invoice_number": invoice_number or None,
                "p_sale_date": sale_date.isoformat(),
            },
        )
        return self._parse_rows(
            "rpc_register_seller_serial", [payload], SellerRegistrationResult.from_payload
        )[0]

    def fetch_active_buyer_coupons(self) -> list[Coupon]:
        rows = self._select(
            "coupons", COUPON_SELECT, status="eq.ACTIVE", owner_type="eq.BUYER"
        )
        return self._parse_rows("coupons", rows, Coupon.from_row)

    def fetch_purchase_identity(self, purchase_id: str) -> Optional[PurchaseIdentity]:
        rows = self._select("client_purchases", IDENTITY_SELECT, id=f"eq.{purchase_id}")
        if not rows:
            return None
        return self._parse_rows("client_purchases", rows[:1], PurchaseIdentity.from_row)[0]

    def persist_draw_result(
        self,
        name: str,
        preselected_count: int,
        finalists_count: int,
        executed_at: datetime,
        results: dict[str, Any],
    ) -> Optional[str]:
        rows = self._request(
            "POST",
            "/rest/v1/draws",
            json={
                "name": name,
                "preselected_count": preselected_count,
                "finalists_count": finalists_count,
                "executed_at": dt_iso(executed_at),
                "results": results,
            },
            headers={"Prefer": "return=representation"},
        )
        first = rows[0] if isinstance(rows, list) and rows else None
        if isinstance(first, Mapping) and first.get("id") is not None:
            return str(first["id"])
        return None

    def mark_coupons_used(self, codes: Sequence[str]) -> None:
        if not codes:
            return
        in_filter = "in.(" + ",".join(_quote(code) for code in codes) + ")"
        self._request(
            "PATCH",
            "/rest/v1/coupons",
            params={"code": in_filter},
            json={"status": "USED"},
        )
