import json as _json
import os
import unittest
from datetime import date, datetime, timezone
from unittest.mock import patch

import requests

from suenohincha.errors import GatewayError, TransientLookupError
from suenohincha.gateway.rest import RestGateway
from suenohincha.types import (
    CampaignType,
    OwnerType,
    PurchaseIdentity,
    RegistrationStatus,
    SerialStatus,
)


class DummyResponse:
    def __init__(self, json_data=None, content: bytes = b"", status_code: int = 200):
        self._json = json_data
        if json_data is not None and not content:
            content = _json.dumps(json_data).encode()
        self.content = content
        self.status_code = status_code

    def json(self):
        if self._json is None:
            return _json.loads(self.content)
        return self._json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


class DummySession:
    def __init__(self, response=None, error: Exception = None):
        self.response = response or DummyResponse(json_data=[])
        self.error = error
        self.calls = []

    def request(self, method, url, headers=None, params=None, json=None, timeout=None):
        self.calls.append(
            {
                "method": method,
                "url": url,
                "headers": headers,
                "params": params,
                "json": json,
                "timeout": timeout,
            }
        )
        if self.error is not None:
            raise self.error
        return self.response


def make_gateway(session: DummySession) -> RestGateway:
    return RestGateway(
        base_url="https://promo.example.com/", api_key="anon-key", timeout=5, session=session
    )


class TestRestGatewayConfig(unittest.TestCase):
    @patch("suenohincha.config.load_dotenv")
    def test_requires_url(self, mock_load_dotenv):
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(ValueError):
                RestGateway(session=DummySession())

    @patch("suenohincha.config.load_dotenv")
    def test_reads_environment(self, mock_load_dotenv):
        env = {
            "SUPABASE_URL": "https://env.example.com",
            "SUPABASE_ANON_KEY": "env-key",
            "GATEWAY_TIMEOUT": "12",
        }
        with patch.dict(os.environ, env, clear=True):
            gateway = RestGateway(session=DummySession())
        self.assertEqual(gateway.base_url, "https://env.example.com")
        self.assertEqual(gateway.api_key, "env-key")
        self.assertEqual(gateway.timeout, 12)

    @patch("suenohincha.config.load_dotenv")
    def test_headers(self, mock_load_dotenv):
        session = DummySession()
        gateway = make_gateway(session)
        gateway.fetch_active_buyer_coupons()
        headers = session.calls[0]["headers"]
        self.assertEqual(headers["apikey"], "anon-key")
        self.assertEqual(headers["Authorization"], "Bearer anon-key")
        self.assertEqual(session.calls[0]["timeout"], 5)


@patch("suenohincha.config.load_dotenv")
class TestRestGatewayOperations(unittest.TestCase):
    def test_lookup_serial(self, _):
        row = {
            "id": 7,
            "serial_number": "2540415M00039",
            "status": "BLOCKED",
            "buyer_status": "REGISTERED",
            "seller_status": "NOT_REGISTERED",
            "campaign_type": "LEGACY",
            "products": {"model_name": "55 UHD", "points_value": 20, "ticket_multiplier": 2},
        }
        session = DummySession(DummyResponse(json_data=[row]))
        record = make_gateway(session).lookup_serial("2540415M00039")

        call = session.calls[0]
        self.assertEqual(call["method"], "GET")
        self.assertEqual(call["url"], "https://promo.example.com/rest/v1/tv_serials")
        self.assertEqual(call["params"]["serial_number"], "eq.2540415M00039")
        self.assertIs(record.status, SerialStatus.BLOCKED)
        self.assertIs(record.buyer_status, RegistrationStatus.REGISTERED)
        self.assertIs(record.campaign_type, CampaignType.LEGACY)
        self.assertEqual(record.product.points_value, 20)
        self.assertEqual(record.id, "7")

    def test_lookup_serial_missing(self, _):
        session = DummySession(DummyResponse(json_data=[]))
        self.assertIsNone(make_gateway(session).lookup_serial("SKW999"))

    def test_register_buyer(self, _):
        payload = {"success": True, "coupons": ["BOL-2026-AAAAA", "BOL-2026-BBBBB"]}
        session = DummySession(DummyResponse(json_data=payload))
        identity = PurchaseIdentity("Ana", "123", "La Paz", "ana@example.com", "700")
        result = make_gateway(session).register_buyer_serial(
            "2540415M00039", identity, date(2026, 6, 1)
        )

        call = session.calls[0]
        self.assertEqual(call["method"], "POST")
        self.assertTrue(call["url"].endswith("/rest/v1/rpc/rpc_register_buyer_serial"))
        self.assertEqual(call["json"]["p_serial_number"], "2540415M00039")
        self.assertEqual(call["json"]["p_purchase_date"], "2026-06-01")
        self.assertTrue(result.success)
        self.assertEqual(result.coupon_count, 2)

    def test_register_seller_failure_payload(self, _):
        payload = {"success": False, "error": "Serial ya registrado"}
        session = DummySession(DummyResponse(json_data=payload))
        result = make_gateway(session).register_seller_serial(
            "42", "2540415M00039", "Carlos", date(2026, 6, 2), client_phone=""
        )
        self.assertFalse(result.success)
        self.assertEqual(result.error, "Serial ya registrado")
        self.assertIsNone(session.calls[0]["json"]["p_client_phone"])

    def test_unexpected_payload(self, _):
        session = DummySession(DummyResponse(content=b""))
        result = make_gateway(session).register_seller_serial(
            "42", "S", "Carlos", date(2026, 6, 2)
        )
        self.assertFalse(result.success)

    def test_fetch_coupons(self, _):
        rows = [
            {"id": 1, "code": "BOL-2026-AAAAA", "owner_type": "BUYER", "buyer_purchase_id": 10, "status": "ACTIVE"},
            {"id": 2, "code": "BOL-2026-BBBBB", "owner_type": "BUYER", "buyer_purchase_id": None, "status": "ACTIVE"},
        ]
        session = DummySession(DummyResponse(json_data=rows))
        coupons = make_gateway(session).fetch_active_buyer_coupons()
        params = session.calls[0]["params"]
        self.assertEqual(params["status"], "eq.ACTIVE")
        self.assertEqual(params["owner_type"], "eq.BUYER")
        self.assertEqual(coupons[0].linked_purchase_id, "10")
        self.assertIsNone(coupons[1].linked_purchase_id)
        self.assertIs(coupons[0].owner_type, OwnerType.BUYER)

    def test_fetch_identity(self, _):
        row = {"full_name": "Ana", "dni": "123", "city": None, "email": "a@x", "phone": "700"}
        session = DummySession(DummyResponse(json_data=[row]))
        identity = make_gateway(session).fetch_purchase_identity("10")
        self.assertEqual(session.calls[0]["params"]["id"], "eq.10")
        self.assertEqual(identity.full_name, "Ana")
        self.assertIsNone(identity.city)

    def test_persist_draw(self, _):
        session = DummySession(DummyResponse(json_data=[{"id": "d-1"}]))
        at = datetime(2026, 6, 14, 20, 0, tzinfo=timezone.utc)
        draw_id = make_gateway(session).persist_draw_result("Junio", 10, 3, at, {"winners": []})
        call = session.calls[0]
        self.assertEqual(call["headers"]["Prefer"], "return=representation")
        self.assertEqual(call["json"]["executed_at"], "2026-06-14T20:00:00+00:00")
        self.assertEqual(draw_id, "d-1")

    def test_mark_used(self, _):
        session = DummySession(DummyResponse(content=b""))
        gateway = make_gateway(session)
        gateway.mark_coupons_used(["A", "B"])
        gateway.mark_coupons_used([])
        self.assertEqual(len(session.calls), 1)
        call = session.calls[0]
        self.assertEqual(call["method"], "PATCH")
        self.assertEqual(call["params"]["code"], 'in.("A","B")')
        self.assertEqual(call["json"], {"status": "USED"})


@patch("suenohincha.config.load_dotenv")
class TestRestGatewayErrors(unittest.TestCase):
    def test_timeout_is_transient(self, _):
        session = DummySession(error=requests.Timeout("slow"))
        with self.assertRaises(TransientLookupError) as ctx:
            make_gateway(session).lookup_serial("S")
        self.assertTrue(ctx.exception.retryable)

    def test_connection_error_is_transient(self, _):
        session = DummySession(error=requests.ConnectionError("down"))
        with self.assertRaises(TransientLookupError):
            make_gateway(session).fetch_active_buyer_coupons()

    def test_busy_status_is_transient(self, _):
        session = DummySession(DummyResponse(json_data={}, status_code=503))
        with self.assertRaises(TransientLookupError):
            make_gateway(session).lookup_serial("S")

    def test_other_status_is_gateway_error(self, _):
        session = DummySession(DummyResponse(json_data={"message": "denied"}, status_code=401))
        with self.assertRaises(GatewayError) as ctx:
            make_gateway(session).persist_draw_result(
                "X", 1, 1, datetime.now(timezone.utc), {}
            )
        self.assertNotIsInstance(ctx.exception, TransientLookupError)

    def test_other_request_failure_is_gateway_error(self, _):
        session = DummySession(error=requests.TooManyRedirects("loop"))
        with self.assertRaises(GatewayError) as ctx:
            make_gateway(session).lookup_serial("S")
        self.assertNotIsInstance(ctx.exception, TransientLookupError)

    def test_html_body_is_gateway_error(self, _):
        session = DummySession(DummyResponse(content=b"<html>gateway</html>"))
        with self.assertRaises(GatewayError):
            make_gateway(session).lookup_serial("ABC123")
        with self.assertRaises(GatewayError):
            make_gateway(session).fetch_purchase_identity("10")

    def test_unknown_campaign_type_is_gateway_error(self, _):
        rows = [{"serial_number": "ABC123", "campaign_type": "PROMO2024"}]
        session = DummySession(DummyResponse(json_data=rows))
        with self.assertRaises(GatewayError):
            make_gateway(session).lookup_serial("ABC123")

    def test_unknown_coupon_owner_is_gateway_error(self, _):
        rows = [{"id": 1, "code": "BOL-2026-AAAAA", "owner_type": "PARTNER", "status": "ACTIVE"}]
        session = DummySession(DummyResponse(json_data=rows))
        with self.assertRaises(GatewayError):
            make_gateway(session).fetch_active_buyer_coupons()

    def test_non_list_rows_is_gateway_error(self, _):
        session = DummySession(DummyResponse(json_data={"message": "unexpected"}))
        with self.assertRaises(GatewayError):
            make_gateway(session).fetch_active_buyer_coupons()


if __name__ == "__main__":
    unittest.main()
