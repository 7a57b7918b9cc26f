import unittest

from suenohincha.types import (
    BuyerRegistrationResult,
    Coupon,
    CouponStatus,
    ProductInfo,
    Role,
    SellerRegistrationResult,
    SerialRecord,
    SerialStatus,
)


class TestRowParsing(unittest.TestCase):
    def test_serial_record_defaults(self):
        record = SerialRecord.from_row({"serial_number": "S1", "products": None})
        self.assertIs(record.status, SerialStatus.AVAILABLE)
        self.assertIsNone(record.product)
        self.assertIsNone(record.campaign_type)
        self.assertTrue(record.is_eligible_for(Role.BUYER))
        self.assertTrue(record.is_eligible_for(Role.SELLER))

    def test_product_without_points(self):
        record = SerialRecord.from_row(
            {"serial_number": "S1", "products": {"model_name": "X", "points_value": None}}
        )
        self.assertEqual(record.product.points_value, 10)
        self.assertEqual(record.product.ticket_multiplier, 1)

    def test_unit_value_by_role(self):
        info = ProductInfo("X", ticket_multiplier=3, points_value=25)
        self.assertEqual(info.unit_value(Role.BUYER), 3)
        self.assertEqual(info.unit_value(Role.SELLER), 25)

    def test_coupon_row(self):
        coupon = Coupon.from_row({"code": "C", "buyer_purchase_id": 5, "status": "USED"})
        self.assertEqual(coupon.linked_purchase_id, "5")
        self.assertIs(coupon.status, CouponStatus.USED)


class TestRegistrationPayloads(unittest.TestCase):
    def test_buyer_payload(self):
        result = BuyerRegistrationResult.from_payload({"success": True, "coupons": ["A", "B"]})
        self.assertTrue(result.success)
        self.assertEqual(result.coupon_count, 2)

    def test_seller_payload(self):
        result = SellerRegistrationResult.from_payload(
            {"success": True, "points": "20", "sale_id": 99}
        )
        self.assertEqual(result.points, 20)
        self.assertEqual(result.sale_id, "99")

    def test_non_mapping_payload(self):
        for payload in (None, [], "ok"):
            self.assertFalse(BuyerRegistrationResult.from_payload(payload).success)
            self.assertFalse(SellerRegistrationResult.from_payload(payload).success)


if __name__ == "__main__":
    unittest.main()
