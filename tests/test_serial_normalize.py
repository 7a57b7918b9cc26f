import unittest

from suenohincha.serials import (
    SERIAL_EXAMPLE,
    SERIAL_EXAMPLE_WITH_DASH,
    detect_dash_in_serial,
    normalize_serial,
    validate_serial_format,
)


class TestNormalizeSerial(unittest.TestCase):
    def test_strips_whitespace_dashes_and_uppercases(self):
        self.assertEqual(normalize_serial(" 2540415m-00039 "), "2540415M00039")
        self.assertEqual(normalize_serial("2540 415m\t- 00039\n"), "2540415M00039")

    def test_label_example_normalizes_to_form_example(self):
        self.assertEqual(normalize_serial(SERIAL_EXAMPLE_WITH_DASH), SERIAL_EXAMPLE)

    def test_keep_dashes(self):
        self.assertEqual(
            normalize_serial(" 2540415m-00039 ", strip_dashes=False), "2540415M-00039"
        )

    def test_idempotent(self):
        for raw in [" 2540415m-00039 ", "abc - def", "", "  ", "x-y-z", "ÑANDÚ 1"]:
            for strip in (True, False):
                once = normalize_serial(raw, strip_dashes=strip)
                self.assertEqual(normalize_serial(once, strip_dashes=strip), once)

    def test_whitespace_only_is_empty(self):
        self.assertEqual(normalize_serial("   \t "), "")

    def test_none_rejected(self):
        with self.assertRaises(TypeError):
            normalize_serial(None)  # type: ignore[arg-type]


class TestValidateSerialFormat(unittest.TestCase):
    def test_valid_serial(self):
        check = validate_serial_format("2540415M00039")
        self.assertTrue(check.is_valid)
        self.assertIsNone(check.error)

    def test_empty_has_no_error(self):
        check = validate_serial_format("   ")
        self.assertFalse(check.is_valid)
        self.assertIsNone(check.error)

    def test_invalid_characters_listed_once(self):
        check = validate_serial_format("AB#C#D.")
        self.assertFalse(check.is_valid)
        self.assertIn("#, .", check.error)
        self.assertEqual(check.error.count("#"), 1)

    def test_dashes_are_not_invalid(self):
        self.assertTrue(validate_serial_format("2540415M-00039").is_valid)

    def test_length_bounds_only_when_given(self):
        self.assertTrue(validate_serial_format("ABC").is_valid)
        short = validate_serial_format("ABC", min_length=8)
        self.assertFalse(short.is_valid)
        self.assertIn("corto", short.error)
        long = validate_serial_format("A" * 30, max_length=24)
        self.assertFalse(long.is_valid)
        self.assertIn("largo", long.error)

    def test_detect_dash(self):
        self.assertTrue(detect_dash_in_serial("2540415M-00039"))
        self.assertFalse(detect_dash_in_serial("2540415M00039"))


if __name__ == "__main__":
    unittest.main()
