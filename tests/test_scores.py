import unittest

from gradeplanner.core.scores import accept_input, clamp_values, parse_float, to_numeric
from gradeplanner.core.subjects_data import default_catalog


class AcceptInputTests(unittest.TestCase):
    def test_accepted(self):
        for value in ("", "0", "85", "85.5", ".", "100", "7."):
            with self.subTest(value=value):
                self.assertTrue(accept_input(value, 100))

    def test_rejected(self):
        for value in ("abc", "-5", "1.2.3", "101", "1e2", " 5"):
            with self.subTest(value=value):
                self.assertFalse(accept_input(value, 100))

    def test_field_maximum(self):
        self.assertTrue(accept_input("40", 40))
        self.assertFalse(accept_input("40.5", 40))


class ParseTests(unittest.TestCase):
    def test_parse_float(self):
        self.assertEqual(parse_float("12.5"), 12.5)
        self.assertEqual(parse_float("12abc"), 12)
        self.assertEqual(parse_float(""), 0)
        self.assertEqual(parse_float("abc"), 0)
        self.assertEqual(parse_float(None), 0)
        self.assertEqual(parse_float("."), 0)

    def test_to_numeric(self):
        self.assertEqual(to_numeric({"Qz1": "80", "Qz2": "", "F": "."}), {"Qz1": 80.0, "Qz2": 0.0, "F": 0.0})


class ClampTests(unittest.TestCase):
    def test_clamps_to_field_bounds(self):
        subject = default_catalog().find("diploma", "business_analytics")
        clamped = clamp_values(subject, {"Qz1": 150, "F": 55, "A": -3, "Unknown": 10})
        self.assertEqual(clamped, {"Qz1": 100.0, "F": 40.0, "A": 0.0})


if __name__ == "__main__":
    unittest.main()
