import datetime
import unittest

from financas.utils import date_utils


class TestDateUtils(unittest.TestCase):

    def test_safe_date_clamps_to_month_length(self):
        self.assertEqual(date_utils.safe_date(2025, 2, 31), datetime.date(2025, 2, 28))
        self.assertEqual(date_utils.safe_date(2024, 2, 31), datetime.date(2024, 2, 29))  # bissexto
        self.assertEqual(date_utils.safe_date(2025, 4, 31), datetime.date(2025, 4, 30))
        self.assertEqual(date_utils.safe_date(2025, 3, 15), datetime.date(2025, 3, 15))

    def test_shift_month_crosses_year(self):
        self.assertEqual(date_utils.shift_month(2025, 1, -1), (2024, 12))
        self.assertEqual(date_utils.shift_month(2025, 12, 1), (2026, 1))
        self.assertEqual(date_utils.shift_month(2025, 3, 0), (2025, 3))
        self.assertEqual(date_utils.shift_month(2025, 11, 14), (2027, 1))

    def test_add_months_keeps_end_of_month(self):
        self.assertEqual(date_utils.add_months(datetime.date(2025, 1, 31), 1), datetime.date(2025, 2, 28))
        self.assertEqual(date_utils.add_months(datetime.date(2025, 12, 10), 2), datetime.date(2026, 2, 10))

    def test_month_key(self):
        self.assertEqual(date_utils.month_key(datetime.date(2025, 3, 9)), "03/2025")

    def test_parse_month_key_formats(self):
        self.assertEqual(date_utils.parse_month_key("03/2025"), (3, 2025))
        self.assertEqual(date_utils.parse_month_key("3/2025"), (3, 2025))
        self.assertEqual(date_utils.parse_month_key("2025-03"), (3, 2025))
        self.assertEqual(date_utils.normalize_month_key("2025-3"), "03/2025")

    def test_parse_month_key_invalid(self):
        with self.assertRaises(ValueError):
            date_utils.parse_month_key("13/2025")
        with self.assertRaises(ValueError):
            date_utils.parse_month_key("marco")

    def test_parse_date_br_and_iso(self):
        self.assertEqual(date_utils.parse_date("28/02/2025"), datetime.date(2025, 2, 28))
        self.assertEqual(date_utils.parse_date("2025-02-28"), datetime.date(2025, 2, 28))
        self.assertEqual(date_utils.parse_date("2025-02-28T10:30:00+00:00"), datetime.date(2025, 2, 28))
        self.assertEqual(date_utils.parse_date(datetime.datetime(2025, 2, 28, 23, 59)), datetime.date(2025, 2, 28))

    def test_parse_competence(self):
        expected = datetime.date(2025, 1, 1)
        self.assertEqual(date_utils.parse_competence("2025-01"), expected)
        self.assertEqual(date_utils.parse_competence("01/2025"), expected)
        self.assertEqual(date_utils.parse_competence("2025-01-20"), expected)
        self.assertEqual(date_utils.parse_competence(datetime.date(2025, 1, 20)), expected)

    def test_month_label(self):
        self.assertEqual(date_utils.month_label(3, 2025), "Março/2025")
        self.assertEqual(date_utils.format_br_date(datetime.date(2025, 3, 1)), "01/03/2025")


if __name__ == '__main__':
    unittest.main()
