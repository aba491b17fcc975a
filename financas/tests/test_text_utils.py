import unittest

from financas.utils.text_utils import (
    format_currency,
    normalize_name,
    parse_amount,
    starts_with_ignore_case,
    strip_accents,
)


class TestTextUtils(unittest.TestCase):

    def test_strip_accents(self):
        self.assertEqual(strip_accents("Crédito"), "Credito")
        self.assertEqual(strip_accents("Cartão"), "Cartao")
        self.assertEqual(strip_accents(""), "")
        self.assertEqual(strip_accents(None), "")

    def test_normalize_name(self):
        self.assertEqual(normalize_name("  mercado  "), "Mercado")
        self.assertEqual(normalize_name("contas   de casa"), "Contas de casa")
        self.assertEqual(normalize_name(""), "")

    def test_format_currency(self):
        self.assertEqual(format_currency(1234.5), "R$ 1.234,50")
        self.assertEqual(format_currency(0), "R$ 0,00")
        self.assertEqual(format_currency(-80), "-R$ 80,00")
        self.assertEqual(format_currency(1000000), "R$ 1.000.000,00")

    def test_parse_amount(self):
        self.assertEqual(parse_amount("80"), 80.0)
        self.assertEqual(parse_amount("80.5"), 80.5)
        self.assertEqual(parse_amount("150,5"), 150.5)
        self.assertEqual(parse_amount("1.234,56"), 1234.56)
        self.assertEqual(parse_amount("R$ 1.234,56"), 1234.56)

    def test_parse_amount_invalid(self):
        for text in ["", "abc", "0", "-10", "nan", "inf", "-inf", "infinity"]:
            with self.subTest(text=text):
                with self.assertRaises(ValueError):
                    parse_amount(text)

    def test_starts_with_ignore_case(self):
        self.assertTrue(starts_with_ignore_case("Aluguel (3/12)", "aluguel"))
        self.assertTrue(starts_with_ignore_case("INTERNET", "Internet"))
        self.assertFalse(starts_with_ignore_case("Conta de Internet", "Internet"))
        self.assertFalse(starts_with_ignore_case("", "Internet"))
        self.assertFalse(starts_with_ignore_case("Internet", ""))


if __name__ == '__main__':
    unittest.main()
