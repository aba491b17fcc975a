import datetime
import unittest

from financas.core.installments import expand_installments, parse_installment_count
from financas.core.models import SINGLE_INSTALLMENT, PaymentMethod, Transaction

D = datetime.date


class TestInstallments(unittest.TestCase):

    def test_parse_installment_count(self):
        self.assertEqual(parse_installment_count("3x"), 3)
        self.assertEqual(parse_installment_count("12"), 12)
        self.assertEqual(parse_installment_count("10X"), 10)
        self.assertEqual(parse_installment_count(SINGLE_INSTALLMENT), 1)
        self.assertEqual(parse_installment_count(""), 1)
        self.assertEqual(parse_installment_count("0"), 1)

    def test_single_payment_stays_single(self):
        tx = Transaction(amount=80.0, date=D(2025, 3, 1), payment_method=PaymentMethod.PIX)
        entries = expand_installments(tx)
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].amount, 80.0)
        self.assertEqual(entries[0].installment_label, SINGLE_INSTALLMENT)
        self.assertIsNot(entries[0], tx)

    def test_installments_split_amount_and_advance_months(self):
        tx = Transaction(amount=900.0, date=D(2025, 1, 31), payment_method=PaymentMethod.CREDIT,
                         category="Eletrônicos", installment_label="3x", id=42)
        entries = expand_installments(tx)

        self.assertEqual(len(entries), 3)
        self.assertEqual([e.installment_label for e in entries], ["1/3", "2/3", "3/3"])
        self.assertEqual([e.date for e in entries], [D(2025, 1, 31), D(2025, 2, 28), D(2025, 3, 31)])
        self.assertAlmostEqual(sum(e.amount for e in entries), 900.0)
        self.assertTrue(all(e.amount == 300.0 for e in entries))
        self.assertTrue(all(e.id is None for e in entries))
        self.assertTrue(all(e.category == "Eletrônicos" for e in entries))

    def test_remainder_goes_to_last_installment(self):
        tx = Transaction(amount=100.0, date=D(2025, 3, 5), payment_method=PaymentMethod.CREDIT, installment_label="3x")
        entries = expand_installments(tx)

        self.assertEqual([e.amount for e in entries], [33.33, 33.33, 33.34])
        self.assertAlmostEqual(sum(e.to_row()["valor"] for e in entries), 100.0, places=2)


if __name__ == '__main__':
    unittest.main()
