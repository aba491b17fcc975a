import datetime
import unittest

from financas.core import reports
from financas.core.models import BudgetGoal, PaymentMethod, Transaction, TransactionStatus

D = datetime.date


def tx(amount, date, method=PaymentMethod.PIX, category="Mercado", responsible="", pending=False):
    return Transaction(
        amount=amount, date=date, payment_method=method, category=category, responsible=responsible,
        status=TransactionStatus.PENDING if pending else TransactionStatus.NORMAL,
    )


class TestSummary(unittest.TestCase):

    def test_summarize_expenses(self):
        transactions = [
            tx(100.0, D(2025, 3, 1), PaymentMethod.CREDIT, responsible="Ana"),
            tx(50.0, D(2025, 3, 2), PaymentMethod.PIX, responsible="Bia"),
            tx(25.0, D(2025, 3, 3), PaymentMethod.CASH, responsible="Ana"),
            tx(300.0, D(2025, 3, 10), pending=True),
        ]
        pending = [t for t in transactions if t.is_pending]
        summary = reports.summarize_expenses(transactions, pending)

        self.assertEqual(summary.credit_total, 100.0)
        self.assertEqual(summary.other_total, 75.0)
        self.assertEqual(summary.pending_total, 300.0)
        self.assertEqual(summary.total, 475.0)
        self.assertEqual(summary.count, 4)
        self.assertEqual(summary.by_responsible, {"Ana": 125.0, "Bia": 50.0})

    def test_empty_summary(self):
        summary = reports.summarize_expenses([])
        self.assertEqual(summary.total, 0.0)
        self.assertEqual(summary.count, 0)


class TestBudget(unittest.TestCase):

    def test_build_goal_rows_replicates_year(self):
        rows = reports.build_goal_rows("Mercado", 2025, 1500.0, user_id="user-1")
        self.assertEqual(len(rows), 12)
        self.assertEqual([r.month for r in rows], list(range(1, 13)))
        self.assertTrue(all(r.goal == 1500.0 and r.year == 2025 for r in rows))
        self.assertEqual(rows[0].to_row()["user_id"], "user-1")

    def test_average_monthly_goal(self):
        goals = reports.build_goal_rows("Mercado", 2025, 1200.0) + reports.build_goal_rows("Lazer", 2025, 300.0)
        self.assertEqual(reports.average_monthly_goal(goals, "Mercado"), 1200.0)
        self.assertEqual(reports.average_monthly_goal(goals, "Saúde"), 0.0)

    def test_monthly_actuals(self):
        transactions = [
            tx(100.0, D(2025, 1, 5)),
            tx(50.0, D(2025, 1, 20)),
            tx(80.0, D(2025, 3, 1), category="Lazer"),
            tx(999.0, D(2024, 12, 31)),
        ]
        table = reports.monthly_actuals(transactions, 2025, categories=["Saúde"])

        self.assertEqual(list(table.columns), list(range(1, 13)))
        self.assertEqual(table.loc["Mercado", 1], 150.0)
        self.assertEqual(table.loc["Lazer", 3], 80.0)
        self.assertEqual(table.loc["Saúde"].sum(), 0.0)
        self.assertEqual(table.loc["Mercado"].sum(), 150.0)

    def test_monthly_actuals_without_transactions(self):
        table = reports.monthly_actuals([], 2025, categories=["Mercado"])
        self.assertEqual(table.loc["Mercado"].sum(), 0.0)

    def test_budget_vs_actual(self):
        goals = reports.build_goal_rows("Mercado", 2025, 1000.0)
        transactions = [tx(400.0, D(2025, 1, 5)), tx(600.0, D(2025, 2, 5))]
        table = reports.budget_vs_actual(transactions, goals, 2025)

        row = table.loc["Mercado"]
        self.assertEqual(row["meta"], 1000.0)
        self.assertEqual(row["Jan"], 400.0)
        self.assertEqual(row["Fev"], 600.0)
        self.assertEqual(row["total"], 1000.0)
        self.assertEqual(row["meta_anual"], 12000.0)
        self.assertEqual(row["saldo"], 11000.0)

    def test_month_budget_vs_actual(self):
        goals = [BudgetGoal("Mercado", 3, 2025, 500.0), BudgetGoal("Mercado", 4, 2025, 800.0)]
        transactions = [tx(250.0, D(2025, 3, 5)), tx(40.0, D(2025, 3, 8), category="Lazer")]
        rows = reports.month_budget_vs_actual(transactions, goals, 3, 2025)

        self.assertEqual(rows[0], {"categoria": "Mercado", "meta": 500.0, "realizado": 250.0, "percentual": 50.0})
        self.assertEqual(rows[1]["categoria"], "Lazer")
        self.assertEqual(rows[1]["percentual"], 0.0)


if __name__ == '__main__':
    unittest.main()
