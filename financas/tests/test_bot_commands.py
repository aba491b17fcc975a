import datetime
import unittest
from dataclasses import replace
from unittest.mock import ANY, AsyncMock, MagicMock, patch

from telegram.ext import ConversationHandler

from financas.bot.commands.expenses import (
    delete_transaction_command,
    edit_transaction_command,
    expense_command,
    revenue_command,
)
from financas.bot.commands.fixed_costs import delete_fixed_cost_command, edit_fixed_cost_command, new_fixed_cost_command
from financas.bot.commands.periods import configure_period_command
from financas.bot.handlers import ASKING_CONFIRMATION, handle_confirmation, handle_payment_method
from financas.core.models import FixedCost, InvalidPeriodError, PaymentMethod, PaymentResult, Transaction


def make_update(text=""):
    update = MagicMock()
    update.message.text = text
    update.message.reply_text = AsyncMock()
    update.effective_user.first_name = "Ana"
    return update


def make_context(args=None):
    context = MagicMock()
    context.args = args or []
    context.bot_data = {"supabase_client": MagicMock(), "user_id": "user-1"}
    context.user_data = {}
    return context


class TestExpenseCommand(unittest.IsolatedAsyncioTestCase):

    @patch('financas.bot.commands.expenses.db')
    @patch('financas.bot.commands.expenses.workflows')
    async def test_expense_with_installments(self, mock_workflows, mock_db):
        mock_db.get_categories.return_value = ["Eletrônicos"]
        mock_workflows.save_expense.side_effect = lambda client, user_id, tx: [tx, tx]
        update = make_update()
        context = make_context(["1.200,00", "credito", "eletrônicos", "2x", "Notebook", "novo"])

        await expense_command(update, context)

        tx = mock_workflows.save_expense.call_args[0][2]
        self.assertEqual(tx.amount, 1200.0)
        self.assertEqual(tx.payment_method, PaymentMethod.CREDIT)
        self.assertEqual(tx.category, "Eletrônicos")
        self.assertEqual(tx.installment_label, "2x")
        self.assertEqual(tx.description, "Notebook novo")
        self.assertEqual(tx.responsible, "Ana")
        mock_db.add_category.assert_not_called()
        self.assertIn("2 parcelas", update.message.reply_text.call_args[0][0])

    @patch('financas.bot.commands.expenses.db')
    @patch('financas.bot.commands.expenses.workflows')
    async def test_expense_invalid_method(self, mock_workflows, mock_db):
        update = make_update()
        await expense_command(update, make_context(["50", "boleto", "Mercado"]))
        mock_workflows.save_expense.assert_not_called()
        self.assertIn("Forma de pagamento desconhecida", update.message.reply_text.call_args[0][0])

    @patch('financas.bot.commands.expenses.workflows')
    async def test_expense_missing_args(self, mock_workflows):
        update = make_update()
        await expense_command(update, make_context(["50"]))
        mock_workflows.save_expense.assert_not_called()
        update.message.reply_text.assert_awaited_once()

    @patch('financas.bot.commands.expenses.db')
    async def test_revenue(self, mock_db):
        mock_db.add_revenue.return_value = True
        update = make_update()
        await revenue_command(update, make_context(["5000", "salario", "Empresa", "X"]))

        revenue = mock_db.add_revenue.call_args[0][1]
        self.assertEqual(revenue.amount, 5000.0)
        self.assertEqual(revenue.category, "Salario")
        self.assertEqual(revenue.description, "Empresa X")
        self.assertEqual(revenue.user_id, "user-1")


class TestTransactionManagementCommands(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.transaction = Transaction(amount=59.9, date=datetime.date(2025, 3, 10), payment_method=PaymentMethod.CREDIT,
                                       category="Mercado", id=42)

    @patch('financas.bot.commands.expenses.ledger')
    async def test_edit_moves_transaction_to_new_method(self, mock_ledger):
        mock_ledger.get_transaction.return_value = self.transaction
        mock_ledger.update_transaction.return_value = True
        update = make_update()

        await edit_transaction_command(update, make_context(["credito", "42", "forma", "pix"]))

        mock_ledger.get_transaction.assert_called_once_with(ANY, "user-1", PaymentMethod.CREDIT, 42)
        edited = mock_ledger.update_transaction.call_args[0][1]
        self.assertEqual(edited.payment_method, PaymentMethod.PIX)
        self.assertEqual(edited.id, 42)
        self.assertEqual(mock_ledger.update_transaction.call_args[1]["previous_method"], PaymentMethod.CREDIT)
        self.assertIn("atualizado", update.message.reply_text.call_args[0][0])

    @patch('financas.bot.commands.expenses.ledger')
    async def test_edit_rejects_unknown_field(self, mock_ledger):
        mock_ledger.get_transaction.return_value = self.transaction
        update = make_update()
        await edit_transaction_command(update, make_context(["credito", "42", "cor", "azul"]))
        mock_ledger.update_transaction.assert_not_called()
        self.assertIn("Campo desconhecido", update.message.reply_text.call_args[0][0])

    @patch('financas.bot.commands.expenses.ledger')
    async def test_delete_transaction(self, mock_ledger):
        mock_ledger.get_transaction.return_value = self.transaction
        mock_ledger.delete_transaction.return_value = True
        update = make_update()

        await delete_transaction_command(update, make_context(["cartao", "42"]))

        mock_ledger.delete_transaction.assert_called_once_with(ANY, self.transaction)
        self.assertIn("removido", update.message.reply_text.call_args[0][0])

    @patch('financas.bot.commands.expenses.ledger')
    async def test_delete_unknown_transaction(self, mock_ledger):
        mock_ledger.get_transaction.return_value = None
        update = make_update()
        await delete_transaction_command(update, make_context(["pix", "7"]))
        mock_ledger.delete_transaction.assert_not_called()
        self.assertIn("não encontrado", update.message.reply_text.call_args[0][0])


class TestFixedCostManagementCommands(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.fixed_cost = FixedCost(title="Internet", amount=120.0, due_day=10, id=12, user_id="user-1")

    @patch('financas.bot.commands.fixed_costs.workflows')
    async def test_new_fixed_cost_with_cycles(self, mock_workflows):
        mock_workflows.save_fixed_cost.side_effect = lambda client, user_id, fc: replace(fc, id=5, user_id=user_id)
        update = make_update()

        await new_fixed_cost_command(update, make_context(["300", "31", "credito", "educacao", "3x", "Curso", "de", "ingles"]))

        fixed_cost = mock_workflows.save_fixed_cost.call_args[0][2]
        self.assertEqual(mock_workflows.save_fixed_cost.call_args[0][1], "user-1")
        self.assertEqual(fixed_cost.title, "Curso de ingles")
        self.assertEqual(fixed_cost.amount, 300.0)
        self.assertEqual(fixed_cost.due_day, 31)
        self.assertEqual(fixed_cost.payment_method, PaymentMethod.CREDIT)
        self.assertEqual(fixed_cost.category, "Educacao")
        self.assertEqual(fixed_cost.total_cycles, 3)
        self.assertEqual(fixed_cost.responsible, "Ana")
        self.assertIn("#5", update.message.reply_text.call_args[0][0])

    @patch('financas.bot.commands.fixed_costs.workflows')
    async def test_new_fixed_cost_rejects_invalid_day(self, mock_workflows):
        update = make_update()
        await new_fixed_cost_command(update, make_context(["120", "32", "pix", "Casa", "Internet"]))
        mock_workflows.save_fixed_cost.assert_not_called()
        self.assertIn("entre 1 e 31", update.message.reply_text.call_args[0][0])

    @patch('financas.bot.commands.fixed_costs.workflows')
    @patch('financas.bot.commands.fixed_costs.db')
    async def test_edit_fixed_cost_amount(self, mock_db, mock_workflows):
        mock_db.get_fixed_cost.return_value = self.fixed_cost
        mock_workflows.save_fixed_cost.side_effect = lambda client, user_id, fc: fc
        update = make_update()

        await edit_fixed_cost_command(update, make_context(["12", "valor", "135,90"]))

        edited = mock_workflows.save_fixed_cost.call_args[0][2]
        self.assertEqual(edited.id, 12)
        self.assertEqual(edited.amount, 135.9)
        self.assertEqual(edited.title, "Internet")
        self.assertIn("atualizado", update.message.reply_text.call_args[0][0])

    @patch('financas.bot.commands.fixed_costs.workflows')
    @patch('financas.bot.commands.fixed_costs.db')
    async def test_edit_fixed_cost_of_another_user(self, mock_db, mock_workflows):
        mock_db.get_fixed_cost.return_value = replace(self.fixed_cost, user_id="user-2")
        update = make_update()
        await edit_fixed_cost_command(update, make_context(["12", "valor", "135,90"]))
        mock_workflows.save_fixed_cost.assert_not_called()
        self.assertIn("não encontrado", update.message.reply_text.call_args[0][0])

    @patch('financas.bot.commands.fixed_costs.db')
    async def test_delete_fixed_cost(self, mock_db):
        mock_db.get_fixed_cost.return_value = self.fixed_cost
        mock_db.delete_fixed_cost.return_value = True
        update = make_update()

        await delete_fixed_cost_command(update, make_context(["12"]))

        mock_db.delete_fixed_cost.assert_called_once_with(ANY, 12)
        self.assertIn("removido", update.message.reply_text.call_args[0][0])

    @patch('financas.bot.commands.fixed_costs.db')
    async def test_delete_fixed_cost_without_id(self, mock_db):
        update = make_update()
        await delete_fixed_cost_command(update, make_context([]))
        mock_db.delete_fixed_cost.assert_not_called()
        update.message.reply_text.assert_awaited_once()


class TestConfigurePeriodCommand(unittest.IsolatedAsyncioTestCase):

    @patch('financas.bot.commands.periods.workflows')
    async def test_saves_period(self, mock_workflows):
        mock_workflows.upsert_period.return_value = True
        update = make_update()
        await configure_period_command(update, make_context(["03/2025", "26/02/2025", "25/03/2025"]))

        period = mock_workflows.upsert_period.call_args[0][2]
        self.assertEqual((period.reference_month, period.reference_year), (3, 2025))
        self.assertEqual(period.start_date, datetime.date(2025, 2, 26))
        self.assertIn("salvo", update.message.reply_text.call_args[0][0])

    @patch('financas.bot.commands.periods.workflows')
    async def test_reports_invalid_period(self, mock_workflows):
        mock_workflows.upsert_period.side_effect = InvalidPeriodError("o fim precisa ser depois do início")
        update = make_update()
        await configure_period_command(update, make_context(["03/2025", "25/03/2025", "26/02/2025"]))
        self.assertIn("Período inválido", update.message.reply_text.call_args[0][0])


class TestPaymentConversation(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.fixed_cost = FixedCost(title="Internet", amount=120.0, due_day=10, id=1)
        self.context = make_context()
        self.context.user_data["pending_payment"] = {
            "fixed_cost": self.fixed_cost,
            "amount": 120.0,
            "competence": datetime.date(2025, 1, 1),
        }

    async def test_payment_method_asks_confirmation(self):
        update = make_update("pix")
        state = await handle_payment_method(update, self.context)
        self.assertEqual(state, ASKING_CONFIRMATION)
        self.assertEqual(self.context.user_data["pending_payment"]["payment_method"], PaymentMethod.PIX)

    @patch('financas.core.workflows.pay_fixed_cost')
    async def test_confirmation_registers_payment(self, mock_pay_fixed_cost):
        self.context.user_data["pending_payment"]["payment_method"] = PaymentMethod.PIX
        tx = Transaction(amount=120.0, date=datetime.date(2025, 2, 15), payment_method=PaymentMethod.PIX)
        mock_pay_fixed_cost.return_value = PaymentResult(tx, datetime.date(2025, 1, 1))

        state = await handle_confirmation(make_update("Sim ✅"), self.context)

        self.assertEqual(state, ConversationHandler.END)
        payment = mock_pay_fixed_cost.call_args[0][3]
        self.assertEqual(payment.competence, datetime.date(2025, 1, 1))
        self.assertEqual(payment.payment_method, PaymentMethod.PIX)
        self.assertNotIn("pending_payment", self.context.user_data)

    @patch('financas.core.workflows.pay_fixed_cost')
    async def test_confirmation_unknown_answer_asks_again(self, mock_pay_fixed_cost):
        self.context.user_data["pending_payment"]["payment_method"] = PaymentMethod.PIX
        state = await handle_confirmation(make_update("talvez"), self.context)
        self.assertEqual(state, ASKING_CONFIRMATION)
        mock_pay_fixed_cost.assert_not_called()


if __name__ == '__main__':
    unittest.main()
