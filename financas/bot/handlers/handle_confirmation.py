import datetime
import logging

from telegram import ReplyKeyboardMarkup, ReplyKeyboardRemove, Update
from telegram.ext import ContextTypes, ConversationHandler

from financas.bot.commands.utils import get_user_id
from financas.bot.handlers.states import ASKING_CONFIRMATION
from financas.config import DEFAULT_RESPONSIBLE
from financas.core import workflows
from financas.core.models import PaymentRecord
from financas.utils.date_utils import month_label
from financas.utils.text_utils import format_currency

logger = logging.getLogger(__name__)


async def handle_confirmation(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Lida com a confirmação (Sim/Não) do pagamento."""
    user_response = update.message.text.strip().lower()
    payment_info = context.user_data.get("pending_payment")

    if not payment_info or "payment_method" not in payment_info:
        await update.message.reply_text(
            "Ops! 😬 Não encontrei um pagamento para confirmar. Use /pagar de novo. 🔄",
            reply_markup=ReplyKeyboardRemove(),
        )
        return ConversationHandler.END

    if user_response in ("sim ✅", "sim"):
        fixed_cost = payment_info["fixed_cost"]
        payment = PaymentRecord(
            amount=payment_info["amount"],
            date=datetime.date.today(),
            competence=payment_info["competence"],
            payment_method=payment_info["payment_method"],
            responsible=fixed_cost.responsible or DEFAULT_RESPONSIBLE,
        )
        supabase_client = context.bot_data["supabase_client"]
        result = workflows.pay_fixed_cost(supabase_client, get_user_id(context), fixed_cost, payment)

        if result is None:
            await update.message.reply_text(
                "❌ Não foi possível registrar o pagamento. Nada foi alterado, tente novamente mais tarde.",
                reply_markup=ReplyKeyboardRemove(),
            )
        else:
            competence = result.competence_to_record
            await update.message.reply_text(
                f"✅ Pagamento de *{fixed_cost.title}* ({format_currency(payment.amount)}) "
                f"registrado para {month_label(competence.month, competence.year)}!",
                reply_markup=ReplyKeyboardRemove(),
                parse_mode="Markdown",
            )

        context.user_data.pop("pending_payment", None)
        context.user_data.pop("fixed_costs", None)
        return ConversationHandler.END

    elif user_response in ("não ❌", "não", "nao"):
        context.user_data.pop("pending_payment", None)
        context.user_data.pop("fixed_costs", None)
        await update.message.reply_text("Pagamento descartado. 👍", reply_markup=ReplyKeyboardRemove())
        return ConversationHandler.END

    else:
        keyboard = [["Sim ✅", "Não ❌"]]
        reply_markup = ReplyKeyboardMarkup(keyboard, one_time_keyboard=True, resize_keyboard=True)
        await update.message.reply_text("Por favor, responda apenas 'Sim ✅' ou 'Não ❌'.", reply_markup=reply_markup)
        return ASKING_CONFIRMATION
