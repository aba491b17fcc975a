from telegram import ReplyKeyboardMarkup, Update
from telegram.ext import ContextTypes

from financas.bot.handlers.states import ASKING_COMPETENCE, ASKING_PAYMENT_METHOD
from financas.core.models import PaymentMethod
from financas.utils.date_utils import parse_competence

PAYMENT_METHOD_KEYBOARD = [
    [PaymentMethod.PIX.value, PaymentMethod.DEBIT.value],
    [PaymentMethod.CREDIT.value, PaymentMethod.CASH.value],
]


async def handle_competence(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    try:
        competence = parse_competence(update.message.text)
    except ValueError:
        await update.message.reply_text("Mês inválido. 😕 Use `MM/AAAA`, ex: `03/2025`.", parse_mode="Markdown")
        return ASKING_COMPETENCE

    context.user_data["pending_payment"]["competence"] = competence

    fixed_cost = context.user_data["pending_payment"]["fixed_cost"]
    await update.message.reply_text(
        f"💳 Como foi pago? (cadastrado: {fixed_cost.payment_method.value})",
        reply_markup=ReplyKeyboardMarkup(PAYMENT_METHOD_KEYBOARD, one_time_keyboard=True, resize_keyboard=True),
    )
    return ASKING_PAYMENT_METHOD
