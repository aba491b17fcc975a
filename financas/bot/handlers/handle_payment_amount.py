import datetime

from telegram import ReplyKeyboardMarkup, Update
from telegram.ext import ContextTypes

from financas.bot.handlers.states import ASKING_AMOUNT, ASKING_COMPETENCE
from financas.utils.date_utils import add_months, month_key
from financas.utils.text_utils import parse_amount


async def handle_payment_amount(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Lê o valor pago e pergunta o mês (competência) que está sendo quitado."""
    try:
        amount = parse_amount(update.message.text)
    except ValueError:
        await update.message.reply_text("Valor inválido. 😕 Envie só o número, ex: `150,90`.", parse_mode="Markdown")
        return ASKING_AMOUNT

    context.user_data["pending_payment"]["amount"] = amount

    today = datetime.date.today()
    keyboard = [[month_key(today), month_key(add_months(today, -1)), month_key(add_months(today, 1))]]
    await update.message.reply_text(
        "📅 Qual mês este pagamento quita? (formato `MM/AAAA`)",
        reply_markup=ReplyKeyboardMarkup(keyboard, one_time_keyboard=True, resize_keyboard=True),
        parse_mode="Markdown",
    )
    return ASKING_COMPETENCE
