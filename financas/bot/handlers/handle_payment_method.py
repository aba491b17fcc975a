from telegram import ReplyKeyboardMarkup, Update
from telegram.ext import ContextTypes

from financas.bot.handlers.aux import send_payment_summary
from financas.bot.handlers.handle_competence import PAYMENT_METHOD_KEYBOARD
from financas.bot.handlers.states import ASKING_CONFIRMATION, ASKING_PAYMENT_METHOD
from financas.core.models import PaymentMethod


async def handle_payment_method(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Lida com a forma de pagamento informada e pede a confirmação."""
    try:
        payment_method = PaymentMethod.from_text(update.message.text)
    except ValueError:
        await update.message.reply_text(
            "Forma de pagamento desconhecida. Escolha uma das opções do teclado.",
            reply_markup=ReplyKeyboardMarkup(PAYMENT_METHOD_KEYBOARD, one_time_keyboard=True, resize_keyboard=True),
        )
        return ASKING_PAYMENT_METHOD

    context.user_data["pending_payment"]["payment_method"] = payment_method
    await send_payment_summary(update, context, context.user_data["pending_payment"])
    return ASKING_CONFIRMATION
