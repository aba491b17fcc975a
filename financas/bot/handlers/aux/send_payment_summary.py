from typing import Any, Dict

from telegram import ReplyKeyboardMarkup, Update
from telegram.ext import ContextTypes

from financas.utils.date_utils import month_label
from financas.utils.text_utils import format_currency


async def send_payment_summary(update: Update, context: ContextTypes.DEFAULT_TYPE, payment_info: Dict[str, Any]) -> None:
    """Envia o resumo do pagamento para o usuário confirmar."""
    fixed_cost = payment_info["fixed_cost"]
    competence = payment_info["competence"]

    message_text = (
        f"Confirma o *pagamento*? 🧾\n"
        f"📌 Conta: *{fixed_cost.title}*\n"
        f"💰 Valor: *{format_currency(payment_info['amount'])}*\n"
        f"📅 Mês quitado: *{month_label(competence.month, competence.year)}*\n"
        f"💳 Pagamento: *{payment_info['payment_method'].value}*"
    )

    keyboard = [["Sim ✅", "Não ❌"]]
    reply_markup = ReplyKeyboardMarkup(keyboard, one_time_keyboard=True, resize_keyboard=True)
    await update.message.reply_text(f"{message_text}\n\n*Tudo certo?* 🤔", reply_markup=reply_markup, parse_mode="Markdown")
