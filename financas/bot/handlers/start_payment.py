from telegram import ReplyKeyboardMarkup, Update
from telegram.ext import ContextTypes, ConversationHandler

from financas.bot.commands.utils import get_user_id
from financas.bot.handlers.states import CHOOSING_FIXED_COST
from financas.core import db


async def start_payment(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Inicia o /pagar: mostra os custos fixos para o usuário escolher."""
    supabase_client = context.bot_data["supabase_client"]
    fixed_costs = db.get_fixed_costs(supabase_client, get_user_id(context))
    if not fixed_costs:
        await update.message.reply_text("Nenhum custo fixo cadastrado para pagar. 🤷")
        return ConversationHandler.END

    context.user_data["fixed_costs"] = {fc.title: fc for fc in fixed_costs}
    context.user_data["pending_payment"] = {}

    keyboard = [[fc.title] for fc in fixed_costs]
    reply_markup = ReplyKeyboardMarkup(keyboard, one_time_keyboard=True, resize_keyboard=True)
    await update.message.reply_text(
        "💳 Qual conta fixa você pagou? (use /cancel para desistir)",
        reply_markup=reply_markup,
    )
    return CHOOSING_FIXED_COST
