from telegram import ReplyKeyboardMarkup, ReplyKeyboardRemove, Update
from telegram.ext import ContextTypes, ConversationHandler

from financas.bot.handlers.states import ASKING_AMOUNT, CHOOSING_FIXED_COST
from financas.utils.text_utils import format_currency


async def handle_fixed_cost_choice(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Lida com o custo fixo escolhido e pergunta o valor pago."""
    choice = update.message.text.strip().lower()
    fixed_costs = context.user_data.get("fixed_costs")

    if not fixed_costs:
        await update.message.reply_text(
            "Ops! 😬 Perdi a lista de contas. Use /pagar de novo. 🔄",
            reply_markup=ReplyKeyboardRemove(),
        )
        return ConversationHandler.END

    fixed_cost = next((fc for title, fc in fixed_costs.items() if title.lower() == choice), None)
    if fixed_cost is None:
        keyboard = [[title] for title in fixed_costs]
        await update.message.reply_text(
            "Não encontrei essa conta. Escolha uma das opções do teclado.",
            reply_markup=ReplyKeyboardMarkup(keyboard, one_time_keyboard=True, resize_keyboard=True),
        )
        return CHOOSING_FIXED_COST

    context.user_data["pending_payment"]["fixed_cost"] = fixed_cost

    # Valor cadastrado como sugestão, no formato que o parse_amount aceita
    suggested = f"{fixed_cost.amount:.2f}".replace(".", ",")
    await update.message.reply_text(
        f"💰 Quanto foi pago de *{fixed_cost.title}*? O valor cadastrado é {format_currency(fixed_cost.amount)}.",
        reply_markup=ReplyKeyboardMarkup([[suggested]], one_time_keyboard=True, resize_keyboard=True),
        parse_mode="Markdown",
    )
    return ASKING_AMOUNT
