from telegram import ReplyKeyboardRemove, Update
from telegram.ext import ContextTypes, ConversationHandler


async def cancel_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Encerra a conversa em andamento e descarta o que foi digitado."""
    context.user_data.pop("pending_payment", None)
    context.user_data.pop("fixed_costs", None)
    await update.message.reply_text("Operação cancelada. 👋", reply_markup=ReplyKeyboardRemove())
    return ConversationHandler.END
