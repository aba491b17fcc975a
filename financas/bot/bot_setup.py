# financas/bot/bot_setup.py
import logging

from telegram.ext import Application, CommandHandler, ConversationHandler, MessageHandler, filters

from financas.bot.commands import ALL_COMMANDS
from financas.bot.handlers import (
    ASKING_AMOUNT,
    ASKING_COMPETENCE,
    ASKING_CONFIRMATION,
    ASKING_PAYMENT_METHOD,
    CHOOSING_FIXED_COST,
    cancel_command,
    handle_competence,
    handle_confirmation,
    handle_fixed_cost_choice,
    handle_payment_amount,
    handle_payment_method,
    start_payment,
)

logger = logging.getLogger(__name__)


def build_payment_conversation() -> ConversationHandler:
    """Conversa do /pagar: conta fixa -> valor -> competência -> forma -> confirmação."""
    text_only = filters.TEXT & ~filters.COMMAND
    return ConversationHandler(
        entry_points=[CommandHandler("pagar", start_payment)],
        states={
            CHOOSING_FIXED_COST: [MessageHandler(text_only, handle_fixed_cost_choice)],
            ASKING_AMOUNT: [MessageHandler(text_only, handle_payment_amount)],
            ASKING_COMPETENCE: [MessageHandler(text_only, handle_competence)],
            ASKING_PAYMENT_METHOD: [MessageHandler(text_only, handle_payment_method)],
            ASKING_CONFIRMATION: [MessageHandler(text_only, handle_confirmation)],
        },
        # /cancel encerra qualquer conversa em andamento
        fallbacks=[CommandHandler("cancel", cancel_command)],
    )


def setup_and_run_bot(config: dict) -> Application:
    """
    Configura a aplicação do bot do Telegram (comandos e a conversa de pagamento).
    Retorna o objeto Application configurado, pronto para ser usado pelo servidor WSGI.
    """
    application = Application.builder().token(config["TELEGRAM_BOT_TOKEN"]).build()

    # Handlers e comandos acessam o cliente e o usuário pelo bot_data
    application.bot_data["supabase_client"] = config["SUPABASE_CLIENT"]
    application.bot_data["user_id"] = config["FINANCAS_USER_ID"]

    for name, callback in ALL_COMMANDS.items():
        application.add_handler(CommandHandler(name, callback))

    application.add_handler(build_payment_conversation())

    logger.info("Bot configurado para webhooks com %d comandos", len(ALL_COMMANDS) + 1)
    # Sem run_polling(): quem roda a aplicação é o servidor WSGI
    return application
