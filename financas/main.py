# financas/main.py
import asyncio
import logging

from flask import Flask, jsonify, request
from telegram import Update

from financas import config
from financas.bot.bot_setup import setup_and_run_bot
from financas.core.db import get_supabase_client
from financas.core.logging import setup_logging

setup_logging(config.LOG_LEVEL)
logger = logging.getLogger(__name__)

WEBHOOK_PATH = "/webhook"


def create_app(ptb_application) -> Flask:
    """App Flask que repassa as atualizações do Telegram para o bot."""
    flask_app = Flask(__name__)

    @flask_app.route(WEBHOOK_PATH, methods=["POST"])
    async def telegram_webhook():
        if not request.is_json:
            logger.error("Webhook recebeu requisição sem JSON")
            return jsonify({"status": "error", "message": "Request must be JSON"}), 400

        update_json = request.get_json()
        try:
            update = Update.de_json(update_json, ptb_application.bot)
            await ptb_application.process_update(update)
            return jsonify({"status": "ok"}), 200
        except Exception:
            logger.exception("Falha ao processar atualização do Telegram")
            return jsonify({"status": "error", "message": "Failed to process update"}), 500

    return flask_app


# --- Setup no escopo global (executado uma vez quando o Gunicorn carrega o módulo) ---
try:
    bot_config = {
        "TELEGRAM_BOT_TOKEN": config.TELEGRAM_BOT_TOKEN,
        "SUPABASE_CLIENT": get_supabase_client(),
        "FINANCAS_USER_ID": config.FINANCAS_USER_ID,
    }
    ptb_application = setup_and_run_bot(bot_config)

    # A Application do python-telegram-bot precisa de initialize() antes do primeiro update
    asyncio.run(ptb_application.initialize())
    logger.info("Aplicação do bot inicializada")

    wsgi_app = create_app(ptb_application)
except Exception:
    logger.exception("Erro crítico durante a inicialização")
    raise
