# financas/bot/commands/utils.py
import datetime
import io
from typing import List, Optional, Tuple

from telegram import Update
from telegram.ext import ContextTypes

from financas.config import DEFAULT_RESPONSIBLE
from financas.core import db, ledger
from financas.core.models import Transaction
from financas.core.periods import filter_transactions_for_month
from financas.utils.date_utils import parse_month_key


def get_user_id(context: ContextTypes.DEFAULT_TYPE) -> str:
    """Dono dos dados (um usuário por bot, definido em FINANCAS_USER_ID)."""
    return context.bot_data["user_id"]


def get_responsible(update: Update) -> str:
    user = update.effective_user
    return user.first_name if user and user.first_name else DEFAULT_RESPONSIBLE


def parse_reference_month(args: List[str], today: Optional[datetime.date] = None) -> Tuple[int, int]:
    """(mes, ano) do primeiro argumento ("MM/AAAA"); sem argumento, o mês de hoje."""
    if args:
        return parse_month_key(args[0])
    today = today or datetime.date.today()
    return today.month, today.year


def parse_year(args: List[str], today: Optional[datetime.date] = None) -> int:
    if args:
        return int(args[0])
    return (today or datetime.date.today()).year


def get_month_transactions(context: ContextTypes.DEFAULT_TYPE, month: int, year: int) -> List[Transaction]:
    """Lançamentos do mês de referência (crédito pelo período do cartão, o resto pelo mês civil)."""
    supabase_client = context.bot_data["supabase_client"]
    user_id = get_user_id(context)
    periods = db.get_periods(supabase_client, user_id)
    transactions = ledger.get_transactions(supabase_client, user_id)
    return filter_transactions_for_month(periods, transactions, month, year)


async def send_chart(update: Update, chart_buffer: Optional[io.BytesIO], filename: str,
                     caption: str, empty_message: str) -> None:
    if chart_buffer:
        chart_buffer.name = filename
        await update.message.reply_photo(photo=chart_buffer, caption=caption)
    else:
        await update.message.reply_text(empty_message)
