import logging

from telegram import Update
from telegram.ext import ContextTypes

from financas.bot.commands.utils import get_user_id, parse_reference_month, parse_year
from financas.core import db, workflows
from financas.core.models import InvalidPeriodError, PeriodDefinition
from financas.core.periods import default_periods, resolve_active_period, resolve_period_for_month
from financas.utils.date_utils import format_br_date, month_label, parse_date, parse_month_key

logger = logging.getLogger(__name__)


async def period_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/periodo [MM/AAAA]: período da fatura do mês, ou o período ativo hoje."""
    supabase_client = context.bot_data["supabase_client"]
    periods = db.get_periods(supabase_client, get_user_id(context))

    if not context.args:
        active = resolve_active_period(periods)
        await update.message.reply_text(
            f"📅 Período ativo: *{month_label(active.reference_month, active.reference_year)}*\n"
            f"De {format_br_date(active.start_date)} a {format_br_date(active.end_date)}",
            parse_mode="Markdown",
        )
        return

    try:
        month, year = parse_reference_month(context.args)
    except ValueError:
        await update.message.reply_text("Use: `/periodo MM/AAAA` (ex: `/periodo 03/2025`)", parse_mode="Markdown")
        return

    rng = resolve_period_for_month(periods, month, year)
    await update.message.reply_text(
        f"📅 Fatura de *{month_label(month, year)}*: "
        f"{format_br_date(rng.start_date)} a {format_br_date(rng.end_date)}",
        parse_mode="Markdown",
    )


async def list_periods_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/periodos [AAAA]: períodos do cartão configurados no ano."""
    supabase_client = context.bot_data["supabase_client"]
    try:
        year = parse_year(context.args)
    except ValueError:
        await update.message.reply_text("Use: `/periodos AAAA` (ex: `/periodos 2025`)", parse_mode="Markdown")
        return

    periods = db.get_periods(supabase_client, get_user_id(context), year)
    header = f"🗓️ *Períodos do cartão em {year}:*"
    if not periods:
        periods = default_periods(year)
        header += "\n_(nenhum configurado, usando os meses civis)_"

    lines = [header]
    for period in sorted(periods, key=lambda p: p.reference_month):
        rng = period.bounds()
        lines.append(f"- {period.label}: {format_br_date(rng.start_date)} a {format_br_date(rng.end_date)}")
    await update.message.reply_text("\n".join(lines), parse_mode="Markdown")


async def configure_period_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/configurar_periodo MM/AAAA dd/mm/aaaa dd/mm/aaaa"""
    usage = "Use: `/configurar_periodo MM/AAAA dd/mm/aaaa dd/mm/aaaa` (ex: `/configurar_periodo 03/2025 26/02/2025 25/03/2025`)"
    if len(context.args) != 3:
        await update.message.reply_text(usage, parse_mode="Markdown")
        return

    try:
        month, year = parse_month_key(context.args[0])
        start_date = parse_date(context.args[1])
        end_date = parse_date(context.args[2])
    except ValueError:
        await update.message.reply_text(usage, parse_mode="Markdown")
        return

    supabase_client = context.bot_data["supabase_client"]
    period = PeriodDefinition(month, year, start_date, end_date)
    try:
        saved = workflows.upsert_period(supabase_client, get_user_id(context), period)
    except InvalidPeriodError as e:
        await update.message.reply_text(f"⚠️ Período inválido: {e}")
        return

    if saved:
        await update.message.reply_text(
            f"✅ Período de *{month_label(month, year)}* salvo: "
            f"{format_br_date(start_date)} a {format_br_date(end_date)}",
            parse_mode="Markdown",
        )
    else:
        await update.message.reply_text("❌ Não foi possível salvar o período. Tente novamente mais tarde.")
