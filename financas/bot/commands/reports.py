import logging

from telegram import Update
from telegram.ext import ContextTypes

from financas.bot.commands.utils import (
    get_month_transactions,
    get_user_id,
    parse_reference_month,
    parse_year,
    send_chart,
)
from financas.core import charts, db, ledger
from financas.core.reports import (
    budget_vs_actual,
    build_goal_rows,
    month_budget_vs_actual,
    summarize_expenses,
)
from financas.utils.date_utils import month_label
from financas.utils.text_utils import format_currency, normalize_name, parse_amount

logger = logging.getLogger(__name__)

MONTH_USAGE = "Informe o mês como `MM/AAAA` (ex: `03/2025`)."


async def summary_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/resumo [MM/AAAA]: totais do mês de referência, por responsável e metas por categoria."""
    try:
        month, year = parse_reference_month(context.args or [])
    except ValueError:
        await update.message.reply_text(MONTH_USAGE, parse_mode="Markdown")
        return

    supabase_client = context.bot_data["supabase_client"]
    user_id = get_user_id(context)
    transactions = get_month_transactions(context, month, year)
    pending = [t for t in transactions if t.is_pending]
    summary = summarize_expenses(transactions, pending)

    if summary.count == 0:
        await update.message.reply_text(f"Nenhum lançamento em {month_label(month, year)}.")
        return

    lines = [
        f"📊 *Resumo de {month_label(month, year)}*",
        f"💸 Total: *{format_currency(summary.total)}* ({summary.count} lançamentos)",
        f"💳 Crédito: {format_currency(summary.credit_total)}",
        f"🏦 Débito/Pix/Dinheiro: {format_currency(summary.other_total)}",
        f"⏳ Pendente: {format_currency(summary.pending_total)}",
    ]

    if summary.by_responsible:
        lines.append("\n👥 *Por responsável:*")
        for name, total in sorted(summary.by_responsible.items(), key=lambda item: item[1], reverse=True):
            lines.append(f"- {name}: {format_currency(total)}")

    paid = [t for t in transactions if not t.is_pending]
    goals = db.get_budget_goals(supabase_client, user_id, year)
    rows = month_budget_vs_actual(paid, goals, month, year)
    if rows:
        emojis = db.get_category_emojis(supabase_client, user_id)
        lines.append("\n🏷️ *Por categoria:*")
        for row in rows:
            emoji = emojis.get(row["categoria"], "💸")
            line = f"{emoji} {row['categoria']}: {format_currency(row['realizado'])}"
            if row["meta"] > 0:
                line += f" de {format_currency(row['meta'])} ({row['percentual']:.0f}%)"
                if row["realizado"] > row["meta"]:
                    line += " ⚠️"
            lines.append(line)

    await update.message.reply_text("\n".join(lines), parse_mode="Markdown")


async def category_chart_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Gera e envia o gráfico de gastos por categoria do mês, com as metas."""
    try:
        month, year = parse_reference_month(context.args or [])
    except ValueError:
        await update.message.reply_text(MONTH_USAGE, parse_mode="Markdown")
        return

    supabase_client = context.bot_data["supabase_client"]
    await update.message.reply_text("Gerando o gráfico de categorias, por favor aguarde...")
    transactions = get_month_transactions(context, month, year)
    goals = [g for g in db.get_budget_goals(supabase_client, get_user_id(context), year) if g.month == month]
    chart_buffer = charts.generate_category_spending_chart(
        transactions, goals, title=f"Gastos por Categoria - {month_label(month, year)}"
    )
    await send_chart(
        update, chart_buffer, "gastos_categoria.png",
        f"Gastos por categoria em {month_label(month, year)}:",
        f"Nenhum gasto em {month_label(month, year)} para gerar o gráfico.",
    )


async def payment_method_chart_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    try:
        month, year = parse_reference_month(context.args or [])
    except ValueError:
        await update.message.reply_text(MONTH_USAGE, parse_mode="Markdown")
        return

    await update.message.reply_text("Gerando o gráfico por forma de pagamento, por favor aguarde...")
    transactions = get_month_transactions(context, month, year)
    chart_buffer = charts.generate_payment_method_chart(transactions)
    await send_chart(
        update, chart_buffer, "gastos_pagamento.png",
        f"Gastos por forma de pagamento em {month_label(month, year)}:",
        f"Nenhum gasto em {month_label(month, year)} para gerar o gráfico.",
    )


async def balance_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Gera e envia o gráfico de balanço."""
    supabase_client = context.bot_data["supabase_client"]
    user_id = get_user_id(context)
    await update.message.reply_text("Gerando seu balanço mensal, por favor aguarde...")
    expenses = [t for t in ledger.get_transactions(supabase_client, user_id) if not t.is_pending]
    revenues = db.get_revenues(supabase_client, user_id)
    chart_buffer = charts.generate_balance_chart(expenses, revenues)
    await send_chart(
        update, chart_buffer, "balanco_chart.png",
        "Aqui está seu balanço mensal:",
        "Ainda não tenho dados suficientes para gerar um balanço. Registre alguns gastos e receitas primeiro!",
    )


async def goals_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/metas [AAAA]: planejamento anual, meta vs. realizado por categoria."""
    try:
        year = parse_year(context.args or [])
    except ValueError:
        await update.message.reply_text("Use: `/metas AAAA` (ex: `/metas 2025`)", parse_mode="Markdown")
        return

    supabase_client = context.bot_data["supabase_client"]
    user_id = get_user_id(context)
    goals = db.get_budget_goals(supabase_client, user_id, year)
    if not goals:
        await update.message.reply_text(
            f"Nenhuma meta definida para {year}. Use `/definir_meta categoria valor {year}`.",
            parse_mode="Markdown",
        )
        return

    expenses = [t for t in ledger.get_transactions(supabase_client, user_id) if not t.is_pending]
    table = budget_vs_actual(expenses, goals, year, db.get_categories(supabase_client, user_id))

    lines = [f"🎯 *Planejamento {year}:*"]
    for category, row in table.iterrows():
        if row["meta"] == 0 and row["total"] == 0:
            continue
        lines.append(
            f"- {category}: {format_currency(row['total'])} de {format_currency(row['meta_anual'])} "
            f"(saldo {format_currency(row['saldo'])})"
        )
    await update.message.reply_text("\n".join(lines), parse_mode="Markdown")

    chart_buffer = charts.generate_budget_vs_actual_chart(table, year)
    if chart_buffer:
        chart_buffer.name = "planejamento.png"
        await update.message.reply_photo(photo=chart_buffer, caption=f"Meta vs. realizado em {year}")


async def set_goal_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/definir_meta categoria valor [AAAA]: a mesma meta para os 12 meses do ano."""
    usage = "Use: `/definir_meta categoria valor [AAAA]` (ex: `/definir_meta Mercado 1500 2025`)"
    args = context.args or []
    if len(args) < 2:
        await update.message.reply_text(usage, parse_mode="Markdown")
        return

    try:
        goal = parse_amount(args[1])
        year = parse_year(args[2:])
    except ValueError:
        await update.message.reply_text(usage, parse_mode="Markdown")
        return

    supabase_client = context.bot_data["supabase_client"]
    category = normalize_name(args[0])
    rows = build_goal_rows(category, year, goal, user_id=get_user_id(context))
    if db.upsert_budget_goals(supabase_client, rows):
        await update.message.reply_text(
            f"🎯 Meta de *{category}* em {year}: {format_currency(goal)} por mês.",
            parse_mode="Markdown",
        )
    else:
        await update.message.reply_text("❌ Não foi possível salvar a meta. Tente novamente mais tarde.")
