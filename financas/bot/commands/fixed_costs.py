import re
from dataclasses import replace
from typing import List, Optional

from telegram import Update
from telegram.ext import ContextTypes

from financas.bot.commands.utils import get_responsible, get_user_id
from financas.core import db, ledger, workflows
from financas.core.models import FixedCost, FixedCostStatus, PaymentMethod
from financas.core.recurring import get_status
from financas.utils.date_utils import format_br_date
from financas.utils.text_utils import format_currency, normalize_name, parse_amount

STATUS_EMOJI = {
    FixedCostStatus.PAID: "✅",
    FixedCostStatus.OVERDUE: "🔴",
    FixedCostStatus.UPCOMING: "🟡",
    FixedCostStatus.PENDING: "⚪",
}

CYCLES_PATTERN = re.compile(r"^(\d+)x$", re.IGNORECASE)

NEW_FIXED_COST_USAGE = (
    "Use: `/novo_custo valor dia forma categoria [Nx] título`\n"
    "Ex: `/novo_custo 120 10 pix Casa Internet` ou `/novo_custo 300 31 credito Educacao 3x Curso de ingles`"
)
EDIT_FIXED_COST_USAGE = (
    "Use: `/editar_custo id campo valor`\n"
    "Campos: titulo, valor, dia, forma, categoria, parcelas (número ou 0 para sem limite), "
    "responsavel, auto (sim/nao). Ex: `/editar_custo 12 valor 135,90`"
)


def parse_due_day(text: str) -> int:
    day = int(text)
    if not 1 <= day <= 31:
        raise ValueError(f"Dia de vencimento deve estar entre 1 e 31: '{text}'")
    return day


def apply_fixed_cost_edit(fixed_cost: FixedCost, field: str, value: List[str]) -> FixedCost:
    """Devolve uma cópia do custo fixo com o campo alterado. ValueError para campo ou valor inválido."""
    text = " ".join(value).strip()
    if not text:
        raise ValueError("Informe o novo valor do campo")

    field = field.lower()
    if field == "titulo":
        return replace(fixed_cost, title=text)
    if field == "valor":
        return replace(fixed_cost, amount=parse_amount(text))
    if field == "dia":
        return replace(fixed_cost, due_day=parse_due_day(text))
    if field == "forma":
        return replace(fixed_cost, payment_method=PaymentMethod.from_text(text))
    if field == "categoria":
        return replace(fixed_cost, category=normalize_name(text))
    if field == "responsavel":
        return replace(fixed_cost, responsible=normalize_name(text))
    if field == "parcelas":
        cycles = int(text.lower().rstrip("x"))
        if cycles < 0:
            raise ValueError("Parcelas não pode ser negativo")
        return replace(fixed_cost, total_cycles=cycles or None)
    if field == "auto":
        if text.lower() not in ("sim", "nao", "não"):
            raise ValueError("Use sim ou nao para o campo auto")
        return replace(fixed_cost, auto_generate=text.lower() == "sim")
    raise ValueError(f"Campo desconhecido: '{field}'")


def _find_fixed_cost(context: ContextTypes.DEFAULT_TYPE, fixed_cost_id: int) -> Optional[FixedCost]:
    fixed_cost = db.get_fixed_cost(context.bot_data["supabase_client"], fixed_cost_id)
    # Só o dono enxerga o custo fixo
    if fixed_cost is None or (fixed_cost.user_id and fixed_cost.user_id != get_user_id(context)):
        return None
    return fixed_cost


async def fixed_costs_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Lista os custos fixos com a situação no mês atual."""
    supabase_client = context.bot_data["supabase_client"]
    fixed_costs = db.get_fixed_costs(supabase_client, get_user_id(context))
    if not fixed_costs:
        await update.message.reply_text("Nenhum custo fixo cadastrado ainda. Use /novo\\_custo. 🤷", parse_mode="Markdown")
        return

    lines = ["📋 *Custos fixos:*"]
    for fixed_cost in fixed_costs:
        status = get_status(fixed_cost)
        cycles = f" ({fixed_cost.total_cycles}x)" if fixed_cost.total_cycles else ""
        lines.append(
            f"{STATUS_EMOJI[status]} #{fixed_cost.id} {fixed_cost.title}{cycles}: {format_currency(fixed_cost.amount)} "
            f"- vence dia {fixed_cost.due_day} - {status.label}"
        )
    await update.message.reply_text("\n".join(lines), parse_mode="Markdown")


async def new_fixed_cost_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/novo_custo valor dia forma categoria [Nx] título"""
    args = context.args or []
    if len(args) < 5:
        await update.message.reply_text(NEW_FIXED_COST_USAGE, parse_mode="Markdown")
        return

    try:
        amount = parse_amount(args[0])
        due_day = parse_due_day(args[1])
        payment_method = PaymentMethod.from_text(args[2])
    except ValueError as e:
        await update.message.reply_text(f"⚠️ {e}\n\n{NEW_FIXED_COST_USAGE}", parse_mode="Markdown")
        return

    rest = args[4:]
    total_cycles = None
    match = CYCLES_PATTERN.match(rest[0])
    if match and len(rest) > 1:
        total_cycles = int(match.group(1)) or None
        rest = rest[1:]

    fixed_cost = FixedCost(
        title=" ".join(rest),
        amount=amount,
        due_day=due_day,
        category=normalize_name(args[3]),
        payment_method=payment_method,
        responsible=get_responsible(update),
        total_cycles=total_cycles,
    )
    saved = workflows.save_fixed_cost(context.bot_data["supabase_client"], get_user_id(context), fixed_cost)
    if saved is None:
        await update.message.reply_text("❌ Não foi possível salvar o custo fixo. Tente novamente mais tarde.")
        return

    await update.message.reply_text(
        f"✅ Custo fixo *{saved.title}* (#{saved.id}) salvo: {format_currency(saved.amount)} todo dia {saved.due_day}. "
        f"As despesas pendentes foram geradas.",
        parse_mode="Markdown",
    )


async def edit_fixed_cost_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/editar_custo id campo valor"""
    args = context.args or []
    if len(args) < 3:
        await update.message.reply_text(EDIT_FIXED_COST_USAGE, parse_mode="Markdown")
        return

    try:
        fixed_cost_id = int(args[0])
    except ValueError:
        await update.message.reply_text(EDIT_FIXED_COST_USAGE, parse_mode="Markdown")
        return

    fixed_cost = _find_fixed_cost(context, fixed_cost_id)
    if fixed_cost is None:
        await update.message.reply_text(f"Custo fixo #{fixed_cost_id} não encontrado. Veja os ids em /custos_fixos.")
        return

    try:
        edited = apply_fixed_cost_edit(fixed_cost, args[1], args[2:])
    except ValueError as e:
        await update.message.reply_text(f"⚠️ {e}\n\n{EDIT_FIXED_COST_USAGE}", parse_mode="Markdown")
        return

    saved = workflows.save_fixed_cost(context.bot_data["supabase_client"], get_user_id(context), edited)
    if saved is None:
        await update.message.reply_text("❌ Não foi possível atualizar o custo fixo. Tente novamente mais tarde.")
        return
    await update.message.reply_text(f"✅ Custo fixo *{saved.title}* (#{saved.id}) atualizado.", parse_mode="Markdown")


async def delete_fixed_cost_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/remover_custo id: apaga o custo fixo (as despesas já lançadas continuam no histórico)."""
    args = context.args or []
    try:
        fixed_cost_id = int(args[0])
    except (IndexError, ValueError):
        await update.message.reply_text("Use: `/remover_custo id` (veja os ids em /custos\\_fixos)", parse_mode="Markdown")
        return

    fixed_cost = _find_fixed_cost(context, fixed_cost_id)
    if fixed_cost is None:
        await update.message.reply_text(f"Custo fixo #{fixed_cost_id} não encontrado.")
        return

    if db.delete_fixed_cost(context.bot_data["supabase_client"], fixed_cost_id):
        await update.message.reply_text(f"🗑️ Custo fixo *{fixed_cost.title}* removido.", parse_mode="Markdown")
    else:
        await update.message.reply_text("❌ Não foi possível remover o custo fixo. Tente novamente mais tarde.")


async def generate_pending_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Gera as despesas pendentes que faltam para todos os custos fixos."""
    supabase_client = context.bot_data["supabase_client"]
    await update.message.reply_text("Gerando despesas pendentes, por favor aguarde...")
    total = workflows.generate_all_pending_charges(supabase_client, get_user_id(context))
    if total:
        await update.message.reply_text(f"✅ {total} despesa(s) pendente(s) gerada(s).")
    else:
        await update.message.reply_text("Tudo em dia! Nenhuma despesa pendente nova para gerar.")


async def pending_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    supabase_client = context.bot_data["supabase_client"]
    pending = ledger.get_pending_transactions(supabase_client, get_user_id(context))
    if not pending:
        await update.message.reply_text("Nenhuma despesa pendente. 🎉")
        return

    pending.sort(key=lambda t: t.date)
    lines = ["⏳ *Despesas pendentes:*"]
    for t in pending:
        lines.append(
            f"- #{t.id} ({t.payment_method.value}) {format_br_date(t.date)}: {t.description} - {format_currency(t.amount)}"
        )
    lines.append(f"\n*Total:* {format_currency(sum(t.amount for t in pending))}")
    await update.message.reply_text("\n".join(lines), parse_mode="Markdown")
