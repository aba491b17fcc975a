import datetime
import logging
import re
from dataclasses import replace
from typing import List, Optional

from telegram import Update
from telegram.ext import ContextTypes

from financas.bot.commands.utils import get_responsible, get_user_id
from financas.core import db, ledger, workflows
from financas.core.models import SINGLE_INSTALLMENT, PaymentMethod, Revenue, Transaction
from financas.utils.date_utils import format_br_date, parse_date
from financas.utils.text_utils import format_currency, normalize_name, parse_amount

logger = logging.getLogger(__name__)

INSTALLMENTS_PATTERN = re.compile(r"^\d+x?$", re.IGNORECASE)

EXPENSE_USAGE = (
    "Use: `/gasto valor forma categoria [parcelas] [descrição]`\n"
    "Ex: `/gasto 45,90 pix Mercado` ou `/gasto 1200 credito Eletronicos 10x Notebook`"
)
REVENUE_USAGE = "Use: `/receita valor categoria [descrição]` (ex: `/receita 5000 Salario Empresa X`)"
EDIT_TRANSACTION_USAGE = (
    "Use: `/editar_lancamento forma id campo valor`\n"
    "Campos: valor, forma, categoria, descricao, data (dd/mm/aaaa), responsavel. "
    "Ex: `/editar_lancamento credito 42 valor 59,90`"
)
DELETE_TRANSACTION_USAGE = "Use: `/remover_lancamento forma id` (ex: `/remover_lancamento pix 17`; ids em /pendentes)"


def _ensure_category(supabase_client, user_id: str, category: str) -> bool:
    """Cria a categoria se ela ainda não existir. Devolve True quando criou."""
    existing = [c.lower() for c in db.get_categories(supabase_client, user_id)]
    if category.lower() in existing:
        return False
    return db.add_category(supabase_client, user_id, category)


async def expense_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/gasto valor forma categoria [parcelas] [descrição]"""
    args = context.args or []
    if len(args) < 3:
        await update.message.reply_text(EXPENSE_USAGE, parse_mode="Markdown")
        return

    try:
        amount = parse_amount(args[0])
        payment_method = PaymentMethod.from_text(args[1])
    except ValueError as e:
        await update.message.reply_text(f"⚠️ {e}\n\n{EXPENSE_USAGE}", parse_mode="Markdown")
        return

    category = normalize_name(args[2])
    rest = args[3:]
    installment_label = SINGLE_INSTALLMENT
    if rest and INSTALLMENTS_PATTERN.match(rest[0]):
        installment_label = rest[0].lower()
        rest = rest[1:]
    description = " ".join(rest)

    supabase_client = context.bot_data["supabase_client"]
    user_id = get_user_id(context)

    if _ensure_category(supabase_client, user_id, category):
        await update.message.reply_text(f"✨ Categoria '{category}' criada.")

    transaction = Transaction(
        amount=amount,
        date=datetime.date.today(),
        payment_method=payment_method,
        category=category,
        responsible=get_responsible(update),
        description=description,
        installment_label=installment_label,
    )
    entries = workflows.save_expense(supabase_client, user_id, transaction)
    if not entries:
        await update.message.reply_text("❌ Não foi possível registrar o gasto. Tente novamente mais tarde.")
        return

    if len(entries) > 1:
        await update.message.reply_text(
            f"✅ Gasto de *{format_currency(amount)}* em *{category}* registrado em "
            f"{len(entries)} parcelas de {format_currency(entries[0].amount)} ({payment_method.value}).",
            parse_mode="Markdown",
        )
    else:
        await update.message.reply_text(
            f"✅ Gasto de *{format_currency(amount)}* em *{category}* registrado ({payment_method.value}).",
            parse_mode="Markdown",
        )


async def revenue_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/receita valor categoria [descrição]"""
    args = context.args or []
    if len(args) < 2:
        await update.message.reply_text(REVENUE_USAGE, parse_mode="Markdown")
        return

    try:
        amount = parse_amount(args[0])
    except ValueError as e:
        await update.message.reply_text(f"⚠️ {e}\n\n{REVENUE_USAGE}", parse_mode="Markdown")
        return

    supabase_client = context.bot_data["supabase_client"]
    revenue = Revenue(
        amount=amount,
        date=datetime.date.today(),
        category=normalize_name(args[1]),
        responsible=get_responsible(update),
        description=" ".join(args[2:]),
        user_id=get_user_id(context),
    )
    if db.add_revenue(supabase_client, revenue):
        await update.message.reply_text(
            f"💰 Receita de *{format_currency(amount)}* ({revenue.category}) registrada!",
            parse_mode="Markdown",
        )
    else:
        await update.message.reply_text("❌ Não foi possível registrar a receita. Tente novamente mais tarde.")


def apply_transaction_edit(transaction: Transaction, field: str, value: List[str]) -> Transaction:
    """Devolve uma cópia do lançamento com o campo alterado. ValueError para campo ou valor inválido."""
    text = " ".join(value).strip()
    if not text:
        raise ValueError("Informe o novo valor do campo")

    field = field.lower()
    if field == "valor":
        return replace(transaction, amount=parse_amount(text))
    if field == "forma":
        return replace(transaction, payment_method=PaymentMethod.from_text(text))
    if field == "categoria":
        return replace(transaction, category=normalize_name(text))
    if field == "descricao":
        return replace(transaction, description=text)
    if field == "data":
        return replace(transaction, date=parse_date(text))
    if field == "responsavel":
        return replace(transaction, responsible=normalize_name(text))
    raise ValueError(f"Campo desconhecido: '{field}'")


async def _find_transaction(update: Update, context: ContextTypes.DEFAULT_TYPE, args: List[str],
                            usage: str) -> Optional[Transaction]:
    """Lê `forma id` dos argumentos e busca o lançamento. Responde ao usuário quando não acha."""
    try:
        payment_method = PaymentMethod.from_text(args[0])
        transaction_id = int(args[1])
    except (IndexError, ValueError):
        await update.message.reply_text(usage, parse_mode="Markdown")
        return None

    transaction = ledger.get_transaction(
        context.bot_data["supabase_client"], get_user_id(context), payment_method, transaction_id
    )
    if transaction is None:
        await update.message.reply_text(f"Lançamento #{transaction_id} ({payment_method.value}) não encontrado.")
    return transaction


async def edit_transaction_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/editar_lancamento forma id campo valor"""
    args = context.args or []
    if len(args) < 4:
        await update.message.reply_text(EDIT_TRANSACTION_USAGE, parse_mode="Markdown")
        return

    transaction = await _find_transaction(update, context, args, EDIT_TRANSACTION_USAGE)
    if transaction is None:
        return

    try:
        edited = apply_transaction_edit(transaction, args[2], args[3:])
    except ValueError as e:
        await update.message.reply_text(f"⚠️ {e}\n\n{EDIT_TRANSACTION_USAGE}", parse_mode="Markdown")
        return

    if ledger.update_transaction(context.bot_data["supabase_client"], edited,
                                 previous_method=transaction.payment_method):
        await update.message.reply_text(
            f"✅ Lançamento atualizado: {format_br_date(edited.date)} {edited.category} "
            f"{format_currency(edited.amount)} ({edited.payment_method.value})."
        )
    else:
        await update.message.reply_text("❌ Não foi possível atualizar o lançamento. Tente novamente mais tarde.")


async def delete_transaction_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """/remover_lancamento forma id"""
    transaction = await _find_transaction(update, context, context.args or [], DELETE_TRANSACTION_USAGE)
    if transaction is None:
        return

    if ledger.delete_transaction(context.bot_data["supabase_client"], transaction):
        await update.message.reply_text(
            f"🗑️ Lançamento removido: {format_br_date(transaction.date)} {transaction.category} "
            f"{format_currency(transaction.amount)}."
        )
    else:
        await update.message.reply_text("❌ Não foi possível remover o lançamento. Tente novamente mais tarde.")
