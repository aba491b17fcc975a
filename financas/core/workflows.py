# financas/core/workflows.py
"""
Operações que combinam o Supabase com o núcleo (períodos e custos fixos).
Busca os dados, chama as funções puras e grava o resultado.
"""
import datetime
import logging
from dataclasses import replace
from typing import List, Optional

from supabase import Client

from financas.config import PENDING_HORIZON_MONTHS
from financas.core import db, ledger
from financas.core.installments import expand_installments
from financas.core.models import FixedCost, PaymentRecord, PaymentResult, PeriodDefinition, Transaction
from financas.core.periods import validate_periods
from financas.core.recurring import (
    build_pending_transactions,
    existing_charge_months,
    plan_occurrences,
    register_payment,
    resolve_pending_for_payment,
)
from financas.utils.date_utils import month_key, parse_competence

logger = logging.getLogger(__name__)


def generate_pending_charges(supabase_client: Client, user_id: str, fixed_cost: FixedCost,
                             today: Optional[datetime.date] = None,
                             horizon_months: int = PENDING_HORIZON_MONTHS,
                             force: bool = False) -> int:
    """
    Gera as despesas pendentes que faltam para o custo fixo.
    Devolve quantas foram inseridas (0 quando não havia nada a gerar ou o insert falhou).
    """
    if not fixed_cost.auto_generate and not force:
        logger.debug("Custo fixo '%s' sem geração automática", fixed_cost.title)
        return 0

    # Os meses já cobertos precisam ser lidos antes de planejar
    existing = ledger.get_transactions_for_fixed_cost(supabase_client, user_id, fixed_cost.id)
    covered = existing_charge_months(existing, fixed_cost.id)
    occurrences = plan_occurrences(fixed_cost, covered, horizon_months=horizon_months, today=today)
    if not occurrences:
        return 0

    pending = build_pending_transactions(fixed_cost, occurrences, user_id=user_id)
    if not ledger.insert_transactions(supabase_client, pending):
        return 0

    logger.info(
        "%d despesa(s) pendente(s) gerada(s) para '%s' (%s a %s)",
        len(pending), fixed_cost.title,
        month_key(occurrences[0].due_date), month_key(occurrences[-1].due_date),
    )
    return len(pending)


def generate_all_pending_charges(supabase_client: Client, user_id: str,
                                 today: Optional[datetime.date] = None) -> int:
    total = 0
    for fixed_cost in db.get_fixed_costs(supabase_client, user_id):
        total += generate_pending_charges(supabase_client, user_id, fixed_cost, today=today)
    return total


def save_fixed_cost(supabase_client: Client, user_id: str, fixed_cost: FixedCost,
                    today: Optional[datetime.date] = None) -> Optional[FixedCost]:
    """Cria ou atualiza o custo fixo e já gera as pendências dele."""
    fixed_cost = replace(fixed_cost, user_id=user_id)
    if fixed_cost.id is None:
        saved = db.add_fixed_cost(supabase_client, fixed_cost)
        if saved is None:
            return None
    else:
        if not db.update_fixed_cost(supabase_client, fixed_cost):
            return None
        saved = fixed_cost

    generate_pending_charges(supabase_client, user_id, saved, today=today)
    return saved


def pay_fixed_cost(supabase_client: Client, user_id: str, fixed_cost: FixedCost,
                   payment: PaymentRecord) -> Optional[PaymentResult]:
    """
    Registra o pagamento de um custo fixo.

    Ordem: insere o lançamento pago, só então apaga a pendência do mês e grava a
    competência. Se o insert falhar nada é alterado e a função devolve None.
    """
    competence_key = month_key(parse_competence(payment.competence))

    pending = ledger.get_pending_transactions(supabase_client, user_id)
    matched = resolve_pending_for_payment(fixed_cost, competence_key, pending)
    if matched is None:
        logger.info("Nenhuma pendência de '%s' para %s; usando descrição nova", fixed_cost.title, competence_key)

    result = register_payment(fixed_cost, payment, matched_entry=matched, user_id=user_id)

    if not ledger.insert_transactions(supabase_client, [result.new_transaction]):
        return None

    if matched is not None and not ledger.delete_transaction(supabase_client, matched):
        logger.error(
            "Pagamento de '%s' (%s) gravado, mas a pendência %s continua no banco",
            fixed_cost.title, competence_key, matched.id,
        )

    if not db.update_last_paid_competence(supabase_client, fixed_cost.id, result.competence_to_record):
        logger.error("Pagamento de '%s' gravado, mas a competência %s não foi salva", fixed_cost.title, competence_key)

    return result


def save_expense(supabase_client: Client, user_id: str, transaction: Transaction) -> List[Transaction]:
    """Grava uma despesa nova, quebrando em parcelas mensais quando for parcelada."""
    entries = expand_installments(replace(transaction, user_id=user_id))
    if not ledger.insert_transactions(supabase_client, entries):
        return []
    return entries


def replace_periods(supabase_client: Client, user_id: str, year: int,
                    periods: List[PeriodDefinition]) -> bool:
    """Valida e substitui a configuração de períodos do ano. InvalidPeriodError sobe para quem chamou."""
    periods = [p.normalized() for p in periods]
    validate_periods(periods)
    return db.replace_periods(supabase_client, user_id, year, periods)


def upsert_period(supabase_client: Client, user_id: str, period: PeriodDefinition) -> bool:
    """Troca (ou cria) o período de um mês, mantendo os demais meses do ano."""
    period = period.normalized()
    validate_periods([period])
    return db.replace_period_for_month(supabase_client, user_id, period)
