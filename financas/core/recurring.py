# financas/core/recurring.py
"""
Custos fixos: geração das despesas pendentes, casamento do pagamento com a
pendência do mês e status (pago/atrasado/vence em breve/pendente).

Tudo aqui é cálculo puro; quem lê e grava no Supabase é workflows.py.
"""
import datetime
import logging
from typing import Iterable, List, Optional, Set

from financas.core.models import (
    SINGLE_INSTALLMENT,
    FixedCost,
    FixedCostStatus,
    Occurrence,
    PaymentRecord,
    PaymentResult,
    Transaction,
    TransactionStatus,
)
from financas.utils.date_utils import (
    first_day_of_month,
    month_key,
    normalize_month_key,
    parse_competence,
    safe_date,
    same_month,
    shift_month,
)
from financas.utils.text_utils import starts_with_ignore_case

logger = logging.getLogger(__name__)

DEFAULT_HORIZON_MONTHS = 24
UPCOMING_DAYS = 3


def charge_month(transaction: Transaction) -> str:
    """Mês que o lançamento cobre: a competência, quando gravada, senão o mês da data."""
    return month_key(transaction.competence or transaction.date)


def existing_charge_months(transactions: Iterable[Transaction], fixed_cost_id) -> Set[str]:
    """Chaves "MM/AAAA" já cobertas por lançamentos (pendentes ou pagos) do custo fixo."""
    return {
        charge_month(t)
        for t in transactions
        if fixed_cost_id is not None and t.recurring_source_id == fixed_cost_id
    }


def occurrence_description(fixed_cost: FixedCost, sequence_number: int) -> str:
    if fixed_cost.total_cycles:
        return f"{fixed_cost.title} ({sequence_number}/{fixed_cost.total_cycles})"
    return fixed_cost.title


def plan_occurrences(fixed_cost: FixedCost, existing_charge_months: Iterable[str],
                     horizon_months: int = DEFAULT_HORIZON_MONTHS,
                     today: Optional[datetime.date] = None) -> List[Occurrence]:
    """
    Próximas cobranças a gerar, a partir do mês atual e por `horizon_months` meses.

    Meses já cobertos são pulados e, com limite de parcelas (`total_cycles`),
    a geração para assim que o total é atingido. Chamar de novo com os meses
    recém-gerados devolve lista vazia.
    """
    covered = {normalize_month_key(key) for key in existing_charge_months}
    current_count = len(covered)
    cap = fixed_cost.total_cycles

    if cap is not None and current_count >= cap:
        logger.info(
            "Custo fixo '%s' já tem %d de %d cobranças; nada a gerar",
            fixed_cost.title, current_count, cap,
        )
        return []

    start = first_day_of_month(today or datetime.date.today())
    occurrences: List[Occurrence] = []

    for i in range(horizon_months):
        if cap is not None and current_count + len(occurrences) >= cap:
            break

        year, month = shift_month(start.year, start.month, i)
        due_date = safe_date(year, month, fixed_cost.due_day)
        if month_key(due_date) in covered:
            continue

        sequence_number = current_count + len(occurrences) + 1
        occurrences.append(Occurrence(
            due_date=due_date,
            sequence_number=sequence_number,
            description=occurrence_description(fixed_cost, sequence_number),
        ))

    return occurrences


def build_pending_transactions(fixed_cost: FixedCost, occurrences: Iterable[Occurrence],
                               user_id: Optional[str] = None) -> List[Transaction]:
    """Payloads das despesas pendentes a inserir, um por ocorrência."""
    pending = []
    for occurrence in occurrences:
        if fixed_cost.total_cycles:
            installment_label = f"{occurrence.sequence_number}/{fixed_cost.total_cycles}"
        else:
            installment_label = SINGLE_INSTALLMENT
        pending.append(Transaction(
            amount=fixed_cost.amount,
            date=occurrence.due_date,
            payment_method=fixed_cost.payment_method,
            category=fixed_cost.category,
            responsible=fixed_cost.responsible,
            description=occurrence.description,
            installment_label=installment_label,
            status=TransactionStatus.PENDING,
            recurring_source_id=fixed_cost.id,
            competence=first_day_of_month(occurrence.due_date),
            user_id=user_id or fixed_cost.user_id,
        ))
    return pending


def resolve_pending_for_payment(fixed_cost: FixedCost, reference_month_key: str,
                                candidate_pending_entries: Iterable[Transaction]) -> Optional[Transaction]:
    """
    Encontra a despesa pendente que o pagamento de `reference_month_key` quita.

    1. lançamento com `recurring_source_id` do custo e do mesmo mês;
    2. pendência antiga, sem referência ao custo, do mesmo mês e cuja descrição
       começa com o título do custo (sem diferenciar maiúsculas).

    A segunda regra é frágil (dois custos com títulos parecidos se confundem),
    mas é o que limpa as pendências criadas antes da coluna fixed_cost_id.
    """
    key = normalize_month_key(reference_month_key)
    candidates = [t for t in candidate_pending_entries if t.is_pending]

    if fixed_cost.id is not None:
        for entry in candidates:
            if entry.recurring_source_id == fixed_cost.id and charge_month(entry) == key:
                return entry

    for entry in candidates:
        if (entry.recurring_source_id is None
                and month_key(entry.date) == key
                and starts_with_ignore_case(entry.description, fixed_cost.title)):
            return entry

    return None


def register_payment(fixed_cost: FixedCost, payment: PaymentRecord,
                     matched_entry: Optional[Transaction] = None,
                     user_id: Optional[str] = None) -> PaymentResult:
    """
    Monta o lançamento do pagamento e a competência a gravar no custo fixo.

    A competência é o mês quitado, independente da data em que se pagou
    (pagamento adiantado ou atrasado).
    """
    competence = parse_competence(payment.competence)

    if matched_entry is not None:
        description = matched_entry.description
        installment_label = matched_entry.installment_label
    else:
        description = f"{fixed_cost.title} (Custo Fixo)"
        installment_label = SINGLE_INSTALLMENT

    new_transaction = Transaction(
        amount=payment.amount,
        date=payment.date,
        payment_method=payment.payment_method,
        category=fixed_cost.category,
        responsible=payment.responsible or fixed_cost.responsible,
        description=description,
        installment_label=installment_label,
        status=TransactionStatus.NORMAL,
        recurring_source_id=fixed_cost.id,
        competence=competence,
        user_id=user_id or fixed_cost.user_id,
    )
    return PaymentResult(new_transaction=new_transaction, competence_to_record=competence)


def get_status(fixed_cost: FixedCost, today: Optional[datetime.date] = None) -> FixedCostStatus:
    today = today or datetime.date.today()

    if fixed_cost.last_paid_competence and same_month(fixed_cost.last_paid_competence, today):
        return FixedCostStatus.PAID

    if today.day > fixed_cost.due_day:
        return FixedCostStatus.OVERDUE

    if fixed_cost.due_day - today.day <= UPCOMING_DAYS:
        return FixedCostStatus.UPCOMING

    return FixedCostStatus.PENDING
