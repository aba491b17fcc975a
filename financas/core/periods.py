# financas/core/periods.py
"""
Resolução dos períodos de faturamento do cartão.

Cada mês de referência pode ter um período próprio (ex: 26/02 a 25/03 para a
fatura de março). Só o crédito segue esse período; débito, pix e dinheiro
seguem o mês civil da data do lançamento.
"""
import datetime
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from financas.core.models import (
    ActivePeriod,
    InvalidPeriodError,
    PeriodDefinition,
    PeriodRange,
    Transaction,
)
from financas.utils.date_utils import month_bounds, month_label, parse_date

logger = logging.getLogger(__name__)


def _ordered(periods: Iterable[PeriodDefinition]) -> List[PeriodDefinition]:
    return sorted(periods, key=lambda p: (p.reference_year, p.reference_month))


def find_definition(periods: Iterable[PeriodDefinition], reference_month: int,
                    reference_year: int) -> Optional[PeriodDefinition]:
    for period in periods:
        if period.reference_month == reference_month and period.reference_year == reference_year:
            return period
    return None


def resolve_period_for_month(periods: Iterable[PeriodDefinition], reference_month: int,
                             reference_year: int) -> PeriodRange:
    """
    Datas de início/fim do período do mês de referência.
    Sem configuração para o mês, devolve o mês civil completo.
    """
    definition = find_definition(periods, reference_month, reference_year)
    if definition is None:
        start, end = month_bounds(reference_year, reference_month)
        return PeriodRange(start, end)
    return definition.bounds()


def resolve_active_period(periods: Iterable[PeriodDefinition],
                          today: Optional[datetime.date] = None) -> ActivePeriod:
    """
    Período que contém `today`. Se houver sobreposição (não deveria), vence o
    primeiro em ordem crescente de mês de referência. Sem nenhum período
    contendo a data, usa o mês civil de `today`.
    """
    today = parse_date(today) if today is not None else datetime.date.today()
    periods = list(periods)

    for period in _ordered(periods):
        rng = period.bounds()
        if rng.contains(today):
            return ActivePeriod(rng.start_date, rng.end_date, period.reference_month, period.reference_year)

    logger.debug("Nenhum período contém %s; usando o mês civil", today)
    rng = resolve_period_for_month(periods, today.month, today.year)
    return ActivePeriod(rng.start_date, rng.end_date, today.month, today.year)


def classify_transaction(periods: Iterable[PeriodDefinition],
                         transaction: Transaction) -> Tuple[int, int]:
    """Mês/ano de referência (mes, ano) ao qual o lançamento pertence."""
    tx_date = parse_date(transaction.date)
    if transaction.payment_method.is_credit:
        for period in _ordered(periods):
            if period.bounds().contains(tx_date):
                return period.reference_month, period.reference_year
    return tx_date.month, tx_date.year


def filter_transactions_for_month(periods: Sequence[PeriodDefinition],
                                  transactions: Iterable[Transaction],
                                  reference_month: int, reference_year: int) -> List[Transaction]:
    """
    Lançamentos do mês de referência: crédito pela janela do cartão desse mês
    (a mesma que /periodo mostra), o resto pelo mês civil.
    """
    window = resolve_period_for_month(periods, reference_month, reference_year)
    selected = []
    for t in transactions:
        tx_date = parse_date(t.date)
        if t.payment_method.is_credit:
            if window.contains(tx_date):
                selected.append(t)
        elif (tx_date.month, tx_date.year) == (reference_month, reference_year):
            selected.append(t)
    return selected


def default_periods(year: int) -> List[PeriodDefinition]:
    """Os 12 meses civis do ano, usados quando o usuário ainda não configurou nada."""
    periods = []
    for month in range(1, 13):
        start, end = month_bounds(year, month)
        periods.append(PeriodDefinition(month, year, start, end, month_label(month, year)))
    return periods


def validate_periods(periods: Iterable[PeriodDefinition]) -> None:
    seen = set()
    for period in periods:
        if not 1 <= period.reference_month <= 12:
            raise InvalidPeriodError(f"Mês de referência inválido: {period.reference_month}")

        key = (period.reference_month, period.reference_year)
        if key in seen:
            raise InvalidPeriodError(f"Período duplicado para {month_label(*key)}")
        seen.add(key)

        rng = period.bounds()
        if rng.end_date <= rng.start_date:
            raise InvalidPeriodError(
                f"{month_label(*key)}: o fim ({rng.end_date:%d/%m/%Y}) precisa ser depois "
                f"do início ({rng.start_date:%d/%m/%Y})"
            )
