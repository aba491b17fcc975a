# financas/core/installments.py
import re
from dataclasses import replace
from typing import List

from financas.core.models import SINGLE_INSTALLMENT, Transaction
from financas.utils.date_utils import add_months

_INSTALLMENTS_RE = re.compile(r"(\d+)x?", re.IGNORECASE)


def parse_installment_count(label: str) -> int:
    """
    Número de parcelas a partir do texto digitado.
    "3x" -> 3, "12" -> 12, "A vista" / vazio -> 1.
    """
    if not label:
        return 1
    match = _INSTALLMENTS_RE.search(label)
    if not match:
        return 1
    return max(int(match.group(1)), 1)


def expand_installments(transaction: Transaction) -> List[Transaction]:
    """
    Quebra uma compra parcelada em um lançamento por mês.
    Cada parcela recebe valor total / N, a data avança um mês por parcela e o
    rótulo vira "i/N". Compras à vista voltam como estão.
    """
    count = parse_installment_count(transaction.installment_label)
    if count <= 1:
        single = replace(transaction)
        if not single.installment_label:
            single.installment_label = SINGLE_INSTALLMENT
        return [single]

    # Centavos que sobram da divisão vão para a última parcela (100 em 3x = 33,33 + 33,33 + 33,34)
    installment_amount = round(transaction.amount / count, 2)
    last_amount = round(transaction.amount - installment_amount * (count - 1), 2)
    return [
        replace(
            transaction,
            amount=last_amount if i == count - 1 else installment_amount,
            date=add_months(transaction.date, i),
            installment_label=f"{i + 1}/{count}",
            id=None,
        )
        for i in range(count)
    ]
