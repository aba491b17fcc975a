# financas/core/ledger.py
"""
Repositório dos lançamentos.

O banco guarda as despesas em duas tabelas: crédito em "Financeiro Cartão" e
débito/pix/dinheiro em "Financeiro Debito". Quem usa este módulo só enxerga
`Transaction`; a escolha da tabela fica aqui.
"""
import logging
from itertools import groupby
from typing import List, Optional

from supabase import Client

from financas.core.models import PaymentMethod, Transaction, TransactionStatus

logger = logging.getLogger(__name__)

CREDIT_TABLE = "Financeiro Cartão"
DEBIT_TABLE = "Financeiro Debito"
LEDGER_TABLES = (CREDIT_TABLE, DEBIT_TABLE)


def table_for(payment_method: PaymentMethod) -> str:
    return CREDIT_TABLE if payment_method.is_credit else DEBIT_TABLE


def _parse_rows(rows: list) -> List[Transaction]:
    transactions = []
    for row in rows:
        try:
            transactions.append(Transaction.from_row(row))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Lançamento %s ignorado (linha inválida): %s", row.get('id'), e)
    return transactions


def _select(supabase_client: Client, user_id: str, **filters) -> List[Transaction]:
    transactions: List[Transaction] = []
    for table in LEDGER_TABLES:
        query = supabase_client.table(table).select('*').eq('user_id', user_id)
        for column, value in filters.items():
            query = query.eq(column, value)
        response = query.execute()
        transactions.extend(_parse_rows(response.data))
    return transactions


def get_transactions(supabase_client: Client, user_id: str) -> List[Transaction]:
    """Todos os lançamentos do usuário (as duas tabelas), pendentes inclusive."""
    try:
        return _select(supabase_client, user_id)
    except Exception as e:
        logger.error("Erro ao obter lançamentos: %s", e)
        return []


def get_pending_transactions(supabase_client: Client, user_id: str) -> List[Transaction]:
    try:
        return _select(supabase_client, user_id, status=TransactionStatus.PENDING.value)
    except Exception as e:
        logger.error("Erro ao obter lançamentos pendentes: %s", e)
        return []


def get_transactions_for_fixed_cost(supabase_client: Client, user_id: str, fixed_cost_id: int) -> List[Transaction]:
    """Lançamentos (pendentes e pagos) gerados a partir de um custo fixo."""
    try:
        return _select(supabase_client, user_id, fixed_cost_id=fixed_cost_id)
    except Exception as e:
        logger.error("Erro ao obter lançamentos do custo fixo %s: %s", fixed_cost_id, e)
        return []


def get_transaction(supabase_client: Client, user_id: str, payment_method: PaymentMethod,
                    transaction_id: int) -> Optional[Transaction]:
    """Busca um lançamento pelo id. Os ids são por tabela, então a forma de pagamento escolhe onde procurar."""
    try:
        response = supabase_client.table(table_for(payment_method)).select('*').eq(
            'user_id', user_id
        ).eq('id', transaction_id).execute()
    except Exception as e:
        logger.error("Erro ao obter lançamento %s: %s", transaction_id, e)
        return None
    transactions = _parse_rows(response.data)
    return transactions[0] if transactions else None


def insert_transactions(supabase_client: Client, transactions: List[Transaction]) -> bool:
    """Insere um lote de lançamentos, um insert por tabela."""
    if not transactions:
        return True

    ordered = sorted(transactions, key=lambda t: table_for(t.payment_method))
    inserted_tables = []
    try:
        for table, group in groupby(ordered, key=lambda t: table_for(t.payment_method)):
            supabase_client.table(table).insert([t.to_row() for t in group]).execute()
            inserted_tables.append(table)
        return True
    except Exception as e:
        if inserted_tables:
            logger.error(
                "Inserção parcial de lançamentos: %s gravado(s), falha no restante: %s",
                ", ".join(inserted_tables), e,
            )
        else:
            logger.error("Erro ao inserir lançamentos: %s", e)
        return False


def update_transaction(supabase_client: Client, transaction: Transaction,
                       previous_method: Optional[PaymentMethod] = None) -> bool:
    """
    Atualiza um lançamento. Se a forma de pagamento mudou de tabela (ex: pix ->
    crédito), grava na tabela nova antes de apagar da antiga.
    """
    new_table = table_for(transaction.payment_method)
    old_table = table_for(previous_method) if previous_method is not None else new_table

    try:
        if old_table == new_table:
            supabase_client.table(new_table).update(transaction.to_row()).eq('id', transaction.id).execute()
            return True

        supabase_client.table(new_table).insert(transaction.to_row()).execute()
    except Exception as e:
        logger.error("Erro ao atualizar lançamento %s: %s", transaction.id, e)
        return False

    try:
        supabase_client.table(old_table).delete().eq('id', transaction.id).execute()
    except Exception as e:
        logger.error(
            "Lançamento %s copiado para '%s' mas não removido de '%s': %s",
            transaction.id, new_table, old_table, e,
        )
        return False
    return True


def delete_transaction(supabase_client: Client, transaction: Transaction) -> bool:
    try:
        supabase_client.table(table_for(transaction.payment_method)).delete().eq('id', transaction.id).execute()
        return True
    except Exception as e:
        logger.error("Erro ao excluir lançamento %s: %s", transaction.id, e)
        return False
