# financas/core/db.py
import datetime
import logging
from typing import Dict, List, Optional, Union

from supabase import create_client, Client

from financas.config import SUPABASE_URL, SUPABASE_KEY
from financas.core.models import BudgetGoal, FixedCost, PeriodDefinition, Revenue

logger = logging.getLogger(__name__)

PERIODS_TABLE = "periodos_mensais_cartao"
FIXED_COSTS_TABLE = "fixed_costs"
CATEGORIES_TABLE = "categorias"
CATEGORY_EMOJIS_TABLE = "categoria_emojis"
REVENUES_TABLE = "Financeiro Receita"
BUDGET_TABLE = "budget_planning"


def get_supabase_client() -> Client:
    """Retorna uma instância do cliente Supabase."""
    return create_client(SUPABASE_URL, SUPABASE_KEY)


# --- Períodos do cartão ---
def get_periods(supabase_client: Client, user_id: str, year: Union[int, None] = None) -> List[PeriodDefinition]:
    """
    Obtém os períodos do cartão do usuário, já normalizados para datas explícitas.
    Linhas antigas sem `ano_referencia` assumem `year` (ou o ano atual).
    """
    try:
        query = supabase_client.table(PERIODS_TABLE).select('*').eq('user_id', user_id)
        if year is not None:
            query = query.eq('ano_referencia', year)
        response = query.order('mes_referencia').execute()
    except Exception as e:
        logger.error("Erro ao obter períodos do cartão: %s", e)
        return []

    default_year = year or datetime.date.today().year
    periods = []
    for row in response.data:
        try:
            periods.append(PeriodDefinition.from_row(row, default_year=default_year))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Período ignorado (linha inválida %s): %s", row.get('id'), e)
    return periods


def replace_periods(supabase_client: Client, user_id: str, year: int, periods: List[PeriodDefinition]) -> bool:
    """Substitui todos os períodos do usuário no ano (apaga e insere de novo)."""
    try:
        supabase_client.table(PERIODS_TABLE).delete().eq('user_id', user_id).eq('ano_referencia', year).execute()
        rows = [p.to_row(user_id) for p in periods]
        if rows:
            supabase_client.table(PERIODS_TABLE).insert(rows).execute()
        return True
    except Exception as e:
        logger.error("Erro ao salvar períodos do cartão de %s: %s", year, e)
        return False


def replace_period_for_month(supabase_client: Client, user_id: str, period: PeriodDefinition) -> bool:
    """Substitui só o período de um mês de referência."""
    try:
        supabase_client.table(PERIODS_TABLE).delete().eq('user_id', user_id).eq(
            'ano_referencia', period.reference_year
        ).eq('mes_referencia', period.reference_month).execute()
        supabase_client.table(PERIODS_TABLE).insert(period.to_row(user_id)).execute()
        return True
    except Exception as e:
        logger.error("Erro ao salvar período de %02d/%s: %s", period.reference_month, period.reference_year, e)
        return False


# --- Custos fixos ---
def get_fixed_costs(supabase_client: Client, user_id: str) -> List[FixedCost]:
    """Obtém os custos fixos do usuário, ordenados pelo dia de vencimento."""
    try:
        response = supabase_client.table(FIXED_COSTS_TABLE).select('*').eq('user_id', user_id).order('due_day').execute()
    except Exception as e:
        logger.error("Erro ao obter custos fixos: %s", e)
        return []

    fixed_costs = []
    for row in response.data:
        try:
            fixed_costs.append(FixedCost.from_row(row))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Custo fixo ignorado (linha inválida %s): %s", row.get('id'), e)
    return fixed_costs


def get_fixed_cost(supabase_client: Client, fixed_cost_id: int) -> Optional[FixedCost]:
    try:
        response = supabase_client.table(FIXED_COSTS_TABLE).select('*').eq('id', fixed_cost_id).execute()
    except Exception as e:
        logger.error("Erro ao obter custo fixo %s: %s", fixed_cost_id, e)
        return None
    if not response.data:
        return None
    return FixedCost.from_row(response.data[0])


def add_fixed_cost(supabase_client: Client, fixed_cost: FixedCost) -> Optional[FixedCost]:
    """Insere um custo fixo e devolve o registro salvo (com id), ou None em caso de erro."""
    try:
        response = supabase_client.table(FIXED_COSTS_TABLE).insert(fixed_cost.to_row()).execute()
    except Exception as e:
        logger.error("Erro ao adicionar custo fixo '%s': %s", fixed_cost.title, e)
        return None
    if not response.data:
        return None
    return FixedCost.from_row(response.data[0])


def update_fixed_cost(supabase_client: Client, fixed_cost: FixedCost) -> bool:
    try:
        supabase_client.table(FIXED_COSTS_TABLE).update(fixed_cost.to_row()).eq('id', fixed_cost.id).execute()
        return True
    except Exception as e:
        logger.error("Erro ao atualizar custo fixo %s: %s", fixed_cost.id, e)
        return False


def delete_fixed_cost(supabase_client: Client, fixed_cost_id: int) -> bool:
    try:
        supabase_client.table(FIXED_COSTS_TABLE).delete().eq('id', fixed_cost_id).execute()
        return True
    except Exception as e:
        logger.error("Erro ao excluir custo fixo %s: %s", fixed_cost_id, e)
        return False


def update_last_paid_competence(supabase_client: Client, fixed_cost_id: int, competence: datetime.date) -> bool:
    """Grava o último mês quitado do custo fixo."""
    try:
        supabase_client.table(FIXED_COSTS_TABLE).update(
            {'last_paid_competence': competence.isoformat()}
        ).eq('id', fixed_cost_id).execute()
        return True
    except Exception as e:
        logger.error("Erro ao gravar competência do custo fixo %s: %s", fixed_cost_id, e)
        return False


# --- Categorias ---
def get_categories(supabase_client: Client, user_id: str) -> List[str]:
    """Obtém os nomes das categorias do usuário, em ordem alfabética."""
    try:
        response = supabase_client.table(CATEGORIES_TABLE).select('nome').eq('user_id', user_id).order('nome').execute()
        return [row['nome'] for row in response.data]
    except Exception as e:
        logger.error("Erro ao obter categorias: %s", e)
        return []


def add_category(supabase_client: Client, user_id: str, name: str) -> bool:
    """Adiciona uma categoria se ainda não existir (comparação sem diferenciar maiúsculas)."""
    existing = get_categories(supabase_client, user_id)
    if name.lower() in [c.lower() for c in existing]:
        logger.info("Categoria '%s' já existe", name)
        return False
    try:
        supabase_client.table(CATEGORIES_TABLE).insert({'user_id': user_id, 'nome': name}).execute()
        return True
    except Exception as e:
        logger.error("Erro ao adicionar categoria '%s': %s", name, e)
        return False


def get_category_emojis(supabase_client: Client, user_id: str) -> Dict[str, str]:
    """Mapa categoria -> emoji (só usado na exibição)."""
    try:
        response = supabase_client.table(CATEGORY_EMOJIS_TABLE).select('categoria,emoji').eq('user_id', user_id).execute()
        return {row['categoria']: row['emoji'] for row in response.data}
    except Exception as e:
        logger.error("Erro ao obter emojis das categorias: %s", e)
        return {}


# --- Receitas ---
def get_revenues(supabase_client: Client, user_id: str) -> List[Revenue]:
    try:
        response = supabase_client.table(REVENUES_TABLE).select('*').eq('user_id', user_id).order('created_at', desc=True).execute()
        return [Revenue.from_row(row) for row in response.data]
    except Exception as e:
        logger.error("Erro ao obter receitas: %s", e)
        return []


def add_revenue(supabase_client: Client, revenue: Revenue) -> bool:
    try:
        supabase_client.table(REVENUES_TABLE).insert(revenue.to_row()).execute()
        return True
    except Exception as e:
        logger.error("Erro ao adicionar receita: %s", e)
        return False


# --- Planejamento (metas por categoria) ---
def get_budget_goals(supabase_client: Client, user_id: str, year: int) -> List[BudgetGoal]:
    try:
        response = supabase_client.table(BUDGET_TABLE).select('*').eq('user_id', user_id).eq('ano', year).execute()
        return [BudgetGoal.from_row(row) for row in response.data]
    except Exception as e:
        logger.error("Erro ao obter metas de %s: %s", year, e)
        return []


def upsert_budget_goals(supabase_client: Client, goals: List[BudgetGoal]) -> bool:
    try:
        supabase_client.table(BUDGET_TABLE).upsert(
            [g.to_row() for g in goals], on_conflict='user_id,categoria,mes,ano'
        ).execute()
        return True
    except Exception as e:
        logger.error("Erro ao salvar metas: %s", e)
        return False
