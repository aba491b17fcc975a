# financas/core/reports.py
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from financas.core.models import BudgetGoal, ExpenseSummary, Transaction

MONTH_ABBR = ["Jan", "Fev", "Mar", "Abr", "Mai", "Jun", "Jul", "Ago", "Set", "Out", "Nov", "Dez"]


def transactions_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """DataFrame com uma linha por lançamento (base dos relatórios e gráficos)."""
    records = [
        {
            "data": pd.Timestamp(t.date),
            "valor": t.amount,
            "categoria": t.category or "Sem categoria",
            "forma_pagamento": t.payment_method.value,
            "responsavel": t.responsible or "Não informado",
            "pendente": t.is_pending,
        }
        for t in transactions
    ]
    columns = ["data", "valor", "categoria", "forma_pagamento", "responsavel", "pendente"]
    df = pd.DataFrame(records, columns=columns)
    # Sem linhas o pandas não infere os tipos; o .dt dos relatórios precisa de datetime
    df["data"] = pd.to_datetime(df["data"])
    df["valor"] = df["valor"].astype(float)
    return df


def summarize_expenses(transactions: Iterable[Transaction],
                       pending: Iterable[Transaction] = ()) -> ExpenseSummary:
    """
    Totais do painel: total geral (inclui as pendências de custos fixos),
    total no crédito, total em débito/pix/dinheiro e total por responsável.
    """
    paid = [t for t in transactions if not t.is_pending]
    pending = list(pending)

    summary = ExpenseSummary()
    summary.pending_total = sum(t.amount for t in pending)
    summary.credit_total = sum(t.amount for t in paid if t.payment_method.is_credit)
    summary.other_total = sum(t.amount for t in paid if not t.payment_method.is_credit)
    summary.total = summary.credit_total + summary.other_total + summary.pending_total
    summary.count = len(paid) + len(pending)

    for t in paid:
        if not t.responsible:
            continue
        summary.by_responsible[t.responsible] = summary.by_responsible.get(t.responsible, 0.0) + t.amount
    return summary


def build_goal_rows(category: str, year: int, goal: float,
                    user_id: Optional[str] = None) -> List[BudgetGoal]:
    """A meta é a mesma para os 12 meses do ano."""
    return [BudgetGoal(category=category, month=month, year=year, goal=goal, user_id=user_id)
            for month in range(1, 13)]


def average_monthly_goal(goals: Iterable[BudgetGoal], category: str) -> float:
    return sum(g.goal for g in goals if g.category == category) / 12


def monthly_actuals(transactions: Iterable[Transaction], year: int,
                    categories: Optional[Iterable[str]] = None) -> pd.DataFrame:
    """
    Gasto por categoria (linhas) e mês civil (colunas 1..12) no ano.
    Categorias sem gasto aparecem zeradas quando informadas em `categories`.
    """
    df = transactions_frame(transactions)
    df = df[df["data"].dt.year == year]

    if df.empty:
        table = pd.DataFrame(columns=range(1, 13), dtype=float)
    else:
        df = df.assign(mes=df["data"].dt.month)
        table = df.pivot_table(index="categoria", columns="mes", values="valor", aggfunc="sum")
        table = table.reindex(columns=range(1, 13))

    if categories is not None:
        table = table.reindex(sorted(set(categories) | set(table.index)))
    return table.fillna(0.0).astype(float)


def budget_vs_actual(transactions: Iterable[Transaction], goals: Iterable[BudgetGoal],
                     year: int, categories: Optional[Iterable[str]] = None) -> pd.DataFrame:
    """Planejamento anual: meta mensal média e o realizado de cada mês, por categoria."""
    goals = list(goals)
    categories = set(categories or []) | {g.category for g in goals}
    actuals = monthly_actuals(transactions, year, categories)

    result = actuals.copy()
    result.columns = MONTH_ABBR
    result.insert(0, "meta", [average_monthly_goal(goals, cat) for cat in result.index])
    result["total"] = actuals.sum(axis=1)
    result["meta_anual"] = result["meta"] * 12
    result["saldo"] = result["meta_anual"] - result["total"]
    result.index.name = "categoria"
    return result


def month_budget_vs_actual(transactions: Iterable[Transaction], goals: Iterable[BudgetGoal],
                           month: int, year: int) -> List[Dict[str, Any]]:
    """
    Meta x realizado de um mês, por categoria, com o percentual consumido.
    `transactions` já deve estar filtrado para o mês de referência (o crédito
    segue o período do cartão, então a data sozinha não basta).
    """
    by_category: Dict[str, Dict[str, float]] = {}
    for goal in goals:
        if goal.month == month and goal.year == year:
            by_category.setdefault(goal.category, {"meta": 0.0, "realizado": 0.0})["meta"] = goal.goal

    for t in transactions:
        entry = by_category.setdefault(t.category or "Sem categoria", {"meta": 0.0, "realizado": 0.0})
        entry["realizado"] += t.amount

    rows = []
    for category, values in by_category.items():
        percentage = (values["realizado"] / values["meta"] * 100) if values["meta"] > 0 else 0.0
        rows.append({
            "categoria": category,
            "meta": values["meta"],
            "realizado": values["realizado"],
            "percentual": percentage,
        })
    return sorted(rows, key=lambda r: r["realizado"], reverse=True)
