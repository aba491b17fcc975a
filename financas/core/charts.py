# financas/core/charts.py
import io
import datetime
from typing import Dict, Iterable, Union

import matplotlib
matplotlib.use('Agg')  # Servidor sem display
import matplotlib.pyplot as plt
import matplotlib.ticker as mticker
import pandas as pd

from financas.core.models import BudgetGoal, Revenue, Transaction
from financas.core.reports import transactions_frame

# Configurações globais para os gráficos (cores, fontes, etc.)
plt.style.use('seaborn-v0_8-darkgrid')
plt.rcParams['font.family'] = 'sans-serif'
plt.rcParams['font.size'] = 10
plt.rcParams['axes.labelsize'] = 12
plt.rcParams['axes.titlesize'] = 14
plt.rcParams['xtick.labelsize'] = 10
plt.rcParams['ytick.labelsize'] = 10
plt.rcParams['legend.fontsize'] = 10

COLORS = {
    'Receita': '#28a745',
    'Despesa': '#dc3545',
    'Saldo': '#007bff',
    'Meta': 'darkgreen',
    'Fatias_Variadas': ['#1f77b4', '#ff7f0e', '#2ca02c', '#d62728', '#9467bd', '#8c564b', '#e377c2', '#7f7f7f', '#bcbd22', '#17becf']
}

BRL_FORMATTER = mticker.FormatStrFormatter('R$%.2f')


def _to_png() -> io.BytesIO:
    plt.tight_layout()
    buf = io.BytesIO()
    plt.savefig(buf, format='png', dpi=150)
    buf.seek(0)
    plt.close('all')
    return buf


def filter_expenses_data(df: pd.DataFrame,
                         category: Union[str, None] = None,
                         payment_method: Union[str, None] = None,
                         start_date: Union[datetime.date, None] = None,
                         end_date: Union[datetime.date, None] = None) -> pd.DataFrame:
    """Filtra o DataFrame de lançamentos (colunas de reports.transactions_frame)."""
    if df.empty:
        return df

    if category:
        df = df[df['categoria'] == category]
    if payment_method:
        df = df[df['forma_pagamento'] == payment_method]
    if start_date:
        df = df[df['data'] >= pd.Timestamp(start_date)]
    if end_date:
        # Datas sem horário: comparar com o dia seguinte inclui o dia final inteiro
        df = df[df['data'] < pd.Timestamp(end_date) + pd.Timedelta(days=1)]
    return df


def generate_balance_chart(expenses: Iterable[Transaction], revenues: Iterable[Revenue],
                           start_date: Union[datetime.date, None] = None,
                           end_date: Union[datetime.date, None] = None) -> Union[io.BytesIO, None]:
    """Gráfico de balanço mensal: receitas vs. despesas e o saldo do mês."""
    df_expenses = filter_expenses_data(transactions_frame(expenses), start_date=start_date, end_date=end_date)
    df_revenues = pd.DataFrame(
        [{'data': pd.Timestamp(r.date), 'valor': r.amount} for r in revenues],
        columns=['data', 'valor'],
    )
    df_revenues['data'] = pd.to_datetime(df_revenues['data'])
    df_revenues = filter_expenses_data(df_revenues, start_date=start_date, end_date=end_date)

    if df_expenses.empty and df_revenues.empty:
        return None

    df_all = pd.concat([
        df_expenses[['data', 'valor']].assign(tipo='Despesa'),
        df_revenues[['data', 'valor']].assign(tipo='Receita'),
    ], ignore_index=True)
    df_all['mes_ano'] = df_all['data'].dt.to_period('M')

    monthly_summary = df_all.groupby(['mes_ano', 'tipo'])['valor'].sum().unstack(fill_value=0)
    monthly_summary = monthly_summary.reindex(columns=['Receita', 'Despesa'], fill_value=0)
    monthly_summary['Saldo'] = monthly_summary['Receita'] - monthly_summary['Despesa']
    monthly_summary = monthly_summary.sort_index()

    fig, ax = plt.subplots(figsize=(12, 7))
    monthly_summary[['Receita', 'Despesa', 'Saldo']].plot(
        kind='bar',
        ax=ax,
        color=[COLORS['Receita'], COLORS['Despesa'], COLORS['Saldo']]
    )

    ax.set_title('Balanço Mensal: Receitas vs. Despesas', fontsize=16, fontweight='bold')
    ax.set_ylabel('Valor (R$)')
    ax.set_xlabel('Mês/Ano')
    plt.xticks(rotation=45, ha='right')
    ax.legend(title='Tipo')
    ax.grid(axis='y', linestyle='--', alpha=0.7)

    for container in ax.containers:
        ax.bar_label(container, fmt='R$%.2f', fontsize=8, padding=3)
    ax.yaxis.set_major_formatter(BRL_FORMATTER)

    return _to_png()


def generate_category_spending_chart(expenses: Iterable[Transaction],
                                     goals: Iterable[BudgetGoal] = (),
                                     start_date: Union[datetime.date, None] = None,
                                     end_date: Union[datetime.date, None] = None,
                                     title: str = 'Gastos por Categoria vs. Meta') -> Union[io.BytesIO, None]:
    """Gastos por categoria, com a meta mensal de cada categoria marcada na barra."""
    df = filter_expenses_data(transactions_frame(expenses), start_date=start_date, end_date=end_date)
    if df.empty:
        return None

    by_category = df.groupby('categoria')['valor'].sum().sort_values(ascending=False)

    # `goals` já vem filtrado para o mês do gráfico
    goal_by_category: Dict[str, float] = {goal.category: goal.goal for goal in goals}

    categories = by_category.index.tolist()
    values = by_category.values.tolist()

    fig, ax = plt.subplots(figsize=(12, 7))
    bars = ax.bar(categories, values, color=COLORS['Fatias_Variadas'], label='Gasto Total')

    ax.set_title(title, fontsize=16, fontweight='bold')
    ax.set_ylabel('Valor (R$)')
    ax.set_xlabel('Categoria')
    plt.xticks(rotation=45, ha='right')
    ax.grid(axis='y', linestyle='--', alpha=0.7)
    ax.bar_label(bars, fmt='R$%.2f', fontsize=8, padding=3)

    for i, category in enumerate(categories):
        goal = goal_by_category.get(category)
        if goal is None or goal <= 0:
            continue
        bar_x = bars[i].get_x()
        bar_width = bars[i].get_width()
        ax.hlines(goal, bar_x, bar_x + bar_width,
                  colors=COLORS['Meta'], linestyles='--', label='Meta Mensal')
        if values[i] > goal:
            ax.text(bar_x + bar_width / 2, max(values[i], goal) * 1.02,
                    'EXCEDIDO!', ha='center', va='bottom', color='red', fontsize=9, weight='bold')

    ax.yaxis.set_major_formatter(BRL_FORMATTER)

    handles, labels = ax.get_legend_handles_labels()
    unique_labels = dict(zip(labels, handles))
    ax.legend(unique_labels.values(), unique_labels.keys())

    return _to_png()


def generate_payment_method_chart(expenses: Iterable[Transaction],
                                  start_date: Union[datetime.date, None] = None,
                                  end_date: Union[datetime.date, None] = None) -> Union[io.BytesIO, None]:
    """Total de gastos por forma de pagamento (pizza)."""
    df = filter_expenses_data(transactions_frame(expenses), start_date=start_date, end_date=end_date)
    if df.empty:
        return None

    by_method = df.groupby('forma_pagamento')['valor'].sum().sort_values(ascending=False)

    fig, ax = plt.subplots(figsize=(10, 7))
    wedges, _texts, _autotexts = ax.pie(
        by_method.values,
        autopct=lambda p: f'{p:.1f}%',
        startangle=90,
        colors=COLORS['Fatias_Variadas'][:len(by_method)],
        pctdistance=0.8,
    )
    ax.set_title('Gastos por Forma de Pagamento', fontsize=16, fontweight='bold')
    ax.axis('equal')

    labels = [f"{name}: R${value:.2f}" for name, value in by_method.items()]
    ax.legend(wedges, labels, title="Forma de Pagamento", loc="center left", bbox_to_anchor=(1, 0, 0.5, 1))

    return _to_png()


def generate_budget_vs_actual_chart(table: pd.DataFrame, year: int) -> Union[io.BytesIO, None]:
    """
    Planejamento anual: realizado no ano vs. meta anual por categoria.
    `table` é o DataFrame de reports.budget_vs_actual.
    """
    if table.empty or (table['total'].sum() == 0 and table['meta_anual'].sum() == 0):
        return None

    plot_data = table[['meta_anual', 'total']].rename(columns={'meta_anual': 'Meta', 'total': 'Realizado'})

    fig, ax = plt.subplots(figsize=(12, 7))
    plot_data.plot(kind='bar', ax=ax, color=[COLORS['Meta'], COLORS['Despesa']])

    ax.set_title(f'Planejamento {year}: Meta vs. Realizado', fontsize=16, fontweight='bold')
    ax.set_ylabel('Valor (R$)')
    ax.set_xlabel('Categoria')
    plt.xticks(rotation=45, ha='right')
    ax.grid(axis='y', linestyle='--', alpha=0.7)
    ax.yaxis.set_major_formatter(BRL_FORMATTER)

    return _to_png()
