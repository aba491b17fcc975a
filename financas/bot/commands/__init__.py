# financas/bot/commands/__init__.py

from .general import start_command, help_command
from .periods import configure_period_command, list_periods_command, period_command
from .expenses import delete_transaction_command, edit_transaction_command, expense_command, revenue_command
from .fixed_costs import (
    delete_fixed_cost_command,
    edit_fixed_cost_command,
    fixed_costs_command,
    generate_pending_command,
    new_fixed_cost_command,
    pending_command,
)
from .reports import (
    balance_command,
    category_chart_command,
    goals_command,
    payment_method_chart_command,
    set_goal_command,
    summary_command,
)

# Nome do comando no Telegram -> função
ALL_COMMANDS = {
    "start": start_command,
    "help": help_command,
    "periodo": period_command,
    "periodos": list_periods_command,
    "configurar_periodo": configure_period_command,
    "gasto": expense_command,
    "receita": revenue_command,
    "editar_lancamento": edit_transaction_command,
    "remover_lancamento": delete_transaction_command,
    "resumo": summary_command,
    "custos_fixos": fixed_costs_command,
    "novo_custo": new_fixed_cost_command,
    "editar_custo": edit_fixed_cost_command,
    "remover_custo": delete_fixed_cost_command,
    "gerar_pendentes": generate_pending_command,
    "pendentes": pending_command,
    "grafico_categorias": category_chart_command,
    "grafico_pagamentos": payment_method_chart_command,
    "balanco": balance_command,
    "metas": goals_command,
    "definir_meta": set_goal_command,
}
