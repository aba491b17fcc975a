from telegram import Update
from telegram.ext import ContextTypes


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Envia uma mensagem quando o comando /start é emitido."""
    await update.message.reply_text(
        "Olá! Sou o bot das finanças da casa. 🏠\n\n"
        "Comandos úteis:\n"
        "- `/gasto 50 pix Mercado` para registrar um gasto.\n"
        "- `/resumo` para ver os totais do mês.\n"
        "- `/custos_fixos` para ver as contas do mês.\n"
        "- `/pagar` para registrar o pagamento de uma conta fixa.\n"
        "- `/periodo` para ver o período atual da fatura do cartão.\n"
        "- `/help` para a lista completa.",
        parse_mode="Markdown",
    )


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Envia uma mensagem quando o comando /help é emitido."""
    await update.message.reply_text(
        "*Lançamentos:*\n"
        "- `/gasto valor forma categoria [parcelas] [descrição]`: registra um gasto "
        "(ex: `/gasto 1200 credito Eletronicos 10x Notebook`). Formas: credito, debito, pix, dinheiro.\n"
        "- `/receita valor categoria [descrição]`: registra uma receita (ex: `/receita 5000 Salario`).\n"
        "- `/editar_lancamento forma id campo valor`: corrige um lançamento "
        "(campos: valor, forma, categoria, descricao, data, responsavel).\n"
        "- `/remover_lancamento forma id`: apaga um lançamento.\n\n"
        "*Cartão:*\n"
        "- `/periodo [MM/AAAA]`: período da fatura do mês (sem mês, o período ativo hoje).\n"
        "- `/periodos [AAAA]`: períodos configurados no ano.\n"
        "- `/configurar_periodo MM/AAAA dd/mm/aaaa dd/mm/aaaa`: define o período de um mês "
        "(ex: `/configurar_periodo 03/2025 26/02/2025 25/03/2025`).\n\n"
        "*Custos fixos:*\n"
        "- `/custos_fixos`: lista as contas fixas e a situação no mês.\n"
        "- `/novo_custo valor dia forma categoria [Nx] título`: cadastra uma conta fixa "
        "(ex: `/novo_custo 120 10 pix Casa Internet`).\n"
        "- `/editar_custo id campo valor`: altera uma conta fixa "
        "(campos: titulo, valor, dia, forma, categoria, parcelas, responsavel, auto).\n"
        "- `/remover_custo id`: apaga uma conta fixa (os lançamentos já feitos ficam).\n"
        "- `/gerar_pendentes`: gera as despesas pendentes que faltam.\n"
        "- `/pendentes`: lista as despesas pendentes.\n"
        "- `/pagar`: registra o pagamento de uma conta fixa (use `/cancel` para desistir).\n\n"
        "*Relatórios:*\n"
        "- `/resumo [MM/AAAA]`: totais do mês, por responsável e metas.\n"
        "- `/grafico_categorias [MM/AAAA]`: gráfico de gastos por categoria com as metas.\n"
        "- `/grafico_pagamentos [MM/AAAA]`: gráfico de gastos por forma de pagamento.\n"
        "- `/balanco`: gráfico de receitas vs. despesas por mês.\n"
        "- `/metas [AAAA]`: planejamento do ano (meta vs. realizado).\n"
        "- `/definir_meta categoria valor [AAAA]`: define a meta mensal de uma categoria no ano.",
        parse_mode="Markdown",
    )
