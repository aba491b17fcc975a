# financas/utils/date_utils.py
import calendar
import datetime
from typing import Tuple, Union

from dateutil.relativedelta import relativedelta

DateLike = Union[datetime.date, datetime.datetime, str]

MONTH_NAMES = [
    "Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho",
    "Julho", "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro",
]


def last_day_of_month(year: int, month: int) -> int:
    """Retorna o número de dias do mês (28, 29, 30 ou 31)."""
    return calendar.monthrange(year, month)[1]


def safe_date(year: int, month: int, day: int) -> datetime.date:
    """Monta uma data limitando o dia ao tamanho do mês (31/02 vira 28/02 ou 29/02)."""
    return datetime.date(year, month, min(max(day, 1), last_day_of_month(year, month)))


def first_day_of_month(value: datetime.date) -> datetime.date:
    return value.replace(day=1)


def month_bounds(year: int, month: int) -> Tuple[datetime.date, datetime.date]:
    """Primeiro e último dia do mês civil."""
    return datetime.date(year, month, 1), datetime.date(year, month, last_day_of_month(year, month))


def add_months(value: datetime.date, months: int) -> datetime.date:
    """Soma meses mantendo o dia quando possível (31/01 + 1 mês = 28/02 ou 29/02)."""
    return value + relativedelta(months=months)


def shift_month(year: int, month: int, offset: int) -> Tuple[int, int]:
    """Desloca (ano, mês) em `offset` meses, atravessando a virada de ano."""
    total = year * 12 + (month - 1) + offset
    return total // 12, total % 12 + 1


def month_key(value: datetime.date) -> str:
    """Chave "MM/AAAA" usada para deduplicar lançamentos por mês."""
    return f"{value.month:02d}/{value.year}"


def parse_month_key(text: str) -> Tuple[int, int]:
    """
    Interpreta uma referência de mês e retorna (mes, ano).
    Aceita "MM/AAAA", "M/AAAA" e "AAAA-MM".
    """
    text = text.strip()
    if "/" in text:
        month_str, year_str = text.split("/", 1)
    elif "-" in text:
        year_str, month_str = text.split("-", 1)
    else:
        raise ValueError(f"Referência de mês inválida: '{text}'")

    month, year = int(month_str), int(year_str)
    if not 1 <= month <= 12:
        raise ValueError(f"Mês fora do intervalo 1-12: '{text}'")
    return month, year


def normalize_month_key(text: str) -> str:
    month, year = parse_month_key(text)
    return f"{month:02d}/{year}"


def parse_date(value: DateLike) -> datetime.date:
    """
    Converte o que vem do Supabase (ou do usuário) em `date`.
    Os lançamentos guardam "dd/MM/yyyy"; as demais tabelas usam ISO ("yyyy-MM-dd",
    às vezes com horário).
    """
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    text = str(value).strip()
    if "/" in text:
        return datetime.datetime.strptime(text, "%d/%m/%Y").date()
    return datetime.date.fromisoformat(text[:10])


def format_br_date(value: datetime.date) -> str:
    return value.strftime("%d/%m/%Y")


def parse_competence(value: DateLike) -> datetime.date:
    """Competência (mês pago) normalizada para o primeiro dia do mês."""
    if isinstance(value, (datetime.date, datetime.datetime)):
        return first_day_of_month(parse_date(value))
    text = str(value).strip()
    # "2025-01-15" e "15/01/2025" são datas completas; "2025-01" e "01/2025" são meses
    if len(text) >= 10:
        return first_day_of_month(parse_date(text))
    month, year = parse_month_key(text)
    return datetime.date(year, month, 1)


def same_month(a: datetime.date, b: datetime.date) -> bool:
    return a.year == b.year and a.month == b.month


def month_label(month: int, year: int) -> str:
    """Ex: (3, 2025) -> "Março/2025"."""
    return f"{MONTH_NAMES[month - 1]}/{year}"
