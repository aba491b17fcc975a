# financas/core/models.py
from __future__ import annotations

import datetime
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional

from financas.utils.date_utils import (
    format_br_date,
    month_bounds,
    month_label,
    parse_date,
    safe_date,
    shift_month,
)
from financas.utils.text_utils import strip_accents

# Os dados chegam do Supabase como dicionários. Estas classes fazem a ponte:
# `from_row` converte a linha da tabela, `to_row` gera o payload de insert/update.

SINGLE_INSTALLMENT = "A vista"


class PaymentMethod(str, Enum):
    CREDIT = "Crédito"
    DEBIT = "Débito"
    PIX = "Pix"
    CASH = "Dinheiro"

    @classmethod
    def from_text(cls, text: str) -> "PaymentMethod":
        """Aceita o valor gravado ("Crédito") ou o que o usuário digita ("credito", "cartao", "dinheiro")."""
        key = strip_accents(text or "").strip().lower()
        aliases = {
            "credito": cls.CREDIT,
            "cartao": cls.CREDIT,
            "cartao de credito": cls.CREDIT,
            "credit": cls.CREDIT,
            "debito": cls.DEBIT,
            "debit": cls.DEBIT,
            "pix": cls.PIX,
            "dinheiro": cls.CASH,
            "especie": cls.CASH,
            "cash": cls.CASH,
        }
        if key not in aliases:
            raise ValueError(f"Forma de pagamento desconhecida: '{text}'")
        return aliases[key]

    @property
    def is_credit(self) -> bool:
        return self is PaymentMethod.CREDIT


class TransactionStatus(str, Enum):
    NORMAL = "pago"
    PENDING = "pendente"

    @classmethod
    def from_row_value(cls, value: Optional[str]) -> "TransactionStatus":
        # Lançamentos digitados pelo usuário não têm status (NULL)
        if value == cls.PENDING.value:
            return cls.PENDING
        return cls.NORMAL


class FixedCostStatus(str, Enum):
    PAID = "paid"
    OVERDUE = "overdue"
    UPCOMING = "upcoming"
    PENDING = "pending"

    @property
    def label(self) -> str:
        return {
            FixedCostStatus.PAID: "Pago",
            FixedCostStatus.OVERDUE: "Atrasado",
            FixedCostStatus.UPCOMING: "Vence em breve",
            FixedCostStatus.PENDING: "Pendente",
        }[self]


class InvalidPeriodError(ValueError):
    """Configuração de períodos do cartão inconsistente."""


# --- Períodos do cartão ---

@dataclass(frozen=True)
class PeriodRange:
    start_date: datetime.date
    end_date: datetime.date

    def contains(self, value: datetime.date) -> bool:
        # `value` é uma data: o fim do período vale até 23:59:59 do dia
        return self.start_date <= value <= self.end_date


@dataclass(frozen=True)
class ActivePeriod:
    start_date: datetime.date
    end_date: datetime.date
    reference_month: int
    reference_year: int


@dataclass(frozen=True)
class LegacyOffset:
    """Formato antigo: dia de início + deslocamento do mês de início (0 ou -1) + dia de fim."""
    start_day: int
    month_offset: int
    end_day: int

    def to_range(self, reference_month: int, reference_year: int) -> PeriodRange:
        start_year, start_month = shift_month(reference_year, reference_month, self.month_offset)
        return PeriodRange(
            start_date=safe_date(start_year, start_month, self.start_day),
            end_date=safe_date(reference_year, reference_month, self.end_day),
        )


@dataclass(frozen=True)
class PeriodDefinition:
    """
    Período de faturamento de um mês de referência.
    Ou traz as datas explícitas (start_date/end_date) ou o formato antigo (`legacy`).
    """
    reference_month: int
    reference_year: int
    start_date: Optional[datetime.date] = None
    end_date: Optional[datetime.date] = None
    label: str = ""
    legacy: Optional[LegacyOffset] = None

    @property
    def is_explicit(self) -> bool:
        return self.start_date is not None and self.end_date is not None

    def bounds(self) -> PeriodRange:
        if self.is_explicit:
            return PeriodRange(self.start_date, self.end_date)
        if self.legacy is not None:
            return self.legacy.to_range(self.reference_month, self.reference_year)
        start, end = month_bounds(self.reference_year, self.reference_month)
        return PeriodRange(start, end)

    def normalized(self) -> "PeriodDefinition":
        """Converte para datas explícitas; depois disso ninguém precisa olhar o formato antigo."""
        rng = self.bounds()
        return replace(
            self,
            start_date=rng.start_date,
            end_date=rng.end_date,
            label=self.label or month_label(self.reference_month, self.reference_year),
            legacy=None,
        )

    @classmethod
    def from_row(cls, row: Dict[str, Any], default_year: Optional[int] = None) -> "PeriodDefinition":
        """Lê uma linha de `periodos_mensais_cartao` e já normaliza para datas explícitas."""
        year = row.get("ano_referencia") or default_year or datetime.date.today().year
        legacy = None
        if row.get("dia_inicio") is not None and row.get("dia_fim") is not None:
            legacy = LegacyOffset(
                start_day=int(row["dia_inicio"]),
                month_offset=int(row.get("mes_inicio_offset") or 0),
                end_day=int(row["dia_fim"]),
            )
        definition = cls(
            reference_month=int(row["mes_referencia"]),
            reference_year=int(year),
            start_date=parse_date(row["data_inicio"]) if row.get("data_inicio") else None,
            end_date=parse_date(row["data_fim"]) if row.get("data_fim") else None,
            label=row.get("nome_periodo") or "",
            legacy=legacy,
        )
        return definition.normalized()

    def to_row(self, user_id: Optional[str] = None) -> Dict[str, Any]:
        rng = self.bounds()
        row = {
            "mes_referencia": self.reference_month,
            "ano_referencia": self.reference_year,
            "data_inicio": rng.start_date.isoformat(),
            "data_fim": rng.end_date.isoformat(),
            "nome_periodo": self.label or month_label(self.reference_month, self.reference_year),
        }
        if user_id:
            row["user_id"] = user_id
        return row


# --- Lançamentos ---

@dataclass
class Transaction:
    amount: float
    date: datetime.date
    payment_method: PaymentMethod
    category: str = ""
    responsible: str = ""
    description: str = ""
    installment_label: str = SINGLE_INSTALLMENT
    status: TransactionStatus = TransactionStatus.NORMAL
    recurring_source_id: Optional[int] = None
    # Mês que o lançamento quita (só para lançamentos de custo fixo)
    competence: Optional[datetime.date] = None
    id: Optional[int] = None
    user_id: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status is TransactionStatus.PENDING

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Transaction":
        return cls(
            amount=float(row.get("valor") or 0.0),
            date=parse_date(row["Data"]),
            payment_method=PaymentMethod.from_text(row.get("Tipo") or ""),
            category=row.get("Categoria") or "",
            responsible=row.get("Responsavel") or "",
            description=row.get("Descrição") or "",
            installment_label=row.get("Parcelas") or SINGLE_INSTALLMENT,
            status=TransactionStatus.from_row_value(row.get("status")),
            recurring_source_id=row.get("fixed_cost_id"),
            competence=parse_date(row["competencia"]) if row.get("competencia") else None,
            id=row.get("id"),
            user_id=row.get("user_id"),
        )

    def to_row(self) -> Dict[str, Any]:
        row = {
            "Responsavel": self.responsible,
            "Tipo": self.payment_method.value,
            "Categoria": self.category,
            "Parcelas": self.installment_label,
            "Descrição": self.description,
            "Data": format_br_date(self.date),
            "valor": round(self.amount, 2),
            "status": self.status.value,
            "fixed_cost_id": self.recurring_source_id,
            "competencia": self.competence.isoformat() if self.competence else None,
        }
        if self.user_id:
            row["user_id"] = self.user_id
        return row


@dataclass
class Revenue:
    amount: float
    date: datetime.date
    category: str = ""
    responsible: str = ""
    description: str = ""
    id: Optional[int] = None
    user_id: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Revenue":
        return cls(
            amount=float(row.get("valor") or 0.0),
            date=parse_date(row["Data"]),
            category=row.get("Categoria") or "",
            responsible=row.get("Responsavel") or "",
            description=row.get("Descrição") or "",
            id=row.get("id"),
            user_id=row.get("user_id"),
        )

    def to_row(self) -> Dict[str, Any]:
        row = {
            "Responsavel": self.responsible,
            "Categoria": self.category,
            "Descrição": self.description,
            "Data": format_br_date(self.date),
            "valor": round(self.amount, 2),
        }
        if self.user_id:
            row["user_id"] = self.user_id
        return row


# --- Custos fixos ---

@dataclass
class FixedCost:
    title: str
    amount: float
    due_day: int
    category: str = ""
    payment_method: PaymentMethod = PaymentMethod.PIX
    responsible: str = ""
    total_cycles: Optional[int] = None
    last_paid_competence: Optional[datetime.date] = None
    auto_generate: bool = True
    description: str = ""
    id: Optional[int] = None
    user_id: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "FixedCost":
        last_paid = row.get("last_paid_competence")
        return cls(
            title=row.get("title") or "",
            amount=float(row.get("amount") or 0.0),
            due_day=int(row.get("due_day") or 1),
            category=row.get("category") or "",
            payment_method=PaymentMethod.from_text(row.get("payment_method") or PaymentMethod.PIX.value),
            responsible=row.get("responsavel") or "",
            total_cycles=row.get("total_cycles"),
            last_paid_competence=parse_date(last_paid) if last_paid else None,
            auto_generate=bool(row.get("auto_generate", True)),
            description=row.get("description") or "",
            id=row.get("id"),
            user_id=row.get("user_id"),
        )

    def to_row(self) -> Dict[str, Any]:
        row = {
            "title": self.title,
            "amount": round(self.amount, 2),
            "category": self.category,
            "due_day": self.due_day,
            "payment_method": self.payment_method.value,
            "responsavel": self.responsible,
            "total_cycles": self.total_cycles,
            "last_paid_competence": self.last_paid_competence.isoformat() if self.last_paid_competence else None,
            "auto_generate": self.auto_generate,
            "description": self.description,
        }
        if self.user_id:
            row["user_id"] = self.user_id
        return row


@dataclass(frozen=True)
class Occurrence:
    """Uma cobrança futura planejada para um custo fixo."""
    due_date: datetime.date
    sequence_number: int
    description: str


@dataclass(frozen=True)
class PaymentRecord:
    amount: float
    date: datetime.date
    competence: Any  # "AAAA-MM", "MM/AAAA" ou date; normalizado em register_payment
    payment_method: PaymentMethod
    responsible: str = ""


@dataclass(frozen=True)
class PaymentResult:
    new_transaction: Transaction
    competence_to_record: datetime.date


# --- Planejamento ---

@dataclass
class BudgetGoal:
    category: str
    month: int
    year: int
    goal: float = 0.0
    user_id: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "BudgetGoal":
        return cls(
            category=row.get("categoria") or "",
            month=int(row["mes"]),
            year=int(row["ano"]),
            goal=float(row.get("meta") or 0.0),
            user_id=row.get("user_id"),
        )

    def to_row(self) -> Dict[str, Any]:
        row = {"categoria": self.category, "mes": self.month, "ano": self.year, "meta": self.goal}
        if self.user_id:
            row["user_id"] = self.user_id
        return row


@dataclass
class ExpenseSummary:
    total: float = 0.0
    credit_total: float = 0.0
    other_total: float = 0.0
    pending_total: float = 0.0
    count: int = 0
    by_responsible: Dict[str, float] = field(default_factory=dict)
