"""
Canonical pay statement record (SSOT).

This is THE single source of truth for extracted pay statement data.
Every stage of the pipeline produces or consumes these types.

Records are immutable once constructed. The overall confidence is a view
computed from the other fields and can never be set by hand.
"""

import json
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from ..confidence.aggregator import GENERIC_PROVIDER, compute_overall_confidence

T = TypeVar("T")

DEFAULT_CURRENCY = "USD"


class PayFrequency(str, Enum):
    """How often the employee is paid."""

    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    SEMI_MONTHLY = "semi_monthly"
    MONTHLY = "monthly"
    UNKNOWN = "unknown"


class FieldSource(str, Enum):
    """Where an uncertain value came from."""

    PATTERN = "pattern"
    OCR_HEURISTIC = "ocr-heuristic"
    DEFAULT = "default"


class DeductionCategory(str, Enum):
    """Deduction category. OTHER is reserved and not populated yet."""

    TAX = "tax"
    BENEFIT = "benefit"
    OTHER = "other"


@dataclass(frozen=True)
class Money:
    """Exact monetary amount. Never a float."""

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def to_dict(self) -> dict:
        return {"amount": str(self.amount), "currency": self.currency}

    @classmethod
    def from_dict(cls, data: dict) -> "Money":
        return cls(
            amount=Decimal(data["amount"]),
            currency=data.get("currency", DEFAULT_CURRENCY),
        )


@dataclass(frozen=True)
class ExtractedField(Generic[T]):
    """A value extracted under uncertainty."""

    value: T
    confidence: float  # 0.0 - 1.0
    source: FieldSource = FieldSource.PATTERN


@dataclass(frozen=True)
class Deduction:
    """A single deduction line item."""

    name: str
    amount: Money
    category: DeductionCategory
    confidence: float

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "amount": self.amount.to_dict(),
            "category": self.category.value,
            "confidence": self.confidence,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Deduction":
        return cls(
            name=data["name"],
            amount=Money.from_dict(data["amount"]),
            category=DeductionCategory(data["category"]),
            confidence=data["confidence"],
        )


@dataclass(frozen=True)
class EarningItem:
    """A single earnings line (regular, overtime, bonus, ...)."""

    description: str
    amount: Money
    hours: Optional[Decimal] = None
    rate: Optional[Decimal] = None

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "amount": self.amount.to_dict(),
            "hours": str(self.hours) if self.hours is not None else None,
            "rate": str(self.rate) if self.rate is not None else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "EarningItem":
        hours = data.get("hours")
        rate = data.get("rate")
        return cls(
            description=data["description"],
            amount=Money.from_dict(data["amount"]),
            hours=Decimal(hours) if hours is not None else None,
            rate=Decimal(rate) if rate is not None else None,
        )


def _money_field_to_dict(extracted: Optional[ExtractedField]) -> Optional[dict]:
    if extracted is None:
        return None
    return {
        "value": extracted.value.to_dict(),
        "confidence": extracted.confidence,
        "source": extracted.source.value,
    }


def _money_field_from_dict(data: Optional[dict]) -> Optional[ExtractedField]:
    if not data:
        return None
    return ExtractedField(
        value=Money.from_dict(data["value"]),
        confidence=data["confidence"],
        source=FieldSource(data.get("source", FieldSource.PATTERN.value)),
    )


def _date_from_str(value: Optional[str]) -> Optional[date]:
    return date.fromisoformat(value) if value else None


@dataclass(frozen=True)
class PaystubRecord:
    """
    CANONICAL pay statement record (SSOT).

    Created once per extraction (or returned unmodified from cache),
    then handed to persistence and owned by the caller.

    Every field except raw_text is best-effort.
    """

    # Acquired plain text, kept for debugging and re-parsing
    raw_text: str

    # Payroll system signature
    provider: str = GENERIC_PROVIDER

    # Core pay information
    gross_pay: Optional[ExtractedField[Money]] = None
    net_pay: Optional[ExtractedField[Money]] = None

    # Year-to-date totals (no confidence tracked)
    ytd_gross_pay: Optional[Money] = None
    ytd_net_pay: Optional[Money] = None

    # Pay period
    pay_period_start: Optional[date] = None
    pay_period_end: Optional[date] = None
    pay_date: Optional[date] = None
    pay_frequency: PayFrequency = PayFrequency.UNKNOWN

    # Employee / employer
    employee_name: Optional[str] = None
    employee_id: Optional[str] = None
    employer_name: Optional[str] = None

    # Earnings line items (ordered as found)
    earnings: tuple[EarningItem, ...] = ()

    # Deductions (ordered as found)
    tax_deductions: tuple[Deduction, ...] = ()
    benefit_deductions: tuple[Deduction, ...] = ()
    other_deductions: tuple[Deduction, ...] = ()

    # Provenance: which acquisition strategy produced raw_text
    acquisition_strategy: str = ""

    @property
    def overall_confidence(self) -> float:
        """Overall trust score in [0, 1], derived from the fields present."""
        return compute_overall_confidence(self)

    @property
    def deductions(self) -> tuple[Deduction, ...]:
        """All deductions in category order."""
        return self.tax_deductions + self.benefit_deductions + self.other_deductions

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        return {
            "raw_text": self.raw_text,
            "provider": self.provider,
            "gross_pay": _money_field_to_dict(self.gross_pay),
            "net_pay": _money_field_to_dict(self.net_pay),
            "ytd_gross_pay": self.ytd_gross_pay.to_dict() if self.ytd_gross_pay else None,
            "ytd_net_pay": self.ytd_net_pay.to_dict() if self.ytd_net_pay else None,
            "pay_period_start": (
                self.pay_period_start.isoformat() if self.pay_period_start else None
            ),
            "pay_period_end": self.pay_period_end.isoformat() if self.pay_period_end else None,
            "pay_date": self.pay_date.isoformat() if self.pay_date else None,
            "pay_frequency": self.pay_frequency.value,
            "employee_name": self.employee_name,
            "employee_id": self.employee_id,
            "employer_name": self.employer_name,
            "earnings": [e.to_dict() for e in self.earnings],
            "tax_deductions": [d.to_dict() for d in self.tax_deductions],
            "benefit_deductions": [d.to_dict() for d in self.benefit_deductions],
            "other_deductions": [d.to_dict() for d in self.other_deductions],
            "acquisition_strategy": self.acquisition_strategy,
            "overall_confidence": self.overall_confidence,
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: dict) -> "PaystubRecord":
        """Deserialize from dictionary. overall_confidence is recomputed."""
        ytd_gross = data.get("ytd_gross_pay")
        ytd_net = data.get("ytd_net_pay")

        return cls(
            raw_text=data["raw_text"],
            provider=data.get("provider", GENERIC_PROVIDER),
            gross_pay=_money_field_from_dict(data.get("gross_pay")),
            net_pay=_money_field_from_dict(data.get("net_pay")),
            ytd_gross_pay=Money.from_dict(ytd_gross) if ytd_gross else None,
            ytd_net_pay=Money.from_dict(ytd_net) if ytd_net else None,
            pay_period_start=_date_from_str(data.get("pay_period_start")),
            pay_period_end=_date_from_str(data.get("pay_period_end")),
            pay_date=_date_from_str(data.get("pay_date")),
            pay_frequency=PayFrequency(data.get("pay_frequency", PayFrequency.UNKNOWN.value)),
            employee_name=data.get("employee_name"),
            employee_id=data.get("employee_id"),
            employer_name=data.get("employer_name"),
            earnings=tuple(EarningItem.from_dict(e) for e in data.get("earnings", [])),
            tax_deductions=tuple(Deduction.from_dict(d) for d in data.get("tax_deductions", [])),
            benefit_deductions=tuple(
                Deduction.from_dict(d) for d in data.get("benefit_deductions", [])
            ),
            other_deductions=tuple(
                Deduction.from_dict(d) for d in data.get("other_deductions", [])
            ),
            acquisition_strategy=data.get("acquisition_strategy", ""),
        )
