"""
Money value object.

Amounts are held as Decimal quantized to cents so repeated arithmetic
never accumulates binary floating point drift.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Final, Union

from utils.formatting import format_currency

from .errors import ValuationInputError

CENT: Final[Decimal] = Decimal("0.01")
DEFAULT_CURRENCY: Final[str] = "BRL"

Amount = Union[int, float, Decimal, str]


def _to_decimal(value: Amount) -> Decimal:
    if isinstance(value, bool):
        raise ValuationInputError("Money amount must be numeric")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValuationInputError("Money amount must be a finite number")
    try:
        result = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValuationInputError(f"Money amount must be numeric, got {value!r}")
    if not result.is_finite():
        raise ValuationInputError("Money amount must be a finite number")
    return result


@dataclass(frozen=True, order=False)
class Money:
    """
    Immutable monetary value in whole currency units.

    Negative amounts are rejected; a price is never below zero.
    """
    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __init__(self, amount: Amount, currency: str = DEFAULT_CURRENCY):
        try:
            value = _to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            raise ValuationInputError(f"Money amount is too large: {amount!r}")
        if value < 0:
            raise ValuationInputError("Money amount cannot be negative")
        object.__setattr__(self, "amount", value)
        object.__setattr__(self, "currency", currency)

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> "Money":
        return cls(0, currency)

    def add(self, other: "Money") -> "Money":
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def subtract(self, other: "Money") -> "Money":
        self._assert_same_currency(other)
        result = self.amount - other.amount
        if result < 0:
            raise ValuationInputError("Subtraction would result in negative amount")
        return Money(result, self.currency)

    def multiply(self, factor: float) -> "Money":
        factor_value = _to_decimal(factor)
        return Money(self.amount * factor_value, self.currency)

    def divide(self, divisor: float) -> "Money":
        divisor_value = _to_decimal(divisor)
        if divisor_value == 0:
            raise ValuationInputError("Cannot divide money by zero")
        return Money(self.amount / divisor_value, self.currency)

    def __add__(self, other: "Money") -> "Money":
        return self.add(other)

    def __sub__(self, other: "Money") -> "Money":
        return self.subtract(other)

    def __mul__(self, factor: float) -> "Money":
        return self.multiply(factor)

    __rmul__ = __mul__

    def __lt__(self, other: "Money") -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: "Money") -> bool:
        self._assert_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: "Money") -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: "Money") -> bool:
        self._assert_same_currency(other)
        return self.amount >= other.amount

    def __float__(self) -> float:
        return float(self.amount)

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    def format(self) -> str:
        """Format for display, e.g. "R$ 450.000,00"."""
        return format_currency(self.amount, self.currency)

    def __str__(self) -> str:
        return self.format()

    def _assert_same_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise ValuationInputError(
                f"Currency mismatch: {self.currency} != {other.currency}"
            )

    def to_dict(self) -> dict:
        return {"amount": float(self.amount), "currency": self.currency}

    @classmethod
    def from_dict(cls, data: dict) -> "Money":
        return cls(data["amount"], data.get("currency", DEFAULT_CURRENCY))
