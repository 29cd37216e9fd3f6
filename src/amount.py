from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

SCALE = 10_000
MAX_UNITS = 2**64 - 1

_QUANTUM = Decimal("0.0001")
_MAX_VALUE = Decimal(MAX_UNITS) / SCALE


class InvalidAmount(ValueError):
    """Raised when a value cannot be represented as an Amount."""


@dataclass(frozen=True, order=True)
class Amount:
    """
    Non-negative fixed-point money value with four decimal digits.
    Stored as an integer count of 1/10000ths, bounded by an unsigned 64-bit counter.
    """

    units: int = 0

    def __post_init__(self):
        if not 0 <= self.units <= MAX_UNITS:
            raise InvalidAmount(f"amount units out of range: {self.units}")

    @classmethod
    def from_decimal(cls, value: Decimal) -> "Amount":
        """Convert a Decimal, rounding half-up to four decimal places."""
        if not value.is_finite():
            raise InvalidAmount(f"amount is not finite: {value}")
        if value < 0:
            raise InvalidAmount(f"amount is negative: {value}")
        if value > _MAX_VALUE:
            raise InvalidAmount(f"amount too large: {value}")
        return cls(int(value.quantize(_QUANTUM, rounding=ROUND_HALF_UP) * SCALE))

    @classmethod
    def parse(cls, text: str) -> "Amount":
        try:
            value = Decimal(text.strip())
        except InvalidOperation:
            raise InvalidAmount(f"not a decimal number: {text!r}") from None
        return cls.from_decimal(value)

    def checked_add(self, other: "Amount") -> Optional["Amount"]:
        """Return self + other, or None if the result would exceed MAX_UNITS."""
        result = self.units + other.units
        if result > MAX_UNITS:
            return None
        return Amount(result)

    def checked_sub(self, other: "Amount") -> Optional["Amount"]:
        """Return self - other, or None if the result would be negative."""
        if other.units > self.units:
            return None
        return Amount(self.units - other.units)

    def to_decimal(self) -> Decimal:
        return (Decimal(self.units) / SCALE).quantize(_QUANTUM)

    def __str__(self) -> str:
        return f"{self.to_decimal():f}"


Amount.ZERO = Amount(0)
