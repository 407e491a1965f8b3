"""
Pricing Policy - tax rate and currency rounding rules.

Pure configuration: built once at startup and never mutated. All math is
done in Decimal so repeated orders never accumulate binary float error.
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN, ROUND_HALF_UP
from typing import Optional, Union

from ..config.settings import Settings, get_settings


ROUNDING_MODES = {
    "half_up": ROUND_HALF_UP,
    "half_even": ROUND_HALF_EVEN,
}

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Convert a number or numeric string to Decimal (floats go through str)."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Not a monetary amount: {value!r}")
    if isinstance(value, float):
        value = repr(value)
    try:
        return Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Not a monetary amount: {value!r}") from None


@dataclass(frozen=True)
class PricingPolicy:
    """
    Tax and rounding rules applied when an order recomputes its totals.

    Rounding defaults to round-half-up at two decimal places, the usual
    retail convention: 0.005 rounds to 0.01.
    """
    tax_rate: Decimal = Decimal("0.0825")
    precision: int = 2
    rounding_mode: str = "half_up"

    def __post_init__(self):
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "tax_rate", to_decimal(self.tax_rate))
        if self.tax_rate < 0:
            raise ValueError(f"Tax rate must be non-negative, got {self.tax_rate}")
        if self.precision < 0:
            raise ValueError(f"Currency precision must be non-negative, got {self.precision}")
        if self.rounding_mode not in ROUNDING_MODES:
            raise ValueError(
                f"Unknown rounding mode '{self.rounding_mode}'. "
                f"Expected one of: {', '.join(sorted(ROUNDING_MODES))}"
            )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "PricingPolicy":
        settings = settings or get_settings()
        return cls(
            tax_rate=settings.tax_rate,
            precision=settings.currency_precision,
            rounding_mode=settings.rounding_mode,
        )

    @property
    def quantum(self) -> Decimal:
        """Smallest currency unit, e.g. Decimal('0.01')."""
        return Decimal(1).scaleb(-self.precision)

    def round_tax(self, amount: Number) -> Decimal:
        """Round an amount to the currency precision using the configured mode."""
        return to_decimal(amount).quantize(self.quantum, rounding=ROUNDING_MODES[self.rounding_mode])

    def compute_tax(self, subtotal: Number) -> Decimal:
        return self.round_tax(to_decimal(subtotal) * self.tax_rate)

    def format_money(self, amount: Number) -> str:
        return f"${self.round_tax(amount):,}"
