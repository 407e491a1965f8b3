"""
Data models for the order engine.

Uses dataclasses for structured, type-safe data representation.
Money is always carried as Decimal; to_dict() renders it as strings.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from .errors import PosError


ZERO = Decimal("0")


@dataclass(frozen=True)
class TraceStep:
    """A single step in the line pricing trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass(frozen=True)
class CustomizationOption:
    """An optional modifier offered for a product (e.g. oat milk)."""
    option_id: str
    name: str
    price_delta: Decimal = ZERO


@dataclass(frozen=True)
class Product:
    """A catalog drink with its base price and available customizations."""
    product_id: str
    name: str
    base_price: Decimal
    options: tuple[CustomizationOption, ...] = ()
    category: str = ""

    def __post_init__(self):
        if self.base_price < 0:
            raise ValueError(f"Product {self.product_id} has negative base price {self.base_price}")
        seen = set()
        for option in self.options:
            if option.option_id in seen:
                raise ValueError(f"Product {self.product_id} repeats option {option.option_id}")
            seen.add(option.option_id)

    @property
    def option_ids(self) -> tuple[str, ...]:
        return tuple(o.option_id for o in self.options)

    def get_option(self, option_id: str) -> Optional[CustomizationOption]:
        for option in self.options:
            if option.option_id == option_id:
                return option
        return None


@dataclass(frozen=True)
class Totals:
    """Subtotal, tax and total of an order."""
    subtotal: Decimal = ZERO
    tax: Decimal = ZERO
    total: Decimal = ZERO

    def to_dict(self) -> dict:
        return {
            "subtotal": str(self.subtotal),
            "tax": str(self.tax),
            "total": str(self.total),
        }


@dataclass(frozen=True)
class LineItemView:
    """Read-only view of one order row."""
    ref: int
    product_id: str
    name: str
    quantity: int
    option_ids: tuple[str, ...]
    option_names: tuple[str, ...]
    unit_price: Decimal
    extended_price: Decimal

    @property
    def description(self) -> str:
        if not self.option_names:
            return self.name
        return f"{self.name} ({', '.join(self.option_names)})"

    def to_dict(self) -> dict:
        return {
            "ref": self.ref,
            "product_id": self.product_id,
            "name": self.name,
            "description": self.description,
            "quantity": self.quantity,
            "options": list(self.option_ids),
            "unit_price": str(self.unit_price),
            "extended_price": str(self.extended_price),
        }


@dataclass(frozen=True)
class OrderSnapshot:
    """Point-in-time copy of an order, e.g. for the receipt screen."""
    order_id: str
    lines: tuple[LineItemView, ...]
    totals: Totals
    tax_rate: Decimal
    customer: Optional[str] = None
    taken_at: datetime = field(default_factory=datetime.now)

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def to_dict(self) -> dict:
        """JSON-safe representation with money as strings."""
        return {
            "order_id": self.order_id,
            "customer": self.customer,
            "taken_at": self.taken_at.isoformat(),
            "tax_rate": str(self.tax_rate),
            "item_count": self.item_count,
            "lines": [line.to_dict() for line in self.lines],
            **self.totals.to_dict(),
        }


@dataclass(frozen=True)
class OperationResult:
    """
    Outcome of a mutating order operation.

    `ref` identifies the affected line item on success; `error` holds the
    validation failure otherwise.
    """
    ok: bool
    ref: Optional[int] = None
    error: Optional[PosError] = None

    @classmethod
    def success(cls, ref: Optional[int] = None) -> "OperationResult":
        return cls(ok=True, ref=ref)

    @classmethod
    def failure(cls, error: PosError) -> "OperationResult":
        return cls(ok=False, error=error)

    def __bool__(self) -> bool:
        return self.ok

    @property
    def error_code(self) -> Optional[str]:
        return self.error.code if self.error else None

    @property
    def message(self) -> str:
        return self.error.message if self.error else ""

    def raise_for_error(self) -> "OperationResult":
        """Re-raise the captured error, for callers that prefer exceptions."""
        if self.error is not None:
            raise self.error
        return self
