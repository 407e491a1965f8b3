"""
Line Item - one order row with derived pricing.

The unit price is cached when the product or selection is set; the
extended price is always computed from it, never stored.
"""
from dataclasses import dataclass, field
from decimal import Decimal

from .customization import CustomizationSelection
from .errors import InvalidOptionError, InvalidPricingError, InvalidQuantityError
from .models import LineItemView, Product, TraceStep


def validate_quantity(quantity) -> int:
    """Return quantity if it is a whole number >= 1, else raise InvalidQuantityError."""
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantityError(f"Quantity must be a whole number, got {quantity!r}")
    if quantity < 1:
        raise InvalidQuantityError(f"Quantity must be at least 1, got {quantity}")
    return quantity


def price_unit(product: Product, selection: CustomizationSelection) -> Decimal:
    """Base price plus option deltas; refuses a negative result."""
    if selection.product_id and selection.product_id != product.product_id:
        raise InvalidOptionError(
            f"Customization was built for '{selection.product_id}', not {product.name}"
        )
    unit_price = product.base_price + selection.price_delta()
    if unit_price < 0:
        raise InvalidPricingError(
            f"Options would price {product.name} at {unit_price}; unit price cannot be negative"
        )
    return unit_price


@dataclass
class LineItem:
    """A single drink row in an order."""
    ref: int
    product: Product
    quantity: int
    selection: CustomizationSelection
    unit_price: Decimal
    trace: list[TraceStep] = field(default_factory=list)

    @classmethod
    def create(cls, ref: int, product: Product, quantity: int, selection: CustomizationSelection) -> 'LineItem':
        """
        Build a priced line item.

        Raises:
            InvalidQuantityError: quantity < 1 or not an integer
            InvalidOptionError: selection belongs to another product
            InvalidPricingError: unit price would be negative
        """
        quantity = validate_quantity(quantity)
        unit_price = price_unit(product, selection)
        line = cls(ref=ref, product=product, quantity=quantity, selection=selection, unit_price=unit_price)
        line._retrace()
        return line

    @property
    def extended_price(self) -> Decimal:
        return self.unit_price * self.quantity

    def set_quantity(self, quantity: int):
        self.quantity = validate_quantity(quantity)
        self._retrace()

    def set_selection(self, selection: CustomizationSelection):
        # Price first so a failure leaves the line untouched
        unit_price = price_unit(self.product, selection)
        self.selection = selection
        self.unit_price = unit_price
        self._retrace()

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the trace for this line item."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"→ {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"→ {t.step}: {t.description}")
        return "\n".join(lines)

    def _retrace(self):
        self.trace = []
        self.add_trace("Base Price", self.product.name, f"${self.product.base_price}")
        for option in self.selection.options:
            self.add_trace("Option", option.name, f"{'+' if option.price_delta >= 0 else '-'}${abs(option.price_delta)}")
        self.add_trace("Unit Price", "Base + options", f"${self.unit_price}")
        self.add_trace("Extension", f"Quantity {self.quantity} × ${self.unit_price}", f"${self.extended_price}")

    def view(self) -> LineItemView:
        return LineItemView(
            ref=self.ref,
            product_id=self.product.product_id,
            name=self.product.name,
            quantity=self.quantity,
            option_ids=tuple(o.option_id for o in self.selection.options),
            option_names=self.selection.labels(),
            unit_price=self.unit_price,
            extended_price=self.extended_price,
        )
