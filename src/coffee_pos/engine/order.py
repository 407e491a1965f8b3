"""
Order - the in-progress transaction and its totals.

Every mutating call validates fully before touching state and reports
its outcome as an OperationResult; totals are recomputed eagerly after
each successful change:

    subtotal = Σ line.extended_price
    tax      = policy.round_tax(subtotal × tax_rate)
    total    = subtotal + tax
"""
import itertools
import logging
import uuid
from decimal import Decimal, DecimalException, Inexact, Rounded, localcontext
from typing import Iterable, Optional, Union

from .customization import CustomizationSelection
from .errors import InvalidQuantityError, NotFoundError, PosError
from .line_item import LineItem, price_unit, validate_quantity
from .models import ZERO, LineItemView, OperationResult, OrderSnapshot, Product, Totals
from .pricing_policy import PricingPolicy


logger = logging.getLogger(__name__)

SelectionInput = Union[CustomizationSelection, str, Iterable[str], None]


class Order:
    """
    An ordered collection of line items priced under a PricingPolicy.

    Line items are addressed by the integer ref returned from add_item.
    Refs are never reused within an order, so a stale ref reports
    NotFoundError rather than hitting a different line.
    """

    def __init__(
        self,
        policy: Optional[PricingPolicy] = None,
        order_id: Optional[str] = None,
        customer: Optional[str] = None,
    ):
        self.policy = policy or PricingPolicy()
        self.order_id = order_id or uuid.uuid4().hex[:8].upper()
        self.customer = customer
        self._lines: list[LineItem] = []
        self._next_ref = itertools.count(1)
        self._recompute()

    @property
    def tax_rate(self) -> Decimal:
        return self.policy.tax_rate

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_item(self, product: Product, quantity: int = 1, selection: SelectionInput = None) -> OperationResult:
        """Append a new line; result.ref is its stable reference."""
        try:
            resolved = self._resolve_selection(product, selection)
            line = LineItem.create(next(self._next_ref), product, quantity, resolved)
            totals = self._price(
                [(l.unit_price, l.quantity) for l in self._lines] + [(line.unit_price, line.quantity)]
            )
        except PosError as e:
            return self._rejected("add_item", e)

        self._lines.append(line)
        self._totals = totals
        logger.debug("Order %s: added line %d (%s × %d)", self.order_id, line.ref, product.name, line.quantity)
        return OperationResult.success(line.ref)

    def update_quantity(self, ref: int, quantity: int) -> OperationResult:
        try:
            line = self._find(ref)
            quantity = validate_quantity(quantity)
            totals = self._price(
                [(l.unit_price, quantity if l.ref == ref else l.quantity) for l in self._lines]
            )
            line.set_quantity(quantity)
        except PosError as e:
            return self._rejected("update_quantity", e)

        self._totals = totals
        logger.debug("Order %s: line %d quantity → %d", self.order_id, ref, line.quantity)
        return OperationResult.success(ref)

    def adjust_quantity(self, ref: int, delta: int) -> OperationResult:
        """Step a line's quantity up or down (the +/- buttons)."""
        try:
            line = self._find(ref)
            if isinstance(delta, bool) or not isinstance(delta, int):
                raise InvalidQuantityError(f"Quantity step must be a whole number, got {delta!r}")
        except PosError as e:
            return self._rejected("adjust_quantity", e)
        return self.update_quantity(ref, line.quantity + delta)

    def update_customization(self, ref: int, selection: SelectionInput) -> OperationResult:
        try:
            line = self._find(ref)
            resolved = self._resolve_selection(line.product, selection)
            unit_price = price_unit(line.product, resolved)
            totals = self._price(
                [(unit_price if l.ref == ref else l.unit_price, l.quantity) for l in self._lines]
            )
            line.set_selection(resolved)
        except PosError as e:
            return self._rejected("update_customization", e)

        self._totals = totals
        logger.debug("Order %s: line %d options → %s", self.order_id, ref, sorted(resolved.option_ids))
        return OperationResult.success(ref)

    def remove_item(self, ref: int) -> OperationResult:
        try:
            line = self._find(ref)
        except PosError as e:
            return self._rejected("remove_item", e)

        self._lines.remove(line)
        self._recompute()
        logger.debug("Order %s: removed line %d", self.order_id, ref)
        return OperationResult.success(ref)

    def clear(self):
        """Drop every line and reset totals, e.g. after checkout or cancel."""
        self._lines.clear()
        self._recompute()
        logger.debug("Order %s: cleared", self.order_id)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def totals(self) -> Totals:
        return self._totals

    def items(self) -> tuple[LineItemView, ...]:
        """Current lines in insertion order."""
        return tuple(line.view() for line in self._lines)

    def get_item(self, ref: int) -> Optional[LineItemView]:
        line = self._lines_by_ref().get(ref)
        return line.view() if line else None

    def get_trace_text(self, ref: int) -> str:
        line = self._lines_by_ref().get(ref)
        return line.get_trace_text() if line else ""

    def snapshot(self) -> OrderSnapshot:
        """Freeze the current lines and totals for the receipt."""
        return OrderSnapshot(
            order_id=self.order_id,
            lines=self.items(),
            totals=self._totals,
            tax_rate=self.tax_rate,
            customer=self.customer,
        )

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _resolve_selection(self, product: Product, selection: SelectionInput) -> CustomizationSelection:
        if selection is None:
            return CustomizationSelection.empty(product)
        if isinstance(selection, CustomizationSelection):
            # Rebuild against this product so foreign or hand-built selections are checked
            return CustomizationSelection.create(product, sorted(selection.option_ids))
        return CustomizationSelection.create(product, selection)

    def _lines_by_ref(self) -> dict[int, LineItem]:
        return {line.ref: line for line in self._lines}

    def _find(self, ref: int) -> LineItem:
        line = self._lines_by_ref().get(ref)
        if line is None:
            raise NotFoundError(f"Line item {ref} not found in order")
        return line

    def _recompute(self):
        self._totals = self._price([(line.unit_price, line.quantity) for line in self._lines])

    def _price(self, pairs: Iterable[tuple[Decimal, int]]) -> Totals:
        """Totals for (unit_price, quantity) pairs; refuses amounts that would lose precision."""
        try:
            with localcontext() as ctx:
                ctx.traps[Inexact] = ctx.traps[Rounded] = True
                subtotal = sum((unit_price * quantity for unit_price, quantity in pairs), ZERO)
                taxable = subtotal * self.tax_rate
            # Quantizing the tax is the one step allowed to round
            tax = self.policy.round_tax(taxable)
            with localcontext() as ctx:
                ctx.traps[Inexact] = ctx.traps[Rounded] = True
                total = subtotal + tax
        except DecimalException:
            raise InvalidQuantityError("Order is too large to price exactly") from None
        return Totals(subtotal=subtotal, tax=tax, total=total)

    def _rejected(self, operation: str, error: PosError) -> OperationResult:
        logger.info("Order %s: %s rejected (%s): %s", self.order_id, operation, error.code, error.message)
        return OperationResult.failure(error)
