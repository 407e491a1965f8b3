"""
Customization selection - the options chosen for one line item.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Union

from .errors import DuplicateOptionError, InvalidOptionError
from .models import ZERO, CustomizationOption, Product


@dataclass(frozen=True)
class CustomizationSelection:
    """
    A validated set of option ids for a specific product.

    Two selections are equal when they hold the same option ids, whatever
    order the options were picked in.
    """
    option_ids: frozenset[str]
    product_id: str = field(default="", compare=False)
    # Catalog order, for display and pricing
    options: tuple[CustomizationOption, ...] = field(default=(), compare=False, repr=False)

    @classmethod
    def create(cls, product: Product, option_ids: Union[str, Iterable[str]] = ()) -> 'CustomizationSelection':
        """
        Validate option ids against the product's available options.

        Raises:
            DuplicateOptionError: an id appears more than once
            InvalidOptionError: an id is not offered for this product
        """
        if isinstance(option_ids, str):
            option_ids = [option_ids]

        chosen: set[str] = set()
        for option_id in option_ids:
            option_id = str(option_id).strip()
            if option_id in chosen:
                raise DuplicateOptionError(f"Option '{option_id}' selected more than once for {product.name}")
            if product.get_option(option_id) is None:
                raise InvalidOptionError(f"Option '{option_id}' is not available for {product.name}")
            chosen.add(option_id)

        return cls(
            option_ids=frozenset(chosen),
            product_id=product.product_id,
            options=tuple(o for o in product.options if o.option_id in chosen),
        )

    @classmethod
    def empty(cls, product: Product) -> 'CustomizationSelection':
        return cls(option_ids=frozenset(), product_id=product.product_id)

    def price_delta(self) -> Decimal:
        """Sum of the selected options' price deltas."""
        return sum((o.price_delta for o in self.options), ZERO)

    def labels(self) -> tuple[str, ...]:
        return tuple(o.name for o in self.options)

    def __len__(self) -> int:
        return len(self.option_ids)

    def __contains__(self, option_id: object) -> bool:
        return option_id in self.option_ids
