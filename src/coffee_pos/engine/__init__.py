"""Engine subpackage - order composition and pricing."""
from .catalog import Catalog
from .customization import CustomizationSelection
from .errors import (
    DuplicateOptionError,
    InvalidOptionError,
    InvalidPricingError,
    InvalidQuantityError,
    NotFoundError,
    PosError,
)
from .line_item import LineItem
from .models import CustomizationOption, LineItemView, OperationResult, OrderSnapshot, Product, Totals
from .order import Order
from .pricing_policy import PricingPolicy

__all__ = [
    'Catalog', 'CustomizationSelection', 'LineItem', 'Order', 'PricingPolicy',
    'Product', 'CustomizationOption', 'Totals', 'LineItemView', 'OrderSnapshot', 'OperationResult',
    'PosError', 'NotFoundError', 'InvalidOptionError', 'DuplicateOptionError',
    'InvalidQuantityError', 'InvalidPricingError',
]
