"""
Error taxonomy for order composition and pricing.

All of these are input-validation failures: they are reported to the
caller and never leave an order partially updated.
"""


class PosError(Exception):
    """Base class for engine validation errors."""
    code = "pos_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class NotFoundError(PosError):
    """Referenced product, option, or line item does not exist."""
    code = "not_found"


class InvalidOptionError(PosError):
    """Customization option is not offered by the product."""
    code = "invalid_option"


class DuplicateOptionError(PosError):
    """Customization option was selected more than once."""
    code = "duplicate_option"


class InvalidQuantityError(PosError):
    """Quantity is not a whole number of at least 1."""
    code = "invalid_quantity"


class InvalidPricingError(PosError):
    """Option deltas would drive the unit price below zero."""
    code = "invalid_pricing"
