import os
import sys
from decimal import Decimal

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from coffee_pos.engine import Catalog, CustomizationOption, Order, PricingPolicy, Product


@pytest.fixture
def latte():
    return Product(
        product_id="latte",
        name="Latte",
        base_price=Decimal("4.00"),
        options=(
            CustomizationOption("extra-shot", "Extra Shot", Decimal("0.75")),
            CustomizationOption("oat-milk", "Oat Milk", Decimal("0.60")),
            CustomizationOption("whip", "Whipped Cream", Decimal("0.40")),
            CustomizationOption("decaf", "Decaf", Decimal("0.00")),
        ),
        category="Espresso",
    )


@pytest.fixture
def mocha():
    return Product(
        product_id="mocha",
        name="Mocha",
        base_price=Decimal("4.95"),
        options=(
            CustomizationOption("whip", "Whipped Cream", Decimal("0.40")),
            CustomizationOption("no-whip", "No Whip", Decimal("-0.25")),
        ),
        category="Espresso",
    )


@pytest.fixture
def cup_of_ice():
    """A product whose discount option would push the price below zero."""
    return Product(
        product_id="ice",
        name="Cup of Ice",
        base_price=Decimal("0.25"),
        options=(CustomizationOption("loyalty-free", "Loyalty Reward", Decimal("-0.50")),),
    )


@pytest.fixture
def catalog(latte, mocha, cup_of_ice):
    return Catalog([latte, mocha, cup_of_ice])


@pytest.fixture
def policy():
    return PricingPolicy(tax_rate=Decimal("0.08"))


@pytest.fixture
def order(policy):
    return Order(policy, order_id="T1")
