from decimal import Decimal

import pytest

from coffee_pos.config.settings import Settings
from coffee_pos.engine import PricingPolicy
from coffee_pos.engine.pricing_policy import to_decimal


def test_round_half_up_default():
    policy = PricingPolicy(tax_rate=Decimal("0.08"))
    assert policy.round_tax(Decimal("0.125")) == Decimal("0.13")
    assert policy.round_tax(Decimal("0.135")) == Decimal("0.14")
    assert policy.round_tax(Decimal("0.1249")) == Decimal("0.12")


def test_round_half_even_is_configurable():
    policy = PricingPolicy(tax_rate=Decimal("0.08"), rounding_mode="half_even")
    assert policy.round_tax(Decimal("0.125")) == Decimal("0.12")
    assert policy.round_tax(Decimal("0.135")) == Decimal("0.14")


def test_precision_controls_quantum():
    assert PricingPolicy(precision=0).round_tax(Decimal("2.5")) == Decimal("3")
    assert PricingPolicy(precision=3).quantum == Decimal("0.001")


def test_compute_tax_matches_round_of_product():
    policy = PricingPolicy(tax_rate=Decimal("0.0825"))
    subtotal = Decimal("13.35")
    assert policy.compute_tax(subtotal) == policy.round_tax(subtotal * Decimal("0.0825"))
    assert policy.compute_tax(subtotal) == Decimal("1.10")


def test_tax_rate_accepts_strings_and_floats():
    assert PricingPolicy(tax_rate="0.08").tax_rate == Decimal("0.08")
    assert PricingPolicy(tax_rate=0.08).tax_rate == Decimal("0.08")


@pytest.mark.parametrize("kwargs", [
    {"tax_rate": Decimal("-0.01")},
    {"precision": -1},
    {"rounding_mode": "ceiling"},
])
def test_invalid_configuration_rejected(kwargs):
    with pytest.raises(ValueError):
        PricingPolicy(**kwargs)


def test_from_settings(tmp_path):
    settings = Settings.load(project_root=tmp_path, environ={
        "COFFEE_POS_TAX_RATE": "0.06",
        "COFFEE_POS_ROUNDING": "half_even",
    })
    policy = PricingPolicy.from_settings(settings)
    assert policy.tax_rate == Decimal("0.06")
    assert policy.rounding_mode == "half_even"
    assert policy.precision == 2


def test_format_money():
    policy = PricingPolicy()
    assert policy.format_money(Decimal("9.5")) == "$9.50"
    assert policy.format_money(Decimal("1234.567")) == "$1,234.57"


def test_to_decimal_rejects_garbage():
    assert to_decimal("  4.25 ") == Decimal("4.25")
    with pytest.raises(ValueError):
        to_decimal("four")
    with pytest.raises(ValueError):
        to_decimal(True)
