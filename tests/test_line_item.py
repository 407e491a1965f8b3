from decimal import Decimal

import pytest

from coffee_pos.engine import (
    CustomizationSelection,
    InvalidOptionError,
    InvalidPricingError,
    InvalidQuantityError,
    LineItem,
)


def test_unit_and_extended_price(latte):
    selection = CustomizationSelection.create(latte, ["extra-shot"])
    line = LineItem.create(1, latte, 2, selection)
    assert line.unit_price == Decimal("4.75")
    assert line.extended_price == Decimal("9.50")


@pytest.mark.parametrize("quantity", [0, -1, 1.5, "2", True])
def test_invalid_quantity_rejected(latte, quantity):
    with pytest.raises(InvalidQuantityError):
        LineItem.create(1, latte, quantity, CustomizationSelection.empty(latte))


def test_negative_unit_price_rejected(cup_of_ice):
    selection = CustomizationSelection.create(cup_of_ice, ["loyalty-free"])
    with pytest.raises(InvalidPricingError):
        LineItem.create(1, cup_of_ice, 1, selection)


def test_selection_for_other_product_rejected(latte, mocha):
    selection = CustomizationSelection.create(mocha, ["whip"])
    with pytest.raises(InvalidOptionError):
        LineItem.create(1, latte, 1, selection)


def test_set_quantity_recomputes_extension(latte):
    line = LineItem.create(1, latte, 1, CustomizationSelection.empty(latte))
    line.set_quantity(250)
    assert line.quantity == 250
    assert line.extended_price == Decimal("1000.00")


def test_set_quantity_failure_keeps_state(latte):
    line = LineItem.create(1, latte, 3, CustomizationSelection.empty(latte))
    with pytest.raises(InvalidQuantityError):
        line.set_quantity(0)
    assert line.quantity == 3
    assert line.extended_price == Decimal("12.00")


def test_set_selection_failure_keeps_state(cup_of_ice):
    line = LineItem.create(1, cup_of_ice, 2, CustomizationSelection.empty(cup_of_ice))
    with pytest.raises(InvalidPricingError):
        line.set_selection(CustomizationSelection.create(cup_of_ice, ["loyalty-free"]))
    assert line.unit_price == Decimal("0.25")
    assert len(line.selection) == 0


def test_no_penny_drift_on_repeated_additions(latte):
    selection = CustomizationSelection.create(latte, ["oat-milk"])
    line = LineItem.create(1, latte, 1, selection)
    total = Decimal("0")
    for _ in range(1000):
        total += line.extended_price
    assert total == Decimal("4600.00")


def test_trace_lists_pricing_steps(latte):
    line = LineItem.create(1, latte, 2, CustomizationSelection.create(latte, ["extra-shot"]))
    text = line.get_trace_text()
    assert "Base Price: Latte = $4.00" in text
    assert "Option: Extra Shot = +$0.75" in text
    assert "Extension: Quantity 2 × $4.75 = $9.50" in text


def test_view_is_read_only(latte):
    line = LineItem.create(7, latte, 1, CustomizationSelection.create(latte, ["whip", "extra-shot"]))
    view = line.view()
    assert view.ref == 7
    assert view.option_ids == ("extra-shot", "whip")
    assert view.description == "Latte (Extra Shot, Whipped Cream)"
    with pytest.raises(AttributeError):
        view.quantity = 5
