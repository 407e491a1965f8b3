from decimal import Decimal

import pytest

from coffee_pos.config.settings import Settings
from coffee_pos.engine import Catalog, NotFoundError, Product


def write_catalog(tmp_path, products: str, options: str):
    products_csv = tmp_path / "products.csv"
    options_csv = tmp_path / "options.csv"
    products_csv.write_text(products, encoding="utf-8")
    options_csv.write_text(options, encoding="utf-8")
    return products_csv, options_csv


def test_find_product_and_option(catalog):
    latte = catalog.find_product("latte")
    assert latte.name == "Latte"
    assert catalog.find_option("latte", "extra-shot") == Decimal("0.75")
    assert catalog.find_option("mocha", "no-whip") == Decimal("-0.25")


def test_unknown_product_is_not_found(catalog):
    with pytest.raises(NotFoundError):
        catalog.find_product("frappuccino")
    with pytest.raises(NotFoundError):
        catalog.find_option("frappuccino", "whip")


def test_unknown_option_is_not_found(catalog):
    with pytest.raises(NotFoundError) as exc:
        catalog.find_option("latte", "no-whip")
    assert exc.value.code == "not_found"


def test_products_are_immutable_and_ordered(catalog):
    products = catalog.products()
    assert isinstance(products, tuple)
    assert [p.product_id for p in products] == ["latte", "mocha", "ice"]
    with pytest.raises(AttributeError):
        products[0].base_price = Decimal("0")


def test_duplicate_product_ids_rejected(latte):
    with pytest.raises(ValueError):
        Catalog([latte, latte])


def test_negative_base_price_rejected():
    with pytest.raises(ValueError):
        Product(product_id="bad", name="Bad", base_price=Decimal("-1.00"))


def test_from_csv(tmp_path):
    products_csv, options_csv = write_catalog(
        tmp_path,
        "product_id,name,base_price,category\n"
        "latte, Latte ,4.00,Espresso\n"
        "water,Water,1.00,Other\n",
        "product_id,option_id,name,price_delta\n"
        "latte,extra-shot,Extra Shot,0.75\n"
        "latte,whip,Whipped Cream,0.40\n"
        "ghost,boo,Boo,1.00\n",
    )
    catalog = Catalog.from_csv(products_csv, options_csv)

    assert len(catalog) == 2
    assert "latte" in catalog
    latte = catalog.find_product("latte")
    assert latte.name == "Latte"
    assert latte.base_price == Decimal("4.00")
    assert latte.option_ids == ("extra-shot", "whip")
    assert catalog.find_product("water").options == ()
    assert catalog.categories() == ["Espresso", "Other"]


def test_from_csv_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        Catalog.from_csv(tmp_path / "nope.csv")


def test_from_csv_missing_columns(tmp_path):
    products_csv, _ = write_catalog(tmp_path, "product_id,name\nlatte,Latte\n", "")
    with pytest.raises(ValueError):
        Catalog.from_csv(products_csv)


def test_bundled_catalog_loads(tmp_path):
    settings = Settings.load(project_root=tmp_path, environ={})
    catalog = Catalog.from_settings(settings)

    names = [p.name for p in catalog.products()]
    for drink in ("Latte", "Iced Latte", "Coffee", "Matcha Latte", "Water", "Espresso"):
        assert drink in names
    assert catalog.find_product("latte").base_price == Decimal("4.00")
    assert catalog.find_option("latte", "extra-shot") == Decimal("0.75")
