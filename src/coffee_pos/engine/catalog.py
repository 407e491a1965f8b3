"""
Catalog - static lookup of drinks and their customization options.

Loaded once at startup from products.csv / options.csv and read-only
afterwards, so a single instance can be shared by every open order.
"""
import logging
from decimal import Decimal
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from ..config.settings import Settings, get_settings
from .errors import NotFoundError
from .models import CustomizationOption, Product
from .pricing_policy import to_decimal


logger = logging.getLogger(__name__)


def _load_csv(path: Path, required: set[str]) -> pd.DataFrame:
    """Read a CSV as stripped strings and check its columns."""
    if not path.exists():
        raise FileNotFoundError(f"{path.name} not found at {path}.")

    df = pd.read_csv(path, dtype=str).fillna('')
    # Strip all strings and headers
    df.columns = [c.strip() for c in df.columns]
    for col in df.columns:
        df[col] = df[col].astype(str).str.strip()

    missing = required - set(df.columns)
    if missing:
        raise ValueError(f"{path.name} is missing columns: {', '.join(sorted(missing))}")
    return df


class Catalog:
    """
    Read-only collection of Products, in the order they were loaded.

    Lookups raise NotFoundError for unknown identifiers.
    """

    def __init__(self, products: Iterable[Product]):
        self._products = tuple(products)
        self._by_id: dict[str, Product] = {}
        for product in self._products:
            if product.product_id in self._by_id:
                raise ValueError(f"Duplicate product id '{product.product_id}' in catalog")
            self._by_id[product.product_id] = product

    @classmethod
    def from_csv(cls, products_path: Path, options_path: Optional[Path] = None) -> 'Catalog':
        """Build the catalog from a products CSV and an optional options CSV."""
        products_df = _load_csv(products_path, {'product_id', 'name', 'base_price'})

        options_by_product: dict[str, list[CustomizationOption]] = {}
        if options_path is not None:
            options_df = _load_csv(options_path, {'product_id', 'option_id', 'name', 'price_delta'})
            for _, row in options_df.iterrows():
                if not row['option_id']:
                    continue
                options_by_product.setdefault(row['product_id'], []).append(
                    CustomizationOption(
                        option_id=row['option_id'],
                        name=row['name'] or row['option_id'],
                        price_delta=to_decimal(row['price_delta'] or '0'),
                    )
                )

        products = []
        for _, row in products_df.iterrows():
            if not row['product_id']:
                continue
            products.append(Product(
                product_id=row['product_id'],
                name=row['name'] or row['product_id'],
                base_price=to_decimal(row['base_price']),
                options=tuple(options_by_product.pop(row['product_id'], [])),
                category=row.get('category', ''),
            ))

        for orphan in options_by_product:
            logger.warning("Options reference unknown product '%s'; ignored", orphan)

        catalog = cls(products)
        logger.info("Loaded catalog with %d products from %s", len(catalog), products_path)
        return catalog

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> 'Catalog':
        settings = settings or get_settings()
        return cls.from_csv(settings.products_csv, settings.options_csv)

    def products(self) -> tuple[Product, ...]:
        return self._products

    def categories(self) -> list[str]:
        """Distinct product categories, in catalog order."""
        return list(dict.fromkeys(p.category for p in self._products if p.category))

    def find_product(self, product_id: str) -> Product:
        product = self._by_id.get(str(product_id).strip())
        if product is None:
            raise NotFoundError(f"Product '{product_id}' not found in catalog")
        return product

    def find_option(self, product_id: str, option_id: str) -> Decimal:
        """Return the price delta of one of a product's options."""
        product = self.find_product(product_id)
        option = product.get_option(option_id)
        if option is None:
            raise NotFoundError(f"Option '{option_id}' not offered for {product.name}")
        return option.price_delta

    def __len__(self) -> int:
        return len(self._products)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._by_id

    def __iter__(self):
        return iter(self._products)
