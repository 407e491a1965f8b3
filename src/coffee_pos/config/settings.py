"""
Centralized settings and path configuration for the coffee POS.

Values are resolved in order: defaults, then appsettings.json at the
project root (if present), then COFFEE_POS_* environment variables.
"""
import json
import logging
import os
from pathlib import Path
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional


logger = logging.getLogger(__name__)

ENV_PREFIX = "COFFEE_POS_"
APPSETTINGS_FILE = "appsettings.json"

# COFFEE_POS_<name> → settings key
ENV_KEYS = {
    'TAX_RATE': 'tax_rate',
    'PRECISION': 'currency_precision',
    'ROUNDING': 'rounding_mode',
    'SHOP_NAME': 'shop_name',
    'LOG_LEVEL': 'log_level',
    'DATA_DIR': 'data_dir',
}


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    # Walk up from this file to find the project root
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


def get_data_dir() -> Path:
    """Directory holding the bundled catalog and customer CSV files."""
    return Path(__file__).resolve().parent.parent / 'data'


def _parse_tax_rate(value) -> Decimal:
    if isinstance(value, bool):
        raise ValueError(f"Invalid tax rate: {value!r}")
    try:
        rate = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Invalid tax rate: {value!r}") from None
    if not rate.is_finite():
        raise ValueError(f"Invalid tax rate: {value!r}")
    return rate


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Project paths
    project_root: Path

    # Input files
    products_csv: Path
    options_csv: Path
    customers_csv: Path

    # Shop
    shop_name: str = "Jeff's Coffee Shop"

    # Pricing policy
    tax_rate: Decimal = Decimal("0.0825")
    currency_precision: int = 2
    rounding_mode: str = "half_up"

    log_level: str = "INFO"

    @classmethod
    def load(
        cls,
        project_root: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> 'Settings':
        """Load settings from the project structure, appsettings.json and environment."""
        root = project_root or get_project_root()
        environ = os.environ if environ is None else environ

        values: dict = {}
        appsettings_path = root / APPSETTINGS_FILE
        if appsettings_path.exists():
            with open(appsettings_path, 'r', encoding='utf-8') as f:
                values.update(json.load(f))
            logger.info("Loaded %s", appsettings_path)

        for env_name, key in ENV_KEYS.items():
            env_value = environ.get(ENV_PREFIX + env_name)
            if env_value:
                values[key] = env_value

        data_dir = Path(values['data_dir']) if values.get('data_dir') else get_data_dir()
        if not data_dir.is_absolute():
            data_dir = root / data_dir

        return cls(
            project_root=root,
            products_csv=data_dir / 'products.csv',
            options_csv=data_dir / 'options.csv',
            customers_csv=data_dir / 'customers.csv',
            shop_name=str(values.get('shop_name', cls.shop_name)),
            tax_rate=_parse_tax_rate(values.get('tax_rate', cls.tax_rate)),
            currency_precision=int(values.get('currency_precision', cls.currency_precision)),
            rounding_mode=str(values.get('rounding_mode', cls.rounding_mode)).strip().lower(),
            log_level=str(values.get('log_level', cls.log_level)).upper(),
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def setup_logging(settings: Optional[Settings] = None):
    """Configure root logging once from the settings log level."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
