"""
Customer Service - read-only customer list for the order screens.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import pandas as pd


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Customer:
    """A loyalty customer shown on the customer list."""
    phone: str
    first_name: str
    last_name: str
    reward_points: int = 0

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __str__(self) -> str:
        return f"{self.phone} {self.full_name}"


class CustomerService:
    """Loads customers from customers.csv once and serves lookups."""

    def __init__(self, customers_csv_path: Path):
        self.customers_csv_path = customers_csv_path
        self._customers: list[Customer] = []
        self._load()

    def _load(self):
        if not self.customers_csv_path.exists():
            logger.warning("Customer list not found at %s; starting empty", self.customers_csv_path)
            return

        df = pd.read_csv(self.customers_csv_path, dtype=str).fillna('')
        df.columns = [c.strip() for c in df.columns]
        for _, row in df.iterrows():
            phone = str(row.get('phone', '')).strip()
            if not phone:
                continue
            points = str(row.get('reward_points', '')).strip()
            self._customers.append(Customer(
                phone=phone,
                first_name=str(row.get('first_name', '')).strip(),
                last_name=str(row.get('last_name', '')).strip(),
                reward_points=int(points) if points.isdigit() else 0,
            ))
        logger.info("Loaded %d customers from %s", len(self._customers), self.customers_csv_path)

    def list(self) -> list[Customer]:
        return list(self._customers)

    def find(self, phone: str) -> Optional[Customer]:
        phone = str(phone).strip()
        for customer in self._customers:
            if customer.phone == phone:
                return customer
        return None
