"""
Coffee POS Package

Point-of-sale tooling for a retail coffee shop.
Builds orders from a drink catalog with per-item customizations and
prices them as Line Items → Subtotal → Tax → Total.
"""

__version__ = "1.0.0"
