# src/vmoperator/utils/__init__.py
"""Shared helpers."""

from .quantity import parse_quantity, quantity_value

__all__ = ["parse_quantity", "quantity_value"]
