# src/vmoperator/providers/__init__.py
"""VM provider integrations."""
