"""
Core numeric primitives, unit conversion, and validation results.

This module contains the foundational building blocks that are independent
of external systems (wallet storage, blockchain API, UI forms).
"""
