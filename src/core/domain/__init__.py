"""
Domain models and value objects.

Contains unit conversion, amount/quantity validation and result types.
"""

from src.core.domain.amounts import (
    MAX_ASSET_SUPPLY,
    AssetQuantity,
    calculate_max_dividend_per_unit,
    validate_amount,
    validate_balance,
    validate_quantity,
)
from src.core.domain.results import FeeEstimate, ValidationResult
from src.core.domain.units import (
    BTC_DECIMAL_PLACES,
    DUST_LIMIT,
    MAX_SATOSHIS,
    SATOSHIS_PER_BTC,
    from_satoshis,
    is_dust_amount,
    normalize_asset_quantity,
    to_base_units,
    to_satoshis,
)

__all__ = [
    # Units module
    "SATOSHIS_PER_BTC",
    "BTC_DECIMAL_PLACES",
    "MAX_SATOSHIS",
    "DUST_LIMIT",
    "to_satoshis",
    "from_satoshis",
    "normalize_asset_quantity",
    "to_base_units",
    "is_dust_amount",
    # Amounts module
    "MAX_ASSET_SUPPLY",
    "AssetQuantity",
    "validate_amount",
    "validate_quantity",
    "validate_balance",
    "calculate_max_dividend_per_unit",
    # Results
    "ValidationResult",
    "FeeEstimate",
]
