"""
Fee Engine — валидация fee rate и расчёт комиссий Bitcoin транзакций.
"""

from src.fees.config import (
    DEFAULT_FEE_RATE,
    MAX_FEE_RATE,
    MIN_FEE_RATE,
    PRIORITY_FEE_MULTIPLIER,
    TRANSACTION_OVERHEAD,
    TYPICAL_INPUT_SIZE,
    TYPICAL_OUTPUT_SIZE,
    FeeConfig,
)
from src.fees.engine import (
    FeeEngine,
    FeePriority,
    calculate_transaction_fee,
    estimate_fee_rate,
    is_reasonable_fee_rate,
    validate_cpfp_fee,
    validate_fee_rate,
    validate_fee_with_balance,
)

__all__ = [
    # Config
    "FeeConfig",
    "MIN_FEE_RATE",
    "MAX_FEE_RATE",
    "DEFAULT_FEE_RATE",
    "PRIORITY_FEE_MULTIPLIER",
    "TYPICAL_INPUT_SIZE",
    "TYPICAL_OUTPUT_SIZE",
    "TRANSACTION_OVERHEAD",
    # Engine
    "FeeEngine",
    "FeePriority",
    "validate_fee_rate",
    "calculate_transaction_fee",
    "validate_fee_with_balance",
    "estimate_fee_rate",
    "validate_cpfp_fee",
    "is_reasonable_fee_rate",
]
