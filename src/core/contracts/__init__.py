"""
Contract Validation Module

Модуль для валидации JSON payload ядра (результаты и таблицы ставок).
"""

from .validators import (
    ContractValidator,
    FeeEstimateValidator,
    FeeRateTableValidator,
    SchemaLoader,
    ValidationResultValidator,
    get_schema_loader,
    validate_fee_estimate,
    validate_fee_rate_table,
    validate_validation_result,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "ValidationResultValidator",
    "FeeEstimateValidator",
    "FeeRateTableValidator",
    # Functions
    "get_schema_loader",
    "validate_validation_result",
    "validate_fee_estimate",
    "validate_fee_rate_table",
]
