"""Fee Config — константы и конфигурация FeeEngine

Все числовые параметры рынка комиссий собраны в одной структуре
FeeConfig, чтобы подстраивать их под состояние mempool без изменения
логики. Единицы: fee rate — sat/vB, размеры — vbytes, суммы — сатоши.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Final


# =============================================================================
# CONSTANTS
# =============================================================================

# Диапазон допустимых fee rate (sat/vB)
MIN_FEE_RATE: Final[int] = 1
MAX_FEE_RATE: Final[int] = 5000

# Fee rate по умолчанию (medium priority)
DEFAULT_FEE_RATE: Final[int] = 10

# Множитель high priority при отсутствии таблицы ставок
PRIORITY_FEE_MULTIPLIER: Final[Decimal] = Decimal("1.5")

# Множитель high priority, если таблица передана, но high в ней нет
CUSTOM_HIGH_FALLBACK_MULTIPLIER: Final[int] = 2

# Типичные размеры P2PKH транзакции (vbytes)
TYPICAL_INPUT_SIZE: Final[int] = 148
TYPICAL_OUTPUT_SIZE: Final[int] = 34
TRANSACTION_OVERHEAD: Final[int] = 10

# Fee rate выше порога → предупреждение (не блокирует)
HIGH_FEE_RATE_WARNING: Final[int] = 100

# Комиссия выше порога (сатоши, 0.001 BTC) → предупреждение
HIGH_FEE_WARNING_SATS: Final[int] = 100_000

# Разумный fee rate не выше network_rate * множитель
NETWORK_RATE_REASONABLE_MULT: Final[int] = 10


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class FeeConfig:
    """Конфигурация FeeEngine.

    Значения по умолчанию совпадают с модульными константами.
    """

    # Fee rates (sat/vB)
    min_fee_rate: Decimal = Decimal(MIN_FEE_RATE)
    max_fee_rate: Decimal = Decimal(MAX_FEE_RATE)
    default_fee_rate: Decimal = Decimal(DEFAULT_FEE_RATE)
    priority_fee_multiplier: Decimal = PRIORITY_FEE_MULTIPLIER
    custom_high_fallback_multiplier: Decimal = Decimal(CUSTOM_HIGH_FALLBACK_MULTIPLIER)

    # Размеры (vbytes)
    input_size: int = TYPICAL_INPUT_SIZE
    output_size: int = TYPICAL_OUTPUT_SIZE
    overhead: int = TRANSACTION_OVERHEAD

    # Пороги предупреждений
    high_fee_rate_warning: Decimal = Decimal(HIGH_FEE_RATE_WARNING)
    high_fee_warning_sats: int = HIGH_FEE_WARNING_SATS
    network_rate_reasonable_mult: Decimal = Decimal(NETWORK_RATE_REASONABLE_MULT)

    def __post_init__(self) -> None:
        if self.min_fee_rate <= 0:
            raise ValueError(f"min_fee_rate must be positive, got {self.min_fee_rate}")

        if self.max_fee_rate < self.min_fee_rate:
            raise ValueError(
                f"max_fee_rate ({self.max_fee_rate}) must be >= min_fee_rate ({self.min_fee_rate})"
            )

        if not self.min_fee_rate <= self.default_fee_rate <= self.max_fee_rate:
            raise ValueError(
                f"default_fee_rate {self.default_fee_rate} outside "
                f"[{self.min_fee_rate}, {self.max_fee_rate}]"
            )

        for name in ("input_size", "output_size", "overhead", "high_fee_warning_sats"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")
