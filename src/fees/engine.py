"""FeeEngine — валидация fee rate и расчёт комиссий

Последний рубеж перед composer: каждая сумма и ставка проходит
через точную десятичную арифметику ядра.

Операции:
- validate_fee_rate: fee rate в допустимом диапазоне
- calculate_transaction_fee: размер и комиссия (всегда округление вверх)
- validate_fee_with_balance: сумма + комиссия покрываются балансом
- estimate_fee_rate: ставка по приоритету low/medium/high
- validate_cpfp_fee: ставка child транзакции для CPFP
- is_reasonable_fee_rate: ставка не завышена относительно сети

Ни одна операция не бросает исключений на некорректный пользовательский
ввод: результат — ValidationResult с error. ValueError бросается только
при ошибке программиста (отрицательные размеры, неизвестный приоритет,
бесконечный fee rate в calculate_transaction_fee).
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional, Union

from src.core.domain.results import FeeEstimate, ValidationResult
from src.core.domain.units import from_satoshis
from src.core.logging import get_logger
from src.core.math.arithmetic import (
    add,
    divide,
    multiply,
    round_up,
    subtract,
    to_plain_string,
)
from src.core.math.decimal_parser import (
    NumericInput,
    is_special_value_literal,
    to_decimal,
)
from src.fees.config import FeeConfig

logger = get_logger(__name__)

# Ставка из таблицы возвращается как есть (int, float или Decimal)
FeeRateValue = Union[Decimal, int, float, str]

_PARENT_SUFFICIENT = "Parent transaction already has sufficient fee rate"
_INVALID_BALANCE_INPUT = "Invalid amount, fee, or balance"


# =============================================================================
# ENUMS
# =============================================================================


class FeePriority(str, Enum):
    """Приоритет подтверждения транзакции"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# =============================================================================
# FEE ENGINE
# =============================================================================


class FeeEngine:
    """FeeEngine: stateless валидация комиссий.

    Экземпляр хранит только неизменяемую конфигурацию, поэтому один
    объект безопасно использовать из любого количества форм и потоков.
    """

    def __init__(self, config: FeeConfig | None = None):
        """Инициализация FeeEngine.

        Args:
            config: конфигурация (опционально, используется default)
        """
        self.config = config or FeeConfig()

    # -------------------------------------------------------------------------
    # FEE RATE
    # -------------------------------------------------------------------------

    def validate_fee_rate(
        self,
        rate: NumericInput,
        min_rate: NumericInput = None,
        max_rate: NumericInput = None,
        warn_high_fee: bool = True,
    ) -> ValidationResult:
        """Валидация fee rate.

        Порядок проверок:
        1. Пустой ввод → "Fee rate is required"
        2. Ноль (в т.ч. parse-fallback для NaN и мусора) → "cannot be zero"
        3. Бесконечность → "must be a valid number"
        4. Отрицательное → "cannot be negative"
        5. Диапазон [min_rate, max_rate]

        Args:
            rate: fee rate (sat/vB), сырой ввод
            min_rate: минимум (default: config.min_fee_rate)
            max_rate: максимум (default: config.max_fee_rate)
            warn_high_fee: предупреждать о ставке выше high_fee_rate_warning

        Returns:
            ValidationResult с sats_per_vbyte при успехе
        """
        if rate is None or (isinstance(rate, str) and rate == ""):
            return self._rejected("Fee rate is required")

        value = to_decimal(rate)

        # Ноль проверяется до конечности: NaN и мусор уже схлопнуты в ноль
        if value.is_zero():
            return self._rejected("Fee rate cannot be zero")

        if not value.is_finite():
            return self._rejected("Fee rate must be a valid number")

        if value < 0:
            return self._rejected("Fee rate cannot be negative")

        minimum = self.config.min_fee_rate if min_rate is None else to_decimal(min_rate)
        maximum = self.config.max_fee_rate if max_rate is None else to_decimal(max_rate)

        if value < minimum:
            return self._rejected(
                f"Fee rate too low (minimum {to_plain_string(minimum)} sat/vB)"
            )

        if value > maximum:
            return self._rejected(
                f"Fee rate too high (maximum {to_plain_string(maximum)} sat/vB)"
            )

        warning = None
        if warn_high_fee and value > self.config.high_fee_rate_warning:
            warning = (
                f"This is a high fee rate ({to_plain_string(value)} sat/vB). "
                "Please double-check before sending."
            )

        return ValidationResult(is_valid=True, warning=warning, sats_per_vbyte=value)

    def estimate_fee_rate(
        self,
        priority: Union[FeePriority, str],
        custom_rates: Optional[Mapping[str, FeeRateValue]] = None,
    ) -> FeeRateValue:
        """Оценка fee rate по приоритету.

        Без таблицы ставок high = default * priority_fee_multiplier (1.5).
        С таблицей (даже пустой) отсутствующий high = default * 2.

        Args:
            priority: low / medium / high
            custom_rates: таблица ставок {"low": .., "medium": .., "high": ..}

        Returns:
            Ставка из таблицы (как есть) или значение по умолчанию

        Raises:
            ValueError: Неизвестный приоритет
        """
        priority = FeePriority(priority)
        config = self.config

        if custom_rates is None:
            defaults = {
                FeePriority.LOW: config.min_fee_rate,
                FeePriority.MEDIUM: config.default_fee_rate,
                FeePriority.HIGH: config.default_fee_rate * config.priority_fee_multiplier,
            }
            return defaults[priority]

        fallbacks = {
            FeePriority.LOW: config.min_fee_rate,
            FeePriority.MEDIUM: config.default_fee_rate,
            FeePriority.HIGH: config.default_fee_rate * config.custom_high_fallback_multiplier,
        }
        custom = custom_rates.get(priority.value)
        return fallbacks[priority] if custom is None else custom

    def is_reasonable_fee_rate(
        self,
        rate: NumericInput,
        network_rate: NumericInput = None,
    ) -> bool:
        """Проверка, что fee rate не завышен.

        Без network_rate: min_fee_rate <= rate <= high_fee_rate_warning.
        С network_rate: min_fee_rate <= rate <= network_rate * 10.
        """
        value = to_decimal(rate)

        if network_rate is None:
            upper = self.config.high_fee_rate_warning
        else:
            upper = multiply(network_rate, self.config.network_rate_reasonable_mult)

        return self.config.min_fee_rate <= value <= upper

    # -------------------------------------------------------------------------
    # TRANSACTION FEE
    # -------------------------------------------------------------------------

    def calculate_transaction_fee(
        self,
        inputs: int,
        outputs: int,
        fee_rate: NumericInput,
        input_size: int | None = None,
        output_size: int | None = None,
        overhead: int | None = None,
    ) -> FeeEstimate:
        """Оценка размера и комиссии транзакции.

        estimated_size = inputs * input_size + outputs * output_size + overhead
        fee = ceil(estimated_size * fee_rate)

        Комиссия всегда округляется вверх: движок никогда не недобирает.

        Args:
            inputs: количество входов
            outputs: количество выходов
            fee_rate: fee rate (sat/vB), уже прошедший validate_fee_rate
            input_size: размер входа (default: config.input_size)
            output_size: размер выхода (default: config.output_size)
            overhead: фиксированный overhead (default: config.overhead)

        Returns:
            FeeEstimate; warning если fee > high_fee_warning_sats

        Raises:
            ValueError: отрицательные количества/размеры или бесконечный fee_rate
        """
        input_size = self.config.input_size if input_size is None else input_size
        output_size = self.config.output_size if output_size is None else output_size
        overhead = self.config.overhead if overhead is None else overhead

        for name, value in (
            ("inputs", inputs),
            ("outputs", outputs),
            ("input_size", input_size),
            ("output_size", output_size),
            ("overhead", overhead),
        ):
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")

        rate = to_decimal(fee_rate)
        if not rate.is_finite():
            raise ValueError(f"fee_rate must be finite, got {rate}")

        estimated_size = inputs * input_size + outputs * output_size + overhead
        fee = int(round_up(multiply(estimated_size, rate)))

        warning = None
        threshold = self.config.high_fee_warning_sats
        if fee > threshold:
            threshold_btc = from_satoshis(threshold, remove_trailing_zeros=True)
            warning = f"Fee exceeds {threshold_btc} BTC ({fee} satoshis)"

        return FeeEstimate(
            fee=fee,
            estimated_size=estimated_size,
            fee_rate=rate,
            warning=warning,
        )

    def validate_fee_with_balance(
        self,
        amount: NumericInput,
        fee: NumericInput,
        balance: NumericInput,
    ) -> ValidationResult:
        """Проверка, что amount + fee покрываются балансом.

        Литералы NaN/Infinity проверяются до разбора: to_decimal
        превратил бы "NaN" в ноль.

        Args:
            amount: сумма отправки (сатоши)
            fee: комиссия (сатоши)
            balance: доступный баланс (сатоши, строка от API)

        Returns:
            ValidationResult с total_required при успехе;
            при нехватке error содержит точную недостачу
        """
        raw_values = (amount, fee, balance)
        if any(is_special_value_literal(value) for value in raw_values):
            return self._rejected(_INVALID_BALANCE_INPUT)

        amount_value, fee_value, balance_value = (to_decimal(value) for value in raw_values)
        if not (amount_value.is_finite() and fee_value.is_finite() and balance_value.is_finite()):
            return self._rejected(_INVALID_BALANCE_INPUT)

        total_required = add(amount_value, fee_value)

        if total_required > balance_value:
            shortfall = subtract(total_required, balance_value)
            return self._rejected(
                f"Insufficient balance: need {to_plain_string(shortfall)} more satoshis",
                total_required=total_required,
            )

        return ValidationResult(is_valid=True, total_required=total_required)

    # -------------------------------------------------------------------------
    # CPFP
    # -------------------------------------------------------------------------

    def validate_cpfp_fee(
        self,
        child_rate: NumericInput,
        parent_rate: NumericInput,
        child_size: NumericInput,
        parent_size: NumericInput,
    ) -> ValidationResult:
        """Расчёт ставки child транзакции для Child-Pays-For-Parent.

        child_rate — целевая ставка пакета (parent + child).

        combined_size = child_size + parent_size
        required_child_fee = child_rate * combined_size - parent_rate * parent_size
        effective_rate = required_child_fee / child_size

        Args:
            child_rate: целевая суммарная ставка (sat/vB)
            parent_rate: текущая ставка parent (sat/vB)
            child_size: размер child (vbytes)
            parent_size: размер parent (vbytes)

        Returns:
            ValidationResult с effective_rate при успехе
        """
        target_rate = to_decimal(child_rate)
        parent = to_decimal(parent_rate)

        if parent >= target_rate:
            return self._rejected(_PARENT_SUFFICIENT)

        combined_size = add(child_size, parent_size)
        parent_fee = multiply(parent, parent_size)
        required_total_fee = multiply(target_rate, combined_size)
        required_child_fee = subtract(required_total_fee, parent_fee)

        if required_child_fee <= 0:
            return self._rejected(_PARENT_SUFFICIENT)

        effective_rate = divide(required_child_fee, child_size)

        if effective_rate > self.config.max_fee_rate:
            return self._rejected(
                f"Required fee rate too high: {to_plain_string(effective_rate)} sat/vB"
            )

        return ValidationResult(is_valid=True, effective_rate=effective_rate)

    # -------------------------------------------------------------------------

    def _rejected(self, error: str, **fields: Any) -> ValidationResult:
        """Создание invalid result.

        Args:
            error: сообщение для формы
            fields: производные поля, известные на момент отказа

        Returns:
            ValidationResult с is_valid=False
        """
        logger.debug("fee_validation_rejected", error=error)
        return ValidationResult(is_valid=False, error=error, **fields)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

_DEFAULT_ENGINE = FeeEngine()


def validate_fee_rate(
    rate: NumericInput,
    min_rate: NumericInput = None,
    max_rate: NumericInput = None,
    warn_high_fee: bool = True,
) -> ValidationResult:
    """Валидация fee rate с конфигурацией по умолчанию."""
    return _DEFAULT_ENGINE.validate_fee_rate(rate, min_rate, max_rate, warn_high_fee)


def calculate_transaction_fee(
    inputs: int,
    outputs: int,
    fee_rate: NumericInput,
    input_size: int | None = None,
    output_size: int | None = None,
    overhead: int | None = None,
) -> FeeEstimate:
    """Оценка комиссии с конфигурацией по умолчанию."""
    return _DEFAULT_ENGINE.calculate_transaction_fee(
        inputs, outputs, fee_rate, input_size, output_size, overhead
    )


def validate_fee_with_balance(
    amount: NumericInput,
    fee: NumericInput,
    balance: NumericInput,
) -> ValidationResult:
    """Проверка баланса с конфигурацией по умолчанию."""
    return _DEFAULT_ENGINE.validate_fee_with_balance(amount, fee, balance)


def estimate_fee_rate(
    priority: Union[FeePriority, str],
    custom_rates: Optional[Mapping[str, FeeRateValue]] = None,
) -> FeeRateValue:
    """Оценка fee rate с конфигурацией по умолчанию."""
    return _DEFAULT_ENGINE.estimate_fee_rate(priority, custom_rates)


def validate_cpfp_fee(
    child_rate: NumericInput,
    parent_rate: NumericInput,
    child_size: NumericInput,
    parent_size: NumericInput,
) -> ValidationResult:
    """CPFP расчёт с конфигурацией по умолчанию."""
    return _DEFAULT_ENGINE.validate_cpfp_fee(child_rate, parent_rate, child_size, parent_size)


def is_reasonable_fee_rate(
    rate: NumericInput,
    network_rate: NumericInput = None,
) -> bool:
    """Проверка разумности ставки с конфигурацией по умолчанию."""
    return _DEFAULT_ENGINE.is_reasonable_fee_rate(rate, network_rate)
