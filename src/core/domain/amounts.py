"""
Amounts — валидация сумм BTC, количеств токенов и баланса

Формы передают сюда сырой текст поля. В отличие от to_decimal
валидаторы не прощают мусор: пустое значение, NaN/Infinity, экспонента,
разделители и лишние знаки после точки дают ValidationResult с ошибкой.

AssetQuantity — immutable Pydantic модель количества актива в base units.
Делимость передаётся вызывающим (из метаданных актива).
"""

from decimal import ROUND_DOWN, Decimal
from typing import Final

from pydantic import BaseModel, Field, field_validator

from src.core.domain.results import ValidationResult
from src.core.domain.units import (
    DUST_LIMIT,
    MAX_SATOSHIS,
    SATOSHIS_PER_BTC,
    normalize_asset_quantity,
    to_base_units,
)
from src.core.math.arithmetic import add, divide, format_decimal, multiply, to_plain_string
from src.core.math.decimal_parser import (
    NumericInput,
    is_special_value_literal,
    to_decimal,
)

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Максимальное количество актива (int64)
MAX_ASSET_SUPPLY: Final[int] = 9_223_372_036_854_775_807

# Знаков после точки у divisible assets
DIVISIBLE_DECIMAL_PLACES: Final[int] = 8


# =============================================================================
# ФОРМАТ ВВОДА
# =============================================================================


def _is_ascii_digits(text: str) -> bool:
    return text.isascii() and text.isdigit()


def _is_plain_decimal(text: str) -> bool:
    """
    Проверка формата -?digits[.digits] линейным проходом.

    Экспонента, разделители и знак "+" не допускаются.
    """
    body = text[1:] if text.startswith("-") else text
    if body in ("", "."):
        return False

    integer_part, _, fraction = body.partition(".")
    return (integer_part == "" or _is_ascii_digits(integer_part)) and (
        fraction == "" or _is_ascii_digits(fraction)
    )


def _raw_text(value: NumericInput) -> str:
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value).strip()


def _fraction_digits(text: str) -> int:
    # Хвостовые нули не считаются: у "1.50" один знак
    return len(text.partition(".")[2].rstrip("0"))


# =============================================================================
# ВАЛИДАЦИЯ СУММ
# =============================================================================


def validate_amount(
    amount: NumericInput,
    allow_zero: bool = False,
    allow_dust: bool = True,
    max_amount: int = MAX_SATOSHIS,
    min_amount: int = 0,
    decimals: int = 8,
) -> ValidationResult:
    """
    Валидация суммы BTC из формы.

    Args:
        amount: Сумма в BTC (сырой ввод)
        allow_zero: Допускать ноль
        allow_dust: Допускать суммы ниже DUST_LIMIT
        max_amount: Максимум в сатоши
        min_amount: Минимум в сатоши
        decimals: Максимум знаков после точки

    Returns:
        ValidationResult с satoshis (int) и normalized (строка) при успехе
    """
    if amount is None or amount == "":
        return ValidationResult.failure("Amount is required")

    if is_special_value_literal(amount):
        return ValidationResult.failure("Invalid amount")

    text = _raw_text(amount)
    if not _is_plain_decimal(text):
        return ValidationResult.failure("Invalid amount format")

    value = to_decimal(text)

    if value < 0:
        return ValidationResult.failure("Amount cannot be negative")

    if value.is_zero() and not allow_zero:
        return ValidationResult.failure("Amount must be greater than zero")

    if _fraction_digits(text) > decimals:
        return ValidationResult.failure(f"Maximum {decimals} decimal places allowed")

    satoshis = multiply(value, SATOSHIS_PER_BTC).to_integral_value(rounding=ROUND_DOWN)

    if satoshis < min_amount:
        return ValidationResult.failure(f"Amount is below minimum ({min_amount} satoshis)")

    if not allow_dust and satoshis < DUST_LIMIT:
        return ValidationResult.failure(f"Amount is below dust limit ({DUST_LIMIT} satoshis)")

    if satoshis > max_amount:
        return ValidationResult.failure(f"Amount exceeds maximum ({max_amount} satoshis)")

    return ValidationResult(
        is_valid=True,
        satoshis=int(satoshis),
        normalized=to_plain_string(value),
    )


def validate_quantity(
    quantity: NumericInput,
    divisible: bool = True,
    allow_zero: bool = False,
    max_supply: str = str(MAX_ASSET_SUPPLY),
    min_quantity: str = "0",
) -> ValidationResult:
    """
    Валидация количества токена из формы.

    Args:
        quantity: Количество (сырой ввод, в отображаемых единицах)
        divisible: Делимость актива
        allow_zero: Допускать ноль
        max_supply: Максимальное количество
        min_quantity: Минимальное количество

    Returns:
        ValidationResult с quantity и normalized при успехе
    """
    if quantity is None or quantity == "":
        return ValidationResult.failure("Quantity is required")

    if is_special_value_literal(quantity):
        return ValidationResult.failure("Invalid quantity")

    text = _raw_text(quantity)
    if not _is_plain_decimal(text):
        return ValidationResult.failure("Invalid quantity format")

    value = to_decimal(text)

    if value < 0:
        return ValidationResult.failure("Quantity cannot be negative")

    if value.is_zero() and not allow_zero:
        return ValidationResult.failure("Quantity must be greater than zero")

    fraction_digits = _fraction_digits(text)

    if not divisible and fraction_digits > 0:
        return ValidationResult.failure("Asset is not divisible - whole numbers only")

    if divisible and fraction_digits > DIVISIBLE_DECIMAL_PLACES:
        return ValidationResult.failure(
            f"Maximum {DIVISIBLE_DECIMAL_PLACES} decimal places allowed"
        )

    if value < to_decimal(min_quantity):
        return ValidationResult.failure(f"Quantity is below minimum ({min_quantity})")

    if value > to_decimal(max_supply):
        return ValidationResult.failure(f"Quantity exceeds maximum supply ({max_supply})")

    normalized = to_plain_string(value)
    return ValidationResult(is_valid=True, quantity=normalized, normalized=normalized)


def validate_balance(
    amount: NumericInput,
    balance: NumericInput,
    fee_amount: NumericInput = 0,
) -> ValidationResult:
    """
    Проверка, что сумма (плюс комиссия) покрывается балансом.

    Бесконечный баланс покрывает любую конечную сумму.
    """
    amount_special = is_special_value_literal(amount)
    balance_special = is_special_value_literal(balance)

    if amount_special or balance_special:
        balance_unbounded = balance_special and to_decimal(balance) == Decimal("Infinity")
        if balance_unbounded and not amount_special:
            return ValidationResult(is_valid=True)
        return ValidationResult.failure("Invalid amount or balance")

    total_required = add(amount, fee_amount)

    if total_required > to_decimal(balance):
        return ValidationResult.failure("Insufficient balance")

    return ValidationResult(is_valid=True, total_required=total_required)


# =============================================================================
# ASSET QUANTITY MODEL
# =============================================================================


class AssetQuantity(BaseModel):
    """
    Количество актива в base units.

    Immutable модель (frozen=True). Для divisible активов raw содержит
    8 подразумеваемых знаков (как сатоши), для indivisible — целое число.
    """

    raw: int = Field(..., ge=0, description="Количество в base units")
    divisible: bool = Field(..., description="Делимость актива (из метаданных)")

    model_config = {"frozen": True}

    @field_validator("raw")
    @classmethod
    def validate_max_supply(cls, v: int) -> int:
        """Проверка верхней границы количества (int64)."""
        if v > MAX_ASSET_SUPPLY:
            raise ValueError(f"raw quantity {v} exceeds maximum supply {MAX_ASSET_SUPPLY}")
        return v

    @classmethod
    def from_display(cls, value: NumericInput, divisible: bool) -> "AssetQuantity":
        """
        Создание из отображаемого количества (дробные base units усекаются).

        Raises:
            ValueError: Если количество бесконечное, отрицательное или больше int64
        """
        base_units = to_decimal(to_base_units(value, divisible))
        if not base_units.is_finite():
            raise ValueError("Asset quantity must be finite")
        return cls(raw=int(base_units), divisible=divisible)

    def normalized(self) -> Decimal:
        """Отображаемое количество."""
        return normalize_asset_quantity(self.raw, self.divisible)

    def display(self) -> str:
        """Строка для отображения: 8 знаков для divisible, целое иначе."""
        if self.divisible:
            return format_decimal(self.normalized(), DIVISIBLE_DECIMAL_PLACES)
        return str(self.raw)


def calculate_max_dividend_per_unit(
    dividend_balance: NumericInput,
    asset_supply: NumericInput,
    asset_is_divisible: bool,
) -> Decimal:
    """
    Максимальный дивиденд на единицу актива.

    dividend_balance / normalized(asset_supply); нулевой supply → 0.

    Examples:
        >>> calculate_max_dividend_per_unit("1000", "100000000", True)
        Decimal('1000.00000000')
        >>> calculate_max_dividend_per_unit("500", "100", False)
        Decimal('5.00000000')
    """
    normalized_supply = normalize_asset_quantity(asset_supply, asset_is_divisible)

    if normalized_supply.is_zero():
        return Decimal(0)

    return divide(dividend_balance, normalized_supply)
