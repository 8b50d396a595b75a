"""
Тесты для модуля Amounts

Проверяет:
1. Валидацию сумм BTC (формат, знаки, dust, границы)
2. Валидацию количеств divisible/indivisible активов
3. Проверку баланса (включая бесконечный баланс)
4. Pydantic модель AssetQuantity
5. Расчёт максимального дивиденда
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from src.core.domain.amounts import (
    MAX_ASSET_SUPPLY,
    AssetQuantity,
    calculate_max_dividend_per_unit,
    validate_amount,
    validate_balance,
    validate_quantity,
)
from src.core.domain.units import MAX_SATOSHIS

# =============================================================================
# VALIDATE AMOUNT
# =============================================================================


class TestValidateAmount:
    """Тесты для validate_amount"""

    def test_valid_amount(self) -> None:
        result = validate_amount("0.5")
        assert result.is_valid
        assert result.error is None
        assert result.satoshis == 50_000_000
        assert result.normalized == "0.5"

    def test_required(self) -> None:
        assert validate_amount("").error == "Amount is required"
        assert validate_amount(None).error == "Amount is required"

    def test_special_values_rejected(self) -> None:
        assert validate_amount("NaN").error == "Invalid amount"
        assert validate_amount("Infinity").error == "Invalid amount"
        assert validate_amount(float("inf")).error == "Invalid amount"

    def test_format_rejected(self) -> None:
        """Экспонента, разделители, формулы → неверный формат"""
        for raw in ("1e5", "1,000", "abc", "+1", "=1", "1.2.3", ".", "-"):
            result = validate_amount(raw)
            assert not result.is_valid
            assert result.error == "Invalid amount format"

    def test_negative_rejected(self) -> None:
        assert validate_amount("-1").error == "Amount cannot be negative"

    def test_zero(self) -> None:
        assert validate_amount("0").error == "Amount must be greater than zero"
        assert validate_amount("0", allow_zero=True).is_valid

    def test_too_many_decimals(self) -> None:
        result = validate_amount("0.000000001")
        assert result.error == "Maximum 8 decimal places allowed"

        assert validate_amount("1.123", decimals=2).error == "Maximum 2 decimal places allowed"

    def test_trailing_zeros_not_counted(self) -> None:
        """Хвостовые нули не считаются знаками"""
        result = validate_amount("1.5000000000")
        assert result.is_valid
        assert result.normalized == "1.5"

    def test_below_minimum(self) -> None:
        result = validate_amount("0.00000100", min_amount=1000)
        assert result.error == "Amount is below minimum (1000 satoshis)"

    def test_dust(self) -> None:
        assert validate_amount("0.00000500").is_valid
        result = validate_amount("0.00000500", allow_dust=False)
        assert result.error == "Amount is below dust limit (546 satoshis)"
        assert validate_amount("0.00000546", allow_dust=False).is_valid

    def test_above_maximum(self) -> None:
        assert validate_amount("21000000").is_valid
        result = validate_amount("21000000.00000001")
        assert result.error == f"Amount exceeds maximum ({MAX_SATOSHIS} satoshis)"

    def test_numeric_input(self) -> None:
        assert validate_amount(1).satoshis == 100_000_000
        assert validate_amount(Decimal("0.1")).satoshis == 10_000_000
        assert validate_amount(0.1).satoshis == 10_000_000


# =============================================================================
# VALIDATE QUANTITY
# =============================================================================


class TestValidateQuantity:
    """Тесты для validate_quantity"""

    def test_valid_divisible(self) -> None:
        result = validate_quantity("1.25")
        assert result.is_valid
        assert result.quantity == "1.25"
        assert result.normalized == "1.25"

    def test_required_and_special(self) -> None:
        assert validate_quantity("").error == "Quantity is required"
        assert validate_quantity("NaN").error == "Invalid quantity"
        assert validate_quantity("1e3").error == "Invalid quantity format"

    def test_negative_and_zero(self) -> None:
        assert validate_quantity("-5").error == "Quantity cannot be negative"
        assert validate_quantity("0").error == "Quantity must be greater than zero"
        assert validate_quantity("0", allow_zero=True).is_valid

    def test_indivisible_whole_numbers_only(self) -> None:
        result = validate_quantity("1.5", divisible=False)
        assert result.error == "Asset is not divisible - whole numbers only"
        assert validate_quantity("100", divisible=False).is_valid
        assert validate_quantity("100.000", divisible=False).is_valid

    def test_divisible_eight_places(self) -> None:
        assert validate_quantity("0.12345678").is_valid
        result = validate_quantity("0.123456789")
        assert result.error == "Maximum 8 decimal places allowed"

    def test_bounds(self) -> None:
        assert validate_quantity("5", min_quantity="10").error == "Quantity is below minimum (10)"
        assert validate_quantity("11", max_supply="10").error == "Quantity exceeds maximum supply (10)"
        assert validate_quantity(str(MAX_ASSET_SUPPLY), divisible=False).is_valid


# =============================================================================
# VALIDATE BALANCE
# =============================================================================


class TestValidateBalance:
    """Тесты для validate_balance"""

    def test_sufficient(self) -> None:
        result = validate_balance("1000", "1500", fee_amount="200")
        assert result.is_valid
        assert result.total_required == Decimal("1200")

    def test_insufficient(self) -> None:
        result = validate_balance("1000", "1100", fee_amount="200")
        assert not result.is_valid
        assert result.error == "Insufficient balance"

    def test_infinite_balance_covers_finite_amount(self) -> None:
        assert validate_balance("1000", "Infinity").is_valid

    def test_special_values_rejected(self) -> None:
        assert validate_balance("NaN", "1000").error == "Invalid amount or balance"
        assert validate_balance("1000", "NaN").error == "Invalid amount or balance"
        assert validate_balance("Infinity", "Infinity").error == "Invalid amount or balance"
        assert validate_balance("1000", "-Infinity").error == "Invalid amount or balance"


# =============================================================================
# ASSET QUANTITY MODEL
# =============================================================================


class TestAssetQuantity:
    """Тесты для AssetQuantity"""

    def test_divisible(self) -> None:
        quantity = AssetQuantity(raw=150_000_000, divisible=True)
        assert quantity.normalized() == Decimal("1.5")
        assert quantity.display() == "1.50000000"

    def test_indivisible(self) -> None:
        quantity = AssetQuantity(raw=42, divisible=False)
        assert quantity.normalized() == Decimal("42")
        assert quantity.display() == "42"

    def test_from_display(self) -> None:
        assert AssetQuantity.from_display("1.5", divisible=True).raw == 150_000_000
        assert AssetQuantity.from_display("7.9", divisible=False).raw == 7

    def test_from_display_infinite_raises(self) -> None:
        with pytest.raises(ValueError, match="must be finite"):
            AssetQuantity.from_display("Infinity", divisible=True)

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AssetQuantity(raw=-1, divisible=True)

    def test_max_supply_enforced(self) -> None:
        AssetQuantity(raw=MAX_ASSET_SUPPLY, divisible=False)
        with pytest.raises(ValidationError, match="exceeds maximum supply"):
            AssetQuantity(raw=MAX_ASSET_SUPPLY + 1, divisible=False)

    def test_immutable(self) -> None:
        quantity = AssetQuantity(raw=1, divisible=True)
        with pytest.raises(ValidationError):
            quantity.raw = 2  # type: ignore[misc]


class TestMaxDividendPerUnit:
    """Тесты для calculate_max_dividend_per_unit"""

    def test_divisible_supply(self) -> None:
        assert calculate_max_dividend_per_unit("1000", "100000000", True) == Decimal("1000")

    def test_indivisible_supply(self) -> None:
        assert calculate_max_dividend_per_unit("500", "100", False) == Decimal("5")
        assert calculate_max_dividend_per_unit("1", "3", False) == Decimal("0.33333333")

    def test_zero_supply(self) -> None:
        assert calculate_max_dividend_per_unit("1000", "0", True) == 0
        assert calculate_max_dividend_per_unit("1000", "abc", False) == 0
