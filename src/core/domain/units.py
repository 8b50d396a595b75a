"""
Units — Централизованный модуль конверсии денежных единиц

Единственный допустимый способ преобразований между:
- BTC / divisible asset quantity (десятичная, 8 знаков)
- satoshis / base units (целое)
- indivisible asset quantity (целое, без масштабирования)

ЗАПРЕЩЕНО умножать/делить на 1e8 вне этого модуля.

Конверсия в сатоши всегда усекает дробные сатоши (никогда не округляет
вверх), поэтому round-trip from_satoshis(to_satoshis(x)) отличается от x
не более чем на 1 сатоши.
"""

from decimal import ROUND_DOWN, Decimal
from typing import Final, Union

from src.core.math.arithmetic import divide, format_decimal, multiply, to_plain_string
from src.core.math.decimal_parser import NumericInput, to_decimal


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# 1 BTC = 10^8 сатоши
SATOSHIS_PER_BTC: Final[int] = 100_000_000

# Знаков после точки у BTC и divisible assets
BTC_DECIMAL_PLACES: Final[int] = 8

# 21 млн BTC в сатоши
MAX_SATOSHIS: Final[int] = 2_100_000_000_000_000

# Минимальный неdust выход (сатоши)
DUST_LIMIT: Final[int] = 546

# Граница точных целых у float (IEEE 754 double): 2^53
MAX_EXACT_FLOAT_INTEGER: Final[int] = 2**53


# =============================================================================
# БАЗОВЫЕ КОНВЕРТЕРЫ
# =============================================================================


def to_satoshis(btc_amount: NumericInput) -> str:
    """
    Конверсия: BTC → сатоши

    Умножение на 10^8 с усечением дробной части (ROUND_DOWN).
    Для неотрицательных сумм совпадает с floor.

    Args:
        btc_amount: Сумма в BTC (строка из формы, число или Decimal)

    Returns:
        Целое число сатоши в виде строки (без экспоненты)

    Examples:
        >>> to_satoshis("0.00000001")
        '1'
        >>> to_satoshis("0.000000015")
        '1'
        >>> to_satoshis("21000000")
        '2100000000000000'
    """
    satoshis = multiply(btc_amount, SATOSHIS_PER_BTC)
    return to_plain_string(satoshis.to_integral_value(rounding=ROUND_DOWN))


def from_satoshis(
    satoshis: NumericInput,
    as_number: bool = False,
    remove_trailing_zeros: bool = False,
) -> Union[str, float]:
    """
    Конверсия: сатоши → BTC

    ВАЖНО: as_number=True возвращает float. Точность гарантирована только
    пока число сатоши <= MAX_EXACT_FLOAT_INTEGER (2^53 ≈ 9.007e15);
    MAX_SATOSHIS (2.1e15) в эту границу укладывается, но после деления
    на 10^8 результат — двоичная дробь и годится только для отображения.
    Для расчётов используйте строковый результат.

    Args:
        satoshis: Количество сатоши
        as_number: Вернуть float вместо строки
        remove_trailing_zeros: Убрать хвостовые нули из строки

    Returns:
        Строка с ровно 8 знаками после точки (или float)

    Examples:
        >>> from_satoshis(1)
        '0.00000001'
        >>> from_satoshis(0)
        '0.00000000'
        >>> from_satoshis("150000000", remove_trailing_zeros=True)
        '1.5'
    """
    btc = divide(satoshis, SATOSHIS_PER_BTC)

    if as_number:
        return float(btc)

    text = format_decimal(btc, BTC_DECIMAL_PLACES)
    if remove_trailing_zeros:
        return to_plain_string(Decimal(text))
    return text


def normalize_asset_quantity(raw_quantity: NumericInput, divisible: bool) -> Decimal:
    """
    Конверсия: base units актива → отображаемое количество

    Divisible: деление на 10^8. Indivisible: без изменений.
    Делимость — факт из метаданных актива, не выводится из числа.

    Examples:
        >>> normalize_asset_quantity("100000000", True)
        Decimal('1.00000000')
        >>> normalize_asset_quantity("100", False)
        Decimal('100')
    """
    if divisible:
        return divide(raw_quantity, SATOSHIS_PER_BTC)
    return to_decimal(raw_quantity)


def to_base_units(quantity: NumericInput, divisible: bool) -> str:
    """
    Конверсия: отображаемое количество → base units актива

    Divisible: как to_satoshis. Indivisible: усечение до целого.
    """
    if divisible:
        return to_satoshis(quantity)
    return to_plain_string(to_decimal(quantity).to_integral_value(rounding=ROUND_DOWN))


# =============================================================================
# ПРОВЕРКИ
# =============================================================================


def is_dust_amount(satoshis: NumericInput) -> bool:
    """
    Проверка, что выход ниже dust limit (и не нулевой).

    Args:
        satoshis: Сумма выхода в сатоши

    Returns:
        True если 0 < satoshis < DUST_LIMIT
    """
    value = to_decimal(satoshis)
    return 0 < value < DUST_LIMIT
