"""
Arithmetic — точная десятичная арифметика для сумм и fee rate

Модуль обеспечивает арифметику без binary floating-point ошибок:
- Сложение/вычитание/умножение точны при любой длине операндов
- Деление усекается до 8 знаков (ROUND_DOWN), деление на ноль → ±Infinity
- Явные режимы округления (ceil/floor) и округление вниз до кратного
- Сравнения сумм в сатоши

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Ни одна операция не бросает исключений на некорректный ввод
2. NaN никогда не возвращается (0 - 0 деление и Inf - Inf схлопываются)
3. Каждый вызов использует собственный decimal.Context
   (глобальный thread-local контекст не трогается)
4. Округление сумм — только вниз: ядро не завышает доступные средства
"""

from decimal import (
    MAX_EMAX,
    MIN_EMIN,
    ROUND_CEILING,
    ROUND_DOWN,
    ROUND_FLOOR,
    Context,
    Decimal,
)
from typing import Final

from src.core.logging import get_logger
from src.core.math.decimal_parser import NumericInput, to_decimal

logger = get_logger(__name__)

# =============================================================================
# ПАРАМЕТРЫ ТОЧНОСТИ
# =============================================================================

# Знаков после точки в результате деления (1 сатоши = 1e-8)
DIVISION_DECIMAL_PLACES: Final[int] = 8

# Минимальная рабочая точность (значащих цифр)
MIN_WORKING_PRECISION: Final[int] = 28

# Потолок рабочей точности: защита от ввода вида "1e999999999"
MAX_WORKING_PRECISION: Final[int] = 10_000

_DIVISION_QUANTUM: Final[Decimal] = Decimal(1).scaleb(-DIVISION_DECIMAL_PLACES)


# =============================================================================
# КОНТЕКСТ
# =============================================================================


def _working_context(*values: Decimal, extra_digits: int = 0) -> Context:
    """
    Контекст с точностью, достаточной для точного результата.

    Точность = сумма (цифры + |экспонента|) по всем конечным операндам,
    что покрывает сложение, вычитание и умножение без округления.
    """
    span = 0
    for value in values:
        if value.is_finite():
            _, digits, exponent = value.as_tuple()
            span += len(digits) + abs(exponent)

    precision = min(max(MIN_WORKING_PRECISION, span + extra_digits), MAX_WORKING_PRECISION)
    return Context(prec=precision, rounding=ROUND_DOWN, Emax=MAX_EMAX, Emin=MIN_EMIN, traps=[])


def _sanitize(result: Decimal, operation: str) -> Decimal:
    if result.is_nan():
        logger.debug("arithmetic_nan_collapsed", operation=operation)
        return Decimal(0)
    return result


def to_plain_string(value: Decimal) -> str:
    """
    Десятичная запись без экспоненты и без хвостовых нулей.

    Examples:
        >>> to_plain_string(Decimal("35.00000000"))
        '35'
        >>> to_plain_string(Decimal("1E+2"))
        '100'
    """
    if not value.is_finite():
        return str(value)

    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


# =============================================================================
# БАЗОВЫЕ ОПЕРАЦИИ
# =============================================================================


def add(augend: NumericInput, addend: NumericInput) -> Decimal:
    """Точное сложение."""
    a, b = to_decimal(augend), to_decimal(addend)
    return _sanitize(_working_context(a, b).add(a, b), "add")


def subtract(minuend: NumericInput, subtrahend: NumericInput) -> Decimal:
    """Точное вычитание."""
    a, b = to_decimal(minuend), to_decimal(subtrahend)
    return _sanitize(_working_context(a, b).subtract(a, b), "subtract")


def multiply(multiplicand: NumericInput, multiplier: NumericInput) -> Decimal:
    """
    Точное умножение.

    Examples:
        >>> multiply("0.1", "3")
        Decimal('0.3')
    """
    a, b = to_decimal(multiplicand), to_decimal(multiplier)
    return _sanitize(_working_context(a, b).multiply(a, b), "multiply")


def divide(dividend: NumericInput, divisor: NumericInput) -> Decimal:
    """
    Деление с усечением до 8 знаков после точки.

    Деление на ноль не бросает исключение: возвращается Infinity со знаком
    делимого (0 / 0 → +Infinity), is_finite() у результата False.

    Args:
        dividend: Делимое
        divisor: Делитель

    Returns:
        Частное, усечённое к нулю до DIVISION_DECIMAL_PLACES знаков

    Examples:
        >>> divide(1, 3)
        Decimal('0.33333333')
        >>> divide(10, 0).is_finite()
        False
    """
    a, b = to_decimal(dividend), to_decimal(divisor)

    if b.is_zero():
        if a.is_signed() and not a.is_zero():
            return Decimal("-Infinity")
        return Decimal("Infinity")

    context = _working_context(a, b, extra_digits=DIVISION_DECIMAL_PLACES + 2)
    quotient = _sanitize(context.divide(a, b), "divide")

    if not quotient.is_finite():
        return quotient

    truncated = quotient.quantize(_DIVISION_QUANTUM, rounding=ROUND_DOWN, context=context)
    # Частное длиннее MAX_WORKING_PRECISION не квантуется
    return quotient if truncated.is_nan() else truncated


# =============================================================================
# ОКРУГЛЕНИЕ
# =============================================================================


def round_up(value: NumericInput) -> Decimal:
    """Округление вверх до целого (ceiling)."""
    return to_decimal(value).to_integral_value(rounding=ROUND_CEILING)


def round_down(value: NumericInput) -> Decimal:
    """Округление вниз до целого (floor)."""
    return to_decimal(value).to_integral_value(rounding=ROUND_FLOOR)


def round_down_to_multiple(value: NumericInput, multiple: NumericInput) -> Decimal:
    """
    Округление вниз до ближайшего кратного multiple.

    Используется для расчёта количеств диспенсера.

    Args:
        value: Исходное значение
        multiple: Шаг (берётся по модулю)

    Returns:
        Наибольшее кратное multiple, не превышающее value.
        Нулевой/бесконечный шаг или бесконечное value → Decimal(0)

    Examples:
        >>> round_down_to_multiple("17.5", "5")
        Decimal('15')
        >>> round_down_to_multiple("1.75", "0.5")
        Decimal('1.5')
    """
    x = to_decimal(value)
    step = to_decimal(multiple).copy_abs()

    if step.is_zero() or not step.is_finite() or not x.is_finite():
        logger.debug("round_down_to_multiple_degenerate")
        return Decimal(0)

    context = _working_context(x, step)
    quotient = context.divide_int(x, step)
    result = context.multiply(quotient, step)
    if result.is_nan():
        return Decimal(0)

    # divide_int усекает к нулю; для отрицательных значений нужен floor
    if result > x:
        result = context.subtract(result, step)

    return _sanitize(result, "round_down_to_multiple")


def format_decimal(value: NumericInput, decimals: int = 8) -> str:
    """
    Строка с фиксированным числом знаков, лишние знаки усекаются.

    Examples:
        >>> format_decimal("123.456789123456789")
        '123.45678912'
        >>> format_decimal("0")
        '0.00000000'
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")

    x = to_decimal(value)
    if not x.is_finite():
        return str(x)

    context = _working_context(x, extra_digits=decimals)
    quantized = x.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_DOWN, context=context)
    if quantized.is_nan():
        return format(x, "f")
    return format(abs(quantized) if quantized.is_zero() else quantized, "f")


# =============================================================================
# ОПЕРАЦИИ НАД САТОШИ
# =============================================================================


def subtract_satoshis(minuend: NumericInput, subtrahend: NumericInput) -> str:
    """Разность в сатоши, усечённая до целого."""
    difference = subtract(minuend, subtrahend)
    return to_plain_string(difference.to_integral_value(rounding=ROUND_DOWN))


def divide_satoshis(dividend: NumericInput, divisor: NumericInput) -> str:
    """
    Частное в сатоши, усечённое до целого.

    Деление на ноль → "Infinity".
    """
    return to_plain_string(divide(dividend, divisor).to_integral_value(rounding=ROUND_DOWN))


def is_less_than(value: NumericInput, threshold: NumericInput) -> bool:
    """value < threshold."""
    return to_decimal(value) < to_decimal(threshold)


def is_less_than_or_equal_to(value: NumericInput, threshold: NumericInput) -> bool:
    """value <= threshold."""
    return to_decimal(value) <= to_decimal(threshold)


def is_less_than_or_equal_to_zero(value: NumericInput) -> bool:
    return to_decimal(value) <= 0
