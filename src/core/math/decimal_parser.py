"""
Decimal Parser — безопасный разбор денежных значений

Модуль превращает произвольный пользовательский ввод (строки из форм,
числа, значения API) в decimal.Decimal с точной base-10 семантикой:
- Удаление разделителей тысяч (запятые) и пробелов
- Строгий разбор через decimal.Decimal (без float и без регулярных выражений)
- Fail-safe: нераспознанный ввод превращается в ноль, а не в ошибку
- Нормализация отрицательного нуля

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. to_decimal никогда не возвращает NaN
2. Нераспознанный ввод → Decimal(0) (или default вызывающего)
3. Разбор линейный по длине ввода (ввод может прийти из буфера обмена)
4. Float конвертируется через str(), поэтому 0.1 → Decimal("0.1")

Строгий разбор (parse_decimal_strict) бросает DecimalParseError —
это внутренний тегированный результат. Публичная граница (to_decimal)
схлопывает ошибку в ноль, поэтому "пользователь ввёл 0" и "пользователь
ввёл мусор" снаружи неразличимы. Кому нужна проверка наличия значения,
проверяет сырой ввод сам.
"""

from decimal import Decimal, InvalidOperation
from typing import Final, Union

from src.core.logging import get_logger

logger = get_logger(__name__)

# Тип входного значения для всех числовых операций ядра
NumericInput = Union[str, int, float, Decimal, None]

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Строковые литералы специальных значений (JS-совместимые, приходят из API)
SPECIAL_VALUE_LITERALS: Final[frozenset[str]] = frozenset({"NaN", "Infinity", "-Infinity"})

# Префиксы, с которых начинаются формулы электронных таблиц
FORMULA_PREFIXES: Final[frozenset[str]] = frozenset({"=", "@", "+", "-"})

# Python-написания специальных значений (str(float("nan")) и т.п.)
_PYTHON_SPECIAL_LITERALS: Final[frozenset[str]] = frozenset(
    {"nan", "inf", "-inf", "+inf", "infinity", "-infinity", "+infinity"}
)

# Нейтральное значение для parse-fallback
NEUTRAL_VALUE: Final[Decimal] = Decimal(0)

# Граница |экспоненты| для текстового и float ввода: "1e99999999" из 10
# символов иначе разворачивается в строку из 10^8 цифр
MAX_INPUT_EXPONENT: Final[int] = 1000

# Граница для Decimal ввода: промежуточные результаты ядра
# (произведения ограниченных значений) в неё укладываются
MAX_DECIMAL_EXPONENT: Final[int] = 100_000


# =============================================================================
# EXCEPTIONS
# =============================================================================


class DecimalParseError(ValueError):
    """
    Ввод не является корректным десятичным числом.

    Бросается только parse_decimal_strict. to_decimal перехватывает
    её и возвращает нейтральное значение.
    """


# =============================================================================
# СТРОГИЙ РАЗБОР
# =============================================================================


def strip_number_formatting(text: str) -> str:
    """
    Удаление запятых и любых пробельных символов.

    Examples:
        >>> strip_number_formatting("1, 000, 000")
        '1000000'
        >>> strip_number_formatting(" 123.456 ")
        '123.456'
    """
    return "".join(text.split()).replace(",", "")


def _normalize_zero(value: Decimal) -> Decimal:
    # -0 → 0
    if value.is_zero() and value.is_signed():
        return value.copy_abs()
    return value


def _check_exponent(value: Decimal, bound: int) -> Decimal:
    if value.is_finite() and abs(value.as_tuple().exponent) > bound:
        raise DecimalParseError(f"Exponent out of range (limit {bound})")
    return value


def parse_decimal_strict(value: NumericInput, strip_formatting: bool = True) -> Decimal:
    """
    Строгий разбор значения в Decimal.

    Args:
        value: Строка, int, float или Decimal
        strip_formatting: Удалять запятые и пробелы перед разбором

    Returns:
        Decimal (конечный или ±Infinity, никогда NaN)

    Raises:
        DecimalParseError: Пустой ввод, неверный синтаксис ("+1+1",
            "=SUM(1,1)", "@NOW()"), NaN, экспонента за
            пределами MAX_INPUT_EXPONENT или неподдерживаемый тип

    Examples:
        >>> parse_decimal_strict("1,000.5")
        Decimal('1000.5')
        >>> parse_decimal_strict("Infinity")
        Decimal('Infinity')
    """
    if isinstance(value, Decimal):
        if value.is_nan():
            raise DecimalParseError("NaN is not a number")
        return _normalize_zero(_check_exponent(value, MAX_DECIMAL_EXPONENT))

    # bool является подклассом int, но не числовым вводом
    if isinstance(value, bool) or value is None:
        raise DecimalParseError(f"Unsupported input type: {type(value).__name__}")

    if isinstance(value, int):
        return Decimal(value)

    if isinstance(value, float):
        text = str(value)
    elif isinstance(value, str):
        text = strip_number_formatting(value) if strip_formatting else value.strip()
    else:
        raise DecimalParseError(f"Unsupported input type: {type(value).__name__}")

    if not text:
        raise DecimalParseError("Empty input")

    # Decimal допускает "1_000", форма ввода нет
    if "_" in text:
        raise DecimalParseError("Underscore separators are not allowed")

    try:
        result = Decimal(text)
    except InvalidOperation:
        raise DecimalParseError("Malformed decimal input") from None

    if result.is_nan():
        raise DecimalParseError("NaN is not a number")

    return _normalize_zero(_check_exponent(result, MAX_INPUT_EXPONENT))


# =============================================================================
# ПУБЛИЧНАЯ ГРАНИЦА
# =============================================================================


def is_special_value_literal(value: NumericInput) -> bool:
    """
    Проверка, что сырой ввод — литерал NaN/Infinity.

    to_decimal превращает "NaN" в ноль, поэтому операции, которым важно
    отличать такие значения, проверяют сырой ввод до разбора.
    """
    if isinstance(value, Decimal):
        return not value.is_finite()
    if isinstance(value, float):
        return value != value or value in (float("inf"), float("-inf"))
    if not isinstance(value, str):
        return False

    text = value.strip()
    return text in SPECIAL_VALUE_LITERALS or text.lower() in _PYTHON_SPECIAL_LITERALS


def to_decimal(value: NumericInput, default: str = "0") -> Decimal:
    """
    Безопасная конверсия ввода в Decimal с fallback на default.

    Args:
        value: Пользовательский ввод или значение API
        default: Значение при пустом/нераспознанном вводе (default: "0")

    Returns:
        Decimal; NaN и мусор заменяются на Decimal(default)

    Examples:
        >>> to_decimal("1, 000, 000")
        Decimal('1000000')
        >>> to_decimal("=SUM(1,1)")
        Decimal('0')
        >>> to_decimal(None, default="999")
        Decimal('999')
    """
    if value is None or (isinstance(value, str) and value == ""):
        return Decimal(default)

    try:
        return parse_decimal_strict(value)
    except DecimalParseError as exc:
        # Сам ввод не логируется: это может быть сумма кошелька
        logger.debug(
            "decimal_parse_fallback",
            reason=str(exc),
            input_type=type(value).__name__,
            input_length=len(str(value)),
        )
        return Decimal(default)


def is_valid_positive_number(
    value: str,
    allow_zero: bool = False,
    max_decimals: int = 8,
) -> bool:
    """
    Проверка, что строка из формы — корректное положительное число.

    В отличие от to_decimal не прощает мусор: формулы, разделители,
    Infinity и лишние знаки после точки отклоняются.

    Args:
        value: Сырая строка из поля ввода
        allow_zero: Допускать ноль
        max_decimals: Максимум знаков после точки в сырой строке

    Returns:
        True если значение допустимо
    """
    if not isinstance(value, str):
        return False

    stripped = value.strip()
    if stripped[:1] in FORMULA_PREFIXES:
        return False

    try:
        number = parse_decimal_strict(stripped, strip_formatting=False)
    except DecimalParseError:
        return False

    if not number.is_finite():
        return False

    if allow_zero:
        if number < 0:
            return False
    elif number <= 0:
        return False

    decimal_places = len(stripped.split(".", 1)[1]) if "." in stripped else 0
    return decimal_places <= max_decimals
