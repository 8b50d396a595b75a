"""
Core math modules

Точные десятичные примитивы: разбор ввода, арифметика, бакеты телеметрии.
"""

# Decimal Parser
from src.core.math.decimal_parser import (
    FORMULA_PREFIXES,
    MAX_DECIMAL_EXPONENT,
    MAX_INPUT_EXPONENT,
    NEUTRAL_VALUE,
    SPECIAL_VALUE_LITERALS,
    DecimalParseError,
    NumericInput,
    is_special_value_literal,
    is_valid_positive_number,
    parse_decimal_strict,
    strip_number_formatting,
    to_decimal,
)

# Arithmetic
from src.core.math.arithmetic import (
    DIVISION_DECIMAL_PLACES,
    MAX_WORKING_PRECISION,
    add,
    divide,
    divide_satoshis,
    format_decimal,
    is_less_than,
    is_less_than_or_equal_to,
    is_less_than_or_equal_to_zero,
    multiply,
    round_down,
    round_down_to_multiple,
    round_up,
    subtract,
    subtract_satoshis,
    to_plain_string,
)

# Privacy Buckets
from src.core.math.privacy_buckets import (
    BTC_AMOUNT_BUCKETS,
    TOP_BUCKET,
    get_amount_bucket,
)

__all__ = [
    # Decimal Parser: Constants
    "FORMULA_PREFIXES",
    "MAX_DECIMAL_EXPONENT",
    "MAX_INPUT_EXPONENT",
    "NEUTRAL_VALUE",
    "SPECIAL_VALUE_LITERALS",
    # Decimal Parser: Types
    "DecimalParseError",
    "NumericInput",
    # Decimal Parser: Functions
    "is_special_value_literal",
    "is_valid_positive_number",
    "parse_decimal_strict",
    "strip_number_formatting",
    "to_decimal",
    # Arithmetic: Constants
    "DIVISION_DECIMAL_PLACES",
    "MAX_WORKING_PRECISION",
    # Arithmetic: Functions
    "add",
    "divide",
    "divide_satoshis",
    "format_decimal",
    "is_less_than",
    "is_less_than_or_equal_to",
    "is_less_than_or_equal_to_zero",
    "multiply",
    "round_down",
    "round_down_to_multiple",
    "round_up",
    "subtract",
    "subtract_satoshis",
    "to_plain_string",
    # Privacy Buckets
    "BTC_AMOUNT_BUCKETS",
    "TOP_BUCKET",
    "get_amount_bucket",
]
