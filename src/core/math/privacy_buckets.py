"""
Privacy Buckets — порядок величины суммы для телеметрии

Телеметрия никогда не получает точные суммы кошелька: сумма в BTC
заменяется на нижнюю границу бакета, что исключает корреляцию
событий с on-chain транзакциями.
"""

from decimal import Decimal
from typing import Final

from src.core.math.decimal_parser import NumericInput, to_decimal

# (верхняя граница BTC, исключая; значение бакета)
BTC_AMOUNT_BUCKETS: Final[tuple[tuple[Decimal, int], ...]] = (
    (Decimal("0.00001"), 0),  # dust: < 1000 sats
    (Decimal("0.001"), 1),
    (Decimal("0.01"), 100),
    (Decimal("0.1"), 1000),
    (Decimal("1"), 10000),
    (Decimal("10"), 100000),
)

# Бакет для сумм >= 10 BTC
TOP_BUCKET: Final[int] = 1000000


def get_amount_bucket(btc_amount: NumericInput) -> int:
    """
    Бакет для суммы в BTC.

    Args:
        btc_amount: Сумма в BTC (строка, число или Decimal)

    Returns:
        0, 1, 100, 1000, 10000, 100000 или 1000000

    Examples:
        >>> get_amount_bucket("0.000001")
        0
        >>> get_amount_bucket("0.5")
        10000
        >>> get_amount_bucket(25)
        1000000
    """
    amount = to_decimal(btc_amount)

    for upper_bound, bucket in BTC_AMOUNT_BUCKETS:
        if amount < upper_bound:
            return bucket

    return TOP_BUCKET
