"""
Тесты для модуля Privacy Buckets

Проверяет границы бакетов (нижняя граница включается) и устойчивость
к некорректному вводу.
"""

from decimal import Decimal

from src.core.math.privacy_buckets import BTC_AMOUNT_BUCKETS, TOP_BUCKET, get_amount_bucket


class TestAmountBuckets:
    """Тесты для get_amount_bucket"""

    def test_dust_bucket(self) -> None:
        assert get_amount_bucket("0") == 0
        assert get_amount_bucket("0.000001") == 0
        assert get_amount_bucket("0.00000999") == 0

    def test_lower_bound_inclusive(self) -> None:
        """Нижняя граница каждого бакета включается"""
        assert get_amount_bucket("0.00001") == 1
        assert get_amount_bucket("0.001") == 100
        assert get_amount_bucket("0.01") == 1000
        assert get_amount_bucket("0.1") == 10000
        assert get_amount_bucket("1") == 100000
        assert get_amount_bucket("10") == 1000000

    def test_values_inside_buckets(self) -> None:
        assert get_amount_bucket("0.0005") == 1
        assert get_amount_bucket("0.005") == 100
        assert get_amount_bucket("0.05") == 1000
        assert get_amount_bucket("0.5") == 10000
        assert get_amount_bucket("9.99999999") == 100000
        assert get_amount_bucket(25) == TOP_BUCKET

    def test_upper_bound_exclusive(self) -> None:
        """Значение чуть ниже границы остаётся в предыдущем бакете"""
        for upper_bound, bucket in BTC_AMOUNT_BUCKETS:
            assert get_amount_bucket(upper_bound - Decimal("0.00000001")) == bucket

    def test_garbage_in_dust_bucket(self) -> None:
        """Нераспознанный ввод → 0 → dust бакет"""
        assert get_amount_bucket("abc") == 0
        assert get_amount_bucket(None) == 0

    def test_infinity_in_top_bucket(self) -> None:
        assert get_amount_bucket("Infinity") == TOP_BUCKET
