"""
Results — результаты валидаций и расчётов ядра

Каждая операция, которая может не пройти валидацию, возвращает
ValidationResult вместо исключения. Ошибка (error) блокирует операцию,
предупреждение (warning) носит рекомендательный характер.

to_dict() формирует JSON payload для форм (camelCase ключи, десятичные
значения строками, отсутствующие поля опускаются). Формат payload
зафиксирован контрактами contracts/schema/*.json.
"""

from dataclasses import dataclass, fields
from decimal import Decimal
from typing import Any, Dict, Optional

from src.core.math.arithmetic import to_plain_string

_PAYLOAD_KEYS: Dict[str, str] = {
    "is_valid": "isValid",
    "sats_per_vbyte": "satsPerVByte",
    "total_required": "totalRequired",
    "effective_rate": "effectiveRate",
    "estimated_size": "estimatedSize",
    "fee_rate": "feeRate",
}


def _to_payload(instance: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    for field in fields(instance):
        value = getattr(instance, field.name)
        if value is None:
            continue
        if isinstance(value, Decimal):
            value = to_plain_string(value)
        payload[_PAYLOAD_KEYS.get(field.name, field.name)] = value
    return payload


@dataclass(frozen=True)
class ValidationResult:
    """Результат валидации."""

    is_valid: bool
    error: Optional[str] = None
    warning: Optional[str] = None

    # Производные поля (заполняются только нужные операции)
    sats_per_vbyte: Optional[Decimal] = None  # validate_fee_rate
    total_required: Optional[Decimal] = None  # validate_fee_with_balance
    effective_rate: Optional[Decimal] = None  # validate_cpfp_fee
    satoshis: Optional[int] = None  # validate_amount
    quantity: Optional[str] = None  # validate_quantity
    normalized: Optional[str] = None  # validate_amount / validate_quantity

    @classmethod
    def failure(cls, error: str) -> "ValidationResult":
        """Создание invalid result."""
        return cls(is_valid=False, error=error)

    def to_dict(self) -> Dict[str, Any]:
        return _to_payload(self)


@dataclass(frozen=True)
class FeeEstimate:
    """Оценка размера и комиссии транзакции."""

    fee: int  # сатоши, округлено вверх
    estimated_size: int  # vbytes
    fee_rate: Decimal  # sat/vB
    warning: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _to_payload(self)
