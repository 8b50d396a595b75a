"""
JSON Schema Contract Validators

Модуль для валидации payload, которые ядро передаёт формам и composer,
согласно формальным JSON Schema контрактам (jsonschema, Draft 2020-12).

Схемы:
- validation_result.json (ValidationResult.to_dict())
- fee_estimate.json (FeeEstimate.to_dict())
- fee_rate_table.json (таблица ставок для estimate_fee_rate)
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator

import jsonschema
from jsonschema import Draft202012Validator, ValidationError

from src.core.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Кэш контрактов payload ядра.

    По умолчанию читает contracts/schema/ в корне репозитория; каждая схема
    проходит meta-validation по Draft 2020-12 один раз при первом запросе.
    """

    def __init__(self, schema_dir: Path | None = None):
        # Корень проекта: 4 уровня вверх от этого файла
        self._schema_dir = schema_dir or (
            Path(__file__).parent.parent.parent.parent / "contracts" / "schema"
        )
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Схема контракта по имени (кэшируется).

        Args:
            schema_name: имя файла без .json, например "fee_estimate"

        Raises:
            FileNotFoundError: файла схемы нет
            ValueError: файл не проходит meta-validation
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        # Meta-validation
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        logger.debug("schema_loaded", schema=schema_name)
        self._schemas[schema_name] = schema
        return schema


_SCHEMA_LOADER: SchemaLoader | None = None


def get_schema_loader() -> SchemaLoader:
    """Общий загрузчик; создаётся при первом обращении, не при импорте."""
    global _SCHEMA_LOADER
    if _SCHEMA_LOADER is None:
        _SCHEMA_LOADER = SchemaLoader()
    return _SCHEMA_LOADER


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Проверка одного payload контракта.

    Подклассы фиксируют имя схемы; validate бросает первую найденную
    ошибку, iter_errors отдаёт все.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = get_schema_loader().load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Строгая проверка payload.

        Raises:
            ValidationError: payload нарушает контракт
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        """True, если payload соответствует контракту."""
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[ValidationError]:
        """Все нарушения контракта (пусто для корректного payload)."""
        return self.validator.iter_errors(data)


class ValidationResultValidator(ContractValidator):
    """Валидатор для validation_result контракта."""

    def __init__(self):
        super().__init__("validation_result")


class FeeEstimateValidator(ContractValidator):
    """Валидатор для fee_estimate контракта."""

    def __init__(self):
        super().__init__("fee_estimate")


class FeeRateTableValidator(ContractValidator):
    """Валидатор для fee_rate_table контракта."""

    def __init__(self):
        super().__init__("fee_rate_table")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_validation_result(data: Dict[str, Any]) -> None:
    """
    Валидация payload ValidationResult.to_dict().

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    ValidationResultValidator().validate(data)


def validate_fee_estimate(data: Dict[str, Any]) -> None:
    """
    Валидация payload FeeEstimate.to_dict().

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    FeeEstimateValidator().validate(data)


def validate_fee_rate_table(data: Dict[str, Any]) -> None:
    """
    Валидация таблицы ставок от fee estimation API.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    FeeRateTableValidator().validate(data)
