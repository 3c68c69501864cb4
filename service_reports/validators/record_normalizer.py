"""
service_reports/validators/record_normalizer.py

Validation and type coercion from raw rows to ServiceRecord.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Iterable, Mapping

from service_reports.config import NormalizerSettings, get_normalizer_settings
from service_reports.domain.service_record import NormalizationResult, ServiceRecord
from service_reports.errors import InvalidNumericError, MissingFieldError, RecordValidationError

logger = logging.getLogger(__name__)

FIELD_RECORD_NUMBER = "NumeroRegistro"
FIELD_INSURER_NAME = "CompaniaSeguro"
FIELD_YEAR = "Anio"
FIELD_MONTH = "Mes"
FIELD_SERVICE_COUNT = "CantidadServicios"
FIELD_REGION = "Region"
FIELD_UNIT_PRICE = "ValorPorServicio"
FIELD_COVERAGE_PERCENT = "PorcentajeCobertura"

REQUIRED_FIELDS: tuple[str, ...] = (
    FIELD_RECORD_NUMBER,
    FIELD_INSURER_NAME,
    FIELD_YEAR,
    FIELD_MONTH,
    FIELD_SERVICE_COUNT,
    FIELD_REGION,
    FIELD_UNIT_PRICE,
    FIELD_COVERAGE_PERCENT,
)

INTEGER_FIELDS: tuple[str, ...] = (FIELD_RECORD_NUMBER, FIELD_YEAR, FIELD_MONTH)
DECIMAL_FIELDS: tuple[str, ...] = (FIELD_SERVICE_COUNT, FIELD_UNIT_PRICE, FIELD_COVERAGE_PERCENT)

_DECIMAL_LITERAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


class RecordNormalizer:
    """
    Converts raw rows into ServiceRecords, all or nothing.
    """

    def __init__(self, settings: NormalizerSettings | None = None) -> None:
        self._log_validation_errors = (settings or get_normalizer_settings()).log_validation_errors

    def normalize(self, rows: Iterable[Any]) -> NormalizationResult:
        """
        Normalize every row in order, stopping at the first invalid one.

        Row numbers in errors are 1-based positions within the data rows.
        """

        records: list[ServiceRecord] = []
        for row_number, raw_row in enumerate(rows, start=1):
            try:
                records.append(self.normalize_row(raw_row, row_number=row_number))
            except RecordValidationError as exc:
                self._log_error(exc)
                return NormalizationResult.failure(exc)
        return NormalizationResult.success(tuple(records))

    def normalize_row(self, raw_row: Any, *, row_number: int) -> ServiceRecord:
        if not isinstance(raw_row, Mapping):
            raise MissingFieldError(REQUIRED_FIELDS[0], row_number=row_number)

        for field_name in REQUIRED_FIELDS:
            if field_name not in raw_row:
                raise MissingFieldError(field_name, row_number=row_number)

        integers = {
            name: self._parse_integer(raw_row[name], field_name=name, row_number=row_number)
            for name in INTEGER_FIELDS
        }
        decimals = {
            name: self._parse_number(raw_row[name], field_name=name, row_number=row_number)
            for name in DECIMAL_FIELDS
        }

        return ServiceRecord(
            record_number=integers[FIELD_RECORD_NUMBER],
            insurer_name=self._parse_text(raw_row[FIELD_INSURER_NAME]),
            year=integers[FIELD_YEAR],
            month=integers[FIELD_MONTH],
            service_count=decimals[FIELD_SERVICE_COUNT],
            region=self._parse_text(raw_row[FIELD_REGION]),
            unit_price=decimals[FIELD_UNIT_PRICE],
            coverage_percent=decimals[FIELD_COVERAGE_PERCENT],
        )

    def _parse_integer(self, value: Any, *, field_name: str, row_number: int) -> int:
        number = self._parse_number(value, field_name=field_name, row_number=row_number)
        if not number.is_integer():
            raise InvalidNumericError(field_name, row_number=row_number, value=value)
        return int(number)

    @staticmethod
    def _parse_number(value: Any, *, field_name: str, row_number: int) -> float:
        # Blank text and null count as zero.
        if value is None:
            return 0.0
        if isinstance(value, bool):
            raise InvalidNumericError(field_name, row_number=row_number, value=value)

        if isinstance(value, str):
            raw = value.strip()
            if not raw:
                return 0.0
            if not _DECIMAL_LITERAL.fullmatch(raw):
                raise InvalidNumericError(field_name, row_number=row_number, value=value)
        elif not isinstance(value, (int, float)):
            raise InvalidNumericError(field_name, row_number=row_number, value=value)
        else:
            raw = value

        # Integers beyond float range overflow instead of becoming inf.
        try:
            number = float(raw)
        except (OverflowError, ValueError) as exc:
            raise InvalidNumericError(field_name, row_number=row_number, value=value) from exc

        if not math.isfinite(number):
            raise InvalidNumericError(field_name, row_number=row_number, value=value)
        return number

    @staticmethod
    def _parse_text(value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    def _log_error(self, error: RecordValidationError) -> None:
        if self._log_validation_errors:
            logger.warning(
                "Record validation failed code=%s row=%s field=%s message=%s",
                error.code,
                error.row_number,
                error.field_name,
                error.message,
            )
