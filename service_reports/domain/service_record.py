"""
service_reports/domain/service_record.py

Domain models used by the load pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from os import PathLike
from typing import Any, Literal

from service_reports.errors import RecordValidationError

SourceKindValue = Literal["url", "file", "text"]
SourceFormatValue = Literal["csv", "json"]
LoadStateValue = Literal["idle", "loading", "success", "error"]


class SourceKind:
    URL = "url"
    FILE = "file"
    TEXT = "text"


class SourceFormat:
    CSV = "csv"
    JSON = "json"


class LoadState:
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


ALLOWED_SOURCE_KINDS = {SourceKind.URL, SourceKind.FILE, SourceKind.TEXT}
ALLOWED_SOURCE_FORMATS = {SourceFormat.CSV, SourceFormat.JSON}


@dataclass(frozen=True)
class SourceDescriptor:
    """
    Where one load reads its raw text from, and how to parse it.

    ``payload`` is a URL for ``url``, a path or readable file object for
    ``file`` and the literal text for ``text``.
    """

    kind: SourceKindValue
    format: SourceFormatValue
    payload: Any
    name: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.kind not in ALLOWED_SOURCE_KINDS:
            raise ValueError(f"Unsupported source kind: {self.kind!r}.")
        if self.format not in ALLOWED_SOURCE_FORMATS:
            raise ValueError(f"Unsupported source format: {self.format!r}.")
        if self.kind in (SourceKind.URL, SourceKind.TEXT) and not isinstance(self.payload, str):
            raise ValueError(f"A {self.kind} source requires a string payload.")
        if self.kind == SourceKind.FILE and not (
            isinstance(self.payload, (str, PathLike)) or hasattr(self.payload, "read")
        ):
            raise ValueError("A file source requires a path or a readable file object.")

    @classmethod
    def url(cls, url: str, format: SourceFormatValue) -> "SourceDescriptor":
        return cls(kind=SourceKind.URL, format=format, payload=url, name=url)

    @classmethod
    def file(cls, handle: Any, format: SourceFormatValue, name: str | None = None) -> "SourceDescriptor":
        return cls(kind=SourceKind.FILE, format=format, payload=handle, name=name)

    @classmethod
    def inline(cls, text: str, format: SourceFormatValue) -> "SourceDescriptor":
        return cls(kind=SourceKind.TEXT, format=format, payload=text)


@dataclass(frozen=True)
class ServiceRecord:
    """
    One validated billed-service row.
    """

    record_number: int
    insurer_name: str
    year: int
    month: int
    service_count: float
    region: str
    unit_price: float
    coverage_percent: float

    @property
    def billed_amount(self) -> float:
        return self.unit_price * self.service_count

    @property
    def covered_amount(self) -> float:
        return self.billed_amount * (self.coverage_percent / 100)


@dataclass(frozen=True)
class NormalizationResult:
    """
    Outcome of normalizing one load: every record, or the first failure.
    """

    records: tuple[ServiceRecord, ...] = ()
    error: RecordValidationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, records: tuple[ServiceRecord, ...]) -> "NormalizationResult":
        return cls(records=records)

    @classmethod
    def failure(cls, error: RecordValidationError) -> "NormalizationResult":
        return cls(records=(), error=error)
