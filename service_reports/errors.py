"""
service_reports/errors.py

Failure taxonomy for loading service-billing data.

Every failure carries a stable ``code`` and a message that is safe to show
to the person who picked the data source.
"""

from __future__ import annotations

from typing import Any, ClassVar

GENERIC_FAILURE_MESSAGE = "An unknown error occurred while loading the data."


class ServiceDataError(Exception):
    """
    Base class for every load pipeline failure.
    """

    code: ClassVar[str] = "service_data_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


class UnsupportedFormatError(ServiceDataError, ValueError):
    """
    Raised when an uploaded file is neither `.csv` nor `.json`.
    """

    code = "unsupported_format"

    def __init__(self, filename: str | None = None) -> None:
        super().__init__("The file must have a .csv or .json extension.")
        self.filename = filename


class UnknownSourceError(ServiceDataError, ValueError):
    """
    Raised when a selection token names no known data source.
    """

    code = "unknown_source"

    def __init__(self, selection: str) -> None:
        super().__init__("Unknown data source.")
        self.selection = selection


class TransferError(ServiceDataError, RuntimeError):
    """
    Raised when a remote data file cannot be downloaded.
    """

    code = "transfer_error"

    def __init__(self, url: str, status_code: int | None = None) -> None:
        super().__init__("The data file could not be downloaded.")
        self.url = url
        self.status_code = status_code


class FileReadError(ServiceDataError, RuntimeError):
    """
    Raised when a local file cannot be read as UTF-8 text.
    """

    code = "file_read_error"

    def __init__(self) -> None:
        super().__init__("The selected file could not be read as UTF-8 text.")


class MalformedJsonError(ServiceDataError, ValueError):
    code = "malformed_json"

    def __init__(self) -> None:
        super().__init__("The JSON file could not be parsed.")


class RecordValidationError(ServiceDataError, ValueError):
    """
    A row failed validation; the whole load is rejected.
    """

    code = "record_validation_error"

    def __init__(self, message: str, *, field_name: str, row_number: int) -> None:
        super().__init__(message)
        self.field_name = field_name
        self.row_number = row_number

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "field_name": self.field_name,
            "row_number": self.row_number,
        }


class MissingFieldError(RecordValidationError):
    code = "missing_field"

    def __init__(self, field_name: str, *, row_number: int) -> None:
        super().__init__(
            f"The field {field_name} is missing from the data.",
            field_name=field_name,
            row_number=row_number,
        )


class InvalidNumericError(RecordValidationError):
    code = "invalid_numeric"

    def __init__(self, field_name: str, *, row_number: int, value: Any) -> None:
        super().__init__(
            "Invalid numeric values were found in the data.",
            field_name=field_name,
            row_number=row_number,
        )
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "value": None if self.value is None else str(self.value)}


class LoadSupersededError(ServiceDataError):
    """
    Raised inside a load that a newer selection has replaced.

    Never shown to the user.
    """

    code = "load_superseded"

    def __init__(self) -> None:
        super().__init__("The load was superseded by a newer selection.")
