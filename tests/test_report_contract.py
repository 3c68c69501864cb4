import json

import pytest
from pydantic import ValidationError

from conftest import make_record
from service_reports.errors import (
    InvalidNumericError,
    LoadSupersededError,
    MissingFieldError,
    ServiceDataError,
    UnsupportedFormatError,
)
from service_reports.schemas.reports import CompanyReportRow, LoadSnapshot, PeriodSummary


def test_company_row_contract() -> None:
    row = CompanyReportRow(insurer_name="Acme", total_billed=1500.0, total_covered=750.0)

    assert set(row.model_dump()) == {"insurer_name", "total_billed", "total_covered"}
    assert json.loads(row.model_dump_json())["total_covered"] == 750.0


def test_report_rows_are_frozen() -> None:
    row = CompanyReportRow(insurer_name="Acme", total_billed=1.0, total_covered=0.5)

    with pytest.raises(ValidationError):
        row.total_billed = 2.0  # type: ignore[misc]


def test_summary_rejects_extra_fields() -> None:
    with pytest.raises(ValidationError):
        PeriodSummary(
            total_service_count=1.0,
            total_billed=1.0,
            total_covered=1.0,
            insurer_count=1,
            region_count=1,
            period="2024",
            currency="ARS",
        )


def test_snapshot_serializes_records() -> None:
    snapshot = LoadSnapshot(records=(make_record(3, "Acme"),), state="success", error_message=None)

    payload = json.loads(snapshot.model_dump_json())

    assert payload["state"] == "success"
    assert payload["records"][0]["insurer_name"] == "Acme"
    assert payload["records"][0]["record_number"] == 3


def test_snapshot_rejects_unknown_state() -> None:
    with pytest.raises(ValidationError):
        LoadSnapshot(state="done")  # type: ignore[arg-type]


def test_error_codes_are_stable() -> None:
    errors: list[ServiceDataError] = [
        UnsupportedFormatError("a.txt"),
        MissingFieldError("Region", row_number=4),
        InvalidNumericError("Mes", row_number=2, value="marzo"),
        LoadSupersededError(),
    ]

    assert [error.code for error in errors] == [
        "unsupported_format",
        "missing_field",
        "invalid_numeric",
        "load_superseded",
    ]
    assert errors[1].to_dict() == {
        "code": "missing_field",
        "message": "The field Region is missing from the data.",
        "field_name": "Region",
        "row_number": 4,
    }
    assert errors[2].to_dict()["value"] == "marzo"
