"""
service_reports/schemas/reports.py

Output models handed to the presentation layer.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from service_reports.domain.service_record import LoadStateValue, ServiceRecord


class _ReportModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class CompanyReportRow(_ReportModel):
    """
    Billed and covered totals for one insurer.
    """

    insurer_name: str
    total_billed: float
    total_covered: float


class RegionReportRow(_ReportModel):
    """
    Service volume for one region.
    """

    region: str
    total_service_count: float


class PeriodSummary(_ReportModel):
    """
    Headline totals over a whole loaded collection.
    """

    total_service_count: float
    total_billed: float
    total_covered: float
    insurer_count: int = Field(..., ge=0)
    region_count: int = Field(..., ge=0)
    period: str


class ReportBundle(_ReportModel):
    company_report: tuple[CompanyReportRow, ...] = ()
    region_report: tuple[RegionReportRow, ...] = ()
    summary: PeriodSummary | None = None


class LoadSnapshot(_ReportModel):
    """
    What the presentation layer sees of the current load.
    """

    records: tuple[ServiceRecord, ...] = ()
    state: LoadStateValue = "idle"
    error_message: str | None = None
