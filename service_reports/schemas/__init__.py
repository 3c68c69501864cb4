"""
service_reports/schemas package marker.
"""

from service_reports.schemas.reports import (
    CompanyReportRow,
    LoadSnapshot,
    PeriodSummary,
    RegionReportRow,
    ReportBundle,
)

__all__ = [
    "CompanyReportRow",
    "LoadSnapshot",
    "PeriodSummary",
    "RegionReportRow",
    "ReportBundle",
]
