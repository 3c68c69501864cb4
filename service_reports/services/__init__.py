"""
service_reports/services package marker.
"""

from service_reports.services.aggregation_service import (
    build_company_report,
    build_region_report,
    build_reports,
    build_summary,
    period_label,
)
from service_reports.services.load_controller import LoadController

__all__ = [
    "LoadController",
    "build_company_report",
    "build_region_report",
    "build_reports",
    "build_summary",
    "period_label",
]
