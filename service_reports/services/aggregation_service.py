"""
service_reports/services/aggregation_service.py

Report views derived from a loaded ServiceRecord collection.

Every view is recomputed from scratch as a fold over the records: an
accumulator keyed by the grouping field is rebuilt once per record and then
turned into a ranked list. Per-group totals are accumulated as exact
fractions and rounded to float once at the end, so the totals do not depend
on record order; rankings break ties by key for the same reason.
"""

from __future__ import annotations

import logging
import math
from fractions import Fraction
from functools import reduce
from typing import Iterable, Mapping, Sequence

from service_reports.domain.service_record import ServiceRecord
from service_reports.schemas.reports import (
    CompanyReportRow,
    PeriodSummary,
    RegionReportRow,
    ReportBundle,
)

logger = logging.getLogger(__name__)

NO_DATA_PERIOD = "no data"

_ZERO = Fraction(0)

# insurer -> (billed, covered)
_CompanyAccumulator = Mapping[str, tuple[Fraction, Fraction]]
# region -> service count
_RegionAccumulator = Mapping[str, Fraction]


def _fold_company(acc: _CompanyAccumulator, record: ServiceRecord) -> _CompanyAccumulator:
    billed, covered = acc.get(record.insurer_name, (_ZERO, _ZERO))
    return {
        **acc,
        record.insurer_name: (
            billed + Fraction(record.billed_amount),
            covered + Fraction(record.covered_amount),
        ),
    }


def _fold_region(acc: _RegionAccumulator, record: ServiceRecord) -> _RegionAccumulator:
    return {
        **acc,
        record.region: acc.get(record.region, _ZERO) + Fraction(record.service_count),
    }


def build_company_report(records: Sequence[ServiceRecord]) -> list[CompanyReportRow]:
    """
    Rank insurers by total covered amount, highest first.
    """

    grouped: _CompanyAccumulator = reduce(_fold_company, records, {})
    rows = [
        CompanyReportRow(
            insurer_name=insurer_name,
            total_billed=float(billed),
            total_covered=float(covered),
        )
        for insurer_name, (billed, covered) in grouped.items()
    ]
    rows.sort(key=lambda row: (-row.total_covered, row.insurer_name))
    logger.debug("build_company_report records=%d insurers=%d", len(records), len(rows))
    return rows


def build_region_report(records: Sequence[ServiceRecord]) -> list[RegionReportRow]:
    """
    Rank regions by total service count, highest first.
    """

    grouped: _RegionAccumulator = reduce(_fold_region, records, {})
    rows = [
        RegionReportRow(region=region, total_service_count=float(count))
        for region, count in grouped.items()
    ]
    rows.sort(key=lambda row: (-row.total_service_count, row.region))
    logger.debug("build_region_report records=%d regions=%d", len(records), len(rows))
    return rows


def period_label(years: Iterable[int]) -> str:
    """
    Describe the span of the given years.

    ``"no data"`` for none, the year itself for one distinct year, otherwise
    ``"<min> - <max>"``.
    """

    distinct = set(years)
    if not distinct:
        return NO_DATA_PERIOD
    if len(distinct) == 1:
        return str(next(iter(distinct)))
    return f"{min(distinct)} - {max(distinct)}"


def build_summary(records: Sequence[ServiceRecord]) -> PeriodSummary | None:
    """
    Return headline totals, or None for an empty collection.
    """

    if not records:
        return None

    return PeriodSummary(
        total_service_count=math.fsum(record.service_count for record in records),
        total_billed=math.fsum(record.billed_amount for record in records),
        total_covered=math.fsum(record.covered_amount for record in records),
        insurer_count=len({record.insurer_name for record in records}),
        region_count=len({record.region for record in records}),
        period=period_label(record.year for record in records),
    )


def build_reports(records: Sequence[ServiceRecord]) -> ReportBundle:
    """
    Compute all three report views at once.
    """

    return ReportBundle(
        company_report=tuple(build_company_report(records)),
        region_report=tuple(build_region_report(records)),
        summary=build_summary(records),
    )
