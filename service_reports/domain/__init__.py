"""
service_reports/domain package marker.
"""

from service_reports.domain.service_record import (
    LoadState,
    NormalizationResult,
    ServiceRecord,
    SourceDescriptor,
    SourceFormat,
    SourceKind,
)

__all__ = [
    "LoadState",
    "NormalizationResult",
    "ServiceRecord",
    "SourceDescriptor",
    "SourceFormat",
    "SourceKind",
]
