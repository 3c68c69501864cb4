"""
service_reports/validators package marker.
"""

from service_reports.validators.record_normalizer import REQUIRED_FIELDS, RecordNormalizer

__all__ = [
    "REQUIRED_FIELDS",
    "RecordNormalizer",
]
