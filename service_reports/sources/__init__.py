from service_reports.sources.resolver import (
    PRESET_CSV,
    PRESET_JSON,
    SELECTION_OPTIONS,
    UPLOAD,
    SourceResolver,
    format_from_filename,
)

__all__ = [
    "PRESET_CSV",
    "PRESET_JSON",
    "SELECTION_OPTIONS",
    "UPLOAD",
    "SourceResolver",
    "format_from_filename",
]
