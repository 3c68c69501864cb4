"""
service_reports/sources/resolver.py

Turns a data source selection into a SourceDescriptor.
"""

from __future__ import annotations

import logging
from os import PathLike, fspath
from pathlib import PurePath
from typing import Any
from urllib.parse import urljoin

from service_reports.config import DataSourceSettings, get_data_source_settings
from service_reports.domain.service_record import SourceDescriptor, SourceFormat, SourceFormatValue
from service_reports.errors import UnknownSourceError, UnsupportedFormatError

logger = logging.getLogger(__name__)

PRESET_CSV = "csv"
PRESET_JSON = "json"
UPLOAD = "upload"

SELECTION_OPTIONS: tuple[str, ...] = (PRESET_CSV, PRESET_JSON, UPLOAD)

EXTENSION_FORMATS: dict[str, SourceFormatValue] = {
    "csv": SourceFormat.CSV,
    "json": SourceFormat.JSON,
}


def format_from_filename(filename: str) -> SourceFormatValue:
    """
    Map a file name to its source format by extension, case-insensitively.
    """

    name = PurePath(filename).name
    # Text after the last dot, so a bare ".csv" still counts.
    extension = name.rsplit(".", 1)[-1].lower() if "." in name else ""
    source_format = EXTENSION_FORMATS.get(extension)
    if source_format is None:
        raise UnsupportedFormatError(filename)
    return source_format


class SourceResolver:
    """
    Resolves selection tokens and uploaded files into source descriptors.

    Reads no file contents.
    """

    def __init__(self, settings: DataSourceSettings | None = None) -> None:
        self._settings = settings or get_data_source_settings()

    def preset_url(self, selection: str) -> str:
        paths = {
            PRESET_CSV: self._settings.csv_path,
            PRESET_JSON: self._settings.json_path,
        }
        path = paths.get(selection)
        if path is None:
            raise UnknownSourceError(selection)
        return urljoin(self._settings.base_url, path)

    def resolve(
        self,
        selection: str | None,
        upload: Any = None,
        *,
        filename: str | None = None,
    ) -> SourceDescriptor | None:
        """
        Resolve a selection token into a descriptor.

        Returns None when nothing is selected yet, including the ``upload``
        option before a file has been picked.
        """

        if selection is None:
            return None
        if selection == UPLOAD:
            if upload is None:
                return None
            return self.resolve_upload(upload, filename=filename)

        url = self.preset_url(selection)
        return SourceDescriptor.url(url, EXTENSION_FORMATS[selection])

    def resolve_upload(self, upload: Any, *, filename: str | None = None) -> SourceDescriptor:
        """
        Build a descriptor for a local file, taking its format from the extension.
        """

        name = filename or _filename_of(upload)
        if not name:
            raise UnsupportedFormatError(None)
        try:
            source_format = format_from_filename(name)
        except UnsupportedFormatError:
            logger.info("Rejected upload with unsupported extension filename=%r", name)
            raise
        return SourceDescriptor.file(upload, source_format, name=PurePath(name).name)


def _filename_of(upload: Any) -> str | None:
    if isinstance(upload, (str, PathLike)):
        return fspath(upload)
    name = getattr(upload, "filename", None) or getattr(upload, "name", None)
    return name if isinstance(name, str) else None
