"""
service_reports/connectors/text_decoder.py

Reads the raw text behind a SourceDescriptor.

Remote and file reads run in a worker thread so the event loop stays free
to accept a newer selection. Each read takes a CancellationToken and checks
it before handing text back; a superseded read raises LoadSupersededError
instead of returning stale data.
"""

from __future__ import annotations

import asyncio
import logging
import time
from os import PathLike
from pathlib import Path
from typing import Any

import requests

from service_reports.config import HTTPSettings, get_http_settings
from service_reports.domain.service_record import SourceDescriptor, SourceKind
from service_reports.errors import FileReadError, LoadSupersededError, TransferError

logger = logging.getLogger(__name__)

BYTE_ORDER_MARK = "\ufeff"
RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


def strip_bom(text: str) -> str:
    """
    Drop one leading byte-order mark, if present.
    """

    return text[1:] if text.startswith(BYTE_ORDER_MARK) else text


class CancellationToken:
    """
    Flag shared between the load controller and one in-flight read.
    """

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise LoadSupersededError()


class TextDecoder:
    """
    Fetches, reads or passes through the text payload of a descriptor.
    """

    def __init__(
        self,
        *,
        http_settings: HTTPSettings | None = None,
        session: requests.Session | None = None,
    ) -> None:
        settings = http_settings or get_http_settings()
        self._session = session or requests.Session()
        self._timeout_seconds = settings.timeout_seconds
        self._max_retries = settings.max_retries
        self._backoff_initial_seconds = settings.backoff_initial_seconds
        self._backoff_multiplier = settings.backoff_multiplier

    async def decode(
        self,
        descriptor: SourceDescriptor,
        token: CancellationToken | None = None,
    ) -> str:
        """
        Return the descriptor's text with any leading byte-order mark removed.
        """

        token = token or CancellationToken()
        token.raise_if_cancelled()

        if descriptor.kind == SourceKind.URL:
            text = await asyncio.to_thread(self._fetch_text, descriptor.payload, token)
        elif descriptor.kind == SourceKind.FILE:
            text = await asyncio.to_thread(self._read_file, descriptor.payload)
        else:
            text = descriptor.payload

        token.raise_if_cancelled()
        return strip_bom(text)

    def _fetch_text(self, url: str, token: CancellationToken) -> str:
        """
        GET ``url`` with optional retries on transient failures.
        """

        last_status: int | None = None
        for attempt in range(self._max_retries + 1):
            token.raise_if_cancelled()
            try:
                response = self._session.get(url, timeout=self._timeout_seconds)
            except (requests.Timeout, requests.ConnectionError) as exc:
                last_status = None
                logger.warning("Data transfer failed url=%s error=%s", url, exc)
            else:
                if response.ok:
                    # Decode as UTF-8 regardless of the advertised charset.
                    return response.content.decode("utf-8", errors="replace")
                last_status = response.status_code
                if last_status not in RETRYABLE_STATUS_CODES:
                    logger.error("Data transfer rejected status=%s url=%s", last_status, url)
                    raise TransferError(url, last_status)

            if attempt >= self._max_retries:
                break

            backoff_seconds = self._backoff_initial_seconds * (self._backoff_multiplier**attempt)
            logger.warning(
                "Data transfer retry attempt=%s/%s wait_seconds=%.2f url=%s",
                attempt + 1,
                self._max_retries,
                backoff_seconds,
                url,
            )
            time.sleep(backoff_seconds)

        logger.error("Data transfer exhausted retries status=%s url=%s", last_status, url)
        raise TransferError(url, last_status)

    @staticmethod
    def _read_file(handle: Any) -> str:
        try:
            if isinstance(handle, (str, PathLike)):
                return Path(handle).read_text(encoding="utf-8")
            if getattr(handle, "seekable", None) and handle.seekable():
                handle.seek(0)
            content = handle.read()
            if isinstance(content, bytes):
                return content.decode("utf-8")
            return str(content)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Local file read failed error=%s", exc)
            raise FileReadError() from exc
