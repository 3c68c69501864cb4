"""
service_reports/services/load_controller.py

Load lifecycle for one consumer: decode -> parse -> normalize.

State moves ``idle -> loading -> success | error`` and re-enters ``loading``
on every new selection. Only the newest selection may change state: each
load gets a generation number and a CancellationToken, selecting again
cancels the previous token and task, and a completion whose generation is no
longer current is dropped without touching state.

Failure contract:
  - ServiceDataError        -> state=error, its message, no records.
  - any other exception     -> state=error, GENERIC_FAILURE_MESSAGE, no records.
  - LoadSupersededError /
    asyncio.CancelledError  -> ignored; the newer load owns state.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from service_reports.connectors.text_decoder import CancellationToken, TextDecoder
from service_reports.domain.service_record import (
    LoadState,
    LoadStateValue,
    ServiceRecord,
    SourceDescriptor,
)
from service_reports.errors import GENERIC_FAILURE_MESSAGE, LoadSupersededError, ServiceDataError
from service_reports.logging_utils import log_event
from service_reports.parsers.row_parser import parse_rows
from service_reports.schemas.reports import LoadSnapshot
from service_reports.validators.record_normalizer import RecordNormalizer

logger = logging.getLogger(__name__)


class Decoder(Protocol):
    async def decode(
        self,
        descriptor: SourceDescriptor,
        token: CancellationToken | None = None,
    ) -> str: ...


class LoadController:
    """
    Owns the record collection and load state for one consumer.

    Must be driven from a single event loop.
    """

    def __init__(
        self,
        *,
        decoder: Decoder | None = None,
        normalizer: RecordNormalizer | None = None,
    ) -> None:
        self._decoder = decoder or TextDecoder()
        self._normalizer = normalizer or RecordNormalizer()
        self._generation = 0
        self._token: CancellationToken | None = None
        self._task: asyncio.Task[None] | None = None
        self._in_flight: set[asyncio.Task[None]] = set()
        self._state: LoadStateValue = LoadState.IDLE
        self._records: tuple[ServiceRecord, ...] = ()
        self._error_message: str | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def state(self) -> LoadStateValue:
        return self._state

    @property
    def records(self) -> tuple[ServiceRecord, ...]:
        return self._records

    @property
    def error_message(self) -> str | None:
        return self._error_message

    @property
    def generation(self) -> int:
        return self._generation

    def snapshot(self) -> LoadSnapshot:
        return LoadSnapshot(
            records=self._records,
            state=self._state,
            error_message=self._error_message,
        )

    def select(self, descriptor: SourceDescriptor | None) -> asyncio.Task[None] | None:
        """
        Start loading ``descriptor``, superseding any load still in flight.

        A None descriptor returns to ``idle`` with no records and no error.
        Previous records stay visible while the new load is running.
        Returns the task running the new load, or None for a None descriptor.
        """

        self._supersede_pending()
        self._generation += 1
        generation = self._generation

        if descriptor is None:
            self._state = LoadState.IDLE
            self._records = ()
            self._error_message = None
            log_event(logger, logging.INFO, "load_cleared", generation=generation)
            return None

        token = CancellationToken()
        self._token = token
        self._state = LoadState.LOADING
        self._error_message = None
        log_event(
            logger,
            logging.INFO,
            "load_started",
            generation=generation,
            kind=descriptor.kind,
            format=descriptor.format,
            source=descriptor.name,
        )

        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(descriptor, generation, token))
        self._in_flight.add(self._task)
        self._task.add_done_callback(self._in_flight.discard)
        return self._task

    async def load(self, descriptor: SourceDescriptor | None) -> LoadSnapshot:
        """
        Select ``descriptor`` and wait for that load to settle.

        If a newer selection supersedes it meanwhile, the returned snapshot
        reflects whatever state the newer selection has reached.
        """

        task = self.select(descriptor)
        if task is not None:
            await asyncio.wait({task})
        return self.snapshot()

    async def aclose(self) -> None:
        """
        Cancel any pending load and wait for it to unwind.
        """

        task = self._task
        self._supersede_pending()
        if task is not None and not task.done():
            await asyncio.wait({task})

    # ------------------------------------------------------------------
    # Load internals
    # ------------------------------------------------------------------

    def _supersede_pending(self) -> None:
        if self._token is not None:
            self._token.cancel()
            self._token = None
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def _run(
        self,
        descriptor: SourceDescriptor,
        generation: int,
        token: CancellationToken,
    ) -> None:
        try:
            text = await self._decoder.decode(descriptor, token)
            rows = parse_rows(descriptor.format, text)
            result = self._normalizer.normalize(rows)
        except LoadSupersededError:
            log_event(logger, logging.DEBUG, "load_superseded", generation=generation)
            return
        except asyncio.CancelledError:
            log_event(logger, logging.DEBUG, "load_superseded", generation=generation)
            raise
        except ServiceDataError as exc:
            self._fail(generation, exc.message, code=exc.code)
            return
        except Exception:
            logger.exception("Unexpected failure while loading generation=%s", generation)
            self._fail(generation, GENERIC_FAILURE_MESSAGE, code="unexpected_error")
            return

        if result.error is not None:
            self._fail(generation, result.error.message, code=result.error.code)
            return
        self._succeed(generation, result.records)

    def _succeed(self, generation: int, records: tuple[ServiceRecord, ...]) -> None:
        if not self._is_current(generation):
            log_event(logger, logging.DEBUG, "load_superseded", generation=generation)
            return
        self._state = LoadState.SUCCESS
        self._records = records
        self._error_message = None
        log_event(logger, logging.INFO, "load_succeeded", generation=generation, records=len(records))

    def _fail(self, generation: int, message: str, *, code: str) -> None:
        if not self._is_current(generation):
            log_event(logger, logging.DEBUG, "load_superseded", generation=generation)
            return
        self._state = LoadState.ERROR
        self._records = ()
        self._error_message = message
        log_event(logger, logging.WARNING, "load_failed", generation=generation, code=code)
