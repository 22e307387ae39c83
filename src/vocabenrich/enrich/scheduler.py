#!/usr/bin/env python3
"""
Enrichment scheduler: bounded-concurrency lookups with pause and cancel.

Drives the lookup client over every entry of every input file:

    files → parse → windows of N entries → concurrent lookups → records

Entries are processed in fixed-size windows (default 5). All lookups of
a window run concurrently and the next window starts only after every
lookup of the current one has settled, so at most N requests are ever
outstanding. Blocking HTTP calls run in worker threads via
asyncio.to_thread; all run state is written from the event loop (plus the
control methods below).

Control:
    pause()/resume()  take effect at the next window boundary
    cancel()          no new windows or lookups; in-flight lookups finish
                      and are kept, the current file is returned partially
    reset()           cancel and clear state and log

States:
    IDLE → RUNNING ⇄ PAUSED → COMPLETED | CANCELLED
"""

import asyncio
import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Deque, Dict, List, Optional, Sequence, Tuple

from vocabenrich import entry_parser
from vocabenrich.config import EnrichConfig
from vocabenrich.entry_parser import Entry
from vocabenrich.enrich.records import EnrichedRecord, build_records, is_complete

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 5
PAUSE_POLL_SECONDS = 0.2
MAX_LOG_EVENTS = 200

# Returned by a lookup task that was never started (run cancelled)
_SKIPPED = object()


class RunPhase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class EventLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class LogEvent:
    """A discrete progress message for the presentation layer."""
    message: str
    level: EventLevel = EventLevel.INFO


@dataclass
class RunState:
    """Mutable progress of one run. Written only by the scheduler."""
    total_count: int = 0
    processed_count: int = 0
    current_headword: str = ""
    paused: bool = False
    cancelled: bool = False


@dataclass(frozen=True)
class RunStatus:
    """Read-only snapshot of a run for observers."""
    current: int
    total: int
    current_headword: str
    state: RunPhase


@dataclass
class SourceFile:
    """An input file: display name plus text contents."""
    name: str
    text: str

    @classmethod
    def from_path(cls, path: Path) -> "SourceFile":
        with open(path, 'r', encoding='utf-8', errors='replace') as f:
            return cls(name=Path(path).name, text=f.read())


@dataclass
class FileResult:
    """Records produced for one source file, in entry then definition order."""
    source_file_name: str
    records: List[EnrichedRecord] = field(default_factory=list)


class EnrichmentScheduler:
    """
    Runs lookups for parsed vocabulary files and collects records.

    Usage:
        scheduler = EnrichmentScheduler(client)
        results = asyncio.run(scheduler.start([SourceFile("a.md", text)]))
    """

    def __init__(
        self,
        client,
        concurrency: int = DEFAULT_CONCURRENCY,
        poll_interval: float = PAUSE_POLL_SECONDS,
        max_log_events: int = MAX_LOG_EVENTS,
        on_event: Optional[Callable[[LogEvent], None]] = None,
    ):
        """
        Args:
            client: Object with fetch(headword) -> dict | None (see LookupClient)
            concurrency: Window size, i.e. maximum lookups in flight
            poll_interval: Seconds between flag checks while paused
            max_log_events: Number of recent events kept in `events`
            on_event: Optional callback receiving every LogEvent
        """
        if concurrency < 1:
            raise ValueError(f"concurrency must be positive, got {concurrency}")

        self.client = client
        self.concurrency = concurrency
        self.poll_interval = poll_interval
        self.on_event = on_event

        self._state = RunState()
        self._phase = RunPhase.IDLE
        self._events: Deque[LogEvent] = deque(maxlen=max_log_events)
        self._results: List[FileResult] = []
        self._reset_pending = False

    @classmethod
    def from_config(cls, config: EnrichConfig, client, **kwargs) -> "EnrichmentScheduler":
        return cls(
            client,
            concurrency=config.concurrency,
            poll_interval=config.poll_interval,
            max_log_events=config.max_log_events,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def state(self) -> RunPhase:
        return self._phase

    @property
    def is_active(self) -> bool:
        return self._phase in (RunPhase.RUNNING, RunPhase.PAUSED)

    @property
    def cancel_requested(self) -> bool:
        return self.is_active and self._state.cancelled

    @property
    def events(self) -> List[LogEvent]:
        return list(self._events)

    @property
    def results(self) -> List[FileResult]:
        """FileResults finished so far (including a cancelled partial file)."""
        return list(self._results)

    def status(self) -> RunStatus:
        state = self._state
        return RunStatus(
            current=state.processed_count,
            total=state.total_count,
            current_headword=state.current_headword,
            state=self._phase,
        )

    def _log(self, message: str, level: EventLevel = EventLevel.INFO) -> None:
        event = LogEvent(message=message, level=level)
        self._events.append(event)

        if level is EventLevel.ERROR:
            logger.warning(message)
        elif level is EventLevel.SUCCESS:
            logger.debug(message)
        else:
            logger.info(message)

        if self.on_event is not None:
            self.on_event(event)

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    def pause(self) -> None:
        if self._phase is not RunPhase.RUNNING:
            logger.debug(f"pause() ignored in state {self._phase.value}")
            return
        self._state.paused = True
        self._phase = RunPhase.PAUSED
        self._log("Run paused, waiting...")

    def resume(self) -> None:
        if self._phase is not RunPhase.PAUSED:
            logger.debug(f"resume() ignored in state {self._phase.value}")
            return
        self._state.paused = False
        self._phase = RunPhase.RUNNING
        self._log("Run resumed")

    def toggle_pause(self) -> None:
        if self._phase is RunPhase.PAUSED:
            self.resume()
        else:
            self.pause()

    def cancel(self) -> None:
        if not self.is_active or self._state.cancelled:
            return
        self._state.cancelled = True
        # Unpause so the run loop can observe the cancellation
        self._state.paused = False
        self._phase = RunPhase.RUNNING
        self._log("Cancelling run...")

    def reset(self) -> None:
        """Cancel any active run and clear state, results and log."""
        if self.is_active:
            self.cancel()
            self._reset_pending = True
        else:
            self._clear()

    def _clear(self) -> None:
        self._state = RunState()
        self._phase = RunPhase.IDLE
        self._events.clear()
        self._results = []
        self._reset_pending = False

    # ------------------------------------------------------------------
    # Run loop
    # ------------------------------------------------------------------

    async def start(self, sources: Sequence[SourceFile]) -> List[FileResult]:
        """
        Enrich every entry of every source file.

        Args:
            sources: Input files, processed in order

        Returns:
            One FileResult per file that was started, in input order
        """
        if self.is_active:
            raise RuntimeError("An enrichment run is already in progress")

        self._clear()
        self._phase = RunPhase.RUNNING
        state = self._state

        self._log("Parsing files...")
        parsed: List[Tuple[str, List[Entry]]] = [
            (source.name, entry_parser.parse(source.text)) for source in sources
        ]
        state.total_count = sum(len(entries) for _, entries in parsed)

        for name, entries in parsed:
            if state.cancelled:
                break

            self._log(f"Processing file: {name} ({len(entries)} words)")
            result = FileResult(source_file_name=name)
            self._results.append(result)

            await self._process_file(entries, result.records)

            if state.cancelled:
                break
            self._log(f"Finished file: {name}")

        return self._finish()

    async def _process_file(self, entries: List[Entry], records: List[EnrichedRecord]) -> None:
        state = self._state

        for offset in range(0, len(entries), self.concurrency):
            if state.cancelled:
                return

            await self._wait_while_paused()
            if state.cancelled:
                return

            window = entries[offset:offset + self.concurrency]
            responses = await asyncio.gather(*(self._lookup(entry) for entry in window))

            # Append in entry order, not completion order
            for entry, data in zip(window, responses):
                if data is _SKIPPED:
                    continue
                records.extend(build_records(entry, data))

    async def _wait_while_paused(self) -> None:
        state = self._state
        while state.paused and not state.cancelled:
            await asyncio.sleep(self.poll_interval)

    async def _lookup(self, entry: Entry) -> Any:
        state = self._state
        if state.cancelled:
            return _SKIPPED

        state.current_headword = entry.headword

        data: Optional[Dict[str, Any]]
        try:
            data = await asyncio.to_thread(self.client.fetch, entry.headword)
        except Exception as e:
            logger.error(f"Lookup client raised for {entry.headword!r}: {e}")
            data = None

        if is_complete(data):
            self._log(f"[OK] {entry.headword}", EventLevel.SUCCESS)
        else:
            self._log(f"[WARN] {entry.headword}: lookup data may be incomplete", EventLevel.ERROR)

        state.processed_count += 1
        return data

    def _finish(self) -> List[FileResult]:
        results = list(self._results)

        if self._state.cancelled:
            self._phase = RunPhase.CANCELLED
            self._log(f"Run cancelled after {self._state.processed_count} of "
                      f"{self._state.total_count} words")
        else:
            self._phase = RunPhase.COMPLETED
            self._log("All files processed", EventLevel.SUCCESS)

        if self._reset_pending:
            self._clear()

        return results
