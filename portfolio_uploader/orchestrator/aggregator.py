"""Progress and failure aggregation for one batch."""
from typing import Optional
import asyncio
import logging

from ..models import BatchSummary, OutcomeStatus, UploadOutcome
from ..utils.events import EventEmitter, ProgressEvent

logger = logging.getLogger(__name__)


class ProgressAggregator:
    """
    Collects per-unit outcomes and publishes cumulative progress.

    Events:
        outcome(UploadOutcome)  - every outcome, failures included
        progress(ProgressEvent) - after every outcome
    """

    def __init__(self, total: int, events: Optional[EventEmitter] = None):
        self._summary = BatchSummary(total=total)
        self._events = events or EventEmitter()
        self._lock = asyncio.Lock()

    @property
    def events(self) -> EventEmitter:
        return self._events

    @property
    def total(self) -> int:
        return self._summary.total

    async def on_outcome(self, outcome: UploadOutcome) -> None:
        # One outcome at a time: progress events are delivered in done order.
        async with self._lock:
            if outcome.status == OutcomeStatus.SUCCESS:
                self._summary.completed += 1
            elif outcome.status == OutcomeStatus.FAILED:
                self._summary.failed.append(outcome.identifier)
            else:
                self._summary.skipped.append(outcome.identifier)

            snapshot = self.progress()
            await self._events.emit("outcome", outcome)
            await self._events.emit("progress", snapshot)

    def progress(self) -> ProgressEvent:
        return ProgressEvent(
            done=self._summary.done,
            total=self._summary.total,
            completed=self._summary.completed,
            failed=len(self._summary.failed),
            skipped=len(self._summary.skipped),
        )

    def summary(self) -> BatchSummary:
        return BatchSummary(
            total=self._summary.total,
            completed=self._summary.completed,
            failed=list(self._summary.failed),
            skipped=list(self._summary.skipped),
            duplicates=self._summary.duplicates,
            discovered=self._summary.discovered,
        )

    def note_discovery(self, discovered: int, duplicates: int) -> None:
        self._summary.discovered = discovered
        self._summary.duplicates = duplicates
