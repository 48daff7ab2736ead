"""Windowed worker pool for upload units."""
from typing import Awaitable, Callable, List, Optional
import asyncio
import logging

from ..models import PendingUpload, UploadOutcome

logger = logging.getLogger(__name__)

ProcessUnit = Callable[[PendingUpload], Awaitable[UploadOutcome]]
OutcomeCallback = Callable[[UploadOutcome], Awaitable[None]]


class UploadWorkerPool:
    """
    Runs upload units in fixed windows of at most ``concurrency`` tasks.

    Units inside a window run concurrently; the next window starts only after
    every unit of the current one has finished. A failing unit never stops
    its siblings.
    """

    def __init__(
        self,
        process_unit: ProcessUnit,
        concurrency: int = 8,
        on_outcome: Optional[OutcomeCallback] = None,
    ):
        if concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")
        self._process_unit = process_unit
        self._concurrency = concurrency
        self._on_outcome = on_outcome

    @property
    def concurrency(self) -> int:
        return self._concurrency

    async def run(self, pending: List[PendingUpload]) -> List[UploadOutcome]:
        """Process ``pending``; outcomes are returned in input order."""
        outcomes: List[UploadOutcome] = []
        windows = range(0, len(pending), self._concurrency)
        for number, start in enumerate(windows, 1):
            window = pending[start:start + self._concurrency]
            logger.debug("Window %d/%d: %d units", number, len(windows), len(window))
            outcomes.extend(await asyncio.gather(*(self._run_unit(item) for item in window)))
        return outcomes

    async def _run_unit(self, item: PendingUpload) -> UploadOutcome:
        try:
            outcome = await self._process_unit(item)
        except Exception as exc:
            outcome = UploadOutcome.fail(item.assigned_id, str(exc) or type(exc).__name__, item.file_path)

        if self._on_outcome:
            await self._on_outcome(outcome)
        return outcome
