"""Batch upload pipeline: discover, hash, dedup, sequence, upload, aggregate."""
from pathlib import Path
from typing import List, Optional
import logging

from ..exceptions import BatchUploadError
from ..models import BatchSummary, Candidate, UploadConfig, UploadOutcome
from ..protocols import IAssetStore, IMetadataExtractor, IMetadataStore
from ..services.exif import ExifExtractor
from ..use_cases import (
    Deduplicator,
    HashCandidatesUseCase,
    ProcessPhotoUseCase,
    RunDedupGuard,
    Sequencer,
    discover_candidates,
)
from ..utils.events import EventEmitter
from .aggregator import ProgressAggregator
from .pool import UploadWorkerPool

logger = logging.getLogger(__name__)


class BatchUploadProcess:
    """
    One batch run over injected stores.

    Events (subscribe before calling run):
        phase(name, message)
        outcome(UploadOutcome)
        progress(ProgressEvent)
        finish(BatchSummary)

    Usage:
        process = BatchUploadProcess(repository, assets, config=config)
        process.on("progress", display.on_progress)
        summary = await process.upload_from_list(Path("folders.txt"))
    """

    def __init__(
        self,
        store: IMetadataStore,
        assets: IAssetStore,
        extractor: Optional[IMetadataExtractor] = None,
        config: Optional[UploadConfig] = None,
        events: Optional[EventEmitter] = None,
    ):
        self._store = store
        self._assets = assets
        self._extractor = extractor or ExifExtractor()
        self._config = config or UploadConfig()
        self._events = events or EventEmitter()

    def on(self, event_name: str, callback) -> "BatchUploadProcess":
        self._events.on(event_name, callback)
        return self

    async def upload_from_list(self, list_file: Path) -> BatchSummary:
        """
        Run a full batch for the folders listed in ``list_file``.

        Raises:
            DiscoveryError: list file missing
            BatchUploadError: at least one unit failed
        """
        discovery = discover_candidates(list_file, self._config)
        for folder in discovery.missing_folders:
            await self._phase("discovery", f"Skipped missing folder: {folder}")
        if not discovery.folders:
            await self._phase("discovery", "No folders listed")
            return await self._finish(BatchSummary(total=0))
        return await self.upload_candidates(discovery.candidates)

    async def upload_candidates(self, candidates: List[Candidate]) -> BatchSummary:
        if not candidates:
            await self._phase("discovery", "No images found")
            return await self._finish(BatchSummary(total=0))
        await self._phase("discovery", f"Found {len(candidates)} photos")

        hashing = await HashCandidatesUseCase().execute(candidates)
        survivors, already_stored = await Deduplicator(self._store).filter_new(hashing.hashed)
        for candidate in already_stored:
            await self._phase("dedup", f"Skipped duplicate: {candidate.file_path.name}")
        duplicates = len(already_stored)
        pending = await Sequencer(self._store, self._config).assign(survivors)

        if not pending and not hashing.failures:
            await self._phase("dedup", "No new photos to upload")
            summary = BatchSummary(total=0, duplicates=duplicates, discovered=len(candidates))
            return await self._finish(summary)

        aggregator = ProgressAggregator(len(pending) + len(hashing.failures), self._events)
        aggregator.note_discovery(len(candidates), duplicates)

        for candidate, reason in hashing.failures:
            await aggregator.on_outcome(
                UploadOutcome.fail(str(candidate.file_path), reason, candidate.file_path)
            )

        if pending:
            first = pending[0].assigned_id
            await self._phase("upload", f"Starting from {first}")
            guard = RunDedupGuard(self._store)
            unit = ProcessPhotoUseCase(self._store, self._assets, self._extractor, guard, self._config)
            pool = UploadWorkerPool(unit.execute, self._config.concurrency, aggregator.on_outcome)
            await pool.run(pending)

        summary = await self._finish(aggregator.summary())
        if not summary.success:
            raise BatchUploadError(summary.failed, summary)
        return summary

    async def _phase(self, name: str, message: str) -> None:
        logger.info(message)
        await self._events.emit("phase", name, message)

    async def _finish(self, summary: BatchSummary) -> BatchSummary:
        logger.info(
            "Batch finished: %d uploaded, %d failed, %d skipped, %d duplicates",
            summary.completed, len(summary.failed), len(summary.skipped), summary.duplicates,
        )
        await self._events.emit("finish", summary)
        return summary

