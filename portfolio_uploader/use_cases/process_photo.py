"""Use case for one upload unit: guard, extract, upload, persist."""
from __future__ import annotations

import logging
from typing import Optional

from ..models import CaptureMetadata, PendingUpload, UploadConfig, UploadOutcome
from ..protocols import IAssetStore, IMetadataExtractor, IMetadataStore
from ..services.metadata_mapper import PhotoRecordMapper
from .deduplication import RunDedupGuard

logger = logging.getLogger(__name__)


class ProcessPhotoUseCase:
    """
    Process a single PendingUpload into an UploadOutcome.

    Never raises: failures of the upload or of persistence become
    ``UploadOutcome.fail``; a failed EXIF read only empties the capture fields.
    """

    def __init__(
        self,
        store: IMetadataStore,
        assets: IAssetStore,
        extractor: IMetadataExtractor,
        guard: RunDedupGuard,
        config: Optional[UploadConfig] = None,
    ):
        self._store = store
        self._assets = assets
        self._extractor = extractor
        self._guard = guard
        self._config = config or UploadConfig()

    async def execute(self, pending: PendingUpload) -> UploadOutcome:
        identifier = pending.assigned_id
        try:
            if await self._guard.is_duplicate(pending.content_hash):
                logger.info("Skipped duplicate: %s", pending.file_path.name)
                return UploadOutcome.skip(identifier, "duplicate content", pending.file_path)

            capture = await self._extract(pending)

            asset = await self._assets.upload(
                pending.file_path,
                identifier,
                self._config.max_dimension,
            )
            record = PhotoRecordMapper.to_record(pending, asset, capture)
            await self._store.put(identifier, record)
            self._guard.remember(pending.content_hash)
        except Exception as exc:
            reason = str(exc) or type(exc).__name__
            logger.error("%s: %s", identifier, reason)
            return UploadOutcome.fail(identifier, reason, pending.file_path)

        logger.debug("%s uploaded from %s (%dx%d)", identifier, pending.file_path, asset.width, asset.height)
        return UploadOutcome.ok(identifier, pending.file_path)

    async def _extract(self, pending: PendingUpload) -> CaptureMetadata:
        try:
            return await self._extractor.extract(pending.file_path)
        except Exception as exc:
            logger.debug("Metadata extraction failed for %s: %s", pending.file_path, exc)
            return CaptureMetadata()
