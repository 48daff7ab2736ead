"""Sequential identifier assignment."""
from __future__ import annotations

import logging
from typing import List, Optional

from ..identifiers import format_identifier
from ..models import HashedCandidate, PendingUpload, UploadConfig
from ..protocols import IMetadataStore

logger = logging.getLogger(__name__)


def assign_identifiers(
    candidates: List[HashedCandidate],
    seed: int,
    prefix: str = "IMG",
    width: int = 4,
) -> List[PendingUpload]:
    """
    Sort by discovery path and give the k-th candidate ``seed + k``.

    Pure function of its inputs.
    """
    ordered = sorted(candidates, key=lambda c: str(c.file_path))
    return [
        PendingUpload(
            file_path=candidate.file_path,
            content_hash=candidate.content_hash,
            assigned_id=format_identifier(seed + index, prefix, width),
        )
        for index, candidate in enumerate(ordered)
    ]


class Sequencer:
    """Derives the seed from the store once per batch, then assigns offsets."""

    def __init__(self, store: IMetadataStore, config: Optional[UploadConfig] = None):
        self._store = store
        self._config = config or UploadConfig()

    async def assign(self, candidates: List[HashedCandidate]) -> List[PendingUpload]:
        if not candidates:
            return []
        seed = await self._store.next_id_seed(self._config.id_prefix)
        logger.info("Starting from %s", format_identifier(seed, self._config.id_prefix, self._config.id_width))
        return assign_identifiers(candidates, seed, self._config.id_prefix, self._config.id_width)
