"""Hashing and content-hash deduplication against the metadata store."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Set, Tuple

from ..models import Candidate, HashedCandidate
from ..protocols import IMetadataStore
from ..services import hasher

logger = logging.getLogger(__name__)


@dataclass
class HashingResult:
    """Hashed candidates in discovery order plus unreadable files."""

    hashed: List[HashedCandidate] = field(default_factory=list)
    failures: List[Tuple[Candidate, str]] = field(default_factory=list)


class HashCandidatesUseCase:
    """Compute content digests for all candidates."""

    async def execute(self, candidates: List[Candidate]) -> HashingResult:
        results = await asyncio.gather(
            *(hasher.blake3_file(candidate.file_path) for candidate in candidates),
            return_exceptions=True,
        )
        outcome = HashingResult()
        for candidate, result in zip(candidates, results):
            if isinstance(result, Exception):
                logger.warning("Hash failed for %s: %s", candidate.file_path, result)
                outcome.failures.append((candidate, str(result) or type(result).__name__))
            else:
                outcome.hashed.append(HashedCandidate(candidate.file_path, result))
        return outcome


class Deduplicator:
    """Drops candidates whose digest is already persisted."""

    def __init__(self, store: IMetadataStore):
        self._store = store

    async def filter_new(
        self, candidates: List[HashedCandidate]
    ) -> Tuple[List[HashedCandidate], List[HashedCandidate]]:
        """
        Split candidates into survivors and already-persisted duplicates.

        Both lists keep the original order.
        """
        survivors: List[HashedCandidate] = []
        skipped: List[HashedCandidate] = []
        for candidate in candidates:
            if await self._store.hash_exists(candidate.content_hash):
                logger.info("Skipped duplicate: %s", candidate.file_path.name)
                skipped.append(candidate)
                continue
            survivors.append(candidate)
        return survivors, skipped


class RunDedupGuard:
    """
    Per-run re-check performed by each upload unit right before uploading.

    Hashes persisted earlier in the run are remembered locally; anything else
    is looked up in the store. Units in the same window can still both pass.
    """

    def __init__(self, store: IMetadataStore):
        self._store = store
        self._persisted: Set[str] = set()

    async def is_duplicate(self, content_hash: str) -> bool:
        if content_hash in self._persisted:
            return True
        return await self._store.hash_exists(content_hash)

    def remember(self, content_hash: str) -> None:
        self._persisted.add(content_hash)

    @property
    def persisted(self) -> Set[str]:
        return set(self._persisted)
