"""Featured flag management."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..identifiers import format_identifier
from ..models import UploadConfig
from ..protocols import IMetadataStore

logger = logging.getLogger(__name__)

FEATURED_FIELD = "featured"


@dataclass
class FeatureResult:
    marked: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    invalid: List[str] = field(default_factory=list)


def parse_numbers(raw: str) -> tuple[List[int], List[str]]:
    """Split ``"5, 7,x"`` into numbers and rejected tokens."""
    numbers: List[int] = []
    invalid: List[str] = []
    for token in (part.strip() for part in raw.split(",")):
        if not token:
            continue
        if token.isdigit():
            numbers.append(int(token))
        else:
            invalid.append(token)
    return numbers, invalid


class MarkFeaturedUseCase:
    """Flag the listed photo numbers as featured."""

    def __init__(self, store: IMetadataStore, config: Optional[UploadConfig] = None):
        self._store = store
        self._config = config or UploadConfig()

    async def execute(self, raw_numbers: str) -> FeatureResult:
        numbers, invalid = parse_numbers(raw_numbers)
        result = FeatureResult(invalid=invalid)
        for token in invalid:
            logger.warning("Ignoring non-numeric entry %r", token)

        for number in numbers:
            identifier = format_identifier(number, self._config.id_prefix, self._config.id_width)
            if await self._store.get(identifier) is None:
                logger.warning("%s not found", identifier)
                result.missing.append(identifier)
                continue
            await self._store.set_flag(identifier, FEATURED_FIELD, True)
            logger.info("Marked %s as featured", identifier)
            result.marked.append(identifier)
        return result


class ClearFeaturedUseCase:
    """Remove the featured flag from every record."""

    def __init__(self, store: IMetadataStore):
        self._store = store

    async def execute(self) -> int:
        records = await self._store.list_flagged(FEATURED_FIELD)
        for record in records:
            await self._store.set_flag(record.id, FEATURED_FIELD, False)
        logger.info("Cleared featured flag on %d photos", len(records))
        return len(records)
