"""
Protocols (interfaces) for the collaborators of the batch pipeline.

The pipeline only talks to these; concrete Firestore and Cloudinary clients live in services.
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from .models import CaptureMetadata, PhotoRecord, UploadedAsset


@runtime_checkable
class IMetadataExtractor(Protocol):
    """Interface for capture metadata extraction."""

    async def extract(self, path: Path) -> CaptureMetadata:
        """Return capture metadata; never raises."""
        ...


class IMetadataStore(ABC):
    """Document store keyed by identifier (Repository Pattern)."""

    @abstractmethod
    async def hash_exists(self, content_hash: str) -> bool:
        """True if any record carries ``content_hash``."""

    @abstractmethod
    async def next_id_seed(self, prefix: str) -> int:
        """Next free identifier number derived from the maximal stored one."""

    @abstractmethod
    async def get(self, identifier: str) -> Optional[PhotoRecord]:
        """Fetch one record, None if missing."""

    @abstractmethod
    async def put(self, identifier: str, record: PhotoRecord) -> None:
        """Create or replace the record stored under ``identifier``."""

    @abstractmethod
    async def set_flag(self, identifier: str, field: str, value: bool) -> None:
        """Update a single boolean field of an existing record."""

    @abstractmethod
    async def list_flagged(self, field: str) -> List[PhotoRecord]:
        """Records whose boolean ``field`` is true."""

    @abstractmethod
    async def delete_all(self) -> int:
        """Delete every record, returning how many were removed."""


class IAssetStore(ABC):
    """Remote image store with upload-time transformations."""

    @abstractmethod
    async def upload(self, path: Path, public_id: str, max_dimension: int) -> UploadedAsset:
        """Upload without overwrite, limiting the long side to ``max_dimension``."""

    @abstractmethod
    async def list_by_prefix(self, prefix: str, cursor: Optional[str] = None) -> Dict[str, Any]:
        """One page: ``{"public_ids": [...], "next_cursor": str | None}``."""

    @abstractmethod
    async def delete(self, public_ids: List[str]) -> None:
        """Delete the given assets."""
