"""Shared fixtures: in-memory stores and image factories."""
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

import pytest
from PIL import Image

from portfolio_uploader.exceptions import AssetStoreError
from portfolio_uploader.identifiers import seed_from_identifier
from portfolio_uploader.models import PhotoRecord, UploadedAsset
from portfolio_uploader.protocols import IAssetStore, IMetadataStore


def limit_dimensions(width: int, height: int, max_dimension: int) -> Tuple[int, int]:
    """Size after a c_limit transformation: long side capped, aspect kept, no upscale."""
    long_side = max(width, height)
    if long_side <= max_dimension:
        return width, height
    scale = max_dimension / long_side
    if width >= height:
        return max_dimension, max(1, round(height * scale))
    return max(1, round(width * scale)), max_dimension


class InMemoryPhotoStore(IMetadataStore):
    """Dict-backed metadata store with the Firestore repository's query semantics."""

    def __init__(self, records: Optional[List[PhotoRecord]] = None):
        self.records: Dict[str, PhotoRecord] = {r.id: r for r in records or []}
        self.put_order: List[str] = []
        self.fail_put_for: Set[str] = set()

    async def hash_exists(self, content_hash: str) -> bool:
        return any(r.content_hash == content_hash for r in self.records.values())

    async def next_id_seed(self, prefix: str) -> int:
        latest = max(self.records) if self.records else None
        return seed_from_identifier(latest, prefix)

    async def get(self, identifier: str) -> Optional[PhotoRecord]:
        return self.records.get(identifier)

    async def put(self, identifier: str, record: PhotoRecord) -> None:
        if identifier in self.fail_put_for:
            raise RuntimeError(f"write rejected for {identifier}")
        self.records[identifier] = record
        self.put_order.append(identifier)

    async def set_flag(self, identifier: str, field: str, value: bool) -> None:
        self.records[identifier] = replace(self.records[identifier], **{field: value})

    async def list_flagged(self, field: str) -> List[PhotoRecord]:
        return [r for r in self.records.values() if getattr(r, field)]

    async def delete_all(self) -> int:
        count = len(self.records)
        self.records.clear()
        return count


class FakeAssetStore(IAssetStore):
    """Asset store that applies the limit rule to the real image size."""

    def __init__(self, page_size: int = 2):
        self.assets: Dict[str, UploadedAsset] = {}
        self.fail_for: Set[str] = set()
        self.page_size = page_size
        self.delete_calls: List[List[str]] = []
        self.folder = "photo-portfolio"

    async def upload(self, path: Path, public_id: str, max_dimension: int) -> UploadedAsset:
        if public_id in self.fail_for:
            raise AssetStoreError(f"simulated upload error for {public_id}")
        key = f"{self.folder}/{public_id}"
        if key in self.assets:
            raise AssetStoreError(f"asset {public_id} already exists (overwrite disabled)")
        with Image.open(path) as img:
            width, height = limit_dimensions(img.width, img.height, max_dimension)
        asset = UploadedAsset(
            url=f"https://res.example.com/{key}.jpg",
            width=width,
            height=height,
            public_id=key,
        )
        self.assets[key] = asset
        return asset

    async def list_by_prefix(self, prefix: str, cursor: Optional[str] = None):
        # The cursor is the last key returned, so it survives deletions.
        keys = sorted(k for k in self.assets if k.startswith(prefix) and (not cursor or k > cursor))
        page = keys[:self.page_size]
        more = len(keys) > self.page_size
        return {"public_ids": page, "next_cursor": page[-1] if more else None}

    async def delete(self, public_ids: List[str]) -> None:
        self.delete_calls.append(list(public_ids))
        for public_id in public_ids:
            self.assets.pop(public_id, None)


def make_record(identifier: str, content_hash: str = "", featured: bool = False) -> PhotoRecord:
    return PhotoRecord(
        id=identifier,
        image_url=f"https://res.example.com/{identifier}.jpg",
        width=100,
        height=100,
        content_hash=content_hash or f"hash-{identifier}",
        featured=featured,
    )


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def store():
    return InMemoryPhotoStore()


@pytest.fixture
def assets():
    return FakeAssetStore()


@pytest.fixture
def make_image():
    """Write a solid-colour image; distinct colours give distinct content."""

    def _make(path: Path, size=(64, 48), color=(200, 30, 30), fmt: str = "JPEG") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", size, color).save(path, fmt)
        return path

    return _make


@pytest.fixture
def folder_list(tmp_path):
    """Write a folder list file and return its path."""

    def _write(*folders) -> Path:
        list_file = tmp_path / "folders.txt"
        list_file.write_text("\n".join(str(f) for f in folders) + "\n", encoding="utf-8")
        return list_file

    return _write


@pytest.fixture
def seeded_store():
    """Build an in-memory store holding the given records."""

    def _seed(*records: PhotoRecord) -> InMemoryPhotoStore:
        return InMemoryPhotoStore(list(records))

    return _seed
