"""Content hashing for deduplication."""
import asyncio
import logging
from pathlib import Path

from blake3 import blake3

from ..exceptions import HashError

log = logging.getLogger(__name__)

CHUNK_SIZE = 65536  # 64KB


def blake3_file_sync(path: Path) -> str:
    """Stream ``path`` through BLAKE3 and return the hex digest."""
    hasher = blake3()
    try:
        with open(path, "rb") as f:
            while True:
                chunk = f.read(CHUNK_SIZE)
                if not chunk:
                    break
                hasher.update(chunk)
    except OSError as exc:
        raise HashError(f"cannot read {path}: {exc}", file_path=str(path)) from exc
    return hasher.hexdigest()


async def blake3_file(path: Path) -> str:
    """Calculate BLAKE3 hash of file without blocking the event loop."""
    return await asyncio.to_thread(blake3_file_sync, path)
