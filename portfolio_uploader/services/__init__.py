"""Services for portfolio_uploader."""
from .asset_store import CloudinaryAssetStore
from .exif import ExifExtractor
from .hasher import blake3_file
from .metadata_mapper import PhotoRecordMapper
from .repository import PhotoRepository, open_firestore_client

__all__ = [
    "CloudinaryAssetStore",
    "ExifExtractor",
    "blake3_file",
    "PhotoRecordMapper",
    "PhotoRepository",
    "open_firestore_client",
]
