"""
Portfolio Uploader - batch ingestion of local photos into a portfolio.

Pipeline: folder list -> discovery -> BLAKE3 hashing -> dedup against
Firestore records -> sequential IMG-DDDD identifiers -> windowed uploads to
Cloudinary with record persistence -> progress/failure summary.

Usage:
    from portfolio_uploader import (
        BatchUploadProcess, CloudinaryAssetStore, PhotoRepository, UploadConfig, open_firestore_client,
    )

    config = UploadConfig.from_env()
    repository = PhotoRepository(open_firestore_client(Path("firebase-admin.json")), config.collection)
    async with CloudinaryAssetStore(cloud, key, secret, folder=config.asset_folder) as assets:
        process = BatchUploadProcess(repository, assets, config=config)
        summary = await process.upload_from_list(Path("folders.txt"))
"""
from .exceptions import (
    AssetStoreError,
    BatchUploadError,
    DiscoveryError,
    HashError,
    MetadataStoreError,
    PortfolioUploaderError,
)
from .models import (
    BatchSummary,
    ConfirmationPolicy,
    OutcomeStatus,
    PendingUpload,
    PhotoRecord,
    UploadConfig,
    UploadOutcome,
)
from .orchestrator import BatchUploadProcess, ProgressAggregator, UploadWorkerPool
from .services import (
    CloudinaryAssetStore,
    ExifExtractor,
    PhotoRepository,
    open_firestore_client,
)

__version__ = "0.1.0"
__all__ = [
    # Main
    "BatchUploadProcess",
    "ProgressAggregator",
    "UploadWorkerPool",
    # Models
    "BatchSummary",
    "ConfirmationPolicy",
    "OutcomeStatus",
    "PendingUpload",
    "PhotoRecord",
    "UploadConfig",
    "UploadOutcome",
    # Services
    "CloudinaryAssetStore",
    "ExifExtractor",
    "PhotoRepository",
    "open_firestore_client",
    # Errors
    "AssetStoreError",
    "BatchUploadError",
    "DiscoveryError",
    "HashError",
    "MetadataStoreError",
    "PortfolioUploaderError",
]
