"""
Exception hierarchy for portfolio_uploader.

Setup problems abort a run; per-unit problems are turned into outcomes by the
worker pool and only surface as a BatchUploadError once the batch is over.
"""
from typing import List, Optional


class PortfolioUploaderError(Exception):
    """Base exception for all portfolio uploader errors."""


class DiscoveryError(PortfolioUploaderError):
    """Raised when the folder list cannot be read."""


class HashError(PortfolioUploaderError):
    """Raised when a file cannot be read for hashing."""

    def __init__(self, message: str, file_path: Optional[str] = None):
        super().__init__(message)
        self.file_path = file_path


class MetadataStoreError(PortfolioUploaderError):
    """Raised when the metadata store rejects a request."""


class AssetStoreError(PortfolioUploaderError):
    """Raised when the asset store rejects an upload or admin call."""


class BatchUploadError(PortfolioUploaderError):
    """Raised after a batch finished with at least one failed unit."""

    def __init__(self, failed: List[str], summary=None):
        self.failed = list(failed)
        self.summary = summary
        super().__init__(
            f"Upload completed with {len(self.failed)} failures:\n" + ", ".join(self.failed)
        )
