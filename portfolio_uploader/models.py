"""
Models for portfolio_uploader.

Immutable dataclasses describing one batch run, from discovered file to
per-unit outcome.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional, Dict, Any, List, FrozenSet
import logging
import os

logger = logging.getLogger(__name__)


DEFAULT_IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".webp"})


class OutcomeStatus(Enum):
    """Per-unit outcome status."""
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"  # duplicate caught by the in-run guard


class ConfirmationPolicy(Enum):
    """How many times the reset token has to be typed."""
    SINGLE = "single"
    DOUBLE = "double"

    @property
    def prompts(self) -> int:
        return 2 if self is ConfirmationPolicy.DOUBLE else 1


@dataclass(frozen=True)
class Candidate:
    """A discovered image file, before hashing."""
    file_path: Path


@dataclass(frozen=True)
class HashedCandidate:
    """Candidate plus the digest of its bytes."""
    file_path: Path
    content_hash: str


@dataclass(frozen=True)
class PendingUpload:
    """Deduplicated candidate with its assigned identifier."""
    file_path: Path
    content_hash: str
    assigned_id: str


@dataclass(frozen=True)
class CaptureMetadata:
    """Optional capture attributes read from EXIF."""
    camera: Optional[str] = None
    f_number: Optional[float] = None
    exposure_time: Optional[float] = None
    iso: Optional[int] = None
    shot_date: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (self.camera, self.f_number, self.exposure_time, self.iso, self.shot_date)
        )


@dataclass(frozen=True)
class UploadedAsset:
    """What the asset store reports back after an upload."""
    url: str
    width: int
    height: int
    public_id: Optional[str] = None


@dataclass(frozen=True)
class PhotoRecord:
    """Persisted document describing one uploaded photo."""
    id: str
    image_url: str
    width: int
    height: int
    content_hash: str
    camera: Optional[str] = None
    aperture: Optional[str] = None
    shutter_speed: Optional[str] = None
    iso: Optional[int] = None
    shot_date: Optional[datetime] = None
    featured: bool = False

    def to_document(self) -> Dict[str, Any]:
        """Serialize to the Firestore document shape; shotDate stays a datetime (stored as a timestamp)."""
        return {
            "title": self.id,
            "imageUrl": self.image_url,
            "width": self.width,
            "height": self.height,
            "camera": self.camera,
            "aperture": self.aperture,
            "shutterSpeed": self.shutter_speed,
            "iso": self.iso,
            "shotDate": self.shot_date,
            "hash": self.content_hash,
            "featured": self.featured,
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "PhotoRecord":
        shot_date = doc.get("shotDate")
        if isinstance(shot_date, str):
            try:
                shot_date = datetime.fromisoformat(shot_date)
            except ValueError:
                shot_date = None
        return cls(
            id=doc["title"],
            image_url=doc.get("imageUrl", ""),
            width=int(doc.get("width") or 0),
            height=int(doc.get("height") or 0),
            content_hash=doc.get("hash", ""),
            camera=doc.get("camera"),
            aperture=doc.get("aperture"),
            shutter_speed=doc.get("shutterSpeed"),
            iso=doc.get("iso"),
            shot_date=shot_date,
            featured=bool(doc.get("featured", False)),
        )


@dataclass(frozen=True)
class UploadOutcome:
    """Immutable result of one upload unit."""
    identifier: str
    status: OutcomeStatus
    file_path: Optional[Path] = None
    reason: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS

    @property
    def failed(self) -> bool:
        return self.status == OutcomeStatus.FAILED

    @classmethod
    def ok(cls, identifier: str, file_path: Optional[Path] = None):
        return cls(identifier=identifier, status=OutcomeStatus.SUCCESS, file_path=file_path)

    @classmethod
    def fail(cls, identifier: str, reason: str, file_path: Optional[Path] = None):
        return cls(
            identifier=identifier,
            status=OutcomeStatus.FAILED,
            file_path=file_path,
            reason=reason,
        )

    @classmethod
    def skip(cls, identifier: str, reason: str, file_path: Optional[Path] = None):
        return cls(
            identifier=identifier,
            status=OutcomeStatus.SKIPPED,
            file_path=file_path,
            reason=reason,
        )


@dataclass
class BatchSummary:
    """Aggregated result of a batch run."""
    total: int
    completed: int = 0
    failed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    duplicates: int = 0  # dropped before sequencing
    discovered: int = 0

    @property
    def success(self) -> bool:
        return not self.failed

    @property
    def done(self) -> int:
        return self.completed + len(self.failed) + len(self.skipped)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %d", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring non-positive %s=%r, using %d", name, raw, default)
        return default
    return value


@dataclass(frozen=True)
class UploadConfig:
    """Immutable configuration for batch operations."""
    id_prefix: str = "IMG"
    id_width: int = 4
    concurrency: int = 8
    max_dimension: int = 2048
    asset_folder: str = "photo-portfolio"
    collection: str = "photos"
    image_extensions: FrozenSet[str] = DEFAULT_IMAGE_EXTENSIONS
    reset_policy: ConfirmationPolicy = ConfirmationPolicy.SINGLE
    reset_token: str = "RESET"

    @classmethod
    def from_env(cls, **overrides) -> "UploadConfig":
        """Build config from environment variables, then apply overrides."""
        defaults = cls()
        policy_raw = (os.getenv("RESET_CONFIRMATION") or defaults.reset_policy.value).strip().lower()
        try:
            policy = ConfirmationPolicy(policy_raw)
        except ValueError:
            logger.warning("Unknown RESET_CONFIRMATION=%r, using %s", policy_raw, defaults.reset_policy.value)
            policy = defaults.reset_policy

        config = cls(
            id_prefix=os.getenv("PHOTO_ID_PREFIX") or defaults.id_prefix,
            concurrency=_env_int("UPLOAD_CONCURRENCY", defaults.concurrency),
            max_dimension=_env_int("MAX_IMAGE_DIMENSION", defaults.max_dimension),
            asset_folder=os.getenv("CLOUDINARY_FOLDER") or defaults.asset_folder,
            collection=os.getenv("PHOTO_COLLECTION") or defaults.collection,
            reset_policy=policy,
        )
        overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(config, **overrides) if overrides else config

    def is_image(self, path: Path) -> bool:
        return Path(path).suffix.lower() in self.image_extensions
