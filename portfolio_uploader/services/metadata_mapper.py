"""Mapping from capture metadata and upload results to photo records."""
from __future__ import annotations

import math
from typing import Optional

from ..models import CaptureMetadata, PendingUpload, PhotoRecord, UploadedAsset


def format_aperture(f_number: Optional[float]) -> Optional[str]:
    """``2.8`` -> ``"f/2.8"``, ``8.0`` -> ``"f/8"``."""
    if not f_number:
        return None
    return f"f/{f_number:g}"


def format_shutter_speed(exposure_time: Optional[float]) -> Optional[str]:
    """
    Exposure time in seconds as a reciprocal string, e.g. 0.004 -> ``"1/250"``.

    The denominator is rounded half-up. Missing or zero exposure, or one that
    rounds to a zero denominator, yields None.
    """
    if not exposure_time or exposure_time <= 0:
        return None
    denominator = math.floor(1 / exposure_time + 0.5)
    if denominator <= 0:
        return None
    return f"1/{denominator}"


class PhotoRecordMapper:
    """Builds the persisted record for one successful upload."""

    @staticmethod
    def to_record(
        pending: PendingUpload,
        asset: UploadedAsset,
        capture: Optional[CaptureMetadata] = None,
    ) -> PhotoRecord:
        capture = capture or CaptureMetadata()
        return PhotoRecord(
            id=pending.assigned_id,
            image_url=asset.url,
            width=asset.width,
            height=asset.height,
            content_hash=pending.content_hash,
            camera=capture.camera,
            aperture=format_aperture(capture.f_number),
            shutter_speed=format_shutter_speed(capture.exposure_time),
            iso=capture.iso,
            shot_date=capture.shot_date,
            featured=False,
        )
