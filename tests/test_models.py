"""Tests for portfolio_uploader models."""
from datetime import datetime
from pathlib import Path

import pytest

from portfolio_uploader.models import (
    BatchSummary,
    CaptureMetadata,
    ConfirmationPolicy,
    OutcomeStatus,
    PhotoRecord,
    UploadConfig,
    UploadOutcome,
)


class TestUploadOutcome:
    def test_ok_outcome(self):
        outcome = UploadOutcome.ok("IMG-0001", Path("a/1.jpg"))
        assert outcome.success is True
        assert outcome.failed is False
        assert outcome.status == OutcomeStatus.SUCCESS
        assert outcome.reason is None

    def test_fail_outcome(self):
        outcome = UploadOutcome.fail("IMG-0002", "Upload failed")
        assert outcome.success is False
        assert outcome.failed is True
        assert outcome.status == OutcomeStatus.FAILED
        assert outcome.reason == "Upload failed"

    def test_skip_outcome_is_neither_success_nor_failure(self):
        outcome = UploadOutcome.skip("IMG-0003", "duplicate content")
        assert outcome.success is False
        assert outcome.failed is False
        assert outcome.status == OutcomeStatus.SKIPPED

    def test_immutable(self):
        outcome = UploadOutcome.ok("IMG-0001")
        with pytest.raises(Exception):
            outcome.identifier = "IMG-0009"


class TestPhotoRecord:
    def test_document_shape(self):
        record = PhotoRecord(
            id="IMG-0008",
            image_url="https://res.example.com/IMG-0008.jpg",
            width=2048,
            height=1024,
            content_hash="abc",
            camera="X100V",
            aperture="f/2",
            shutter_speed="1/250",
            iso=200,
            shot_date=datetime(2024, 5, 1, 12, 30, 0),
        )
        doc = record.to_document()
        assert doc == {
            "title": "IMG-0008",
            "imageUrl": "https://res.example.com/IMG-0008.jpg",
            "width": 2048,
            "height": 1024,
            "camera": "X100V",
            "aperture": "f/2",
            "shutterSpeed": "1/250",
            "iso": 200,
            "shotDate": datetime(2024, 5, 1, 12, 30, 0),
            "hash": "abc",
            "featured": False,
        }

    def test_from_document_round_trip_keeps_dates(self):
        record = PhotoRecord(
            id="IMG-0001",
            image_url="u",
            width=1,
            height=2,
            content_hash="h",
            shot_date=datetime(2023, 1, 2, 3, 4, 5),
            featured=True,
        )
        assert PhotoRecord.from_document(record.to_document()) == record

    def test_from_document_accepts_iso_strings(self):
        record = PhotoRecord.from_document({"title": "IMG-0003", "shotDate": "2022-07-09T10:00:00"})
        assert record.shot_date == datetime(2022, 7, 9, 10, 0, 0)

    def test_from_document_tolerates_missing_fields(self):
        record = PhotoRecord.from_document({"title": "IMG-0002", "shotDate": "not a date"})
        assert record.id == "IMG-0002"
        assert record.shot_date is None
        assert record.featured is False
        assert record.width == 0


class TestCaptureMetadata:
    def test_empty(self):
        assert CaptureMetadata().is_empty is True
        assert CaptureMetadata(iso=100).is_empty is False


class TestBatchSummary:
    def test_done_counts_every_outcome_kind(self):
        summary = BatchSummary(total=5, completed=2, failed=["IMG-0003"], skipped=["IMG-0004"])
        assert summary.done == 4
        assert summary.success is False

    def test_success_without_failures(self):
        assert BatchSummary(total=1, completed=1).success is True


class TestUploadConfig:
    def test_defaults(self):
        config = UploadConfig()
        assert config.id_prefix == "IMG"
        assert config.id_width == 4
        assert config.concurrency == 8
        assert config.max_dimension == 2048
        assert config.asset_folder == "photo-portfolio"
        assert config.reset_policy is ConfirmationPolicy.SINGLE

    def test_is_image_case_insensitive(self):
        config = UploadConfig()
        assert config.is_image(Path("a/photo.JPG")) is True
        assert config.is_image(Path("a/photo.webp")) is True
        assert config.is_image(Path("a/photo.Jpeg")) is True
        assert config.is_image(Path("a/photo.gif")) is False
        assert config.is_image(Path("a/notes.txt")) is False

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("PHOTO_ID_PREFIX", "PIC")
        monkeypatch.setenv("UPLOAD_CONCURRENCY", "3")
        monkeypatch.setenv("MAX_IMAGE_DIMENSION", "1024")
        monkeypatch.setenv("CLOUDINARY_FOLDER", "portfolio-test")
        monkeypatch.setenv("RESET_CONFIRMATION", "double")
        config = UploadConfig.from_env()
        assert config.id_prefix == "PIC"
        assert config.concurrency == 3
        assert config.max_dimension == 1024
        assert config.asset_folder == "portfolio-test"
        assert config.reset_policy is ConfirmationPolicy.DOUBLE

    def test_from_env_invalid_values_fall_back(self, monkeypatch):
        monkeypatch.setenv("UPLOAD_CONCURRENCY", "many")
        monkeypatch.setenv("MAX_IMAGE_DIMENSION", "-5")
        monkeypatch.setenv("RESET_CONFIRMATION", "triple")
        config = UploadConfig.from_env()
        assert config.concurrency == 8
        assert config.max_dimension == 2048
        assert config.reset_policy is ConfirmationPolicy.SINGLE

    def test_from_env_overrides(self, monkeypatch):
        monkeypatch.setenv("UPLOAD_CONCURRENCY", "3")
        assert UploadConfig.from_env(concurrency=2).concurrency == 2
        assert UploadConfig.from_env(concurrency=None).concurrency == 3

    def test_confirmation_prompts(self):
        assert ConfirmationPolicy.SINGLE.prompts == 1
        assert ConfirmationPolicy.DOUBLE.prompts == 2
