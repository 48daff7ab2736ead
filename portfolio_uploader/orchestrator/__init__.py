"""Batch orchestration: worker pool, aggregation and the pipeline process."""
from .aggregator import ProgressAggregator
from .batch import BatchUploadProcess
from .pool import UploadWorkerPool

__all__ = ["BatchUploadProcess", "ProgressAggregator", "UploadWorkerPool"]
