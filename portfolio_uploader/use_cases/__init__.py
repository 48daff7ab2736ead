"""Application use cases for portfolio uploader workflows."""

from .discovery import DiscoveryResult, FileCollector, discover_candidates, read_folder_list
from .deduplication import Deduplicator, HashCandidatesUseCase, HashingResult, RunDedupGuard
from .sequencing import Sequencer, assign_identifiers
from .process_photo import ProcessPhotoUseCase
from .featured import ClearFeaturedUseCase, FeatureResult, MarkFeaturedUseCase, parse_numbers
from .reset import FullResetUseCase, ResetResult, confirm_reset

__all__ = [
    "DiscoveryResult",
    "FileCollector",
    "discover_candidates",
    "read_folder_list",
    "Deduplicator",
    "HashCandidatesUseCase",
    "HashingResult",
    "RunDedupGuard",
    "Sequencer",
    "assign_identifiers",
    "ProcessPhotoUseCase",
    "ClearFeaturedUseCase",
    "FeatureResult",
    "MarkFeaturedUseCase",
    "parse_numbers",
    "FullResetUseCase",
    "ResetResult",
    "confirm_reset",
]
