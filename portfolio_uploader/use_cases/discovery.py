"""Candidate discovery from a folder list file."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import logging

from ..exceptions import DiscoveryError
from ..models import Candidate, UploadConfig

logger = logging.getLogger(__name__)


@dataclass
class DiscoveryResult:
    """Candidates found plus the folders that had to be skipped."""

    candidates: List[Candidate] = field(default_factory=list)
    missing_folders: List[Path] = field(default_factory=list)
    folders: List[Path] = field(default_factory=list)


def read_folder_list(list_file: Path) -> List[Path]:
    """
    Read folder paths, one per line. Blank lines are ignored.

    Raises:
        DiscoveryError: the list file is missing or unreadable
    """
    list_file = Path(list_file)
    if not list_file.is_file():
        raise DiscoveryError(f"Folder list file not found: {list_file}")
    try:
        content = list_file.read_text(encoding="utf-8")
    except OSError as exc:
        raise DiscoveryError(f"could not read folder list {list_file}: {exc}") from exc
    return [Path(line.strip()) for line in content.splitlines() if line.strip()]


class FileCollector:
    """Collects image files from folders (no recursion)."""

    def __init__(self, config: Optional[UploadConfig] = None):
        self._config = config or UploadConfig()

    def collect_files(self, folder: Path) -> List[Path]:
        """
        Collect the images directly inside ``folder``.

        Args:
            folder: Folder to scan

        Returns:
            Sorted list of image paths
        """
        return sorted(
            item for item in Path(folder).iterdir()
            if item.is_file() and self._config.is_image(item)
        )

    def discover(self, folders: List[Path]) -> DiscoveryResult:
        result = DiscoveryResult(folders=list(folders))
        files: List[Path] = []
        for folder in folders:
            if not folder.is_dir():
                logger.warning("Skipped missing folder: %s", folder)
                result.missing_folders.append(folder)
                continue
            found = self.collect_files(folder)
            logger.debug("%d images in %s", len(found), folder)
            files.extend(found)

        files.sort(key=str)
        result.candidates = [Candidate(file_path=path) for path in files]
        return result


def discover_candidates(list_file: Path, config: Optional[UploadConfig] = None) -> DiscoveryResult:
    """Read ``list_file`` and collect candidates from every listed folder."""
    return FileCollector(config).discover(read_folder_list(list_file))
