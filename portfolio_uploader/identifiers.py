"""Identifier namespace helpers: PREFIX-DDDD formatting and parsing."""
import re
from typing import Optional


def format_identifier(number: int, prefix: str = "IMG", width: int = 4) -> str:
    """Format ``number`` as ``PREFIX-<zero padded>``; width is a minimum."""
    if number < 0:
        raise ValueError(f"identifier number must be non-negative: {number}")
    return f"{prefix}-{number:0{width}d}"


def parse_identifier(identifier: Optional[str], prefix: str = "IMG") -> Optional[int]:
    """Return the numeric suffix of ``identifier`` or None if it does not match."""
    if not identifier:
        return None
    match = re.fullmatch(rf"{re.escape(prefix)}-(\d+)", identifier.strip())
    return int(match.group(1)) if match else None


def seed_from_identifier(identifier: Optional[str], prefix: str = "IMG") -> int:
    """Next free number after ``identifier``; 0 for an empty or foreign namespace."""
    number = parse_identifier(identifier, prefix)
    return number + 1 if number is not None else 0
