"""Validation helpers used by the public API."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from lmaccess.config import MAX_BATCH_SIZE


def require_non_empty(mapping: Mapping[str, Any], keys: Sequence[str]) -> None:
    """Raise ``ValueError`` if any of *keys* are missing or empty in *mapping*."""
    missing = [k for k in keys if mapping.get(k) in (None, "", [], ())]
    if missing:
        raise ValueError(f"Missing required parameters: {', '.join(missing)}")


def validate_batch_size(batch_size: int) -> None:
    if not isinstance(batch_size, int) or isinstance(batch_size, bool) or batch_size < 1:
        raise ValueError(f"batch_size must be a positive integer, got {batch_size!r}")
    if batch_size > MAX_BATCH_SIZE:
        raise ValueError(f"batch_size must not exceed {MAX_BATCH_SIZE}, got {batch_size}")


def validate_time_range(start: Optional[int], end: Optional[int]) -> None:
    """Ensure *start* is not after *end* when both are given."""
    if start is not None and end is not None and start > end:
        raise ValueError(f"Start ({start}) must not be after end ({end})")
