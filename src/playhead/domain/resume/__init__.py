"""Resume domain - per-track progress and the "continue watching" view."""

from .progress import ProgressLog, ProgressRecord, compute_percentage
from .view import (
    RESUME_LIMIT,
    RESUME_MAX_PERCENTAGE,
    ResumeItem,
    get_resume_items,
    is_resumable,
)

__all__ = [
    "ProgressLog",
    "ProgressRecord",
    "compute_percentage",
    "RESUME_LIMIT",
    "RESUME_MAX_PERCENTAGE",
    "ResumeItem",
    "get_resume_items",
    "is_resumable",
]
