"""Error taxonomy for aggregation, uploads and insights."""

from dataclasses import dataclass
from uuid import UUID


class InvalidWindow(ValueError):
    """Raised when an aggregation window ends at or before its start."""


class ProfileNotFound(LookupError):
    """Raised by profile repositories when no profile row exists."""


class UploadError(RuntimeError):
    """Base class for upload orchestration failures."""

    reason = "upload_failed"


class StorageFailed(UploadError):
    """Image bytes could not be persisted."""

    reason = "storage_failed"


class AnalysisFailed(UploadError):
    """The vision service could not produce a meal estimate."""

    reason = "analysis_failed"


class InsightGenerationFailed(RuntimeError):
    """The generative insight service failed for a request."""


@dataclass(frozen=True)
class DataQualityAnomaly:
    """An entry excluded from aggregation because of a bad field value."""

    entry_id: UUID
    field: str
    raw_value: object
