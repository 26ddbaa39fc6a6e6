"""Upload orchestration states and results."""

from dataclasses import dataclass
from enum import StrEnum

from nutrition_insights.domain.errors import UploadError
from nutrition_insights.domain.vision import MealEstimate


class UploadState(StrEnum):
    """Lifecycle of a single image upload."""

    IDLE = "idle"
    UPLOADING = "uploading"
    STORED = "stored"
    ANALYZING = "analyzing"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass(frozen=True)
class UploadOutcome:
    """Snapshot of an upload at a state transition."""

    state: UploadState
    image_url: str | None = None
    estimate: MealEstimate | None = None
    error: UploadError | None = None

    @property
    def reason(self) -> str | None:
        """Return the failure reason code, if the upload failed."""
        return self.error.reason if self.error else None
