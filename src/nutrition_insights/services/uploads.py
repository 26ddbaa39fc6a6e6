"""Upload, storage and analysis sequencing for meal photos."""

import asyncio
import logging
import re
import time
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID, uuid4

from nutrition_insights.domain.errors import AnalysisFailed, StorageFailed
from nutrition_insights.domain.uploads import UploadOutcome, UploadState
from nutrition_insights.services.vision import VisionService, detect_mime_type

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]+")

_logger = logging.getLogger(__name__)


class ImageStore(Protocol):
    """Durable storage for uploaded images."""

    def put(self, key: str, data: bytes, content_type: str) -> str:
        """Persist bytes under key and return a public URL."""


class UploadObserver(Protocol):
    """Receives every state transition of an upload."""

    async def notify(self, outcome: UploadOutcome) -> None:
        """Handle a state transition."""


@dataclass
class UploadOrchestrator:
    """Runs ``uploading -> stored -> analyzing -> complete | failed``.

    Holds no per-upload state, so one instance serves concurrent calls.
    Never creates food entries; the caller logs an entry after the user
    confirms the estimate.
    """

    image_store: ImageStore
    vision_service: VisionService
    analysis_timeout_seconds: float = 60.0

    async def run(
        self,
        user_id: UUID,
        filename: str,
        data: bytes,
        observer: UploadObserver | None = None,
    ) -> UploadOutcome:
        """Store an image, analyze it and report the outcome."""
        await _emit(observer, UploadOutcome(state=UploadState.UPLOADING))

        key = build_storage_key(user_id, filename)
        try:
            image_url = await asyncio.to_thread(
                self.image_store.put, key, data, detect_mime_type(data)
            )
        except Exception as exc:
            _logger.exception("Image storage failed: key=%s", key)
            return await _fail(observer, StorageFailed(str(exc)), image_url=None)
        await _emit(
            observer, UploadOutcome(state=UploadState.STORED, image_url=image_url)
        )

        await _emit(
            observer, UploadOutcome(state=UploadState.ANALYZING, image_url=image_url)
        )
        try:
            estimate = await asyncio.wait_for(
                self.vision_service.analyze(data),
                timeout=self.analysis_timeout_seconds,
            )
        except TimeoutError:
            _logger.error(
                "Image analysis timed out after %ss: key=%s",
                self.analysis_timeout_seconds,
                key,
            )
            return await _fail(
                observer, AnalysisFailed("Analysis timed out"), image_url=image_url
            )
        except Exception as exc:
            _logger.exception("Image analysis failed: key=%s", key)
            return await _fail(observer, AnalysisFailed(str(exc)), image_url=image_url)

        outcome = UploadOutcome(
            state=UploadState.COMPLETE, image_url=image_url, estimate=estimate
        )
        await _emit(observer, outcome)
        return outcome


def build_storage_key(user_id: UUID, filename: str) -> str:
    """Return a per-upload unique object key."""
    safe_name = _UNSAFE_KEY_CHARS.sub("-", filename).strip("-.") or "image"
    timestamp_ms = time.time_ns() // 1_000_000
    return f"{user_id}/{timestamp_ms}-{uuid4().hex[:8]}-{safe_name}"


async def _emit(observer: UploadObserver | None, outcome: UploadOutcome) -> None:
    if observer is not None:
        await observer.notify(outcome)


async def _fail(
    observer: UploadObserver | None,
    error: StorageFailed | AnalysisFailed,
    image_url: str | None,
) -> UploadOutcome:
    outcome = UploadOutcome(state=UploadState.FAILED, image_url=image_url, error=error)
    await _emit(observer, outcome)
    return outcome
