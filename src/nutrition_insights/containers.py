"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from nutrition_insights.adapters.openai_insight_client import OpenAIInsightClient
from nutrition_insights.adapters.openai_vision_client import OpenAIVisionClient
from nutrition_insights.adapters.supabase_entry_repository import (
    SupabaseEntryRepository,
)
from nutrition_insights.adapters.supabase_image_store import SupabaseImageStore
from nutrition_insights.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from nutrition_insights.config import Settings
from nutrition_insights.services.aggregation import AggregationService
from nutrition_insights.services.attainment import CalendarService
from nutrition_insights.services.cache import AggregateCache, InMemoryCache
from nutrition_insights.services.entries import EntryService
from nutrition_insights.services.insights import InsightService
from nutrition_insights.services.profiles import ProfileService
from nutrition_insights.services.uploads import UploadOrchestrator
from nutrition_insights.services.vision import VisionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    profile_service: ProfileService
    entry_service: EntryService
    aggregation_service: AggregationService
    calendar_service: CalendarService
    insight_service: InsightService
    upload_orchestrator: UploadOrchestrator
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    entry_repository = SupabaseEntryRepository(supabase_client)
    profile_repository = SupabaseProfileRepository(supabase_client)
    image_store = SupabaseImageStore(
        supabase_client, bucket=resolved_settings.image_bucket
    )
    aggregate_cache = AggregateCache(
        InMemoryCache(), ttl_seconds=resolved_settings.aggregate_cache_ttl_seconds
    )

    profile_service = ProfileService(
        repository=profile_repository,
        cache=aggregate_cache,
        retry_attempts=resolved_settings.profile_retry_attempts,
        retry_delay_seconds=resolved_settings.profile_retry_delay_seconds,
    )
    entry_service = EntryService(repository=entry_repository, cache=aggregate_cache)
    aggregation_service = AggregationService(
        repository=entry_repository, cache=aggregate_cache
    )
    calendar_service = CalendarService(
        aggregation_service=aggregation_service,
        profile_service=profile_service,
    )

    vision_client = OpenAIVisionClient.create(
        resolved_settings.openai_api_key,
        timeout_seconds=resolved_settings.analysis_timeout_seconds,
    )
    vision_service = VisionService(
        client=vision_client,
        model=resolved_settings.openai_vision_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    upload_orchestrator = UploadOrchestrator(
        image_store=image_store,
        vision_service=vision_service,
        analysis_timeout_seconds=resolved_settings.analysis_timeout_seconds,
    )
    insight_client = OpenAIInsightClient.create(
        resolved_settings.openai_api_key,
        timeout_seconds=resolved_settings.insight_timeout_seconds,
    )
    insight_service = InsightService(
        client=insight_client,
        aggregation_service=aggregation_service,
        profile_service=profile_service,
        model=resolved_settings.openai_insight_model,
        timeout_seconds=resolved_settings.insight_timeout_seconds,
    )

    async def close_resources() -> None:
        await vision_client.client.close()
        await insight_client.client.close()

    return AppContainer(
        settings=resolved_settings,
        profile_service=profile_service,
        entry_service=entry_service,
        aggregation_service=aggregation_service,
        calendar_service=calendar_service,
        insight_service=insight_service,
        upload_orchestrator=upload_orchestrator,
        close_resources=close_resources,
    )
