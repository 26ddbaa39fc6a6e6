"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import uuid4

import pytest

from nutrition_insights.adapters.supabase_entry_repository import (
    SupabaseEntryRepository,
)
from nutrition_insights.adapters.supabase_image_store import SupabaseImageStore
from nutrition_insights.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from nutrition_insights.domain.errors import ProfileNotFound


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {
            "select": [],
            "insert": [],
            "update": [],
            "upsert": [],
            "delete": [],
        }
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, str, object]] = field(default_factory=list)

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def upsert(  # type: ignore[no-untyped-def]
        self, payload, on_conflict: str = ""
    ) -> "FakeTable":
        self._action = "upsert"
        self.last_payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("eq", column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def gte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("gte", column, value))
        return self

    def lt(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("lt", column, value))
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeBucket:
    name: str
    uploads: list[tuple[str, bytes, dict[str, str]]] = field(default_factory=list)

    def upload(self, path: str, file: bytes, file_options: dict[str, str]) -> None:
        self.uploads.append((path, file, file_options))

    def get_public_url(self, path: str) -> str:
        base = "https://project.supabase.co/storage/v1/object/public"
        return f"{base}/{self.name}/{path}"


@dataclass
class FakeStorage:
    buckets: dict[str, FakeBucket] = field(default_factory=dict)

    def from_(self, name: str) -> FakeBucket:
        if name not in self.buckets:
            self.buckets[name] = FakeBucket(name=name)
        return self.buckets[name]


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)
    storage: FakeStorage = field(default_factory=FakeStorage)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def test_entry_repository_lists_food_in_utc_range() -> None:
    client = FakeSupabaseClient()
    food_table = client.table("food_entries")
    user_id = uuid4()
    food_table.queue(
        "select",
        [
            {
                "id": str(uuid4()),
                "user_id": str(user_id),
                "created_at": "2024-03-10T08:15:00+00:00",
                "name": "Omelette",
                "calories": 320,
                "protein": "21",
                "carbs": 3,
                "fats": None,
                "quantity": 1,
                "ingredients": ["eggs", "cheese"],
            }
        ],
    )
    repository = SupabaseEntryRepository(client)

    entries = repository.list_food_entries(
        user_id,
        datetime(2024, 3, 10, tzinfo=UTC),
        datetime(2024, 3, 11, tzinfo=UTC),
    )

    assert len(entries) == 1
    assert entries[0].name == "Omelette"
    assert entries[0].protein == "21"
    assert entries[0].fats is None
    assert entries[0].ingredients == ("eggs", "cheese")
    assert ("gte", "created_at", "2024-03-10T00:00:00+00:00") in food_table.last_filters
    assert ("lt", "created_at", "2024-03-11T00:00:00+00:00") in food_table.last_filters


def test_entry_repository_water_roundtrip() -> None:
    client = FakeSupabaseClient()
    water_table = client.table("water_entries")
    user_id = uuid4()
    entry_id = uuid4()
    row = {
        "id": str(entry_id),
        "user_id": str(user_id),
        "created_at": "2024-03-10T09:00:00",
        "amount_ml": 350,
    }
    water_table.queue("insert", [row])
    water_table.queue("select", [row])
    repository = SupabaseEntryRepository(client)

    created = repository.insert_water_entry(user_id, 350)
    listed = repository.list_water_entries(
        user_id,
        datetime(2024, 3, 10, tzinfo=UTC),
        datetime(2024, 3, 11, tzinfo=UTC),
    )
    repository.delete_water_entry(user_id, entry_id)

    assert created.id == entry_id
    assert created.created_at.tzinfo is not None
    assert listed[0].amount_ml == 350
    assert ("eq", "id", str(entry_id)) in water_table.last_filters


def test_entry_repository_insert_food_requires_row() -> None:
    repository = SupabaseEntryRepository(FakeSupabaseClient())

    with pytest.raises(RuntimeError):
        repository.insert_food_entry(
            user_id=uuid4(),
            name="Toast",
            calories=150,
            protein=5,
            carbs=28,
            fats=2,
            quantity=1,
            image_url=None,
            ingredients=["bread"],
        )


def test_profile_repository_get_and_upsert() -> None:
    client = FakeSupabaseClient()
    profiles_table = client.table("profiles")
    user_id = uuid4()
    profiles_table.queue(
        "upsert",
        [{"id": str(user_id), "daily_calories": 2000, "height_unit": "cm"}],
    )
    profiles_table.queue(
        "select", [{"id": str(user_id), "daily_calories": "2000", "height": ""}]
    )
    repository = SupabaseProfileRepository(client)

    created = repository.upsert_profile(user_id, {"daily_calories": 2000})
    fetched = repository.get_profile(user_id)

    assert created.daily_calories == 2000
    assert isinstance(profiles_table.last_payload, dict)
    assert profiles_table.last_payload["id"] == str(user_id)
    assert fetched is not None
    assert fetched.daily_calories == 2000
    assert fetched.height is None
    assert fetched.weight_unit == "kg"
    assert repository.get_profile(uuid4()) is None


def test_profile_repository_update_missing_row_raises() -> None:
    repository = SupabaseProfileRepository(FakeSupabaseClient())

    with pytest.raises(ProfileNotFound):
        repository.update_profile(uuid4(), {"daily_protein": 160})


def test_image_store_uploads_and_returns_public_url() -> None:
    client = FakeSupabaseClient()
    store = SupabaseImageStore(client, bucket="food-images")

    url = store.put("user/123-meal.jpg", b"\xff\xd8\xff", "image/jpeg")

    bucket = client.storage.buckets["food-images"]
    assert bucket.uploads[0][0] == "user/123-meal.jpg"
    assert bucket.uploads[0][2]["content-type"] == "image/jpeg"
    assert url.endswith("/food-images/user/123-meal.jpg")
