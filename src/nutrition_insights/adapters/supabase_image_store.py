"""Supabase Storage backed image store."""

from dataclasses import dataclass

from supabase import Client

from nutrition_insights.services.uploads import ImageStore


@dataclass
class SupabaseImageStore(ImageStore):
    """Stores meal photos in a public Supabase Storage bucket."""

    client: Client
    bucket: str = "food-images"

    def put(self, key: str, data: bytes, content_type: str) -> str:
        """Upload bytes and return the public URL."""
        storage = self.client.storage.from_(self.bucket)
        storage.upload(
            key,
            data,
            {"content-type": content_type, "upsert": "false"},
        )
        return storage.get_public_url(key)
