"""
Supabase implementation of the user directory (user_profiles table).
"""

from typing import Optional
from uuid import UUID

from supabase import Client

from core.domain.models import UserProfile
from core.interfaces.repositories import IUserDirectory
from infrastructure.database.supabase_client import get_supabase, run_sync


class SupabaseUserDirectory(IUserDirectory):
    """Resolves users by email and loads profiles"""

    def __init__(self, client: Optional[Client] = None):
        self._client = client

    @property
    def db(self) -> Client:
        return self._client or get_supabase()

    def _to_model(self, data: dict) -> UserProfile:
        return UserProfile(
            id=data["id"],
            email=data["email"],
            full_name=data.get("full_name"),
            phone=data.get("phone"),
        )

    @run_sync
    def _get_id_by_email_sync(self, email: str) -> Optional[str]:
        response = self.db.table("user_profiles").select("id").eq("email", email).limit(1).execute()
        return response.data[0]["id"] if response.data else None

    async def resolve_user_by_email(self, email: str) -> Optional[UUID]:
        user_id = await self._get_id_by_email_sync(email.strip().lower())
        return UUID(str(user_id)) if user_id else None

    @run_sync
    def _get_profile_sync(self, user_id: UUID) -> Optional[dict]:
        response = self.db.table("user_profiles")\
            .select("id, email, full_name, phone")\
            .eq("id", str(user_id))\
            .execute()
        return response.data[0] if response.data else None

    async def get_profile(self, user_id: UUID) -> Optional[UserProfile]:
        data = await self._get_profile_sync(user_id)
        return self._to_model(data) if data else None
