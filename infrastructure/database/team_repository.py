"""
Supabase implementation of Team repository.

Compound writes go through Postgres functions so that each one commits or
fails as a unit (see supabase/migrations).
"""

import logging
from typing import Optional, List
from uuid import UUID

from supabase import Client

from core.domain.models import (
    Team, TeamCreate, TeamUpdate, TeamMember, TeamRole, TeamWithMembers,
)
from core.interfaces.repositories import ITeamRepository
from infrastructure.database.supabase_client import get_supabase, run_sync

logger = logging.getLogger(__name__)


def _single(data):
    # rpc() returning a composite row comes back as a dict or a 1-item list
    if isinstance(data, list):
        return data[0] if data else None
    return data


class SupabaseTeamRepository(ITeamRepository):
    """Supabase implementation of team repository"""

    def __init__(self, client: Optional[Client] = None):
        self._client = client

    @property
    def db(self) -> Client:
        return self._client or get_supabase()

    def _to_team(self, data: dict) -> Team:
        return Team(
            id=data["id"],
            name=data["name"],
            description=data.get("description"),
            sport_type=data.get("sport_type"),
            tournament_id=data.get("tournament_id"),
            captain_id=data["captain_id"],
            max_members=data["max_members"],
            current_members=data.get("current_members", 0),
            logo_url=data.get("logo_url"),
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    def _to_member(self, data: dict) -> TeamMember:
        return TeamMember(
            id=data.get("id"),
            team_id=data["team_id"],
            user_id=data["user_id"],
            role=TeamRole(data.get("role", "member")),
            joined_at=data.get("joined_at"),
        )

    def _to_team_with_members(self, data: dict) -> TeamWithMembers:
        team = self._to_team(data)
        members = [self._to_member(m) for m in data.get("members") or []]
        return TeamWithMembers(**team.model_dump(), members=members)

    # --- CREATE ---

    @run_sync
    def _create_with_captain_sync(self, team_data: TeamCreate, captain_id: UUID) -> dict:
        response = self.db.rpc("create_team_with_captain", {
            "p_name": team_data.name,
            "p_description": team_data.description,
            "p_sport_type": team_data.sport_type,
            "p_max_members": team_data.max_members,
            "p_tournament_id": str(team_data.tournament_id) if team_data.tournament_id else None,
            "p_logo_url": team_data.logo_url,
            "p_captain_id": str(captain_id),
        }).execute()
        return _single(response.data)

    async def create_with_captain(self, team_data: TeamCreate, captain_id: UUID) -> Team:
        data = await self._create_with_captain_sync(team_data, captain_id)
        return self._to_team(data)

    # --- READ ---

    @run_sync
    def _get_by_id_sync(self, team_id: UUID) -> Optional[dict]:
        response = self.db.table("teams").select("*").eq("id", str(team_id)).execute()
        return response.data[0] if response.data else None

    async def get_by_id(self, team_id: UUID) -> Optional[Team]:
        data = await self._get_by_id_sync(team_id)
        return self._to_team(data) if data else None

    @run_sync
    def _get_with_members_sync(self, team_id: UUID) -> Optional[dict]:
        response = self.db.table("teams")\
            .select("*, members:team_members(*)")\
            .eq("id", str(team_id))\
            .execute()
        return response.data[0] if response.data else None

    async def get_with_members(self, team_id: UUID) -> Optional[TeamWithMembers]:
        data = await self._get_with_members_sync(team_id)
        return self._to_team_with_members(data) if data else None

    @run_sync
    def _get_user_teams_sync(self, user_id: UUID) -> List[dict]:
        response = self.db.table("team_members")\
            .select("team:teams(*, members:team_members(*))")\
            .eq("user_id", str(user_id))\
            .execute()
        return [m["team"] for m in response.data if m.get("team")] if response.data else []

    async def get_user_teams(self, user_id: UUID) -> List[TeamWithMembers]:
        data = await self._get_user_teams_sync(user_id)
        return [self._to_team_with_members(d) for d in data]

    @run_sync
    def _get_member_sync(self, team_id: UUID, user_id: UUID) -> Optional[dict]:
        response = self.db.table("team_members").select("*")\
            .eq("team_id", str(team_id))\
            .eq("user_id", str(user_id))\
            .execute()
        return response.data[0] if response.data else None

    async def get_member(self, team_id: UUID, user_id: UUID) -> Optional[TeamMember]:
        data = await self._get_member_sync(team_id, user_id)
        return self._to_member(data) if data else None

    # --- MEMBERS ---

    @run_sync
    def _add_member_sync(self, team_id: UUID, user_id: UUID, role: TeamRole) -> dict:
        response = self.db.rpc("add_team_member", {
            "p_team_id": str(team_id),
            "p_user_id": str(user_id),
            "p_role": role.value,
        }).execute()
        return _single(response.data)

    async def add_member(self, team_id: UUID, user_id: UUID, role: TeamRole) -> TeamMember:
        data = await self._add_member_sync(team_id, user_id, role)
        return self._to_member(data)

    @run_sync
    def _remove_member_sync(self, team_id: UUID, user_id: UUID) -> None:
        self.db.rpc("remove_team_member", {
            "p_team_id": str(team_id),
            "p_user_id": str(user_id),
        }).execute()

    async def remove_member(self, team_id: UUID, user_id: UUID) -> None:
        await self._remove_member_sync(team_id, user_id)

    @run_sync
    def _transfer_captaincy_sync(self, team_id: UUID, old_captain_id: UUID, new_captain_id: UUID) -> dict:
        response = self.db.rpc("transfer_team_captaincy", {
            "p_team_id": str(team_id),
            "p_old_captain_id": str(old_captain_id),
            "p_new_captain_id": str(new_captain_id),
        }).execute()
        return _single(response.data)

    async def transfer_captaincy(self, team_id: UUID, old_captain_id: UUID, new_captain_id: UUID) -> Team:
        data = await self._transfer_captaincy_sync(team_id, old_captain_id, new_captain_id)
        return self._to_team(data)

    # --- UPDATE / DELETE ---

    @run_sync
    def _update_sync(self, team_id: UUID, update_data: dict) -> Optional[dict]:
        response = self.db.table("teams").update(update_data).eq("id", str(team_id)).execute()
        return response.data[0] if response.data else None

    async def update(self, team_id: UUID, updates: TeamUpdate) -> Optional[Team]:
        update_data = updates.model_dump(exclude_none=True)
        if not update_data:
            return await self.get_by_id(team_id)
        # updated_at is maintained by the teams trigger
        data = await self._update_sync(team_id, update_data)
        return self._to_team(data) if data else None

    @run_sync
    def _delete_cascade_sync(self, team_id: UUID) -> None:
        self.db.rpc("delete_team_cascade", {"p_team_id": str(team_id)}).execute()

    async def delete_cascade(self, team_id: UUID) -> None:
        await self._delete_cascade_sync(team_id)
