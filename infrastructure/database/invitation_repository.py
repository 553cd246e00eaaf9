"""
Invitation Repository - CRUD for team_invitations table.
"""

import logging
from datetime import datetime
from typing import Optional, List
from uuid import UUID

from supabase import Client

from core.domain.models import TeamInvitation, InvitationStatus, utcnow
from core.interfaces.repositories import IInvitationRepository
from infrastructure.database.supabase_client import get_supabase, run_sync

logger = logging.getLogger(__name__)


class SupabaseInvitationRepository(IInvitationRepository):

    def __init__(self, client: Optional[Client] = None):
        self._client = client

    @property
    def db(self) -> Client:
        return self._client or get_supabase()

    def _to_model(self, data: dict) -> TeamInvitation:
        return TeamInvitation(
            id=data["id"],
            team_id=data["team_id"],
            inviter_id=data["inviter_id"],
            invitee_id=data["invitee_id"],
            message=data.get("message"),
            status=InvitationStatus(data.get("status", "pending")),
            expires_at=data["expires_at"],
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )

    # --- CREATE ---

    @run_sync
    def _create_pending_sync(self, params: dict) -> dict:
        response = self.db.rpc("create_team_invitation", params).execute()
        data = response.data
        return data[0] if isinstance(data, list) else data

    async def create_pending(
        self,
        team_id: UUID,
        inviter_id: UUID,
        invitee_id: UUID,
        message: Optional[str],
        issued_at: datetime,
        expires_at: datetime,
    ) -> TeamInvitation:
        row = await self._create_pending_sync({
            "p_team_id": str(team_id),
            "p_inviter_id": str(inviter_id),
            "p_invitee_id": str(invitee_id),
            "p_message": message,
            "p_issued_at": issued_at.isoformat(),
            "p_expires_at": expires_at.isoformat(),
        })
        return self._to_model(row)

    # --- READ ---

    @run_sync
    def _get_by_id_sync(self, invitation_id: UUID) -> Optional[dict]:
        response = (
            self.db.table("team_invitations")
            .select("*")
            .eq("id", str(invitation_id))
            .execute()
        )
        return response.data[0] if response.data else None

    async def get_by_id(self, invitation_id: UUID) -> Optional[TeamInvitation]:
        data = await self._get_by_id_sync(invitation_id)
        return self._to_model(data) if data else None

    @run_sync
    def _get_pending_for_user_sync(self, user_id: UUID) -> List[dict]:
        response = (
            self.db.table("team_invitations")
            .select("*")
            .eq("invitee_id", str(user_id))
            .eq("status", InvitationStatus.PENDING.value)
            .order("created_at", desc=True)
            .execute()
        )
        return response.data or []

    async def get_pending_for_user(self, user_id: UUID) -> List[TeamInvitation]:
        data = await self._get_pending_for_user_sync(user_id)
        return [self._to_model(d) for d in data]

    @run_sync
    def _get_for_team_sync(self, team_id: UUID) -> List[dict]:
        response = (
            self.db.table("team_invitations")
            .select("*")
            .eq("team_id", str(team_id))
            .order("created_at", desc=True)
            .execute()
        )
        return response.data or []

    async def get_for_team(self, team_id: UUID) -> List[TeamInvitation]:
        data = await self._get_for_team_sync(team_id)
        return [self._to_model(d) for d in data]

    # --- UPDATE ---

    @run_sync
    def _update_status_sync(self, invitation_id: UUID, status: str, expected: Optional[str]) -> Optional[dict]:
        query = (
            self.db.table("team_invitations")
            .update({"status": status, "updated_at": utcnow().isoformat()})
            .eq("id", str(invitation_id))
        )
        if expected:
            # conditional update: a row that already left `expected` is untouched
            query = query.eq("status", expected)
        response = query.execute()
        return response.data[0] if response.data else None

    async def update_status(
        self,
        invitation_id: UUID,
        status: InvitationStatus,
        expected: Optional[InvitationStatus] = None,
    ) -> Optional[TeamInvitation]:
        data = await self._update_status_sync(
            invitation_id, status.value, expected.value if expected else None
        )
        return self._to_model(data) if data else None
