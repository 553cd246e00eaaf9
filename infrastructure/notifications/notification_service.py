"""
Notification sender - writes in-app notifications to the notifications table.
"""

import logging
from typing import Optional

from supabase import Client

from core.domain.models import Team, TeamInvitation
from core.interfaces.messaging import INotificationService
from infrastructure.database.supabase_client import get_supabase, run_sync

logger = logging.getLogger(__name__)


class SupabaseNotificationService(INotificationService):
    """In-app notifications; the UI picks them up through realtime"""

    def __init__(self, client: Optional[Client] = None):
        self._client = client

    @property
    def db(self) -> Client:
        return self._client or get_supabase()

    @run_sync
    def _insert_sync(self, row: dict) -> dict:
        response = self.db.table("notifications").insert(row).execute()
        return response.data[0] if response.data else {}

    async def _send(self, user_id, type_: str, title: str, message: str, team: Team) -> bool:
        row = {
            "type": type_,
            "title": title,
            "message": message,
            "user_id": str(user_id),
            "tournament_id": str(team.tournament_id) if team.tournament_id else None,
            "target_role": "player",
            "read": False,
        }
        data = await self._insert_sync(row)
        logger.info(f"[NOTIFY] {type_} -> {user_id}")
        return bool(data)

    async def notify_team_invitation(self, invitation: TeamInvitation, team: Team) -> bool:
        message = f"You have been invited to join {team.name}"
        if invitation.message:
            message += f": {invitation.message}"
        return await self._send(invitation.invitee_id, "team_invitation", "Team invitation", message, team)

    async def notify_invitation_accepted(self, invitation: TeamInvitation, team: Team) -> bool:
        return await self._send(
            invitation.inviter_id,
            "team_invitation_accepted",
            "Invitation accepted",
            f"Your invitation to {team.name} was accepted",
            team,
        )
