"""
Invitation service - issue, accept and decline team invitations.

pending -> accepted | declined | expired, all terminal. Expiry is derived
from expires_at whenever an invitation is read or accepted; nothing sweeps
stale rows in the background.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional
from uuid import UUID

from config.features import features
from config.settings import settings
from core.domain.errors import (
    AlreadyMemberError,
    DuplicateMemberError,
    ExpiredError,
    InvalidTransitionError,
    NotFoundError,
    UserNotFoundError,
    ValidationError,
)
from core.domain.models import (
    InvitationStatus,
    Team,
    TeamInvitation,
    TeamRole,
    utcnow,
)
from core.interfaces.messaging import INotificationService
from core.interfaces.repositories import (
    IInvitationRepository,
    ITeamRepository,
    IUserDirectory,
)
from core.services.team_service import TeamService

logger = logging.getLogger(__name__)


class InvitationService:
    """Team invitation state machine"""

    def __init__(
        self,
        invitation_repo: IInvitationRepository,
        team_repo: ITeamRepository,
        team_service: TeamService,
        directory: IUserDirectory,
        notifier: Optional[INotificationService] = None,
        clock: Callable[[], datetime] = utcnow,
        expiry_days: Optional[int] = None,
    ):
        self.invitation_repo = invitation_repo
        self.team_repo = team_repo
        self.team_service = team_service
        self.directory = directory
        self.notifier = notifier
        self.clock = clock
        self.expiry_days = expiry_days or settings.invitation_expiry_days

    async def _notify(self, send, invitation: TeamInvitation, team: Team) -> None:
        # Delivery problems never undo the transition that triggered them
        try:
            await send(invitation, team)
        except Exception as e:
            logger.warning(f"[INVITE] Notification for {invitation.id} failed: {e}")

    async def _require(self, invitation_id: UUID) -> TeamInvitation:
        invitation = await self.invitation_repo.get_by_id(invitation_id)
        if not invitation:
            raise NotFoundError(f"Invitation {invitation_id} not found")
        return invitation

    # === ISSUE ===

    async def send_invitation(
        self,
        team_id: UUID,
        inviter_id: UUID,
        invitee_email: str,
        message: Optional[str] = None,
    ) -> TeamInvitation:
        email = (invitee_email or "").strip().lower()
        if not email:
            raise ValidationError("Invitee email is required", field="email")

        team = await self.team_repo.get_by_id(team_id)
        if not team:
            raise NotFoundError(f"Team {team_id} not found")

        invitee_id = await self.directory.resolve_user_by_email(email)
        if not invitee_id:
            raise UserNotFoundError(f"No user with email {email}")

        if await self.team_repo.get_member(team_id, invitee_id):
            raise AlreadyMemberError("User is already a team member")

        now = self.clock()
        invitation = await self.invitation_repo.create_pending(
            team_id=team_id,
            inviter_id=inviter_id,
            invitee_id=invitee_id,
            message=message,
            issued_at=now,
            expires_at=now + timedelta(days=self.expiry_days),
        )
        logger.info(f"[INVITE] {inviter_id} invited {invitee_id} to team {team_id} ({invitation.id})")

        if self.notifier and features.NOTIFY_TEAM_INVITATIONS:
            await self._notify(self.notifier.notify_team_invitation, invitation, team)
        return invitation

    # === RESPOND ===

    async def accept_invitation(self, invitation_id: UUID) -> TeamInvitation:
        """
        Add the invitee to the team, then mark the invitation accepted.

        The status only changes after membership succeeded, so a failed add
        (team full, store down) leaves the invitation pending for a retry. A
        retry after a failed status write finds the member already in place
        and only completes the status change.
        """
        invitation = await self._require(invitation_id)
        if invitation.status != InvitationStatus.PENDING:
            raise InvalidTransitionError(invitation.status.value, InvitationStatus.ACCEPTED.value)
        if invitation.is_expired(self.clock()):
            raise ExpiredError("Invitation has expired")

        # the team may have been deleted since the invitation was read
        team = await self.team_repo.get_by_id(invitation.team_id)
        if not team:
            raise NotFoundError(f"Team {invitation.team_id} no longer exists")

        try:
            await self.team_service.add_team_member(invitation.invitee_id, invitation.team_id, TeamRole.MEMBER)
            joined = True
        except DuplicateMemberError:
            # an earlier accept added the member but failed before the status write
            logger.info(
                f"[INVITE] {invitation.invitee_id} already in team {invitation.team_id}, "
                f"completing {invitation_id}"
            )
            joined = False

        accepted = await self.invitation_repo.update_status(
            invitation_id, InvitationStatus.ACCEPTED, expected=InvitationStatus.PENDING
        )
        if not accepted:
            current = await self._require(invitation_id)
            # a concurrent accept completed on top of our membership row, so it stays
            if joined and current.status != InvitationStatus.ACCEPTED:
                await self.team_service.remove_team_member(invitation.invitee_id, invitation.team_id)
            raise InvalidTransitionError(current.status.value, InvitationStatus.ACCEPTED.value)

        logger.info(f"[INVITE] {invitation.invitee_id} accepted {invitation_id}")
        if self.notifier and features.NOTIFY_INVITATION_ACCEPTED:
            await self._notify(self.notifier.notify_invitation_accepted, accepted, team)
        return accepted

    async def decline_invitation(self, invitation_id: UUID) -> TeamInvitation:
        declined = await self.invitation_repo.update_status(
            invitation_id, InvitationStatus.DECLINED, expected=InvitationStatus.PENDING
        )
        if not declined:
            current = await self._require(invitation_id)
            raise InvalidTransitionError(current.status.value, InvitationStatus.DECLINED.value)
        logger.info(f"[INVITE] {declined.invitee_id} declined {invitation_id}")
        return declined

    # === LIST ===

    async def get_user_invitations(self, user_id: UUID) -> List[TeamInvitation]:
        """Pending invitations for a user, without the ones that ran out"""
        now = self.clock()
        pending = await self.invitation_repo.get_pending_for_user(user_id)
        return [inv for inv in pending if not inv.is_expired(now)]

    async def get_team_invitations(self, team_id: UUID) -> List[TeamInvitation]:
        """All invitations of a team, stale pending ones reported as expired"""
        now = self.clock()
        invitations = await self.invitation_repo.get_for_team(team_id)
        return [
            inv.model_copy(update={"status": inv.effective_status(now)})
            for inv in invitations
        ]
