"""
In-memory implementation of the repositories.

Used by the test suite and for local runs without Supabase. One asyncio.Lock
guards every compound write, which gives the same all-or-nothing behaviour
as the Postgres functions.
"""

import asyncio
import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple
from uuid import UUID, uuid4

from core.domain.errors import (
    CapacityError,
    CaptainCannotLeaveError,
    DuplicateInvitationError,
    DuplicateMemberError,
    NotCaptainError,
    NotFoundError,
)
from core.domain.models import (
    InvitationStatus,
    Team,
    TeamCreate,
    TeamInvitation,
    TeamMember,
    TeamRole,
    TeamUpdate,
    TeamWithMembers,
    TournamentRegistration,
    UserProfile,
    utcnow,
)
from core.interfaces.repositories import (
    IInvitationRepository,
    ITeamRepository,
    ITournamentRepository,
    IUserDirectory,
)

logger = logging.getLogger(__name__)


class InMemoryStore:
    """Tables shared by the in-memory repositories"""

    def __init__(self):
        self.lock = asyncio.Lock()
        self.teams: Dict[UUID, Team] = {}
        self.members: Dict[Tuple[UUID, UUID], TeamMember] = {}
        self.invitations: Dict[UUID, TeamInvitation] = {}
        self.tournaments: Dict[UUID, TournamentRegistration] = {}
        self.users: Dict[UUID, UserProfile] = {}

    def team_members(self, team_id: UUID) -> List[TeamMember]:
        return sorted(
            (m for (tid, _), m in self.members.items() if tid == team_id),
            key=lambda m: m.joined_at,
        )


class InMemoryTournamentRepository(ITournamentRepository):

    def __init__(self, store: InMemoryStore):
        self.store = store

    async def get_registration(self, tournament_id: UUID) -> Optional[TournamentRegistration]:
        return self.store.tournaments.get(tournament_id)


class InMemoryUserDirectory(IUserDirectory):

    def __init__(self, store: InMemoryStore):
        self.store = store

    def add_user(self, email: str, full_name: Optional[str] = None, phone: Optional[str] = None) -> UserProfile:
        profile = UserProfile(id=uuid4(), email=email.strip().lower(), full_name=full_name, phone=phone)
        self.store.users[profile.id] = profile
        return profile

    async def resolve_user_by_email(self, email: str) -> Optional[UUID]:
        email = email.strip().lower()
        for profile in self.store.users.values():
            if profile.email == email:
                return profile.id
        return None

    async def get_profile(self, user_id: UUID) -> Optional[UserProfile]:
        return self.store.users.get(user_id)


class InMemoryTeamRepository(ITeamRepository):

    def __init__(self, store: InMemoryStore):
        self.store = store

    def _with_members(self, team: Team) -> TeamWithMembers:
        return TeamWithMembers(**team.model_dump(), members=self.store.team_members(team.id))

    async def create_with_captain(self, team_data: TeamCreate, captain_id: UUID) -> Team:
        async with self.store.lock:
            now = utcnow()
            team = Team(
                id=uuid4(),
                captain_id=captain_id,
                current_members=1,
                created_at=now,
                updated_at=now,
                **team_data.model_dump(),
            )
            self.store.teams[team.id] = team
            self.store.members[(team.id, captain_id)] = TeamMember(
                id=uuid4(), team_id=team.id, user_id=captain_id, role=TeamRole.CAPTAIN, joined_at=now,
            )
            return team

    async def get_by_id(self, team_id: UUID) -> Optional[Team]:
        return self.store.teams.get(team_id)

    async def get_with_members(self, team_id: UUID) -> Optional[TeamWithMembers]:
        team = self.store.teams.get(team_id)
        return self._with_members(team) if team else None

    async def get_user_teams(self, user_id: UUID) -> List[TeamWithMembers]:
        return [
            self._with_members(self.store.teams[tid])
            for (tid, uid) in self.store.members
            if uid == user_id and tid in self.store.teams
        ]

    async def get_member(self, team_id: UUID, user_id: UUID) -> Optional[TeamMember]:
        return self.store.members.get((team_id, user_id))

    async def add_member(self, team_id: UUID, user_id: UUID, role: TeamRole) -> TeamMember:
        async with self.store.lock:
            team = self.store.teams.get(team_id)
            if not team:
                raise NotFoundError("Team not found")
            if (team_id, user_id) in self.store.members:
                raise DuplicateMemberError("User is already a team member")
            if team.current_members >= team.max_members:
                raise CapacityError("Team is full")
            now = utcnow()
            member = TeamMember(id=uuid4(), team_id=team_id, user_id=user_id, role=role, joined_at=now)
            self.store.members[(team_id, user_id)] = member
            self.store.teams[team_id] = team.model_copy(
                update={"current_members": team.current_members + 1, "updated_at": now}
            )
            return member

    async def remove_member(self, team_id: UUID, user_id: UUID) -> None:
        async with self.store.lock:
            team = self.store.teams.get(team_id)
            if not team:
                raise NotFoundError("Team not found")
            if team.captain_id == user_id:
                raise CaptainCannotLeaveError("Captain cannot leave the team. Transfer captaincy first.")
            if (team_id, user_id) not in self.store.members:
                raise NotFoundError("User is not a team member")
            del self.store.members[(team_id, user_id)]
            self.store.teams[team_id] = team.model_copy(
                update={"current_members": team.current_members - 1, "updated_at": utcnow()}
            )

    async def transfer_captaincy(self, team_id: UUID, old_captain_id: UUID, new_captain_id: UUID) -> Team:
        async with self.store.lock:
            team = self.store.teams.get(team_id)
            if not team:
                raise NotFoundError("Team not found")
            if team.captain_id != old_captain_id:
                raise NotCaptainError("Only the captain can do this")
            new_row = self.store.members.get((team_id, new_captain_id))
            if not new_row:
                raise NotFoundError("User is not a team member")
            old_row = self.store.members[(team_id, old_captain_id)]
            self.store.members[(team_id, old_captain_id)] = old_row.model_copy(update={"role": TeamRole.MEMBER})
            self.store.members[(team_id, new_captain_id)] = new_row.model_copy(update={"role": TeamRole.CAPTAIN})
            team = team.model_copy(update={"captain_id": new_captain_id, "updated_at": utcnow()})
            self.store.teams[team_id] = team
            return team

    async def update(self, team_id: UUID, updates: TeamUpdate) -> Optional[Team]:
        async with self.store.lock:
            team = self.store.teams.get(team_id)
            if not team:
                return None
            changes = updates.model_dump(exclude_none=True)
            team = team.model_copy(update={**changes, "updated_at": utcnow()})
            self.store.teams[team_id] = team
            return team

    async def delete_cascade(self, team_id: UUID) -> None:
        async with self.store.lock:
            if team_id not in self.store.teams:
                raise NotFoundError("Team not found")
            for key in [k for k in self.store.members if k[0] == team_id]:
                del self.store.members[key]
            for inv_id in [i for i, inv in self.store.invitations.items() if inv.team_id == team_id]:
                del self.store.invitations[inv_id]
            del self.store.teams[team_id]


class InMemoryInvitationRepository(IInvitationRepository):

    def __init__(self, store: InMemoryStore):
        self.store = store

    async def create_pending(
        self,
        team_id: UUID,
        inviter_id: UUID,
        invitee_id: UUID,
        message: Optional[str],
        issued_at: datetime,
        expires_at: datetime,
    ) -> TeamInvitation:
        async with self.store.lock:
            if team_id not in self.store.teams:
                raise NotFoundError("Team not found")
            for inv_id, inv in list(self.store.invitations.items()):
                if inv.team_id != team_id or inv.invitee_id != invitee_id:
                    continue
                if inv.status != InvitationStatus.PENDING:
                    continue
                if inv.is_expired(issued_at):
                    self.store.invitations[inv_id] = inv.model_copy(
                        update={"status": InvitationStatus.EXPIRED, "updated_at": issued_at}
                    )
                else:
                    raise DuplicateInvitationError("Invitation already sent to this user")

            invitation = TeamInvitation(
                id=uuid4(),
                team_id=team_id,
                inviter_id=inviter_id,
                invitee_id=invitee_id,
                message=message,
                status=InvitationStatus.PENDING,
                expires_at=expires_at,
                created_at=issued_at,
                updated_at=issued_at,
            )
            self.store.invitations[invitation.id] = invitation
            return invitation

    async def get_by_id(self, invitation_id: UUID) -> Optional[TeamInvitation]:
        return self.store.invitations.get(invitation_id)

    async def get_pending_for_user(self, user_id: UUID) -> List[TeamInvitation]:
        pending = [
            inv for inv in self.store.invitations.values()
            if inv.invitee_id == user_id and inv.status == InvitationStatus.PENDING
        ]
        return sorted(pending, key=lambda inv: inv.created_at, reverse=True)

    async def get_for_team(self, team_id: UUID) -> List[TeamInvitation]:
        invitations = [inv for inv in self.store.invitations.values() if inv.team_id == team_id]
        return sorted(invitations, key=lambda inv: inv.created_at, reverse=True)

    async def update_status(
        self,
        invitation_id: UUID,
        status: InvitationStatus,
        expected: Optional[InvitationStatus] = None,
    ) -> Optional[TeamInvitation]:
        async with self.store.lock:
            invitation = self.store.invitations.get(invitation_id)
            if not invitation:
                return None
            if expected is not None and invitation.status != expected:
                return None
            invitation = invitation.model_copy(update={"status": status, "updated_at": utcnow()})
            self.store.invitations[invitation_id] = invitation
            return invitation
