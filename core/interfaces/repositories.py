"""
Repository interfaces - abstractions for data access.
This allows swapping implementations (Supabase -> in-memory -> PostgreSQL, etc.)

Methods documented as atomic must run as ONE unit at the store
(a Postgres function, a transaction, or a lock held across the whole body).
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, List
from uuid import UUID
from core.domain.models import (
    TournamentRegistration,
    Team, TeamCreate, TeamUpdate, TeamMember, TeamRole, TeamWithMembers,
    TeamInvitation, InvitationStatus,
    UserProfile,
)


class ITournamentRepository(ABC):
    """Interface for tournament registration data"""

    @abstractmethod
    async def get_registration(self, tournament_id: UUID) -> Optional[TournamentRegistration]:
        """Get registration config and capacity counters for a tournament"""
        pass


class IUserDirectory(ABC):
    """Interface for resolving users"""

    @abstractmethod
    async def resolve_user_by_email(self, email: str) -> Optional[UUID]:
        """Get user id for an email, None if nobody has it"""
        pass

    @abstractmethod
    async def get_profile(self, user_id: UUID) -> Optional[UserProfile]:
        """Get directory profile for a user"""
        pass


class ITeamRepository(ABC):
    """Interface for team and membership data access"""

    @abstractmethod
    async def create_with_captain(self, team_data: TeamCreate, captain_id: UUID) -> Team:
        """Atomic: insert the team with current_members=1 and the captain member row"""
        pass

    @abstractmethod
    async def get_by_id(self, team_id: UUID) -> Optional[Team]:
        """Get team by ID"""
        pass

    @abstractmethod
    async def get_with_members(self, team_id: UUID) -> Optional[TeamWithMembers]:
        """Get team with its member rows"""
        pass

    @abstractmethod
    async def get_user_teams(self, user_id: UUID) -> List[TeamWithMembers]:
        """Get all teams a user is a member of"""
        pass

    @abstractmethod
    async def get_member(self, team_id: UUID, user_id: UUID) -> Optional[TeamMember]:
        """Get a single member row"""
        pass

    @abstractmethod
    async def add_member(self, team_id: UUID, user_id: UUID, role: TeamRole) -> TeamMember:
        """
        Atomic: check team exists, no duplicate, capacity left; insert row; increment counter.
        Raises NotFoundError / DuplicateMemberError / CapacityError.
        """
        pass

    @abstractmethod
    async def remove_member(self, team_id: UUID, user_id: UUID) -> None:
        """Atomic: delete the row and decrement counter. Raises NotFoundError."""
        pass

    @abstractmethod
    async def transfer_captaincy(self, team_id: UUID, old_captain_id: UUID, new_captain_id: UUID) -> Team:
        """Atomic: swap captain_id and the two member roles"""
        pass

    @abstractmethod
    async def update(self, team_id: UUID, updates: TeamUpdate) -> Optional[Team]:
        """Partial field update"""
        pass

    @abstractmethod
    async def delete_cascade(self, team_id: UUID) -> None:
        """Atomic: delete members, then invitations, then the team"""
        pass


class IInvitationRepository(ABC):
    """Interface for team invitation data access"""

    @abstractmethod
    async def create_pending(
        self,
        team_id: UUID,
        inviter_id: UUID,
        invitee_id: UUID,
        message: Optional[str],
        issued_at: datetime,
        expires_at: datetime,
    ) -> TeamInvitation:
        """
        Atomic: insert a pending invitation unless a live pending one exists for
        (team_id, invitee_id). Pending rows already past expiry at `issued_at`
        are marked expired first. Raises DuplicateInvitationError.
        """
        pass

    @abstractmethod
    async def get_by_id(self, invitation_id: UUID) -> Optional[TeamInvitation]:
        """Get invitation by ID"""
        pass

    @abstractmethod
    async def get_pending_for_user(self, user_id: UUID) -> List[TeamInvitation]:
        """Pending rows for an invitee, newest first (may include stale ones)"""
        pass

    @abstractmethod
    async def get_for_team(self, team_id: UUID) -> List[TeamInvitation]:
        """All invitations of a team, newest first"""
        pass

    @abstractmethod
    async def update_status(
        self,
        invitation_id: UUID,
        status: InvitationStatus,
        expected: Optional[InvitationStatus] = None,
    ) -> Optional[TeamInvitation]:
        """
        Set status. With `expected`, only rows currently in that status change;
        returns None when nothing matched.
        """
        pass
