"""
Domain models - the core of business logic.
These models are transport-agnostic (work with Supabase rows, the in-memory store, an API, etc.)
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, List, Literal, Union
from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID
from enum import Enum

from core.domain.constants import (
    DEFAULT_PLAYER_AGE,
    DEFAULT_TEAM_SIZE_MAX,
)


# === ENUMS ===

class RegistrationMode(str, Enum):
    INDIVIDUAL = "individual"
    TEAM = "team"
    HYBRID = "hybrid"


class EntryFeeType(str, Enum):
    PER_PLAYER = "per_player"
    PER_TEAM = "per_team"


class TeamRole(str, Enum):
    CAPTAIN = "captain"
    VICE_CAPTAIN = "vice_captain"
    MEMBER = "member"


class InvitationStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    EXPIRED = "expired"


class ExperienceLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    PROFESSIONAL = "professional"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _aware(value: datetime) -> datetime:
    # Supabase returns timestamptz with offset, older rows may be naive
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


# === TOURNAMENT ===

class TournamentRegistration(BaseModel):
    """Registration-relevant subset of a tournament"""
    id: UUID
    name: str = ""
    sport_type: Optional[str] = None
    registration_mode: RegistrationMode
    entry_fee_type: EntryFeeType
    entry_fee: Decimal = Field(ge=0)
    max_participants: int = Field(default=0, ge=0)
    current_participants: int = Field(default=0, ge=0)
    max_teams: int = Field(default=0, ge=0)
    current_teams: int = Field(default=0, ge=0)
    team_size_min: int = Field(default=1, ge=1)
    team_size_max: int = Field(default=DEFAULT_TEAM_SIZE_MAX, ge=1)

    model_config = ConfigDict(from_attributes=True)

    @model_validator(mode="after")
    def check_counters(self):
        if self.current_participants > self.max_participants:
            raise ValueError("current_participants exceeds max_participants")
        if self.current_teams > self.max_teams:
            raise ValueError("current_teams exceeds max_teams")
        if self.team_size_min > self.team_size_max:
            raise ValueError("team_size_min exceeds team_size_max")
        return self


# === USERS ===

class UserProfile(BaseModel):
    """Directory view of a user"""
    id: UUID
    email: str
    full_name: Optional[str] = None
    phone: Optional[str] = None


# === TEAM ===

class TeamCreate(BaseModel):
    """Data for creating a team"""
    name: str
    sport_type: str
    description: Optional[str] = None
    max_members: int = Field(default=DEFAULT_TEAM_SIZE_MAX, ge=1)
    tournament_id: Optional[UUID] = None
    logo_url: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class TeamUpdate(BaseModel):
    """Partial team update - membership and captaincy are not editable here"""
    name: Optional[str] = None
    description: Optional[str] = None
    sport_type: Optional[str] = None
    max_members: Optional[int] = Field(default=None, ge=1)
    logo_url: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class Team(BaseModel):
    """Full team model"""
    id: UUID
    name: str
    description: Optional[str] = None
    sport_type: Optional[str] = None
    tournament_id: Optional[UUID] = None
    captain_id: UUID
    max_members: int
    current_members: int = 1
    logo_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_full(self) -> bool:
        return self.current_members >= self.max_members


class TeamMember(BaseModel):
    """Membership row - (team_id, user_id) is unique"""
    id: Optional[UUID] = None
    team_id: UUID
    user_id: UUID
    role: TeamRole = TeamRole.MEMBER
    joined_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TeamWithMembers(Team):
    """Team plus its member rows"""
    members: List[TeamMember] = Field(default_factory=list)

    @property
    def captains(self) -> List[TeamMember]:
        return [m for m in self.members if m.role == TeamRole.CAPTAIN]

    def has_member(self, user_id: UUID) -> bool:
        return any(m.user_id == user_id for m in self.members)


# === INVITATION ===

class TeamInvitation(BaseModel):
    """Invitation to join a team; expiry is derived from expires_at, not swept"""
    id: UUID
    team_id: UUID
    inviter_id: UUID
    invitee_id: UUID
    message: Optional[str] = None
    status: InvitationStatus = InvitationStatus.PENDING
    expires_at: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = now or utcnow()
        return _aware(now) > _aware(self.expires_at)

    def effective_status(self, now: Optional[datetime] = None) -> InvitationStatus:
        """Status as callers should see it: a stale pending row reads as expired"""
        if self.status == InvitationStatus.PENDING and self.is_expired(now):
            return InvitationStatus.EXPIRED
        return self.status


# === WIZARD ROSTER ===

class RosterEntry(BaseModel):
    """One row of the wizard roster; row 0 is the captain"""
    name: str = ""
    email: str = ""
    phone: str = ""
    age: int = DEFAULT_PLAYER_AGE
    experience_level: ExperienceLevel = ExperienceLevel.INTERMEDIATE
    user_id: Optional[UUID] = None  # known for the captain, resolved from email for the rest

    model_config = ConfigDict(validate_assignment=True, extra="forbid")


# === FEES & REGISTRATION PATHS ===

class FeeBreakdown(BaseModel):
    """Revenue split between organizer and platform"""
    total_revenue: Decimal
    commission_percentage: Decimal
    commission_amount: Decimal
    net_amount: Decimal
    per_unit_label: str
    per_unit_value: Decimal
    headcount_label: str
    headcount: int


class PathInfo(BaseModel):
    """An offerable registration path with live capacity and fee"""
    available: Literal[True] = True
    max_count: int
    current_count: int
    fee_per_unit: Decimal
    description: str
    slots_remaining: int
    availability_message: str
    is_full: bool


class PathUnavailable(BaseModel):
    available: Literal[False] = False
    reason: str


RegistrationPath = Union[PathInfo, PathUnavailable]


class RegistrationOptions(BaseModel):
    """What a player can pick on the registration-type screen"""
    tournament_id: UUID
    mode: RegistrationMode
    description: str
    individual: RegistrationPath
    team: RegistrationPath
