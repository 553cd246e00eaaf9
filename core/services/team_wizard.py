"""
Team creation wizard - team info -> roster -> review -> commit.

Holds the local draft for one user and only touches the store on commit.
Every gate is checked again at commit time, since the draft can change
between steps.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import IntEnum
from typing import Any, Dict, List, Optional
from uuid import UUID

import pydantic

from config.features import features
from core.domain.constants import MAX_PLAYER_AGE, MIN_PLAYER_AGE, MIN_TEAM_NAME_LENGTH
from core.domain.errors import (
    CapacityError,
    FieldError,
    NotFoundError,
    RegistrationError,
    UserNotFoundError,
    ValidationError,
    WizardValidationError,
)
from core.domain.models import (
    EntryFeeType,
    FeeBreakdown,
    PathInfo,
    RosterEntry,
    Team,
    TeamCreate,
    TeamInvitation,
    TournamentRegistration,
    UserProfile,
)
from core.interfaces.repositories import IUserDirectory
from core.services import fee_calculator, registration_service
from core.services.invitation_service import InvitationService
from core.services.team_service import TeamService

logger = logging.getLogger(__name__)

INTEGRATION_MODES = ("direct", "invite")


class WizardStep(IntEnum):
    TEAM_INFO = 1
    ROSTER = 2
    REVIEW = 3


@dataclass
class TeamDraft:
    """Wizard-local state - serializable so a UI can keep it between requests"""
    roster: List[RosterEntry] = field(default_factory=list)
    name: str = ""
    description: str = ""
    step: WizardStep = WizardStep.TEAM_INFO

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "step": int(self.step),
            "roster": [entry.model_dump(mode="json") for entry in self.roster],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TeamDraft":
        return cls(
            roster=[RosterEntry.model_validate(r) for r in data.get("roster", [])],
            name=data.get("name", ""),
            description=data.get("description", ""),
            step=WizardStep(data.get("step", WizardStep.TEAM_INFO)),
        )


@dataclass
class FeePreview:
    """What the captain sees while building the team"""
    team_fee: Decimal           # minimum viable team cost
    roster_fee: Decimal         # cost for the roster as drafted
    organizer_breakdown: FeeBreakdown


@dataclass
class WizardResult:
    team: Team
    added_member_ids: List[UUID] = field(default_factory=list)
    invitations: List[TeamInvitation] = field(default_factory=list)


class TeamCreationWizard:
    """Drives one captain through creating a team for a tournament"""

    def __init__(
        self,
        tournament: TournamentRegistration,
        captain: UserProfile,
        team_service: TeamService,
        directory: IUserDirectory,
        invitation_service: Optional[InvitationService] = None,
        integration_mode: Optional[str] = None,
        draft: Optional[TeamDraft] = None,
    ):
        mode = integration_mode or features.WIZARD_INTEGRATION_MODE
        if mode not in INTEGRATION_MODES:
            raise ValidationError(f"Unknown integration mode '{mode}'", field="integration_mode")
        if mode == "invite" and invitation_service is None:
            raise ValidationError("Invite mode needs an invitation service", field="integration_mode")

        self.tournament = tournament
        self.captain = captain
        self.team_service = team_service
        self.directory = directory
        self.invitation_service = invitation_service
        self.integration_mode = mode
        self.draft = draft or TeamDraft(roster=[self._captain_entry(captain)])

    @classmethod
    async def start(
        cls,
        tournament: TournamentRegistration,
        captain_id: UUID,
        team_service: TeamService,
        directory: IUserDirectory,
        **kwargs,
    ) -> "TeamCreationWizard":
        """Open a wizard for the authenticated captain, if the tournament takes teams"""
        options = registration_service.resolve(tournament)
        if not options.team.available:
            raise ValidationError(options.team.reason, field="registration_mode")

        captain = await directory.get_profile(captain_id)
        if not captain:
            raise NotFoundError(f"User {captain_id} not found")

        logger.info(f"[WIZARD] Started for tournament {tournament.id} by {captain_id}")
        return cls(tournament, captain, team_service, directory, **kwargs)

    @staticmethod
    def _captain_entry(captain: UserProfile) -> RosterEntry:
        return RosterEntry(
            name=captain.full_name or "",
            email=captain.email,
            phone=captain.phone or "",
            user_id=captain.id,
        )

    # === DRAFT EDITS ===

    @property
    def step(self) -> WizardStep:
        return self.draft.step

    @property
    def roster(self) -> List[RosterEntry]:
        return list(self.draft.roster)

    def set_team_info(self, name: str, description: Optional[str] = None) -> None:
        self.draft.name = name
        if description is not None:
            self.draft.description = description

    def add_member(self) -> int:
        """Append an empty roster row, returns its index"""
        size_max = self.tournament.team_size_max
        if len(self.draft.roster) >= size_max:
            raise CapacityError(f"Maximum team size is {size_max} players")
        self.draft.roster.append(RosterEntry())
        return len(self.draft.roster) - 1

    def remove_member(self, index: int) -> None:
        if index == 0:
            raise ValidationError("The captain cannot be removed from the roster", field="roster")
        if index < 0 or index >= len(self.draft.roster):
            raise ValidationError(f"No roster row {index}", field="roster")
        size_min = self.tournament.team_size_min
        if len(self.draft.roster) <= size_min:
            raise ValidationError(f"Minimum team size is {size_min} players", field="roster")
        del self.draft.roster[index]

    def update_member(self, index: int, **fields) -> RosterEntry:
        if index < 0 or index >= len(self.draft.roster):
            raise ValidationError(f"No roster row {index}", field="roster")
        current = self.draft.roster[index]
        try:
            entry = RosterEntry.model_validate({**current.model_dump(), **fields})
        except pydantic.ValidationError as e:
            err = e.errors()[0]
            raise ValidationError(err["msg"], field=str(err["loc"][0]) if err["loc"] else None) from e
        self.draft.roster[index] = entry
        return entry

    # === GATES ===

    def _team_info_errors(self) -> List[FieldError]:
        if len(self.draft.name.strip()) < MIN_TEAM_NAME_LENGTH:
            return [FieldError("name", f"Team name must be at least {MIN_TEAM_NAME_LENGTH} characters")]
        return []

    def _roster_errors(self) -> List[FieldError]:
        errors = []
        size = len(self.draft.roster)
        size_min, size_max = self.tournament.team_size_min, self.tournament.team_size_max
        if size < size_min or size > size_max:
            errors.append(FieldError("roster", f"Team must have {size_min}-{size_max} players, has {size}"))

        seen = {}
        for i, entry in enumerate(self.draft.roster):
            for name in ("name", "email", "phone"):
                if not getattr(entry, name).strip():
                    errors.append(FieldError(name, f"{name.capitalize()} is required", index=i))
            if entry.age < MIN_PLAYER_AGE or entry.age > MAX_PLAYER_AGE:
                errors.append(FieldError(
                    "age", f"Age must be between {MIN_PLAYER_AGE} and {MAX_PLAYER_AGE}", index=i
                ))
            email = entry.email.strip().lower()
            if email:
                if email in seen:
                    errors.append(FieldError("email", f"Same email as row {seen[email]}", index=i))
                else:
                    seen[email] = i
        return errors

    def validate_step(self, step: WizardStep) -> List[FieldError]:
        if step == WizardStep.TEAM_INFO:
            return self._team_info_errors()
        if step == WizardStep.ROSTER:
            return self._roster_errors()
        # review is read-only; it is valid when everything before it is
        return self._team_info_errors() + self._roster_errors()

    def can_proceed(self) -> bool:
        return not self.validate_step(self.draft.step)

    def next_step(self) -> WizardStep:
        errors = self.validate_step(self.draft.step)
        if errors:
            raise WizardValidationError(errors)
        self.draft.step = WizardStep(min(self.draft.step + 1, WizardStep.REVIEW))
        return self.draft.step

    def previous_step(self) -> WizardStep:
        self.draft.step = WizardStep(max(self.draft.step - 1, WizardStep.TEAM_INFO))
        return self.draft.step

    # === FEES ===

    def fee_preview(self, commission_percentage=None) -> FeePreview:
        options = registration_service.resolve(self.tournament)
        if not isinstance(options.team, PathInfo):
            raise ValidationError(options.team.reason, field="registration_mode")
        if self.tournament.entry_fee_type == EntryFeeType.PER_TEAM:
            roster_fee = self.tournament.entry_fee
        else:
            roster_fee = self.tournament.entry_fee * len(self.draft.roster)
        return FeePreview(
            team_fee=options.team.fee_per_unit,
            roster_fee=roster_fee,
            organizer_breakdown=fee_calculator.compute_for_tournament(
                self.tournament, commission_percentage
            ),
        )

    # === COMMIT ===

    async def _resolve_roster(self) -> List[UUID]:
        user_ids = []
        for i, entry in enumerate(self.draft.roster[1:], start=1):
            user_id = await self.directory.resolve_user_by_email(entry.email.strip().lower())
            if not user_id:
                raise UserNotFoundError(f"No user with email {entry.email} (row {i})")
            user_ids.append(user_id)
        return user_ids

    async def commit(self, message: Optional[str] = None) -> WizardResult:
        """Create the team, then add or invite every non-captain roster row"""
        if self.draft.step != WizardStep.REVIEW:
            raise ValidationError("Review the team before creating it", field="step")
        errors = self.validate_step(WizardStep.REVIEW)
        if errors:
            raise WizardValidationError(errors)

        options = registration_service.resolve(self.tournament)
        if not isinstance(options.team, PathInfo):
            raise ValidationError(options.team.reason, field="registration_mode")
        if options.team.is_full:
            raise CapacityError(options.team.availability_message)

        # resolve everyone before writing anything
        member_ids = await self._resolve_roster()

        team = await self.team_service.create_team(
            TeamCreate(
                name=self.draft.name,
                description=self.draft.description or None,
                sport_type=self.tournament.sport_type or "",
                max_members=self.tournament.team_size_max,
                tournament_id=self.tournament.id,
            ),
            self.captain.id,
        )
        result = WizardResult(team=team)

        try:
            for entry, user_id in zip(self.draft.roster[1:], member_ids):
                if self.integration_mode == "direct":
                    await self.team_service.add_team_member(user_id, team.id)
                    result.added_member_ids.append(user_id)
                else:
                    invitation = await self.invitation_service.send_invitation(
                        team.id, self.captain.id, entry.email, message
                    )
                    result.invitations.append(invitation)
        except RegistrationError as e:
            logger.error(f"[WIZARD] Roster commit failed for team {team.id}, removing it: {e}")
            try:
                await self.team_service.delete_team(team.id, self.captain.id)
            except RegistrationError as cleanup_error:
                logger.error(f"[WIZARD] Could not remove team {team.id}: {cleanup_error}")
            raise

        logger.info(
            f"[WIZARD] Committed team {team.id} ({self.integration_mode}): "
            f"{len(result.added_member_ids)} added, {len(result.invitations)} invited"
        )
        return result
