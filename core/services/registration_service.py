"""
Registration service - which ways of joining a tournament are open right now.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from uuid import UUID

from core.domain.constants import (
    LOW_INDIVIDUAL_SLOTS,
    LOW_TEAM_SLOTS,
    REGISTRATION_MODE_DESCRIPTIONS,
    UNAVAILABLE_REASONS,
)
from core.domain.errors import NotFoundError
from core.domain.models import (
    EntryFeeType,
    PathInfo,
    PathUnavailable,
    RegistrationMode,
    RegistrationOptions,
    TournamentRegistration,
)
from core.interfaces.repositories import ITournamentRepository

logger = logging.getLogger(__name__)

_CENTS = Decimal("0.01")


def mode_description(mode: RegistrationMode) -> str:
    return REGISTRATION_MODE_DESCRIPTIONS[RegistrationMode(mode).value]


def individual_fee(tournament: TournamentRegistration) -> Decimal:
    """
    One player's fee. For a per-team fee this is the team fee split across a
    full team, which is only an approximation for hybrid tournaments.
    """
    if tournament.entry_fee_type == EntryFeeType.PER_PLAYER:
        return tournament.entry_fee
    return (tournament.entry_fee / tournament.team_size_max).quantize(_CENTS, rounding=ROUND_HALF_UP)


def team_fee(tournament: TournamentRegistration) -> Decimal:
    """Cost of the smallest team that may register"""
    if tournament.entry_fee_type == EntryFeeType.PER_TEAM:
        return tournament.entry_fee
    return tournament.entry_fee * tournament.team_size_min


def _availability(slots: int, low_mark: int, unit: str) -> tuple[str, bool]:
    noun = f"{unit} slots" if unit else "slots"
    if slots <= 0:
        return f"No {unit or 'individual'} slots available", True
    if slots <= low_mark:
        return f"Only {slots} {noun} left!", False
    return f"{slots} {noun} available", False


def _individual_path(tournament: TournamentRegistration) -> PathInfo:
    slots = tournament.max_participants - tournament.current_participants
    message, is_full = _availability(slots, LOW_INDIVIDUAL_SLOTS, "")
    return PathInfo(
        max_count=tournament.max_participants,
        current_count=tournament.current_participants,
        fee_per_unit=individual_fee(tournament),
        description="Register as an individual player",
        slots_remaining=max(slots, 0),
        availability_message=message,
        is_full=is_full,
    )


def _team_path(tournament: TournamentRegistration) -> PathInfo:
    slots = tournament.max_teams - tournament.current_teams
    message, is_full = _availability(slots, LOW_TEAM_SLOTS, "team")
    return PathInfo(
        max_count=tournament.max_teams,
        current_count=tournament.current_teams,
        fee_per_unit=team_fee(tournament),
        description=(
            f"Register a team of {tournament.team_size_min}-{tournament.team_size_max} players; "
            "the captain registers and pays for the team"
        ),
        slots_remaining=max(slots, 0),
        availability_message=message,
        is_full=is_full,
    )


def resolve(tournament: TournamentRegistration) -> RegistrationOptions:
    """Registration paths offerable for a tournament. Read-only and idempotent."""
    mode = tournament.registration_mode

    if mode in (RegistrationMode.INDIVIDUAL, RegistrationMode.HYBRID):
        individual = _individual_path(tournament)
    else:
        individual = PathUnavailable(reason=UNAVAILABLE_REASONS["individual"])

    if mode in (RegistrationMode.TEAM, RegistrationMode.HYBRID):
        team = _team_path(tournament)
    else:
        team = PathUnavailable(reason=UNAVAILABLE_REASONS["team"])

    return RegistrationOptions(
        tournament_id=tournament.id,
        mode=mode,
        description=mode_description(mode),
        individual=individual,
        team=team,
    )


class RegistrationService:
    """Loads tournaments and resolves their registration options"""

    def __init__(self, tournament_repo: ITournamentRepository):
        self.tournament_repo = tournament_repo

    async def get_tournament(self, tournament_id: UUID) -> TournamentRegistration:
        tournament = await self.tournament_repo.get_registration(tournament_id)
        if not tournament:
            raise NotFoundError(f"Tournament {tournament_id} not found")
        return tournament

    async def get_options(self, tournament_id: UUID) -> RegistrationOptions:
        tournament = await self.get_tournament(tournament_id)
        options = resolve(tournament)
        logger.info(
            f"[REGISTRATION] tournament={tournament_id} mode={options.mode.value} "
            f"individual={options.individual.available} team={options.team.available}"
        )
        return options
