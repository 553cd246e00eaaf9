"""
Team service - team lifecycle and membership.

The only writer of Team.current_members and Team.captain_id. Each compound
change (team + captain row, member row + counter, captain swap, cascade
delete) is handed to the repository as one atomic call.
"""

import logging
from typing import List, Optional
from uuid import UUID

from core.domain.constants import MIN_TEAM_NAME_LENGTH
from core.domain.errors import (
    CapacityError,
    CaptainCannotLeaveError,
    CreationError,
    InconsistentTeamError,
    NotCaptainError,
    NotFoundError,
    RegistrationError,
    TransientStoreError,
    ValidationError,
)
from core.domain.models import (
    Team,
    TeamCreate,
    TeamMember,
    TeamRole,
    TeamUpdate,
    TeamWithMembers,
)
from core.interfaces.repositories import ITeamRepository

logger = logging.getLogger(__name__)


def validate_team_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Please enter a team name", field="name")
    if len(name) < MIN_TEAM_NAME_LENGTH:
        raise ValidationError(
            f"Team name must be at least {MIN_TEAM_NAME_LENGTH} characters", field="name"
        )
    return name


class TeamService:
    """Creates teams, manages members and captaincy, deletes teams"""

    def __init__(self, team_repo: ITeamRepository):
        self.team_repo = team_repo

    async def _require_team(self, team_id: UUID) -> Team:
        team = await self.team_repo.get_by_id(team_id)
        if not team:
            raise NotFoundError(f"Team {team_id} not found")
        return team

    # === CREATE ===

    async def create_team(self, data: TeamCreate, captain_id: UUID) -> Team:
        """Create a team with the captain as its only member"""
        name = validate_team_name(data.name)
        if not (data.sport_type or "").strip():
            raise ValidationError("Sport type is required", field="sport_type")
        data = data.model_copy(update={"name": name, "sport_type": data.sport_type.strip()})

        try:
            team = await self.team_repo.create_with_captain(data, captain_id)
        except TransientStoreError:
            raise
        except RegistrationError as e:
            logger.error(f"[TEAM] Create failed for captain {captain_id}: {e}")
            raise CreationError(f"Team could not be created: {e.message}") from e

        logger.info(f"[TEAM] Created team {team.id} '{team.name}' captain={captain_id}")
        return team

    # === READ ===

    async def get_team(self, team_id: UUID) -> TeamWithMembers:
        team = await self.team_repo.get_with_members(team_id)
        if not team:
            raise NotFoundError(f"Team {team_id} not found")
        return team

    async def get_user_teams(self, user_id: UUID) -> List[TeamWithMembers]:
        return await self.team_repo.get_user_teams(user_id)

    async def check_consistency(self, team_id: UUID) -> TeamWithMembers:
        """Raise InconsistentTeamError if counter or captaincy disagree with member rows"""
        team = await self.get_team(team_id)
        if team.current_members != len(team.members):
            raise InconsistentTeamError(
                f"Team {team_id} counter says {team.current_members}, has {len(team.members)} members"
            )
        captains = team.captains
        if len(captains) != 1 or captains[0].user_id != team.captain_id:
            raise InconsistentTeamError(f"Team {team_id} does not have exactly one matching captain")
        return team

    # === MEMBERS ===

    async def add_team_member(
        self, user_id: UUID, team_id: UUID, role: TeamRole = TeamRole.MEMBER
    ) -> TeamMember:
        """Add a member; duplicate/capacity check and counter increment are one store call"""
        if role == TeamRole.CAPTAIN:
            raise ValidationError("Captains are set by create_team or transfer_captaincy", field="role")
        member = await self.team_repo.add_member(team_id, user_id, role)
        logger.info(f"[TEAM] Added {user_id} to team {team_id} as {role.value}")
        return member

    async def remove_team_member(self, user_id: UUID, team_id: UUID) -> None:
        await self.team_repo.remove_member(team_id, user_id)
        logger.info(f"[TEAM] Removed {user_id} from team {team_id}")

    async def leave_team(self, user_id: UUID, team_id: UUID) -> None:
        team = await self._require_team(team_id)
        if team.captain_id == user_id:
            raise CaptainCannotLeaveError("Captain cannot leave the team. Transfer captaincy first.")
        await self.remove_team_member(user_id, team_id)

    # === CAPTAINCY ===

    async def transfer_captaincy(
        self, team_id: UUID, new_captain_id: UUID, current_captain_id: UUID
    ) -> Team:
        team = await self._require_team(team_id)
        if team.captain_id != current_captain_id:
            raise NotCaptainError("Only the current captain can transfer captaincy")
        if new_captain_id == current_captain_id:
            return team
        if not await self.team_repo.get_member(team_id, new_captain_id):
            raise NotFoundError(f"User {new_captain_id} is not a member of team {team_id}")

        team = await self.team_repo.transfer_captaincy(team_id, current_captain_id, new_captain_id)
        logger.info(f"[TEAM] Captaincy of {team_id}: {current_captain_id} -> {new_captain_id}")
        return team

    # === UPDATE / DELETE ===

    async def update_team(self, team_id: UUID, updates: TeamUpdate) -> Team:
        if updates.name is not None:
            updates = updates.model_copy(update={"name": validate_team_name(updates.name)})
        if updates.max_members is not None:
            current = await self._require_team(team_id)
            if updates.max_members < current.current_members:
                raise CapacityError(
                    f"Team already has {current.current_members} members",
                )
        team = await self.team_repo.update(team_id, updates)
        if not team:
            raise NotFoundError(f"Team {team_id} not found")
        return team

    async def delete_team(self, team_id: UUID, captain_id: UUID) -> None:
        team = await self._require_team(team_id)
        if team.captain_id != captain_id:
            raise NotCaptainError("Only the captain can delete the team")
        await self.team_repo.delete_cascade(team_id)
        logger.info(f"[TEAM] Deleted team {team_id}")
