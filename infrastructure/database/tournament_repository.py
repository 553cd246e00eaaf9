"""
Supabase implementation of Tournament repository (registration fields only).
"""

import logging
from typing import Optional
from uuid import UUID

from supabase import Client

from core.domain.constants import DEFAULT_TEAM_SIZE_MAX, DEFAULT_TEAM_SIZE_MIN
from core.domain.errors import ValidationError
from core.domain.models import TournamentRegistration, RegistrationMode, EntryFeeType
from core.interfaces.repositories import ITournamentRepository
from infrastructure.database.supabase_client import get_supabase, run_sync

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, name, sport_type, registration_mode, entry_fee_type, entry_fee, "
    "max_participants, current_participants, max_teams, current_teams, "
    "team_size, team_size_min, team_size_max"
)


class SupabaseTournamentRepository(ITournamentRepository):
    """Supabase implementation of tournament repository"""

    def __init__(self, client: Optional[Client] = None):
        self._client = client

    @property
    def db(self) -> Client:
        return self._client or get_supabase()

    def _to_model(self, data: dict) -> TournamentRegistration:
        # older tournaments only carry the legacy single team_size column
        size_max = data.get("team_size_max") or data.get("team_size") or DEFAULT_TEAM_SIZE_MAX
        try:
            return TournamentRegistration(
                id=data["id"],
                name=data.get("name") or "",
                sport_type=data.get("sport_type"),
                registration_mode=RegistrationMode(data.get("registration_mode") or "individual"),
                entry_fee_type=EntryFeeType(data.get("entry_fee_type") or "per_player"),
                entry_fee=data.get("entry_fee") or 0,
                max_participants=data.get("max_participants") or 0,
                current_participants=data.get("current_participants") or 0,
                max_teams=data.get("max_teams") or 0,
                current_teams=data.get("current_teams") or 0,
                team_size_min=data.get("team_size_min") or DEFAULT_TEAM_SIZE_MIN,
                team_size_max=size_max,
            )
        except ValueError as e:  # pydantic.ValidationError and bad enum values
            logger.error(f"[DB] Tournament {data.get('id')} has invalid registration data: {e}")
            raise ValidationError(
                f"Tournament {data.get('id')} has invalid registration data", field="tournament"
            ) from e

    @run_sync
    def _get_registration_sync(self, tournament_id: UUID) -> Optional[dict]:
        response = self.db.table("tournaments").select(_COLUMNS).eq("id", str(tournament_id)).execute()
        return response.data[0] if response.data else None

    async def get_registration(self, tournament_id: UUID) -> Optional[TournamentRegistration]:
        data = await self._get_registration_sync(tournament_id)
        return self._to_model(data) if data else None
