from infrastructure.database.team_repository import SupabaseTeamRepository
from infrastructure.database.invitation_repository import SupabaseInvitationRepository
from infrastructure.database.tournament_repository import SupabaseTournamentRepository
from infrastructure.database.user_directory import SupabaseUserDirectory

__all__ = [
    "SupabaseTeamRepository",
    "SupabaseInvitationRepository",
    "SupabaseTournamentRepository",
    "SupabaseUserDirectory",
]
