from core.interfaces.repositories import (
    ITournamentRepository,
    IUserDirectory,
    ITeamRepository,
    IInvitationRepository,
)
from core.interfaces.messaging import INotificationService

__all__ = [
    # Repositories
    "ITournamentRepository",
    "IUserDirectory",
    "ITeamRepository",
    "IInvitationRepository",
    # Messaging
    "INotificationService",
]
