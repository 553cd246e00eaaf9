from infrastructure.memory.store import (
    InMemoryStore,
    InMemoryTournamentRepository,
    InMemoryUserDirectory,
    InMemoryTeamRepository,
    InMemoryInvitationRepository,
)

__all__ = [
    "InMemoryStore",
    "InMemoryTournamentRepository",
    "InMemoryUserDirectory",
    "InMemoryTeamRepository",
    "InMemoryInvitationRepository",
]
