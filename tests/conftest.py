"""
Pytest configuration and fixtures for the team registration tests.
"""
from datetime import datetime, timezone

import pytest

from core.domain.models import TeamCreate
from core.services.invitation_service import InvitationService
from core.services.team_service import TeamService
from factories import FrozenClock, RecordingNotifier
from infrastructure.memory import (
    InMemoryInvitationRepository,
    InMemoryStore,
    InMemoryTeamRepository,
    InMemoryTournamentRepository,
    InMemoryUserDirectory,
)


@pytest.fixture
def clock():
    return FrozenClock(datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def directory(store):
    return InMemoryUserDirectory(store)


@pytest.fixture
def team_repo(store):
    return InMemoryTeamRepository(store)


@pytest.fixture
def invitation_repo(store):
    return InMemoryInvitationRepository(store)


@pytest.fixture
def tournament_repo(store):
    return InMemoryTournamentRepository(store)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def team_service(team_repo):
    return TeamService(team_repo)


@pytest.fixture
def invitation_service(invitation_repo, team_repo, team_service, directory, notifier, clock):
    return InvitationService(
        invitation_repo=invitation_repo,
        team_repo=team_repo,
        team_service=team_service,
        directory=directory,
        notifier=notifier,
        clock=clock,
    )


@pytest.fixture
def captain(directory):
    return directory.add_user("captain@example.com", full_name="Aarav Shrestha", phone="9800000001")


@pytest.fixture
def players(directory):
    return [
        directory.add_user(f"player{i}@example.com", full_name=f"Player {i}", phone=f"98000001{i:02d}")
        for i in range(1, 6)
    ]


@pytest.fixture
async def team(team_service, captain):
    return await team_service.create_team(
        TeamCreate(name="Thunder Strikers", sport_type="futsal", max_members=4),
        captain.id,
    )
