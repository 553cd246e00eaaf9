"""
Tests for registration path resolution.
"""
from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError as ModelValidationError

from core.domain.errors import NotFoundError
from core.domain.models import EntryFeeType, PathInfo, PathUnavailable, RegistrationMode
from core.services import registration_service
from core.services.registration_service import RegistrationService
from factories import make_tournament


class TestResolve:

    def test_individual_only(self):
        tournament = make_tournament(
            registration_mode=RegistrationMode.INDIVIDUAL,
            entry_fee_type=EntryFeeType.PER_PLAYER,
            entry_fee=Decimal("200"),
            max_participants=40,
            current_participants=10,
        )
        options = registration_service.resolve(tournament)

        assert isinstance(options.individual, PathInfo)
        assert options.individual.slots_remaining == 30
        assert options.individual.fee_per_unit == 200
        assert isinstance(options.team, PathUnavailable)
        assert options.team.reason == "This tournament accepts individual players only"
        assert options.description.startswith("This tournament only accepts individual")

    def test_team_only(self):
        options = registration_service.resolve(make_tournament(max_teams=16, current_teams=3))

        assert options.individual.available is False
        assert options.individual.reason == "This tournament accepts teams only"
        assert options.team.available is True
        assert options.team.max_count == 16
        assert options.team.current_count == 3
        assert options.team.slots_remaining == 13

    def test_hybrid_paths_are_independent(self):
        tournament = make_tournament(
            registration_mode=RegistrationMode.HYBRID,
            max_participants=20,
            current_participants=20,
            max_teams=8,
            current_teams=1,
        )
        options = registration_service.resolve(tournament)

        assert options.individual.available is True
        assert options.individual.is_full is True
        assert options.individual.availability_message == "No individual slots available"
        assert options.team.is_full is False
        assert options.team.slots_remaining == 7

    def test_full_path_is_still_offered(self):
        options = registration_service.resolve(make_tournament(max_teams=4, current_teams=4))
        assert options.team.available is True
        assert options.team.is_full is True
        assert options.team.slots_remaining == 0
        assert options.team.availability_message == "No team slots available"

    def test_resolve_is_idempotent(self):
        tournament = make_tournament(registration_mode=RegistrationMode.HYBRID, max_participants=10)
        assert registration_service.resolve(tournament) == registration_service.resolve(tournament)


class TestFees:

    def test_per_team_fee_split_for_individuals(self):
        tournament = make_tournament(
            registration_mode=RegistrationMode.HYBRID,
            entry_fee=Decimal("1500"),
            team_size_max=6,
            max_participants=10,
        )
        options = registration_service.resolve(tournament)
        assert options.individual.fee_per_unit == 250
        assert options.team.fee_per_unit == 1500

    def test_per_player_fee_scaled_for_min_team(self):
        tournament = make_tournament(
            registration_mode=RegistrationMode.HYBRID,
            entry_fee_type=EntryFeeType.PER_PLAYER,
            entry_fee=Decimal("200"),
            team_size_min=3,
            team_size_max=5,
            max_participants=10,
        )
        options = registration_service.resolve(tournament)
        assert options.individual.fee_per_unit == 200
        assert options.team.fee_per_unit == 600

    def test_individual_fee_rounds_to_cents(self):
        tournament = make_tournament(entry_fee=Decimal("1000"), team_size_max=3)
        assert registration_service.individual_fee(tournament) == Decimal("333.33")


class TestAvailability:

    @pytest.mark.parametrize("current,message", [
        (0, "20 slots available"),
        (14, "6 slots available"),
        (15, "Only 5 slots left!"),
        (19, "Only 1 slots left!"),
        (20, "No individual slots available"),
    ])
    def test_individual_messages(self, current, message):
        tournament = make_tournament(
            registration_mode=RegistrationMode.INDIVIDUAL,
            max_participants=20,
            current_participants=current,
        )
        assert registration_service.resolve(tournament).individual.availability_message == message

    @pytest.mark.parametrize("current,message", [
        (0, "10 team slots available"),
        (7, "3 team slots available"),
        (8, "Only 2 team slots left!"),
        (9, "Only 1 team slots left!"),
        (10, "No team slots available"),
    ])
    def test_team_messages(self, current, message):
        tournament = make_tournament(max_teams=10, current_teams=current)
        assert registration_service.resolve(tournament).team.availability_message == message


class TestTournamentModel:

    def test_counter_above_max_rejected(self):
        with pytest.raises(ModelValidationError):
            make_tournament(max_teams=2, current_teams=3)

    def test_team_size_bounds_rejected(self):
        with pytest.raises(ModelValidationError):
            make_tournament(team_size_min=5, team_size_max=4)

    def test_negative_fee_rejected(self):
        with pytest.raises(ModelValidationError):
            make_tournament(entry_fee=Decimal("-1"))


class TestRegistrationService:

    async def test_get_options(self, store, tournament_repo):
        tournament = make_tournament()
        store.tournaments[tournament.id] = tournament

        options = await RegistrationService(tournament_repo).get_options(tournament.id)

        assert options.tournament_id == tournament.id
        assert options.mode == RegistrationMode.TEAM

    async def test_unknown_tournament(self, tournament_repo):
        with pytest.raises(NotFoundError):
            await RegistrationService(tournament_repo).get_options(uuid4())
