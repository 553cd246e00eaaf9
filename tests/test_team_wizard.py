"""
Tests for the team creation wizard.
"""
from decimal import Decimal
from uuid import uuid4

import pytest

from core.domain.errors import (
    CapacityError,
    FieldError,
    NotFoundError,
    UserNotFoundError,
    ValidationError,
    WizardValidationError,
)
from core.domain.models import EntryFeeType, InvitationStatus, RegistrationMode
from core.services.team_service import TeamService
from core.services.team_wizard import TeamCreationWizard, TeamDraft, WizardStep
from factories import make_tournament


class SpyTeamService(TeamService):
    """Counts store-facing calls made during commit"""

    def __init__(self, team_repo):
        super().__init__(team_repo)
        self.created = 0
        self.added = 0
        self.deleted = 0

    async def create_team(self, data, captain_id):
        self.created += 1
        return await super().create_team(data, captain_id)

    async def add_team_member(self, user_id, team_id, role=None):
        self.added += 1
        if role is None:
            return await super().add_team_member(user_id, team_id)
        return await super().add_team_member(user_id, team_id, role)

    async def delete_team(self, team_id, captain_id):
        self.deleted += 1
        return await super().delete_team(team_id, captain_id)


@pytest.fixture
def tournament(store):
    tournament = make_tournament()
    store.tournaments[tournament.id] = tournament
    return tournament


@pytest.fixture
def spy_service(team_repo):
    return SpyTeamService(team_repo)


@pytest.fixture
def wizard(tournament, captain, spy_service, directory):
    return TeamCreationWizard(tournament, captain, spy_service, directory, integration_mode="direct")


def fill_roster(wizard, players):
    for player in players:
        index = wizard.add_member()
        wizard.update_member(
            index, name=player.full_name, email=player.email, phone=player.phone, age=21,
        )


def to_review(wizard, name="Thunder Strikers"):
    wizard.set_team_info(name, "Friday night futsal")
    wizard.next_step()
    wizard.next_step()
    assert wizard.step == WizardStep.REVIEW


class TestStart:

    async def test_captain_seeds_first_row(self, tournament, captain, team_service, directory, invitation_service):
        wizard = await TeamCreationWizard.start(
            tournament, captain.id, team_service, directory, invitation_service=invitation_service,
        )

        assert wizard.step == WizardStep.TEAM_INFO
        assert len(wizard.roster) == 1
        assert wizard.roster[0].user_id == captain.id
        assert wizard.roster[0].email == captain.email
        assert wizard.roster[0].name == "Aarav Shrestha"

    async def test_individual_only_tournament(self, captain, team_service, directory):
        tournament = make_tournament(
            registration_mode=RegistrationMode.INDIVIDUAL, max_participants=20,
        )
        with pytest.raises(ValidationError):
            await TeamCreationWizard.start(
                tournament, captain.id, team_service, directory, integration_mode="direct",
            )

    async def test_unknown_captain(self, tournament, team_service, directory):
        with pytest.raises(NotFoundError):
            await TeamCreationWizard.start(
                tournament, uuid4(), team_service, directory, integration_mode="direct",
            )

    def test_invite_mode_needs_invitation_service(self, tournament, captain, team_service, directory):
        with pytest.raises(ValidationError):
            TeamCreationWizard(tournament, captain, team_service, directory, integration_mode="invite")

    def test_unknown_mode(self, tournament, captain, team_service, directory):
        with pytest.raises(ValidationError):
            TeamCreationWizard(tournament, captain, team_service, directory, integration_mode="magic")


class TestRosterEdits:

    def test_add_up_to_max(self, wizard):
        for _ in range(3):
            wizard.add_member()
        assert len(wizard.roster) == 4

        with pytest.raises(CapacityError):
            wizard.add_member()
        assert len(wizard.roster) == 4

    def test_captain_row_cannot_be_removed(self, wizard):
        wizard.add_member()
        wizard.add_member()
        with pytest.raises(ValidationError):
            wizard.remove_member(0)
        assert len(wizard.roster) == 3

    def test_cannot_drop_below_min(self, wizard):
        wizard.add_member()
        with pytest.raises(ValidationError):
            wizard.remove_member(1)
        assert len(wizard.roster) == 2

    def test_remove_row(self, wizard):
        wizard.add_member()
        wizard.add_member()
        wizard.update_member(2, name="Keep Me")
        wizard.remove_member(1)
        assert [e.name for e in wizard.roster] == ["Aarav Shrestha", "Keep Me"]

    def test_remove_out_of_range(self, wizard):
        wizard.add_member()
        wizard.add_member()
        with pytest.raises(ValidationError):
            wizard.remove_member(5)

    def test_update_member_type_error(self, wizard):
        wizard.add_member()
        with pytest.raises(ValidationError) as exc:
            wizard.update_member(1, age="old")
        assert exc.value.field == "age"

    def test_update_member_unknown_field(self, wizard):
        wizard.add_member()
        with pytest.raises(ValidationError):
            wizard.update_member(1, shirt_size="L")


class TestGates:

    def test_team_name_gate(self, wizard):
        wizard.set_team_info("ab")
        assert not wizard.can_proceed()
        with pytest.raises(WizardValidationError) as exc:
            wizard.next_step()
        assert exc.value.errors == [FieldError("name", "Team name must be at least 3 characters")]
        assert wizard.step == WizardStep.TEAM_INFO

        wizard.set_team_info("  abc  ")
        assert wizard.next_step() == WizardStep.ROSTER

    def test_roster_below_min(self, wizard):
        wizard.set_team_info("Thunder Strikers")
        wizard.next_step()

        errors = wizard.validate_step(WizardStep.ROSTER)
        assert [e.field for e in errors] == ["roster"]
        with pytest.raises(WizardValidationError):
            wizard.next_step()

    def test_roster_above_max_never_passes(self, wizard, players):
        fill_roster(wizard, players[:3])
        wizard.draft.roster.append(wizard.roster[1].model_copy(update={"email": "extra@example.com"}))

        assert len(wizard.roster) == 5
        assert any(e.field == "roster" for e in wizard.validate_step(WizardStep.ROSTER))

    def test_missing_fields_and_age(self, wizard):
        wizard.set_team_info("Thunder Strikers")
        wizard.next_step()
        wizard.add_member()
        wizard.update_member(1, age=12)

        errors = wizard.validate_step(WizardStep.ROSTER)
        assert {(e.field, e.index) for e in errors} == {
            ("name", 1), ("email", 1), ("phone", 1), ("age", 1),
        }

    def test_age_bounds_inclusive(self, wizard, players):
        fill_roster(wizard, players[:2])
        wizard.update_member(1, age=13)
        wizard.update_member(2, age=100)
        assert wizard.validate_step(WizardStep.ROSTER) == []

        wizard.update_member(2, age=101)
        assert [(e.field, e.index) for e in wizard.validate_step(WizardStep.ROSTER)] == [("age", 2)]

    def test_duplicate_email_case_insensitive(self, wizard, players):
        fill_roster(wizard, players[:2])
        wizard.update_member(2, email=players[0].email.upper())

        errors = wizard.validate_step(WizardStep.ROSTER)
        assert [(e.field, e.index) for e in errors] == [("email", 2)]

    def test_captain_email_reused(self, wizard, captain, players):
        fill_roster(wizard, players[:1])
        wizard.update_member(1, email=captain.email)
        assert [(e.field, e.index) for e in wizard.validate_step(WizardStep.ROSTER)] == [("email", 1)]

    def test_previous_step(self, wizard, players):
        fill_roster(wizard, players[:1])
        to_review(wizard)
        assert wizard.previous_step() == WizardStep.ROSTER
        assert wizard.previous_step() == WizardStep.TEAM_INFO
        assert wizard.previous_step() == WizardStep.TEAM_INFO

    def test_next_step_stops_at_review(self, wizard, players):
        fill_roster(wizard, players[:1])
        to_review(wizard)
        assert wizard.next_step() == WizardStep.REVIEW


class TestFeePreview:

    def test_per_team(self, wizard, players):
        fill_roster(wizard, players[:2])
        preview = wizard.fee_preview()

        assert preview.team_fee == 1500
        assert preview.roster_fee == 1500
        assert preview.organizer_breakdown.total_revenue == 24000
        assert preview.organizer_breakdown.net_amount == 22800

    def test_per_player(self, captain, team_service, directory, players):
        tournament = make_tournament(entry_fee_type=EntryFeeType.PER_PLAYER, entry_fee=Decimal("200"))
        wizard = TeamCreationWizard(tournament, captain, team_service, directory, integration_mode="direct")
        fill_roster(wizard, players[:2])

        preview = wizard.fee_preview(commission_percentage=10)

        assert preview.team_fee == 400
        assert preview.roster_fee == 600
        assert preview.organizer_breakdown.commission_amount == Decimal("1280")


class TestCommitDirect:

    async def test_creates_team_and_adds_roster(self, wizard, spy_service, players, tournament):
        fill_roster(wizard, players[:3])
        to_review(wizard)

        result = await wizard.commit()

        assert spy_service.created == 1
        assert spy_service.added == 3
        assert result.added_member_ids == [p.id for p in players[:3]]
        assert result.invitations == []

        team = await spy_service.check_consistency(result.team.id)
        assert team.current_members == 4
        assert team.tournament_id == tournament.id
        assert team.max_members == tournament.team_size_max
        assert team.sport_type == "futsal"
        assert team.description == "Friday night futsal"

    async def test_requires_review_step(self, wizard, spy_service, players):
        fill_roster(wizard, players[:1])
        wizard.set_team_info("Thunder Strikers")

        with pytest.raises(ValidationError):
            await wizard.commit()
        assert spy_service.created == 0

    async def test_revalidates_edits_made_on_review(self, wizard, spy_service, players):
        fill_roster(wizard, players[:1])
        to_review(wizard)
        wizard.set_team_info("x")

        with pytest.raises(WizardValidationError):
            await wizard.commit()
        assert spy_service.created == 0

    async def test_unknown_roster_email_writes_nothing(self, wizard, spy_service, players, store):
        fill_roster(wizard, players[:1])
        wizard.add_member()
        wizard.update_member(2, name="Ghost", email="ghost@example.com", phone="9811111111")
        to_review(wizard)

        with pytest.raises(UserNotFoundError):
            await wizard.commit()

        assert spy_service.created == 0
        assert store.teams == {}

    async def test_full_tournament(self, captain, spy_service, directory, players):
        tournament = make_tournament(max_teams=4, current_teams=4)
        wizard = TeamCreationWizard(tournament, captain, spy_service, directory, integration_mode="direct")
        fill_roster(wizard, players[:1])
        to_review(wizard)

        with pytest.raises(CapacityError):
            await wizard.commit()
        assert spy_service.created == 0

    async def test_roster_failure_removes_team(self, wizard, spy_service, players, store):
        fill_roster(wizard, players[:2])
        to_review(wizard)

        original_add = spy_service.team_repo.add_member
        calls = []

        async def flaky_add(team_id, user_id, role):
            calls.append(user_id)
            if len(calls) == 2:
                raise CapacityError("Team is full")
            return await original_add(team_id, user_id, role)

        spy_service.team_repo.add_member = flaky_add

        with pytest.raises(CapacityError):
            await wizard.commit()

        assert spy_service.deleted == 1
        assert store.teams == {}
        assert store.members == {}


class TestCommitInvite:

    async def test_invites_roster(
        self, tournament, captain, spy_service, directory, invitation_service, players, notifier
    ):
        wizard = TeamCreationWizard(
            tournament, captain, spy_service, directory,
            invitation_service=invitation_service, integration_mode="invite",
        )
        fill_roster(wizard, players[:2])
        to_review(wizard)

        result = await wizard.commit(message="Join Thunder Strikers")

        assert spy_service.created == 1
        assert spy_service.added == 0
        assert len(result.invitations) == 2
        assert {i.invitee_id for i in result.invitations} == {players[0].id, players[1].id}
        assert all(i.status == InvitationStatus.PENDING for i in result.invitations)
        assert all(i.message == "Join Thunder Strikers" for i in result.invitations)

        team = await spy_service.check_consistency(result.team.id)
        assert team.current_members == 1
        assert len(notifier.sent) == 2


class TestDraft:

    def test_draft_survives_serialization(self, wizard, players, tournament, captain, spy_service, directory):
        fill_roster(wizard, players[:2])
        wizard.set_team_info("Thunder Strikers", "Friday night futsal")
        wizard.next_step()

        data = wizard.draft.to_dict()
        restored = TeamCreationWizard(
            tournament, captain, spy_service, directory,
            integration_mode="direct", draft=TeamDraft.from_dict(data),
        )

        assert data["step"] == 2
        assert data["roster"][1]["experience_level"] == "intermediate"
        assert restored.step == WizardStep.ROSTER
        assert restored.roster == wizard.roster
        assert restored.draft.name == "Thunder Strikers"
