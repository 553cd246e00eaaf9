from core.services import fee_calculator
from core.services.registration_service import RegistrationService
from core.services.team_service import TeamService
from core.services.invitation_service import InvitationService
from core.services.team_wizard import (
    TeamCreationWizard,
    TeamDraft,
    WizardResult,
    WizardStep,
)

__all__ = [
    "fee_calculator",
    "RegistrationService",
    "TeamService",
    "InvitationService",
    "TeamCreationWizard",
    "TeamDraft",
    "WizardResult",
    "WizardStep",
]
