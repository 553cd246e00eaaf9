"""
Service loader - wires the Supabase repositories into the core services.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from supabase import Client

from config.features import features
from core.interfaces.messaging import INotificationService
from core.services import InvitationService, RegistrationService, TeamService
from infrastructure.database import (
    SupabaseInvitationRepository,
    SupabaseTeamRepository,
    SupabaseTournamentRepository,
    SupabaseUserDirectory,
)
from infrastructure.notifications import SupabaseNotificationService

logger = logging.getLogger(__name__)


@dataclass
class Services:
    directory: SupabaseUserDirectory
    registration_service: RegistrationService
    team_service: TeamService
    invitation_service: InvitationService


def build_services(
    client: Optional[Client] = None,
    notifier: Optional[INotificationService] = None,
) -> Services:
    """Build the service graph; without a client the shared one is created on first query"""
    team_repo = SupabaseTeamRepository(client)
    directory = SupabaseUserDirectory(client)
    team_service = TeamService(team_repo)

    services = Services(
        directory=directory,
        registration_service=RegistrationService(SupabaseTournamentRepository(client)),
        team_service=team_service,
        invitation_service=InvitationService(
            invitation_repo=SupabaseInvitationRepository(client),
            team_repo=team_repo,
            team_service=team_service,
            directory=directory,
            notifier=notifier or SupabaseNotificationService(client),
        ),
    )
    features.log_status(logger)
    return services
