"""
Messaging interfaces - abstractions for notifying users.
Delivery is fire-and-forget from the point of view of the team services.
"""

from abc import ABC, abstractmethod
from core.domain.models import Team, TeamInvitation


class INotificationService(ABC):
    """Interface for sending team notifications"""

    @abstractmethod
    async def notify_team_invitation(self, invitation: TeamInvitation, team: Team) -> bool:
        """Tell the invitee they were invited"""
        pass

    @abstractmethod
    async def notify_invitation_accepted(self, invitation: TeamInvitation, team: Team) -> bool:
        """Tell the inviter their invitation was accepted"""
        pass
