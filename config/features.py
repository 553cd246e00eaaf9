"""
Feature Flags - Easy on/off toggle for features.
Change values here to enable/disable functionality.
"""

import os


class Features:
    """Feature toggles - set via env vars or defaults"""

    # === TEAM WIZARD ===
    # Options: "direct" (roster members added straight away), "invite" (roster members get invitations)
    WIZARD_INTEGRATION_MODE: str = os.getenv("WIZARD_INTEGRATION_MODE", "invite")

    # === NOTIFICATIONS ===
    NOTIFY_TEAM_INVITATIONS: bool = os.getenv("NOTIFY_TEAM_INVITATIONS", "true").lower() == "true"
    NOTIFY_INVITATION_ACCEPTED: bool = os.getenv("NOTIFY_INVITATION_ACCEPTED", "true").lower() == "true"

    # === DEBUG ===
    DEBUG_MODE: bool = os.getenv("DEBUG", "false").lower() == "true"

    @classmethod
    def to_dict(cls) -> dict:
        """Get all features as dict (useful for logging)"""
        return {
            "wizard_integration_mode": cls.WIZARD_INTEGRATION_MODE,
            "notify_team_invitations": cls.NOTIFY_TEAM_INVITATIONS,
            "notify_invitation_accepted": cls.NOTIFY_INVITATION_ACCEPTED,
            "debug_mode": cls.DEBUG_MODE,
        }

    @classmethod
    def log_status(cls, logger):
        """Log current feature status"""
        logger.info("=== Feature Flags ===")
        for key, value in cls.to_dict().items():
            logger.info(f"  {key}: {value}")


# Shortcut
features = Features()
