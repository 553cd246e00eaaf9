"""
Domain constants - limits, platform fees, and other static data.
Centralized here for easy modification and future localization.
"""

# Platform fee table (platform-wide, not per tournament)
PLATFORM_FEES = {
    "tournament_commission": {"percentage": 5, "description": "5% commission on tournament entry fees"},
    "facility_booking": {"percentage": 3, "description": "3% commission on facility bookings"},
    "premium_listing": {"fixed_amount": 500, "description": "500 for featured tournament listing"},
}
DEFAULT_COMMISSION_PERCENTAGE = PLATFORM_FEES["tournament_commission"]["percentage"]

# Team limits
MIN_TEAM_NAME_LENGTH = 3
DEFAULT_TEAM_SIZE_MIN = 1
DEFAULT_TEAM_SIZE_MAX = 10

# Invitations
INVITATION_EXPIRY_DAYS = 7

# Roster entries
MIN_PLAYER_AGE = 13
MAX_PLAYER_AGE = 100
DEFAULT_PLAYER_AGE = 18

# Availability hints ("Only N slots left!")
LOW_INDIVIDUAL_SLOTS = 5
LOW_TEAM_SLOTS = 2

REGISTRATION_MODE_DESCRIPTIONS = {
    "individual": "This tournament only accepts individual player registrations.",
    "team": "This tournament only accepts team registrations. "
            "Team captains register and pay for the entire team.",
    "hybrid": "This tournament accepts both individual players and teams. "
              "Choose your preferred registration method.",
}

UNAVAILABLE_REASONS = {
    "individual": "This tournament accepts teams only",
    "team": "This tournament accepts individual players only",
}
