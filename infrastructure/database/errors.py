"""
PostgREST error mapping.

The team RPC functions raise with ERRCODE P0001 and a fixed message token
(see supabase/migrations); those tokens map to domain errors here.
"""

import logging

from postgrest.exceptions import APIError

from core.domain.errors import (
    AuthorizationError,
    CapacityError,
    CaptainCannotLeaveError,
    DuplicateError,
    DuplicateInvitationError,
    DuplicateMemberError,
    NotCaptainError,
    NotFoundError,
    RegistrationError,
    TransientStoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)

RPC_ERRORS = {
    "team_not_found": (NotFoundError, "Team not found"),
    "member_not_found": (NotFoundError, "User is not a team member"),
    "duplicate_member": (DuplicateMemberError, "User is already a team member"),
    "duplicate_invitation": (DuplicateInvitationError, "Invitation already sent to this user"),
    "team_full": (CapacityError, "Team is full"),
    "not_captain": (NotCaptainError, "Only the captain can do this"),
    "captain_cannot_leave": (CaptainCannotLeaveError, "Captain cannot leave the team. Transfer captaincy first."),
}

# SQLSTATE classes
_UNIQUE_VIOLATION = "23505"
_FK_VIOLATION = "23503"
_CHECK_VIOLATION = "23514"
_PERMISSION_DENIED = "42501"


def map_api_error(error: APIError) -> RegistrationError:
    code = error.code or ""
    message = error.message or ""

    token = message.strip().lower()
    if token in RPC_ERRORS:
        cls, text = RPC_ERRORS[token]
        return cls(text)

    if code == _UNIQUE_VIOLATION:
        if "team_invitations" in message or "invitation" in (error.details or ""):
            return DuplicateInvitationError("Invitation already sent to this user")
        if "team_members" in message:
            return DuplicateMemberError("User is already a team member")
        return DuplicateError(message)
    if code == _FK_VIOLATION:
        return NotFoundError(message)
    if code == _CHECK_VIOLATION:
        return ValidationError(message)
    if code == _PERMISSION_DENIED:
        return AuthorizationError(message)

    # connection/pool trouble reported by PostgREST (PGRST0xx) is worth a retry
    if code.startswith("PGRST0") or code.startswith("08"):
        return TransientStoreError(message)

    logger.error(f"[DB] Unmapped PostgREST error {code}: {message}")
    return RegistrationError(message)
