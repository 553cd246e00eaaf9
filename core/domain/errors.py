"""
Domain errors - typed failures raised by the registration and team services.

Every failed operation either raises one of these or leaves state unchanged.
`retryable` tells callers whether the same request can succeed later
without changing its input.
"""

from typing import List, Optional


class RegistrationError(Exception):
    """Base class for all team/registration failures"""
    retryable = False

    def __init__(self, message: str = ""):
        self.message = message or self.__class__.__name__
        super().__init__(self.message)


# === VALIDATION ===

class ValidationError(RegistrationError):
    """Caller-supplied data violates an invariant"""

    def __init__(self, message: str = "", field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class FieldError:
    """Single field-level problem surfaced by the wizard"""

    def __init__(self, field: str, message: str, index: Optional[int] = None):
        self.field = field
        self.message = message
        self.index = index  # roster row, None for team-level fields

    def __repr__(self):
        where = f"[{self.index}]" if self.index is not None else ""
        return f"FieldError({self.field}{where}: {self.message})"

    def __eq__(self, other):
        if not isinstance(other, FieldError):
            return NotImplemented
        return (self.field, self.message, self.index) == (other.field, other.message, other.index)


class WizardValidationError(ValidationError):
    """A wizard step gate failed; `errors` lists every offending field"""

    def __init__(self, errors: List[FieldError]):
        self.errors = errors
        first = errors[0] if errors else None
        super().__init__(first.message if first else "Validation failed",
                         field=first.field if first else None)


# === LOOKUPS ===

class NotFoundError(RegistrationError):
    """Referenced entity is absent"""


class UserNotFoundError(NotFoundError):
    """Email did not resolve to a user"""


# === DUPLICATES ===

class DuplicateError(RegistrationError):
    """Membership or invitation already exists"""


class DuplicateMemberError(DuplicateError):
    pass


class DuplicateInvitationError(DuplicateError):
    pass


class AlreadyMemberError(DuplicateError):
    """Invitee already belongs to the team"""


# === AUTHORIZATION ===

class AuthorizationError(RegistrationError):
    """Actor lacks the required role"""


class NotCaptainError(AuthorizationError):
    pass


class CaptainCannotLeaveError(AuthorizationError):
    pass


# === STATE ===

class CapacityError(RegistrationError):
    """Team or tournament is full"""


class ExpiredError(RegistrationError):
    """Invitation is past its window"""


class InvalidTransitionError(RegistrationError):
    """Invitation is already in a terminal state"""

    def __init__(self, from_status: str, to_status: str):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(f"Cannot move invitation from {from_status} to {to_status}")


class InconsistentTeamError(RegistrationError):
    """Denormalized team data disagrees with the member rows"""


class CreationError(RegistrationError):
    """Team creation did not complete; nothing should be assumed persisted"""


# === STORE ===

class TransientStoreError(RegistrationError):
    """Network/store failure or timeout - safe to retry"""
    retryable = True
