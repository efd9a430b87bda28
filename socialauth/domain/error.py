"""Domain layer errors."""

from socialauth.domain.value import AuthErrorCode, Failure


class DomainError(Exception):
    """Base domain error."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class DataIntegrityError(DomainError):
    """Stored data violates an invariant the domain relies on.

    Distinct from the expected failure taxonomy: these are internal errors.
    """

    pass


class SocialAuthError(DomainError):
    """Expected authentication failure surfaced to the interface layer."""

    def __init__(self, failure: Failure):
        self.failure = failure
        super().__init__(failure.message)

    @property
    def code(self) -> AuthErrorCode:
        return self.failure.code


class InviteCodeExhaustedError(DomainError):
    """An invite code ran out of uses while an account was being created."""

    def __init__(self, code: str):
        self.code = code
        super().__init__("Invite code has no remaining uses")
