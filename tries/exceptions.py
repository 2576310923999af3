# tries/exceptions.py
from rest_framework import status

from core.exceptions import DomainError


class TransitionError(DomainError):
    """A status change that the state machine does not allow."""
    status_code = status.HTTP_409_CONFLICT


class ParticipationError(DomainError):
    """Apply/join/approve refused for a business reason."""


class CapacityError(ParticipationError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, message: str = "定員に達しました"):
        super().__init__(message)
