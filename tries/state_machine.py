# tries/state_machine.py
"""
State machines for TRYFIELD.

Participation:
pending → approved → cancelled
   ├→ rejected
   └→ cancelled
rejected / cancelled → pending   (re-application reuses the row)

Try lifecycle:
open ⇄ closed → completed
open → completed

Any transition not listed here is rejected.
"""
from typing import Tuple
import logging

from .models import ParticipantStatus, Try, TryParticipant

logger = logging.getLogger("tryfield.tries")


PARTICIPATION_TRANSITIONS = {
    ParticipantStatus.PENDING: [
        ParticipantStatus.APPROVED,
        ParticipantStatus.REJECTED,
        ParticipantStatus.CANCELLED,
    ],
    ParticipantStatus.APPROVED: [ParticipantStatus.CANCELLED],
    ParticipantStatus.REJECTED: [ParticipantStatus.PENDING],
    ParticipantStatus.CANCELLED: [ParticipantStatus.PENDING],
}

TRY_TRANSITIONS = {
    Try.STATUS_OPEN: [Try.STATUS_CLOSED, Try.STATUS_COMPLETED],
    Try.STATUS_CLOSED: [Try.STATUS_OPEN, Try.STATUS_COMPLETED],
    Try.STATUS_COMPLETED: [],
}


def can_transition_participant(participant: TryParticipant, new_status: str) -> Tuple[bool, str]:
    """
    Check if a participation can move to a new status.

    Returns (can_transition: bool, reason: str)
    """
    if new_status not in ParticipantStatus.values:
        return False, f"Invalid status: {new_status}"

    allowed = PARTICIPATION_TRANSITIONS.get(participant.status, [])
    if new_status not in allowed:
        return False, f"Cannot transition from '{participant.status}' to '{new_status}'"

    return True, ""


def transition_participant(participant: TryParticipant, new_status: str, actor=None, save: bool = True) -> Tuple[bool, str]:
    """
    Attempt to move a participation to a new status.

    Returns (success: bool, message: str)
    """
    can, reason = can_transition_participant(participant, new_status)

    if not can:
        logger.warning(
            f"Invalid participation transition attempted: participant={participant.id}, "
            f"from={participant.status}, to={new_status}, actor={getattr(actor, 'id', 'unknown')}. "
            f"Reason: {reason}"
        )
        return False, reason

    old_status = participant.status
    participant.status = new_status

    if save:
        participant.save(update_fields=["status", "updated_at"])

    logger.info(
        f"Participation transition: participant={participant.id}, try={participant.try_ref_id}, "
        f"from={old_status}, to={new_status}, actor={getattr(actor, 'id', 'unknown')}"
    )
    return True, f"Transitioned from '{old_status}' to '{new_status}'"


def can_transition_try(try_obj: Try, new_status: str) -> Tuple[bool, str]:
    if new_status not in dict(Try.STATUS_CHOICES):
        return False, f"Invalid status: {new_status}"

    if new_status not in TRY_TRANSITIONS.get(try_obj.status, []):
        return False, f"Cannot transition from '{try_obj.status}' to '{new_status}'"

    return True, ""


def transition_try(try_obj: Try, new_status: str, actor=None, save: bool = True) -> Tuple[bool, str]:
    can, reason = can_transition_try(try_obj, new_status)

    if not can:
        logger.warning(
            f"Invalid try transition attempted: try={try_obj.id}, "
            f"from={try_obj.status}, to={new_status}, actor={getattr(actor, 'id', 'unknown')}. "
            f"Reason: {reason}"
        )
        return False, reason

    old_status = try_obj.status
    try_obj.status = new_status

    if save:
        try_obj.save(update_fields=["status", "updated_at"])

    logger.info(
        f"Try state transition: try={try_obj.id}, "
        f"from={old_status}, to={new_status}, actor={getattr(actor, 'id', 'unknown')}"
    )
    return True, f"Transitioned from '{old_status}' to '{new_status}'"


def is_terminal_status(status: str) -> bool:
    return len(TRY_TRANSITIONS.get(status, [])) == 0
