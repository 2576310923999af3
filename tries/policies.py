# tries/policies.py
"""
Centralized TRYFIELD policy layer.

All permission checks for try actions are defined here.
Views and services should use these methods instead of inline checks.
"""
from typing import Tuple

from .models import ParticipantStatus, Try, TryParticipant


class TryPolicy:
    """
    Permission checks for tries.
    Methods return bool or (bool, reason).
    """

    @staticmethod
    def is_organizer(user, try_obj: Try) -> bool:
        if not user or not user.is_authenticated or try_obj is None:
            return False
        return try_obj.organizer_id == user.id

    @staticmethod
    def is_approved_participant(user, try_obj: Try) -> bool:
        if not user or not user.is_authenticated or try_obj is None:
            return False
        return TryParticipant.objects.filter(
            try_ref=try_obj,
            user=user,
            status=ParticipantStatus.APPROVED,
        ).exists()

    @staticmethod
    def is_member(user, try_obj: Try) -> bool:
        """Organizer or approved participant."""
        return TryPolicy.is_organizer(user, try_obj) or TryPolicy.is_approved_participant(user, try_obj)

    # ─────────────────────────────────────────────────────────────
    # Try CRUD
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def can_edit_try(user, try_obj: Try) -> Tuple[bool, str]:
        if not TryPolicy.is_organizer(user, try_obj):
            return False, "You do not have permission to edit this try"
        return True, ""

    @staticmethod
    def can_delete_try(user, try_obj: Try) -> Tuple[bool, str]:
        if not TryPolicy.is_organizer(user, try_obj):
            return False, "You do not have permission to delete this try"
        return True, ""

    # ─────────────────────────────────────────────────────────────
    # Participation
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def can_apply(user, try_obj: Try) -> Tuple[bool, str]:
        if not user or not user.is_authenticated:
            return False, "Authentication required"

        if TryPolicy.is_organizer(user, try_obj):
            return False, "主催者は自分のTRYに参加申請できません"

        if try_obj.status != Try.STATUS_OPEN:
            return False, "このTRYは募集を終了しています"

        return True, ""

    @staticmethod
    def can_manage_participants(user, try_obj: Try) -> Tuple[bool, str]:
        if not TryPolicy.is_organizer(user, try_obj):
            return False, "Only the organizer can manage participants"
        return True, ""

    @staticmethod
    def can_view_all_participants(user, try_obj: Try) -> bool:
        return TryPolicy.is_organizer(user, try_obj)

    # ─────────────────────────────────────────────────────────────
    # Chat / completion / reviews
    # ─────────────────────────────────────────────────────────────

    @staticmethod
    def can_access_chat(user, try_obj: Try) -> Tuple[bool, str]:
        if not TryPolicy.is_member(user, try_obj):
            return False, "チャットは主催者と承認済みの参加者のみ利用できます"
        return True, ""

    @staticmethod
    def can_complete(user, try_obj: Try) -> Tuple[bool, str]:
        if not TryPolicy.is_organizer(user, try_obj):
            return False, "Only the organizer can complete this try"
        return True, ""

    @staticmethod
    def can_review(reviewer, reviewed, try_obj: Try) -> Tuple[bool, str]:
        if try_obj.status != Try.STATUS_COMPLETED:
            return False, "レビューはTRY完了後に投稿できます"

        if reviewer.id == reviewed.id:
            return False, "自分自身をレビューすることはできません"

        if not (TryPolicy.is_member(reviewer, try_obj) and TryPolicy.is_member(reviewed, try_obj)):
            return False, "Only the organizer and approved participants can review each other"

        return True, ""
