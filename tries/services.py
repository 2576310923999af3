# tries/services.py
"""
Write paths for tries and participation.

Every function here is the single place its rule is enforced; views only
translate DomainError subclasses into responses.
"""
import logging
from typing import Optional

from django.db import IntegrityError, transaction
from django.db.models import Count, Q
from django.utils import timezone

from core.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from core.supabase_client import delete_image
from notifications import services as notification_services
from .exceptions import CapacityError, ParticipationError, TransitionError
from .models import (
    ParticipantStatus,
    Try,
    TryComment,
    TryCompletion,
    TryDraft,
    TryParticipant,
    TryReview,
)
from .policies import TryPolicy
from .state_machine import is_terminal_status, transition_participant, transition_try

logger = logging.getLogger("tryfield.tries")


def approved_participant_ids(try_obj: Try) -> list:
    return list(
        TryParticipant.objects.filter(
            try_ref=try_obj,
            status=ParticipantStatus.APPROVED,
        ).values_list("user_id", flat=True)
    )


def with_participant_count(qs):
    return qs.annotate(
        approved_count=Count(
            "participants",
            filter=Q(participants__status=ParticipantStatus.APPROVED),
        )
    )


# ─────────────────────────────────────────────────────────────
# Search
# ─────────────────────────────────────────────────────────────

def search_tries(params, user):
    """
    Filter tries by keyword, category, status, date range, location, tag
    and mine. Tag and date filters match entries of the JSON lists, so they
    are applied after the database query and the result is a list.
    """
    qs = with_participant_count(Try.objects.select_related("organizer")).order_by("-created_at", "-id")

    keyword = (params.get("keyword") or "").strip()
    if keyword:
        qs = qs.filter(Q(title__icontains=keyword) | Q(description__icontains=keyword))

    category = params.get("category")
    if category:
        qs = qs.filter(category=category)

    status = params.get("status")
    if status:
        qs = qs.filter(status=status)

    location = (params.get("location") or "").strip()
    if location:
        qs = qs.filter(location__icontains=location)

    if params.get("mine") and str(params.get("mine")).lower() in ("1", "true", "yes"):
        qs = qs.filter(organizer=user)

    tag = (params.get("tag") or "").strip()
    start_date = params.get("start_date") or ""
    end_date = params.get("end_date") or ""

    if not (tag or start_date or end_date):
        return qs

    results = []
    for try_obj in qs:
        if tag and tag not in (try_obj.tags or []):
            continue
        if start_date or end_date:
            # ISO date strings compare in calendar order
            in_range = [
                d for d in (try_obj.dates or [])
                if (not start_date or d >= start_date) and (not end_date or d <= end_date)
            ]
            if not in_range:
                continue
        results.append(try_obj)
    return results


# ─────────────────────────────────────────────────────────────
# Try CRUD
# ─────────────────────────────────────────────────────────────

def create_try(organizer, data: dict) -> Try:
    with transaction.atomic():
        try_obj = Try.objects.create(organizer=organizer, status=Try.STATUS_OPEN, **data)
        TryDraft.objects.filter(user=organizer).delete()

    logger.info(f"Try created: try={try_obj.id}, organizer={organizer.id}")
    return try_obj


def update_try(try_obj: Try, actor, data: dict) -> Try:
    """
    Apply an organizer edit and notify approved participants: a date change
    sends date_changed, any other edit sends try_updated.
    """
    can, reason = TryPolicy.can_edit_try(actor, try_obj)
    if not can:
        raise PermissionDeniedError(reason)

    with transaction.atomic():
        locked = Try.objects.select_for_update().get(pk=try_obj.pk)
        if is_terminal_status(locked.status):
            raise TransitionError("完了したTRYは編集できません")

        old_dates = list(locked.dates or [])

        for field, value in data.items():
            setattr(locked, field, value)

        if locked.capacity < 1:
            raise ParticipationError("定員は1以上で指定してください")

        recipients = approved_participant_ids(locked)
        if locked.capacity < len(recipients):
            raise CapacityError("定員を現在の参加者数より少なくすることはできません")

        locked.save()

        if "dates" in data and list(locked.dates) != old_dates:
            notification_services.queue_date_changed(
                locked,
                old_date=", ".join(old_dates),
                new_date=", ".join(locked.dates),
                recipient_ids=recipients,
            )
        else:
            notification_services.queue_try_updated(locked, recipients)

    logger.info(f"Try updated: try={locked.id}, actor={actor.id}, fields={sorted(data.keys())}")
    return locked


def delete_try(try_obj: Try, actor) -> None:
    can, reason = TryPolicy.can_delete_try(actor, try_obj)
    if not can:
        raise PermissionDeniedError(reason)

    try_id = try_obj.id
    image_urls = list(try_obj.image_urls or [])
    with transaction.atomic():
        try_obj.delete()
        # Stored blobs go only once the row is gone
        for url in image_urls:
            transaction.on_commit(lambda url=url: delete_image(url))
    logger.info(f"Try deleted: try={try_id}, actor={actor.id}")


def change_try_status(try_obj: Try, actor, new_status: str) -> Try:
    can, reason = TryPolicy.can_edit_try(actor, try_obj)
    if not can:
        raise PermissionDeniedError(reason)

    ok, message = transition_try(try_obj, new_status, actor=actor)
    if not ok:
        raise TransitionError(message)
    return try_obj


# ─────────────────────────────────────────────────────────────
# Participation
# ─────────────────────────────────────────────────────────────

def _open_application(try_obj: Try, user, name: str = "", email: str = "", introduction: str = "") -> TryParticipant:
    """
    Create a pending participation, or move a rejected/cancelled one back to
    pending. A full try takes no new applications. Must run inside a
    transaction holding the try row lock.
    """
    can, reason = TryPolicy.can_apply(user, try_obj)
    if not can:
        raise ParticipationError(reason)

    participant = (
        TryParticipant.objects.select_for_update()
        .filter(try_ref=try_obj, user=user)
        .first()
    )

    if participant is not None and participant.status in (ParticipantStatus.PENDING, ParticipantStatus.APPROVED):
        raise ConflictError("既に参加申請済みです")

    approved = _approved_count(try_obj)
    if approved >= try_obj.capacity:
        logger.warning(f"Application refused, try {try_obj.id} is full ({approved}/{try_obj.capacity})")
        raise CapacityError()

    if participant is None:
        try:
            with transaction.atomic():
                participant = TryParticipant.objects.create(
                    try_ref=try_obj,
                    user=user,
                    status=ParticipantStatus.PENDING,
                    name=name,
                    email=email,
                    introduction=introduction,
                )
        except IntegrityError:
            raise ConflictError("既に参加申請済みです")
        logger.info(f"Participation opened: participant={participant.id}, try={try_obj.id}, user={user.id}")
        return participant

    participant.name = name
    participant.email = email
    participant.introduction = introduction
    ok, message = transition_participant(participant, ParticipantStatus.PENDING, actor=user, save=False)
    if not ok:
        raise TransitionError(message)
    participant.save(update_fields=["status", "name", "email", "introduction", "updated_at"])
    return participant


def _approve_locked(try_obj: Try, participant: TryParticipant, actor) -> TryParticipant:
    """
    Approve with the capacity check. The caller holds the try row lock, so
    the count and the write cannot interleave with another approval.
    """
    approved = _approved_count(try_obj)
    if approved >= try_obj.capacity:
        logger.warning(f"Approval refused, try {try_obj.id} is full ({approved}/{try_obj.capacity})")
        raise CapacityError()

    ok, message = transition_participant(participant, ParticipantStatus.APPROVED, actor=actor)
    if not ok:
        raise TransitionError(message)
    return participant


def apply_to_try(try_obj: Try, user, name: str = "", email: str = "", introduction: str = "") -> TryParticipant:
    """
    Application modal: create a pending participation and tell the organizer.
    """
    with transaction.atomic():
        locked = Try.objects.select_for_update().get(pk=try_obj.pk)
        participant = _open_application(
            locked,
            user,
            name=name or user.public_name,
            email=email or user.email,
            introduction=introduction,
        )
        notification_services.notify_try_application(participant)
    return participant


def join_try(try_obj: Try, user) -> TryParticipant:
    """
    One-click join. With auto_approve the participation is approved in the
    same transaction (first come, first served); otherwise it stays pending
    like an application.
    """
    with transaction.atomic():
        locked = Try.objects.select_for_update().get(pk=try_obj.pk)
        participant = _open_application(locked, user, name=user.public_name, email=user.email)

        if locked.auto_approve:
            _approve_locked(locked, participant, actor=user)
            notification_services.notify_try_joined(participant)
        else:
            notification_services.notify_try_application(participant)
    return participant


def _decide(participant_id, actor, approve: bool) -> TryParticipant:
    participant = TryParticipant.objects.filter(pk=participant_id).first()
    if participant is None:
        raise NotFoundError("Participant not found")

    with transaction.atomic():
        try_obj = Try.objects.select_for_update().get(pk=participant.try_ref_id)

        can, reason = TryPolicy.can_manage_participants(actor, try_obj)
        if not can:
            raise PermissionDeniedError(reason)

        participant = TryParticipant.objects.select_for_update().select_related("user").get(pk=participant_id)
        participant.try_ref = try_obj

        if participant.status != ParticipantStatus.PENDING:
            raise TransitionError(f"Cannot {'approve' if approve else 'reject'} a {participant.status} participation")

        if approve:
            _approve_locked(try_obj, participant, actor=actor)
        else:
            ok, message = transition_participant(participant, ParticipantStatus.REJECTED, actor=actor)
            if not ok:
                raise TransitionError(message)

        notification_services.notify_application_decision(participant, approved=approve)
    return participant


def approve_participant(participant_id, actor) -> TryParticipant:
    return _decide(participant_id, actor, approve=True)


def reject_participant(participant_id, actor) -> TryParticipant:
    return _decide(participant_id, actor, approve=False)


def cancel_participation(try_obj: Try, user) -> TryParticipant:
    with transaction.atomic():
        participant = (
            TryParticipant.objects.select_for_update()
            .filter(try_ref=try_obj, user=user)
            .first()
        )
        if participant is None:
            raise NotFoundError("参加申請が見つかりません")

        ok, message = transition_participant(participant, ParticipantStatus.CANCELLED, actor=user)
        if not ok:
            raise TransitionError(message)
    return participant


# ─────────────────────────────────────────────────────────────
# Comments
# ─────────────────────────────────────────────────────────────

def add_comment(try_obj: Try, user, content: str) -> TryComment:
    comment = TryComment.objects.create(try_ref=try_obj, user=user, content=content)
    logger.info(f"Comment added: try={try_obj.id}, user={user.id}")
    return comment


# ─────────────────────────────────────────────────────────────
# Completion / reviews
# ─────────────────────────────────────────────────────────────

def complete_try(try_obj: Try, actor, completion_status: str, comment: str = "") -> TryCompletion:
    can, reason = TryPolicy.can_complete(actor, try_obj)
    if not can:
        raise PermissionDeniedError(reason)

    with transaction.atomic():
        locked = Try.objects.select_for_update().get(pk=try_obj.pk)

        ok, message = transition_try(locked, Try.STATUS_COMPLETED, actor=actor, save=False)
        if not ok:
            raise TransitionError(message)
        locked.completed_at = timezone.now()
        locked.save(update_fields=["status", "completed_at", "updated_at"])

        completion = TryCompletion.objects.create(
            try_ref=locked,
            completed_by=actor,
            completion_status=completion_status,
            comment=comment,
        )
        notification_services.queue_try_completed(locked, approved_participant_ids(locked))

    return completion


def create_review(try_obj: Try, reviewer, reviewed, rating: int, comment: str = "") -> TryReview:
    can, reason = TryPolicy.can_review(reviewer, reviewed, try_obj)
    if not can:
        raise ParticipationError(reason)

    try:
        with transaction.atomic():
            review = TryReview.objects.create(
                try_ref=try_obj,
                reviewer=reviewer,
                reviewed_user=reviewed,
                rating=rating,
                comment=comment,
            )
            notification_services.notify_try_review(review)
    except IntegrityError:
        raise ConflictError("このユーザーは既にレビュー済みです")

    logger.info(f"Review created: try={try_obj.id}, reviewer={reviewer.id}, reviewed={reviewed.id}, rating={rating}")
    return review


# ─────────────────────────────────────────────────────────────
# Drafts
# ─────────────────────────────────────────────────────────────

def get_draft(user) -> Optional[TryDraft]:
    return TryDraft.objects.filter(user=user).first()


def save_draft(user, data: dict) -> TryDraft:
    draft, _ = TryDraft.objects.update_or_create(user=user, defaults=data)
    return draft


def discard_draft(user) -> bool:
    deleted, _ = TryDraft.objects.filter(user=user).delete()
    return deleted > 0
