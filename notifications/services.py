# notifications/services.py
"""
Creating and reading notifications.

Single-recipient notifications are written directly, in the caller's
transaction. Multi-recipient fan-out goes through NotificationOutbox and is
delivered by a Celery task after the caller's transaction commits.
"""
import logging
from typing import Iterable, Optional

from django.db import transaction
from django.utils import timezone

from .models import Notification, NotificationOutbox

logger = logging.getLogger("tryfield.notifications")

BULK_DEFAULT_LINK = "/notifications"
SYSTEM_SENDER_ID = "system"


def try_link(try_id) -> str:
    return f"/tries/{try_id}"


def chat_link(try_id) -> str:
    return f"/tries/{try_id}/chat"


def try_title(try_id) -> str:
    """Title of a try, or "" when it cannot be read."""
    from tries.models import Try

    if try_id is None:
        return ""
    return Try.objects.filter(pk=try_id).values_list("title", flat=True).first() or ""


# ─────────────────────────────────────────────────────────────
# Title / message builders
# ─────────────────────────────────────────────────────────────

def application_texts(applicant_name: str, title: str):
    return "新規参加申請", f"{applicant_name}さんが「{title}」への参加を希望しています"


def joined_texts(participant_name: str, title: str):
    return "TRYに新しい参加者が加わりました", f"{participant_name}さんが「{title}」に参加しました"


def decision_texts(approved: bool, title: str):
    if approved:
        return "参加申請が承認されました", f"「{title}」への参加申請が承認されました"
    return "参加申請が却下されました", f"「{title}」への参加申請が却下されました"


def updated_texts(title: str):
    return "TRY更新", f"参加中の「{title}」が更新されました"


def date_changed_texts(title: str, old_date: str, new_date: str):
    return "TRYの日程が変更されました", f"{title}の日程が{old_date}から{new_date}に変更されました"


def completed_texts(title: str):
    return "TRYが完了しました", f"参加した「{title}」が完了しました"


def chat_texts(sender_name: str, title: str):
    return "新規メッセージ", f"{sender_name}さんから「{title}」のチャットでメッセージが届いています"


def review_texts(title: str, rating: int):
    return "レビューが届きました", f"「{title}」でのあなたへのレビューが届きました（評価: {rating}）"


# ─────────────────────────────────────────────────────────────
# Writes
# ─────────────────────────────────────────────────────────────

def create_notification(
    recipient,
    type: str,
    title: str,
    message: str,
    try_obj=None,
    chat_id: Optional[str] = None,
    link: Optional[str] = None,
    metadata: Optional[dict] = None,
) -> Notification:
    notification = Notification.objects.create(
        user=recipient,
        type=type,
        title=title,
        message=message,
        is_read=False,
        try_ref=try_obj,
        chat_id=chat_id,
        link=link,
        metadata=metadata or {},
    )
    logger.info(f"Notification created: id={notification.id}, user={recipient.id}, type={type}")
    return notification


def enqueue_fanout(
    type: str,
    title: str,
    message: str,
    recipient_ids: Iterable[int],
    try_obj=None,
    chat_id: Optional[str] = None,
    link: Optional[str] = None,
    metadata: Optional[dict] = None,
) -> Optional[NotificationOutbox]:
    """
    Persist a fan-out and schedule its delivery for after commit.
    Returns None when there is nobody to notify.
    """
    from .tasks import process_notification_outbox

    ids = sorted({int(i) for i in recipient_ids})
    if not ids:
        return None

    outbox = NotificationOutbox.objects.create(
        type=type,
        title=title,
        message=message,
        link=link,
        try_ref=try_obj,
        chat_id=chat_id,
        metadata=metadata or {},
        recipient_ids=ids,
    )
    logger.info(f"Notification outbox queued: id={outbox.id}, type={type}, recipients={len(ids)}")

    transaction.on_commit(lambda: process_notification_outbox.delay(outbox.id))
    return outbox


def deliver_outbox(outbox_id: int) -> int:
    """
    Create the missing notifications of an outbox. Safe to run any number
    of times: (outbox, user) is unique, so redelivery skips existing rows.

    Returns the number of recipients delivered so far.
    """
    from django.contrib.auth import get_user_model

    User = get_user_model()

    with transaction.atomic():
        outbox = NotificationOutbox.objects.select_for_update().get(pk=outbox_id)
        if outbox.status == NotificationOutbox.STATUS_COMPLETED:
            return len(outbox.recipient_ids)

        outbox.attempts += 1

        existing_ids = set(
            Notification.objects.filter(outbox=outbox).values_list("user_id", flat=True)
        )
        recipients = User.objects.filter(id__in=outbox.recipient_ids).exclude(id__in=existing_ids)

        Notification.objects.bulk_create(
            [
                Notification(
                    user=user,
                    type=outbox.type,
                    title=outbox.title,
                    message=outbox.message,
                    try_ref_id=outbox.try_ref_id,
                    chat_id=outbox.chat_id,
                    link=outbox.link,
                    metadata=outbox.metadata,
                    outbox=outbox,
                )
                for user in recipients
            ],
            ignore_conflicts=True,
        )

        delivered = Notification.objects.filter(outbox=outbox).count()
        # Recipients deleted since queueing are not waited for
        expected = User.objects.filter(id__in=outbox.recipient_ids).count()

        if delivered >= expected:
            outbox.status = NotificationOutbox.STATUS_COMPLETED
            outbox.processed_at = timezone.now()
            outbox.last_error = ""
        outbox.save(update_fields=["attempts", "status", "processed_at", "last_error", "updated_at"])

    logger.info(
        f"Notification outbox processed: id={outbox_id}, delivered={delivered}/{expected}, "
        f"status={outbox.status}"
    )
    return delivered


def record_outbox_failure(outbox_id: int, error: str, final: bool = False) -> None:
    fields = {"last_error": error[:2000], "updated_at": timezone.now()}
    if final:
        fields["status"] = NotificationOutbox.STATUS_FAILED
    NotificationOutbox.objects.filter(pk=outbox_id).exclude(
        status=NotificationOutbox.STATUS_COMPLETED
    ).update(**fields)


# ─────────────────────────────────────────────────────────────
# Per-event helpers
# ─────────────────────────────────────────────────────────────

def notify_try_application(participant) -> Notification:
    try_obj = participant.try_ref
    name = participant.name or participant.user.public_name
    title, message = application_texts(name, try_obj.title)
    return create_notification(
        recipient=try_obj.organizer,
        type=Notification.TYPE_TRY_APPLICATION,
        title=title,
        message=message,
        try_obj=try_obj,
        link=try_link(try_obj.id),
    )


def notify_try_joined(participant) -> Notification:
    try_obj = participant.try_ref
    title, message = joined_texts(participant.name or participant.user.public_name, try_obj.title)
    return create_notification(
        recipient=try_obj.organizer,
        type=Notification.TYPE_TRY_JOINED,
        title=title,
        message=message,
        try_obj=try_obj,
        link=try_link(try_obj.id),
    )


def notify_application_decision(participant, approved: bool) -> Notification:
    try_obj = participant.try_ref
    title, message = decision_texts(approved, try_obj.title)
    return create_notification(
        recipient=participant.user,
        type=Notification.TYPE_APPLICATION_APPROVED if approved else Notification.TYPE_APPLICATION_REJECTED,
        title=title,
        message=message,
        try_obj=try_obj,
        link=try_link(try_obj.id),
    )


def notify_try_review(review) -> Notification:
    title, message = review_texts(try_title(review.try_ref_id), review.rating)
    return create_notification(
        recipient=review.reviewed_user,
        type=Notification.TYPE_TRY_REVIEW,
        title=title,
        message=message,
        try_obj=review.try_ref,
        link=try_link(review.try_ref_id),
        metadata={"rating": review.rating, "reviewer_id": review.reviewer_id},
    )


def queue_try_updated(try_obj, recipient_ids) -> Optional[NotificationOutbox]:
    title, message = updated_texts(try_obj.title)
    return enqueue_fanout(
        Notification.TYPE_TRY_UPDATED, title, message, recipient_ids,
        try_obj=try_obj, link=try_link(try_obj.id),
    )


def queue_date_changed(try_obj, old_date: str, new_date: str, recipient_ids) -> Optional[NotificationOutbox]:
    title, message = date_changed_texts(try_obj.title, old_date, new_date)
    return enqueue_fanout(
        Notification.TYPE_DATE_CHANGED, title, message, recipient_ids,
        try_obj=try_obj, link=try_link(try_obj.id),
        metadata={"old_date": old_date, "new_date": new_date},
    )


def queue_try_completed(try_obj, recipient_ids) -> Optional[NotificationOutbox]:
    title, message = completed_texts(try_obj.title)
    return enqueue_fanout(
        Notification.TYPE_TRY_COMPLETED, title, message, recipient_ids,
        try_obj=try_obj, link=try_link(try_obj.id),
    )


def queue_chat_message(try_obj, sender, chat_id, recipient_ids) -> Optional[NotificationOutbox]:
    title, message = chat_texts(sender.public_name, try_obj.title)
    return enqueue_fanout(
        Notification.TYPE_CHAT_MESSAGE, title, message, recipient_ids,
        try_obj=try_obj, chat_id=str(chat_id), link=chat_link(try_obj.id),
        metadata={"sender_id": sender.id},
    )


def queue_bulk_notification(recipient_ids, title: str, message: str, link: Optional[str] = None) -> Optional[NotificationOutbox]:
    return enqueue_fanout(
        Notification.TYPE_BULK, title, message, recipient_ids,
        link=link or BULK_DEFAULT_LINK,
        metadata={"sender_id": SYSTEM_SENDER_ID},
    )


# ─────────────────────────────────────────────────────────────
# Read state
# ─────────────────────────────────────────────────────────────

def mark_read(user, notification_id) -> bool:
    """Mark one of the user's notifications read. False if it is not theirs."""
    updated = Notification.objects.filter(pk=notification_id, user=user).update(is_read=True)
    return updated > 0


def mark_all_read(user) -> int:
    updated = Notification.objects.filter(user=user, is_read=False).update(is_read=True)
    logger.info(f"Marked {updated} notifications read for user {user.id}")
    return updated


def unread_count(user) -> int:
    return Notification.objects.filter(user=user, is_read=False).count()
