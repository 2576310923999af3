# messaging/services.py
import logging

from django.db import IntegrityError, transaction
from django.db.models import F, Q
from django.utils import timezone

from core.exceptions import DomainError, PermissionDeniedError
from notifications import services as notification_services
from tries.policies import TryPolicy
from tries.services import approved_participant_ids
from users.privacy import allows_direct_messages
from .models import ContactShare, DMMessage, DMRoom, TryChatMessage

logger = logging.getLogger("tryfield.messaging")

PREVIEW_LENGTH = 100


def _ordered_pair(user_a, user_b):
    return (user_a, user_b) if user_a.id < user_b.id else (user_b, user_a)


def rooms_for(user):
    return (
        DMRoom.objects
        .filter(Q(user_low=user) | Q(user_high=user))
        .select_related("user_low", "user_high")
        .order_by("-last_updated")
    )


def get_or_create_dm_room(user_a, user_b):
    """
    Return the room shared by the two users, creating it when absent.
    Returns (room, created). Concurrent creators end up with the same row.
    """
    if user_a.id == user_b.id:
        raise DomainError("自分自身とのDMは作成できません")

    low, high = _ordered_pair(user_a, user_b)

    room = DMRoom.objects.filter(user_low=low, user_high=high).first()
    if room:
        return room, False

    if not allows_direct_messages(user_b):
        raise PermissionDeniedError("このユーザーはDMを受け付けていません")

    try:
        with transaction.atomic():
            room = DMRoom.objects.create(user_low=low, user_high=high, last_message="", unread_count=0)
    except IntegrityError:
        # Lost the race with another creator
        return DMRoom.objects.get(user_low=low, user_high=high), False

    logger.info(f"DM room created: room={room.id}, users=({low.id}, {high.id})")
    return room, True


def send_dm(room: DMRoom, sender, text: str) -> DMMessage:
    """Append a message and update the room summary in one transaction."""
    if not room.has_participant(sender):
        raise PermissionDeniedError("Not a participant of this room")

    text = (text or "").strip()
    if not text:
        raise DomainError("メッセージを入力してください")

    with transaction.atomic():
        message = DMMessage.objects.create(
            room=room,
            sender=sender,
            sender_name=sender.public_name,
            sender_photo=sender.photo_url,
            text=text,
        )
        DMRoom.objects.filter(pk=room.pk).update(
            last_message=text[:PREVIEW_LENGTH],
            last_updated=timezone.now(),
            unread_count=F("unread_count") + 1,
        )

    room.refresh_from_db(fields=["last_message", "last_updated", "unread_count"])
    logger.info(f"DM sent: room={room.id}, sender={sender.id}")
    return message


def mark_room_read(room: DMRoom, user) -> int:
    """
    Mark every unread message from the counterpart read and reset the
    room's unread count, as one unit.
    """
    if not room.has_participant(user):
        raise PermissionDeniedError("Not a participant of this room")

    with transaction.atomic():
        updated = (
            DMMessage.objects
            .filter(room=room, is_read=False)
            .exclude(sender=user)
            .update(is_read=True)
        )
        DMRoom.objects.filter(pk=room.pk).update(unread_count=0)

    room.unread_count = 0
    return updated


def unread_dm_total(user) -> int:
    return (
        DMMessage.objects
        .filter(Q(room__user_low=user) | Q(room__user_high=user), is_read=False)
        .exclude(sender=user)
        .count()
    )


# ─────────────────────────────────────────────────────────────
# Try group chat
# ─────────────────────────────────────────────────────────────

def chat_recipient_ids(try_obj, sender) -> list:
    ids = set(approved_participant_ids(try_obj))
    ids.add(try_obj.organizer_id)
    ids.discard(sender.id)
    return sorted(ids)


def post_chat_message(try_obj, user, content: str) -> TryChatMessage:
    can, reason = TryPolicy.can_access_chat(user, try_obj)
    if not can:
        raise PermissionDeniedError(reason)

    content = (content or "").strip()
    if not content:
        raise DomainError("メッセージを入力してください")

    with transaction.atomic():
        message = TryChatMessage.objects.create(
            try_ref=try_obj,
            user=user,
            user_name=user.public_name,
            user_photo=user.photo_url,
            content=content,
            is_organizer=TryPolicy.is_organizer(user, try_obj),
        )
        notification_services.queue_chat_message(
            try_obj,
            sender=user,
            chat_id=try_obj.id,
            recipient_ids=chat_recipient_ids(try_obj, user),
        )

    logger.info(f"Chat message posted: try={try_obj.id}, user={user.id}")
    return message


def share_contact(try_obj, user) -> ContactShare:
    can, reason = TryPolicy.can_access_chat(user, try_obj)
    if not can:
        raise PermissionDeniedError(reason)

    share, created = ContactShare.objects.update_or_create(
        try_ref=try_obj,
        user=user,
        defaults={"email": user.email},
    )
    if created:
        logger.info(f"Contact shared: try={try_obj.id}, user={user.id}")
    return share


def visible_contacts(try_obj, viewer) -> dict:
    """
    {user_id: email} of other members who shared their contact. Empty
    unless the viewer has shared theirs too.
    """
    shares = {s.user_id: s.email for s in ContactShare.objects.filter(try_ref=try_obj)}
    if viewer.id not in shares:
        return {}
    return {user_id: email for user_id, email in shares.items() if user_id != viewer.id}
