# ux/services/dashboard.py

from django.db.models import Count

from messaging.services import unread_dm_total
from notifications.models import Notification
from notifications.serializers import NotificationSerializer
from tries.models import ParticipantStatus, Try, TryParticipant

RECENT_NOTIFICATIONS = 10


def _counts_by_status(qs, choices):
    counts = {value: 0 for value in choices}
    for row in qs.values("status").annotate(count=Count("id")):
        counts[row["status"]] = row["count"]
    return counts


def get_dashboard_summary(user):
    # 1️⃣ Tries the user organizes
    organized = _counts_by_status(
        Try.objects.filter(organizer=user),
        [value for value, _ in Try.STATUS_CHOICES],
    )

    # 2️⃣ Participations
    participations = _counts_by_status(
        TryParticipant.objects.filter(user=user),
        ParticipantStatus.values,
    )

    # 3️⃣ Notifications
    unread_notifications = Notification.objects.filter(user=user, is_read=False).count()
    recent = Notification.objects.filter(user=user).order_by("-created_at")[:RECENT_NOTIFICATIONS]

    # 4️⃣ Direct messages
    unread_dms = unread_dm_total(user)

    return {
        "stats": {
            "organized_tries": organized,
            "organized_total": sum(organized.values()),
            "participations": participations,
            "unread_notifications": unread_notifications,
            "unread_dms": unread_dms,
        },
        "recent_notifications": NotificationSerializer(recent, many=True).data,
    }
