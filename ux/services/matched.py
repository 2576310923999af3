# ux/services/matched.py

from django.db.models import Count, Q

from tries.models import ParticipantStatus, Try, TryParticipant

DEFAULT_LIMIT = 20


def serialize_try_card(try_obj):
    return {
        "id": try_obj.id,
        "title": try_obj.title,
        "category": try_obj.category,
        "dates": try_obj.dates,
        "location": try_obj.location,
        "tags": try_obj.tags,
        "capacity": try_obj.capacity,
        "participant_count": getattr(try_obj, "approved_count", 0),
        "organizer_id": try_obj.organizer_id,
    }


def get_user_interests(user):
    """Tags and categories of tries the user organized or was approved for."""
    involved = Try.objects.filter(
        Q(organizer=user)
        | Q(id__in=TryParticipant.objects.filter(
            user=user,
            status=ParticipantStatus.APPROVED,
        ).values("try_ref_id"))
    )

    tags, categories = set(), set()
    for t in involved.only("tags", "category"):
        tags.update(t.tags or [])
        categories.add(t.category)
    return tags, categories


def get_matched_tries(user, limit=DEFAULT_LIMIT):
    """
    Open tries sharing a tag or category with the user's own tries,
    excluding those they organize or already applied to. Tag overlap ranks
    above a category-only match.
    """
    tags, categories = get_user_interests(user)
    if not tags and not categories:
        return []

    applied = TryParticipant.objects.filter(user=user).values("try_ref_id")
    candidates = (
        Try.objects
        .filter(status=Try.STATUS_OPEN)
        .exclude(organizer=user)
        .exclude(id__in=applied)
        .annotate(approved_count=Count(
            "participants",
            filter=Q(participants__status=ParticipantStatus.APPROVED),
        ))
        .order_by("-created_at")
    )

    scored = []
    for t in candidates:
        shared_tags = len(tags.intersection(t.tags or []))
        same_category = t.category in categories
        if not shared_tags and not same_category:
            continue
        scored.append((shared_tags, same_category, t))

    scored.sort(key=lambda item: (item[0], item[1]), reverse=True)
    return [serialize_try_card(t) for _, _, t in scored[:limit]]
