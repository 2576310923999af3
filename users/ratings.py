# users/ratings.py
import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Avg, Count

from core.exceptions import ConflictError, DomainError, PermissionDeniedError
from tries.models import Try
from tries.policies import TryPolicy
from .models import UserRating

logger = logging.getLogger("tryfield.ratings")

SCORES = (1, 2, 3, 4, 5)


def get_rating_summary(user) -> dict:
    """
    Aggregate a user's received ratings:
    {"average_rating": 4.5, "total_ratings": 2, "ratings": {1: 0, ..., 5: 1}}
    """
    qs = UserRating.objects.filter(rated=user)
    agg = qs.aggregate(avg=Avg("rating"), total=Count("id"))

    distribution = {score: 0 for score in SCORES}
    for row in qs.values("rating").annotate(count=Count("id")):
        distribution[row["rating"]] = row["count"]

    return {
        "average_rating": agg["avg"] or 0.0,
        "total_ratings": agg["total"],
        "ratings": distribution,
    }


def refresh_rating_summary(user_id) -> dict:
    """
    Recompute and store the denormalized summary. Runs with the user's row
    locked so two raters finishing at once serialize here.
    """
    User = get_user_model()
    with transaction.atomic():
        user = User.objects.select_for_update().get(pk=user_id)
        summary = get_rating_summary(user)
        user.rating_average = summary["average_rating"]
        user.rating_count = summary["total_ratings"]
        user.rating_distribution = {str(k): v for k, v in summary["ratings"].items()}
        user.save(update_fields=["rating_average", "rating_count", "rating_distribution"])
    return summary


def create_user_rating(rater, rated, try_obj: Try, rating: int, comment: str = "") -> UserRating:
    if rater.id == rated.id:
        raise DomainError("自分自身を評価することはできません")

    if not (TryPolicy.is_member(rater, try_obj) and TryPolicy.is_member(rated, try_obj)):
        raise PermissionDeniedError("Only members of this try can rate each other")

    with transaction.atomic():
        if UserRating.objects.filter(rater=rater, rated=rated, try_ref=try_obj).exists():
            raise ConflictError("このTRYでは既に評価済みです")

        obj = UserRating.objects.create(
            rater=rater,
            rated=rated,
            try_ref=try_obj,
            rating=rating,
            comment=comment,
        )
        refresh_rating_summary(rated.id)

    logger.info(f"User rating created: rater={rater.id}, rated={rated.id}, try={try_obj.id}, rating={rating}")
    return obj
