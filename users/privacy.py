# users/privacy.py
"""
Visibility rules for profiles and activity.

A level is one of public / registered / private:
- public: anyone, including anonymous viewers
- registered: any signed-in viewer
- private: only the owner
"""
from typing import Optional

from .models import PrivacySettings

ACTIVITY_KINDS = ("tries", "evaluations", "participations")


def get_privacy_settings(user) -> PrivacySettings:
    settings_obj, _ = PrivacySettings.objects.get_or_create(user=user)
    return settings_obj


def _viewer_id(viewer) -> Optional[int]:
    if viewer is None or not getattr(viewer, "is_authenticated", False):
        return None
    return viewer.id


def level_allows(level: str, owner_id: int, viewer_id: Optional[int]) -> bool:
    if level == PrivacySettings.VISIBILITY_PUBLIC:
        return True
    if level == PrivacySettings.VISIBILITY_REGISTERED:
        return viewer_id is not None
    if level == PrivacySettings.VISIBILITY_PRIVATE:
        return viewer_id == owner_id
    return False


def can_access_content(owner, viewer, kind: str) -> bool:
    """Check whether viewer may see owner's activity of the given kind."""
    if kind not in ACTIVITY_KINDS:
        return False
    settings_obj = get_privacy_settings(owner)
    level = getattr(settings_obj, f"{kind}_visibility")
    return level_allows(level, owner.id, _viewer_id(viewer))


def filter_user_data(data: dict, owner, viewer) -> dict:
    """
    Strip fields of a serialized profile that viewer is not allowed to see.
    The owner always sees everything.
    """
    viewer_id = _viewer_id(viewer)
    if viewer_id == owner.id:
        return data

    minimal = {
        "id": data.get("id"),
        "display_name": data.get("display_name"),
    }

    settings_obj = get_privacy_settings(owner)
    if not level_allows(settings_obj.profile_visibility, owner.id, viewer_id):
        return minimal

    filtered = dict(data)
    if not level_allows(settings_obj.email_visibility, owner.id, viewer_id):
        filtered.pop("email", None)
    return filtered


def allows_direct_messages(user) -> bool:
    return get_privacy_settings(user).allow_direct_messages
