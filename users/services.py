# users/services.py
import logging

from django.contrib.auth import get_user_model

logger = logging.getLogger("tryfield.auth")


def _unique_username(base: str) -> str:
    User = get_user_model()
    base = (base or "user")[:140]
    username = base
    counter = 1
    while User.objects.filter(username=username).exists():
        username = f"{base}_{counter}"
        counter += 1
    return username


def provision_user(provider_uid: str, email=None, display_name=None, photo_url=None):
    """
    Return the local profile for an identity-provider subject, creating it
    on first sign-in. Existing profiles are never overwritten here; users
    edit their own profile afterwards.
    """
    User = get_user_model()

    user = User.objects.filter(provider_uid=provider_uid).first()
    if user:
        return user

    username = _unique_username(email.split("@")[0] if email else provider_uid.split(":")[-1])
    user = User.objects.create(
        username=username,
        email=email or "",
        provider_uid=provider_uid,
        display_name=display_name or "",
        photo_url=photo_url,
    )
    # Password is not used for federated sign-in
    user.set_unusable_password()
    user.save(update_fields=["password"])

    logger.info(f"Provisioned new user {user.id} for {provider_uid}")
    return user


def search_users(query: str, limit: int = 20):
    """
    Active users whose name matches query, leaving out anyone who turned
    off `searchable`. Users without a settings row count as searchable.
    """
    from django.db.models import Q

    User = get_user_model()
    return (
        User.objects
        .filter(is_active=True)
        .filter(Q(display_name__icontains=query) | Q(username__icontains=query))
        .exclude(privacy_settings__searchable=False)
        .order_by("display_name", "id")[:limit]
    )
