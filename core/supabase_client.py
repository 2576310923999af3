# core/supabase_client.py
# Supabase client for object storage (try images, avatars)

import logging
import uuid

from django.conf import settings
from supabase import create_client

logger = logging.getLogger("tryfield.storage")

_supabase_client = None

IMAGE_KINDS = ("tries", "avatars")


class StorageError(Exception):
    """Raised when the storage backend is unavailable or rejects a request."""


def get_supabase_client():
    """
    Get the Supabase client instance (singleton pattern).
    Uses service_role key for admin access.
    """
    global _supabase_client

    if _supabase_client is None:
        url = settings.SUPABASE_URL
        key = settings.SUPABASE_SERVICE_ROLE_KEY

        if not url or not key:
            logger.warning("Supabase credentials not configured")
            return None

        _supabase_client = create_client(url, key)
        logger.info("Supabase client initialized")

    return _supabase_client


def build_object_path(kind: str, owner_id, filename: str) -> str:
    """
    Objects are namespaced by entity kind and owner:
    "tries/42/3f2a..._cover.png"
    """
    safe_name = filename.replace("/", "_").replace("\\", "_") or "image"
    return f"{kind}/{owner_id}/{uuid.uuid4().hex}_{safe_name}"


def upload_image(owner_id, kind: str, filename: str, content: bytes, content_type: str) -> str:
    """
    Upload an image to Supabase Storage.

    Args:
        owner_id: The owning user's ID (for folder structure)
        kind: Entity namespace, one of IMAGE_KINDS
        filename: Original file name (kept as a suffix)
        content: File bytes
        content_type: MIME type sent along with the upload

    Returns:
        The durable public URL embedded in entity records.
    """
    if kind not in IMAGE_KINDS:
        raise StorageError(f"Unknown image kind: {kind}")

    client = get_supabase_client()
    if not client:
        raise StorageError("Storage is not configured")

    path = build_object_path(kind, owner_id, filename)
    bucket = client.storage.from_(settings.SUPABASE_STORAGE_BUCKET)

    try:
        bucket.upload(
            path,
            content,
            file_options={"content-type": content_type, "upsert": "false"},
        )
    except Exception as e:
        logger.error(f"Failed to upload image {path}: {e}")
        raise StorageError("Upload failed") from e

    logger.info(f"Uploaded image to storage: {path}")
    return bucket.get_public_url(path)


def object_path_from_url(url: str):
    """
    Recover the storage path from a public URL, or None if the URL does not
    point into our bucket.
    """
    marker = f"/object/public/{settings.SUPABASE_STORAGE_BUCKET}/"
    if not url or marker not in url:
        return None
    return url.split(marker, 1)[1].split("?", 1)[0]


def delete_image(url: str) -> bool:
    """
    Delete an image from storage by its public URL.

    Returns:
        True if successful, False otherwise
    """
    path = object_path_from_url(url)
    client = get_supabase_client()
    if not client or not path:
        return False

    try:
        client.storage.from_(settings.SUPABASE_STORAGE_BUCKET).remove([path])
        logger.info(f"Deleted image from storage: {path}")
        return True
    except Exception as e:
        logger.error(f"Failed to delete image {path}: {e}")
        return False
