# notifications/tasks.py
import logging

from celery import shared_task
from django.conf import settings
from django.db import DatabaseError
from django.utils import timezone

from .models import NotificationOutbox
from .services import deliver_outbox, record_outbox_failure

logger = logging.getLogger("tryfield.notifications")


@shared_task(bind=True, max_retries=3, default_retry_delay=30)
def process_notification_outbox(self, outbox_id: int):
    """
    Deliver one outbox. Retried on database errors; after the last retry the
    outbox is marked failed and left for inspection.
    """
    try:
        return deliver_outbox(outbox_id)
    except NotificationOutbox.DoesNotExist:
        logger.warning(f"Notification outbox {outbox_id} no longer exists")
        return 0
    except DatabaseError as exc:
        final = self.request.retries >= self.max_retries
        record_outbox_failure(outbox_id, str(exc), final=final)
        if final:
            logger.error(f"Notification outbox {outbox_id} failed after {self.request.retries} retries: {exc}")
            raise
        logger.warning(f"Notification outbox {outbox_id} delivery failed, retrying: {exc}")
        raise self.retry(exc=exc)


@shared_task
def sweep_pending_outboxes():
    """
    Re-dispatch outboxes still pending after NOTIFICATION_OUTBOX_STALE_AFTER,
    e.g. when the worker was down at commit time.
    """
    cutoff = timezone.now() - settings.NOTIFICATION_OUTBOX_STALE_AFTER
    stale_ids = list(
        NotificationOutbox.objects.filter(
            status=NotificationOutbox.STATUS_PENDING,
            updated_at__lt=cutoff,
        ).values_list("id", flat=True)
    )

    for outbox_id in stale_ids:
        process_notification_outbox.delay(outbox_id)

    if stale_ids:
        logger.info(f"Re-dispatched {len(stale_ids)} stale notification outboxes")
    return len(stale_ids)
