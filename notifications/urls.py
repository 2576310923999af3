from django.urls import path

from .views import (
    MyNotificationsView,
    MarkNotificationReadView,
    MarkAllNotificationsReadView,
    UnreadCountView,
    BulkNotificationView,
)

urlpatterns = [
    path("", MyNotificationsView.as_view(), name="notification-list"),
    path("<int:notification_id>/read/", MarkNotificationReadView.as_view(), name="notification-read"),
    path("read-all/", MarkAllNotificationsReadView.as_view(), name="notification-read-all"),
    path("unread-count/", UnreadCountView.as_view(), name="notification-unread-count"),
    path("bulk/", BulkNotificationView.as_view(), name="notification-bulk"),
]
