from django.contrib import admin

from .models import Notification, NotificationOutbox


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("user", "type", "title", "is_read", "created_at")
    list_filter = ("type", "is_read")
    search_fields = ("user__username", "title")


@admin.register(NotificationOutbox)
class NotificationOutboxAdmin(admin.ModelAdmin):
    list_display = ("id", "type", "status", "attempts", "created_at", "processed_at")
    list_filter = ("status", "type")
