from django.contrib import admin

from .models import ContactShare, DMMessage, DMRoom, TryChatMessage


@admin.register(DMRoom)
class DMRoomAdmin(admin.ModelAdmin):
    list_display = ("id", "user_low", "user_high", "unread_count", "last_updated")


@admin.register(DMMessage)
class DMMessageAdmin(admin.ModelAdmin):
    list_display = ("room", "sender", "is_read", "created_at")
    list_filter = ("is_read",)


@admin.register(TryChatMessage)
class TryChatMessageAdmin(admin.ModelAdmin):
    list_display = ("try_ref", "user", "is_organizer", "created_at")


@admin.register(ContactShare)
class ContactShareAdmin(admin.ModelAdmin):
    list_display = ("try_ref", "user", "created_at")
