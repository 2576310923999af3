from django.contrib import admin

from .models import Try, TryParticipant, TryComment, TryCompletion, TryReview, TryDraft


class TryParticipantInline(admin.TabularInline):
    model = TryParticipant
    extra = 0
    fields = ("user", "status", "name", "email", "created_at")
    readonly_fields = ("created_at",)


@admin.register(Try)
class TryAdmin(admin.ModelAdmin):
    list_display = ("title", "organizer", "category", "status", "capacity", "created_at")
    list_filter = ("status", "category", "auto_approve")
    search_fields = ("title", "description", "organizer__username")
    inlines = [TryParticipantInline]


@admin.register(TryParticipant)
class TryParticipantAdmin(admin.ModelAdmin):
    list_display = ("try_ref", "user", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("user__username", "try_ref__title")


@admin.register(TryComment)
class TryCommentAdmin(admin.ModelAdmin):
    list_display = ("try_ref", "user", "created_at")


@admin.register(TryCompletion)
class TryCompletionAdmin(admin.ModelAdmin):
    list_display = ("try_ref", "completion_status", "completed_by", "created_at")


@admin.register(TryReview)
class TryReviewAdmin(admin.ModelAdmin):
    list_display = ("try_ref", "reviewer", "reviewed_user", "rating", "created_at")


@admin.register(TryDraft)
class TryDraftAdmin(admin.ModelAdmin):
    list_display = ("user", "title", "last_modified")
