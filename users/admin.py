from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import User, PrivacySettings, UserRating

@admin.register(User)
class CustomUserAdmin(UserAdmin):
    list_display = ('username', 'email', 'display_name', 'provider_uid', 'is_staff', 'rating_average')
    list_filter = ('is_staff', 'is_superuser', 'is_active')
    search_fields = ('username', 'email', 'display_name', 'provider_uid')
    fieldsets = UserAdmin.fieldsets + (
        ('Profile', {'fields': ('provider_uid', 'display_name', 'photo_url', 'bio')}),
        ('Ratings', {'fields': ('rating_average', 'rating_count', 'rating_distribution')}),
    )
    readonly_fields = ('rating_average', 'rating_count', 'rating_distribution')

@admin.register(PrivacySettings)
class PrivacySettingsAdmin(admin.ModelAdmin):
    list_display = ('user', 'profile_visibility', 'allow_direct_messages', 'updated_at')
    search_fields = ('user__username',)

@admin.register(UserRating)
class UserRatingAdmin(admin.ModelAdmin):
    list_display = ('rater', 'rated', 'try_ref', 'rating', 'created_at')
    search_fields = ('rater__username', 'rated__username')
