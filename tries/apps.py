from django.apps import AppConfig


class TriesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "tries"
