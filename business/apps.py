from django.apps import AppConfig


class BusinessAppConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "business"
    verbose_name = "Business Settings"
