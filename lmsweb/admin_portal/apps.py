from django.apps import AppConfig


class AdminPortalConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "lmsweb.admin_portal"
    verbose_name = "Admin portal"
