from django.apps import AppConfig


class LmsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "lmsweb.lms"
    verbose_name = "LMS"

    def ready(self) -> None:
        # Import the enrollment completion receiver
        from . import models  # noqa: F401
