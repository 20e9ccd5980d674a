"""Certificate templates, courses, enrollments and issued certificates."""
from __future__ import annotations

import logging

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator, RegexValidator
from django.db import models
from django.db.models.signals import post_save
from django.dispatch import receiver

logger = logging.getLogger(__name__)

hex_color_validator = RegexValidator(
    regex=r"^#[0-9a-fA-F]{6}$",
    message="Enter a colour as #rrggbb.",
)

# (field name, minimum, maximum) for the bounded integer settings.
FONT_SIZE_RANGES = {
    "title_font_size": (20, 72),
    "name_font_size": (16, 60),
    "course_font_size": (14, 48),
    "body_font_size": (10, 24),
}
BORDER_WIDTH_RANGE = (1, 10)


def _bounded(field_name):
    low, high = FONT_SIZE_RANGES[field_name]
    return [MinValueValidator(low), MaxValueValidator(high)]


def _color_field(default: str, verbose_name: str):
    return models.CharField(
        max_length=7,
        default=default,
        validators=[hex_color_validator],
        verbose_name=verbose_name,
    )


class FontFamily(models.TextChoices):
    HELVETICA = "Helvetica", "Helvetica"
    HELVETICA_BOLD = "Helvetica-Bold", "Helvetica Bold"
    TIMES_ROMAN = "Times-Roman", "Times Roman"
    TIMES_BOLD = "Times-Bold", "Times Bold"
    COURIER = "Courier", "Courier"
    COURIER_BOLD = "Courier-Bold", "Courier Bold"


class BorderStyle(models.TextChoices):
    SINGLE = "single", "Single"
    DOUBLE = "double", "Double"


class CertificateTemplate(models.Model):
    """Named set of visual and text settings applied to completion certificates."""

    name = models.CharField(max_length=120)
    is_default = models.BooleanField(
        default=False,
        help_text="Applied to courses that do not pick a template. Only one template can be the default.",
    )
    logo_url = models.URLField(
        max_length=500,
        blank=True,
        help_text="Logo image URL, usually copied from the Media Library.",
    )

    primary_color = _color_field("#6366f1", "Primary colour")
    secondary_color = _color_field("#a5b4fc", "Secondary colour")
    background_color = _color_field("#f8fafc", "Background colour")
    text_color = _color_field("#1e293b", "Text colour")
    accent_color = _color_field("#6366f1", "Accent colour")

    title_font = models.CharField(max_length=32, choices=FontFamily.choices, default=FontFamily.HELVETICA_BOLD)
    body_font = models.CharField(max_length=32, choices=FontFamily.choices, default=FontFamily.HELVETICA)
    title_font_size = models.PositiveSmallIntegerField(default=42, validators=_bounded("title_font_size"))
    name_font_size = models.PositiveSmallIntegerField(default=36, validators=_bounded("name_font_size"))
    course_font_size = models.PositiveSmallIntegerField(default=28, validators=_bounded("course_font_size"))
    body_font_size = models.PositiveSmallIntegerField(default=14, validators=_bounded("body_font_size"))

    title_text = models.CharField(max_length=200, default="Certificate of Completion")
    subtitle_text = models.CharField(max_length=200, default="This is to certify that")
    completion_text = models.CharField(max_length=200, default="has successfully completed the course")
    branding_text = models.CharField(max_length=200, blank=True, default="LMS")

    show_border = models.BooleanField(default=True)
    show_logo = models.BooleanField(default=False)
    show_branding = models.BooleanField(default=True)
    border_width = models.PositiveSmallIntegerField(
        default=3,
        validators=[MinValueValidator(BORDER_WIDTH_RANGE[0]), MaxValueValidator(BORDER_WIDTH_RANGE[1])],
    )
    border_style = models.CharField(max_length=16, choices=BorderStyle.choices, default=BorderStyle.DOUBLE)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-is_default", "name"]
        constraints = [
            models.UniqueConstraint(
                fields=["is_default"],
                condition=models.Q(is_default=True),
                name="single_default_certificate_template",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} (default)" if self.is_default else self.name

    def display_settings(self) -> dict:
        """Snapshot of the settings stored on certificates issued with this template."""

        excluded = {"id", "name", "is_default", "created_at", "updated_at"}
        return {
            field.name: getattr(self, field.name)
            for field in self._meta.concrete_fields
            if field.name not in excluded
        }


class Course(models.Model):
    title = models.CharField(max_length=200)
    slug = models.SlugField(max_length=200, unique=True)
    instructor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="courses_taught",
    )
    certificate_enabled = models.BooleanField(default=True)
    certificate_template = models.ForeignKey(
        CertificateTemplate,
        on_delete=models.SET_NULL,
        blank=True,
        null=True,
        related_name="courses",
        help_text="Leave empty to use the default template.",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.title


class EnrollmentStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    COMPLETED = "completed", "Completed"


class Enrollment(models.Model):
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="enrollments")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="enrollments")
    progress = models.PositiveSmallIntegerField(
        default=0,
        validators=[MaxValueValidator(100)],
        help_text="Percentage of the course content completed.",
    )
    status = models.CharField(max_length=16, choices=EnrollmentStatus.choices, default=EnrollmentStatus.ACTIVE)
    enrolled_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["course", "user"], name="unique_course_enrollment"),
        ]

    def __str__(self):
        return f"{self.user} in {self.course}"

    @property
    def is_complete(self) -> bool:
        return self.progress >= 100


class Certificate(models.Model):
    certificate_number = models.CharField(max_length=40, unique=True, editable=False)
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name="certificates")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="certificates")
    template = models.ForeignKey(
        CertificateTemplate,
        on_delete=models.SET_NULL,
        blank=True,
        null=True,
        related_name="certificates",
    )
    verification_hash = models.CharField(max_length=64, unique=True, editable=False)
    issued_at = models.DateTimeField(auto_now_add=True)
    revoked_at = models.DateTimeField(blank=True, null=True)
    revoked_reason = models.CharField(max_length=255, blank=True)
    metadata = models.JSONField(default=dict, blank=True)

    class Meta:
        ordering = ["-issued_at"]
        indexes = [
            models.Index(fields=["course", "user"], name="certificate_course_user_idx"),
        ]

    def __str__(self):
        return self.certificate_number

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None

    @property
    def verify_url(self) -> str:
        return f"{settings.CERTIFICATE_VERIFY_BASE_URL}/verify/{self.verification_hash}/"


@receiver(post_save, sender=Enrollment)
def issue_certificate_on_completion(sender, instance: Enrollment, created, raw=False, **kwargs):
    """Issue the course certificate when an enrollment first reaches 100%.

    Later saves never issue again, so a revoked certificate stays revoked
    until :func:`~lmsweb.lms.certificates.issue_certificate` is called explicitly.
    """

    if raw or not instance.is_complete or instance.status == EnrollmentStatus.COMPLETED:
        return
    if not instance.course.certificate_enabled:
        return
    # The in-memory instance can be stale after issuance updated the row.
    if Certificate.objects.filter(course_id=instance.course_id, user_id=instance.user_id).exists():
        return

    from .certificates import CertificateError, issue_certificate

    try:
        issue_certificate(instance.course, instance.user)
    except CertificateError as exc:
        logger.warning(
            "Could not issue certificate for enrollment id=%s: %s",
            instance.pk,
            exc,
        )
    else:
        instance.refresh_from_db(fields=["status", "completed_at"])
