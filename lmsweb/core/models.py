from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models
from django.utils import timezone


class SystemLog(models.Model):
    """Immutable audit trail of administrator changes to LMS objects."""

    class ActionType(models.TextChoices):
        """Supported actions that are tracked in the audit trail."""

        CREATED = "CREATED", "Created"
        EDITED = "EDITED", "Edited"
        DELETED = "DELETED", "Deleted"
        SET_DEFAULT = "SET_DEFAULT", "Set as default"
        REVOKED = "REVOKED", "Revoked"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="system_logs",
        help_text="Administrator who made the change.",
    )
    timestamp = models.DateTimeField(
        default=timezone.now,
        help_text="When the change was made.",
    )
    action_type = models.CharField(
        max_length=32,
        choices=ActionType.choices,
        help_text="Kind of change, e.g. created or set as default.",
    )
    object_type = models.CharField(
        max_length=128,
        help_text="Human readable label for the object type (e.g. CertificateTemplate).",
    )
    content_type = models.ForeignKey(
        ContentType,
        on_delete=models.CASCADE,
        help_text="Model of the changed object.",
    )
    object_id = models.PositiveIntegerField(
        help_text="Primary key of the changed object.",
    )
    content_object = GenericForeignKey("content_type", "object_id")
    description = models.TextField(
        blank=True,
        help_text="Summary shown in the admin audit list.",
    )
    metadata = models.JSONField(
        blank=True,
        null=True,
        help_text="Changed fields and other details of the change.",
    )

    class Meta:
        ordering = ["-timestamp"]
        indexes = [
            models.Index(
                fields=["user", "timestamp"],
                name="systemlog_user_timestamp_idx",
            ),
        ]
        verbose_name = "System log entry"
        verbose_name_plural = "System log entries"

    def __str__(self) -> str:
        return f"{self.get_action_type_display()} {self.object_type} #{self.object_id}"


class SecurityLog(models.Model):
    """Capture authentication and two-factor related security events."""

    class EventType(models.TextChoices):
        LOGIN_SUCCESS = "LOGIN_SUCCESS", "Login success"
        LOGIN_FAILURE = "LOGIN_FAILURE", "Login failure"
        TWO_FACTOR_DISABLED = "TWO_FACTOR_DISABLED", "Two-factor disabled"

    timestamp = models.DateTimeField(
        default=timezone.now,
        help_text="When the event was recorded.",
    )
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="security_events",
        blank=True,
        null=True,
        help_text="Authenticated user who triggered the event (empty for maintenance commands).",
    )
    target_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="security_events_target",
        blank=True,
        null=True,
        help_text="Account whose sign-in or second factor is concerned.",
    )
    event_type = models.CharField(
        max_length=32,
        choices=EventType.choices,
        help_text="Type of security event.",
    )
    ip_address = models.GenericIPAddressField(
        blank=True,
        null=True,
        help_text="Client address, when the event came from a request.",
    )
    user_agent = models.TextField(blank=True)
    description = models.TextField(
        blank=True,
        help_text="Summary shown in the security log.",
    )
    metadata = models.JSONField(blank=True, null=True)

    class Meta:
        ordering = ["-timestamp"]
        indexes = [
            models.Index(fields=["timestamp"], name="securitylog_ts_idx"),
            models.Index(
                fields=["event_type", "timestamp"],
                name="securitylog_event_ts_idx",
            ),
        ]
        verbose_name = "Security log entry"
        verbose_name_plural = "Security log entries"

    def __str__(self) -> str:
        actor = self.actor.get_username() if self.actor else "system"
        target = self.target_user.get_username() if self.target_user else "unknown"
        return f"{self.get_event_type_display()} {target} by {actor}"
