"""Profile model and signal handlers for LMS accounts."""
from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models.signals import post_save
from django.dispatch import receiver


class Profile(models.Model):
    """Per-account data that augments the built-in user model."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        related_name="profile",
        on_delete=models.CASCADE,
    )
    full_name = models.CharField(max_length=255, blank=True)
    # 2FA
    two_factor_enabled = models.BooleanField(
        default=False,
        help_text="True when the account must pass a second authentication factor.",
    )
    two_factor_secret = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Base32 TOTP secret; cleared whenever two-factor is disabled.",
    )

    class Meta:
        indexes = [
            models.Index(fields=["user"], name="profile_user_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover - representational helper
        return f"Profile<{self.user_id}>"

    @property
    def email(self) -> str:
        return getattr(self.user, "email", "")

    @property
    def display_name(self) -> str:
        return self.full_name or self.user.get_full_name() or self.user.get_username()


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def ensure_profile(sender, instance, created, **kwargs):
    """Guarantee every user has an attached profile row."""
    if created:
        Profile.objects.get_or_create(user=instance)
