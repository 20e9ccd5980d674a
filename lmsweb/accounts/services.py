"""Account maintenance operations shared by the admin portal and commands."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Set

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Q
from django_otp import device_classes, devices_for_user, user_has_device

from lmsweb.core.models import SecurityLog
from lmsweb.core.security_logging import record_security_event

from .models import Profile

logger = logging.getLogger(__name__)


class TwoFactorError(Exception):
    """Base class for failures of the two-factor maintenance operations."""


class AccountNotFound(TwoFactorError):
    def __init__(self, email: str):
        super().__init__(f"No account found with email {email!r}.")
        self.email = email


class AmbiguousAccount(TwoFactorError):
    def __init__(self, email: str, count: int):
        super().__init__(f"{count} accounts share the email {email!r}; refusing to guess.")
        self.email = email
        self.count = count


def find_account_by_email(email: str):
    """Return the single user whose email matches ``email`` (case-insensitive)."""

    email = (email or "").strip()
    if not email:
        raise AccountNotFound(email)

    matches = list(get_user_model().objects.filter(email__iexact=email)[:2])
    if not matches:
        raise AccountNotFound(email)
    if len(matches) > 1:
        raise AmbiguousAccount(email, get_user_model().objects.filter(email__iexact=email).count())
    return matches[0]


def user_has_two_factor(user: Any) -> bool:
    """Return ``True`` when the account still carries any second factor.

    Both the project-level profile flag and confirmed django-otp devices
    count, so an account is only reported clean when neither remains.
    """

    if not user or not getattr(user, "pk", None):
        return False

    profile = Profile.objects.filter(user=user).first()
    if profile and (profile.two_factor_enabled or profile.two_factor_secret):
        return True
    return bool(user_has_device(user, confirmed=True))


def users_with_two_factor(users: Iterable[Any]) -> Set[int]:
    """Primary keys of ``users`` that still carry a second factor.

    Bulk form of :func:`user_has_two_factor`: one query for profiles and one
    per django-otp device model, whatever the number of users.
    """

    user_ids = [user.pk for user in users if getattr(user, "pk", None)]
    if not user_ids:
        return set()

    enabled = set(
        Profile.objects.filter(user_id__in=user_ids)
        .filter(Q(two_factor_enabled=True) | ~Q(two_factor_secret=""))
        .values_list("user_id", flat=True)
    )
    for model in device_classes():
        enabled.update(
            model.objects.filter(user_id__in=user_ids, confirmed=True).values_list("user_id", flat=True)
        )
    return enabled


def disable_two_factor_for_user(user, *, actor=None, request=None):
    """Turn two-factor authentication off for ``user`` and clear its secret.

    Every django-otp device of the account (TOTP and static recovery codes)
    is removed in the same transaction. Setting fixed values makes the
    operation idempotent.
    """

    with transaction.atomic():
        profile, _ = Profile.objects.select_for_update().get_or_create(user=user)
        was_enabled = profile.two_factor_enabled
        profile.two_factor_enabled = False
        profile.two_factor_secret = ""
        profile.save(update_fields=["two_factor_enabled", "two_factor_secret"])

        removed_devices = []
        for device in list(devices_for_user(user, confirmed=None)):
            removed_devices.append(device.persistent_id)
            device.delete()

        actor_name = actor.get_username() if actor is not None else "maintenance command"
        record_security_event(
            SecurityLog.EventType.TWO_FACTOR_DISABLED,
            actor=actor,
            target_user=user,
            request=request,
            description=f"{actor_name} disabled two-factor authentication for {user.email}.",
            metadata={
                "was_enabled": was_enabled,
                "removed_devices": removed_devices,
                "target_user_id": user.pk,
            },
        )

    logger.info(
        "Two-factor authentication disabled for user id=%s (was_enabled=%s, devices_removed=%d)",
        user.pk,
        was_enabled,
        len(removed_devices),
    )
    return user


def disable_two_factor(email: str, *, actor=None, request=None):
    """Locate the account by ``email`` and disable its two-factor authentication.

    Raises :class:`AccountNotFound` or :class:`AmbiguousAccount` when the email
    does not identify exactly one account.
    """

    user = find_account_by_email(email)
    return disable_two_factor_for_user(user, actor=actor, request=request)
