"""Persist security-sensitive audit events."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from django.contrib.auth.signals import user_logged_in, user_login_failed
from django.dispatch import receiver

from .models import SecurityLog

logger = logging.getLogger(__name__)


def get_client_ip(request) -> Optional[str]:
    """Extract the client IP address from the request object."""

    if request is None:
        return None

    x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
    if x_forwarded_for:
        # The left-most address is the original client in standard proxy setups.
        return x_forwarded_for.split(",")[0].strip() or None
    return request.META.get("REMOTE_ADDR") or None


def record_security_event(
    event_type: str,
    *,
    description: str,
    actor=None,
    target_user=None,
    request=None,
    metadata: Optional[Dict[str, Any]] = None,
) -> SecurityLog:
    """Create a :class:`SecurityLog` row, enriching it from ``request`` when given."""

    return SecurityLog.objects.create(
        actor=actor,
        target_user=target_user,
        event_type=event_type,
        ip_address=get_client_ip(request),
        user_agent=request.META.get("HTTP_USER_AGENT", "") if request is not None else "",
        description=description,
        metadata=metadata,
    )


@receiver(user_logged_in)
def log_login_success(sender, request, user, **kwargs):
    record_security_event(
        SecurityLog.EventType.LOGIN_SUCCESS,
        actor=user,
        target_user=user,
        request=request,
        description=f"{user.get_username()} signed in successfully.",
        metadata={"path": getattr(request, "path", "")},
    )


@receiver(user_login_failed)
def log_login_failure(sender, credentials, request=None, **kwargs):
    """Capture failed authentication attempts for administrators to review."""

    username = (credentials or {}).get("username", "unknown")
    logger.info("Failed login attempt for username %r", username)
    record_security_event(
        SecurityLog.EventType.LOGIN_FAILURE,
        request=request,
        description=f"Failed login attempt for username '{username}'.",
        metadata={"username": username},
    )
