"""Reusable mixins shared across Django apps in the project."""

from __future__ import annotations

from typing import Any, Dict, Optional

from django.contrib.contenttypes.models import ContentType
from django.utils import timezone

from .models import SystemLog


class AuditLogMixin:
    """Write :class:`~lmsweb.core.models.SystemLog` entries for admin changes.

    Services call :meth:`log_action` directly; admin views inherit it. The
    entry must be written before a deletion so the primary key is still known.
    """

    audit_log_object_type: Optional[str] = None

    @classmethod
    def log_action(
        cls,
        *,
        user,
        action_type: str,
        obj,
        description: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        timestamp=None,
    ) -> SystemLog:
        if user is None or obj is None:
            raise ValueError("user and obj are required to log an action")

        object_type = cls.audit_log_object_type or obj.__class__.__name__
        content_type = ContentType.objects.get_for_model(obj, for_concrete_model=False)

        return SystemLog.objects.create(
            user=user,
            action_type=action_type,
            object_type=object_type,
            content_type=content_type,
            object_id=obj.pk,
            timestamp=timestamp or timezone.now(),
            description=description or "",
            metadata=metadata,
        )

    @classmethod
    def log_create(cls, *, user, obj, description: Optional[str] = None, metadata=None):
        return cls.log_action(
            user=user,
            action_type=SystemLog.ActionType.CREATED,
            obj=obj,
            description=description,
            metadata=metadata,
        )

    @classmethod
    def log_edit(cls, *, user, obj, description: Optional[str] = None, metadata=None):
        return cls.log_action(
            user=user,
            action_type=SystemLog.ActionType.EDITED,
            obj=obj,
            description=description,
            metadata=metadata,
        )

    @classmethod
    def log_delete(cls, *, user, obj, description: Optional[str] = None, metadata=None):
        return cls.log_action(
            user=user,
            action_type=SystemLog.ActionType.DELETED,
            obj=obj,
            description=description,
            metadata=metadata,
        )
