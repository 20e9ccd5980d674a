"""Certificate template workflow: create, edit, set-default and protected delete."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from django.db import transaction

from lmsweb.core.mixins import AuditLogMixin
from lmsweb.core.models import SystemLog

from .models import CertificateTemplate, Course

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "name",
    "logo_url",
    "primary_color",
    "secondary_color",
    "background_color",
    "text_color",
    "accent_color",
    "title_font",
    "body_font",
    "title_font_size",
    "name_font_size",
    "course_font_size",
    "body_font_size",
    "title_text",
    "subtitle_text",
    "completion_text",
    "branding_text",
    "show_border",
    "show_logo",
    "show_branding",
    "border_width",
    "border_style",
)


class CertificateTemplateError(Exception):
    """Base class for rejected certificate template operations."""


class DefaultTemplateProtected(CertificateTemplateError):
    def __init__(self, template: CertificateTemplate):
        super().__init__(
            f'"{template.name}" is the default template and cannot be deleted. '
            "Set another template as default first."
        )
        self.template = template


class DefaultTemplateRequired(CertificateTemplateError):
    def __init__(self, template: CertificateTemplate):
        super().__init__(
            f'"{template.name}" is the default template. '
            "Set another template as default instead of clearing the flag."
        )
        self.template = template


class TemplateAudit(AuditLogMixin):
    audit_log_object_type = "CertificateTemplate"


def _split_payload(data: Mapping[str, Any]) -> tuple[dict, Optional[bool]]:
    payload = dict(data)
    make_default = payload.pop("is_default", None)
    unknown = sorted(set(payload) - set(EDITABLE_FIELDS))
    if unknown:
        raise ValueError(f"Unknown certificate template field(s): {', '.join(unknown)}")
    return payload, make_default


def _clear_other_defaults(template: CertificateTemplate) -> None:
    others = CertificateTemplate.objects.select_for_update().filter(is_default=True)
    if template.pk:
        others = others.exclude(pk=template.pk)
    # The partial unique constraint requires the old default to be cleared first.
    others.update(is_default=False)


def _save(template: CertificateTemplate, *, make_default: bool) -> CertificateTemplate:
    # is_default is managed here, so its unique constraint is not validated up front.
    template.full_clean(exclude=["is_default"])
    with transaction.atomic():
        has_default = CertificateTemplate.objects.filter(is_default=True)
        if template.pk:
            has_default = has_default.exclude(pk=template.pk)
        if make_default or template.is_default or not has_default.exists():
            _clear_other_defaults(template)
            template.is_default = True
        template.save()
    return template


def create_template(data: Mapping[str, Any], *, actor=None) -> CertificateTemplate:
    """Create a template from ``data``.

    The new template becomes the default when ``data["is_default"]`` is true
    or when no default template exists yet.
    """

    payload, make_default = _split_payload(data)
    return save_new_template(CertificateTemplate(**payload), make_default=bool(make_default), actor=actor)


def save_new_template(template: CertificateTemplate, *, make_default: bool = False, actor=None) -> CertificateTemplate:
    """Validate and insert an unsaved ``template`` under the single-default rule."""

    template.is_default = False
    _save(template, make_default=make_default)
    logger.info("Certificate template id=%s created (default=%s)", template.pk, template.is_default)
    if actor is not None:
        TemplateAudit.log_create(
            user=actor,
            obj=template,
            description=f'{actor.get_username()} created certificate template "{template.name}".',
            metadata={"is_default": template.is_default},
        )
    return template


def update_template(template: CertificateTemplate, data: Mapping[str, Any], *, actor=None) -> CertificateTemplate:
    """Apply ``data`` to ``template``; clearing the default flag is rejected."""

    payload, make_default = _split_payload(data)
    if make_default is False and template.is_default:
        raise DefaultTemplateRequired(template)

    changed = sorted(name for name, value in payload.items() if getattr(template, name) != value)
    for name, value in payload.items():
        setattr(template, name, value)
    _save(template, make_default=bool(make_default))

    logger.info("Certificate template id=%s updated: %s", template.pk, ", ".join(changed) or "no changes")
    if actor is not None:
        TemplateAudit.log_edit(
            user=actor,
            obj=template,
            description=f'{actor.get_username()} edited certificate template "{template.name}".',
            metadata={"changed_fields": changed, "is_default": template.is_default},
        )
    return template


def set_default_template(template: CertificateTemplate, *, actor=None) -> CertificateTemplate:
    """Make ``template`` the only default template."""

    with transaction.atomic():
        _clear_other_defaults(template)
        template.is_default = True
        template.save(update_fields=["is_default", "updated_at"])

    logger.info("Certificate template id=%s is now the default", template.pk)
    if actor is not None:
        TemplateAudit.log_action(
            user=actor,
            action_type=SystemLog.ActionType.SET_DEFAULT,
            obj=template,
            description=f'{actor.get_username()} set "{template.name}" as the default certificate template.',
        )
    return template


def delete_template(template: CertificateTemplate, *, actor=None) -> None:
    """Delete ``template`` unless it is the current default.

    Courses that used the template fall back to the default one.
    """

    with transaction.atomic():
        current = CertificateTemplate.objects.select_for_update().get(pk=template.pk)
        if current.is_default:
            raise DefaultTemplateProtected(current)

        if actor is not None:
            TemplateAudit.log_delete(
                user=actor,
                obj=current,
                description=f'{actor.get_username()} deleted certificate template "{current.name}".',
                metadata={"courses_reassigned": current.courses.count()},
            )
        template_id = current.pk
        current.delete()

    logger.info("Certificate template id=%s deleted", template_id)


def get_default_template() -> Optional[CertificateTemplate]:
    return CertificateTemplate.objects.filter(is_default=True).first()


def resolve_template(course: Course) -> Optional[CertificateTemplate]:
    """Return the template a course's certificates are issued with."""

    if course.certificate_template_id:
        return course.certificate_template
    return get_default_template()
