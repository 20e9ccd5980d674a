"""Issuing, verifying and revoking course completion certificates."""

from __future__ import annotations

import logging
import secrets
import time
from typing import Any, Dict

from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from lmsweb.core.mixins import AuditLogMixin
from lmsweb.core.models import SystemLog

from .models import Certificate, Course, Enrollment, EnrollmentStatus
from .services import resolve_template

logger = logging.getLogger(__name__)

_BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


class CertificateError(Exception):
    """Base class for certificate issuance failures."""


class CertificatesDisabled(CertificateError):
    def __init__(self, course: Course):
        super().__init__(f'The course "{course.title}" does not offer certificates.')


class NotEnrolled(CertificateError):
    def __init__(self, course: Course):
        super().__init__(f'The learner is not enrolled in "{course.title}".')


class CourseNotCompleted(CertificateError):
    def __init__(self, course: Course, progress: int):
        super().__init__(f'"{course.title}" is not completed yet ({progress}% done).')
        self.progress = progress


class CertificateAlreadyRevoked(CertificateError):
    def __init__(self, certificate: Certificate):
        super().__init__(f"Certificate {certificate.certificate_number} is already revoked.")
        self.certificate = certificate


class CertificateAudit(AuditLogMixin):
    audit_log_object_type = "Certificate"


def _base36(value: int) -> str:
    digits = []
    while True:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
        if not value:
            return "".join(reversed(digits))


def generate_certificate_number() -> str:
    """``CERT-<base36 millisecond timestamp>-<8 hex digits>``."""

    return f"CERT-{_base36(int(time.time() * 1000))}-{secrets.token_hex(4).upper()}"


def generate_verification_hash() -> str:
    return secrets.token_hex(16)


def _person_name(user) -> str:
    profile = getattr(user, "profile", None)
    if profile is not None:
        return profile.display_name
    return user.get_full_name() or user.get_username()


def issue_certificate(course: Course, user) -> Certificate:
    """Issue (or return the existing) certificate of ``user`` for ``course``."""

    if not course.certificate_enabled:
        raise CertificatesDisabled(course)

    enrollment = Enrollment.objects.filter(course=course, user=user).first()
    if enrollment is None:
        raise NotEnrolled(course)

    existing = Certificate.objects.filter(course=course, user=user, revoked_at__isnull=True).first()
    if existing is not None:
        return existing

    if not enrollment.is_complete:
        raise CourseNotCompleted(course, enrollment.progress)

    template = resolve_template(course)
    issued_at = timezone.now()
    metadata: Dict[str, Any] = {
        "course_title": course.title,
        "instructor_name": _person_name(course.instructor),
        "student_name": _person_name(user),
        "issued_date": issued_at.isoformat(),
        "template_name": template.name if template else None,
        "template_settings": template.display_settings() if template else None,
    }

    with transaction.atomic():
        certificate = Certificate.objects.create(
            certificate_number=generate_certificate_number(),
            course=course,
            user=user,
            template=template,
            verification_hash=generate_verification_hash(),
            metadata=metadata,
        )
        # Queryset update so the completion receiver is not triggered again.
        Enrollment.objects.filter(pk=enrollment.pk).update(
            status=EnrollmentStatus.COMPLETED,
            completed_at=issued_at,
        )

    logger.info(
        "Issued certificate %s for user id=%s in course id=%s using template %s",
        certificate.certificate_number,
        user.pk,
        course.pk,
        template.pk if template else "none",
    )
    return certificate


def verify_certificate(verification_hash: str) -> Dict[str, Any]:
    certificate = (
        Certificate.objects.select_related("course", "user")
        .filter(verification_hash=verification_hash)
        .first()
    )
    if certificate is None:
        return {"valid": False, "message": "Certificate not found"}

    if certificate.is_revoked:
        return {
            "valid": False,
            "message": "This certificate has been revoked",
            "revoked_at": certificate.revoked_at.isoformat(),
            "revoked_reason": certificate.revoked_reason,
        }

    return {
        "valid": True,
        "certificate": {
            "certificate_number": certificate.certificate_number,
            "student_name": certificate.metadata.get("student_name") or _person_name(certificate.user),
            "course_title": certificate.metadata.get("course_title") or certificate.course.title,
            "issued_at": certificate.issued_at.isoformat(),
        },
    }


def revoke_certificate(certificate: Certificate, reason: str = "", *, actor=None) -> Certificate:
    """Revoke ``certificate`` with ``reason``.

    Raises :class:`CertificateAlreadyRevoked` when it was revoked before, so the
    original revocation date and reason are kept.
    """

    with transaction.atomic():
        current = Certificate.objects.select_for_update().get(pk=certificate.pk)
        if current.is_revoked:
            raise CertificateAlreadyRevoked(current)

        certificate.revoked_at = timezone.now()
        certificate.revoked_reason = reason
        certificate.save(update_fields=["revoked_at", "revoked_reason"])

    logger.info("Certificate %s revoked", certificate.certificate_number)
    if actor is not None:
        CertificateAudit.log_action(
            user=actor,
            action_type=SystemLog.ActionType.REVOKED,
            obj=certificate,
            description=f"{actor.get_username()} revoked certificate {certificate.certificate_number}.",
            metadata={"reason": reason},
        )
    return certificate


def certificates_for_user(user) -> QuerySet:
    """Valid (non-revoked) certificates of ``user``, newest first."""

    return (
        Certificate.objects.select_related("course", "template")
        .filter(user=user, revoked_at__isnull=True)
        .order_by("-issued_at")
    )
