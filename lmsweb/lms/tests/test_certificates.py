import re

from django.conf import settings
from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from django.urls import reverse

from lmsweb.core.models import SystemLog
from lmsweb.lms.certificates import (
    CertificateAlreadyRevoked,
    CertificatesDisabled,
    CourseNotCompleted,
    NotEnrolled,
    certificates_for_user,
    issue_certificate,
    revoke_certificate,
    verify_certificate,
)
from lmsweb.lms.models import Certificate, Course, Enrollment, EnrollmentStatus
from lmsweb.lms.services import create_template


class CertificateTestMixin:
    def setUp(self):
        User = get_user_model()
        self.instructor = User.objects.create_user(
            username="instructor",
            email="instructor@example.com",
            password="SecurePass123",
            first_name="Ada",
            last_name="Lovelace",
        )
        self.student = User.objects.create_user(
            username="student",
            email="student@example.com",
            password="SecurePass123",
        )
        self.student.profile.full_name = "Grace Hopper"
        self.student.profile.save()
        self.default_template = create_template({"name": "Classic"})
        self.course = Course.objects.create(
            title="Intro to Python",
            slug="intro-python",
            instructor=self.instructor,
        )

    def complete(self, course=None, user=None):
        enrollment, _ = Enrollment.objects.get_or_create(course=course or self.course, user=user or self.student)
        enrollment.progress = 100
        enrollment.save()
        return enrollment


class IssueCertificateTests(CertificateTestMixin, TestCase):
    def test_completion_issues_certificate_with_default_template(self):
        self.complete()

        certificate = Certificate.objects.get(course=self.course, user=self.student)
        self.assertEqual(certificate.template, self.default_template)
        self.assertRegex(certificate.certificate_number, r"^CERT-[0-9A-Z]+-[0-9A-F]{8}$")
        self.assertTrue(re.fullmatch(r"[0-9a-f]{32}", certificate.verification_hash))
        self.assertEqual(certificate.metadata["student_name"], "Grace Hopper")
        self.assertEqual(certificate.metadata["instructor_name"], "Ada Lovelace")
        self.assertEqual(certificate.metadata["course_title"], "Intro to Python")
        self.assertEqual(certificate.metadata["template_name"], "Classic")
        self.assertEqual(certificate.metadata["template_settings"]["primary_color"], "#6366f1")

        enrollment = Enrollment.objects.get(course=self.course, user=self.student)
        self.assertEqual(enrollment.status, EnrollmentStatus.COMPLETED)
        self.assertIsNotNone(enrollment.completed_at)

    def test_course_template_takes_precedence(self):
        modern = create_template({"name": "Modern", "primary_color": "#0f766e"})
        self.course.certificate_template = modern
        self.course.save()

        self.complete()

        certificate = Certificate.objects.get(course=self.course, user=self.student)
        self.assertEqual(certificate.template, modern)
        self.assertEqual(certificate.metadata["template_settings"]["primary_color"], "#0f766e")

    def test_partial_progress_does_not_issue(self):
        Enrollment.objects.create(course=self.course, user=self.student, progress=60)

        self.assertFalse(Certificate.objects.exists())
        with self.assertRaises(CourseNotCompleted) as ctx:
            issue_certificate(self.course, self.student)
        self.assertEqual(ctx.exception.progress, 60)

    def test_existing_certificate_is_returned(self):
        self.complete()
        first = Certificate.objects.get()

        again = issue_certificate(self.course, self.student)
        self.complete()

        self.assertEqual(again.pk, first.pk)
        self.assertEqual(Certificate.objects.count(), 1)

    def test_revoked_certificate_is_replaced_on_reissue(self):
        self.complete()
        first = Certificate.objects.get()
        revoke_certificate(first, "Issued in error")

        second = issue_certificate(self.course, self.student)

        self.assertNotEqual(second.pk, first.pk)
        self.assertNotEqual(second.verification_hash, first.verification_hash)

    def test_saving_completed_enrollment_keeps_revocation(self):
        enrollment = Enrollment.objects.create(course=self.course, user=self.student, progress=100)
        revoke_certificate(Certificate.objects.get(), "Academic misconduct")

        enrollment.save()
        Enrollment.objects.get(pk=enrollment.pk).save()

        self.assertEqual(Certificate.objects.count(), 1)
        self.assertFalse(certificates_for_user(self.student).exists())

    def test_reaching_completion_later_issues_once(self):
        enrollment = Enrollment.objects.create(course=self.course, user=self.student, progress=40)
        self.assertFalse(Certificate.objects.exists())

        enrollment.progress = 100
        enrollment.save()
        enrollment.save()

        self.assertEqual(Certificate.objects.count(), 1)
        enrollment.refresh_from_db()
        self.assertEqual(enrollment.status, EnrollmentStatus.COMPLETED)
        self.assertIsNotNone(enrollment.completed_at)

    def test_disabled_course_is_rejected(self):
        self.course.certificate_enabled = False
        self.course.save()
        self.complete()

        self.assertFalse(Certificate.objects.exists())
        with self.assertRaises(CertificatesDisabled):
            issue_certificate(self.course, self.student)

    def test_student_must_be_enrolled(self):
        with self.assertRaises(NotEnrolled):
            issue_certificate(self.course, self.student)

    def test_issued_without_any_template(self):
        self.default_template.delete()

        self.complete()

        certificate = Certificate.objects.get()
        self.assertIsNone(certificate.template)
        self.assertIsNone(certificate.metadata["template_settings"])


class VerifyCertificateTests(CertificateTestMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.complete()
        self.certificate = Certificate.objects.get()
        self.admin = get_user_model().objects.create_superuser(
            username="admin",
            email="admin@example.com",
            password="SecurePass123",
        )

    def test_valid_certificate(self):
        result = verify_certificate(self.certificate.verification_hash)

        self.assertTrue(result["valid"])
        self.assertEqual(result["certificate"]["certificate_number"], self.certificate.certificate_number)
        self.assertEqual(result["certificate"]["student_name"], "Grace Hopper")
        self.assertEqual(result["certificate"]["course_title"], "Intro to Python")

    def test_unknown_hash(self):
        self.assertEqual(
            verify_certificate("0" * 32),
            {"valid": False, "message": "Certificate not found"},
        )

    def test_revoked_certificate(self):
        revoke_certificate(self.certificate, "Academic misconduct", actor=self.admin)

        result = verify_certificate(self.certificate.verification_hash)

        self.assertFalse(result["valid"])
        self.assertEqual(result["message"], "This certificate has been revoked")
        self.assertEqual(result["revoked_reason"], "Academic misconduct")
        self.assertTrue(
            SystemLog.objects.filter(
                action_type=SystemLog.ActionType.REVOKED,
                object_id=self.certificate.pk,
            ).exists()
        )

    def test_revoking_twice_is_rejected(self):
        revoke_certificate(self.certificate, "First")
        revoked_at = self.certificate.revoked_at

        with self.assertRaises(CertificateAlreadyRevoked):
            revoke_certificate(Certificate.objects.get(pk=self.certificate.pk), "Second")

        self.certificate.refresh_from_db()
        self.assertEqual(self.certificate.revoked_at, revoked_at)
        self.assertEqual(self.certificate.revoked_reason, "First")

    @override_settings(CERTIFICATE_VERIFY_BASE_URL="https://lms.example.com")
    def test_verify_url(self):
        self.assertEqual(
            self.certificate.verify_url,
            f"https://lms.example.com/verify/{self.certificate.verification_hash}/",
        )

    def test_verify_page_renders_valid_certificate(self):
        response = self.client.get(
            reverse("verify_certificate", args=[self.certificate.verification_hash])
        )

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Valid certificate")
        self.assertContains(response, self.certificate.certificate_number)

    def test_verify_json_response(self):
        response = self.client.get(
            reverse("verify_certificate", args=[self.certificate.verification_hash]),
            {"format": "json"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["valid"])

    def test_verify_unknown_hash_returns_404(self):
        response = self.client.get(reverse("verify_certificate", args=["missing"]), {"format": "json"})

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["message"], "Certificate not found")

    def test_verify_page_for_revoked_certificate(self):
        revoke_certificate(self.certificate, "Academic misconduct")

        response = self.client.get(
            reverse("verify_certificate", args=[self.certificate.verification_hash])
        )

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "This certificate has been revoked")
        self.assertContains(response, "Academic misconduct")


class LearnerCertificateTests(CertificateTestMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.other = get_user_model().objects.create_user(
            username="other",
            email="other@example.com",
            password="SecurePass123",
        )

    def test_certificates_for_user_lists_only_valid_own_certificates(self):
        self.complete()
        revoked_course = Course.objects.create(title="Data 101", slug="data-101", instructor=self.instructor)
        self.complete(course=revoked_course)
        revoke_certificate(Certificate.objects.get(course=revoked_course), "Issued in error")
        self.complete(user=self.other)

        certificates = list(certificates_for_user(self.student))

        self.assertEqual(len(certificates), 1)
        self.assertEqual(certificates[0].course, self.course)

    def test_login_required_for_my_certificates(self):
        response = self.client.get(reverse("my_certificates"))

        self.assertEqual(response.status_code, 302)
        self.assertTrue(response["Location"].startswith(settings.LOGIN_URL))

    def test_my_certificates_page(self):
        self.complete()
        certificate = Certificate.objects.get()
        self.client.force_login(self.student)

        response = self.client.get(reverse("my_certificates"))

        self.assertContains(response, certificate.certificate_number)
        self.assertContains(response, "Intro to Python")

    def test_owner_sees_certificate_detail(self):
        self.complete()
        certificate = Certificate.objects.get()
        self.client.force_login(self.student)

        response = self.client.get(reverse("certificate_detail", args=[certificate.pk]))

        self.assertContains(response, certificate.certificate_number)
        self.assertContains(response, certificate.verify_url)

    def test_other_learner_cannot_see_certificate(self):
        self.complete()
        certificate = Certificate.objects.get()
        self.client.force_login(self.other)

        response = self.client.get(reverse("certificate_detail", args=[certificate.pk]))

        self.assertEqual(response.status_code, 404)

    def test_request_certificate_before_completion(self):
        Enrollment.objects.create(course=self.course, user=self.student, progress=60)
        self.client.force_login(self.student)

        response = self.client.post(
            reverse("request_certificate", args=[self.course.slug]),
            follow=True,
        )

        self.assertRedirects(response, reverse("my_certificates"))
        self.assertContains(response, "is not completed yet (60% done)")
        self.assertFalse(Certificate.objects.exists())

    def test_request_certificate_after_completion(self):
        enrollment = Enrollment.objects.create(course=self.course, user=self.student, progress=60)
        Enrollment.objects.filter(pk=enrollment.pk).update(progress=100)
        self.client.force_login(self.student)

        response = self.client.post(reverse("request_certificate", args=[self.course.slug]))

        certificate = Certificate.objects.get(user=self.student)
        self.assertRedirects(response, reverse("certificate_detail", args=[certificate.pk]))

    def test_request_certificate_requires_post(self):
        self.client.force_login(self.student)

        response = self.client.get(reverse("request_certificate", args=[self.course.slug]))

        self.assertEqual(response.status_code, 405)
