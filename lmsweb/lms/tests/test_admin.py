from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from lmsweb.core.models import SystemLog
from lmsweb.lms.certificates import revoke_certificate
from lmsweb.lms.models import Certificate, CertificateTemplate, Course, Enrollment
from lmsweb.lms.services import create_template


def admin_template_data(**overrides):
    data = {
        "name": "Classic",
        "logo_url": "",
        "primary_color": "#6366f1",
        "secondary_color": "#a5b4fc",
        "background_color": "#f8fafc",
        "text_color": "#1e293b",
        "accent_color": "#6366f1",
        "title_font": "Helvetica-Bold",
        "body_font": "Helvetica",
        "title_font_size": 42,
        "name_font_size": 36,
        "course_font_size": 28,
        "body_font_size": 14,
        "title_text": "Certificate of Completion",
        "subtitle_text": "This is to certify that",
        "completion_text": "has successfully completed the course",
        "branding_text": "LMS",
        "show_border": "on",
        "show_branding": "on",
        "border_width": 3,
        "border_style": "double",
    }
    data.update(overrides)
    return data


class CertificateTemplateAdminTests(TestCase):
    def setUp(self):
        self.admin = get_user_model().objects.create_superuser(
            username="admin",
            email="admin@example.com",
            password="SecurePass123",
        )
        self.client.force_login(self.admin)

    def test_first_template_added_in_admin_becomes_default(self):
        response = self.client.post(
            reverse("admin:lms_certificatetemplate_add"),
            admin_template_data(name="First"),
        )

        self.assertEqual(response.status_code, 302)
        template = CertificateTemplate.objects.get(name="First")
        self.assertTrue(template.is_default)
        self.assertTrue(
            SystemLog.objects.filter(
                user=self.admin,
                action_type=SystemLog.ActionType.CREATED,
                object_id=template.pk,
            ).exists()
        )

    def test_later_template_added_in_admin_keeps_existing_default(self):
        classic = create_template({"name": "Classic"})

        self.client.post(
            reverse("admin:lms_certificatetemplate_add"),
            admin_template_data(name="Modern"),
        )

        classic.refresh_from_db()
        self.assertTrue(classic.is_default)
        self.assertFalse(CertificateTemplate.objects.get(name="Modern").is_default)

    def test_change_in_admin_is_audited(self):
        template = create_template({"name": "Classic"})

        response = self.client.post(
            reverse("admin:lms_certificatetemplate_change", args=[template.pk]),
            admin_template_data(name="Classic Blue"),
        )

        self.assertEqual(response.status_code, 302)
        template.refresh_from_db()
        self.assertEqual(template.name, "Classic Blue")
        self.assertTrue(template.is_default)
        log = SystemLog.objects.get(action_type=SystemLog.ActionType.EDITED, object_id=template.pk)
        self.assertEqual(log.user, self.admin)
        self.assertIn("name", log.metadata["changed_fields"])

    def test_default_template_has_no_delete_permission(self):
        template = create_template({"name": "Classic"})

        response = self.client.post(
            reverse("admin:lms_certificatetemplate_delete", args=[template.pk]),
            {"post": "yes"},
        )

        self.assertEqual(response.status_code, 403)
        self.assertTrue(CertificateTemplate.objects.filter(pk=template.pk).exists())


class CertificateAdminTests(TestCase):
    def setUp(self):
        self.admin = get_user_model().objects.create_superuser(
            username="admin",
            email="admin@example.com",
            password="SecurePass123",
        )
        self.client.force_login(self.admin)
        course = Course.objects.create(title="Intro to Python", slug="intro-python", instructor=self.admin)
        Enrollment.objects.create(course=course, user=self.admin, progress=100)
        self.certificate = Certificate.objects.get()

    def test_revoke_action_skips_revoked_certificates(self):
        revoke_certificate(self.certificate, "Issued in error")

        response = self.client.post(
            reverse("admin:lms_certificate_changelist"),
            {"action": "revoke", "_selected_action": [self.certificate.pk]},
            follow=True,
        )

        self.assertContains(response, "is already revoked")
        self.assertContains(response, "0 certificate(s) revoked.")
        self.certificate.refresh_from_db()
        self.assertEqual(self.certificate.revoked_reason, "Issued in error")
