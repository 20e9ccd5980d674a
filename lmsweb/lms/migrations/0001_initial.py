from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


FONT_CHOICES = [
    ("Helvetica", "Helvetica"),
    ("Helvetica-Bold", "Helvetica Bold"),
    ("Times-Roman", "Times Roman"),
    ("Times-Bold", "Times Bold"),
    ("Courier", "Courier"),
    ("Courier-Bold", "Courier Bold"),
]

HEX_COLOR = django.core.validators.RegexValidator(
    message="Enter a colour as #rrggbb.",
    regex="^#[0-9a-fA-F]{6}$",
)


def _bounded(low, high):
    return [
        django.core.validators.MinValueValidator(low),
        django.core.validators.MaxValueValidator(high),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="CertificateTemplate",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=120)),
                (
                    "is_default",
                    models.BooleanField(
                        default=False,
                        help_text="Applied to courses that do not pick a template. Only one template can be the default.",
                    ),
                ),
                (
                    "logo_url",
                    models.URLField(
                        blank=True,
                        help_text="Logo image URL, usually copied from the Media Library.",
                        max_length=500,
                    ),
                ),
                ("primary_color", models.CharField(default="#6366f1", max_length=7, validators=[HEX_COLOR], verbose_name="Primary colour")),
                ("secondary_color", models.CharField(default="#a5b4fc", max_length=7, validators=[HEX_COLOR], verbose_name="Secondary colour")),
                ("background_color", models.CharField(default="#f8fafc", max_length=7, validators=[HEX_COLOR], verbose_name="Background colour")),
                ("text_color", models.CharField(default="#1e293b", max_length=7, validators=[HEX_COLOR], verbose_name="Text colour")),
                ("accent_color", models.CharField(default="#6366f1", max_length=7, validators=[HEX_COLOR], verbose_name="Accent colour")),
                ("title_font", models.CharField(choices=FONT_CHOICES, default="Helvetica-Bold", max_length=32)),
                ("body_font", models.CharField(choices=FONT_CHOICES, default="Helvetica", max_length=32)),
                ("title_font_size", models.PositiveSmallIntegerField(default=42, validators=_bounded(20, 72))),
                ("name_font_size", models.PositiveSmallIntegerField(default=36, validators=_bounded(16, 60))),
                ("course_font_size", models.PositiveSmallIntegerField(default=28, validators=_bounded(14, 48))),
                ("body_font_size", models.PositiveSmallIntegerField(default=14, validators=_bounded(10, 24))),
                ("title_text", models.CharField(default="Certificate of Completion", max_length=200)),
                ("subtitle_text", models.CharField(default="This is to certify that", max_length=200)),
                ("completion_text", models.CharField(default="has successfully completed the course", max_length=200)),
                ("branding_text", models.CharField(blank=True, default="LMS", max_length=200)),
                ("show_border", models.BooleanField(default=True)),
                ("show_logo", models.BooleanField(default=False)),
                ("show_branding", models.BooleanField(default=True)),
                ("border_width", models.PositiveSmallIntegerField(default=3, validators=_bounded(1, 10))),
                (
                    "border_style",
                    models.CharField(
                        choices=[("single", "Single"), ("double", "Double")],
                        default="double",
                        max_length=16,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["-is_default", "name"],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("is_default", True)),
                        fields=("is_default",),
                        name="single_default_certificate_template",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Course",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                ("slug", models.SlugField(max_length=200, unique=True)),
                ("certificate_enabled", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "certificate_template",
                    models.ForeignKey(
                        blank=True,
                        help_text="Leave empty to use the default template.",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="courses",
                        to="lms.certificatetemplate",
                    ),
                ),
                (
                    "instructor",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="courses_taught",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="Enrollment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "progress",
                    models.PositiveSmallIntegerField(
                        default=0,
                        help_text="Percentage of the course content completed.",
                        validators=[django.core.validators.MaxValueValidator(100)],
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("completed", "Completed")],
                        default="active",
                        max_length=16,
                    ),
                ),
                ("enrolled_at", models.DateTimeField(auto_now_add=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                (
                    "course",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="enrollments",
                        to="lms.course",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="enrollments",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(fields=("course", "user"), name="unique_course_enrollment"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Certificate",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("certificate_number", models.CharField(editable=False, max_length=40, unique=True)),
                ("verification_hash", models.CharField(editable=False, max_length=64, unique=True)),
                ("issued_at", models.DateTimeField(auto_now_add=True)),
                ("revoked_at", models.DateTimeField(blank=True, null=True)),
                ("revoked_reason", models.CharField(blank=True, max_length=255)),
                ("metadata", models.JSONField(blank=True, default=dict)),
                (
                    "course",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="certificates",
                        to="lms.course",
                    ),
                ),
                (
                    "template",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="certificates",
                        to="lms.certificatetemplate",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="certificates",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-issued_at"],
                "indexes": [
                    models.Index(fields=["course", "user"], name="certificate_course_user_idx"),
                ],
            },
        ),
    ]
