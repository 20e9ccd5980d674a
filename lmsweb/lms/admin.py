from django.contrib import admin, messages

from .certificates import CertificateAlreadyRevoked, revoke_certificate
from .models import Certificate, CertificateTemplate, Course, Enrollment
from .services import (
    EDITABLE_FIELDS,
    CertificateTemplateError,
    delete_template,
    save_new_template,
    set_default_template,
    update_template,
)


@admin.register(CertificateTemplate)
class CertificateTemplateAdmin(admin.ModelAdmin):
    """Django admin access to templates; the default one cannot be deleted."""

    list_display = ("name", "is_default", "title_font", "body_font", "updated_at")
    list_filter = ("is_default",)
    search_fields = ("name",)
    readonly_fields = ("is_default", "created_at", "updated_at")
    actions = ["make_default"]

    def save_model(self, request, obj, form, change):
        if not change:
            save_new_template(obj, actor=request.user)
            return

        stored = CertificateTemplate.objects.get(pk=obj.pk)
        payload = {name: form.cleaned_data[name] for name in form.changed_data if name in EDITABLE_FIELDS}
        update_template(stored, payload, actor=request.user)
        obj.refresh_from_db()

    def has_delete_permission(self, request, obj=None):
        if obj is not None and obj.is_default:
            return False
        return super().has_delete_permission(request, obj)

    def delete_model(self, request, obj):
        delete_template(obj, actor=request.user)

    def delete_queryset(self, request, queryset):
        for template in queryset:
            try:
                delete_template(template, actor=request.user)
            except CertificateTemplateError as exc:
                self.message_user(request, str(exc), messages.ERROR)

    @admin.action(description="Set as default template")
    def make_default(self, request, queryset):
        if queryset.count() != 1:
            self.message_user(request, "Select exactly one template to make default.", messages.ERROR)
            return
        template = set_default_template(queryset.get(), actor=request.user)
        self.message_user(request, f'"{template.name}" is now the default template.', messages.SUCCESS)


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ("title", "instructor", "certificate_enabled", "certificate_template")
    list_filter = ("certificate_enabled",)
    search_fields = ("title", "slug")
    prepopulated_fields = {"slug": ("title",)}


@admin.register(Enrollment)
class EnrollmentAdmin(admin.ModelAdmin):
    list_display = ("user", "course", "progress", "status", "completed_at")
    list_filter = ("status",)
    search_fields = ("user__username", "user__email", "course__title")


@admin.register(Certificate)
class CertificateAdmin(admin.ModelAdmin):
    list_display = ("certificate_number", "user", "course", "template", "issued_at", "revoked_at")
    list_filter = ("issued_at", "revoked_at")
    search_fields = ("certificate_number", "user__email", "course__title")
    readonly_fields = (
        "certificate_number",
        "verification_hash",
        "issued_at",
        "revoked_at",
        "metadata",
    )
    actions = ["revoke"]

    @admin.action(description="Revoke selected certificates")
    def revoke(self, request, queryset):
        revoked = 0
        for certificate in queryset:
            try:
                revoke_certificate(certificate, "Revoked by administrator", actor=request.user)
            except CertificateAlreadyRevoked as exc:
                self.message_user(request, str(exc), messages.WARNING)
            else:
                revoked += 1
        self.message_user(request, f"{revoked} certificate(s) revoked.", messages.SUCCESS)
