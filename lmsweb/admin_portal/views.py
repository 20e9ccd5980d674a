import logging

from django.contrib import messages
from django.contrib.auth import get_user_model
from django.contrib.auth.decorators import login_required, user_passes_test
from django.core.exceptions import ValidationError
from django.core.paginator import Paginator
from django.db.models import Count, Q
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_http_methods, require_POST

from lmsweb.accounts.services import disable_two_factor_for_user, users_with_two_factor
from lmsweb.lms.models import CertificateTemplate
from lmsweb.lms.services import (
    CertificateTemplateError,
    create_template,
    delete_template,
    set_default_template,
    update_template,
)

from .forms import CertificateTemplateForm

logger = logging.getLogger(__name__)

User = get_user_model()


def _is_admin(user) -> bool:
    return user.is_superuser


@login_required
@user_passes_test(_is_admin)
def certificate_template_list(request):
    templates = (
        CertificateTemplate.objects.annotate(
            course_count=Count("courses", distinct=True),
            certificate_count=Count("certificates", distinct=True),
        )
        .order_by("-is_default", "name")
    )
    paginator = Paginator(templates, 20)
    page_obj = paginator.get_page(request.GET.get("page"))
    return render(
        request,
        "admin_portal/certificate_templates.html",
        {"templates": page_obj, "has_default": CertificateTemplate.objects.filter(is_default=True).exists()},
    )


@login_required
@user_passes_test(_is_admin)
@require_http_methods(["GET", "POST"])
def certificate_template_create(request):
    form = CertificateTemplateForm(request.POST or None)
    if request.method == "POST" and form.is_valid():
        try:
            template = create_template(form.template_payload(), actor=request.user)
        except ValidationError as exc:
            form.add_error(None, exc)
        else:
            messages.success(request, f'Template "{template.name}" created.')
            return redirect("certificate_template_list")
    elif request.method == "POST":
        messages.error(request, "Please correct the errors below.")

    return render(
        request,
        "admin_portal/certificate_template_form.html",
        {"form": form, "template_obj": None},
    )


@login_required
@user_passes_test(_is_admin)
@require_http_methods(["GET", "POST"])
def certificate_template_edit(request, pk):
    template = get_object_or_404(CertificateTemplate, pk=pk)
    form = CertificateTemplateForm(request.POST or None, instance=template)
    if request.method == "POST" and form.is_valid():
        # The bound form has already copied its values onto ``template``.
        stored = CertificateTemplate.objects.get(pk=pk)
        try:
            update_template(stored, form.template_payload(), actor=request.user)
        except CertificateTemplateError as exc:
            form.add_error(None, str(exc))
        except ValidationError as exc:
            form.add_error(None, exc)
        else:
            messages.success(request, f'Template "{stored.name}" saved.')
            return redirect("certificate_template_list")
    elif request.method == "POST":
        messages.error(request, "Please correct the errors below.")

    return render(
        request,
        "admin_portal/certificate_template_form.html",
        {"form": form, "template_obj": template},
    )


@login_required
@user_passes_test(_is_admin)
@require_POST
def certificate_template_set_default(request, pk):
    template = get_object_or_404(CertificateTemplate, pk=pk)
    if template.is_default:
        messages.info(request, f'"{template.name}" is already the default template.')
    else:
        set_default_template(template, actor=request.user)
        messages.success(request, "Default template updated.")
    return redirect("certificate_template_list")


@login_required
@user_passes_test(_is_admin)
@require_POST
def certificate_template_delete(request, pk):
    template = get_object_or_404(CertificateTemplate, pk=pk)
    try:
        delete_template(template, actor=request.user)
    except CertificateTemplateError as exc:
        messages.error(request, str(exc))
    else:
        messages.success(request, "Template deleted.")
    return redirect("certificate_template_list")


@login_required
@user_passes_test(_is_admin)
def admin_two_factor_accounts(request):
    """List accounts with their two-factor state so admins can reset lockouts."""

    search_query = (request.GET.get("q") or "").strip()
    users = User.objects.order_by("username")
    if search_query:
        users = users.filter(
            Q(username__icontains=search_query)
            | Q(email__icontains=search_query)
            | Q(profile__full_name__icontains=search_query)
        )

    paginator = Paginator(users, 50)
    page_obj = paginator.get_page(request.GET.get("page"))
    accounts = list(page_obj)
    enabled = users_with_two_factor(accounts)
    rows = [(account, account.pk in enabled) for account in accounts]
    return render(
        request,
        "admin_portal/two_factor_accounts.html",
        {"users": page_obj, "rows": rows, "search_query": search_query},
    )


@login_required
@user_passes_test(_is_admin)
@require_POST
def admin_disable_two_factor(request, pk):
    target = get_object_or_404(User, pk=pk)
    disable_two_factor_for_user(target, actor=request.user, request=request)
    logger.info(
        "Administrator %s (id=%s) disabled two-factor for user id=%s",
        request.user.get_username(),
        request.user.pk,
        target.pk,
    )
    messages.success(request, f"Two-factor authentication disabled for {target.email or target.get_username()}.")
    return redirect("admin_two_factor_accounts")
