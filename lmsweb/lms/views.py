from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.http import Http404, JsonResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_GET, require_POST

from .certificates import (
    CertificateError,
    certificates_for_user,
    issue_certificate,
    verify_certificate,
)
from .models import Certificate, Course


@require_GET
def verify_certificate_view(request, verification_hash):
    """Public page (or JSON with ``?format=json``) confirming a certificate."""

    result = verify_certificate(verification_hash)
    status = 404 if result.get("message") == "Certificate not found" else 200
    if request.GET.get("format") == "json":
        return JsonResponse(result, status=status)
    return render(request, "lms/verify_certificate.html", {"result": result}, status=status)


@login_required
def my_certificates(request):
    return render(
        request,
        "lms/my_certificates.html",
        {"certificates": certificates_for_user(request.user)},
    )


@login_required
def certificate_detail(request, pk):
    certificate = get_object_or_404(
        Certificate.objects.select_related("course", "template", "user"),
        pk=pk,
    )
    # Learners only see their own certificates.
    if certificate.user_id != request.user.pk and not request.user.is_superuser:
        raise Http404("Certificate not found")
    return render(request, "lms/certificate_detail.html", {"certificate": certificate})


@login_required
@require_POST
def request_certificate(request, slug):
    """Issue the learner's certificate for a completed course on demand."""

    course = get_object_or_404(Course, slug=slug)
    try:
        certificate = issue_certificate(course, request.user)
    except CertificateError as exc:
        messages.error(request, str(exc))
        return redirect("my_certificates")

    messages.success(request, f'Certificate {certificate.certificate_number} for "{course.title}" is ready.')
    return redirect("certificate_detail", pk=certificate.pk)
