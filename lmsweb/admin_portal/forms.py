from django import forms

from lmsweb.lms.models import BORDER_WIDTH_RANGE, FONT_SIZE_RANGES, CertificateTemplate
from lmsweb.lms.services import EDITABLE_FIELDS

COLOR_FIELDS = (
    "primary_color",
    "secondary_color",
    "background_color",
    "text_color",
    "accent_color",
)
CHECKBOX_FIELDS = ("show_border", "show_logo", "show_branding", "make_default")


def _apply_bootstrap_classes(form):
    """Attach consistent Bootstrap-friendly attributes to form widgets."""

    for name, field in form.fields.items():
        css_class = "form-check-input" if name in CHECKBOX_FIELDS else "form-control"
        if isinstance(field.widget, forms.Select):
            css_class = "form-select"
        existing = field.widget.attrs.get("class", "")
        field.widget.attrs["class"] = " ".join(dict.fromkeys(f"{existing} {css_class}".split()))


class CertificateTemplateForm(forms.ModelForm):
    """Edit every certificate setting; the default flag is handled by the service."""

    make_default = forms.BooleanField(
        required=False,
        label="Set as default template",
        help_text="The default template is applied to courses that do not pick one.",
    )

    class Meta:
        model = CertificateTemplate
        fields = EDITABLE_FIELDS
        widgets = {
            **{name: forms.TextInput(attrs={"type": "color"}) for name in COLOR_FIELDS},
            "logo_url": forms.URLInput(attrs={"placeholder": "https://…/media/logo.png"}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for name, (low, high) in {**FONT_SIZE_RANGES, "border_width": BORDER_WIDTH_RANGE}.items():
            self.fields[name].widget.attrs.update({"min": low, "max": high})
            self.fields[name].help_text = f"{low}–{high}"

        if self.instance.pk and self.instance.is_default:
            self.fields["make_default"].initial = True
            self.fields["make_default"].disabled = True
            self.fields["make_default"].help_text = (
                "This is the default template. Set another template as default to change it."
            )

        _apply_bootstrap_classes(self)

    def clean_name(self):
        name = (self.cleaned_data.get("name") or "").strip()
        if not name:
            raise forms.ValidationError("Template name is required.")
        return name

    def clean(self):
        cleaned = super().clean()
        if cleaned.get("show_logo") and not cleaned.get("logo_url"):
            self.add_error("logo_url", "Provide a logo URL or turn off “Show logo”.")
        return cleaned

    def template_payload(self) -> dict:
        """Cleaned values in the shape accepted by the template services."""

        payload = {name: self.cleaned_data[name] for name in EDITABLE_FIELDS}
        payload["is_default"] = bool(self.cleaned_data.get("make_default"))
        return payload
