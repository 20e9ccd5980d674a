from __future__ import annotations

from copy import deepcopy

from django import forms, template
from django.forms import BoundField

register = template.Library()


def _normalize_classes(existing: str, extra: str) -> str:
    classes = list(dict.fromkeys(f"{existing} {extra}".split()))
    return " ".join(classes)


@register.filter(name="add_css")
def add_css(field, css_classes: str):
    """Render the field widget with the provided CSS classes appended."""

    if not isinstance(field, BoundField):
        return field

    attrs = deepcopy(getattr(field.field.widget, "attrs", {}))
    attrs["class"] = _normalize_classes(attrs.get("class", ""), css_classes)
    if field.errors:
        attrs["class"] = _normalize_classes(attrs["class"], "is-invalid")
    return field.as_widget(attrs=attrs)


@register.filter(name="is_checkbox")
def is_checkbox(field) -> bool:
    return isinstance(field, BoundField) and isinstance(field.field.widget, forms.CheckboxInput)
