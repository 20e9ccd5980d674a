from django.contrib import admin, messages

from .models import Profile
from .services import disable_two_factor_for_user


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "email", "full_name", "two_factor_enabled")
    list_filter = ("two_factor_enabled",)
    search_fields = ("user__username", "user__email", "full_name")
    readonly_fields = ("two_factor_enabled", "two_factor_secret")
    actions = ["disable_two_factor"]

    @admin.action(description="Disable two-factor authentication")
    def disable_two_factor(self, request, queryset):
        count = 0
        for profile in queryset.select_related("user"):
            disable_two_factor_for_user(profile.user, actor=request.user, request=request)
            count += 1
        self.message_user(
            request,
            f"Two-factor authentication disabled for {count} account(s).",
            messages.SUCCESS,
        )
