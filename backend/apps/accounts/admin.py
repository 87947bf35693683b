"""
Admin configuration for accounts app.
"""

from django.contrib import admin

from apps.accounts.models import Member
from apps.core.phone import mask_phone


@admin.register(Member)
class MemberAdmin(admin.ModelAdmin):
    """Admin for registered members."""

    list_display = [
        "id",
        "name",
        "phone_masked",
        "email",
        "occupation",
        "is_profile_complete",
        "joined_date",
    ]
    list_filter = ["is_profile_complete", "marital_status", "ration_card_type", "joined_date"]
    search_fields = ["name", "email", "phone"]
    readonly_fields = ["phone", "joined_date", "created_at", "updated_at"]
    ordering = ["name"]

    def phone_masked(self, obj: Member) -> str:
        """Hide the middle digits of the phone number."""
        return mask_phone(obj.phone)

    phone_masked.short_description = "Phone"  # type: ignore[attr-defined]
