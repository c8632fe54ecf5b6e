from django.contrib import admin

from savingstypes.models import SavingAccountType


class SavingAccountTypeAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "interest_rate",
        "contribution_type",
        "contribution_value",
        "created_at",
    )
    search_fields = ("name", "description")
    list_filter = ("contribution_type", "created_at")
    ordering = ("name",)


admin.site.register(SavingAccountType, SavingAccountTypeAdmin)
