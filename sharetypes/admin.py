from django.contrib import admin

from sharetypes.models import ShareType


class ShareTypeAdmin(admin.ModelAdmin):
    list_display = ("name", "value_per_share", "expected_monthly_contribution", "created_at")
    search_fields = ("name", "description")
    ordering = ("name",)


admin.site.register(ShareType, ShareTypeAdmin)
