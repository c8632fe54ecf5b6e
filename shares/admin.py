from django.contrib import admin

from shares.models import Share


class ShareAdmin(admin.ModelAdmin):
    list_display = (
        "reference",
        "member",
        "share_type",
        "count",
        "total_value_allocated",
        "allocation_date",
        "status",
    )
    search_fields = ("reference", "member__member_no", "member__full_name")
    list_filter = ("share_type", "status", "allocation_date")
    readonly_fields = ("status", "reviewed_by", "reviewed_at")
    ordering = ("-allocation_date",)


admin.site.register(Share, ShareAdmin)
