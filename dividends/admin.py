from django.contrib import admin

from dividends.models import Dividend


class DividendAdmin(admin.ModelAdmin):
    list_display = ("reference", "member", "amount", "distribution_date", "status")
    search_fields = ("reference", "member__member_no", "member__full_name")
    list_filter = ("status", "distribution_date")
    readonly_fields = ("status", "reviewed_by", "reviewed_at")
    ordering = ("-distribution_date",)


admin.site.register(Dividend, DividendAdmin)
