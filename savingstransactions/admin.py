from django.contrib import admin

from savingstransactions.models import Saving


class SavingAdmin(admin.ModelAdmin):
    list_display = (
        "reference",
        "member",
        "savings_account",
        "transaction_type",
        "amount",
        "date",
        "status",
    )
    search_fields = ("reference", "member__member_no", "savings_account__account_number")
    list_filter = ("transaction_type", "status", "deposit_mode", "date")
    readonly_fields = ("status", "reviewed_by", "reviewed_at", "interest_period")
    ordering = ("-date",)


admin.site.register(Saving, SavingAdmin)
