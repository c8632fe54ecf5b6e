from django.contrib import admin

from loanrepayments.models import LoanRepayment


class LoanRepaymentAdmin(admin.ModelAdmin):
    list_display = (
        "reference",
        "loan",
        "member",
        "amount_paid",
        "interest_paid",
        "principal_paid",
        "payment_date",
    )
    search_fields = ("reference", "loan__account_number", "member__member_no")
    list_filter = ("deposit_mode", "payment_date")
    readonly_fields = ("interest_paid", "principal_paid", "balance_after")
    ordering = ("-payment_date",)

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


admin.site.register(LoanRepayment, LoanRepaymentAdmin)
