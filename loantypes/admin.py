from django.contrib import admin

from loantypes.models import LoanType


class LoanTypeAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "interest_rate",
        "npl_interest_rate",
        "repayment_frequency",
        "min_loan_amount",
        "max_loan_amount",
        "allow_concurrent_loans",
    )
    search_fields = ("name",)
    list_filter = ("repayment_frequency", "allow_concurrent_loans", "charges_fees")
    ordering = ("name",)


admin.site.register(LoanType, LoanTypeAdmin)
