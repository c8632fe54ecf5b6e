from django.contrib import admin

from loans.models import Loan, LoanGuarantor, Collateral


class LoanGuarantorInline(admin.TabularInline):
    model = LoanGuarantor
    extra = 0


class CollateralInline(admin.TabularInline):
    model = Collateral
    extra = 0


class LoanAdmin(admin.ModelAdmin):
    list_display = (
        "account_number",
        "member",
        "loan_type",
        "principal_amount",
        "remaining_balance",
        "status",
        "next_due_date",
    )
    search_fields = ("account_number", "member__member_no", "member__full_name")
    list_filter = ("status", "loan_type", "repayment_frequency", "disbursement_date")
    readonly_fields = ("remaining_balance", "approved_by", "approved_at")
    ordering = ("-disbursement_date",)
    inlines = [LoanGuarantorInline, CollateralInline]


admin.site.register(Loan, LoanAdmin)
