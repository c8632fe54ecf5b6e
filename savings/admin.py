from django.contrib import admin

from savings.models import MemberSavingAccount


class MemberSavingAccountAdmin(admin.ModelAdmin):
    list_display = (
        "account_number",
        "member",
        "account_type",
        "initial_balance",
        "balance",
        "is_active",
    )
    search_fields = ("account_number", "member__member_no", "member__full_name")
    list_filter = ("account_type", "is_active", "created_at")
    readonly_fields = ("balance",)
    ordering = ("-created_at",)


admin.site.register(MemberSavingAccount, MemberSavingAccountAdmin)
