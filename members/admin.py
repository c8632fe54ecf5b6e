from django.contrib import admin

from members.models import Member, Address, EmergencyContact, MemberShareCommitment


class AddressInline(admin.StackedInline):
    model = Address
    extra = 0


class EmergencyContactInline(admin.StackedInline):
    model = EmergencyContact
    extra = 0


class MemberShareCommitmentInline(admin.TabularInline):
    model = MemberShareCommitment
    extra = 0


class MemberAdmin(admin.ModelAdmin):
    list_display = (
        "member_no",
        "full_name",
        "school",
        "status",
        "savings_balance",
        "shares_count",
        "join_date",
    )
    search_fields = ("member_no", "full_name", "email", "phone_number")
    list_filter = ("status", "school", "sex", "join_date")
    readonly_fields = ("savings_balance", "shares_count", "closure_date")
    ordering = ("full_name",)
    inlines = [AddressInline, EmergencyContactInline, MemberShareCommitmentInline]


admin.site.register(Member, MemberAdmin)
