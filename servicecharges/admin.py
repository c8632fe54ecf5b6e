from django.contrib import admin

from servicecharges.models import ServiceChargeType, AppliedServiceCharge


class ServiceChargeTypeAdmin(admin.ModelAdmin):
    list_display = ("name", "amount", "frequency", "created_at")
    search_fields = ("name",)
    list_filter = ("frequency",)
    ordering = ("name",)


class AppliedServiceChargeAdmin(admin.ModelAdmin):
    list_display = (
        "reference",
        "member",
        "service_charge_type_name",
        "amount_charged",
        "date_applied",
        "status",
    )
    search_fields = ("reference", "member__member_no", "member__full_name")
    list_filter = ("status", "service_charge_type", "date_applied")
    readonly_fields = ("status", "reviewed_by", "reviewed_at", "paid_at", "interest_period")
    ordering = ("-date_applied",)


admin.site.register(ServiceChargeType, ServiceChargeTypeAdmin)
admin.site.register(AppliedServiceCharge, AppliedServiceChargeAdmin)
