from django.contrib import admin

from accounts.models import User


class UserAdmin(admin.ModelAdmin):
    list_display = (
        "email",
        "first_name",
        "last_name",
        "member",
        "is_system_admin",
        "is_active",
        "created_at",
    )
    list_filter = ("is_system_admin", "is_active", "created_at")
    search_fields = ("email", "first_name", "last_name", "member__member_no")
    readonly_fields = ("created_at", "updated_at", "reference")
    ordering = ("-created_at",)


admin.site.register(User, UserAdmin)
