from django.contrib import admin

from schools.models import School


class SchoolAdmin(admin.ModelAdmin):
    list_display = ("name", "address", "contact_person", "created_at")
    search_fields = ("name", "contact_person")
    ordering = ("name",)


admin.site.register(School, SchoolAdmin)
