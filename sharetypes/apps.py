from django.apps import AppConfig


class SharetypesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "sharetypes"
