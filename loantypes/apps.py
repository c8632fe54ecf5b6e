from django.apps import AppConfig


class LoantypesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "loantypes"
