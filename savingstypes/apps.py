from django.apps import AppConfig


class SavingstypesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "savingstypes"
