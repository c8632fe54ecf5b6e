from django.apps import AppConfig


class ServicechargesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "servicecharges"
