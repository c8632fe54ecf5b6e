from django.apps import AppConfig


class DividendsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "dividends"
