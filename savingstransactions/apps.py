from django.apps import AppConfig


class SavingstransactionsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "savingstransactions"
