from django.apps import AppConfig


class InterestcalculationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "interestcalculations"
