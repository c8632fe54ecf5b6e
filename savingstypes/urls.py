from django.urls import path

from savingstypes.views import (
    SavingAccountTypeListCreateView,
    SavingAccountTypeDetailView,
)

app_name = "savingstypes"

urlpatterns = [
    path("", SavingAccountTypeListCreateView.as_view(), name="list-create"),
    path("<str:reference>/", SavingAccountTypeDetailView.as_view(), name="detail"),
]
