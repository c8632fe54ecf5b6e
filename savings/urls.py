from django.urls import path

from savings.views import (
    MemberSavingAccountListCreateView,
    MemberSavingAccountDetailView,
    SavingsAccountSummaryView,
)

app_name = "savings"

urlpatterns = [
    path("", MemberSavingAccountListCreateView.as_view(), name="list-create"),
    path("summaries/", SavingsAccountSummaryView.as_view(), name="summaries"),
    path("<str:reference>/", MemberSavingAccountDetailView.as_view(), name="detail"),
]
