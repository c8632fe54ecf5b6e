from django.urls import path

from servicecharges.views import (
    ServiceChargeTypeListCreateView,
    ServiceChargeTypeDetailView,
    AppliedServiceChargeListCreateView,
    AppliedServiceChargeDetailView,
    ServiceChargePaymentView,
    ServiceChargeSummaryView,
)

app_name = "servicecharges"

urlpatterns = [
    path("types/", ServiceChargeTypeListCreateView.as_view(), name="types"),
    path(
        "types/<str:reference>/",
        ServiceChargeTypeDetailView.as_view(),
        name="type-detail",
    ),
    path("", AppliedServiceChargeListCreateView.as_view(), name="list-create"),
    path("payments/", ServiceChargePaymentView.as_view(), name="payments"),
    path("summaries/", ServiceChargeSummaryView.as_view(), name="summaries"),
    path("<str:reference>/", AppliedServiceChargeDetailView.as_view(), name="detail"),
]
