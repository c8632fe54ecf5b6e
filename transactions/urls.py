from django.urls import path

from transactions.views import (
    AccountStatementView,
    AdminDashboardView,
    CollectionForecastView,
)

urlpatterns = [
    path("statement/", AccountStatementView.as_view(), name="account-statement"),
    path(
        "collection-forecast/",
        CollectionForecastView.as_view(),
        name="collection-forecast",
    ),
    path("dashboard/", AdminDashboardView.as_view(), name="admin-dashboard"),
]
