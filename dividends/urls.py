from django.urls import path

from dividends.views import DividendListCreateView, DividendDetailView

app_name = "dividends"

urlpatterns = [
    path("", DividendListCreateView.as_view(), name="list-create"),
    path("<str:reference>/", DividendDetailView.as_view(), name="detail"),
]
