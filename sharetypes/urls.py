from django.urls import path

from sharetypes.views import ShareTypeListCreateView, ShareTypeDetailView

app_name = "sharetypes"

urlpatterns = [
    path("", ShareTypeListCreateView.as_view(), name="list-create"),
    path("<str:reference>/", ShareTypeDetailView.as_view(), name="detail"),
]
