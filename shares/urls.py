from django.urls import path

from shares.views import ShareListCreateView, ShareDetailView

app_name = "shares"

urlpatterns = [
    path("", ShareListCreateView.as_view(), name="list-create"),
    path("<str:reference>/", ShareDetailView.as_view(), name="detail"),
]
