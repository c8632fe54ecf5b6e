from django.urls import path

from schools.views import SchoolListCreateView, SchoolDetailView

app_name = "schools"

urlpatterns = [
    path("", SchoolListCreateView.as_view(), name="list-create"),
    path("<str:reference>/", SchoolDetailView.as_view(), name="detail"),
]
