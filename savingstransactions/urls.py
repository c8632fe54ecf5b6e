from django.urls import path

from savingstransactions.views import (
    SavingListCreateView,
    SavingDetailView,
    GroupCollectionView,
)

app_name = "savingstransactions"

urlpatterns = [
    path("", SavingListCreateView.as_view(), name="list-create"),
    path("group-collections/", GroupCollectionView.as_view(), name="group-collections"),
    path("<str:reference>/", SavingDetailView.as_view(), name="detail"),
]
