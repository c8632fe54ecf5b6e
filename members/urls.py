from django.urls import path

from members.views import (
    MemberListCreateView,
    MemberDetailView,
    MemberProfileView,
    AccountClosureView,
    ClosedMemberListView,
)

app_name = "members"

urlpatterns = [
    path("", MemberListCreateView.as_view(), name="list-create"),
    path("closed/", ClosedMemberListView.as_view(), name="closed"),
    path("<str:member_no>/", MemberDetailView.as_view(), name="detail"),
    path("<str:member_no>/profile/", MemberProfileView.as_view(), name="profile"),
    path("<str:member_no>/closure/", AccountClosureView.as_view(), name="closure"),
]
