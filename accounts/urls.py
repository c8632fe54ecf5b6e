from django.urls import path

from accounts.views import (
    TokenView,
    UserListCreateView,
    UserDetailView,
    CurrentUserView,
)

app_name = "accounts"

urlpatterns = [
    path("token/", TokenView.as_view(), name="token"),
    path("me/", CurrentUserView.as_view(), name="me"),
    # System admin activities
    path("users/", UserListCreateView.as_view(), name="users"),
    path("users/<str:reference>/", UserDetailView.as_view(), name="user-detail"),
]
