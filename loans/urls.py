from django.urls import path

from loans.views import (
    LoanListCreateView,
    LoanDetailView,
    LoanApproveView,
    LoanRejectView,
    OverdueLoanListView,
)

app_name = "loans"

urlpatterns = [
    path("", LoanListCreateView.as_view(), name="list-create"),
    path("overdue/", OverdueLoanListView.as_view(), name="overdue"),
    path("<str:reference>/", LoanDetailView.as_view(), name="detail"),
    path("<str:reference>/approve/", LoanApproveView.as_view(), name="approve"),
    path("<str:reference>/reject/", LoanRejectView.as_view(), name="reject"),
]
