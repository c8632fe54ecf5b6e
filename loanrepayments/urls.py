from django.urls import path

from loanrepayments.views import (
    LoanRepaymentListCreateView,
    LoanRepaymentDetailView,
    BatchLoanRepaymentView,
    RepaymentsByMemberView,
)

app_name = "loanrepayments"

urlpatterns = [
    path("", LoanRepaymentListCreateView.as_view(), name="list-create"),
    path("batch/", BatchLoanRepaymentView.as_view(), name="batch"),
    path("by-member/", RepaymentsByMemberView.as_view(), name="by-member"),
    path("<str:reference>/", LoanRepaymentDetailView.as_view(), name="detail"),
]
