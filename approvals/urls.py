from django.urls import path

from approvals.views import (
    PendingTransactionListView,
    ApproveTransactionView,
    RejectTransactionView,
    BulkApproveView,
    BulkRejectView,
)

app_name = "approvals"

urlpatterns = [
    path("pending/", PendingTransactionListView.as_view(), name="pending"),
    path("approve/", ApproveTransactionView.as_view(), name="approve"),
    path("reject/", RejectTransactionView.as_view(), name="reject"),
    path("bulk-approve/", BulkApproveView.as_view(), name="bulk-approve"),
    path("bulk-reject/", BulkRejectView.as_view(), name="bulk-reject"),
]
