from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/v1/auth/", include("accounts.urls")),
    path("api/v1/schools/", include("schools.urls")),
    path("api/v1/members/", include("members.urls")),
    path("api/v1/savingstypes/", include("savingstypes.urls")),
    path("api/v1/savings/", include("savings.urls")),
    path("api/v1/savingstransactions/", include("savingstransactions.urls")),
    path("api/v1/sharetypes/", include("sharetypes.urls")),
    path("api/v1/shares/", include("shares.urls")),
    path("api/v1/dividends/", include("dividends.urls")),
    path("api/v1/servicecharges/", include("servicecharges.urls")),
    path("api/v1/loantypes/", include("loantypes.urls")),
    path("api/v1/loans/", include("loans.urls")),
    path("api/v1/loanrepayments/", include("loanrepayments.urls")),
    path("api/v1/interest/", include("interestcalculations.urls")),
    path("api/v1/approvals/", include("approvals.urls")),
    path("api/v1/transactions/", include("transactions.urls")),
]
