from django.urls import path

from interestcalculations.views import (
    SavingsInterestCalculateView,
    SavingsInterestPostView,
    LoanInterestCalculateView,
    LoanInterestPostView,
)

app_name = "interestcalculations"

urlpatterns = [
    path(
        "savings/calculate/",
        SavingsInterestCalculateView.as_view(),
        name="savings-calculate",
    ),
    path("savings/post/", SavingsInterestPostView.as_view(), name="savings-post"),
    path("loans/calculate/", LoanInterestCalculateView.as_view(), name="loans-calculate"),
    path("loans/post/", LoanInterestPostView.as_view(), name="loans-post"),
]
