from django.urls import path
from . import views

app_name = "investments"

urlpatterns = [
    # Investments
    path("", views.InvestmentListCreateView.as_view(), name="investment-list"),
    path("<int:pk>/", views.InvestmentDetailView.as_view(), name="investment-detail"),
    path("plans/", views.InvestmentPlansView.as_view(), name="plan-list"),

    # Admin utilities
    path("accrual-pass/", views.RunAccrualPassView.as_view(), name="accrual-pass"),
    path("reports/", views.AccrualPassReportListView.as_view(), name="report-list"),
    path("users/<int:user_id>/", views.UserInvestmentsView.as_view(), name="user-investments"),
    path("dashboard/", views.DashboardView.as_view(), name="dashboard"),
]
