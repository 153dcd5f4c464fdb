from django.urls import path
from . import views

app_name = "wallet"

urlpatterns = [
    path("transactions/", views.WalletTransactionListCreateView.as_view(), name="transaction-list"),
    path("transactions/<int:pk>/review/", views.ReviewTransactionView.as_view(), name="transaction-review"),
]
