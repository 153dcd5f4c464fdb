from decimal import Decimal

from django.conf import settings
from django.db.models import Sum
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from users.models import BalanceTransaction, User
from users.permissions import IsAdminRole

from .exceptions import (
    InconsistentState,
    InsufficientFunds,
    InvalidInvestmentTerms,
    NotFound,
    TransientStoreFailure,
    Unauthenticated,
)
from .models import AccrualPassReport, Investment
from .serializers import AccrualPassReportSerializer, CreateInvestmentSerializer, InvestmentSerializer
from .services.lifecycle import accrue_all, create_investment, refresh_investments

ERROR_STATUS = {
    Unauthenticated: status.HTTP_401_UNAUTHORIZED,
    InsufficientFunds: status.HTTP_400_BAD_REQUEST,
    InvalidInvestmentTerms: status.HTTP_400_BAD_REQUEST,
    NotFound: status.HTTP_404_NOT_FOUND,
    TransientStoreFailure: status.HTTP_503_SERVICE_UNAVAILABLE,
    InconsistentState: status.HTTP_409_CONFLICT,
}


def error_response(exc):
    for exc_class, code in ERROR_STATUS.items():
        if isinstance(exc, exc_class):
            return Response({"detail": exc.message}, status=code)
    return Response({"detail": exc.message}, status=status.HTTP_400_BAD_REQUEST)


# --- Investments ---
class InvestmentListCreateView(APIView):
    """
    GET: the caller's investments, advanced to now.
    POST: {"amount": ..., "plan_id": ...} or {"amount": ..., "duration_days": ...}
    """
    def get(self, request):
        try:
            snapshots = refresh_investments(request.user)
        except (Unauthenticated, TransientStoreFailure) as exc:
            return error_response(exc)
        return Response(InvestmentSerializer(snapshots, many=True).data)

    def post(self, request):
        serializer = CreateInvestmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            investment = create_investment(
                request.user,
                data["amount"],
                duration_days=data.get("duration_days"),
                plan_id=data.get("plan_id"),
            )
        except (Unauthenticated, InsufficientFunds, InvalidInvestmentTerms, TransientStoreFailure) as exc:
            return error_response(exc)

        return Response(InvestmentSerializer(investment).data, status=status.HTTP_201_CREATED)


class InvestmentDetailView(generics.RetrieveAPIView):
    serializer_class = InvestmentSerializer

    def get_queryset(self):
        qs = Investment.objects.all()
        if self.request.user.is_admin():
            return qs
        return qs.owned_by(self.request.user.pk)


class InvestmentPlansView(APIView):
    def get(self, request):
        plans = [
            {
                "id": plan_id,
                "name": plan["name"],
                "duration_days": plan["duration_days"],
                "min_amount": str(Decimal(str(plan["min_amount"])).quantize(Decimal("0.01"))),
                "payout_multiplier": settings.PAYOUT_MULTIPLIER,
            }
            for plan_id, plan in settings.INVESTMENT_PLANS.items()
        ]
        return Response(plans)


# --- Admin utilities ---
class RunAccrualPassView(APIView):
    """
    POST to advance every active investment now and settle the matured ones.
    """
    permission_classes = [IsAdminRole]

    def post(self, request):
        report = accrue_all(trigger="admin")
        if report is None:
            return Response(
                {"detail": "An accrual pass is already running. Try again shortly."},
                status=status.HTTP_409_CONFLICT,
            )
        return Response(AccrualPassReportSerializer(report).data, status=status.HTTP_200_OK)


class AccrualPassReportListView(generics.ListAPIView):
    permission_classes = [IsAdminRole]
    queryset = AccrualPassReport.objects.all()
    serializer_class = AccrualPassReportSerializer


class UserInvestmentsView(APIView):
    """
    GET /investments/users/{user_id}/ - an admin's view of one user's investments.
    """
    permission_classes = [IsAdminRole]

    def get(self, request, user_id):
        user = get_object_or_404(User, pk=user_id)
        investments = Investment.objects.owned_by(user.pk)
        return Response({
            "user": {"id": user.pk, "username": user.username, "balance": str(user.balance)},
            "investments": InvestmentSerializer(investments, many=True).data,
        })


class DashboardView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        today = timezone.now().date()
        month_start = today.replace(day=1)

        total_balances = User.objects.aggregate(total=Sum("balance"))["total"] or Decimal("0.00")
        committed = Investment.objects.active().aggregate(total=Sum("principal"))["total"] or Decimal("0.00")
        credited_this_month = BalanceTransaction.objects.filter(
            transaction_type="payout",
            created_at__date__gte=month_start,
        ).aggregate(total=Sum("amount"))["total"] or Decimal("0.00")

        return Response({
            "total_balances": str(total_balances),
            "principal_committed": str(committed),
            "credited_this_month": str(credited_this_month),
            "active_investments": Investment.objects.active().count(),
            "settled_investments": Investment.objects.settled().count(),
            "users": User.objects.count(),
        })
