from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from users.permissions import IsAdminRole

from .exceptions import InsufficientFunds, InvalidTransition, NotAllowed, TransactionNotFound, WalletError
from .models import WalletTransaction
from .serializers import ReviewSerializer, WalletRequestSerializer, WalletTransactionSerializer
from .services import request_deposit, request_withdrawal, review_transaction

ERROR_STATUS = {
    NotAllowed: status.HTTP_403_FORBIDDEN,
    TransactionNotFound: status.HTTP_404_NOT_FOUND,
    InvalidTransition: status.HTTP_409_CONFLICT,
    InsufficientFunds: status.HTTP_400_BAD_REQUEST,
}


def error_response(exc):
    code = next(
        (code for exc_class, code in ERROR_STATUS.items() if isinstance(exc, exc_class)),
        status.HTTP_400_BAD_REQUEST,
    )
    return Response({"detail": exc.message}, status=code)


class WalletTransactionListCreateView(generics.ListAPIView):
    """
    GET: own transactions (all transactions for admins, filterable by type/status/user).
    POST: { "type": "deposit"|"withdrawal", "amount", "currency", "wallet_address" }
    """
    serializer_class = WalletTransactionSerializer
    filterset_fields = ["type", "status", "user"]

    def get_queryset(self):
        qs = WalletTransaction.objects.select_related("reviewed_by")
        if self.request.user.is_admin():
            return qs
        return qs.filter(user=self.request.user)

    def post(self, request):
        serializer = WalletRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        create = request_deposit if data["type"] == "deposit" else request_withdrawal
        try:
            tx = create(request.user, data["amount"], data["currency"], data["wallet_address"])
        except WalletError as e:
            return error_response(e)
        return Response(WalletTransactionSerializer(tx).data, status=status.HTTP_201_CREATED)


class ReviewTransactionView(APIView):
    """
    POST /wallet/transactions/<id>/review/
    { "status": "approved"|"rejected" }
    """
    permission_classes = [IsAdminRole]

    def post(self, request, pk):
        serializer = ReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            tx = review_transaction(pk, request.user, approve=serializer.validated_data["status"] == "approved")
        except WalletError as e:
            return error_response(e)
        return Response(WalletTransactionSerializer(tx).data)
