from rest_framework import generics, mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from .exceptions import UserNotFound
from .models import Notification, User
from .permissions import IsAdminRole
from .serializers import (
    AdjustBalanceSerializer,
    BalanceTransactionSerializer,
    NotificationSerializer,
    RegisterSerializer,
    UserSerializer,
)
from .services.ledger import adjust_balance
from .services.notify import notify_success


class RegisterView(generics.CreateAPIView):
    """
    POST /auth/register/
    { "username", "email", "password", "referral_code"? }
    """
    serializer_class = RegisterSerializer
    permission_classes = [AllowAny]
    authentication_classes = []


class MeView(generics.RetrieveAPIView):
    serializer_class = UserSerializer

    def get_object(self):
        return self.request.user


class MyBalanceTransactionsView(generics.ListAPIView):
    serializer_class = BalanceTransactionSerializer

    def get_queryset(self):
        return self.request.user.balance_transactions.all()


class UserViewSet(mixins.ListModelMixin,
                  mixins.RetrieveModelMixin,
                  mixins.UpdateModelMixin,
                  viewsets.GenericViewSet):
    """
    Admin user management: list users, change role, adjust balances.
    """
    queryset = User.objects.select_related("referred_by").order_by("id")
    serializer_class = UserSerializer
    permission_classes = [IsAdminRole]
    filterset_fields = ["role"]

    @action(detail=True, methods=["post"], url_path="adjust-balance")
    def adjust_user_balance(self, request, pk=None):
        """
        POST /users/<id>/adjust-balance/
        { "amount": "-25.00", "description": "..." }
        """
        user = self.get_object()
        serializer = AdjustBalanceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        amount = serializer.validated_data["amount"]
        description = serializer.validated_data.get("description") or f"Adjusted by {request.user.username}"
        try:
            balance = adjust_balance(user.pk, amount, "adjustment", description=description)
        except UserNotFound as e:
            return Response({"detail": e.message}, status=status.HTTP_404_NOT_FOUND)

        notify_success(user.pk, f"Your balance was adjusted by ${amount:,.2f}.")
        return Response({"id": user.pk, "balance": str(balance)})

    @action(detail=True, methods=["get"])
    def transactions(self, request, pk=None):
        user = self.get_object()
        page = self.paginate_queryset(user.balance_transactions.all())
        return self.get_paginated_response(BalanceTransactionSerializer(page, many=True).data)


class NotificationViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = NotificationSerializer
    filterset_fields = ["read", "level"]

    def get_queryset(self):
        return Notification.objects.filter(user=self.request.user)

    @action(detail=True, methods=["post"])
    def read(self, request, pk=None):
        notification = self.get_object()
        notification.read = True
        notification.save(update_fields=["read"])
        return Response(NotificationSerializer(notification).data)
