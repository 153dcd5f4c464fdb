from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from investments.models import Investment
from users.models import User
from wallet.models import WalletTransaction
from tests.factories import balance_of

pytestmark = pytest.mark.django_db


class TestAuth:

    def test_register_with_referral_code(self, api_client, investor):
        response = api_client.post("/api/auth/register/", {
            "username": "frank",
            "email": "frank@example.com",
            "password": "s3cret-pass!",
            "referral_code": investor.referral_code,
        }, format="json")

        assert response.status_code == 201
        frank = User.objects.get(username="frank")
        assert frank.role == "user"
        assert frank.referred_by == investor

    def test_register_rejects_unknown_referral_code(self, api_client, db):
        response = api_client.post("/api/auth/register/", {
            "username": "frank",
            "password": "s3cret-pass!",
            "referral_code": "doesnotexist",
        }, format="json")
        assert response.status_code == 400
        assert "referral_code" in response.data

    def test_obtain_token(self, api_client, investor):
        response = api_client.post("/api/auth/token/", {
            "username": "alice",
            "password": "s3cret-pass!",
        }, format="json")
        assert response.status_code == 200
        assert "access" in response.data

    def test_me(self, investor_client):
        response = investor_client.get("/api/me/")
        assert response.status_code == 200
        assert response.data["username"] == "alice"
        assert response.data["balance"] == "1000.00"

    def test_anonymous_is_rejected(self, api_client):
        assert api_client.get("/api/investments/").status_code == 401


class TestInvestmentsApi:

    def test_create_and_list(self, investor_client, investor):
        response = investor_client.post("/api/investments/", {"amount": "100.00", "duration_days": 10}, format="json")

        assert response.status_code == 201
        assert response.data["guaranteed_payout"] == "200.00"
        assert response.data["state"] == "active"
        assert balance_of(investor) == Decimal("900.00")

        listing = investor_client.get("/api/investments/")
        assert listing.status_code == 200
        assert len(listing.data) == 1
        assert listing.data[0]["id"] == response.data["id"]

    def test_create_with_plan(self, investor_client):
        response = investor_client.post("/api/investments/", {"amount": "60", "plan_id": "starter"}, format="json")
        assert response.status_code == 201
        assert response.data["duration_days"] == 7

    def test_create_requires_plan_or_duration(self, investor_client):
        response = investor_client.post("/api/investments/", {"amount": "60"}, format="json")
        assert response.status_code == 400

    def test_insufficient_funds(self, investor_client, investor):
        response = investor_client.post("/api/investments/", {"amount": "5000", "duration_days": 10}, format="json")
        assert response.status_code == 400
        assert response.data["detail"] == "Insufficient balance."
        assert balance_of(investor) == Decimal("1000.00")

    @pytest.mark.parametrize("payload", [
        {"amount": "100", "duration_days": 5000000},
        {"amount": "5000000000", "duration_days": 10},
    ])
    def test_out_of_range_terms_are_rejected(self, investor_client, investor, payload):
        response = investor_client.post("/api/investments/", payload, format="json")

        assert response.status_code == 400
        assert balance_of(investor) == Decimal("1000.00")
        assert not Investment.objects.exists()

    def test_listing_settles_matured_investments(self, investor_client, investor):
        investor_client.post("/api/investments/", {"amount": "100", "duration_days": 1}, format="json")
        Investment.objects.update(
            start_time=timezone.now() - timedelta(days=2),
            maturity_time=timezone.now() - timedelta(days=1),
        )

        listing = investor_client.get("/api/investments/")

        assert listing.data[0]["state"] == "settled"
        assert listing.data[0]["progress"] == 100.0
        assert balance_of(investor) == Decimal("1100.00")

    def test_detail_is_owner_only(self, investor_client, make_user, staff_client):
        other = make_user("grace", balance="500.00")
        investment = Investment.objects.create(
            owner=other, principal=100, guaranteed_payout=200, duration_days=10,
            start_time=timezone.now(), maturity_time=timezone.now() + timedelta(days=10),
            daily_accrual=10, current_value=100,
        )
        assert investor_client.get(f"/api/investments/{investment.pk}/").status_code == 404
        assert staff_client.get(f"/api/investments/{investment.pk}/").status_code == 200

    def test_plans(self, investor_client):
        response = investor_client.get("/api/investments/plans/")
        assert response.status_code == 200
        assert {plan["id"] for plan in response.data} == {"starter", "growth", "premium"}


class TestAdminApi:

    def test_accrual_pass_is_admin_only(self, investor_client, staff_client):
        assert investor_client.post("/api/investments/accrual-pass/").status_code == 403

        response = staff_client.post("/api/investments/accrual-pass/")
        assert response.status_code == 200
        assert response.data["trigger"] == "admin"

    def test_adjust_balance(self, staff_client, investor):
        response = staff_client.post(
            f"/api/users/{investor.pk}/adjust-balance/",
            {"amount": "-25.00", "description": "Fee"},
            format="json",
        )
        assert response.status_code == 200
        assert response.data["balance"] == "975.00"

    def test_dashboard(self, staff_client, investor):
        response = staff_client.get("/api/investments/dashboard/")
        assert response.status_code == 200
        assert response.data["users"] == 2


class TestWalletApi:

    def test_deposit_flow(self, investor_client, staff_client, investor):
        created = investor_client.post("/api/wallet/transactions/", {
            "type": "deposit",
            "amount": "50.00",
            "currency": "TRC20",
            "wallet_address": "TXq3f1v9yQk2mWZ8a1Lr5JcB7sPpD4eHnV",
        }, format="json")
        assert created.status_code == 201

        review_url = f"/api/wallet/transactions/{created.data['id']}/review/"
        assert investor_client.post(review_url, {"status": "approved"}, format="json").status_code == 403

        reviewed = staff_client.post(review_url, {"status": "approved"}, format="json")
        assert reviewed.status_code == 200
        assert reviewed.data["status"] == "approved"
        assert balance_of(investor) == Decimal("1050.00")

        again = staff_client.post(review_url, {"status": "approved"}, format="json")
        assert again.status_code == 409

    def test_users_see_only_their_transactions(self, investor_client, make_user):
        other = make_user("heidi")
        WalletTransaction.objects.create(user=other, type="deposit", amount=10, currency="TRC20", wallet_address="x")

        response = investor_client.get("/api/wallet/transactions/")
        assert response.status_code == 200
        assert response.data["count"] == 0
