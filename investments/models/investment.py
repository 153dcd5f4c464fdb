from django.conf import settings
from django.db import models

from investments.services.accrual import ACTIVE, SETTLED, InvestmentSnapshot

STATE_CHOICES = [
    (ACTIVE, "Active"),
    (SETTLED, "Settled"),
]


class InvestmentQuerySet(models.QuerySet):
    def owned_by(self, owner_id):
        return self.filter(owner_id=owner_id)

    def active(self):
        return self.filter(state=ACTIVE)

    def settled(self):
        return self.filter(state=SETTLED)


class Investment(models.Model):
    # Investments are kept as history, so owners cannot be deleted from under them.
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="investments",
    )
    plan_id = models.CharField(max_length=30, blank=True, default="")

    principal = models.DecimalField(max_digits=20, decimal_places=2)
    guaranteed_payout = models.DecimalField(max_digits=20, decimal_places=2)
    duration_days = models.PositiveIntegerField()
    start_time = models.DateTimeField()
    maturity_time = models.DateTimeField()
    daily_accrual = models.DecimalField(max_digits=24, decimal_places=8)

    current_value = models.DecimalField(max_digits=20, decimal_places=2)
    state = models.CharField(max_length=10, choices=STATE_CHOICES, default=ACTIVE)
    settled_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = InvestmentQuerySet.as_manager()

    class Meta:
        ordering = ["-start_time", "-id"]
        indexes = [
            models.Index(fields=["owner", "state"], name="investment_owner_state_idx"),
            models.Index(fields=["state", "maturity_time"], name="investment_state_maturity_idx"),
        ]

    @property
    def is_settled(self):
        return self.state == SETTLED

    def to_snapshot(self):
        return InvestmentSnapshot(
            id=self.pk,
            owner_id=self.owner_id,
            principal=float(self.principal),
            guaranteed_payout=float(self.guaranteed_payout),
            duration_days=self.duration_days,
            start_time=self.start_time,
            maturity_time=self.maturity_time,
            daily_accrual=float(self.daily_accrual),
            current_value=float(self.current_value),
            state=self.state,
            plan_id=self.plan_id,
        )

    def __str__(self):
        return f"Investment #{self.pk} ({self.owner_id}) - ${self.principal:,.2f} - {self.state}"
