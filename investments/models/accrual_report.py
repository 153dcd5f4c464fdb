from django.db import models

TRIGGER_CHOICES = [
    ("startup", "Startup"),
    ("schedule", "Schedule"),
    ("command", "Management command"),
    ("admin", "Admin"),
]


class AccrualPassReport(models.Model):
    """
    Summary of one accrual pass over the stored investments.
    """
    trigger = models.CharField(max_length=20, choices=TRIGGER_CHOICES)
    started_at = models.DateTimeField()
    finished_at = models.DateTimeField()
    investments_processed = models.PositiveIntegerField()
    investments_settled = models.PositiveIntegerField()
    total_credited = models.DecimalField(max_digits=20, decimal_places=2)
    failures = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-started_at"]
        verbose_name = "Accrual Pass Report"
        verbose_name_plural = "Accrual Pass Reports"

    def __str__(self):
        return f"{self.started_at:%Y-%m-%d %H:%M} - {self.trigger} - ${self.total_credited:,.2f}"
