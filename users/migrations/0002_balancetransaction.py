import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("investments", "0001_initial"),
        ("users", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="BalanceTransaction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("transaction_type", models.CharField(choices=[("deposit", "Deposit"), ("withdrawal", "Withdrawal"), ("investment", "Investment"), ("payout", "Investment Payout"), ("referral", "Referral Commission"), ("adjustment", "Adjustment")], max_length=20)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=20)),
                ("balance_after", models.DecimalField(decimal_places=2, max_digits=20)),
                ("description", models.TextField(default="N/A")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("investment", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="balance_transactions", to="investments.investment")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="balance_transactions", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "constraints": [
                    models.UniqueConstraint(condition=models.Q(("transaction_type", "payout")), fields=("investment", "transaction_type"), name="unique_payout_per_investment"),
                ],
            },
        ),
    ]
