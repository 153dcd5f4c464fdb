import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="AccrualPassReport",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("trigger", models.CharField(choices=[("startup", "Startup"), ("schedule", "Schedule"), ("command", "Management command"), ("admin", "Admin")], max_length=20)),
                ("started_at", models.DateTimeField()),
                ("finished_at", models.DateTimeField()),
                ("investments_processed", models.PositiveIntegerField()),
                ("investments_settled", models.PositiveIntegerField()),
                ("total_credited", models.DecimalField(decimal_places=2, max_digits=20)),
                ("failures", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name": "Accrual Pass Report",
                "verbose_name_plural": "Accrual Pass Reports",
                "ordering": ["-started_at"],
            },
        ),
        migrations.CreateModel(
            name="Investment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("plan_id", models.CharField(blank=True, default="", max_length=30)),
                ("principal", models.DecimalField(decimal_places=2, max_digits=20)),
                ("guaranteed_payout", models.DecimalField(decimal_places=2, max_digits=20)),
                ("duration_days", models.PositiveIntegerField()),
                ("start_time", models.DateTimeField()),
                ("maturity_time", models.DateTimeField()),
                ("daily_accrual", models.DecimalField(decimal_places=8, max_digits=24)),
                ("current_value", models.DecimalField(decimal_places=2, max_digits=20)),
                ("state", models.CharField(choices=[("active", "Active"), ("settled", "Settled")], default="active", max_length=10)),
                ("settled_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("owner", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="investments", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-start_time", "-id"],
                "indexes": [
                    models.Index(fields=["owner", "state"], name="investment_owner_state_idx"),
                    models.Index(fields=["state", "maturity_time"], name="investment_state_maturity_idx"),
                ],
            },
        ),
    ]
