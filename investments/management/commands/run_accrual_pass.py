from django.core.management.base import BaseCommand, CommandError

from investments.services.lifecycle import accrue_all
from users.models import User


class Command(BaseCommand):
    help = "Advance all active investments and settle the matured ones (run via cron)."

    def add_arguments(self, parser):
        parser.add_argument("--user", help="Only process investments owned by this username.")

    def handle(self, *args, **options):
        owner_id = None
        if options.get("user"):
            try:
                owner_id = User.objects.get(username=options["user"]).pk
            except User.DoesNotExist:
                raise CommandError(f"User '{options['user']}' does not exist.")

        report = accrue_all(trigger="command", owner_id=owner_id)
        if report is None:
            self.stdout.write(self.style.WARNING("Another accrual pass is running; nothing done."))
            return

        self.stdout.write(self.style.SUCCESS(f"Total credited: ${report.total_credited:,.2f}"))
        self.stdout.write(
            f"processed={report.investments_processed} "
            f"settled={report.investments_settled} failures={report.failures}"
        )
