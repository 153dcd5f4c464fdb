from django.apps import AppConfig
from django.conf import settings

class InvestmentsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'investments'

    def ready(self):
        # Start the accrual scheduler when Django starts
        if settings.ACCRUAL_SCHEDULER_ENABLED:
            from .tasks import start_accrual_scheduler
            start_accrual_scheduler()
