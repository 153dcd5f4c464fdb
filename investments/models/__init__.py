from .investment import Investment
from .accrual_report import AccrualPassReport

__all__ = ["Investment", "AccrualPassReport"]
