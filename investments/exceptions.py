class InvestmentError(Exception):
    """
    Base class for investment lifecycle failures.
    `message` is always safe to show to the user.
    """

    message = "The investment could not be processed."

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class Unauthenticated(InvestmentError):
    message = "You must be logged in."


class InsufficientFunds(InvestmentError):
    message = "Insufficient balance."


class InvalidInvestmentTerms(InvestmentError):
    message = "Invalid investment terms."


class NotFound(InvestmentError):
    message = "Investment not found."


class TransientStoreFailure(InvestmentError):
    message = "The service is temporarily unavailable. Please try again."


class DebitWithoutInvestment(TransientStoreFailure):
    """
    The principal was debited but the investment row could not be stored.
    Carries what is needed to restore the balance by hand.
    """

    message = (
        "Your balance was debited but the investment could not be saved. "
        "Support has been notified and will restore the amount."
    )

    def __init__(self, user_id, amount, message=None):
        self.user_id = user_id
        self.amount = amount
        super().__init__(message)


class InconsistentState(InvestmentError):
    """Raised when a settlement credit would be issued twice."""

    message = "The investment is in an inconsistent state."
