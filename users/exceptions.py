class LedgerError(Exception):
    """Base class for balance ledger failures."""

    message = "The balance could not be updated."

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class UserNotFound(LedgerError):
    message = "User not found."

    def __init__(self, user_id=None, message=None):
        self.user_id = user_id
        super().__init__(message)


class InsufficientBalance(LedgerError):
    message = "Insufficient balance."

    def __init__(self, user_id=None, message=None):
        self.user_id = user_id
        super().__init__(message)
