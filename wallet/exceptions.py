class WalletError(Exception):
    message = "The request could not be processed."

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InsufficientFunds(WalletError):
    message = "Insufficient balance."


class InvalidTransition(WalletError):
    message = "Only pending transactions can be reviewed."


class NotAllowed(WalletError):
    message = "Only administrators can review transactions."


class TransactionNotFound(WalletError):
    message = "Transaction not found."
