from .transaction import NATURAL_KEY, Transaction

__all__ = [
    "NATURAL_KEY",
    "Transaction",
]
