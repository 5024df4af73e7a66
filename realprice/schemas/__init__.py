from .transaction import TransactionRecord

__all__ = ["TransactionRecord"]
