from .stock_ledger import credit, debit, lock_available_stock, query

__all__ = [
    "credit",
    "debit",
    "lock_available_stock",
    "query",
]
