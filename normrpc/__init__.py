"""
normrpc — wire views for normalized operations and transactions.

The command-line front end lives in `normrpc.cli` and is not imported here.
"""

from .models import (OperationView, TransactionView, dump_transaction,
                     operation_view, transaction_view)

__all__ = [
    "OperationView",
    "TransactionView",
    "operation_view",
    "transaction_view",
    "dump_transaction",
]
