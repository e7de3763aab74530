"""
normcore.types — canonical operation model shared by every chain family.

Public surface (re-exported):
    OperationStatus             : Enum — SUCCESS / FAILURE
    Currency, Amount            : Dataclasses — denomination and signed value
    Operation, Transaction      : Dataclasses — the produced model
    next_index                  : First free index after a run of operations
"""

from __future__ import annotations

from .operation import Amount, Currency, Operation, Transaction, next_index
from .status import OperationStatus

__all__ = [
    "OperationStatus",
    "Currency",
    "Amount",
    "Operation",
    "Transaction",
    "next_index",
]
