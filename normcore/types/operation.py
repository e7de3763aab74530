"""
normcore.types.operation — the canonical balance-change model.

An `Operation` is one balance-affecting ledger entry. Operations are grouped
into a `Transaction` and serialized by the API layer with fixed field names:

    {
      "operation_identifier": {"index": 3},
      "related_operations":   [{"index": 2}],
      "type":     "CALL",
      "status":   "SUCCESS",
      "account":  {"address": "0x…"},
      "amount":   {"value": "-1000", "currency": {"symbol": "ETH", "decimals": 18}},
      "metadata": {...}
    }

Conventions
-----------
* Amount values are decimal strings. The sign encodes direction: a literal `-`
  prefix is a debit, no prefix is a credit. Debits are rendered as `"-{n}"` even
  when `n` is zero, so a zero debit is `"-0"`.
* Absent optionals are omitted from `to_dict()` output rather than nulled.
* Types are frozen; builders always create new instances.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from .status import OperationStatus


@dataclass(frozen=True)
class Currency:
    """Native currency of the network the operations are denominated in."""

    symbol: str
    decimals: int
    metadata: Optional[Mapping[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"symbol": self.symbol, "decimals": self.decimals}
        if self.metadata is not None:
            out["metadata"] = dict(self.metadata)
        return out


@dataclass(frozen=True)
class Amount:
    value: str
    currency: Currency

    @classmethod
    def debit(cls, magnitude: int | str, currency: Currency) -> "Amount":
        return cls(value=f"-{magnitude}", currency=currency)

    @classmethod
    def credit(cls, magnitude: int | str, currency: Currency) -> "Amount":
        return cls(value=f"{magnitude}", currency=currency)

    @property
    def is_debit(self) -> bool:
        return self.value.startswith("-")

    @property
    def magnitude(self) -> int:
        """Absolute value as an int ("-0" → 0)."""
        return int(self.value.lstrip("-"))

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "currency": self.currency.to_dict()}


@dataclass(frozen=True)
class Operation:
    """
    One balance-affecting entry within a transaction.

    Attributes:
        index:           unique, increasing position within the transaction
                         (event-sourced pairs share one index)
        kind:            operation type tag, e.g. FEE, CALL, Balances.Transfer
        related_indices: indices of earlier operations this one pairs with
        status:          execution outcome; None for event-sourced operations
        account:         formatted address, if the operation touches an account
        amount:          signed amount, omitted for value-less movements
        metadata:        free-form annotations (error message, field descriptors)
    """

    index: int
    kind: str
    related_indices: Tuple[int, ...] = ()
    status: Optional[OperationStatus] = None
    account: Optional[str] = None
    amount: Optional[Amount] = None
    metadata: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"operation_identifier": {"index": self.index}}
        if self.related_indices:
            out["related_operations"] = [{"index": i} for i in self.related_indices]
        out["type"] = self.kind
        if self.status is not None:
            out["status"] = self.status.value
        if self.account is not None:
            out["account"] = {"address": self.account}
        if self.amount is not None:
            out["amount"] = self.amount.to_dict()
        if self.metadata is not None:
            out["metadata"] = self.metadata
        return out


@dataclass(frozen=True)
class Transaction:
    """A hash-identified, ordered group of operations."""

    hash: str
    operations: Tuple[Operation, ...] = field(default_factory=tuple)
    metadata: Optional[Mapping[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "transaction_identifier": {"hash": self.hash},
            "operations": [op.to_dict() for op in self.operations],
        }
        if self.metadata is not None:
            out["metadata"] = dict(self.metadata)
        return out


def next_index(operations: Sequence[Operation], default: int = 0) -> int:
    """First free index after `operations` (or `default` when there are none)."""
    if not operations:
        return default
    return operations[-1].index + 1


__all__ = [
    "Currency",
    "Amount",
    "Operation",
    "Transaction",
    "next_index",
]
