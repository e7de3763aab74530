"""
normrpc models: typed JSON shapes the API layer returns for normalized data.
These are *views* over normcore dataclasses and keep field names stable for
explorers, exchanges and accounting clients.

Includes:
- OperationIdentifier / AccountIdentifier / CurrencyView / AmountView
- OperationView (`type`, `status`, `related_operations`, ...)
- TransactionIdentifier / TransactionView

Validation:
- Amount values are decimal strings with an optional literal `-` prefix.
- Operation indices are non-negative.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from normcore.types import Amount, Currency, Operation, Transaction

_AMOUNT_RE = re.compile(r"^-?\d+$")


class OperationIdentifier(BaseModel):
    model_config = ConfigDict(frozen=True)
    index: int = Field(ge=0)
    network_index: Optional[int] = None


class AccountIdentifier(BaseModel):
    model_config = ConfigDict(frozen=True)
    address: str
    metadata: Optional[Dict[str, Any]] = None


class CurrencyView(BaseModel):
    model_config = ConfigDict(frozen=True)
    symbol: str
    decimals: int = Field(ge=0)
    metadata: Optional[Dict[str, Any]] = None


class AmountView(BaseModel):
    """
    Signed amount: "-1000" is a debit, "1000" a credit.
    """

    model_config = ConfigDict(frozen=True)
    value: str
    currency: CurrencyView
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("value")
    @classmethod
    def _decimal_ok(cls, v: str) -> str:
        if not _AMOUNT_RE.match(v):
            raise ValueError(f"amount value must be a signed decimal string, got {v!r}")
        return v


class OperationView(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    operation_identifier: OperationIdentifier
    related_operations: Optional[List[OperationIdentifier]] = None
    type: str
    status: Optional[str] = None
    account: Optional[AccountIdentifier] = None
    amount: Optional[AmountView] = None
    metadata: Optional[Any] = None


class TransactionIdentifier(BaseModel):
    model_config = ConfigDict(frozen=True)
    hash: str


class TransactionView(BaseModel):
    model_config = ConfigDict(frozen=True)

    transaction_identifier: TransactionIdentifier
    operations: List[OperationView]
    related_transactions: Optional[List[TransactionIdentifier]] = None
    metadata: Optional[Dict[str, Any]] = None


# -----------------------------------------------------------------------------
# Builders from normcore types
# -----------------------------------------------------------------------------


def currency_view(c: Currency) -> CurrencyView:
    return CurrencyView(
        symbol=c.symbol,
        decimals=c.decimals,
        metadata=dict(c.metadata) if c.metadata is not None else None,
    )


def amount_view(a: Amount) -> AmountView:
    return AmountView(value=a.value, currency=currency_view(a.currency))


def operation_view(op: Operation) -> OperationView:
    return OperationView(
        operation_identifier=OperationIdentifier(index=op.index),
        related_operations=[OperationIdentifier(index=i) for i in op.related_indices] or None,
        type=op.kind,
        status=op.status.value if op.status is not None else None,
        account=AccountIdentifier(address=op.account) if op.account is not None else None,
        amount=amount_view(op.amount) if op.amount is not None else None,
        metadata=op.metadata,
    )


def transaction_view(tx: Transaction) -> TransactionView:
    return TransactionView(
        transaction_identifier=TransactionIdentifier(hash=tx.hash),
        operations=[operation_view(op) for op in tx.operations],
        metadata=dict(tx.metadata) if tx.metadata is not None else None,
    )


def dump_transaction(tx: Transaction) -> Dict[str, Any]:
    """JSON-safe dict for `tx`, absent optionals excluded."""
    return transaction_view(tx).model_dump(mode="json", exclude_none=True)


__all__ = [
    "OperationIdentifier",
    "AccountIdentifier",
    "CurrencyView",
    "AmountView",
    "OperationView",
    "TransactionIdentifier",
    "TransactionView",
    "currency_view",
    "amount_view",
    "operation_view",
    "transaction_view",
    "dump_transaction",
]
