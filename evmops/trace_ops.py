"""
evmops.trace_ops — debit/credit operations from flattened call traces.

Each flattened frame becomes, in order:

  1. a "from" debit of the frame's value (no amount when the value is zero),
  2. a "to" credit related to that debit,
  3. one DESTRUCT debit per destroyed account still owed a correction.

Frames of kind CALL that move no value are dropped entirely and consume no
index. A SELFDESTRUCT whose beneficiary is itself, and any frame without a
recipient, stop after the debit. CREATE/CREATE2 into a destroyed address
resurrects it: its pending correction is forgotten.

Status is FAILURE for reverted frames (with the tracer's message under
`metadata.error`); balance corrections only follow successful frames.

Indices are threaded explicitly: `apply_trace_entry` receives the next free
index and returns the next free index after the operations it produced.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Tuple

from normcore.address import AddressFormatter, format_optional
from normcore.types import Amount, Currency, Operation, OperationStatus

from .destruction import DestructionLedger
from .trace import FlatTrace
from .types import (CALL_OP_TYPE, CREATE_OP_TYPES, DESTRUCT_OP_TYPE,
                    SELF_DESTRUCT_OP_TYPE)

log = logging.getLogger(__name__)


def apply_trace_entry(
    entry: FlatTrace,
    *,
    ledger: DestructionLedger,
    next_index: int,
    currency: Currency,
    format_address: AddressFormatter,
) -> Tuple[List[Operation], int]:
    """
    Emit the operations for one flattened frame and update `ledger` in place.

    Returns:
        (operations, next free index)
    """
    ops: List[Operation] = []

    status = OperationStatus.FAILURE if entry.reverted else OperationStatus.SUCCESS
    metadata = {"error": entry.error_message} if entry.reverted else None
    zero_value = entry.zero_value
    should_emit = not (zero_value and entry.kind == CALL_OP_TYPE)

    sender = format_optional(entry.sender, format_address)
    to = format_optional(entry.to, format_address)

    from_index = next_index
    if should_emit:
        ops.append(
            Operation(
                index=from_index,
                kind=entry.kind,
                status=status,
                account=sender,
                amount=None if zero_value else Amount.debit(entry.value, currency),
                metadata=metadata,
            )
        )
        next_index += 1
        if not zero_value and status.is_success:
            ledger.record_destination_adjustment(sender, -entry.value)

    if entry.kind == SELF_DESTRUCT_OP_TYPE:
        if status.is_success:
            ledger.mark_destroyed(sender)
        # Beneficiary == self: the balance is simply removed, no transfer.
        if sender == to:
            return ops, next_index

    if not to:
        return ops, next_index

    if entry.kind in CREATE_OP_TYPES:
        ledger.clear(to)

    if should_emit:
        ops.append(
            Operation(
                index=next_index,
                kind=entry.kind,
                related_indices=(from_index,),
                status=status,
                account=to,
                amount=None if zero_value else Amount.credit(entry.value, currency),
                metadata=metadata,
            )
        )
        next_index += 1
        if not zero_value and status.is_success:
            ledger.record_destination_adjustment(to, entry.value)

    for address, magnitude in ledger.drain_nonzero():
        ops.append(
            Operation(
                index=next_index,
                kind=DESTRUCT_OP_TYPE,
                status=OperationStatus.SUCCESS,
                account=address,
                amount=Amount.debit(magnitude, currency),
            )
        )
        next_index += 1

    return ops, next_index


def build_trace_operations(
    traces: Iterable[FlatTrace],
    *,
    start_index: int,
    currency: Currency,
    format_address: AddressFormatter,
) -> List[Operation]:
    """
    Build the operations for a transaction's flattened trace, numbering them
    from `start_index` (normally the number of fee operations already emitted).
    """
    ledger = DestructionLedger()
    operations: List[Operation] = []
    next_index = start_index
    for entry in traces:
        ops, next_index = apply_trace_entry(
            entry,
            ledger=ledger,
            next_index=next_index,
            currency=currency,
            format_address=format_address,
        )
        operations.extend(ops)

    log.debug(
        "trace operations built",
        extra={"start_index": start_index, "operations": len(operations)},
    )
    return operations


__all__ = ["apply_trace_entry", "build_trace_operations"]
