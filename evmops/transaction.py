"""
evmops.transaction — convert one EVM transaction into canonical operations.

Pipeline:

    receipt/block integrity check
      → FEE operations (indices 0..)
      → flatten trace → trace operations (indices continue after the fees)

The genesis block carries no traces; every other block requires one. The
transaction metadata keeps the raw inputs (gas limit and price, receipt,
trace) for downstream consumers.

Any failure aborts the whole transaction; no partial operation list is returned.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from normcore import logging as nlog
from normcore.address import AddressFormatter
from normcore.config import NetworkConfig
from normcore.errors import IntegrityMismatch, PreconditionMissing, require
from normcore.types import Transaction, next_index

from .fees import build_fee_operations
from .trace import TraceNode, flatten_trace
from .trace_ops import build_trace_operations
from .types import Block, EvmTransaction, Receipt

log = logging.getLogger(__name__)


def check_receipt_block(block: Block, receipt: Receipt) -> None:
    """Raise unless `receipt` was produced in `block`."""
    receipt_hash = require(
        receipt.block_hash, "block hash not found in tx receipt", field="receipt.block_hash"
    )
    block_hash = require(block.hash, "missing block hash", field="hash")
    if receipt_hash != block_hash:
        raise IntegrityMismatch(
            "transaction receipt block hash does not match block hash",
            expected=block_hash.hex(),
            actual=receipt_hash.hex(),
        )


def build_transaction(
    block: Block,
    tx: EvmTransaction,
    receipt: Receipt,
    trace: Optional[TraceNode],
    *,
    config: NetworkConfig,
    format_address: AddressFormatter,
    raw_trace: Optional[Mapping[str, Any]] = None,
) -> Transaction:
    """
    Build the canonical transaction for `tx`.

    Args:
        block: block containing the transaction
        tx: the transaction
        receipt: its receipt (must belong to `block`)
        trace: root of its call trace; ignored for the genesis block
        raw_trace: tracer JSON to keep in metadata, if the caller has it

    Raises:
        PreconditionMissing, IntegrityMismatch from the checks and builders.
    """
    number = require(block.number, "missing block number", field="number")
    with nlog.bound(block=number, tx=tx.hash.hex()):
        check_receipt_block(block, receipt)

        operations = build_fee_operations(
            block,
            tx,
            receipt,
            currency=config.currency,
            format_address=format_address,
            fee_market_tx_type=config.fee_market_tx_type,
        )

        if number != 0:
            if trace is None:
                raise PreconditionMissing("transaction trace not found", field="trace")
            operations += build_trace_operations(
                flatten_trace(trace),
                start_index=next_index(operations),
                currency=config.currency,
                format_address=format_address,
            )

        log.debug("transaction converted", extra={"operations": len(operations)})

    metadata = {
        "gas_limit": tx.gas,
        "gas_price": tx.gas_price,
        "receipt": dict(receipt.raw) if receipt.raw is not None else None,
        "trace": dict(raw_trace) if (raw_trace is not None and number != 0) else None,
    }
    return Transaction(hash=tx.hash.hex(), operations=tuple(operations), metadata=metadata)


__all__ = ["check_receipt_block", "build_transaction"]
