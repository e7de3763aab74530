"""
evmops.fees — fee operations for one transaction.

Turns the gas a transaction consumed into balance changes:

- Price: fee-market transactions (type 2) pay `base_fee + priority_fee` per gas;
  every other type pays its declared gas price.
- Split: `gas_used * base_fee` is burned; the rest of the fee goes to the block
  author.

Operations, in order, all of kind FEE and status SUCCESS:

    0: sender  -miner_earned
    1: author  +miner_earned        (related to 0)
    2: sender  -fee_burned          (only when fee_burned != 0)

Missing inputs (block author or base fee, transaction type or gas price,
receipt gas used) raise `PreconditionMissing`; nothing is defaulted except
the priority fee, which is zero when absent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from normcore.address import AddressFormatter
from normcore.errors import IntegrityMismatch, require
from normcore.types import Amount, Currency, Operation, OperationStatus

from .types import FEE_OP_TYPE, Block, EvmTransaction, Receipt

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeeBreakdown:
    """
    Computed fee for a single transaction. All values are in the chain's
    smallest currency unit.
    """

    gas_used: int
    base_fee: int
    effective_gas_price: int
    fee_amount: int        # gas_used * effective_gas_price
    fee_burned: int        # gas_used * base_fee
    miner_earned: int      # fee_amount - fee_burned


def compute_fee_breakdown(
    block: Block,
    tx: EvmTransaction,
    receipt: Receipt,
    *,
    fee_market_tx_type: int = 2,
) -> FeeBreakdown:
    base_fee = require(block.base_fee, "block has no base fee", field="base_fee")
    tx_type = require(tx.tx_type, "transaction type unavailable", field="type")
    gas_price = require(tx.gas_price, "gas price is not available", field="gas_price")
    gas_used = require(receipt.gas_used, "gas used is not available", field="gas_used")
    priority_fee = tx.priority_fee or 0

    if tx_type == fee_market_tx_type:
        effective = base_fee + priority_fee
    else:
        effective = gas_price

    fee_amount = gas_used * effective
    fee_burned = gas_used * base_fee
    miner_earned = fee_amount - fee_burned
    if miner_earned < 0:
        raise IntegrityMismatch(
            "effective gas price is below the block base fee",
            expected=f">={base_fee}",
            actual=str(effective),
        )

    return FeeBreakdown(
        gas_used=gas_used,
        base_fee=base_fee,
        effective_gas_price=effective,
        fee_amount=fee_amount,
        fee_burned=fee_burned,
        miner_earned=miner_earned,
    )


def build_fee_operations(
    block: Block,
    tx: EvmTransaction,
    receipt: Receipt,
    *,
    currency: Currency,
    format_address: AddressFormatter,
    fee_market_tx_type: int = 2,
) -> List[Operation]:
    """
    Build the FEE operations for `tx`, numbered from 0.

    Raises:
        PreconditionMissing if a required block/transaction/receipt field is absent.
        IntegrityMismatch if the paid price is below the base fee.
    """
    miner = require(block.author, "block has no author", field="author")
    fee = compute_fee_breakdown(block, tx, receipt, fee_market_tx_type=fee_market_tx_type)

    sender = format_address(tx.sender)
    ops: List[Operation] = [
        Operation(
            index=0,
            kind=FEE_OP_TYPE,
            status=OperationStatus.SUCCESS,
            account=sender,
            amount=Amount.debit(fee.miner_earned, currency),
        ),
        Operation(
            index=1,
            kind=FEE_OP_TYPE,
            related_indices=(0,),
            status=OperationStatus.SUCCESS,
            account=format_address(miner),
            amount=Amount.credit(fee.miner_earned, currency),
        ),
    ]
    if fee.fee_burned != 0:
        ops.append(
            Operation(
                index=2,
                kind=FEE_OP_TYPE,
                status=OperationStatus.SUCCESS,
                account=sender,
                amount=Amount.debit(fee.fee_burned, currency),
            )
        )

    log.debug(
        "fee operations built",
        extra={
            "gas_used": fee.gas_used,
            "effective_gas_price": fee.effective_gas_price,
            "fee_burned": fee.fee_burned,
            "miner_earned": fee.miner_earned,
        },
    )
    return ops


__all__ = ["FeeBreakdown", "compute_fee_breakdown", "build_fee_operations"]
