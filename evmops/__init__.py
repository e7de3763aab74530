"""
evmops — operation normalization for execution-trace (EVM) chains.

Modules:
    types        : chain-data snapshots (Block, Uncle, EvmTransaction, Receipt) and op kinds
    trace        : TraceNode and the revert-propagating flattener
    destruction  : per-transaction self-destruct/resurrection ledger
    trace_ops    : paired debit/credit operations from flattened traces
    fees         : sender/miner/burn fee operations
    rewards      : miner and uncle block rewards under the fork schedule
    transaction  : per-transaction pipeline (fees, then traces)

Nothing here performs I/O; traces, receipts and uncles are fetched by the caller.
"""

from .fees import FeeBreakdown, build_fee_operations, compute_fee_breakdown
from .rewards import (build_block_reward_operations,
                      build_block_reward_transaction, mining_reward)
from .trace import FlatTrace, TraceNode, flatten_trace
from .trace_ops import apply_trace_entry, build_trace_operations
from .transaction import build_transaction

__all__ = [
    "TraceNode",
    "FlatTrace",
    "flatten_trace",
    "apply_trace_entry",
    "build_trace_operations",
    "FeeBreakdown",
    "compute_fee_breakdown",
    "build_fee_operations",
    "mining_reward",
    "build_block_reward_operations",
    "build_block_reward_transaction",
    "build_transaction",
]
