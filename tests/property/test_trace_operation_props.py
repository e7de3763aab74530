"""
Property tests for trace flattening and trace → operation conversion.

Goals:
- Flattening visits every node exactly once and never un-reverts a subtree.
- Operation indices are contiguous and increasing from the start index.
- Without self-destructs every emitted amount is balanced by its pair.
- Conversion is a pure function of its inputs.
"""
from __future__ import annotations

from typing import List

from hypothesis import given
from hypothesis import strategies as st

from normcore.address import hex_address
from normcore.types import Currency, Operation, OperationStatus

from evmops.trace import TraceNode, flatten_trace
from evmops.trace_ops import build_trace_operations

ETH = Currency(symbol="ETH", decimals=18)

ADDRESSES = [bytes([i]) * 20 for i in range(1, 6)]
PLAIN_KINDS = ["CALL", "DELEGATECALL", "STATICCALL", "CALLCODE", "CREATE", "CREATE2"]
ERRORS = ["", "execution reverted", "out of gas"]


def _trees(kinds: List[str]):
    def node(children):
        return st.builds(
            TraceNode,
            kind=st.sampled_from(kinds),
            sender=st.sampled_from(ADDRESSES),
            to=st.sampled_from(ADDRESSES),
            value=st.integers(min_value=0, max_value=10**21),
            reverted=st.booleans(),
            error_message=st.sampled_from(ERRORS),
            children=st.lists(children, max_size=3).map(tuple),
        )

    leaf = st.builds(
        TraceNode,
        kind=st.sampled_from(kinds),
        sender=st.sampled_from(ADDRESSES),
        to=st.sampled_from(ADDRESSES),
        value=st.integers(min_value=0, max_value=10**21),
        reverted=st.booleans(),
        error_message=st.sampled_from(ERRORS),
    )
    return st.recursive(leaf, node, max_leaves=25)


plain_trees = _trees(PLAIN_KINDS)
any_trees = _trees(PLAIN_KINDS + ["SELFDESTRUCT"])


def _build(root: TraceNode, start: int) -> List[Operation]:
    return build_trace_operations(
        flatten_trace(root), start_index=start, currency=ETH, format_address=hex_address
    )


def _signed(op: Operation) -> int:
    return -op.amount.magnitude if op.amount.is_debit else op.amount.magnitude


@given(plain_trees)
def test_flatten_visits_every_node_once(root: TraceNode) -> None:
    assert len(flatten_trace(root)) == root.count()


@given(plain_trees)
def test_reverted_root_reverts_everything(root: TraceNode) -> None:
    flat = flatten_trace(
        TraceNode(kind="CALL", sender=ADDRESSES[0], reverted=True, error_message="x", children=(root,))
    )
    assert all(t.reverted for t in flat)
    assert all(t.error_message for t in flat)


@given(any_trees, st.integers(min_value=0, max_value=5))
def test_indices_are_contiguous_from_start(root: TraceNode, start: int) -> None:
    ops = _build(root, start)
    assert [op.index for op in ops] == list(range(start, start + len(ops)))


@given(any_trees)
def test_credits_relate_to_the_preceding_debit(root: TraceNode) -> None:
    ops = _build(root, 0)
    for prev, op in zip(ops, ops[1:]):
        if op.related_indices:
            assert op.related_indices == (prev.index,)
            assert op.kind == prev.kind
            assert op.status == prev.status


@given(any_trees)
def test_destruct_rows_are_successful_debits(root: TraceNode) -> None:
    for op in _build(root, 0):
        if op.kind == "DESTRUCT":
            assert op.status is OperationStatus.SUCCESS
            assert op.amount.is_debit
            assert op.amount.magnitude > 0
            assert op.related_indices == ()


@given(plain_trees)
def test_amounts_balance_without_self_destruct(root: TraceNode) -> None:
    ops = _build(root, 0)
    assert sum(_signed(op) for op in ops if op.amount is not None) == 0
    assert "DESTRUCT" not in {op.kind for op in ops}


@given(any_trees)
def test_conversion_is_deterministic(root: TraceNode) -> None:
    assert _build(root, 3) == _build(root, 3)
