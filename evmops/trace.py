"""
evmops.trace — call-trace tree and its revert-propagating flattener.

A transaction's trace is the tree `debug_traceTransaction` returns with the
`callTracer`: every node is one call frame (CALL, DELEGATECALL, CREATE,
CREATE2, SELFDESTRUCT, ...) with its nested frames under `calls`.

`flatten_trace` turns the tree into the ordered sequence the operation builder
consumes. It expands nodes from a FIFO queue: take a node, append its
children to the back of the queue, emit the node. The tree shape is dropped,
discovery order is kept.

Revert bubbling: when a node is reverted, every child is marked reverted too,
and a child without its own error message inherits the parent's. Since a
child is only emitted after its parent has been processed, the flag reaches
every descendant, however deep.

Cyclic inputs are a caller contract violation and are not detected.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, List, Mapping, Optional, Tuple

from .types import to_bytes, to_quantity


@dataclass(frozen=True)
class TraceNode:
    """
    One call frame of a transaction trace.

    Attributes:
        kind:           frame type as reported by the tracer (upper case)
        sender:         raw `from` address
        to:             raw `to` address; empty when the tracer reported none
        value:          wei transferred by the frame
        reverted:       True if the frame failed
        error_message:  tracer's error string ("" when none)
        children:       nested frames in call order
    """

    kind: str
    sender: bytes
    to: bytes = b""
    value: int = 0
    reverted: bool = False
    error_message: str = ""
    children: Tuple["TraceNode", ...] = field(default_factory=tuple)

    @classmethod
    def from_call_tracer(cls, obj: Mapping[str, Any]) -> "TraceNode":
        """
        Build a tree from `callTracer` JSON.

        A non-empty `error` marks the frame reverted. Missing `value` means zero
        and a missing `to` is kept empty.
        """
        error = str(obj.get("error") or "")
        return cls(
            kind=str(obj.get("type") or "").upper(),
            sender=to_bytes(obj.get("from")) or b"",
            to=to_bytes(obj.get("to")) or b"",
            value=to_quantity(obj.get("value")) or 0,
            reverted=bool(error),
            error_message=error,
            children=tuple(cls.from_call_tracer(c) for c in (obj.get("calls") or ())),
        )

    def count(self) -> int:
        """Total number of frames in this subtree, itself included."""
        total = 0
        stack = [self]
        while stack:
            node = stack.pop()
            total += 1
            stack.extend(node.children)
        return total


@dataclass(frozen=True)
class FlatTrace:
    """A trace frame with its tree position discarded and revert state resolved."""

    kind: str
    sender: bytes
    to: bytes
    value: int
    reverted: bool
    error_message: str

    @property
    def zero_value(self) -> bool:
        return self.value == 0


@dataclass
class _Pending:
    node: TraceNode
    reverted: bool
    error_message: str


def flatten_trace(root: Optional[TraceNode]) -> List[FlatTrace]:
    """
    Flatten `root` in queue (discovery) order, propagating reverts to descendants.

    Returns exactly one entry per node; `None` yields an empty list.
    """
    if root is None:
        return []

    out: List[FlatTrace] = []
    queue: Deque[_Pending] = deque([_Pending(root, root.reverted, root.error_message)])
    while queue:
        cur = queue.popleft()
        for child in cur.node.children:
            reverted, message = child.reverted, child.error_message
            if cur.reverted:
                reverted = True
                if not message:
                    message = cur.error_message
            queue.append(_Pending(child, reverted, message))
        out.append(
            FlatTrace(
                kind=cur.node.kind,
                sender=cur.node.sender,
                to=cur.node.to,
                value=cur.node.value,
                reverted=cur.reverted,
                error_message=cur.error_message,
            )
        )
    return out


__all__ = ["TraceNode", "FlatTrace", "flatten_trace"]
