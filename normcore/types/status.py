"""
normcore.types.status — execution status carried by trace-sourced operations.

OperationStatus models whether the balance change an operation describes took
effect:
  - SUCCESS : the call (and every enclosing call) completed
  - FAILURE : the call or one of its ancestors reverted

Event-sourced operations carry no status at all (`None`), since the event stream
only contains effects that happened.

String forms:
  - OperationStatus.SUCCESS.value -> "SUCCESS"   (wire/protocol form)
  - str(OperationStatus.SUCCESS)  -> "SUCCESS"
"""

from __future__ import annotations

from enum import Enum


class OperationStatus(str, Enum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"

    @property
    def is_success(self) -> bool:
        """True iff status is SUCCESS."""
        return self is OperationStatus.SUCCESS

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.value


__all__ = ["OperationStatus"]
