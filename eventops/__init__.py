"""
eventops — operation normalization for event-sourced (pallet-based) chains.

Modules:
    values       : decoded value model (primitives, composites, variants)
    types        : Event (pallet, variant, named fields, field descriptors)
    address      : raw account bytes from decoded address values
    extract      : sender/receiver/amount heuristics → operations
    transaction  : per-extrinsic pipeline
"""

from .extract import (EventTransfer, build_event_operations,
                      extract_event_data)
from .transaction import build_extrinsic_transaction, extrinsic_hash
from .types import Event, FieldType

__all__ = [
    "Event",
    "FieldType",
    "EventTransfer",
    "extract_event_data",
    "build_event_operations",
    "build_extrinsic_transaction",
    "extrinsic_hash",
]
