"""
eventops.transaction — convert one extrinsic's events into a transaction.

The transaction is identified by the BLAKE2b-256 hash of the extrinsic's
encoded bytes (lower-case hex, no prefix).
"""

from __future__ import annotations

import hashlib
import logging
from typing import Iterable

from normcore import logging as nlog
from normcore.address import AddressFormatter
from normcore.types import Currency, Transaction

from .extract import build_event_operations
from .types import Event

log = logging.getLogger(__name__)


def extrinsic_hash(encoded: bytes) -> str:
    return hashlib.blake2b(bytes(encoded), digest_size=32).hexdigest()


def build_extrinsic_transaction(
    encoded_extrinsic: bytes,
    events: Iterable[Event],
    *,
    currency: Currency,
    format_address: AddressFormatter,
) -> Transaction:
    """
    Build the canonical transaction for an extrinsic from its events.

    Raises:
        UnsupportedShape if any event cannot be interpreted; no partial result.
    """
    tx_hash = extrinsic_hash(encoded_extrinsic)
    with nlog.bound(tx=tx_hash):
        ops = build_event_operations(events, currency=currency, format_address=format_address)
    return Transaction(hash=tx_hash, operations=tuple(ops))


__all__ = ["extrinsic_hash", "build_extrinsic_transaction"]
