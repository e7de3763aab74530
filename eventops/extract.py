"""
eventops.extract — sender/receiver/amount operations from ledger events.

Each event maps to kind "{pallet}.{variant}". Its named fields are scanned in
order; for each role the first field whose name is an accepted alias wins:

    sender   : from, who, account     (decoded address)
    amount   : amount, actual_fee     (must be an unsigned 128-bit primitive)
    receiver : to                     (decoded address)

Operations per event, both at the event's position in the transaction:

    sender   -amount   (account/amount omitted when not found)
    receiver +amount   (only when both receiver and amount were found)

Event-sourced operations carry no status. The two operations of a transfer
share one index; consumers keying on the index alone must also use the order.

Positional-field events and fields with unexpected value shapes raise
`UnsupportedShape`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from normcore.address import AddressFormatter
from normcore.errors import UnsupportedShape
from normcore.types import Amount, Currency, Operation

from .address import decode_address_components
from .types import Event
from .values import NamedComposite, Primitive, Value

log = logging.getLogger(__name__)

SENDER_FIELDS: Tuple[str, ...] = ("from", "who", "account")
AMOUNT_FIELDS: Tuple[str, ...] = ("amount", "actual_fee")
RECEIVER_FIELDS: Tuple[str, ...] = ("to",)


@dataclass(frozen=True)
class EventTransfer:
    kind: str
    sender: Optional[str] = None
    receiver: Optional[str] = None
    amount: Optional[str] = None


def first_field(
    fields: NamedComposite, aliases: Sequence[str]
) -> Optional[Tuple[str, Value]]:
    """First (name, value) in field order whose name is one of `aliases`."""
    for name, value in fields.fields:
        if name in aliases:
            return name, value
    return None


def _amount(name: str, value: Value) -> str:
    if isinstance(value, Primitive) and value.kind == "u128":
        return str(int(value.value))
    raise UnsupportedShape(
        "amount is not an unsigned 128-bit value",
        field=name,
        expected="u128",
        got=getattr(value, "kind", type(value).__name__),
    )


def extract_event_data(event: Event, *, format_address: AddressFormatter) -> EventTransfer:
    """
    Find sender, amount and receiver of `event`.

    Raises:
        UnsupportedShape if the event has positional fields or a matched field
        has an unexpected value shape.
    """
    if not isinstance(event.fields, NamedComposite):
        raise UnsupportedShape(
            "event fields are not named",
            field=event.kind,
            expected="named composite",
            got=type(event.fields).__name__,
        )

    sender = receiver = amount = None

    hit = first_field(event.fields, SENDER_FIELDS)
    if hit is not None:
        sender = format_address(decode_address_components(hit[1], field=hit[0]))

    hit = first_field(event.fields, AMOUNT_FIELDS)
    if hit is not None:
        amount = _amount(*hit)

    hit = first_field(event.fields, RECEIVER_FIELDS)
    if hit is not None:
        receiver = format_address(decode_address_components(hit[1], field=hit[0]))

    return EventTransfer(kind=event.kind, sender=sender, receiver=receiver, amount=amount)


def event_operations(
    event_index: int,
    event: Event,
    *,
    currency: Currency,
    format_address: AddressFormatter,
) -> List[Operation]:
    data = extract_event_data(event, format_address=format_address)
    metadata = event.field_metadata()

    ops = [
        Operation(
            index=event_index,
            kind=data.kind,
            account=data.sender,
            amount=Amount.debit(data.amount, currency) if data.amount is not None else None,
            metadata=metadata,
        )
    ]
    if data.receiver is not None and data.amount is not None:
        ops.append(
            Operation(
                index=event_index,
                kind=data.kind,
                account=data.receiver,
                amount=Amount.credit(data.amount, currency),
                metadata=metadata,
            )
        )
    return ops


def build_event_operations(
    events: Iterable[Event],
    *,
    currency: Currency,
    format_address: AddressFormatter,
) -> List[Operation]:
    """Operations for a transaction's events, in event order."""
    events = list(events)
    operations: List[Operation] = []
    for event_index, event in enumerate(events):
        operations.extend(
            event_operations(
                event_index, event, currency=currency, format_address=format_address
            )
        )
    log.debug(
        "event operations built",
        extra={"events": len(events), "operations": len(operations)},
    )
    return operations


__all__ = [
    "SENDER_FIELDS",
    "AMOUNT_FIELDS",
    "RECEIVER_FIELDS",
    "EventTransfer",
    "first_field",
    "extract_event_data",
    "event_operations",
    "build_event_operations",
]
