"""
Event field heuristics: sender/amount/receiver aliases, shared indices for a
transfer pair, and rejection of shapes the extractor does not understand.
"""
from __future__ import annotations

import pytest

from normcore.address import hex_address
from normcore.errors import UnsupportedShape
from normcore.types import Currency

from eventops.address import decode_address_components
from eventops.extract import build_event_operations, extract_event_data
from eventops.types import Event
from eventops.values import Primitive, account_id, named, u128, unnamed

DOT = Currency(symbol="DOT", decimals=10)

ALICE = bytes(range(32))
BOB = bytes(range(32, 64))
CHARLIE = b"\x07" * 32

TRANSFER_TYPES = {"from": "AccountId", "to": "AccountId", "amount": "Balance"}


def transfer(amount: int = 100) -> Event:
    return Event.from_fields(
        "Balances",
        "Transfer",
        [("from", account_id(ALICE)), ("to", account_id(BOB)), ("amount", u128(amount))],
        type_names=TRANSFER_TYPES,
    )


def build(*events: Event):
    return build_event_operations(events, currency=DOT, format_address=hex_address)


def test_transfer_yields_debit_and_credit_at_event_index() -> None:
    ops = build(transfer(100))
    assert len(ops) == 2
    debit, credit = ops

    assert debit.index == credit.index == 0
    assert debit.kind == credit.kind == "Balances.Transfer"
    assert debit.status is None and credit.status is None
    assert debit.related_indices == () and credit.related_indices == ()
    assert debit.account == hex_address(ALICE)
    assert debit.amount.value == "-100"
    assert credit.account == hex_address(BOB)
    assert credit.amount.value == "100"

    expected_meta = [
        {"name": "from", "type": "AccountId"},
        {"name": "to", "type": "AccountId"},
        {"name": "amount", "type": "Balance"},
    ]
    assert debit.metadata == expected_meta
    assert credit.metadata == expected_meta


def test_operation_index_is_the_event_position() -> None:
    other = Event.from_fields("System", "ExtrinsicSuccess", [("dispatch_info", {"weight": 5})])
    ops = build(other, transfer(1), transfer(2))
    assert [op.index for op in ops] == [0, 1, 1, 2, 2]
    # Events without any recognised field still produce a bare operation.
    assert ops[0].account is None and ops[0].amount is None


@pytest.mark.parametrize("alias", ["who", "account"])
def test_sender_aliases(alias: str) -> None:
    event = Event.from_fields("Balances", "Withdraw", [(alias, account_id(CHARLIE)), ("amount", u128(9))])
    ops = build(event)
    assert len(ops) == 1
    assert ops[0].account == hex_address(CHARLIE)
    assert ops[0].amount.value == "-9"


def test_actual_fee_is_an_amount_alias() -> None:
    event = Event.from_fields(
        "TransactionPayment",
        "TransactionFeePaid",
        [("who", account_id(ALICE)), ("actual_fee", u128(1_500)), ("tip", u128(0))],
    )
    data = extract_event_data(event, format_address=hex_address)
    assert data.sender == hex_address(ALICE)
    assert data.amount == "1500"
    assert data.receiver is None


def test_first_matching_field_wins() -> None:
    event = Event.from_fields(
        "Custom",
        "Moved",
        [("who", account_id(CHARLIE)), ("from", account_id(ALICE)), ("amount", u128(3)), ("to", account_id(BOB))],
    )
    data = extract_event_data(event, format_address=hex_address)
    assert data.sender == hex_address(CHARLIE)


def test_receiver_without_amount_emits_only_sender_operation() -> None:
    event = Event.from_fields("Proxy", "Announced", [("from", account_id(ALICE)), ("to", account_id(BOB))])
    ops = build(event)
    assert len(ops) == 1
    assert ops[0].account == hex_address(ALICE)
    assert ops[0].amount is None


def test_amount_without_sender_is_still_a_debit() -> None:
    event = Event.from_fields("Balances", "Issued", [("amount", u128(40))])
    ops = build(event)
    assert len(ops) == 1
    assert ops[0].account is None
    assert ops[0].amount.value == "-40"


def test_positional_event_is_rejected() -> None:
    event = Event.positional("Balances", "Transfer", [account_id(ALICE), account_id(BOB), u128(1)])
    with pytest.raises(UnsupportedShape) as ei:
        build(event)
    assert ei.value.data["field"] == "Balances.Transfer"


def test_non_u128_amount_is_rejected() -> None:
    event = Event.from_fields("Balances", "Transfer", [("from", account_id(ALICE)), ("amount", "100")])
    with pytest.raises(UnsupportedShape) as ei:
        build(event)
    assert ei.value.data == {"field": "amount", "expected": "u128", "got": "string"}


def test_whole_batch_fails_on_one_bad_event() -> None:
    bad = Event.from_fields("Balances", "Transfer", [("from", u128(1))])
    with pytest.raises(UnsupportedShape):
        build(transfer(), bad)


def test_address_bytes_are_low_eight_bits() -> None:
    value = unnamed(unnamed(u128(0x1FF), u128(2)), named(("x", u128(3))))
    assert decode_address_components(value) == b"\xff\x02\x03"


@pytest.mark.parametrize(
    "value",
    [
        u128(5),
        named(("a", u128(1))),
        unnamed(u128(1), u128(2)),
        unnamed(unnamed(Primitive("string", "x"))),
    ],
)
def test_address_shapes_outside_the_byte_array_pattern_are_rejected(value) -> None:
    with pytest.raises(UnsupportedShape):
        decode_address_components(value, field="from")
