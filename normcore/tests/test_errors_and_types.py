from __future__ import annotations

import pytest

from normcore.errors import (ConfigError, IntegrityMismatch, NormalizationError,
                             PreconditionMissing, UnsupportedShape,
                             error_to_payload, require)
from normcore.types import (Amount, Currency, Operation, OperationStatus,
                            Transaction, next_index)

ETH = Currency(symbol="ETH", decimals=18)


# ---- errors ----


def test_precondition_missing_payload() -> None:
    err = PreconditionMissing("block has no author", field="author")
    assert err.code == "NORMALIZE/PRECONDITION_MISSING"
    assert err.to_dict() == {
        "code": "NORMALIZE/PRECONDITION_MISSING",
        "message": "block has no author",
        "data": {"field": "author"},
    }
    assert error_to_payload(err)["kind"] == "PRECONDITION_MISSING"


@pytest.mark.parametrize(
    "err, kind",
    [
        (IntegrityMismatch(expected="aa", actual="bb"), "INTEGRITY_MISMATCH"),
        (UnsupportedShape(field="amount", expected="u128", got="string"), "UNSUPPORTED_SHAPE"),
        (ConfigError(key="network"), "CONFIG"),
        (NormalizationError(), "ERROR"),
    ],
)
def test_error_payload_kinds(err: NormalizationError, kind: str) -> None:
    payload = error_to_payload(err)
    assert payload["kind"] == kind
    assert payload["error"]["code"] == err.code


def test_error_data_merges_explicit_data_first() -> None:
    err = IntegrityMismatch("hash mismatch", expected="aa", data={"expected": "zz", "block": 5})
    assert err.data == {"expected": "zz", "block": 5}


def test_errors_without_details_have_no_data() -> None:
    assert "data" not in PreconditionMissing().to_dict()


def test_errors_are_exceptions() -> None:
    with pytest.raises(NormalizationError):
        raise UnsupportedShape("bad")


def test_require() -> None:
    assert require(0, "unused", field="gas_used") == 0
    with pytest.raises(PreconditionMissing) as ei:
        require(None, "missing gas used", field="gas_used")
    assert ei.value.message == "missing gas used"
    assert ei.value.data == {"field": "gas_used"}


# ---- operation model ----


def test_amount_sign_convention() -> None:
    assert Amount.debit(0, ETH).value == "-0"
    assert Amount.debit(0, ETH).is_debit
    assert Amount.debit(0, ETH).magnitude == 0
    assert Amount.credit(15, ETH).value == "15"
    assert not Amount.credit(15, ETH).is_debit


def test_operation_to_dict_omits_absent_fields() -> None:
    assert Operation(index=4, kind="Balances.Deposit").to_dict() == {
        "operation_identifier": {"index": 4},
        "type": "Balances.Deposit",
    }


def test_operation_to_dict_full() -> None:
    op = Operation(
        index=1,
        kind="CALL",
        related_indices=(0,),
        status=OperationStatus.FAILURE,
        account="0xabc",
        amount=Amount.credit(5, ETH),
        metadata={"error": "reverted"},
    )
    assert op.to_dict() == {
        "operation_identifier": {"index": 1},
        "related_operations": [{"index": 0}],
        "type": "CALL",
        "status": "FAILURE",
        "account": {"address": "0xabc"},
        "amount": {"value": "5", "currency": {"symbol": "ETH", "decimals": 18}},
        "metadata": {"error": "reverted"},
    }


def test_transaction_to_dict_and_next_index() -> None:
    ops = (Operation(index=0, kind="FEE"), Operation(index=1, kind="FEE"))
    tx = Transaction(hash="ab", operations=ops, metadata={"gas_limit": 21000})
    assert tx.to_dict() == {
        "transaction_identifier": {"hash": "ab"},
        "operations": [op.to_dict() for op in ops],
        "metadata": {"gas_limit": 21000},
    }
    assert next_index([], default=7) == 7
    assert next_index(ops) == 2
    assert Transaction(hash="cd").to_dict()["operations"] == []


def test_status_helpers() -> None:
    assert OperationStatus.SUCCESS.is_success
    assert not OperationStatus.FAILURE.is_success
    assert str(OperationStatus.FAILURE) == "FAILURE"
