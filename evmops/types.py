"""
evmops.types — immutable chain-data snapshots consumed by the EVM builders.

The fetch layer hands over JSON-RPC objects (`eth_getBlockByNumber`,
`eth_getTransactionReceipt`, `eth_getUncleByBlockHashAndIndex`, ...). The
`from_rpc` constructors lift them into small frozen dataclasses:

* quantities (`0x…` hex, decimal strings or ints) become ints
* addresses and hashes become raw bytes
* absent fields stay `None`; the builders decide which ones are required and
  raise `PreconditionMissing` themselves

Operation kinds emitted by this package are defined here as well.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple, Union

FEE_OP_TYPE = "FEE"
CALL_OP_TYPE = "CALL"
CREATE_OP_TYPE = "CREATE"
CREATE2_OP_TYPE = "CREATE2"
SELF_DESTRUCT_OP_TYPE = "SELFDESTRUCT"
DESTRUCT_OP_TYPE = "DESTRUCT"
MINING_REWARD_OP_TYPE = "MINER_REWARD"
UNCLE_REWARD_OP_TYPE = "UNCLE_REWARD"

CREATE_OP_TYPES = frozenset((CREATE_OP_TYPE, CREATE2_OP_TYPE))

HexLike = Union[str, bytes, bytearray, memoryview]


# ----------------------------------------------------------------------------
# Parsing helpers
# ----------------------------------------------------------------------------


def to_bytes(v: Optional[HexLike]) -> Optional[bytes]:
    """Hex string (with or without 0x) or bytes-like → bytes; None passes through."""
    if v is None:
        return None
    if isinstance(v, (bytes, bytearray, memoryview)):
        return bytes(v)
    if isinstance(v, str):
        s = v.strip()
        if s.startswith(("0x", "0X")):
            s = s[2:]
        if len(s) % 2:
            s = "0" + s
        try:
            return bytes.fromhex(s)
        except ValueError as e:
            raise ValueError(f"invalid hex string: {v!r}") from e
    raise TypeError(f"expected hex-like value, got {type(v).__name__}")


def to_quantity(v: Optional[Union[int, str]]) -> Optional[int]:
    """JSON-RPC quantity (0x-hex string, decimal string or int) → int."""
    if v is None:
        return None
    if isinstance(v, bool):
        raise TypeError("quantity must not be a bool")
    if isinstance(v, int):
        return v
    if isinstance(v, str):
        s = v.strip()
        if s.startswith(("0x", "0X")):
            return int(s[2:] or "0", 16)
        return int(s, 10)
    raise TypeError(f"expected quantity, got {type(v).__name__}")


def _get(obj: Mapping[str, Any], *names: str) -> Any:
    """Return the first present key in `names` (camelCase or snake_case)."""
    for n in names:
        if n in obj:
            return obj[n]
    return None


# ----------------------------------------------------------------------------
# Snapshots
# ----------------------------------------------------------------------------


@dataclass(frozen=True)
class Uncle:
    number: Optional[int] = None
    author: Optional[bytes] = None

    @classmethod
    def from_rpc(cls, obj: Mapping[str, Any]) -> "Uncle":
        return cls(
            number=to_quantity(_get(obj, "number")),
            author=to_bytes(_get(obj, "author", "miner")),
        )


@dataclass(frozen=True)
class Block:
    """
    Block header fields the builders read.

    `uncles` holds the uncle hashes as listed in the block; the uncle headers
    themselves are fetched by the caller and passed to the reward builder.
    """

    number: Optional[int] = None
    hash: Optional[bytes] = None
    author: Optional[bytes] = None
    base_fee: Optional[int] = None
    uncles: Tuple[bytes, ...] = field(default_factory=tuple)

    @classmethod
    def from_rpc(cls, obj: Mapping[str, Any]) -> "Block":
        return cls(
            number=to_quantity(_get(obj, "number")),
            hash=to_bytes(_get(obj, "hash")),
            author=to_bytes(_get(obj, "author", "miner")),
            base_fee=to_quantity(_get(obj, "baseFeePerGas", "base_fee_per_gas", "base_fee")),
            uncles=tuple(to_bytes(u) for u in (_get(obj, "uncles") or ())),
        )


@dataclass(frozen=True)
class EvmTransaction:
    hash: bytes
    sender: bytes
    gas: Optional[int] = None
    gas_price: Optional[int] = None
    priority_fee: Optional[int] = None
    tx_type: Optional[int] = None

    @classmethod
    def from_rpc(cls, obj: Mapping[str, Any]) -> "EvmTransaction":
        return cls(
            hash=to_bytes(_get(obj, "hash")) or b"",
            sender=to_bytes(_get(obj, "from", "sender")) or b"",
            gas=to_quantity(_get(obj, "gas")),
            gas_price=to_quantity(_get(obj, "gasPrice", "gas_price")),
            priority_fee=to_quantity(
                _get(obj, "maxPriorityFeePerGas", "max_priority_fee_per_gas", "priority_fee")
            ),
            tx_type=to_quantity(_get(obj, "type", "transaction_type", "tx_type")),
        )


@dataclass(frozen=True)
class Receipt:
    block_hash: Optional[bytes] = None
    gas_used: Optional[int] = None
    raw: Optional[Mapping[str, Any]] = field(default=None, compare=False)

    @classmethod
    def from_rpc(cls, obj: Mapping[str, Any]) -> "Receipt":
        return cls(
            block_hash=to_bytes(_get(obj, "blockHash", "block_hash")),
            gas_used=to_quantity(_get(obj, "gasUsed", "gas_used")),
            raw=dict(obj),
        )


__all__ = [
    "FEE_OP_TYPE",
    "CALL_OP_TYPE",
    "CREATE_OP_TYPE",
    "CREATE2_OP_TYPE",
    "CREATE_OP_TYPES",
    "SELF_DESTRUCT_OP_TYPE",
    "DESTRUCT_OP_TYPE",
    "MINING_REWARD_OP_TYPE",
    "UNCLE_REWARD_OP_TYPE",
    "Block",
    "Uncle",
    "EvmTransaction",
    "Receipt",
    "to_bytes",
    "to_quantity",
]
