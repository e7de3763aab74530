"""
eventops.values — decoded event values.

Events of pallet-based ledgers arrive already decoded against the runtime
metadata. Each value is one of:

* `Primitive`        — a scalar with its type tag ("u128", "i128", "bool",
                       "string", "char", "u256", "i256")
* `NamedComposite`   — ordered (name, value) pairs (struct-like)
* `UnnamedComposite` — ordered values (tuple/array-like)
* `Variant`          — an enum variant name with a composite payload

Unsigned integers of any width are carried as "u128", matching how the
metadata-driven decoder represents them.

`decode_value` lifts plain Python/JSON data into this model:
dict → NamedComposite, list/tuple → UnnamedComposite, {"variant": name,
"fields": ...} → Variant, ints → "u128"/"i128"/"u256"/"i256", bool → "bool",
str → "string", bytes → UnnamedComposite of "u128" bytes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping, Tuple, Union

U128_MAX = 2**128 - 1


@dataclass(frozen=True)
class Primitive:
    kind: str
    value: Any

    def __repr__(self) -> str:
        return f"{self.kind}({self.value!r})"


@dataclass(frozen=True)
class NamedComposite:
    fields: Tuple[Tuple[str, "Value"], ...] = field(default_factory=tuple)

    def values(self) -> Iterator["Value"]:
        return (v for _, v in self.fields)

    def __len__(self) -> int:
        return len(self.fields)


@dataclass(frozen=True)
class UnnamedComposite:
    items: Tuple["Value", ...] = field(default_factory=tuple)

    def values(self) -> Iterator["Value"]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class Variant:
    name: str
    payload: Union[NamedComposite, UnnamedComposite] = field(default_factory=UnnamedComposite)


Composite = Union[NamedComposite, UnnamedComposite]
Value = Union[Primitive, NamedComposite, UnnamedComposite, Variant]


def u128(n: int) -> Primitive:
    if not 0 <= n <= U128_MAX:
        raise ValueError(f"u128 out of range: {n}")
    return Primitive("u128", n)


def named(*pairs: Tuple[str, Value]) -> NamedComposite:
    return NamedComposite(fields=tuple(pairs))


def unnamed(*items: Value) -> UnnamedComposite:
    return UnnamedComposite(items=tuple(items))


def account_id(raw: bytes) -> UnnamedComposite:
    """The decoded shape of a 32-byte AccountId: a newtype around a byte array."""
    return unnamed(unnamed(*(u128(b) for b in raw)))


def _decode_int(n: int) -> Primitive:
    if 0 <= n <= U128_MAX:
        return Primitive("u128", n)
    if n < 0 and n >= -(2**127):
        return Primitive("i128", n)
    if n >= 0:
        return Primitive("u256", n)
    return Primitive("i256", n)


def decode_value(obj: Any) -> Value:
    """Lift plain Python/JSON data into the decoded value model."""
    if isinstance(obj, (Primitive, NamedComposite, UnnamedComposite, Variant)):
        return obj
    if isinstance(obj, bool):
        return Primitive("bool", obj)
    if isinstance(obj, int):
        return _decode_int(obj)
    if isinstance(obj, str):
        return Primitive("string", obj)
    if isinstance(obj, (bytes, bytearray)):
        return unnamed(*(u128(b) for b in obj))
    if isinstance(obj, Mapping):
        if set(obj) == {"variant", "fields"}:
            payload = decode_value(obj["fields"])
            if not isinstance(payload, (NamedComposite, UnnamedComposite)):
                raise TypeError("variant fields must be a mapping or a sequence")
            return Variant(name=str(obj["variant"]), payload=payload)
        return NamedComposite(fields=tuple((str(k), decode_value(v)) for k, v in obj.items()))
    if isinstance(obj, (list, tuple)):
        return UnnamedComposite(items=tuple(decode_value(v) for v in obj))
    raise TypeError(f"cannot decode value of type {type(obj).__name__}")


__all__ = [
    "Primitive",
    "NamedComposite",
    "UnnamedComposite",
    "Variant",
    "Composite",
    "Value",
    "U128_MAX",
    "u128",
    "named",
    "unnamed",
    "account_id",
    "decode_value",
]
