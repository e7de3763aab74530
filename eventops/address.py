"""
eventops.address — recover raw account bytes from a decoded address value.

An account id decodes as a newtype around a byte array: an unnamed composite
whose members are composites of unsigned integers. The bytes are the integers
in order, each truncated to its low 8 bits. Anything else is rejected with
`UnsupportedShape`.

Rendering the bytes (SS58 or otherwise) is the address formatter's job.
"""

from __future__ import annotations

from normcore.errors import UnsupportedShape

from .values import NamedComposite, Primitive, UnnamedComposite, Value


def decode_address_components(value: Value, *, field: str = "address") -> bytes:
    if not isinstance(value, UnnamedComposite):
        raise UnsupportedShape(
            "address value is not an unnamed composite",
            field=field,
            expected="unnamed composite",
            got=type(value).__name__,
        )
    out = bytearray()
    for member in value.values():
        if not isinstance(member, (NamedComposite, UnnamedComposite)):
            raise UnsupportedShape(
                "address member is not a composite",
                field=field,
                expected="composite",
                got=type(member).__name__,
            )
        for item in member.values():
            if not (isinstance(item, Primitive) and item.kind == "u128"):
                raise UnsupportedShape(
                    "address byte is not an unsigned primitive",
                    field=field,
                    expected="u128",
                    got=getattr(item, "kind", type(item).__name__),
                )
            out.append(int(item.value) & 0xFF)
    return bytes(out)


__all__ = ["decode_address_components"]
