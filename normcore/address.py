"""
normcore.address — contracts for the address collaborator.

The normalizer never encodes addresses itself. Builders receive a formatter that
renders raw address bytes in the chain's display form (EIP-55 checksum hex,
SS58, ...). Chain families ship their own formatters; `hex_address` is the
neutral default used where no checksum scheme applies.
"""

from __future__ import annotations

from typing import Callable, Union

BytesLike = Union[bytes, bytearray, memoryview]

AddressFormatter = Callable[[bytes], str]


def hex_address(raw: BytesLike) -> str:
    """Lower-case 0x-prefixed hex rendering of raw address bytes."""
    if not isinstance(raw, (bytes, bytearray, memoryview)):
        raise TypeError("hex_address expects bytes-like input")
    return "0x" + bytes(raw).hex()


def format_optional(raw: BytesLike | None, format_address: AddressFormatter) -> str:
    """Format `raw`, rendering an absent or empty address as the empty string."""
    if not raw:
        return ""
    return format_address(bytes(raw))


__all__ = ["AddressFormatter", "BytesLike", "hex_address", "format_optional"]
