"""
evmops.address — EIP-55 address formatting for EVM operations.

Checksumming is delegated to `eth_utils`; this module only adapts it to the
`AddressFormatter` contract (raw bytes in, display string out).
"""

from __future__ import annotations

from eth_utils import to_checksum_address

from normcore.address import BytesLike

ADDRESS_LENGTH = 20


def checksum_address(raw: BytesLike) -> str:
    """Render a 20-byte address in EIP-55 mixed-case checksum form."""
    b = bytes(raw)
    if len(b) != ADDRESS_LENGTH:
        raise ValueError(f"EVM address must be {ADDRESS_LENGTH} bytes, got {len(b)}")
    return to_checksum_address(b)


__all__ = ["ADDRESS_LENGTH", "checksum_address"]
