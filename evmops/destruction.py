"""
evmops.destruction — pending balance corrections for self-destructed accounts.

Within one transaction, value can still reach an account after it executed
SELFDESTRUCT; that value is wiped when the transaction ends. The ledger keeps,
per destroyed address, the amount that will vanish so the builder can emit a
catch-up DESTRUCT debit for it.

Lifecycle: one ledger per transaction. It is created empty when trace
operations start, mutated while entries are processed, and dropped afterwards.
It must never be shared between transactions or concurrent conversions.

Rules:
  * `mark_destroyed` is the only way an address becomes tracked; it resets
    the pending correction to zero.
  * `record_destination_adjustment` only affects tracked addresses: inflows
    increase the correction, outflows decrease it.
  * `clear` forgets an address (resurrection via CREATE/CREATE2).
  * `drain_nonzero` hands out positive corrections in first-tracked order and
    resets them to zero; the address stays tracked.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Set, Tuple

log = logging.getLogger(__name__)


class DestructionLedger:
    def __init__(self) -> None:
        self._pending: Dict[str, int] = {}
        self._reported_negative: Set[str] = set()

    def __contains__(self, address: object) -> bool:
        return address in self._pending

    def __len__(self) -> int:
        return len(self._pending)

    def __iter__(self) -> Iterator[Tuple[str, int]]:
        return iter(list(self._pending.items()))

    def pending(self, address: str) -> int:
        return self._pending.get(address, 0)

    def mark_destroyed(self, address: str) -> None:
        self._pending[address] = 0
        self._reported_negative.discard(address)

    def record_destination_adjustment(self, address: str, signed_delta: int) -> bool:
        """Apply `signed_delta` to a tracked address. Returns False if untracked."""
        if address not in self._pending:
            return False
        self._pending[address] += signed_delta
        return True

    def clear(self, address: str) -> None:
        self._pending.pop(address, None)
        self._reported_negative.discard(address)

    def drain_nonzero(self) -> List[Tuple[str, int]]:
        """
        Return (address, magnitude) for every positive pending correction and
        reset those corrections to zero.

        A negative correction means more left a destroyed account than ever
        reached it; it is left untouched and logged once per address until the
        address is destroyed again or cleared.
        """
        out: List[Tuple[str, int]] = []
        for address, amount in self._pending.items():
            if amount == 0:
                continue
            if amount < 0:
                if address in self._reported_negative:
                    continue
                self._reported_negative.add(address)
                log.warning(
                    "negative pending destruction correction skipped",
                    extra={"address": address, "pending": amount},
                )
                continue
            out.append((address, amount))
        for address, _ in out:
            self._pending[address] = 0
        return out


__all__ = ["DestructionLedger"]
