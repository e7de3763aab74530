"""
normcore.errors — normalization failures surfaced to the calling layer.

Every builder communicates failure via *typed exceptions*; the API layer above
converts them into structured error payloads. All failures are terminal for the
unit of work (one transaction or one block): nothing here is retried, defaulted,
or turned into a partial result.

Hierarchy
---------
NormalizationError (base)
 ├─ PreconditionMissing : required chain-data field absent (author, base fee,
 │                        gas price, gas used, trace, event shape)
 ├─ IntegrityMismatch   : inputs disagree with each other (receipt block hash
 │                        differs from the block being processed)
 ├─ UnsupportedShape    : decoded event value does not have the expected
 │                        primitive/composite shape
 └─ ConfigError         : invalid network configuration

These classes intentionally avoid importing other normcore modules so they can
be used from every layer without cycles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class NormalizationError(Exception):
    """
    Base normalization error.

    Attributes:
        message: Human-readable explanation.
        code:    Stable machine code string (e.g., 'NORMALIZE/PRECONDITION_MISSING').
        data:    Optional structured details (kept JSON-serializable).
    """
    message: str = "normalization error"
    code: str = "NORMALIZE/ERROR"
    data: Optional[Dict[str, Any]] = field(default=None)

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.data:
            return f"{self.code}: {self.message} ({self.data})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dict for logs and API errors."""
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


def _merge(data: Optional[Dict[str, Any]], **fields: Any) -> Optional[Dict[str, Any]]:
    d: Dict[str, Any] = {}
    if data:
        d.update(data)
    for k, v in fields.items():
        if v is not None:
            d.setdefault(k, v)
    return d or None


class PreconditionMissing(NormalizationError):
    """
    A field the conversion cannot proceed without is absent.

    Usage:
        raise PreconditionMissing("block has no author", field="author")
    """
    def __init__(
        self,
        message: str = "precondition missing",
        *,
        field: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            code="NORMALIZE/PRECONDITION_MISSING",
            data=_merge(data, field=field),
        )


class IntegrityMismatch(NormalizationError):
    """
    Inputs that must agree do not, e.g. a receipt fetched for another block.
    """
    def __init__(
        self,
        message: str = "integrity mismatch",
        *,
        expected: Optional[str] = None,
        actual: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            code="NORMALIZE/INTEGRITY_MISMATCH",
            data=_merge(data, expected=expected, actual=actual),
        )


class UnsupportedShape(NormalizationError):
    """
    A decoded value does not match the shape the extractor understands.

    Examples:
      - event fields given positionally instead of by name
      - an `amount` field that is not an unsigned 128-bit primitive
      - an address field that does not decompose into a byte sequence
    """
    def __init__(
        self,
        message: str = "unsupported shape",
        *,
        field: Optional[str] = None,
        expected: Optional[str] = None,
        got: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            code="NORMALIZE/UNSUPPORTED_SHAPE",
            data=_merge(data, field=field, expected=expected, got=got),
        )


class ConfigError(NormalizationError):
    """Network configuration is missing, malformed or internally inconsistent."""
    def __init__(
        self,
        message: str = "invalid configuration",
        *,
        key: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            code="NORMALIZE/CONFIG",
            data=_merge(data, key=key),
        )


# -------- helper utilities ---------------------------------------------------


def error_to_payload(err: NormalizationError) -> Dict[str, Any]:
    """
    Map a NormalizationError to the payload the API layer reports.

    Returns:
        {
          "kind":  "PRECONDITION_MISSING" | "INTEGRITY_MISMATCH" | "UNSUPPORTED_SHAPE" | "CONFIG" | "ERROR",
          "error": {code, message, data?}
        }
    """
    if isinstance(err, PreconditionMissing):
        kind = "PRECONDITION_MISSING"
    elif isinstance(err, IntegrityMismatch):
        kind = "INTEGRITY_MISMATCH"
    elif isinstance(err, UnsupportedShape):
        kind = "UNSUPPORTED_SHAPE"
    elif isinstance(err, ConfigError):
        kind = "CONFIG"
    else:
        kind = "ERROR"
    return {"kind": kind, "error": err.to_dict()}


def require(value: Any, message: str, *, field: str) -> Any:
    """Return `value` unless it is None, in which case raise PreconditionMissing."""
    if value is None:
        raise PreconditionMissing(message, field=field)
    return value


__all__ = [
    "NormalizationError",
    "PreconditionMissing",
    "IntegrityMismatch",
    "UnsupportedShape",
    "ConfigError",
    "error_to_payload",
    "require",
]
