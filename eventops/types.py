"""
eventops.types — a decoded ledger event.

An `Event` is identified by its pallet and variant name and carries its decoded
fields as a composite value. Events with named fields (struct-like variants)
are the only shape the extractor understands; positional fields are kept so
the extractor can reject them explicitly.

`field_types` mirrors the runtime metadata's field descriptors (name and type
name) and ends up verbatim in operation metadata as `[{"name", "type"}]`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .values import Composite, NamedComposite, UnnamedComposite, decode_value


@dataclass(frozen=True)
class FieldType:
    name: Optional[str]
    type_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "type": self.type_name}


@dataclass(frozen=True)
class Event:
    pallet: str
    variant: str
    fields: Composite = field(default_factory=NamedComposite)
    field_types: Tuple[FieldType, ...] = field(default_factory=tuple)

    @property
    def kind(self) -> str:
        return f"{self.pallet}.{self.variant}"

    def field_metadata(self) -> List[Dict[str, Any]]:
        return [ft.to_dict() for ft in self.field_types]

    @classmethod
    def from_fields(
        cls,
        pallet: str,
        variant: str,
        fields: Mapping[str, Any] | Sequence[Tuple[str, Any]],
        type_names: Optional[Mapping[str, str]] = None,
    ) -> "Event":
        """
        Build a named-field event from (name, value) pairs or a mapping.
        Values are lifted with `decode_value`; `type_names` fills `field_types`.
        """
        pairs = list(fields.items()) if isinstance(fields, Mapping) else list(fields)
        type_names = type_names or {}
        return cls(
            pallet=pallet,
            variant=variant,
            fields=NamedComposite(fields=tuple((n, decode_value(v)) for n, v in pairs)),
            field_types=tuple(FieldType(n, type_names.get(n)) for n, _ in pairs),
        )

    @classmethod
    def positional(cls, pallet: str, variant: str, values: Sequence[Any]) -> "Event":
        return cls(
            pallet=pallet,
            variant=variant,
            fields=UnnamedComposite(items=tuple(decode_value(v) for v in values)),
            field_types=tuple(FieldType(None) for _ in values),
        )


__all__ = ["FieldType", "Event"]
