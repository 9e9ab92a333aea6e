from __future__ import annotations

from typing import Iterable, Mapping, Optional, Protocol


class PropertyStore(Protocol):
    """Read-only view of the build properties."""

    def has(self, name: str) -> bool:
        ...

    def get(self, name: str) -> Optional[str]:
        ...


class MappingPropertyStore:
    """PropertyStore over a plain mapping. The mapping is copied on construction."""

    __slots__ = ("_values",)

    def __init__(self, values: Optional[Mapping[str, str]] = None):
        self._values = {str(k): str(v) for k, v in dict(values or {}).items()}

    def has(self, name: str) -> bool:
        return name in self._values

    def get(self, name: str) -> Optional[str]:
        return self._values.get(name)

    def __repr__(self) -> str:
        return f"MappingPropertyStore({self._values!r})"


def parse_property_assignments(assignments: Iterable[str]) -> MappingPropertyStore:
    """
    Build a store from `KEY=VALUE` strings (CLI `-D` flags).
    A bare `KEY` defines the property with an empty value.
    """
    values = {}
    for raw in assignments:
        key, sep, value = str(raw).partition("=")
        key = key.strip()
        if not key:
            continue
        values[key] = value if sep else ""
    return MappingPropertyStore(values)
