from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from diaggate.engine_core.types import GateSpec
from diaggate.errors import ConfigurationError
from diaggate.store import PropertyStore


def _is_set(name: Optional[str]) -> bool:
    return bool(name)


def if_passes(if_name: Optional[str], store: PropertyStore) -> bool:
    """True if there is no if condition, or the named property exists."""
    if not _is_set(if_name):
        return True
    return store.has(str(if_name))


def unless_passes(unless_name: Optional[str], store: PropertyStore) -> bool:
    """True if there is no unless condition, or the named property does not exist."""
    if not _is_set(unless_name):
        return True
    return not store.has(str(unless_name))


def guard_passes(if_name: Optional[str], unless_name: Optional[str], store: PropertyStore) -> bool:
    return if_passes(if_name, store) and unless_passes(unless_name, store)


class ConditionEvaluator:
    """
    Decides whether a gate fires.

    A gate uses either if/unless attributes or one nested condition, never both.
    """

    def evaluate(self, gate: GateSpec, store: PropertyStore) -> bool:
        if gate.nested_condition is not None:
            if _is_set(gate.if_name) or _is_set(gate.unless_name):
                raise ConfigurationError("nested condition may not be combined with if/unless")
            return gate.nested_condition.evaluate(store)
        return guard_passes(gate.if_name, gate.unless_name, store)


@dataclass(frozen=True)
class IsSet:
    """Leaf condition: the property exists."""

    property: str

    def evaluate(self, store: PropertyStore) -> bool:
        return store.has(self.property)


@dataclass(frozen=True)
class PropertyEquals:
    """Leaf condition: the property exists and equals `value`."""

    property: str
    value: str
    case_sensitive: bool = True

    def evaluate(self, store: PropertyStore) -> bool:
        actual = store.get(self.property)
        if actual is None:
            return False
        if self.case_sensitive:
            return actual == self.value
        return actual.casefold() == self.value.casefold()
