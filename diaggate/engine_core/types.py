from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, Mapping, Optional, Protocol, Tuple

from diaggate.errors import AbortSignal, ConfigurationError
from diaggate.store import PropertyStore


class Severity(str, Enum):
    FATAL = "FATAL"
    ERROR = "ERROR"
    WARN = "WARN"
    INFO = "INFO"
    DEBUG = "DEBUG"

    @classmethod
    def parse(cls, value: Any) -> "Severity":
        text = str(value or "").strip().upper()
        if text == "WARNING":
            text = "WARN"
        try:
            return cls(text)
        except ValueError as exc:
            raise ConfigurationError(f"unknown severity: {value}") from exc


class OutcomeKind(str, Enum):
    NOOP = "NOOP"
    LOGGED = "LOGGED"
    ABORTED = "ABORTED"


class Condition(Protocol):
    def evaluate(self, store: PropertyStore) -> bool:
        ...


@dataclass(frozen=True)
class ConditionNode:
    """Slot for a single nested condition."""

    children: Tuple[Condition, ...] = ()

    def evaluate(self, store: PropertyStore) -> bool:
        if len(self.children) != 1:
            raise ConfigurationError("a single nested condition is required")
        return bool(self.children[0].evaluate(store))


@dataclass(frozen=True)
class GateSpec:
    if_name: Optional[str] = None
    unless_name: Optional[str] = None
    nested_condition: Optional[ConditionNode] = None


@dataclass(frozen=True)
class ParamSpec:
    name: str = ""
    value: str = ""
    if_name: Optional[str] = None
    unless_name: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return bool(self.name) and bool(self.value)


class ResolvedParameters(Mapping[str, str]):
    """Ordered, read-only parameter set handed to the message catalog."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Optional[Mapping[str, str]] = None):
        self._entries: Dict[str, str] = dict(entries or {})

    def __getitem__(self, key: str) -> str:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ResolvedParameters({self._entries!r})"


@dataclass(frozen=True)
class MessageRecord:
    id: str
    severity: Severity
    text: str


@dataclass(frozen=True)
class DispatchOutcome:
    kind: OutcomeKind
    record: Optional[MessageRecord] = None
    signal: Optional[AbortSignal] = field(default=None, compare=False)

    @property
    def severity(self) -> Optional[Severity]:
        return self.record.severity if self.record is not None else None

    @classmethod
    def noop(cls) -> "DispatchOutcome":
        return cls(kind=OutcomeKind.NOOP)

    @classmethod
    def logged(cls, record: MessageRecord) -> "DispatchOutcome":
        return cls(kind=OutcomeKind.LOGGED, record=record)

    @classmethod
    def aborted(cls, record: MessageRecord, signal: AbortSignal) -> "DispatchOutcome":
        return cls(kind=OutcomeKind.ABORTED, record=record, signal=signal)


def message_record_to_dict(value: MessageRecord) -> Dict[str, Any]:
    return {
        "id": value.id,
        "severity": value.severity.value,
        "text": value.text,
    }


def param_spec_to_dict(value: ParamSpec) -> Dict[str, Any]:
    return {
        "name": value.name,
        "value": value.value,
        "if": value.if_name,
        "unless": value.unless_name,
    }


def dispatch_outcome_to_dict(value: DispatchOutcome) -> Dict[str, Any]:
    return {
        "outcome": value.kind.value,
        "severity": value.severity.value if value.severity is not None else None,
        "record": message_record_to_dict(value.record) if value.record is not None else None,
        "abort": value.signal.to_dict() if value.signal is not None else None,
    }
