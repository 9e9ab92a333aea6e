from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from diaggate.engine_core.types import MessageRecord


class DiaggateError(Exception):
    """Base class for errors raised by diaggate."""


class ConfigurationError(DiaggateError, ValueError):
    """Raised when a gate, parameter or catalog is configured incorrectly."""


@dataclass(frozen=True)
class DiagnosticCause:
    """
    Structured cause attached to an abort.

    Keeps the diagnostic that triggered the abort together with any failure
    raised by the abort hook while the abort was being carried out.
    """

    record: "MessageRecord"
    secondary: Optional[BaseException] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.record.id,
            "severity": self.record.severity.value,
            "text": self.record.text,
        }
        if self.secondary is not None:
            payload["secondary"] = {
                "type": type(self.secondary).__name__,
                "message": str(self.secondary),
            }
        return payload


class AbortSignal(DiaggateError):
    """
    Terminates the calling pipeline.

    `str(signal)` is always the rendered diagnostic text; `cause` carries the
    diagnostic and a secondary failure, if one happened while aborting.
    `status` is the exit status requested for the pipeline, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        cause: Optional[DiagnosticCause] = None,
        status: Optional[int] = None,
    ):
        self.message = str(message)
        self.cause = cause
        self.status = status
        super().__init__(self.message)
        if cause is not None and cause.secondary is not None:
            self.__cause__ = cause.secondary

    @property
    def secondary(self) -> Optional[BaseException]:
        return self.cause.secondary if self.cause is not None else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "status": self.status,
            "cause": self.cause.to_dict() if self.cause is not None else None,
        }
