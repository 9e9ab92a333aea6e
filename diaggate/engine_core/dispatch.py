from __future__ import annotations

import logging
from typing import Callable, Mapping, Optional, Protocol, Sequence

from diaggate.engine_core.conditions import ConditionEvaluator
from diaggate.engine_core.parameters import ParameterResolver
from diaggate.engine_core.types import (
    DispatchOutcome,
    GateSpec,
    MessageRecord,
    OutcomeKind,
    ParamSpec,
    ResolvedParameters,
    Severity,
)
from diaggate.errors import AbortSignal, ConfigurationError, DiagnosticCause
from diaggate.logsink import DiagnosticLogger
from diaggate.store import PropertyStore


logger = logging.getLogger(__name__)

_LOGGED_SEVERITIES = (Severity.ERROR, Severity.WARN, Severity.INFO, Severity.DEBUG)

AbortHook = Callable[[MessageRecord], None]


class MessageResolver(Protocol):
    def resolve(self, message_id: str, parameters: Mapping[str, str]) -> Optional[MessageRecord]:
        ...


class DispatchEngine:
    """
    Condition-gated diagnostic dispatch.

    - Gate not firing, or no catalog entry for the id: no-op.
    - FATAL: abort (the signal is returned in the outcome, `run` raises it).
    - Any other severity: logged once through the sink, execution continues.

    `status` is an optional exit status attached to the abort.

    `on_abort` is called with the record right before a FATAL outcome is
    produced. If it raises, that failure is kept as the secondary cause of
    the abort instead of replacing it.
    """

    def __init__(
        self,
        catalog: Optional[MessageResolver],
        sink: DiagnosticLogger,
        *,
        evaluator: Optional[ConditionEvaluator] = None,
        resolver: Optional[ParameterResolver] = None,
        on_abort: Optional[AbortHook] = None,
    ):
        self.catalog = catalog
        self.sink = sink
        self.evaluator = evaluator or ConditionEvaluator()
        self.resolver = resolver or ParameterResolver()
        self.on_abort = on_abort

    def dispatch(
        self,
        gate: GateSpec,
        message_id: Optional[str],
        *,
        store: PropertyStore,
        static_params: Optional[Mapping[str, str]] = None,
        param_specs: Sequence[ParamSpec] = (),
        catalog: Optional[MessageResolver] = None,
        status: Optional[int] = None,
    ) -> DispatchOutcome:
        if not self.evaluator.evaluate(gate, store):
            logger.debug("gate not triggered: id=%s", message_id)
            return DispatchOutcome.noop()

        if not message_id:
            raise ConfigurationError("id must be specified")

        params = self.resolver.resolve(static_params, param_specs, store)

        active_catalog = catalog if catalog is not None else self.catalog
        if active_catalog is None:
            raise ConfigurationError("no message catalog configured")
        record = active_catalog.resolve(message_id, params)
        if record is None:
            logger.debug("no catalog entry: id=%s", message_id, extra={"diagnostic_id": message_id})
            return DispatchOutcome.noop()

        return self._dispatch_record(record, params, status)

    def run(
        self,
        gate: GateSpec,
        message_id: Optional[str],
        *,
        store: PropertyStore,
        static_params: Optional[Mapping[str, str]] = None,
        param_specs: Sequence[ParamSpec] = (),
        catalog: Optional[MessageResolver] = None,
        status: Optional[int] = None,
    ) -> DispatchOutcome:
        """Like `dispatch`, but raises the AbortSignal of an aborted outcome."""
        outcome = self.dispatch(
            gate,
            message_id,
            store=store,
            static_params=static_params,
            param_specs=param_specs,
            catalog=catalog,
            status=status,
        )
        if outcome.kind == OutcomeKind.ABORTED and outcome.signal is not None:
            raise outcome.signal
        return outcome

    def _dispatch_record(
        self, record: MessageRecord, params: ResolvedParameters, status: Optional[int]
    ) -> DispatchOutcome:
        severity = record.severity
        if severity == Severity.FATAL:
            logger.debug(
                "aborting: id=%s params=%d status=%s",
                record.id,
                len(params),
                status,
                extra={"diagnostic_id": record.id, "diagnostic_severity": severity.value},
            )
            return DispatchOutcome.aborted(record, self._abort_signal(record, status))
        if severity in _LOGGED_SEVERITIES:
            self.sink.log_at(severity, record.text)
            return DispatchOutcome.logged(record)
        raise ConfigurationError(f"unhandled severity: {severity}")

    def _abort_signal(self, record: MessageRecord, status: Optional[int]) -> AbortSignal:
        if self.on_abort is not None:
            try:
                self.on_abort(record)
            except Exception as exc:
                return AbortSignal(
                    record.text,
                    cause=DiagnosticCause(record=record, secondary=exc),
                    status=status,
                )
        return AbortSignal(record.text, cause=DiagnosticCause(record=record), status=status)
