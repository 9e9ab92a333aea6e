from diaggate.engine_core.conditions import (
    ConditionEvaluator,
    IsSet,
    PropertyEquals,
    guard_passes,
)
from diaggate.engine_core.dispatch import DispatchEngine
from diaggate.engine_core.parameters import ParameterResolver, parse_legacy_params
from diaggate.engine_core.types import (
    ConditionNode,
    DispatchOutcome,
    GateSpec,
    MessageRecord,
    OutcomeKind,
    ParamSpec,
    ResolvedParameters,
    Severity,
    dispatch_outcome_to_dict,
    message_record_to_dict,
)

__all__ = [
    "ConditionEvaluator",
    "ConditionNode",
    "DispatchEngine",
    "DispatchOutcome",
    "GateSpec",
    "IsSet",
    "MessageRecord",
    "OutcomeKind",
    "ParamSpec",
    "ParameterResolver",
    "PropertyEquals",
    "ResolvedParameters",
    "Severity",
    "dispatch_outcome_to_dict",
    "guard_passes",
    "message_record_to_dict",
    "parse_legacy_params",
]
