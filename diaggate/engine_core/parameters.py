from __future__ import annotations

from typing import Dict, Mapping, Optional, Sequence

from diaggate.config import PARAM_PREFIX
from diaggate.engine_core.conditions import guard_passes
from diaggate.engine_core.types import ParamSpec, ResolvedParameters
from diaggate.errors import ConfigurationError
from diaggate.store import PropertyStore


def parse_legacy_params(params: Optional[str]) -> Dict[str, str]:
    """
    Parse the deprecated `key=value;key2=value2` parameter string.
    Empty tokens are skipped; values may themselves contain `=`.
    """
    out: Dict[str, str] = {}
    if not params:
        return out
    for token in str(params).split(";"):
        if not token:
            continue
        key, sep, value = token.partition("=")
        if not sep:
            raise ConfigurationError(f"malformed parameter (expected key=value): {token}")
        out[key] = value
    return out


class ParameterResolver:
    def __init__(self, prefix: str = PARAM_PREFIX):
        self.prefix = prefix

    def resolve(
        self,
        static_params: Optional[Mapping[str, str]],
        param_specs: Sequence[ParamSpec],
        store: PropertyStore,
    ) -> ResolvedParameters:
        entries: Dict[str, str] = dict(static_params or {})
        for spec in param_specs:
            if not spec.is_valid:
                raise ConfigurationError("incomplete parameter")
            if guard_passes(spec.if_name, spec.unless_name, store):
                entries[self.prefix + spec.name] = spec.value
        return ResolvedParameters(entries)
