"""
Invocation documents: the external configuration of one dispatch.

    id: DOTA001F
    if: build.strict            # or `unless:`, or a `condition:` block
    params: "%1=foo;%2=bar"     # deprecated, use `param`
    status: 3                   # exit status when the message is FATAL
    param:
      - name: "1"
        value: html5
        unless: skip.format
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from diaggate.engine_core.conditions import IsSet, PropertyEquals
from diaggate.engine_core.parameters import parse_legacy_params
from diaggate.engine_core.types import Condition, ConditionNode, GateSpec, ParamSpec
from diaggate.errors import ConfigurationError


class EqualsConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    property: str
    value: str
    casesensitive: bool = True


class ConditionConfig(BaseModel):
    """Nested condition slot. Exactly one leaf is expected; the engine enforces it."""
    model_config = ConfigDict(extra="forbid")

    isset: Optional[str] = None
    equals: Optional[EqualsConfig] = None

    def to_node(self) -> ConditionNode:
        children: List[Condition] = []
        if self.isset is not None:
            children.append(IsSet(property=self.isset))
        if self.equals is not None:
            children.append(
                PropertyEquals(
                    property=self.equals.property,
                    value=self.equals.value,
                    case_sensitive=self.equals.casesensitive,
                )
            )
        return ConditionNode(children=tuple(children))


class ParamConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str = ""
    value: str = ""
    if_name: Optional[str] = Field(default=None, alias="if")
    unless_name: Optional[str] = Field(default=None, alias="unless")

    def to_spec(self) -> ParamSpec:
        return ParamSpec(
            name=self.name,
            value=self.value,
            if_name=self.if_name,
            unless_name=self.unless_name,
        )


class Invocation(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    id: Optional[str] = None
    if_name: Optional[str] = Field(default=None, alias="if")
    unless_name: Optional[str] = Field(default=None, alias="unless")
    condition: Optional[ConditionConfig] = None
    params: Optional[str] = None
    param: List[ParamConfig] = Field(default_factory=list)
    status: Optional[int] = None

    def gate(self) -> GateSpec:
        return GateSpec(
            if_name=self.if_name,
            unless_name=self.unless_name,
            nested_condition=self.condition.to_node() if self.condition is not None else None,
        )

    def param_specs(self) -> Tuple[ParamSpec, ...]:
        return tuple(item.to_spec() for item in self.param)

    def static_params(self) -> Dict[str, str]:
        return parse_legacy_params(self.params)


def parse_invocation(data: Dict) -> Invocation:
    try:
        return Invocation(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid invocation: {e}") from e


def load_invocation(path: str) -> Invocation:
    file_path = Path(path)
    try:
        raw = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Failed to read invocation {file_path}: {e}") from e
    try:
        if file_path.suffix == ".json":
            data = json.loads(raw)
        else:
            data = yaml.safe_load(raw)
    except (ValueError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to parse invocation {file_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Invocation {file_path} must be a mapping")
    return parse_invocation(data)
