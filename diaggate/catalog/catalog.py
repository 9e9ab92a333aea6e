from __future__ import annotations

import re
from typing import Dict, Iterable, List, Mapping, Optional

from diaggate.config import PARAM_PREFIX, UNRESOLVED_PLACEHOLDER_MODES, get_unresolved_placeholder_mode
from diaggate.engine_core.types import MessageRecord, Severity
from diaggate.errors import ConfigurationError

from .models import MessageTemplate


_PLACEHOLDER_RE = re.compile(re.escape(PARAM_PREFIX) + r"([A-Za-z0-9_]+)")


def render_template(text: str, parameters: Mapping[str, str], *, unresolved: str = "literal") -> str:
    """
    Substitute `%name` placeholders from `parameters` (keys include the prefix).

    Placeholders with no matching parameter are kept verbatim in `literal`
    mode and dropped in `empty` mode. A placeholder is the longest run of
    word characters after the prefix, so `%10` never matches a `%1` key, and
    keys without the prefix are never substituted.
    """

    def _replace(match: "re.Match[str]") -> str:
        value = parameters.get(match.group(0))
        if value is not None:
            return str(value)
        return "" if unresolved == "empty" else match.group(0)

    return _PLACEHOLDER_RE.sub(_replace, text)


class MessageCatalog:
    def __init__(self, templates: Iterable[MessageTemplate] = (), *, unresolved: Optional[str] = None):
        mode = unresolved or get_unresolved_placeholder_mode()
        if mode not in UNRESOLVED_PLACEHOLDER_MODES:
            raise ConfigurationError(f"unknown unresolved placeholder mode: {unresolved}")
        self.unresolved = mode
        self._templates: Dict[str, MessageTemplate] = {}
        for template in templates:
            if template.id in self._templates:
                raise ConfigurationError(f"duplicate message id: {template.id}")
            self._templates[template.id] = template

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    def ids(self) -> List[str]:
        return sorted(self._templates)

    def template(self, message_id: str) -> Optional[MessageTemplate]:
        return self._templates.get(message_id)

    def resolve(self, message_id: str, parameters: Mapping[str, str]) -> Optional[MessageRecord]:
        template = self._templates.get(message_id)
        if template is None:
            return None
        return MessageRecord(
            id=template.id,
            severity=Severity.parse(template.severity),
            text=render_template(template.text, parameters, unresolved=self.unresolved),
        )
