from __future__ import annotations

from typing import Iterable, List
from xml.sax.saxutils import escape

_ATTR_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def _escape_xml(value: str) -> str:
    return escape(str(value), _ATTR_ENTITIES)


def transtype_check_fragment(values: Iterable[str], property_name: str = "transtype") -> str:
    """
    Condition fragment that holds when the property matches none of `values`
    (case-insensitive). Each distinct value contributes one `<not><equals/></not>`.
    """
    prop = _escape_xml(property_name or "transtype")
    seen: List[str] = []
    for value in values:
        if value in seen:
            continue
        seen.append(value)
    return "".join(
        f'<not><equals arg1="${{{prop}}}" arg2="{_escape_xml(value)}" casesensitive="false"/></not>'
        for value in seen
    )
