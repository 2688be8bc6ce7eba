"""
Structured-output schema request.

The schema mapping uses the multimodal provider's type tags (``OBJECT``,
``ARRAY``, ``STRING``, ``NUMBER``) together with ``enum`` and ``required``
lists. Providers with native schema support receive it verbatim; providers
with only a generic JSON mode receive ``render_skeleton()`` in the prompt.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class OutputSchema:
    """Named response schema."""

    name: str
    schema: Mapping[str, Any]

    def skeleton(self) -> Any:
        return _skeleton(self.schema)

    def render_skeleton(self) -> str:
        """Indented JSON example of the expected structure."""
        return json.dumps(self.skeleton(), indent=2, ensure_ascii=False)


def _skeleton(node: Mapping[str, Any]) -> Any:
    kind = str(node.get("type", "STRING")).upper()
    if kind == "OBJECT":
        props = node.get("properties") or {}
        return {key: _skeleton(sub) for key, sub in props.items()}
    if kind == "ARRAY":
        items = node.get("items")
        return [_skeleton(items)] if isinstance(items, Mapping) else []
    if kind == "STRING" and node.get("enum"):
        return "|".join(str(v) for v in node["enum"])
    if kind in {"NUMBER", "INTEGER"}:
        return "number"
    if kind == "BOOLEAN":
        return "boolean"
    return "string"


__all__ = ["OutputSchema"]
