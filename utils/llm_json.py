"""
Helpers for pulling JSON out of model output.

Models wrap JSON in markdown fences or surround it with prose often enough
that every caller goes through these instead of ``json.loads``.
"""

from __future__ import annotations
import json
import re
from typing import Any, Dict, Optional

_FENCE = re.compile(r"```(?:json)?\s*([\[{][\s\S]*?[\]}])\s*```")
_EMBEDDED_RECIPE = re.compile(r"\{[\s\S]*\"recipe\"[\s\S]*\}")
_STANDALONE_RECIPE = re.compile(r"\{[\s\S]*\"title\"[\s\S]*\"ingredients\"[\s\S]*\}")
_ARRAY = re.compile(r"\[[\s\S]*\]")


def loads_lenient(text: str) -> Any:
    """
    Parse JSON that may be fenced or embedded in prose.

    Raises:
        ValueError: if no JSON document can be recovered
    """
    if text is None:
        raise ValueError("empty model output")
    stripped = text.strip()
    try:
        return json.loads(stripped)
    except json.JSONDecodeError:
        pass

    match = _FENCE.search(stripped)
    if match:
        try:
            return json.loads(match.group(1))
        except json.JSONDecodeError:
            pass

    for pattern in (_EMBEDDED_RECIPE, _STANDALONE_RECIPE, _ARRAY):
        match = pattern.search(stripped)
        if match:
            try:
                return json.loads(match.group(0))
            except json.JSONDecodeError:
                continue
    raise ValueError("no JSON found in model output")


def unwrap_recipe(parsed: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(parsed, dict):
        return None
    if isinstance(parsed.get("recipe"), dict):
        return parsed["recipe"]
    if parsed.get("title") or parsed.get("ingredients"):
        return parsed
    return None


def missing_recipe_fields(recipe: Dict[str, Any]) -> list:
    """Names of required fields (title, ingredients, instructions) that are empty."""
    return [f for f in ("title", "ingredients", "instructions") if not recipe.get(f)]
