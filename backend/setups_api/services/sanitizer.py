"""
Setups API - Blank Field Sanitizer
====================================

What:  Strips keys whose value is the empty string from an update payload.
Why:   HTML forms submit untouched inputs as "", which would otherwise
       overwrite stored values with blanks.
How:   Pure function over a mapping; looks at the top level and one level
       into the named sub-object (`setup`).

Example:
    {"setup": {"title": "", "text": "foo"}} -> {"setup": {"text": "foo"}}
"""

from typing import Any, Dict, Mapping


def _is_blank(value: Any) -> bool:
    # Only the exact empty string counts; 0, False, None, [] are real values
    return isinstance(value, str) and value == ""


def _strip(mapping: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in mapping.items() if not _is_blank(v)}


def remove_blank_fields(payload: Mapping[str, Any], key: str = "setup") -> Dict[str, Any]:
    """
    Return a copy of `payload` without blank fields.

    The input is not modified. If `payload[key]` is not a mapping it is
    passed through unchanged and left for schema validation to reject.
    """
    cleaned = _strip(payload)
    nested = cleaned.get(key)
    if isinstance(nested, Mapping):
        cleaned[key] = _strip(nested)
    return cleaned
