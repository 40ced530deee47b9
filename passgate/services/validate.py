"""Value-shape checks used by the auth steps.

All functions return a bool (or None for to_subject_id) and never raise:
the steps decide which error a failed check maps to.
"""

from __future__ import annotations

import base64
import binascii
import json
import re
from collections.abc import Mapping
from typing import Any

_JWT_SEGMENT = re.compile(r"^[A-Za-z0-9_-]+$")
_INTEGER = re.compile(r"^[+-]?\d+$")


def is_non_empty_list(value: Any) -> bool:
    return isinstance(value, list) and len(value) > 0


def has_string_property(container: Any, name: str) -> bool:
    """True if container is a mapping holding a non-blank string at *name*."""
    if not isinstance(container, Mapping):
        return False
    value = container.get(name)
    return isinstance(value, str) and bool(value.strip())


def _decodes_to_json_object(segment: str) -> bool:
    try:
        raw = base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))
        return isinstance(json.loads(raw), dict)
    except (binascii.Error, ValueError):
        return False


def is_jwt_shaped(value: Any) -> bool:
    """Three base64url segments whose first two decode to JSON objects.

    Structural only; says nothing about the signature.
    """
    if not isinstance(value, str):
        return False
    parts = value.split(".")
    if len(parts) != 3:
        return False
    header, payload, signature = parts
    if not all(_JWT_SEGMENT.match(p) for p in (header, payload, signature)):
        return False
    return _decodes_to_json_object(header) and _decodes_to_json_object(payload)


def to_subject_id(value: Any) -> int | None:
    """Normalize an int or a digit string to int.  Anything else is None.

    bool is rejected even though it is an int subclass.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INTEGER.match(value.strip()):
        return int(value.strip())
    return None


def is_integer_in_range(value: Any, low: int, high: int) -> bool:
    number = to_subject_id(value)
    return number is not None and low <= number <= high
