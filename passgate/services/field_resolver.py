"""Locate the candidate password and the stored hash.

Callers are inconsistent about where they put these values, and each
shape below is in use by some route.  Lookup order is part of the
contract and must not change:

  password: body.password > body.pwd > body.pwdHash

  hash:     res.rows[0]        (password > pwd > pwdHash)
          > res.<field>        (same order)
          > res.locals.rows[0] (same order)

A location only counts when it holds a string that is non-blank after
trimming; None, "", "   " and non-strings are skipped and the search moves
on.  The value is returned as stored, not trimmed.

Error messages are generated from the same source tables, so they always
list every accepted location in lookup order.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from passgate.models.exchange import AuthRequest, AuthResponse
from passgate.services.validate import has_string_property, is_non_empty_list

PASSWORD_FIELDS = ("password", "pwd", "pwdHash")


def resolve(lookups: Iterable[tuple[Any, str]]) -> str | None:
    """Return the first usable string among (container, field) pairs."""
    for container, name in lookups:
        if has_string_property(container, name):
            return container[name]
    return None


def first_row(collection: Any) -> Mapping[str, Any] | None:
    if is_non_empty_list(collection) and isinstance(collection[0], Mapping):
        return collection[0]
    return None


@dataclass(frozen=True)
class Source:
    """One place a value may live: a label for messages plus an extractor."""

    label: str
    extract: Callable[[Any], Mapping[str, Any] | None]

    def locations(self, fields: Iterable[str]) -> list[str]:
        return [f"{self.label}.{name}" for name in fields]


def _locals_rows(response: AuthResponse) -> Mapping[str, Any] | None:
    bag = response.locals
    if not isinstance(bag, Mapping):
        return None
    return first_row(bag.get("rows"))


PASSWORD_SOURCES: tuple[Source, ...] = (
    Source("body", lambda request: request.body),
)

HASH_SOURCES: tuple[Source, ...] = (
    Source("res.rows[0]", lambda response: first_row(response.rows)),
    Source("res", lambda response: response.fields),
    Source("res.locals.rows[0]", _locals_rows),
)


def _resolve_from(
    sources: tuple[Source, ...], target: Any, fields: tuple[str, ...]
) -> str | None:
    for source in sources:
        container = source.extract(target)
        if container is None:
            continue
        value = resolve((container, name) for name in fields)
        if value is not None:
            return value
    return None


def _describe(sources: tuple[Source, ...], fields: tuple[str, ...]) -> str:
    return " or ".join(loc for s in sources for loc in s.locations(fields))


def resolve_password(request: AuthRequest) -> str | None:
    return _resolve_from(PASSWORD_SOURCES, request, PASSWORD_FIELDS)


def resolve_hash(response: AuthResponse) -> str | None:
    return _resolve_from(HASH_SOURCES, response, PASSWORD_FIELDS)


MISSING_PASSWORD_MESSAGE = (
    "Missing password in the request. Should be in "
    + _describe(PASSWORD_SOURCES, PASSWORD_FIELDS)
)

MISSING_HASH_MESSAGE = (
    "Missing hash from the database. Should be in "
    + _describe(HASH_SOURCES, PASSWORD_FIELDS)
)
