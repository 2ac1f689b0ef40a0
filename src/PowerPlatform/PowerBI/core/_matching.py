# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Name validation and case-insensitive lookups shared by the resolver namespaces.

A lookup has three outcomes: no match, exactly one match, or several matches.
Callers branch on :class:`MatchKind` explicitly; several matches is never
collapsed into "first wins".
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Iterable, Optional, Tuple, TypeVar

from ._error_codes import VALIDATION_BLANK_NAME
from .errors import AmbiguousMatchError, ValidationError

T = TypeVar("T")


class MatchKind(Enum):
    NONE = "none"
    ONE = "one"
    MANY = "many"


@dataclass(frozen=True)
class MatchResult(Generic[T]):
    kind: MatchKind
    matches: Tuple[T, ...] = ()

    @property
    def value(self) -> Optional[T]:
        """The single match, or None for NONE and MANY."""
        return self.matches[0] if self.kind is MatchKind.ONE else None


def _require_name(value: Any, argument: str) -> str:
    """Reject None, non-string, empty and whitespace-only names."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(
            f"{argument} is required and cannot be empty or whitespace.",
            subcode=VALIDATION_BLANK_NAME,
            details={"argument": argument},
        )
    return value


def _names_equal(left: Optional[str], right: str) -> bool:
    return left is not None and left.casefold() == right.casefold()


def _match_by_name(items: Iterable[T], name: str, key: Callable[[T], Optional[str]] = lambda item: item.name) -> MatchResult[T]:
    found = tuple(item for item in items if _names_equal(key(item), name))
    if not found:
        return MatchResult(MatchKind.NONE)
    if len(found) == 1:
        return MatchResult(MatchKind.ONE, found)
    return MatchResult(MatchKind.MANY, found)


def _single_or_none(match: MatchResult[T], *, resource: str, name: str, subcode: str) -> Optional[T]:
    """Collapse a MatchResult into the resolver contract: value, None, or AmbiguousMatchError."""
    if match.kind is MatchKind.MANY:
        raise AmbiguousMatchError(
            f"{len(match.matches)} {resource}s match the name '{name}' (case-insensitive).",
            subcode=subcode,
            details={"resource": resource, "name": name, "match_count": len(match.matches)},
        )
    return match.value


__all__ = ["MatchKind", "MatchResult"]
