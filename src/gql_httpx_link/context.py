"""Typed, immutable context bag shared by links in a chain.

A `Context` holds at most one entry per concrete `ContextEntry` subclass.
Entries are frozen pydantic models; writing an entry never mutates the
context it was called on but returns a new one in which the previous entry
of the same type (if any) is replaced. Insertion order of entry types is
preserved.

The HTTP link reads `HttpLinkHeaders` from the request context and writes
`HttpLinkResponseContext` onto the response context.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field

E = TypeVar("E", bound="ContextEntry")


class ContextEntry(BaseModel):
    """Base class for values stored in a `Context`."""

    model_config = ConfigDict(frozen=True)


class HttpLinkHeaders(ContextEntry):
    """Headers to add to a single request.

    Overrides both the link defaults and the computed `Accept` header on key
    collision.
    """

    headers: Dict[str, str] = Field(default_factory=dict)


class HttpLinkResponseContext(ContextEntry):
    """HTTP metadata of the response a result was parsed from."""

    status_code: int
    headers: Dict[str, str] = Field(default_factory=dict)


class Context:
    __slots__ = ("_entries",)

    def __init__(self, entries: Optional[Mapping[Type[ContextEntry], ContextEntry]] = None):
        table: Dict[Type[ContextEntry], ContextEntry] = {}
        for key, value in (entries or {}).items():
            _check_entry(value)
            if type(value) is not key:
                raise TypeError(
                    f"Context key {key.__name__} does not match entry type {type(value).__name__}"
                )
            table[key] = value
        self._entries = MappingProxyType(table)

    @classmethod
    def from_entries(cls, *entries: ContextEntry) -> "Context":
        return cls().with_entries(*entries)

    def entry(self, entry_type: Type[E], default: Optional[E] = None) -> Optional[E]:
        value = self._entries.get(entry_type)
        if value is None:
            return default
        return value  # type: ignore[return-value]

    def with_entry(self, entry: ContextEntry) -> "Context":
        _check_entry(entry)
        table = dict(self._entries)
        table[type(entry)] = entry
        return Context(table)

    def with_entries(self, *entries: ContextEntry) -> "Context":
        ctx = self
        for entry in entries:
            ctx = ctx.with_entry(entry)
        return ctx

    def update_entry(
        self, entry_type: Type[E], update: Callable[[Optional[E]], E]
    ) -> "Context":
        """Replace the entry of `entry_type` with `update(current_entry)`."""
        new_entry = update(self.entry(entry_type))
        if type(new_entry) is not entry_type:
            raise TypeError(
                f"update for {entry_type.__name__} returned {type(new_entry).__name__}"
            )
        return self.with_entry(new_entry)

    @property
    def entries(self) -> Mapping[Type[ContextEntry], ContextEntry]:
        return self._entries

    def __iter__(self) -> Iterator[ContextEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entry_type: object) -> bool:
        return entry_type in self._entries

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Context):
            return NotImplemented
        return dict(self._entries) == dict(other._entries)

    def __repr__(self) -> str:
        inner = ", ".join(repr(v) for v in self._entries.values())
        return f"Context({inner})"


def _check_entry(value: Any) -> None:
    if not isinstance(value, ContextEntry):
        raise TypeError(f"Context entries must be ContextEntry instances, got {type(value).__name__}")


__all__ = [
    "Context",
    "ContextEntry",
    "HttpLinkHeaders",
    "HttpLinkResponseContext",
]
