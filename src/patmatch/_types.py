"""Core protocols, result types and sentinels for patmatch.

- Schema is the validation port: anything with ``validate(value)`` can sit in a case
- Valid / Invalid is the discriminated result every schema returns
- UNDEFINED stands in for "no value at all" (e.g. a key missing from a mapping)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final, Protocol, runtime_checkable


class MatcherError(Exception):
    """Base class for every error raised by patmatch."""


class _Undefined:
    """Type of the UNDEFINED sentinel. There is exactly one instance."""

    __slots__ = ()
    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "UNDEFINED"


# Distinct from None: None is an explicit null, UNDEFINED is an absent value.
UNDEFINED: Final = _Undefined()


@dataclass(frozen=True, slots=True)
class Valid[T]:
    """Successful validation, carrying the (possibly narrowed) value."""

    value: T


@dataclass(frozen=True, slots=True)
class Invalid:
    """Failed validation.

    ``path`` holds the keys and indexes leading from the validated value
    down to the element that was rejected; it is empty for top-level failures.
    """

    reason: str
    path: tuple[Any, ...] = ()

    def at(self, key: Any) -> Invalid:
        """Return the same failure, one level further down ``key``."""
        return Invalid(self.reason, (key, *self.path))

    def __str__(self) -> str:
        if not self.path:
            return self.reason
        location = "".join(f"[{key!r}]" for key in self.path)
        return f"{location}: {self.reason}"


type Validation[T] = Valid[T] | Invalid


@runtime_checkable
class Schema(Protocol):
    """Validate a value of unknown shape.

    Implementations never raise for an invalid value: they return Invalid.
    Built-in schemas live in patmatch._schema; any object with a matching
    ``validate`` method can be used wherever a schema is accepted.
    """

    def validate(self, value: Any, /) -> Validation[Any]: ...


def describe_type(value: Any) -> str:
    """Short type name used in failure reasons."""
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "None"
    return type(value).__name__
