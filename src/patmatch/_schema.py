"""Concrete schemas implementing the Schema protocol.

Every schema is a frozen dataclass: immutable after construction and safe to
share between matchers and threads. Together they form the closed
SchemaType union that the shorthand compiler produces.

| shorthand            | schema                          |
|----------------------|---------------------------------|
| (nothing), default   | UnknownSchema                   |
| UNDEFINED            | UndefinedSchema                 |
| None                 | NullSchema                      |
| str / float / int    | StringSchema / NumberSchema / IntegerSchema |
| bool                 | BooleanSchema                   |
| "hi", 7, True        | LiteralSchema                   |
| re.compile(...)      | RegexSchema                     |
| list, [X], ()        | ArraySchema                     |
| [N, [X1..XN]], (...) | TupleSchema                     |
| dict, {"k": X}       | ObjectSchema                    |
| pydantic model       | ModelSchema                     |

RefinedSchema wraps any schema with an extra predicate.

Container schemas hand back the very object they were given unless a nested
schema transformed one of its elements (only ModelSchema does that).
"""

from __future__ import annotations

import math
import numbers
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import re2
from pydantic import TypeAdapter, ValidationError

from patmatch._types import UNDEFINED, Invalid, MatcherError, Valid, describe_type

if TYPE_CHECKING:
    from collections.abc import Callable

    from patmatch._types import Schema, Validation


def _expected(kind: str, value: Any) -> Invalid:
    return Invalid(f"expected {kind}, got {describe_type(value)}")


def _is_sequence(value: Any) -> bool:
    # str and bytes are sequences too, but never arrays.
    return isinstance(value, list | tuple)


def _rebuild(original: list[Any] | tuple[Any, ...], items: list[Any]) -> Any:
    return tuple(items) if isinstance(original, tuple) else items


class _Refinable:
    """Mixin adding ``refine`` to the built-in schemas."""

    __slots__ = ()

    def refine(self, predicate: Callable[[Any], bool]) -> RefinedSchema:
        return RefinedSchema(self, predicate)  # type: ignore[arg-type]


# ═══════════════════════════════════════════════════════════════════════════════
# Scalars
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class UnknownSchema(_Refinable):
    """Accepts anything, including UNDEFINED."""

    def validate(self, value: Any, /) -> Validation[Any]:
        return Valid(value)

    def __str__(self) -> str:
        return "unknown"


@dataclass(frozen=True, slots=True)
class UndefinedSchema(_Refinable):
    """Accepts only the UNDEFINED sentinel."""

    def validate(self, value: Any, /) -> Validation[Any]:
        if value is UNDEFINED:
            return Valid(value)
        return _expected("undefined", value)

    def __str__(self) -> str:
        return "undefined"


@dataclass(frozen=True, slots=True)
class NullSchema(_Refinable):
    """Accepts only None."""

    def validate(self, value: Any, /) -> Validation[Any]:
        if value is None:
            return Valid(value)
        return _expected("None", value)

    def __str__(self) -> str:
        return "null"


@dataclass(frozen=True, slots=True)
class StringSchema(_Refinable):
    def validate(self, value: Any, /) -> Validation[Any]:
        if isinstance(value, str):
            return Valid(value)
        return _expected("string", value)

    def __str__(self) -> str:
        return "string"


@dataclass(frozen=True, slots=True)
class NumberSchema(_Refinable):
    """Any real number except NaN. bool is an int subclass in Python but is rejected here."""

    def validate(self, value: Any, /) -> Validation[Any]:
        if not isinstance(value, numbers.Real) or isinstance(value, bool):
            return _expected("number", value)
        if isinstance(value, float) and math.isnan(value):
            return Invalid("expected number, got NaN")
        return Valid(value)

    def __str__(self) -> str:
        return "number"


@dataclass(frozen=True, slots=True)
class IntegerSchema(_Refinable):
    """Any integral number except bool."""

    def validate(self, value: Any, /) -> Validation[Any]:
        if isinstance(value, numbers.Integral) and not isinstance(value, bool):
            return Valid(value)
        return _expected("integer", value)

    def __str__(self) -> str:
        return "integer"


@dataclass(frozen=True, slots=True)
class BooleanSchema(_Refinable):
    def validate(self, value: Any, /) -> Validation[Any]:
        if isinstance(value, bool):
            return Valid(value)
        return _expected("boolean", value)

    def __str__(self) -> str:
        return "boolean"


def _literal_kind(value: Any) -> type:
    if isinstance(value, bool):
        return bool
    if isinstance(value, numbers.Real):
        return numbers.Real
    if isinstance(value, str):
        return str
    return type(value)


@dataclass(frozen=True, slots=True)
class LiteralSchema(_Refinable):
    """Exactly one scalar value.

    Values only compare equal within the same kind: True never matches 1 and
    "7" never matches 7, while 1 and 1.0 are the same number.
    """

    value: str | int | float | bool

    def validate(self, value: Any, /) -> Validation[Any]:
        if _literal_kind(value) is _literal_kind(self.value) and value == self.value:
            return Valid(value)
        return Invalid(f"expected {self.value!r}, got {value!r}")

    def __str__(self) -> str:
        return f"literal({self.value!r})"


@dataclass(frozen=True, slots=True)
class RegexSchema(_Refinable):
    """String containing a match for the pattern.

    The pattern is compiled at construction time via ``google-re2`` for
    linear-time matching, and searched anywhere in the string (not fullmatch).
    RE2 rejects backreferences and lookaround at construction time.

    Raises:
        MatcherError: If the pattern is not valid RE2 syntax.
    """

    pattern: str
    _compiled: Any = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        try:
            compiled = re2.compile(self.pattern)
        except re2.error as e:
            msg = f'invalid regex pattern "{self.pattern}": {e}'
            raise MatcherError(msg) from e
        object.__setattr__(self, "_compiled", compiled)

    def validate(self, value: Any, /) -> Validation[Any]:
        if not isinstance(value, str):
            return _expected("string", value)
        if self._compiled.search(value) is None:
            return Invalid(f"{value!r} does not match /{self.pattern}/")
        return Valid(value)

    def __str__(self) -> str:
        return f"regex({self.pattern!r})"


# ═══════════════════════════════════════════════════════════════════════════════
# Containers
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ArraySchema(_Refinable):
    """A list or tuple of any length whose every element matches ``items``."""

    items: Schema = field(default_factory=UnknownSchema)

    def validate(self, value: Any, /) -> Validation[Any]:
        if not _is_sequence(value):
            return _expected("array", value)
        validated: list[Any] = []
        changed = False
        for index, item in enumerate(value):
            result = self.items.validate(item)
            if isinstance(result, Invalid):
                return result.at(index)
            changed = changed or result.value is not item
            validated.append(result.value)
        return Valid(_rebuild(value, validated) if changed else value)

    def __str__(self) -> str:
        return f"array<{self.items}>"


@dataclass(frozen=True, slots=True)
class TupleSchema(_Refinable):
    """A list or tuple of exactly ``len(items)`` elements, checked by position."""

    items: tuple[Schema, ...]

    def validate(self, value: Any, /) -> Validation[Any]:
        if not _is_sequence(value):
            return _expected("tuple", value)
        if len(value) != len(self.items):
            return Invalid(f"expected {len(self.items)} elements, got {len(value)}")
        validated: list[Any] = []
        changed = False
        for index, (schema, item) in enumerate(zip(self.items, value, strict=True)):
            result = schema.validate(item)
            if isinstance(result, Invalid):
                return result.at(index)
            changed = changed or result.value is not item
            validated.append(result.value)
        return Valid(_rebuild(value, validated) if changed else value)

    def __str__(self) -> str:
        return "tuple[" + ", ".join(str(s) for s in self.items) + "]"


@dataclass(frozen=True, slots=True)
class ObjectSchema(_Refinable):
    """A mapping holding at least the listed keys, each validated recursively.

    Unlisted keys are left alone. A missing key is validated as UNDEFINED, so
    fields whose schema accepts UNDEFINED are optional.
    """

    fields: Mapping[Any, Schema] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def validate(self, value: Any, /) -> Validation[Any]:
        if not isinstance(value, Mapping):
            return _expected("mapping", value)
        changed: dict[Any, Any] = {}
        for key, schema in self.fields.items():
            raw = value.get(key, UNDEFINED)
            result = schema.validate(raw)
            if isinstance(result, Invalid):
                return result.at(key)
            if result.value is not raw:
                changed[key] = result.value
        if not changed:
            return Valid(value)
        narrowed = dict(value)
        for key, item in changed.items():
            if item is UNDEFINED:
                narrowed.pop(key, None)
            else:
                narrowed[key] = item
        return Valid(narrowed)

    def __str__(self) -> str:
        inner = ", ".join(f"{key}: {schema}" for key, schema in self.fields.items())
        return "{" + inner + (", ..." if inner else "...") + "}"


# ═══════════════════════════════════════════════════════════════════════════════
# Composition
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ModelSchema(_Refinable):
    """Delegate validation to pydantic.

    Built from a BaseModel subclass or any type pydantic understands; the
    validated value is whatever pydantic returns (e.g. a model instance).
    """

    adapter: TypeAdapter[Any]
    label: str

    @classmethod
    def of(cls, target: Any) -> ModelSchema:
        """Wrap a pydantic model class, a type, or an existing TypeAdapter."""
        if isinstance(target, TypeAdapter):
            return cls(adapter=target, label=repr(target))
        return cls(adapter=TypeAdapter(target), label=getattr(target, "__name__", repr(target)))

    def validate(self, value: Any, /) -> Validation[Any]:
        try:
            return Valid(self.adapter.validate_python(value))
        except ValidationError as e:
            first = e.errors()[0]
            return Invalid(first["msg"], tuple(first["loc"]))

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True, slots=True)
class RefinedSchema(_Refinable):
    """Narrow ``base`` with a predicate.

    The predicate only ever sees values ``base`` accepted, and receives the
    validated value. Exceptions raised by the predicate propagate.
    """

    base: Schema
    predicate: Callable[[Any], bool]

    def validate(self, value: Any, /) -> Validation[Any]:
        result = self.base.validate(value)
        if isinstance(result, Invalid):
            return result
        if not self.predicate(result.value):
            return Invalid(f"refinement {_predicate_name(self.predicate)} rejected {value!r}")
        return result

    def __str__(self) -> str:
        return f"{self.base}.refine({_predicate_name(self.predicate)})"


def _predicate_name(predicate: Callable[[Any], bool]) -> str:
    return getattr(predicate, "__name__", type(predicate).__name__)


type SchemaType = (
    UnknownSchema
    | UndefinedSchema
    | NullSchema
    | StringSchema
    | NumberSchema
    | IntegerSchema
    | BooleanSchema
    | LiteralSchema
    | RegexSchema
    | ArraySchema
    | TupleSchema
    | ObjectSchema
    | ModelSchema
    | RefinedSchema
)


def validate(schema: Schema, value: Any) -> Validation[Any]:
    """Validate ``value`` against ``schema``. Never raises for invalid input."""
    return schema.validate(value)


def refine(schema: Schema, predicate: Callable[[Any], bool]) -> RefinedSchema:
    """Compose ``schema`` with a predicate.

    Works for any Schema, including ones that do not inherit ``refine``.
    """
    return RefinedSchema(schema, predicate)
