"""Shorthand compiler: a compact description of a shape -> Schema.

Shorthands are plain Python values, so cases read naturally::

    match(value).case(str, ...).case(7, ...).case({"kind": "sms"}, ...)

compile_shorthand() normalizes it straight into the closed SchemaType union.
Rules are tried in order; the first one that applies wins.

| shorthand                                | schema                           |
|------------------------------------------|----------------------------------|
| no argument                              | UnknownSchema                    |
| UNDEFINED                                | UndefinedSchema                  |
| None                                     | NullSchema                       |
| str, float, int, bool                    | String/Number/Integer/BooleanSchema |
| list, dict                               | ArraySchema(), ObjectSchema()    |
| "hi", 7, 1.5, True                       | LiteralSchema                    |
| re.compile(...)                          | RegexSchema                      |
| [] or [X]                                | ArraySchema(X)                   |
| [N, [X1, ..., XN]]                       | TupleSchema                      |
| any other list                           | ShorthandError                   |
| () or (X1, ..., XN)                      | ArraySchema() / TupleSchema      |
| a Schema                                 | unchanged                        |
| pydantic BaseModel subclass, TypeAdapter | ModelSchema                      |
| {"key": X, ...}                          | ObjectSchema                     |
| model instances, functions, classes, ... | UnknownSchema                    |

Shorthands are compiled recursively. Cyclic shorthands never terminate and
must not be passed in.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Final

from pydantic import BaseModel, TypeAdapter

from patmatch._schema import (
    ArraySchema,
    BooleanSchema,
    IntegerSchema,
    LiteralSchema,
    ModelSchema,
    NullSchema,
    NumberSchema,
    ObjectSchema,
    RegexSchema,
    StringSchema,
    TupleSchema,
    UndefinedSchema,
    UnknownSchema,
)
from patmatch._types import UNDEFINED, MatcherError, Schema


class ShorthandError(MatcherError, TypeError):
    """A list shorthand is neither ``[shorthand]`` nor ``[N, [...]]``."""

    def __init__(self) -> None:
        super().__init__(
            "invalid shorthand: lists should be in the form `[shorthand]`, "
            "and tuples should be in the form `[3, [shorthand1, shorthand2, shorthand3]]`"
        )


# Sentinel for "called with no argument at all", distinct from UNDEFINED.
_ABSENT: Final = object()

_MARKERS: Final[dict[type, Schema]] = {
    str: StringSchema(),
    float: NumberSchema(),
    int: IntegerSchema(),
    bool: BooleanSchema(),
    list: ArraySchema(),
    dict: ObjectSchema(),
}

# re flags RE2 understands as inline flags. re.UNICODE is implied for str patterns.
_INLINE_FLAGS: Final = ((re.IGNORECASE, "i"), (re.MULTILINE, "m"), (re.DOTALL, "s"))
_SUPPORTED_FLAGS: Final = re.IGNORECASE | re.MULTILINE | re.DOTALL | re.UNICODE


def compile_shorthand(shorthand: Any = _ABSENT, /) -> Schema:
    """Compile a shorthand into a Schema.

    Calling with no argument gives a schema that accepts anything; passing
    UNDEFINED explicitly gives one that accepts only UNDEFINED.

    Raises:
        ShorthandError: If a list shorthand has neither legal form.
        MatcherError: If a regex cannot be compiled by RE2.
    """
    v = shorthand
    if v is _ABSENT:
        return UnknownSchema()
    if v is UNDEFINED:
        return UndefinedSchema()
    if v is None:
        return NullSchema()
    if isinstance(v, type) and v in _MARKERS:
        return _MARKERS[v]
    if isinstance(v, str | int | float | bool):
        return LiteralSchema(v)
    if isinstance(v, re.Pattern):
        return RegexSchema(_re2_source(v))
    if isinstance(v, list):
        return _compile_list(v)
    if isinstance(v, tuple):
        if not v:
            return ArraySchema()
        return TupleSchema(tuple(compile_shorthand(item) for item in v))
    if isinstance(v, type) and issubclass(v, BaseModel):
        return ModelSchema.of(v)
    if isinstance(v, TypeAdapter):
        return ModelSchema.of(v)
    if isinstance(v, BaseModel):
        # Model instances inherit pydantic's deprecated validate() classmethod.
        return UnknownSchema()
    if not isinstance(v, type) and isinstance(v, Schema):
        return v
    if isinstance(v, Mapping):
        return ObjectSchema({key: compile_shorthand(item) for key, item in v.items()})
    return UnknownSchema()


def _compile_list(v: list[Any]) -> Schema:
    if not v:
        return ArraySchema()
    if len(v) == 1:
        return ArraySchema(compile_shorthand(v[0]))
    if _is_tagged_tuple(v):
        return TupleSchema(tuple(compile_shorthand(item) for item in v[1]))
    raise ShorthandError


def _is_tagged_tuple(v: list[Any]) -> bool:
    """``[N, [X1, ..., XN]]`` with N a positive int equal to the item count."""
    if len(v) != 2:
        return False
    size, items = v
    if isinstance(size, bool) or not isinstance(size, int):
        return False
    return isinstance(items, list) and size >= 1 and size == len(items)


def _re2_source(pattern: re.Pattern[Any]) -> str:
    """Translate a compiled ``re`` pattern into RE2 source text."""
    if not isinstance(pattern.pattern, str):
        msg = f"regex shorthand must be a str pattern, got {type(pattern.pattern).__name__}"
        raise MatcherError(msg)
    unsupported = pattern.flags & ~_SUPPORTED_FLAGS
    if unsupported:
        msg = f"regex flags {re.RegexFlag(unsupported)!r} are not supported by RE2"
        raise MatcherError(msg)
    inline = "".join(letter for flag, letter in _INLINE_FLAGS if pattern.flags & flag)
    return f"(?{inline}){pattern.pattern}" if inline else pattern.pattern
