"""Matchers: ordered case lists with first-match-wins dispatch.

Two builders share one evaluation kernel (dispatch):
- match(value) binds the value up front; ``.get()`` evaluates it
- matcher() has no value yet; ``.get`` *is* the reusable one-argument function

Every ``case``/``default`` call returns a new builder over a new tuple of
cases. Previously returned builders are never modified, so any of them can be
extended in several directions independently.

INV: First-match-wins. Once a case validates the value, later cases are
never consulted.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from patmatch._schema import UnknownSchema, refine
from patmatch._shorthand import compile_shorthand
from patmatch._types import Invalid, MatcherError, Valid

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from patmatch._types import Schema

logger = logging.getLogger(__name__)


class NoMatchError(MatcherError):
    """No case accepted the value.

    Carries the rejected value and every schema that was tried, in order.
    Append a ``default`` case instead of catching this when a fallback is needed.
    """

    def __init__(self, value: Any, schemas: Iterable[Schema]) -> None:
        self.value = value
        self.schemas = tuple(schemas)
        if self.schemas:
            tried = ", ".join(str(s) for s in self.schemas)
            msg = f"no case matched {value!r} (tried {len(self.schemas)}: {tried})"
        else:
            msg = f"no case matched {value!r} (no cases declared)"
        super().__init__(msg)

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable diagnostic payload."""
        return {
            "value": repr(self.value),
            "schemas": [str(s) for s in self.schemas],
        }


class UnreachableCaseWarning(UserWarning):
    """A case was declared after a case that accepts everything."""


@dataclass(frozen=True, slots=True)
class Case[T]:
    """Pairs a schema with the handler called on the validated value."""

    schema: Schema
    handler: Callable[[Any], T]


def dispatch(value: Any, cases: tuple[Case[Any], ...]) -> Any:
    """Run ``value`` through ``cases`` in order and return the winning handler's result.

    Handler and predicate exceptions propagate unchanged.

    Raises:
        NoMatchError: If no case accepts the value.
        TypeError: If a schema returns something other than Valid or Invalid.
    """
    for index, case_ in enumerate(cases):
        match case_.schema.validate(value):
            case Valid(value=validated):
                logger.debug("case %d (%s) matched %r", index, case_.schema, value)
                return case_.handler(validated)
            case Invalid():
                continue
            case other:
                msg = (
                    f"schema {case_.schema!r} returned {type(other).__name__} "
                    "from validate(); expected Valid or Invalid"
                )
                raise TypeError(msg)
    logger.debug("none of %d cases matched %r", len(cases), value)
    raise NoMatchError(value, (c.schema for c in cases))


def _append_case(
    cases: tuple[Case[Any], ...],
    shorthand: Any,
    fns: tuple[Callable[[Any], Any], ...],
) -> tuple[Case[Any], ...]:
    match fns:
        case (handler,):
            schema = compile_shorthand(shorthand)
        case (predicate, handler):
            schema = refine(compile_shorthand(shorthand), predicate)
        case _:
            msg = (
                "case() takes a shorthand, an optional predicate and a handler; "
                f"got {len(fns)} callables"
            )
            raise TypeError(msg)
    return _append(cases, Case(schema, handler), stacklevel=4)


def _append(
    cases: tuple[Case[Any], ...], new: Case[Any], stacklevel: int = 3
) -> tuple[Case[Any], ...]:
    if any(type(c.schema) is UnknownSchema for c in cases):
        warnings.warn(
            f"case {new.schema} is declared after a catch-all case and can never match",
            UnreachableCaseWarning,
            stacklevel=stacklevel,
        )
    return (*cases, new)


@dataclass(frozen=True, slots=True)
class Match[In]:
    """A matcher bound to a value. Build with :func:`match`."""

    value: In
    cases: tuple[Case[Any], ...] = ()

    def case(self, shorthand: Any, /, *fns: Callable[[Any], Any]) -> Match[In]:
        """Append a case: ``case(shorthand, handler)`` or ``case(shorthand, predicate, handler)``."""
        return Match(self.value, _append_case(self.cases, shorthand, fns))

    def default(self, handler: Callable[[Any], Any]) -> Match[In]:
        """Append a case that accepts anything."""
        return Match(self.value, _append(self.cases, Case(UnknownSchema(), handler)))

    def get(self) -> Any:
        """Evaluate the bound value.

        Raises:
            NoMatchError: If no case accepts the value.
        """
        return dispatch(self.value, self.cases)


@dataclass(frozen=True, slots=True)
class Dispatcher:
    """A frozen case list, callable with the value to match.

    Stateless: safe to store, pass around and call from several threads.
    """

    cases: tuple[Case[Any], ...]

    def __call__(self, value: Any, /) -> Any:
        return dispatch(value, self.cases)


@dataclass(frozen=True, slots=True)
class Matcher:
    """A matcher whose value is supplied later. Build with :func:`matcher`."""

    cases: tuple[Case[Any], ...] = ()

    def case(self, shorthand: Any, /, *fns: Callable[[Any], Any]) -> Matcher:
        """Append a case: ``case(shorthand, handler)`` or ``case(shorthand, predicate, handler)``."""
        return Matcher(_append_case(self.cases, shorthand, fns))

    def default(self, handler: Callable[[Any], Any]) -> Matcher:
        """Append a case that accepts anything."""
        return Matcher(_append(self.cases, Case(UnknownSchema(), handler)))

    @property
    def get(self) -> Dispatcher:
        """The dispatch function over the cases declared so far."""
        return Dispatcher(self.cases)


def match[In](value: In) -> Match[In]:
    """Match a value against a number of cases, Scala-style.

    Example::

        label = (
            match(value)
            .case(str, lambda s: f"the message is {s}")
            .case(7, lambda _: "exactly seven")
            .case(float, lambda n: n > 2, lambda n: f"big number: {n}")
            .default(lambda x: f"something else: {x!r}")
            .get()
        )
    """
    return Match(value)


def matcher() -> Matcher:
    """Like :func:`match`, but the value is passed to ``.get`` later.

    Example::

        describe = (
            matcher()
            .case({"from": str, "content": str}, lambda sms: sms["content"])
            .case({"subject": str, "body": str}, lambda email: email["subject"])
            .get
        )
        describe({"from": "+123", "content": "hello"})  # "hello"
    """
    return Matcher()
