"""Config types for data-driven matcher construction.

Config-driven path (JSON/YAML dicts, no Python callables involved):
  dict → parse_matcher_config() → MatcherConfig → load_matcher() → Matcher

Each case pairs a shorthand, written in config form, with an action value
that the loaded matcher returns when the case wins::

    cases:
      - when: {type: string}
        action: text
      - when: {type: tuple, items: [{type: number}, {type: number}]}
        action: pair
    default: other

Config shorthand forms:

| config                                   | shorthand             |
|------------------------------------------|-----------------------|
| scalar (string, number, bool, null)      | literal / None        |
| {type: unknown}                          | accept anything       |
| {type: undefined}                        | UNDEFINED             |
| {type: string / number / integer / boolean} | str / float / int / bool |
| {type: literal, value: v}                | literal v             |
| {type: regex, pattern: "..."}            | RegexSchema           |
| {type: array[, items: X]}                | list / [X]            |
| {type: tuple, items: [X1..XN]}           | [N, [X1..XN]]         |
| {type: object[, fields: {k: X}]}         | dict / {k: X}         |
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from patmatch._matcher import Matcher, matcher
from patmatch._schema import RegexSchema
from patmatch._shorthand import compile_shorthand
from patmatch._types import UNDEFINED, MatcherError

if TYPE_CHECKING:
    from collections.abc import Callable

    from patmatch._types import Schema, _Undefined

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Limits
# ═══════════════════════════════════════════════════════════════════════════════

MAX_CASES = 256
MAX_REGEX_PATTERN_LENGTH = 4096

# ═══════════════════════════════════════════════════════════════════════════════
# Error types
# ═══════════════════════════════════════════════════════════════════════════════


class ConfigParseError(MatcherError):
    """Error parsing a config dict into config types."""


class TooManyCasesError(ConfigParseError):
    """Config declares more cases than MAX_CASES."""

    def __init__(self, count: int, max_: int) -> None:
        self.count = count
        self.max = max_
        super().__init__(f"too many cases: {count} exceeds maximum {max_}")


class PatternTooLongError(ConfigParseError):
    """A regex pattern exceeds the length limit."""

    def __init__(self, length: int, max_: int) -> None:
        self.length = length
        self.max = max_
        super().__init__(f"pattern length {length} exceeds maximum {max_}")


# ═══════════════════════════════════════════════════════════════════════════════
# Config types
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CaseConfig[A]:
    """A compiled schema and the action returned when it matches."""

    schema: Schema
    action: A


@dataclass(frozen=True, slots=True)
class MatcherConfig[A]:
    """Configuration for a Matcher.

    ``default`` is the action for values no case accepts. It may be any value,
    None included; UNDEFINED (the config has no ``default`` key) means the
    loaded matcher raises NoMatchError instead.
    """

    cases: tuple[CaseConfig[A], ...]
    default: A | _Undefined = UNDEFINED


# ═══════════════════════════════════════════════════════════════════════════════
# Parsing (dict → config types)
# ═══════════════════════════════════════════════════════════════════════════════

_SCALAR_TYPES = MappingProxyType(
    {"string": str, "number": float, "integer": int, "boolean": bool}
)


def _is_scalar(data: Any) -> bool:
    return data is None or isinstance(data, str | int | float | bool)


def parse_shorthand(data: Any) -> Any:
    """Convert a JSON/YAML value into a shorthand accepted by compile_shorthand().

    Raises:
        ConfigParseError: If the value is malformed.
        PatternTooLongError: If a regex pattern exceeds MAX_REGEX_PATTERN_LENGTH.
    """
    if _is_scalar(data):
        return data
    if not isinstance(data, dict):
        msg = f"shorthand must be a scalar or a dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    kind = data.get("type")
    if kind is None:
        msg = "shorthand missing required field 'type'"
        raise ConfigParseError(msg)

    match kind:
        case "unknown":
            return compile_shorthand()
        case "undefined":
            return UNDEFINED
        case "null":
            return None
        case "string" | "number" | "integer" | "boolean":
            return _SCALAR_TYPES[kind]
        case "literal":
            return _parse_literal(data)
        case "regex":
            return _parse_regex(data)
        case "array":
            if "items" not in data:
                return list
            return [parse_shorthand(data["items"])]
        case "tuple":
            return _parse_tuple(data)
        case "object":
            return _parse_object(data)
        case _:
            msg = f"unknown shorthand type: {kind!r}"
            raise ConfigParseError(msg)


def _parse_literal(data: dict[str, Any]) -> Any:
    if "value" not in data:
        msg = "literal shorthand missing required field 'value'"
        raise ConfigParseError(msg)
    value = data["value"]
    if not _is_scalar(value):
        msg = f"literal value must be a scalar, got {type(value).__name__}"
        raise ConfigParseError(msg)
    return value


def _parse_regex(data: dict[str, Any]) -> RegexSchema:
    pattern = data.get("pattern")
    if not isinstance(pattern, str):
        msg = f"regex shorthand requires a 'pattern' string, got {type(pattern).__name__}"
        raise ConfigParseError(msg)
    if len(pattern) > MAX_REGEX_PATTERN_LENGTH:
        raise PatternTooLongError(len(pattern), MAX_REGEX_PATTERN_LENGTH)
    try:
        return RegexSchema(pattern)
    except MatcherError as e:
        msg = f"invalid regex pattern: {e}"
        raise ConfigParseError(msg) from e


def _parse_tuple(data: dict[str, Any]) -> list[Any]:
    items = data.get("items")
    if not isinstance(items, list) or not items:
        msg = "tuple shorthand requires a non-empty 'items' list"
        raise ConfigParseError(msg)
    return [len(items), [parse_shorthand(item) for item in items]]


def _parse_object(data: dict[str, Any]) -> Any:
    if "fields" not in data:
        return dict
    fields = data["fields"]
    if not isinstance(fields, dict):
        msg = f"'fields' must be a dict, got {type(fields).__name__}"
        raise ConfigParseError(msg)
    return {key: parse_shorthand(value) for key, value in fields.items()}


def parse_matcher_config(data: dict[str, Any]) -> MatcherConfig[Any]:
    """Parse a dict into a MatcherConfig.

    This is the main entry point for config loading. Case shorthands are
    compiled here, so a MatcherConfig always holds ready-to-use schemas.

    Raises:
        ConfigParseError: If the dict is malformed.
        TooManyCasesError: If there are more than MAX_CASES cases.
    """
    if not isinstance(data, dict):
        msg = f"expected dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    raw_cases = data.get("cases")
    if raw_cases is None:
        msg = "missing required field 'cases'"
        raise ConfigParseError(msg)
    if not isinstance(raw_cases, list):
        msg = f"'cases' must be a list, got {type(raw_cases).__name__}"
        raise ConfigParseError(msg)
    if len(raw_cases) > MAX_CASES:
        raise TooManyCasesError(len(raw_cases), MAX_CASES)

    cases = tuple(_parse_case(c) for c in raw_cases)
    return MatcherConfig(cases=cases, default=data.get("default", UNDEFINED))


def _parse_case(data: dict[str, Any]) -> CaseConfig[Any]:
    if not isinstance(data, dict):
        msg = f"case must be a dict, got {type(data).__name__}"
        raise ConfigParseError(msg)
    if "when" not in data:
        msg = "case missing required field 'when'"
        raise ConfigParseError(msg)
    if "action" not in data:
        msg = "case missing required field 'action'"
        raise ConfigParseError(msg)

    shorthand = parse_shorthand(data["when"])
    return CaseConfig(schema=compile_shorthand(shorthand), action=data["action"])


# ═══════════════════════════════════════════════════════════════════════════════
# Loading (config types → Matcher)
# ═══════════════════════════════════════════════════════════════════════════════


def load_matcher(config: MatcherConfig[Any]) -> Matcher:
    """Build a deferred Matcher whose handlers return the configured actions."""
    built = matcher()
    for case_config in config.cases:
        built = built.case(case_config.schema, _constant(case_config.action))
    if config.default is not UNDEFINED:
        built = built.default(_constant(config.default))
    logger.debug(
        "loaded matcher with %d cases (default: %s)",
        len(config.cases),
        config.default is not UNDEFINED,
    )
    return built


def _constant[A](action: A) -> Callable[[Any], A]:
    def handler(_value: Any) -> A:
        return action

    return handler
