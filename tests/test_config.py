"""Tests for config parsing and loading (patmatch._config).

Validates the dict → shorthand → MatcherConfig → Matcher path.
"""

import logging

import pytest

from patmatch import (
    MAX_CASES,
    MAX_REGEX_PATTERN_LENGTH,
    UNDEFINED,
    ArraySchema,
    CaseConfig,
    ConfigParseError,
    LiteralSchema,
    MatcherError,
    NoMatchError,
    NumberSchema,
    ObjectSchema,
    PatternTooLongError,
    RegexSchema,
    StringSchema,
    TooManyCasesError,
    TupleSchema,
    UnknownSchema,
    compile_shorthand,
    load_matcher,
    parse_matcher_config,
    parse_shorthand,
)


class TestParseShorthand:
    """Tests for parse_shorthand()."""

    def test_scalars_are_literals(self) -> None:
        assert parse_shorthand("sms") == "sms"
        assert parse_shorthand(3) == 3
        assert parse_shorthand(True) is True
        assert parse_shorthand(None) is None

    def test_primitive_types(self) -> None:
        assert parse_shorthand({"type": "string"}) is str
        assert parse_shorthand({"type": "number"}) is float
        assert parse_shorthand({"type": "integer"}) is int
        assert parse_shorthand({"type": "boolean"}) is bool

    def test_unknown_and_undefined(self) -> None:
        assert parse_shorthand({"type": "unknown"}) == UnknownSchema()
        assert parse_shorthand({"type": "undefined"}) is UNDEFINED
        assert parse_shorthand({"type": "null"}) is None

    def test_literal(self) -> None:
        assert parse_shorthand({"type": "literal", "value": "string"}) == "string"

    def test_literal_requires_scalar(self) -> None:
        with pytest.raises(ConfigParseError, match="scalar"):
            parse_shorthand({"type": "literal", "value": [1]})

    def test_literal_requires_value(self) -> None:
        with pytest.raises(ConfigParseError, match="'value'"):
            parse_shorthand({"type": "literal"})

    def test_regex(self) -> None:
        assert parse_shorthand({"type": "regex", "pattern": r"\?$"}) == RegexSchema(r"\?$")

    def test_regex_requires_pattern(self) -> None:
        with pytest.raises(ConfigParseError, match="'pattern'"):
            parse_shorthand({"type": "regex"})

    def test_invalid_regex(self) -> None:
        with pytest.raises(ConfigParseError, match="invalid regex"):
            parse_shorthand({"type": "regex", "pattern": "[invalid"})

    def test_regex_too_long(self) -> None:
        pattern = "a" * (MAX_REGEX_PATTERN_LENGTH + 1)
        with pytest.raises(PatternTooLongError) as exc_info:
            parse_shorthand({"type": "regex", "pattern": pattern})
        assert exc_info.value.length == MAX_REGEX_PATTERN_LENGTH + 1
        assert exc_info.value.max == MAX_REGEX_PATTERN_LENGTH

    def test_regex_at_limit(self) -> None:
        pattern = "a" * MAX_REGEX_PATTERN_LENGTH
        assert parse_shorthand({"type": "regex", "pattern": pattern}) == RegexSchema(pattern)

    def test_array(self) -> None:
        assert parse_shorthand({"type": "array"}) is list
        assert parse_shorthand({"type": "array", "items": {"type": "string"}}) == [str]

    def test_tuple(self) -> None:
        data = {"type": "tuple", "items": [{"type": "string"}, {"type": "number"}]}
        assert parse_shorthand(data) == [2, [str, float]]

    def test_tuple_requires_items(self) -> None:
        with pytest.raises(ConfigParseError, match="non-empty"):
            parse_shorthand({"type": "tuple", "items": []})

    def test_object(self) -> None:
        assert parse_shorthand({"type": "object"}) is dict
        data = {"type": "object", "fields": {"kind": "sms", "content": {"type": "string"}}}
        assert parse_shorthand(data) == {"kind": "sms", "content": str}

    def test_object_fields_must_be_dict(self) -> None:
        with pytest.raises(ConfigParseError, match="'fields'"):
            parse_shorthand({"type": "object", "fields": ["kind"]})

    def test_missing_type(self) -> None:
        with pytest.raises(ConfigParseError, match="'type'"):
            parse_shorthand({"kind": "sms"})

    def test_unknown_type(self) -> None:
        with pytest.raises(ConfigParseError, match="unknown shorthand type"):
            parse_shorthand({"type": "date"})

    def test_lists_are_rejected(self) -> None:
        with pytest.raises(ConfigParseError, match="scalar or a dict"):
            parse_shorthand([{"type": "string"}])

    def test_compiles_to_matching_schemas(self) -> None:
        data = {
            "type": "object",
            "fields": {
                "tags": {"type": "array", "items": {"type": "string"}},
                "point": {"type": "tuple", "items": [{"type": "number"}, {"type": "number"}]},
            },
        }
        assert compile_shorthand(parse_shorthand(data)) == ObjectSchema(
            {
                "tags": ArraySchema(StringSchema()),
                "point": TupleSchema((NumberSchema(), NumberSchema())),
            }
        )


class TestParseMatcherConfig:
    """Tests for parse_matcher_config()."""

    def test_simple(self) -> None:
        data = {
            "cases": [
                {"when": "hi", "action": "greeting"},
                {"when": {"type": "number"}, "action": "number"},
            ],
            "default": "other",
        }
        config = parse_matcher_config(data)
        assert config.cases == (
            CaseConfig(LiteralSchema("hi"), "greeting"),
            CaseConfig(NumberSchema(), "number"),
        )
        assert config.default == "other"

    def test_default_is_optional(self) -> None:
        config = parse_matcher_config({"cases": []})
        assert config.cases == ()
        assert config.default is UNDEFINED

    def test_null_default_is_kept(self) -> None:
        config = parse_matcher_config({"cases": [], "default": None})
        assert config.default is None

    def test_not_a_dict(self) -> None:
        with pytest.raises(ConfigParseError, match="expected dict"):
            parse_matcher_config([])  # type: ignore[arg-type]

    def test_missing_cases(self) -> None:
        with pytest.raises(ConfigParseError, match="'cases'"):
            parse_matcher_config({"default": "x"})

    def test_cases_must_be_list(self) -> None:
        with pytest.raises(ConfigParseError, match="must be a list"):
            parse_matcher_config({"cases": {"when": "a", "action": "b"}})

    def test_case_missing_when(self) -> None:
        with pytest.raises(ConfigParseError, match="'when'"):
            parse_matcher_config({"cases": [{"action": "x"}]})

    def test_case_missing_action(self) -> None:
        with pytest.raises(ConfigParseError, match="'action'"):
            parse_matcher_config({"cases": [{"when": "x"}]})

    def test_malformed_tuple_is_a_parse_error(self) -> None:
        data = {"cases": [{"when": {"type": "tuple"}, "action": "x"}]}
        with pytest.raises(ConfigParseError):
            parse_matcher_config(data)

    def test_too_many_cases(self) -> None:
        data = {"cases": [{"when": i, "action": i} for i in range(MAX_CASES + 1)]}
        with pytest.raises(TooManyCasesError) as exc_info:
            parse_matcher_config(data)
        assert exc_info.value.count == MAX_CASES + 1
        assert exc_info.value.max == MAX_CASES

    def test_errors_share_a_base(self) -> None:
        assert issubclass(TooManyCasesError, ConfigParseError)
        assert issubclass(PatternTooLongError, ConfigParseError)
        assert issubclass(ConfigParseError, MatcherError)


class TestLoadMatcher:
    """Tests for load_matcher()."""

    def test_returns_actions(self) -> None:
        config = parse_matcher_config(
            {
                "cases": [
                    {"when": "hi", "action": "you just said hi"},
                    {"when": {"type": "regex", "pattern": "^h"}, "action": "greeting"},
                    {"when": {"type": "string"}, "action": "text"},
                    {
                        "when": {"type": "object", "fields": {"kind": "sms"}},
                        "action": "sms",
                    },
                ],
                "default": "other",
            }
        )
        get = load_matcher(config).get
        assert get("hi") == "you just said hi"
        assert get("hello") == "greeting"
        assert get("bonjour") == "text"
        assert get({"kind": "sms", "content": "x"}) == "sms"
        assert get(37) == "other"

    def test_first_match_wins(self) -> None:
        config = parse_matcher_config(
            {
                "cases": [
                    {"when": {"type": "number"}, "action": "first"},
                    {"when": 7, "action": "second"},
                ]
            }
        )
        assert load_matcher(config).get(7) == "first"

    def test_no_default_raises(self) -> None:
        config = parse_matcher_config({"cases": [{"when": {"type": "string"}, "action": "s"}]})
        with pytest.raises(NoMatchError):
            load_matcher(config).get(1)

    def test_null_default_action(self) -> None:
        config = parse_matcher_config(
            {"cases": [{"when": {"type": "string"}, "action": "s"}], "default": None}
        )
        get = load_matcher(config).get
        assert get("x") == "s"
        assert get(1) is None

    def test_structured_actions(self) -> None:
        config = parse_matcher_config(
            {"cases": [{"when": {"type": "boolean"}, "action": {"route": "flags", "weight": 2}}]}
        )
        assert load_matcher(config).get(False) == {"route": "flags", "weight": 2}

    def test_logs_summary(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG, logger="patmatch._config")
        load_matcher(parse_matcher_config({"cases": [], "default": "x"}))
        assert "loaded matcher with 0 cases (default: True)" in caplog.text
