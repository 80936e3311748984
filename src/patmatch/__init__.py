"""patmatch — runtime pattern matching over values of unknown shape.

All public types are exported from this module for flat imports:

    from patmatch import match, matcher, compile_shorthand, NoMatchError
"""

__version__ = "0.1.0"

# Config types: see patmatch._config for details
from patmatch._config import (
    MAX_CASES,
    MAX_REGEX_PATTERN_LENGTH,
    CaseConfig,
    ConfigParseError,
    MatcherConfig,
    PatternTooLongError,
    TooManyCasesError,
    load_matcher,
    parse_matcher_config,
    parse_shorthand,
)

# Matchers
from patmatch._matcher import (
    Case,
    Dispatcher,
    Match,
    Matcher,
    NoMatchError,
    UnreachableCaseWarning,
    dispatch,
    match,
    matcher,
)

# Schemas
from patmatch._schema import (
    ArraySchema,
    BooleanSchema,
    IntegerSchema,
    LiteralSchema,
    ModelSchema,
    NullSchema,
    NumberSchema,
    ObjectSchema,
    RefinedSchema,
    RegexSchema,
    SchemaType,
    StringSchema,
    TupleSchema,
    UndefinedSchema,
    UnknownSchema,
    refine,
    validate,
)

# Shorthand compiler
from patmatch._shorthand import ShorthandError, compile_shorthand
from patmatch._types import UNDEFINED, Invalid, MatcherError, Schema, Valid, Validation

__all__ = [
    # Protocols and results
    "Schema",
    "Valid",
    "Invalid",
    "Validation",
    "UNDEFINED",
    # Matchers
    "match",
    "matcher",
    "Match",
    "Matcher",
    "Dispatcher",
    "Case",
    "dispatch",
    "MatcherError",
    "NoMatchError",
    "UnreachableCaseWarning",
    # Shorthand compiler
    "compile_shorthand",
    "ShorthandError",
    # Schemas
    "SchemaType",
    "UnknownSchema",
    "UndefinedSchema",
    "NullSchema",
    "StringSchema",
    "NumberSchema",
    "IntegerSchema",
    "BooleanSchema",
    "LiteralSchema",
    "RegexSchema",
    "ArraySchema",
    "TupleSchema",
    "ObjectSchema",
    "ModelSchema",
    "RefinedSchema",
    "validate",
    "refine",
    # Config
    "CaseConfig",
    "MatcherConfig",
    "ConfigParseError",
    "TooManyCasesError",
    "PatternTooLongError",
    "parse_shorthand",
    "parse_matcher_config",
    "load_matcher",
    "MAX_CASES",
    "MAX_REGEX_PATTERN_LENGTH",
]
