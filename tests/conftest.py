"""Conformance fixture loader for patmatch.

Loads YAML fixtures from tests/fixtures/ and turns each document into a
loaded Matcher plus the values it must classify. Documents marked
``expect_error: true`` carry a config that must fail to parse.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from patmatch import Dispatcher, load_matcher, parse_matcher_config

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


@dataclass
class FixtureCase:
    """A single value from a conformance fixture and the action it must produce.

    ``expect`` None means no case accepts the value.
    """

    fixture_name: str
    case_name: str
    get: Dispatcher
    value: Any
    expect: Any | None


@dataclass
class ErrorFixture:
    """A config that must be rejected at parse time."""

    fixture_name: str
    config: Any
    error: str | None


# ─── Fixture loading ────────────────────────────────────────────────────────


def _load_documents() -> list[tuple[str, dict[str, Any]]]:
    docs: list[tuple[str, dict[str, Any]]] = []
    for yaml_file in sorted(FIXTURES_DIR.glob("*.yaml")):
        with yaml_file.open() as f:
            for doc in yaml.safe_load_all(f):
                if doc is None:
                    continue
                docs.append((yaml_file.stem, doc))
    return docs


def load_fixtures() -> list[FixtureCase]:
    """Load all positive conformance fixtures."""
    cases: list[FixtureCase] = []
    for source, doc in _load_documents():
        if doc.get("expect_error", False):
            continue
        fixture_name = f"{source}::{doc['name']}"
        get = load_matcher(parse_matcher_config(doc["config"])).get
        for case in doc["cases"]:
            cases.append(
                FixtureCase(
                    fixture_name=fixture_name,
                    case_name=case["name"],
                    get=get,
                    value=case["value"],
                    expect=case["expect"],
                )
            )
    return cases


def load_error_fixtures() -> list[ErrorFixture]:
    """Load all fixtures whose config must be rejected."""
    return [
        ErrorFixture(
            fixture_name=f"{source}::{doc['name']}",
            config=doc["config"],
            error=doc.get("error"),
        )
        for source, doc in _load_documents()
        if doc.get("expect_error", False)
    ]
