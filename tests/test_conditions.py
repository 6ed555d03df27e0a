"""Test identifier conditions."""

import pytest

from aws_lambda_restify.conditions import (
    IDENTIFIER_CONDITIONS,
    ConditionRegistry,
    int_condition,
    standard,
    uuid_condition,
)

UUID = "8ebef0d0-d6cf-11e4-8830-0800200c9a66"


@pytest.mark.parametrize("value", ["0", "1", "42", "1234567890", "007"])
def test_int_accepts_whole_numbers(value):
    """Non-negative integers are accepted."""
    assert int_condition({"numbers_id": value}, "numbers_id")


@pytest.mark.parametrize(
    "value", ["", "-1", "0.114", "one", "12a", "+3", " 1", "1 ", "12\n", "١٢"]
)
def test_int_rejects(value):
    """Signs, decimals, letters, whitespace and non ascii digits are rejected."""
    assert not int_condition({"numbers_id": value}, "numbers_id")


def test_int_without_pattern_uses_int_capture():
    """Without a pattern the capture named after the condition is checked."""
    assert int_condition({"int": "5"})
    assert not int_condition({"int": "x"})
    assert not int_condition({})


def test_int_pattern_falls_back_to_int_capture():
    """A missing pattern capture falls back to the condition's own capture."""
    assert int_condition({"int": "5"}, "missing_id")
    assert not int_condition({"other": "5"}, "missing_id")


@pytest.mark.parametrize(
    "value",
    [
        UUID,
        UUID.upper(),
        UUID.replace("-", ""),
        UUID.replace("-", "").upper(),
        "8ebef0d0d6cf-11e4-88300800200c9a66",
    ],
)
def test_uuid_accepts(value):
    """Hyphens are optional at the canonical positions, case is ignored."""
    assert uuid_condition({"uuids_id": value}, "uuids_id")


@pytest.mark.parametrize(
    "value",
    [
        "",
        "malformed-uuid",
        "8ebef0d-0d6cf-11e4-8830-0800200c9a66",
        UUID[:-1],
        UUID + "0",
        UUID.replace("a", "g"),
        UUID + "\n",
        UUID + " ",
    ],
)
def test_uuid_rejects(value):
    """Wrong length, misplaced hyphens and non hex digits are rejected."""
    assert not uuid_condition({"uuids_id": value}, "uuids_id")


def test_uuid_without_pattern_uses_uuid_capture():
    """Without a pattern the capture named after the condition is checked."""
    assert uuid_condition({"uuid": UUID})
    assert not uuid_condition({})


def test_standard_accepts_everything():
    """The standard condition leaves it to the placeholder."""
    assert standard({})
    assert standard({"news_id": "anything"}, "news_id")


def test_registry():
    """Conditions are registered, queried and checked by name."""
    registry = ConditionRegistry()
    assert "int" not in registry
    assert len(registry) == 0

    for name, condition in IDENTIFIER_CONDITIONS.items():
        registry.add(name, condition)

    assert sorted(registry) == ["int", "standard", "uuid"]
    assert registry.get("int") is int_condition
    assert registry.check("int", {"a_id": "1"}, "a_id")
    assert not registry.check("int", {"a_id": "a"}, "a_id")


def test_registry_unknown_condition_never_matches():
    """An unknown condition name rejects the route."""
    registry = ConditionRegistry()
    assert registry.get("nope") is None
    assert not registry.check("nope", {"a_id": "1"}, "a_id")
