"""Test patterns functionality."""

from aws_lambda_restify.patterns import (
    int_pattern,
    placeholder_expr,
    proxy_pattern,
    uuid_pattern,
)


def test_patterns_regex_usage():
    """Test that all patterns are working correctly."""
    # Test placeholder_expr
    path = "/accounts/<accounts_id>/invoices/<invoices_id>"
    matches = list(placeholder_expr.finditer(path))
    assert [match["name"] for match in matches] == ["accounts_id", "invoices_id"]

    # Test proxy_pattern
    match = proxy_pattern.search("/{proxy+}")
    assert match is not None
    assert match.groupdict()["name"] == "proxy"

    assert int_pattern.match("123")
    assert not int_pattern.match("12.3")
    assert not int_pattern.match("123\n")

    assert uuid_pattern.match("F5C21E12-8317-11E9-BF96-2E2CA3ACB545")
    assert not uuid_pattern.match("f5c21e12-8317-11e9-bf96")
    assert not uuid_pattern.match("F5C21E12-8317-11E9-BF96-2E2CA3ACB545\n")
