"""Regex patterns for path parsing and identifier validation."""

import re

# Pattern matching expressions
placeholder_expr = re.compile(r"<(?P<name>[a-zA-Z0-9_]+)>")
proxy_pattern = re.compile(r"/{(?P<name>.+)\+}$")

# Standard placeholders stop at path separators and literal dots
standard_placeholder = r"[^/.]+"

int_pattern = re.compile(r"^\d+\Z", re.ASCII)
uuid_pattern = re.compile(
    r"^[a-f0-9]{8}-?[a-f0-9]{4}-?[a-f0-9]{4}-?[a-f0-9]{4}-?[a-f0-9]{12}\Z",
    re.IGNORECASE,
)
