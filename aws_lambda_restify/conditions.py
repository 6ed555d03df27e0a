"""Route conditions restricting what an element placeholder may capture.

A condition is called with the placeholder captures accumulated so far and,
optionally, the name of the placeholder it guards. It returns a truthy value
when the route may match.
"""

from typing import Callable, Dict, Iterator, Mapping, Optional

from aws_lambda_restify.patterns import int_pattern, uuid_pattern

Condition = Callable[[Mapping[str, str], Optional[str]], bool]


def _captured(captures: Mapping[str, str], pattern: Optional[str], key: str) -> str:
    if pattern is not None:
        value = captures.get(pattern)
        if value is None:
            value = captures.get(key)
    else:
        value = captures.get(key)
    return value or ""


def standard(captures: Mapping[str, str], pattern: Optional[str] = None) -> bool:
    """Accept anything the standard placeholder captured."""
    return True


def int_condition(captures: Mapping[str, str], pattern: Optional[str] = None) -> bool:
    """Accept whole numbers >= 0 only."""
    return bool(int_pattern.match(_captured(captures, pattern, "int")))


def uuid_condition(captures: Mapping[str, str], pattern: Optional[str] = None) -> bool:
    """Accept UUIDs in any case, with or without the separating hyphens."""
    return bool(uuid_pattern.match(_captured(captures, pattern, "uuid")))


IDENTIFIER_CONDITIONS: Dict[str, Condition] = {
    "int": int_condition,
    "standard": standard,
    "uuid": uuid_condition,
}


class ConditionRegistry:
    """Named route conditions available to a router."""

    def __init__(self) -> None:
        self._conditions: Dict[str, Condition] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._conditions

    def __iter__(self) -> Iterator[str]:
        return iter(self._conditions)

    def __len__(self) -> int:
        return len(self._conditions)

    def add(self, name: str, condition: Condition) -> None:
        """Register condition under name, replacing any previous one."""
        self._conditions[name] = condition

    def get(self, name: str) -> Optional[Condition]:
        return self._conditions.get(name)

    def check(
        self, name: str, captures: Mapping[str, str], pattern: Optional[str] = None
    ) -> bool:
        """Evaluate a named condition. Unknown names never match."""
        condition = self._conditions.get(name)
        if condition is None:
            return False
        return bool(condition(captures, pattern))
