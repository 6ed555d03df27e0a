"""Route tree, matching and reverse routing.

Routes form a tree. Each node matches a piece of the path (``/accounts``,
``/<accounts_id>`` or nothing at all) and may restrict the HTTP methods it
accepts. Nodes with children are waypoints; only leaves are endpoints.
``under`` nodes gate their descendants: they are dispatched before the
endpoint and may stop the chain.
"""

import functools
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from aws_lambda_restify.conditions import Condition, ConditionRegistry
from aws_lambda_restify.patterns import placeholder_expr, standard_placeholder


def _pattern_to_regex(pattern: str) -> str:
    regex = ""
    position = 0
    for match in placeholder_expr.finditer(pattern):
        regex += re.escape(pattern[position : match.start()])
        regex += f"(?P<{match['name']}>{standard_placeholder})"
        position = match.end()
    regex += re.escape(pattern[position:])
    return f"^{regex}"


@dataclass(frozen=True)
class Frame:
    """One dispatch step: an ``under`` or the endpoint itself."""

    route: "Route"
    captures: Dict[str, str]
    defaults: Dict[str, Any]

    @property
    def is_under(self) -> bool:
        return self.route.is_under


@dataclass(frozen=True)
class Match:
    """Ordered frames matched for a request, endpoint last."""

    frames: Tuple[Frame, ...]

    @property
    def endpoint(self) -> "Route":
        return self.frames[-1].route

    @property
    def captures(self) -> Dict[str, str]:
        return self.frames[-1].captures


class Route:
    """A node of the route tree."""

    def __init__(self, pattern: str = "", parent: Optional["Route"] = None) -> None:
        """Initialize route node."""
        self.pattern = pattern
        self.parent = parent
        self.children: List[Route] = []
        self.methods: Optional[List[str]] = None
        self.defaults: Dict[str, Any] = {}
        self.guards: List[Tuple[str, Optional[str]]] = []
        self.is_under = False
        self.route_name: Optional[str] = None
        self.placeholders = [m["name"] for m in placeholder_expr.finditer(pattern)]
        self.regex = re.compile(_pattern_to_regex(pattern))

    def __repr__(self) -> str:
        return f"<Route {self.to_string()!r} name={self.route_name!r}>"

    def __getattr__(self, name: str) -> Callable:
        # Route shortcuts registered on the root, e.g. ``route.collection(...)``
        if name.startswith("_") or name == "shortcuts":
            raise AttributeError(name)
        shortcut = getattr(self.root, "shortcuts", {}).get(name)
        if shortcut is None:
            raise AttributeError(
                f"'{type(self).__name__}' object has no attribute or shortcut '{name}'"
            )
        return functools.partial(shortcut, self)

    @property
    def root(self) -> "Route":
        route = self
        while route.parent is not None:
            route = route.parent
        return route

    @property
    def is_endpoint(self) -> bool:
        return not self.children

    def route(self, pattern: str = "") -> "Route":
        """Add a child route matching pattern."""
        child = Route(pattern, parent=self)
        self.children.append(child)
        return child

    def any(self, pattern: str = "", methods: Optional[List[str]] = None) -> "Route":
        """Add a child route, optionally restricted to methods."""
        child = self.route(pattern)
        if methods:
            child.methods = [method.upper() for method in methods]
        return child

    def get(self, pattern: str = "") -> "Route":
        return self.any(pattern, ["GET"])

    def post(self, pattern: str = "") -> "Route":
        return self.any(pattern, ["POST"])

    def put(self, pattern: str = "") -> "Route":
        return self.any(pattern, ["PUT"])

    def patch(self, pattern: str = "") -> "Route":
        return self.any(pattern, ["PATCH"])

    def delete(self, pattern: str = "") -> "Route":
        return self.any(pattern, ["DELETE"])

    def under(self, pattern: str = "") -> "Route":
        """Add a child route dispatched before any of its descendants."""
        child = self.route(pattern)
        child.is_under = True
        return child

    def to(self, **defaults: Any) -> "Route":
        """Set dispatch target (``controller``, ``action``, ``namespace``, ...)."""
        self.defaults.update(defaults)
        return self

    def name(self, name: str) -> "Route":
        self.route_name = name
        return self

    def over(self, condition: str, placeholder: Optional[str] = None) -> "Route":
        """Guard this route with a named condition, optionally on one placeholder."""
        if placeholder is not None and placeholder not in self.placeholders:
            raise ValueError(
                f"'{placeholder}' is not a placeholder of route '{self.pattern}'"
            )
        self.guards.append((condition, placeholder))
        return self

    def walk(self) -> Iterator["Route"]:
        """Yield this route and all descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def find(self, name: str) -> Optional["Route"]:
        """Return the first route named name."""
        return next((route for route in self.walk() if route.route_name == name), None)

    def to_string(self) -> str:
        """Return the full pattern from the root to this route."""
        patterns = []
        route: Optional[Route] = self
        while route is not None:
            patterns.append(route.pattern)
            route = route.parent
        return "".join(reversed(patterns)) or "/"

    def render(self, captures: Mapping[str, Any]) -> str:
        """Build a path for this route, filling in placeholders from captures."""
        return placeholder_expr.sub(
            lambda match: str(captures[match["name"]]), self.to_string()
        )

    def target(self) -> str:
        controller = self.defaults.get("controller", "")
        action = self.defaults.get("action", "")
        if not controller and not action:
            return ""
        return f"{controller}#{action}"

    def table(self, depth: int = 0) -> List[Tuple[int, str, str, str, str]]:
        """Describe descendants as ``(depth, pattern, methods, name, target)`` rows."""
        rows = []
        for child in self.children:
            methods = ",".join(child.methods) if child.methods else "*"
            name = child.route_name or ""
            rows.append((depth, child.pattern or "/", methods, name, child.target()))
            rows.extend(child.table(depth + 1))
        return rows

    def _match(
        self,
        method: str,
        path: str,
        captures: Dict[str, str],
        defaults: Dict[str, Any],
        frames: Tuple[Frame, ...],
        conditions: ConditionRegistry,
    ) -> Optional[Match]:
        found = self.regex.match(path)
        if found is None:
            return None

        rest = path[found.end() :]
        if self.pattern and rest and not rest.startswith("/"):
            return None

        captures = {**captures, **found.groupdict()}
        defaults = {**defaults, **self.defaults}
        for condition, placeholder in self.guards:
            if not conditions.check(condition, captures, placeholder):
                return None

        if self.is_under:
            frames = frames + (Frame(self, captures, defaults),)

        if self.children:
            for child in self.children:
                match = child._match(
                    method, rest, captures, defaults, frames, conditions
                )
                if match is not None:
                    return match
            return None

        if rest not in ("", "/"):
            return None
        if self.methods is not None and method not in self.methods:
            return None
        if self.is_under:
            return Match(frames)
        return Match(frames + (Frame(self, captures, defaults),))


class Router(Route):
    """Root of a route tree, owning its conditions and shortcuts."""

    def __init__(self) -> None:
        """Initialize router."""
        super().__init__("")
        self.conditions = ConditionRegistry()
        self.shortcuts: Dict[str, Callable] = {}

    def add_condition(self, name: str, condition: Condition) -> "Router":
        self.conditions.add(name, condition)
        return self

    def add_shortcut(self, name: str, shortcut: Callable) -> "Router":
        """Make shortcut callable as a method of every route in this tree."""
        if hasattr(Route, name):
            raise ValueError(f"Shortcut '{name}' would shadow a route method")
        self.shortcuts[name] = shortcut
        return self

    def match(self, method: str, path: str) -> Optional[Match]:
        """Match a request, returning its dispatch frames or None."""
        return self._match(method.upper(), path or "/", {}, {}, (), self.conditions)
