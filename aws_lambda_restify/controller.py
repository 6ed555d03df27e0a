"""Dispatch targets for matched routes."""

import json
from typing import Any, Callable, Dict, Optional

from aws_lambda_restify import StatusCode
from aws_lambda_restify.routing import Match
from aws_lambda_restify.types import Response


class HelperProxy:
    """Attribute access to dotted helpers, e.g. ``c.restify.current_id()``."""

    def __init__(self, owner: Any, helpers: Dict[str, Callable], namespace: str = ""):
        """Initialize helper namespace."""
        self._owner = owner
        self._helpers = helpers
        self._namespace = namespace

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return resolve_helper(self._owner, self._helpers, f"{self._namespace}{name}")


def resolve_helper(owner: Any, helpers: Dict[str, Callable], name: str) -> Any:
    """Bind helper name to owner, or return the namespace it starts."""
    if name in helpers:
        helper = helpers[name]
        return lambda *args, **kwargs: helper(owner, *args, **kwargs)
    if any(key.startswith(f"{name}.") for key in helpers):
        return HelperProxy(owner, helpers, f"{name}.")
    raise AttributeError(
        f"'{type(owner).__name__}' object has no attribute or helper '{name}'"
    )


class Controller:
    """Base class for controllers.

    Actions are plain methods taking no arguments. Route defaults, captured
    placeholders, query string parameters and the request ``body`` are in
    ``self.stash``, which is shared by every action of the dispatch chain.
    Actions return a ``Response`` or call ``render``; ``under`` actions
    return a truthy value to continue the chain.
    """

    def __init__(
        self,
        app,
        event: Dict,
        context: Any,
        match: Optional[Match],
        stash: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize controller for one dispatch step."""
        self.app = app
        self.event = event
        self.context = context
        self.match = match
        self.stash: Dict[str, Any] = stash if stash is not None else {}
        self.rendered: Optional[Response] = None

    def __getattr__(self, name: str) -> Any:
        app = self.__dict__.get("app")
        if name.startswith("_") or app is None:
            raise AttributeError(name)
        return resolve_helper(self, app.helpers, name)

    def under(self) -> bool:
        """Continue the dispatch chain by default."""
        return True

    def render(
        self,
        json: Any = None,
        text: Optional[str] = None,
        status: StatusCode = StatusCode.OK,
        headers: Optional[Dict[str, str]] = None,
    ) -> Response:
        """Render a JSON or plain text response."""
        if json is not None:
            content_type, body = "application/json", _dumps(json)
        else:
            content_type, body = "text/plain", text or ""
        self.rendered = Response(
            status_code=status, content_type=content_type, body=body, headers=headers
        )
        return self.rendered

    def not_found(self, message: str = "Not found") -> Response:
        return self.render(json={"errorMessage": message}, status=StatusCode.NOT_FOUND)

    def url_for(self, name: str, **captures: Any) -> str:
        """Build the path of a named route, reusing captures of this request."""
        values = dict(self.match.captures) if self.match is not None else {}
        values.update(captures)
        return self.app.request_path.prefix + self.app.url_for(name, **values)


def _dumps(value: Any) -> str:
    return json.dumps(value, default=str)
