"""Dispatch requests from AWS api-gateway to REST controllers."""

import base64
import json
import logging
import sys
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, Type

from aws_lambda_restify import StatusCode
from aws_lambda_restify.controller import Controller, resolve_helper
from aws_lambda_restify.gateway import ApigwPath
from aws_lambda_restify.routing import Frame, Match, Router
from aws_lambda_restify.types import Response


def _error(status_code: StatusCode, message: str) -> Response:
    return Response(
        status_code=status_code,
        content_type="application/json",
        body=json.dumps({"errorMessage": message}),
    )


class API:
    """API."""

    FORMAT_STRING = "[%(name)s] - [%(levelname)s] - %(message)s"

    def __init__(
        self,
        name: str,
        version: str = "0.0.1",
        description: Optional[str] = None,
        configure_logs: bool = True,
        debug: bool = False,
        https: bool = True,
        cors: bool = False,
    ) -> None:
        """Initialize API object."""
        self.name: str = name
        self.description: Optional[str] = description
        self.version: str = version
        self.routes: Router = Router()
        self.controllers: Dict[Tuple[str, str], Type[Controller]] = {}
        self.helpers: Dict[str, Callable] = {}
        self.plugins: Dict[str, Any] = {}
        self.context: Any = {}
        self.event: Dict = {}
        self.request_path: ApigwPath = ApigwPath({})
        self.debug: bool = debug
        self.https: bool = https
        self.cors: bool = cors
        self.log = logging.getLogger(self.name)
        if configure_logs:
            self._configure_logging()

    def __getattr__(self, name: str) -> Any:
        # helpers are reachable from the app too, e.g. ``app.restify.routes(...)``
        helpers = self.__dict__.get("helpers")
        if name.startswith("_") or helpers is None:
            raise AttributeError(name)
        return resolve_helper(self, helpers, name)

    @property
    def host(self) -> str:
        """Construct api gateway endpoint url."""
        headers = self.event.get("headers") or {}
        host = headers.get("x-forwarded-host", headers.get("host", ""))
        scheme = "https" if self.https else "http"
        return f"{scheme}://{host}{self.request_path.prefix}"

    def _configure_logging(self) -> None:
        if self._already_configured(self.log):
            return

        handler = logging.StreamHandler(sys.stdout)
        # Timestamp is handled by lambda itself so the
        # default FORMAT_STRING doesn't need to include it.
        formatter = logging.Formatter(self.FORMAT_STRING)
        handler.setFormatter(formatter)
        self.log.propagate = False
        if self.debug:
            level = logging.DEBUG
        else:
            level = logging.ERROR
        self.log.setLevel(level)
        self.log.addHandler(handler)

    def _already_configured(self, log) -> bool:
        if not log.handlers:
            return False

        for handler in log.handlers:
            if isinstance(handler, logging.StreamHandler):
                if handler.stream == sys.stdout:
                    return True

        return False

    def plugin(self, plugin_cls: Type, **conf: Any) -> Any:
        """Instantiate and register a plugin, returning it."""
        plugin = plugin_cls(**conf).register(self)
        self.plugins[plugin.name] = plugin
        return plugin

    def helper(self, name: str, helper: Callable) -> None:
        """Register helper, called with the controller (or app) first."""
        self.helpers[name] = helper

    def register_controller(
        self, controller_id: str, controller: Type[Controller], namespace: str = ""
    ) -> None:
        if (namespace, controller_id) in self.controllers:
            raise ValueError(
                f'Duplicate controller detected: "{namespace}:{controller_id}"'
            )
        self.controllers[(namespace, controller_id)] = controller

    def controller(self, controller_id: str, namespace: str = "") -> Callable:
        """Register controller class."""

        def _register_controller(cls):
            self.register_controller(controller_id, cls, namespace)
            return cls

        return _register_controller

    def url_for(self, name: str, **captures: Any) -> str:
        """Return the path of a named route."""
        route = self.routes.find(name)
        if route is None:
            raise ValueError(f'No route named "{name}"')
        return route.render(captures)

    def describe_routes(self) -> str:
        """Render the route table."""
        rows = [
            (f"{'  ' * depth}{'+' if depth else ''}{pattern}", methods, name, target)
            for depth, pattern, methods, name, target in self.routes.table()
        ]
        if not rows:
            return ""
        widths = [max(len(row[i]) for row in rows) for i in range(3)]
        lines = [
            "  ".join([*(row[i].ljust(widths[i]) for i in range(3)), row[3]]).rstrip()
            for row in rows
        ]
        return "\n".join(lines)

    def response(
        self,
        response: Response,
        cors: bool = False,
        accepted_methods: Optional[Sequence[str]] = None,
    ) -> Dict[str, Any]:
        """Return HTTP response.

        including response code (status), headers and body

        """
        accepted_methods = accepted_methods or []
        headers = dict(response.headers or {})
        headers["Content-Type"] = response.content_type

        if cors:
            headers["Access-Control-Allow-Origin"] = "*"
            headers["Access-Control-Allow-Methods"] = ",".join(accepted_methods)
            headers["Access-Control-Allow-Credentials"] = "true"

        message_data: Dict[str, Any] = {
            "headers": headers,
            "statusCode": response.status_code.value,
        }
        if isinstance(response.body, bytes):
            message_data["isBase64Encoded"] = True
            message_data["body"] = base64.b64encode(response.body).decode()
        else:
            message_data["body"] = response.body

        return message_data

    def _stash(self, event: Dict) -> Dict[str, Any]:
        stash: Dict[str, Any] = dict(event.get("queryStringParameters") or {})
        if self.request_path.method in ["POST", "PUT", "PATCH"] and event.get("body"):
            body = event["body"]
            if event.get("isBase64Encoded"):
                body = base64.b64decode(body).decode()
            stash["body"] = body
        return stash

    def _dispatch_frame(
        self, frame: Frame, match: Match, stash: Dict[str, Any]
    ) -> Tuple[Optional[Controller], Any]:
        namespace = frame.defaults.get("namespace", "")
        controller_id = frame.defaults.get("controller", "")
        action_name = frame.defaults.get("action", "")

        controller_cls = self.controllers.get((namespace, controller_id))
        if controller_cls is None:
            self.log.error(f"No controller for: {namespace}:{controller_id}")
            return None, None

        controller = controller_cls(self, self.event, self.context, match, stash)
        action = getattr(type(controller), action_name, None)
        if action_name.startswith("_") or not callable(action):
            self.log.error(f"No action {action_name} on controller {controller_id}")
            return None, None

        return controller, getattr(controller, action_name)()

    def _dispatch(self, match: Match) -> Response:
        stash = self._stash(self.event)
        for frame in match.frames:
            stash.update(frame.defaults)
            stash.update(frame.captures)

            controller, result = self._dispatch_frame(frame, match, stash)
            if controller is None:
                return _error(StatusCode.NOT_FOUND, "Not found")

            if frame.is_under:
                if not result:
                    return controller.rendered or _error(
                        StatusCode.NOT_FOUND, "Not found"
                    )
                continue

            if isinstance(result, Response):
                return result
            if controller.rendered is not None:
                return controller.rendered
            return Response(
                status_code=StatusCode.NO_CONTENT, content_type="text/plain", body=""
            )

        return _error(StatusCode.NOT_FOUND, "Not found")

    def __call__(self, event, context):
        """Initialize route and handlers."""
        self.log.debug(json.dumps(event, default=str))

        self.event = event
        self.context = context
        self.event["headers"] = {
            key.lower(): value for key, value in (event.get("headers") or {}).items()
        }

        self.request_path = ApigwPath(self.event)
        if self.request_path.path is None:
            return self.response(
                _error(StatusCode.BAD_REQUEST, "Missing or invalid path")
            )

        http_method = self.request_path.method
        match = self.routes.match(http_method, self.request_path.path)
        if match is None:
            error_message = (
                f"No view function for: {http_method} - {self.request_path.path}"
            )
            return self.response(_error(StatusCode.NOT_FOUND, error_message))

        try:
            response = self._dispatch(match)
        except Exception as err:
            self.log.error(str(err))
            response = _error(StatusCode.INTERNAL_SERVER_ERROR, str(err))

        return self.response(
            response=response,
            cors=self.cors,
            accepted_methods=match.endpoint.methods or [http_method],
        )
