"""Route shortcuts and helpers for REST collections.

    app = API(name="app")
    restify = app.plugin(Restify, validator="uuid")

    accounts = app.routes.collection("accounts")   # /accounts
    accounts.collection("invoices")                # /accounts/<accounts_id>/invoices

    # or the equivalent tree from a declarative spec
    restify.routes(app.routes, {"accounts": {"invoices": None}})

A collection called ``accounts`` creates the routes below and maps them to
the ``accounts`` controller::

    /accounts              *        accounts
      +/                   GET      accounts_list      accounts#list
      +/                   POST     accounts_create    accounts#create
      +/<accounts_id>      *        accounts
        +/                 *        accounts_under     #under
          +/               DELETE   accounts_delete    #delete
          +/               GET      accounts_read      #read
          +/               PATCH    accounts_patch     #patch
          +/               PUT      accounts_update    #update
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from aws_lambda_restify.conditions import IDENTIFIER_CONDITIONS
from aws_lambda_restify.naming import (
    controller_id,
    names,
    placeholder,
    route_name,
    strip_namespace,
)
from aws_lambda_restify.routing import Route

OPTION_NAMES = ("validator", "under", "element", "controller", "prefix")
FALSE_STRINGS = ("", "0", "false", "no", "off")
TRUE_STRINGS = ("1", "true", "yes", "on")


def _flag(value: Any) -> Optional[bool]:
    if isinstance(value, (bool, int)):
        return bool(value)
    if isinstance(value, str):
        value = value.strip().lower()
        if value in FALSE_STRINGS:
            return False
        if value in TRUE_STRINGS:
            return True
    return None


def _coerce(values: Mapping[str, Any]) -> Dict[str, Any]:
    coerced: Dict[str, Any] = {}
    for key, value in values.items():
        if value is None:
            continue
        if key in ("under", "element"):
            flag = _flag(value)
            if flag is not None:
                coerced[key] = flag
        elif key == "validator":
            if isinstance(value, str) and value:
                coerced[key] = value
        elif isinstance(value, str):
            coerced[key] = value
    return coerced


@dataclass(frozen=True)
class Options:
    """Collection options, inherited from parent to child.

    ``validator`` names the condition guarding element ids, ``under`` adds an
    ``under`` action before the element actions, ``element`` adds the element
    routes at all, ``controller`` namespaces controller ids and ``prefix``
    namespaces route names. Anything else is passed through to the collection
    route's defaults.
    """

    validator: str = "standard"
    under: bool = True
    element: bool = True
    controller: str = ""
    prefix: str = ""
    extra: Mapping[str, Any] = field(default_factory=dict)

    def merge(
        self, overrides: Optional[Mapping[str, Any]] = None, **kwargs
    ) -> "Options":
        """Return a copy with overrides applied. Bad values keep the current ones."""
        values = {**(overrides or {}), **kwargs}
        known = {k: v for k, v in values.items() if k in OPTION_NAMES}
        extra = {k: v for k, v in values.items() if k not in OPTION_NAMES}
        return replace(self, extra={**self.extra, **extra}, **_coerce(known))

    def nest(self, segment: str) -> "Options":
        """Options for the children of segment."""
        return replace(
            self,
            controller=controller_id(segment, self.controller),
            prefix=route_name(segment, self.prefix),
        )


OptionsLike = Union[Options, Mapping[str, Any], None]


def _resolve(options: OptionsLike, kwargs: Mapping[str, Any]) -> Options:
    if isinstance(options, Options):
        return options.merge(kwargs)
    if not isinstance(options, Mapping):
        options = {}
    return Options().merge(options, **kwargs)


@dataclass(frozen=True)
class SpecNode:
    """A collection in a declarative routes spec."""

    name: str
    children: Tuple["SpecNode", ...] = ()
    override: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_leaf(self) -> bool:
        return not self.children


def _parse_node(name: str, attrs: Any) -> SpecNode:
    children = attrs
    override: Dict[str, Any] = {}
    if isinstance(attrs, (list, tuple)):
        if len(attrs) > 1 and isinstance(attrs[-1], Mapping):
            override = dict(attrs[-1])
        children = attrs[0] if attrs else None
        if not isinstance(children, (Mapping, list, tuple)):
            children = None
    elif not isinstance(attrs, Mapping):
        children = None
    return SpecNode(name, parse_spec(children), override)


def parse_spec(spec: Any) -> Tuple[SpecNode, ...]:
    """Parse a declarative routes spec into SpecNodes, keeping declaration order.

    A spec maps collection names to one of:

    * ``None``: a collection without sub-collections
    * a mapping: the sub-collections
    * ``[children, options]``: sub-collections (or ``None``) with options
      applying to this collection and everything below it

    A list of names is accepted too, each becoming a collection without
    sub-collections. Unrecognised shapes are treated as ``None``.
    """
    if isinstance(spec, Mapping):
        return tuple(_parse_node(str(name), attrs) for name, attrs in spec.items())

    nodes = []
    if isinstance(spec, (list, tuple)):
        for item in spec:
            if isinstance(item, SpecNode):
                nodes.append(item)
            elif isinstance(item, Mapping):
                nodes.extend(parse_spec(item))
            elif isinstance(item, str) and item:
                nodes.append(SpecNode(item))
    return tuple(nodes)


def collection(root: Route, path: str, options: OptionsLike = None, **kwargs) -> Route:
    """Add ``/path`` with list and create actions, plus its element.

    Returns the element route, or the collection route when ``element`` is
    off, so further collections can be nested below it.
    """
    options = _resolve(options, kwargs)
    name, controller = names(path, options.prefix, options.controller)

    route = root.route(f"/{path}").to(controller=controller, **options.extra)
    route.get().to(action="list").name(f"{name}_list")
    route.post().to(action="create").name(f"{name}_create")

    if not options.element:
        return route
    return element(route, path, options)


def element(root: Route, path: str, options: OptionsLike = None, **kwargs) -> Route:
    """Add ``/<path_id>`` with delete, read, patch and update actions."""
    options = _resolve(options, kwargs)
    name = route_name(path, options.prefix)
    key = placeholder(path)

    route = root.route(f"/<{key}>").over(options.validator, key).name(name)

    # the under action can load the resource once for every element action
    actions = (
        route.under().to(action="under").name(f"{name}_under")
        if options.under
        else route
    )
    actions.delete().to(action="delete").name(f"{name}_delete")
    actions.get().to(action="read").name(f"{name}_read")
    actions.patch().to(action="patch").name(f"{name}_patch")
    actions.put().to(action="update").name(f"{name}_update")

    return route


def _expand(root: Route, node: SpecNode, defaults: Options) -> None:
    options = defaults.merge(node.override)
    if node.is_leaf:
        collection(root, node.name, options)
        return

    name, controller = names(node.name, options.prefix, options.controller)
    route = collection(root, node.name, options.merge(element=False))
    if options.under:
        route = route.under().to(controller=controller, action="under")
        route.name(f"{name}_under")
    endpoint = element(route, node.name, options.merge(under=False))

    nested = options.nest(node.name)
    for child in node.children:
        _expand(endpoint, child, nested)


def routes(root: Route, spec: Any, defaults: OptionsLike = None) -> None:
    """Add collections for every node of a declarative spec below root."""
    options = _resolve(defaults, {})
    for node in parse_spec(spec):
        _expand(root, node, options)


class Restify:
    """Plugin adding REST collection shortcuts, conditions and helpers to an API.

    ``validator`` and ``under`` set the defaults of every collection.
    """

    name = "restify"

    def __init__(self, validator: str = "standard", under: bool = True) -> None:
        """Initialize plugin configuration."""
        self.defaults = Options().merge(validator=validator, under=under)
        self.log = logging.getLogger(__name__)
        self.app = None

    def register(self, app) -> "Restify":
        """Register plugin in app."""
        self.app = app
        self.log = app.log
        router = app.routes

        # conditions defined before registering are kept, so they can be replaced
        for name, condition in IDENTIFIER_CONDITIONS.items():
            if name in router.conditions:
                self.log.debug(f"The {name} route condition already exists, skipping")
                continue
            router.add_condition(name, condition)

        router.add_shortcut("collection", self.collection)
        router.add_shortcut("element", self.element)
        app.helper("restify.current_id", self.current_id)
        app.helper("restify.routes", self._routes_helper)
        return self

    def collection(
        self, root: Route, path: str, options: OptionsLike = None, **kwargs
    ) -> Route:
        return collection(root, path, self._defaults(options).merge(kwargs))

    def element(
        self, root: Route, path: str, options: OptionsLike = None, **kwargs
    ) -> Route:
        return element(root, path, self._defaults(options).merge(kwargs))

    def routes(self, root: Route, spec: Any, defaults: OptionsLike = None) -> None:
        """Add collections for a declarative spec, inheriting the plugin defaults."""
        before = len(list(root.walk()))
        routes(root, spec, self._defaults(defaults))
        self.log.debug(f"restify added {len(list(root.walk())) - before} routes")
        if self.app is not None and self.log.isEnabledFor(logging.DEBUG):
            self.log.debug("\n" + self.app.describe_routes())

    def current_id(self, c) -> str:
        """Return the element id at the current point of the dispatch chain.

        The controller's namespace is dropped from its id to find the
        placeholder, which is looked up in the innermost matched frame.
        """
        if c.match is None or not c.match.frames:
            return ""
        key = placeholder(strip_namespace(c.stash.get("controller") or ""))
        value = c.match.frames[-1].captures.get(key)
        return "" if value is None else value

    def _routes_helper(
        self, c, root: Route, spec: Any, defaults: OptionsLike = None
    ) -> None:
        self.routes(root, spec, defaults)

    def _defaults(self, options: OptionsLike) -> Options:
        if isinstance(options, Options):
            return options
        if not isinstance(options, Mapping):
            options = {}
        return self.defaults.merge(options)
