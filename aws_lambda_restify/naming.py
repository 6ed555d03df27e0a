"""Route name and controller namespace conventions.

Route names are joined with ``_`` (``accounts_invoices_list``) while
controller identifiers are joined with ``-`` (``accounts-invoices``).
"""

from typing import Tuple


def normalize(segment: str) -> str:
    """Turn a path segment into an identifier."""
    return segment.replace("-", "_")


def route_name(segment: str, prefix: str = "") -> str:
    name = normalize(segment)
    return f"{prefix}_{name}" if prefix else name


def controller_id(segment: str, controller: str = "") -> str:
    name = normalize(segment)
    return f"{controller}-{name}" if controller else name


def placeholder(segment: str) -> str:
    """Name of the placeholder capturing an element id for segment."""
    return f"{normalize(segment)}_id"


def names(segment: str, prefix: str = "", controller: str = "") -> Tuple[str, str]:
    """Return ``(route name, controller id)`` for segment."""
    return route_name(segment, prefix), controller_id(segment, controller)


def strip_namespace(controller: str) -> str:
    """Drop the namespace from a controller id: ``users-messages`` -> ``messages``."""
    return controller.rsplit("-", 1)[-1]
