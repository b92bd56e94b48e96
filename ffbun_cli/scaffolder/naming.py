"""Identifier derivation for generated modules.

One raw, free-text module name (``"order item"``) yields the three identifiers
every generated file refers to::

    type_name       OrderItem     folder name, route export prefix
    instance_name   orderItem     schema/controller/repository export, URL path
    interface_name  IOrderItem    TypeScript interface

A word boundary is the start of the string or a whitespace character. The
word character after each boundary is uppercased and the whitespace dropped;
everything else is passed through untouched.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict

INTERFACE_PREFIX = "I"
ROUTES_SUFFIX = "Routes"

_BOUNDARY_RE = re.compile(r"(^|\s)(\w)")


def routes_export_name(type_name: str) -> str:
    """Name of a module's route export, e.g. ``OrderItemRoutes``."""
    return f"{type_name}{ROUTES_SUFFIX}"


class IdentifierSet(BaseModel):
    """The identifier triple derived once per module."""

    model_config = ConfigDict(frozen=True)

    type_name: str
    instance_name: str
    interface_name: str

    @property
    def routes_name(self) -> str:
        """Name of the route registration export, e.g. ``OrderItemRoutes``."""
        return routes_export_name(self.type_name)


def to_pascal_case(raw: str) -> str:
    """Convert ``order item`` to ``OrderItem``."""
    return _BOUNDARY_RE.sub(lambda m: m.group(2).upper(), raw)


def to_camel_case(raw: str) -> str:
    """Convert ``order item`` to ``orderItem``."""

    def _replace(match: re.Match[str]) -> str:
        if match.start() == 0:
            return match.group(2).lower()
        return match.group(2).upper()

    return _BOUNDARY_RE.sub(_replace, raw)


def derive(raw: str) -> IdentifierSet:
    """Derive the :class:`IdentifierSet` for *raw*.

    Never raises. An empty name produces empty type/instance names and a bare
    ``"I"`` interface name; rejecting such names is the caller's concern.
    """
    type_name = to_pascal_case(raw)
    return IdentifierSet(
        type_name=type_name,
        instance_name=to_camel_case(raw),
        interface_name=f"{INTERFACE_PREFIX}{type_name}",
    )
