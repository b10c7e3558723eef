"""Resource URIs for browsing Tag Manager accounts, containers and workspaces."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

JSON_MIME_TYPE = "application/json"

_VARIABLE = re.compile(r"\{([A-Za-z0-9_]+)\}")
# A simple template expression matches unreserved characters and percent-escapes.
_VALUE_PATTERN = r"(?:[A-Za-z0-9\-._~]|%[0-9A-Fa-f]{2})*"

_JSON_ESCAPES = (
    ("<", "\\u003c"),
    (">", "\\u003e"),
    ("&", "\\u0026"),
    ("\u2028", "\\u2028"),
    ("\u2029", "\\u2029"),
)


def _plain(value: Any) -> Any:
    """Turn models with ``to_dict`` and nested containers into JSON-ready data."""
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return _plain(to_dict())
    if isinstance(value, Mapping):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def _marshal_indent(value: Any) -> str:
    """Encode as two-space indented JSON with HTML-sensitive characters escaped."""
    text = json.dumps(_plain(value), indent=2, ensure_ascii=False)
    for char, escape in _JSON_ESCAPES:
        text = text.replace(char, escape)
    return text


def _compile(uri_template: str) -> re.Pattern[str]:
    parts: list[str] = []
    position = 0
    for found in _VARIABLE.finditer(uri_template):
        parts.append(re.escape(uri_template[position : found.start()]))
        parts.append(f"(?P<{found.group(1)}>{_VALUE_PATTERN})")
        position = found.end()
    parts.append(re.escape(uri_template[position:]))
    return re.compile("".join(parts))


@dataclass(frozen=True)
class ResourceTemplate:
    """A readable resource, addressed by a URI or a URI template."""

    name: str
    description: str
    uri_template: str
    key: str
    mime_type: str = JSON_MIME_TYPE
    _pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_pattern", _compile(self.uri_template))

    @property
    def variables(self) -> list[str]:
        """Names of the template's variables, in order."""
        return _VARIABLE.findall(self.uri_template)

    def match(self, uri: str) -> dict[str, str] | None:
        """The template variables taken from ``uri``, or ``None`` if it does not fit."""
        found = self._pattern.fullmatch(uri)
        if found is None:
            return None
        return found.groupdict()


@dataclass(frozen=True)
class ResourceContents:
    """The JSON text of a read resource."""

    uri: str
    text: str
    mime_type: str = JSON_MIME_TYPE


_RESOURCES = (
    ResourceTemplate(
        name="GTM Accounts",
        description="List of all Google Tag Manager accounts accessible to the authenticated user",
        uri_template="gtm://accounts",
        key="accounts",
    ),
    ResourceTemplate(
        name="GTM Containers",
        description="List of containers in a GTM account",
        uri_template="gtm://accounts/{accountId}/containers",
        key="containers",
    ),
    ResourceTemplate(
        name="GTM Workspaces",
        description="List of workspaces in a GTM container",
        uri_template="gtm://accounts/{accountId}/containers/{containerId}/workspaces",
        key="workspaces",
    ),
    ResourceTemplate(
        name="GTM Tags",
        description="List of all tags in a GTM workspace",
        uri_template="gtm://accounts/{accountId}/containers/{containerId}/workspaces/{workspaceId}/tags",
        key="tags",
    ),
    ResourceTemplate(
        name="GTM Triggers",
        description="List of all triggers in a GTM workspace",
        uri_template=(
            "gtm://accounts/{accountId}/containers/{containerId}/workspaces/{workspaceId}/triggers"
        ),
        key="triggers",
    ),
    ResourceTemplate(
        name="GTM Variables",
        description="List of all variables in a GTM workspace",
        uri_template=(
            "gtm://accounts/{accountId}/containers/{containerId}/workspaces/{workspaceId}/variables"
        ),
        key="variables",
    ),
)


def list_resources() -> list[ResourceTemplate]:
    """All readable resources: the accounts list and the per-level templates."""
    return list(_RESOURCES)


def parse_resource_uri(uri: str) -> tuple[ResourceTemplate, dict[str, str]]:
    """Find the resource a URI addresses and the IDs it carries.

    Raises ValueError when no resource matches.
    """
    for resource in _RESOURCES:
        variables = resource.match(uri)
        if variables is not None:
            return resource, variables
    raise ValueError(f"invalid URI: no resource matches {uri!r}")


def resource_contents(uri: str, key: str, items: Iterable[Any]) -> ResourceContents:
    """Wrap ``items`` under ``key`` as the indented JSON contents of ``uri``."""
    return ResourceContents(uri=uri, text=_marshal_indent({key: list(items)}))