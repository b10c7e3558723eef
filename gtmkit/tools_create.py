"""Tools that create containers, workspaces, tags, triggers, variables and templates."""

from __future__ import annotations

import json
from typing import Any, Callable, Iterable, Mapping, TypeVar

from .client import Client, resolve_account, resolve_container, resolve_workspace
from .payloads import (
    CLICK_LINK_FORM_TRIGGERS,
    Condition,
    SetupTagInput,
    TagInput,
    TeardownTagInput,
    TriggerInput,
    VariableInput,
    condition_from_json,
    parameter_from_json,
)

T = TypeVar("T")

VALID_USAGE_CONTEXTS = frozenset(
    {"web", "android", "ios", "androidSdk5", "iosSdk5", "amp", "server"}
)
_USAGE_HINT = "valid values: web, android, ios, amp, server"


def _require(value: Any, message: str) -> None:
    if not value:
        raise ValueError(message)


def _validate_named(name: str, kind_type: str) -> None:
    _require(name, "name is required")
    _require(kind_type, "type is required")


def _parse_array(text: str, convert: Callable[[Any], T]) -> list[T]:
    """Decode a JSON array and convert each element; empty text gives an empty list."""
    if not text:
        return []
    data = json.loads(text)
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError(f"expected a JSON array, got {type(data).__name__}")
    return [convert(item) for item in data]


def _bool_field(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key, False)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"field {key!r} must be a boolean")
    return value


def _tag_name(data: Mapping[str, Any]) -> str:
    value = data.get("tagName") or ""
    if not isinstance(value, str):
        raise ValueError("field 'tagName' must be a string")
    return value


def _setup_tag_from_json(data: Any) -> SetupTagInput:
    if not isinstance(data, Mapping):
        raise ValueError("setup tag must be a JSON object")
    return SetupTagInput(
        tag_name=_tag_name(data),
        stop_on_setup_failure=_bool_field(data, "stopOnSetupFailure"),
    )


def _teardown_tag_from_json(data: Any) -> TeardownTagInput:
    if not isinstance(data, Mapping):
        raise ValueError("teardown tag must be a JSON object")
    return TeardownTagInput(
        tag_name=_tag_name(data),
        stop_teardown_on_failure=_bool_field(data, "stopTeardownOnFailure"),
    )


def _split_consent_types(text: str) -> list[str]:
    return [part.strip() for part in text.split(",") if part.strip()]


def create_container(
    client: Client,
    account_id: str,
    name: str,
    usage_context: Iterable[str],
    notes: str = "",
    domain_name: Iterable[str] | None = None,
    tagging_server_urls: Iterable[str] | None = None,
) -> dict[str, Any]:
    """Create a container of the given usage context (web, android, ios, amp, server)."""
    client = resolve_account(client, account_id)
    _require(name, "name is required")
    contexts = list(usage_context or ())
    if not contexts:
        raise ValueError(f"usageContext is required ({_USAGE_HINT})")
    for context in contexts:
        if context not in VALID_USAGE_CONTEXTS:
            raise ValueError(f"invalid usageContext '{context}' ({_USAGE_HINT})")

    body: dict[str, Any] = {
        "name": name,
        "usageContext": contexts,
        "notes": notes,
        "domainName": list(domain_name or ()),
    }
    servers = list(tagging_server_urls or ())
    if servers:
        body["taggingServerUrls"] = servers

    created = client.create_container(account_id, body)
    container: dict[str, Any] = {
        "containerId": created.get("containerId", ""),
        "name": created.get("name", ""),
        "publicId": created.get("publicId", ""),
        "usageContext": created.get("usageContext"),
        "path": created.get("path", ""),
    }
    if created.get("tagManagerUrl"):
        container["tagManagerUrl"] = created["tagManagerUrl"]
    return {"success": True, "container": container, "message": "Container created successfully"}


def create_workspace(
    client: Client,
    account_id: str,
    container_id: str,
    name: str,
    description: str = "",
) -> dict[str, Any]:
    """Create a workspace in a container."""
    cc = resolve_container(client, account_id, container_id)
    _require(name, "name is required")
    created = cc.client.create_workspace(
        cc.container_path(), {"name": name, "description": description}
    )
    workspace: dict[str, Any] = {
        "workspaceId": created.get("workspaceId", ""),
        "name": created.get("name", ""),
    }
    if created.get("description"):
        workspace["description"] = created["description"]
    workspace["path"] = created.get("path", "")
    if created.get("tagManagerUrl"):
        workspace["tagManagerUrl"] = created["tagManagerUrl"]
    return {"success": True, "workspace": workspace, "message": "Workspace created successfully"}


def create_tag(
    client: Client,
    account_id: str,
    container_id: str,
    workspace_id: str,
    name: str,
    tag_type: str,
    firing_trigger_ids: Iterable[str],
    blocking_trigger_ids: Iterable[str] | None = None,
    parameters_json: str = "",
    setup_tag_json: str = "",
    teardown_tag_json: str = "",
    consent_status: str = "",
    consent_types: str = "",
    notes: str = "",
    paused: bool = False,
) -> dict[str, Any]:
    """Create a tag; at least one firing trigger ID is required."""
    wc = resolve_workspace(client, account_id, container_id, workspace_id)
    firing = list(firing_trigger_ids or ())
    _validate_named(name, tag_type)
    _require(firing, "at least one firing trigger ID is required")

    params = _parse_array(parameters_json, parameter_from_json)
    try:
        setup_tags = _parse_array(setup_tag_json, _setup_tag_from_json)
    except ValueError as exc:
        raise ValueError(f"invalid setupTagJson: {exc}") from exc
    try:
        teardown_tags = _parse_array(teardown_tag_json, _teardown_tag_from_json)
    except ValueError as exc:
        raise ValueError(f"invalid teardownTagJson: {exc}") from exc

    blocking = list(blocking_trigger_ids) if blocking_trigger_ids else None
    tag_input = TagInput(
        name=name,
        type=tag_type,
        firing_trigger_id=firing,
        blocking_trigger_id=blocking,
        parameter=params,
        notes=notes,
        paused=paused,
        setup_tag=setup_tags,
        teardown_tag=teardown_tags,
        consent_status=consent_status,
        consent_types=_split_consent_types(consent_types),
    )
    created = wc.client.create_tag(wc.account_id, wc.container_id, wc.workspace_id, tag_input)
    return {"success": True, "tag": created.to_dict(), "message": "Tag created successfully"}


def create_template(
    client: Client,
    account_id: str,
    container_id: str,
    workspace_id: str,
    name: str,
    template_data: str,
) -> dict[str, Any]:
    """Create a custom template from its full .tpl code."""
    wc = resolve_workspace(client, account_id, container_id, workspace_id)
    _require(name, "name is required")
    _require(template_data, "templateData is required")

    created = wc.client.create_template(
        wc.workspace_path(), {"name": name, "templateData": template_data}
    )
    template_id = created.get("templateId", "")
    created_name = created.get("name", "")
    template_type = f"cvt_{wc.container_id}_{template_id}"
    result: dict[str, Any] = {
        "success": True,
        "templateId": template_id,
        "name": created_name,
        "type": template_type,
        "path": created.get("path", ""),
    }
    if created.get("tagManagerUrl"):
        result["tagManagerUrl"] = created["tagManagerUrl"]
    result["message"] = (
        f"Template '{created_name}' created successfully. "
        f"Use type '{template_type}' when creating tags."
    )
    return result


def create_trigger(
    client: Client,
    account_id: str,
    container_id: str,
    workspace_id: str,
    name: str,
    trigger_type: str,
    filter_json: str = "",
    auto_event_filter_json: str = "",
    custom_event_filter_json: str = "",
    event_name_json: str = "",
    notes: str = "",
) -> dict[str, Any]:
    """Create a trigger.

    Auto-event conditions of click, link and form triggers are moved to the
    filter, as the API ignores them otherwise; the message then carries a warning.
    """
    wc = resolve_workspace(client, account_id, container_id, workspace_id)
    _validate_named(name, trigger_type)

    filters: list[Condition] = _parse_array(filter_json, condition_from_json)
    auto_filters: list[Condition] = _parse_array(auto_event_filter_json, condition_from_json)
    custom_filters: list[Condition] = _parse_array(custom_event_filter_json, condition_from_json)
    event_name = None
    if event_name_json:
        decoded = json.loads(event_name_json)
        event_name = parameter_from_json({} if decoded is None else decoded)

    warning = ""
    if auto_filters and trigger_type in CLICK_LINK_FORM_TRIGGERS:
        filters = filters + auto_filters
        auto_filters = []
        warning = (
            "Warning: the GTM API silently ignores autoEventFilter for "
            f"{trigger_type} triggers (issue #39). Conditions were automatically remapped to filter."
        )

    trigger_input = TriggerInput(
        name=name,
        type=trigger_type,
        filter=filters,
        auto_event_filter=auto_filters,
        custom_event_filter=custom_filters,
        event_name=event_name,
        notes=notes,
    )
    created = wc.client.create_trigger(
        wc.account_id, wc.container_id, wc.workspace_id, trigger_input
    )
    message = "Trigger created successfully"
    if warning:
        message += ". " + warning
    return {"success": True, "trigger": created.to_dict(), "message": message}


def create_variable(
    client: Client,
    account_id: str,
    container_id: str,
    workspace_id: str,
    name: str,
    variable_type: str,
    parameters_json: str = "",
    notes: str = "",
) -> dict[str, Any]:
    """Create a variable."""
    wc = resolve_workspace(client, account_id, container_id, workspace_id)
    _validate_named(name, variable_type)
    variable_input = VariableInput(
        name=name,
        type=variable_type,
        parameter=_parse_array(parameters_json, parameter_from_json),
        notes=notes,
    )
    created = wc.client.create_variable(
        wc.account_id, wc.container_id, wc.workspace_id, variable_input
    )
    return {
        "success": True,
        "variable": created.to_dict(),
        "message": "Variable created successfully",
    }