"""Tag Manager API client and workspace or container resolution."""

from __future__ import annotations

import copy
import json
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from typing import Any, Mapping, Protocol

from .errors import ApiError, ApiErrorItem, Context, map_google_error, retry_with_backoff
from .models import (
    Container,
    FolderEntities,
    Folder,
    Tag,
    container_from_api,
    folder_entities_from_api,
    folder_from_api,
    tag_from_api,
)
from .payloads import (
    Condition,
    CreatedTag,
    CreatedTrigger,
    CreatedVariable,
    TagInput,
    TriggerInput,
    VariableInput,
    build_container_path,
    build_workspace_path,
    is_click_link_form_trigger,
    to_api_conditions,
    to_api_consent_settings,
    to_api_param,
    to_api_params,
    to_api_setup_tags,
    to_api_teardown_tags,
)

_PRESERVED_TRIGGER_FIELDS = (
    "checkValidation",
    "waitForTags",
    "waitForTagsTimeout",
    "continuousTimeMinMilliseconds",
    "horizontalScrollPercentageList",
    "interval",
    "intervalSeconds",
    "limit",
    "maxTimerLengthSeconds",
    "selector",
    "totalTimeMinMilliseconds",
    "verticalScrollPercentageList",
    "visibilitySelector",
    "visiblePercentageMax",
    "visiblePercentageMin",
)


class Transport(Protocol):
    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Mapping[str, str] | None = None,
    ) -> dict[str, Any]: ...


class HttpTransport:
    """Sends JSON requests to the Tag Manager v2 REST API with a bearer token."""

    def __init__(self, base_url: str, access_token: str, timeout: float = 30.0) -> None:
        self.base_url = base_url.rstrip("/") + "/"
        self.access_token = access_token
        self.timeout = timeout

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        """Perform a request and return the decoded JSON response.

        Raises ApiError for error responses.
        """
        url = self.base_url + path.lstrip("/")
        if params:
            url += "?" + urllib.parse.urlencode(params)
        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Accept": "application/json",
        }
        data = None
        if body is not None:
            data = json.dumps(body).encode("utf-8")
            headers["Content-Type"] = "application/json"
        req = urllib.request.Request(url, data=data, method=method, headers=headers)
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                raw = resp.read()
        except urllib.error.HTTPError as exc:
            raise _api_error(exc.code, exc.read()) from None
        text = raw.decode("utf-8", errors="replace")
        return json.loads(text) if text.strip() else {}


def _api_error(code: int, raw: bytes) -> ApiError:
    text = raw.decode("utf-8", errors="replace")
    message = ""
    items: list[ApiErrorItem] = []
    try:
        document = json.loads(text)
    except ValueError:
        document = None
    if isinstance(document, dict) and isinstance(document.get("error"), dict):
        error = document["error"]
        message = str(error.get("message", ""))
        items = [
            ApiErrorItem(reason=str(e.get("reason", "")), message=str(e.get("message", "")))
            for e in error.get("errors") or ()
            if isinstance(e, dict)
        ]
    return ApiError(code, message, items, text)


def _compact(body: Mapping[str, Any]) -> dict[str, Any]:
    """Drop empty fields, as the API's JSON encoding omits them."""
    return {k: v for k, v in body.items() if v is not None and v != "" and v != [] and v is not False}


def _click_companions() -> dict[str, Any]:
    return {
        "waitForTags": {"type": "boolean", "value": "false"},
        "waitForTagsTimeout": {"type": "integer", "value": "2000"},
        "checkValidation": {"type": "boolean", "value": "false"},
    }


def _remap_filters(trigger_input: TriggerInput) -> tuple[list[Condition], list[Condition]]:
    """Move auto-event conditions to the filter for click, link and form triggers."""
    filters = trigger_input.filter
    auto = trigger_input.auto_event_filter
    if is_click_link_form_trigger(trigger_input.type) and auto and not filters:
        return auto, []
    return filters, auto


def _created_tag(data: Mapping[str, Any]) -> CreatedTag:
    return CreatedTag(
        tag_id=data.get("tagId", ""),
        name=data.get("name", ""),
        type=data.get("type", ""),
        path=data.get("path", ""),
        fingerprint=data.get("fingerprint", ""),
    )


def _created_trigger(data: Mapping[str, Any]) -> CreatedTrigger:
    return CreatedTrigger(
        trigger_id=data.get("triggerId", ""),
        name=data.get("name", ""),
        type=data.get("type", ""),
        path=data.get("path", ""),
        fingerprint=data.get("fingerprint", ""),
    )


def _created_variable(data: Mapping[str, Any]) -> CreatedVariable:
    return CreatedVariable(
        variable_id=data.get("variableId", ""),
        name=data.get("name", ""),
        type=data.get("type", ""),
        path=data.get("path", ""),
        fingerprint=data.get("fingerprint", ""),
    )


class Client:
    """Operations on Tag Manager accounts, containers and workspaces."""

    def __init__(self, transport: Transport, context: Context | None = None) -> None:
        self.transport = transport
        self.context = Context() if context is None else context

    def _send(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Mapping[str, str] | None = None,
        *,
        retry: bool = False,
        map_errors: bool = True,
    ) -> dict[str, Any]:
        def call() -> dict[str, Any]:
            return self.transport.request(method, path, body, params)

        try:
            if retry:
                return retry_with_backoff(call, 3, self.context)
            self.context.check()
            return call()
        except ApiError as exc:
            if not map_errors:
                raise
            raise map_google_error(exc) from exc

    # Containers and workspaces

    def list_containers(self, account_id: str) -> list[Container]:
        resp = self._send("GET", f"accounts/{account_id}/containers", retry=True)
        return [container_from_api(c) for c in resp.get("container") or ()]

    def create_container(self, account_id: str, body: Mapping[str, Any]) -> dict[str, Any]:
        return self._send("POST", f"accounts/{account_id}/containers", _compact(body))

    def delete_container(self, path: str) -> None:
        # API errors pass through unmapped here.
        self._send("DELETE", path, map_errors=False)

    def create_workspace(self, parent: str, body: Mapping[str, Any]) -> dict[str, Any]:
        return self._send("POST", f"{parent}/workspaces", _compact(body))

    # Folders

    def list_folders(self, account_id: str, container_id: str, workspace_id: str) -> list[Folder]:
        parent = build_workspace_path(account_id, container_id, workspace_id)
        resp = self._send("GET", f"{parent}/folders", retry=True)
        return [folder_from_api(f) for f in resp.get("folder") or ()]

    def get_folder_entities(
        self, account_id: str, container_id: str, workspace_id: str, folder_id: str
    ) -> FolderEntities:
        path = f"{build_workspace_path(account_id, container_id, workspace_id)}/folders/{folder_id}"
        resp = self._send("POST", f"{path}:entities", retry=True)
        return folder_entities_from_api(resp)

    # Tags

    def list_tags(self, account_id: str, container_id: str, workspace_id: str) -> list[Tag]:
        parent = build_workspace_path(account_id, container_id, workspace_id)
        resp = self._send("GET", f"{parent}/tags", retry=True)
        return [tag_from_api(t) for t in resp.get("tag") or ()]

    def get_tag(self, account_id: str, container_id: str, workspace_id: str, tag_id: str) -> Tag:
        path = f"{build_workspace_path(account_id, container_id, workspace_id)}/tags/{tag_id}"
        return tag_from_api(self._send("GET", path, retry=True))

    def create_tag(
        self, account_id: str, container_id: str, workspace_id: str, tag_input: TagInput
    ) -> CreatedTag:
        parent = build_workspace_path(account_id, container_id, workspace_id)
        body = {
            "name": tag_input.name,
            "type": tag_input.type,
            "firingTriggerId": tag_input.firing_trigger_id,
            "blockingTriggerId": tag_input.blocking_trigger_id,
            "parameter": to_api_params(tag_input.parameter),
            "notes": tag_input.notes,
            "paused": tag_input.paused,
            "tagFiringOption": tag_input.tag_firing_option,
            "setupTag": to_api_setup_tags(tag_input.setup_tag),
            "teardownTag": to_api_teardown_tags(tag_input.teardown_tag),
            "consentSettings": to_api_consent_settings(
                tag_input.consent_status, tag_input.consent_types
            ),
        }
        return _created_tag(self._send("POST", f"{parent}/tags", _compact(body)))

    def update_tag(self, path: str, tag_input: TagInput) -> CreatedTag:
        """Merge the provided fields into the current tag and write it back."""
        current = self._send("GET", path)
        tag = dict(current)
        if tag_input.name:
            tag["name"] = tag_input.name
        if tag_input.type:
            tag["type"] = tag_input.type
        if tag_input.firing_trigger_id is not None:
            tag["firingTriggerId"] = tag_input.firing_trigger_id
        if tag_input.blocking_trigger_id is not None:
            tag["blockingTriggerId"] = tag_input.blocking_trigger_id
        if tag_input.has_parameter:
            tag["parameter"] = to_api_params(tag_input.parameter)
        if tag_input.notes:
            tag["notes"] = tag_input.notes
        if tag_input.has_paused:
            tag["paused"] = tag_input.paused
        if tag_input.tag_firing_option:
            tag["tagFiringOption"] = tag_input.tag_firing_option
        if tag_input.has_setup_tag:
            tag["setupTag"] = [] if tag_input.clear_setup_tag else to_api_setup_tags(tag_input.setup_tag)
        if tag_input.has_teardown_tag:
            tag["teardownTag"] = (
                [] if tag_input.clear_teardown_tag else to_api_teardown_tags(tag_input.teardown_tag)
            )
        if tag_input.has_consent_settings:
            tag["consentSettings"] = to_api_consent_settings(
                tag_input.consent_status, tag_input.consent_types
            )
        params = {"fingerprint": current.get("fingerprint", "")}
        return _created_tag(self._send("PUT", path, _compact(tag), params))

    def delete_tag(self, path: str) -> None:
        self._send("DELETE", path)

    # Triggers

    def create_trigger(
        self,
        account_id: str,
        container_id: str,
        workspace_id: str,
        trigger_input: TriggerInput,
    ) -> CreatedTrigger:
        parent = build_workspace_path(account_id, container_id, workspace_id)
        filters, auto = _remap_filters(trigger_input)
        body: dict[str, Any] = {
            "name": trigger_input.name,
            "type": trigger_input.type,
            "filter": to_api_conditions(filters),
            "autoEventFilter": to_api_conditions(auto),
            "customEventFilter": to_api_conditions(trigger_input.custom_event_filter),
            "parameter": to_api_params(trigger_input.parameter),
            "notes": trigger_input.notes,
        }
        if trigger_input.event_name is not None:
            body["eventName"] = to_api_param(trigger_input.event_name)
        if trigger_input.auto_event_filter and is_click_link_form_trigger(trigger_input.type):
            body.update(_click_companions())
        return _created_trigger(self._send("POST", f"{parent}/triggers", _compact(body)))

    def update_trigger(self, path: str, trigger_input: TriggerInput) -> CreatedTrigger:
        """Write a trigger, keeping current values for fields not provided."""
        current = self._send("GET", path)
        filters, auto = _remap_filters(trigger_input)
        body: dict[str, Any] = {
            "name": trigger_input.name,
            "type": trigger_input.type,
            "filter": to_api_conditions(filters) or current.get("filter"),
            "autoEventFilter": to_api_conditions(auto) or current.get("autoEventFilter"),
            "customEventFilter": to_api_conditions(trigger_input.custom_event_filter)
            or current.get("customEventFilter"),
            "parameter": to_api_params(trigger_input.parameter) or current.get("parameter"),
            "notes": trigger_input.notes,
        }
        for key in _PRESERVED_TRIGGER_FIELDS:
            body[key] = copy.deepcopy(current.get(key))
        if trigger_input.event_name is not None:
            body["eventName"] = to_api_param(trigger_input.event_name)
        else:
            body["eventName"] = current.get("eventName")
        if trigger_input.auto_event_filter and is_click_link_form_trigger(trigger_input.type):
            body.update(_click_companions())
        params = {"fingerprint": current.get("fingerprint", "")}
        return _created_trigger(self._send("PUT", path, _compact(body), params))

    def delete_trigger(self, path: str) -> None:
        self._send("DELETE", path)

    # Variables

    def create_variable(
        self,
        account_id: str,
        container_id: str,
        workspace_id: str,
        variable_input: VariableInput,
    ) -> CreatedVariable:
        parent = build_workspace_path(account_id, container_id, workspace_id)
        body = {
            "name": variable_input.name,
            "type": variable_input.type,
            "parameter": to_api_params(variable_input.parameter),
            "notes": variable_input.notes,
        }
        return _created_variable(self._send("POST", f"{parent}/variables", _compact(body)))

    def update_variable(self, path: str, variable_input: VariableInput) -> CreatedVariable:
        current = self._send("GET", path)
        body = {
            "name": variable_input.name,
            "type": variable_input.type,
            "parameter": to_api_params(variable_input.parameter),
            "notes": variable_input.notes,
            "fingerprint": current.get("fingerprint", ""),
        }
        return _created_variable(self._send("PUT", path, _compact(body)))

    def delete_variable(self, path: str) -> None:
        self._send("DELETE", path)

    # Custom templates

    def create_template(self, parent: str, body: Mapping[str, Any]) -> dict[str, Any]:
        return self._send("POST", f"{parent}/templates", _compact(body))

    def get_template(self, path: str) -> dict[str, Any]:
        return self._send("GET", path, retry=True)

    def delete_template(self, path: str) -> None:
        self._send("DELETE", path)


@dataclass
class WorkspaceContext:
    """A validated workspace address with the client to reach it."""

    client: Client
    account_id: str
    container_id: str
    workspace_id: str

    def workspace_path(self) -> str:
        return build_workspace_path(self.account_id, self.container_id, self.workspace_id)


@dataclass
class ContainerContext:
    """A validated container address with the client to reach it."""

    client: Client
    account_id: str
    container_id: str

    def container_path(self) -> str:
        return build_container_path(self.account_id, self.container_id)


def _require(value: str, what: str) -> None:
    if not value:
        raise ValueError(f"{what} is required")


def resolve_workspace(
    client: Client, account_id: str, container_id: str, workspace_id: str
) -> WorkspaceContext:
    """Check the workspace IDs and pair them with the client."""
    _require(account_id, "account ID")
    _require(container_id, "container ID")
    _require(workspace_id, "workspace ID")
    return WorkspaceContext(client, account_id, container_id, workspace_id)


def resolve_container(client: Client, account_id: str, container_id: str) -> ContainerContext:
    """Check the container IDs and pair them with the client."""
    _require(account_id, "account ID")
    _require(container_id, "container ID")
    return ContainerContext(client, account_id, container_id)


def resolve_account(client: Client, account_id: str) -> Client:
    """Check the account ID and return the client."""
    _require(account_id, "account ID")
    return client