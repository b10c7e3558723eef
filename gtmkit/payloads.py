"""Input models and conversion of inputs into Tag Manager API request bodies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

CLICK_LINK_FORM_TRIGGERS = frozenset({"linkClick", "formSubmission", "click"})


@dataclass
class Parameter:
    """A Tag Manager parameter: a scalar value or a nested list or map."""

    type: str = ""
    key: str = ""
    value: str = ""
    list_params: list[Parameter] = field(default_factory=list)
    map_params: list[Parameter] = field(default_factory=list)


@dataclass
class Condition:
    """A filter condition of a trigger."""

    type: str = ""
    parameter: list[Parameter] = field(default_factory=list)
    negate: bool = False


@dataclass
class SetupTagInput:
    """A tag that fires before the tag it is attached to."""

    tag_name: str = ""
    stop_on_setup_failure: bool = False


@dataclass
class TeardownTagInput:
    """A tag that fires after the tag it is attached to."""

    tag_name: str = ""
    stop_teardown_on_failure: bool = False


@dataclass
class TagInput:
    """Fields for creating or updating a tag.

    On update, ``None`` trigger lists and empty strings leave the current
    value alone; the ``has_*`` flags mark the other fields as provided.
    """

    name: str = ""
    type: str = ""
    firing_trigger_id: list[str] | None = None
    blocking_trigger_id: list[str] | None = None
    parameter: list[Parameter] = field(default_factory=list)
    has_parameter: bool = False
    notes: str = ""
    paused: bool = False
    has_paused: bool = False
    tag_firing_option: str = ""
    setup_tag: list[SetupTagInput] = field(default_factory=list)
    has_setup_tag: bool = False
    clear_setup_tag: bool = False
    teardown_tag: list[TeardownTagInput] = field(default_factory=list)
    has_teardown_tag: bool = False
    clear_teardown_tag: bool = False
    consent_status: str = ""
    consent_types: list[str] = field(default_factory=list)
    has_consent_settings: bool = False


@dataclass
class TriggerInput:
    """Fields for creating or updating a trigger."""

    name: str = ""
    type: str = ""
    filter: list[Condition] = field(default_factory=list)
    auto_event_filter: list[Condition] = field(default_factory=list)
    custom_event_filter: list[Condition] = field(default_factory=list)
    parameter: list[Parameter] = field(default_factory=list)
    event_name: Parameter | None = None
    notes: str = ""


@dataclass
class VariableInput:
    """Fields for creating or updating a variable."""

    name: str = ""
    type: str = ""
    parameter: list[Parameter] = field(default_factory=list)
    notes: str = ""


@dataclass
class CreatedTag:
    """Summary of a tag returned after a write."""

    tag_id: str
    name: str
    type: str
    path: str
    fingerprint: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "tagId": self.tag_id,
            "name": self.name,
            "type": self.type,
            "path": self.path,
            "fingerprint": self.fingerprint,
        }


@dataclass
class CreatedTrigger:
    """Summary of a trigger returned after a write."""

    trigger_id: str
    name: str
    type: str
    path: str
    fingerprint: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "triggerId": self.trigger_id,
            "name": self.name,
            "type": self.type,
            "path": self.path,
            "fingerprint": self.fingerprint,
        }


@dataclass
class CreatedVariable:
    """Summary of a variable returned after a write."""

    variable_id: str
    name: str
    type: str
    path: str
    fingerprint: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "variableId": self.variable_id,
            "name": self.name,
            "type": self.type,
            "path": self.path,
            "fingerprint": self.fingerprint,
        }


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"{what} must be a JSON object, got {type(data).__name__}")
    return data


def _string_field(data: Mapping[str, Any], key: str, what: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{what} field {key!r} must be a string")
    return value


def _parameter_list(data: Mapping[str, Any], key: str) -> list[Parameter]:
    items = data.get(key)
    if items is None:
        return []
    if not isinstance(items, list):
        raise ValueError(f"parameter field {key!r} must be an array")
    return [parameter_from_json(item) for item in items]


def parameter_from_json(data: Any) -> Parameter:
    """Build a parameter from decoded JSON such as ``{"type", "key", "value"}``."""
    obj = _require_mapping(data, "parameter")
    return Parameter(
        type=_string_field(obj, "type", "parameter"),
        key=_string_field(obj, "key", "parameter"),
        value=_string_field(obj, "value", "parameter"),
        list_params=_parameter_list(obj, "list"),
        map_params=_parameter_list(obj, "map"),
    )


def condition_from_json(data: Any) -> Condition:
    """Build a condition from decoded JSON such as ``{"type", "parameter"}``."""
    obj = _require_mapping(data, "condition")
    negate = obj.get("negate", False)
    if not isinstance(negate, bool):
        raise ValueError("condition field 'negate' must be a boolean")
    return Condition(
        type=_string_field(obj, "type", "condition"),
        parameter=_parameter_list(obj, "parameter"),
        negate=negate,
    )


def is_click_link_form_trigger(trigger_type: str) -> bool:
    """True for trigger types whose auto-event filter the API ignores."""
    return trigger_type in CLICK_LINK_FORM_TRIGGERS


def to_api_params(params: list[Parameter] | None) -> list[dict[str, Any]] | None:
    """Convert parameters to API form; ``None`` when there are none."""
    if not params:
        return None
    return [to_api_param(p) for p in params]


def to_api_param(param: Parameter | None) -> dict[str, Any] | None:
    """Convert one parameter; type, key and value are always sent."""
    if param is None:
        return None
    result: dict[str, Any] = {"type": param.type, "key": param.key, "value": param.value}
    if param.list_params:
        result["list"] = to_api_params(param.list_params)
    if param.map_params:
        result["map"] = to_api_params(param.map_params)
    return result


def to_api_consent_settings(status: str, types: list[str] | None) -> dict[str, Any] | None:
    """Build the consent settings of a tag; ``None`` when no status is given."""
    if not status:
        return None
    settings: dict[str, Any] = {"consentStatus": status}
    if status == "needed" and types:
        settings["consentType"] = {
            "type": "list",
            "list": [{"type": "template", "value": t} for t in types],
        }
    return settings


def to_api_setup_tags(tags: list[SetupTagInput] | None) -> list[dict[str, Any]] | None:
    """Convert setup tag references; ``None`` when there are none."""
    if not tags:
        return None
    result = []
    for tag in tags:
        entry: dict[str, Any] = {"tagName": tag.tag_name}
        if tag.stop_on_setup_failure:
            entry["stopOnSetupFailure"] = True
        result.append(entry)
    return result


def to_api_teardown_tags(tags: list[TeardownTagInput] | None) -> list[dict[str, Any]] | None:
    """Convert teardown tag references; ``None`` when there are none."""
    if not tags:
        return None
    result = []
    for tag in tags:
        entry: dict[str, Any] = {"tagName": tag.tag_name}
        if tag.stop_teardown_on_failure:
            entry["stopTeardownOnFailure"] = True
        result.append(entry)
    return result


def to_api_conditions(conditions: list[Condition] | None) -> list[dict[str, Any]] | None:
    """Convert conditions to API form; ``None`` when there are none.

    ``doesNotContain`` is not accepted by the API and becomes a ``contains``
    condition with a ``negate`` parameter.
    """
    if not conditions:
        return None
    result = []
    for condition in conditions:
        cond_type, negate = condition.type, condition.negate
        if cond_type == "doesNotContain":
            cond_type, negate = "contains", True
        params = to_api_params(condition.parameter) or []
        if negate:
            params.append({"type": "boolean", "key": "negate", "value": "true"})
        result.append({"type": cond_type, "parameter": params})
    return result


def trigger_force_send_fields(trigger_input: TriggerInput) -> list[str]:
    """Names of the trigger fields that must be sent even when empty."""
    candidates = (
        ("filter", bool(trigger_input.filter)),
        ("autoEventFilter", bool(trigger_input.auto_event_filter)),
        ("customEventFilter", bool(trigger_input.custom_event_filter)),
        ("parameter", bool(trigger_input.parameter)),
        ("eventName", trigger_input.event_name is not None),
    )
    return [name for name, present in candidates if present]


def build_container_path(account_id: str, container_id: str) -> str:
    """Path of a container."""
    return f"accounts/{account_id}/containers/{container_id}"


def build_workspace_path(account_id: str, container_id: str, workspace_id: str) -> str:
    """Path of a workspace."""
    return f"{build_container_path(account_id, container_id)}/workspaces/{workspace_id}"


def build_tag_path(account_id: str, container_id: str, workspace_id: str, tag_id: str) -> str:
    """Path of a tag."""
    return f"{build_workspace_path(account_id, container_id, workspace_id)}/tags/{tag_id}"


def build_trigger_path(
    account_id: str, container_id: str, workspace_id: str, trigger_id: str
) -> str:
    """Path of a trigger."""
    return f"{build_workspace_path(account_id, container_id, workspace_id)}/triggers/{trigger_id}"


def build_variable_path(
    account_id: str, container_id: str, workspace_id: str, variable_id: str
) -> str:
    """Path of a variable."""
    return f"{build_workspace_path(account_id, container_id, workspace_id)}/variables/{variable_id}"


def build_client_path(
    account_id: str, container_id: str, workspace_id: str, client_id: str
) -> str:
    """Path of a server-side client."""
    return f"{build_workspace_path(account_id, container_id, workspace_id)}/clients/{client_id}"


def build_transformation_path(
    account_id: str, container_id: str, workspace_id: str, transformation_id: str
) -> str:
    """Path of a server-side transformation."""
    workspace = build_workspace_path(account_id, container_id, workspace_id)
    return f"{workspace}/transformations/{transformation_id}"