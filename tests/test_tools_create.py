import json

import pytest

from gtmkit.client import Client
from gtmkit.errors import ApiError, NotFoundError
from gtmkit.tools_create import (
    create_container,
    create_tag,
    create_template,
    create_trigger,
    create_variable,
    create_workspace,
)


class FakeTransport:
    def __init__(self, response=None, error=None):
        self.response = response or {}
        self.error = error
        self.calls = []

    def request(self, method, path, body=None, params=None):
        self.calls.append((method, path, body, params))
        if self.error is not None:
            raise self.error
        return dict(self.response)


def make(response=None, error=None):
    transport = FakeTransport(response, error)
    return Client(transport), transport


# Containers


def test_create_container_sends_body_and_returns_summary():
    client, transport = make(
        {
            "containerId": "55",
            "name": "Site",
            "publicId": "GTM-ABC",
            "usageContext": ["web"],
            "path": "accounts/1/containers/55",
        }
    )
    out = create_container(client, "1", "Site", ["web"], notes="n", domain_name=["example.com"])
    method, path, body, _ = transport.calls[0]
    assert (method, path) == ("POST", "accounts/1/containers")
    assert body["name"] == "Site"
    assert body["usageContext"] == ["web"]
    assert body["domainName"] == ["example.com"]
    assert "taggingServerUrls" not in body
    assert out["success"] is True
    assert out["message"] == "Container created successfully"
    assert out["container"]["publicId"] == "GTM-ABC"
    assert "tagManagerUrl" not in out["container"]


def test_create_container_server_urls_passed():
    client, transport = make({"containerId": "9"})
    create_container(client, "1", "S", ["server"], tagging_server_urls=["https://example.com"])
    assert transport.calls[0][2]["taggingServerUrls"] == ["https://example.com"]


def test_create_container_accepts_sdk5_context():
    client, transport = make({"containerId": "9"})
    create_container(client, "1", "App", ["androidSdk5"])
    assert transport.calls[0][2]["usageContext"] == ["androidSdk5"]


def test_create_container_invalid_context():
    client, transport = make()
    with pytest.raises(ValueError, match="invalid usageContext 'desktop'"):
        create_container(client, "1", "Site", ["desktop"])
    assert transport.calls == []


def test_create_container_requires_context_and_name():
    client, _ = make()
    with pytest.raises(ValueError, match="usageContext is required"):
        create_container(client, "1", "Site", [])
    with pytest.raises(ValueError, match="name is required"):
        create_container(client, "1", "", ["web"])
    with pytest.raises(ValueError, match="account ID is required"):
        create_container(client, "", "Site", ["web"])


# Workspaces


def test_create_workspace():
    client, transport = make(
        {"workspaceId": "3", "name": "Dev", "path": "accounts/1/containers/2/workspaces/3"}
    )
    out = create_workspace(client, "1", "2", "Dev", "desc")
    method, path, body, _ = transport.calls[0]
    assert (method, path) == ("POST", "accounts/1/containers/2/workspaces")
    assert body == {"name": "Dev", "description": "desc"}
    assert out["workspace"]["workspaceId"] == "3"
    assert "description" not in out["workspace"]
    assert out["message"] == "Workspace created successfully"


def test_create_workspace_requires_name():
    client, _ = make()
    with pytest.raises(ValueError, match="name is required"):
        create_workspace(client, "1", "2", "")


# Tags


def test_create_tag_full():
    client, transport = make(
        {"tagId": "10", "name": "GA4", "type": "gaawe", "path": "p", "fingerprint": "f"}
    )
    params = json.dumps([{"type": "template", "key": "eventName", "value": "purchase"}])
    setup = json.dumps([{"tagName": "Config", "stopOnSetupFailure": True}])
    out = create_tag(
        client, "1", "2", "3", "GA4", "gaawe", ["7"],
        parameters_json=params,
        setup_tag_json=setup,
        consent_status="needed",
        consent_types=" ad_storage, ,analytics_storage",
        paused=True,
    )
    method, path, body, _ = transport.calls[0]
    assert (method, path) == ("POST", "accounts/1/containers/2/workspaces/3/tags")
    assert body["firingTriggerId"] == ["7"]
    assert body["parameter"] == [{"type": "template", "key": "eventName", "value": "purchase"}]
    assert body["setupTag"] == [{"tagName": "Config", "stopOnSetupFailure": True}]
    assert body["paused"] is True
    values = [p["value"] for p in body["consentSettings"]["consentType"]["list"]]
    assert values == ["ad_storage", "analytics_storage"]
    assert out["tag"] == {
        "tagId": "10", "name": "GA4", "type": "gaawe", "path": "p", "fingerprint": "f"
    }
    assert out["message"] == "Tag created successfully"


def test_create_tag_requires_firing_trigger():
    client, transport = make()
    with pytest.raises(ValueError):
        create_tag(client, "1", "2", "3", "T", "html", [])
    assert transport.calls == []


def test_create_tag_bad_setup_json():
    client, _ = make()
    with pytest.raises(ValueError, match="invalid setupTagJson"):
        create_tag(client, "1", "2", "3", "T", "html", ["1"], setup_tag_json="{not json")


def test_create_tag_bad_teardown_json():
    client, _ = make()
    with pytest.raises(ValueError, match="invalid teardownTagJson"):
        create_tag(client, "1", "2", "3", "T", "html", ["1"], teardown_tag_json="[1]")


def test_create_tag_api_error_mapped():
    client, _ = make(error=ApiError(404, "Workspace not found"))
    with pytest.raises(NotFoundError, match="resource not found: Workspace not found"):
        create_tag(client, "1", "2", "3", "T", "html", ["1"])


# Templates


def test_create_template_type_and_message():
    client, transport = make({"templateId": "7", "name": "My T", "path": "p"})
    out = create_template(client, "1", "2", "3", "My T", "___INFO___")
    method, path, body, _ = transport.calls[0]
    assert (method, path) == ("POST", "accounts/1/containers/2/workspaces/3/templates")
    assert body == {"name": "My T", "templateData": "___INFO___"}
    assert out["type"] == "cvt_2_7"
    assert "cvt_2_7" in out["message"]
    assert out["templateId"] == "7"


def test_create_template_requires_data():
    client, _ = make()
    with pytest.raises(ValueError, match="templateData is required"):
        create_template(client, "1", "2", "3", "T", "")


# Triggers

_COND = json.dumps(
    [
        {
            "type": "contains",
            "parameter": [
                {"type": "template", "key": "arg0", "value": "{{Click Classes}}"},
                {"type": "template", "key": "arg1", "value": "cta-button"},
            ],
        }
    ]
)


def test_create_trigger_remaps_auto_event_filter_for_link_click():
    client, transport = make({"triggerId": "4", "name": "Click", "type": "linkClick"})
    out = create_trigger(client, "1", "2", "3", "Click", "linkClick", auto_event_filter_json=_COND)
    body = transport.calls[0][2]
    assert "autoEventFilter" not in body
    assert body["filter"][0]["type"] == "contains"
    assert "issue #39" in out["message"]
    assert out["message"].startswith("Trigger created successfully. Warning")
    assert out["trigger"]["triggerId"] == "4"


def test_create_trigger_keeps_auto_event_filter_for_other_types():
    client, transport = make({"triggerId": "4"})
    out = create_trigger(client, "1", "2", "3", "Scroll", "scrollDepth", auto_event_filter_json=_COND)
    body = transport.calls[0][2]
    assert body["autoEventFilter"][0]["type"] == "contains"
    assert "filter" not in body
    assert out["message"] == "Trigger created successfully"


def test_create_trigger_does_not_contain_negated():
    client, transport = make({"triggerId": "4"})
    cond = json.dumps([{"type": "doesNotContain", "parameter": []}])
    create_trigger(client, "1", "2", "3", "PV", "pageview", filter_json=cond)
    sent = transport.calls[0][2]["filter"][0]
    assert sent["type"] == "contains"
    assert {"type": "boolean", "key": "negate", "value": "true"} in sent["parameter"]


def test_create_trigger_event_name_and_custom_filter():
    client, transport = make({"triggerId": "4"})
    custom = json.dumps([{"type": "equals", "parameter": []}])
    create_trigger(
        client, "1", "2", "3", "T", "customEvent",
        custom_event_filter_json=custom,
        event_name_json='{"type": "template", "value": "gtm.timer"}',
    )
    body = transport.calls[0][2]
    assert body["customEventFilter"][0]["type"] == "equals"
    assert body["eventName"]["value"] == "gtm.timer"


def test_create_trigger_invalid_json():
    client, _ = make()
    with pytest.raises(ValueError):
        create_trigger(client, "1", "2", "3", "T", "pageview", filter_json="{")


def test_create_trigger_requires_workspace():
    client, _ = make()
    with pytest.raises(ValueError, match="workspace ID is required"):
        create_trigger(client, "1", "2", "", "T", "pageview")


# Variables


def test_create_variable():
    client, transport = make({"variableId": "8", "name": "DLV", "type": "v"})
    params = json.dumps([{"type": "template", "key": "name", "value": "ecommerce.value"}])
    out = create_variable(client, "1", "2", "3", "DLV", "v", parameters_json=params, notes="x")
    method, path, body, _ = transport.calls[0]
    assert (method, path) == ("POST", "accounts/1/containers/2/workspaces/3/variables")
    assert body["parameter"][0]["value"] == "ecommerce.value"
    assert body["notes"] == "x"
    assert out["variable"]["variableId"] == "8"
    assert out["message"] == "Variable created successfully"


def test_create_variable_requires_type():
    client, transport = make()
    with pytest.raises(ValueError, match="type is required"):
        create_variable(client, "1", "2", "3", "DLV", "")
    assert transport.calls == []