import json
import threading
from http.server import BaseHTTPRequestHandler, HTTPServer

import pytest

from gtmkit.client import (
    Client,
    ContainerContext,
    HttpTransport,
    WorkspaceContext,
    resolve_account,
    resolve_container,
    resolve_workspace,
)
from gtmkit.errors import ApiError, Cancelled, Context, InvalidRequestError, NotFoundError
from gtmkit.payloads import (
    Condition,
    Parameter,
    SetupTagInput,
    TagInput,
    TriggerInput,
    VariableInput,
    build_tag_path,
    build_trigger_path,
    build_variable_path,
)

WS = "accounts/1/containers/2/workspaces/3"


class FakeTransport:
    def __init__(self, responses=None):
        self.responses = responses or {}
        self.calls = []

    def request(self, method, path, body=None, params=None):
        self.calls.append((method, path, body, params))
        outcome = self.responses.get((method, path), {})
        if isinstance(outcome, list):
            outcome = outcome.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def test_list_containers_maps_response():
    transport = FakeTransport(
        {("GET", "accounts/1/containers"): {"container": [{"containerId": "2", "name": "Site", "publicId": "GTM-ABC"}]}}
    )
    [container] = Client(transport).list_containers("1")
    assert container.container_id == "2"
    assert container.public_id == "GTM-ABC"


def test_not_found_is_mapped():
    transport = FakeTransport({("GET", f"{WS}/tags"): ApiError(404, "gone")})
    with pytest.raises(NotFoundError) as info:
        Client(transport).list_tags("1", "2", "3")
    assert str(info.value) == "resource not found: gone"


def test_bad_request_is_not_retried():
    transport = FakeTransport({("GET", f"{WS}/folders"): ApiError(400, "Bad request")})
    with pytest.raises(InvalidRequestError):
        Client(transport).list_folders("1", "2", "3")
    assert len(transport.calls) == 1


def test_cancelled_context_makes_no_call():
    ctx = Context()
    ctx.cancel()
    transport = FakeTransport()
    with pytest.raises(Cancelled):
        Client(transport, ctx).list_tags("1", "2", "3")
    assert transport.calls == []


def test_delete_container_passes_api_error_through():
    transport = FakeTransport({("DELETE", "accounts/1/containers/2"): ApiError(404, "gone")})
    with pytest.raises(ApiError) as info:
        Client(transport).delete_container("accounts/1/containers/2")
    assert info.value.code == 404


def test_create_tag_body_omits_empty_fields():
    transport = FakeTransport({("POST", f"{WS}/tags"): {"tagId": "9", "name": "T", "fingerprint": "f1"}})
    created = Client(transport).create_tag(
        "1", "2", "3", TagInput(name="T", type="html", firing_trigger_id=["5"], consent_status="needed", consent_types=["ad_storage"])
    )
    assert created.tag_id == "9"
    _, _, body, _ = transport.calls[0]
    assert body["firingTriggerId"] == ["5"]
    assert body["consentSettings"]["consentStatus"] == "needed"
    assert "paused" not in body and "notes" not in body


def test_update_tag_merges_and_sends_fingerprint():
    path = build_tag_path("1", "2", "3", "9")
    current = {
        "tagId": "9",
        "name": "Old",
        "type": "html",
        "notes": "keep",
        "fingerprint": "fp-1",
        "setupTag": [{"tagName": "Init"}],
        "firingTriggerId": ["5"],
    }
    transport = FakeTransport({("GET", path): current, ("PUT", path): {"tagId": "9", "name": "New"}})
    result = Client(transport).update_tag(path, TagInput(name="New", has_setup_tag=True, clear_setup_tag=True))
    assert result.name == "New"
    method, _, body, params = transport.calls[1]
    assert method == "PUT"
    assert params == {"fingerprint": "fp-1"}
    assert body["notes"] == "keep"
    assert body["firingTriggerId"] == ["5"]
    assert "setupTag" not in body


def test_update_tag_replaces_setup_tags():
    path = build_tag_path("1", "2", "3", "9")
    transport = FakeTransport({("GET", path): {"name": "Old"}})
    Client(transport).update_tag(path, TagInput(has_setup_tag=True, setup_tag=[SetupTagInput("Boot", True)]))
    body = transport.calls[1][2]
    assert body["setupTag"] == [{"tagName": "Boot", "stopOnSetupFailure": True}]
    assert body["name"] == "Old"


def test_create_link_click_trigger_remaps_auto_event_filter():
    transport = FakeTransport({("POST", f"{WS}/triggers"): {"triggerId": "4"}})
    cond = Condition("contains", [Parameter("template", "arg0", "{{Click Classes}}")])
    created = Client(transport).create_trigger("1", "2", "3", TriggerInput(name="Clicks", type="linkClick", auto_event_filter=[cond]))
    assert created.trigger_id == "4"
    body = transport.calls[0][2]
    assert "autoEventFilter" not in body
    assert body["filter"][0]["type"] == "contains"
    assert body["waitForTagsTimeout"] == {"type": "integer", "value": "2000"}
    assert body["checkValidation"] == {"type": "boolean", "value": "false"}


def test_update_trigger_preserves_current_fields():
    path = build_trigger_path("1", "2", "3", "4")
    current = {
        "fingerprint": "fp-2",
        "filter": [{"type": "equals", "parameter": []}],
        "selector": {"type": "template", "value": ".btn"},
        "eventName": {"type": "template", "value": "ev"},
        "uniqueTriggerId": {"type": "template", "value": "u"},
    }
    transport = FakeTransport({("GET", path): current})
    Client(transport).update_trigger(path, TriggerInput(name="Renamed", type="pageview"))
    _, _, body, params = transport.calls[1]
    assert params == {"fingerprint": "fp-2"}
    assert body["filter"] == current["filter"]
    assert body["selector"] == current["selector"]
    assert body["eventName"] == current["eventName"]
    assert "uniqueTriggerId" not in body


def test_update_variable_sends_fingerprint_in_body():
    path = build_variable_path("1", "2", "3", "6")
    transport = FakeTransport({("GET", path): {"fingerprint": "fp-3"}, ("PUT", path): {"variableId": "6"}})
    created = Client(transport).update_variable(path, VariableInput(name="V", type="c"))
    assert created.variable_id == "6"
    _, _, body, params = transport.calls[1]
    assert body["fingerprint"] == "fp-3"
    assert params is None


def test_get_folder_entities_collects_names():
    transport = FakeTransport({("POST", f"{WS}/folders/8:entities"): {"tag": [{"name": "A"}], "variable": [{"name": "B"}]}})
    entities = Client(transport).get_folder_entities("1", "2", "3", "8")
    assert entities.tags == ["A"]
    assert entities.variables == ["B"]
    assert entities.triggers == []


def test_resolve_helpers():
    client = Client(FakeTransport())
    wc = resolve_workspace(client, "1", "2", "3")
    assert isinstance(wc, WorkspaceContext)
    assert wc.workspace_path() == WS
    cc = resolve_container(client, "1", "2")
    assert isinstance(cc, ContainerContext)
    assert WS.startswith(cc.container_path())
    assert resolve_account(client, "1") is client


@pytest.mark.parametrize(
    "call",
    [
        lambda c: resolve_workspace(c, "1", "2", ""),
        lambda c: resolve_workspace(c, "", "2", "3"),
        lambda c: resolve_container(c, "1", ""),
        lambda c: resolve_account(c, ""),
    ],
)
def test_resolve_rejects_missing_ids(call):
    with pytest.raises(ValueError, match="is required"):
        call(Client(FakeTransport()))


@pytest.fixture
def server():
    captured = {}

    class Handler(BaseHTTPRequestHandler):
        def _reply(self):
            length = int(self.headers.get("Content-Length") or 0)
            captured["body"] = self.rfile.read(length) if length else b""
            captured["path"] = self.path
            captured["method"] = self.command
            captured["auth"] = self.headers.get("Authorization")
            if "missing" in self.path:
                status = 404
                payload = {"error": {"code": 404, "message": "not here", "errors": [{"reason": "notFound", "message": "not here"}]}}
            else:
                status = 200
                payload = {"ok": "yes"}
            data = json.dumps(payload).encode()
            self.send_response(status)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(data)))
            self.end_headers()
            self.wfile.write(data)

        do_GET = do_POST = do_PUT = do_DELETE = _reply

        def log_message(self, *args):
            pass

    httpd = HTTPServer(("127.0.0.1", 0), Handler)
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{httpd.server_address[1]}/v2", captured
    httpd.shutdown()
    httpd.server_close()


def test_http_transport_sends_json_with_token(server):
    base_url, captured = server
    transport = HttpTransport(base_url, "token")
    result = transport.request("PUT", "accounts/1/tags/2", {"name": "T"}, {"fingerprint": "fp"})
    assert result == {"ok": "yes"}
    assert captured["method"] == "PUT"
    assert captured["path"] == "/v2/accounts/1/tags/2?fingerprint=fp"
    assert captured["auth"] == "Bearer token"
    assert json.loads(captured["body"]) == {"name": "T"}


def test_http_transport_raises_api_error(server):
    base_url, _ = server
    with pytest.raises(ApiError) as info:
        HttpTransport(base_url, "token").request("GET", "missing")
    assert info.value.code == 404
    assert info.value.message == "not here"
    assert info.value.errors[0].reason == "notFound"