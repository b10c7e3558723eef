import json

import pytest

from gtmkit.models import Container
from gtmkit.uris import (
    ResourceTemplate,
    list_resources,
    parse_resource_uri,
    resource_contents,
)


def test_list_resources_covers_all_levels():
    resources = list_resources()
    assert [r.name for r in resources] == [
        "GTM Accounts",
        "GTM Containers",
        "GTM Workspaces",
        "GTM Tags",
        "GTM Triggers",
        "GTM Variables",
    ]
    assert all(r.mime_type == "application/json" for r in resources)
    assert resources[0].uri_template == "gtm://accounts"


def test_accounts_uri_matches_exactly():
    resource, variables = parse_resource_uri("gtm://accounts")
    assert resource.key == "accounts"
    assert variables == {}


def test_containers_template_extracts_account():
    resource, variables = parse_resource_uri("gtm://accounts/123/containers")
    assert resource.name == "GTM Containers"
    assert variables == {"accountId": "123"}


@pytest.mark.parametrize("kind", ["tags", "triggers", "variables"])
def test_workspace_level_templates(kind):
    uri = f"gtm://accounts/1/containers/2/workspaces/3/{kind}"
    resource, variables = parse_resource_uri(uri)
    assert resource.key == kind
    assert variables == {"accountId": "1", "containerId": "2", "workspaceId": "3"}


def test_match_returns_none_for_other_uris():
    tags = next(r for r in list_resources() if r.key == "tags")
    assert tags.match("gtm://accounts/1/containers/2/workspaces") is None
    assert tags.match("gtm://accounts/1/containers/2/workspaces/3/tags/extra") is None


def test_values_may_not_contain_slashes_but_may_be_percent_encoded():
    containers = ResourceTemplate(
        name="c", description="d", uri_template="gtm://accounts/{accountId}/containers", key="c"
    )
    assert containers.match("gtm://accounts/a/b/containers") is None
    assert containers.match("gtm://accounts/a%2Fb/containers") == {"accountId": "a%2Fb"}
    assert containers.variables == ["accountId"]


def test_parse_unknown_uri_raises():
    with pytest.raises(ValueError, match="invalid URI"):
        parse_resource_uri("gtm://accounts/1/folders")


def test_resource_contents_round_trip():
    uri = "gtm://accounts/9/containers"
    container = Container(container_id="4", name="Site", public_id="GTM-ABC", usage_context=["web"])
    contents = resource_contents(uri, "containers", [container])
    assert contents.uri == uri
    assert contents.mime_type == "application/json"
    assert json.loads(contents.text) == {"containers": [container.to_dict()]}
    assert contents.text.startswith('{\n  "containers": [')


def test_resource_contents_escapes_html_characters():
    contents = resource_contents("gtm://accounts", "accounts", [{"name": "<b>&"}])
    assert "<b>" not in contents.text
    assert "\\u003cb\\u003e\\u0026" in contents.text
    assert json.loads(contents.text) == {"accounts": [{"name": "<b>&"}]}


def test_resource_contents_empty_list():
    contents = resource_contents("gtm://accounts", "accounts", [])
    assert json.loads(contents.text) == {"accounts": []}