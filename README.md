# gtmkit

A Python library for working with Google Tag Manager. It manages containers,
workspaces, folders, tags, triggers, variables and custom templates through the
Tag Manager v2 REST API. It also builds the prompt texts and `gtm://` resource
documents that an assistant working on a GTM setup uses. It has no
dependencies outside the standard library.

## Installation

```
pip install gtmkit
```

To install the test dependencies too:

```
pip install "gtmkit[test]"
```

## Modules

- `gtmkit.errors`
  - Error classes, all based on `GtmError`: `NotFoundError` (404),
    `ConflictError` (409), `PermissionDeniedError` (403), `RateLimitError`
    (429) and `InvalidRequestError` (400).
  - `ApiError`, the raw error response, and `map_google_error`, which turns an
    `ApiError` into one of the classes above. Other codes become a plain
    `GtmError("API error <code>: ...")`.
  - `retry_with_backoff(fn, max_retries=3, context=None)`. It retries 403 and
    429 responses after waiting 1, 2, 4 ... seconds, capped at 32 seconds.
  - `Context`, which carries cancellation (`cancel()`) and an optional
    `timeout`. A retry in progress stops with `Cancelled` or `DeadlineExceeded`.
- `gtmkit.models`
  - The simplified records `Container`, `Folder`, `FolderEntities`, `Tag`,
    `TagSequenceRef` and `TagConsentSettings`. Each has a `to_dict()`.
  - The `*_from_api` builders, which create these records from API response
    objects.
- `gtmkit.payloads`
  - The input records `TagInput`, `TriggerInput`, `VariableInput`, `Parameter`,
    `Condition`, `SetupTagInput` and `TeardownTagInput`.
  - The `to_api_*` converters, which turn those records into request bodies. A
    `doesNotContain` condition becomes a `contains` condition with a `negate`
    parameter.
  - The `build_*_path` helpers.
- `gtmkit.client`
  - `Client` and `HttpTransport`. `HttpTransport(base_url, access_token,
    timeout=30.0)` sends JSON with a bearer token. Any object with the same
    `request(method, path, body, params)` method can stand in for it.
  - `update_tag`, `update_trigger` and `update_variable` first fetch the
    current object. `update_tag` and `update_trigger` keep current values for
    the fields you did not supply and send the fingerprint as a query
    parameter. `update_variable` replaces the object's fields and sends the
    fingerprint in the body.
  - `resolve_workspace`, `resolve_container` and `resolve_account` check that
    the IDs are not empty. If one is empty they raise `ValueError`.
- `gtmkit.templates`
  - `get_tag_templates()` and `get_trigger_templates()`, which return example
    structures for common GA4, HTML, pixel, page, click and form setups.
- `gtmkit.prompts`
  - `list_prompts()`, which describes the prompts `audit_container`,
    `generate_tracking_plan`, `suggest_ga4_setup` and `find_gallery_template`.
  - `audit_container_prompt`, `tracking_plan_prompt`,
    `suggest_ga4_setup_prompt` and `find_gallery_template_prompt`, which build
    the prompt texts. Each returns a `PromptResult`.
- `gtmkit.uris`
  - `list_resources()`, which returns the `gtm://accounts...` resource
    templates.
  - `parse_resource_uri(uri)`, which returns the matching template and the IDs
    in the URI.
  - `resource_contents(uri, key, items)`, which renders the indented JSON.
- `gtmkit.tools_create`
  - `create_container`, `create_workspace`, `create_tag`, `create_trigger`,
    `create_variable` and `create_template`. They take JSON strings for
    parameters and filters and return result dictionaries.
- `gtmkit.tools_manage`
  - `list_containers`, `list_folders`, `get_folder_entities` and
    `get_template`.
  - `delete_container`, `delete_tag`, `delete_trigger`, `delete_variable` and
    `delete_template`. A delete does nothing unless `confirm=True`. Without it
    the function returns `{"success": False, "message": ...}`.

## Example

```python
from gtmkit.client import Client, HttpTransport
from gtmkit.tools_create import create_trigger
from gtmkit.tools_manage import delete_tag

transport = HttpTransport("https://api.example.com/tagmanager/v2", access_token="token")
client = Client(transport)

result = create_trigger(
    client, "123", "456", "7",
    name="CTA click",
    trigger_type="linkClick",
    auto_event_filter_json='[{"type": "contains", "parameter": ['
                           '{"type": "template", "key": "arg0", "value": "{{Click Classes}}"},'
                           '{"type": "template", "key": "arg1", "value": "cta-button"}]}]',
)
print(result["message"])

print(delete_tag(client, "123", "456", "7", "42", confirm=False)["message"])
```

The API silently drops `autoEventFilter` for `linkClick`, `click` and
`formSubmission` triggers. `create_trigger` therefore moves those conditions
into `filter` and adds a warning to its message.

## Errors

`Client` methods raise API failures as subclasses of `GtmError`:

```python
from gtmkit.errors import GtmError, NotFoundError

try:
    client.get_tag("123", "456", "7", "999")
except NotFoundError:
    ...
except GtmError as exc:
    print(exc)
```

`Client.delete_container` is the one exception. It lets the raw `ApiError`
through unchanged.

## What it does not do

- It does not obtain access tokens. You pass a token you already have to
  `HttpTransport`.
- It is a library, not a server. It provides no command and does not speak
  any assistant protocol.
- The prompt builders do not fetch data themselves. You supply the tags,
  triggers and variables.
- `gtmkit.uris` parses and renders resources but does not read them from the
  API.
- There are no operations for listing accounts or workspaces. Variables and
  triggers can be created, updated and deleted, but not listed or fetched.
  Server-side clients, transformations and built-in variables are covered
  only by their path helpers.

## Running the tests

```
pytest
```