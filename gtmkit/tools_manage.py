"""Tools that list, read and delete containers, folders, templates, tags, triggers and variables."""

from __future__ import annotations

from typing import Any

from .client import Client, resolve_account, resolve_container, resolve_workspace
from .payloads import build_tag_path, build_trigger_path, build_variable_path

_DELETE_GUARD = (
    "Deletion requires confirm: true. This is a safety guard to prevent accidental deletions."
)
_CONTAINER_DELETE_GUARD = (
    "Deletion requires confirm: true. WARNING: This will permanently delete the container "
    "and all its contents (tags, triggers, variables, versions)."
)
_TEMPLATE_DELETE_GUARD = (
    "Deletion requires confirm: true. This is a safety guard to prevent accidental deletions. "
    "Templates in use by tags cannot be deleted."
)


def _refused(message: str) -> dict[str, Any]:
    return {"success": False, "message": message}


def _done(message: str) -> dict[str, Any]:
    return {"success": True, "message": message}


def _require(value: str, message: str) -> None:
    if not value:
        raise ValueError(message)


def list_containers(client: Client, account_id: str) -> dict[str, Any]:
    """List all containers in an account."""
    client = resolve_account(client, account_id)
    containers = client.list_containers(account_id)
    return {"containers": [c.to_dict() for c in containers]}


def list_folders(
    client: Client, account_id: str, container_id: str, workspace_id: str
) -> dict[str, Any]:
    """List all folders in a workspace."""
    wc = resolve_workspace(client, account_id, container_id, workspace_id)
    folders = wc.client.list_folders(wc.account_id, wc.container_id, wc.workspace_id)
    return {"folders": [f.to_dict() for f in folders]}


def get_folder_entities(
    client: Client, account_id: str, container_id: str, workspace_id: str, folder_id: str
) -> dict[str, Any]:
    """Names of the tags, triggers and variables inside a folder."""
    wc = resolve_workspace(client, account_id, container_id, workspace_id)
    entities = wc.client.get_folder_entities(
        wc.account_id, wc.container_id, wc.workspace_id, folder_id
    )
    return {"entities": entities.to_dict()}


def get_template(
    client: Client, account_id: str, container_id: str, workspace_id: str, template_id: str
) -> dict[str, Any]:
    """A custom template with its code and the tag type to use it by."""
    wc = resolve_workspace(client, account_id, container_id, workspace_id)
    _require(template_id, "templateId is required")
    template = wc.client.get_template(f"{wc.workspace_path()}/templates/{template_id}")

    found_id = template.get("templateId", "")
    gallery = template.get("galleryReference") or {}
    gallery_id = gallery.get("galleryTemplateId", "")

    result: dict[str, Any] = {
        "templateId": found_id,
        "name": template.get("name", ""),
    }
    if gallery_id:
        result["type"] = f"cvt_{gallery_id}"
    else:
        result["type"] = f"cvt_{wc.container_id}_{found_id}"
    if template.get("templateData"):
        result["templateData"] = template["templateData"]
    if gallery_id:
        result["galleryReference"] = {
            "owner": gallery.get("owner", ""),
            "repository": gallery.get("repository", ""),
            "version": gallery.get("version", ""),
            "galleryTemplateId": gallery_id,
        }
    result["path"] = template.get("path", "")
    result["fingerprint"] = template.get("fingerprint", "")
    if template.get("tagManagerUrl"):
        result["tagManagerUrl"] = template["tagManagerUrl"]
    return result


def delete_container(
    client: Client, account_id: str, container_id: str, confirm: bool = False
) -> dict[str, Any]:
    """Delete a container and everything in it; requires ``confirm``."""
    if not confirm:
        return _refused(_CONTAINER_DELETE_GUARD)
    cc = resolve_container(client, account_id, container_id)
    cc.client.delete_container(cc.container_path())
    return _done(f"Container {container_id} deleted successfully")


def delete_tag(
    client: Client,
    account_id: str,
    container_id: str,
    workspace_id: str,
    tag_id: str,
    confirm: bool = False,
) -> dict[str, Any]:
    """Delete a tag; requires ``confirm``."""
    if not confirm:
        return _refused(_DELETE_GUARD)
    wc = resolve_workspace(client, account_id, container_id, workspace_id)
    _require(tag_id, "tag ID is required")
    wc.client.delete_tag(build_tag_path(wc.account_id, wc.container_id, wc.workspace_id, tag_id))
    return _done(f"Tag {tag_id} deleted successfully")


def delete_template(
    client: Client,
    account_id: str,
    container_id: str,
    workspace_id: str,
    template_id: str,
    confirm: bool = False,
) -> dict[str, Any]:
    """Delete a custom template; requires ``confirm``."""
    if not confirm:
        return _refused(_TEMPLATE_DELETE_GUARD)
    wc = resolve_workspace(client, account_id, container_id, workspace_id)
    _require(template_id, "templateId is required")
    wc.client.delete_template(f"{wc.workspace_path()}/templates/{template_id}")
    return _done(f"Template {template_id} deleted successfully")


def delete_trigger(
    client: Client,
    account_id: str,
    container_id: str,
    workspace_id: str,
    trigger_id: str,
    confirm: bool = False,
) -> dict[str, Any]:
    """Delete a trigger; requires ``confirm``."""
    if not confirm:
        return _refused(_DELETE_GUARD)
    wc = resolve_workspace(client, account_id, container_id, workspace_id)
    _require(trigger_id, "trigger ID is required")
    wc.client.delete_trigger(
        build_trigger_path(wc.account_id, wc.container_id, wc.workspace_id, trigger_id)
    )
    return _done(f"Trigger {trigger_id} deleted successfully")


def delete_variable(
    client: Client,
    account_id: str,
    container_id: str,
    workspace_id: str,
    variable_id: str,
    confirm: bool = False,
) -> dict[str, Any]:
    """Delete a variable; requires ``confirm``."""
    if not confirm:
        return _refused(_DELETE_GUARD)
    wc = resolve_workspace(client, account_id, container_id, workspace_id)
    _require(variable_id, "variable ID is required")
    wc.client.delete_variable(
        build_variable_path(wc.account_id, wc.container_id, wc.workspace_id, variable_id)
    )
    return _done(f"Variable {variable_id} deleted successfully")