"""Simplified views of Tag Manager containers, folders and tags."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass
class Container:
    """A Tag Manager container."""

    container_id: str
    name: str
    public_id: str = ""
    usage_context: list[str] = field(default_factory=list)
    path: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "containerId": self.container_id,
            "name": self.name,
            "publicId": self.public_id,
            "usageContext": list(self.usage_context),
            "path": self.path,
        }


@dataclass
class Folder:
    """A folder grouping tags, triggers and variables."""

    folder_id: str
    name: str
    path: str = ""
    notes: str = ""

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "folderId": self.folder_id,
            "name": self.name,
            "path": self.path,
        }
        if self.notes:
            result["notes"] = self.notes
        return result


@dataclass
class FolderEntities:
    """Names of the tags, triggers and variables in a folder."""

    tags: list[str] = field(default_factory=list)
    triggers: list[str] = field(default_factory=list)
    variables: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.tags:
            result["tags"] = list(self.tags)
        if self.triggers:
            result["triggers"] = list(self.triggers)
        if self.variables:
            result["variables"] = list(self.variables)
        return result


@dataclass
class TagSequenceRef:
    """A setup or teardown tag reference."""

    tag_name: str
    stop_on_failure: bool = False

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"tagName": self.tag_name}
        if self.stop_on_failure:
            result["stopOnFailure"] = True
        return result


@dataclass
class TagConsentSettings:
    """Consent configuration of a tag."""

    consent_status: str
    consent_types: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"consentStatus": self.consent_status}
        if self.consent_types:
            result["consentTypes"] = list(self.consent_types)
        return result


@dataclass
class Tag:
    """A Tag Manager tag."""

    tag_id: str
    name: str
    type: str
    path: str = ""
    parameter: Any = None
    firing_trigger_id: list[str] = field(default_factory=list)
    blocking_trigger_id: list[str] = field(default_factory=list)
    setup_tag: list[TagSequenceRef] = field(default_factory=list)
    teardown_tag: list[TagSequenceRef] = field(default_factory=list)
    consent_settings: TagConsentSettings | None = None
    paused: bool = False

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "tagId": self.tag_id,
            "name": self.name,
            "type": self.type,
        }
        if self.parameter:
            result["parameter"] = self.parameter
        if self.firing_trigger_id:
            result["firingTriggerId"] = list(self.firing_trigger_id)
        if self.blocking_trigger_id:
            result["blockingTriggerId"] = list(self.blocking_trigger_id)
        if self.setup_tag:
            result["setupTag"] = [ref.to_dict() for ref in self.setup_tag]
        if self.teardown_tag:
            result["teardownTag"] = [ref.to_dict() for ref in self.teardown_tag]
        if self.consent_settings is not None:
            result["consentSettings"] = self.consent_settings.to_dict()
        if self.paused:
            result["paused"] = True
        result["path"] = self.path
        return result


def container_from_api(data: Mapping[str, Any]) -> Container:
    """Build a container from an API response object."""
    return Container(
        container_id=data.get("containerId", ""),
        name=data.get("name", ""),
        public_id=data.get("publicId", ""),
        usage_context=list(data.get("usageContext") or ()),
        path=data.get("path", ""),
    )


def folder_from_api(data: Mapping[str, Any]) -> Folder:
    """Build a folder from an API response object."""
    return Folder(
        folder_id=data.get("folderId", ""),
        name=data.get("name", ""),
        path=data.get("path", ""),
        notes=data.get("notes", ""),
    )


def folder_entities_from_api(data: Mapping[str, Any]) -> FolderEntities:
    """Collect entity names from a folder entities API response."""

    def names(key: str) -> list[str]:
        return [item.get("name", "") for item in data.get(key) or ()]

    return FolderEntities(
        tags=names("tag"),
        triggers=names("trigger"),
        variables=names("variable"),
    )


def _consent_from_api(data: Mapping[str, Any] | None) -> TagConsentSettings | None:
    if not data or not data.get("consentStatus"):
        return None
    consent_type = data.get("consentType") or {}
    types = [p["value"] for p in consent_type.get("list") or () if p.get("value")]
    return TagConsentSettings(consent_status=data["consentStatus"], consent_types=types)


def tag_from_api(data: Mapping[str, Any]) -> Tag:
    """Build a tag from an API response object."""
    return Tag(
        tag_id=data.get("tagId", ""),
        name=data.get("name", ""),
        type=data.get("type", ""),
        path=data.get("path", ""),
        parameter=data.get("parameter") or None,
        firing_trigger_id=list(data.get("firingTriggerId") or ()),
        blocking_trigger_id=list(data.get("blockingTriggerId") or ()),
        setup_tag=[
            TagSequenceRef(s.get("tagName", ""), bool(s.get("stopOnSetupFailure")))
            for s in data.get("setupTag") or ()
        ],
        teardown_tag=[
            TagSequenceRef(s.get("tagName", ""), bool(s.get("stopTeardownOnFailure")))
            for s in data.get("teardownTag") or ()
        ],
        consent_settings=_consent_from_api(data.get("consentSettings")),
        paused=bool(data.get("paused")),
    )