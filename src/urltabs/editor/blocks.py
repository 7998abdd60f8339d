from __future__ import annotations

import copy
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from urltabs.domain.models import (
    DEFAULT_ENDPOINT,
    NAVIGATION_LINK_BLOCK,
    VISIBILITY_ATTRIBUTE,
    Endpoint,
)
from urltabs.endpoints.registry import EndpointRegistry

TAB_ENDPOINT_ATTRIBUTE = {"type": "string", "default": DEFAULT_ENDPOINT}

VISIBILITY_ATTRIBUTE_SCHEMA = {
    "type": "object",
    "default": {
        "condition": "always",
        "endpoint": DEFAULT_ENDPOINT,
        "tabUrl": "",
    },
}

NAVIGATION_LINK_VARIATIONS: tuple[dict[str, Any], ...] = (
    {
        "name": "tab-home",
        "title": "Home Tab",
        "description": "A tab link to the current page without any endpoint value.",
        "attributes": {"kind": "tab-home", "tabEndpoint": "", "url": ""},
        "isActive": ["kind"],
        "scope": ["inserter"],
    },
    {
        "name": "tab-base",
        "title": "Base Tab",
        "description": "A tab link to the endpoint without a value (e.g., /tab/).",
        "attributes": {"kind": "tab-base", "tabEndpoint": DEFAULT_ENDPOINT, "url": ""},
        "isActive": ["kind"],
        "scope": ["inserter"],
    },
    {
        "name": "tab",
        "title": "Tab",
        "description": "A tab link with a rewrite endpoint for conditional content display.",
        "attributes": {"kind": "tab", "tabEndpoint": DEFAULT_ENDPOINT, "url": ""},
        "isActive": ["kind"],
        "scope": ["inserter"],
    },
)


def register_block_attributes(settings: dict[str, Any], name: Optional[str] = None) -> dict[str, Any]:
    """
    Block-type settings with the tab attributes added.

    Navigation links get ``tabEndpoint``; every other block gets the
    ``hmUrlTabVisibility`` rule. The input is never mutated.
    """
    block_name = name or settings.get("name")
    attributes = dict(settings.get("attributes") or {})

    if block_name == NAVIGATION_LINK_BLOCK:
        attributes["tabEndpoint"] = copy.deepcopy(TAB_ENDPOINT_ATTRIBUTE)
    else:
        attributes[VISIBILITY_ATTRIBUTE] = copy.deepcopy(VISIBILITY_ATTRIBUTE_SCHEMA)

    return {**settings, "attributes": attributes}


def block_type_variations(variations: list[dict[str, Any]], block_name: str) -> list[dict[str, Any]]:
    if block_name != NAVIGATION_LINK_BLOCK:
        return variations
    return list(variations) + [copy.deepcopy(v) for v in NAVIGATION_LINK_VARIATIONS]


class EditorData(BaseModel):
    """Read-only snapshot handed to the editor once at load time."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    endpoints: tuple[Endpoint, ...] = Field(default_factory=tuple)
    current_url: str = Field(default="", alias="currentUrl")

    @classmethod
    def from_registry(cls, registry: EndpointRegistry, current_url: str = "") -> "EditorData":
        return cls(endpoints=tuple(registry), current_url=current_url or "")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
