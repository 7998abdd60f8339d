from __future__ import annotations

import logging
import re
from enum import IntFlag
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_ENDPOINT = "tab"

TabKind = Literal["tab", "tab-home", "tab-base"]
VisibilityCondition = Literal["always", "no-endpoint", "endpoint-empty", "specific-tab"]

TAB_KINDS: tuple[str, ...] = ("tab", "tab-home", "tab-base")
VISIBILITY_CONDITIONS: tuple[str, ...] = ("always", "no-endpoint", "endpoint-empty", "specific-tab")

NAVIGATION_LINK_BLOCK = "core/navigation-link"
VISIBILITY_ATTRIBUTE = "hmUrlTabVisibility"

_ENDPOINT_NAME = re.compile(r"^[A-Za-z0-9_-]+$")

logger = logging.getLogger(__name__)


class EndpointMask(IntFlag):
    """Page types an endpoint is registered for (mirrors the host's EP_* constants)."""

    NONE = 0
    PERMALINK = 1
    ATTACHMENT = 2
    DATE = 4
    YEAR = 8
    MONTH = 16
    DAY = 32
    ROOT = 64
    COMMENTS = 128
    SEARCH = 256
    CATEGORIES = 512
    TAGS = 1024
    AUTHORS = 2048
    PAGES = 4096
    ALL_ARCHIVES = DATE | YEAR | MONTH | DAY | CATEGORIES | TAGS | AUTHORS
    ALL = 8191


def effective_endpoint(name: Optional[str]) -> str:
    # empty / missing endpoint names fall back to the default "tab"
    name = (name or "").strip().strip("/")
    return name or DEFAULT_ENDPOINT


class Endpoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    mask: EndpointMask = EndpointMask.ALL

    @field_validator("name", mode="before")
    @classmethod
    def _clean_name(cls, v: Any) -> str:
        name = str(v or "").strip().strip("/")
        if not _ENDPOINT_NAME.match(name):
            raise ValueError(f"invalid endpoint name: {v!r}")
        return name

    @field_validator("mask", mode="before")
    @classmethod
    def _coerce_mask(cls, v: Any) -> EndpointMask:
        if v is None:
            return EndpointMask.ALL
        if isinstance(v, str):
            # accept "CATEGORIES" / "EP_CATEGORIES" / "TAGS|CATEGORIES"
            mask = EndpointMask.NONE
            for part in v.split("|"):
                key = part.strip().upper()
                if key.startswith("EP_"):
                    key = key[3:]
                try:
                    mask |= EndpointMask[key]
                except KeyError:
                    raise ValueError(f"unknown endpoint mask: {part!r}") from None
            return mask
        return EndpointMask(int(v))


class TabDescriptor(BaseModel):
    """A navigation link's tab settings, as read from its block attributes."""

    model_config = ConfigDict(frozen=True)

    kind: TabKind = "tab"
    endpoint_name: str = DEFAULT_ENDPOINT
    slug: str = ""

    @field_validator("kind", mode="before")
    @classmethod
    def _known_kind(cls, v: Any) -> str:
        if v in TAB_KINDS:
            return v
        logger.debug("Unknown tab kind %r treated as \"tab\"", v)
        return "tab"

    @field_validator("endpoint_name", mode="before")
    @classmethod
    def _default_endpoint(cls, v: Any) -> str:
        return effective_endpoint(v)

    @field_validator("slug", mode="before")
    @classmethod
    def _slug_text(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @classmethod
    def from_attributes(cls, attrs: dict[str, Any]) -> "TabDescriptor":
        return cls(
            kind=attrs.get("kind") or "tab",
            endpoint_name=attrs.get("tabEndpoint"),
            slug=attrs.get("url"),
        )


class VisibilityRule(BaseModel):
    """Per-block display condition stored under ``hmUrlTabVisibility``."""

    model_config = ConfigDict(frozen=True)

    condition: VisibilityCondition = "always"
    endpoint_name: str = DEFAULT_ENDPOINT
    target_slug: str = ""

    @field_validator("condition", mode="before")
    @classmethod
    def _fail_open(cls, v: Any) -> str:
        if v in VISIBILITY_CONDITIONS:
            return v
        if v is not None:
            # unknown conditions never hide anything
            logger.debug("Unknown visibility condition %r treated as \"always\"", v)
        return "always"

    @field_validator("endpoint_name", mode="before")
    @classmethod
    def _default_endpoint(cls, v: Any) -> str:
        return effective_endpoint(v)

    @field_validator("target_slug", mode="before")
    @classmethod
    def _slug_text(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @classmethod
    def from_attributes(cls, value: Any) -> "VisibilityRule":
        if not isinstance(value, dict):
            return cls()
        return cls(
            condition=value.get("condition"),
            endpoint_name=value.get("endpoint"),
            target_slug=value.get("tabUrl"),
        )


class Block(BaseModel):
    """Parsed block as handed over by the host (editor tree or render call)."""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(default=None, alias="blockName")
    attrs: dict[str, Any] = Field(default_factory=dict)
    inner_html: str = Field(default="", alias="innerHTML")
    inner_blocks: list["Block"] = Field(default_factory=list, alias="innerBlocks")
    client_id: str = Field(default="", alias="clientId")

    @field_validator("attrs", mode="before")
    @classmethod
    def _attrs_dict(cls, v: Any) -> dict[str, Any]:
        return v if isinstance(v, dict) else {}

    @property
    def tab_kind(self) -> Optional[str]:
        if self.name != NAVIGATION_LINK_BLOCK:
            return None
        kind = self.attrs.get("kind")
        return kind if kind in TAB_KINDS else None

    @property
    def is_tab_link(self) -> bool:
        return self.tab_kind is not None

    @property
    def visibility(self) -> Optional[VisibilityRule]:
        raw = self.attrs.get(VISIBILITY_ATTRIBUTE)
        if not raw:
            return None
        return VisibilityRule.from_attributes(raw)


Block.model_rebuild()
