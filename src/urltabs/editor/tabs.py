from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, Iterator, Optional

from urltabs.domain.models import (
    NAVIGATION_LINK_BLOCK,
    Block,
    VisibilityRule,
    effective_endpoint,
)

VISIBILITY_INDICATOR_CLASS = "wp-block-has-hm-tab-visibility"

CONDITION_OPTIONS: tuple[tuple[str, str], ...] = (
    ("always", "Always show"),
    ("no-endpoint", "Show when no endpoint is active"),
    ("endpoint-empty", "Show when endpoint has no value"),
    ("specific-tab", "Show for specific tab"),
)


@dataclass(frozen=True)
class TabOption:
    label: str
    url: str
    endpoint: str
    kind: str

    @property
    def is_home(self) -> bool:
        return self.kind == "tab-home"

    @property
    def is_base(self) -> bool:
        return self.kind == "tab-base"


@dataclass(frozen=True)
class VisibilityPanel:
    """What the Tab Visibility inspector panel shows for one block."""

    show_controls: bool
    rule: VisibilityRule
    endpoints: tuple[str, ...] = ()
    show_endpoint_selector: bool = False
    tab_options: tuple[tuple[str, str], ...] = ()
    condition_options: tuple[tuple[str, str], ...] = CONDITION_OPTIONS


def walk(blocks: Iterable[Block]) -> Iterator[Block]:
    for b in blocks:
        yield b
        yield from walk(b.inner_blocks)


def _tab_slice(blocks: Iterable[Block]) -> tuple[tuple[str, str, str, str], ...]:
    # only the attributes tab derivation depends on, in document order
    out = []
    for b in walk(blocks):
        if not b.is_tab_link:
            continue
        out.append(
            (
                str(b.attrs.get("label") or ""),
                str(b.attrs.get("url") or ""),
                effective_endpoint(b.attrs.get("tabEndpoint")),
                b.tab_kind or "tab",
            )
        )
    return tuple(out)


@lru_cache(maxsize=64)
def _derive_tabs(tab_slice: tuple[tuple[str, str, str, str], ...]) -> tuple[TabOption, ...]:
    seen: set[tuple[str, str, str]] = set()
    tabs: list[TabOption] = []
    for label, url, endpoint, kind in tab_slice:
        key = (endpoint, url, kind)
        if key in seen:
            continue
        seen.add(key)
        tabs.append(TabOption(label=label, url=url, endpoint=endpoint, kind=kind))
    return tuple(tabs)


def collect_tabs(blocks: Iterable[Block]) -> tuple[TabOption, ...]:
    """
    Tab links present anywhere in the block tree, de-duplicated by
    (endpoint, slug, kind). Recomputed from the tree on every call; results
    are memoized on the tab-relevant slice of the tree.
    """
    return _derive_tabs(_tab_slice(blocks))


def find_block(client_id: str, blocks: Iterable[Block]) -> tuple[Optional[Block], tuple[Block, ...]]:
    """Locate a block by client id; returns (block, ancestors outermost-first)."""

    def _search(items: Iterable[Block], parents: tuple[Block, ...]):
        for b in items:
            if b.client_id == client_id:
                return b, parents
            found = _search(b.inner_blocks, parents + (b,))
            if found[0] is not None:
                return found
        return None, ()

    return _search(blocks, ())


def _has_rule(block: Block) -> bool:
    rule = block.visibility
    return rule is not None and rule.condition != "always"


def visibility_panel(client_id: str, blocks: list[Block]) -> VisibilityPanel:
    block, parents = find_block(client_id, blocks)
    rule = (block.visibility if block is not None else None) or VisibilityRule()

    if block is None or block.name == NAVIGATION_LINK_BLOCK:
        return VisibilityPanel(show_controls=False, rule=rule)

    tabs = collect_tabs(blocks)
    # nothing to pick from, or an ancestor already decides visibility
    if not tabs or any(_has_rule(p) for p in parents):
        return VisibilityPanel(show_controls=False, rule=rule)

    endpoints = tuple(dict.fromkeys(t.endpoint for t in tabs))
    options = tuple(
        (t.label or t.url, t.url)
        for t in tabs
        if t.endpoint == rule.endpoint_name and not t.is_home and not t.is_base
    )

    return VisibilityPanel(
        show_controls=True,
        rule=rule,
        endpoints=endpoints,
        show_endpoint_selector=len(endpoints) > 1,
        tab_options=options,
    )


def visibility_indicator_class(block: Block, blocks: list[Block]) -> Optional[str]:
    """Editor canvas class flagging blocks that only show on some tabs."""
    if block.name == NAVIGATION_LINK_BLOCK:
        return None
    if _has_rule(block) and collect_tabs(blocks):
        return VISIBILITY_INDICATOR_CLASS
    return None
