from __future__ import annotations

from dataclasses import dataclass

from urltabs.domain.models import TabDescriptor
from urltabs.endpoints.resolver import RequestContext, find_segment, trailingslashit
from urltabs.tabs.slug import sanitize_title


@dataclass(frozen=True)
class TabLink:
    url: str
    is_active: bool


def base_url(ctx: RequestContext) -> str:
    """
    Request path with endpoint segments removed.

    Every registered endpoint is checked (registration order), not just the
    one a given tab uses: a home tab on ``tab`` must still point at
    ``/cat/`` while ``/cat/overview/x/`` is being viewed.
    """
    for ep in ctx.registry:
        idx = find_segment(ep.name, ctx.path)
        if idx >= 0:
            return trailingslashit(ctx.path[:idx])
    return trailingslashit(ctx.path)


def tab_url(tab: TabDescriptor, base: str) -> str:
    if tab.kind == "tab-home":
        return base

    endpoint_base = f"{base}{tab.endpoint_name}/"
    if tab.kind == "tab-base":
        return endpoint_base

    return f"{endpoint_base}{sanitize_title(tab.slug)}/"


def _untrail(value: str) -> str:
    # one trailing slash only; "/p/tab//" must not equal "/p/tab/"
    return value[:-1] if value.endswith("/") else value


def is_current(url: str, ctx: RequestContext) -> bool:
    return _untrail(url) == _untrail(ctx.path)


def build_tab(tab: TabDescriptor, ctx: RequestContext) -> TabLink:
    url = tab_url(tab, base_url(ctx))
    return TabLink(url=url, is_active=is_current(url, ctx))
