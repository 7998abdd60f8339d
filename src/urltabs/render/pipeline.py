from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol, Sequence

from urltabs.domain.models import Block, TabDescriptor
from urltabs.endpoints.resolver import RequestContext
from urltabs.render.markup import Fragment, parse_fragment
from urltabs.tabs.builder import build_tab
from urltabs.visibility.evaluator import evaluate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkupClasses:
    """Class / attribute names written into rendered markup."""

    current: str = "current-menu-item"
    active: str = "is-active"
    link: str = "hm-url-tab-link"
    visibility_attribute: str = "data-hm-tab-visibility"


class MarkupTransformer(Protocol):
    name: str

    def applies(self, block: Block) -> bool:
        ...

    def transform_markup(self, fragment: Fragment, block: Block, ctx: RequestContext) -> Optional[Fragment]:
        """Return the (patched) fragment, or None to render nothing."""
        ...


class TabLinkTransformer:
    """Points tab navigation links at their computed URL and marks the active one."""

    name = "tab-link"

    def __init__(self, classes: MarkupClasses = MarkupClasses()):
        self.classes = classes

    def applies(self, block: Block) -> bool:
        return block.is_tab_link

    def transform_markup(self, fragment: Fragment, block: Block, ctx: RequestContext) -> Optional[Fragment]:
        link = build_tab(TabDescriptor.from_attributes(block.attrs), ctx)

        container = fragment.find("li")
        anchor = (container or fragment).find("a")

        if link.is_active and container is not None:
            container.add_class(self.classes.current)

        if anchor is None:
            logger.debug("Tab link block without an <a> element; href not set")
            return fragment

        anchor.add_class(self.classes.link)
        anchor.set("href", link.url)
        if link.is_active:
            anchor.add_class(self.classes.active)
            anchor.set("aria-current", "page")
        return fragment


class VisibilityTransformer:
    """Drops blocks whose tab visibility rule does not match the request."""

    name = "tab-visibility"

    def __init__(self, classes: MarkupClasses = MarkupClasses()):
        self.classes = classes

    def applies(self, block: Block) -> bool:
        if block.is_tab_link:
            return False
        rule = block.visibility
        # "always" rules leave the markup exactly as rendered
        return rule is not None and rule.condition != "always"

    def transform_markup(self, fragment: Fragment, block: Block, ctx: RequestContext) -> Optional[Fragment]:
        decision = evaluate(block.visibility, ctx)
        if decision.hidden:
            return None

        if decision.transition_tag is not None:
            first = fragment.find()
            if first is not None:
                first.set(self.classes.visibility_attribute, decision.transition_tag)
        return fragment


def default_transformers(classes: MarkupClasses = MarkupClasses()) -> list[MarkupTransformer]:
    return [TabLinkTransformer(classes), VisibilityTransformer(classes)]


class RenderPipeline:
    """
    Applies the registered transformers to each rendered block.

    Markup is parsed once per block, patched in place by every transformer
    that applies (registration order), and serialized once. Blocks that no
    transformer applies to are passed through untouched.
    """

    def __init__(self, ctx: RequestContext, transformers: Optional[Sequence[MarkupTransformer]] = None):
        self.ctx = ctx
        self.transformers: tuple[MarkupTransformer, ...] = tuple(
            transformers if transformers is not None else default_transformers()
        )

    def render_block(self, block: Block, content: Optional[str] = None) -> str:
        markup = block.inner_html if content is None else content
        active = [t for t in self.transformers if t.applies(block)]
        if not active:
            return markup

        fragment: Optional[Fragment] = parse_fragment(markup)
        for t in active:
            fragment = t.transform_markup(fragment, block, self.ctx)
            if fragment is None:
                logger.debug("Block %s removed by %s", block.name, t.name)
                return ""
        return fragment.serialize()

    def render_blocks(self, blocks: Iterable[Block]) -> str:
        return "".join(self.render_block(b) for b in blocks)
