from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from urltabs.domain.models import VisibilityRule
from urltabs.endpoints.resolver import RequestContext
from urltabs.tabs.slug import sanitize_title

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VisibilityDecision:
    hidden: bool
    transition_tag: Optional[str] = None


SHOWN = VisibilityDecision(hidden=False)


def _should_hide(rule: VisibilityRule, ctx: RequestContext) -> bool:
    condition = rule.condition

    if condition == "endpoint-empty":
        return ctx.resolve(rule.endpoint_name) != ""

    if condition == "no-endpoint":
        # any active endpoint counts, not only the one on this rule
        return bool(ctx.active_endpoints())

    if condition == "specific-tab":
        # an absent endpoint normalizes to "" like an empty one
        return sanitize_title(ctx.resolve(rule.endpoint_name)) != sanitize_title(rule.target_slug)

    return False


def evaluate(rule: Optional[VisibilityRule], ctx: RequestContext) -> VisibilityDecision:
    """Decide whether a block with this rule renders on the current request."""
    if rule is None or rule.condition == "always":
        return SHOWN

    hidden = _should_hide(rule, ctx)
    if hidden:
        logger.debug("Hiding block: condition=%s endpoint=%s path=%s", rule.condition, rule.endpoint_name, ctx.path)
    return VisibilityDecision(hidden=hidden, transition_tag=rule.endpoint_name)
