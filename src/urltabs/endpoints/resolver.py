from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from urltabs.endpoints.registry import EndpointRegistry

logger = logging.getLogger(__name__)

QueryVarLookup = Callable[[str], Optional[str]]


def sanitize_request_path(path: Any) -> str:
    """
    Request path as the resolver sees it: no query string, no fragment,
    leading slash. Anything that is not a string is treated as "".
    """
    if not isinstance(path, str):
        if path is not None:
            logger.debug("Non-string request path %r treated as empty", path)
        return ""

    p = path.strip()
    for sep in ("?", "#"):
        if sep in p:
            p = p.split(sep, 1)[0]

    if p and not p.startswith("/"):
        p = "/" + p
    return p


def trailingslashit(value: str) -> str:
    return value.rstrip("/") + "/"


def find_segment(endpoint_name: str, path: str) -> int:
    """
    Index of the first slash-delimited ``/name/`` segment in path, or -1.

    The path is compared with a trailing slash appended so ``/page/tab``
    and ``/page/tab/`` behave the same; ``/tabular/`` never matches ``tab``.
    """
    if not endpoint_name:
        return -1
    return trailingslashit(path).find(f"/{endpoint_name}/")


def resolve(
    endpoint_name: str,
    path: Any,
    query_var: Optional[QueryVarLookup] = None,
) -> Optional[str]:
    """
    Current value of an endpoint for the given request path.

    Returns:
      None       endpoint is not in the URL at all
      ""         endpoint is present without a value (``/page/tab/``)
      "value"    endpoint is present with a value (``/page/tab/value/``)

    When the segment is missing from the path, the host query-variable lookup
    (if any) is consulted; only a non-empty value from it counts.
    """
    p = sanitize_request_path(path)
    normalized = trailingslashit(p)
    idx = find_segment(endpoint_name, p)

    if idx >= 0:
        rest = normalized[idx + len(endpoint_name) + 2:]
        return rest.strip("/")

    if query_var is not None:
        value = query_var(endpoint_name)
        if value:
            return str(value)

    return None


@dataclass(frozen=True)
class RequestContext:
    """Immutable per-request inputs shared by every block rendered on the page."""

    path: str
    registry: EndpointRegistry = field(default_factory=EndpointRegistry)
    query_var: Optional[QueryVarLookup] = None

    @classmethod
    def from_request(
        cls,
        path: Any,
        registry: Optional[EndpointRegistry] = None,
        query_var: Optional[QueryVarLookup] = None,
    ) -> "RequestContext":
        return cls(
            path=sanitize_request_path(path),
            registry=registry if registry is not None else EndpointRegistry(),
            query_var=query_var,
        )

    def resolve(self, endpoint_name: str) -> Optional[str]:
        return resolve(endpoint_name, self.path, self.query_var)

    def active_endpoints(self) -> dict[str, str]:
        """Registered endpoints that resolve to a value (possibly "") on this request."""
        out: dict[str, str] = {}
        for ep in self.registry:
            value = self.resolve(ep.name)
            if value is not None:
                out[ep.name] = value
        return out
