from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Iterator, Optional, Sequence, Union

from pydantic import ValidationError

from urltabs.domain.models import DEFAULT_ENDPOINT, Endpoint, EndpointMask

logger = logging.getLogger(__name__)

EndpointLike = Union[Endpoint, dict[str, Any]]
EndpointFilter = Callable[[list[EndpointLike]], list[EndpointLike]]


def default_endpoints() -> list[EndpointLike]:
    return [Endpoint(name=DEFAULT_ENDPOINT, mask=EndpointMask.ALL)]


def _coerce(item: Any) -> Optional[Endpoint]:
    if isinstance(item, Endpoint):
        return item
    if isinstance(item, str):
        item = {"name": item}
    if not isinstance(item, dict):
        logger.warning("Ignoring endpoint entry of type %s", type(item).__name__)
        return None
    try:
        return Endpoint.model_validate(item)
    except ValidationError as e:
        logger.warning("Ignoring invalid endpoint %r: %s", item, e.errors()[0].get("msg", e))
        return None


class EndpointRegistry:
    """
    Ordered, de-duplicated set of rewrite endpoints.

    Registration order is priority order: when more than one endpoint
    segment appears in a path, the first registered one decides the base URL.
    An empty registry is never observable; it collapses to the single
    default ``tab`` endpoint.
    """

    def __init__(self, endpoints: Optional[Iterable[Any]] = None):
        cleaned: list[Endpoint] = []
        seen: set[str] = set()

        for item in endpoints or ():
            ep = _coerce(item)
            if ep is None:
                continue
            if ep.name in seen:
                logger.warning("Duplicate endpoint %r ignored (first registration wins)", ep.name)
                continue
            seen.add(ep.name)
            cleaned.append(ep)

        if not cleaned:
            logger.debug("No endpoints registered; using default %r", DEFAULT_ENDPOINT)
            cleaned = [Endpoint(name=DEFAULT_ENDPOINT)]

        self._endpoints: tuple[Endpoint, ...] = tuple(cleaned)

    @classmethod
    def build(cls, filters: Sequence[EndpointFilter] = ()) -> "EndpointRegistry":
        """
        Start from the default endpoint list and pass it through each
        registration hook in order. Hooks receive and return a list of
        endpoint records (``Endpoint`` or ``{"name", "mask"}`` dicts).
        """
        endpoints: list[EndpointLike] = default_endpoints()
        for f in filters:
            endpoints = list(f(list(endpoints)) or [])
        return cls(endpoints)

    def names(self) -> list[str]:
        return [ep.name for ep in self._endpoints]

    def get(self, name: str) -> Optional[Endpoint]:
        for ep in self._endpoints:
            if ep.name == name:
                return ep
        return None

    def for_page(self, mask: EndpointMask) -> list[Endpoint]:
        # endpoints the host would register rewrite rules for on this page type
        return [ep for ep in self._endpoints if ep.mask & mask]

    def __iter__(self) -> Iterator[Endpoint]:
        return iter(self._endpoints)

    def __len__(self) -> int:
        return len(self._endpoints)

    def __contains__(self, name: object) -> bool:
        return any(ep.name == name for ep in self._endpoints)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EndpointRegistry):
            return NotImplemented
        return self._endpoints == other._endpoints

    def __hash__(self) -> int:
        return hash(self._endpoints)

    def __repr__(self) -> str:
        return f"EndpointRegistry({self.names()!r})"
