from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError
from rich.console import Console
from rich.logging import RichHandler

from urltabs.domain.models import DEFAULT_ENDPOINT
from urltabs.endpoints.registry import EndpointRegistry
from urltabs.render.pipeline import MarkupClasses

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Settings file could not be read or does not describe valid settings."""


class Settings(BaseModel):
    # raw endpoint records; the registry validates and de-duplicates them
    endpoints: list[Any] = Field(default_factory=lambda: [{"name": DEFAULT_ENDPOINT, "mask": "ALL"}])

    current_class: str = "current-menu-item"
    active_class: str = "is-active"
    link_class: str = "hm-url-tab-link"
    visibility_attribute: str = "data-hm-tab-visibility"

    def registry(self) -> EndpointRegistry:
        return EndpointRegistry(self.endpoints)

    def markup_classes(self) -> MarkupClasses:
        return MarkupClasses(
            current=self.current_class,
            active=self.active_class,
            link=self.link_class,
            visibility_attribute=self.visibility_attribute,
        )


def load_settings(path: Optional[Path] = None) -> Settings:
    """
    Read settings from a JSON file. No path means defaults.

    Example file:
      {"endpoints": [{"name": "tab"}, {"name": "overview", "mask": "EP_CATEGORIES"}]}
    """
    if path is None:
        return Settings()

    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read settings file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Settings file {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Settings file {path} must contain a JSON object")

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e

    logger.debug("Loaded settings from %s (%d endpoint entries)", path, len(settings.endpoints))
    return settings


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)],
        force=True,
    )
