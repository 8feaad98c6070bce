from __future__ import annotations

from typing import Any

from playwright.sync_api import Page

from .base import PlatformAdapter
from .indeed import IndeedAdapter
from .seek import SeekAdapter

from applier.log import get_logger

log = get_logger(__name__)

__all__ = ["PlatformAdapter", "SeekAdapter", "IndeedAdapter", "ADAPTERS", "get_adapter"]

ADAPTERS: dict[str, type[PlatformAdapter]] = {
    SeekAdapter.platform: SeekAdapter,
    IndeedAdapter.platform: IndeedAdapter,
}


def get_adapter(platform: str, page: Page, config: dict[str, Any]) -> PlatformAdapter:
    key = (platform or "").strip().lower()
    if key not in ADAPTERS:
        raise ValueError(f"Unsupported platform {platform!r} (known: {', '.join(ADAPTERS)})")
    log.debug("Using %s adapter", key)
    return ADAPTERS[key](page, config)
