"""Author allow/deny filtering of feed items."""

from __future__ import annotations

import dataclasses
import logging
from typing import Iterable

from .feeds import resolve_author
from .models import Feed, FilterConfig, Item

logger = logging.getLogger(__name__)


def _matches_any(author: str, patterns: Iterable[str]) -> bool:
    lowered = author.lower()
    return any(pattern.lower() in lowered for pattern in patterns)


def is_admitted(item: Item, config: FilterConfig) -> bool:
    """Return whether an item passes the author filter.

    The deny list is consulted before the allow list, so an author matching
    both is rejected. Items without an author only pass when there is no
    allow list.
    """
    author = resolve_author(item)
    if author is None:
        return not config.allow

    if config.deny and _matches_any(author, config.deny):
        return False

    if config.allow:
        return _matches_any(author, config.allow)

    return True


def filter_feed(feed: Feed, config: FilterConfig) -> Feed:
    """Return a copy of ``feed`` holding only the admitted items."""
    if not feed.items:
        logger.debug("Feed has no items to filter")
        return feed

    admitted = [item for item in feed.items if is_admitted(item, config)]
    logger.info(
        "Kept %d of %d items (allow=%s, deny=%s)",
        len(admitted),
        len(feed.items),
        list(config.allow),
        list(config.deny),
    )
    return dataclasses.replace(feed, items=admitted)
