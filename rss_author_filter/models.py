"""Shared data models for rss_author_filter."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from xml.etree import ElementTree as ET


@dataclass(frozen=True)
class FilterConfig:
    """Allow/deny substring patterns applied to item authors."""

    allow: Tuple[str, ...] = ()
    deny: Tuple[str, ...] = ()


@dataclass
class Item:
    """A single RSS item as read from the source feed."""

    title: Optional[str] = None
    link: Optional[str] = None
    description: Optional[str] = None
    author: Optional[str] = None
    creator: Optional[str] = None
    pub_date: Optional[str] = None
    guid: Optional[str] = None
    element: Optional[ET.Element] = field(default=None, repr=False, compare=False)


@dataclass
class Feed:
    """Channel metadata plus the ordered items of an RSS document.

    ``items`` is ``None`` when the document has no RSS channel at all, in which
    case ``document`` is written back untouched. ``namespaces`` maps each
    namespace URI to the prefix the source document declared for it.
    """

    title: Optional[str] = None
    link: Optional[str] = None
    description: Optional[str] = None
    items: Optional[List[Item]] = None
    document: Optional[ET.Element] = field(default=None, repr=False, compare=False)
    namespaces: Dict[str, str] = field(default_factory=dict, repr=False, compare=False)
