"""Feed fetching, parsing and serialization helpers."""

from __future__ import annotations

import copy
import io
import logging
from typing import Dict, Optional, Union
from xml.etree import ElementTree as ET

import requests

from .config import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from .errors import NetworkError, ParseError, SerializationError
from .models import Feed, Item

logger = logging.getLogger(__name__)

DC_NAMESPACE = "http://purl.org/dc/elements/1.1/"
CREATOR_TAG = f"{{{DC_NAMESPACE}}}creator"

# Prefixes commonly found in RSS 2.0 documents.
_KNOWN_NAMESPACES = {
    "dc": DC_NAMESPACE,
    "content": "http://purl.org/rss/1.0/modules/content/",
    "atom": "http://www.w3.org/2005/Atom",
    "media": "http://search.yahoo.com/mrss/",
    "sy": "http://purl.org/rss/1.0/modules/syndication/",
    "slash": "http://purl.org/rss/1.0/modules/slash/",
    "wfw": "http://wellformedweb.org/CommentAPI/",
}

_CHANNEL_FIELDS = ("title", "link", "description")


def fetch_feed(
    url: str,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    user_agent: str = DEFAULT_USER_AGENT,
    session: Optional[requests.Session] = None,
) -> bytes:
    """Fetch the raw feed body with a single bounded GET."""
    logger.info("Fetching feed %s", url)
    getter = session.get if session is not None else requests.get
    try:
        response = getter(url, timeout=timeout, headers={"User-Agent": user_agent})
        response.raise_for_status()
    except requests.RequestException as exc:
        raise NetworkError(f"Failed to fetch feed: {exc}") from exc

    content = response.content
    logger.debug("Fetched %d bytes from %s", len(content), url)
    return content


def _collect_namespaces(body: bytes) -> Dict[str, str]:
    """Map each namespace URI to the first prefix the document declares for it."""
    namespaces: Dict[str, str] = {}
    for _event, (prefix, uri) in ET.iterparse(io.BytesIO(body), events=("start-ns",)):
        if uri not in namespaces and prefix not in namespaces.values():
            namespaces[uri] = prefix
    return namespaces


def _parse_item(element: ET.Element) -> Item:
    return Item(
        title=element.findtext("title"),
        link=element.findtext("link"),
        description=element.findtext("description"),
        author=element.findtext("author"),
        creator=element.findtext(CREATOR_TAG),
        pub_date=element.findtext("pubDate"),
        guid=element.findtext("guid"),
        element=element,
    )


def parse_feed(body: Union[bytes, str]) -> Feed:
    """Parse an RSS document into a :class:`Feed`.

    Well-formed documents without an RSS channel (Atom, for instance) yield a
    feed with ``items=None`` that serializes back to the original document.
    """
    if isinstance(body, str):
        body = body.encode("utf-8")

    try:
        root = ET.fromstring(body)
        namespaces = _collect_namespaces(body)
    except ET.ParseError as exc:
        raise ParseError(f"Feed is not well-formed XML: {exc}") from exc

    channel = root.find("channel") if root.tag == "rss" else None
    if channel is None:
        logger.warning("Document root <%s> has no RSS channel; passing through", root.tag)
        return Feed(document=root, namespaces=namespaces)

    items = [_parse_item(element) for element in channel.findall("item")]
    logger.debug("Parsed %d items from channel", len(items))
    return Feed(
        title=channel.findtext("title"),
        link=channel.findtext("link"),
        description=channel.findtext("description"),
        items=items,
        document=root,
        namespaces=namespaces,
    )


def resolve_author(item: Item) -> Optional[str]:
    """Return the item's author, preferring ``author`` over ``dc:creator``."""
    for candidate in (item.author, item.creator):
        if candidate and candidate.strip():
            return candidate.strip()
    return None


def _build_item_element(item: Item) -> ET.Element:
    element = ET.Element("item")
    for tag, value in (
        ("title", item.title),
        ("link", item.link),
        ("description", item.description),
        ("author", item.author),
        (CREATOR_TAG, item.creator),
        ("pubDate", item.pub_date),
        ("guid", item.guid),
    ):
        if value is not None:
            ET.SubElement(element, tag).text = value
    return element


def _build_document(feed: Feed) -> ET.Element:
    if feed.document is not None:
        root = copy.deepcopy(feed.document)
        channel = root.find("channel")
        if channel is None:
            channel = ET.SubElement(root, "channel")
        for element in channel.findall("item"):
            channel.remove(element)
    else:
        root = ET.Element("rss", {"version": "2.0"})
        channel = ET.SubElement(root, "channel")
        for tag in _CHANNEL_FIELDS:
            value = getattr(feed, tag)
            if value is not None:
                ET.SubElement(channel, tag).text = value

    for item in feed.items or []:
        if item.element is not None:
            channel.append(copy.deepcopy(item.element))
        else:
            channel.append(_build_item_element(item))
    return root


def _prefix_map(feed: Feed) -> Dict[str, str]:
    prefixes = dict(feed.namespaces)
    for prefix, uri in _KNOWN_NAMESPACES.items():
        if uri not in prefixes and prefix not in prefixes.values():
            prefixes[uri] = prefix
    return prefixes


def _apply_prefixes(root: ET.Element, prefixes: Dict[str, str]) -> None:
    """Rewrite ``{uri}name`` tags as literal ``prefix:name`` and declare them.

    ElementTree would otherwise pick prefixes from its process-wide registry.
    """
    used = set()

    def qualify(name: str) -> str:
        if not name.startswith("{"):
            return name
        uri, local = name[1:].split("}", 1)
        if uri not in prefixes:
            index = 0
            while f"ns{index}" in prefixes.values():
                index += 1
            prefixes[uri] = f"ns{index}"
        used.add(uri)
        prefix = prefixes[uri]
        return f"{prefix}:{local}" if prefix else local

    for element in root.iter():
        if not isinstance(element.tag, str):
            continue
        element.tag = qualify(element.tag)
        for key in [key for key in element.attrib if key.startswith("{")]:
            element.attrib[qualify(key)] = element.attrib.pop(key)

    for uri, prefix in prefixes.items():
        if uri in used:
            root.set(f"xmlns:{prefix}" if prefix else "xmlns", uri)


def serialize_feed(feed: Feed) -> str:
    """Write the feed back to an XML string."""
    try:
        if feed.items is None and feed.document is not None:
            root = copy.deepcopy(feed.document)
        else:
            root = _build_document(feed)
        _apply_prefixes(root, _prefix_map(feed))
        payload = ET.tostring(root, encoding="utf-8", xml_declaration=True)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Failed to serialize feed: {exc}") from exc
    return payload.decode("utf-8")
