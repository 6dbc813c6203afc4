"""Request orchestration: fetch, filter and build the HTTP response."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import requests

from .config import AppConfig, load_app_config, split_patterns
from .errors import FeedFilterError
from .feeds import fetch_feed, parse_feed, serialize_feed
from .filtering import filter_feed
from .models import FilterConfig

logger = logging.getLogger(__name__)

RSS_CONTENT_TYPE = "application/rss+xml"
JSON_CONTENT_TYPE = "application/json"
ERROR_TITLE = "Failed to process RSS feed"
UNKNOWN_ERROR = "Unknown error"

_DEFAULT_CONFIG: Optional[AppConfig] = None


@dataclass
class HandlerResponse:
    """Status, headers and body returned to the HTTP layer."""

    status_code: int
    body: str
    headers: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "statusCode": self.status_code,
            "headers": dict(self.headers),
            "body": self.body,
        }


def resolve_filter_config(
    params: Optional[Mapping[str, Optional[str]]], config: AppConfig
) -> FilterConfig:
    """Combine request parameters with the configured default patterns.

    A non-empty ``whitelist`` or ``blacklist`` parameter replaces the
    corresponding default list; missing or empty parameters keep it.
    """
    params = params or {}
    whitelist = params.get("whitelist")
    blacklist = params.get("blacklist")
    return FilterConfig(
        allow=split_patterns(whitelist) if whitelist else config.whitelist,
        deny=split_patterns(blacklist) if blacklist else config.blacklist,
    )


def success_response(xml: str) -> HandlerResponse:
    return HandlerResponse(
        status_code=200,
        body=xml,
        headers={
            "Content-Type": RSS_CONTENT_TYPE,
            "Access-Control-Allow-Origin": "*",
        },
    )


def error_response(message: str) -> HandlerResponse:
    return HandlerResponse(
        status_code=500,
        body=json.dumps({"error": ERROR_TITLE, "message": message}),
        headers={"Content-Type": JSON_CONTENT_TYPE},
    )


def handle(
    params: Optional[Mapping[str, Optional[str]]],
    config: AppConfig,
    session: Optional[requests.Session] = None,
) -> HandlerResponse:
    """Run one fetch, parse, filter and serialize pass for a request."""
    filter_config = resolve_filter_config(params, config)
    stage = "fetching"
    try:
        body = fetch_feed(
            config.feed_url,
            timeout=config.timeout,
            user_agent=config.user_agent,
            session=session,
        )
        stage = "parsing"
        feed = parse_feed(body)
        stage = "filtering"
        filtered = filter_feed(feed, filter_config)
        stage = "serializing"
        xml = serialize_feed(filtered)
    except FeedFilterError as exc:
        logger.error("Error processing RSS feed while %s: %s", stage, exc)
        return error_response(str(exc) or UNKNOWN_ERROR)
    except Exception:  # noqa: BLE001
        logger.exception("Unexpected error processing RSS feed while %s", stage)
        return error_response(UNKNOWN_ERROR)

    return success_response(xml)


def _default_config() -> AppConfig:
    global _DEFAULT_CONFIG
    if _DEFAULT_CONFIG is None:
        _DEFAULT_CONFIG = load_app_config()
    return _DEFAULT_CONFIG


def handle_event(
    event: Optional[Mapping[str, Any]],
    context: Any = None,
    config: Optional[AppConfig] = None,
) -> Dict[str, Any]:
    """Entry point for API-Gateway style events."""
    event = event or {}
    response = handle(
        event.get("queryStringParameters"),
        config if config is not None else _default_config(),
    )
    return response.to_dict()
