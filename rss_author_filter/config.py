"""Process-wide configuration loading."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple
from xml.etree import ElementTree as ET

logger = logging.getLogger(__name__)

DEFAULT_FEED_URL = "https://example.com/feed.xml"
DEFAULT_TIMEOUT = 10.0
DEFAULT_USER_AGENT = "RSS-Author-Filter/1.0"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class AppConfig:
    """Immutable settings read once at process start."""

    feed_url: str = DEFAULT_FEED_URL
    whitelist: Tuple[str, ...] = ()
    blacklist: Tuple[str, ...] = ()
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    log_level: str = DEFAULT_LOG_LEVEL


def split_patterns(raw: Optional[str]) -> Tuple[str, ...]:
    """Split a comma-separated pattern list, dropping blank entries."""
    if not raw:
        return ()
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def parse_env_config(path: str) -> Dict[str, str]:
    """Parse environment variables from XML."""
    env_vars: Dict[str, str] = {}
    if not path:
        return env_vars

    env_path = Path(path)
    if not env_path.exists():
        raise FileNotFoundError(f"Environment file not found: {path}")

    logger.info("Loading environment configuration from %s", env_path)
    try:
        tree = ET.parse(env_path)
    except ET.ParseError as exc:
        raise ValueError(f"Environment file is not valid XML: {path}") from exc

    for var in tree.getroot().findall("variable"):
        name = var.attrib.get("name")
        value = var.text
        if name and value:
            env_vars[name] = value.strip()

    logger.debug("Loaded %d variables from %s", len(env_vars), env_path)
    return env_vars


def load_app_config(environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Build the application configuration from environment variables."""
    env = os.environ if environ is None else environ

    raw_timeout = env.get("FETCH_TIMEOUT")
    timeout = DEFAULT_TIMEOUT
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ValueError(f"FETCH_TIMEOUT must be a number, got {raw_timeout!r}")
        if timeout <= 0:
            raise ValueError("FETCH_TIMEOUT must be positive.")

    config = AppConfig(
        feed_url=env.get("RSS_FEED_URL") or DEFAULT_FEED_URL,
        whitelist=split_patterns(env.get("AUTHOR_WHITELIST")),
        blacklist=split_patterns(env.get("AUTHOR_BLACKLIST")),
        timeout=timeout,
        log_level=env.get("LOG_LEVEL") or DEFAULT_LOG_LEVEL,
    )
    logger.debug(
        "Loaded configuration for %s (%d whitelist, %d blacklist patterns)",
        config.feed_url,
        len(config.whitelist),
        len(config.blacklist),
    )
    return config
