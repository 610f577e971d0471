"""Expansion of registry records into per-binary, per-platform download manifests."""

import copy
import logging
from collections.abc import Callable
from functools import partial
from typing import Any

from src.config_manager import DEFAULT_BASE_URL, DownloadsConfig
from src.utils import predates_availability

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = DownloadsConfig()

PLATFORMS = tuple(_DEFAULT_CONFIG.platforms)
BINARIES = tuple(binary.name for binary in _DEFAULT_CONFIG.binaries)

UrlBuilder = Callable[..., str]


def make_download_url(
    version: str,
    binary: str = "chrome",
    platform: str | None = None,
    base_url: str = DEFAULT_BASE_URL,
) -> str:
    """Build the download URL of an artifact.

    Args:
        version: Release version
        binary: Binary kind
        platform: Target platform, or None for platform-agnostic archives
        base_url: Base URL artifacts are served from

    Returns:
        Artifact URL
    """
    if platform is None:
        return f"{base_url}/{version}/{binary}.zip"
    return f"{base_url}/{version}/{platform}/{binary}-{platform}.zip"


def _records(container: Any) -> list[dict[str, Any]]:
    if isinstance(container, dict):
        return list(container.values())
    return list(container)


def add_downloads(
    data: dict[str, Any],
    key: str,
    config: DownloadsConfig | None = None,
    url_builder: UrlBuilder | None = None,
) -> dict[str, Any]:
    """Return a copy of a registry document with download URLs added.

    Each record under ``data[key]`` gets a ``downloads`` mapping of binary kind
    to a list of ``{"platform", "url"}`` entries, or a single ``{"url"}`` entry
    for platform-agnostic binaries. Hidden binaries and binaries that were not
    yet shipped for the record's version are left out. ``data`` is not modified.

    Args:
        data: Registry document (as serialized to JSON)
        key: Name of the record collection, e.g. "channels" or "versions"
        config: Download configuration, defaults to the built-in one
        url_builder: Callable taking version, binary and optional platform
            keyword arguments and returning a URL

    Returns:
        Deep copy of ``data`` with downloads added
    """
    config = config or _DEFAULT_CONFIG
    build_url = url_builder or partial(make_download_url, base_url=config.base_url)
    available_since = config.available_since
    result = copy.deepcopy(data)

    for record in _records(result[key]):
        version = record["version"]
        downloads = record["downloads"] = {}
        for binary in config.binaries:
            if binary.hidden:
                continue
            if predates_availability(binary.name, version, available_since):
                continue
            if binary.platform_agnostic:
                downloads[binary.name] = [
                    {"url": build_url(version=version, binary=binary.name)}
                ]
                continue
            downloads[binary.name] = [
                {
                    "platform": platform,
                    "url": build_url(
                        version=version, binary=binary.name, platform=platform
                    ),
                }
                for platform in config.platforms
            ]

    logger.debug(f"Added downloads to {len(_records(result[key]))} records under {key}")
    return result
