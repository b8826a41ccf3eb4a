"""Loading of provider IP range documents from disk or the provider's site."""

from __future__ import annotations

import json
import logging
from typing import Optional

import httpx

from cloudlat.config import FETCH_TIMEOUT, USER_AGENT
from cloudlat.providers.base import CloudProvider

logger = logging.getLogger(__name__)


class InvalidDocumentError(ValueError):
    """Raised when a ranges document cannot be read or parsed."""


def load_document(path: str) -> dict:
    """Read and parse a ranges document from *path*."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise InvalidDocumentError(f"Cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise InvalidDocumentError(f"The JSON file {path} is malformed or invalid: {exc}") from exc
    return _check_document(data, path)


def fetch_document(
    provider: CloudProvider,
    timeout: float = FETCH_TIMEOUT,
    client: Optional[httpx.Client] = None,
) -> dict:
    """Download the provider's published ranges document."""
    url = provider.ranges_url
    if not url:
        raise InvalidDocumentError(
            f"{provider.name} does not publish its ranges at a stable URL; pass the JSON file explicitly"
        )

    logger.info("Fetching %s ranges from %s", provider.name, url)
    try:
        if client is None:
            with httpx.Client(timeout=timeout, follow_redirects=True) as own_client:
                resp = own_client.get(url, headers={"User-Agent": USER_AGENT})
                resp.raise_for_status()
                data = resp.json()
        else:
            resp = client.get(url, headers={"User-Agent": USER_AGENT})
            resp.raise_for_status()
            data = resp.json()
    except httpx.HTTPError as exc:
        raise InvalidDocumentError(f"Failed to fetch {url}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise InvalidDocumentError(f"{url} did not return valid JSON: {exc}") from exc

    return _check_document(data, url)


def _check_document(data: object, origin: str) -> dict:
    if not isinstance(data, dict):
        raise InvalidDocumentError(f"{origin} does not contain a JSON object")
    return data
