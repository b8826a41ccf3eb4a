"""Abstract base class for cloud IP range providers."""

from __future__ import annotations

import abc
from typing import Any, Iterable, Iterator, Optional

from cloudlat.models import PrefixRecord


class CloudProvider(abc.ABC):
    """Base class that each cloud provider schema must implement."""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Human-readable provider name (e.g. 'Google Cloud')."""

    @property
    @abc.abstractmethod
    def slug(self) -> str:
        """Short identifier (e.g. 'google')."""

    @property
    def ranges_url(self) -> Optional[str]:
        """URL of the published IP ranges document, if there is a stable one."""
        return None

    @abc.abstractmethod
    def parse(self, document: dict, include_ipv6: bool = False) -> list[PrefixRecord]:
        """Extract prefix records from a parsed ranges document.

        Implementations must drop entries with a missing region or prefix
        instead of raising, and keep the document order of what remains.
        """


def iter_objects(value: Any) -> Iterator[dict]:
    """Yield the JSON objects of a list, skipping anything else."""
    if not isinstance(value, list):
        return
    for item in value:
        if isinstance(item, dict):
            yield item


def make_records(region: Any, prefixes: Iterable[Any]) -> list[PrefixRecord]:
    """Build records for *region*, dropping null/empty regions and prefixes."""
    if not isinstance(region, str) or not region.strip():
        return []
    records = []
    for cidr in prefixes:
        if not isinstance(cidr, str) or not cidr.strip():
            continue
        cidr = cidr.strip()
        records.append(PrefixRecord(region=region.strip(), cidr=cidr, is_ipv6=":" in cidr))
    return records
