"""Per-region address extraction and random sampling."""

from __future__ import annotations

import ipaddress
import logging
import math
import random
from typing import Optional, Sequence

from cloudlat.config import MIN_SAMPLE_SIZE, SAMPLE_FRACTION
from cloudlat.models import PrefixRecord

logger = logging.getLogger(__name__)


def extract_addresses(records: Sequence[PrefixRecord], include_ipv6: bool = False) -> list[str]:
    """Return the distinct base addresses of *records*.

    The prefix length is stripped from every cidr.  IPv6 blocks are skipped
    unless *include_ipv6* is set, and entries that do not parse as an IP
    address are dropped.
    """
    addresses: dict[str, None] = {}
    for record in records:
        if record.is_ipv6 and not include_ipv6:
            continue
        base = record.cidr.split("/", 1)[0].strip()
        if not base:
            continue
        try:
            ipaddress.ip_address(base)
        except ValueError:
            logger.debug("Dropping unparseable prefix %r in %s", record.cidr, record.region)
            continue
        addresses[base] = None
    return list(addresses)


def sample_size(total: int) -> int:
    """Number of addresses to probe out of *total*: 20%, at least 3, at most all."""
    if total <= 0:
        return 0
    return min(total, max(MIN_SAMPLE_SIZE, math.floor(SAMPLE_FRACTION * total)))


def sample_addresses(addresses: Sequence[str], rng: Optional[random.Random] = None) -> list[str]:
    """Draw ``sample_size(len(addresses))`` addresses without replacement."""
    rng = rng or random
    return rng.sample(list(addresses), sample_size(len(addresses)))
