"""Amazon Web Services IP ranges provider."""

from __future__ import annotations

from typing import Optional

from cloudlat.models import PrefixRecord
from cloudlat.providers.base import CloudProvider, iter_objects, make_records


class AWSProvider(CloudProvider):
    """AWS ``ip-ranges.json`` schema.

    IPv4 blocks live in ``prefixes[].ip_prefix`` and IPv6 blocks in a
    separate ``ipv6_prefixes[].ipv6_prefix`` list; both are keyed by
    ``region`` and end up in the same region bucket.
    """

    @property
    def name(self) -> str:
        return "AWS"

    @property
    def slug(self) -> str:
        return "aws"

    @property
    def ranges_url(self) -> Optional[str]:
        return "https://ip-ranges.amazonaws.com/ip-ranges.json"

    def parse(self, document: dict, include_ipv6: bool = False) -> list[PrefixRecord]:
        records: list[PrefixRecord] = []
        for entry in iter_objects(document.get("prefixes")):
            records.extend(make_records(entry.get("region"), [entry.get("ip_prefix")]))
        for entry in iter_objects(document.get("ipv6_prefixes")):
            records.extend(make_records(entry.get("region"), [entry.get("ipv6_prefix")]))
        return records
