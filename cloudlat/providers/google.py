"""Google Cloud IP ranges provider."""

from __future__ import annotations

from typing import Optional

from cloudlat.models import PrefixRecord
from cloudlat.providers.base import CloudProvider, iter_objects, make_records


class GoogleProvider(CloudProvider):
    """Google Cloud ``cloud.json`` schema.

    Every entry of ``prefixes`` carries a ``scope`` (the region, e.g.
    ``us-central1``) and either an ``ipv4Prefix`` or an ``ipv6Prefix``.
    """

    @property
    def name(self) -> str:
        return "Google Cloud"

    @property
    def slug(self) -> str:
        return "google"

    @property
    def ranges_url(self) -> Optional[str]:
        return "https://www.gstatic.com/ipranges/cloud.json"

    def parse(self, document: dict, include_ipv6: bool = False) -> list[PrefixRecord]:
        records: list[PrefixRecord] = []
        for entry in iter_objects(document.get("prefixes")):
            records.extend(
                make_records(entry.get("scope"), (entry.get("ipv4Prefix"), entry.get("ipv6Prefix")))
            )
        return records
