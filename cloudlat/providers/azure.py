"""Microsoft Azure service tags provider."""

from __future__ import annotations

from cloudlat.models import PrefixRecord
from cloudlat.providers.base import CloudProvider, iter_objects, make_records


class AzureProvider(CloudProvider):
    """Azure ``ServiceTags_Public`` schema.

    Each entry of ``values`` has a ``properties`` object with the
    ``region`` and its ``addressPrefixes``.  Global tags have an empty
    region and are dropped.  Azure only publishes the document behind a
    weekly rotating download link, so there is no ``ranges_url``.
    """

    @property
    def name(self) -> str:
        return "Azure"

    @property
    def slug(self) -> str:
        return "azure"

    def parse(self, document: dict, include_ipv6: bool = False) -> list[PrefixRecord]:
        records: list[PrefixRecord] = []
        for entry in iter_objects(document.get("values")):
            props = entry.get("properties")
            if not isinstance(props, dict):
                continue
            prefixes = _as_list(props.get("addressPrefixes"))
            if include_ipv6:
                prefixes.extend(_as_list(props.get("ipv6AddressPrefixes")))
            records.extend(make_records(props.get("region"), prefixes))
        return records


def _as_list(value: object) -> list:
    return list(value) if isinstance(value, list) else []
