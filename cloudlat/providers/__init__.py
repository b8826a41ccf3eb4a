"""Cloud provider registry and schema adapter entry points."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cloudlat.models import PrefixRecord
    from cloudlat.providers.base import CloudProvider

_PROVIDER_MAP: dict[str, type[CloudProvider]] | None = None


class UnsupportedProviderError(ValueError):
    """Raised when a provider slug matches none of the known schemas."""


def _load_providers() -> dict[str, type[CloudProvider]]:
    from cloudlat.providers.aws import AWSProvider
    from cloudlat.providers.azure import AzureProvider
    from cloudlat.providers.google import GoogleProvider

    return {
        "google": GoogleProvider,
        "aws": AWSProvider,
        "azure": AzureProvider,
    }


def get_provider_map() -> dict[str, type[CloudProvider]]:
    """Return the mapping of slug → provider class, loading lazily."""
    global _PROVIDER_MAP
    if _PROVIDER_MAP is None:
        _PROVIDER_MAP = _load_providers()
    return _PROVIDER_MAP


def get_provider(slug: str) -> CloudProvider:
    """Instantiate a provider by slug."""
    pmap = get_provider_map()
    if slug not in pmap:
        raise UnsupportedProviderError(
            f"Unsupported provider: {slug!r}. Available: {', '.join(list_providers())}"
        )
    return pmap[slug]()


def list_providers() -> list[str]:
    """Return sorted list of available provider slugs."""
    return sorted(get_provider_map())


def parse_prefixes(document: dict, slug: str, include_ipv6: bool = False) -> list[PrefixRecord]:
    """Map a provider's ranges document to an ordered list of prefix records."""
    return get_provider(slug).parse(document, include_ipv6=include_ipv6)


def distinct_regions(records: list[PrefixRecord]) -> list[str]:
    """Return the sorted distinct regions found in *records*."""
    return sorted({r.region for r in records})


def group_by_region(records: list[PrefixRecord]) -> dict[str, list[PrefixRecord]]:
    """Bucket records by region, keeping document order inside each bucket."""
    groups: dict[str, list[PrefixRecord]] = {}
    for record in records:
        groups.setdefault(record.region, []).append(record)
    return groups
