"""Core measurement engine for cloudlat.

Regions are measured one at a time:
  sample -> probe (bounded fan-out) -> aggregate -> append to results file

Probing inside a region is the only concurrent section.  At most
``limit`` probes are in flight, guarded by an ``asyncio.Semaphore``;
regions never overlap, so the results file sees one complete block per
region.

Public API:
    run_probes      -- probe a list of addresses with bounded concurrency
    measure_region  -- sample, probe and aggregate a single region
    measure_all     -- drive every region of a ranges document
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Callable, Optional, Sequence

from cloudlat.config import DEFAULT_CONCURRENCY
from cloudlat.export import ResultWriter
from cloudlat.models import MeasurementConfig, PrefixRecord, ProbeResult, RegionStats
from cloudlat.probe import ProbeFunc
from cloudlat.providers import distinct_regions, group_by_region
from cloudlat.sampler import extract_addresses, sample_addresses
from cloudlat.stats import aggregate_region

logger = logging.getLogger(__name__)

# Type alias for the progress callback.
# Signature: (region_index, total_regions, region, stats_or_none_if_skipped)
ProgressCallback = Callable[[int, int, str, Optional[RegionStats]], None]

# Called with (region, sampled_addresses, probe_results) once a region is probed.
DetailCallback = Callable[[str, list[str], list[ProbeResult]], None]


# ---------------------------------------------------------------------------
# Parallel probe runner
# ---------------------------------------------------------------------------

async def run_probes(
    addresses: Sequence[str],
    prober: ProbeFunc,
    limit: int = DEFAULT_CONCURRENCY,
) -> list[ProbeResult]:
    """Probe every address with at most *limit* probes in flight.

    A probe that raises is recorded as unreachable; the returned list always
    has one result per input address.
    """
    if limit < 1:
        raise ValueError(f"Concurrency limit must be at least 1, got {limit}")

    semaphore = asyncio.Semaphore(limit)

    async def _safe_probe(address: str) -> ProbeResult:
        async with semaphore:
            try:
                return await prober(address)
            except Exception as exc:
                logger.debug("Probe failed for %s: %s", address, exc)
                return ProbeResult(address=address)

    tasks = [_safe_probe(a) for a in addresses]
    results = await asyncio.gather(*tasks)
    return list(results)


# ---------------------------------------------------------------------------
# Single region
# ---------------------------------------------------------------------------

async def measure_region(
    region: str,
    records: Sequence[PrefixRecord],
    prober: ProbeFunc,
    include_ipv6: bool = False,
    limit: int = DEFAULT_CONCURRENCY,
    rng: Optional[random.Random] = None,
    detail_callback: DetailCallback | None = None,
) -> Optional[RegionStats]:
    """Sample, probe and aggregate one region.

    Returns None when the region has no usable address.
    """
    addresses = extract_addresses(
        [r for r in records if r.region == region],
        include_ipv6=include_ipv6,
    )
    if not addresses:
        logger.warning("No IP addresses found for region: %s", region)
        return None

    sampled = sample_addresses(addresses, rng=rng)
    logger.info(
        "Testing region %s with %d of %d addresses", region, len(sampled), len(addresses)
    )

    results = await run_probes(sampled, prober, limit=limit)

    if detail_callback:
        detail_callback(region, sampled, results)

    return aggregate_region(region, results, total_addresses=len(addresses))


# ---------------------------------------------------------------------------
# All regions
# ---------------------------------------------------------------------------

async def measure_all(
    records: Sequence[PrefixRecord],
    config: MeasurementConfig,
    prober: ProbeFunc,
    writer: ResultWriter,
    progress_callback: ProgressCallback | None = None,
    detail_callback: DetailCallback | None = None,
) -> list[RegionStats]:
    """Measure every region in *records*, appending each result to *writer*.

    Regions run sequentially in sorted order.  Regions without addresses
    are skipped and reported to the progress callback with ``None``.

    Returns
    -------
    list[RegionStats]
        One entry per region that produced a result, in processing order.
    """
    rng = random.Random(config.seed) if config.seed is not None else None
    groups = group_by_region(list(records))
    regions = distinct_regions(list(records))
    total = len(regions)

    written: list[RegionStats] = []
    for index, region in enumerate(regions, start=1):
        stats = await measure_region(
            region,
            groups.get(region, []),
            prober,
            include_ipv6=config.include_ipv6,
            limit=config.concurrency,
            rng=rng,
            detail_callback=detail_callback,
        )
        if stats is not None:
            writer.append(stats)
            written.append(stats)

        if progress_callback:
            progress_callback(index, total, region, stats)

    return written
