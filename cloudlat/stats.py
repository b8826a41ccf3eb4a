"""Statistical aggregation for latency measurements."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Optional, Sequence

from cloudlat.models import ProbeResult, RegionStats

# ping reports RTTs with microsecond resolution
_PRECISION = 3
_SCALE = 10 ** _PRECISION


def _round_down(value: float) -> float:
    """Largest 3-decimal value not above *value*."""
    steps = math.floor(value * _SCALE)
    while steps / _SCALE > value:
        steps -= 1
    while (steps + 1) / _SCALE <= value:
        steps += 1
    return steps / _SCALE


def _round_up(value: float) -> float:
    """Smallest 3-decimal value not below *value*."""
    steps = math.ceil(value * _SCALE)
    while steps / _SCALE < value:
        steps += 1
    while (steps - 1) / _SCALE >= value:
        steps -= 1
    return steps / _SCALE


def aggregate_region(
    region: str,
    results: Sequence[ProbeResult],
    total_addresses: int = 0,
    timestamp: Optional[datetime] = None,
) -> RegionStats:
    """Compute min/max/avg over the reachable probes of a region.

    The bounds are rounded outwards and the mean to nearest, so every
    reachable latency stays within min..max.  With no reachable probe all
    three statistics are None (written as NA).
    """
    latencies = [r.latency_ms for r in results if r.latency_ms is not None]
    stamp = timestamp or datetime.now()

    if not latencies:
        return RegionStats(
            region=region,
            timestamp=stamp,
            sampled=len(results),
            reachable=0,
            total_addresses=total_addresses,
        )

    avg = sum(latencies) / len(latencies)

    return RegionStats(
        region=region,
        min=_round_down(min(latencies)),
        max=_round_up(max(latencies)),
        avg=round(avg, _PRECISION),
        timestamp=stamp,
        sampled=len(results),
        reachable=len(latencies),
        total_addresses=total_addresses,
    )
