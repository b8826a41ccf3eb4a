"""Data models for cloudlat."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from cloudlat.config import (
    DEFAULT_CONCURRENCY,
    DEFAULT_FORMAT,
    DEFAULT_OUTPUT_DIR,
    PING_COUNT,
    PING_INTERVAL,
    PING_TIMEOUT,
    PROBE_NA,
)


@dataclass(frozen=True)
class PrefixRecord:
    """One announced network block of a provider region."""

    region: str
    cidr: str  # e.g. "35.190.0.0/17"
    is_ipv6: bool = False


@dataclass(frozen=True)
class ProbeResult:
    """Latency measured to a single address. ``latency_ms`` is None if unreachable."""

    address: str
    latency_ms: Optional[float] = None

    @property
    def is_reachable(self) -> bool:
        return self.latency_ms is not None

    def to_line(self) -> str:
        """Render as ``"<address> <latency>"`` or ``"<address> N/A"``."""
        if self.latency_ms is None:
            return f"{self.address} {PROBE_NA}"
        return f"{self.address} {self.latency_ms}"


@dataclass(frozen=True)
class RegionStats:
    """Aggregated latency for one region. ``None`` statistics are written as NA."""

    region: str
    min: Optional[float] = None
    max: Optional[float] = None
    avg: Optional[float] = None
    timestamp: datetime = field(default_factory=datetime.now)
    sampled: int = 0
    reachable: int = 0
    total_addresses: int = 0

    @property
    def has_data(self) -> bool:
        return self.avg is not None


@dataclass
class MeasurementConfig:
    """Configuration for a measurement run."""

    provider: str = ""
    source: Optional[str] = None  # None = fetch the published document
    include_ipv6: bool = False
    output_dir: str = DEFAULT_OUTPUT_DIR
    output_format: str = DEFAULT_FORMAT
    concurrency: int = DEFAULT_CONCURRENCY
    ping_count: int = PING_COUNT
    ping_interval: float = PING_INTERVAL
    ping_timeout: float = PING_TIMEOUT
    backend: str = "auto"
    seed: Optional[int] = None
    verbose: bool = False
    quiet: bool = False

    @property
    def output_path(self) -> str:
        return os.path.join(
            self.output_dir,
            f"{self.provider}_latency_results.{self.output_format}",
        )
