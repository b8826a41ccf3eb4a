"""Latency probing of a single address.

Primary strategy uses icmplib's async_ping (pure Python, supports
unprivileged ICMP sockets on Linux and macOS).  Falls back to shelling
out to the system ping binary when ICMP sockets cannot be opened.
"""

from __future__ import annotations

import asyncio
import ipaddress
import logging
import os
import re
import shutil
from typing import Awaitable, Callable, Optional

from icmplib import ICMPLibError, ICMPv4Socket, async_ping

from cloudlat.config import PING_COUNT, PING_INTERVAL, PING_TIMEOUT
from cloudlat.models import ProbeResult

logger = logging.getLogger(__name__)

# Type alias for anything that can measure one address.
ProbeFunc = Callable[[str], Awaitable[ProbeResult]]

# Summary line of ping output, Linux and BSD flavours:
#   "rtt min/avg/max/mdev = 10.101/20.202/30.303/1.010 ms"
#   "round-trip min/avg/max/stddev = 10.101/20.202/30.303/1.010 ms"
_RTT_SUMMARY_RE = re.compile(r"=\s*([\d.]+)/([\d.]+)/([\d.]+)")


class ProbeUnavailableError(RuntimeError):
    """Raised when neither ICMP sockets nor a ping binary are usable."""


def _is_root() -> bool:
    return hasattr(os, "geteuid") and os.geteuid() == 0


def _icmp_available(privileged: bool) -> bool:
    try:
        sock = ICMPv4Socket(privileged=privileged)
    except (ICMPLibError, OSError) as exc:
        logger.debug("ICMP socket unavailable (privileged=%s): %s", privileged, exc)
        return False
    sock.close()
    return True


def parse_ping_output(address: str, output: str) -> ProbeResult:
    """Extract the average RTT from ``ping`` output; N/A without a summary line."""
    match = None
    for line in output.splitlines():
        found = _RTT_SUMMARY_RE.search(line)
        if found:
            match = found
    if match is None:
        return ProbeResult(address=address)
    return ProbeResult(address=address, latency_ms=float(match.group(2)))


class LatencyProber:
    """Callable that pings one address and returns its average RTT."""

    def __init__(
        self,
        count: int = PING_COUNT,
        interval: float = PING_INTERVAL,
        timeout: float = PING_TIMEOUT,
        backend: str = "auto",
    ):
        if backend not in ("auto", "icmp", "system"):
            raise ValueError(f"Unknown probe backend: {backend!r}")
        self.count = count
        self.interval = interval
        self.timeout = timeout
        self.requested_backend = backend
        self.backend: Optional[str] = None
        self.privileged = _is_root()
        self.ping_bin: Optional[str] = None

    def resolve_backend(self) -> str:
        """Pick the probe mechanism, raising if the requested one is unusable."""
        if self.backend is not None:
            return self.backend

        if self.requested_backend in ("auto", "icmp"):
            if _icmp_available(self.privileged):
                self.backend = "icmp"
                return self.backend
            if self.requested_backend == "icmp":
                raise ProbeUnavailableError(
                    "Cannot open ICMP sockets; run as root or allow unprivileged ping "
                    "(net.ipv4.ping_group_range)"
                )
            logger.debug("icmplib unavailable, falling back to system ping")

        self.ping_bin = shutil.which("ping")
        if self.ping_bin is None:
            raise ProbeUnavailableError("ping is required but not installed. Please install it.")
        self.backend = "system"
        return self.backend

    async def __call__(self, address: str) -> ProbeResult:
        backend = self.resolve_backend()
        if backend == "icmp":
            return await self._probe_icmplib(address)
        return await self._probe_system(address)

    async def _probe_icmplib(self, address: str) -> ProbeResult:
        try:
            host = await async_ping(
                address,
                count=self.count,
                interval=self.interval,
                timeout=self.timeout,
                privileged=self.privileged,
            )
        except ICMPLibError as exc:
            logger.debug("icmplib ping failed for %s: %s", address, exc)
            return ProbeResult(address=address)

        if not host.is_alive or host.packets_received == 0:
            return ProbeResult(address=address)
        return ProbeResult(address=address, latency_ms=host.avg_rtt)

    async def _probe_system(self, address: str) -> ProbeResult:
        cmd = [self.ping_bin or "ping", "-n", "-c", str(self.count)]
        if ipaddress.ip_address(address).version == 6:
            cmd.insert(1, "-6")
        cmd.append(address)

        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await proc.communicate()

        if proc.returncode != 0:
            err_text = stderr.decode(errors="replace").strip()
            logger.debug("ping exited %d for %s: %s", proc.returncode, address, err_text)

        return parse_ping_output(address, stdout.decode(errors="replace"))
