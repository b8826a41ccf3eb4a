from __future__ import annotations

import asyncio
import json
from typing import Optional

import pytest

from cloudlat.models import ProbeResult


class FakeProber:
    """Returns canned latencies and records how many probes overlap."""

    def __init__(self, latencies: Optional[dict[str, Optional[float]]] = None, default: Optional[float] = 10.0,
                 delay: float = 0.0, fail: tuple[str, ...] = ()):
        self.latencies = latencies or {}
        self.default = default
        self.delay = delay
        self.fail = set(fail)
        self.calls: list[str] = []
        self.in_flight = 0
        self.peak = 0

    async def __call__(self, address: str) -> ProbeResult:
        self.calls.append(address)
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            if address in self.fail:
                raise OSError(f"network unreachable: {address}")
            return ProbeResult(address=address, latency_ms=self.latencies.get(address, self.default))
        finally:
            self.in_flight -= 1


@pytest.fixture
def google_doc() -> dict:
    return {
        "syncToken": "1700000000000",
        "creationTime": "2026-10-01T00:00:00",
        "prefixes": [
            {"ipv4Prefix": "34.1.208.0/20", "service": "Google Cloud", "scope": "africa-south1"},
            {"ipv6Prefix": "2600:1900:8000::/44", "service": "Google Cloud", "scope": "africa-south1"},
            {"ipv4Prefix": "34.35.0.0/16", "service": "Google Cloud", "scope": "africa-south1"},
            {"ipv4Prefix": "34.80.0.0/15", "service": "Google Cloud", "scope": "asia-east1"},
            {"ipv4Prefix": "35.185.128.0/19", "service": "Google Cloud", "scope": "asia-east1"},
            {"ipv4Prefix": "35.190.0.0/17", "service": "Google Cloud"},
            {"service": "Google Cloud", "scope": "us-west9"},
        ],
    }


@pytest.fixture
def aws_doc() -> dict:
    return {
        "syncToken": "1700000000",
        "createDate": "2026-10-01-00-00-00",
        "prefixes": [
            {"ip_prefix": "10.0.0.0/24", "region": "us-east-1", "service": "AMAZON"},
            {"ip_prefix": "10.0.1.0/24", "region": "us-east-1", "service": "EC2"},
            {"ip_prefix": "10.0.2.0/24", "region": "us-east-1", "service": "EC2"},
            {"ip_prefix": "10.0.3.0/24", "region": "us-east-1", "service": "EC2"},
            {"ip_prefix": "10.0.4.0/24", "region": "us-east-1", "service": "EC2"},
            {"ip_prefix": "52.94.0.0/22", "region": "eu-west-1", "service": "AMAZON"},
            {"ip_prefix": None, "region": "eu-west-1", "service": "AMAZON"},
            {"ip_prefix": "52.95.0.0/22", "region": None, "service": "AMAZON"},
        ],
        "ipv6_prefixes": [
            {"ipv6_prefix": "2600:1f18::/33", "region": "us-east-1", "service": "EC2"},
            {"ipv6_prefix": "2a05:d018::/36", "region": "eu-west-1", "service": "EC2"},
        ],
    }


@pytest.fixture
def azure_doc() -> dict:
    return {
        "changeNumber": 300,
        "cloud": "Public",
        "values": [
            {
                "name": "AzureCloud.westeurope",
                "id": "AzureCloud.westeurope",
                "properties": {
                    "region": "westeurope",
                    "platform": "Azure",
                    "addressPrefixes": ["13.69.0.0/17", "13.73.128.0/18"],
                    "ipv6AddressPrefixes": ["2603:1020:200::/46"],
                },
            },
            {
                "name": "AzureCloud.eastus",
                "id": "AzureCloud.eastus",
                "properties": {
                    "region": "eastus",
                    "addressPrefixes": ["13.68.128.0/17"],
                },
            },
            {
                "name": "ActionGroup",
                "id": "ActionGroup",
                "properties": {"region": "", "addressPrefixes": ["13.66.60.119/32"]},
            },
            {"name": "Broken", "id": "Broken", "properties": None},
        ],
    }


@pytest.fixture
def write_json(tmp_path):
    def _write(document, name: str = "ranges.json") -> str:
        path = tmp_path / name
        path.write_text(json.dumps(document))
        return str(path)

    return _write
