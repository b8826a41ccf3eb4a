"""cloudlat — per-region latency sampling of cloud provider IP ranges."""

__version__ = "0.1.0"
