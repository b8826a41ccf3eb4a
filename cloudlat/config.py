"""Constants and configuration for cloudlat."""

# Latency color thresholds (milliseconds)
FAST_THRESHOLD_MS = 50.0     # Green: <= 50ms
MEDIUM_THRESHOLD_MS = 150.0  # Yellow: <= 150ms
# Red: > 150ms

# Output settings
DEFAULT_OUTPUT_DIR = "Results"
DEFAULT_FORMAT = "txt"
OUTPUT_FORMATS = ("txt", "csv")
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Marker written for statistics that could not be computed
NA = "NA"

# Marker used by the probe line format ("<address> N/A")
PROBE_NA = "N/A"

# Sampling
SAMPLE_FRACTION = 0.2
MIN_SAMPLE_SIZE = 3

# Probing
DEFAULT_CONCURRENCY = 16
PING_COUNT = 3
PING_INTERVAL = 0.2
PING_TIMEOUT = 2.0
PROBE_BACKENDS = ("auto", "icmp", "system")

# Published range documents
FETCH_TIMEOUT = 30.0
USER_AGENT = "cloudlat/0.1.0"
