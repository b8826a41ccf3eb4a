"""Append-only txt and CSV export of region results."""

from __future__ import annotations

import csv
import io
import os
from typing import Optional

from cloudlat.config import NA, OUTPUT_FORMATS, TIMESTAMP_FORMAT
from cloudlat.models import RegionStats


class UnsupportedFormatError(ValueError):
    """Raised for an output format other than txt or csv."""


def format_value(value: Optional[float]) -> str:
    """Render a statistic: ``NA`` when absent, no trailing zeros otherwise."""
    if value is None:
        return NA
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return text if text not in ("", "-0") else "0"


def parse_value(text: str) -> Optional[float]:
    text = text.strip()
    if text == NA:
        return None
    return float(text)


def export_txt(stats: RegionStats) -> str:
    """Render a region as a human-readable block."""
    lines = [
        "",
        f"[{stats.timestamp.strftime(TIMESTAMP_FORMAT)}] Results for region: {stats.region}",
        f"Min Latency: {_with_unit(stats.min)}",
        f"Max Latency: {_with_unit(stats.max)}",
        f"Avg Latency: {_with_unit(stats.avg)}",
        "",
    ]
    return "\n".join(lines) + "\n"


def export_csv(stats: RegionStats) -> str:
    """Render a region as a single ``region,min,max,avg`` line."""
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow([
        stats.region,
        format_value(stats.min),
        format_value(stats.max),
        format_value(stats.avg),
    ])
    return output.getvalue()


def parse_csv_line(line: str) -> RegionStats:
    """Read back a line written by :func:`export_csv`."""
    rows = list(csv.reader(io.StringIO(line)))
    if len(rows) != 1 or len(rows[0]) != 4:
        raise ValueError(f"Not a region result line: {line!r}")
    region, min_, max_, avg = rows[0]
    return RegionStats(
        region=region,
        min=parse_value(min_),
        max=parse_value(max_),
        avg=parse_value(avg),
    )


def _with_unit(value: Optional[float]) -> str:
    if value is None:
        return NA
    return f"{format_value(value)} ms"


_RENDERERS = {
    "txt": export_txt,
    "csv": export_csv,
}


class ResultWriter:
    """Appends one complete block per region to a shared results file."""

    def __init__(self, filepath: str, output_format: str):
        if output_format not in OUTPUT_FORMATS:
            raise UnsupportedFormatError(
                f"Unsupported output format: {output_format}. Only 'txt' or 'csv' are allowed."
            )
        self.filepath = filepath
        self.output_format = output_format
        self._render = _RENDERERS[output_format]

    def ensure_directory(self) -> None:
        directory = os.path.dirname(self.filepath)
        if directory:
            os.makedirs(directory, exist_ok=True)

    def append(self, stats: RegionStats) -> None:
        """Write a region's result in a single append."""
        content = self._render(stats)
        with open(self.filepath, "a", encoding="utf-8") as f:
            f.write(content)
