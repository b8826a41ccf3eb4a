"""Rich terminal output for cloudlat."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.live import Live
from rich.table import Table
from rich.text import Text

from cloudlat.config import FAST_THRESHOLD_MS, MEDIUM_THRESHOLD_MS, NA
from cloudlat.export import format_value
from cloudlat.models import ProbeResult, RegionStats

console = Console()


def _color_for_ms(value: float) -> str:
    """Return a Rich color name based on latency thresholds."""
    if value <= FAST_THRESHOLD_MS:
        return "green"
    elif value <= MEDIUM_THRESHOLD_MS:
        return "yellow"
    return "red"


def _fmt_ms(value: Optional[float], colorize: bool = True) -> Text:
    """Format a millisecond value with optional color."""
    if value is None:
        return Text(NA, style="dim")
    text = f"{value:.1f}ms"
    if colorize:
        return Text(text, style=_color_for_ms(value))
    return Text(text)


# ── Progress tracking ─────────────────────────────────────────────────


class ProgressTracker:
    """Live progress bar over the regions of a run."""

    def __init__(self, total_regions: int, bar_width: int = 40):
        self.total = total_regions
        self.bar_width = bar_width
        self.completed = 0
        self.current: Optional[str] = None
        self.live: Optional[Live] = None

    def _build_bar(self) -> Text:
        percent = (self.completed * 100 // self.total) if self.total > 0 else 100
        filled = (self.completed * self.bar_width // self.total) if self.total > 0 else self.bar_width
        bar = Text("[")
        bar.append("#" * filled, style="green")
        bar.append(" " * (self.bar_width - filled))
        bar.append(f"] {percent}% ({self.completed} of {self.total} regions)")
        if self.current:
            bar.append(f"  {self.current}", style="dim")
        return bar

    def start(self) -> None:
        self.live = Live(self._build_bar(), console=console, refresh_per_second=4)
        self.live.start()

    def update(self, completed: int, region: Optional[str] = None) -> None:
        self.completed = completed
        self.current = region
        if self.live:
            self.live.update(self._build_bar())

    def finish(self) -> None:
        if self.live:
            self.live.stop()


# ── Region rendering ──────────────────────────────────────────────────


def render_region(stats: RegionStats) -> None:
    """Print the one-line result for a region."""
    line = Text(f"{stats.region:<28}", style="bold")
    line.append("min ")
    line.append_text(_fmt_ms(stats.min))
    line.append("  max ")
    line.append_text(_fmt_ms(stats.max))
    line.append("  avg ")
    line.append_text(_fmt_ms(stats.avg))
    line.append(
        f"  ({stats.reachable}/{stats.sampled} reachable of {stats.total_addresses})",
        style="dim",
    )
    console.print(line)


def render_probe_details(region: str, sampled: list[str], results: list[ProbeResult]) -> None:
    """Verbose output: the sampled addresses and each probe's latency."""
    console.print(f"\n[bold]Testing region: {region}[/bold] ({len(sampled)} sampled)")
    console.print(f"[dim]Sampled IPs: {' '.join(sampled)}[/dim]")
    for r in results:
        console.print(f"  {r.to_line()}", style=None if r.is_reachable else "dim", markup=False)


def render_summary(results: list[RegionStats]) -> None:
    """Table of all regions sorted by average latency (unreachable last)."""
    if not results:
        console.print("[dim]No regions produced results.[/dim]")
        return

    def sort_key(s: RegionStats) -> float:
        return s.avg if s.avg is not None else float("inf")

    ranked = sorted(results, key=sort_key)

    table = Table(title="Latency by region", show_header=True, border_style="dim")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Region", style="bold")
    table.add_column("Min", justify="right")
    table.add_column("Avg", justify="right")
    table.add_column("Max", justify="right")
    table.add_column("Reachable", justify="right")

    for i, s in enumerate(ranked, start=1):
        table.add_row(
            str(i),
            s.region,
            _fmt_ms(s.min),
            _fmt_ms(s.avg),
            _fmt_ms(s.max),
            f"{s.reachable}/{s.sampled}",
        )

    console.print()
    console.print(table)

    best = ranked[0]
    if best.avg is not None:
        console.print(f"[bold]Fastest region:[/bold] {best.region} ({format_value(best.avg)} ms avg)")


def render_error(message: str) -> None:
    """Display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def render_warning(message: str) -> None:
    """Display a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")
