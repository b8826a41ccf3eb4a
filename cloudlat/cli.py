"""CLI entry point and orchestration for cloudlat."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Optional

import click

from cloudlat import __version__
from cloudlat.config import (
    DEFAULT_CONCURRENCY,
    DEFAULT_FORMAT,
    DEFAULT_OUTPUT_DIR,
    OUTPUT_FORMATS,
    PING_COUNT,
    PING_TIMEOUT,
    PROBE_BACKENDS,
)
from cloudlat.export import ResultWriter, UnsupportedFormatError
from cloudlat.models import MeasurementConfig, PrefixRecord, RegionStats
from cloudlat.probe import LatencyProber, ProbeFunc


@click.command()
@click.argument("json_file", required=False, type=click.Path(exists=True, dir_okay=False))
@click.option("-g", "--google", "provider", flag_value="google", help="Google Cloud format (cloud.json)")
@click.option("-aw", "--aws", "provider", flag_value="aws", help="AWS format (ip-ranges.json)")
@click.option("-az", "--azure", "provider", flag_value="azure", help="Azure format (ServiceTags_Public.json)")
@click.option("--ipv6", is_flag=True, help="Include IPv6 addresses in the latency test")
@click.option("--output-dir", default=DEFAULT_OUTPUT_DIR, help="Directory for output files", show_default=True)
@click.option(
    "--format", "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default=DEFAULT_FORMAT,
    help="Output format",
    show_default=True,
)
@click.option(
    "-j", "--jobs",
    type=click.IntRange(min=1),
    default=DEFAULT_CONCURRENCY,
    help="Concurrent probes per region",
    show_default=True,
)
@click.option(
    "-c", "--count",
    type=click.IntRange(min=1),
    default=PING_COUNT,
    help="Echo requests per address",
    show_default=True,
)
@click.option(
    "-t", "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=PING_TIMEOUT,
    help="Seconds to wait for each echo reply",
    show_default=True,
)
@click.option(
    "--backend",
    type=click.Choice(PROBE_BACKENDS),
    default="auto",
    help="Probe mechanism: icmplib sockets or the system ping binary",
    show_default=True,
)
@click.option("--seed", type=int, default=None, help="Random seed for reproducible sampling")
@click.option("-q", "--quiet", is_flag=True, help="Suppress progress, show only errors")
@click.option("-v", "--verbose", is_flag=True, help="Show sampled addresses and per-probe latency")
@click.version_option(version=__version__)
def main(
    json_file: Optional[str],
    provider: Optional[str],
    ipv6: bool,
    output_dir: str,
    output_format: str,
    jobs: int,
    count: int,
    timeout: float,
    backend: str,
    seed: Optional[int],
    quiet: bool,
    verbose: bool,
) -> None:
    """cloudlat — Cloud Region Latency Sampler.

    Samples the IP ranges a cloud provider publishes for each region and
    measures ping latency to a random subset of addresses, reporting
    min/max/avg latency per region.  Without JSON_FILE the provider's
    published ranges document is downloaded.
    """
    from cloudlat.display import render_error

    _setup_logging(verbose=verbose, quiet=quiet)

    if not provider:
        render_error("No provider specified. Use one of -g, -aw or -az.")
        sys.exit(1)

    config = MeasurementConfig(
        provider=provider,
        source=json_file,
        include_ipv6=ipv6,
        output_dir=output_dir,
        output_format=output_format,
        concurrency=jobs,
        ping_count=count,
        ping_timeout=timeout,
        backend=backend,
        seed=seed,
        verbose=verbose,
        quiet=quiet,
    )

    from cloudlat.probe import ProbeUnavailableError
    from cloudlat.providers import UnsupportedProviderError
    from cloudlat.ranges import InvalidDocumentError

    try:
        writer = ResultWriter(config.output_path, config.output_format)
        records = _load_records(config)
        prober = LatencyProber(
            count=config.ping_count,
            interval=config.ping_interval,
            timeout=config.ping_timeout,
            backend=config.backend,
        )
        prober.resolve_backend()
        writer.ensure_directory()
    except (
        UnsupportedProviderError,
        UnsupportedFormatError,
        InvalidDocumentError,
        ProbeUnavailableError,
    ) as exc:
        render_error(str(exc))
        sys.exit(1)

    try:
        results = asyncio.run(_run(config, records, prober, writer))
    except KeyboardInterrupt:
        if not quiet:
            from cloudlat.display import console
            console.print("\n[yellow]Interrupted.[/yellow]")
        sys.exit(130)

    _handle_output(results, config)


def _setup_logging(verbose: bool, quiet: bool) -> None:
    from rich.logging import RichHandler

    from cloudlat.display import console

    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False, show_time=False)],
        force=True,
    )


def _load_records(config: MeasurementConfig) -> list[PrefixRecord]:
    """Read (or fetch) the ranges document and map it to prefix records."""
    from cloudlat.providers import get_provider, parse_prefixes
    from cloudlat.ranges import fetch_document, load_document

    provider = get_provider(config.provider)
    if config.source:
        document = load_document(config.source)
    else:
        document = fetch_document(provider)
    return parse_prefixes(document, config.provider, include_ipv6=config.include_ipv6)


async def _run(
    config: MeasurementConfig,
    records: list[PrefixRecord],
    prober: ProbeFunc,
    writer: ResultWriter,
) -> list[RegionStats]:
    """Main async orchestration."""
    from cloudlat.display import ProgressTracker, console, render_probe_details, render_region, render_warning
    from cloudlat.engine import measure_all
    from cloudlat.providers import distinct_regions

    regions = distinct_regions(records)
    show_progress = not config.quiet

    if not regions:
        if show_progress:
            render_warning("No regions with IP prefixes found in the ranges document")
        return []

    progress = None
    if show_progress:
        console.print(
            f"[bold]Testing {len(regions)} {config.provider} regions, "
            f"up to {config.concurrency} probes at a time...[/bold]\n"
        )
        progress = ProgressTracker(len(regions))
        progress.start()
        progress.update(0, regions[0])

    def on_progress(index: int, total: int, region: str, stats: Optional[RegionStats]) -> None:
        if stats is not None and show_progress:
            render_region(stats)
        if progress:
            next_region = regions[index] if index < total else None
            progress.update(index, next_region)

    detail_callback = render_probe_details if config.verbose and show_progress else None

    try:
        return await measure_all(
            records,
            config,
            prober,
            writer,
            progress_callback=on_progress,
            detail_callback=detail_callback,
        )
    finally:
        if progress:
            progress.finish()


def _handle_output(results: list[RegionStats], config: MeasurementConfig) -> None:
    """Render the final summary."""
    if config.quiet:
        return

    from cloudlat.display import console, render_summary

    render_summary(results)
    console.print(f"\n[dim]Latency tests completed. Results are saved in {config.output_path}.[/dim]")


if __name__ == "__main__":
    main()
