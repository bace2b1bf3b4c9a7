"""
Command-line interface for gnss-sitemeta.

Provides a CLI using Click to decode site logs and SINEX files and to
print the station information intervals derived from them.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from gnss_sitemeta import __version__
from gnss_sitemeta.core.config import Settings, load_settings
from gnss_sitemeta.core.exceptions import ConfigurationError, SiteMetaError
from gnss_sitemeta.stations.history import HistoryCleaner
from gnss_sitemeta.stations.models import Site
from gnss_sitemeta.stations.site_log_parser import SiteLogParser
from gnss_sitemeta.stations.station_info import IntervalReconciler, StationInterval
from gnss_sitemeta.utils.dates import format_sitelog_date, format_sitelog_datetime
from gnss_sitemeta.utils.logging import get_logger, log_warnings, setup_logging

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="gnss-sitemeta")
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable debug logging",
)
@click.option(
    "--json-logs",
    is_flag=True,
    help="Log in JSON format",
)
@click.pass_context
def cli(ctx: click.Context, config: Path | None, verbose: bool, json_logs: bool) -> None:
    """gnss-sitemeta: GNSS station metadata tools

    Decode IGS site logs and SINEX files, clean the equipment history and
    derive station information intervals.
    """
    try:
        settings = load_settings(config)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    log_cfg = settings.logging
    setup_logging(
        level="DEBUG" if verbose else log_cfg.level,
        log_dir=log_cfg.log_dir,
        log_to_file=log_cfg.log_to_file,
        log_to_console=log_cfg.log_to_console,
        json_format=json_logs or log_cfg.json_format,
    )

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    ctx.obj["verbose"] = verbose


def _format_interval(interval: StationInterval) -> str:
    recv = interval.receiver
    ant = interval.antenna
    end = format_sitelog_datetime(interval.end) if interval.end is not None else ""
    return (
        f"{interval.name:<9}  {format_sitelog_datetime(interval.start):<17}  {end:<17}  "
        f"{recv.receiver_type:<20}  {recv.serial_number:<20}  "
        f"{ant.antenna_type:<20}  {ant.serial_number:<20}"
    )


def _print_station_info(site: Site, cleaner: HistoryCleaner, reconciler: IntervalReconciler,
                        force: bool, source: str) -> None:
    cleaner.clean(site, force)
    log_warnings(logger, site, source)

    intervals = reconciler.station_intervals(site)
    for interval in intervals:
        click.echo(_format_interval(interval))


@cli.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.option(
    "--force",
    is_flag=True,
    help="Correct overlapping equipment dates instead of failing",
)
@click.option(
    "--ignore-firmware",
    is_flag=True,
    help="Do not start a new interval on receiver firmware changes",
)
@click.pass_context
def sitelog(ctx: click.Context, files: tuple[Path, ...], force: bool, ignore_firmware: bool) -> None:
    """Print station information intervals of IGS site logs.

    Examples:

        gnss-sitemeta sitelog brux00bel_20200225.log

        gnss-sitemeta sitelog --force ~/sitelogs/*.log
    """
    settings: Settings = ctx.obj["settings"]
    parser = SiteLogParser(settings.sitelog)
    cleaner = HistoryCleaner(settings.cleaner)
    reconcile_cfg = settings.reconcile
    if ignore_firmware:
        reconcile_cfg = reconcile_cfg.model_copy(update={"ignore_receiver_firmware": True})
    reconciler = IntervalReconciler(reconcile_cfg)

    failed = 0
    for path in files:
        try:
            site = parser.parse_file(path)
            click.echo(
                f"# {site.station_id} {site.domes_number} "
                f"prepared {format_sitelog_date(site.form.date_prepared)}"
            )
            _print_station_info(site, cleaner, reconciler, force or settings.cleaner.force, str(path))
        except SiteMetaError as e:
            logger.error("sitelog_failed", file=str(path), error=str(e))
            failed += 1

    if failed:
        sys.exit(1)


@cli.command()
@click.argument("file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--block", "-b",
    type=str,
    help="Print the records of this block, e.g. SITE/RECEIVER",
)
@click.option(
    "--lenient",
    is_flag=True,
    help="Accept files without FILE/REFERENCE block",
)
@click.option(
    "--intervals",
    is_flag=True,
    help="Print station information intervals from the SITE blocks",
)
@click.pass_context
def sinex(ctx: click.Context, file: Path, block: str | None, lenient: bool, intervals: bool) -> None:
    """Summarize a SINEX file.

    Without options, prints the header and the block names.

    Examples:

        gnss-sitemeta sinex IGS0OPSSNX.SNX

        gnss-sitemeta sinex IGS0OPSSNX.SNX --block SOLUTION/ESTIMATE

        gnss-sitemeta sinex --lenient soln.snx --block SOLUTION/DISCONTINUITY
    """
    from gnss_sitemeta.sinex import RECORD_TYPES, open_sinex, read_site_equipment

    settings: Settings = ctx.obj["settings"]

    try:
        with open_sinex(file, require_file_reference=not lenient) as dec:
            hdr = dec.header
            if intervals:
                cleaner = HistoryCleaner(settings.cleaner)
                reconciler = IntervalReconciler(settings.reconcile)
                for code, site in read_site_equipment(dec).items():
                    try:
                        _print_station_info(
                            site, cleaner, reconciler, settings.cleaner.force, str(file)
                        )
                    except SiteMetaError as e:
                        logger.error("site_failed", site=code, error=str(e))
                return

            if block:
                record_cls = RECORD_TYPES.get(block)
                if not dec.go_to_block(block):
                    raise click.ClickException(f"block {block} not found in {file}")
                if record_cls is None:
                    for line in dec.block_lines():
                        click.echo(line)
                else:
                    for record in dec.records(record_cls):
                        click.echo(record)
                return

            click.echo(f"SINEX {hdr.version} by {hdr.agency}, data from {hdr.data_provider}")
            click.echo(f"  Span: {hdr.start_time} to {hdr.end_time}")
            click.echo(f"  Technique: {hdr.technique.name}, estimates: {hdr.num_estimates}")
            if dec.file_reference is not None:
                click.echo(f"  Description: {dec.file_reference.description}")
            for name in dec.blocks():
                click.echo(f"+{name}")
    except SiteMetaError as e:
        logger.error("sinex_failed", file=str(file), error=str(e))
        sys.exit(1)


def main() -> None:
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
