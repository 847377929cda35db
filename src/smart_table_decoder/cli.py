# Author: PB
# Maintainer: PB
# Original date: 2026.10.19
# Copyright (C) 2026 HRDAG https://hrdag.org
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along
# with this program; if not, see <https://www.gnu.org/licenses/>.
#
# ------
# smart-table-decoder/src/smart_table_decoder/cli.py

"""Command-line interface for decoding SMART attribute tables."""

import json
import sys
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console

from .catalog import DEFAULT_CATALOG, AttributeCatalog, load_name_overrides
from .decoder import decode
from .display import create_disks_table, display_report
from .errors import SmartError
from .source import (
    DiskHandle,
    DiskReport,
    DiskSelector,
    collect_report,
    list_disks,
    load_table_file,
    local_executor,
    ssh_executor_factory,
)

app = typer.Typer()


def _configure_logging(verbose: bool):
    logger.remove()
    if verbose:
        logger.enable("smart_table_decoder")
        logger.add(sys.stderr, level="DEBUG")


def _build_catalog(names: Path | None) -> AttributeCatalog:
    if names is None:
        return DEFAULT_CATALOG
    return DEFAULT_CATALOG.with_names(load_name_overrides(names))


def _emit_report(report: DiskReport, json_output: bool, csv_path: Path | None,
                 failing_only: bool):
    if csv_path:
        report.to_dataframe().write_csv(csv_path)
        logger.info(f"Wrote {len(report.attributes)} attributes to {csv_path}")

    if json_output:
        output = report.to_dict()
        if failing_only:
            output['attributes'] = [
                attr.to_dict() for attr in report.failing_attributes
            ]
        typer.echo(json.dumps(output, indent=2))
    else:
        display_report(report, Console(), failing_only=failing_only)


@app.command()
def show(
    index: int | None = typer.Option(
        None,
        "--index",
        "-i",
        help="Disk index (as reported by Win32_DiskDrive)"
    ),
    serial: str | None = typer.Option(
        None,
        "--serial",
        "-s",
        help="Disk serial number"
    ),
    ssh_host: str | None = typer.Option(
        None,
        "--ssh-host",
        help="Query a remote Windows host over SSH"
    ),
    names: Path | None = typer.Option(
        None,
        "--names",
        help="JSON file of attribute name overrides, {id: name}"
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output results as JSON"
    ),
    csv_path: Path | None = typer.Option(
        None,
        "--csv",
        help="Also write the attributes to a CSV file"
    ),
    failing_only: bool = typer.Option(
        False,
        "--failing-only",
        help="Only show attributes below their threshold"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging output"
    ),
):
    """Decode and show SMART attributes for one disk."""
    _configure_logging(verbose)

    if (index is None) == (serial is None):
        raise typer.BadParameter("Pass exactly one of --index or --serial")

    try:
        executor = ssh_executor_factory(ssh_host) if ssh_host else local_executor
        if ssh_host:
            logger.info(f"Using SSH host {ssh_host}")

        report = collect_report(
            DiskSelector(index=index, serial=serial),
            executor=executor,
            catalog=_build_catalog(names),
        )
        _emit_report(report, json_output, csv_path, failing_only)

    except (SmartError, OSError, ValueError) as e:
        logger.error(f"SMART query failed: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("decode-file")
def decode_file(
    attribute_file: Path = typer.Argument(
        ...,
        help="Attribute table: raw binary, JSON array or byte dump"
    ),
    threshold_file: Path | None = typer.Argument(
        None,
        help="Threshold table in the same formats"
    ),
    index: int = typer.Option(0, "--index", "-i", help="Disk index to report"),
    serial: str = typer.Option("", "--serial", "-s", help="Serial to report"),
    names: Path | None = typer.Option(
        None,
        "--names",
        help="JSON file of attribute name overrides, {id: name}"
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output results as JSON"
    ),
    csv_path: Path | None = typer.Option(
        None,
        "--csv",
        help="Also write the attributes to a CSV file"
    ),
    failing_only: bool = typer.Option(
        False,
        "--failing-only",
        help="Only show attributes below their threshold"
    ),
    hex_dump: bool = typer.Option(
        False,
        "--hex",
        help="Read text dumps as hex even without 0x prefixes or hex letters"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging output"
    ),
):
    """Decode SMART tables saved to files."""
    _configure_logging(verbose)

    try:
        hex_mode = True if hex_dump else None
        attribute_bytes = load_table_file(attribute_file, hex_dump=hex_mode)
        threshold_bytes = (
            load_table_file(threshold_file, hex_dump=hex_mode)
            if threshold_file else b""
        )
        logger.info(
            f"Loaded {len(attribute_bytes)} attribute bytes and "
            f"{len(threshold_bytes)} threshold bytes"
        )

        attributes = decode(
            attribute_bytes,
            threshold_bytes,
            _build_catalog(names),
            disk_index=index,
            serial=serial,
        )
        if not attributes:
            logger.warning("No populated attributes in the table")

        report = DiskReport(
            disk=DiskHandle(index=index, serial=serial),
            attributes=attributes,
        )
        _emit_report(report, json_output, csv_path, failing_only)

    except (OSError, ValueError) as e:
        logger.error(f"Decoding failed: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("list-disks")
def list_disks_command(
    ssh_host: str | None = typer.Option(
        None,
        "--ssh-host",
        help="Query a remote Windows host over SSH"
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output results as JSON"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging output"
    ),
):
    """List disks that can be selected by index or serial."""
    _configure_logging(verbose)

    try:
        executor = ssh_executor_factory(ssh_host) if ssh_host else local_executor
        disks = list_disks(executor)

        if json_output:
            typer.echo(json.dumps([d.to_dict() for d in disks], indent=2))
        else:
            Console().print(create_disks_table(disks))

    except (SmartError, OSError) as e:
        logger.error(f"Listing disks failed: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
