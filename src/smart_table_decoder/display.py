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
# smart-table-decoder/src/smart_table_decoder/display.py

"""Rich tabular display for decoded SMART attributes."""

from collections.abc import Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .catalog import UNKNOWN_ATTRIBUTE_NAME
from .decoder import NO_REAL_VALUE, DecodedAttribute
from .source import DiskHandle, DiskReport


def get_status_style(attr: DecodedAttribute) -> tuple[str, str]:
    """Get status emoji and color for an attribute."""
    if attr.failing:
        return "🔴", "red"
    # Close to threshold: within 10 points
    elif attr.threshold and attr.current - attr.threshold <= 10:
        return "🟡", "yellow"
    else:
        return "🟢", "green"


def format_status(attr: DecodedAttribute) -> Text:
    emoji, color = get_status_style(attr)
    return Text(f"{emoji} {attr.status}", style=color)


def format_name(attr: DecodedAttribute) -> Text:
    if attr.name == UNKNOWN_ATTRIBUTE_NAME:
        return Text(attr.name, style="dim")
    return Text(attr.name)


def format_real_value(attr: DecodedAttribute) -> Text:
    if attr.real_value == NO_REAL_VALUE:
        return Text("-", style="dim")
    return Text(attr.real_value)


def create_disk_summary_table(report: DiskReport) -> Table:
    """Create disk summary table."""
    table = Table(title="Disk Summary", show_header=False)

    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Index", str(report.disk.index))
    table.add_row("Serial", report.disk.serial or "-")
    table.add_row("Model", report.disk.model or "-")
    table.add_section()

    failing = len(report.failing_attributes)
    table.add_row("Attributes", str(len(report.attributes)))
    if failing:
        table.add_row("Failing", Text(f"{failing} 🔴", style="red bold"))
    else:
        table.add_row("Failing", Text("0 🟢", style="green"))

    return table


def create_attributes_table(attributes: Sequence[DecodedAttribute]) -> Table:
    """Create detailed attributes table."""
    table = Table(title="SMART Attributes", show_edge=True)

    table.add_column("ID", justify="right")
    table.add_column("Hex", style="dim")
    table.add_column("Attribute", style="cyan")
    table.add_column("Real Value", justify="right")
    table.add_column("Current", justify="right")
    table.add_column("Worst", justify="right")
    table.add_column("Threshold", justify="right")
    table.add_column("Status", justify="center")
    table.add_column("Raw", style="dim")

    for attr in attributes:
        row_style = "bold" if attr.failing else None
        table.add_row(
            str(attr.id),
            attr.id_hex,
            format_name(attr),
            format_real_value(attr),
            str(attr.current),
            str(attr.worst),
            str(attr.threshold),
            format_status(attr),
            attr.raw,
            style=row_style
        )

    return table


def create_disks_table(disks: Sequence[DiskHandle]) -> Table:
    """Create a table listing available disks."""
    table = Table(title="Disks")

    table.add_column("Index", justify="right")
    table.add_column("Serial", style="cyan")
    table.add_column("Model")
    table.add_column("PNP Device ID", style="dim")

    for disk in disks:
        table.add_row(str(disk.index), disk.serial or "-", disk.model or "-",
                      disk.pnp_device_id or "-")

    return table


def display_report(report: DiskReport, console: Console | None = None,
                   failing_only: bool = False):
    """Display a disk report using rich tables."""
    if console is None:
        console = Console()

    console.print(create_disk_summary_table(report))
    console.print()

    attributes = report.failing_attributes if failing_only else report.attributes
    console.print(create_attributes_table(attributes))

    # Legend
    console.print("\n[dim]Legend:[/dim]")
    console.print("[dim]  OK/FAIL: current >= threshold is OK (numeric approximation)[/dim]")
    console.print("[dim]  Raw: 6-byte counter, most significant byte first[/dim]")
    console.print("[dim]  Status: 🟢 OK, 🟡 Near threshold, 🔴 Failing[/dim]")
