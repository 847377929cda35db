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
# smart-table-decoder/src/smart_table_decoder/source.py

"""Locate a disk and read its raw SMART tables through CIM.

Every command goes through a ``CommandExecutor``: a callable taking an
argv list and returning stdout. ``local_executor`` runs on this machine,
``ssh_executor_factory`` builds one that runs on a remote Windows host.
"""

import json
import subprocess
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import polars as pl
from loguru import logger

from .catalog import DEFAULT_CATALOG, AttributeCatalog
from .decoder import (
    ATTRIBUTE_WINDOW_START,
    DecodedAttribute,
    attributes_to_dataframe,
    count_records,
    decode,
)
from .errors import (
    AccessDeniedError,
    AmbiguousDiskError,
    DiskNotFoundError,
    SmartError,
    SmartUnsupportedError,
)

CommandExecutor = Callable[[list[str]], str]

POWERSHELL = ["powershell", "-NoProfile", "-NonInteractive", "-Command"]

DISK_QUERY = (
    "Get-CimInstance -ClassName Win32_DiskDrive | "
    "Select-Object Index,SerialNumber,Model,PNPDeviceID | "
    "ConvertTo-Json -Compress"
)
ATTRIBUTE_QUERY = (
    "Get-CimInstance -Namespace root\\wmi "
    "-ClassName MSStorageDriver_FailurePredictData | "
    "Select-Object InstanceName,VendorSpecific | ConvertTo-Json -Compress"
)
THRESHOLD_QUERY = (
    "Get-CimInstance -Namespace root\\wmi "
    "-ClassName MSStorageDriver_FailurePredictThresholds | "
    "Select-Object InstanceName,VendorSpecific | ConvertTo-Json -Compress"
)

ACCESS_DENIED_MARKERS = ("access denied", "access is denied", "0x80041003")


@dataclass(frozen=True)
class DiskHandle:
    """A physical disk as reported by Win32_DiskDrive."""
    index: int
    serial: str
    model: str = ""
    pnp_device_id: str = ""

    def to_dict(self) -> dict:
        return {
            'index': self.index,
            'serial': self.serial,
            'model': self.model,
            'pnp_device_id': self.pnp_device_id,
        }


@dataclass(frozen=True)
class DiskSelector:
    """Select a disk by index or by serial number, never both."""
    index: int | None = None
    serial: str | None = None

    def __post_init__(self):
        if (self.index is None) == (self.serial is None):
            raise ValueError("Select a disk by exactly one of index or serial")

    def matches(self, disk: DiskHandle) -> bool:
        if self.index is not None:
            return disk.index == self.index
        return disk.serial.strip().casefold() == self.serial.strip().casefold()

    def __str__(self) -> str:
        if self.index is not None:
            return f"index {self.index}"
        return f"serial {self.serial!r}"


@dataclass(frozen=True)
class RawTables:
    """The two raw SMART byte tables for one disk."""
    attribute_bytes: bytes
    threshold_bytes: bytes
    instance_name: str = ""


@dataclass(frozen=True)
class DiskReport:
    """Decoded SMART attributes for a single disk."""
    disk: DiskHandle
    attributes: list[DecodedAttribute]
    collected_at: datetime = field(default_factory=datetime.now)

    @property
    def failing_attributes(self) -> list[DecodedAttribute]:
        return [attr for attr in self.attributes if attr.failing]

    @property
    def is_healthy(self) -> bool:
        return not self.failing_attributes

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dictionary."""
        return {
            'disk': self.disk.to_dict(),
            'summary': {
                'attributes': len(self.attributes),
                'failing': len(self.failing_attributes),
                'healthy': self.is_healthy,
            },
            'collected_at': self.collected_at.isoformat(),
            'attributes': [attr.to_dict() for attr in self.attributes],
        }

    def to_dataframe(self) -> pl.DataFrame:
        return attributes_to_dataframe(self.attributes)


def _check_access(stderr: str) -> None:
    lowered = stderr.lower()
    if any(marker in lowered for marker in ACCESS_DENIED_MARKERS):
        raise AccessDeniedError(
            "Access denied querying the management interface; "
            "run from an elevated shell"
        )


def _run(argv: list[str]) -> str:
    logger.debug(f"Running: {argv}")
    result = subprocess.run(
        argv,
        capture_output=True,
        text=True,
        check=False
    )
    if result.returncode != 0:
        _check_access(result.stderr)
        stderr = result.stderr.strip()
        # A failed query is not an empty result
        if not result.stdout.strip():
            raise SmartError(
                f"Command {argv[0]} exited {result.returncode}: {stderr or 'no output'}"
            )
        logger.warning(f"Command exited {result.returncode}: {stderr}")
    return result.stdout


def local_executor(command: list[str]) -> str:
    """Execute command locally."""
    return _run(command)


def ssh_executor_factory(host: str,
                         ssh_options: list[str] | None = None) -> CommandExecutor:
    """Create an SSH command executor for a specific host.

    Args:
        host: SSH hostname
        ssh_options: Additional SSH options (e.g., ["-i", "/path/to/key"])
    """
    ssh_options = ssh_options or []

    def ssh_exec(command: list[str]) -> str:
        # Windows OpenSSH hands the command line to cmd.exe
        return _run(["ssh"] + ssh_options + [host, subprocess.list2cmdline(command)])
    return ssh_exec


def _query_json(executor: CommandExecutor, script: str) -> list[dict]:
    """Run a PowerShell query and normalize its JSON output to a list."""
    output = executor(POWERSHELL + [script]).strip()
    if not output:
        return []

    try:
        data = json.loads(output)
    except json.JSONDecodeError as e:
        raise SmartError(f"Unreadable PowerShell output: {e}") from e

    # ConvertTo-Json unwraps single-element arrays
    if isinstance(data, dict):
        return [data]
    return [item for item in data if isinstance(item, dict)]


def list_disks(executor: CommandExecutor = local_executor) -> list[DiskHandle]:
    """List physical disks ordered by index."""
    disks = []
    for item in _query_json(executor, DISK_QUERY):
        index = item.get("Index")
        if index is None:
            continue
        disks.append(DiskHandle(
            index=int(index),
            serial=(item.get("SerialNumber") or "").strip(),
            model=(item.get("Model") or "").strip(),
            pnp_device_id=item.get("PNPDeviceID") or "",
        ))

    logger.info(f"Found {len(disks)} disks")
    return sorted(disks, key=lambda d: d.index)


def resolve_disk(selector: DiskSelector,
                 executor: CommandExecutor = local_executor) -> DiskHandle:
    """Find the single disk matching the selector.

    Raises:
        DiskNotFoundError: no disk matches
        AmbiguousDiskError: more than one disk matches
    """
    matches = [disk for disk in list_disks(executor) if selector.matches(disk)]

    if not matches:
        raise DiskNotFoundError(f"No disk found with {selector}")
    if len(matches) > 1:
        indexes = ", ".join(str(d.index) for d in matches)
        raise AmbiguousDiskError(
            f"{len(matches)} disks match {selector} (indexes {indexes})"
        )

    disk = matches[0]
    logger.info(f"Resolved {selector} -> disk {disk.index} ({disk.model})")
    return disk


def _find_instance(instances: list[dict], disk: DiskHandle) -> dict | None:
    """Match a SMART instance to the disk by its PNP device ID prefix."""
    if not disk.pnp_device_id:
        return None
    prefix = disk.pnp_device_id.casefold()
    for instance in instances:
        name = (instance.get("InstanceName") or "").casefold()
        if name.startswith(prefix):
            return instance
    return None


def fetch_raw_tables(disk: DiskHandle,
                     executor: CommandExecutor = local_executor) -> RawTables:
    """Read the raw attribute and threshold tables for a disk.

    Raises:
        SmartUnsupportedError: the disk reports no SMART attribute records
        AccessDeniedError: the query needs an elevated shell
    """
    attribute_instance = _find_instance(
        _query_json(executor, ATTRIBUTE_QUERY), disk
    )
    if attribute_instance is None:
        raise SmartUnsupportedError(
            f"No SMART data for disk {disk.index}; SMART may be disabled "
            f"or unsupported"
        )

    attribute_bytes = bytes(attribute_instance.get("VendorSpecific") or [])
    if count_records(len(attribute_bytes), ATTRIBUTE_WINDOW_START) == 0:
        raise SmartUnsupportedError(
            f"Disk {disk.index} reports an empty SMART attribute table"
        )

    threshold_instance = _find_instance(
        _query_json(executor, THRESHOLD_QUERY), disk
    )
    if threshold_instance is None:
        logger.warning(f"No threshold table for disk {disk.index}, using 0")
        threshold_bytes = b""
    else:
        threshold_bytes = bytes(threshold_instance.get("VendorSpecific") or [])

    logger.debug(
        f"Disk {disk.index}: {len(attribute_bytes)} attribute bytes, "
        f"{len(threshold_bytes)} threshold bytes"
    )
    return RawTables(
        attribute_bytes=attribute_bytes,
        threshold_bytes=threshold_bytes,
        instance_name=attribute_instance.get("InstanceName") or "",
    )


def collect_report(selector: DiskSelector,
                   executor: CommandExecutor = local_executor,
                   catalog: AttributeCatalog = DEFAULT_CATALOG) -> DiskReport:
    """Resolve a disk, read its SMART tables and decode them.

    A disk whose table decodes to zero attributes is reported as
    unsupported rather than healthy.
    """
    disk = resolve_disk(selector, executor)
    tables = fetch_raw_tables(disk, executor)
    attributes = decode(
        tables.attribute_bytes,
        tables.threshold_bytes,
        catalog,
        disk_index=disk.index,
        serial=disk.serial,
    )
    if not attributes:
        raise SmartUnsupportedError(
            f"Disk {disk.index} has no populated SMART attributes"
        )

    logger.info(f"Disk {disk.index}: decoded {len(attributes)} attributes")
    return DiskReport(disk=disk, attributes=attributes)


def _as_table_bytes(values, source: str) -> bytes:
    try:
        return bytes(values)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{source} is not a list of byte values 0-255: {e}") from e


def _parse_json_table(text: str, source: str) -> bytes:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"{source} is not valid JSON: {e}") from e

    # A saved Get-CimInstance object carries the table in VendorSpecific
    if isinstance(data, dict):
        if "VendorSpecific" not in data:
            raise ValueError(f"{source} has no VendorSpecific table")
        data = data["VendorSpecific"] or []
    if not isinstance(data, list):
        raise ValueError(f"{source} does not hold a byte array")
    return _as_table_bytes(data, source)


def parse_table_text(text: str, hex_dump: bool | None = None,
                     source: str = "table") -> bytes:
    """Parse a dumped table into bytes.

    Accepts a JSON array, a JSON object with a ``VendorSpecific`` array
    (as saved from ``Get-CimInstance | ConvertTo-Json``), or whitespace/comma
    separated byte values. With ``hex_dump`` left as None the values are hex
    when any has a ``0x`` prefix or a hex letter, decimal otherwise, as
    PowerShell prints byte arrays.

    Raises:
        ValueError: the text is not a readable table
    """
    text = text.strip()
    if not text:
        return b""
    if text[0] in "[{":
        return _parse_json_table(text, source)

    tokens = text.replace(",", " ").split()
    if hex_dump is None:
        hex_dump = any(
            t.lower().startswith("0x") or any(c in "abcdef" for c in t.lower())
            for t in tokens
        )

    base = 16 if hex_dump else 10
    try:
        values = [int(t, base) for t in tokens]
    except ValueError as e:
        raise ValueError(f"{source} has a token that is not a byte value: {e}") from e
    return _as_table_bytes(values, source)


def load_table_file(path: str | Path, hex_dump: bool | None = None) -> bytes:
    """Load a raw SMART table saved as binary or as a text dump.

    Files holding NUL bytes or non-ASCII bytes are raw binary tables;
    anything else must parse as a text dump.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Table file not found: {path}")

    data = path.read_bytes()
    if b"\x00" in data:
        return data

    try:
        text = data.decode("ascii")
    except UnicodeDecodeError:
        logger.debug(f"{path} is not ASCII, reading as binary")
        return data

    return parse_table_text(text, hex_dump=hex_dump, source=str(path))
