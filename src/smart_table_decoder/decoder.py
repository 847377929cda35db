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
# smart-table-decoder/src/smart_table_decoder/decoder.py

"""Decode the vendor-specific SMART attribute and threshold tables.

Both tables are the raw ``VendorSpecific`` byte blobs reported by the
storage driver: a 2-byte header followed by 12-byte records. An attribute
record is laid out as::

    [0] id  [1..2] flags  [3] current  [4] worst  [5..10] raw  [11] reserved

The attribute table is walked in windows that start one byte before each
record (byte index 1, 13, 25, ...), so inside a window the ID sits at
offset 1, current at 4, worst at 5 and the raw counter at 6..11.
"""

from collections.abc import Iterator, Sequence
from dataclasses import asdict, dataclass
from typing import Final

import polars as pl
from loguru import logger

from .catalog import (
    ATTR_AIRFLOW_TEMPERATURE,
    ATTR_HEAD_FLYING_HOURS,
    ATTR_POWER_ON_HOURS,
    ATTR_SPIN_UP_TIME,
    ATTR_TEMPERATURE_CELSIUS,
    DEFAULT_CATALOG,
    AttributeCatalog,
)

RECORD_SIZE: Final[int] = 12
THRESHOLD_HEADER_SIZE: Final[int] = 2
ATTRIBUTE_WINDOW_START: Final[int] = 1

# Offsets inside an attribute window
OFFSET_ID: Final[int] = 1
OFFSET_CURRENT: Final[int] = 4
OFFSET_WORST: Final[int] = 5
OFFSET_RAW_LOW: Final[int] = 6

# Vendor convention: least significant raw byte comes first in the table,
# the hex rendering prints it last.
RAW_COUNTER_ORDER: Final[tuple[int, ...]] = (11, 10, 9, 8, 7, 6)

# Offsets inside a threshold record
THRESHOLD_OFFSET_ID: Final[int] = 0
THRESHOLD_OFFSET_VALUE: Final[int] = 1

# Hour counters keep the meaningful value in the low 4 raw bytes
HOUR_COUNTER_ATTRIBUTES: Final[frozenset[int]] = frozenset({
    ATTR_POWER_ON_HOURS, ATTR_HEAD_FLYING_HOURS,
})

# (min offset, max offset) inside the window, per temperature attribute
TEMPERATURE_RANGE_OFFSETS: Final[dict[int, tuple[int, int]]] = {
    ATTR_AIRFLOW_TEMPERATURE: (8, 9),
    ATTR_TEMPERATURE_CELSIUS: (7, 8),
}

STATUS_OK: Final[str] = "OK"
STATUS_FAIL: Final[str] = "FAIL"
NO_REAL_VALUE: Final[str] = "0"

ByteTable = bytes | bytearray | memoryview | Sequence[int]


@dataclass(frozen=True)
class DecodedAttribute:
    """One SMART attribute decoded from the vendor table."""
    id: int
    id_hex: str
    name: str
    real_value: str
    current: int
    worst: int
    threshold: int
    status: str  # 'OK' or 'FAIL'
    raw: str  # 12 hex characters, most significant byte first

    # Disk context supplied by the caller
    disk_index: int | None = None
    serial: str = ""

    @property
    def failing(self) -> bool:
        return self.status == STATUS_FAIL

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dictionary."""
        return asdict(self)


def _as_bytes(table: ByteTable | None) -> bytes:
    if table is None:
        return b""
    return bytes(table)


def count_records(length: int, header_size: int) -> int:
    """Number of whole records after the header; partial records drop."""
    return max(0, length - header_size) // RECORD_SIZE


def build_threshold_map(threshold_bytes: ByteTable | None) -> dict[int, int]:
    """Map attribute ID to threshold value from the threshold table.

    Records with ID 0 are skipped. If an ID repeats, the first record wins.
    """
    data = _as_bytes(threshold_bytes)
    thresholds: dict[int, int] = {}

    for i in range(count_records(len(data), THRESHOLD_HEADER_SIZE)):
        start = THRESHOLD_HEADER_SIZE + i * RECORD_SIZE
        attr_id = data[start + THRESHOLD_OFFSET_ID]
        if attr_id == 0:
            continue
        if attr_id in thresholds:
            logger.debug(f"Duplicate threshold for attribute {attr_id}, keeping first")
            continue
        thresholds[attr_id] = data[start + THRESHOLD_OFFSET_VALUE]

    return thresholds


def iter_attribute_windows(attribute_bytes: ByteTable | None) -> Iterator[bytes]:
    """Yield each 12-byte attribute window in table order."""
    data = _as_bytes(attribute_bytes)
    for i in range(count_records(len(data), ATTRIBUTE_WINDOW_START)):
        start = ATTRIBUTE_WINDOW_START + i * RECORD_SIZE
        yield data[start:start + RECORD_SIZE]


def render_raw_hex(window: bytes) -> str:
    """Render the 6-byte raw counter as uppercase hex, high byte first."""
    return "".join(f"{window[offset]:02X}" for offset in RAW_COUNTER_ORDER)


def _format_temperature(attr_id: int, window: bytes) -> str:
    min_offset, max_offset = TEMPERATURE_RANGE_OFFSETS[attr_id]
    text = f"{window[OFFSET_RAW_LOW]}C"
    low, high = window[min_offset], window[max_offset]
    if low > 0 and high > 0:
        text += f" (Min={low},Max={high})"
    return text


def convert_real_value(attr_id: int, window: bytes, raw_hex: str,
                       catalog: AttributeCatalog = DEFAULT_CATALOG) -> str:
    """Render the raw counter in human units, or "0" if there is no rule."""
    if not catalog.has_real_value_conversion(attr_id):
        return NO_REAL_VALUE

    if attr_id in TEMPERATURE_RANGE_OFFSETS:
        return _format_temperature(attr_id, window)

    if attr_id in HOUR_COUNTER_ATTRIBUTES:
        hours = int(raw_hex[4:], 16)
        days, remainder = divmod(hours, 24)
        return f"{days}d {remainder}h"

    value = int(raw_hex, 16)
    if attr_id == ATTR_SPIN_UP_TIME:
        return f"{value} ms"
    return f"{value:,}"


def decode(attribute_bytes: ByteTable | None,
           threshold_bytes: ByteTable | None,
           catalog: AttributeCatalog = DEFAULT_CATALOG,
           *,
           disk_index: int | None = None,
           serial: str = "") -> list[DecodedAttribute]:
    """Decode the SMART attribute table against its threshold table.

    Args:
        attribute_bytes: Raw attribute table (``VendorSpecific`` of
                         the failure-predict data)
        threshold_bytes: Raw threshold table
        catalog: Names and real-value rules to apply
        disk_index: Disk index carried into each record
        serial: Disk serial number carried into each record

    Returns:
        Decoded attributes in table order. Empty or short tables give an
        empty list; nothing is raised for table content.

    Note:
        Status is ``current >= threshold``, a plain numeric comparison and
        not the vendor's own failure predicate.
    """
    thresholds = build_threshold_map(threshold_bytes)
    logger.debug(f"Threshold table holds {len(thresholds)} entries")

    records = []
    skipped = 0
    for window in iter_attribute_windows(attribute_bytes):
        attr_id = window[OFFSET_ID]
        if attr_id == 0:
            skipped += 1
            continue

        current = window[OFFSET_CURRENT]
        threshold = thresholds.get(attr_id, 0)
        raw_hex = render_raw_hex(window)

        records.append(DecodedAttribute(
            id=attr_id,
            id_hex=f"0x{attr_id:02X}",
            name=catalog.display_name(attr_id),
            real_value=convert_real_value(attr_id, window, raw_hex, catalog),
            current=current,
            worst=window[OFFSET_WORST],
            threshold=threshold,
            status=STATUS_OK if current >= threshold else STATUS_FAIL,
            raw=raw_hex,
            disk_index=disk_index,
            serial=serial,
        ))

    logger.debug(f"Decoded {len(records)} attributes, skipped {skipped} empty slots")
    return records


ATTRIBUTE_SCHEMA: Final[dict[str, pl.DataType]] = {
    'disk_index': pl.Int64,
    'serial': pl.Utf8,
    'id': pl.Int64,
    'id_hex': pl.Utf8,
    'name': pl.Utf8,
    'real_value': pl.Utf8,
    'current': pl.Int64,
    'worst': pl.Int64,
    'threshold': pl.Int64,
    'status': pl.Utf8,
    'raw': pl.Utf8,
}


def attributes_to_dataframe(records: Sequence[DecodedAttribute]) -> pl.DataFrame:
    """Tabulate decoded attributes, keeping table order."""
    rows = [record.to_dict() for record in records]
    return pl.DataFrame(rows, schema=ATTRIBUTE_SCHEMA)
