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
# smart-table-decoder/src/smart_table_decoder/catalog.py

"""Reference table of SMART attribute names and real-value conversions.

The names follow the common convention used by smartmontools and the
vendor datasheets. It is a best-effort table: vendor-specific IDs are
expected to miss and several IDs share a name.
"""

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Final

from loguru import logger

UNKNOWN_ATTRIBUTE_NAME: Final[str] = "VendorSpecific/Unknown"

# SMART attribute IDs with special real-value formatting
ATTR_SPIN_UP_TIME: Final[int] = 3
ATTR_POWER_ON_HOURS: Final[int] = 9
ATTR_AIRFLOW_TEMPERATURE: Final[int] = 190
ATTR_TEMPERATURE_CELSIUS: Final[int] = 194
ATTR_HEAD_FLYING_HOURS: Final[int] = 240

ATTRIBUTE_NAMES: Final[Mapping[int, str]] = MappingProxyType({
    1: "Raw Read Error Rate",
    2: "Throughput Performance",
    3: "Spin-Up Time",
    4: "Start/Stop Count",
    5: "Reallocated Sectors Count",
    6: "Read Channel Margin",
    7: "Seek Error Rate",
    8: "Seek Time Performance",
    9: "Power-On Hours",
    10: "Spin Retry Count",
    11: "Recalibration Retries",
    12: "Power Cycle Count",
    13: "Soft Read Error Rate",
    22: "Current Helium Level",
    170: "Available Reserved Space",
    171: "SSD Program Fail Count",
    172: "SSD Erase Fail Count",
    173: "SSD Wear Leveling Count",
    174: "Unexpected Power Loss Count",
    175: "Power Loss Protection Failure",
    176: "Erase Fail Count",
    177: "Wear Range Delta",
    179: "Used Reserved Block Count Total",
    180: "Unused Reserved Block Count Total",
    181: "Program Fail Count Total",
    182: "Erase Fail Count",
    183: "SATA Downshift Error Count",
    184: "End-to-End Error",
    185: "Head Stability",
    186: "Induced Op-Vibration Detection",
    187: "Reported Uncorrectable Errors",
    188: "Command Timeout",
    189: "High Fly Writes",
    190: "Airflow Temperature",
    191: "G-Sense Error Rate",
    192: "Power-Off Retract Count",
    193: "Load Cycle Count",
    194: "Temperature",
    195: "Hardware ECC Recovered",
    196: "Reallocation Event Count",
    197: "Current Pending Sector Count",
    198: "Offline Uncorrectable Sector Count",
    199: "UltraDMA CRC Error Count",
    200: "Multi-Zone Error Rate",
    201: "Soft Read Error Rate",
    202: "Data Address Mark Errors",
    203: "Run Out Cancel",
    204: "Soft ECC Correction",
    205: "Thermal Asperity Rate",
    206: "Flying Height",
    207: "Spin High Current",
    208: "Spin Buzz",
    209: "Offline Seek Performance",
    210: "Vibration During Write",
    211: "Vibration During Write",
    212: "Shock During Write",
    220: "Disk Shift",
    221: "G-Sense Error Rate",
    222: "Loaded Hours",
    223: "Load/Unload Retry Count",
    224: "Load Friction",
    225: "Load/Unload Cycle Count",
    226: "Load In-Time",
    227: "Torque Amplification Count",
    228: "Power-Off Retract Cycle",
    230: "GMR Head Amplitude",
    231: "Life Left",
    232: "Endurance Remaining",
    233: "Media Wearout Indicator",
    234: "Average Erase Count",
    235: "Good Block Count",
    240: "Head Flying Hours",
    241: "Total LBAs Written",
    242: "Total LBAs Read",
    243: "Total LBAs Written Expanded",
    244: "Total LBAs Read Expanded",
    249: "NAND Writes (1GiB)",
    250: "Read Error Retry Rate",
    251: "Minimum Spares Remaining",
    252: "Newly Added Bad Flash Block",
    254: "Free Fall Protection",
})

# IDs whose raw counter has a defined human-readable conversion
REAL_VALUE_ATTRIBUTES: Final[frozenset[int]] = frozenset({
    3, 4, 5, 9, 10, 12, 184, 187, 188, 190, 192, 193, 194,
    196, 197, 198, 199, 240, 241, 242,
})


class AttributeCatalog:
    """Immutable attribute-ID lookup: names and real-value conversions."""

    __slots__ = ("_names", "_real_value_ids")

    def __init__(self, names: Mapping[int, str] = ATTRIBUTE_NAMES,
                 real_value_ids: Iterable[int] = REAL_VALUE_ATTRIBUTES):
        self._names = MappingProxyType(dict(names))
        self._real_value_ids = frozenset(real_value_ids)

    def name_for(self, attr_id: int) -> str | None:
        """Return the canonical name for an ID, or None if unknown."""
        return self._names.get(attr_id)

    def display_name(self, attr_id: int) -> str:
        """Return the canonical name, falling back to the unknown sentinel."""
        return self._names.get(attr_id, UNKNOWN_ATTRIBUTE_NAME)

    def has_real_value_conversion(self, attr_id: int) -> bool:
        return attr_id in self._real_value_ids

    @property
    def names(self) -> Mapping[int, str]:
        return self._names

    @property
    def real_value_ids(self) -> frozenset[int]:
        return self._real_value_ids

    def with_names(self, overrides: Mapping[int, str]) -> "AttributeCatalog":
        """Return a new catalog with some names added or replaced."""
        merged = dict(self._names)
        merged.update(overrides)
        return AttributeCatalog(merged, self._real_value_ids)

    def __contains__(self, attr_id: object) -> bool:
        return attr_id in self._names

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return (f"AttributeCatalog(names={len(self._names)}, "
                f"real_value_ids={len(self._real_value_ids)})")


DEFAULT_CATALOG: Final[AttributeCatalog] = AttributeCatalog()


def load_name_overrides(path: str | Path) -> dict[int, str]:
    """Load vendor name overrides from a JSON object of {id: name}.

    Keys may be decimal ("194") or hex ("0xC2") strings.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Name override file not found: {path}")

    data = json.loads(path.read_text())
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {path}")

    overrides = {}
    for key, name in data.items():
        attr_id = int(key, 0)
        if not 0 < attr_id <= 0xFF:
            raise ValueError(f"Attribute ID out of range in {path}: {key}")
        overrides[attr_id] = str(name)

    logger.debug(f"Loaded {len(overrides)} attribute name overrides from {path}")
    return overrides
