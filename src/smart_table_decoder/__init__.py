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
# smart-table-decoder/src/smart_table_decoder/__init__.py

"""SMART vendor-specific attribute table decoder.

Decode the raw SMART attribute and threshold tables reported by the
Windows storage driver into named attributes with thresholds, OK/FAIL
status and human-readable real values.
"""

from loguru import logger

from .catalog import (
    DEFAULT_CATALOG,
    UNKNOWN_ATTRIBUTE_NAME,
    AttributeCatalog,
)
from .decoder import (
    DecodedAttribute,
    attributes_to_dataframe,
    build_threshold_map,
    decode,
    render_raw_hex,
)
from .errors import (
    AccessDeniedError,
    AmbiguousDiskError,
    DiskNotFoundError,
    SmartError,
    SmartUnsupportedError,
)
from .source import (
    DiskHandle,
    DiskReport,
    DiskSelector,
    RawTables,
    collect_report,
    fetch_raw_tables,
    list_disks,
    resolve_disk,
)

__version__ = "0.1.0"

# Library logging stays quiet until the application enables it
logger.disable("smart_table_decoder")

__all__ = [
    "AccessDeniedError",
    "AmbiguousDiskError",
    "AttributeCatalog",
    "DEFAULT_CATALOG",
    "DecodedAttribute",
    "DiskHandle",
    "DiskNotFoundError",
    "DiskReport",
    "DiskSelector",
    "RawTables",
    "SmartError",
    "SmartUnsupportedError",
    "UNKNOWN_ATTRIBUTE_NAME",
    "attributes_to_dataframe",
    "build_threshold_map",
    "collect_report",
    "decode",
    "fetch_raw_tables",
    "list_disks",
    "render_raw_hex",
    "resolve_disk",
]
