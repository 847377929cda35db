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
# smart-table-decoder/src/smart_table_decoder/errors.py

"""Errors raised while locating a disk or reading its SMART tables.

The decoder itself never raises for table content; these cover the
collaborators around it.
"""


class SmartError(RuntimeError):
    """Base class for disk lookup and SMART retrieval failures."""


class DiskNotFoundError(SmartError):
    """No disk matched the selector."""


class AmbiguousDiskError(SmartError):
    """More than one disk matched the selector."""


class SmartUnsupportedError(SmartError):
    """SMART data is disabled, unsupported or empty for the disk."""


class AccessDeniedError(SmartError):
    """The management interface refused the query (usually not elevated)."""
