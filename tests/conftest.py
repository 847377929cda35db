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
# smart-table-decoder/tests/conftest.py

"""Builders for raw SMART tables laid out like the storage driver's."""

import pytest

TABLE_HEADER = bytes([0x10, 0x00])
SLOTS = 30


def attribute_record(attr_id: int, current: int = 100, worst: int = 100,
                     raw: list[int] | None = None) -> bytes:
    """One 12-byte attribute record; raw is little endian, up to 6 bytes."""
    raw = list(raw or [])
    raw += [0] * (6 - len(raw))
    return bytes([attr_id, 0x32, 0x00, current, worst] + raw + [0])


def threshold_record(attr_id: int, threshold: int) -> bytes:
    return bytes([attr_id, threshold] + [0] * 10)


def build_table(records: list[bytes], slots: int = SLOTS) -> bytes:
    """Header, the records, then empty slots up to ``slots`` records."""
    padding = bytes(12 * max(0, slots - len(records)))
    return TABLE_HEADER + b"".join(records) + padding


@pytest.fixture
def sample_attribute_table() -> bytes:
    return build_table([
        attribute_record(1, 200, 200),
        attribute_record(3, 180, 175, [0xE8, 0x03]),
        attribute_record(5, 8, 8, [0x02]),
        attribute_record(9, 97, 97, [0x64]),
        attribute_record(194, 115, 96, [35, 20, 40]),
        attribute_record(215, 100, 100, [0x01]),
    ])


@pytest.fixture
def sample_threshold_table() -> bytes:
    return build_table([
        threshold_record(1, 51),
        threshold_record(3, 21),
        threshold_record(5, 10),
        threshold_record(9, 0),
        threshold_record(194, 0),
    ])
