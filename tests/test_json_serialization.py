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
# smart-table-decoder/tests/test_json_serialization.py

import json
from datetime import datetime

from smart_table_decoder import DecodedAttribute, DiskHandle, DiskReport


def make_attribute(**overrides) -> DecodedAttribute:
    fields = dict(
        id=194,
        id_hex="0xC2",
        name="Temperature",
        real_value="35C (Min=20,Max=40)",
        current=115,
        worst=96,
        threshold=0,
        status="OK",
        raw="000000281423",
        disk_index=0,
        serial="TEST123",
    )
    fields.update(overrides)
    return DecodedAttribute(**fields)


class TestJSONSerialization:
    """Test JSON serialization of decoded records."""

    def test_attribute_to_dict(self):
        """Test DecodedAttribute.to_dict() keeps every field verbatim."""
        attr_dict = make_attribute().to_dict()

        assert attr_dict == {
            'id': 194,
            'id_hex': "0xC2",
            'name': "Temperature",
            'real_value': "35C (Min=20,Max=40)",
            'current': 115,
            'worst': 96,
            'threshold': 0,
            'status': "OK",
            'raw': "000000281423",
            'disk_index': 0,
            'serial': "TEST123",
        }

    def test_report_to_dict(self):
        """Test DiskReport.to_dict() creates valid JSON structure."""
        report = DiskReport(
            disk=DiskHandle(index=0, serial="TEST123", model="WDC WD40EFRX"),
            attributes=[
                make_attribute(),
                make_attribute(id=5, id_hex="0x05", name="Reallocated Sectors Count",
                               real_value="2", current=8, threshold=10, status="FAIL"),
            ],
            collected_at=datetime(2026, 10, 19, 10, 30, 45),
        )

        report_dict = report.to_dict()

        assert report_dict['disk']['serial'] == "TEST123"
        assert report_dict['summary'] == {
            'attributes': 2,
            'failing': 1,
            'healthy': False,
        }
        assert report_dict['collected_at'] == "2026-10-19T10:30:45"
        assert [a['id'] for a in report_dict['attributes']] == [194, 5]

        # Round trip through json
        parsed = json.loads(json.dumps(report_dict))
        assert parsed == report_dict

    def test_empty_report(self):
        report = DiskReport(disk=DiskHandle(index=3, serial=""), attributes=[])
        report_dict = report.to_dict()

        assert report_dict['summary']['attributes'] == 0
        assert report_dict['summary']['healthy'] is True
        assert report_dict['attributes'] == []
        json.dumps(report_dict)
