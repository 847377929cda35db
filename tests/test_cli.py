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
# smart-table-decoder/tests/test_cli.py

"""Tests for the command-line interface."""

import json

import polars as pl
from typer.testing import CliRunner

from smart_table_decoder import DiskHandle, DiskNotFoundError, DiskReport, decode
from smart_table_decoder import cli

runner = CliRunner()


class TestDecodeFile:
    """Test decoding tables saved to files."""

    def test_json_output(self, tmp_path, sample_attribute_table, sample_threshold_table):
        attrs = tmp_path / "attrs.bin"
        thresholds = tmp_path / "thresholds.txt"
        attrs.write_bytes(sample_attribute_table)
        thresholds.write_text(" ".join(str(b) for b in sample_threshold_table))

        result = runner.invoke(cli.app, [
            "decode-file", str(attrs), str(thresholds),
            "--serial", "WD-TEST", "--json",
        ])
        assert result.exit_code == 0

        output = json.loads(result.stdout)
        assert output['disk']['serial'] == "WD-TEST"
        assert output['summary']['failing'] == 1
        temps = [a for a in output['attributes'] if a['id'] == 194]
        assert temps[0]['real_value'] == "35C (Min=20,Max=40)"

    def test_failing_only_json(self, tmp_path, sample_attribute_table,
                               sample_threshold_table):
        attrs = tmp_path / "attrs.bin"
        thresholds = tmp_path / "thresholds.bin"
        attrs.write_bytes(sample_attribute_table)
        thresholds.write_bytes(sample_threshold_table)

        result = runner.invoke(cli.app, [
            "decode-file", str(attrs), str(thresholds), "--json", "--failing-only",
        ])
        assert result.exit_code == 0
        output = json.loads(result.stdout)
        assert [a['id'] for a in output['attributes']] == [5]

    def test_csv_export(self, tmp_path, sample_attribute_table):
        attrs = tmp_path / "attrs.bin"
        attrs.write_bytes(sample_attribute_table)
        csv_path = tmp_path / "out.csv"

        result = runner.invoke(cli.app, [
            "decode-file", str(attrs), "--csv", str(csv_path), "--json",
        ])
        assert result.exit_code == 0

        df = pl.read_csv(csv_path)
        assert df['id'].to_list() == [1, 3, 5, 9, 194, 215]

    def test_name_overrides(self, tmp_path, sample_attribute_table):
        attrs = tmp_path / "attrs.bin"
        attrs.write_bytes(sample_attribute_table)
        names = tmp_path / "names.json"
        names.write_text(json.dumps({"215": "Vendor Counter"}))

        result = runner.invoke(cli.app, [
            "decode-file", str(attrs), "--names", str(names), "--json",
        ])
        assert result.exit_code == 0
        output = json.loads(result.stdout)
        assert output['attributes'][-1]['name'] == "Vendor Counter"

    def test_table_display(self, tmp_path, sample_attribute_table):
        attrs = tmp_path / "attrs.bin"
        attrs.write_bytes(sample_attribute_table)

        result = runner.invoke(cli.app, ["decode-file", str(attrs)])
        assert result.exit_code == 0
        assert "SMART Attributes" in result.stdout

    def test_cim_object_file(self, tmp_path, sample_attribute_table):
        """A saved Get-CimInstance object decodes its VendorSpecific table."""
        attrs = tmp_path / "attrs.json"
        attrs.write_text(json.dumps({
            "InstanceName": "SCSI\\DISK&VEN_WDC\\4&0&0_0",
            "VendorSpecific": list(sample_attribute_table),
        }))

        result = runner.invoke(cli.app, ["decode-file", str(attrs), "--json"])
        assert result.exit_code == 0
        output = json.loads(result.stdout)
        assert [a['id'] for a in output['attributes']] == [1, 3, 5, 9, 194, 215]

    def test_malformed_dump(self, tmp_path):
        attrs = tmp_path / "attrs.json"
        attrs.write_text("[[16, 0, 194]]")

        result = runner.invoke(cli.app, ["decode-file", str(attrs), "--json"])
        assert result.exit_code == 1

    def test_hex_option(self, tmp_path):
        attrs = tmp_path / "attrs.txt"
        # Header 10 00, then one record for attribute 0x10 with current 0x64
        attrs.write_text("10 00 10 32 00 64 64 00 00 00 00 00 00 00")

        plain = runner.invoke(cli.app, ["decode-file", str(attrs), "--json"])
        forced = runner.invoke(cli.app, ["decode-file", str(attrs), "--json", "--hex"])
        assert plain.exit_code == 0
        assert forced.exit_code == 0
        assert json.loads(plain.stdout)['attributes'][0]['id'] == 10
        forced_attr = json.loads(forced.stdout)['attributes'][0]
        assert forced_attr['id'] == 0x10
        assert forced_attr['current'] == 0x64

    def test_missing_file(self, tmp_path):
        result = runner.invoke(cli.app, ["decode-file", str(tmp_path / "none.bin")])
        assert result.exit_code == 1


class TestShow:
    """Test the live disk command with the source layer stubbed."""

    def test_needs_one_selector(self):
        assert runner.invoke(cli.app, ["show"]).exit_code == 2
        result = runner.invoke(cli.app, ["show", "--index", "0", "--serial", "X"])
        assert result.exit_code == 2

    def test_disk_not_found(self, monkeypatch):
        def fake_collect(selector, executor, catalog):
            raise DiskNotFoundError(f"No disk found with {selector}")
        monkeypatch.setattr(cli, "collect_report", fake_collect)

        result = runner.invoke(cli.app, ["show", "--index", "7"])
        assert result.exit_code == 1

    def test_json_report(self, monkeypatch, sample_attribute_table,
                         sample_threshold_table):
        seen = []

        def fake_collect(selector, executor, catalog):
            seen.append(selector)
            disk = DiskHandle(index=selector.index, serial="WD-TEST")
            return DiskReport(
                disk=disk,
                attributes=decode(sample_attribute_table, sample_threshold_table,
                                  catalog, disk_index=disk.index, serial=disk.serial),
            )
        monkeypatch.setattr(cli, "collect_report", fake_collect)

        result = runner.invoke(cli.app, ["show", "--index", "2", "--json"])
        assert result.exit_code == 0
        assert seen[0].index == 2

        output = json.loads(result.stdout)
        assert output['disk']['index'] == 2
        assert len(output['attributes']) == 6


class TestListDisks:
    """Test the disk listing command."""

    def test_json(self, monkeypatch):
        monkeypatch.setattr(cli, "list_disks", lambda executor: [
            DiskHandle(index=0, serial="WD-TEST", model="WDC WD40EFRX"),
        ])

        result = runner.invoke(cli.app, ["list-disks", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)[0]['serial'] == "WD-TEST"
