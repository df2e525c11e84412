"""
Unit tests for the units file loader.
"""

from pathlib import Path

import pytest

from bootunit.core.exceptions import UnitFileError
from bootunit.services.units.loader import load_units, parse_units

DEVICE_INFO_UNITS = """\
[units.get-device-info]
description = "Get device information on startup"
wanted_by = ["multi-user.target"]
after = ["sound.target"]
user = "root"
type = "oneshot"
command = "bash ./get-device-info.sh"
output = "/output/logs/device-info.txt"
"""


class TestLoadUnits:
    """Tests for load_units()."""

    def test_loads_device_info_unit(self, write_units):
        path = write_units(DEVICE_INFO_UNITS)

        store = load_units(path)

        assert store.sealed
        assert store.names() == ["get-device-info"]
        unit = store.get("get-device-info")
        assert unit.command == "bash ./get-device-info.sh"
        assert unit.ordering_after == {"sound.target"}
        assert unit.output_destination == Path("/output/logs/device-info.txt")

    def test_unit_root_defaults_to_file_directory(self, write_units, tmp_path):
        path = write_units(DEVICE_INFO_UNITS)

        store = load_units(path)

        assert store.unit_root == tmp_path.resolve()

    def test_explicit_unit_root(self, write_units, tmp_path):
        path = write_units(DEVICE_INFO_UNITS)

        store = load_units(path, unit_root=tmp_path / "scripts")

        assert store.unit_root == tmp_path / "scripts"

    def test_multiple_units_keep_file_order(self, write_units):
        path = write_units(
            """\
[units.b]
command = "true"
output = "/tmp/b.txt"

[units.a]
command = "true"
output = "/tmp/a.txt"
after = ["b"]
"""
        )

        store = load_units(path)

        assert store.names() == ["b", "a"]

    def test_empty_file_gives_empty_store(self, write_units):
        store = load_units(write_units(""))

        assert len(store) == 0

    def test_missing_file(self, tmp_path):
        with pytest.raises(UnitFileError, match="not found"):
            load_units(tmp_path / "nope.toml")

    def test_malformed_toml(self, write_units):
        path = write_units("[units.a\ncommand = 'true'\n")

        with pytest.raises(UnitFileError, match="Failed to parse") as exc_info:
            load_units(path)

        assert exc_info.value.context["file_path"] == str(path)

    def test_invalid_unit_names_field(self, write_units):
        path = write_units('[units.a]\ncommand = ""\noutput = "/tmp/a.txt"\n')

        with pytest.raises(UnitFileError, match="Invalid unit a") as exc_info:
            load_units(path)

        assert exc_info.value.unit_name == "a"

    def test_output_conflict_reported_as_file_error(self, write_units):
        path = write_units(
            """\
[units.a]
command = "true"
output = "/tmp/same.txt"

[units.b]
command = "true"
output = "/tmp/same.txt"
"""
        )

        with pytest.raises(UnitFileError, match="same output"):
            load_units(path)


class TestParseUnits:
    """Tests for parse_units()."""

    def test_name_mismatch_rejected(self):
        data = {"units": {"a": {"name": "b", "command": "true", "output": "/tmp/a"}}}

        with pytest.raises(UnitFileError, match="different name"):
            parse_units(data)

    def test_units_must_be_tables(self):
        with pytest.raises(UnitFileError, match="must be a table"):
            parse_units({"units": {"a": "true"}})

    def test_units_key_must_be_table(self):
        with pytest.raises(UnitFileError):
            parse_units({"units": ["a"]})
