"""Unit tests for the CLI module

Tests cover:
- Hex data parsing: various formats -> bytearray
- Frame ID parsing: hex/decimal, error cases
- Signals subcommand: text and JSON output from the sample LDF
- Schedules subcommand: slot listing and cycle times
- Extract subcommand: decoding frame bytes by name or ID
- Convert subcommand: stdout and file output
- Error handling: missing files, parse errors, bad arguments, exit codes
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from autodbconv.cli import main, parse_frame_id, parse_hex_data


# ============================================================================
# Hex data parsing
# ============================================================================

class TestParseHexData:
    """Test parse_hex_data: various hex formats -> bytearray."""

    def test_contiguous_hex(self) -> None:
        assert parse_hex_data("05A0") == bytearray([0x05, 0xA0])

    def test_space_separated(self) -> None:
        assert parse_hex_data("05 A0") == bytearray([0x05, 0xA0])

    def test_colon_separated(self) -> None:
        assert parse_hex_data("05:A0") == bytearray([0x05, 0xA0])

    def test_with_0x_prefix(self) -> None:
        assert parse_hex_data("0x05A0") == bytearray([0x05, 0xA0])

    def test_empty_string(self) -> None:
        assert parse_hex_data("") == bytearray()

    def test_odd_length_raises(self) -> None:
        with pytest.raises(ValueError, match="odd number"):
            parse_hex_data("ABC")

    def test_invalid_hex_raises(self) -> None:
        with pytest.raises(ValueError, match="invalid hex"):
            parse_hex_data("ZZZZ")


# ============================================================================
# Frame ID parsing
# ============================================================================

class TestParseFrameId:
    """Test parse_frame_id: hex and decimal."""

    def test_hex_id(self) -> None:
        assert parse_frame_id("0x3C") == 0x3C

    def test_decimal_id(self) -> None:
        assert parse_frame_id("60") == 60

    def test_whitespace_stripped(self) -> None:
        assert parse_frame_id("  0x01 ") == 1

    def test_invalid_raises(self) -> None:
        with pytest.raises(ValueError, match="invalid frame ID"):
            parse_frame_id("CEM_Frm1")


# ============================================================================
# Signals subcommand
# ============================================================================

class TestSignalsCommand:
    """Test 'autodbconv signals'."""

    def test_text_output(self, sample_ldf_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = main(["signals", str(sample_ldf_path)])
        assert code == 0
        out = capsys.readouterr().out
        assert "Frame 0x07 CEM_Frm2 (5 bytes, sender CEM)" in out
        assert "CEM_Counter" in out
        assert "Commander CEM, responders: LSM, RSM" in out
        assert "8 frames, 24 signals, 19200 bps" in out

    def test_json_output(self, sample_ldf_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = main(["signals", str(sample_ldf_path), "--json"])
        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["commander"] == "CEM"
        assert len(data["messages"]) == 8

    def test_verbose_flag(self, sample_ldf_path: Path) -> None:
        assert main(["-v", "signals", str(sample_ldf_path)]) == 0

    def test_missing_ldf_file(self, capsys: pytest.CaptureFixture[str]) -> None:
        code = main(["signals", "/nonexistent/file.ldf"])
        assert code == 2
        assert "LDF file not found" in capsys.readouterr().err

    def test_no_ldf_specified(self) -> None:
        assert main(["signals"]) == 2

    def test_parse_error(self, write_ldf, capsys: pytest.CaptureFixture[str]) -> None:
        path = write_ldf("LIN_description_file;\nLIN_protocol_version = 2.2;\n")
        code = main(["signals", str(path)])
        assert code == 2
        assert "Error: line 2" in capsys.readouterr().err


# ============================================================================
# Schedules subcommand
# ============================================================================

class TestSchedulesCommand:
    """Test 'autodbconv schedules'."""

    def test_text_output(self, sample_ldf_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = main(["schedules", str(sample_ldf_path)])
        assert code == 0
        out = capsys.readouterr().out
        assert "Schedule Normal_Schedule (5 slots, 65 ms cycle)" in out
        assert "AssignFrameIdRange { LSM, 0, 0xFF, 0xFF, 0xFF, 0xFF }  delay 15 ms" in out
        assert "5 schedule tables" in out

    def test_json_output(self, sample_ldf_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = main(["schedules", str(sample_ldf_path), "--json"])
        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["MRF_schedule"] == [{"command": "MasterReqSlot", "args": {}, "delay": 10.0}]
        assert data["Normal_Schedule"][0]["args"] == {"frame": "CEM_Frm1"}


# ============================================================================
# Extract subcommand
# ============================================================================

class TestExtractCommand:
    """Test 'autodbconv extract'."""

    def test_text_output(self, sample_ldf_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        # LSMerror bit 0 = 1 -> "error", IntTest bits 1:2 = 2 -> "passed"
        code = main(["extract", str(sample_ldf_path), "LSM_Frm2", "05"])
        assert code == 0
        out = capsys.readouterr().out
        assert "LSM_Frm2" in out
        assert "= error" in out
        assert "= passed" in out

    def test_json_output(self, sample_ldf_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = main(["extract", str(sample_ldf_path), "0x03", "05", "--json"])
        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data == {"frame": "LSM_Frm2", "id": 3, "values": {"LSMerror": "error", "IntTest": "passed"}}

    def test_decimal_frame_id(self, sample_ldf_path: Path) -> None:
        assert main(["extract", str(sample_ldf_path), "7", "14 00 01 02 03"]) == 0

    def test_wrong_data_length(self, sample_ldf_path: Path) -> None:
        assert main(["extract", str(sample_ldf_path), "LSM_Frm2", "05 00"]) == 2

    def test_unknown_frame(self, sample_ldf_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["extract", str(sample_ldf_path), "Nope", "00"]) == 2
        assert "unknown frame" in capsys.readouterr().err

    def test_bad_hex(self, sample_ldf_path: Path) -> None:
        assert main(["extract", str(sample_ldf_path), "LSM_Frm2", "ZZ"]) == 2


# ============================================================================
# Convert subcommand
# ============================================================================

class TestConvertCommand:
    """Test 'autodbconv convert'."""

    def test_stdout_json(self, sample_ldf_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = main(["convert", str(sample_ldf_path)])
        assert code == 0
        assert json.loads(capsys.readouterr().out)["channel"] == "DB"

    def test_format_flag(self, sample_ldf_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        code = main(["convert", str(sample_ldf_path), "--format", "dbc"])
        assert code == 0
        assert "BO_ 1 CEM_Frm1" in capsys.readouterr().out

    def test_output_file(self, sample_ldf_path: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        out = tmp_path / "network.yaml"
        code = main(["convert", str(sample_ldf_path), "-o", str(out)])
        assert code == 0
        assert out.exists()
        assert "Converted" in capsys.readouterr().err

    def test_xlsx_no_overwrite(self, sample_ldf_path: Path, tmp_path: Path) -> None:
        out = tmp_path / "network.xlsx"
        assert main(["convert", str(sample_ldf_path), "-o", str(out)]) == 0
        assert main(["convert", str(sample_ldf_path), "-o", str(out)]) == 2

    def test_unknown_format(self, sample_ldf_path: Path) -> None:
        assert main(["convert", str(sample_ldf_path), "--format", "csv"]) == 2

    def test_missing_ldf(self) -> None:
        assert main(["convert", "/nonexistent.ldf"]) == 2
