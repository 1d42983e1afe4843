"""
Test LDF export to JSON, YAML and DBC (via cantools)
"""

import json

import cantools
import pytest
import yaml

from autodbconv.database import AssignFrameIdRange, Database, MasterReqSlot, ScheduleEntry
from autodbconv.errors import UnsupportedFeatureError
from autodbconv.ldf_converter import (
    convert_ldf_file,
    database_to_cantools,
    database_to_dbc,
    database_to_json,
    database_to_yaml,
    output_format,
    schedule_entry_to_json,
    signal_to_json,
)
from autodbconv.protocols import OutputFormat


# ============================================================================
# JSON
# ============================================================================

class TestJSON:
    """database_to_json structure"""

    def test_network_fields(self, sample_db):
        out = database_to_json(sample_db)
        assert out["protocolVersion"] == "2.2"
        assert out["bitrate"] == 19200.0
        assert out["channel"] == "DB"
        assert out["commander"] == "CEM"
        assert [r["name"] for r in out["responders"]] == ["LSM", "RSM"]

    def test_messages(self, sample_db):
        out = database_to_json(sample_db)
        first = out["messages"][0]
        assert first == {
            "id": 1,
            "name": "CEM_Frm1",
            "length": 1,
            "sender": "CEM",
            "signals": ["InternalLightsRequest"],
        }

    def test_signal(self, sample_db):
        sig = signal_to_json("CEM_Counter", sample_db.signals["CEM_Counter"])
        assert sig["startBit"] == 0
        assert sig["length"] == 16
        assert sig["byteOrder"] == "little_endian"
        assert sig["initValue"] == 0x1234
        assert sig["encodings"] == [{
            "type": "scalar", "rawMin": 0, "rawMax": 65535,
            "scale": 0.5, "offset": -10.0, "unit": "s",
        }]
        assert "initArray" not in sig

    def test_init_array(self, sample_db):
        sig = signal_to_json("CEM_Serial", sample_db.signals["CEM_Serial"])
        assert sig["initArray"] == [1, 2, 3]

    def test_responder(self, sample_db):
        out = database_to_json(sample_db)
        rsm = next(r for r in out["responders"] if r["name"] == "RSM")
        assert rsm["configuredNAD"] == 0x20
        assert rsm["productId"] == [0x4E4E, 0x4553, 1]
        assert rsm["configurableFrames"][0] == {"frame": "Node_Status_Event", "id": None}

    def test_groups(self, sample_db):
        out = database_to_json(sample_db)
        assert out["sporadicFrames"] == {"CEM_Sporadic": ["CEM_Frm1", "CEM_Frm2"]}
        assert out["eventFrames"] == [{
            "name": "Node_Status_Event",
            "collisionTable": "Collision_resolver",
            "id": 6,
            "frames": ["RSM_Frm1", "LSM_Frm1"],
        }]

    def test_schedule_entries(self):
        entry = ScheduleEntry(AssignFrameIdRange("LSM", 0, (1, 2, 3, 4)), 15.0)
        assert schedule_entry_to_json(entry) == {
            "command": "AssignFrameIdRange",
            "args": {"node": "LSM", "index": 0, "pids": [1, 2, 3, 4]},
            "delay": 15.0,
        }
        assert schedule_entry_to_json(ScheduleEntry(MasterReqSlot(), 10.0))["args"] == {}

    def test_serializable(self, sample_db):
        out = database_to_json(sample_db)
        assert json.loads(json.dumps(out)) == out

    def test_non_ldf_database(self):
        with pytest.raises(UnsupportedFeatureError):
            database_to_json(Database())


# ============================================================================
# YAML
# ============================================================================

class TestYAML:
    """database_to_yaml mirrors the JSON structure"""

    def test_same_content_as_json(self, sample_db):
        loaded = yaml.safe_load(database_to_yaml(sample_db))
        assert loaded == database_to_json(sample_db)

    def test_key_order_kept(self, sample_db):
        text = database_to_yaml(sample_db)
        assert text.index("protocolVersion") < text.index("scheduleTables")


# ============================================================================
# CANTOOLS / DBC
# ============================================================================

class TestCantools:
    """Conversion to cantools objects and DBC text"""

    def test_messages(self, sample_db):
        db = database_to_cantools(sample_db)
        assert len(db.messages) == len(sample_db.messages)
        msg = db.get_message_by_name("CEM_Frm2")
        assert msg.frame_id == 0x07
        assert msg.length == 5
        assert msg.senders == ["CEM"]
        assert [s.name for s in msg.signals] == ["CEM_Counter", "CEM_Serial"]

    def test_nodes(self, sample_db):
        db = database_to_cantools(sample_db)
        assert [n.name for n in db.nodes] == ["CEM", "LSM", "RSM"]

    def test_scalar_signal(self, sample_db):
        sig = database_to_cantools(sample_db).get_message_by_name("CEM_Frm2").get_signal_by_name("CEM_Counter")
        assert sig.start == 0
        assert sig.length == 16
        assert sig.scale == 0.5
        assert sig.offset == -10
        assert sig.unit == "s"
        assert sig.minimum == -10.0
        assert sig.maximum == 0.5 * 65535 - 10

    def test_enum_signal(self, sample_db):
        sig = database_to_cantools(sample_db).get_message_by_name("LSM_Frm2").get_signal_by_name("IntTest")
        assert sig.choices is not None
        assert str(sig.choices[2]) == "passed"
        assert sig.receivers == ["CEM"]

    def test_decode_matches(self, sample_db):
        msg = database_to_cantools(sample_db).get_message_by_name("CEM_Frm2")
        decoded = msg.decode(bytes([0x14, 0x00, 0x01, 0x02, 0x03]))
        assert decoded["CEM_Counter"] == 0.0
        assert decoded["CEM_Serial"] == 0x030201

    def test_dbc_text_loads(self, sample_db):
        dbc = database_to_dbc(sample_db)
        reloaded = cantools.database.load_string(dbc, database_format="dbc")
        assert reloaded.get_message_by_name("MasterReq").frame_id == 0x3C
        assert reloaded.get_message_by_name("RSM_Frm1").length == 2

    def test_non_ldf_database(self):
        with pytest.raises(UnsupportedFeatureError):
            database_to_cantools(Database())


# ============================================================================
# FILES
# ============================================================================

class TestConvertFile:
    """convert_ldf_file and format selection"""

    @pytest.mark.parametrize("path,fmt,expected", [
        (None, None, OutputFormat.JSON),
        ("out.yml", None, OutputFormat.YAML),
        ("out.YAML", None, OutputFormat.YAML),
        ("out.dbc", None, OutputFormat.DBC),
        ("out.xlsx", None, OutputFormat.XLSX),
        ("out.txt", None, OutputFormat.JSON),
        ("out.json", "dbc", OutputFormat.DBC),
    ])
    def test_output_format(self, path, fmt, expected):
        assert output_format(path, fmt) is expected

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            output_format(None, "csv")

    def test_returns_json_text(self, sample_ldf_path):
        text = convert_ldf_file(sample_ldf_path)
        assert json.loads(text)["commander"] == "CEM"

    def test_writes_yaml(self, sample_ldf_path, tmp_path):
        out = tmp_path / "network.yaml"
        text = convert_ldf_file(sample_ldf_path, out)
        assert out.read_text() == text
        assert yaml.safe_load(text)["channel"] == "DB"

    def test_writes_dbc(self, sample_ldf_path, tmp_path):
        out = tmp_path / "network.dbc"
        convert_ldf_file(sample_ldf_path, out)
        assert "CEM_Frm1" in out.read_text()

    def test_writes_xlsx(self, sample_ldf_path, tmp_path):
        out = tmp_path / "network.xlsx"
        assert convert_ldf_file(sample_ldf_path, out) == ""
        assert out.exists()

    def test_xlsx_needs_path(self, sample_ldf_path):
        with pytest.raises(ValueError, match="output path"):
            convert_ldf_file(sample_ldf_path, fmt="xlsx")
