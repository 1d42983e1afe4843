"""Unit tests for the database model"""

import pytest

from autodbconv.database import (
    Database,
    DatabaseKind,
    EnumEncoding,
    LDFData,
    ResponderData,
    ScalarEncoding,
    Signal,
)


class TestEncodings:
    """Scalar ranges and enum labels"""

    def test_scalar(self):
        enc = ScalarEncoding(0, 100, 0.5, -10.0, "s")
        assert enc.covers(0)
        assert enc.covers(100)
        assert not enc.covers(101)
        assert enc.to_physical(40) == 10.0

    def test_enum_label(self):
        enc = EnumEncoding("E", {"off": 0, "on": 1})
        assert enc.label_for(1) == "on"
        assert enc.label_for(2) is None

    def test_physical_value_without_encoding(self):
        assert Signal(bit_width=8).physical_value(7) == 7

    def test_physical_value_outside_range(self):
        sig = Signal(bit_width=8, encodings=[ScalarEncoding(0, 9, 2.0, 0.0)])
        assert sig.physical_value(5) == 10.0
        assert sig.physical_value(200) == 200

    def test_enum_wins_over_scalar(self):
        sig = Signal(bit_width=8, encodings=[
            ScalarEncoding(0, 255, 1.0, 0.0),
            EnumEncoding("E", {"max": 255}),
        ])
        assert sig.physical_value(255) == "max"
        assert sig.physical_value(254) == 254.0


class TestDatabase:
    """Database and LDF network data"""

    def test_default_kind(self):
        db = Database()
        assert db.kind is DatabaseKind.NCF
        with pytest.raises(ValueError, match="not ldf"):
            db.ldf

    def test_ldf_data(self):
        ldf = LDFData(commander="CEM", responders={"LSM": ResponderData()})
        db = Database(kind=DatabaseKind.LDF, extra=ldf)
        assert db.ldf is ldf
        assert ldf.is_node("CEM")
        assert ldf.is_node("LSM")
        assert not ldf.is_node("RSM")

    def test_placement(self):
        sig = Signal(bit_width=4)
        assert not sig.is_placed
        sig.bit_start = 0
        assert sig.is_placed
