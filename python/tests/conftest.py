"""Shared test fixtures for all test modules

Provides the sample LDF on disk plus a builder for small inline LDF
documents, so each test only spells out the section it exercises.
"""

from pathlib import Path
from typing import Callable

import pytest

DATA_DIR = Path(__file__).parent / "data"

_HEADER = (
    "LIN_description_file;\n"
    'LIN_protocol_version = "2.2";\n'
    'LIN_language_version = "2.2";\n'
    "LIN_speed = 19.2 kbps;\n"
)

_NODES = "Master: ECU1, 10 ms, 0.1 ms;\n  Slaves: ECU2;"
_SIGNALS = "Sig1: 8, 0, ECU1, ECU2;"
_FRAMES = "Frame1: 1, ECU1, 1 {\n    Sig1, 0;\n  }"


def _build_ldf(
    *,
    header: str = _HEADER,
    after_header: str = "",
    nodes: str = _NODES,
    after_nodes: str = "",
    signals: str = _SIGNALS,
    after_signals: str = "",
    frames: str = _FRAMES,
    after_frames: str = "",
    node_attributes: str = "",
    schedules: str = "",
    trailing: str = "",
) -> str:
    """Assemble an LDF document; every section defaults to a minimal valid one."""
    return (
        header
        + after_header
        + "Nodes {\n  " + nodes + "\n}\n"
        + after_nodes
        + "Signals {\n  " + signals + "\n}\n"
        + after_signals
        + "Frames {\n  " + frames + "\n}\n"
        + after_frames
        + "Node_attributes {\n" + node_attributes + "\n}\n"
        + "Schedule_tables {\n" + schedules + "\n}\n"
        + trailing
    )


@pytest.fixture
def build_ldf() -> Callable[..., str]:
    """Builder for inline LDF text (keyword arguments replace sections)"""
    return _build_ldf


@pytest.fixture
def sample_ldf_path() -> Path:
    """Full-featured LDF covering every supported section"""
    return DATA_DIR / "LIN_2.2A.ldf"


@pytest.fixture
def sample_db(sample_ldf_path):
    """Database parsed from the sample LDF"""
    from autodbconv import parse_ldf
    return parse_ldf(sample_ldf_path)


@pytest.fixture
def write_ldf(tmp_path) -> Callable[[str], Path]:
    """Write LDF text to a temporary .ldf file and return its path"""
    def _write(text: str, name: str = "network.ldf") -> Path:
        path = tmp_path / name
        path.write_text(text)
        return path
    return _write
