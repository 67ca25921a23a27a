"""Tests for nexusplt.plot module."""

import io
import os
import threading
import time

import numpy as np
import pytest

from conftest import SAMPLE_BLOCKS, SAMPLE_CLASSES, plot_bytes
from nexusplt import NexusPlot, load
from nexusplt.errors import BadHeader, OpenFailure, TruncatedInput
from nexusplt.names import ClassName, InstanceName, VarName
from nexusplt.units import UnitSystem


class TestLoad:
    """Tests for loading plot files."""

    def test_load_path(self, sample_file):
        """Test loading from a path."""
        plot = load(sample_file)
        assert isinstance(plot, NexusPlot)
        assert len(plot) == 22
        assert plot.header.unit_system is UnitSystem.METRIC_BARS

    def test_load_str_path(self, sample_file):
        """Test loading from a string path."""
        assert len(load(str(sample_file))) == 22

    def test_load_bytes(self, sample_bytes):
        """Test loading from raw content."""
        assert len(load(sample_bytes)) == 22

    def test_load_stream(self, sample_bytes):
        """Test loading from an open binary stream."""
        assert len(load(io.BytesIO(sample_bytes))) == 22

    def test_load_pipe(self, sample_bytes):
        """Test loading from a pipe that delivers the file in pieces."""
        read_fd, write_fd = os.pipe()

        def feed():
            with os.fdopen(write_fd, "wb", buffering=0) as w:
                half = len(sample_bytes) // 2
                w.write(sample_bytes[:half])
                time.sleep(0.2)
                w.write(sample_bytes[half:])

        writer = threading.Thread(target=feed)
        writer.start()
        try:
            with io.FileIO(read_fd, "rb") as r:
                plot = load(r)
        finally:
            writer.join()
        assert len(plot) == 22

    def test_missing_file(self, tmp_path):
        """Test that a missing file is an open failure."""
        with pytest.raises(OpenFailure, match="Could not open file"):
            load(tmp_path / "missing.plt")

    def test_open_failure_is_oserror(self, tmp_path):
        """Test that open failures can be caught as OSError."""
        with pytest.raises(OSError):
            NexusPlot.from_file(tmp_path)

    def test_bad_file(self, tmp_path):
        """Test that a file that is not a plot is a bad header."""
        path = tmp_path / "not.plt"
        path.write_bytes(b"\x00" * 1000)
        with pytest.raises(BadHeader):
            load(path)

    @pytest.mark.parametrize("cut", [1, 8, 100])
    def test_truncated_file(self, sample_bytes, cut):
        """Test that a truncated file yields no plot at all."""
        with pytest.raises(TruncatedInput):
            load(sample_bytes[:-cut])

    def test_empty_data(self):
        """Test that a plot with only the sentinel has no data points."""
        plot = load(plot_bytes(SAMPLE_CLASSES, []))
        assert len(plot) == 0
        assert plot.data == ()
        assert plot.timesteps().size == 0
        assert list(plot.varnames) == [ClassName.from_str(c) for c in SAMPLE_CLASSES]


class TestNexusPlot:
    """Tests for NexusPlot accessors."""

    @pytest.fixture
    def plot(self, sample_bytes):
        return load(sample_bytes)

    def test_data_in_file_order(self, plot):
        """Test that data points keep file order."""
        steps = [dp.timestep for dp in plot.data]
        assert steps[:12] == [1] * 12
        assert steps[12:16] == [3] * 4
        assert steps[16:] == [2] * 6

    def test_data_is_read_only(self, plot):
        """Test that the data sequence is immutable."""
        assert isinstance(plot.data, tuple)
        with pytest.raises(AttributeError):
            plot.data[0].value = 0.0

    def test_varnames_copy(self, plot):
        """Test that the catalog cannot be changed through the accessor."""
        plot.varnames.clear()
        assert len(plot.varnames) == 2

    def test_select(self, plot):
        """Test selection by class, instance and variable."""
        selected = plot.select(classname="FIELD", instancename="NETWORK", varname="QOP")
        assert [dp.value for dp in selected] == [100.0, 120.0, 110.0]

    def test_select_name_objects(self, plot):
        """Test selection with name objects."""
        selected = plot.select(classname=ClassName.from_str("WELL"), varname=VarName.from_str("BHP"))
        assert [dp.value for dp in selected] == [200.0, 210.0, 198.0]

    def test_classnames(self, plot):
        """Test distinct class names."""
        assert [str(c) for c in plot.classnames()] == ["FIELD", "WELL"]

    def test_instancenames(self, plot):
        """Test distinct instance names."""
        assert plot.instancenames("FIELD") == [
            InstanceName.from_str("NETWORK"),
            InstanceName.from_str("OTHER"),
        ]
        assert len(plot.instancenames()) == 4

    def test_varnames_of(self, plot):
        """Test distinct variable names of a class."""
        assert [str(v) for v in plot.varnames_of("WELL")] == ["QOP", "BHP"]

    def test_timesteps(self, plot):
        """Test distinct ascending timesteps."""
        np.testing.assert_array_equal(plot.timesteps(), [1, 2, 3])

    def test_to_dataframe(self, plot):
        """Test DataFrame conversion."""
        df = plot.to_dataframe()
        assert len(df) == 22
        assert list(df.columns) == [
            "timestep",
            "time",
            "max_perfs",
            "classname",
            "instancename",
            "varname",
            "value",
        ]
        first = df.iloc[0]
        assert first["classname"] == "FIELD"
        assert first["instancename"] == "NETWORK"
        assert first["varname"] == "QOP"
        assert first["value"] == 100.0
        assert df.loc[df.classname == "WELL", "max_perfs"].unique().tolist() == [2]

    def test_repr(self, plot):
        """Test string representation."""
        assert repr(plot) == "NexusPlot(unit_system=METRIC_BARS, classes=2, data_points=22)"
