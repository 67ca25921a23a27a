"""Tests for nexusplt.names module."""

import pytest

from nexusplt.names import ClassName, InstanceName, VarName


class TestFixedName:
    """Tests for fixed-width identifiers."""

    def test_from_str_pads(self):
        """Test that from_str pads with spaces."""
        assert ClassName.from_str("FIELD").raw == b"FIELD   "
        assert VarName.from_str("QOP").raw == b"QOP "

    def test_wrong_width(self):
        """Test that a wrong width is rejected."""
        with pytest.raises(ValueError, match="exactly 8 bytes"):
            ClassName(b"FIELD")
        with pytest.raises(ValueError):
            VarName.from_str("TOOLONG")

    def test_requires_bytes(self):
        """Test that text is not accepted as raw content."""
        with pytest.raises(TypeError):
            VarName("QOP ")

    def test_exact_equality(self):
        """Test that padding takes part in equality."""
        assert ClassName(b"FIELD   ") == ClassName.from_str("FIELD")
        assert ClassName(b"FIELD   ") != ClassName(b"FIELD\x00\x00\x00")

    def test_types_differ(self):
        """Test that names of different kinds never compare equal."""
        assert ClassName(b"NETWORK ") != InstanceName(b"NETWORK ")

    def test_bytewise_ordering(self):
        """Test that ordering follows raw bytes."""
        names = [VarName(b"QWP "), VarName(b"QOP "), VarName(b"COP ")]
        assert [str(n) for n in sorted(names)] == ["COP", "QOP", "QWP"]

    def test_str_strips(self):
        """Test that str shows the name without padding."""
        assert str(InstanceName(b"NETWORK ")) == "NETWORK"

    def test_hashable(self):
        """Test use as mapping keys."""
        table = {VarName.from_str("QOP"): "FOPR"}
        assert table[VarName(b"QOP ")] == "FOPR"
