"""Synthetic Nexus plot files for the test suite."""

import struct

import pytest

MAGIC = b"PLOT  BIN   "


def i32(value: int) -> bytes:
    return struct.pack(">i", value)


def f32(value: float) -> bytes:
    # Big-endian float bytes are the big-endian int32 of the same bit pattern
    return struct.pack(">f", value)


def name(text: str, width: int) -> bytes:
    return text.encode("ascii").ljust(width, b" ")


def header_bytes(
    num_classes=1,
    date=(1, 1, 1980),
    dims=(10, 10, 3),
    ncomp=0,
    unit=b"METBAR",
    magic=MAGIC,
) -> bytes:
    fields = (num_classes, *date, *dims, ncomp)
    return (
        b"\x00" * 4
        + magic
        + b"\x00" * 24
        + unit
        + b"\x00" * (530 + 264)
        + b"".join(i32(v) for v in fields)
    )


def catalog_bytes(classes: dict) -> bytes:
    out = b"\x00" * 8
    out += b"".join(name(cls, 8) for cls in classes)
    out += b"\x00" * 8
    out += b"".join(i32(len(varnames)) for varnames in classes.values())
    out += b"\x00" * 8
    for varnames in classes.values():
        out += b"TIME"
        out += b"".join(name(v, 4) for v in varnames)
        out += b"\x00" * 8
    return out


def block_bytes(classname: str, timestep: int, time: float, instances, max_perfs=0) -> bytes:
    out = name(classname, 8) + b"\x00" * 8
    out += f32(timestep) + f32(time) + f32(len(instances)) + f32(len(instances)) + f32(max_perfs)
    for instancename, values in instances:
        out += b"\x00" * 8 + name(instancename, 8) + b"\x00" * 64
        out += b"".join(f32(v) for v in values)
    out += b"\x00" * 8
    return out


def plot_bytes(classes: dict, blocks, stop=True, **header_kwargs) -> bytes:
    out = header_bytes(num_classes=len(classes), **header_kwargs)
    out += catalog_bytes(classes)
    for block in blocks:
        out += block_bytes(*block)
    if stop:
        out += b"STOP    "
    return out


SAMPLE_CLASSES = {
    "FIELD": ["QOP", "QWP", "GOR", "PAVG"],
    "WELL": ["QOP", "BHP"],
}

# Timestep 3 is written before timestep 2 to exercise sorting
SAMPLE_BLOCKS = [
    ("FIELD", 1, 1.0, [("NETWORK", [100.0, 10.0, 0.5, 250.0]), ("OTHER", [1.0, 2.0, 3.0, 4.0])]),
    ("WELL", 1, 1.0, [("W1", [50.0, 200.0]), ("W2", [50.0, 210.0])], 2),
    ("FIELD", 3, 30.5, [("NETWORK", [120.0, 14.0, 0.75, 245.0])]),
    ("FIELD", 2, 15.25, [("NETWORK", [110.0, 12.0, 0.625, 248.0])]),
    ("WELL", 2, 15.25, [("W1", [55.0, 198.0])], 2),
]


@pytest.fixture
def sample_bytes() -> bytes:
    return plot_bytes(SAMPLE_CLASSES, SAMPLE_BLOCKS)


@pytest.fixture
def sample_file(tmp_path, sample_bytes):
    path = tmp_path / "SPE1.plt"
    path.write_bytes(sample_bytes)
    return path
