"""
Sequential byte cursor and declarative field layouts.

The Nexus plot format is a flat run of "skip N bytes, read M bytes" sections.
Each section is described as a tuple of field descriptors (`Skip`, `Raw`,
`Int32`, `Float32`) which `ByteCursor.read_layout` consumes in order. Integers
are stored big-endian, and floats are stored as IEEE-754 bit patterns inside
32-bit integer slots, so float fields are read as integers and then bit-cast.
"""

import io
from dataclasses import dataclass
from typing import BinaryIO, Union

import numpy as np

from nexusplt.errors import TruncatedInput

WORD = 4


def reinterpret_as_float(word: int) -> float:
    """
    Bit-cast a signed 32-bit integer to an IEEE-754 binary32 value.

    No numeric conversion takes place: the 32 bits of `word` are viewed as a
    float. ``reinterpret_as_float(0x3F800000)`` is ``1.0``.

    Parameters
    ----------
    word : int
        Integer in the signed 32-bit range.

    Returns
    -------
    float
        The float with the same bit pattern.
    """
    return float(np.array(word, dtype=np.int32).view(np.float32))


def reinterpret_as_floats(words: np.ndarray) -> np.ndarray:
    """
    Bit-cast an array of 32-bit integers to float32 without copying values.

    Parameters
    ----------
    words : np.ndarray
        Array of 32-bit integers in any byte order.

    Returns
    -------
    np.ndarray
        Native-order float32 array with the same bit patterns.
    """
    return np.ascontiguousarray(words, dtype=np.int32).view(np.float32)


@dataclass(frozen=True)
class Skip:
    "Advance past `size` bytes without inspecting them."

    size: int


@dataclass(frozen=True)
class Raw:
    "Read `size` raw bytes into `name`."

    name: str
    size: int


@dataclass(frozen=True)
class Int32:
    "Read one big-endian signed 32-bit integer into `name`."

    name: str


@dataclass(frozen=True)
class Float32:
    "Read one big-endian 32-bit word into `name`, bit-cast to float."

    name: str


Field = Union[Skip, Raw, Int32, Float32]


class ByteCursor:
    """
    Position-advancing reader over a finite binary source.

    Every read asks the underlying stream for exactly the number of bytes
    needed and nothing more. The only state is the current offset.

    Parameters
    ----------
    source : bytes or binary file object
        Data to read. ``bytes``-like objects are wrapped in ``io.BytesIO``.
    """

    __slots__ = ("_stream", "offset")

    def __init__(self, source: bytes | bytearray | memoryview | BinaryIO):
        if isinstance(source, (bytes, bytearray, memoryview)):
            source = io.BytesIO(bytes(source))
        self._stream = source
        self.offset = 0

    def __repr__(self) -> str:
        return f"ByteCursor(offset={self.offset})"

    def read_exact(self, n: int) -> bytes:
        """Return exactly `n` bytes and advance, or raise `TruncatedInput`."""
        if n < 0:
            raise ValueError(f"Cannot read a negative number of bytes ({n})")
        # Raw streams such as pipes may return fewer bytes than asked for
        # before the end of input, so only an empty read means EOF
        data = bytearray()
        while len(data) < n:
            chunk = self._stream.read(n - len(data))
            if not chunk:
                raise TruncatedInput(
                    f"Expected {n} bytes at offset {self.offset}, got {len(data)}"
                )
            data += chunk
        self.offset += n
        return bytes(data)

    def skip(self, n: int) -> None:
        """Advance `n` bytes without inspecting them."""
        # Read and discard so non-seekable streams and end of input behave alike
        self.read_exact(n)

    def read_i32be(self) -> int:
        """Read a big-endian signed 32-bit integer in host order."""
        return int.from_bytes(self.read_exact(WORD), "big", signed=True)

    def read_i32be_array(self, count: int) -> np.ndarray:
        """Read `count` big-endian signed 32-bit integers as a native int32 array."""
        raw = self.read_exact(count * WORD)
        if count == 0:
            return np.empty(0, dtype=np.int32)
        return np.frombuffer(raw, dtype=">i4", count=count).astype(np.int32)

    def read_f32be_array(self, count: int) -> np.ndarray:
        """Read `count` big-endian words and bit-cast each to float32."""
        return reinterpret_as_floats(self.read_i32be_array(count))

    def read_layout(self, layout: tuple[Field, ...]) -> dict[str, bytes | int | float]:
        """
        Consume a sequence of field descriptors.

        Parameters
        ----------
        layout : tuple of Skip, Raw, Int32 or Float32
            Fields in stream order.

        Returns
        -------
        dict
            Values of every named field, keyed by field name.
        """
        fields = {}
        for item in layout:
            if isinstance(item, Skip):
                self.skip(item.size)
            elif isinstance(item, Raw):
                fields[item.name] = self.read_exact(item.size)
            elif isinstance(item, Int32):
                fields[item.name] = self.read_i32be()
            elif isinstance(item, Float32):
                fields[item.name] = reinterpret_as_float(self.read_i32be())
            else:
                raise TypeError(f"Unknown layout field {item!r}")
        return fields
