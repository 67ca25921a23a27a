"""
Fixed-width identifiers used as lookup keys in Nexus plot files.

Class, instance and variable names are stored as space-padded ASCII of a
fixed width. They are compared on their exact bytes, padding included, so
``ClassName(b"FIELD   ")`` and ``ClassName(b"FIELD  \\x00")`` are different keys.
"""

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True, order=True)
class FixedName:
    "A fixed-width byte identifier."

    raw: bytes

    WIDTH: ClassVar[int] = 0

    def __post_init__(self):
        if not isinstance(self.raw, bytes):
            raise TypeError(f"{type(self).__name__} expects bytes, got {type(self.raw).__name__}")
        if len(self.raw) != self.WIDTH:
            raise ValueError(
                f"{type(self).__name__} must be exactly {self.WIDTH} bytes, got {len(self.raw)}"
            )

    @classmethod
    def from_str(cls, text: str):
        """
        Build a name from text, right-padded with spaces to the fixed width.
        """
        raw = text.encode("ascii")
        if len(raw) > cls.WIDTH:
            raise ValueError(f"{text!r} is longer than {cls.WIDTH} bytes")
        return cls(raw.ljust(cls.WIDTH, b" "))

    @property
    def text(self) -> str:
        "The name with trailing padding removed."
        return self.raw.decode("ascii", errors="replace").rstrip(" \x00")

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True, order=True)
class ClassName(FixedName):
    WIDTH: ClassVar[int] = 8


@dataclass(frozen=True, order=True)
class InstanceName(FixedName):
    WIDTH: ClassVar[int] = 8


@dataclass(frozen=True, order=True)
class VarName(FixedName):
    WIDTH: ClassVar[int] = 4
