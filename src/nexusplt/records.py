"""
Nexus plot record parsing.

This module decodes the three sections of a Nexus plot (PLT) file: the fixed
header, the per-class variable name catalog, and the sequence of timestep
blocks that hold one value per variable for every instance of a class. The
byte layout of each section is declared once as a tuple of cursor fields.
"""

import logging
import math
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import asdict, dataclass
from typing import Any, ClassVar

import pandas as pd

from nexusplt.cursor import ByteCursor, Float32, Int32, Raw, Skip
from nexusplt.errors import BadHeader
from nexusplt.names import ClassName, InstanceName, VarName
from nexusplt.units import UnitSystem

logger = logging.getLogger(__name__)

MAGIC = b"PLOT  BIN   "
STOP = ClassName(b"STOP    ")

HEADER_FIELDS = ("num_classes", "day", "month", "year", "nx", "ny", "nz", "ncomp")

MAGIC_LAYOUT = (
    Skip(4),
    Raw("magic", len(MAGIC)),
)

UNIT_LAYOUT = (
    Skip(6),  # plot file version
    Skip(6),  # simulator
    Skip(6),  # simulator version
    Skip(6),  # simulator version
    Raw("unit_system", 6),
)

DIMENSION_LAYOUT = (
    Skip(530 + 264),
    *(Int32(name) for name in HEADER_FIELDS),
)

BLOCK_LAYOUT = (
    Skip(8),
    Float32("timestep"),
    Float32("time"),
    Float32("num_items"),
    Float32("max_items"),
    Float32("max_perfs"),
)

INSTANCE_LAYOUT = (
    Skip(8),
    Raw("instancename", InstanceName.WIDTH),
    Skip(64),
)

BLOCK_TRAILER = 8
CATALOG_PREFIX = 8
TIME_VARNAME = 4
CATALOG_TRAILER = 8


@dataclass(frozen=True)
class Header:
    """
    Fixed header of a Nexus plot file.

    Parameters
    ----------
    unit_system : UnitSystem
        Unit system every value in the file is expressed in.
    num_classes : int
        Number of classes declared in the variable catalog.
    day, month, year : int
        Simulation start date.
    nx, ny, nz : int
        Grid dimensions.
    ncomp : int
        Number of components.
    """

    unit_system: UnitSystem
    num_classes: int
    day: int
    month: int
    year: int
    nx: int
    ny: int
    nz: int
    ncomp: int

    N_BYTES: ClassVar[int] = 4 + len(MAGIC) + 5 * 6 + 530 + 264 + 8 * 4

    @property
    def start_date(self) -> pd.Timestamp:
        """
        Simulation start date.

        Returns
        -------
        pd.Timestamp
            Midnight UTC on the start day.
        """
        return pd.Timestamp(year=self.year, month=self.month, day=self.day, tz="UTC")

    @property
    def dims(self) -> tuple[int, int, int]:
        return (self.nx, self.ny, self.nz)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert header to dictionary.

        Returns
        -------
        dict[str, Any]
            Header fields, with the unit system given by its enum name.
        """
        fields = asdict(self)
        fields["unit_system"] = self.unit_system.name
        return fields


@dataclass(frozen=True)
class DataPoint:
    """
    One value of one variable for one instance at one timestep.

    Parameters
    ----------
    timestep : int
        Nexus timestep number.
    time : float
        Simulation time in days since the start date.
    max_perfs : int
        Maximum number of perforations declared by the block.
    classname : ClassName
    instancename : InstanceName
    varname : VarName
    value : float
    """

    timestep: int
    time: float
    max_perfs: int
    classname: ClassName
    instancename: InstanceName
    varname: VarName
    value: float


def _check_non_negative(values: Mapping[str, int] | Sequence[int], what: str) -> None:
    items = values.items() if isinstance(values, Mapping) else enumerate(values)
    for key, value in items:
        if value < 0:
            raise BadHeader(f"Negative {what} {key}={value}, corrupted file")


def _float_to_int(value: float, name: str) -> int:
    # Counts are stored as floats; truncate toward zero like a C cast
    if not math.isfinite(value):
        raise BadHeader(f"Non-finite {name} ({value}) in record block")
    return int(value)


def read_header(cursor: ByteCursor) -> Header:
    """
    Read and validate the fixed header.

    Parameters
    ----------
    cursor : ByteCursor
        Cursor positioned at the start of the stream.

    Returns
    -------
    Header

    Raises
    ------
    BadHeader
        If the magic tag or unit system tag is wrong, any integer field is
        negative, or the start date is not a calendar date.
    TruncatedInput
        If the stream ends inside the header.
    """
    magic = cursor.read_layout(MAGIC_LAYOUT)["magic"]
    if magic != MAGIC:
        raise BadHeader(f"Could not verify file type: magic tag {magic!r}")

    unit_system = UnitSystem.from_tag(cursor.read_layout(UNIT_LAYOUT)["unit_system"])

    fields = cursor.read_layout(DIMENSION_LAYOUT)
    _check_non_negative(fields, "header field")

    header = Header(unit_system=unit_system, **fields)
    try:
        header.start_date
    except ValueError:
        raise BadHeader(
            f"Invalid start date {header.day}/{header.month}/{header.year}, corrupted file"
        ) from None
    logger.debug("Read header %s", header.to_dict())
    return header


def read_varnames(
    cursor: ByteCursor, num_classes: int
) -> dict[ClassName, tuple[VarName, ...]]:
    """
    Read the variable name catalog.

    Parameters
    ----------
    cursor : ByteCursor
        Cursor positioned directly after the header.
    num_classes : int
        Number of classes declared by the header.

    Returns
    -------
    dict[ClassName, tuple[VarName, ...]]
        Variable names of each class, in file order. The order defines which
        value in a record belongs to which variable.
    """
    cursor.skip(CATALOG_PREFIX)
    classnames = [
        ClassName(cursor.read_exact(ClassName.WIDTH)) for _ in range(num_classes)
    ]

    cursor.skip(CATALOG_PREFIX)
    vars_in_class = cursor.read_i32be_array(num_classes).tolist()
    _check_non_negative(vars_in_class, "variable count for class")

    cursor.skip(CATALOG_PREFIX)
    varnames = {}
    for classname, count in zip(classnames, vars_in_class):
        cursor.skip(TIME_VARNAME)
        packed = cursor.read_exact(count * VarName.WIDTH)
        varnames[classname] = tuple(
            VarName(packed[k : k + VarName.WIDTH])
            for k in range(0, len(packed), VarName.WIDTH)
        )
        cursor.skip(CATALOG_TRAILER)

    logger.debug(
        "Read catalog: %s",
        {str(name): [str(v) for v in names] for name, names in varnames.items()},
    )
    return varnames


def iter_records(
    cursor: ByteCursor, varnames: Mapping[ClassName, Sequence[VarName]]
) -> Iterator[DataPoint]:
    """
    Yield data points from timestep blocks until the STOP sentinel.

    A class that is missing from `varnames` is read as having no variables,
    so its instances contribute no values.

    Parameters
    ----------
    cursor : ByteCursor
        Cursor positioned directly after the variable catalog.
    varnames : Mapping[ClassName, Sequence[VarName]]
        Variable catalog from `read_varnames`.

    Yields
    ------
    DataPoint
        Data points in file order.
    """
    unknown = set()
    while True:
        classname = ClassName(cursor.read_exact(ClassName.WIDTH))
        if classname == STOP:
            return

        block = cursor.read_layout(BLOCK_LAYOUT)
        timestep = _float_to_int(block["timestep"], "timestep")
        time = block["time"]
        num_items = _float_to_int(block["num_items"], "item count")
        max_perfs = _float_to_int(block["max_perfs"], "max perforations")

        names = varnames.get(classname)
        if names is None:
            names = ()
            if classname not in unknown:
                unknown.add(classname)
                logger.debug("Class %r is not in the catalog, reading no values", str(classname))

        for _ in range(num_items):
            instancename = InstanceName(cursor.read_layout(INSTANCE_LAYOUT)["instancename"])
            values = cursor.read_f32be_array(len(names))
            for varname, value in zip(names, values.tolist()):
                yield DataPoint(
                    timestep=timestep,
                    time=time,
                    max_perfs=max_perfs,
                    classname=classname,
                    instancename=instancename,
                    varname=varname,
                    value=value,
                )

        cursor.skip(BLOCK_TRAILER)


def read_records(
    cursor: ByteCursor, varnames: Mapping[ClassName, Sequence[VarName]]
) -> list[DataPoint]:
    """
    Read every timestep block into a list of data points.

    Any error aborts the read; nothing already decoded is returned.
    """
    return list(iter_records(cursor, varnames))
