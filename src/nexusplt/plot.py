"""
Nexus plot file reader.

This module provides the NexusPlot class, the decoded and read-only content
of one Nexus plot (PLT) file, and `load`, which reads one from a path, a byte
string, or an open binary stream.
"""

import logging
import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import BinaryIO

import numpy as np
import pandas as pd

from nexusplt.cursor import ByteCursor
from nexusplt.errors import OpenFailure
from nexusplt.names import ClassName, InstanceName, VarName
from nexusplt.records import DataPoint, Header, iter_records, read_header, read_varnames

logger = logging.getLogger(__name__)


def load(source: str | os.PathLike | bytes | bytearray | BinaryIO) -> "NexusPlot":
    """
    Load a Nexus plot file.

    Parameters
    ----------
    source : str, PathLike, bytes or binary file object
        A path to a plot file, its raw content, or an open binary stream
        positioned at the start of the plot.

    Returns
    -------
    NexusPlot

    Raises
    ------
    OpenFailure
        If `source` is a path that cannot be opened.
    BadHeader
        If the content is not a valid plot file.
    TruncatedInput
        If the content ends before the STOP sentinel.
    """
    if isinstance(source, (str, os.PathLike)):
        return NexusPlot.from_file(source)
    return NexusPlot.from_stream(source)


class NexusPlot:
    """
    Decoded Nexus plot.

    Holds the header, the per-class variable catalog and every data point in
    the order it was read. Instances are built once per load and are not
    modified afterwards.
    """

    __slots__ = ("_header", "_varnames", "_data")

    def __init__(
        self,
        header: Header,
        varnames: Mapping[ClassName, Sequence[VarName]],
        data: Sequence[DataPoint],
    ):
        """
        Initialize NexusPlot with decoded content.

        Parameters
        ----------
        header : Header
            Decoded file header.
        varnames : Mapping[ClassName, Sequence[VarName]]
            Variable names declared for each class.
        data : Sequence[DataPoint]
            Data points in file order.
        """
        self._header = header
        self._varnames = {name: tuple(names) for name, names in varnames.items()}
        self._data = tuple(data)

    @classmethod
    def from_file(cls, filename: Path | str) -> "NexusPlot":
        """
        Create a NexusPlot by reading a plot file.

        Parameters
        ----------
        filename : Path or str
            Path to the Nexus plot file.

        Returns
        -------
        NexusPlot

        Raises
        ------
        OpenFailure
            If the file cannot be opened.
        """
        path = Path(filename)
        try:
            f = path.open("rb")
        except OSError as exc:
            raise OpenFailure(f"Could not open file {path}") from exc

        with f:
            logger.debug("Loading plot file %s", path)
            return cls.from_stream(f)

    @classmethod
    def from_stream(cls, source: bytes | bytearray | BinaryIO) -> "NexusPlot":
        """
        Create a NexusPlot from raw content or an open binary stream.

        The whole plot is decoded before anything is returned, so a corrupt or
        truncated stream raises without yielding partial data.
        """
        cursor = ByteCursor(source)
        header = read_header(cursor)
        varnames = read_varnames(cursor, header.num_classes)
        data = list(iter_records(cursor, varnames))
        logger.debug(
            "Decoded %d data points over %d classes (%d bytes)",
            len(data),
            header.num_classes,
            cursor.offset,
        )
        return cls(header=header, varnames=varnames, data=data)

    def __repr__(self) -> str:
        return (
            f"NexusPlot(unit_system={self._header.unit_system.name}, "
            f"classes={len(self._varnames)}, data_points={len(self._data)})"
        )

    def __len__(self) -> int:
        return len(self._data)

    @property
    def header(self) -> Header:
        return self._header

    @property
    def varnames(self) -> Mapping[ClassName, tuple[VarName, ...]]:
        """
        Variable names declared for each class in the file catalog.

        Returns
        -------
        Mapping[ClassName, tuple[VarName, ...]]
            A copy of the catalog; class order follows the file.
        """
        return dict(self._varnames)

    @property
    def data(self) -> tuple[DataPoint, ...]:
        return self._data

    def select(
        self,
        classname: ClassName | str | None = None,
        instancename: InstanceName | str | None = None,
        varname: VarName | str | None = None,
    ) -> list[DataPoint]:
        """
        Select data points by class, instance and variable name.

        Parameters
        ----------
        classname, instancename, varname : name object, str or None
            Exact names to match. Strings are padded to the fixed width.
            None matches anything.

        Returns
        -------
        list[DataPoint]
            Matching data points in file order.
        """
        wanted = [
            (attr, name if not isinstance(name, str) else kind.from_str(name))
            for attr, kind, name in (
                ("classname", ClassName, classname),
                ("instancename", InstanceName, instancename),
                ("varname", VarName, varname),
            )
            if name is not None
        ]
        return [
            dp for dp in self._data if all(getattr(dp, attr) == name for attr, name in wanted)
        ]

    def classnames(self) -> list[ClassName]:
        "Distinct class names in the data, in first-encounter order."
        return list(dict.fromkeys(dp.classname for dp in self._data))

    def instancenames(self, classname: ClassName | str | None = None) -> list[InstanceName]:
        "Distinct instance names, optionally of one class, in first-encounter order."
        points = self._data if classname is None else self.select(classname=classname)
        return list(dict.fromkeys(dp.instancename for dp in points))

    def varnames_of(self, classname: ClassName | str) -> list[VarName]:
        "Distinct variable names present in the data for a class, in first-encounter order."
        return list(dict.fromkeys(dp.varname for dp in self.select(classname=classname)))

    def timesteps(self) -> np.ndarray:
        """
        Distinct timestep numbers.

        Returns
        -------
        np.ndarray
            Timesteps in ascending order.
        """
        return np.unique(np.fromiter((dp.timestep for dp in self._data), dtype=np.int64))

    def to_dataframe(self) -> pd.DataFrame:
        """
        Data points as a DataFrame.

        Returns
        -------
        pd.DataFrame
            One row per data point in file order, with columns ``timestep``,
            ``time``, ``max_perfs``, ``classname``, ``instancename``,
            ``varname`` and ``value``. Names are given as stripped strings.
        """
        columns = ["timestep", "time", "max_perfs", "classname", "instancename", "varname", "value"]
        df = pd.DataFrame(
            [
                (
                    dp.timestep,
                    dp.time,
                    dp.max_perfs,
                    str(dp.classname),
                    str(dp.instancename),
                    str(dp.varname),
                    dp.value,
                )
                for dp in self._data
            ],
            columns=columns,
        )
        return df.astype(
            {"timestep": "int64", "time": "float64", "max_perfs": "int64", "value": "float64"}
        )
