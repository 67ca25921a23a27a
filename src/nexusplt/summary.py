"""
Translation of Nexus plots into ECL summary datasets.

`build_summary` selects the field level records of a plot, maps their Nexus
keywords to ECL summary keywords, and hands variables, timesteps and values to
a summary writer. Writers follow the allocate / add variable / add timestep /
set value contract of `SummaryWriter`; `DatasetWriter` is an in-memory writer
that renders the result as an xarray Dataset.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from operator import attrgetter
from typing import Any, Protocol

import numpy as np
import pandas as pd
import xarray as xr

from nexusplt.keywords import KeywordMapper
from nexusplt.names import ClassName, InstanceName, VarName
from nexusplt.plot import NexusPlot
from nexusplt.records import DataPoint
from nexusplt.units import KEYWORD_MEASURES, Measure

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400.0


@dataclass(frozen=True)
class WriterOptions:
    """
    Flags passed to a summary writer on allocation.

    Parameters
    ----------
    formatted : bool
        Write formatted (text) rather than binary files.
    unified : bool
        Write one unified file rather than one file per report step.
    key_join : str
        Separator between keyword and well/group name in summary keys.
    time_in_days : bool
        Report simulation time in days.
    """

    formatted: bool = True
    unified: bool = True
    key_join: str = ":"
    time_in_days: bool = True


class SummaryWriter(Protocol):
    "Sink for a translated summary."

    def add_variable(
        self, keyword: str, wgname: str | None = None, unit: str = "", default: float = 0.0
    ) -> Any: ...

    def add_timestep(self, report_step: int, sim_seconds: float) -> Any: ...

    def set_value(self, tstep: Any, node: Any, value: float) -> None: ...


WriterFactory = Callable[[str, WriterOptions, pd.Timestamp, tuple[int, int, int]], SummaryWriter]


@dataclass
class _Variable:
    keyword: str
    wgname: str | None
    unit: str
    default: float


class DatasetWriter:
    """
    In-memory summary writer.

    Variables and timesteps are recorded as they are added; `to_dataset`
    renders them as an xarray Dataset with one variable per summary key.

    Parameters
    ----------
    case : str
        Case name.
    options : WriterOptions
        Writer flags, kept as dataset attributes.
    start : pd.Timestamp
        Simulation start date.
    dims : tuple[int, int, int]
        Grid dimensions (nx, ny, nz).
    """

    def __init__(
        self,
        case: str,
        options: WriterOptions,
        start: pd.Timestamp,
        dims: tuple[int, int, int],
    ):
        self.case = case
        self.options = options
        self.start = pd.Timestamp(start)
        self.dims = tuple(dims)
        self._variables: dict[str, _Variable] = {}
        self._timesteps: list[tuple[int, float]] = []
        self._values: dict[tuple[int, str], float] = {}

    @classmethod
    def alloc(
        cls,
        case: str,
        options: WriterOptions,
        start: pd.Timestamp,
        dims: tuple[int, int, int],
    ) -> "DatasetWriter":
        "Allocate a writer; matches the `WriterFactory` signature."
        return cls(case=case, options=options, start=start, dims=dims)

    def __repr__(self) -> str:
        return (
            f"DatasetWriter(case={self.case!r}, variables={list(self._variables)}, "
            f"timesteps={len(self._timesteps)})"
        )

    @property
    def keys(self) -> list[str]:
        return list(self._variables)

    def add_variable(
        self, keyword: str, wgname: str | None = None, unit: str = "", default: float = 0.0
    ) -> str:
        """
        Add a summary variable.

        Returns
        -------
        str
            The summary key, used as the node handle.
        """
        key = keyword if wgname is None else f"{keyword}{self.options.key_join}{wgname}"
        if key in self._variables:
            raise ValueError(f"Summary variable {key} already exists")
        self._variables[key] = _Variable(keyword=keyword, wgname=wgname, unit=unit, default=default)
        return key

    def add_timestep(self, report_step: int, sim_seconds: float) -> int:
        """
        Add a timestep.

        Returns
        -------
        int
            Zero-based position of the timestep, used as the timestep handle.
        """
        self._timesteps.append((int(report_step), float(sim_seconds)))
        return len(self._timesteps) - 1

    def set_value(self, tstep: int, node: str, value: float) -> None:
        if not 0 <= tstep < len(self._timesteps):
            raise IndexError(f"No timestep at position {tstep}")
        if node not in self._variables:
            raise KeyError(f"No summary variable {node}")
        self._values[(tstep, node)] = float(value)

    def to_dataset(self) -> xr.Dataset:
        """
        Render the summary as an xarray Dataset.

        Returns
        -------
        xr.Dataset
            Dimension ``time`` with coordinates ``time`` (datetime),
            ``report_step``, ``seconds`` and ``days``. Each summary key is a
            float32 variable with ``units`` and ``keyword`` attributes. Values
            never set hold the variable default.
        """
        n = len(self._timesteps)
        steps = np.array([step for step, _ in self._timesteps], dtype=np.int64)
        seconds = np.array([sec for _, sec in self._timesteps], dtype=np.float64)

        data_vars = {}
        for key, var in self._variables.items():
            values = np.full(n, var.default, dtype=np.float32)
            for pos in range(n):
                if (pos, key) in self._values:
                    values[pos] = self._values[(pos, key)]
            attrs = {"units": var.unit, "keyword": var.keyword}
            if var.wgname is not None:
                attrs["wgname"] = var.wgname
            data_vars[key] = xr.DataArray(values, dims=["time"], attrs=attrs)

        start = self.start.tz_localize(None) if self.start.tzinfo else self.start
        coords = {
            "time": start + pd.to_timedelta(seconds, unit="s"),
            "report_step": ("time", steps),
            "seconds": ("time", seconds),
            "days": ("time", seconds / SECONDS_PER_DAY),
        }
        attrs = {
            "case": self.case,
            "start_date": start.isoformat(),
            "nx": self.dims[0],
            "ny": self.dims[1],
            "nz": self.dims[2],
            "formatted": int(self.options.formatted),
            "unified": int(self.options.unified),
            "key_join": self.options.key_join,
            "time_in_days": int(self.options.time_in_days),
        }
        return xr.Dataset(data_vars=data_vars, coords=coords, attrs=attrs)


@dataclass(frozen=True)
class SummaryNode:
    "A summary variable created for one Nexus source keyword."

    keyword: str
    unit: str
    source: VarName


@dataclass(frozen=True)
class TimestepAxis:
    """
    Ascending unique timesteps of a plot and their simulation times.

    Parameters
    ----------
    timesteps : tuple[int, ...]
        Strictly ascending Nexus timestep numbers.
    times : tuple[float, ...]
        Simulation time in days of each timestep.
    """

    timesteps: tuple[int, ...]
    times: tuple[float, ...]
    _positions: dict[int, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if len(self.timesteps) != len(self.times):
            raise ValueError("timesteps and times must have the same length")
        if any(a >= b for a, b in zip(self.timesteps, self.timesteps[1:])):
            raise ValueError("timesteps must be strictly ascending")
        object.__setattr__(
            self, "_positions", {step: pos for pos, step in enumerate(self.timesteps)}
        )

    @classmethod
    def from_data(cls, data: Iterable[DataPoint]) -> "TimestepAxis":
        """
        Build the axis from data points.

        The time of a timestep is taken from its first data point in file
        order. The result does not depend on the order of the data points
        within a timestep.
        """
        frame = pd.DataFrame(
            [(dp.timestep, dp.time) for dp in data], columns=["timestep", "time"]
        )
        frame = frame.sort_values("timestep", kind="stable").drop_duplicates("timestep")
        return cls(
            timesteps=tuple(int(t) for t in frame["timestep"]),
            times=tuple(float(t) for t in frame["time"]),
        )

    def __len__(self) -> int:
        return len(self.timesteps)

    def position(self, timestep: int) -> int:
        "Zero-based position of a timestep on the axis."
        return self._positions[timestep]


def build_summary(
    case: str,
    plot: NexusPlot,
    *,
    writer_factory: WriterFactory = DatasetWriter.alloc,
    options: WriterOptions | None = None,
    mapper: KeywordMapper | None = None,
    measures: Mapping[VarName, Measure] | None = None,
    classname: ClassName | str = "FIELD",
    instancename: InstanceName | str = "NETWORK",
) -> SummaryWriter:
    """
    Translate a Nexus plot into an ECL summary.

    Parameters
    ----------
    case : str
        Case name passed to the writer.
    plot : NexusPlot
        Decoded plot.
    writer_factory : callable, optional
        Allocates the writer. Defaults to `DatasetWriter.alloc`.
    options : WriterOptions, optional
        Flags for the writer.
    mapper : KeywordMapper, optional
        Keyword lookup. Defaults to the built-in field table.
    measures : Mapping[VarName, Measure], optional
        Physical quantity of each source keyword, used for variable units.
        Entries extend `KEYWORD_MEASURES`, so a custom `mapper` only needs
        the keywords it adds.
    classname, instancename : name or str, optional
        Records to translate. Defaults to the field network aggregate.

    Returns
    -------
    SummaryWriter
        The writer with every variable, timestep and value set.

    Raises
    ------
    KeyError
        If a mapped keyword has no physical quantity in `measures`.

    Notes
    -----
    Every distinct timestep in the plot gets one summary timestep, with report
    step ``position + 1`` and time in seconds. Variables without an ECL
    keyword are reported as `UnmappedKeyword` warnings and skipped.
    """
    mapper = KeywordMapper() if mapper is None else mapper
    options = WriterOptions() if options is None else options
    measures = {**KEYWORD_MEASURES, **(measures or {})}
    if isinstance(classname, str):
        classname = ClassName.from_str(classname)
    if isinstance(instancename, str):
        instancename = InstanceName.from_str(instancename)

    records = sorted(
        plot.select(classname=classname, instancename=instancename),
        key=attrgetter("timestep"),
    )
    axis = TimestepAxis.from_data(plot.data)
    unit_system = plot.header.unit_system

    writer = writer_factory(case, options, plot.header.start_date, plot.header.dims)

    # Create summary variables in first-encounter order
    nodes: dict[VarName, tuple[SummaryNode, Any]] = {}
    values: dict[VarName, list[tuple[int, float]]] = {}
    skipped = set()
    for dp in records:
        if dp.varname in skipped:
            continue
        if dp.varname not in nodes:
            keyword = mapper.lookup(classname, dp.varname)
            if keyword is None:
                skipped.add(dp.varname)
                continue
            node = SummaryNode(
                keyword=keyword,
                unit=unit_system.unit_for_keyword(dp.varname, measures),
                source=dp.varname,
            )
            handle = writer.add_variable(node.keyword, None, node.unit, 0.0)
            nodes[dp.varname] = (node, handle)
            values[dp.varname] = []
        values[dp.varname].append((axis.position(dp.timestep), dp.value))

    # Create summary timesteps
    tsteps = [
        writer.add_timestep(pos + 1, time * SECONDS_PER_DAY)
        for pos, time in enumerate(axis.times)
    ]

    # Set summary values
    for varname, (_, handle) in nodes.items():
        for pos, value in values[varname]:
            writer.set_value(tsteps[pos], handle, value)

    logger.info(
        "Built summary %r: %d variables, %d timesteps, %d unmapped keywords",
        case,
        len(nodes),
        len(axis),
        len(skipped),
    )
    return writer
