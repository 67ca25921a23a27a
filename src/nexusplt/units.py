"""
Nexus unit systems.

A plot file declares one unit system in its header as a 6-byte tag. Each unit
system fixes the unit string used for every physical quantity (`Measure`).
Source keywords are tied to a quantity through `KEYWORD_MEASURES`, which is
how the summary translation finds the unit of each output variable.
"""

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType

from nexusplt.errors import BadHeader
from nexusplt.names import VarName


class Measure(Enum):
    "Physical quantities that have a unit in every unit system."

    COMPRESSIBILITY = "compressibility"
    DENSITY = "density"
    FORMATION_VOLUME_FACTOR_GAS = "formation_volume_factor_gas"
    FORMATION_VOLUME_FACTOR_OIL = "formation_volume_factor_oil"
    FRACTION = "fraction"
    GAS_LIQUID_RATIO = "gas_liquid_ratio"
    LENGTH = "length"
    MOLES = "moles"
    PERMEABILITY = "permeability"
    PRESSURE = "pressure"
    PRESSURE_ABSOLUTE = "pressure_absolute"
    RESERVOIR_RATES = "reservoir_rates"
    RESERVOIR_VOLUMES = "reservoir_volumes"
    SURFACE_RATES_GAS = "surface_rates_gas"
    SURFACE_RATES_LIQUID = "surface_rates_liquid"
    SURFACE_VOLUMES_GAS = "surface_volumes_gas"
    SURFACE_VOLUMES_LIQUID = "surface_volumes_liquid"
    TEMPERATURE = "temperature"
    TIME = "time"
    VISCOSITY = "viscosity"
    VOLUME = "volume"
    WATER_CUT = "water_cut"


_M = Measure

_METRIC_COMMON = {
    _M.DENSITY: "KG/M3",
    _M.FORMATION_VOLUME_FACTOR_GAS: "RM3/SM3",
    _M.FORMATION_VOLUME_FACTOR_OIL: "RM3/SM3",
    _M.FRACTION: "",
    _M.GAS_LIQUID_RATIO: "SM3/SM3",
    _M.LENGTH: "M",
    _M.MOLES: "KG-M",
    _M.PERMEABILITY: "MD",
    _M.RESERVOIR_RATES: "RM3/DAY",
    _M.RESERVOIR_VOLUMES: "kRM3",
    _M.SURFACE_RATES_GAS: "SM3/DAY",
    _M.SURFACE_RATES_LIQUID: "SM3/DAY",
    _M.SURFACE_VOLUMES_GAS: "kSM3",
    _M.SURFACE_VOLUMES_LIQUID: "kSM3",
    _M.TEMPERATURE: "C",
    _M.TIME: "DAY",
    _M.VISCOSITY: "CP",
    _M.VOLUME: "M3",
    _M.WATER_CUT: "SM3/SM3",
}

_ENGLISH = {
    _M.COMPRESSIBILITY: "PSI-1",
    _M.DENSITY: "LB/FT3",
    _M.FORMATION_VOLUME_FACTOR_GAS: "RB/MSCF",
    _M.FORMATION_VOLUME_FACTOR_OIL: "RB/STB",
    _M.FRACTION: "",
    _M.GAS_LIQUID_RATIO: "MSCF/STB",
    _M.LENGTH: "FT",
    _M.MOLES: "LB-M",
    _M.PERMEABILITY: "MD",
    _M.PRESSURE: "PSI",
    _M.PRESSURE_ABSOLUTE: "PSIA",
    _M.RESERVOIR_RATES: "RB/DAY",
    _M.RESERVOIR_VOLUMES: "kRB",
    _M.SURFACE_RATES_GAS: "MSCF/DAY",
    _M.SURFACE_RATES_LIQUID: "STB/DAY",
    _M.SURFACE_VOLUMES_GAS: "MMSCF",
    _M.SURFACE_VOLUMES_LIQUID: "kSTB",
    _M.TEMPERATURE: "F",
    _M.TIME: "DAY",
    _M.VISCOSITY: "CP",
    _M.VOLUME: "FT3",
    _M.WATER_CUT: "STB/STB",
}

_METRIC_BARS = {
    **_METRIC_COMMON,
    _M.COMPRESSIBILITY: "BARS-1",
    _M.PRESSURE: "BARS",
    _M.PRESSURE_ABSOLUTE: "BARSA",
}

_METRIC_KPA = {
    **_METRIC_COMMON,
    _M.COMPRESSIBILITY: "KPA-1",
    _M.PRESSURE: "KPA",
    _M.PRESSURE_ABSOLUTE: "KPAA",
}

_METRIC_KGCM2 = {
    **_METRIC_COMMON,
    _M.COMPRESSIBILITY: "KG/CM2-1",
    _M.PRESSURE: "KG/CM2",
    _M.PRESSURE_ABSOLUTE: "KG/CM2A",
}

_LAB = {
    _M.COMPRESSIBILITY: "PSI-1",
    _M.DENSITY: "GM/CC",
    _M.FORMATION_VOLUME_FACTOR_GAS: "RCC/SCC",
    _M.FORMATION_VOLUME_FACTOR_OIL: "RCC/SCC",
    _M.FRACTION: "",
    _M.GAS_LIQUID_RATIO: "SCC/SCC",
    _M.LENGTH: "CM",
    _M.MOLES: "GM-M",
    _M.PERMEABILITY: "MD",
    _M.PRESSURE: "PSI",
    _M.PRESSURE_ABSOLUTE: "PSIA",
    _M.RESERVOIR_RATES: "RCC/HR",
    _M.RESERVOIR_VOLUMES: "RCC",
    _M.SURFACE_RATES_GAS: "SCC/HR",
    _M.SURFACE_RATES_LIQUID: "SCC/HR",
    _M.SURFACE_VOLUMES_GAS: "SCC",
    _M.SURFACE_VOLUMES_LIQUID: "SCC",
    _M.TEMPERATURE: "C",
    _M.TIME: "HR",
    _M.VISCOSITY: "CP",
    _M.VOLUME: "CC",
    _M.WATER_CUT: "SCC/SCC",
}

# Nexus source keyword -> physical quantity
KEYWORD_MEASURES = MappingProxyType(
    {
        VarName.from_str(kw): measure
        for kw, measure in {
            "QOP": _M.SURFACE_RATES_LIQUID,
            "QWP": _M.SURFACE_RATES_LIQUID,
            "QGP": _M.SURFACE_RATES_GAS,
            "GOR": _M.GAS_LIQUID_RATIO,
            "WCUT": _M.WATER_CUT,
            "COP": _M.SURFACE_VOLUMES_LIQUID,
            "CWP": _M.SURFACE_VOLUMES_LIQUID,
            "CGP": _M.SURFACE_VOLUMES_GAS,
            "QWI": _M.SURFACE_RATES_LIQUID,
            "QGI": _M.SURFACE_RATES_GAS,
            "CWI": _M.SURFACE_VOLUMES_LIQUID,
            "CGI": _M.SURFACE_VOLUMES_GAS,
            "QPP": _M.SURFACE_RATES_LIQUID,
            "CPP": _M.SURFACE_VOLUMES_LIQUID,
        }.items()
    }
)


class UnitSystem(Enum):
    "Unit systems a plot file can declare, keyed by their 6-byte header tag."

    ENGLISH = b"ENGLIS"
    METRIC_BARS = b"METBAR"
    METRIC_KPA = b"METKPA"
    METRIC_KGCM2 = b"METKG/"
    LAB = b"LAB   "

    @classmethod
    def from_tag(cls, tag: bytes) -> "UnitSystem":
        """
        Resolve a header tag by exact match.

        Raises
        ------
        BadHeader
            If the tag names no known unit system.
        """
        try:
            return cls(bytes(tag))
        except ValueError:
            raise BadHeader(f"Unknown unit system {bytes(tag)!r}") from None

    @property
    def units(self) -> MappingProxyType:
        "Immutable mapping from every `Measure` to its unit string."
        return _UNIT_TABLES[self]

    def unit_for(self, measure: Measure) -> str:
        return _UNIT_TABLES[self][measure]

    def unit_for_keyword(
        self, varname: VarName, measures: Mapping[VarName, Measure] | None = None
    ) -> str:
        """
        Unit string of a Nexus source keyword in this unit system.

        Parameters
        ----------
        varname : VarName
            Source keyword.
        measures : Mapping[VarName, Measure], optional
            Physical quantity of each keyword. Defaults to `KEYWORD_MEASURES`.

        Raises
        ------
        KeyError
            If the keyword has no known physical quantity.
        """
        measures = KEYWORD_MEASURES if measures is None else measures
        try:
            measure = measures[varname]
        except KeyError:
            raise KeyError(f"No physical quantity known for keyword {varname}") from None
        return self.unit_for(measure)


_UNIT_TABLES = MappingProxyType(
    {
        UnitSystem.ENGLISH: MappingProxyType(_ENGLISH),
        UnitSystem.METRIC_BARS: MappingProxyType(_METRIC_BARS),
        UnitSystem.METRIC_KPA: MappingProxyType(_METRIC_KPA),
        UnitSystem.METRIC_KGCM2: MappingProxyType(_METRIC_KGCM2),
        UnitSystem.LAB: MappingProxyType(_LAB),
    }
)
