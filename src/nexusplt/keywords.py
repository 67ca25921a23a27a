"""
Nexus to ECL summary keyword mapping.

Only field level variables are translated. Adding a class is a matter of
adding a table to `KEYWORD_TABLES`.
"""

import logging
import warnings
from collections.abc import Mapping
from types import MappingProxyType

from nexusplt.errors import UnmappedKeyword
from nexusplt.names import ClassName, VarName

logger = logging.getLogger(__name__)

FIELD = ClassName.from_str("FIELD")

FIELD_KEYWORDS = MappingProxyType(
    {
        VarName.from_str(nex_kw): ecl_kw
        for nex_kw, ecl_kw in {
            "QOP": "FOPR",
            "QWP": "FWPR",
            "QGP": "FGPR",
            "GOR": "FGOR",
            "WCUT": "FWCT",
            "COP": "FOPT",
            "CWP": "FWPT",
            "CGP": "FGPT",
            "QWI": "FWIR",
            "QGI": "FGIR",
            "CWI": "FWIT",
            "CGI": "FGIT",
            "QPP": "FCPR",
            "CPP": "FCPC",
        }.items()
    }
)

KEYWORD_TABLES = MappingProxyType({FIELD: FIELD_KEYWORDS})


class KeywordMapper:
    """
    Look up ECL summary keywords for Nexus variables.

    Parameters
    ----------
    tables : Mapping[ClassName, Mapping[VarName, str]], optional
        Target keyword of each source variable, per class. Defaults to
        `KEYWORD_TABLES`.
    """

    def __init__(self, tables: Mapping[ClassName, Mapping[VarName, str]] | None = None):
        self.tables = KEYWORD_TABLES if tables is None else tables

    def __repr__(self) -> str:
        return f"KeywordMapper(classes={[str(c) for c in self.tables]})"

    def get(self, classname: ClassName, varname: VarName) -> str | None:
        "Target keyword, or None without reporting anything."
        return self.tables.get(classname, {}).get(varname)

    def lookup(self, classname: ClassName, varname: VarName) -> str | None:
        """
        Target keyword for a source variable.

        A miss is not an error: an `UnmappedKeyword` warning is issued and
        logged, and None is returned so the variable can be left out of the
        output. Escalate with ``warnings.simplefilter("error", UnmappedKeyword)``.

        Parameters
        ----------
        classname : ClassName
        varname : VarName

        Returns
        -------
        str or None
        """
        keyword = self.get(classname, varname)
        if keyword is None:
            message = (
                f"could not convert nexus variable {varname} (class {classname}) to ecl keyword"
            )
            logger.warning("%s: %s", UnmappedKeyword.__name__, message)
            warnings.warn(message, UnmappedKeyword, stacklevel=2)
        return keyword
