"""Best-effort text to number coercion.

`parse_number` never raises: a cell that cannot be read as a number comes back
flagged, and `coerce_column` turns it into NaN so that one bad cell cannot
abort a league's import.
"""
import re
import warnings
from typing import Any, NamedTuple, Optional, Sequence

import numpy as np
import pandas as pd
from loguru import logger

from fbref_tables.exceptions import CoercionWarning

# Placeholders the site uses for "no value"
MISSING_TOKENS = {"", "-", "—", "–", "n/a", "na", "nan"}

# Leading/trailing decoration around a single number: percent, currency, whitespace
DECORATION_CHARS = "%$€£ \t"
_NUMBER_RE = re.compile(r"^[+-]?(?:\d[\d,]*(?:\.\d*)?|\.\d+)$")


class ParsedNumber(NamedTuple):
    value: Optional[float]
    raw: Any
    ok: bool  # False only for non-blank text that could not be parsed


def parse_number(cell: Any) -> ParsedNumber:
    if cell is None:
        return ParsedNumber(None, cell, True)
    if isinstance(cell, (int, float, np.number)) and not isinstance(cell, bool):
        if pd.isna(cell):
            return ParsedNumber(None, cell, True)
        return ParsedNumber(float(cell), cell, True)

    text = str(cell).strip()
    if text.lower() in MISSING_TOKENS:
        return ParsedNumber(None, cell, True)

    cleaned = text.replace("−", "-").strip(DECORATION_CHARS)
    # Exactly one numeric token; commas only as thousands separators
    if not _NUMBER_RE.match(cleaned):
        return ParsedNumber(None, cell, False)
    return ParsedNumber(float(cleaned.replace(",", "")), cell, True)


def coerce_column(values: Sequence[Any], name: str = "", context: str = "") -> pd.Series:
    """Coerces a column to float64 with NaN for missing values.

    Already-numeric input is returned as float64 untouched. Unparseable cells
    are reported once per column through a CoercionWarning.
    """
    if isinstance(values, pd.Series) and pd.api.types.is_numeric_dtype(values.dtype):
        return values.astype("float64")

    parsed = [parse_number(v) for v in values]
    failed = [p.raw for p in parsed if not p.ok]
    if failed:
        sample = ", ".join(repr(v) for v in failed[:3])
        message = (
            f"{len(failed)} cell(s) in column {name!r}{context} could not be parsed "
            f"as numbers and were set to missing (e.g. {sample})"
        )
        logger.warning(message)
        warnings.warn(message, CoercionWarning, stacklevel=2)

    index = values.index if isinstance(values, pd.Series) else None
    return pd.Series(
        [np.nan if p.value is None else p.value for p in parsed],
        index=index,
        dtype="float64",
        name=name or None,
    )
