import re
from typing import Dict, List, Optional, Sequence

import pandas as pd
from loguru import logger

from fbref_tables.exceptions import SchemaError
from fbref_tables.normalization.coercion import coerce_column
from fbref_tables.parsing.tables import Grid


def canonicalize_name(name: str, position: int) -> str:
    """Converts a header like 'CrdY' or '# Pl' into 'crd_y' / 'number_pl'."""
    text = str(name).replace("%", " percent ").replace("#", " number ")
    text = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", text)  # camelCase boundaries
    text = re.sub(r"[^a-z0-9]+", "_", text.lower()).strip("_")
    return text or f"column_{position}"


def dedupe_names(names: Sequence[str]) -> List[str]:
    """Disambiguates repeated names with _2, _3, ... suffixes."""
    seen: Dict[str, int] = {}
    used = set(names)
    result: List[str] = []
    for name in names:
        if name not in seen:
            seen[name] = 1
            result.append(name)
            continue
        count = seen[name]
        candidate = f"{name}_{count + 1}"
        while candidate in used:
            count += 1
            candidate = f"{name}_{count + 1}"
        seen[name] = count + 1
        used.add(candidate)
        result.append(candidate)
    return result


def needs_header_promotion(grid: Grid) -> bool:
    """True when the first header cell is blank.

    FBref's grouped tables open with an over-header row ('', 'Playing Time',
    'Performance', ...) whose first cell is empty; the real names sit in the
    next row.
    """
    return not grid[0][0].strip()


def normalize(
    grid: Grid,
    table_index: int,
    expected_column_count: int,
    numeric_range_start: int,
    numeric_range_end: Optional[int] = None,
    promote_header: Optional[bool] = None,
    league: Optional[str] = None,
    extra_numeric_columns: Sequence[int] = (),
) -> pd.DataFrame:
    """Turns a raw grid into a DataFrame with a fixed width and numeric stat columns.

    Row 0 of the grid supplies the column names. When the header is dirty
    (see `needs_header_promotion`, or `promote_header=True`) row 0 is dropped,
    row 1 is promoted to names and the names are canonicalized. The result is
    truncated to `expected_column_count` columns and the 1-based inclusive
    range `numeric_range_start..numeric_range_end`, plus any 1-based positions
    in `extra_numeric_columns`, is coerced to float64.

    Raises:
        SchemaError: if the grid is empty, narrower than
            `expected_column_count` after header handling, or the numeric
            positions fall outside the kept columns.
    """
    context = {"league": league, "table_index": table_index}
    end = numeric_range_end or expected_column_count
    if not 1 <= numeric_range_start <= end <= expected_column_count:
        raise SchemaError(
            f"Numeric range {numeric_range_start}..{end} is not within "
            f"columns 1..{expected_column_count}",
            **context,
        )
    bad_extra = [p for p in extra_numeric_columns if not 1 <= p <= expected_column_count]
    if bad_extra:
        raise SchemaError(
            f"Extra numeric columns {bad_extra} are not within columns 1..{expected_column_count}",
            **context,
        )
    if not grid or not grid[0]:
        raise SchemaError("Table is empty", **context)

    promote = needs_header_promotion(grid) if promote_header is None else promote_header
    if promote:
        if len(grid) < 2:
            raise SchemaError("Dirty header but no row to promote", **context)
        names = dedupe_names(
            [canonicalize_name(n, i) for i, n in enumerate(grid[1], start=1)]
        )
        rows = grid[2:]
        logger.debug(f"Promoted row 1 to header for table {table_index} ({league})")
    else:
        names = dedupe_names(
            [n.strip() or f"column_{i}" for i, n in enumerate(grid[0], start=1)]
        )
        rows = grid[1:]

    if expected_column_count > len(names):
        raise SchemaError(
            f"Expected {expected_column_count} columns but the table has {len(names)}",
            **context,
        )

    names = names[:expected_column_count]
    frame = pd.DataFrame(
        [row[:expected_column_count] for row in rows], columns=names, dtype="object"
    )

    where = f" (league {league!r}, table {table_index})" if league else f" (table {table_index})"
    positions = sorted(set(range(numeric_range_start, end + 1)) | set(extra_numeric_columns))
    for position in positions:
        column = names[position - 1]
        frame[column] = coerce_column(frame[column], name=column, context=where)

    logger.debug(
        f"Normalized table {table_index} ({league}): {len(frame)} rows x {len(names)} columns"
    )
    return frame
