from pathlib import Path
from typing import Union

import pandas as pd
from loguru import logger

from fbref_tables.exceptions import OutputError


def write_table(df: pd.DataFrame, path: Union[str, Path]) -> Path:
    """Writes `df` as CSV with a header row, replacing any existing file."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(path, index=False, encoding="utf-8")
    except OSError as e:
        raise OutputError(f"Failed to write {path}: {e}") from e
    logger.success(f"Wrote {len(df)} rows to {path}")
    return path
