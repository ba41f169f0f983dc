import re
from typing import Optional, Tuple

import numpy as np
import pandas as pd
from loguru import logger
from pydantic import BaseModel, ConfigDict

from fbref_tables.exceptions import SchemaError

SCORER_RE = re.compile(r"^(.+?)\s+-\s+(\d+)$")


class SquadColumns(BaseModel):
    """Maps the logical inputs of the squad metrics to FBref's canonical column names."""

    model_config = ConfigDict(frozen=True)

    goals: str = "gls"
    matches_played: str = "mp"
    assists: str = "ast"
    yellow_cards: str = "crd_y"
    red_cards: str = "crd_r"
    total_minutes: str = "min"
    number_of_players: str = "number_pl"


def _column(df: pd.DataFrame, name: str) -> pd.Series:
    if name not in df.columns:
        raise SchemaError(f"Derived metrics need column {name!r}", column=name)
    return pd.to_numeric(df[name], errors="coerce").astype("float64")


def safe_divide(numerator: pd.Series, denominator: pd.Series) -> pd.Series:
    """Element-wise division where a zero or missing denominator gives NaN."""
    return numerator / denominator.where(denominator != 0, np.nan)


def add_squad_metrics(
    df: pd.DataFrame, columns: Optional[SquadColumns] = None
) -> pd.DataFrame:
    """Returns a copy of the squad table with per-row derived metrics appended."""
    columns = columns or SquadColumns()
    goals = _column(df, columns.goals)
    assists = _column(df, columns.assists)

    result = df.copy()
    result["goals_per_game"] = safe_divide(goals, _column(df, columns.matches_played))
    result["assist_rate"] = safe_divide(assists, goals)
    result["discipline_score"] = _column(df, columns.yellow_cards) + 2 * _column(
        df, columns.red_cards
    )
    result["minutes_per_player"] = safe_divide(
        _column(df, columns.total_minutes), _column(df, columns.number_of_players)
    )
    logger.debug(f"Added squad metrics to {len(result)} rows")
    return result


def split_scorer(text) -> Tuple[Optional[str], Optional[int]]:
    """Splits 'Erling Haaland - 27' into ('Erling Haaland', 27).

    Anything that does not match 'name - digits' yields (None, None).
    """
    if not isinstance(text, str):
        return None, None
    match = SCORER_RE.match(text.strip())
    if not match:
        return None, None
    return match.group(1).strip(), int(match.group(2))


def split_top_scorer(df: pd.DataFrame, column: str = "Top Team Scorer") -> pd.DataFrame:
    """Returns a copy of the standings table with `top_scorer` and `top_scorer_goals` added."""
    if column not in df.columns:
        raise SchemaError(f"Scorer split needs column {column!r}", column=column)

    parts = [split_scorer(value) for value in df[column]]
    result = df.copy()
    result["top_scorer"] = pd.Series(
        [name for name, _ in parts], index=df.index, dtype="object"
    )
    result["top_scorer_goals"] = pd.Series(
        [goals for _, goals in parts], index=df.index, dtype="Int64"
    )

    unmatched = sum(1 for name, _ in parts if name is None)
    if unmatched:
        logger.debug(f"{unmatched} row(s) in {column!r} did not match 'name - goals'")
    return result
