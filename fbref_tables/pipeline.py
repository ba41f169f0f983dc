from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

import pandas as pd
from loguru import logger

from fbref_tables.calculation.metrics import add_squad_metrics, split_top_scorer
from fbref_tables.collection.league_iterator import LEAGUE_COLUMN, build_combined
from fbref_tables.config.leagues import SQUAD_STATS_SOURCES, STANDINGS_SOURCES
from fbref_tables.config.settings import settings
from fbref_tables.models.enums import FailurePolicy, TableKind
from fbref_tables.models.source import SourceDescriptor
from fbref_tables.parsing.tables import Grid
from fbref_tables.scrapers.fetcher import Fetcher
from fbref_tables.storage.csv_writer import write_table


@dataclass
class PipelineResult:
    """The tidy output tables of one run and where they were written."""

    tables: Dict[TableKind, pd.DataFrame] = field(default_factory=dict)
    paths: Dict[TableKind, Path] = field(default_factory=dict)

    @property
    def squad_stats(self) -> pd.DataFrame:
        return self.tables[TableKind.SQUAD_STATS]

    @property
    def standings(self) -> pd.DataFrame:
        return self.tables[TableKind.STANDINGS]


def _derive(
    combined: pd.DataFrame, transform: Callable[[pd.DataFrame], pd.DataFrame]
) -> pd.DataFrame:
    # Every league skipped: nothing to derive from, keep the bare frame
    if list(combined.columns) == [LEAGUE_COLUMN]:
        logger.warning(f"No league data; skipping {transform.__name__}")
        return combined
    return transform(combined)


def run_pipeline(
    squad_sources: Sequence[SourceDescriptor] = SQUAD_STATS_SOURCES,
    standings_sources: Sequence[SourceDescriptor] = STANDINGS_SOURCES,
    output_dir: Optional[Path] = None,
    fetcher: Optional[Fetcher] = None,
    failure_policy: Optional[FailurePolicy] = None,
) -> PipelineResult:
    """Builds both tidy tables from scratch and overwrites their CSV files.

    A single Fetcher (and so a single politeness throttle) serves the run.
    """
    output_dir = Path(output_dir or settings.output_dir)
    own_fetcher = fetcher is None
    fetcher = fetcher or Fetcher()
    result = PipelineResult()
    page_cache: Dict[str, List[Grid]] = {}

    try:
        logger.info("Building squad stats table...")
        squads = build_combined(
            squad_sources,
            fetcher=fetcher,
            failure_policy=failure_policy,
            page_cache=page_cache,
        )
        result.tables[TableKind.SQUAD_STATS] = _derive(squads, add_squad_metrics)

        logger.info("Building standings table...")
        standings = build_combined(
            standings_sources,
            fetcher=fetcher,
            failure_policy=failure_policy,
            page_cache=page_cache,
        )
        result.tables[TableKind.STANDINGS] = _derive(standings, split_top_scorer)
    finally:
        if own_fetcher:
            fetcher.close()

    for kind, table in result.tables.items():
        result.paths[kind] = write_table(table, output_dir / f"{kind.value}.csv")

    return result
