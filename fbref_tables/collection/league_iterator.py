from typing import Dict, List, Optional, Sequence

import pandas as pd
from loguru import logger

from fbref_tables.config.settings import settings
from fbref_tables.exceptions import ScraperError, SchemaError
from fbref_tables.models.enums import FailurePolicy
from fbref_tables.models.source import SourceDescriptor
from fbref_tables.normalization.normalizer import normalize
from fbref_tables.parsing.tables import Grid, extract_tables, select_table
from fbref_tables.scrapers.fetcher import Fetcher

LEAGUE_COLUMN = "league"


def _load_league(
    descriptor: SourceDescriptor,
    fetcher: Fetcher,
    page_cache: Dict[str, List[Grid]],
    include_commented: bool,
) -> pd.DataFrame:
    tables = page_cache.get(descriptor.source_id)
    if tables is None:
        raw_html = fetcher.fetch(descriptor.source_id)
        tables = extract_tables(raw_html, include_commented=include_commented)
        page_cache[descriptor.source_id] = tables

    grid = select_table(tables, descriptor.table_index)
    frame = normalize(
        grid,
        table_index=descriptor.table_index,
        expected_column_count=descriptor.expected_column_count,
        numeric_range_start=descriptor.numeric_range_start,
        numeric_range_end=descriptor.numeric_range_end,
        promote_header=descriptor.promote_header,
        league=descriptor.label,
        extra_numeric_columns=descriptor.extra_numeric_columns,
    )
    frame.insert(0, LEAGUE_COLUMN, descriptor.label)
    return frame


def build_combined(
    source_descriptors: Sequence[SourceDescriptor],
    fetcher: Optional[Fetcher] = None,
    failure_policy: Optional[FailurePolicy] = None,
    include_commented: Optional[bool] = None,
    page_cache: Optional[Dict[str, List[Grid]]] = None,
) -> pd.DataFrame:
    """Fetches, extracts and normalizes each league's table and stacks them.

    Leagues are processed strictly in list order. Each row carries its
    league label in the `league` column. With FailurePolicy.ABORT the first
    failing league raises; with FailurePolicy.SKIP it is logged, left out and
    listed in `attrs["skipped_leagues"]` of the returned frame.
    """
    policy = FailurePolicy(failure_policy or settings.failure_policy)
    if include_commented is None:
        include_commented = settings.include_commented_tables

    own_fetcher = fetcher is None
    fetcher = fetcher or Fetcher()

    frames: List[pd.DataFrame] = []
    skipped: List[str] = []
    # Pages already parsed, by source id; pass one in to share it across builds
    page_cache = {} if page_cache is None else page_cache

    logger.info(
        f"Building combined table for {len(source_descriptors)} leagues (policy: {policy.value})"
    )
    try:
        for descriptor in source_descriptors:
            try:
                frame = _load_league(descriptor, fetcher, page_cache, include_commented)
                if frames and list(frame.columns) != list(frames[0].columns):
                    missing = [c for c in frames[0].columns if c not in frame.columns]
                    raise SchemaError(
                        f"Columns differ from the first league; missing {missing}",
                        league=descriptor.label,
                        table_index=descriptor.table_index,
                    )
            except ScraperError as e:
                e.with_context(league=descriptor.label, table_index=descriptor.table_index)
                if policy is FailurePolicy.ABORT:
                    logger.error(f"Aborting build: {e}")
                    raise
                logger.warning(f"Skipping league {descriptor.label}: {e}")
                skipped.append(descriptor.label)
                continue

            logger.info(f"{descriptor.label}: {len(frame)} rows")
            frames.append(frame)
    finally:
        if own_fetcher:
            fetcher.close()

    if frames:
        combined = pd.concat(frames, ignore_index=True)
    else:
        combined = pd.DataFrame(columns=[LEAGUE_COLUMN])
    combined.attrs["skipped_leagues"] = skipped

    logger.success(
        f"Combined table built: {len(combined)} rows from {len(frames)} leagues"
        + (f", skipped {skipped}" if skipped else "")
    )
    return combined
