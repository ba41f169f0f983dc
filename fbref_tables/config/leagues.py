# Static source configuration: one descriptor per league and output table.
# FBref competition ids: https://fbref.com/en/comps/
from typing import List

from fbref_tables.models.source import SourceDescriptor

BIG_FIVE = [
    ("Premier League", "9"),
    ("La Liga", "12"),
    ("Serie A", "11"),
    ("Bundesliga", "20"),
    ("Ligue 1", "13"),
]

# "Squad Standard Stats": grouped two-row header, first over-header cell blank.
# Squad, # Pl, Age, Poss, MP, Starts, Min, 90s, Gls, Ast, G+A, G-PK, PK, PKatt, CrdY, CrdR
SQUAD_STATS_SOURCES: List[SourceDescriptor] = [
    SourceDescriptor(
        label=label,
        source_id=source_id,
        table_index=3,
        expected_column_count=16,
        numeric_range_start=2,
    )
    for label, source_id in BIG_FIVE
]

# League table: Rk, Squad, MP, W, D, L, GF, GA, GD, Pts, Pts/MP, xG, xGA, xGD,
# xGD/90, Last 5, Attendance, Top Team Scorer
# Numeric: MP..xGD/90 and Attendance; Last 5 and Top Team Scorer stay text.
STANDINGS_SOURCES: List[SourceDescriptor] = [
    SourceDescriptor(
        label=label,
        source_id=source_id,
        table_index=1,
        expected_column_count=18,
        numeric_range_start=3,
        numeric_range_end=15,
        extra_numeric_columns=(17,),
    )
    for label, source_id in BIG_FIVE
]
