import pytest

from fbref_tables.collection.league_iterator import build_combined
from fbref_tables.exceptions import FetchError, ParseError, SchemaError
from fbref_tables.models.enums import FailurePolicy
from fbref_tables.models.source import SourceDescriptor

from conftest import make_page, make_table


def standings_page(*teams):
    rows = [["Squad", "MP", "GF", "GA", "Pts"]] + [list(t) for t in teams]
    filler = make_table([["Other"], ["1"]])
    return make_page(filler, make_table(rows), filler)


def descriptor(label, source_id, table_index=2, columns=5, start=2):
    return SourceDescriptor(
        label=label,
        source_id=source_id,
        table_index=table_index,
        expected_column_count=columns,
        numeric_range_start=start,
    )


PAGES = {
    "9": standings_page(("Arsenal", "38", "91", "29", "89"), ("Burnley", "38", "41", "78", "24")),
    "12": standings_page(("Girona", "38", "85", "46", "81")),
    "11": standings_page(("Inter", "38", "89", "22", "94"), ("Milan", "38", "76", "49", "75")),
}


def test_combined_rows_are_tagged_with_league_in_order(make_fetcher):
    fetcher = make_fetcher(PAGES)
    sources = [descriptor("Premier League", "9"), descriptor("La Liga", "12"), descriptor("Serie A", "11")]
    df = build_combined(sources, fetcher=fetcher)

    assert list(df.columns) == ["league", "Squad", "MP", "GF", "GA", "Pts"]
    assert df["league"].tolist() == [
        "Premier League", "Premier League", "La Liga", "Serie A", "Serie A",
    ]
    assert df["Squad"].tolist() == ["Arsenal", "Burnley", "Girona", "Inter", "Milan"]
    assert df["Pts"].dtype == "float64"
    assert df.attrs["skipped_leagues"] == []


def test_abort_policy_raises_with_league_context(make_fetcher):
    fetcher = make_fetcher(PAGES)
    sources = [descriptor("Premier League", "9"), descriptor("Bundesliga", "20")]
    with pytest.raises(FetchError) as info:
        build_combined(sources, fetcher=fetcher, failure_policy=FailurePolicy.ABORT)
    assert info.value.league == "Bundesliga"
    assert "Bundesliga" in str(info.value)


def test_skip_policy_drops_failed_league_and_continues(make_fetcher):
    fetcher = make_fetcher(PAGES)
    sources = [
        descriptor("Premier League", "9"),
        descriptor("Bundesliga", "20"),
        descriptor("La Liga", "12", table_index=7),
        descriptor("Serie A", "11"),
    ]
    df = build_combined(sources, fetcher=fetcher, failure_policy=FailurePolicy.SKIP)

    assert set(df["league"]) == {"Premier League", "Serie A"}
    assert df.attrs["skipped_leagues"] == ["Bundesliga", "La Liga"]


def test_table_index_out_of_range_aborts(make_fetcher):
    fetcher = make_fetcher(PAGES)
    with pytest.raises(ParseError) as info:
        build_combined([descriptor("La Liga", "12", table_index=7)], fetcher=fetcher, failure_policy="abort")
    assert info.value.table_index == 7
    assert info.value.league == "La Liga"


def test_schema_mismatch_between_leagues_is_a_schema_error(make_fetcher):
    other = make_page(make_table([["Club", "MP", "GF", "GA", "Pts"], ["Inter", "38", "89", "22", "94"]]))
    fetcher = make_fetcher({"9": PAGES["9"], "11": other})
    sources = [descriptor("Premier League", "9"), descriptor("Serie A", "11", table_index=1)]
    with pytest.raises(SchemaError, match="Columns differ"):
        build_combined(sources, fetcher=fetcher, failure_policy=FailurePolicy.ABORT)


def test_same_page_is_fetched_once(make_fetcher):
    fetcher = make_fetcher(PAGES)
    sources = [descriptor("Premier League", "9"), descriptor("Premier League (other)", "9", table_index=1, columns=1, start=1)]
    build_combined(sources, fetcher=fetcher, failure_policy=FailurePolicy.SKIP)
    assert len(fetcher.requested) == 1


def test_empty_descriptor_list_gives_empty_frame(make_fetcher):
    df = build_combined([], fetcher=make_fetcher({}))
    assert list(df.columns) == ["league"]
    assert df.empty


def test_fixture_page_builds_squad_stats(make_fetcher, comp_page):
    fetcher = make_fetcher({"9": comp_page})
    source = SourceDescriptor(
        label="Premier League", source_id="9", table_index=3,
        expected_column_count=16, numeric_range_start=2,
    )
    df = build_combined([source], fetcher=fetcher)
    assert df.shape == (3, 17)
    assert df.columns[0] == "league"
    assert df["gls"].tolist() == [88.0, 54.0, 40.0]


def test_descriptor_validates_numeric_range():
    with pytest.raises(ValueError):
        SourceDescriptor(label="X", source_id="1", table_index=1, expected_column_count=3, numeric_range_start=4)
    with pytest.raises(ValueError):
        SourceDescriptor(
            label="X", source_id="1", table_index=1, expected_column_count=3,
            numeric_range_start=2, numeric_range_end=5,
        )
    with pytest.raises(ValueError):
        SourceDescriptor(
            label="X", source_id="1", table_index=1, expected_column_count=3,
            numeric_range_start=2, extra_numeric_columns=(4,),
        )
