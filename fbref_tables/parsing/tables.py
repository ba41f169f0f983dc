import re
from typing import List

from bs4 import BeautifulSoup, Tag
from loguru import logger

from fbref_tables.exceptions import ParseError

Grid = List[List[str]]

# Rows FBref repeats inside long table bodies to separate blocks
SEPARATOR_ROW_CLASSES = {"thead", "spacer"}

_COMMENT_RE = re.compile(r"<!--(.*?)-->", re.S)
_WHITESPACE_RE = re.compile(r"\s+")


def uncomment_tables(raw_html: str) -> str:
    """Unwraps HTML comments that contain a table, leaving other comments alone.

    FBref ships several of its tables inside comments and reveals them with
    JavaScript.
    """
    return _COMMENT_RE.sub(
        lambda m: m.group(1) if "<table" in m.group(1) else m.group(0), raw_html
    )


def _cell_text(cell: Tag) -> str:
    text = cell.get_text(" ", strip=True)
    return _WHITESPACE_RE.sub(" ", text).strip()


def _colspan(cell: Tag) -> int:
    try:
        return max(1, int(cell.get("colspan", 1)))
    except (TypeError, ValueError):
        return 1


def _is_separator_row(row: Tag) -> bool:
    classes = set(row.get("class") or [])
    return (
        bool(classes & SEPARATOR_ROW_CLASSES)
        and row.parent is not None
        and row.parent.name == "tbody"
    )


def table_to_grid(table: Tag) -> Grid:
    """Converts one <table> element into a rectangular grid of cell texts."""
    rows: Grid = []
    for row in table.find_all("tr"):
        # Rows of nested tables belong to those tables
        if row.find_parent("table") is not table or _is_separator_row(row):
            continue
        cells: List[str] = []
        for cell in row.find_all(["th", "td"], recursive=False):
            cells.extend([_cell_text(cell)] * _colspan(cell))
        rows.append(cells)

    width = max((len(r) for r in rows), default=0)
    for r in rows:
        r.extend([""] * (width - len(r)))
    return rows


def extract_tables(raw_html: str, include_commented: bool = False) -> List[Grid]:
    """Returns every table in the document as a grid, in document order.

    Raises:
        ParseError: if the document contains no tables.
    """
    if include_commented:
        raw_html = uncomment_tables(raw_html)

    soup = BeautifulSoup(raw_html, "lxml")
    tables = [table_to_grid(t) for t in soup.find_all("table")]
    if not tables:
        raise ParseError("No <table> elements found in document")

    logger.debug(
        f"Extracted {len(tables)} tables: "
        + ", ".join(f"{len(g)}x{len(g[0]) if g else 0}" for g in tables)
    )
    return tables


def select_table(tables: List[Grid], table_index: int) -> Grid:
    """Picks a table by its 1-based position in the page."""
    if not 1 <= table_index <= len(tables):
        raise ParseError(
            f"Requested table {table_index} but the page has {len(tables)} tables",
            table_index=table_index,
        )
    return tables[table_index - 1]
