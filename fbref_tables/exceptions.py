from typing import Optional


class ScraperError(Exception):
    """Base exception for scrape/normalize failures.

    Carries the league, table index and column that triggered the failure so
    multi-league runs report exactly where they broke.
    """

    def __init__(
        self,
        message: str,
        league: Optional[str] = None,
        table_index: Optional[int] = None,
        column: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.league = league
        self.table_index = table_index
        self.column = column

    def with_context(
        self, league: Optional[str] = None, table_index: Optional[int] = None
    ) -> "ScraperError":
        """Fills in league/table context that was unknown where the error was raised."""
        if self.league is None:
            self.league = league
        if self.table_index is None:
            self.table_index = table_index
        return self

    def __str__(self) -> str:
        context = []
        if self.league is not None:
            context.append(f"league={self.league!r}")
        if self.table_index is not None:
            context.append(f"table={self.table_index}")
        if self.column is not None:
            context.append(f"column={self.column!r}")
        if not context:
            return self.message
        return f"{self.message} [{', '.join(context)}]"


class FetchError(ScraperError):
    """Network failure, timeout or non-success HTTP status."""

    pass


class RateLimitError(FetchError):
    """Exception raised for rate limit responses (429)."""

    pass


class ParseError(ScraperError):
    """No tables in the document, or the requested table index is out of range."""

    pass


class SchemaError(ScraperError):
    """A table cannot be brought to the expected schema."""

    pass


class OutputError(ScraperError):
    """Writing an output table failed."""

    pass


class CoercionWarning(UserWarning):
    """Non-fatal: one or more cells could not be parsed as numbers."""

    pass
