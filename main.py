import sys

# --- Settings/Logging ---
from fbref_tables.logging.setup import setup_logging
from fbref_tables.config.settings import settings

setup_logging()

from loguru import logger

# --- End Settings/Logging ---

from fbref_tables.exceptions import ScraperError
from fbref_tables.models.enums import TableKind
from fbref_tables.pipeline import PipelineResult, run_pipeline

from rich import print
from rich.panel import Panel
from rich.table import Table

PREVIEW_ROWS = 5


def preview(title: str, df) -> Table:
    """Builds a small rich table showing the first rows of a tidy table."""
    table = Table(title=title, show_lines=False)
    columns = list(df.columns)[:8]
    for column in columns:
        table.add_column(str(column), overflow="fold")
    for _, row in df.head(PREVIEW_ROWS).iterrows():
        table.add_row(*("" if v is None else str(v) for v in row[columns]))
    return table


def summarize(result: PipelineResult) -> None:
    lines = []
    for kind in TableKind:
        df = result.tables.get(kind)
        if df is None:
            continue
        skipped = df.attrs.get("skipped_leagues") or []
        leagues = df["league"].nunique() if "league" in df.columns else 0
        lines.append(
            f"[bold]{kind.value}[/bold]: {len(df)} rows, {leagues} leagues"
            + (f", skipped {', '.join(skipped)}" if skipped else "")
            + f" -> {result.paths.get(kind)}"
        )
    print(Panel("\n".join(lines), title="fbref-tables run"))
    for kind, df in result.tables.items():
        print(preview(kind.value, df))


def main() -> int:
    """Main entry point for the application."""
    logger.info(
        f"Starting fbref-tables run (policy: {settings.failure_policy.value}, "
        f"output: {settings.output_dir})"
    )
    try:
        result = run_pipeline()
    except ScraperError as e:
        logger.error(f"Run failed: {e}")
        return 1

    summarize(result)
    logger.success("Run complete.")
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logger.info("Execution interrupted by user (KeyboardInterrupt).")
        sys.exit(0)
    except Exception as e:
        logger.exception(f"Unhandled exception in main execution: {e}")
        sys.exit(1)
