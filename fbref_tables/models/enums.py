from enum import Enum


class FailurePolicy(str, Enum):
    ABORT = "abort"  # Surface the first league failure and stop the build
    SKIP = "skip"  # Log the failure, drop that league, keep going


class TableKind(str, Enum):
    SQUAD_STATS = "squad_stats"
    STANDINGS = "standings"
