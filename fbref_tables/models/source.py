from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SourceDescriptor(BaseModel):
    """Identifies one league's page, the target table on it and its expected schema."""

    model_config = ConfigDict(frozen=True)  # Make instances immutable

    label: str = Field(..., min_length=1, description="League/division name.")
    source_id: str = Field(
        ..., min_length=1, description="Identifier substituted into the base URL."
    )
    table_index: int = Field(
        ..., ge=1, description="1-based position of the table within the page."
    )
    expected_column_count: int = Field(
        ..., ge=1, description="Columns kept after header handling."
    )
    numeric_range_start: int = Field(
        ..., ge=1, description="1-based column position where numeric coercion begins."
    )
    numeric_range_end: Optional[int] = Field(
        None,
        ge=1,
        description="Inclusive 1-based end of the numeric range (defaults to the last kept column).",
    )
    promote_header: Optional[bool] = Field(
        None,
        description="Force (True) or suppress (False) header promotion; None infers it from the table.",
    )
    extra_numeric_columns: Tuple[int, ...] = Field(
        (),
        description="Further 1-based column positions to coerce outside the numeric range.",
    )

    @model_validator(mode="after")
    def check_numeric_range(self) -> "SourceDescriptor":
        end = self.numeric_range_end or self.expected_column_count
        if self.numeric_range_start > self.expected_column_count:
            raise ValueError(
                f"numeric_range_start ({self.numeric_range_start}) exceeds "
                f"expected_column_count ({self.expected_column_count})"
            )
        if not self.numeric_range_start <= end <= self.expected_column_count:
            raise ValueError(
                f"numeric_range_end ({end}) must lie between numeric_range_start "
                f"({self.numeric_range_start}) and expected_column_count ({self.expected_column_count})"
            )
        outside = [p for p in self.extra_numeric_columns if not 1 <= p <= self.expected_column_count]
        if outside:
            raise ValueError(
                f"extra_numeric_columns {outside} fall outside columns 1..{self.expected_column_count}"
            )
        return self
