from .normalize import coerce_column, coerce_timestamp, coerce_value, rows_from_columns, rows_from_frame
from .rows import combine_by_timestamp, dedupe_weekend_rows

__all__ = [
    "coerce_column",
    "coerce_timestamp",
    "coerce_value",
    "combine_by_timestamp",
    "dedupe_weekend_rows",
    "rows_from_columns",
    "rows_from_frame",
]
