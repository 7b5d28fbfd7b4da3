"""
site_analytics package marker.

Pure normalization, date, period, aggregation and sentiment helpers for the
site-visit sheet. Nothing in this package performs I/O.
"""

from site_analytics.errors import (
    InvalidQueryParameterError,
    SiteAnalyticsError,
    UnknownColumnError,
)
from site_analytics.normalizer import (
    ColumnIndex,
    NormalizedSheet,
    Record,
    find_column_index,
    normalize,
    normalize_header,
)
from site_analytics.sentiment import SentimentLabel, classify
from site_analytics.timestamps import month_key, parse_timestamp

__all__ = [
    "ColumnIndex",
    "InvalidQueryParameterError",
    "NormalizedSheet",
    "Record",
    "SentimentLabel",
    "SiteAnalyticsError",
    "UnknownColumnError",
    "classify",
    "find_column_index",
    "month_key",
    "normalize",
    "normalize_header",
    "parse_timestamp",
]
