"""
app/services/site_visit_service.py

Query handlers for the site-visit analytics API.

Every public method follows the same shape:

    1. validate arguments (InvalidQueryParameterError, before any I/O)
    2. fetch the sheet once and normalize it
    3. scope records to the requested period, if any
    4. aggregate

Nothing is cached between calls; each request re-reads the sheet. A failed
read raises GridFetchError and is never turned into an empty result.
"""

from __future__ import annotations

import logging
from datetime import datetime
from functools import lru_cache
from typing import Callable, Sequence

from app.config import SiteVisitColumns, get_sheet_settings, get_site_visit_columns
from app.connectors.base import BaseGridConnector, GridFetchError
from app.connectors.google_sheets_connector import get_sheets_connector
from app.domain.site_visit import (
    Breakdown,
    RemarkEntry,
    RemarksReport,
    SalespersonLookup,
    SheetHeaders,
    SourceReport,
    VisitSummary,
    VisitorCount,
)
from site_analytics.aggregation import (
    UNKNOWN_LABEL,
    count_by,
    count_handlers,
    cross_tabulate,
    filter_by_text_match,
    require_columns,
)
from site_analytics.errors import InvalidQueryParameterError, UnknownColumnError
from site_analytics.normalizer import NormalizedSheet, Record, normalize
from site_analytics.periods import (
    ALL_TIME,
    PeriodKind,
    PeriodSpec,
    filter_by_period,
    normalize_month_key,
)
from site_analytics.sentiment import classify, summarize
from site_analytics.timestamps import month_key, parse_timestamp

logger = logging.getLogger(__name__)

# Named breakdowns exposed over HTTP, mapped to SiteVisitColumns attributes.
BREAKDOWN_DIMENSIONS: dict[str, str] = {
    "sources": "lead_source",
    "income": "income",
    "configurations": "configuration",
    "industry": "industry",
    "requirements": "requirements",
}

MAX_CROSS_TAB_COLUMNS = 5


class SiteVisitAnalyticsService:
    """
    Read-only aggregations over the site-visit sheet.

    Parameters
    ----------
    connector:
        Grid source. Called once per public method invocation.
    connector_factory:
        Builds the grid source on the first read, when *connector* is not
        given. Credentials are therefore only loaded once a request has
        passed argument validation.
    range_spec:
        A1 range to read, including the tab name.
    columns:
        Header vocabulary of the upstream form.
    clock:
        Returns the current local wall-clock time.
    """

    def __init__(
        self,
        *,
        connector: BaseGridConnector | None = None,
        connector_factory: Callable[[], BaseGridConnector] | None = None,
        range_spec: str,
        columns: SiteVisitColumns | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if connector is None and connector_factory is None:
            raise ValueError("Either a connector or a connector_factory is required.")
        self._connector = connector
        self._connector_factory = connector_factory
        self._range_spec = range_spec
        self._columns = columns or SiteVisitColumns()
        self._clock = clock or datetime.now

    @property
    def columns(self) -> SiteVisitColumns:
        return self._columns

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _grid_connector(self) -> BaseGridConnector:
        if self._connector is None:
            try:
                self._connector = self._connector_factory()
            except (RuntimeError, ValueError) as exc:
                raise GridFetchError(
                    f"Sheet connector is not configured: {exc}",
                    range_spec=self._range_spec,
                ) from exc
        return self._connector

    def _load_sheet(self) -> NormalizedSheet:
        sheet = normalize(self._grid_connector().fetch_grid(self._range_spec))
        logger.debug(
            "Loaded sheet range=%s columns=%d records=%d",
            self._range_spec,
            len(sheet.headers),
            len(sheet.records),
        )
        return sheet

    def _scope(self, sheet: NormalizedSheet, period: PeriodSpec | None) -> list[Record]:
        if period is None:
            return list(sheet.records)
        require_columns(sheet.columns, [self._columns.timestamp])
        return filter_by_period(
            sheet.records,
            period,
            now=self._clock(),
            timestamp_column=self._columns.timestamp,
        )

    def _handler_text(self, record: Record) -> str:
        handled_by = record.get(self._columns.handled_by) or ""
        salesperson = record.get(self._columns.salesperson) or ""
        if handled_by and salesperson:
            return f"{handled_by} / {salesperson}"
        return handled_by or salesperson

    def _remark_text(self, record: Record) -> str:
        parts = (record.get(column) or "" for column in self._columns.remark_columns)
        return " ".join(part for part in parts if part)

    def _summarize_visit(self, record: Record) -> VisitSummary:
        remark = self._remark_text(record)
        return VisitSummary(
            row_number=record.row_number,
            timestamp=record.get(self._columns.timestamp) or "",
            handler=self._handler_text(record),
            income=record.get(self._columns.income) or UNKNOWN_LABEL,
            lead_source=record.get(self._columns.lead_source) or UNKNOWN_LABEL,
            remark=remark,
            sentiment=classify(remark).value,
        )

    @staticmethod
    def _period_label(period: PeriodSpec | None) -> str:
        return (period or ALL_TIME).label

    # ------------------------------------------------------------------
    # Visitor counts
    # ------------------------------------------------------------------

    def visitors_in_period(self, period: PeriodSpec | None = None) -> VisitorCount:
        """
        Count visits whose timestamp falls in *period* (all dated visits by default).
        """

        period = period or ALL_TIME
        sheet = self._load_sheet()
        require_columns(sheet.columns, [self._columns.timestamp])

        matched = self._scope(sheet, period)
        undated = sum(
            1 for record in sheet.records if parse_timestamp(record.get(self._columns.timestamp)) is None
        )
        logger.info("Visitors period=%s total=%d undated=%d", period.label, len(matched), undated)
        return VisitorCount(period=period.label, total=len(matched), undated_records=undated)

    def visitors_today(self) -> VisitorCount:
        return self.visitors_in_period(PeriodSpec(kind=PeriodKind.TODAY))

    def visitors_in_month(self, month: str) -> VisitorCount:
        key = normalize_month_key(month, parameter="month")
        return self.visitors_in_period(PeriodSpec(kind=PeriodKind.MONTHS, months=(key,)))

    # ------------------------------------------------------------------
    # Breakdowns
    # ------------------------------------------------------------------

    def breakdown_by(
        self,
        column: str,
        period: PeriodSpec | None = None,
        *,
        sort_by_count: bool = True,
        required: bool = True,
    ) -> Breakdown:
        """
        Count records per value of *column*.

        With ``required=True`` a column missing from the sheet raises
        UnknownColumnError; otherwise every record lands in "Unknown".
        """

        if not column or not column.strip():
            raise InvalidQueryParameterError("column", "A column name is required.")

        sheet = self._load_sheet()
        records = self._scope(sheet, period)
        counts = count_by(
            records,
            column,
            sort_by_count=sort_by_count,
            index=sheet.columns if required else None,
        )
        return Breakdown(
            columns=(sheet.columns.resolve(column) or column,),
            period=self._period_label(period),
            total=len(records),
            counts=counts,
        )

    def dimension_breakdown(self, dimension: str, period: PeriodSpec | None = None) -> Breakdown:
        """
        Breakdown over one of the form's fixed columns, e.g. ``sources``.

        These columns are optional on the sheet; when absent the whole
        selection is reported under "Unknown".
        """

        attribute = BREAKDOWN_DIMENSIONS.get((dimension or "").strip().lower())
        if attribute is None:
            raise InvalidQueryParameterError(
                "dimension",
                f"Unknown breakdown {dimension!r}. Expected one of: {', '.join(BREAKDOWN_DIMENSIONS)}.",
            )
        return self.breakdown_by(getattr(self._columns, attribute), period, required=False)

    def cross_breakdown(
        self,
        columns: Sequence[str],
        period: PeriodSpec | None = None,
        *,
        sort_by_count: bool = True,
    ) -> Breakdown:
        """
        Count records per combination of *columns*, keyed ``"a|b"``.
        """

        names = [name.strip() for name in columns if name and name.strip()]
        if len(names) < 2:
            raise InvalidQueryParameterError("columns", "At least two columns are required.")
        if len(names) > MAX_CROSS_TAB_COLUMNS:
            raise InvalidQueryParameterError(
                "columns", f"At most {MAX_CROSS_TAB_COLUMNS} columns can be combined."
            )

        sheet = self._load_sheet()
        records = self._scope(sheet, period)
        counts = cross_tabulate(records, names, sort_by_count=sort_by_count, index=sheet.columns)
        return Breakdown(
            columns=tuple(sheet.columns.resolve(name) or name for name in names),
            period=self._period_label(period),
            total=len(records),
            counts=counts,
        )

    def handler_leaderboard(self, period: PeriodSpec | None = None) -> Breakdown:
        """
        Visits per distinct handler across the "handled by" and salesperson columns.
        """

        sheet = self._load_sheet()
        handler_columns = [name for name in self._columns.handler_columns if name in sheet.columns]
        if not handler_columns:
            raise UnknownColumnError(self._columns.handled_by, available=sheet.headers)

        records = self._scope(sheet, period)
        return Breakdown(
            columns=tuple(handler_columns),
            period=self._period_label(period),
            total=len(records),
            counts=count_handlers(records, handler_columns),
        )

    # ------------------------------------------------------------------
    # Lookups and reports
    # ------------------------------------------------------------------

    def salesperson_lookup(self, name: str, period: PeriodSpec | None = None) -> SalespersonLookup:
        """
        Visits where *name* appears in either handler column, case-insensitively.
        """

        needle = (name or "").strip()
        if not needle:
            raise InvalidQueryParameterError("name", "A salesperson name is required.")

        sheet = self._load_sheet()
        handler_columns = [column for column in self._columns.handler_columns if column in sheet.columns]
        if not handler_columns:
            raise UnknownColumnError(self._columns.salesperson, available=sheet.headers)

        matches = filter_by_text_match(self._scope(sheet, period), handler_columns, needle)
        logger.info("Salesperson lookup name=%r period=%s matches=%d", needle, self._period_label(period), len(matches))
        return SalespersonLookup(
            name=needle,
            period=self._period_label(period),
            total=len(matches),
            visits=[self._summarize_visit(record) for record in matches],
        )

    def remarks_with_sentiment(self, period: PeriodSpec | None = None) -> RemarksReport:
        """
        Remark text with a keyword sentiment label, plus per-label totals.
        """

        sheet = self._load_sheet()
        records = self._scope(sheet, period)

        entries: list[RemarkEntry] = []
        for record in records:
            text = self._remark_text(record)
            entries.append(
                RemarkEntry(
                    row_number=record.row_number,
                    timestamp=record.get(self._columns.timestamp) or "",
                    text=text,
                    sentiment=classify(text).value,
                )
            )

        summary = summarize(classify(entry.text) for entry in entries)
        return RemarksReport(
            period=self._period_label(period),
            total=len(entries),
            sentiment_summary=summary,
            remarks=entries,
        )

    def source_report(self, source: str, months: Sequence[str] | None = None) -> SourceReport:
        """
        Visits from one lead source within the given months.

        *source* is matched as a case-insensitive substring of the lead-source
        cell. When no months are given the current month is used.
        """

        source_name = (source or "").strip()
        if not source_name:
            raise InvalidQueryParameterError("source", "A lead source is required.")
        month_keys = tuple(
            dict.fromkeys(normalize_month_key(value, parameter="months") for value in (months or []) if value.strip())
        )
        if not month_keys:
            month_keys = (month_key(self._clock().date()),)

        sheet = self._load_sheet()
        require_columns(sheet.columns, [self._columns.timestamp, self._columns.lead_source])

        in_months = self._scope(sheet, PeriodSpec(kind=PeriodKind.MONTHS, months=month_keys))
        records = filter_by_text_match(in_months, [self._columns.lead_source], source_name)
        visits = [self._summarize_visit(record) for record in records]
        handler_columns = [column for column in self._columns.handler_columns if column in sheet.columns]

        logger.info("Source report source=%r months=%s total=%d", source_name, ",".join(month_keys), len(records))
        return SourceReport(
            source=source_name,
            months=month_keys,
            total=len(records),
            handlers=count_handlers(records, handler_columns, sort_by_count=False),
            income_breakdown=count_by(records, self._columns.income),
            sentiment_summary=summarize(classify(visit.remark) for visit in visits),
            visits=visits,
        )

    def list_headers(self) -> SheetHeaders:
        return SheetHeaders(headers=self._load_sheet().headers)


@lru_cache(maxsize=1)
def get_site_visit_service() -> SiteVisitAnalyticsService:
    """
    Return the cached service wired to the configured Google Sheet.
    """

    return SiteVisitAnalyticsService(
        connector_factory=get_sheets_connector,
        range_spec=get_sheet_settings().range_spec,
        columns=get_site_visit_columns(),
    )
