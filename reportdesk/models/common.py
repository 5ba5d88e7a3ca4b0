from __future__ import annotations

from enum import StrEnum


class ReportType(StrEnum):
    """Reports offered by the remote report service."""

    PREDICTIONS = "predictions"
    RECOMMENDATIONS = "recommendations"
    MODEL_ANALYSIS = "model-analysis"
    FORECAST_INSIGHTS = "forecast-insights"

    @classmethod
    def from_raw(cls, raw: str) -> "ReportType":
        value = raw.strip().lower().replace("_", "-")
        for member in cls:
            if value == member.value:
                return member
        raise ValueError(f"unsupported report type: {raw}")

    @property
    def display_name(self) -> str:
        return _REPORT_CATALOG[self][0]

    @property
    def description(self) -> str:
        return _REPORT_CATALOG[self][1]

    @property
    def heading(self) -> str:
        return self.value.replace("-", " ").upper()


_REPORT_CATALOG: dict[ReportType, tuple[str, str]] = {
    ReportType.PREDICTIONS: (
        "Prediction Performance Report",
        "AI model predictions, accuracy metrics, and forecast analysis",
    ),
    ReportType.RECOMMENDATIONS: (
        "AI Recommendations Report",
        "Personalized AI-driven insights and strategic recommendations",
    ),
    ReportType.MODEL_ANALYSIS: (
        "Model Analysis Report",
        "Comprehensive analysis of trained models and their performance",
    ),
    ReportType.FORECAST_INSIGHTS: (
        "Forecast Insights Report",
        "Future trend predictions and business intelligence insights",
    ),
}


class DateRange(StrEnum):
    LAST_7_DAYS = "last-7-days"
    LAST_30_DAYS = "last-30-days"
    LAST_90_DAYS = "last-90-days"
    LAST_YEAR = "last-year"
    CUSTOM = "custom"

    @classmethod
    def from_raw(cls, raw: str) -> "DateRange":
        value = raw.strip().lower().replace("_", "-")
        for member in cls:
            if value == member.value:
                return member
        raise ValueError(f"unsupported date range: {raw}")

    @property
    def label(self) -> str:
        return _DATE_RANGE_LABELS[self]


_DATE_RANGE_LABELS: dict[DateRange, str] = {
    DateRange.LAST_7_DAYS: "Last 7 Days",
    DateRange.LAST_30_DAYS: "Last 30 Days",
    DateRange.LAST_90_DAYS: "Last 90 Days",
    DateRange.LAST_YEAR: "Last Year",
    DateRange.CUSTOM: "Custom Range",
}


class ExportFormat(StrEnum):
    PDF = "pdf"
    CSV = "csv"
    EXCEL = "excel"

    @classmethod
    def from_raw(cls, raw: str) -> "ExportFormat":
        value = raw.strip().lower()
        aliases = {"xlsx": cls.EXCEL, "xls": cls.EXCEL}
        for member in cls:
            if value == member.value:
                return member
        if value in aliases:
            return aliases[value]
        raise ValueError(f"unsupported export format: {raw}")

    @property
    def file_extension(self) -> str:
        # The export service answers "excel" requests with a CSV payload.
        if self is ExportFormat.EXCEL:
            return "csv"
        return self.value

    @property
    def label(self) -> str:
        return self.value.upper()


class MessageType(StrEnum):
    SUCCESS = "success"
    ERROR = "error"


class SessionState(StrEnum):
    IDLE = "idle"
    GENERATING = "generating"
    GENERATED = "generated"
    GENERATE_FAILED = "generate_failed"
    FETCHING_INSIGHTS = "fetching_insights"
    EXPORTING = "exporting"
    EXPORT_FAILED = "export_failed"
