from .common import DateRange, ExportFormat, MessageType, ReportType, SessionState
from .report import (
    ExportedFile,
    ExportJob,
    InsightResult,
    ReportRequest,
    ReportResult,
    SavedDownload,
)
from .session import StatusMessage

__all__ = [
    "DateRange",
    "ExportFormat",
    "ExportJob",
    "ExportedFile",
    "InsightResult",
    "MessageType",
    "ReportRequest",
    "ReportResult",
    "ReportType",
    "SavedDownload",
    "SessionState",
    "StatusMessage",
]
