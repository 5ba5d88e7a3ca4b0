from .download_sink import AzureBlobDownloadSink, DownloadSink, LocalDownloadSink, build_download_sink
from .messages import MessageBoard
from .selector import ReportSelector
from .table import DataPreview, build_data_preview
from .orchestrator import ReportOrchestrator
from .preview import ExportPreviewDialog, PreviewContext, PreviewRenderer
from .sessions import ReportSession, SessionRegistry

__all__ = [
    "AzureBlobDownloadSink",
    "DataPreview",
    "DownloadSink",
    "ExportPreviewDialog",
    "LocalDownloadSink",
    "MessageBoard",
    "PreviewContext",
    "PreviewRenderer",
    "ReportOrchestrator",
    "ReportSelector",
    "ReportSession",
    "SessionRegistry",
    "build_data_preview",
    "build_download_sink",
]
