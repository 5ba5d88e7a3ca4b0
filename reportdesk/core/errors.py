from __future__ import annotations


class ReportDeskError(Exception):
    """Base class for every failure the report workflow turns into a message."""


class TransportError(ReportDeskError):
    """The remote service could not be reached or the connection dropped."""


class HttpStatusError(ReportDeskError):
    def __init__(self, status_code: int, reason: str = "") -> None:
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"HTTP {status_code}: {reason}" if reason else f"HTTP {status_code}")


class ParseError(ReportDeskError):
    def __init__(self, message: str, raw_body: str = "") -> None:
        self.raw_body = raw_body
        super().__init__(message)


class EmptyBodyError(ParseError):
    def __init__(self) -> None:
        super().__init__("Empty response from server", raw_body="")


class MalformedResponseError(ParseError):
    pass


class ServerReportedError(ReportDeskError):
    """The report service answered 2xx but flagged the request as failed."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


class EmptyDataError(ReportDeskError):
    """Soft failure: the report was generated but carries no rows."""


class PreconditionError(ReportDeskError):
    pass
