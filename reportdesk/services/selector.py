from __future__ import annotations

from reportdesk.core.errors import PreconditionError
from reportdesk.models import DateRange, ReportRequest, ReportType


class ReportSelector:
    def __init__(
        self,
        report_type: ReportType | None = None,
        date_range: DateRange = DateRange.LAST_30_DAYS,
    ) -> None:
        self.report_type = report_type
        self.date_range = date_range

    def select_report(self, value: ReportType | str) -> ReportType:
        self.report_type = value if isinstance(value, ReportType) else ReportType.from_raw(value)
        return self.report_type

    def select_date_range(self, value: DateRange | str) -> DateRange:
        self.date_range = value if isinstance(value, DateRange) else DateRange.from_raw(value)
        return self.date_range

    @property
    def can_generate(self) -> bool:
        return self.report_type is not None

    def build_request(self, user_id: str) -> ReportRequest:
        if self.report_type is None:
            raise PreconditionError("Select a report type first")
        return ReportRequest(report_type=self.report_type, date_range=self.date_range, user_id=user_id)
