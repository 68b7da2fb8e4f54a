from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import DamageStatus
from .model import DamageReport, DamageReportFields


class DamageReportRepository(Protocol):
    def create(self, fields: DamageReportFields, *, created_by: int) -> int:
        raise NotImplementedError

    def get_by_id(self, report_id: int) -> Optional[DamageReport]:
        raise NotImplementedError

    def list_reports(self, *, created_by: Optional[int] = None) -> Sequence[DamageReport]:
        """Newest first."""
        raise NotImplementedError

    def update(self, report_id: int, fields: DamageReportFields) -> bool:
        raise NotImplementedError

    def set_status(self, report_id: int, status: DamageStatus) -> bool:
        raise NotImplementedError

    def delete_by_id(self, report_id: int) -> bool:
        raise NotImplementedError
