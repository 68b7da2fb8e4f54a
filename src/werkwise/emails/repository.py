from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import EmailTemplateType
from .model import EmailLog, EmailSchedule, EmailTemplate, NewEmailLog, ScheduleFields


class EmailTemplateRepository(Protocol):
    def get_by_id(self, template_id: int) -> Optional[EmailTemplate]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[EmailTemplate]:
        raise NotImplementedError

    def list_all(self) -> Sequence[EmailTemplate]:
        raise NotImplementedError

    def create(self, *, name: str, type: EmailTemplateType, subject: str, body: str, enabled: bool) -> int:
        raise NotImplementedError

    def update(
        self, template_id: int, *, name: str, type: EmailTemplateType, subject: str, body: str, enabled: bool
    ) -> bool:
        raise NotImplementedError

    def delete_by_id(self, template_id: int) -> bool:
        raise NotImplementedError


class EmailScheduleRepository(Protocol):
    def get_by_id(self, schedule_id: int) -> Optional[EmailSchedule]:
        """Schedule with its template attached."""
        raise NotImplementedError

    def list_all(self) -> Sequence[EmailSchedule]:
        raise NotImplementedError

    def list_enabled_at_hour(self, hour: int) -> Sequence[EmailSchedule]:
        """Enabled schedules for `hour`, templates attached; weekday filtering is the caller's job."""
        raise NotImplementedError

    def create(self, fields: ScheduleFields) -> int:
        raise NotImplementedError

    def update(self, schedule_id: int, fields: ScheduleFields) -> bool:
        raise NotImplementedError

    def delete_by_id(self, schedule_id: int) -> bool:
        raise NotImplementedError


class EmailLogRepository(Protocol):
    def create(self, log: NewEmailLog) -> int:
        raise NotImplementedError

    def list_logs(self, *, to_email: Optional[str] = None, limit: int = 200) -> Sequence[EmailLog]:
        """Newest first."""
        raise NotImplementedError
