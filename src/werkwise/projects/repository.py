from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import ProjectStatus
from .model import Project, ProjectFields


class ProjectRepository(Protocol):
    def get_by_id(self, project_id: int) -> Optional[Project]:
        raise NotImplementedError

    def get_by_name(self, naam: str) -> Optional[Project]:
        raise NotImplementedError

    def find_by_name_like(self, fragment: str) -> Optional[Project]:
        raise NotImplementedError

    def list_all(self, *, status: Optional[ProjectStatus] = None) -> Sequence[Project]:
        raise NotImplementedError

    def create(self, fields: ProjectFields) -> int:
        raise NotImplementedError

    def update(self, project_id: int, fields: ProjectFields) -> bool:
        raise NotImplementedError

    def delete_by_id(self, project_id: int) -> bool:
        raise NotImplementedError

    def set_progress(self, project_id: int, *, progress_percentage: int) -> bool:
        raise NotImplementedError
