from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import AgentRole, LeadStatus
from .model import Lead, LeadChanges, LeadNote, SalesAgent


class SalesAgentRepository(Protocol):
    def get_by_id(self, agent_id: int) -> Optional[SalesAgent]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[SalesAgent]:
        raise NotImplementedError

    def list_all(self, *, active_only: bool = False) -> Sequence[SalesAgent]:
        raise NotImplementedError

    def create(
        self, *, naam: str, email: str, password_hash: str, role: AgentRole, commission_percentage: float
    ) -> int:
        raise NotImplementedError

    def update_commission(self, agent_id: int, commission_percentage: float) -> bool:
        raise NotImplementedError

    def set_active(self, agent_id: int, is_active: bool) -> bool:
        raise NotImplementedError


class LeadRepository(Protocol):
    def get_by_id(self, lead_id: int) -> Optional[Lead]:
        raise NotImplementedError

    def list_leads(
        self, *, assigned_to: Optional[int] = None, status: Optional[LeadStatus] = None
    ) -> Sequence[Lead]:
        """Newest first."""
        raise NotImplementedError

    def create(
        self,
        *,
        company_name: str,
        contact_email: str,
        contact_phone: Optional[str],
        website: Optional[str],
        created_by: int,
    ) -> int:
        raise NotImplementedError

    def update(self, lead_id: int, changes: LeadChanges) -> bool:
        raise NotImplementedError

    def list_notes(self, lead_id: int) -> Sequence[LeadNote]:
        """Newest first."""
        raise NotImplementedError

    def add_note(self, *, lead_id: int, content: str, created_by: int) -> int:
        raise NotImplementedError
