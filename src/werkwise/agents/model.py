from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..core.enums import AgentRole, LeadStatus


@dataclass(frozen=True)
class SalesAgent:
    id: int
    naam: str
    email: str
    password_hash: str
    role: AgentRole = AgentRole.SALES
    commission_percentage: float = 10.0
    is_active: bool = True
    created_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == AgentRole.ADMIN

    def to_public_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "naam": self.naam,
            "email": self.email,
            "role": self.role.value,
            "commission_percentage": self.commission_percentage,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class Lead:
    id: int
    company_name: str
    contact_email: str
    status: LeadStatus
    source: str = "manual"
    contact_phone: Optional[str] = None
    website: Optional[str] = None
    assigned_to: Optional[int] = None
    created_by: Optional[int] = None
    monthly_amount: Optional[float] = None
    commission_percentage: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    assigned_agent_naam: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "company_name": self.company_name,
            "contact_email": self.contact_email,
            "contact_phone": self.contact_phone,
            "website": self.website,
            "status": self.status.value,
            "source": self.source,
            "assigned_to": self.assigned_to,
            "assigned_agent": {"naam": self.assigned_agent_naam} if self.assigned_agent_naam else None,
            "created_by": self.created_by,
            "monthly_amount": self.monthly_amount,
            "commission_percentage": self.commission_percentage,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class LeadNote:
    id: int
    lead_id: int
    content: str
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    agent_naam: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "lead_id": self.lead_id,
            "content": self.content,
            "created_by": self.created_by,
            "agent": {"naam": self.agent_naam} if self.agent_naam else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class LeadChanges:
    status: LeadStatus
    assigned_to: Optional[int]
    monthly_amount: Optional[float]
    commission_percentage: Optional[float]
    updated_at: datetime
