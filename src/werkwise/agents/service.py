from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import add_months, month_start
from ..common.validators import optional_float, require_email, require_min_length, require_non_empty, require_range
from ..core.constants import DEFAULT_AGENT_COMMISSION, FINANCE_HISTORY_MONTHS, MONTHLY_TOP_LIMIT, RECENT_LEADS_LIMIT
from ..core.enums import AgentRole, LeadStatus
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .commission import commission_level, earnings
from .model import Lead, LeadChanges, LeadNote, SalesAgent
from .repository import LeadRepository, SalesAgentRepository

logger = logging.getLogger(__name__)

NL_MONTHS_SHORT = ("jan.", "feb.", "mrt.", "apr.", "mei", "jun.", "jul.", "aug.", "sep.", "okt.", "nov.", "dec.")


@dataclass(frozen=True)
class SessionAgent:
    agent_id: int
    naam: str
    email: str
    role: AgentRole
    commission_percentage: float


class AgentAuthService:
    """Login for the sales portal; separate from employee accounts."""

    def __init__(self, agents: SalesAgentRepository):
        self._agents = agents

    def authenticate(self, email: str, password: str) -> SessionAgent:
        agent = self._agents.get_by_email((email or "").strip().lower())
        try:
            ok = bool(agent) and check_password_hash(agent.password_hash, password or "")
        except ValueError:
            ok = False
        if not ok:
            raise AuthenticationError("E-mailadres of wachtwoord is onjuist")
        if not agent.is_active:
            raise AuthenticationError("Dit account is gedeactiveerd")

        return SessionAgent(
            agent_id=agent.id,
            naam=agent.naam,
            email=agent.email,
            role=agent.role,
            commission_percentage=agent.commission_percentage,
        )

    def get_agent(self, agent_id: int) -> SalesAgent:
        agent = self._agents.get_by_id(int(agent_id))
        if not agent:
            raise NotFoundError("Agent niet gevonden")
        return agent


@dataclass(frozen=True)
class LeadDetail:
    lead: Lead
    notes: tuple[LeadNote, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {"lead": self.lead.to_dict(), "notes": [n.to_dict() for n in self.notes]}


def _parse_status(value) -> Optional[LeadStatus]:
    if value in (None, "", "all"):
        return None
    try:
        return LeadStatus(value)
    except ValueError:
        raise ValidationError("Ongeldige status")


class LeadService:
    def __init__(self, leads: LeadRepository, agents: SalesAgentRepository):
        self._leads = leads
        self._agents = agents

    def _visible(self, lead_id: int, *, agent_id: int, is_admin: bool) -> Lead:
        lead = self._leads.get_by_id(int(lead_id))
        if not lead or (not is_admin and lead.assigned_to != agent_id):
            raise NotFoundError("Lead niet gevonden")
        return lead

    def list_leads(
        self, *, agent_id: int, is_admin: bool, status=None, search: Optional[str] = None
    ) -> Sequence[Lead]:
        leads = self._leads.list_leads(assigned_to=None if is_admin else agent_id, status=_parse_status(status))
        query = (search or "").strip().lower()
        if query:
            leads = [l for l in leads if query in l.company_name.lower() or query in l.contact_email.lower()]
        return leads

    def create_lead(self, *, agent_id: int, data: dict) -> int:
        company_name = require_non_empty(data.get("company_name"), "Bedrijfsnaam")
        contact_email = require_email(data.get("contact_email"))
        lead_id = self._leads.create(
            company_name=company_name,
            contact_email=contact_email,
            contact_phone=(data.get("contact_phone") or "").strip() or None,
            website=(data.get("website") or "").strip() or None,
            created_by=agent_id,
        )
        logger.info("Agent %s created lead %s", agent_id, lead_id)
        return lead_id

    def get_lead(self, lead_id: int, *, agent_id: int, is_admin: bool) -> LeadDetail:
        lead = self._visible(lead_id, agent_id=agent_id, is_admin=is_admin)
        return LeadDetail(lead=lead, notes=tuple(self._leads.list_notes(lead.id)))

    def update_lead(self, lead_id: int, *, agent_id: int, is_admin: bool, data: dict, now: datetime) -> None:
        lead = self._visible(lead_id, agent_id=agent_id, is_admin=is_admin)

        status = _parse_status(data.get("status", lead.status.value)) or lead.status
        assigned_to = data.get("assigned_to", lead.assigned_to) or None
        if assigned_to is not None:
            assignee = self._agents.get_by_id(int(assigned_to))
            if not assignee or not assignee.is_active:
                raise ValidationError("Ongeldige agent")
            assigned_to = assignee.id

        # Absent keys keep the stored value; an explicit empty value clears it.
        monthly_amount = lead.monthly_amount
        if "monthly_amount" in data:
            monthly_amount = optional_float(data["monthly_amount"], "Maandbedrag")
        commission = lead.commission_percentage
        if "commission_percentage" in data:
            commission = optional_float(data["commission_percentage"], "Commissie percentage")
            if commission is not None:
                require_range(commission, "Commissie percentage", minimum=0, maximum=100)

        self._leads.update(
            lead.id,
            LeadChanges(
                status=status,
                assigned_to=assigned_to,
                monthly_amount=monthly_amount,
                commission_percentage=commission,
                updated_at=now,
            ),
        )

    def add_note(self, lead_id: int, *, agent_id: int, is_admin: bool, content: str) -> int:
        lead = self._visible(lead_id, agent_id=agent_id, is_admin=is_admin)
        content = require_non_empty(content, "Notitie")
        return self._leads.add_note(lead_id=lead.id, content=content, created_by=agent_id)

    def dashboard_stats(self, *, agent_id: int, is_admin: bool) -> dict[str, Any]:
        leads = self._leads.list_leads(assigned_to=None if is_admin else agent_id)
        return {
            "totalLeads": len(leads),
            "newLeads": sum(1 for l in leads if l.status == LeadStatus.NEW),
            "inProgressLeads": sum(1 for l in leads if l.status in (LeadStatus.IN_PROGRESS, LeadStatus.CONTACTED)),
            "convertedLeads": sum(1 for l in leads if l.status in (LeadStatus.CONVERTED, LeadStatus.PAID)),
            "myLeads": sum(1 for l in leads if l.assigned_to == agent_id),
            "recentLeads": [l.to_dict() for l in leads[:RECENT_LEADS_LIMIT]],
        }


class AgentFinanceService:
    """Earnings and rankings derived from lead statuses."""

    def __init__(self, leads: LeadRepository, agents: SalesAgentRepository):
        self._leads = leads
        self._agents = agents

    def finance(self, *, agent_id: int, now: datetime) -> dict[str, Any]:
        leads = self._leads.list_leads(assigned_to=agent_id)
        paid = [l for l in leads if l.status == LeadStatus.PAID]
        pending = [l for l in leads if l.status == LeadStatus.CONVERTED]

        level = commission_level(len(paid))
        start = month_start(now)
        monthly_paid = [l for l in paid if l.updated_at and l.updated_at.date() >= start]

        history = []
        for offset in range(FINANCE_HISTORY_MONTHS - 1, -1, -1):
            first = add_months(start, -offset)
            following = add_months(first, 1)
            month_paid = [l for l in paid if l.updated_at and first <= l.updated_at.date() < following]
            history.append(
                {
                    "month": NL_MONTHS_SHORT[first.month - 1],
                    "paidLeads": len(month_paid),
                    "earnings": earnings(len(month_paid), commission_level(len(month_paid))),
                }
            )

        return {
            "totalPaidLeads": len(paid),
            "monthlyPaidLeads": len(monthly_paid),
            "pendingLeads": len(pending),
            "totalEarnings": earnings(len(paid), level),
            "monthlyEarnings": earnings(len(monthly_paid), level),
            "pendingEarnings": earnings(len(pending), level),
            "commissionPercentage": level.percentage,
            "commissionLevel": level.name,
            "nextLevelAt": level.next_at,
            "leadsToNextLevel": max(0, level.next_at - len(paid)),
            "monthly": history,
        }

    def ranking(self, *, now: datetime) -> dict[str, Any]:
        agents = self._agents.list_all(active_only=True)
        leads = self._leads.list_leads()
        start = month_start(now)

        stats = []
        for agent in agents:
            own = [l for l in leads if l.assigned_to == agent.id]
            monthly = [l for l in own if l.created_at and l.created_at.date() >= start]
            stats.append(
                {
                    "id": agent.id,
                    "naam": agent.naam,
                    "totalLeads": len(own),
                    "monthlyLeads": len(monthly),
                    "commissionLevel": commission_level(len(own)).level,
                }
            )

        rankings = sorted(stats, key=lambda s: s["totalLeads"], reverse=True)
        monthly_top = sorted(
            (s for s in stats if s["monthlyLeads"] > 0), key=lambda s: s["monthlyLeads"], reverse=True
        )[:MONTHLY_TOP_LIMIT]
        return {"rankings": rankings, "monthlyTop3": monthly_top}


class AgentAdminService:
    """Sales-portal user management, restricted to agent admins."""

    def __init__(self, agents: SalesAgentRepository):
        self._agents = agents

    @staticmethod
    def _require_admin(is_admin: bool) -> None:
        if not is_admin:
            raise AuthorizationError("Geen toegang")

    def list_agents(self, *, is_admin: bool) -> Sequence[SalesAgent]:
        self._require_admin(is_admin)
        return self._agents.list_all()

    def list_active_agents(self) -> Sequence[SalesAgent]:
        return self._agents.list_all(active_only=True)

    def create_agent(self, *, is_admin: bool, data: dict) -> int:
        self._require_admin(is_admin)
        naam = require_non_empty(data.get("naam"), "Naam")
        email = require_email(data.get("email"))
        password = require_min_length(data.get("password"), "Wachtwoord", 6)

        try:
            role = AgentRole(data.get("role") or AgentRole.SALES.value)
        except ValueError:
            raise ValidationError("Ongeldige rol")

        commission = optional_float(data.get("commission_percentage"), "Commissie percentage")
        commission = DEFAULT_AGENT_COMMISSION if commission is None else commission
        require_range(commission, "Commissie percentage", minimum=0, maximum=100)

        if self._agents.get_by_email(email):
            raise ValidationError("E-mailadres is al in gebruik")

        return self._agents.create(
            naam=naam,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            commission_percentage=commission,
        )

    def update_commission(self, agent_id: int, *, is_admin: bool, commission_percentage) -> None:
        self._require_admin(is_admin)
        value = optional_float(commission_percentage, "Commissie percentage")
        if value is None:
            raise ValidationError("Commissie percentage is verplicht")
        require_range(value, "Commissie percentage", minimum=0, maximum=100)
        if not self._agents.update_commission(int(agent_id), value):
            raise NotFoundError("Agent niet gevonden")

    def toggle_active(self, agent_id: int, *, is_admin: bool) -> bool:
        self._require_admin(is_admin)
        agent = self._agents.get_by_id(int(agent_id))
        if not agent:
            raise NotFoundError("Agent niet gevonden")
        self._agents.set_active(agent.id, not agent.is_active)
        return not agent.is_active
