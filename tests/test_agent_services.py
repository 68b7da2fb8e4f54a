from __future__ import annotations

from datetime import datetime

import pytest
from werkzeug.security import generate_password_hash

from fakes import InMemoryAgents, InMemoryLeads
from werkwise.agents.model import Lead, SalesAgent
from werkwise.agents.service import AgentAdminService, AgentAuthService, AgentFinanceService, LeadService
from werkwise.core.enums import AgentRole, LeadStatus
from werkwise.core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError


def _agents() -> InMemoryAgents:
    return InMemoryAgents(
        [
            SalesAgent(id=1, naam="Anna", email="anna@werkwise.nl", password_hash=generate_password_hash("geheim1")),
            SalesAgent(id=2, naam="Bas", email="bas@werkwise.nl", password_hash="x", role=AgentRole.ADMIN),
            SalesAgent(id=3, naam="Cor", email="cor@werkwise.nl", password_hash=generate_password_hash("geheim3"), is_active=False),
        ]
    )


def _lead(lid: int, status: LeadStatus, assigned_to: int, created: datetime, updated: datetime = None) -> Lead:
    return Lead(
        id=lid,
        company_name=f"Bedrijf {lid}",
        contact_email=f"info{lid}@bedrijf.nl",
        status=status,
        assigned_to=assigned_to,
        created_at=created,
        updated_at=updated or created,
    )


def _leads() -> InMemoryLeads:
    return InMemoryLeads(
        [
            _lead(1, LeadStatus.PAID, 1, datetime(2025, 8, 1), datetime(2025, 10, 3, 12, 0)),
            _lead(2, LeadStatus.PAID, 1, datetime(2025, 8, 2), datetime(2025, 9, 30, 18, 0)),
            _lead(3, LeadStatus.PAID, 1, datetime(2025, 4, 2), datetime(2025, 5, 10, 9, 0)),
            _lead(4, LeadStatus.CONVERTED, 1, datetime(2025, 9, 5)),
            _lead(5, LeadStatus.NEW, 1, datetime(2025, 10, 10)),
            _lead(6, LeadStatus.PAID, 2, datetime(2025, 10, 12)),
        ]
    )


def test_agent_login():
    auth = AgentAuthService(_agents())

    agent = auth.authenticate(" Anna@Werkwise.nl ", "geheim1")
    assert agent.agent_id == 1
    assert agent.role == AgentRole.SALES

    with pytest.raises(AuthenticationError) as exc:
        auth.authenticate("anna@werkwise.nl", "fout")
    assert str(exc.value) == "E-mailadres of wachtwoord is onjuist"

    with pytest.raises(AuthenticationError) as exc:
        auth.authenticate("cor@werkwise.nl", "geheim3")
    assert str(exc.value) == "Dit account is gedeactiveerd"


def test_finance_overview(fixed_now):
    finance = AgentFinanceService(_leads(), _agents()).finance(agent_id=1, now=fixed_now)

    assert finance["totalPaidLeads"] == 3
    assert finance["monthlyPaidLeads"] == 1
    assert finance["pendingLeads"] == 1
    assert finance["commissionLevel"] == "Bronze"
    assert finance["totalEarnings"] == pytest.approx(90.0)
    assert finance["monthlyEarnings"] == pytest.approx(30.0)
    assert finance["pendingEarnings"] == pytest.approx(30.0)
    assert finance["nextLevelAt"] == 5
    assert finance["leadsToNextLevel"] == 2

    history = finance["monthly"]
    assert [m["month"] for m in history] == ["mei", "jun.", "jul.", "aug.", "sep.", "okt."]
    # a lead paid on the evening of 30 September belongs to September
    assert [m["paidLeads"] for m in history] == [1, 0, 0, 0, 1, 1]
    assert history[-1]["earnings"] == pytest.approx(30.0)


def test_ranking(fixed_now):
    ranking = AgentFinanceService(_leads(), _agents()).ranking(now=fixed_now)

    assert [(r["naam"], r["totalLeads"]) for r in ranking["rankings"]] == [("Anna", 5), ("Bas", 1)]
    assert ranking["rankings"][0]["commissionLevel"] == 3
    assert [r["naam"] for r in ranking["monthlyTop3"]] == ["Anna", "Bas"]


def test_sales_agent_only_sees_own_leads():
    svc = LeadService(_leads(), _agents())

    own = svc.list_leads(agent_id=2, is_admin=False)
    assert [l.id for l in own] == [6]
    assert len(svc.list_leads(agent_id=2, is_admin=True)) == 6
    assert [l.id for l in svc.list_leads(agent_id=1, is_admin=False, status="paid", search="bedrijf 2")] == [2]

    with pytest.raises(NotFoundError):
        svc.get_lead(1, agent_id=2, is_admin=False)


def test_update_lead(fixed_now):
    leads = _leads()
    svc = LeadService(leads, _agents())

    svc.update_lead(
        5,
        agent_id=1,
        is_admin=False,
        data={"status": "converted", "monthly_amount": "249,50", "commission_percentage": 15},
        now=fixed_now,
    )
    lead = leads.get_by_id(5)
    assert lead.status == LeadStatus.CONVERTED
    assert lead.monthly_amount == 249.5
    assert lead.commission_percentage == 15.0
    assert lead.assigned_to == 1
    assert lead.updated_at == fixed_now

    with pytest.raises(ValidationError):
        svc.update_lead(5, agent_id=1, is_admin=False, data={"assigned_to": 3}, now=fixed_now)
    with pytest.raises(ValidationError):
        svc.update_lead(5, agent_id=1, is_admin=False, data={"commission_percentage": 120}, now=fixed_now)


def test_status_only_update_keeps_amounts(fixed_now):
    leads = _leads()
    svc = LeadService(leads, _agents())
    svc.update_lead(
        4,
        agent_id=1,
        is_admin=False,
        data={"monthly_amount": 250, "commission_percentage": 15},
        now=fixed_now,
    )

    svc.update_lead(4, agent_id=1, is_admin=False, data={"status": "paid"}, now=fixed_now)
    lead = leads.get_by_id(4)
    assert lead.status == LeadStatus.PAID
    assert lead.monthly_amount == 250.0
    assert lead.commission_percentage == 15.0

    svc.update_lead(4, agent_id=1, is_admin=False, data={"monthly_amount": ""}, now=fixed_now)
    lead = leads.get_by_id(4)
    assert lead.monthly_amount is None
    assert lead.commission_percentage == 15.0


def test_create_lead_and_notes():
    leads = InMemoryLeads()
    svc = LeadService(leads, _agents())

    lead_id = svc.create_lead(agent_id=1, data={"company_name": " Bakkerij Jansen ", "contact_email": "Info@Jansen.nl"})
    lead = leads.get_by_id(lead_id)
    assert lead.company_name == "Bakkerij Jansen"
    assert lead.contact_email == "info@jansen.nl"
    assert lead.status == LeadStatus.NEW

    with pytest.raises(ValidationError):
        svc.create_lead(agent_id=1, data={"company_name": "X", "contact_email": "geen-email"})

    with pytest.raises(ValidationError):
        svc.add_note(lead_id, agent_id=1, is_admin=True, content="   ")
    svc.add_note(lead_id, agent_id=1, is_admin=True, content="Gebeld, terugbellen vrijdag")
    detail = svc.get_lead(lead_id, agent_id=1, is_admin=True)
    assert [n.content for n in detail.notes] == ["Gebeld, terugbellen vrijdag"]


def test_dashboard_stats():
    stats = LeadService(_leads(), _agents()).dashboard_stats(agent_id=1, is_admin=False)

    assert stats["totalLeads"] == 5
    assert stats["newLeads"] == 1
    assert stats["convertedLeads"] == 4
    assert stats["myLeads"] == 5
    assert len(stats["recentLeads"]) == 5


def test_agent_admin():
    agents = _agents()
    admin = AgentAdminService(agents)

    with pytest.raises(AuthorizationError):
        admin.create_agent(is_admin=False, data={})
    with pytest.raises(ValidationError):
        admin.create_agent(is_admin=True, data={"naam": "Dirk", "email": "anna@werkwise.nl", "password": "geheim"})

    new_id = admin.create_agent(is_admin=True, data={"naam": "Dirk", "email": "dirk@werkwise.nl", "password": "geheim"})
    assert agents.get_by_id(new_id).commission_percentage == 10

    admin.update_commission(new_id, is_admin=True, commission_percentage="12.5")
    assert agents.get_by_id(new_id).commission_percentage == 12.5

    assert admin.toggle_active(new_id, is_admin=True) is False
    assert [a.id for a in admin.list_active_agents()] == [1, 2]
