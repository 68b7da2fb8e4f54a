from __future__ import annotations

from datetime import timedelta

from flask import Flask, request, session

from ..common.datetime_utils import now_local
from ..common.web import agent_admin_required, agent_required, current_agent_id, is_agent_admin, json_body, ok
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from .commission import commission_preview


def register(app: Flask, container: Container) -> None:
    leads = container.lead_service

    @app.route("/api/agent/login", methods=["POST"], endpoint="agent_login")
    def agent_login():
        data = json_body()
        s_agent = container.agent_auth_service.authenticate(data.get("email", ""), data.get("password", ""))

        session.permanent = bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

        session["agent_id"] = s_agent.agent_id
        session["agent_name"] = s_agent.naam
        session["agent_role"] = s_agent.role.value
        return ok(
            {
                "agent": {
                    "id": s_agent.agent_id,
                    "naam": s_agent.naam,
                    "email": s_agent.email,
                    "role": s_agent.role.value,
                    "commission_percentage": s_agent.commission_percentage,
                }
            }
        )

    @app.route("/api/agent/logout", methods=["POST"], endpoint="agent_logout")
    def agent_logout():
        for key in ("agent_id", "agent_name", "agent_role"):
            session.pop(key, None)
        return ok({"message": "Uitgelogd"})

    @app.route("/api/agent/me", endpoint="agent_me")
    @agent_required
    def agent_me():
        return ok({"agent": container.agent_auth_service.get_agent(current_agent_id()).to_public_dict()})

    @app.route("/api/agent/dashboard", endpoint="agent_dashboard")
    @agent_required
    def agent_dashboard():
        return ok({"stats": leads.dashboard_stats(agent_id=current_agent_id(), is_admin=is_agent_admin())})

    @app.route("/api/agent/leads", endpoint="agent_list_leads")
    @agent_required
    def agent_list_leads():
        items = leads.list_leads(
            agent_id=current_agent_id(),
            is_admin=is_agent_admin(),
            status=request.args.get("status"),
            search=request.args.get("q"),
        )
        return ok({"leads": [l.to_dict() for l in items]})

    @app.route("/api/agent/leads", methods=["POST"], endpoint="agent_create_lead")
    @agent_required
    def agent_create_lead():
        lead_id = leads.create_lead(agent_id=current_agent_id(), data=json_body())
        return ok({"id": lead_id}, 201)

    @app.route("/api/agent/leads/<int:lead_id>", endpoint="agent_get_lead")
    @agent_required
    def agent_get_lead(lead_id: int):
        detail = leads.get_lead(lead_id, agent_id=current_agent_id(), is_admin=is_agent_admin())
        return ok(detail.to_dict())

    @app.route("/api/agent/leads/<int:lead_id>", methods=["PUT"], endpoint="agent_update_lead")
    @agent_required
    def agent_update_lead(lead_id: int):
        leads.update_lead(
            lead_id, agent_id=current_agent_id(), is_admin=is_agent_admin(), data=json_body(), now=now_local()
        )
        return ok()

    @app.route("/api/agent/leads/<int:lead_id>/notes", methods=["POST"], endpoint="agent_add_note")
    @agent_required
    def agent_add_note(lead_id: int):
        note_id = leads.add_note(
            lead_id, agent_id=current_agent_id(), is_admin=is_agent_admin(), content=json_body().get("content", "")
        )
        return ok({"id": note_id}, 201)

    @app.route("/api/agent/commission-preview", endpoint="agent_commission_preview")
    @agent_required
    def agent_commission_preview():
        return ok(
            {
                "commission": commission_preview(
                    request.args.get("monthly_amount", type=float), request.args.get("commission_percentage", type=float)
                )
            }
        )

    @app.route("/api/agent/finance", endpoint="agent_finance")
    @agent_required
    def agent_finance():
        return ok({"finance": container.agent_finance_service.finance(agent_id=current_agent_id(), now=now_local())})

    @app.route("/api/agent/ranking", endpoint="agent_ranking")
    @agent_required
    def agent_ranking():
        return ok(container.agent_finance_service.ranking(now=now_local()))

    @app.route("/api/agent/agents", endpoint="agent_list_agents")
    @agent_required
    def agent_list_agents():
        # Active agents are needed by everyone for the lead assignee picker.
        if request.args.get("active") == "1":
            agents = container.agent_admin_service.list_active_agents()
        else:
            agents = container.agent_admin_service.list_agents(is_admin=is_agent_admin())
        return ok({"agents": [a.to_public_dict() for a in agents]})

    @app.route("/api/agent/agents", methods=["POST"], endpoint="agent_create_agent")
    @agent_admin_required
    def agent_create_agent():
        agent_id = container.agent_admin_service.create_agent(is_admin=is_agent_admin(), data=json_body())
        return ok({"id": agent_id}, 201)

    @app.route("/api/agent/agents/<int:agent_id>/commission", methods=["PUT"], endpoint="agent_update_commission")
    @agent_admin_required
    def agent_update_commission(agent_id: int):
        container.agent_admin_service.update_commission(
            agent_id, is_admin=is_agent_admin(), commission_percentage=json_body().get("commission_percentage")
        )
        return ok()

    @app.route("/api/agent/agents/<int:agent_id>/toggle-active", methods=["POST"], endpoint="agent_toggle_active")
    @agent_admin_required
    def agent_toggle_active(agent_id: int):
        is_active = container.agent_admin_service.toggle_active(agent_id, is_admin=is_agent_admin())
        return ok({"is_active": is_active})
