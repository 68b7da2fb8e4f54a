from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from fakes import (
    InMemoryAgents,
    InMemoryDamageReports,
    InMemoryEmailLogs,
    InMemoryEmailSchedules,
    InMemoryEmailTemplates,
    InMemoryInventory,
    InMemoryLeads,
    InMemoryNotifications,
    InMemoryProfiles,
    InMemoryProjects,
    InMemoryRegistrations,
    InMemorySettings,
    InMemoryVacation,
    RecordingEmailClient,
)
from werkwise.container import wire_container
from werkwise.core.enums import Role
from werkwise.main import create_app
from werkwise.users.model import Profile


@pytest.fixture
def app():
    profiles = InMemoryProfiles(
        [
            Profile(
                id=1, naam="Jan", email="jan@werkwise.nl",
                password_hash=generate_password_hash("geheim123"), role=Role.ADMIN,
            ),
            Profile(
                id=2, naam="Pieter", email="pieter@werkwise.nl",
                password_hash=generate_password_hash("welkom123"), role=Role.MEDEWERKER,
            ),
        ]
    )
    templates = InMemoryEmailTemplates()
    container = wire_container(
        conn=None,
        profiles_repo=profiles,
        projects_repo=InMemoryProjects(),
        registrations_repo=InMemoryRegistrations(),
        inventory_repo=InMemoryInventory(),
        vacation_repo=InMemoryVacation(),
        notifications_repo=InMemoryNotifications(),
        settings_repo=InMemorySettings(),
        agents_repo=InMemoryAgents(),
        leads_repo=InMemoryLeads(),
        email_templates_repo=templates,
        email_schedules_repo=InMemoryEmailSchedules(templates=templates),
        email_logs_repo=InMemoryEmailLogs(),
        damage_reports_repo=InMemoryDamageReports(),
        email_client=RecordingEmailClient(),
    )
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, email, password):
    return client.post("/api/login", json={"email": email, "password": password})


def test_me_requires_login(client):
    resp = client.get("/api/me")
    assert resp.status_code == 401
    assert resp.get_json() == {"success": False, "message": "Niet ingelogd"}


def test_login_and_me(client):
    resp = _login(client, " JAN@werkwise.nl ", "geheim123")
    assert resp.status_code == 200
    assert resp.get_json()["user"]["role"] == "admin"

    me = client.get("/api/me").get_json()
    assert me["success"] is True
    assert me["user"]["email"] == "jan@werkwise.nl"
    assert "password_hash" not in me["user"]

    client.post("/api/logout")
    assert client.get("/api/me").status_code == 401


def test_wrong_password(client):
    resp = _login(client, "jan@werkwise.nl", "fout")
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "Onjuist e-mailadres of wachtwoord"


def test_field_worker_cannot_list_users(client):
    _login(client, "pieter@werkwise.nl", "welkom123")
    resp = client.get("/api/users")
    assert resp.status_code == 403
    assert resp.get_json()["success"] is False


def test_send_scheduled_emails_without_schedules(client):
    resp = client.post("/functions/send-scheduled-emails", json={})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["message"] == "No schedules found for current time"
    assert body["test_mode"] is False


def test_functions_token_is_enforced(app, client):
    app.config["FUNCTIONS_TOKEN"] = "cron-secret"

    assert client.post("/functions/check-user-activity").status_code == 401

    resp = client.post("/functions/check-user-activity", headers={"Authorization": "Bearer cron-secret"})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["totalUsersChecked"] == 1
    assert body["newInactiveUsers"] == 1


def test_damage_report_round_trip(client):
    _login(client, "pieter@werkwise.nl", "welkom123")
    resp = client.post(
        "/api/damage-reports",
        json={"type_item": "bus", "naam": "Bus 1", "beschrijving_schade": "Deuk in zijdeur", "datum": "2025-10-14"},
    )
    assert resp.status_code == 201

    reports = client.get("/api/damage-reports").get_json()["reports"]
    assert [r["naam"] for r in reports] == ["Bus 1"]
    assert reports[0]["status"] == "gemeld"

    resp = client.put(f"/api/damage-reports/{reports[0]['id']}/status", json={"status": "opgelost"})
    assert resp.status_code == 403


def test_financial_dashboard_is_admin_only(client):
    _login(client, "pieter@werkwise.nl", "welkom123")
    assert client.get("/api/finance/dashboard").status_code == 403

    client.post("/api/logout")
    _login(client, "jan@werkwise.nl", "geheim123")
    body = client.get("/api/finance/dashboard?range=7days").get_json()
    assert body["success"] is True
    assert body["totalRevenue"] == 0
    assert body["revenueByItem"] == []
