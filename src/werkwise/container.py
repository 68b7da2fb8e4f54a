from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from .agents.mysql_agent_repository import MySQLSalesAgentRepository
from .agents.mysql_lead_repository import MySQLLeadRepository
from .agents.repository import LeadRepository, SalesAgentRepository
from .agents.service import AgentAdminService, AgentAuthService, AgentFinanceService, LeadService
from .core.constants import DEFAULT_APP_URL
from .damage.mysql_damage_repository import MySQLDamageReportRepository
from .damage.repository import DamageReportRepository
from .damage.service import DamageReportService
from .database.connection import DBConfig, DatabaseConnection
from .emails.client import EmailClient
from .emails.dispatcher import ScheduledEmailDispatcher
from .emails.mysql_email_repository import (
    MySQLEmailLogRepository,
    MySQLEmailScheduleRepository,
    MySQLEmailTemplateRepository,
)
from .emails.repository import EmailLogRepository, EmailScheduleRepository, EmailTemplateRepository
from .emails.service import EmailAdminService
from .finance.service import FinancialDashboardService
from .inventory.mysql_inventory_repository import MySQLInventoryRepository
from .inventory.repository import InventoryRepository
from .inventory.service import InventoryService
from .invoicing.service import InvoiceService
from .notifications.activity import UserActivityChecker
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .projects.mysql_project_repository import MySQLProjectRepository
from .projects.repository import ProjectRepository
from .projects.service import ProjectService
from .registrations.mysql_registration_repository import MySQLTimeRegistrationRepository
from .registrations.repository import TimeRegistrationRepository
from .registrations.service import RegistrationService
from .seeding.demo import DemoSeeder
from .system.mysql_settings_repository import MySQLSettingsRepository
from .system.repository import SettingsRepository
from .system.service import SettingsService
from .users.mysql_profile_repository import MySQLProfileRepository
from .users.repository import ProfileRepository
from .users.service import AuthService, UserService
from .vacation.mysql_vacation_repository import MySQLVacationRepository
from .vacation.repository import VacationRepository
from .vacation.service import VacationService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    profiles_repo: ProfileRepository
    projects_repo: ProjectRepository
    registrations_repo: TimeRegistrationRepository
    inventory_repo: InventoryRepository
    vacation_repo: VacationRepository
    notifications_repo: NotificationRepository
    settings_repo: SettingsRepository
    agents_repo: SalesAgentRepository
    leads_repo: LeadRepository
    email_templates_repo: EmailTemplateRepository
    email_schedules_repo: EmailScheduleRepository
    email_logs_repo: EmailLogRepository
    damage_reports_repo: DamageReportRepository

    auth_service: AuthService
    user_service: UserService
    project_service: ProjectService
    registration_service: RegistrationService
    inventory_service: InventoryService
    vacation_service: VacationService
    notification_service: NotificationService
    activity_checker: UserActivityChecker
    settings_service: SettingsService
    invoice_service: InvoiceService
    agent_auth_service: AgentAuthService
    lead_service: LeadService
    agent_finance_service: AgentFinanceService
    agent_admin_service: AgentAdminService
    email_client: EmailClient
    email_admin_service: EmailAdminService
    scheduled_email_dispatcher: ScheduledEmailDispatcher
    damage_report_service: DamageReportService
    financial_dashboard_service: FinancialDashboardService
    demo_seeder: DemoSeeder


def wire_container(
    *,
    conn: Optional[DatabaseConnection],
    profiles_repo: ProfileRepository,
    projects_repo: ProjectRepository,
    registrations_repo: TimeRegistrationRepository,
    inventory_repo: InventoryRepository,
    vacation_repo: VacationRepository,
    notifications_repo: NotificationRepository,
    settings_repo: SettingsRepository,
    agents_repo: SalesAgentRepository,
    leads_repo: LeadRepository,
    email_templates_repo: EmailTemplateRepository,
    email_schedules_repo: EmailScheduleRepository,
    email_logs_repo: EmailLogRepository,
    damage_reports_repo: DamageReportRepository,
    email_client: EmailClient,
    app_url: str = DEFAULT_APP_URL,
    rng: Optional[random.Random] = None,
) -> Container:
    """Build services on top of the given repositories (MySQL in the app, fakes in tests)."""
    settings_service = SettingsService(settings_repo)
    notification_service = NotificationService(notifications_repo, profiles_repo)
    project_service = ProjectService(projects_repo, registrations_repo, inventory_repo)
    registration_service = RegistrationService(
        registrations_repo,
        projects_repo,
        project_service,
        profiles_repo,
        notification_service,
        settings_service,
    )

    return Container(
        conn=conn,
        profiles_repo=profiles_repo,
        projects_repo=projects_repo,
        registrations_repo=registrations_repo,
        inventory_repo=inventory_repo,
        vacation_repo=vacation_repo,
        notifications_repo=notifications_repo,
        settings_repo=settings_repo,
        agents_repo=agents_repo,
        leads_repo=leads_repo,
        email_templates_repo=email_templates_repo,
        email_schedules_repo=email_schedules_repo,
        email_logs_repo=email_logs_repo,
        damage_reports_repo=damage_reports_repo,
        auth_service=AuthService(profiles_repo),
        user_service=UserService(profiles_repo, settings_service),
        project_service=project_service,
        registration_service=registration_service,
        inventory_service=InventoryService(inventory_repo, projects_repo, settings_service),
        vacation_service=VacationService(vacation_repo, profiles_repo),
        notification_service=notification_service,
        activity_checker=UserActivityChecker(profiles_repo, notifications_repo),
        settings_service=settings_service,
        invoice_service=InvoiceService(
            projects=project_service,
            registrations=registrations_repo,
            profiles=profiles_repo,
            settings=settings_service,
        ),
        agent_auth_service=AgentAuthService(agents_repo),
        lead_service=LeadService(leads_repo, agents_repo),
        agent_finance_service=AgentFinanceService(leads_repo, agents_repo),
        agent_admin_service=AgentAdminService(agents_repo),
        email_client=email_client,
        email_admin_service=EmailAdminService(
            templates=email_templates_repo, schedules=email_schedules_repo, logs=email_logs_repo
        ),
        scheduled_email_dispatcher=ScheduledEmailDispatcher(
            schedules=email_schedules_repo,
            logs=email_logs_repo,
            profiles=profiles_repo,
            registrations=registrations_repo,
            client=email_client,
            settings=settings_service,
            app_url=app_url,
        ),
        damage_report_service=DamageReportService(damage_reports_repo, settings_service),
        financial_dashboard_service=FinancialDashboardService(
            registrations=registrations_repo,
            inventory=inventory_repo,
            profiles=profiles_repo,
            projects=projects_repo,
            settings=settings_service,
        ),
        demo_seeder=DemoSeeder(
            profiles=profiles_repo,
            projects=projects_repo,
            inventory=inventory_repo,
            registrations=registrations_repo,
            rng=rng,
        ),
    )


def build_container(
    *,
    db_config: dict,
    app_url: str = DEFAULT_APP_URL,
    postmark_token: Optional[str] = None,
    from_email: str = "noreply@werkwise.nl",
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_container(
        conn=conn,
        profiles_repo=MySQLProfileRepository(conn),
        projects_repo=MySQLProjectRepository(conn),
        registrations_repo=MySQLTimeRegistrationRepository(conn),
        inventory_repo=MySQLInventoryRepository(conn),
        vacation_repo=MySQLVacationRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        settings_repo=MySQLSettingsRepository(conn),
        agents_repo=MySQLSalesAgentRepository(conn),
        leads_repo=MySQLLeadRepository(conn),
        email_templates_repo=MySQLEmailTemplateRepository(conn),
        email_schedules_repo=MySQLEmailScheduleRepository(conn),
        email_logs_repo=MySQLEmailLogRepository(conn),
        damage_reports_repo=MySQLDamageReportRepository(conn),
        email_client=EmailClient(server_token=postmark_token, from_email=from_email),
        app_url=app_url,
    )
