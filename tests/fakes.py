"""In-memory repositories used by the service and controller tests."""
from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Iterable, Optional, Sequence

from werkwise.core.enums import AgentRole, LeadStatus, NotificationStatus, RequestStatus
from werkwise.damage.model import DamageReport
from werkwise.emails.model import EmailLog, EmailSchedule, EmailTemplate, NewEmailLog, SendResult
from werkwise.inventory.model import InventoryTransaction, Location, NewTransaction, Product, StockItem
from werkwise.notifications.model import NewNotification, Notification
from werkwise.projects.model import Project, ProjectFields
from werkwise.registrations.model import NewRegistration, TimeRegistration
from werkwise.agents.model import Lead, LeadChanges, LeadNote, SalesAgent
from werkwise.users.model import Profile
from werkwise.vacation.model import VacationRequest


class InMemoryProfiles:
    def __init__(self, profiles: Iterable[Profile] = ()):
        self.by_id: dict[int, Profile] = {p.id: p for p in profiles}
        self.touched: list[tuple[int, datetime]] = []

    def get_by_id(self, user_id: int) -> Optional[Profile]:
        return self.by_id.get(user_id)

    def get_by_email(self, email: str) -> Optional[Profile]:
        return next((p for p in self.by_id.values() if p.email == email), None)

    def list_all(self) -> Sequence[Profile]:
        return list(self.by_id.values())

    def list_by_ids(self, user_ids) -> Sequence[Profile]:
        wanted = set(user_ids)
        return [p for p in self.by_id.values() if p.id in wanted]

    def list_by_roles(self, roles) -> Sequence[Profile]:
        wanted = set(roles)
        return [p for p in self.by_id.values() if p.role in wanted]

    def create(self, *, naam, email, password_hash, role, hourly_rate_sale=None, hourly_rate_purchase=None) -> int:
        new_id = max(self.by_id, default=0) + 1
        self.by_id[new_id] = Profile(
            id=new_id, naam=naam, email=email, password_hash=password_hash, role=role,
            hourly_rate_sale=hourly_rate_sale, hourly_rate_purchase=hourly_rate_purchase,
        )
        return new_id

    def update_hourly_rates(self, user_id: int, *, hourly_rate_sale, hourly_rate_purchase) -> bool:
        self.by_id[user_id] = replace(
            self.by_id[user_id], hourly_rate_sale=hourly_rate_sale, hourly_rate_purchase=hourly_rate_purchase
        )
        return True

    def update_vacation_hours(self, user_id: int, *, total: float, used: float) -> bool:
        self.by_id[user_id] = replace(self.by_id[user_id], vacation_hours_total=total, vacation_hours_used=used)
        return True

    def add_vacation_hours_used(self, user_id: int, *, hours: float) -> bool:
        p = self.by_id[user_id]
        self.by_id[user_id] = replace(p, vacation_hours_used=p.vacation_hours_used + hours)
        return True

    def touch_activity(self, user_id: int, *, at: datetime) -> None:
        self.touched.append((user_id, at))

    def delete_by_id(self, user_id: int) -> bool:
        return self.by_id.pop(user_id, None) is not None

    def count_by_role(self, role) -> int:
        return sum(1 for p in self.by_id.values() if p.role == role)


class InMemoryProjects:
    def __init__(self, projects: Iterable[Project] = ()):
        self.by_id: dict[int, Project] = {p.id: p for p in projects}

    def get_by_id(self, project_id: int) -> Optional[Project]:
        return self.by_id.get(project_id)

    def get_by_name(self, naam: str) -> Optional[Project]:
        return next((p for p in self.by_id.values() if p.naam == naam), None)

    def find_by_name_like(self, fragment: str) -> Optional[Project]:
        return next((p for p in self.by_id.values() if fragment.lower() in p.naam.lower()), None)

    def list_all(self, *, status=None) -> Sequence[Project]:
        return [p for p in self.by_id.values() if status is None or p.status == status]

    def create(self, fields: ProjectFields) -> int:
        new_id = max(self.by_id, default=0) + 1
        self.by_id[new_id] = Project(id=new_id, **vars(fields))
        return new_id

    def update(self, project_id: int, fields: ProjectFields) -> bool:
        self.by_id[project_id] = Project(id=project_id, **vars(fields))
        return True

    def delete_by_id(self, project_id: int) -> bool:
        return self.by_id.pop(project_id, None) is not None

    def set_progress(self, project_id: int, *, progress_percentage: int) -> bool:
        self.by_id[project_id] = replace(self.by_id[project_id], progress_percentage=progress_percentage)
        return True


class InMemoryRegistrations:
    def __init__(self, registrations: Iterable[TimeRegistration] = ()):
        self.by_id: dict[int, TimeRegistration] = {r.id: r for r in registrations}

    def create_many(self, registrations: Sequence[NewRegistration]) -> list[int]:
        ids = []
        for reg in registrations:
            new_id = max(self.by_id, default=0) + 1
            self.by_id[new_id] = TimeRegistration(id=new_id, **vars(reg))
            ids.append(new_id)
        return ids

    def get_by_id(self, registration_id: int) -> Optional[TimeRegistration]:
        return self.by_id.get(registration_id)

    def update(self, registration_id: int, *, changes: dict) -> bool:
        self.by_id[registration_id] = replace(self.by_id[registration_id], **changes)
        return True

    def delete_by_id(self, registration_id: int) -> bool:
        return self.by_id.pop(registration_id, None) is not None

    def list_filtered(self, *, user_id=None, project_id=None, date_from=None, date_to=None, limit=None):
        out = [
            r
            for r in self.by_id.values()
            if (user_id is None or r.user_id == user_id)
            and (project_id is None or r.project_id == project_id)
            and (date_from is None or r.datum >= date_from)
            and (date_to is None or r.datum <= date_to)
        ]
        out.sort(key=lambda r: r.datum, reverse=True)
        return out[:limit] if limit else out


class InMemoryInventory:
    def __init__(self, products: Iterable[Product] = (), locations: Iterable[Location] = ()):
        self.products: dict[int, Product] = {p.id: p for p in products}
        self.locations: dict[int, Location] = {l.id: l for l in locations}
        self.stock: dict[tuple[int, int], float] = {}
        self.transactions: list[InventoryTransaction] = []

    def list_products(self):
        return list(self.products.values())

    def get_product(self, product_id: int):
        return self.products.get(product_id)

    def get_product_by_sku(self, sku: str):
        return next((p for p in self.products.values() if p.sku == sku), None)

    def create_product(
        self, *, name, sku, ean, category, unit, minimum_stock, price, supplier, purchase_price=None, sale_price=None
    ) -> int:
        new_id = max(self.products, default=0) + 1
        self.products[new_id] = Product(
            id=new_id, name=name, sku=sku, ean=ean, category=category, unit=unit,
            minimum_stock=minimum_stock, price=price, supplier=supplier,
            purchase_price=purchase_price, sale_price=sale_price,
        )
        return new_id

    def update_product(self, product_id: int, *, changes: dict) -> bool:
        self.products[product_id] = replace(self.products[product_id], **changes)
        return True

    def delete_product(self, product_id: int) -> bool:
        return self.products.pop(product_id, None) is not None

    def list_locations(self):
        return list(self.locations.values())

    def get_location(self, location_id: int):
        return self.locations.get(location_id)

    def find_location_by_name(self, fragment: str):
        return next((l for l in self.locations.values() if fragment.lower() in l.name.lower()), None)

    def create_location(self, *, name, type, license_plate, description) -> int:
        new_id = max(self.locations, default=0) + 1
        self.locations[new_id] = Location(
            id=new_id, name=name, type=type, license_plate=license_plate, description=description
        )
        return new_id

    def get_stock(self, product_id: int, location_id: int) -> float:
        return self.stock.get((product_id, location_id), 0.0)

    def list_stock(self, *, location_id=None):
        return [
            StockItem(product=self.products[p], location=self.locations[l], quantity=q)
            for (p, l), q in self.stock.items()
            if location_id is None or l == location_id
        ]

    def set_stock(self, product_id: int, location_id: int, *, quantity: float) -> None:
        self.stock[(product_id, location_id)] = quantity

    def add_stock(self, product_id: int, location_id: int, *, quantity: float) -> None:
        key = (product_id, location_id)
        self.stock[key] = self.stock.get(key, 0.0) + quantity

    def record_transactions(self, transactions: Sequence[NewTransaction]) -> list[int]:
        ids = []
        for t in transactions:
            key = (t.product_id, t.location_id)
            self.stock[key] = self.stock.get(key, 0.0) + t.quantity
            tx = InventoryTransaction(id=len(self.transactions) + 1, **vars(t))
            self.transactions.append(tx)
            ids.append(tx.id)
        return ids

    def list_transactions(self, *, project_id=None, transaction_type=None, since=None, limit=None):
        out = [
            t
            for t in self.transactions
            if (project_id is None or t.project_id == project_id)
            and (transaction_type is None or t.transaction_type == transaction_type)
            and (since is None or (t.created_at is not None and t.created_at >= since))
        ]
        return out[:limit] if limit else out


class InMemoryNotifications:
    def __init__(self):
        self.items: list[Notification] = []

    def create_many(self, notifications: Sequence[NewNotification]) -> int:
        for n in notifications:
            self.items.append(
                Notification(id=len(self.items) + 1, status=NotificationStatus.UNREAD, **vars(n))
            )
        return len(notifications)

    def list_for_recipient(self, recipient_id: int, *, status=None, limit=None):
        out = [n for n in self.items if n.recipient_id == recipient_id and (status is None or n.status == status)]
        return out[:limit] if limit else out

    def set_status(self, notification_id: int, *, recipient_id: int, status) -> bool:
        for i, n in enumerate(self.items):
            if n.id == notification_id and n.recipient_id == recipient_id:
                self.items[i] = replace(n, status=status)
                return True
        return False

    def mark_all_read(self, recipient_id: int) -> int:
        count = 0
        for i, n in enumerate(self.items):
            if n.recipient_id == recipient_id and n.status == NotificationStatus.UNREAD:
                self.items[i] = replace(n, status=NotificationStatus.READ)
                count += 1
        return count

    def count_unread(self, recipient_id: int) -> int:
        return len(self.list_for_recipient(recipient_id, status=NotificationStatus.UNREAD))

    def latest_for_entity(self, *, related_entity_type, related_entity_id, types):
        wanted = set(types)
        matches = [
            n
            for n in self.items
            if n.related_entity_type == related_entity_type
            and n.related_entity_id == related_entity_id
            and n.type in wanted
        ]
        return matches[-1] if matches else None


class InMemoryVacation:
    def __init__(self):
        self.by_id: dict[int, VacationRequest] = {}

    def create(self, *, user_id, type, start_date, end_date, reason) -> int:
        new_id = len(self.by_id) + 1
        self.by_id[new_id] = VacationRequest(
            id=new_id, user_id=user_id, type=type, start_date=start_date, end_date=end_date,
            status=RequestStatus.PENDING, reason=reason,
        )
        return new_id

    def get_by_id(self, request_id: int):
        return self.by_id.get(request_id)

    def list_requests(self, *, user_id=None, status=None):
        return [
            r
            for r in self.by_id.values()
            if (user_id is None or r.user_id == user_id) and (status is None or r.status == status)
        ]

    def review(self, request_id: int, *, status, reviewed_by, reviewed_at, review_note) -> bool:
        req = self.by_id[request_id]
        if req.status != RequestStatus.PENDING:
            return False
        self.by_id[request_id] = replace(
            req, status=status, reviewed_by=reviewed_by, reviewed_at=reviewed_at, review_note=review_note
        )
        return True

    def delete_by_id(self, request_id: int) -> bool:
        return self.by_id.pop(request_id, None) is not None



class InMemoryDamageReports:
    def __init__(self, reports: Iterable[DamageReport] = ()):
        self.by_id: dict[int, DamageReport] = {r.id: r for r in reports}

    def create(self, fields, *, created_by: int) -> int:
        new_id = max(self.by_id, default=0) + 1
        self.by_id[new_id] = DamageReport(id=new_id, created_by=created_by, **vars(fields))
        return new_id

    def get_by_id(self, report_id: int):
        return self.by_id.get(report_id)

    def list_reports(self, *, created_by=None):
        reports = [r for r in self.by_id.values() if created_by is None or r.created_by == created_by]
        return sorted(reports, key=lambda r: r.id, reverse=True)

    def update(self, report_id: int, fields) -> bool:
        if report_id not in self.by_id:
            return False
        self.by_id[report_id] = replace(self.by_id[report_id], **vars(fields))
        return True

    def set_status(self, report_id: int, status) -> bool:
        if report_id not in self.by_id:
            return False
        self.by_id[report_id] = replace(self.by_id[report_id], status=status)
        return True

    def delete_by_id(self, report_id: int) -> bool:
        return self.by_id.pop(report_id, None) is not None

class InMemorySettings:
    def __init__(self, system=None, invoice=None):
        self.system = system
        self.invoice = invoice

    def get_system_settings(self):
        return self.system

    def save_system_settings(self, settings, *, updated_by) -> None:
        self.system = settings

    def get_invoice_settings(self):
        return self.invoice

    def save_invoice_settings(self, settings) -> None:
        self.invoice = settings


class InMemoryAgents:
    def __init__(self, agents: Iterable[SalesAgent] = ()):
        self.by_id: dict[int, SalesAgent] = {a.id: a for a in agents}

    def get_by_id(self, agent_id: int):
        return self.by_id.get(agent_id)

    def get_by_email(self, email: str):
        return next((a for a in self.by_id.values() if a.email == email), None)

    def list_all(self, *, active_only: bool = False):
        return [a for a in self.by_id.values() if a.is_active or not active_only]

    def create(self, *, naam, email, password_hash, role=AgentRole.SALES, commission_percentage=10.0) -> int:
        new_id = max(self.by_id, default=0) + 1
        self.by_id[new_id] = SalesAgent(
            id=new_id, naam=naam, email=email, password_hash=password_hash, role=role,
            commission_percentage=commission_percentage,
        )
        return new_id

    def update_commission(self, agent_id: int, commission_percentage: float) -> bool:
        if agent_id not in self.by_id:
            return False
        self.by_id[agent_id] = replace(self.by_id[agent_id], commission_percentage=commission_percentage)
        return True

    def set_active(self, agent_id: int, is_active: bool) -> bool:
        self.by_id[agent_id] = replace(self.by_id[agent_id], is_active=is_active)
        return True


class InMemoryLeads:
    def __init__(self, leads: Iterable[Lead] = ()):
        self.by_id: dict[int, Lead] = {l.id: l for l in leads}
        self.notes: list[LeadNote] = []

    def get_by_id(self, lead_id: int):
        return self.by_id.get(lead_id)

    def list_leads(self, *, assigned_to=None, status=None):
        out = [
            l
            for l in self.by_id.values()
            if (assigned_to is None or l.assigned_to == assigned_to) and (status is None or l.status == status)
        ]
        out.sort(key=lambda l: l.created_at or datetime.min, reverse=True)
        return out

    def create(self, *, company_name, contact_email, contact_phone, website, created_by) -> int:
        new_id = max(self.by_id, default=0) + 1
        self.by_id[new_id] = Lead(
            id=new_id, company_name=company_name, contact_email=contact_email, status=LeadStatus.NEW,
            contact_phone=contact_phone, website=website, created_by=created_by,
        )
        return new_id

    def update(self, lead_id: int, changes: LeadChanges) -> bool:
        self.by_id[lead_id] = replace(self.by_id[lead_id], **vars(changes))
        return True

    def list_notes(self, lead_id: int):
        return [n for n in reversed(self.notes) if n.lead_id == lead_id]

    def add_note(self, *, lead_id: int, content: str, created_by: int) -> int:
        note = LeadNote(id=len(self.notes) + 1, lead_id=lead_id, content=content, created_by=created_by)
        self.notes.append(note)
        return note.id


class InMemoryEmailTemplates:
    def __init__(self, templates: Iterable[EmailTemplate] = ()):
        self.by_id: dict[int, EmailTemplate] = {t.id: t for t in templates}

    def get_by_id(self, template_id: int):
        return self.by_id.get(template_id)

    def get_by_name(self, name: str):
        return next((t for t in self.by_id.values() if t.name == name), None)

    def list_all(self):
        return list(self.by_id.values())

    def create(self, *, name, type, subject, body, enabled) -> int:
        new_id = max(self.by_id, default=0) + 1
        self.by_id[new_id] = EmailTemplate(id=new_id, name=name, type=type, subject=subject, body=body, enabled=enabled)
        return new_id

    def update(self, template_id: int, *, name, type, subject, body, enabled) -> bool:
        if template_id not in self.by_id:
            return False
        self.by_id[template_id] = EmailTemplate(
            id=template_id, name=name, type=type, subject=subject, body=body, enabled=enabled
        )
        return True

    def delete_by_id(self, template_id: int) -> bool:
        return self.by_id.pop(template_id, None) is not None


class InMemoryEmailSchedules:
    def __init__(self, schedules: Iterable[EmailSchedule] = (), templates: Optional[InMemoryEmailTemplates] = None):
        self.by_id: dict[int, EmailSchedule] = {s.id: s for s in schedules}
        self.templates = templates

    def get_by_id(self, schedule_id: int):
        return self.by_id.get(schedule_id)

    def list_all(self):
        return list(self.by_id.values())

    def list_enabled_at_hour(self, hour: int):
        return [s for s in self.by_id.values() if s.enabled and s.hour == hour]

    def create(self, fields) -> int:
        new_id = max(self.by_id, default=0) + 1
        self.by_id[new_id] = self._from_fields(new_id, fields)
        return new_id

    def update(self, schedule_id: int, fields) -> bool:
        if schedule_id not in self.by_id:
            return False
        self.by_id[schedule_id] = self._from_fields(schedule_id, fields)
        return True

    def delete_by_id(self, schedule_id: int) -> bool:
        return self.by_id.pop(schedule_id, None) is not None

    def _from_fields(self, schedule_id: int, fields) -> EmailSchedule:
        data = dict(vars(fields))
        data["target_roles"] = tuple(data["target_roles"] or ())
        data["target_users"] = tuple(data["target_users"] or ())
        template = self.templates.get_by_id(fields.template_id) if self.templates else None
        return EmailSchedule(id=schedule_id, template=template, **data)


class InMemoryEmailLogs:
    def __init__(self):
        self.items: list[EmailLog] = []

    def create(self, log: NewEmailLog) -> int:
        self.items.append(EmailLog(id=len(self.items) + 1, **vars(log)))
        return len(self.items)

    def list_logs(self, *, to_email=None, limit: int = 200):
        out = [l for l in reversed(self.items) if to_email is None or l.to_email == to_email]
        return out[:limit]


class RecordingEmailClient:
    """Stands in for the Postmark client; `fail_for` addresses get a failed result."""

    def __init__(self, fail_for: Iterable[str] = ()):
        self.sent: list[tuple[str, str, str]] = []
        self.fail_for = set(fail_for)

    def is_configured(self) -> bool:
        return True

    def send(self, to: str, subject: str, body: str) -> SendResult:
        if to in self.fail_for:
            return SendResult(success=False, error="Postmark API error: rejected")
        self.sent.append((to, subject, body))
        return SendResult(success=True)
