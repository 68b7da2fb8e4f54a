"""Scheduled e-mail job: missing-hours reminders and weekly overviews.

Runs once an hour (cron -> POST /functions/send-scheduled-emails). A failure
for one user or one schedule is recorded in the summary and the loop carries on.
"""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import format_nl_date, iso_week_number, js_weekday, week_range
from ..core.constants import DEFAULT_APP_URL, DEFAULT_MIN_DAILY_HOURS, DEFAULT_MIN_WEEKLY_HOURS
from ..core.enums import EmailTemplateType, HoursCheckType, Role, ScheduleType
from ..registrations.repository import TimeRegistrationRepository
from ..system.service import SettingsService
from ..users.model import Profile
from ..users.repository import ProfileRepository
from .client import EmailClient
from .model import EmailSchedule, EmailTemplate, NewEmailLog
from .repository import EmailLogRepository, EmailScheduleRepository
from .templating import render_template

logger = logging.getLogger(__name__)

TEST_USER_NAME = "Test Gebruiker"


def minimum_hours(schedule: EmailSchedule) -> float:
    if schedule.hours_check_type == HoursCheckType.DAILY:
        return schedule.minimum_daily_hours or DEFAULT_MIN_DAILY_HOURS
    return schedule.minimum_weekly_hours or DEFAULT_MIN_WEEKLY_HOURS


def is_due(schedule: EmailSchedule, now: datetime) -> bool:
    """Daily schedules fire every day at their hour; weekly ones also need the weekday (Sunday=0)."""
    if not schedule.enabled or schedule.hour != now.hour:
        return False
    if schedule.schedule_type == ScheduleType.DAILY:
        return True
    return schedule.day_of_week == js_weekday(now)


class ScheduledEmailDispatcher:
    def __init__(
        self,
        *,
        schedules: EmailScheduleRepository,
        logs: EmailLogRepository,
        profiles: ProfileRepository,
        registrations: TimeRegistrationRepository,
        client: EmailClient,
        settings: SettingsService,
        app_url: str = DEFAULT_APP_URL,
    ):
        self._schedules = schedules
        self._logs = logs
        self._profiles = profiles
        self._registrations = registrations
        self._client = client
        self._settings = settings
        self._app_url = app_url

    def _select_schedules(self, *, test_mode: bool, schedule_id, now: datetime) -> list[EmailSchedule]:
        if test_mode and schedule_id:
            schedule = self._schedules.get_by_id(int(schedule_id))
            return [schedule] if schedule else []
        return [s for s in self._schedules.list_enabled_at_hour(now.hour) if is_due(s, now)]

    def _recipients(self, schedule: EmailSchedule, *, test_mode: bool, test_recipient: Optional[str]) -> Sequence[Profile]:
        if test_mode and test_recipient:
            profile = self._profiles.get_by_email(test_recipient.strip().lower())
            return [profile] if profile else []
        if schedule.target_users:
            return self._profiles.list_by_ids(schedule.target_users)
        if schedule.target_roles:
            roles = []
            for value in schedule.target_roles:
                try:
                    roles.append(Role(value))
                except ValueError:
                    logger.warning("Schedule %s targets unknown role %r", schedule.id, value)
            return self._profiles.list_by_roles(roles) if roles else []
        return []

    def _base_data(self, naam: str, now: datetime, week_start: date, week_end: date) -> dict[str, Any]:
        return {
            "user_name": naam,
            "app_url": self._app_url,
            "week_number": iso_week_number(now),
            "week_start_date": format_nl_date(week_start),
            "week_end_date": format_nl_date(week_end),
        }

    def _user_email_data(
        self, user: Profile, schedule: EmailSchedule, template: EmailTemplate, now: datetime
    ) -> Optional[dict[str, Any]]:
        """Template data for one user, or None when nothing should be sent."""
        week_start, week_end = week_range(now)
        registrations = self._registrations.list_filtered(user_id=user.id, date_from=week_start, date_to=week_end)
        total_hours = sum(r.aantal_uren for r in registrations)
        data = self._base_data(user.naam, now, week_start, week_end)

        if template.type == EmailTemplateType.MISSING_HOURS:
            minimum = minimum_hours(schedule)
            if total_hours >= minimum:
                logger.debug("Skipping %s: %sh >= %sh", user.naam, total_hours, minimum)
                return None
            data.update(
                hours_filled=total_hours,
                minimum_hours=minimum,
                missing_hours=minimum - total_hours,
                hours_check_type=(schedule.hours_check_type or HoursCheckType.WEEKLY).value,
            )
            return data

        per_project: dict[str, float] = {}
        for reg in registrations:
            name = reg.project_display_naam or reg.project_naam or "Geen project"
            per_project[name] = per_project.get(name, 0) + reg.aantal_uren
        data.update(
            total_hours=total_hours,
            total_registrations=len(registrations),
            projects=[{"project_name": name, "hours": hours} for name, hours in per_project.items()],
        )
        return data

    def _send_and_log(
        self,
        *,
        template: EmailTemplate,
        to: str,
        subject: str,
        body: str,
        user_id: Optional[int],
        meta: dict[str, Any],
    ):
        result = self._client.send(to, subject, body)
        self._logs.create(
            NewEmailLog(
                template_id=template.id,
                user_id=user_id,
                to_email=to,
                subject=subject,
                body_html=body,
                status="sent" if result.success else "failed",
                error=result.error,
                meta=meta,
            )
        )
        return result

    def _send_test_mail(
        self, schedule: EmailSchedule, template: EmailTemplate, test_recipient: str, schedule_id, now: datetime
    ):
        week_start, week_end = week_range(now)
        minimum = minimum_hours(schedule)
        data = self._base_data(TEST_USER_NAME, now, week_start, week_end)
        data.update(
            hours_filled=6,
            minimum_hours=minimum,
            missing_hours=max(0, minimum - 6),
            hours_check_type=(schedule.hours_check_type or HoursCheckType.WEEKLY).value,
            total_hours=6,
            total_registrations=2,
            projects=[
                {"project_name": "Test Project A", "hours": 4},
                {"project_name": "Test Project B", "hours": 2},
            ],
        )
        subject = f"[TEST] {render_template(template.subject, data)}"
        body = f"[Dit is een test email]\n\n{render_template(template.body, data)}"
        return self._send_and_log(
            template=template,
            to=test_recipient,
            subject=subject,
            body=body,
            user_id=None,
            meta={"test_mode": True, "schedule_id": schedule_id, "guaranteed_test": True, "dry_run": False},
        )

    def run(
        self,
        *,
        test_mode: bool = False,
        schedule_id=None,
        test_recipient: Optional[str] = None,
        now: datetime,
    ) -> dict[str, Any]:
        logger.info(
            "Scheduled e-mails: test_mode=%s schedule_id=%s day=%s hour=%s",
            test_mode,
            schedule_id,
            js_weekday(now),
            now.hour,
        )
        # Test runs ignore the module switch.
        if not test_mode and not self._settings.is_module_enabled("module_email_notifications"):
            logger.info("E-mail notifications module is disabled, nothing sent")
            return {"message": "E-mail notifications module is disabled", "test_mode": False, "schedule_id": schedule_id}
        test_recipient = (test_recipient or "").strip().lower() or None
        schedules = self._select_schedules(test_mode=test_mode, schedule_id=schedule_id, now=now)
        if not schedules:
            return {
                "message": f"No schedule found with id {schedule_id}" if test_mode else "No schedules found for current time",
                "test_mode": test_mode,
                "schedule_id": schedule_id,
            }

        sent: list[dict[str, Any]] = []
        errors: list[str] = []
        meta = {"test_mode": True, "schedule_id": schedule_id, "dry_run": False} if test_mode else {"dry_run": False}

        for schedule in schedules:
            template = schedule.template
            if not template or not template.enabled:
                logger.info("Skipping schedule %s: template disabled or missing", schedule.id)
                continue
            try:
                users = self._recipients(schedule, test_mode=test_mode, test_recipient=test_recipient)
                if not users and not test_mode:
                    logger.info("Schedule %s has no recipients", schedule.id)
                    continue

                for user in users:
                    try:
                        data = self._user_email_data(user, schedule, template, now)
                        if data is None:
                            continue
                        subject = render_template(template.subject, data)
                        body = render_template(template.body, data)
                        result = self._send_and_log(
                            template=template, to=user.email, subject=subject, body=body, user_id=user.id, meta=meta
                        )
                        if result.success:
                            sent.append(
                                {
                                    "user": user.naam,
                                    "email": user.email,
                                    "template": template.name,
                                    "type": template.type.value,
                                    "test_mode": test_mode,
                                }
                            )
                        else:
                            errors.append(f"Failed to send email to {user.naam}: {result.error}")
                    except Exception as e:
                        logger.exception("Error processing user %s", user.naam)
                        errors.append(f"Error processing user {user.naam}: {e}")

                if test_mode and test_recipient and not any(s["email"] == test_recipient for s in sent):
                    try:
                        result = self._send_test_mail(schedule, template, test_recipient, schedule_id, now)
                        if result.success:
                            sent.append(
                                {
                                    "user": TEST_USER_NAME,
                                    "email": test_recipient,
                                    "template": template.name,
                                    "type": template.type.value,
                                    "test_mode": True,
                                }
                            )
                        else:
                            errors.append(f"Failed to send guaranteed test email to {test_recipient}: {result.error}")
                    except Exception as e:
                        logger.exception("Error sending guaranteed test email")
                        errors.append(f"Error sending guaranteed test email: {e}")
            except Exception as e:
                logger.exception("Error processing schedule %s", schedule.id)
                errors.append(f"Error processing schedule: {e}")

        summary = {
            "message": "Test email processing completed" if test_mode else "Scheduled email processing completed",
            "emailsSent": len(sent),
            "errors": len(errors),
            "schedules_processed": len(schedules),
            "test_mode": test_mode,
            "details": {"sent": sent, "errors": errors},
            "timestamp": now.isoformat(),
        }
        logger.info("Scheduled e-mails done: %s sent, %s errors", len(sent), len(errors))
        return summary
