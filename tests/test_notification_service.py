from __future__ import annotations

import pytest

from fakes import InMemoryNotifications, InMemoryProfiles
from werkwise.core.enums import NotificationStatus, NotificationType, Role
from werkwise.core.exceptions import NotFoundError, ValidationError
from werkwise.notifications.service import NotificationService
from werkwise.users.model import Profile


def _build():
    profiles = InMemoryProfiles(
        [
            Profile(id=1, naam="Jan", email="jan@werkwise.nl", password_hash="x", role=Role.ADMIN),
            Profile(id=2, naam="Sophie", email="sophie@werkwise.nl", password_hash="x", role=Role.KANTOORPERSONEEL),
            Profile(id=3, naam="Pieter", email="pieter@werkwise.nl", password_hash="x", role=Role.MEDEWERKER),
        ]
    )
    notifications = InMemoryNotifications()
    svc = NotificationService(notifications, profiles)
    svc.notify_office(
        type=NotificationType.TIME_REGISTRATION_SUBMITTED,
        title="Nieuwe urenregistratie",
        message="Pieter heeft 8 uur geregistreerd",
        sender_id=3,
    )
    svc.notify_office(type=NotificationType.SYSTEM_ALERT, title="Let op", message="Voorraad laag")
    return svc, notifications


def test_notify_office_reaches_every_office_user():
    svc, notifications = _build()

    assert {n.recipient_id for n in notifications.items} == {1, 2}
    assert len(notifications.items) == 4
    assert svc.list_for_user(3) == []
    assert svc.unread_count(1) == 2


def test_mark_read_and_archive():
    svc, _ = _build()
    first, second = svc.list_for_user(1)

    svc.mark_read(user_id=1, notification_id=first.id)
    assert svc.unread_count(1) == 1
    assert [n.id for n in svc.list_for_user(1, status="read")] == [first.id]

    svc.archive(user_id=1, notification_id=second.id)
    assert [n.id for n in svc.list_for_user(1, status="archived")] == [second.id]
    assert svc.unread_count(1) == 0


def test_cannot_touch_someone_elses_notification():
    svc, _ = _build()
    other = svc.list_for_user(2)[0]

    with pytest.raises(NotFoundError):
        svc.mark_read(user_id=1, notification_id=other.id)
    with pytest.raises(NotFoundError):
        svc.archive(user_id=3, notification_id=other.id)
    assert svc.list_for_user(2)[0].status == NotificationStatus.UNREAD


def test_mark_all_read():
    svc, _ = _build()

    assert svc.mark_all_read(user_id=2) == 2
    assert svc.unread_count(2) == 0
    assert svc.unread_count(1) == 2
    with pytest.raises(ValidationError):
        svc.list_for_user(2, status="gelezen")
