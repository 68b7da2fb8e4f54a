from __future__ import annotations

from datetime import timedelta

from fakes import InMemoryNotifications, InMemoryProfiles
from werkwise.core.enums import NotificationType, Role
from werkwise.notifications.activity import UserActivityChecker
from werkwise.notifications.model import NewNotification
from werkwise.users.model import Profile


def _setup(now):
    profiles = InMemoryProfiles(
        [
            Profile(id=1, naam="Jan", email="jan@werkwise.nl", password_hash="x", role=Role.ADMIN),
            Profile(id=2, naam="Sophie", email="sophie@werkwise.nl", password_hash="x", role=Role.KANTOORPERSONEEL),
            Profile(
                id=3, naam="Pieter", email="pieter@werkwise.nl", password_hash="x", role=Role.MEDEWERKER,
                last_activity_at=now - timedelta(days=40),
            ),
            Profile(
                id=4, naam="Emma", email="emma@werkwise.nl", password_hash="x", role=Role.MEDEWERKER,
                last_activity_at=now - timedelta(days=2),
            ),
            Profile(
                id=5, naam="Thomas", email="thomas@werkwise.nl", password_hash="x", role=Role.ZZPER,
                created_at=now - timedelta(days=10),
            ),
        ]
    )
    notifications = InMemoryNotifications()
    notifications.create_many(
        [
            NewNotification(
                recipient_id=1,
                type=NotificationType.USER_INACTIVE,
                title="Gebruiker Emma is inactief geworden",
                message="...",
                related_entity_type="user",
                related_entity_id=4,
            )
        ]
    )
    return UserActivityChecker(profiles, notifications), notifications


def test_flags_inactive_and_reactivated_users(fixed_now):
    checker, notifications = _setup(fixed_now)

    summary = checker.run(fixed_now)

    assert summary.total_users_checked == 3
    assert summary.new_inactive_users == 2
    assert summary.reactivated_users == 1
    assert summary.notifications_created == 6

    created = notifications.items[1:]
    assert {n.recipient_id for n in created} == {1, 2}
    pieter = next(n for n in created if n.related_entity_id == 3)
    assert pieter.type == NotificationType.USER_INACTIVE
    assert pieter.message == (
        "Gebruiker Pieter (pieter@werkwise.nl) heeft al 40 dagen geen tijdregistraties ingediend. "
        "Laatste activiteit: 5-9-2025"
    )
    thomas = next(n for n in created if n.related_entity_id == 5)
    assert thomas.message.endswith("heeft al 10 dagen geen tijdregistraties ingediend. Laatste activiteit: Nooit")
    emma = next(n for n in created if n.related_entity_id == 4)
    assert emma.type == NotificationType.USER_ACTIVE


def test_second_run_is_quiet(fixed_now):
    checker, notifications = _setup(fixed_now)
    checker.run(fixed_now)
    before = len(notifications.items)

    summary = checker.run(fixed_now + timedelta(hours=1))

    assert summary.notifications_created == 0
    assert len(notifications.items) == before
    assert summary.to_dict()["message"] == "User activity check completed successfully"
