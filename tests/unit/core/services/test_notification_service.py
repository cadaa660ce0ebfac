"""NotificationService: best-effort delivery and receiver-scoped management."""

import pytest
from sqlalchemy.exc import OperationalError

from notus.core.errors import InternalError, NotFoundError
from notus.core.services.notification_service import MAX_PAGE, NotificationService


@pytest.fixture
def notifications(test_session):
    return NotificationService(test_session)


async def test_send_by_email_stores_json_payload(notifications, owner, make_user):
    bob = await make_user("bob@example.com")
    result = await notifications.send_notification(owner.id, {"type": "share_confirmed", "document_id": 1}, receiver_email="BOB@example.com")

    assert result.success
    assert result.data.receiver_id == bob.id
    assert result.data.payload == {"type": "share_confirmed", "document_id": 1}


async def test_unknown_receiver_is_a_failed_result(notifications, owner):
    result = await notifications.send_notification(owner.id, {"type": "x"}, receiver_email="ghost@example.com")
    assert not result.success
    assert isinstance(result.error, NotFoundError)

    result = await notifications.send_notification(owner.id, {"type": "x"}, receiver_id=9999)
    assert isinstance(result.error, NotFoundError)


async def test_insert_failure_is_returned_not_raised(notifications, owner, make_user, monkeypatch):
    await make_user("bob@example.com")

    async def broken_create(data):
        raise OperationalError("INSERT", {}, Exception("disk full"))

    monkeypatch.setattr(notifications.notification_repo, "create_notification", broken_create)
    result = await notifications.send_notification(owner.id, {"type": "x"}, receiver_email="bob@example.com")
    assert isinstance(result.error, InternalError)


async def test_dispatch_swallows_everything(notifications, owner, monkeypatch):
    async def crash(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(notifications, "send_notification", crash)
    assert await notifications.dispatch(owner.id, {"type": "x"}, receiver_id=owner.id) is None


async def test_receiver_management(notifications, owner, make_user):
    bob = await make_user("bob@example.com")
    first = (await notifications.send_notification(owner.id, {"n": 1}, receiver_id=bob.id)).data
    await notifications.send_notification(owner.id, {"n": 2}, receiver_id=bob.id)

    assert await notifications.count_unread(bob.id) == 2
    assert len(await notifications.list_notifications(bob.id, limit=500)) == 2

    # the owner cannot touch bob's notifications
    assert isinstance((await notifications.mark_as_read(owner.id, first.id)).error, NotFoundError)
    assert isinstance((await notifications.delete_notification(owner.id, first.id)).error, NotFoundError)

    read = await notifications.mark_as_read(bob.id, first.id)
    assert read.success and read.data.is_read
    assert await notifications.count_unread(bob.id) == 1
    assert len(await notifications.list_notifications(bob.id, only_unread=True)) == 1

    assert await notifications.mark_all_as_read(bob.id) == 1
    assert (await notifications.delete_notification(bob.id, first.id)).success
    assert len(await notifications.list_notifications(bob.id)) == 1


async def test_listing_is_capped(notifications, monkeypatch, owner):
    seen = {}

    async def fake_list(receiver_id, limit, offset, only_unread):
        seen.update(limit=limit, offset=offset)
        return []

    monkeypatch.setattr(notifications.notification_repo, "list_for_receiver", fake_list)
    await notifications.list_notifications(owner.id, limit=1000, offset=-3)
    assert seen == {"limit": MAX_PAGE, "offset": 0}
