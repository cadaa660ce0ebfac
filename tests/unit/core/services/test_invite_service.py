"""ShareInviteService: issue, confirm and revoke invitations."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from notus.core.errors import AuthorizationError, InternalError, InvalidTokenError, ValidationError
from notus.core.models import Notification, Share, SharePermission
from notus.core.redis_client import RedisClient
from notus.core.services.access_service import DocumentAccessService
from notus.core.services.invite_service import ShareInviteService

from conftest import FakeEmailService, FakeRedis


@pytest.fixture
def invites(test_session, invite_config, fake_email, fake_redis):
    return ShareInviteService(test_session, invite_config, email_service=fake_email, redis_client=fake_redis)


async def _share_rows(session, document_id):
    result = await session.execute(select(func.count(Share.id)).where(Share.document_id == document_id))
    return result.scalar()


async def _notifications_for(session, receiver_id):
    result = await session.execute(select(Notification).where(Notification.receiver_id == receiver_id))
    return list(result.scalars())


class TestCreateInvite:
    async def test_owner_gets_link_and_nothing_is_stored(self, invites, document, owner, fake_email, test_session):
        result = await invites.create_invite(owner.id, document.id, "bob@example.com", True, inviter_name="Alice")

        assert result.success
        issued = result.data
        assert issued.permission is SharePermission.READ_WRITE
        assert issued.confirm_url == f"http://app.test/api/confirm-share?token={issued.token}"
        assert fake_email.sent == [
            {"email": "bob@example.com", "link": issued.confirm_url, "inviter_name": "Alice", "doc_title": "Notes"}
        ]
        assert await _share_rows(test_session, document.id) == 0

    async def test_invitee_with_account_is_notified(self, invites, document, owner, make_user, test_session):
        bob = await make_user("bob@example.com")
        await invites.create_invite(owner.id, document.id, "bob@example.com", "read", doc_title="Notes")

        notes = await _notifications_for(test_session, bob.id)
        assert len(notes) == 1
        assert notes[0].sender_id == owner.id
        assert notes[0].payload["type"] == "share_invite"
        assert notes[0].payload["document_id"] == document.id

    async def test_non_owner_is_refused(self, invites, document, make_user, fake_email):
        eve = await make_user("eve@example.com")
        result = await invites.create_invite(eve.id, document.id, "bob@example.com", True)
        assert isinstance(result.error, AuthorizationError)
        assert fake_email.sent == []

    async def test_bad_permission(self, invites, document, owner):
        result = await invites.create_invite(owner.id, document.id, "bob@example.com", "owner")
        assert isinstance(result.error, ValidationError)

    async def test_owner_cannot_invite_own_email(self, invites, document, owner, fake_email, test_session):
        result = await invites.create_invite(owner.id, document.id, " Alice@Example.com ", True)

        assert isinstance(result.error, ValidationError)
        assert fake_email.sent == []
        assert await _share_rows(test_session, document.id) == 0

    async def test_email_failure_is_internal_error(self, test_session, invite_config, document, owner):
        invites = ShareInviteService(
            test_session, invite_config, email_service=FakeEmailService(fail=True), redis_client=FakeRedis()
        )
        result = await invites.create_invite(owner.id, document.id, "bob@example.com", True)
        assert isinstance(result.error, InternalError)


class TestConfirmInvite:
    async def test_materializes_share(self, invites, document, owner, make_user, test_session):
        bob = await make_user("bob@example.com")
        issued = (await invites.create_invite(owner.id, document.id, "bob@example.com", True)).data

        result = await invites.confirm_invite(issued.token)
        assert result.success
        assert result.data.email == "bob@example.com"
        assert result.data.permission == "read-write"
        assert await DocumentAccessService(test_session).has_permission(
            document.id, bob.id, SharePermission.READ_WRITE
        )

    async def test_confirming_twice_keeps_one_row(self, invites, document, owner, test_session):
        issued = (await invites.create_invite(owner.id, document.id, "bob@example.com", False)).data
        assert (await invites.confirm_invite(issued.token)).success
        assert (await invites.confirm_invite(issued.token)).success
        assert await _share_rows(test_session, document.id) == 1

    async def test_expired_token_creates_nothing(self, invites, document, test_session):
        past = datetime.now(timezone.utc) - timedelta(days=2, seconds=30)
        token, _ = invites.signer.issue(document.id, "bob@example.com", SharePermission.READ, now=past)

        result = await invites.confirm_invite(token)
        assert isinstance(result.error, InvalidTokenError)
        assert await _share_rows(test_session, document.id) == 0

    async def test_tampered_token_creates_nothing(self, invites, document, test_session):
        token, _ = invites.signer.issue(document.id, "bob@example.com", SharePermission.READ)
        result = await invites.confirm_invite(token + "x")
        assert isinstance(result.error, InvalidTokenError)
        assert await _share_rows(test_session, document.id) == 0

    async def test_revoked_token_creates_nothing(self, invites, document, owner, test_session):
        issued = (await invites.create_invite(owner.id, document.id, "bob@example.com", True)).data
        assert (await invites.revoke_invite(owner.id, issued.token)).success

        result = await invites.confirm_invite(issued.token)
        assert isinstance(result.error, InvalidTokenError)
        assert await _share_rows(test_session, document.id) == 0

    async def test_notifies_grantee_and_owner(self, invites, document, owner, make_user, test_session):
        bob = await make_user("bob@example.com")
        token, _ = invites.signer.issue(document.id, bob.email, SharePermission.READ)
        await invites.confirm_invite(token)

        to_bob = await _notifications_for(test_session, bob.id)
        to_owner = await _notifications_for(test_session, owner.id)
        assert [n.payload["type"] for n in to_bob] == ["share_confirmed"]
        assert to_bob[0].sender_id == owner.id
        assert [n.payload["type"] for n in to_owner] == ["share_confirmed"]
        assert to_owner[0].sender_id == bob.id

    async def test_owner_not_notified_when_grantee_has_no_account(self, invites, document, owner, test_session):
        token, _ = invites.signer.issue(document.id, "carol@example.com", SharePermission.READ)
        assert (await invites.confirm_invite(token)).success
        assert await _notifications_for(test_session, owner.id) == []

    async def test_notification_failure_does_not_fail_confirmation(
        self, invites, document, make_user, monkeypatch, test_session
    ):
        await make_user("bob@example.com")

        async def exploding_send(*args, **kwargs):
            raise RuntimeError("notification store down")

        monkeypatch.setattr(invites.notifications, "send_notification", exploding_send)
        token, _ = invites.signer.issue(document.id, "bob@example.com", SharePermission.READ)

        result = await invites.confirm_invite(token)
        assert result.success
        assert await _share_rows(test_session, document.id) == 1

    async def test_works_when_no_denylist_is_connected(self, test_session, invite_config, fake_email, document):
        invites = ShareInviteService(
            test_session, invite_config, email_service=fake_email, redis_client=FakeRedis(available=False)
        )
        token, _ = invites.signer.issue(document.id, "bob@example.com", SharePermission.READ)
        assert (await invites.confirm_invite(token)).success


class TestRevokeInvite:
    async def test_denylists_for_remaining_lifetime(self, invites, document, owner, fake_redis):
        issued = (await invites.create_invite(owner.id, document.id, "bob@example.com", True)).data
        result = await invites.revoke_invite(owner.id, issued.token)

        assert result.success
        [(jti, ttl)] = fake_redis.denied.items()
        assert jti
        assert 0 < ttl <= 2 * 24 * 3600

    async def test_only_owner_may_revoke(self, invites, document, owner, make_user, fake_redis):
        eve = await make_user("eve@example.com")
        issued = (await invites.create_invite(owner.id, document.id, "bob@example.com", True)).data
        result = await invites.revoke_invite(eve.id, issued.token)
        assert isinstance(result.error, AuthorizationError)
        assert fake_redis.denied == {}

    async def test_unavailable_denylist_is_internal_error(self, test_session, invite_config, fake_email, document, owner):
        invites = ShareInviteService(
            test_session, invite_config, email_service=fake_email, redis_client=FakeRedis(available=False)
        )
        token, _ = invites.signer.issue(document.id, "bob@example.com", SharePermission.READ)
        result = await invites.revoke_invite(owner.id, token)
        assert isinstance(result.error, InternalError)

    async def test_invalid_token(self, invites, owner):
        result = await invites.revoke_invite(owner.id, "garbage")
        assert isinstance(result.error, InvalidTokenError)


class FlakyBackend:
    """Redis stand-in that can stop answering reads."""

    def __init__(self):
        self.store = {}
        self.down = False

    async def setex(self, key, ttl, value):
        self.store[key] = value
        return True

    async def exists(self, key):
        if self.down:
            raise ConnectionError("redis went away")
        return 1 if key in self.store else 0


async def test_revoked_invite_stays_refused_when_denylist_read_fails(
    test_session, invite_config, fake_email, document, owner
):
    backend = FlakyBackend()
    client = RedisClient(url="redis://unused:6379/0", max_connections=1)
    client.redis = backend
    invites = ShareInviteService(test_session, invite_config, email_service=fake_email, redis_client=client)

    issued = (await invites.create_invite(owner.id, document.id, "bob@example.com", True)).data
    assert (await invites.revoke_invite(owner.id, issued.token)).success

    backend.down = True
    result = await invites.confirm_invite(issued.token)

    assert isinstance(result.error, InternalError)
    assert await _share_rows(test_session, document.id) == 0


async def test_confirmation_fails_while_denylist_lookup_errors(
    test_session, invite_config, fake_email, document
):
    invites = ShareInviteService(
        test_session, invite_config, email_service=fake_email, redis_client=FakeRedis(lookup_fails=True)
    )
    token, _ = invites.signer.issue(document.id, "bob@example.com", SharePermission.READ)

    result = await invites.confirm_invite(token)
    assert isinstance(result.error, InternalError)
    assert await _share_rows(test_session, document.id) == 0
