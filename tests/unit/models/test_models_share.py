"""Unit tests for SharePermission and the Share model."""

import pytest

from notus.core.models.share import Share, SharePermission


class TestSharePermission:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (True, SharePermission.READ_WRITE),
            (False, SharePermission.READ),
            ("read", SharePermission.READ),
            ("read-write", SharePermission.READ_WRITE),
            ("READ_WRITE", SharePermission.READ_WRITE),
            (" write ", SharePermission.READ_WRITE),
            (SharePermission.READ, SharePermission.READ),
        ],
    )
    def test_from_value_accepts_client_forms(self, value, expected):
        assert SharePermission.from_value(value) is expected

    @pytest.mark.parametrize("value", ["admin", "", None, 3, "readwrite"])
    def test_from_value_rejects_unknown(self, value):
        with pytest.raises(ValueError):
            SharePermission.from_value(value)

    def test_read_write_subsumes_read(self):
        assert SharePermission.READ_WRITE.satisfies(SharePermission.READ)
        assert SharePermission.READ_WRITE.satisfies(SharePermission.READ_WRITE)
        assert SharePermission.READ.satisfies(SharePermission.READ)
        assert not SharePermission.READ.satisfies(SharePermission.READ_WRITE)


def test_share_grants_follows_stored_level():
    share = Share(document_id=1, email="bob@example.com", permission="read")
    assert share.level is SharePermission.READ
    assert share.grants(SharePermission.READ)
    assert not share.grants(SharePermission.READ_WRITE)

    share.permission = SharePermission.READ_WRITE.value
    assert share.grants(SharePermission.READ_WRITE)
