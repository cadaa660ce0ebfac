"""Document history: text diffs and the recorded entries."""

import json

from notus.core.errors import Forbidden
from notus.core.services.history_service import DocumentHistoryService, compute_text_diff, extract_text


def test_diff_keeps_only_the_changed_middle():
    diff = compute_text_diff("hello world", "hello brave world")
    assert (diff.added, diff.removed) == ("brave ", "")

    diff = compute_text_diff("abc", "axc")
    assert (diff.added, diff.removed) == ("x", "b")


def test_diff_of_identical_text_is_empty():
    diff = compute_text_diff("same", "same")
    assert (diff.added, diff.removed) == ("", "")


def test_extract_text_reads_json_snapshots():
    assert extract_text(json.dumps({"text": "hi", "cursor": 2})) == "hi"
    assert extract_text("  plain  ") == "plain"
    assert extract_text("{not json}") == "{not json}"
    assert extract_text(None) == ""


async def test_record_and_list(test_session, owner, document):
    history = DocumentHistoryService(test_session)

    recorded = await history.record_change(document.id, owner.id, "", "first draft")
    assert recorded.success
    assert recorded.data.user_email == owner.email
    assert recorded.data.diff_added == "first draft"
    assert recorded.data.diff_removed is None

    [item] = (await history.list_history(owner.id, document.id)).data
    assert item.entry.snapshot_after == "first draft"
    assert item.author.id == owner.id


async def test_unchanged_text_records_nothing(test_session, owner, document):
    history = DocumentHistoryService(test_session)

    same = json.dumps({"text": "draft"})
    assert (await history.record_change(document.id, owner.id, "draft", same)).data is None
    assert (await history.list_history(owner.id, document.id)).data == []


async def test_listing_needs_read_access(test_session, document, make_user):
    stranger = await make_user("eve@example.com")
    result = await DocumentHistoryService(test_session).list_history(stranger.id, document.id)
    assert isinstance(result.error, Forbidden)
