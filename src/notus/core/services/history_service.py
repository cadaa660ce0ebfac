"""Document history: one entry per saved content change."""

import json
import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import Forbidden, InternalError
from ..models.history import DocumentHistory
from ..models.share import SharePermission
from ..models.user import User
from ..repositories.history_repository import HistoryRepository
from ..repositories.user_repository import UserRepository
from ..result import Result
from .access_service import DocumentAccessService

logger = logging.getLogger("notus.history")


@dataclass(frozen=True)
class TextDiff:
    added: str
    removed: str


@dataclass(frozen=True)
class HistoryEntry:
    entry: DocumentHistory
    author: Optional[User]


def extract_text(stored: Optional[str]) -> str:
    """Plain text of stored content, which may be a ``{"text": ...}`` snapshot."""
    raw = (stored or "").strip()
    if raw.startswith("{") and raw.endswith("}"):
        try:
            parsed = json.loads(raw)
        except ValueError:
            return raw
        if isinstance(parsed, dict) and isinstance(parsed.get("text"), str):
            return parsed["text"]
    return raw


def compute_text_diff(previous: str, current: str) -> TextDiff:
    """Strip the common prefix and suffix; what is left in the middle changed.

    A summary of one save, not a minimal diff.
    """
    if previous == current:
        return TextDiff("", "")

    start = 0
    shortest = min(len(previous), len(current))
    while start < shortest and previous[start] == current[start]:
        start += 1

    end_prev, end_cur = len(previous), len(current)
    while end_prev > start and end_cur > start and previous[end_prev - 1] == current[end_cur - 1]:
        end_prev -= 1
        end_cur -= 1

    return TextDiff(added=current[start:end_cur], removed=previous[start:end_prev])


class DocumentHistoryService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.history_repo = HistoryRepository(session)
        self.user_repo = UserRepository(session)
        self.access = DocumentAccessService(session)

    async def record_change(
        self, document_id: int, user_id: Optional[int], previous: Optional[str], current: str
    ) -> Result[Optional[DocumentHistory]]:
        """Best effort: a failure is logged and never undoes the save itself."""
        before, after = extract_text(previous), extract_text(current)
        if before == after:
            return Result.ok(None)

        diff = compute_text_diff(before, after)
        try:
            author = await self.user_repo.get_by_id(user_id) if user_id is not None else None
            entry = await self.history_repo.add_entry(
                {
                    "document_id": document_id,
                    "user_id": user_id,
                    "user_email": author.email if author else None,
                    "snapshot_before": previous,
                    "snapshot_after": current,
                    "diff_added": diff.added or None,
                    "diff_removed": diff.removed or None,
                }
            )
        except SQLAlchemyError as e:
            logger.error("History entry not recorded", extra={"document_id": document_id}, exc_info=e)
            await self.session.rollback()
            return Result.fail(InternalError(detail=str(e)))
        return Result.ok(entry)

    async def list_history(self, user_id: int, document_id: int) -> Result[List[HistoryEntry]]:
        """Anyone who can read the document; missing and forbidden look the same."""
        if not await self.access.has_permission(document_id, user_id, SharePermission.READ):
            return Result.fail(Forbidden())
        rows = await self.history_repo.list_for_document(document_id)
        return Result.ok([HistoryEntry(entry, author) for entry, author in rows])
