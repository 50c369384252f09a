"""Content brief lifecycle.

The transition table is the single source of truth for which status
changes are legal. ``apply_transition`` is the in-memory step;
``BriefWorkflow.transition`` persists it as a compare-and-set on the
current status, so two callers racing on the same brief cannot both win.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Union
from uuid import UUID

from sqlalchemy.orm.attributes import set_committed_value

from src.briefs.models import BriefStatus, ContentBrief
from src.shared.errors import NotFoundError, PreconditionError

logger = logging.getLogger(__name__)

StatusLike = Union[BriefStatus, str]

VALID_TRANSITIONS: Dict[BriefStatus, tuple] = {
    BriefStatus.DRAFT: (BriefStatus.APPROVED,),
    BriefStatus.APPROVED: (BriefStatus.GENERATING,),
    BriefStatus.GENERATING: (BriefStatus.GENERATED,),
    BriefStatus.GENERATED: (BriefStatus.REVIEWING,),
    BriefStatus.REVIEWING: (BriefStatus.PUBLISHED, BriefStatus.REVISION_REQUESTED),
    BriefStatus.REVISION_REQUESTED: (BriefStatus.DRAFT, BriefStatus.APPROVED),
    BriefStatus.PUBLISHED: (),
}


def _as_status(value: Any) -> Optional[BriefStatus]:
    if isinstance(value, BriefStatus):
        return value
    try:
        return BriefStatus(value)
    except ValueError:
        return None


def can_transition(from_status: StatusLike, to_status: StatusLike) -> bool:
    """True only for the edges in VALID_TRANSITIONS. Unknown names are never legal."""
    source = _as_status(from_status)
    target = _as_status(to_status)
    if source is None or target is None:
        return False
    return target in VALID_TRANSITIONS[source]


def transition_updates(
    from_status: StatusLike,
    to_status: StatusLike,
    metadata: Optional[Mapping[str, Any]] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Column values written by one edge, including ``status``."""
    if not can_transition(from_status, to_status):
        raise PreconditionError(f"Invalid transition: {from_status} -> {to_status}")

    source = _as_status(from_status)
    target = _as_status(to_status)
    metadata = metadata or {}
    now = now or datetime.utcnow()
    updates: Dict[str, Any] = {"status": target}

    if target == BriefStatus.APPROVED:
        updates["approved_at"] = now
        if metadata.get("user_id"):
            updates["approved_by"] = metadata["user_id"]
    elif target == BriefStatus.GENERATING:
        updates["generation_started_at"] = now
    elif target == BriefStatus.GENERATED:
        updates["generated_at"] = now
        if metadata.get("content_id"):
            updates["content_id"] = metadata["content_id"]
    elif target == BriefStatus.PUBLISHED:
        updates["published_at"] = now
        if metadata.get("published_url"):
            updates["published_url"] = metadata["published_url"]
    elif target == BriefStatus.REVISION_REQUESTED:
        notes = (metadata.get("revision_notes") or "").strip()
        if not notes:
            raise PreconditionError("revision_notes are required to request a revision")
        updates["revision_requested_at"] = now
        updates["revision_notes"] = notes
    elif target == BriefStatus.DRAFT and source == BriefStatus.REVISION_REQUESTED:
        updates["revised_at"] = now

    return updates


def apply_transition(
    brief: ContentBrief,
    to_status: StatusLike,
    metadata: Optional[Mapping[str, Any]] = None,
) -> ContentBrief:
    updates = transition_updates(brief.status, to_status, metadata)
    for field, value in updates.items():
        setattr(brief, field, value)
    return brief


class BriefWorkflow:
    """Persists transitions through a repository exposing ``get_brief`` and
    ``update_brief_if_status``."""

    def __init__(self, repository):
        self.repository = repository

    async def transition(
        self,
        brief: ContentBrief,
        to_status: StatusLike,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> ContentBrief:
        from_status = _as_status(brief.status)
        updates = transition_updates(from_status, to_status, metadata)

        affected = await self.repository.update_brief_if_status(brief.id, from_status, updates)
        if affected == 0:
            raise PreconditionError(
                f"Brief {brief.id} is no longer {from_status.value}; "
                f"another operation changed it first"
            )

        # Already written; record as committed so no later flush rewrites the row.
        for field, value in updates.items():
            set_committed_value(brief, field, value)
        logger.info(f"Brief {brief.id}: {from_status.value} -> {updates['status'].value}")
        return brief

    async def transition_by_id(
        self,
        brief_id: UUID,
        to_status: StatusLike,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> ContentBrief:
        brief = await self.repository.get_brief(brief_id)
        if brief is None:
            raise NotFoundError("Brief", brief_id)
        return await self.transition(brief, to_status, metadata)

    async def approve(self, brief_id: UUID, user_id: Optional[UUID] = None) -> ContentBrief:
        return await self.transition_by_id(brief_id, BriefStatus.APPROVED, {"user_id": user_id})

    async def revise(self, brief_id: UUID) -> ContentBrief:
        return await self.transition_by_id(brief_id, BriefStatus.DRAFT)
