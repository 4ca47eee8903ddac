"""
Job moderation.

Moderation decisions update the job's moderation fields and append a
ModerationLog row. Callers commit, so bulk actions can share one commit.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from smartmatch.models.job import Job, ModerationStatus
from smartmatch.models.moderation_log import ModerationLog, ModerationAction
from smartmatch.models.user import User
from smartmatch.schemas.admin import ModerationHistoryItem

logger = logging.getLogger(__name__)


ACTION_RESULTS = {
    ModerationAction.APPROVE: ModerationStatus.APPROVED,
    ModerationAction.REJECT: ModerationStatus.REJECTED,
    ModerationAction.RETURN: ModerationStatus.RETURNED,
}


def moderate_job(
    db: AsyncSession,
    job: Job,
    moderator: User,
    action: ModerationAction,
    notes: Optional[str] = None,
) -> ModerationLog:
    """Record a moderation decision on `job` (not committed)."""
    now = datetime.utcnow()
    job.moderation_status = ACTION_RESULTS[action].value
    job.moderated_at = now
    job.moderator_id = moderator.id
    job.moderation_notes = notes
    job.updated_at = now

    log = ModerationLog(
        job_id=job.id,
        moderator_id=moderator.id,
        action=action.value,
        notes=notes,
        created_at=now,
    )
    db.add(log)

    logger.info(f"Job {job.id} moderation: {action.value} by {moderator.email}")
    return log


def build_history_item(log: ModerationLog) -> ModerationHistoryItem:
    return ModerationHistoryItem(
        id=log.id,
        job_id=log.job_id,
        job_title=log.job.title if log.job else None,
        moderator_id=log.moderator_id,
        moderator_name=log.moderator.display_name() if log.moderator else None,
        action=log.action,
        notes=log.notes,
        timestamp=log.created_at,
    )
