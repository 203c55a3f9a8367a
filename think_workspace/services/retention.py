"""
Retention Sweeper: removes session records whose last modification is older than a threshold.
"""

import time
from typing import Any, Callable, Dict, Optional

from ..utils.config import RetentionConfig, config
from ..utils.logging_config import get_logger
from ..utils.timestamp_utils import age_in_days
from .errors import NotFoundError, ThinkingError
from .session_store import SessionStore

logger = get_logger(__name__)


class RetentionSweeper:
    """Delete stale sessions through the store so default-pointer clearing still applies."""

    def __init__(self, store: SessionStore, retention_config: Optional[RetentionConfig] = None,
                 clock: Callable[[], float] = time.time):
        self.store = store
        self.config = retention_config or config.retention
        self.clock = clock

    async def sweep(self, max_age_days: Optional[int] = None) -> Dict[str, Any]:
        """Delete sessions last modified more than ``max_age_days`` ago.

        A failure deleting one record is logged and reported in ``errors``; the
        sweep carries on with the remaining records.

        Raises:
            StorageError: If the session records cannot be enumerated
        """
        if max_age_days is None:
            max_age_days = self.config.default_max_age_days

        now = self.clock()
        deleted = []
        errors = []
        for session_id, mtime in await self.store.list_records():
            if age_in_days(mtime, now) <= max_age_days:
                continue
            try:
                await self.store.delete(session_id)
                deleted.append(session_id)
            except NotFoundError:
                logger.debug(f'Session {session_id} disappeared before it could be swept')
            except ThinkingError as e:
                logger.warning(f'Failed to sweep session {session_id}: {e}')
                errors.append({'sessionId': session_id, 'message': e.message})

        if deleted:
            logger.info(f'Cleaned up {len(deleted)} sessions older than {max_age_days} days')
        else:
            logger.debug('No expired sessions found for cleanup')

        return {
            'deletedCount': len(deleted),
            'deletedSessions': deleted,
            'maxAgeDays': max_age_days,
            'errors': errors,
        }
