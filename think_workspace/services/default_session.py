"""
Default Session Pointer: the durable record naming the session used when a request omits one.
"""

import asyncio
from pathlib import Path
from typing import Optional

from ..utils.config import StorageConfig, config
from ..utils.json_utils import read_record, write_record
from ..utils.logging_config import get_logger
from .errors import StorageError

logger = get_logger(__name__)


class DefaultSessionPointer:
    """Holds at most one session identifier, persisted as ``{"sessionId": ...}``.

    The pointer does not check that its target exists; callers that need that
    guarantee validate against the session store before calling ``set``.
    """

    def __init__(self, storage_config: Optional[StorageConfig] = None):
        self.config = storage_config or config.storage
        self.path = Path(self.config.session_dir) / self.config.default_session_file
        self._lock = asyncio.Lock()
        logger.debug(f'Initialized DefaultSessionPointer at {self.path}')

    async def get(self) -> Optional[str]:
        """Return the default session id, or None when unset."""
        return await asyncio.to_thread(self._read)

    async def set(self, session_id: str) -> None:
        """Persist ``session_id`` as the default, replacing any previous value."""
        async with self._lock:
            await asyncio.to_thread(self._write, session_id)
        logger.info(f'Default session set to {session_id}')

    async def clear(self) -> bool:
        """Remove the pointer. Idempotent.

        Returns:
            True if a pointer was removed, False if none was set
        """
        async with self._lock:
            removed = await asyncio.to_thread(self._remove)
        if removed:
            logger.info('Default session cleared')
        return removed

    async def clear_if(self, session_id: str) -> bool:
        """Clear the pointer only when it currently names ``session_id``."""
        async with self._lock:
            current = await asyncio.to_thread(self._read)
            if current != session_id:
                return False
            await asyncio.to_thread(self._remove)
        logger.info(f'Default session {session_id} cleared')
        return True

    def _read(self) -> Optional[str]:
        try:
            data = read_record(self.path)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.error(f'Failed to read default session pointer {self.path}: {e}')
            raise StorageError(f'Failed to read default session: {e}')

        if not isinstance(data, dict):
            raise StorageError(f'Default session record {self.path} is not an object')
        return data.get('sessionId') or None

    def _write(self, session_id: str) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            write_record(self.path, {'sessionId': session_id})
        except OSError as e:
            logger.error(f'Failed to write default session pointer {self.path}: {e}')
            raise StorageError(f'Failed to set default session: {e}')

    def _remove(self) -> bool:
        try:
            self.path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error(f'Failed to remove default session pointer {self.path}: {e}')
            raise StorageError(f'Failed to clear default session: {e}')
