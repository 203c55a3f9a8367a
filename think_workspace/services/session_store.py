"""
Session Store: one durable JSON record per session holding its ordered thought log.
"""

import asyncio
import weakref
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from ..models.core import SessionSummary, Thought
from ..utils.config import StorageConfig, config
from ..utils.id_utils import generate_unique_id, is_valid_session_id
from ..utils.json_utils import read_record, write_record
from ..utils.logging_config import get_logger
from ..utils.timestamp_utils import now_iso
from .default_session import DefaultSessionPointer
from .errors import NotFoundError, StorageError, ValidationError

logger = get_logger(__name__)

RECORD_SUFFIX = '.json'

# Called with (existing thoughts, new thought) before the append is written.
# May raise ValidationError to abort, or mutate existing entries to be persisted with it.
PrepareHook = Callable[[List[Thought], Thought], None]


class SessionStore:
    """Append-only thought logs keyed by session id.

    Every mutating operation on a session runs under that session's asyncio lock,
    so concurrent appends to the same id are applied one after another instead of
    overwriting each other.
    """

    def __init__(self, storage_config: Optional[StorageConfig] = None,
                 default_pointer: Optional[DefaultSessionPointer] = None):
        """Initialize the session store.

        Args:
            storage_config: StorageConfig instance, uses global config if None
            default_pointer: Pointer cleared when its session is deleted
        """
        self.config = storage_config or config.storage
        self.root = Path(self.config.session_dir)
        self.default_pointer = default_pointer or DefaultSessionPointer(self.config)
        # Entries live only while some coroutine holds or waits on the lock
        self._locks: 'weakref.WeakValueDictionary[str, asyncio.Lock]' = weakref.WeakValueDictionary()

        logger.info(f'Initialized SessionStore at {self.root}')

    def lock(self, session_id: str) -> asyncio.Lock:
        """Return the lock serializing mutations of ``session_id``."""
        lock = self._locks.get(session_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[session_id] = lock
        return lock

    def path_for(self, session_id: str) -> Path:
        """Resolve the record path, rejecting ids that are not safe file names."""
        if not isinstance(session_id, str) or not is_valid_session_id(session_id):
            raise ValidationError(f'Invalid session id: {session_id!r}')
        if session_id + RECORD_SUFFIX == self.config.default_session_file:
            raise ValidationError(f'Invalid session id: {session_id!r}')
        return self.root / f'{session_id}{RECORD_SUFFIX}'

    async def exists(self, session_id: str) -> bool:
        path = self.path_for(session_id)
        return await asyncio.to_thread(path.is_file)

    async def new_session_id(self) -> str:
        """Generate a session id that does not collide with a stored record."""
        def _generate() -> str:
            try:
                return generate_unique_id('session', lambda candidate: self.path_for(candidate).exists())
            except RuntimeError as e:
                raise StorageError(str(e))

        return await asyncio.to_thread(_generate)

    async def load(self, session_id: str) -> List[Thought]:
        """Return the ordered thoughts of a session; empty if it does not exist yet.

        Raises:
            StorageError: If an existing record cannot be read or decoded
        """
        path = self.path_for(session_id)
        return await asyncio.to_thread(self._read_thoughts, path)

    async def append(self, session_id: str, thought: Thought,
                     prepare: Optional[PrepareHook] = None) -> List[Thought]:
        """Append ``thought`` to a session and persist the full list.

        Args:
            session_id: Target session, created on first append
            thought: The new entry
            prepare: Optional hook run against the freshly loaded list under the
                session lock; raising from it leaves the record untouched

        Returns:
            The persisted thought list including the new entry

        Raises:
            ValidationError: Raised by ``prepare``
            StorageError: If the record cannot be read or written
        """
        path = self.path_for(session_id)
        async with self.lock(session_id):
            thoughts = await asyncio.to_thread(self._read_thoughts, path)
            if prepare is not None:
                prepare(thoughts, thought)
            thoughts.append(thought)
            await asyncio.to_thread(self._write_thoughts, path, thoughts)

        logger.debug(f'Appended thought {thought.id} to session {session_id} ({len(thoughts)} thoughts)')
        return thoughts

    async def list_records(self) -> List[Tuple[str, float]]:
        """Enumerate persisted sessions as ``(session_id, mtime)`` pairs, excluding the default pointer.

        Raises:
            StorageError: If the session directory cannot be enumerated
        """
        return await asyncio.to_thread(self._scan)

    async def list(self) -> List[SessionSummary]:
        """Summarize every persisted session, most recently modified first."""
        default_id = await self.default_pointer.get()
        summaries = []
        for session_id, mtime in await self.list_records():
            thoughts = await asyncio.to_thread(self._read_existing, self.path_for(session_id))
            if thoughts is None:
                logger.debug(f'Session {session_id} disappeared while listing')
                continue
            summaries.append(
                SessionSummary(session_id=session_id,
                               thought_count=len(thoughts),
                               first_thought=thoughts[0].timestamp if thoughts else None,
                               last_thought=thoughts[-1].timestamp if thoughts else None,
                               last_modified=now_iso(mtime),
                               is_default=session_id == default_id))

        summaries.sort(key=lambda s: s.last_modified, reverse=True)
        return summaries

    async def delete(self, session_id: str) -> bool:
        """Remove a session record, clearing the default pointer if it named this session.

        Returns:
            True if the deleted session was the default session

        Raises:
            NotFoundError: If no record exists for ``session_id``
            StorageError: If the record cannot be removed
        """
        path = self.path_for(session_id)
        async with self.lock(session_id):
            await asyncio.to_thread(self._remove, path, session_id)

        was_default = await self.default_pointer.clear_if(session_id)
        logger.info(f'Deleted session {session_id}')
        return was_default

    def _read_thoughts(self, path: Path) -> List[Thought]:
        thoughts = self._read_existing(path)
        return [] if thoughts is None else thoughts

    def _read_existing(self, path: Path) -> Optional[List[Thought]]:
        try:
            data = read_record(path)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.error(f'Failed to read session record {path}: {e}')
            raise StorageError(f'Failed to read session {path.stem}: {e}')

        if not isinstance(data, list):
            raise StorageError(f'Session record {path} is not a list of thoughts')
        try:
            return [Thought.from_dict(entry) for entry in data]
        except (KeyError, TypeError) as e:
            raise StorageError(f'Session record {path} has a malformed thought: {e}')

    def _write_thoughts(self, path: Path, thoughts: List[Thought]) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            write_record(path, [t.to_dict() for t in thoughts])
        except OSError as e:
            logger.error(f'Failed to write session record {path}: {e}')
            raise StorageError(f'Failed to write session {path.stem}: {e}')

    def _remove(self, path: Path, session_id: str) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            raise NotFoundError(f'Session not found: {session_id}')
        except OSError as e:
            logger.error(f'Failed to delete session record {path}: {e}')
            raise StorageError(f'Failed to delete session {session_id}: {e}')

    def _scan(self) -> List[Tuple[str, float]]:
        if not self.root.exists():
            return []
        try:
            records = []
            for entry in self.root.iterdir():
                if entry.name == self.config.default_session_file or entry.name.startswith('.'):
                    continue
                if not entry.name.endswith(RECORD_SUFFIX) or not entry.is_file():
                    continue
                session_id = entry.name[:-len(RECORD_SUFFIX)]
                if not is_valid_session_id(session_id):
                    logger.warning(f'Skipping record {entry.name}: not a valid session id')
                    continue
                records.append((session_id, entry.stat().st_mtime))
            return records
        except OSError as e:
            logger.error(f'Failed to enumerate sessions in {self.root}: {e}')
            raise StorageError(f'Failed to list sessions: {e}')
