"""
Thinking Service for the workspace operations exposed over MCP.
"""

from typing import Any, Dict, List, Optional, Tuple

from ..models.core import BUILDS_ON, DEFAULT_MODE, RELATIONSHIP_TYPES, THINKING_MODES, Thought
from ..utils.config import AppConfig, config
from ..utils.id_utils import generate_id, generate_unique_id
from ..utils.logging_config import get_logger
from ..utils.timestamp_utils import now_iso
from .default_session import DefaultSessionPointer
from .errors import NotFoundError, StorageError, ValidationError
from .relationship_graph import RelationshipGraph
from .retention import RetentionSweeper
from .search import LexicalSearch
from .session_store import SessionStore

logger = get_logger(__name__)


class ThinkingService:
    """Unified service for storing, viewing, relating and expiring thoughts."""

    def __init__(self, app_config: Optional[AppConfig] = None):
        """Initialize the thinking service.

        Args:
            app_config: AppConfig instance, uses global config if None
        """
        self.config = app_config or config
        self.default_pointer = DefaultSessionPointer(self.config.storage)
        self.store = SessionStore(self.config.storage, self.default_pointer)
        self.search_engine = LexicalSearch(self.config.search, self.config.chain)
        self.sweeper = RetentionSweeper(self.store, self.config.retention)

        logger.info('Initialized ThinkingService')

    async def think(self,
                    reasoning: str,
                    session_id: Optional[str] = None,
                    use_default_session: bool = True,
                    set_as_default: bool = False,
                    mode: Optional[str] = None,
                    tags: Optional[List[str]] = None,
                    new_chat: bool = False,
                    relates_to: Optional[str] = None,
                    relationship_type: Optional[str] = None) -> Dict[str, Any]:
        """Store a thought verbatim and report where it went.

        Session resolution: ``new_chat`` starts a fresh session; otherwise an explicit
        ``session_id`` wins, then the default session (if ``use_default_session``),
        then a fresh session.

        Raises:
            ValidationError: Bad arguments or an invalid relationship; nothing is written
            StorageError: If the session record cannot be read or written
        """
        if not isinstance(reasoning, str) or not reasoning.strip():
            raise ValidationError('reasoning must be a non-empty string')

        mode = mode or DEFAULT_MODE
        if mode not in THINKING_MODES:
            raise ValidationError(f"Invalid mode '{mode}'; expected one of {', '.join(THINKING_MODES)}")

        tags = list(tags or [])
        if not all(isinstance(tag, str) for tag in tags):
            raise ValidationError('tags must be a list of strings')

        if (relates_to is None) != (relationship_type is None):
            raise ValidationError('relates_to and relationship_type must be provided together')
        if relationship_type is not None and relationship_type not in RELATIONSHIP_TYPES:
            raise ValidationError(f"Invalid relationship_type '{relationship_type}'; "
                                  f"expected one of {', '.join(RELATIONSHIP_TYPES)}")

        used_default = False
        if new_chat:
            target_session = await self.store.new_session_id()
        elif session_id:
            self.store.path_for(session_id)
            target_session = session_id
        else:
            default_id = await self.default_pointer.get() if use_default_session else None
            if default_id:
                target_session = default_id
                used_default = True
            else:
                target_session = await self.store.new_session_id()

        thought = Thought(id=generate_id('thought'),
                          content=reasoning,
                          timestamp=now_iso(),
                          mode=mode,
                          tags=tags,
                          relates_to=relates_to,
                          relationship_type=relationship_type)

        def _prepare(existing: List[Thought], new_thought: Thought) -> None:
            taken = {t.id for t in existing}
            if new_thought.id in taken:
                try:
                    new_thought.id = generate_unique_id('thought', taken.__contains__)
                except RuntimeError as e:
                    raise StorageError(str(e))
            if new_thought.relates_to is not None:
                RelationshipGraph(existing, self.config.chain).link(new_thought)

        thoughts = await self.store.append(target_session, thought, prepare=_prepare)

        if set_as_default:
            await self.default_pointer.set(target_session)
        is_default = set_as_default or used_default or await self.default_pointer.get() == target_session

        result = {
            'success': True,
            'thoughtId': thought.id,
            'sessionId': target_session,
            'thoughtCount': len(thoughts),
            'reasoning': reasoning,
            'mode': mode,
            'tags': tags,
            'timestamp': thought.timestamp,
            'preserved': True,
            'newChat': new_chat,
            'usedDefaultSession': used_default,
            'setAsDefault': set_as_default,
            'isDefaultSession': is_default,
        }

        if relates_to is not None:
            result['relationship'] = {'relates_to': relates_to, 'relationship_type': relationship_type}
            if relationship_type == BUILDS_ON:
                graph = RelationshipGraph(thoughts, self.config.chain)
                result['relationship_context'] = graph.context_for(relates_to)

        logger.debug(f'Stored thought {thought.id} in session {target_session}')
        return result

    async def list_sessions(self) -> Dict[str, Any]:
        """Summaries of all persisted sessions plus the current default."""
        summaries = await self.store.list()
        return {
            'success': True,
            'sessions': [s.to_dict() for s in summaries],
            'total': len(summaries),
            'defaultSession': await self.default_pointer.get(),
        }

    async def view_session(self, session_id: Optional[str] = None) -> Dict[str, Any]:
        """Full thought list of a session, falling back to the default session.

        Raises:
            NotFoundError: Unknown session, or no session given and no default set
        """
        target_session, used_default = await self._resolve_existing_session(session_id)
        thoughts = await self.store.load(target_session)
        default_id = await self.default_pointer.get()

        return {
            'success': True,
            'sessionId': target_session,
            'thoughts': [t.to_dict() for t in thoughts],
            'thoughtCount': len(thoughts),
            'usedDefaultSession': used_default,
            'isDefaultSession': default_id == target_session,
        }

    async def delete_session(self, session_id: str) -> Dict[str, Any]:
        """Delete a session record.

        Raises:
            NotFoundError: If the session does not exist
        """
        if not session_id:
            raise ValidationError('sessionId is required')

        was_default = await self.store.delete(session_id)
        message = f'Session {session_id} deleted'
        if was_default:
            message += ' and default session cleared'
        return {'success': True, 'sessionId': session_id, 'wasDefault': was_default, 'message': message}

    async def set_default_session(self, session_id: Optional[str] = None) -> Dict[str, Any]:
        """Point the default at an existing session, or clear it when no id is given.

        Raises:
            ValidationError: If ``session_id`` names no persisted session
        """
        if not session_id:
            cleared = await self.default_pointer.clear()
            return {
                'success': True,
                'defaultSession': None,
                'cleared': cleared,
                'message': 'Default session cleared' if cleared else 'No default session was set',
            }

        if not await self.store.exists(session_id):
            raise ValidationError(f'Invalid session: {session_id} does not exist')

        await self.default_pointer.set(session_id)
        return {'success': True, 'defaultSession': session_id, 'message': f'Default session set to {session_id}'}

    async def cleanup_sessions(self, max_age_days: Optional[int] = None) -> Dict[str, Any]:
        """Delete sessions not modified within ``max_age_days`` (default from config)."""
        if max_age_days is not None and max_age_days < 0:
            raise ValidationError('maxAgeDays must not be negative')

        result = await self.sweeper.sweep(max_age_days)
        return {'success': True, **result}

    async def find_thought_relationships(self,
                                         query: str,
                                         session_id: Optional[str] = None,
                                         relationship_types: Optional[List[str]] = None,
                                         exclude_thought_id: Optional[str] = None,
                                         limit: Optional[int] = None) -> Dict[str, Any]:
        """Rank thoughts in a session by lexical relevance to ``query``.

        Raises:
            ValidationError: Empty query or unknown relationship type
            NotFoundError: Unknown session, or no session given and no default set
        """
        if not isinstance(query, str) or not query.strip():
            raise ValidationError('query must be a non-empty string')
        for relationship_type in relationship_types or []:
            if relationship_type not in RELATIONSHIP_TYPES:
                raise ValidationError(f"Invalid relationship type '{relationship_type}'")

        target_session, used_default = await self._resolve_existing_session(session_id)
        thoughts = await self.store.load(target_session)
        found = self.search_engine.search(thoughts,
                                          query.strip(),
                                          relationship_types=relationship_types,
                                          exclude_thought_id=exclude_thought_id,
                                          limit=limit)

        return {'success': True, 'sessionId': target_session, 'query': query, 'usedDefaultSession': used_default, **found}

    async def _resolve_existing_session(self, session_id: Optional[str]) -> Tuple[str, bool]:
        """Pick the explicit session or the default one; either must have a persisted record."""
        used_default = False
        if not session_id:
            session_id = await self.default_pointer.get()
            if not session_id:
                raise NotFoundError('No session specified and no default session set')
            used_default = True

        if not await self.store.exists(session_id):
            raise NotFoundError(f'Session not found: {session_id}')
        return session_id, used_default
