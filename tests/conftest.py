"""
Shared pytest fixtures for thinking workspace tests.

Every fixture points storage at a per-test temporary directory, so tests never
touch the user's real session directory.
"""

import pytest

from think_workspace.models.core import Relationship, Thought
from think_workspace.services.default_session import DefaultSessionPointer
from think_workspace.services.session_store import SessionStore
from think_workspace.services.thinking_service import ThinkingService
from think_workspace.utils.config import (AppConfig, ChainConfig, MCPConfig, RetentionConfig, SearchConfig,
                                          StorageConfig)


@pytest.fixture
def app_config(tmp_path):
    """AppConfig with defaults and a temporary session directory."""
    return AppConfig(environment='test',
                     log_level='DEBUG',
                     storage=StorageConfig(session_dir=str(tmp_path / 'sessions'),
                                           default_session_file='.default_session.json'),
                     chain=ChainConfig(max_hops=20, visible_length=7, preview_length=120, related_limit=3),
                     search=SearchConfig(default_limit=10, max_limit=20),
                     retention=RetentionConfig(default_max_age_days=90),
                     mcp=MCPConfig(transport='stdio', host='127.0.0.1', port=8000))


@pytest.fixture
def pointer(app_config):
    return DefaultSessionPointer(app_config.storage)


@pytest.fixture
def store(app_config, pointer):
    return SessionStore(app_config.storage, pointer)


@pytest.fixture
def service(app_config):
    return ThinkingService(app_config)


@pytest.fixture
def make_thought():
    """
    Factory for Thought objects with predictable ids and timestamps.

    Thought ``n`` gets timestamp ``2025-01-01T00:00:<n>.000Z`` unless one is given.
    """
    def _make(n, content=None, relates_to=None, relationship_type=None, mode='linear', tags=None, timestamp=None):
        return Thought(id=f'thought_{n}',
                       content=content if content is not None else f'thought number {n}',
                       timestamp=timestamp or f'2025-01-01T00:00:{n:02d}.000Z',
                       mode=mode,
                       tags=list(tags or []),
                       relates_to=relates_to,
                       relationship_type=relationship_type)

    return _make


@pytest.fixture
def builds_on_chain(make_thought):
    """
    Ten thoughts where each one builds on its predecessor, with both edge ends recorded.
    """
    thoughts = [make_thought(0)]
    for n in range(1, 10):
        thought = make_thought(n, relates_to=f'thought_{n - 1}', relationship_type='builds_on')
        thought.relationships_out.append(Relationship(f'thought_{n - 1}', 'builds_on'))
        thoughts[-1].relationships_in.append(Relationship(thought.id, 'builds_on'))
        thoughts.append(thought)
    return thoughts
