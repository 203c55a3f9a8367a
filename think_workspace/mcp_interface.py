"""
MCP Interface Layer using fastmcp for the thinking workspace tools.

Argument names follow the published tool schema, hence the camelCase parameters.
"""
import sys
from typing import Any, Awaitable, Dict, List, Optional

from fastmcp import FastMCP

from .services.errors import ThinkingError
from .services.thinking_service import ThinkingService
from .utils.config import config
from .utils.health_check import check_health, get_system_info
from .utils.logging_config import get_logger

logger = get_logger(__name__)

# Initialize FastMCP application
mcp = FastMCP('Think Workspace')
thinking_service = ThinkingService()


async def _respond(operation: str, pending: Awaitable[Dict[str, Any]]) -> Dict[str, Any]:
    """Await a service call and turn failures into an error result record."""
    try:
        return await pending
    except ThinkingError as e:
        logger.warning(f'{operation} rejected: {e.message}')
        return e.to_result()
    except Exception as e:
        logger.error(f'Unexpected error in {operation}: {e}')
        return {'success': False, 'error': 'internal_error', 'message': f'{operation} failed: {e}'}


@mcp.tool()
async def think(reasoning: str,
                sessionId: Optional[str] = None,  # noqa: N803
                useDefaultSession: bool = True,  # noqa: N803
                setAsDefault: bool = False,  # noqa: N803
                mode: str = 'linear',
                tags: Optional[List[str]] = None,
                newChat: bool = False,  # noqa: N803
                relates_to: Optional[str] = None,
                relationship_type: Optional[str] = None) -> Dict[str, Any]:
    """A pure thinking workspace that preserves reasoning without modification.

    Args:
        reasoning: Your thinking, reasoning, or analysis text
        sessionId: Session to append to; omitted means the default session or a new one
        useDefaultSession: Fall back to the default session when no sessionId is given
        setAsDefault: Make the resolved session the default session
        mode: One of linear, creative, critical, strategic, empathetic
        tags: Free-text labels stored with the thought
        newChat: Always start a new session
        relates_to: Id of an earlier thought in the same session
        relationship_type: One of builds_on, supports, contradicts, refines, synthesizes

    Returns:
        New thought id, session id, thought count and optional relationship context
    """
    return await _respond('think',
                          thinking_service.think(reasoning,
                                                 session_id=sessionId,
                                                 use_default_session=useDefaultSession,
                                                 set_as_default=setAsDefault,
                                                 mode=mode,
                                                 tags=tags,
                                                 new_chat=newChat,
                                                 relates_to=relates_to,
                                                 relationship_type=relationship_type))


@mcp.tool()
async def list_sessions() -> Dict[str, Any]:
    """List all thinking sessions with thought counts and the current default session."""
    return await _respond('list_sessions', thinking_service.list_sessions())


@mcp.tool()
async def view_session(sessionId: Optional[str] = None) -> Dict[str, Any]:  # noqa: N803
    """Show every thought in a session.

    Args:
        sessionId: Session to view; omitted means the default session
    """
    return await _respond('view_session', thinking_service.view_session(sessionId))


@mcp.tool()
async def delete_session(sessionId: str) -> Dict[str, Any]:  # noqa: N803
    """Delete a session; clears the default session if it pointed there.

    Args:
        sessionId: Session to delete
    """
    return await _respond('delete_session', thinking_service.delete_session(sessionId))


@mcp.tool()
async def set_default_session(sessionId: Optional[str] = None) -> Dict[str, Any]:  # noqa: N803
    """Set the default session, or clear it when no sessionId is given.

    Args:
        sessionId: Existing session to use by default
    """
    return await _respond('set_default_session', thinking_service.set_default_session(sessionId))


@mcp.tool()
async def cleanup_sessions(maxAgeDays: int = config.retention.default_max_age_days) -> Dict[str, Any]:  # noqa: N803
    """Delete sessions that have not been modified for more than maxAgeDays days.

    Args:
        maxAgeDays: Age threshold in days (default 90)
    """
    return await _respond('cleanup_sessions', thinking_service.cleanup_sessions(maxAgeDays))


@mcp.tool()
async def find_thought_relationships(query: str,
                                     sessionId: Optional[str] = None,  # noqa: N803
                                     relationship_types: Optional[List[str]] = None,
                                     exclude_thought_id: Optional[str] = None,
                                     limit: int = 10) -> Dict[str, Any]:
    """Find thoughts in a session related to a query, ranked by lexical relevance.

    Args:
        query: Text to look for in content, tags and mode
        sessionId: Session to search; omitted means the default session
        relationship_types: Only consider thoughts declaring one of these relationship types
        exclude_thought_id: Thought to leave out of the results
        limit: Maximum number of results (1-20, default 10)
    """
    return await _respond('find_thought_relationships',
                          thinking_service.find_thought_relationships(query,
                                                                      session_id=sessionId,
                                                                      relationship_types=relationship_types,
                                                                      exclude_thought_id=exclude_thought_id,
                                                                      limit=limit))


def main() -> None:
    """Run the MCP server with the configured transport."""
    try:
        if not check_health():
            logger.error('Session storage is not usable; refusing to start')
            sys.exit(1)
        logger.debug(f'System info: {get_system_info()}')

        transport = config.mcp.transport
        logger.info(f'Starting Think Workspace MCP server ({transport})')
        if transport == 'stdio':
            mcp.run(transport=transport)
        else:
            mcp.run(transport=transport, host=config.mcp.host, port=config.mcp.port)
    except Exception as e:
        logger.error(f'Server startup failed: {e}')
        sys.exit(1)


if __name__ == '__main__':
    main()
