"""
Lexical Search over the thoughts of one loaded session.
"""

from typing import Any, Dict, Iterable, List, Optional

from ..models.core import Thought
from ..utils.config import ChainConfig, SearchConfig, config
from ..utils.logging_config import get_logger
from .relationship_graph import preview

logger = get_logger(__name__)

FULL_QUERY_IN_CONTENT = 10
WORD_IN_CONTENT = 2
QUERY_IN_TAG = 5
QUERY_IN_MODE = 3
HAS_RELATIONSHIPS = 1


def score_thought(thought: Thought, query: str) -> int:
    """Relevance of ``thought`` to ``query``; 0 means no field matched.

    The relationship bonus only applies once some field has matched.
    """
    needle = query.lower()
    content = thought.content.lower()

    score = 0
    if needle in content:
        score += FULL_QUERY_IN_CONTENT
    for word in needle.split():
        if word in content:
            score += WORD_IN_CONTENT
    for tag in thought.tags:
        if needle in tag.lower():
            score += QUERY_IN_TAG
    if needle in thought.mode.lower():
        score += QUERY_IN_MODE

    if score and thought.has_relationships:
        score += HAS_RELATIONSHIPS
    return score


class LexicalSearch:
    """Rank a session's thoughts against a free-text query."""

    def __init__(self, search_config: Optional[SearchConfig] = None, chain_config: Optional[ChainConfig] = None):
        self.config = search_config or config.search
        self.preview_length = (chain_config or config.chain).preview_length

    def clamp_limit(self, limit: Optional[int]) -> int:
        if limit is None:
            return self.config.default_limit
        return max(1, min(int(limit), self.config.max_limit))

    def search(self,
               thoughts: List[Thought],
               query: str,
               relationship_types: Optional[Iterable[str]] = None,
               exclude_thought_id: Optional[str] = None,
               limit: Optional[int] = None) -> Dict[str, Any]:
        """Score and rank ``thoughts``.

        Args:
            thoughts: Session thoughts in stored order
            query: Case-insensitive search text
            relationship_types: Keep only thoughts whose ``relationship_type`` is one of these
            exclude_thought_id: Thought to leave out, usually the one being written
            limit: Maximum results, clamped to 1..max_limit

        Returns:
            Dict with ``results``, ``total_found`` and ``searched_thoughts``
        """
        wanted_types = set(relationship_types) if relationship_types else None
        candidates = []
        for thought in thoughts:
            if exclude_thought_id and thought.id == exclude_thought_id:
                continue
            if wanted_types is not None and thought.relationship_type not in wanted_types:
                continue
            candidates.append(thought)

        scored = []
        for thought in candidates:
            score = score_thought(thought, query)
            if score > 0:
                scored.append((score, thought))

        # sorted() is stable, so equal scores keep session order
        ranked = sorted(scored, key=lambda pair: pair[0], reverse=True)
        top = ranked[:self.clamp_limit(limit)]

        logger.debug(f'Search for {query!r} matched {len(ranked)} of {len(candidates)} thoughts')
        return {
            'results': [self._result_entry(thought, score) for score, thought in top],
            'total_found': len(ranked),
            'searched_thoughts': len(candidates),
        }

    def _result_entry(self, thought: Thought, score: int) -> Dict[str, Any]:
        return {
            'id': thought.id,
            'content_preview': preview(thought.content, self.preview_length),
            'mode': thought.mode,
            'tags': list(thought.tags),
            'timestamp': thought.timestamp,
            'relates_to': thought.relates_to,
            'relationship_type': thought.relationship_type,
            'relevance_score': score,
        }
