"""
Relationship Graph and Reasoning-Chain Builder over one loaded session.

Nothing here is persisted separately: the graph is rebuilt from the
``relates_to`` / ``relationship_type`` / ``relationships_in`` / ``relationships_out``
fields already stored on each thought.
"""

from typing import Any, Dict, List, Optional

from ..models.core import BUILDS_ON, CONTRADICTS, RELATIONSHIP_TYPES, SUPPORTS, Relationship, Thought
from ..utils.config import ChainConfig, config
from ..utils.logging_config import get_logger
from ..utils.timestamp_utils import parse_iso
from .errors import ValidationError

logger = get_logger(__name__)


def preview(content: str, length: int = 120) -> str:
    """First ``length`` characters of ``content``, with an ellipsis if truncated."""
    if len(content) <= length:
        return content
    return content[:length] + '...'


class RelationshipGraph:
    """Adjacency view of a session's thoughts, indexed by thought id."""

    def __init__(self, thoughts: List[Thought], chain_config: Optional[ChainConfig] = None):
        self.config = chain_config or config.chain
        self.thoughts = thoughts
        self.by_id: Dict[str, Thought] = {t.id: t for t in thoughts}

    def get(self, thought_id: str) -> Optional[Thought]:
        return self.by_id.get(thought_id)

    def outgoing(self, thought_id: str) -> List[Relationship]:
        thought = self.by_id.get(thought_id)
        return list(thought.relationships_out) if thought else []

    def incoming(self, thought_id: str, relationship_type: Optional[str] = None) -> List[Relationship]:
        """Edges other thoughts declared towards ``thought_id``, optionally of one type."""
        thought = self.by_id.get(thought_id)
        if not thought:
            return []
        return [r for r in thought.relationships_in if relationship_type is None or r.relationship_type == relationship_type]

    def validate_reference(self, new_thought: Thought) -> Thought:
        """Check the reference a new thought declares against this session.

        Returns:
            The referenced thought

        Raises:
            ValidationError: Self reference, unknown target, or a target from the future
        """
        target_id = new_thought.relates_to
        if target_id == new_thought.id:
            raise ValidationError('Invalid relationship: cannot reference self')

        target = self.by_id.get(target_id)
        if target is None:
            raise ValidationError(f'Invalid relationship: referenced thought not found: {target_id}')

        try:
            target_time = parse_iso(target.timestamp)
            new_time = parse_iso(new_thought.timestamp)
        except ValueError as e:
            raise ValidationError(f'Invalid relationship: unreadable timestamp: {e}')
        if target_time > new_time:
            raise ValidationError('Invalid relationship: cannot reference future thoughts')

        return target

    def link(self, new_thought: Thought) -> None:
        """Validate ``new_thought.relates_to`` and record the edge on both ends.

        The new thought is not yet part of the graph; the referenced thought is
        mutated in place so that persisting the session list carries both sides.
        """
        if new_thought.relationship_type not in RELATIONSHIP_TYPES:
            raise ValidationError(f'Invalid relationship type: {new_thought.relationship_type}')

        target = self.validate_reference(new_thought)
        target.relationships_in.append(Relationship(new_thought.id, new_thought.relationship_type))
        new_thought.relationships_out.append(Relationship(target.id, new_thought.relationship_type))
        logger.debug(f'Linked {new_thought.id} -{new_thought.relationship_type}-> {target.id}')

    def build_chain(self, start_thought_id: str) -> Dict[str, Any]:
        """Walk ``builds_on`` references backwards from ``start_thought_id``.

        Returns:
            Dict with ``chain`` (oldest first, at most ``visible_length`` entries),
            ``total_length`` and ``truncated``
        """
        visited = set()
        walked = []
        current = self.by_id.get(start_thought_id)
        while current is not None and len(walked) < self.config.max_hops:
            if current.id in visited:
                logger.debug(f'Cycle detected at {current.id} while building chain from {start_thought_id}')
                break
            visited.add(current.id)
            walked.append(current)

            if current.relationship_type != BUILDS_ON or not current.relates_to:
                break
            current = self.by_id.get(current.relates_to)

        walked.reverse()
        entries = [self._chain_entry(t) for t in walked]
        total_length = len(entries)

        if total_length > self.config.visible_length:
            omitted = total_length - self.config.visible_length
            entries = entries[omitted:]
            entries[0]['truncated'] = True
            entries[0]['omitted_count'] = omitted
            return {'chain': entries, 'total_length': total_length, 'truncated': True}

        return {'chain': entries, 'total_length': total_length, 'truncated': False}

    def related_by(self, thought_id: str, relationship_type: str) -> List[Dict[str, Any]]:
        """Up to ``related_limit`` thoughts pointing at ``thought_id`` with the given relation."""
        related = []
        for edge in self.incoming(thought_id, relationship_type):
            source = self.by_id.get(edge.thought_id)
            if source is None:
                continue
            related.append(self._chain_entry(source))
            if len(related) >= self.config.related_limit:
                break
        return related

    def context_for(self, target_id: str) -> Dict[str, Any]:
        """Auxiliary context returned when a thought builds on ``target_id``."""
        return {
            'reasoning_chain': self.build_chain(target_id),
            'contradicting_thoughts': self.related_by(target_id, CONTRADICTS),
            'supporting_thoughts': self.related_by(target_id, SUPPORTS),
        }

    def _chain_entry(self, thought: Thought) -> Dict[str, Any]:
        return {
            'id': thought.id,
            'content_preview': preview(thought.content, self.config.preview_length),
            'mode': thought.mode,
            'timestamp': thought.timestamp,
            'relationship_type': thought.relationship_type,
        }
