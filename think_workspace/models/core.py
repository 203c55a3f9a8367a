"""
Core data models for the thinking workspace.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

THINKING_MODES = ('linear', 'creative', 'critical', 'strategic', 'empathetic')
DEFAULT_MODE = 'linear'

RELATIONSHIP_TYPES = ('builds_on', 'supports', 'contradicts', 'refines', 'synthesizes')
BUILDS_ON = 'builds_on'
SUPPORTS = 'supports'
CONTRADICTS = 'contradicts'


@dataclass
class Relationship:
    """One directed edge recorded on a thought."""
    thought_id: str  # The thought on the other end of the edge
    relationship_type: str

    def to_dict(self) -> Dict[str, str]:
        return {'thought_id': self.thought_id, 'relationship_type': self.relationship_type}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Relationship':
        return cls(thought_id=data['thought_id'], relationship_type=data['relationship_type'])


@dataclass
class Thought:
    """Represents one stored unit of reasoning within a session.

    ``content`` is stored verbatim; previews handed back to callers are derived
    from it and never written back.
    """
    id: str
    content: str
    timestamp: str  # ISO-8601 UTC, see utils.timestamp_utils.now_iso
    mode: str = DEFAULT_MODE
    tags: List[str] = field(default_factory=list)
    relates_to: Optional[str] = None
    relationship_type: Optional[str] = None
    relationships_in: List[Relationship] = field(default_factory=list)
    relationships_out: List[Relationship] = field(default_factory=list)

    @property
    def has_relationships(self) -> bool:
        return bool(self.relates_to or self.relationships_in or self.relationships_out)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'content': self.content,
            'mode': self.mode,
            'tags': list(self.tags),
            'timestamp': self.timestamp,
        }
        if self.relates_to is not None:
            data['relates_to'] = self.relates_to
            data['relationship_type'] = self.relationship_type
        if self.relationships_in:
            data['relationships_in'] = [r.to_dict() for r in self.relationships_in]
        if self.relationships_out:
            data['relationships_out'] = [r.to_dict() for r in self.relationships_out]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Thought':
        """Build a Thought from a stored record; relationship fields are optional."""
        return cls(id=str(data['id']),
                   content=data.get('content', ''),
                   timestamp=data.get('timestamp', ''),
                   mode=data.get('mode') or DEFAULT_MODE,
                   tags=list(data.get('tags') or []),
                   relates_to=data.get('relates_to'),
                   relationship_type=data.get('relationship_type'),
                   relationships_in=[Relationship.from_dict(r) for r in data.get('relationships_in') or []],
                   relationships_out=[Relationship.from_dict(r) for r in data.get('relationships_out') or []])


@dataclass
class SessionSummary:
    """Listing entry for one persisted session."""
    session_id: str
    thought_count: int
    first_thought: Optional[str]
    last_thought: Optional[str]
    last_modified: str
    is_default: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'sessionId': self.session_id,
            'thoughtCount': self.thought_count,
            'firstThought': self.first_thought,
            'lastThought': self.last_thought,
            'lastModified': self.last_modified,
            'isDefault': self.is_default,
        }
