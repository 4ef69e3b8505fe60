"""
Value types for the sequence graph.

This module contains:
- Command and NodeKind enums
- Per-command config variants (message, invite, InMail, delay, empty)
- Node, Edge and SequenceGraph
- DiagramError for malformed canvas input

All types are immutable; editing functions return new instances.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple


class DiagramError(ValueError):
    """Raised when canvas or sequence JSON cannot be turned into a graph."""


class Command(str, Enum):
    NONE = 'NONE'
    INVITE = 'INVITE'
    INEMAIL = 'INEMAIL'
    MESSAGE = 'MESSAGE'
    LIKE = 'LIKE'
    FOLLOW = 'FOLLOW'
    ENDORSE = 'ENDORSE'
    WITHDRAW_INVITE = 'WITHDRAW_INVITE'
    DELAY = 'DELAY'
    END = 'END'

    @classmethod
    def parse(cls, value: Any) -> 'Command':
        if not isinstance(value, str):
            raise DiagramError(f"Unknown command: {value!r}")
        try:
            return cls(value)
        except ValueError:
            raise DiagramError(f"Unknown command: {value!r}")


class NodeKind(str, Enum):
    ROOT = 'root'
    TIMER = 'timer'
    LEAF = 'leaf'
    SINGLE_BRANCH = 'single-branch'
    DUAL_BRANCH = 'dual-branch'

    @classmethod
    def parse(cls, value: Any) -> 'NodeKind':
        if not isinstance(value, str):
            raise DiagramError(f"Unknown node type: {value!r}")
        # Older canvas builds stored branch kinds by edge direction
        value = LEGACY_KIND_NAMES.get(value, value)
        try:
            return cls(value)
        except ValueError:
            raise DiagramError(f"Unknown node type: {value!r}")


LEGACY_KIND_NAMES = {
    'unidirectional': NodeKind.SINGLE_BRANCH.value,
    'bidirectional': NodeKind.DUAL_BRANCH.value,
}

DELAY_UNITS = ('Days', 'Hours')

ROOT_ID = 0


@dataclass(frozen=True)
class Position:
    x: float = 0
    y: float = 0

    def shifted(self, dx: float = 0, dy: float = 0) -> 'Position':
        return Position(self.x + dx, self.y + dy)

    def to_dict(self) -> Dict[str, float]:
        return {'x': self.x, 'y': self.y}


@dataclass(frozen=True)
class Attachment:
    url: str = ''
    name: str = ''
    type: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Attachment':
        return cls(
            url=data.get('url') or '',
            name=data.get('name') or '',
            type=data.get('type') or '',
        )

    def to_dict(self) -> Dict[str, str]:
        return {'url': self.url, 'name': self.name, 'type': self.type}


def _as_count(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _attachments(items: Optional[List[Dict[str, Any]]]) -> Tuple[Attachment, ...]:
    return tuple(Attachment.from_dict(item) for item in (items or []))


# Config variants. Each knows how to read/write the canvas "value" dict and
# how to render the runner payload for its command.

@dataclass(frozen=True)
class EmptyConfig:
    """Fire-and-forget commands carry no payload."""

    @classmethod
    def from_value(cls, value: Dict[str, Any]) -> 'EmptyConfig':
        return cls()

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> 'EmptyConfig':
        return cls()

    def to_value(self) -> Dict[str, Any]:
        return {}

    def to_payload(self) -> Dict[str, Any]:
        return {}


@dataclass(frozen=True)
class InviteConfig:
    message: str = ''
    alternative_message: str = ''

    @classmethod
    def from_value(cls, value: Dict[str, Any]) -> 'InviteConfig':
        return cls(
            message=value.get('message') or '',
            alternative_message=value.get('alternativeMessage') or '',
        )

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> 'InviteConfig':
        return cls(
            message=data.get('message_template') or '',
            alternative_message=data.get('alternative_message') or '',
        )

    def to_value(self) -> Dict[str, Any]:
        return {'message': self.message, 'alternativeMessage': self.alternative_message}

    def to_payload(self) -> Dict[str, Any]:
        return {
            'message_template': self.message,
            'alternative_message': self.alternative_message,
        }


@dataclass(frozen=True)
class MessageConfig:
    message: str = ''
    alternative_message: str = ''
    attachments: Tuple[Attachment, ...] = ()

    @classmethod
    def from_value(cls, value: Dict[str, Any]) -> 'MessageConfig':
        return cls(
            message=value.get('message') or '',
            alternative_message=value.get('alternativeMessage') or '',
            attachments=_attachments(value.get('attachments')),
        )

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> 'MessageConfig':
        return cls(
            message=data.get('message_template') or '',
            alternative_message=data.get('alternative_message') or '',
            attachments=_attachments(data.get('attachments')),
        )

    def to_value(self) -> Dict[str, Any]:
        return {
            'message': self.message,
            'alternativeMessage': self.alternative_message,
            'attachments': [a.to_dict() for a in self.attachments],
        }

    def to_payload(self) -> Dict[str, Any]:
        return {
            'message_template': self.message,
            'alternative_message': self.alternative_message,
            'attachments': [a.to_dict() for a in self.attachments],
        }


@dataclass(frozen=True)
class InMailConfig:
    subject: str = ''
    message: str = ''
    alternative_subject: str = ''
    alternative_message: str = ''
    attachments: Tuple[Attachment, ...] = ()

    @classmethod
    def from_value(cls, value: Dict[str, Any]) -> 'InMailConfig':
        return cls(
            subject=value.get('subject') or '',
            message=value.get('message') or '',
            alternative_subject=value.get('alternativeSubject') or '',
            alternative_message=value.get('alternativeMessage') or '',
            attachments=_attachments(value.get('attachments')),
        )

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> 'InMailConfig':
        return cls(
            subject=data.get('subject_template') or '',
            message=data.get('message_template') or '',
            alternative_subject=data.get('alternative_subject') or '',
            alternative_message=data.get('alternative_message') or '',
            attachments=_attachments(data.get('attachments')),
        )

    def to_value(self) -> Dict[str, Any]:
        return {
            'subject': self.subject,
            'message': self.message,
            'alternativeSubject': self.alternative_subject,
            'alternativeMessage': self.alternative_message,
            'attachments': [a.to_dict() for a in self.attachments],
        }

    def to_payload(self) -> Dict[str, Any]:
        return {
            'message_template': self.message,
            'subject_template': self.subject,
            'alternative_message': self.alternative_message,
            'alternative_subject': self.alternative_subject,
            'attachments': [a.to_dict() for a in self.attachments],
        }


@dataclass(frozen=True)
class DelayConfig:
    # count stays None when the canvas never set one, so validation can flag it
    count: Optional[int] = 0
    unit: Optional[str] = 'Days'

    @classmethod
    def from_value(cls, value: Dict[str, Any]) -> 'DelayConfig':
        return cls(count=_as_count(value.get('count')), unit=value.get('unit'))

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> 'DelayConfig':
        return cls(
            count=_as_count(data.get('delay_value')),
            unit='Days' if data.get('delay_unit') == 'DAY' else 'Hours',
        )

    def to_value(self) -> Dict[str, Any]:
        return {'count': self.count, 'unit': self.unit}

    def to_payload(self) -> Dict[str, Any]:
        return {
            'delay_unit': 'DAY' if self.unit == 'Days' else 'HR',
            'delay_value': self.count,
        }


CONFIG_TYPES = {
    Command.INVITE: InviteConfig,
    Command.MESSAGE: MessageConfig,
    Command.INEMAIL: InMailConfig,
    Command.DELAY: DelayConfig,
}


def config_type_for(command: Command):
    """Return the config class used by a command."""
    return CONFIG_TYPES.get(command, EmptyConfig)


def default_config(command: Command):
    return config_type_for(command)()


@dataclass(frozen=True)
class Node:
    id: int
    kind: NodeKind
    command: Command = Command.NONE
    label: Optional[str] = None
    icon: Optional[str] = None
    config: Any = field(default_factory=EmptyConfig)
    position: Position = field(default_factory=Position)

    @property
    def is_root(self) -> bool:
        return self.id == ROOT_ID

    @property
    def is_placeholder(self) -> bool:
        return self.command == Command.NONE

    def with_changes(self, **changes) -> 'Node':
        return replace(self, **changes)


@dataclass(frozen=True)
class Edge:
    source: int
    target: int
    label: str = ''
    negative: bool = False
    source_handle: str = 'bottom'
    target_handle: str = 'top'

    @property
    def id(self) -> str:
        return f"e-{self.source}-{self.target}"


@dataclass(frozen=True)
class SequenceGraph:
    """
    A node/edge collection rooted at id 0.

    `nodes` preserves insertion order, which is also linearization order.
    Treat both collections as read-only; use the editor functions to derive
    a new graph.
    """
    nodes: Dict[int, Node] = field(default_factory=dict)
    edges: Tuple[Edge, ...] = ()

    @classmethod
    def initial(cls) -> 'SequenceGraph':
        root = Node(
            id=ROOT_ID,
            kind=NodeKind.ROOT,
            label='Start Sequence',
            icon='lucide:play',
            position=Position(200, -150),
        )
        return cls(nodes={ROOT_ID: root})

    @classmethod
    def from_parts(cls, nodes, edges=()) -> 'SequenceGraph':
        return cls(nodes={node.id: node for node in nodes}, edges=tuple(edges))

    def __contains__(self, node_id: int) -> bool:
        return node_id in self.nodes

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes.values())

    def __len__(self) -> int:
        return len(self.nodes)

    def get(self, node_id: int) -> Optional[Node]:
        return self.nodes.get(node_id)

    @property
    def root(self) -> Optional[Node]:
        return self.nodes.get(ROOT_ID)
