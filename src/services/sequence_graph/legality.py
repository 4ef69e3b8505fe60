"""
LinkedIn action legality rules.

The rules inspect the commands on a node's ancestor path to decide whether
an action may be attached there:
- MESSAGE needs an INVITE upstream unless the lead is already connected
- WITHDRAW_INVITE needs an INVITE upstream
- only one INVITE and one INEMAIL per path

They are advisory and never modify the graph.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .addressing import ancestor_ids
from .types import Command, Node, SequenceGraph


@dataclass(frozen=True)
class LegalityResult:
    allowed: bool
    reason: Optional[str] = None
    warning: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {'allowed': self.allowed}
        if self.reason:
            result['reason'] = self.reason
        if self.warning:
            result['warning'] = self.warning
        return result


ALLOWED = LegalityResult(allowed=True)

MESSAGE_REQUIRES_INVITE = "MESSAGE requires an INVITE action in the sequence path"
WITHDRAW_REQUIRES_INVITE = "WITHDRAW_INVITE requires an INVITE action in the sequence path"
INEMAIL_ALREADY_EXISTS = "Only one InMail action is allowed per sequence path"
INVITE_ALREADY_EXISTS = "An INVITE action already exists in this sequence path"
MESSAGE_WITHOUT_DELAY = "Consider adding a delay after INVITE before sending a message"


def get_ancestor_nodes(node_id: int, graph: SequenceGraph) -> List[Node]:
    """Ancestors present in the graph, nearest first."""
    return [graph.nodes[a] for a in ancestor_ids(node_id) if a in graph.nodes]


def _path_has(node_id: int, graph: SequenceGraph, command: Command) -> bool:
    return any(node.command == command for node in get_ancestor_nodes(node_id, graph))


def has_invite_ancestor(node_id: int, graph: SequenceGraph) -> bool:
    return _path_has(node_id, graph, Command.INVITE)


def has_inmail_ancestor(node_id: int, graph: SequenceGraph) -> bool:
    return _path_has(node_id, graph, Command.INEMAIL)


def has_delay_after_invite(node_id: int, graph: SequenceGraph) -> bool:
    """True when a DELAY sits between the node and its nearest INVITE."""
    for node in get_ancestor_nodes(node_id, graph):
        if node.command == Command.DELAY:
            # Only counts if an INVITE is still further up
            return has_invite_ancestor(node.id, graph)
        if node.command == Command.INVITE:
            return False
    return False


def can_add_message(node_id: int, graph: SequenceGraph, already_connected: bool = False) -> LegalityResult:
    if already_connected:
        return ALLOWED
    if not has_invite_ancestor(node_id, graph):
        return LegalityResult(allowed=False, reason=MESSAGE_REQUIRES_INVITE)
    if not has_delay_after_invite(node_id, graph):
        return LegalityResult(allowed=True, warning=MESSAGE_WITHOUT_DELAY)
    return ALLOWED


def can_add_inmail(node_id: int, graph: SequenceGraph) -> LegalityResult:
    if has_inmail_ancestor(node_id, graph):
        return LegalityResult(allowed=False, reason=INEMAIL_ALREADY_EXISTS)
    return ALLOWED


def can_add_withdraw_invite(node_id: int, graph: SequenceGraph) -> LegalityResult:
    if not has_invite_ancestor(node_id, graph):
        return LegalityResult(allowed=False, reason=WITHDRAW_REQUIRES_INVITE)
    return ALLOWED


def can_add_invite(node_id: int, graph: SequenceGraph) -> LegalityResult:
    if has_invite_ancestor(node_id, graph):
        return LegalityResult(allowed=False, reason=INVITE_ALREADY_EXISTS)
    return ALLOWED


def check_action(
    command: Command,
    node_id: int,
    graph: SequenceGraph,
    already_connected: bool = False,
) -> LegalityResult:
    """Run the rule for `command`; commands without a rule are always allowed."""
    if command == Command.MESSAGE:
        return can_add_message(node_id, graph, already_connected)
    if command == Command.INEMAIL:
        return can_add_inmail(node_id, graph)
    if command == Command.WITHDRAW_INVITE:
        return can_add_withdraw_invite(node_id, graph)
    if command == Command.INVITE:
        return can_add_invite(node_id, graph)
    return ALLOWED


GATED_COMMANDS = (Command.MESSAGE, Command.INEMAIL, Command.WITHDRAW_INVITE, Command.INVITE)


def get_validation_state(
    node_id: int,
    graph: SequenceGraph,
    already_connected: bool = False,
) -> Dict[str, Any]:
    """Summarize which gated commands are disabled at a node."""
    disabled = [
        command.value for command in GATED_COMMANDS
        if not check_action(command, node_id, graph, already_connected).allowed
    ]
    return {
        'disabled_commands': disabled,
        'has_invite_in_ancestors': has_invite_ancestor(node_id, graph),
        'has_delay_after_invite': has_delay_after_invite(node_id, graph),
        'has_inmail_in_path': has_inmail_ancestor(node_id, graph),
    }
