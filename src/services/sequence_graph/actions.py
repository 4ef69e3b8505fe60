"""
Catalog of actions a user can attach to a placeholder node.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .types import Command


@dataclass(frozen=True)
class ActionSpec:
    command: Command
    title: str
    icon: str
    branches: int = 1
    verdicts: Tuple[str, ...] = ()

    @property
    def is_dual(self) -> bool:
        return self.branches == 2

    def verdict(self, branch: int) -> str:
        if branch < len(self.verdicts):
            return self.verdicts[branch]
        return ''

    def to_dict(self) -> Dict[str, Any]:
        return {
            'command': self.command.value,
            'title': self.title,
            'icon': self.icon,
            'action': 'CreateTwoChild' if self.is_dual else 'CreateSingleChild',
            'verdict': list(self.verdicts),
        }


ACTION_CATALOG: Tuple[ActionSpec, ...] = (
    ActionSpec(
        Command.INVITE,
        'Send an invite',
        'mdi:account-plus',
        branches=2,
        verdicts=('Still Not Connected', 'Connected'),
    ),
    ActionSpec(Command.INEMAIL, 'Inmail', 'mdi:email-edit-outline'),
    ActionSpec(Command.MESSAGE, 'Send Message', 'mdi:chat-processing-outline'),
    ActionSpec(Command.ENDORSE, 'Endorse Skill', 'mdi:draw-pen'),
    ActionSpec(Command.FOLLOW, 'Follow', 'mdi:transit-connection-variant'),
    ActionSpec(Command.LIKE, 'Like post', 'mdi:thumb-up-outline'),
    ActionSpec(Command.WITHDRAW_INVITE, 'Withdraw Invite', 'mdi:account-cancel-outline'),
)

_BY_COMMAND = {spec.command: spec for spec in ACTION_CATALOG}


def get_action(command) -> Optional[ActionSpec]:
    """Look up an attachable action by command (enum or string)."""
    try:
        return _BY_COMMAND.get(Command(command))
    except ValueError:
        return None
