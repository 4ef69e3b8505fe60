"""
Unit tests for LinkedIn action legality rules.
"""

import pytest
from src.services.sequence_graph import (
    Command,
    Node,
    NodeKind,
    SequenceGraph,
    attach_action,
    check_action,
    get_action,
    get_validation_state,
)
from src.services.sequence_graph.legality import (
    INEMAIL_ALREADY_EXISTS,
    INVITE_ALREADY_EXISTS,
    MESSAGE_REQUIRES_INVITE,
    MESSAGE_WITHOUT_DELAY,
    WITHDRAW_REQUIRES_INVITE,
    can_add_inmail,
    can_add_invite,
    can_add_message,
    can_add_withdraw_invite,
    get_ancestor_nodes,
    has_delay_after_invite,
    has_invite_ancestor,
)


@pytest.fixture
def like_graph():
    """Root -> LIKE, no invite anywhere."""
    return attach_action(SequenceGraph.initial(), 0, get_action('LIKE'))


@pytest.fixture
def undelayed_invite_graph():
    """INVITE whose child leaf hangs directly below it with no timer."""
    return SequenceGraph.from_parts([
        SequenceGraph.initial().root,
        Node(id=1, kind=NodeKind.DUAL_BRANCH, command=Command.INVITE),
        Node(id=2, kind=NodeKind.LEAF),
    ])


class TestAncestorHelpers:

    def test_ancestor_nodes_nearest_first(self, invite_graph):
        assert [n.id for n in get_ancestor_nodes(6, invite_graph)] == [3, 1, 0]

    def test_has_invite_ancestor(self, invite_graph, like_graph):
        assert has_invite_ancestor(6, invite_graph)
        assert has_invite_ancestor(4, invite_graph)
        assert not has_invite_ancestor(1, invite_graph)
        assert not has_invite_ancestor(4, like_graph)

    def test_has_delay_after_invite(self, invite_graph, undelayed_invite_graph):
        assert has_delay_after_invite(6, invite_graph)
        assert not has_delay_after_invite(2, undelayed_invite_graph)


class TestMessageRule:
    """Test the MESSAGE rule."""

    def test_message_on_connected_leaf_is_allowed(self, invite_graph):
        result = can_add_message(6, invite_graph, already_connected=False)
        assert result.allowed
        assert result.reason is None
        assert result.warning is None

    def test_message_without_invite_is_rejected(self, like_graph):
        result = can_add_message(4, like_graph)
        assert not result.allowed
        assert result.reason == MESSAGE_REQUIRES_INVITE

    def test_message_allowed_when_already_connected(self, like_graph):
        assert can_add_message(4, like_graph, already_connected=True).allowed

    def test_message_without_delay_warns(self, undelayed_invite_graph):
        result = can_add_message(2, undelayed_invite_graph)
        assert result.allowed
        assert result.warning == MESSAGE_WITHOUT_DELAY


class TestOtherRules:

    def test_second_inmail_on_path_is_rejected(self):
        graph = attach_action(SequenceGraph.initial(), 0, get_action('INEMAIL'))
        result = can_add_inmail(4, graph)
        assert not result.allowed
        assert result.reason == INEMAIL_ALREADY_EXISTS

    def test_inmail_on_fresh_path_is_allowed(self, invite_graph):
        assert can_add_inmail(6, invite_graph).allowed

    def test_withdraw_requires_invite(self, invite_graph, like_graph):
        assert can_add_withdraw_invite(4, invite_graph).allowed
        result = can_add_withdraw_invite(4, like_graph)
        assert not result.allowed
        assert result.reason == WITHDRAW_REQUIRES_INVITE

    def test_single_invite_per_path(self, invite_graph, like_graph):
        result = can_add_invite(6, invite_graph)
        assert not result.allowed
        assert result.reason == INVITE_ALREADY_EXISTS
        assert can_add_invite(4, like_graph).allowed

    def test_invite_check_is_repeatable(self, invite_graph):
        first = check_action(Command.INVITE, 6, invite_graph)
        second = check_action(Command.INVITE, 6, invite_graph)
        assert first == second

    @pytest.mark.parametrize('command', [Command.LIKE, Command.FOLLOW, Command.ENDORSE])
    def test_ungated_commands_always_allowed(self, like_graph, command):
        assert check_action(command, 4, like_graph).allowed

    def test_rules_do_not_modify_graph(self, invite_graph):
        before = dict(invite_graph.nodes)
        check_action(Command.MESSAGE, 6, invite_graph)
        assert invite_graph.nodes == before


class TestValidationState:

    def test_state_on_invite_branch(self, invite_graph):
        state = get_validation_state(6, invite_graph)
        assert state['disabled_commands'] == ['INVITE']
        assert state['has_invite_in_ancestors']
        assert state['has_delay_after_invite']
        assert not state['has_inmail_in_path']

    def test_state_without_invite(self, like_graph):
        state = get_validation_state(4, like_graph)
        assert 'MESSAGE' in state['disabled_commands']
        assert 'WITHDRAW_INVITE' in state['disabled_commands']
        assert 'INVITE' not in state['disabled_commands']

    def test_to_dict(self, like_graph):
        data = check_action(Command.MESSAGE, 4, like_graph).to_dict()
        assert data == {'allowed': False, 'reason': MESSAGE_REQUIRES_INVITE}
