"""
Unit tests for linearization, validation and submission payloads.
"""

import pytest
from src.services.sequence_graph import (
    Command,
    SequenceGraph,
    attach_action,
    build_submission_payload,
    configure_node,
    ensure_terminals,
    get_action,
    linearize,
    prepare_submission,
    validate,
)
from src.services.sequence_graph.types import DelayConfig, Edge, Node, NodeKind


@pytest.fixture
def lonely_delay_graph():
    """Root -> LIKE -> DELAY with no child below the delay."""
    graph = SequenceGraph.initial()
    return SequenceGraph.from_parts(
        [
            graph.root,
            Node(id=1, kind=NodeKind.SINGLE_BRANCH, command=Command.LIKE, label='Like post'),
            Node(id=2, kind=NodeKind.TIMER, command=Command.DELAY, label='Delay',
                 config=DelayConfig(count=1, unit='Days')),
        ],
        [Edge(0, 1), Edge(1, 2)],
    )


class TestLinearize:
    """Test flattening a graph into steps."""

    def test_skips_root_and_placeholders(self, message_graph):
        steps = linearize(message_graph)
        ids = [step.id for step in steps]

        assert 0 not in ids
        assert 4 not in ids
        assert 24 not in ids
        assert set(ids) == {1, 2, 3, 6, 12}

    def test_follows_node_order(self, message_graph):
        assert [step.id for step in linearize(message_graph)] == [1, 2, 3, 6, 12]

    def test_step_payloads(self, message_graph):
        steps = {step.id: step.to_dict() for step in linearize(message_graph)}

        assert steps[1]['type'] == 'INVITE'
        assert steps[1]['name'] == 'Send an invite'
        assert steps[1]['data'] == {'message_template': '', 'alternative_message': ''}

        assert steps[2]['type'] == 'DELAY'
        assert steps[2]['data'] == {'delay_unit': 'DAY', 'delay_value': 0}

        assert steps[6]['data']['message_template'] == 'Thanks for connecting, {{first_name}}!'
        assert steps[6]['data']['attachments'] == []

    def test_hours_delay_payload(self, invite_graph):
        graph = configure_node(invite_graph, 2, {'count': 6, 'unit': 'Hours'})
        step = next(s for s in linearize(graph) if s.id == 2)
        assert step.data == {'delay_unit': 'HR', 'delay_value': 6}

    def test_end_step_has_empty_data(self, lonely_delay_graph):
        steps = linearize(ensure_terminals(lonely_delay_graph))
        assert steps[-1].type == Command.END
        assert steps[-1].data == {}

    def test_empty_graph(self):
        assert linearize(SequenceGraph.initial()) == []


class TestValidate:
    """Test validation checks and their order."""

    def test_valid_sequence(self, message_graph):
        result = validate(message_graph)
        assert result.is_valid
        assert result.to_dict() == {'is_valid': True}

    def test_no_actions(self):
        result = validate(SequenceGraph.initial())
        assert not result.is_valid
        assert result.error_message == (
            "Invalid Sequence! You need to add at least one action to your sequence."
        )

    def test_empty_message_is_flagged(self, invite_graph):
        graph = attach_action(invite_graph, 6, get_action('MESSAGE'))
        result = validate(graph)

        assert not result.is_valid
        assert result.error_message == "Please enter a message"
        assert result.error_node_ids == ['6']

    def test_missing_alternative_message(self, invite_graph):
        graph = attach_action(invite_graph, 6, get_action('MESSAGE'))
        graph = configure_node(graph, 6, {'message': 'Hi'})
        result = validate(graph)

        assert not result.is_valid
        assert result.error_message == "Please enter an alternative message"
        assert result.error_node_ids == ['6']

    def test_inmail_requires_subject_first(self, invite_graph):
        graph = attach_action(invite_graph, 6, get_action('INEMAIL'))
        graph = configure_node(graph, 6, {'message': 'Body'})
        result = validate(graph)

        assert result.error_message == "Please enter a subject INEMAIL"
        assert result.error_node_ids == ['6']

    def test_whitespace_message_is_blank(self, invite_graph):
        graph = attach_action(invite_graph, 6, get_action('MESSAGE'))
        graph = configure_node(graph, 6, {'message': '   ', 'alternativeMessage': 'Hi'})
        assert validate(graph).error_message == "Please enter a message"

    def test_negative_delay(self, invite_graph):
        graph = configure_node(invite_graph, 3, {'count': -1, 'unit': 'Days'})
        result = validate(graph)

        assert not result.is_valid
        assert 'must have a valid delay value' in result.error_message
        assert result.error_node_ids == ['3']

    def test_missing_delay_count(self, invite_graph):
        graph = configure_node(invite_graph, 2, {'unit': 'Days'})
        result = validate(graph)
        assert result.error_node_ids == ['2']

    def test_bad_delay_unit(self, invite_graph):
        graph = configure_node(invite_graph, 2, {'count': 1, 'unit': 'Weeks'})
        result = validate(graph)

        assert not result.is_valid
        assert 'valid time unit' in result.error_message

    def test_missing_root(self, message_graph):
        nodes = {k: v for k, v in message_graph.nodes.items() if k != 0}
        result = validate(SequenceGraph(nodes=nodes, edges=message_graph.edges))

        assert not result.is_valid
        assert result.error_message == "Sequence must start with a root node."

    def test_to_dict_on_failure(self, invite_graph):
        graph = attach_action(invite_graph, 6, get_action('MESSAGE'))
        assert validate(graph).to_dict() == {
            'is_valid': False,
            'error_message': "Please enter a message",
            'error_node_ids': ['6'],
        }


class TestEnsureTerminals:
    """Test closing childless DELAY nodes."""

    def test_adds_end_under_childless_delay(self, lonely_delay_graph):
        graph = ensure_terminals(lonely_delay_graph)

        end = graph.get(4)
        assert end.command == Command.END
        assert end.kind == NodeKind.LEAF
        assert (2, 4) in {(e.source, e.target) for e in graph.edges}
        assert 4 not in lonely_delay_graph

    def test_idempotent(self, lonely_delay_graph):
        once = ensure_terminals(lonely_delay_graph)
        twice = ensure_terminals(once)
        assert once.nodes == twice.nodes
        assert once.edges == twice.edges

    def test_delays_with_children_untouched(self, invite_graph):
        graph = ensure_terminals(invite_graph)
        assert graph.nodes == invite_graph.nodes


class TestSubmission:
    """Test payload assembly."""

    def test_build_payload(self, message_graph):
        payload = build_submission_payload(message_graph, 'Follow up')

        assert payload['name'] == 'Follow up'
        assert payload['sequence_type'] == 'LINKEDIN'
        assert len(payload['sequence']) == 5
        assert {'nodes', 'edges'} == set(payload['diagram'])

    def test_prepare_submission_closes_delays(self, lonely_delay_graph):
        result, payload = prepare_submission(lonely_delay_graph, 'Likes')

        assert result.is_valid
        assert [step['type'] for step in payload['sequence']] == ['LIKE', 'DELAY', 'END']
        assert payload['sequence'][-1]['data'] == {}

    def test_prepare_submission_invalid(self):
        result, payload = prepare_submission(SequenceGraph.initial(), 'Empty')
        assert not result.is_valid
        assert payload is None
