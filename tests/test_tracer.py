"""Tests for the forwarding engine."""

import pytest

from vestige.engine import GraphTracer, diff_notes
from vestige.errors import InvariantViolationError
from vestige.graph import GraphSnapshot, NoteEvent, note_in_handle_id
from vestige.nodes import create_note_merge_node, NOTE_INPUT_A, NOTE_INPUT_B
from vestige.testing import (
    create_constant_node,
    create_mock_effect_node,
    create_mock_instrument_node,
    create_scripted_notes_node,
    create_sum_node,
    create_test_graph,
    note_edge,
    value_edge,
)


class TestDiffNotes:
    """Tests for note transition derivation."""

    def test_offs_before_ons(self):
        events = diff_notes((60, 64), (64, 67))
        assert events == [NoteEvent.off(60), NoteEvent.on(67)]

    def test_order_follows_inputs(self):
        events = diff_notes((67, 60, 64), (72, 71))
        assert events == [
            NoteEvent.off(67),
            NoteEvent.off(60),
            NoteEvent.off(64),
            NoteEvent.on(72),
            NoteEvent.on(71),
        ]

    def test_equal_snapshots(self):
        assert diff_notes((60, 64), (64, 60)) == []
        assert diff_notes((), ()) == []


class TestValuePass:
    """Tests for value forwarding."""

    def test_constant_into_instrument_parameter(self):
        lfo = create_constant_node(0.5)
        synth = create_mock_instrument_node("value")
        graph = create_test_graph([lfo, synth], [value_edge(lfo, synth, "param-value")])

        GraphTracer().trace(0.0, graph)

        assert synth.data.parameters["param-value"].values == [0.5]

    def test_effect_parameter(self):
        lfo = create_constant_node(0.75)
        fx = create_mock_effect_node("mix")
        graph = create_test_graph([lfo, fx], [value_edge(lfo, fx, "param-mix")])

        GraphTracer().trace(1.0, graph)

        assert fx.data.parameters["param-mix"].last == 0.75

    def test_fan_in_generates_once_all_inputs_arrive(self):
        a = create_constant_node(0.25)
        b = create_constant_node(0.5)
        total = create_sum_node("a", "b")
        synth = create_mock_instrument_node("value")
        graph = create_test_graph(
            [a, b, total, synth],
            [
                value_edge(a, total, "param-a"),
                value_edge(b, total, "param-b"),
                value_edge(total, synth, "param-value"),
            ],
        )

        GraphTracer().trace(0.0, graph)

        assert total.data.generator.generate_calls == [0.0]
        assert synth.data.parameters["param-value"].values == [0.75]

    def test_partial_fan_in_waits(self):
        a = create_constant_node(0.25)
        b = create_sum_node("x")
        total = create_sum_node("a", "b")
        graph = GraphSnapshot(
            [a, b, total],
            [value_edge(a, total, "param-a"), value_edge(b, total, "param-b"), value_edge(total, b, "param-x")],
        )

        GraphTracer().trace(0.0, graph)

        assert total.data.generator.generate_calls == []

    def test_missing_terminal_parameter_is_fatal(self):
        lfo = create_constant_node(0.5)
        synth = create_mock_instrument_node("value")
        # Built directly: the mutator would reject this edge.
        graph = GraphSnapshot([lfo, synth], [value_edge(lfo, synth, "param-cutoff")])

        with pytest.raises(InvariantViolationError) as exc_info:
            GraphTracer().trace(0.0, graph)
        assert exc_info.value.invariant_id == "value-target-parameter"

    def test_delivery_after_completion_is_fatal(self):
        lfo = create_constant_node(0.5)
        total = create_sum_node("x")
        synth = create_mock_instrument_node("value")
        # The root listed twice delivers to a one-edge combinator twice.
        graph = GraphSnapshot(
            [lfo, lfo, total, synth],
            [value_edge(lfo, total, "param-x"), value_edge(total, synth, "param-value")],
        )

        with pytest.raises(InvariantViolationError) as exc_info:
            GraphTracer().trace(0.0, graph)

        assert exc_info.value.invariant_id == "value-fan-in"
        assert exc_info.value.details["received"] == 2
        assert total.data.generator.generate_calls == [0.0]

    def test_each_tick_generates_again(self):
        lfo = create_constant_node(0.5)
        synth = create_mock_instrument_node("value")
        graph = create_test_graph([lfo, synth], [value_edge(lfo, synth, "param-value")])
        tracer = GraphTracer()

        tracer.trace(0.0, graph)
        tracer.trace(0.1, graph)

        assert lfo.data.generator.generate_calls == [0.0, 0.1]


class TestNotePass:
    """Tests for note forwarding."""

    def test_note_transitions(self):
        notes = create_scripted_notes_node({0.0: [60], 1.0: [60, 64]})
        synth = create_mock_instrument_node()
        graph = create_test_graph([notes, synth], [note_edge(notes, synth)])
        tracer = GraphTracer()

        tracer.trace(0.0, graph)
        tracer.trace(1.0, graph)

        assert synth.data.generator.accepted_events == [
            [NoteEvent.on(60)],
            [NoteEvent.on(64)],
        ]

    def test_retrace_is_idempotent(self):
        notes = create_scripted_notes_node({0.0: [60, 64]})
        synth = create_mock_instrument_node()
        graph = create_test_graph([notes, synth], [note_edge(notes, synth)])
        tracer = GraphTracer()

        tracer.trace(0.0, graph)
        tracer.trace(0.0, graph)

        assert synth.data.generator.accepted_events == [[NoteEvent.on(60), NoteEvent.on(64)]]

    def test_silence_releases_notes(self):
        notes = create_scripted_notes_node({0.0: [60, 64]})
        synth = create_mock_instrument_node()
        graph = create_test_graph([notes, synth], [note_edge(notes, synth)])
        tracer = GraphTracer()

        tracer.trace(0.0, graph)
        tracer.trace(0.5, graph)

        assert synth.data.generator.accepted_events[-1] == [NoteEvent.off(60), NoteEvent.off(64)]
        assert graph.note_state.previous(notes.id, synth.id) == ()

    def test_duplicates_are_collapsed(self):
        notes = create_scripted_notes_node({0.0: [60, 60, 64]})
        synth = create_mock_instrument_node()
        graph = create_test_graph([notes, synth], [note_edge(notes, synth)])

        GraphTracer().trace(0.0, graph)

        assert graph.note_state.previous(notes.id, synth.id) == (60, 64)

    def test_unary_transform(self):
        root = create_scripted_notes_node({0.0: [60, 64]})
        up = create_scripted_notes_node(
            lambda t, inputs: [p + 12 for p in inputs["in-notes-main"]],
            inputs=1,
        )
        synth = create_mock_instrument_node()
        graph = create_test_graph([root, up, synth], [note_edge(root, up), note_edge(up, synth)])

        GraphTracer().trace(0.0, graph)

        assert synth.data.generator.accepted_events == [[NoteEvent.on(72), NoteEvent.on(76)]]

    def test_binary_merge_waits_for_both_inputs(self):
        a = create_scripted_notes_node({0.0: [60]})
        b = create_scripted_notes_node({0.0: [67, 60]})
        merge = create_note_merge_node(0, 0)
        synth = create_mock_instrument_node()
        graph = create_test_graph(
            [a, b, merge, synth],
            [
                note_edge(a, merge, NOTE_INPUT_A),
                note_edge(b, merge, NOTE_INPUT_B),
                note_edge(merge, synth),
            ],
        )

        GraphTracer().trace(0.0, graph)

        assert synth.data.generator.accepted_events == [[NoteEvent.on(60), NoteEvent.on(67)]]

    def test_half_wired_merge_is_dropped(self):
        a = create_scripted_notes_node({0.0: [60]})
        merge = create_note_merge_node(0, 0)
        synth = create_mock_instrument_node()
        graph = create_test_graph(
            [a, merge, synth],
            [note_edge(a, merge, NOTE_INPUT_A), note_edge(merge, synth)],
        )

        GraphTracer().trace(0.0, graph)

        assert synth.data.generator.accepted_events == []

    def test_arity_zero_target_is_abandoned(self):
        a = create_scripted_notes_node({0.0: [60]})
        b = create_scripted_notes_node({0.0: [72]})
        synth = create_mock_instrument_node()
        graph = create_test_graph([a, b, synth], [note_edge(a, b), note_edge(b, synth)])

        GraphTracer().trace(0.0, graph)

        assert b.data.generator.generate_calls == []
        assert synth.data.generator.accepted_events == []

    def test_arity_above_limit_is_abandoned(self):
        a = create_scripted_notes_node({0.0: [60]})
        wide = create_scripted_notes_node(lambda t, inputs: [60], inputs=3)
        graph = create_test_graph([a, wide], [note_edge(a, wide, note_in_handle_id("x"))])

        GraphTracer(max_note_inputs=2).trace(0.0, graph)

        assert wide.data.generator.generate_calls == []

    def test_fan_out_to_two_instruments(self):
        notes = create_scripted_notes_node({0.0: [60]})
        left = create_mock_instrument_node()
        right = create_mock_instrument_node()
        graph = create_test_graph(
            [notes, left, right],
            [note_edge(notes, left), note_edge(notes, right)],
        )

        GraphTracer().trace(0.0, graph)

        assert left.data.generator.accepted_events == [[NoteEvent.on(60)]]
        assert right.data.generator.accepted_events == [[NoteEvent.on(60)]]
        assert len(graph.note_state) == 2
