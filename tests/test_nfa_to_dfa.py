import logging

import pytest

from automata_converter import converter
from automata_converter.automaton import Automaton, AutomatonType
from automata_converter.exceptions import ConverterError


def build_nfa():
    nfa = Automaton(AutomatonType.NFA, ["0", "1"])
    nfa.add_state("A", is_initial_state=True)
    nfa.add_state("B")
    nfa.add_state("C", is_final_state=True)
    nfa.add_transition("0", "A", "A")
    nfa.add_transition("1", "A", "B,C")
    nfa.add_transition("0", "B", "A")
    nfa.add_transition("1", "B", "A,C")
    nfa.add_transition("0", "C", "A,B")
    nfa.add_transition("1", "C", "C")
    return nfa


def build_dfa():
    dfa = Automaton(AutomatonType.DFA, ["a", "b", "c"])
    dfa.add_state(is_initial_state=True)
    dfa.add_state()
    dfa.add_state(is_final_state=True)
    dfa.add_transition("a", "Q0", "Q1")
    dfa.add_transition("b", "Q0", "Q2")
    dfa.add_transition("c", "Q0", "Q0")
    dfa.add_transition("a", "Q1", "Q0")
    dfa.add_transition("b", "Q1", "Q1")
    dfa.add_transition("c", "Q1", "Q2")
    dfa.add_transition("a", "Q2", "Q0")
    dfa.add_transition("b", "Q2", "Q2")
    dfa.add_transition("c", "Q2", "Q2")
    return dfa


def nfa_accepts(nfa, input_string):
    # full exploration of every branch, used as a reference
    current = {nfa.initial_state}
    for symbol in input_string:
        current = {
            to_state
            for s in current
            for t in nfa.get_transitions(from_state=s, symbol=symbol)
            for to_state in t.to_states
        }
    return any(s.is_final_state for s in current)


def test_convert_none():
    with pytest.raises(ConverterError):
        converter.convert_nfa_to_dfa(None)


def test_convert_dfa_returns_same_instance():
    dfa = build_dfa()
    converted = converter.convert_nfa_to_dfa(dfa)

    assert converted is dfa
    assert converted.initial_state.name == "Q0"
    assert len(converted.final_states) == 1
    assert len(converted.states) == 3
    assert len(converted.transitions) == 9


def test_convert_nfa():
    nfa = build_nfa()
    dfa = converter.convert_nfa_to_dfa(nfa)

    assert dfa.automaton_type == AutomatonType.DFA
    assert dfa.alphabet == ("0", "1")
    assert [s.name for s in dfa.states] == ["A", "B&C", "A&B", "A&C", "A&B&C"]
    assert dfa.initial_state.name == "A"
    assert {s.name for s in dfa.final_states} == {"B&C", "A&C", "A&B&C"}
    assert len(dfa.transitions) == 10
    assert dfa.is_valid

    expected = {
        ("A", "0"): "A",
        ("A", "1"): "B&C",
        ("B&C", "0"): "A&B",
        ("B&C", "1"): "A&C",
        ("A&B", "0"): "A",
        ("A&B", "1"): "A&B&C",
        ("A&C", "0"): "A&B",
        ("A&C", "1"): "B&C",
        ("A&B&C", "0"): "A&B",
        ("A&B&C", "1"): "A&B&C",
    }
    actual = {(t.from_state.name, t.symbol): t.to_state.name for t in dfa.transitions}
    assert actual == expected


def test_convert_does_not_modify_input():
    nfa = build_nfa()
    states = nfa.states
    transitions = nfa.transitions

    converter.convert_nfa_to_dfa(nfa)

    assert nfa.automaton_type == AutomatonType.NFA
    assert nfa.states == states
    assert nfa.transitions == transitions
    assert [s.is_final_state for s in nfa.states] == [False, False, True]


def test_converted_dfa_is_total():
    dfa = converter.convert_nfa_to_dfa(build_nfa())

    for state in dfa.states:
        for symbol in dfa.alphabet:
            assert len(dfa.get_transitions(from_state=state, symbol=symbol)) == 1


@pytest.mark.parametrize(
    "input_string", ["", "0", "1", "10", "11", "100", "0110", "1010", "11100", "000"]
)
def test_converted_dfa_accepts_same_language(input_string):
    nfa = build_nfa()
    dfa = converter.convert_nfa_to_dfa(nfa)

    assert dfa.run(input_string) == nfa_accepts(nfa, input_string)


def test_convert_twice_is_identity():
    dfa = converter.convert_nfa_to_dfa(build_nfa())
    assert converter.convert_nfa_to_dfa(dfa) is dfa


def test_composite_names_are_sorted():
    nfa = Automaton(AutomatonType.NFA, ["a"])
    nfa.add_state("S", is_initial_state=True)
    nfa.add_state("Y", is_final_state=True)
    nfa.add_state("X")
    nfa.add_transition("a", "S", "Y,X")
    nfa.add_transition("a", "X", "Y")
    nfa.add_transition("a", "Y", "X")

    dfa = converter.convert_nfa_to_dfa(nfa)

    assert [s.name for s in dfa.states] == ["S", "X&Y"]
    assert dfa.get_transitions(from_state=dfa.get_state_by_name("X&Y"))[0].to_state.name == "X&Y"


def test_separate_transitions_on_same_symbol_are_merged():
    nfa = Automaton(AutomatonType.NFA, ["a"])
    nfa.add_state("S", is_initial_state=True)
    nfa.add_state("T")
    nfa.add_state("U", is_final_state=True)
    nfa.add_transition("a", "S", "T")
    nfa.add_transition("a", "T", "T")
    nfa.add_transition("a", "T", "U")
    nfa.add_transition("a", "U", "U")

    dfa = converter.convert_nfa_to_dfa(nfa)

    assert [s.name for s in dfa.states] == ["S", "T", "T&U"]
    assert dfa.get_state_by_name("T&U").is_final_state
    assert dfa.run("aa")
    assert not dfa.run("a")


def test_separate_transitions_from_initial_state_are_merged():
    nfa = Automaton(AutomatonType.NFA, ["a"])
    nfa.add_state("S", is_initial_state=True)
    nfa.add_state("T")
    nfa.add_state("U", is_final_state=True)
    nfa.add_transition("a", "S", "U")
    nfa.add_transition("a", "S", "T")
    nfa.add_transition("a", "T", "T")
    nfa.add_transition("a", "U", "U")

    dfa = converter.convert_nfa_to_dfa(nfa)

    transitions = dfa.get_transitions(from_state=dfa.initial_state, symbol="a")
    assert len(transitions) == 1
    assert transitions[0].to_state.name == "T&U"
    assert [s.name for s in dfa.states] == ["S", "T&U"]
    assert dfa.is_valid
    assert dfa.run("a")
    assert nfa_accepts(nfa, "a")
    assert not dfa.run("")


def test_partial_nfa_leaves_transitions_out():
    nfa = Automaton(AutomatonType.NFA, ["0", "1"])
    nfa.add_state("A", is_initial_state=True)
    nfa.add_state("B", is_final_state=True)
    nfa.add_transition("0", "A", "B")
    nfa.add_transition("1", "B", "A,B")

    dfa = converter.convert_nfa_to_dfa(nfa)

    assert [s.name for s in dfa.states] == ["A", "B", "A&B"]
    assert dfa.get_transitions(from_state=dfa.get_state_by_name("B"), symbol="0") == []
    assert not dfa.is_valid


def test_nfa_without_initial_state(caplog):
    nfa = Automaton(AutomatonType.NFA, ["0"])
    nfa.add_state("A", is_final_state=True)

    with caplog.at_level(logging.WARNING, logger="automata_converter.converter"):
        dfa = converter.convert_nfa_to_dfa(nfa)

    assert dfa.states == ()
    assert not dfa.is_valid
    assert "no initial state" in caplog.text
