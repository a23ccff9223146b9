import logging
from collections import deque

from more_itertools import unique_everseen

from automata_converter import utils
from automata_converter.automaton import Automaton, AutomatonType, State
from automata_converter.exceptions import ConverterError

logger = logging.getLogger(__name__)


def convert_nfa_to_dfa(nfa):
    """
    Convert an NFA to an equivalent DFA using the subset construction.
    Every DFA state stands for a set of NFA states and is named after them,
    joined with "&" (e.g. "A&B&C").

    A DFA is returned as is, without a copy.

    :param nfa: the Automaton to convert, never modified
    :return: a new DFA Automaton
    """
    if nfa is None:
        raise ConverterError("Input automaton cannot be None.")

    if nfa.automaton_type == AutomatonType.DFA:
        return nfa

    dfa = Automaton(AutomatonType.DFA, nfa.alphabet)
    if nfa.initial_state is None:
        logger.warning("%s has no initial state, nothing to convert", nfa)
        return dfa

    _insert_initial_state(nfa, dfa)
    _close_subsets(nfa, dfa)

    logger.info(
        "Converted %s to DFA with %d states and %d transitions",
        nfa,
        len(dfa.states),
        len(dfa.transitions),
    )
    return dfa


def _insert_initial_state(nfa, dfa):
    initial_state = nfa.initial_state
    dfa.add_state(initial_state.copy())

    for symbol in dfa.alphabet:
        _add_subset_transition(nfa, dfa, initial_state, [initial_state], symbol)


def _close_subsets(nfa, dfa):
    queue = deque(s for s in dfa.states if not s.is_initial_state)

    while queue:
        from_state = queue.popleft()
        logger.debug("Expanding %s", from_state)

        sub_states = []
        for name in utils.split_state_name(from_state.name):
            sub_state = nfa.get_state_by_name(name)
            if sub_state is None:
                logger.warning("Unknown state %s in %s", name, from_state)
                continue
            sub_states.append(sub_state)

        for symbol in dfa.alphabet:
            new_state = _add_subset_transition(nfa, dfa, from_state, sub_states, symbol)
            if new_state is not None:
                queue.append(new_state)


def _add_subset_transition(nfa, dfa, from_state, sub_states, symbol):
    """
    Add the DFA transition from ``from_state`` on ``symbol`` to the union of
    the destinations of ``sub_states``. Every NFA transition on the symbol is
    followed, not only the first.

    :return: the target state if it was created, None otherwise
    """
    to_states = list(
        unique_everseen(
            to_state
            for sub_state in sub_states
            for t in nfa.get_transitions(from_state=sub_state, symbol=symbol)
            for to_state in t.to_states
        )
    )
    if not to_states:
        return None

    new_state = None
    target_name = utils.join_state_names(s.name for s in to_states)
    target_state = dfa.get_state_by_name(target_name)
    if target_state is None:
        target_state = State(
            target_name,
            is_final_state=any(s.is_final_state for s in to_states),
        )
        dfa.add_state(target_state)
        new_state = target_state

    dfa.add_transition(symbol, from_state.name, target_state.name)
    return new_state


def convert_2dfa_to_dfa(two_way_dfa):
    """
    Reduce a two-way DFA to a one-way DFA.

    All transitions leaving a state are collapsed onto one representative
    target, picked by _select_representative_state. This is a heuristic and not
    a crossing sequence construction: the result is only known to be
    meaningful for small automata where each state has a single accepting
    exit or none.

    :param two_way_dfa: the TwoWayDFA Automaton to convert, never modified
    :return: a new DFA Automaton
    """
    if two_way_dfa is None:
        raise ConverterError("Input automaton cannot be None.")
    if two_way_dfa.automaton_type != AutomatonType.TWO_WAY_DFA:
        raise ConverterError(
            f"Input automaton must be a two-way DFA, got {two_way_dfa.automaton_type.value}."
        )

    dfa = Automaton(AutomatonType.DFA, two_way_dfa.alphabet)
    for state in two_way_dfa.states:
        dfa.add_state(state.copy())

    for source_state in two_way_dfa.states:
        transitions = two_way_dfa.get_transitions(from_state=source_state)
        if not transitions:
            continue

        representative = _select_representative_state(source_state, transitions, dfa)
        for t in transitions:
            dfa.add_transition(t.symbol, source_state.name, representative.name)

    logger.info(
        "Reduced %s to DFA with %d states and %d transitions",
        two_way_dfa,
        len(dfa.states),
        len(dfa.transitions),
    )
    return dfa


def _select_representative_state(source_state, transitions, dfa):
    """
    Pick the state that stands for all of ``transitions`` leaving
    ``source_state``. Rules, first match wins:

    1. the only final destination of the group
    2. an absorbing "Empty" state, when the source is final and loops on itself
       under every transition
    3. the source itself, when it loops back moving left. It is replaced in
       ``dfa`` by a non-final copy keeping its initial flag
    4. the only destination that is not the source
    5. the source of the first transition
    """
    final_states = [s for t in transitions for s in t.to_states if s.is_final_state]
    if len(final_states) == 1:
        logger.debug("%s: single final destination %s", source_state, final_states[0])
        return final_states[0]

    if all(
        t.from_state == source_state and t.is_self_loop() and t.from_state.is_final_state
        for t in transitions
    ):
        logger.debug("%s: accepting self loop, using %s", source_state, utils.EMPTY_STATE_NAME)
        return _get_empty_state(dfa)

    left_loop = next((t for t in transitions if t.is_left_self_loop()), None)
    if left_loop is not None:
        updated_state = State(
            left_loop.from_state.name,
            is_initial_state=left_loop.from_state.is_initial_state,
        )
        dfa.update_state(updated_state)
        logger.debug("%s: left self loop", source_state)
        return updated_state

    other_states = [s for t in transitions for s in t.to_states if s != source_state]
    if len(other_states) == 1:
        logger.debug("%s: single exit %s", source_state, other_states[0])
        return other_states[0]

    logger.debug("%s: no exit selected, staying", source_state)
    return transitions[0].from_state


def _get_empty_state(dfa):
    empty_state = dfa.get_state_by_name(utils.EMPTY_STATE_NAME)
    if empty_state is None:
        empty_state = State(utils.EMPTY_STATE_NAME)
        dfa.add_state(empty_state)
        for symbol in dfa.alphabet:
            dfa.add_transition(symbol, empty_state.name, empty_state.name)
    return empty_state
