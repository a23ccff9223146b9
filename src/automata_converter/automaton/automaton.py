import logging
from enum import Enum

import graphviz
import more_itertools
from graphviz.quoting import escape

from automata_converter import utils
from automata_converter.exceptions import AlphabetError
from .state import State
from .transition import Transition

logger = logging.getLogger(__name__)


class AutomatonType(Enum):
    DFA = "DFA"
    NFA = "NFA"
    TWO_WAY_DFA = "TwoWayDFA"


class Automaton:
    """
    A finite automaton built incrementally: states first, then transitions.

    States are looked up by name, case-insensitively. Mutations that would break
    the structure of the automaton (a second initial state, a duplicate name, an
    unknown symbol or state, a repeated transition) are rejected by returning
    False and leave the automaton unchanged.
    """

    def __init__(self, automaton_type, alphabet):
        if alphabet is None:
            raise AlphabetError("Alphabet input cannot be None.")
        alphabet = tuple(more_itertools.unique_everseen(alphabet))
        if not alphabet:
            raise AlphabetError("Alphabet input cannot be empty.")

        self._automaton_type = AutomatonType(automaton_type)
        self._alphabet = alphabet
        self._state_counter = 0
        self._states = []
        # normalized name -> index in self._states
        self._state_index = {}
        self._transitions = []

    @property
    def automaton_type(self):
        return self._automaton_type

    @property
    def alphabet(self):
        return self._alphabet

    @property
    def states(self):
        return tuple(self._states)

    @property
    def transitions(self):
        return tuple(self._transitions)

    @property
    def initial_state(self):
        return next((s for s in self._states if s.is_initial_state), None)

    @property
    def final_states(self):
        return tuple(s for s in self._states if s.is_final_state)

    @property
    def is_valid(self):
        if self._automaton_type == AutomatonType.DFA:
            return self._validate_dfa()
        return self._validate_nfa()

    def __contains__(self, item):
        if isinstance(item, State):
            return utils.normalize_name(item.name) in self._state_index
        elif isinstance(item, Transition):
            return item in self._transitions
        else:
            return False

    def _validate_nfa(self):
        return self.initial_state is not None and len(self.final_states) > 0

    def _validate_dfa(self):
        if not self._validate_nfa():
            return False

        for state in self._states:
            for symbol in self._alphabet:
                transitions = self.get_transitions(from_state=state, symbol=symbol)
                if len(transitions) != 1 or not transitions[0].is_deterministic():
                    return False
        return True

    def get_state_by_name(self, name):
        index = self._state_index.get(utils.normalize_name(name))
        if index is None:
            return None
        return self._states[index]

    def get_transitions(self, from_state=None, symbol=None):
        transitions = self._transitions

        if from_state is not None:
            transitions = [t for t in transitions if t.from_state == from_state]
        if symbol is not None:
            transitions = [t for t in transitions if t.symbol == symbol]

        return list(transitions)

    def add_state(self, name=None, is_initial_state=False, is_final_state=False):
        """
        Add a state to the automaton.

        :param name: name of the new state, or a pre-built State. A name of the
            form Q0, Q1, ... is generated when omitted
        :param is_initial_state: mark the new state as the initial state
        :param is_final_state: mark the new state as final
        :return: True if the state was added, False otherwise
        """
        if isinstance(name, State):
            state = name
        else:
            if name is None:
                name = f"{utils.STATE_NAME_PREFIX}{self._state_counter}"
                self._state_counter += 1
            state = State(name, is_initial_state, is_final_state)

        if state.is_initial_state and self.initial_state is not None:
            logger.debug(
                "Rejected state %s: initial state %s already exists",
                state,
                self.initial_state,
            )
            return False
        if state in self:
            logger.debug("Rejected state %s: name already exists", state)
            return False

        self._state_index[state.key] = len(self._states)
        self._states.append(state)
        return True

    def update_state(self, state):
        """
        Replace the stored state that has the same name as ``state``.

        Transitions keep referring to the previous instance, so states must be
        looked up by name after an update.
        """
        index = self._state_index.get(state.key)
        if index is None:
            logger.debug("Rejected update of %s: no such state", state)
            return False

        current_initial = self.initial_state
        if (
            state.is_initial_state
            and current_initial is not None
            and current_initial != state
        ):
            logger.debug(
                "Rejected update of %s: initial state %s already exists",
                state,
                current_initial,
            )
            return False

        self._states[index] = state
        return True

    def add_transition(
        self, symbol, from_state_name=None, to_state_names=None, direction=None
    ):
        """
        Add a transition to the automaton.

        :param symbol: symbol of the alphabet, or a pre-built Transition
        :param from_state_name: name of the source state
        :param to_state_names: destination names, either a comma separated
            string ("B,C") or a list of names
        :param direction: Direction of the read head, two-way automata only
        :return: True if the transition was added, False otherwise
        """
        if isinstance(symbol, Transition):
            transition = symbol
            if not self._check_transition(transition):
                return False
            for state in (transition.from_state,) + transition.to_states:
                if state not in self:
                    logger.debug(
                        "Rejected transition %s: unknown state %s", transition, state
                    )
                    return False
        else:
            transition = self._build_transition(
                symbol, from_state_name, to_state_names, direction
            )
            if transition is None or not self._check_transition(transition):
                return False

        if transition in self._transitions:
            logger.debug("Rejected transition %s: already defined", transition)
            return False

        self._transitions.append(transition)
        return True

    def _build_transition(self, symbol, from_state_name, to_state_names, direction):
        if from_state_name is None or to_state_names is None:
            logger.debug("Rejected transition on %r: missing state names", symbol)
            return None

        from_state = self.get_state_by_name(from_state_name)
        if from_state is None:
            logger.debug(
                "Rejected transition on %r: unknown state %s", symbol, from_state_name
            )
            return None

        to_states = []
        for name in utils.split_names(to_state_names):
            to_state = self.get_state_by_name(name)
            if to_state is None:
                logger.debug("Rejected transition on %r: unknown state %s", symbol, name)
                return None
            to_states.append(to_state)

        try:
            return Transition(symbol, from_state, to_states, direction=direction)
        except ValueError:
            logger.debug(
                "Rejected transition on %r: invalid direction %r", symbol, direction
            )
            return None

    def _check_transition(self, transition):
        if transition.symbol not in self._alphabet:
            logger.debug(
                "Rejected transition %s: symbol %r is not in the alphabet",
                transition,
                transition.symbol,
            )
            return False
        if not transition.to_states:
            logger.debug("Rejected transition %s: no destination", transition)
            return False
        if (
            self._automaton_type == AutomatonType.DFA
            and not transition.is_deterministic()
        ):
            logger.debug(
                "Rejected transition %s: a DFA allows a single destination",
                transition,
            )
            return False
        return True

    def run(self, input_string):
        """
        Walk the automaton over ``input_string`` and tell whether it halts in a
        final state. Every step follows the first transition matching the
        current state and symbol, so alternative branches of an NFA are not
        explored.
        """
        if not self.is_valid:
            logger.debug("Automaton is not valid, rejecting %r", input_string)
            return False

        current_state = self.initial_state
        for symbol in input_string:
            transition = next(
                (
                    t
                    for t in self._transitions
                    if t.from_state == current_state and t.symbol == symbol
                ),
                None,
            )
            if transition is None:
                logger.debug("Transition %s - %s >>> none, halting", symbol, current_state)
                return False

            # resolve by name, the stored instance may have been updated
            next_state = self.get_state_by_name(transition.to_state.name)
            logger.debug("Transition %s - %s >>> %s", symbol, current_state, next_state)
            current_state = next_state

        logger.debug(
            "Current state is %s (final state: %s)",
            current_state,
            "yes" if current_state.is_final_state else "no",
        )
        return current_state.is_final_state

    def to_dot(self, view=False, filename=None):
        """
        Generate a DOT representation of the automaton
        Final states are marked as double circles

        :param view: open the rendered diagram
        :param filename: render the diagram to this file
        :return: the DOT source
        """
        dot = graphviz.Digraph()
        dot.attr(rankdir="LR")
        for s in self._states:
            dot.node(
                s.name,
                shape="doublecircle" if s.is_final_state else "circle",
                label=escape(s.name),
            )

        # Group transitions with the same endpoints and direction into a single
        # edge and show the symbols as a compact label
        edges = {}
        for t in self._transitions:
            for to_state in t.to_states:
                key = (t.from_state.name, to_state.name, t.direction)
                edges.setdefault(key, set()).add(t.symbol)

        for (from_name, to_name, direction), symbols in edges.items():
            label = utils.range_label(symbols, self._alphabet)
            if direction is not None:
                label += f" / {direction.value[0].upper()}"
            dot.edge(from_name, to_name, label=escape(label))

        # Workaround to mark the initial state
        initial_state = self.initial_state
        if initial_state is not None:
            dot.node("", shape="none", width="0")
            dot.edge("", initial_state.name)

        if view or filename:
            dot.render(filename=filename, view=view)

        return dot.source

    def __str__(self) -> str:
        return (
            f"{self._automaton_type.value}"
            f"(states={len(self._states)}, transitions={len(self._transitions)})"
        )

    def __repr__(self) -> str:
        return self.__str__()
