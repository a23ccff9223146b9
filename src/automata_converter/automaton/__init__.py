from .automaton import Automaton, AutomatonType
from .state import State
from .transition import Transition, Direction

__all__ = [
    'Automaton',
    'AutomatonType',
    'State',
    'Transition',
    'Direction'
]
