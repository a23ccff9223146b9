"""Exceptions raised by automata_converter."""


class AutomatonError(Exception):
    """Base exception for all automata_converter errors."""

    pass


class AlphabetError(AutomatonError):
    """Raised when an automaton is constructed without a usable alphabet."""

    pass


class ConverterError(AutomatonError):
    """Raised when a converter receives an input it cannot convert."""

    pass
