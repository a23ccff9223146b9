from enum import StrEnum


class Direction(StrEnum):
    LEFT = "left"
    RIGHT = "right"


class Transition:
    def __init__(self, symbol, from_state, to_states, direction=None):
        self.symbol = symbol
        self.from_state = from_state
        # a single State is accepted for deterministic transitions
        if not isinstance(to_states, (list, tuple)):
            to_states = [to_states]
        self.to_states = tuple(to_states)
        self.direction = Direction(direction) if direction is not None else None

    @property
    def to_state(self):
        return self.to_states[0] if self.to_states else None

    def get_to_state_names(self):
        return [s.name for s in self.to_states]

    def is_deterministic(self):
        return len(self.to_states) == 1

    def is_self_loop(self):
        return any(s == self.from_state for s in self.to_states)

    def is_left_self_loop(self):
        return self.is_self_loop() and self.direction == Direction.LEFT

    def _key(self):
        return (
            self.symbol,
            self.from_state.key,
            frozenset(s.key for s in self.to_states),
            self.direction,
        )

    def __eq__(self, value: object) -> bool:
        if not isinstance(value, Transition):
            return False
        return self._key() == value._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        to_states = ",".join(self.get_to_state_names())
        arrow = f"-{self.symbol}->"
        if self.direction is not None:
            arrow = f"-{self.symbol}/{self.direction.value[0].upper()}->"
        return f"({self.from_state}){arrow}({to_states})"

    def __repr__(self) -> str:
        return self.__str__()
