from automata_converter.utils import normalize_name


class State:

    def __init__(self, name, is_initial_state=False, is_final_state=False):
        self.name = name
        self.is_initial_state = is_initial_state
        self.is_final_state = is_final_state

    @property
    def key(self):
        return normalize_name(self.name)

    def copy(self):
        return State(self.name, self.is_initial_state, self.is_final_state)

    def __eq__(self, value: object) -> bool:
        if not isinstance(value, State):
            return False
        return self.key == value.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return f"{self.name}"

    def __repr__(self) -> str:
        flags = ""
        if self.is_initial_state:
            flags += ">"
        if self.is_final_state:
            flags += "*"
        return f"{flags}{self.name}"
