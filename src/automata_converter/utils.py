import more_itertools

STATE_SEPARATOR = "&"
DESTINATION_SEPARATOR = ","
STATE_NAME_PREFIX = "Q"
EMPTY_STATE_NAME = "Empty"


def normalize_name(name):
    return name.casefold()


def split_names(names, separator=DESTINATION_SEPARATOR):
    if isinstance(names, str):
        names = names.split(separator)
    return [n.strip() for n in names]


def join_state_names(names, separator=STATE_SEPARATOR):
    """
    Build the name of a composite state from the names of its constituents.
    Duplicates are dropped and the remaining names are sorted, so the same set
    of states always produces the same composite name.

    :param names: iterable of state names
    :param separator: string placed between constituent names
    :return: the composite name
    """
    return separator.join(sorted(more_itertools.unique_everseen(names)))


def split_state_name(name, separator=STATE_SEPARATOR):
    return name.split(separator)


def range_label(symbols, alphabet):
    if not symbols:
        return ""

    # Create compact label
    if len(symbols) == len(alphabet) and len(alphabet) > 1:
        return "*"

    ordered = [s for s in alphabet if s in symbols]
    if len(ordered) == 1:
        return ordered[0]

    # collapse runs of consecutive single characters, e.g. 0-3
    parts = []
    for group in more_itertools.split_when(ordered, lambda a, b: not _consecutive(a, b)):
        if len(group) > 2:
            parts.append(f"{group[0]}-{group[-1]}")
        else:
            parts.extend(group)

    return ",".join(parts)


def _consecutive(a, b):
    return len(a) == 1 and len(b) == 1 and ord(b) - ord(a) == 1
