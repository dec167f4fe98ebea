from typing import List, Tuple

from parsing import RawDefinition, RawTransition


def _rows(*triples) -> List[RawTransition]:
    return [RawTransition(*t) for t in triples]


PRESETS: List[Tuple[str, RawDefinition]] = [
    (
        "DFA: Accepts strings with an even number of 0s",
        RawDefinition(
            kind="DFA",
            states="q0,q1",
            alphabet="0,1",
            start_state="q0",
            accept_states="q0",
            transitions=_rows(
                ("q0", "0", "q1"),
                ("q0", "1", "q0"),
                ("q1", "0", "q0"),
                ("q1", "1", "q1"),
            ),
            name="even_zeros",
        ),
    ),
    (
        'DFA: Accepts strings ending in "01"',
        RawDefinition(
            kind="DFA",
            states="q0,q1,q2",
            alphabet="0,1",
            start_state="q0",
            accept_states="q2",
            transitions=_rows(
                ("q0", "0", "q1"),
                ("q0", "1", "q0"),
                ("q1", "0", "q1"),
                ("q1", "1", "q2"),
                ("q2", "0", "q1"),
                ("q2", "1", "q0"),
            ),
            name="ends_in_01",
        ),
    ),
    (
        'NFA: Accepts strings containing "11"',
        RawDefinition(
            kind="NFA",
            states="q0,q1,q2",
            alphabet="0,1",
            start_state="q0",
            accept_states="q2",
            transitions=_rows(
                ("q0", "0", "q0"),
                ("q0", "1", "q0"),
                ("q0", "1", "q1"),
                ("q1", "1", "q2"),
                ("q2", "0", "q2"),
                ("q2", "1", "q2"),
            ),
            name="contains_11",
        ),
    ),
    (
        "NFA: Accepts strings with a 1 in the third-to-last position",
        RawDefinition(
            kind="NFA",
            states="q0,q1,q2,q3",
            alphabet="0,1",
            start_state="q0",
            accept_states="q3",
            transitions=_rows(
                ("q0", "0", "q0"),
                ("q0", "1", "q0"),
                ("q0", "1", "q1"),
                ("q1", "0", "q2"),
                ("q1", "1", "q2"),
                ("q2", "0", "q3"),
                ("q2", "1", "q3"),
            ),
            name="third_to_last_is_1",
        ),
    ),
]


def preset_names() -> List[str]:
    return [name for name, _ in PRESETS]


def get_preset(name: str) -> RawDefinition:
    """Look up a preset by its title or short name, ignoring case.

    A fresh copy is returned so callers may edit it.
    """
    wanted = name.strip().lower()
    for title, definition in PRESETS:
        if wanted in (title.lower(), definition.name.lower()):
            return RawDefinition.from_dict(definition.to_dict())
    raise KeyError(f"Unknown preset: {name}")
