"""
Shared fixtures: the two reference automata used across the suite.
"""

import pytest

from parsing import RawDefinition, RawTransition, parse_definition


def rows(*triples):
    return [RawTransition(*t) for t in triples]


@pytest.fixture
def even_zeros_raw():
    return RawDefinition(
        kind="DFA",
        states="q0, q1",
        alphabet="0,1",
        start_state="q0",
        accept_states="q0",
        transitions=rows(
            ("q0", "0", "q1"),
            ("q0", "1", "q0"),
            ("q1", "0", "q0"),
            ("q1", "1", "q1"),
        ),
        name="even_zeros",
    )


@pytest.fixture
def even_zeros(even_zeros_raw):
    return parse_definition(even_zeros_raw)


@pytest.fixture
def contains_11_raw():
    return RawDefinition(
        kind="NFA",
        states="q0,q1,q2",
        alphabet="0,1",
        start_state="q0",
        accept_states="q2",
        transitions=rows(
            ("q0", "0", "q0"),
            ("q0", "1", "q0"),
            ("q0", "1", "q1"),
            ("q1", "1", "q2"),
            ("q2", "0", "q2"),
            ("q2", "1", "q2"),
        ),
        name="contains_11",
    )


@pytest.fixture
def contains_11(contains_11_raw):
    return parse_definition(contains_11_raw)


@pytest.fixture
def epsilon_nfa():
    """Strings over {a,b} ending in b, built with epsilon moves."""
    return parse_definition(
        RawDefinition(
            kind="NFA",
            states="q0,q1,q2,q3,q4",
            alphabet="a,b",
            start_state="q0",
            accept_states="q4",
            transitions=rows(
                ("q0", "ε", "q1"),
                ("q1", "a", "q2"),
                ("q1", "b", "q2"),
                ("q2", "ε", "q0"),
                ("q0", "ε", "q3"),
                ("q3", "a", "q3"),
                ("q3", "b", "q4"),
            ),
            name="eps",
        )
    )
