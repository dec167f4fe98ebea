import logging
from collections import deque
from typing import Dict, Iterable, List, Set

from automaton import DFA, EPSILON, Automaton


logger = logging.getLogger(__name__)


def epsilon_closure(state_set: Iterable[str], automaton: Automaton) -> Set[str]:
    closure = set(state_set)
    queue = deque(closure)

    while queue:
        s = queue.popleft()
        for nxt in automaton.destinations(s, EPSILON):
            if nxt not in closure:
                closure.add(nxt)
                queue.append(nxt)

    return closure


def move(state_set: Iterable[str], symbol: str, automaton: Automaton) -> Set[str]:
    result = set()

    for s in state_set:
        result.update(automaton.destinations(s, symbol))

    return result


def subset_state_name(state_set: Iterable[str]) -> str:
    return "{" + ",".join(sorted(set(state_set))) + "}"


def nfa_to_dfa(nfa: Automaton, name_suffix="__DFA") -> DFA:
    """Subset construction. Only reachable subsets become DFA states; an empty
    successor set produces no transition."""
    if nfa.is_dfa:
        raise ValueError("nfa_to_dfa requires an NFA")

    start_closure = epsilon_closure({nfa.start_state}, nfa)
    start_name = subset_state_name(start_closure)

    state_composition: Dict[str, Set[str]] = {start_name: start_closure}
    worklist = deque([start_name])
    processed: Set[str] = set()
    dfa_accepts: List[str] = []
    dfa_trans = []

    while worklist:
        T_name = worklist.popleft()
        if T_name in processed:
            continue
        processed.add(T_name)
        T = state_composition[T_name]

        if any(nfa.is_accepting(s) for s in T):
            dfa_accepts.append(T_name)

        for a in nfa.alphabet:
            U = epsilon_closure(move(T, a, nfa), nfa)
            if not U:
                continue

            U_name = subset_state_name(U)
            if U_name not in state_composition:
                state_composition[U_name] = U
                worklist.append(U_name)

            dfa_trans.append((T_name, a, U_name))

    logger.debug(
        "Converted '%s': %d NFA states -> %d DFA states, %d transitions",
        nfa.name, len(nfa.states), len(state_composition), len(dfa_trans),
    )
    return DFA(
        states=list(state_composition),
        alphabet=nfa.alphabet,
        start_state=start_name,
        accept_states=dfa_accepts,
        transitions=dfa_trans,
        name=f"{nfa.name}{name_suffix}",
        state_composition=state_composition,
    )
