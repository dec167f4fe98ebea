from collections import defaultdict
from typing import Dict, Iterable, NamedTuple, Set, Tuple


EPSILON = "ε"
EPSILON_SYMBOLS = {"", "ε", "eps", "epsilon"}


class Transition(NamedTuple):
    from_state: str
    symbol: str
    to_state: str


class Automaton:
    """Finite automaton shared by the DFA and NFA variants.

    All collections are stored as tuples in declaration order; an instance
    is never mutated after construction.
    """

    is_dfa = False
    kind = "NFA"

    def __init__(
        self,
        states: Iterable[str],
        alphabet: Iterable[str],
        start_state: str,
        accept_states: Iterable[str],
        transitions: Iterable[Tuple[str, str, str]],
        name: str = "automaton",
        state_composition: Dict[str, Iterable[str]] = None,
    ):
        self.states = tuple(states)
        self.alphabet = tuple(alphabet)
        self.start_state = start_state
        self.accept_states = tuple(accept_states)
        self.transitions = tuple(Transition(*t) for t in transitions)
        self.name = name
        self.state_composition = {
            s: frozenset(members) for s, members in (state_composition or {}).items()
        }

        index: Dict[Tuple[str, str], list] = defaultdict(list)
        for t in self.transitions:
            index[(t.from_state, t.symbol)].append(t.to_state)
        self._index = {key: tuple(dests) for key, dests in index.items()}

    def destinations(self, state: str, symbol: str) -> Tuple[str, ...]:
        return self._index.get((state, symbol), ())

    def transition_map(self) -> Dict[str, Dict[str, Set[str]]]:
        result: Dict[str, Dict[str, Set[str]]] = {}
        for t in self.transitions:
            result.setdefault(t.from_state, {}).setdefault(t.symbol, set()).add(t.to_state)
        return result

    def is_accepting(self, state: str) -> bool:
        return state in self.accept_states

    def get_readable_state_name(self, state: str) -> str:
        if state in self.state_composition:
            composition = sorted(self.state_composition[state])
            if state == "{" + ",".join(composition) + "}":
                return state

            if len(composition) > 1:
                return f"{state}<{','.join(composition)}>"
            elif len(composition) == 1:
                return f"{state}<{composition[0]}>"

        return state

    def get_stats(self) -> Dict:
        epsilon_transitions = sum(1 for t in self.transitions if t.symbol == EPSILON)

        return {
            "states": len(self.states),
            "alphabet_size": len(self.alphabet),
            "accept_states": len(self.accept_states),
            "total_transitions": len(self.transitions),
            "epsilon_transitions": epsilon_transitions,
            "is_dfa": self.is_dfa,
        }

    def __eq__(self, other):
        if not isinstance(other, Automaton):
            return NotImplemented
        return (
            self.kind == other.kind
            and self.start_state == other.start_state
            and set(self.states) == set(other.states)
            and set(self.alphabet) == set(other.alphabet)
            and set(self.accept_states) == set(other.accept_states)
            and set(self.transitions) == set(other.transitions)
        )

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self.name!r}, states={list(self.states)}, "
            f"start_state={self.start_state!r}, accept_states={list(self.accept_states)}, "
            f"transitions={len(self.transitions)})"
        )


class DFA(Automaton):
    is_dfa = True
    kind = "DFA"


class NFA(Automaton):
    pass


AUTOMATON_KINDS = {"DFA": DFA, "NFA": NFA}
