from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional, Tuple

from automaton import EPSILON, Automaton
from conversion import epsilon_closure, move


class TraceKind(Enum):
    START = "start"
    READ = "read"
    REJECT_SYMBOL = "reject_symbol"
    REJECT_NO_TRANSITION = "reject_no_transition"
    ACCEPT = "accept"
    REJECT_FINAL = "reject_final"


@dataclass(frozen=True)
class TraceEvent:
    kind: TraceKind
    states: Tuple[str, ...] = ()
    symbol: Optional[str] = None


def describe(event: TraceEvent, is_dfa: bool) -> str:
    """English narration of a single trace event."""
    kind = event.kind
    if is_dfa:
        state = event.states[0] if event.states else ""
        if kind is TraceKind.START:
            return f"Start at state: {state}"
        if kind is TraceKind.READ:
            return f"Read '{event.symbol}', move to state: {state}"
        if kind is TraceKind.REJECT_NO_TRANSITION:
            return f"No transition from state '{state}' with input '{event.symbol}'. Rejecting."
        if kind is TraceKind.ACCEPT:
            return f"End of input. State '{state}' is an accept state. Accepting."
        if kind is TraceKind.REJECT_FINAL:
            return f"End of input. State '{state}' is not an accept state. Rejecting."
    else:
        states = ", ".join(event.states)
        if kind is TraceKind.START:
            return f"Start at states: {{{states}}}"
        if kind is TraceKind.READ:
            return f"Read '{event.symbol}', active states: {{{states}}}"
        if kind is TraceKind.REJECT_NO_TRANSITION:
            return "No further transitions. Rejecting."
        if kind is TraceKind.ACCEPT:
            return "End of input. At least one active state is an accept state. Accepting."
        if kind is TraceKind.REJECT_FINAL:
            return "End of input. No active state is an accept state. Rejecting."
    # REJECT_SYMBOL reads the same for both variants
    return f"Input symbol '{event.symbol}' not in alphabet. Rejecting."


@dataclass(frozen=True)
class SimulationResult:
    accepted: bool
    trace: Tuple[TraceEvent, ...]
    is_dfa: bool = True

    def lines(self) -> List[str]:
        return [describe(event, self.is_dfa) for event in self.trace]

    def active_states(self, step: int) -> FrozenSet[str]:
        """States highlighted at ``step``; rejection steps keep the states of the previous step."""
        for event in reversed(self.trace[: step + 1]):
            if event.kind in (TraceKind.START, TraceKind.READ):
                return frozenset(event.states)
        return frozenset()


def simulate(automaton: Automaton, input_symbols: Iterable[str]) -> SimulationResult:
    if automaton.is_dfa:
        return simulate_dfa(automaton, input_symbols)
    return simulate_nfa(automaton, input_symbols)


def simulate_dfa(dfa: Automaton, input_symbols: Iterable[str]) -> SimulationResult:
    current_state = dfa.start_state
    trace = [TraceEvent(TraceKind.START, (current_state,))]

    for symbol in input_symbols:
        if symbol not in dfa.alphabet:
            trace.append(TraceEvent(TraceKind.REJECT_SYMBOL, (current_state,), symbol))
            return SimulationResult(False, tuple(trace), True)
        dests = dfa.destinations(current_state, symbol)
        if not dests:
            trace.append(TraceEvent(TraceKind.REJECT_NO_TRANSITION, (current_state,), symbol))
            return SimulationResult(False, tuple(trace), True)
        current_state = dests[0]
        trace.append(TraceEvent(TraceKind.READ, (current_state,), symbol))

    accepted = dfa.is_accepting(current_state)
    final = TraceKind.ACCEPT if accepted else TraceKind.REJECT_FINAL
    trace.append(TraceEvent(final, (current_state,)))
    return SimulationResult(accepted, tuple(trace), True)


def simulate_nfa(nfa: Automaton, input_symbols: Iterable[str]) -> SimulationResult:
    current_states = epsilon_closure({nfa.start_state}, nfa)
    trace = [TraceEvent(TraceKind.START, _ordered(current_states, nfa))]

    for symbol in input_symbols:
        if symbol != EPSILON and symbol not in nfa.alphabet:
            trace.append(TraceEvent(TraceKind.REJECT_SYMBOL, _ordered(current_states, nfa), symbol))
            return SimulationResult(False, tuple(trace), False)

        current_states = epsilon_closure(move(current_states, symbol, nfa), nfa)
        trace.append(TraceEvent(TraceKind.READ, _ordered(current_states, nfa), symbol))

        if not current_states:
            trace.append(TraceEvent(TraceKind.REJECT_NO_TRANSITION, (), symbol))
            return SimulationResult(False, tuple(trace), False)

    accepted = any(nfa.is_accepting(s) for s in current_states)
    final = TraceKind.ACCEPT if accepted else TraceKind.REJECT_FINAL
    trace.append(TraceEvent(final, _ordered(current_states, nfa)))
    return SimulationResult(accepted, tuple(trace), False)


def _ordered(state_set, automaton: Automaton) -> Tuple[str, ...]:
    # declaration order first, then anything reached through an undeclared endpoint
    declared = [s for s in automaton.states if s in state_set]
    extra = sorted(s for s in state_set if s not in automaton.states)
    return tuple(declared + extra)
