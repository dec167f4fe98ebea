import json
import logging
import os
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from automaton import AUTOMATON_KINDS, EPSILON, EPSILON_SYMBOLS, Automaton


logger = logging.getLogger(__name__)

DEFAULT_KIND = "DFA"


class ValidationError(ValueError):
    """Raised when a raw definition cannot be turned into an automaton."""


class EmptyStates(ValidationError):
    def __init__(self):
        super().__init__("At least one state is required.")


class EmptyAlphabet(ValidationError):
    def __init__(self):
        super().__init__("At least one alphabet symbol is required.")


class EpsilonInAlphabet(ValidationError):
    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"The alphabet cannot contain epsilon ('{symbol}').")


class MissingStartState(ValidationError):
    def __init__(self):
        super().__init__("Start state is required.")


class StartStateNotDeclared(ValidationError):
    def __init__(self, state: str):
        self.state = state
        super().__init__(f"Start state '{state}' must be in the set of states.")


class AcceptStateNotDeclared(ValidationError):
    def __init__(self, state: str):
        self.state = state
        super().__init__(f"Accept state '{state}' must be in the set of states.")


class UnknownAutomatonType(ValidationError):
    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Unknown automaton type '{kind}', expected DFA or NFA.")


class IncompleteTransition(ValidationError):
    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Transition #{index + 1} is incomplete.")


class EpsilonInDfa(ValidationError):
    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Transition #{index + 1}: a DFA cannot have epsilon ({EPSILON}) transitions.")


class DuplicateDfaTransition(ValidationError):
    def __init__(self, state: str, symbol: str):
        self.state = state
        self.symbol = symbol
        super().__init__(
            f"DFA error: multiple transitions defined for state '{state}' with input '{symbol}'."
        )


class UndeclaredTransitionState(ValidationError):
    def __init__(self, index: int, state: str):
        self.index = index
        self.state = state
        super().__init__(f"Transition #{index + 1} uses undeclared state '{state}'.")


@dataclass
class RawTransition:
    from_state: str = ""
    symbol: str = ""
    to_state: str = ""


@dataclass
class RawDefinition:
    """Editable surface form of an automaton: comma separated fields plus transition rows."""

    kind: str = DEFAULT_KIND
    states: str = ""
    alphabet: str = ""
    start_state: str = ""
    accept_states: str = ""
    transitions: List[RawTransition] = field(default_factory=list)
    name: str = "automaton"

    @classmethod
    def from_dict(cls, data: Dict) -> "RawDefinition":
        def joined(value) -> str:
            if value is None:
                return ""
            if isinstance(value, (list, tuple, set)):
                return ",".join(str(v) for v in value)
            return str(value)

        transitions = [
            RawTransition(
                from_state=joined(t.get("from")),
                symbol=joined(t.get("input", t.get("symbol"))),
                to_state=joined(t.get("to")),
            )
            for t in data.get("transitions", [])
        ]
        return cls(
            kind=joined(data.get("type", DEFAULT_KIND)),
            states=joined(data.get("states")),
            alphabet=joined(data.get("alphabet")),
            start_state=joined(data.get("start_state")),
            accept_states=joined(data.get("accept_states")),
            transitions=transitions,
            name=data.get("name") or "automaton",
        )

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "type": self.kind,
            "states": self.states,
            "alphabet": self.alphabet,
            "start_state": self.start_state,
            "accept_states": self.accept_states,
            "transitions": [
                {"from": t.from_state, "input": t.symbol, "to": t.to_state}
                for t in self.transitions
            ],
        }


def split_field(value: str) -> List[str]:
    """Split on commas, except commas inside braces so subset names like
    ``{q0,q1}`` stay whole."""
    tokens = []
    current = []
    depth = 0
    for ch in value or "":
        if ch == "{":
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
        elif ch == "," and depth == 0:
            tokens.append("".join(current))
            current = []
            continue
        current.append(ch)
    tokens.append("".join(current))
    return [token.strip() for token in tokens if token.strip()]


def _normalize_symbol(symbol: str) -> str:
    symbol = (symbol or "").strip()
    return EPSILON if symbol in EPSILON_SYMBOLS else symbol


def parse_definition(raw: RawDefinition, strict: bool = False) -> Automaton:
    """Validate ``raw`` and build the matching DFA or NFA.

    Transition endpoints are not checked against the declared states unless
    ``strict`` is set.
    """
    kind = (raw.kind or "").strip().upper()
    if kind not in AUTOMATON_KINDS:
        raise UnknownAutomatonType(raw.kind)

    states = split_field(raw.states)
    alphabet = split_field(raw.alphabet)
    start_state = (raw.start_state or "").strip()
    accept_states = split_field(raw.accept_states)

    if not states:
        raise EmptyStates()
    if not alphabet:
        raise EmptyAlphabet()
    for symbol in alphabet:
        if symbol in EPSILON_SYMBOLS:
            raise EpsilonInAlphabet(symbol)
    if not start_state:
        raise MissingStartState()
    if start_state not in states:
        raise StartStateNotDeclared(start_state)
    for s in accept_states:
        if s not in states:
            raise AcceptStateNotDeclared(s)

    declared = set(states)
    transitions = []
    for i, t in enumerate(raw.transitions):
        frm = (t.from_state or "").strip()
        to = (t.to_state or "").strip()
        if not frm or not to:
            raise IncompleteTransition(i)
        sym = _normalize_symbol(t.symbol)
        if kind == "DFA" and sym == EPSILON:
            raise EpsilonInDfa(i)
        if strict:
            for endpoint in (frm, to):
                if endpoint not in declared:
                    raise UndeclaredTransitionState(i, endpoint)
        transitions.append((frm, sym, to))

    if kind == "DFA":
        seen = set()
        for frm, sym, _ in transitions:
            if (frm, sym) in seen:
                raise DuplicateDfaTransition(frm, sym)
            seen.add((frm, sym))

    logger.debug(
        "Parsed %s '%s': %d states, %d symbols, %d transitions",
        kind, raw.name, len(states), len(alphabet), len(transitions),
    )
    return AUTOMATON_KINDS[kind](
        states=_unique(states),
        alphabet=_unique(alphabet),
        start_state=start_state,
        accept_states=_unique(accept_states),
        transitions=transitions,
        name=raw.name or "automaton",
    )


def _unique(items: List[str]) -> List[str]:
    return list(dict.fromkeys(items))


def automaton_to_definition(a: Automaton) -> RawDefinition:
    return RawDefinition(
        kind=a.kind,
        states=",".join(a.states),
        alphabet=",".join(a.alphabet),
        start_state=a.start_state,
        accept_states=",".join(a.accept_states),
        transitions=[RawTransition(t.from_state, t.symbol, t.to_state) for t in a.transitions],
        name=a.name,
    )


def parse_json_definition(path: str) -> RawDefinition:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValidationError(f"{path}: expected a JSON object at the top level")
    if not data.get("name"):
        data["name"] = os.path.splitext(os.path.basename(path))[0]
    return RawDefinition.from_dict(data)


def parse_xml_definition(path: str) -> RawDefinition:
    tree = ET.parse(path)
    root = tree.getroot()
    def findall(elem, *names):
        for n in names:
            found = elem.findall(n)
            if found:
                return found
        return []
    def texts(nodes) -> str:
        return ",".join(n.text.strip() for n in nodes if n.text and n.text.strip())
    name = root.attrib.get("name") or os.path.splitext(os.path.basename(path))[0]
    kind = root.attrib.get("type", DEFAULT_KIND)
    states = texts(findall(root, "states/state", "States/State"))
    alphabet = texts(findall(root, "alphabet/symbol", "Alphabet/Symbol"))
    start_state = (root.findtext("start") or root.findtext("Start") or "").strip()
    accept_states = texts(findall(root, "accept/state", "Accept/State", "finals/state"))
    transitions = []
    for t in findall(root, "transitions/t", "Transitions/T", "transitions/transition"):
        frm = t.attrib.get("from") or t.findtext("from") or ""
        sym = t.attrib.get("symbol") or t.findtext("symbol") or ""
        to = t.attrib.get("to") or t.findtext("to") or ""
        transitions.append(RawTransition(frm.strip(), sym.strip(), to.strip()))
    return RawDefinition(kind, states, alphabet, start_state, accept_states, transitions, name)


def definition_to_json_dict(raw: RawDefinition) -> dict:
    return raw.to_dict()


def definition_to_xml_element(raw: RawDefinition) -> ET.Element:
    root = ET.Element("automaton", attrib={"name": raw.name, "type": raw.kind})
    states_el = ET.SubElement(root, "states")
    for s in split_field(raw.states):
        ET.SubElement(states_el, "state").text = s
    alpha_el = ET.SubElement(root, "alphabet")
    for sym in split_field(raw.alphabet):
        ET.SubElement(alpha_el, "symbol").text = sym
    ET.SubElement(root, "start").text = raw.start_state
    accept_el = ET.SubElement(root, "accept")
    for s in split_field(raw.accept_states):
        ET.SubElement(accept_el, "state").text = s
    trans_el = ET.SubElement(root, "transitions")
    for t in raw.transitions:
        ET.SubElement(trans_el, "t", attrib={"from": t.from_state, "symbol": t.symbol, "to": t.to_state})
    return root


def detect_format_from_ext(path: str) -> str:
    ext = os.path.splitext(path)[1].lower()
    if ext in (".json", ".jsn"):
        return "json"
    if ext in (".xml",):
        return "xml"
    return "json"


def read_definition(path: str, fmt: Optional[str] = None) -> RawDefinition:
    fmt = fmt or detect_format_from_ext(path)
    logger.debug("Reading %s definition from %s", fmt, path)
    if fmt == "json":
        return parse_json_definition(path)
    elif fmt == "xml":
        return parse_xml_definition(path)
    else:
        raise ValueError(f"Unsupported format: {fmt}")


def write_definition(raw: RawDefinition, path: str, fmt: Optional[str] = None) -> None:
    fmt = fmt or detect_format_from_ext(path)
    dirname = os.path.dirname(path)
    if dirname:
        os.makedirs(dirname, exist_ok=True)
    if fmt == "json":
        with open(path, "w", encoding="utf-8") as f:
            json.dump(definition_to_json_dict(raw), f, ensure_ascii=False, indent=2)
    elif fmt == "xml":
        tree = ET.ElementTree(definition_to_xml_element(raw))
        ET.indent(tree)
        tree.write(path, encoding="utf-8", xml_declaration=True)
    else:
        raise ValueError(f"Unsupported format: {fmt}")
    logger.debug("Wrote %s definition to %s", fmt, path)
