import sys
import json
import logging
import argparse
import xml.etree.ElementTree as ET
from automaton import Automaton
from parsing import (
    ValidationError,
    automaton_to_definition,
    detect_format_from_ext,
    parse_definition,
    read_definition,
    write_definition,
)
from conversion import nfa_to_dfa
from presets import get_preset, preset_names
from simulation import simulate


logger = logging.getLogger(__name__)


def build_arg_parser():
    p = argparse.ArgumentParser(description="Simulate finite automata (DFA/NFA) and convert an NFA to an equivalent DFA.")
    p.add_argument("input", nargs="?", help="Definition file (.json or .xml)")
    p.add_argument("--preset", help="Use a built-in preset (title or short name) instead of a file")
    p.add_argument("--list-presets", action="store_true", help="List the built-in presets and exit")
    p.add_argument("--in-format", choices=["json", "xml"], help="Force input format (by extension otherwise)")
    p.add_argument("--strict", action="store_true", help="Reject transitions whose endpoints are not declared states")
    p.add_argument("-s", "--simulate", action="append", default=[], metavar="STRING", help="Input string to simulate (repeatable)")
    p.add_argument("--convert", action="store_true", help="Convert the NFA to a DFA (subset construction)")
    p.add_argument("-o", "--output", help="Write the resulting definition (.json or .xml)")
    p.add_argument("--out-format", choices=["json", "xml"], help="Force output format (by extension otherwise)")
    p.add_argument("--plot", metavar="PATH", help="Save a diagram of the resulting automaton")
    p.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging level")
    return p


def load_automaton(args) -> Automaton:
    if args.preset:
        raw = get_preset(args.preset)
    else:
        raw = read_definition(args.input, args.in_format)
    return parse_definition(raw, strict=args.strict)


def print_summary(a: Automaton) -> None:
    stats = a.get_stats()
    print(f"{a.kind} '{a.name}'")
    print(f"States: {stats['states']}, Alphabet: {list(a.alphabet)}")
    print(f"Start: {a.start_state} | Accepting: {list(a.accept_states)}")
    print(f"Transitions: {stats['total_transitions']} (epsilon: {stats['epsilon_transitions']})")


def print_simulation(a: Automaton, input_str: str) -> bool:
    result = simulate(a, input_str)
    verdict = "ACCEPTED" if result.accepted else "REJECTED"
    print(f"\nInput '{input_str}': {verdict}")
    for i, line in enumerate(result.lines(), 1):
        print(f"  {i}. {line}")
    return result.accepted


def main(argv=None):
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.list_presets:
        for name in preset_names():
            print(name)
        return 0
    if not args.input and not args.preset:
        parser.error("an input file or --preset is required")

    try:
        a = load_automaton(args)
    except KeyError as e:
        logger.error("%s", e.args[0])
        return 1
    except ValidationError as e:
        logger.error("Invalid automaton definition: %s", e)
        return 1
    except (OSError, json.JSONDecodeError, ET.ParseError) as e:
        logger.error("Could not read %s: %s", args.input, e)
        return 1
    logger.info("Loaded %s '%s'", a.kind, a.name)
    print_summary(a)

    if args.convert:
        if a.is_dfa:
            logger.warning("'%s' is already a DFA, skipping conversion", a.name)
        else:
            a = nfa_to_dfa(a)
            print("\nConverted to DFA:")
            print_summary(a)
            for state in a.states:
                members = ", ".join(sorted(a.state_composition.get(state, ())))
                print(f"  {state} = {{{members}}}")

    for input_str in args.simulate:
        print_simulation(a, input_str)

    if args.output:
        out_fmt = args.out_format or detect_format_from_ext(args.output)
        try:
            write_definition(automaton_to_definition(a), args.output, out_fmt)
        except OSError as e:
            logger.error("Could not write %s: %s", args.output, e)
            return 1
        print(f"\nDefinition written to {args.output} ({out_fmt})")

    if args.plot:
        from visualization import save_diagram
        try:
            save_diagram(a, args.plot)
        except OSError as e:
            logger.error("Could not write %s: %s", args.plot, e)
            return 1
        print(f"Diagram saved to {args.plot}")

    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nProgram interrupted by user")
        sys.exit(130)
