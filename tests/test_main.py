import json

import pytest

from main import build_arg_parser, main
from parsing import automaton_to_definition, parse_definition, read_definition, write_definition


def test_list_presets(capsys):
    assert main(["--list-presets"]) == 0
    out = capsys.readouterr().out
    assert "NFA: Accepts strings containing \"11\"" in out


def test_requires_input():
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 2


def test_simulate_preset(capsys):
    assert main(["--preset", "even_zeros", "-s", "00", "-s", "0"]) == 0
    out = capsys.readouterr().out
    assert "Input '00': ACCEPTED" in out
    assert "Input '0': REJECTED" in out
    assert "1. Start at state: q0" in out


def test_convert_and_write(tmp_path, capsys, contains_11):
    src = tmp_path / "nfa.json"
    write_definition(automaton_to_definition(contains_11), str(src))
    out_path = tmp_path / "dfa.xml"
    assert main([str(src), "--convert", "-s", "011", "-o", str(out_path)]) == 0
    out = capsys.readouterr().out
    assert "Converted to DFA:" in out
    assert "Input '011': ACCEPTED" in out
    dfa = parse_definition(read_definition(str(out_path)))
    assert dfa.is_dfa
    assert dfa.start_state == "{q0}"
    assert set(dfa.accept_states) == {"{q0,q1,q2}", "{q0,q2}"}
    assert main([str(out_path), "-s", "0110"]) == 0
    assert "Input '0110': ACCEPTED" in capsys.readouterr().out


def test_convert_dfa_is_skipped(capsys, caplog):
    assert main(["--preset", "even_zeros", "--convert"]) == 0
    assert "Converted to DFA" not in capsys.readouterr().out
    assert "already a DFA" in caplog.text


def test_invalid_definition_exits_1(tmp_path, caplog):
    src = tmp_path / "bad.json"
    src.write_text(json.dumps({"type": "DFA", "states": "q0", "alphabet": "a", "start_state": "q9"}))
    assert main([str(src)]) == 1
    assert "Start state 'q9'" in caplog.text


def test_missing_file_exits_1(tmp_path, caplog):
    assert main([str(tmp_path / "missing.json")]) == 1
    assert "Could not read" in caplog.text


def test_unknown_preset_exits_1(caplog):
    assert main(["--preset", "nope"]) == 1
    assert "Unknown preset" in caplog.text


def test_plot(tmp_path, capsys):
    path = tmp_path / "diagram.png"
    assert main(["--preset", "contains_11", "--convert", "--plot", str(path)]) == 0
    assert path.exists()


def test_parser_defaults():
    args = build_arg_parser().parse_args(["x.json"])
    assert args.simulate == []
    assert args.log_level == "WARNING"
    assert not args.strict
