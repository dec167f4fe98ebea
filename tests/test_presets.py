import pytest

from parsing import parse_definition
from presets import PRESETS, get_preset, preset_names
from simulation import simulate


def test_all_presets_parse():
    for title, raw in PRESETS:
        assert parse_definition(raw, strict=True).kind == raw.kind, title


def test_preset_names():
    names = preset_names()
    assert len(names) == 4
    assert names[0] == "DFA: Accepts strings with an even number of 0s"


def test_lookup_by_title_or_short_name():
    assert get_preset("ends_in_01").kind == "DFA"
    assert get_preset('nfa: accepts strings containing "11"').name == "contains_11"


def test_lookup_returns_a_copy():
    raw = get_preset("even_zeros")
    raw.transitions.clear()
    assert len(get_preset("even_zeros").transitions) == 4


def test_unknown_preset():
    with pytest.raises(KeyError):
        get_preset("nope")


@pytest.mark.parametrize(
    "name, accepted, rejected",
    [
        ("ends_in_01", ["01", "1101"], ["", "10", "011"]),
        ("third_to_last_is_1", ["100", "0111"], ["", "011", "1000"]),
    ],
)
def test_preset_languages(name, accepted, rejected):
    a = parse_definition(get_preset(name))
    for s in accepted:
        assert simulate(a, s).accepted, s
    for s in rejected:
        assert not simulate(a, s).accepted, s
