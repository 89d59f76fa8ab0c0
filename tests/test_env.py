import yaml

from clabkit.utils.env import (
    convert_envs,
    merge_maps,
    merge_string_maps,
    string_in_slice,
)


def test_merge_maps():
    assert merge_maps(None, None) == {}
    d1 = {"t": "1"}
    d2 = {"t": "2", "t2": "1"}
    assert merge_maps(None, d1) == d1
    assert merge_maps(d1, d1) == d1
    assert merge_maps(d1, None) == d1
    assert merge_maps(d1, d2) == d2
    assert merge_maps(d2, d1) == {"t": "1", "t2": "1"}


def test_merge_maps_recursive():
    d0 = {"a": "1"}
    d1 = {"a": "11", "b": "2"}
    r0 = {"r": d0, "r1": "1"}
    r1 = {"r": d1, "r2": "2"}
    r3 = {"r": "00", "r2": "0"}
    exp0 = {"a": "1", "b": "2"}
    exp1 = d1

    assert merge_maps(d1, d0) == exp0
    assert merge_maps(d0, d1) == exp1

    assert merge_maps(r1, r0) == {"r": exp0, "r1": "1", "r2": "2"}
    assert merge_maps(r0, r1) == {"r": exp1, "r1": "1", "r2": "2"}

    assert merge_maps(r1, r3) == {"r": "00", "r2": "0"}
    assert merge_maps(r3, r1) == {"r": exp1, "r2": "2"}


def test_merge_maps_leaves_inputs_untouched():
    r0 = {"r": {"a": "1"}, "r1": "1"}
    r1 = {"r": {"a": "11", "b": "2"}, "r2": "2"}
    merge_maps(r1, r0)
    assert r1 == {"r": {"a": "11", "b": "2"}, "r2": "2"}
    assert r0 == {"r": {"a": "1"}, "r1": "1"}


def test_merge_string_maps():
    d0 = {"a": "1"}
    d1 = {"a": "11", "b": "2"}
    assert merge_string_maps(d1, d0) == {"a": "1", "b": "2"}
    assert merge_string_maps(d0, d1) == {"a": "11", "b": "2"}


def test_merge_string_maps_empty_is_none():
    assert merge_string_maps() is None
    assert merge_string_maps(None, {}) is None


def test_mapify_via_merge():
    a = {"key": "val"}
    assert merge_maps({"m": a}) == {"m": {"key": "val"}}


def test_merge_maps_stringifies_keys_of_nested_maps():
    assert merge_maps({"m": {1: "v"}}) == {"m": {"1": "v"}}


def test_merge_maps_from_yaml():
    a_in = """
globvar: globval
globmap:
  var1: val1
  var2: val2
"""
    b_in = """
globmap:
  var2: rewritten
  newvar: newval
interfaces:
  - name: ethernet-1/1
    description: set in node
  - name: ethernet-1/2
"""
    a = yaml.safe_load(a_in)
    b = yaml.safe_load(b_in)
    result = merge_maps(a, b)

    exp_g = {
        "globvar": "globval",
        "globmap": {"var1": "val1", "var2": "rewritten", "newvar": "newval"},
        "interfaces": [
            {"name": "ethernet-1/1", "description": "set in node"},
            {"name": "ethernet-1/2"},
        ],
    }
    assert result == exp_g

    exp_t_in = """
globvar: globval
globmap:
  var1: val1
  var2: rewritten
  newvar: newval
interfaces:
  - name: ethernet-1/1
    description: set in node
  - name: ethernet-1/2
"""
    exp_t = merge_maps(yaml.safe_load(exp_t_in))
    assert result == exp_t


def test_merge_maps_lists():
    d1 = {"t": ["1"]}
    d2 = {"t": ["2"]}
    assert merge_maps(None, d1) == d1
    assert merge_maps(d1, d1) == d1
    assert merge_maps(d1, None) == d1
    assert merge_maps(d1, d2) == d2


def test_convert_envs():
    assert sorted(convert_envs({"a": "1", "b": "2"})) == ["a=1", "b=2"]
    assert convert_envs(None) == []


def test_string_in_slice():
    assert string_in_slice(["x", "y"], "y") == (1, True)
    assert string_in_slice(["x", "y"], "z") == (-1, False)