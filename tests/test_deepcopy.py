from dataclasses import dataclass, field

import pytest

from servkit.deepcopy import deep_clone, deep_copy


@dataclass
class Record:
    name: str
    tags: list = field(default_factory=list)
    cache: dict = field(default_factory=dict, metadata={"deepcopy": "-"})
    meta: dict = field(default_factory=dict)


def test_clone_nested_is_independent():
    original = {"a": [1, 2, {"b": [3]}], "c": {"d": bytearray(b"xy")}}
    clone = deep_clone(original)
    assert clone == original
    clone["a"][2]["b"].append(4)
    clone["c"]["d"][0] = ord("z")
    assert original["a"][2]["b"] == [3]
    assert original["c"]["d"] == bytearray(b"xy")


def test_clone_dataclass_skips_marked_field():
    rec = Record("n", ["t"], {"k": 1}, {"m": [1]})
    clone = deep_clone(rec)
    assert clone.name == "n"
    assert clone.tags == ["t"] and clone.tags is not rec.tags
    assert clone.cache == {}
    assert clone.meta == {"m": [1]} and clone.meta["m"] is not rec.meta["m"]


def test_deep_copy_into_dataclass_keeps_skipped_field():
    src = Record("src", ["a"], {"src": 1})
    dst = Record("dst", [], {"dst": 2})
    deep_copy(dst, src)
    assert dst.name == "src"
    assert dst.tags == ["a"] and dst.tags is not src.tags
    assert dst.cache == {"dst": 2}


def test_deep_copy_list_and_dict():
    src_list = [[1], [2]]
    dst_list = [0]
    deep_copy(dst_list, src_list)
    assert dst_list == src_list
    assert dst_list[0] is not src_list[0]

    src_dict = {"x": [1]}
    dst_dict = {"y": 2}
    deep_copy(dst_dict, src_dict)
    assert dst_dict == {"x": [1]}


def test_deep_copy_onto_itself():
    data = {"x": [1]}
    deep_copy(data, data)
    assert data == {"x": [1]}


def test_type_mismatch_raises():
    with pytest.raises(TypeError):
        deep_copy([], {})


def test_immutable_raises():
    with pytest.raises(TypeError):
        deep_copy(1, 2)


def test_none_raises():
    with pytest.raises(ValueError):
        deep_copy(None, None)


def test_cycles_are_preserved():
    node = {"name": "a"}
    node["self"] = node
    clone = deep_clone(node)
    assert clone["self"] is clone
    assert clone is not node