from __future__ import annotations

import itertools

import pytest

from deluge_rpc.errors import ResponseError
from deluge_rpc.tree import (
    CommandTree,
    build_command_tree,
    merge_trees,
    normalize_segment,
    parse_command_name,
)

DELUGE_METHODS = [
    "auth.check_session",
    "auth.login",
    "core.add_torrent_magnet",
    "core.get_session_status",
    "core.get_torrents_status",
    "daemon.get_method_list",
    "label.set_torrent",
    "web.connected",
    "web.get_hosts",
]


def test_duplicates_collapse_and_siblings_are_kept() -> None:
    tree = build_command_tree(["a.b.c", "a.b.d", "a.b.c"])

    assert tree.commands == frozenset()
    assert list(tree.namespaces) == ["a"]
    assert tree.namespace("a").commands == frozenset()
    assert tree.namespace("a").namespace("b").commands == {"c", "d"}
    assert tree.method_names() == ["a.b.c", "a.b.d"]


def test_single_segment_is_root_leaf() -> None:
    tree = build_command_tree(["x"])

    assert tree.commands == {"x"}
    assert dict(tree.namespaces) == {}


def test_build_is_order_independent() -> None:
    expected = build_command_tree(DELUGE_METHODS).to_dict()
    for permutation in itertools.islice(itertools.permutations(DELUGE_METHODS), 50):
        assert build_command_tree(permutation).to_dict() == expected
    assert build_command_tree(reversed(DELUGE_METHODS)).to_dict() == expected


def test_leaf_and_namespace_may_share_a_name() -> None:
    tree = build_command_tree(["a.b", "a.b.c"])

    assert tree.namespace("a").commands == {"b"}
    assert tree.namespace("a").namespace("b").commands == {"c"}


def test_numeric_segments_become_int_keys() -> None:
    tree = build_command_tree(["hosts.0.status", "hosts.12.status", "hosts.00.status", "hosts.-1.status"])
    hosts = tree.namespace("hosts")

    assert set(hosts.namespaces) == {0, 12, "00", "-1"}
    assert hosts.namespace(0).commands == {"status"}


@pytest.mark.parametrize(
    ("segment", "expected"),
    [("0", 0), ("7", 7), ("10", 10), ("007", "007"), ("00", "00"), ("-3", "-3"), ("core", "core"), (5, 5)],
)
def test_normalize_segment(segment: str | int, expected: str | int) -> None:
    assert normalize_segment(segment) == expected
    assert type(normalize_segment(segment)) is type(expected)


def test_merge_is_pure() -> None:
    left = parse_command_name("core.pause_torrent")
    right = parse_command_name("core.resume_torrent")

    merged = merge_trees(left, right)

    assert merged.namespace("core").commands == {"pause_torrent", "resume_torrent"}
    assert left.namespace("core").commands == {"pause_torrent"}
    assert right.namespace("core").commands == {"resume_torrent"}


def test_merge_dedupes_leaves_reached_through_nested_namespaces() -> None:
    left = build_command_tree(["a.b.c", "a.x"])
    right = build_command_tree(["a.b.c", "a.b.e", "a.x", "y"])

    merged = merge_trees(left, right)

    assert merged.method_names() == ["a.b.c", "a.b.e", "a.x", "y"]


def test_tree_is_immutable() -> None:
    tree = build_command_tree(["core.get_torrents_status"])

    with pytest.raises(TypeError):
        tree.namespaces["label"] = CommandTree()  # type: ignore[index]
    with pytest.raises(AttributeError):
        tree.commands = frozenset({"nope"})  # type: ignore[misc]


def test_to_dict_renders_nested_mapping() -> None:
    tree = build_command_tree(["web.connected", "web.get_hosts", "daemon.info"])

    assert tree.to_dict() == {
        "commands": [],
        "namespaces": {
            "daemon": {"commands": ["info"], "namespaces": {}},
            "web": {"commands": ["connected", "get_hosts"], "namespaces": {}},
        },
    }


@pytest.mark.parametrize("bad", [None, 42, "", ["core.x"]])
def test_invalid_method_names_are_rejected(bad: object) -> None:
    with pytest.raises(ResponseError):
        build_command_tree(["core.get_torrents_status", bad])
