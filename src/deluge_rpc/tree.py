"""Command tree built from the daemon's flat method list.

The daemon advertises its commands as dot-delimited names such as
``core.get_torrents_status`` or ``label.set_torrent``. Every name contributes
one leaf command; the segments before it form the namespace path. Trees are
immutable and merged functionally, so the shape of a tree depends only on the
set of names it was built from.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Union

from .errors import ResponseError

NamespaceKey = Union[str, int]


def _empty_namespaces() -> Mapping[NamespaceKey, "CommandTree"]:
    return MappingProxyType({})


@dataclass(frozen=True, slots=True)
class CommandTree:
    namespaces: Mapping[NamespaceKey, "CommandTree"] = field(default_factory=_empty_namespaces)
    commands: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        if not isinstance(self.namespaces, MappingProxyType):
            object.__setattr__(self, "namespaces", MappingProxyType(dict(self.namespaces)))
        if not isinstance(self.commands, frozenset):
            object.__setattr__(self, "commands", frozenset(self.commands))

    def has_namespace(self, key: NamespaceKey) -> bool:
        return key in self.namespaces

    def has_command(self, name: str) -> bool:
        return name in self.commands

    def namespace(self, key: NamespaceKey) -> "CommandTree":
        return self.namespaces[key]

    def is_empty(self) -> bool:
        return not self.namespaces and not self.commands

    def method_names(self) -> list[str]:
        """Return every fully-qualified method name, sorted."""
        return sorted(self._walk(()))

    def to_dict(self) -> dict[str, Any]:
        """Render the tree as plain dicts and sorted lists for display or JSON output."""
        return {
            "commands": sorted(self.commands),
            "namespaces": {str(key): child.to_dict() for key, child in _sorted_items(self.namespaces)},
        }

    def _walk(self, prefix: tuple[NamespaceKey, ...]) -> Iterator[str]:
        for name in self.commands:
            yield ".".join(str(part) for part in (*prefix, name))
        for key, child in self.namespaces.items():
            yield from child._walk((*prefix, key))


def normalize_segment(segment: NamespaceKey) -> NamespaceKey:
    """Turn numeric namespace segments into integer keys.

    Canonical integer strings (``"0"``, ``"7"``) become ``int``; anything else,
    including ``"007"``, ``"00"`` or ``"-1"``, is kept as a string so the
    method name rebuilt from the path matches the advertised one.
    """
    if isinstance(segment, int) and not isinstance(segment, bool):
        return segment
    text = str(segment)
    if text.isascii() and text.isdigit() and str(int(text)) == text:
        return int(text)
    return text


def parse_command_name(name: str) -> CommandTree:
    """Build the single-branch tree for one dot-delimited method name."""
    *path, leaf = name.split(".")
    tree = CommandTree(commands=frozenset({leaf}))
    for segment in reversed(path):
        tree = CommandTree(namespaces={normalize_segment(segment): tree})
    return tree


def merge_trees(base: CommandTree, other: CommandTree) -> CommandTree:
    """Return a new tree holding the union of both trees.

    Leaf sets are unioned at every level and shared namespaces are merged
    recursively; neither input is modified.
    """
    if other.is_empty():
        return base
    if base.is_empty():
        return other

    namespaces: dict[NamespaceKey, CommandTree] = dict(base.namespaces)
    for key, child in other.namespaces.items():
        existing = namespaces.get(key)
        namespaces[key] = child if existing is None else merge_trees(existing, child)

    return CommandTree(namespaces=namespaces, commands=base.commands | other.commands)


def build_command_tree(names: Iterable[Any]) -> CommandTree:
    tree = CommandTree()
    for name in names:
        if not isinstance(name, str) or not name:
            raise ResponseError(f"invalid method name in method list: {name!r}")
        tree = merge_trees(tree, parse_command_name(name))
    return tree


def _sorted_items(namespaces: Mapping[NamespaceKey, CommandTree]) -> list[tuple[NamespaceKey, CommandTree]]:
    # int and str keys can share a level; ints sort first.
    return sorted(namespaces.items(), key=lambda item: (isinstance(item[0], str), item[0]))
