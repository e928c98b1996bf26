"""Navigable namespaces and invocable commands over a discovered command tree."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from .errors import UnknownCommandError, UnknownNamespaceError
from .protocols import CommandExecutor
from .tree import CommandTree, NamespaceKey, normalize_segment

logger = logging.getLogger(__name__)


def normalize_arguments(args: Sequence[Any]) -> list[Any]:
    """Turn call arguments into a JSON-RPC params list.

    A single list or tuple argument is used as the params list itself, so
    ``cmd([1, 2, 3])`` and ``cmd(1, 2, 3)`` send the same request.
    """
    if len(args) == 1:
        (only,) = args
        if isinstance(only, (list, tuple)):
            return list(only)
        return [only]
    return list(args)


class Command:
    """A leaf of the command tree bound to its namespace and executor.

    Namespaces cache one unbound instance per leaf. Every invocation binds its
    arguments to a fresh copy, so a cached command can be called from several
    threads at once.
    """

    __slots__ = ("name", "namespace", "arguments", "_executor")

    def __init__(self, name: str, namespace: Namespace, executor: CommandExecutor) -> None:
        self.name = name
        self.namespace = namespace
        self.arguments: list[Any] = []
        self._executor = executor

    @property
    def full_name(self) -> str:
        prefix = self.namespace.full_path()
        return f"{prefix}.{self.name}" if prefix else self.name

    def with_arguments(self, args: Sequence[Any]) -> Command:
        """Return a new command bound to ``args``; this command is left untouched."""
        bound = Command(self.name, self.namespace, self._executor)
        bound.arguments = normalize_arguments(args)
        return bound

    def execute(self) -> Any:
        return self._executor.execute_command(self)

    def __call__(self, *args: Any) -> Any:
        return self.with_arguments(args).execute()

    def __repr__(self) -> str:
        return f"Command({self.full_name!r})"


class Namespace:
    """One level of the command tree.

    Child namespaces and commands are materialized on first access and cached
    for the lifetime of this node. Attribute and item access are shorthands
    for :meth:`resolve_namespace` and :meth:`command`; a namespace is preferred
    when a name is both, and calling such a namespace invokes the command.

    Real attributes (``name``, ``path``, ``tree``, ``parent``, ``command``,
    ``resolve`` and the other methods) win over attribute sugar; a daemon
    namespace or command with one of those names is reached as ``ns["name"]``.
    """

    def __init__(
        self,
        name: NamespaceKey,
        tree: CommandTree,
        executor: CommandExecutor,
        parent: Namespace | None = None,
    ) -> None:
        self._name = name
        self._tree = tree
        self._executor = executor
        self._parent = parent
        self._path: tuple[NamespaceKey, ...] = () if parent is None else (*parent.path, name)
        self._namespaces: dict[NamespaceKey, Namespace] = {}
        self._commands: dict[str, Command] = {}

    @property
    def name(self) -> NamespaceKey:
        return self._name

    @property
    def path(self) -> tuple[NamespaceKey, ...]:
        return self._path

    @property
    def tree(self) -> CommandTree:
        return self._tree

    @property
    def parent(self) -> Namespace | None:
        return self._parent

    def full_path(self) -> str:
        return ".".join(str(segment) for segment in self._path)

    def resolve_namespace(self, name: NamespaceKey) -> Namespace:
        key = normalize_segment(name)
        if not self._tree.has_namespace(key):
            raise UnknownNamespaceError(
                f"Namespace {name} does not exist in namespace {self._display_path()}",
                name=name,
                path=self.full_path(),
            )

        child = self._namespaces.get(key)
        if child is None:
            child = Namespace(key, self._tree.namespace(key), self._executor, parent=self)
            self._namespaces[key] = child
        return child

    def command(self, name: str) -> Command:
        if not isinstance(name, str) or not self._tree.has_command(name):
            raise UnknownCommandError(
                f"Command {name} does not exist in namespace {self._display_path()}",
                name=name,
                path=self.full_path(),
            )

        command = self._commands.get(name)
        if command is None:
            command = Command(name, self, self._executor)
            self._commands[name] = command
        return command

    def resolve_command(self, name: str, args: Sequence[Any] = ()) -> Any:
        command = self.command(name)
        logger.debug("invoking %s", command.full_name)
        return command.with_arguments(args).execute()

    def resolve(self, dotted_name: str) -> Command:
        """Walk a dot-delimited method name from this node down to its command."""
        *path, leaf = dotted_name.split(".")
        node = self
        for segment in path:
            node = node.resolve_namespace(segment)
        return node.command(leaf)

    def __getattr__(self, name: str) -> Namespace | Command:
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]

    def __getitem__(self, name: NamespaceKey) -> Namespace | Command:
        if self._tree.has_namespace(normalize_segment(name)):
            return self.resolve_namespace(name)
        if isinstance(name, str) and self._tree.has_command(name):
            return self.command(name)
        raise UnknownCommandError(
            f"Command or namespace {name} does not exist in namespace {self._display_path()}",
            name=name,
            path=self.full_path(),
        )

    def __call__(self, *args: Any) -> Any:
        parent = self._parent
        if parent is None or not isinstance(self._name, str) or not parent.tree.has_command(self._name):
            raise UnknownCommandError(
                f"Command {self._name} does not exist in namespace {self._parent_display_path()}",
                name=self._name,
                path=parent.full_path() if parent is not None else "",
            )
        return parent.resolve_command(self._name, args)

    def __contains__(self, name: object) -> bool:
        if isinstance(name, (str, int)) and self._tree.has_namespace(normalize_segment(name)):
            return True
        return isinstance(name, str) and self._tree.has_command(name)

    def __dir__(self) -> list[str]:
        names = [str(key) for key in self._tree.namespaces if isinstance(key, str)]
        names.extend(self._tree.commands)
        return sorted(set(super().__dir__()) | set(names))

    def __repr__(self) -> str:
        return f"Namespace({self._display_path()!r})"

    def _display_path(self) -> str:
        return self.full_path() or "root"

    def _parent_display_path(self) -> str:
        return self._parent._display_path() if self._parent is not None else "root"
