"""Deluge web daemon JSON-RPC client.

This module uses lazy exports so lightweight utilities (for example the command
tree builder) can be imported without immediately importing transport
dependencies.
"""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

__all__ = [
    "AddressingError",
    "Command",
    "CommandError",
    "CommandTree",
    "ConfigurationError",
    "ConnectionParameters",
    "DelugeClient",
    "DelugeConnectionError",
    "DelugeError",
    "HookRegistry",
    "Namespace",
    "RequestError",
    "RequestIdGenerator",
    "RequestTimeoutError",
    "ResponseError",
    "RpcCall",
    "SessionError",
    "SessionState",
    "SessionTransport",
    "UnknownCommandError",
    "UnknownNamespaceError",
    "build_command_tree",
]

_EXPORTS: dict[str, tuple[str, str]] = {
    "DelugeClient": (".client", "DelugeClient"),
    "ConnectionParameters": (".config", "ConnectionParameters"),
    "AddressingError": (".errors", "AddressingError"),
    "CommandError": (".errors", "CommandError"),
    "ConfigurationError": (".errors", "ConfigurationError"),
    "DelugeConnectionError": (".errors", "DelugeConnectionError"),
    "DelugeError": (".errors", "DelugeError"),
    "RequestError": (".errors", "RequestError"),
    "RequestTimeoutError": (".errors", "RequestTimeoutError"),
    "ResponseError": (".errors", "ResponseError"),
    "SessionError": (".errors", "SessionError"),
    "UnknownCommandError": (".errors", "UnknownCommandError"),
    "UnknownNamespaceError": (".errors", "UnknownNamespaceError"),
    "HookRegistry": (".hooks", "HookRegistry"),
    "RpcCall": (".hooks", "RpcCall"),
    "Command": (".namespace", "Command"),
    "Namespace": (".namespace", "Namespace"),
    "RequestIdGenerator": (".rpc", "RequestIdGenerator"),
    "SessionState": (".transport", "SessionState"),
    "SessionTransport": (".transport", "SessionTransport"),
    "CommandTree": (".tree", "CommandTree"),
    "build_command_tree": (".tree", "build_command_tree"),
}

if TYPE_CHECKING:
    from .client import DelugeClient
    from .config import ConnectionParameters
    from .errors import (
        AddressingError,
        CommandError,
        ConfigurationError,
        DelugeConnectionError,
        DelugeError,
        RequestError,
        RequestTimeoutError,
        ResponseError,
        SessionError,
        UnknownCommandError,
        UnknownNamespaceError,
    )
    from .hooks import HookRegistry, RpcCall
    from .namespace import Command, Namespace
    from .rpc import RequestIdGenerator
    from .transport import SessionState, SessionTransport
    from .tree import CommandTree, build_command_tree


def __getattr__(name: str) -> Any:
    module_info = _EXPORTS.get(name)
    if module_info is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module_name, attribute = module_info
    module = import_module(module_name, __name__)
    value = getattr(module, attribute)
    globals()[name] = value
    return value
