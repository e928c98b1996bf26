"""Protocol contracts for the client's extension points."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .hooks import RpcCall
    from .namespace import Command


@runtime_checkable
class RpcTransport(Protocol):
    def exchange(self, payload: bytes) -> bytes: ...

    def close(self) -> None: ...


@runtime_checkable
class IdGenerator(Protocol):
    def next_id(self) -> str: ...


@runtime_checkable
class CommandExecutor(Protocol):
    def execute_command(self, command: Command) -> Any: ...


@runtime_checkable
class HookMiddleware(Protocol):
    def before(self, call: RpcCall) -> None: ...

    def after(self, call: RpcCall, result: Any) -> None: ...

    def on_error(self, call: RpcCall, error: Exception) -> None: ...
