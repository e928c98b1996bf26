"""Deluge web daemon client with an introspected command namespace."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

import httpx

from .config import ConnectionParameters
from .errors import DelugeError, ResponseError
from .hooks import HookRegistry, RpcCall
from .namespace import Command, Namespace
from .protocols import HookMiddleware, IdGenerator, RpcTransport
from .rpc import RequestIdGenerator, build_request, encode_request, parse_response
from .transport import SessionTransport
from .tree import CommandTree, NamespaceKey, build_command_tree

DISCOVERY_METHOD = "daemon.get_method_list"

logger = logging.getLogger(__name__)


def _coerce_parameters(parameters: Mapping[str, Any] | ConnectionParameters | None) -> ConnectionParameters:
    if parameters is None:
        return ConnectionParameters()
    if isinstance(parameters, ConnectionParameters):
        return parameters
    return ConnectionParameters.from_mapping(parameters)


class DelugeClient:
    """Synchronous JSON-RPC client for the Deluge web daemon.

    The daemon's method list is fetched once during construction. Commands are
    then reachable as attributes (``client.core.get_torrents_status({}, [])``),
    as items (``client["core"]``) or through :meth:`resolve_namespace` and
    :meth:`resolve_command`. Client members such as ``call``, ``help``, ``root``
    or ``command`` shadow daemon namespaces of the same name; use
    ``client["help"]`` to reach those.
    """

    def __init__(
        self,
        parameters: Mapping[str, Any] | ConnectionParameters | None = None,
        *,
        transport: RpcTransport | None = None,
        http_client: httpx.Client | None = None,
        id_generator: IdGenerator | None = None,
        hook_registry: HookRegistry | None = None,
    ) -> None:
        self.parameters = _coerce_parameters(parameters)
        self._ids = id_generator or RequestIdGenerator()
        self._hooks = hook_registry or HookRegistry()
        self._transport = transport or SessionTransport(
            self.parameters,
            http_client=http_client,
            id_generator=self._ids,
        )

        try:
            self._tree = self._load_available_commands()
        except Exception:
            self._transport.close()
            raise
        self._root = Namespace("root", self._tree, self)

    @classmethod
    def from_env(cls, **kwargs: Any) -> "DelugeClient":
        return cls(ConnectionParameters.from_env(), **kwargs)

    @property
    def root(self) -> Namespace:
        return self._root

    def help(self) -> CommandTree:
        return self._tree

    def method_names(self) -> list[str]:
        return self._tree.method_names()

    def resolve_namespace(self, name: NamespaceKey) -> Namespace:
        return self._root.resolve_namespace(name)

    def resolve_command(self, name: str, args: Sequence[Any] = ()) -> Any:
        return self._root.resolve_command(name, args)

    def command(self, method: str) -> Command:
        return self._root.resolve(method)

    def call(self, method: str, *args: Any) -> Any:
        """Invoke a command by its fully-qualified dotted name."""
        return self._root.resolve(method).with_arguments(args).execute()

    def execute_command(self, command: Command) -> Any:
        return self._send_rpc(command.full_name, command.arguments)

    def before(self, method: str = "*") -> Callable[[Callable[[RpcCall], Any]], Callable[[RpcCall], Any]]:
        def decorator(func: Callable[[RpcCall], Any]) -> Callable[[RpcCall], Any]:
            self._hooks.add_before(method, func)
            return func

        return decorator

    def after(self, method: str = "*") -> Callable[[Callable[[RpcCall, Any], Any]], Callable[[RpcCall, Any], Any]]:
        def decorator(func: Callable[[RpcCall, Any], Any]) -> Callable[[RpcCall, Any], Any]:
            self._hooks.add_after(method, func)
            return func

        return decorator

    def on_error(self, method: str = "*") -> Callable[[Callable[[RpcCall, Exception], Any]], Callable[[RpcCall, Exception], Any]]:
        def decorator(func: Callable[[RpcCall, Exception], Any]) -> Callable[[RpcCall, Exception], Any]:
            self._hooks.add_error(method, func)
            return func

        return decorator

    def use_middleware(self, middleware: HookMiddleware, *, method: str = "*") -> None:
        self._hooks.add_middleware(method, middleware)

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> "DelugeClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __getattr__(self, name: str) -> Namespace | Command:
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self._root, name)

    def __getitem__(self, name: NamespaceKey) -> Namespace | Command:
        return self._root[name]

    def __contains__(self, name: object) -> bool:
        return name in self._root

    def _load_available_commands(self) -> CommandTree:
        methods = self._send_rpc(DISCOVERY_METHOD, [])
        if not isinstance(methods, list):
            raise ResponseError(
                f"{DISCOVERY_METHOD} returned {type(methods).__name__}, expected a list of method names"
            )
        tree = build_command_tree(methods)
        logger.debug("discovered %d methods on %s", len(methods), self.parameters.url)
        return tree

    def _send_rpc(self, method: str, params: Sequence[Any] = ()) -> Any:
        request_id = self._ids.next_id()
        request = build_request(method, params, request_id)
        call = RpcCall(method=method, params=list(request.params), request_id=request_id)

        self._hooks.run_before(call)
        try:
            raw = self._transport.exchange(encode_request(request))
            result = parse_response(raw, request_id, method=method)
        except DelugeError as error:
            self._hooks.run_error(call, error)
            raise
        self._hooks.run_after(call, result)
        return result
